"""
Unit tests for the response builder and its handlers.
"""

import re

import pytest

from webserver.config import ServerConfig
from webserver.errors import DirectoryListError, StaticFileNotFoundError
from webserver.handlers import render, list_subdirectories, resolve_path, read_text, strip_url_prefix
from webserver.http.router import RootListing, FixedSubdirectoryListing, StaticFile


ANCHOR = re.compile(r'<a href="([^"]*)">([^<]*)</a>')


def make_config(web_root, **overrides) -> ServerConfig:
    return ServerConfig(web_root=str(web_root), port=8080, **overrides)


class TestRootListing:

    def test_lists_only_subdirectories(self, web_root):
        response = render(RootListing("/"), make_config(web_root))

        anchors = ANCHOR.findall(response.body)
        assert anchors == [
            ("http://127.0.0.1:8080/webroot/a/index.html", "a"),
            ("http://127.0.0.1:8080/webroot/b/index.html", "b"),
        ]
        assert "notes.txt" not in response.body
        assert "page.html" not in response.body

    def test_html_page(self, web_root):
        response = render(RootListing("/"), make_config(web_root))
        assert response.status_line == "HTTP/1.1 200 OK"
        assert response.content_type == "text/html"
        assert response.body.startswith("<html>")
        assert "My directory listing:<br/>" in response.body

    def test_links_follow_config(self, web_root):
        config = make_config(web_root, public_host="example.test", default_file="home.html")
        response = render(RootListing("/"), config)
        assert 'href="http://example.test:8080/webroot/a/home.html"' in response.body

    def test_empty_root(self, tmp_path):
        response = render(RootListing("/"), make_config(tmp_path))
        assert ANCHOR.findall(response.body) == []

    def test_missing_root(self, tmp_path):
        with pytest.raises(DirectoryListError) as exc_info:
            render(RootListing("/"), make_config(tmp_path / "nope"))
        assert exc_info.value.path.endswith("nope")

    def test_root_is_a_file(self, web_root):
        with pytest.raises(DirectoryListError):
            list_subdirectories(str(web_root / "notes.txt"))

    def test_sorted(self, tmp_path):
        for name in ["zeta", "alpha", "mid"]:
            (tmp_path / name).mkdir()
        assert list_subdirectories(str(tmp_path)) == ["alpha", "mid", "zeta"]


class TestFixedSubdirectoryListing:

    def test_four_fixed_anchors(self, web_root):
        """The listing never looks at the disk; the files need not exist."""
        assert not (web_root / "subdirectory").exists()

        response = render(FixedSubdirectoryListing("/subdirectory/index.html"), make_config(web_root))

        assert ANCHOR.findall(response.body) == [
            ("/webroot/subdirectory/a.txt", "a"),
            ("/webroot/subdirectory/b.txt", "b"),
            ("/webroot/subdirectory/c.txt", "c"),
            ("/webroot/subdirectory/d.txt", "d"),
        ]
        assert response.content_type == "text/html"

    def test_ignores_real_contents(self, web_root):
        sub = web_root / "subdirectory"
        sub.mkdir()
        (sub / "other.txt").write_text("x")

        response = render(FixedSubdirectoryListing("/subdirectory/index.html"), make_config(web_root))
        assert "other.txt" not in response.body
        assert len(ANCHOR.findall(response.body)) == 4


class TestStaticFile:

    def test_newlines_stripped(self, web_root):
        response = render(StaticFile("/notes.txt"), make_config(web_root))
        assert response.body == "line oneline twoline three"
        assert response.content_type == "text/plain"

    def test_newlines_kept(self, web_root):
        response = render(StaticFile("/notes.txt"), make_config(web_root, strip_newlines=False))
        assert response.body == "line one\nline two\r\nline three\n"

    def test_html_content_type(self, web_root):
        response = render(StaticFile("/page.html"), make_config(web_root))
        assert response.content_type == "text/html"
        assert response.body == "<html><body>hi</body></html>"

    def test_nested_file(self, web_root):
        response = render(StaticFile("/a/index.html"), make_config(web_root))
        assert response.body == "<h1>a</h1><p>first</p>"

    def test_missing_file(self, web_root):
        with pytest.raises(StaticFileNotFoundError) as exc_info:
            render(StaticFile("/missing.html"), make_config(web_root))
        assert isinstance(exc_info.value, FileNotFoundError)
        assert exc_info.value.path.endswith("/missing.html")

    def test_directory_is_not_a_file(self, web_root):
        with pytest.raises(StaticFileNotFoundError):
            render(StaticFile("/"), make_config(web_root))

    def test_no_path_normalization(self, tmp_path):
        """".." segments are followed as-is."""
        root = tmp_path / "root"
        root.mkdir()
        (tmp_path / "outside.txt").write_text("secret")

        response = render(StaticFile("/../outside.txt"), make_config(root))
        assert response.body == "secret"

    def test_idempotent(self, web_root):
        config = make_config(web_root)
        bodies = {render(StaticFile("/notes.txt"), config).body for _ in range(5)}
        assert bodies == {"line oneline twoline three"}

    def test_root_listing_link_resolves(self, web_root):
        """The path part of a root listing link names a servable file."""
        config = make_config(web_root)
        href = ANCHOR.findall(render(RootListing("/"), config).body)[0][0]
        path = href[len("http://127.0.0.1:8080"):]

        response = render(StaticFile(path), config)
        assert response.body == "<h1>a</h1><p>first</p>"

    def test_fixed_listing_link_resolves(self, web_root):
        sub = web_root / "subdirectory"
        sub.mkdir()
        (sub / "a.txt").write_text("alpha\n")
        config = make_config(web_root)
        href = ANCHOR.findall(
            render(FixedSubdirectoryListing("/subdirectory/index.html"), config).body
        )[0][0]

        assert render(StaticFile(href), config).body == "alpha"

    def test_custom_url_prefix(self, web_root):
        config = make_config(web_root, url_prefix="/files")
        response = render(RootListing("/"), config)
        assert 'href="http://127.0.0.1:8080/files/a/index.html"' in response.body
        assert render(StaticFile("/files/a/index.html"), config).body == "<h1>a</h1><p>first</p>"

    def test_empty_url_prefix(self, web_root):
        config = make_config(web_root, url_prefix="")
        response = render(FixedSubdirectoryListing("/subdirectory/index.html"), config)
        assert ANCHOR.findall(response.body)[0] == ("/subdirectory/a.txt", "a")


class TestHelpers:

    def test_resolve_path(self):
        assert resolve_path("webroot", "/a/b.txt") == "webroot/a/b.txt"
        assert resolve_path("webroot", "a.txt") == "webroot/a.txt"
        assert resolve_path("webroot", "/../x") == "webroot/../x"

    def test_resolve_path_with_prefix(self):
        assert resolve_path("webroot", "/webroot/a/b.txt", "/webroot") == "webroot/a/b.txt"
        assert resolve_path("webroot", "/a/b.txt", "/webroot") == "webroot/a/b.txt"
        assert resolve_path("srv", "/webroot/a.txt", "") == "srv/webroot/a.txt"

    def test_strip_url_prefix(self):
        assert strip_url_prefix("/webroot/a.txt", "/webroot") == "/a.txt"
        assert strip_url_prefix("/webroot/a.txt", "/webroot/") == "/a.txt"
        # Only whole path segments match
        assert strip_url_prefix("/webrootx/a.txt", "/webroot") == "/webrootx/a.txt"
        assert strip_url_prefix("/webroot", "/webroot") == "/webroot"
        assert strip_url_prefix("/a.txt", "") == "/a.txt"

    def test_read_text_carriage_returns(self, tmp_path):
        path = tmp_path / "crlf.txt"
        path.write_bytes(b"a\r\nb\rc\n")
        assert read_text(str(path)) == "abc"
        assert read_text(str(path), strip_newlines=False) == "a\r\nb\rc\n"

    def test_render_unknown_strategy(self, web_root):
        with pytest.raises(TypeError):
            render(object(), make_config(web_root))
