"""
Directory listing pages.

Two pages are synthesized here. The root listing is built from the real
web root: one absolute link per immediate subdirectory, plain files are
skipped. The subdirectory listing is not a scan at all; it always links
the same four text files whether or not they exist.
"""

import html
import logging
import os
from typing import List

from ..config import ServerConfig
from ..errors import DirectoryListError
from ..http.response import RenderedResponse
from ..http.router import FixedSubdirectoryListing, RootListing


logger = logging.getLogger(__name__)


FIXED_SUBDIRECTORY_FILES = ("a", "b", "c", "d")

ROOT_PAGE_HEAD = (
    "<html>\n"
    "<head>\n"
    "\t<title>this is my webpage</title>\n"
    "</head>\n"
    "<body>\n"
    "My directory listing:<br/>\n"
)

ROOT_PAGE_TAIL = "</body>\n</html>\n"


def list_subdirectories(web_root: str) -> List[str]:
    """
    Names of the immediate subdirectories of web_root, sorted.

    Raises:
        DirectoryListError: If web_root is missing, not a directory, or
                            cannot be read.
    """
    try:
        with os.scandir(web_root) as entries:
            names = [entry.name for entry in entries if entry.is_dir()]
    except OSError as e:
        raise DirectoryListError(web_root, e.strerror or str(e)) from e
    return sorted(names)


def root_listing_url(config: ServerConfig, name: str) -> str:
    """Absolute link to the default file of one web root subdirectory."""
    return (
        f"http://{config.public_host}:{config.port}"
        f"{config.url_prefix.rstrip('/')}/{name}/{config.default_file}"
    )


def render_root_listing(strategy: RootListing, config: ServerConfig) -> RenderedResponse:
    """Render the web root listing page."""
    names = list_subdirectories(config.web_root)
    logger.debug(f"Listing {len(names)} subdirectories of {config.web_root}")

    parts = [ROOT_PAGE_HEAD]
    for name in names:
        label = html.escape(name)
        parts.append(
            f'<a href="{html.escape(root_listing_url(config, name), quote=True)}">{label}</a><br/>\n'
        )
    parts.append(ROOT_PAGE_TAIL)

    # Always an HTML page, whatever the requested path looked like
    return RenderedResponse.html("".join(parts))


def render_subdirectory_listing(
    strategy: FixedSubdirectoryListing, config: ServerConfig
) -> RenderedResponse:
    """Render the hardcoded a.txt .. d.txt listing."""
    prefix = config.url_prefix.rstrip("/")
    anchors = "".join(
        f'<a href="{prefix}/subdirectory/{name}.txt">{name}</a><br>'
        for name in FIXED_SUBDIRECTORY_FILES
    )
    return RenderedResponse.for_path(strategy.path, anchors)
