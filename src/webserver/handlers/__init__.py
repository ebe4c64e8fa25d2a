"""
Response Builder

Turns a selected strategy into a RenderedResponse:

    RootListing               → listing.render_root_listing
    FixedSubdirectoryListing  → listing.render_subdirectory_listing
    StaticFile                → static.render_static_file

Usage:
    from webserver.handlers import render

    response = render(StaticFile("/notes.txt"), config)
"""

from typing import Callable, Dict, Type

from ..config import ServerConfig
from ..http.response import RenderedResponse
from ..http.router import (
    FixedSubdirectoryListing,
    ResponseStrategy,
    RootListing,
    StaticFile,
)
from .listing import render_root_listing, render_subdirectory_listing, list_subdirectories
from .static import render_static_file, resolve_path, read_text, strip_url_prefix


Renderer = Callable[[ResponseStrategy, ServerConfig], RenderedResponse]

RENDERERS: Dict[Type[ResponseStrategy], Renderer] = {
    RootListing: render_root_listing,
    FixedSubdirectoryListing: render_subdirectory_listing,
    StaticFile: render_static_file,
}


def render(strategy: ResponseStrategy, config: ServerConfig) -> RenderedResponse:
    """
    Build the response for a strategy.

    May touch the filesystem. Errors (StaticFileNotFoundError,
    DirectoryListError) propagate to the connection handler.
    """
    renderer = RENDERERS.get(type(strategy))
    if renderer is None:
        raise TypeError(f"No renderer for {type(strategy).__name__}")
    return renderer(strategy, config)


__all__ = [
    "render",
    "RENDERERS",
    "render_root_listing",
    "render_subdirectory_listing",
    "render_static_file",
    "list_subdirectories",
    "resolve_path",
    "read_text",
    "strip_url_prefix",
]
