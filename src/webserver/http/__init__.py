"""
HTTP Protocol Layer

Request line parsing, strategy routing and the response model.
"""

from .request import IncomingRequest, parse_request, is_header_terminator
from .router import (
    Router,
    Route,
    ResponseStrategy,
    RootListing,
    FixedSubdirectoryListing,
    StaticFile,
    select,
)
from .response import RenderedResponse, content_type_for, STATUS_LINE

__all__ = [
    "IncomingRequest",
    "parse_request",
    "is_header_terminator",
    "Router",
    "Route",
    "ResponseStrategy",
    "RootListing",
    "FixedSubdirectoryListing",
    "StaticFile",
    "select",
    "RenderedResponse",
    "content_type_for",
    "STATUS_LINE",
]
