"""
=============================================================================
REQUEST ROUTING
=============================================================================

The router maps (method, path) to one of three response strategies:

    RootListing                 list the subdirectories of the web root
    FixedSubdirectoryListing    a hardcoded page linking a.txt .. d.txt
    StaticFile                  the file at web_root + path

Routes are kept as an ordered table of (name, predicate, factory). The
first predicate that matches wins, so the order of the table IS the
routing policy:

    ┌───┬───────────────────────┬──────────────────────────────────────────┐
    │ # │ name                  │ matches                                  │
    ├───┼───────────────────────┼──────────────────────────────────────────┤
    │ 1 │ root-listing          │ GET and path == "/"                      │
    │ 2 │ subdirectory-listing  │ GET and path ends "subdirectory/<index>" │
    │ 3 │ static-file           │ anything else, any method                │
    └───┴───────────────────────┴──────────────────────────────────────────┘

Methods other than GET never match 1 or 2 and fall through to the static
file route, where they are served exactly like GET.

Selection is pure: no filesystem access, no sockets. Everything that
touches the disk happens in the handlers.

=============================================================================
"""

from dataclasses import dataclass
from typing import Callable, List, Tuple


# =============================================================================
# STRATEGIES
# =============================================================================

@dataclass(frozen=True)
class ResponseStrategy:
    """
    Base class for the selected response branch.

    Every strategy remembers the requested path; the response header picks
    its Content-Type from it.
    """
    path: str


@dataclass(frozen=True)
class RootListing(ResponseStrategy):
    """Directory listing of the web root."""


@dataclass(frozen=True)
class FixedSubdirectoryListing(ResponseStrategy):
    """The hardcoded four-entry listing of webroot/subdirectory/."""


@dataclass(frozen=True)
class StaticFile(ResponseStrategy):
    """The file at web_root + path."""


# =============================================================================
# ROUTE TABLE
# =============================================================================

Predicate = Callable[[str, str], bool]
StrategyFactory = Callable[[str], ResponseStrategy]


@dataclass(frozen=True)
class Route:
    """One entry of the route table."""
    name: str
    predicate: Predicate
    factory: StrategyFactory

    def matches(self, method: str, path: str) -> bool:
        return self.predicate(method, path)


class Router:
    """
    Ordered, first-match-wins strategy selector.

    Usage:
        router = Router(default_file="index.html")
        strategy = router.select("GET", "/")      # RootListing(path="/")
    """

    def __init__(self, default_file: str = "index.html"):
        self.default_file = default_file
        self.subdirectory_suffix = f"subdirectory/{default_file}"
        self._routes: List[Route] = [
            Route("root-listing", self._is_root, RootListing),
            Route("subdirectory-listing", self._is_subdirectory_index, FixedSubdirectoryListing),
            Route("static-file", lambda method, path: True, StaticFile),
        ]

    @property
    def routes(self) -> Tuple[Route, ...]:
        """The route table, in evaluation order."""
        return tuple(self._routes)

    def _is_root(self, method: str, path: str) -> bool:
        return method == "GET" and path == "/"

    def _is_subdirectory_index(self, method: str, path: str) -> bool:
        return method == "GET" and path.endswith(self.subdirectory_suffix)

    def match(self, method: str, path: str) -> Route:
        """Return the first route whose predicate accepts (method, path)."""
        for route in self._routes:
            if route.matches(method, path):
                return route
        # The static-file route accepts everything
        raise LookupError(f"No route for {method} {path}")

    def select(self, method: str, path: str) -> ResponseStrategy:
        """Pick the response strategy for a request."""
        return self.match(method, path).factory(path)


_default_router = Router()


def select(method: str, path: str) -> ResponseStrategy:
    """Select a strategy using the default ("index.html") route table."""
    return _default_router.select(method, path)
