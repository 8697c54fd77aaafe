"""Upstream release lookup and executable download."""

from .fetcher import ArtifactFetcher, FetchError
from .http import HttpClient, HttpError, MockHttpClient, RealHttpClient
from .resolver import ResolveError, resolve_version
from .version import Version

__all__ = [
    "ArtifactFetcher",
    "FetchError",
    "HttpClient",
    "HttpError",
    "MockHttpClient",
    "RealHttpClient",
    "ResolveError",
    "Version",
    "resolve_version",
]
