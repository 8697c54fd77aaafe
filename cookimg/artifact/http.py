"""HTTP client abstraction.

This module provides:
- HttpClient: Protocol for the three HTTP operations the tool needs
  (release lookup, archive download, liveness probe)
- RealHttpClient: urllib implementation
- MockHttpClient: scripted implementation for tests
"""

from __future__ import annotations

import json
import ssl
import urllib.error
import urllib.request
from collections import deque
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, Protocol, runtime_checkable

from cookimg import __version__
from cookimg.core.result import Err, Ok, Result
from cookimg.core.structured import StrDict, as_str_dict

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable

__all__ = [
    "HttpClient",
    "RealHttpClient",
    "MockHttpClient",
    "HttpError",
    "PROBE_TIMEOUT",
]

# Per-request limit for the liveness probe; the retry loop supplies the patience.
PROBE_TIMEOUT = 3.0


@dataclass(frozen=True, slots=True)
class HttpError:
    """HTTP error details.

    Attributes:
        url: The URL that failed
        status: HTTP status code (0 for network errors)
        message: Human-readable error message
    """

    url: str
    status: int
    message: str

    def __str__(self) -> str:
        if self.status:
            return f"HTTP {self.status}: {self.message} ({self.url})"
        return f"{self.message} ({self.url})"


@runtime_checkable
class HttpClient(Protocol):
    """Protocol for HTTP operations, injectable so tests never hit the network."""

    def get_json(self, url: str) -> Result[StrDict, HttpError]:
        """Fetch URL and parse it as a JSON object."""
        ...

    def download(
        self,
        url: str,
        dest: Path,
        progress: Callable[[int, int], None] | None = None,
    ) -> Result[Path, HttpError]:
        """Download URL to dest, following redirects."""
        ...

    def get_status(self, url: str) -> Result[int, HttpError]:
        """GET url and return its status code.

        Returns Ok only for 2xx/3xx responses; 4xx/5xx and network failures
        are Err.
        """
        ...


class _KeepRedirects(urllib.request.HTTPRedirectHandler):
    """Report a 3xx as-is instead of following it, like `curl -f` without -L."""

    def redirect_request(self, *args: object, **kwargs: object) -> None:
        return None


class RealHttpClient:
    """HTTP client using urllib with the system certificate store."""

    def __init__(
        self,
        timeout: float = 30.0,
        user_agent: str = f"cookimg/{__version__}",
        probe_timeout: float = PROBE_TIMEOUT,
    ) -> None:
        self.timeout = timeout
        self.user_agent = user_agent
        self.probe_timeout = probe_timeout
        self._ssl_context = ssl.create_default_context()
        self._probe_opener = urllib.request.build_opener(
            _KeepRedirects(), urllib.request.HTTPSHandler(context=self._ssl_context)
        )

    def _request(self, url: str) -> urllib.request.Request:
        return urllib.request.Request(url, headers={"User-Agent": self.user_agent})

    def _error(self, url: str, exc: Exception) -> HttpError:
        if isinstance(exc, urllib.error.HTTPError):
            return HttpError(url=url, status=exc.code, message=str(exc.reason))
        if isinstance(exc, urllib.error.URLError):
            return HttpError(url=url, status=0, message=str(exc.reason))
        if isinstance(exc, TimeoutError):
            return HttpError(url=url, status=0, message="Request timed out")
        return HttpError(url=url, status=0, message=str(exc))

    def get_json(self, url: str) -> Result[StrDict, HttpError]:
        try:
            with urllib.request.urlopen(
                self._request(url), timeout=self.timeout, context=self._ssl_context
            ) as response:
                body: bytes = response.read()
        except (urllib.error.URLError, TimeoutError, ValueError, OSError) as e:
            return Err(self._error(url, e))

        try:
            data_obj: object = json.loads(body.decode("utf-8"))
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            return Err(HttpError(url=url, status=0, message=f"JSON parse error: {e}"))

        data = as_str_dict(data_obj)
        if data is None:
            return Err(HttpError(url=url, status=0, message="Expected JSON object"))
        return Ok(data)

    def download(
        self,
        url: str,
        dest: Path,
        progress: Callable[[int, int], None] | None = None,
    ) -> Result[Path, HttpError]:
        try:
            with urllib.request.urlopen(
                self._request(url), timeout=self.timeout, context=self._ssl_context
            ) as response:
                total = int(response.headers.get("Content-Length", 0))
                downloaded = 0
                dest.parent.mkdir(parents=True, exist_ok=True)
                with open(dest, "wb") as f:
                    while True:
                        chunk = response.read(8192)
                        if not chunk:
                            break
                        f.write(chunk)
                        downloaded += len(chunk)
                        if progress:
                            progress(downloaded, total)
        except (urllib.error.URLError, TimeoutError, ValueError, OSError) as e:
            return Err(self._error(url, e))

        return Ok(dest)

    def get_status(self, url: str) -> Result[int, HttpError]:
        try:
            with self._probe_opener.open(self._request(url), timeout=self.probe_timeout) as response:
                status: int = response.status
        except urllib.error.HTTPError as e:
            e.close()
            if 300 <= e.code < 400:
                return Ok(e.code)
            return Err(self._error(url, e))
        except (urllib.error.URLError, TimeoutError, ValueError, OSError) as e:
            return Err(self._error(url, e))
        return Ok(status)


class MockHttpClient:
    """Mock HTTP client for testing.

    Usage:
        client = MockHttpClient()
        client.set_json(LATEST_URL, {"tag_name": "v0.18.1"})
        client.set_statuses("http://localhost:9080/", [0, 0, 200])
    """

    def __init__(self) -> None:
        self._json_responses: dict[str, StrDict | HttpError] = {}
        self._download_responses: dict[str, bytes | HttpError] = {}
        self._statuses: dict[str, deque[int]] = {}
        self.calls: list[tuple[str, str]] = []

    def set_json(self, url: str, response: StrDict | HttpError) -> None:
        self._json_responses[url] = response

    def set_download(self, url: str, response: bytes | HttpError) -> None:
        self._download_responses[url] = response

    def set_statuses(self, url: str, statuses: Iterable[int]) -> None:
        """Script successive probe results; 0 means connection refused.

        The last status repeats once the script is exhausted.
        """
        self._statuses[url] = deque(statuses)

    def calls_to(self, method: str) -> list[str]:
        return [url for m, url in self.calls if m == method]

    def get_json(self, url: str) -> Result[StrDict, HttpError]:
        self.calls.append(("get_json", url))
        response = self._json_responses.get(url)
        if response is None:
            return Err(HttpError(url=url, status=404, message="Not found (mock)"))
        if isinstance(response, HttpError):
            return Err(response)
        return Ok(response)

    def download(
        self,
        url: str,
        dest: Path,
        progress: Callable[[int, int], None] | None = None,
    ) -> Result[Path, HttpError]:
        self.calls.append(("download", url))
        response = self._download_responses.get(url)
        if response is None:
            return Err(HttpError(url=url, status=404, message="Not found (mock)"))
        if isinstance(response, HttpError):
            return Err(response)

        dest.parent.mkdir(parents=True, exist_ok=True)
        dest.write_bytes(response)
        if progress:
            progress(len(response), len(response))
        return Ok(dest)

    def get_status(self, url: str) -> Result[int, HttpError]:
        self.calls.append(("get_status", url))
        script = self._statuses.get(url)
        if not script:
            return Err(HttpError(url=url, status=0, message="Connection refused (mock)"))

        status = script.popleft() if len(script) > 1 else script[0]
        if status == 0:
            return Err(HttpError(url=url, status=0, message="Connection refused (mock)"))
        if status >= 400:
            return Err(HttpError(url=url, status=status, message="Error (mock)"))
        return Ok(status)
