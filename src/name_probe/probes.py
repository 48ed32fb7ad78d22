"""
HTTP probes for name availability checking.

Each probe checks one external namespace for a candidate name and reduces the
remote service's answer to a ProbeResult. The decision logic of every probe
lives in a module-level ``interpret_*`` function that maps raw response data
to a result, so it can be tested without any transport.

Probes never raise and never retry: transport failures, timeouts, and
unexpected responses all come back as ERROR results.
"""

import asyncio
from abc import abstractmethod
from typing import Any, Awaitable, Callable, Optional, Protocol, runtime_checkable
from urllib.parse import quote

import httpx

from .config import GitHubConfig, HttpConfig
from .enums import Platform, ProbeErrorCode, ProbeStatus
from .exceptions import NameProbeError, RateLimitedError, TransportError
from .models import ProbeResult


# Social sites serve a login wall or an empty shell to non-browser clients
BROWSER_HEADERS = {
    "User-Agent": (
        "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36 "
        "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
    ),
    "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,image/webp,*/*;q=0.8",
    "Accept-Language": "en-US,en;q=0.5",
}

PROFILE_EXISTS_STATUS_CODES = frozenset({200, 301, 302})

X_MISSING_ACCOUNT_MARKERS = (
    "This account doesn't exist",
    "Account suspended",
)


@runtime_checkable
class Probe(Protocol):
    """Protocol defining the interface shared by all probes."""

    platform: Platform

    @abstractmethod
    def target(self, name: str) -> str:
        """
        Get the identity this probe reports for a name.

        This is the ``name`` field of the results it produces and the key
        under which those results are cached.
        """
        ...

    @abstractmethod
    async def check(self, name: str) -> ProbeResult:
        """
        Probe the namespace for a name.

        Returns:
            A ProbeResult; never raises
        """
        ...


def available(platform: Platform, name: str) -> ProbeResult:
    return ProbeResult(platform=platform, name=name, status=ProbeStatus.AVAILABLE)


def taken(platform: Platform, name: str) -> ProbeResult:
    return ProbeResult(platform=platform, name=name, status=ProbeStatus.TAKEN)


def failed(platform: Platform, name: str, message: str) -> ProbeResult:
    return ProbeResult(
        platform=platform,
        name=name,
        status=ProbeStatus.ERROR,
        error=message or "Unknown error",
    )


def describe_exception(exc: BaseException) -> str:
    """Readable message for exceptions whose str() may be empty."""
    text = str(exc)
    return text if text else type(exc).__name__


async def run_guarded(
    platform: Platform,
    name: str,
    attempt: Callable[[], Awaitable[ProbeResult]],
) -> ProbeResult:
    """
    Run a probe attempt and convert any failure into an ERROR result.

    Args:
        platform: Platform reported on an error result
        name: Name reported on an error result
        attempt: Coroutine factory performing the actual probe

    Returns:
        The attempt's result, or an ERROR result describing the failure
    """
    try:
        return await attempt()
    except NameProbeError as e:
        return failed(platform, name, e.message)
    except Exception as e:
        return failed(platform, name, f"Unexpected error: {describe_exception(e)}")


async def send_request(
    client: httpx.AsyncClient,
    method: str,
    url: str,
    **kwargs: Any,
) -> httpx.Response:
    """
    Send one HTTP request, translating httpx failures into TransportError.

    Raises:
        TransportError: On timeout or any other transport failure
    """
    try:
        return await client.request(method, url, **kwargs)
    except httpx.TimeoutException as e:
        raise TransportError(
            code=ProbeErrorCode.TIMEOUT.value,
            message=f"Request timed out: {url}",
            details={"url": url},
        ) from e
    except httpx.HTTPError as e:
        raise TransportError(
            code=ProbeErrorCode.NETWORK_ERROR.value,
            message=f"Connection error: {describe_exception(e)}",
            details={"url": url},
        ) from e


def unexpected_status(status_code: int, label: str = "Unexpected status") -> TransportError:
    return TransportError(
        code=ProbeErrorCode.UNEXPECTED_STATUS.value,
        message=f"{label}: {status_code}",
        details={"status_code": status_code},
    )


def rate_limited() -> RateLimitedError:
    return RateLimitedError(
        code=ProbeErrorCode.RATE_LIMITED.value,
        message="Rate limited",
        details={"status_code": 429},
    )


# ---------------------------------------------------------------------------
# Response interpretation
# ---------------------------------------------------------------------------

def profile_page_exists(status_code: int) -> bool:
    """A GitHub profile or organization page exists if it answers 200/301/302."""
    return status_code in PROFILE_EXISTS_STATUS_CODES


def repository_name_matches(name: str, payload: Any) -> bool:
    """
    Check a repository search payload for an exact, case-insensitive name match.

    Args:
        name: The candidate name
        payload: Decoded JSON body of the search response

    Returns:
        True if any returned repository is named exactly ``name``
    """
    if not isinstance(payload, dict):
        return False
    items = payload.get("items")
    if not isinstance(items, list):
        return False
    wanted = name.lower()
    return any(
        isinstance(item, dict) and str(item.get("name", "")).lower() == wanted
        for item in items
    )


def interpret_github_signals(name: str, profile_exists: bool, repo_exists: bool) -> ProbeResult:
    """Taken if either the profile page or an exactly named repository exists."""
    if profile_exists or repo_exists:
        return taken(Platform.GITHUB, name)
    return available(Platform.GITHUB, name)


def interpret_registry_status(platform: Platform, name: str, status_code: int) -> ProbeResult:
    """
    Map a package registry metadata response to a result.

    Raises:
        TransportError: For any status other than 200 or 404
    """
    if status_code == 404:
        return available(platform, name)
    if status_code == 200:
        return taken(platform, name)
    raise unexpected_status(status_code)


def interpret_instagram_response(name: str, status_code: int, body: str) -> ProbeResult:
    """
    Map an Instagram profile page response to a result.

    Any 200 counts as taken: the page may be a login wall that hides whether
    the profile exists, and calling that available would be wrong more often.

    Raises:
        RateLimitedError: On HTTP 429
        TransportError: For any other status than 200 or 404
    """
    if status_code == 404:
        return available(Platform.INSTAGRAM, name)
    if status_code == 200:
        return taken(Platform.INSTAGRAM, name)
    if status_code == 429:
        raise rate_limited()
    raise unexpected_status(status_code, label="Status")


def interpret_x_response(name: str, status_code: int, body: str) -> ProbeResult:
    """
    Map an X profile page response to a result.

    X answers 200 for missing and suspended accounts too, with a marker in the
    page body.

    Raises:
        RateLimitedError: On HTTP 429
        TransportError: For any other status than 200 or 404
    """
    if status_code == 404:
        return available(Platform.X, name)
    if status_code == 200:
        if any(marker in body for marker in X_MISSING_ACCOUNT_MARKERS):
            return available(Platform.X, name)
        return taken(Platform.X, name)
    if status_code == 429:
        raise rate_limited()
    raise unexpected_status(status_code, label="Status")


# ---------------------------------------------------------------------------
# Probes
# ---------------------------------------------------------------------------

class GitHubProbe:
    """
    Code-host probe: checks for a GitHub user/organization and for repositories.

    The profile check and the repository search run concurrently. A failure
    inside either of them counts as "not found" for that check only.
    """

    platform = Platform.GITHUB

    PROFILE_URL = "https://github.com/{name}"
    SEARCH_URL = "https://api.github.com/search/repositories"

    def __init__(
        self,
        client: httpx.AsyncClient,
        config: Optional[GitHubConfig] = None,
        http: Optional[HttpConfig] = None,
    ) -> None:
        self._client = client
        self._config = config or GitHubConfig()
        self._http = http or HttpConfig()

    def target(self, name: str) -> str:
        return name

    def _headers(self) -> dict[str, str]:
        headers = {
            "User-Agent": self._http.user_agent,
            "Accept": "application/vnd.github+json",
        }
        if self._config.token:
            headers["Authorization"] = f"token {self._config.token}"
        return headers

    async def check(self, name: str) -> ProbeResult:
        return await run_guarded(self.platform, name, lambda: self._check(name))

    async def _check(self, name: str) -> ProbeResult:
        headers = self._headers()
        profile_exists, repo_exists = await asyncio.gather(
            self._profile_exists(name, headers),
            self._repo_exists(name, headers),
        )
        return interpret_github_signals(name, profile_exists, repo_exists)

    async def _profile_exists(self, name: str, headers: dict[str, str]) -> bool:
        try:
            response = await self._client.head(
                self.PROFILE_URL.format(name=quote(name, safe="")),
                headers=headers,
                follow_redirects=False,
            )
            return profile_page_exists(response.status_code)
        except Exception:
            return False

    async def _repo_exists(self, name: str, headers: dict[str, str]) -> bool:
        try:
            response = await self._client.get(
                self.SEARCH_URL,
                params={"q": f"{name} in:name", "per_page": 10},
                headers=headers,
            )
            if response.status_code != 200:
                return False
            return repository_name_matches(name, response.json())
        except Exception:
            return False


class RegistryProbe:
    """Package registry probe: a single GET against the package metadata endpoint."""

    URL_TEMPLATES = {
        Platform.NPM: "https://registry.npmjs.org/{name}",
        Platform.PYPI: "https://pypi.org/pypi/{name}/json",
    }

    def __init__(
        self,
        platform: Platform,
        client: httpx.AsyncClient,
        http: Optional[HttpConfig] = None,
    ) -> None:
        if platform not in self.URL_TEMPLATES:
            raise ValueError(f"Not a package registry platform: {platform.value}")
        self.platform = platform
        self._client = client
        self._http = http or HttpConfig()

    def target(self, name: str) -> str:
        return name

    def url_for(self, name: str) -> str:
        return self.URL_TEMPLATES[self.platform].format(name=quote(name, safe=""))

    async def check(self, name: str) -> ProbeResult:
        return await run_guarded(self.platform, name, lambda: self._check(name))

    async def _check(self, name: str) -> ProbeResult:
        response = await send_request(
            self._client,
            "GET",
            self.url_for(name),
            headers={"User-Agent": self._http.user_agent, "Accept": "application/json"},
        )
        return interpret_registry_status(self.platform, name, response.status_code)


class InstagramProbe:
    """Social handle probe for Instagram profiles."""

    platform = Platform.INSTAGRAM

    PROFILE_URL = "https://www.instagram.com/{name}/"

    def __init__(self, client: httpx.AsyncClient) -> None:
        self._client = client

    def target(self, name: str) -> str:
        return name

    async def check(self, name: str) -> ProbeResult:
        return await run_guarded(self.platform, name, lambda: self._check(name))

    async def _check(self, name: str) -> ProbeResult:
        response = await send_request(
            self._client,
            "GET",
            self.PROFILE_URL.format(name=quote(name, safe="")),
            headers=BROWSER_HEADERS,
            follow_redirects=True,
        )
        return interpret_instagram_response(name, response.status_code, response.text)


class XProbe:
    """Social handle probe for X profiles."""

    platform = Platform.X

    PROFILE_URL = "https://x.com/{name}"

    def __init__(self, client: httpx.AsyncClient) -> None:
        self._client = client

    def target(self, name: str) -> str:
        return name

    async def check(self, name: str) -> ProbeResult:
        return await run_guarded(self.platform, name, lambda: self._check(name))

    async def _check(self, name: str) -> ProbeResult:
        response = await send_request(
            self._client,
            "GET",
            self.PROFILE_URL.format(name=quote(name, safe="")),
            headers=BROWSER_HEADERS,
            follow_redirects=True,
        )
        return interpret_x_response(name, response.status_code, response.text)
