"""
Probe registry: resolves requested platforms to concrete probe instances.

Resolution is a pure function of the requested platforms and TLDs plus the
injected transport objects. Nothing is registered globally.
"""

from typing import Any, Callable, Iterable, Optional, Union

import httpx

from .config import SystemConfig
from .dns_probe import DomainProbe
from .enums import Platform
from .probes import GitHubProbe, InstagramProbe, Probe, RegistryProbe, XProbe


PlatformId = Union[Platform, str]

# Platforms probed when the caller does not ask for specific ones
DEFAULT_PLATFORMS = (
    Platform.GITHUB,
    Platform.NPM,
    Platform.PYPI,
    Platform.DOMAIN,
)

_FACTORIES: dict[Platform, Callable[[httpx.AsyncClient, SystemConfig], Probe]] = {
    Platform.GITHUB: lambda client, config: GitHubProbe(client, config.github, config.http),
    Platform.NPM: lambda client, config: RegistryProbe(Platform.NPM, client, config.http),
    Platform.PYPI: lambda client, config: RegistryProbe(Platform.PYPI, client, config.http),
    Platform.INSTAGRAM: lambda client, config: InstagramProbe(client),
    Platform.X: lambda client, config: XProbe(client),
}


def parse_platform(value: PlatformId) -> Optional[Platform]:
    """Convert a platform id to a Platform, or None if it is unknown."""
    if isinstance(value, Platform):
        return value
    try:
        return Platform(str(value).strip().lower())
    except ValueError:
        return None


def normalize_tld(tld: str) -> str:
    """Lower-case a TLD and strip whitespace and a leading dot."""
    return tld.strip().lstrip(".").lower()


def resolve_probes(
    platforms: Optional[Iterable[PlatformId]] = None,
    tlds: Optional[Iterable[str]] = None,
    *,
    client: httpx.AsyncClient,
    config: SystemConfig,
    resolver: Optional[Any] = None,
) -> list[Probe]:
    """
    Build the ordered probe list for a request.

    Args:
        platforms: Requested platform ids in the desired order; None means
                   DEFAULT_PLATFORMS. Unknown ids are skipped.
        tlds: TLDs for the domain platform; None means config.default_tlds
        client: Shared HTTP client for the HTTP probes
        config: System configuration
        resolver: Optional DNS resolver shared by the domain probes

    Returns:
        Probes in request order, with 'domain' expanded in place into one
        DomainProbe per TLD
    """
    requested = DEFAULT_PLATFORMS if platforms is None else platforms
    target_tlds = config.default_tlds if tlds is None else tlds
    normalized_tlds = [t for t in (normalize_tld(tld) for tld in target_tlds) if t]

    probes: list[Probe] = []
    for platform_id in requested:
        platform = parse_platform(platform_id)
        if platform is None:
            continue
        if platform == Platform.DOMAIN:
            for tld in normalized_tlds:
                probes.append(DomainProbe(tld, resolver=resolver, config=config.dns))
        else:
            probes.append(_FACTORIES[platform](client, config))
    return probes


class ProbeRegistry:
    """Holds the transport objects and configuration that probes are built from."""

    def __init__(
        self,
        client: httpx.AsyncClient,
        config: Optional[SystemConfig] = None,
        resolver: Optional[Any] = None,
    ) -> None:
        self._client = client
        self._config = config or SystemConfig()
        self._resolver = resolver

    def resolve(
        self,
        platforms: Optional[Iterable[PlatformId]] = None,
        tlds: Optional[Iterable[str]] = None,
    ) -> list[Probe]:
        """Resolve platforms and TLDs to fresh probe instances."""
        return resolve_probes(
            platforms,
            tlds,
            client=self._client,
            config=self._config,
            resolver=self._resolver,
        )

    @staticmethod
    def available_platforms() -> list[Platform]:
        """All platforms a probe can be resolved for."""
        return list(Platform)

    @staticmethod
    def default_platforms() -> list[Platform]:
        return list(DEFAULT_PLATFORMS)
