"""
DNS probe for domain names.

A domain counts as taken when it resolves to at least one A or AAAA record.
The absence of records is a weak signal: a registered domain may simply have
no address records, so an AVAILABLE result here does not mean the domain can
be registered.
"""

from typing import Any, Optional

import dns.asyncresolver
import dns.exception
import dns.resolver
import idna

from .config import DnsConfig
from .enums import Platform, ProbeErrorCode
from .exceptions import TransportError
from .models import ProbeResult
from .probes import available, describe_exception, run_guarded, taken


# Outcomes that mean "this name has no record of that type"
NO_RECORD_EXCEPTIONS = (
    dns.resolver.NXDOMAIN,
    dns.resolver.NoAnswer,
    dns.resolver.NoNameservers,
)


class DomainProbe:
    """
    DNS record probe for one TLD.

    Results carry the fully qualified ``name.tld`` as their name so that one
    probe per TLD can be cached and displayed independently.
    """

    platform = Platform.DOMAIN

    RECORD_TYPES = ("A", "AAAA")

    def __init__(
        self,
        tld: str = "com",
        resolver: Optional[Any] = None,
        config: Optional[DnsConfig] = None,
    ) -> None:
        """
        Initialize the DNS probe.

        Args:
            tld: Top-level domain appended to every name (without leading dot)
            resolver: Object with an async ``resolve(qname, rdtype)`` method;
                      a dnspython async resolver is created on first use if omitted
            config: DNS settings (resolution lifetime)
        """
        self.tld = tld.strip().lstrip(".").lower()
        self._resolver = resolver
        self._config = config or DnsConfig()

    def target(self, name: str) -> str:
        return f"{name}.{self.tld}"

    async def check(self, name: str) -> ProbeResult:
        domain = self.target(name)
        return await run_guarded(self.platform, domain, lambda: self._check(domain))

    async def _check(self, domain: str) -> ProbeResult:
        qname = self._encode(domain)
        resolver = self._get_resolver()
        # Record types are tried independently; a record of any type wins
        first_failure: Optional[TransportError] = None
        for rdtype in self.RECORD_TYPES:
            try:
                if await self._has_records(resolver, qname, rdtype):
                    return taken(self.platform, domain)
            except TransportError as e:
                if first_failure is None:
                    first_failure = e
        if first_failure is not None:
            raise first_failure
        return available(self.platform, domain)

    def _encode(self, domain: str) -> str:
        try:
            return idna.encode(domain, uts46=True).decode("ascii")
        except idna.IDNAError as e:
            raise TransportError(
                code=ProbeErrorCode.RESOLVER_ERROR.value,
                message=f"Invalid domain name {domain}: {describe_exception(e)}",
                details={"domain": domain},
            ) from e

    def _get_resolver(self) -> Any:
        if self._resolver is None:
            try:
                resolver = dns.asyncresolver.Resolver()
            except dns.exception.DNSException as e:
                raise TransportError(
                    code=ProbeErrorCode.RESOLVER_ERROR.value,
                    message=f"DNS resolver unavailable: {describe_exception(e)}",
                ) from e
            resolver.timeout = self._config.timeout_seconds
            resolver.lifetime = self._config.timeout_seconds
            self._resolver = resolver
        return self._resolver

    async def _has_records(self, resolver: Any, qname: str, rdtype: str) -> bool:
        """
        Resolve one record type.

        Raises:
            TransportError: On timeout or any resolver fault other than a
                            missing name or record
        """
        try:
            answer = await resolver.resolve(qname, rdtype)
        except NO_RECORD_EXCEPTIONS:
            return False
        except dns.exception.Timeout as e:
            raise TransportError(
                code=ProbeErrorCode.TIMEOUT.value,
                message=f"DNS resolution timed out for {qname} ({rdtype})",
                details={"qname": qname, "rdtype": rdtype},
            ) from e
        except dns.exception.DNSException as e:
            raise TransportError(
                code=ProbeErrorCode.RESOLVER_ERROR.value,
                message=f"DNS error for {qname} ({rdtype}): {describe_exception(e)}",
                details={"qname": qname, "rdtype": rdtype},
            ) from e
        return len(answer) > 0
