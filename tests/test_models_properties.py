"""
Property-based tests for the data models.

Uses Hypothesis to check the ProbeResult error invariant and the
serialization used by the result cache.
"""

import string

import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from name_probe.enums import Platform, ProbeStatus
from name_probe.models import CacheEntry, ProbeResult, SuggestionResult


name_strategy = st.text(
    alphabet=string.ascii_lowercase + string.digits + "-",
    min_size=1,
    max_size=30,
)


@st.composite
def probe_result_strategy(draw) -> ProbeResult:
    """Generate valid ProbeResult objects."""
    status = draw(st.sampled_from(list(ProbeStatus)))
    error = draw(st.text(min_size=1, max_size=50)) if status == ProbeStatus.ERROR else None
    return ProbeResult(
        platform=draw(st.sampled_from(list(Platform))),
        name=draw(name_strategy),
        status=status,
        error=error,
        cached=draw(st.booleans()),
    )


class TestProbeResultInvariant:
    """The error message is present exactly when the status is ERROR."""

    def test_error_status_requires_message(self) -> None:
        with pytest.raises(ValueError):
            ProbeResult(platform=Platform.NPM, name="foo", status=ProbeStatus.ERROR)

    @given(status=st.sampled_from([ProbeStatus.AVAILABLE, ProbeStatus.TAKEN]))
    def test_non_error_status_rejects_message(self, status: ProbeStatus) -> None:
        with pytest.raises(ValueError):
            ProbeResult(platform=Platform.NPM, name="foo", status=status, error="boom")

    def test_result_is_immutable(self) -> None:
        result = ProbeResult(platform=Platform.PYPI, name="foo", status=ProbeStatus.TAKEN)
        with pytest.raises(Exception):
            result.status = ProbeStatus.AVAILABLE  # type: ignore[misc]

    def test_domain_key_uses_qualified_name(self) -> None:
        result = ProbeResult(platform=Platform.DOMAIN, name="foo.com", status=ProbeStatus.AVAILABLE)
        assert result.key == "domain:foo.com"


class TestSerialization:
    """Results and cache entries survive their dictionary form."""

    @given(result=probe_result_strategy())
    @settings(max_examples=100)
    def test_probe_result_dict_round_trip(self, result: ProbeResult) -> None:
        assert ProbeResult.from_dict(result.to_dict()) == result

    @given(result=probe_result_strategy())
    def test_error_field_omitted_unless_error(self, result: ProbeResult) -> None:
        data = result.to_dict()
        assert ("error" in data) == (result.status == ProbeStatus.ERROR)

    @given(
        result=probe_result_strategy(),
        created_at=st.floats(min_value=0, max_value=2e9, allow_nan=False),
        ttl=st.integers(min_value=0, max_value=10**6),
    )
    def test_cache_entry_dict_round_trip(self, result: ProbeResult, created_at: float, ttl: int) -> None:
        entry = CacheEntry(result=result, created_at=created_at, ttl_seconds=ttl)
        assert CacheEntry.from_dict(entry.to_dict()) == entry

    def test_suggestion_to_dict(self) -> None:
        result = ProbeResult(platform=Platform.NPM, name="gofoo", status=ProbeStatus.AVAILABLE)
        suggestion = SuggestionResult(name="gofoo", results=(result,), score=100)
        assert suggestion.to_dict() == {
            "name": "gofoo",
            "score": 100,
            "results": [
                {"platform": "npm", "name": "gofoo", "status": "available", "cached": False},
            ],
        }


class TestCacheEntryExpiry:
    """Entries expire strictly after their TTL has elapsed."""

    @given(
        created_at=st.integers(min_value=0, max_value=10**9).map(float),
        ttl=st.integers(min_value=0, max_value=10**6),
    )
    def test_expiry_boundary(self, created_at: float, ttl: int) -> None:
        result = ProbeResult(platform=Platform.X, name="foo", status=ProbeStatus.TAKEN)
        entry = CacheEntry(result=result, created_at=created_at, ttl_seconds=ttl)
        assert not entry.is_expired(created_at + ttl)
        assert entry.is_expired(created_at + ttl + 1)
