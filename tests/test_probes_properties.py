"""
Property-based tests for the HTTP probes.

The interpretation functions are tested directly; the probes themselves run
against httpx.MockTransport so no network access is needed.
"""

import asyncio
import string

import httpx
import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from name_probe.config import GitHubConfig
from name_probe.enums import Platform, ProbeStatus
from name_probe.exceptions import RateLimitedError, TransportError
from name_probe.probes import (
    GitHubProbe,
    InstagramProbe,
    Probe,
    RegistryProbe,
    XProbe,
    interpret_instagram_response,
    interpret_registry_status,
    interpret_x_response,
    profile_page_exists,
    repository_name_matches,
)


name_strategy = st.text(
    alphabet=string.ascii_lowercase + string.digits + "-",
    min_size=1,
    max_size=20,
)

other_status_strategy = st.integers(min_value=100, max_value=599).filter(
    lambda code: code not in (200, 404, 429)
)


def run_async(coro):
    """Helper to run async code in tests."""
    return asyncio.run(coro)


def mock_client(handler) -> httpx.AsyncClient:
    return httpx.AsyncClient(transport=httpx.MockTransport(handler))


async def check_with(probe_factory, handler, name: str):
    async with mock_client(handler) as client:
        return await probe_factory(client).check(name)


class TestRegistryInterpretation:
    """Package registries: 404 available, 200 taken, anything else an error."""

    @given(platform=st.sampled_from([Platform.NPM, Platform.PYPI]), name=name_strategy)
    def test_not_found_is_available(self, platform: Platform, name: str) -> None:
        result = interpret_registry_status(platform, name, 404)
        assert result.status == ProbeStatus.AVAILABLE
        assert result.error is None

    @given(platform=st.sampled_from([Platform.NPM, Platform.PYPI]), name=name_strategy)
    def test_ok_is_taken(self, platform: Platform, name: str) -> None:
        assert interpret_registry_status(platform, name, 200).status == ProbeStatus.TAKEN

    @given(status_code=other_status_strategy)
    def test_other_status_raises_with_code(self, status_code: int) -> None:
        with pytest.raises(TransportError) as excinfo:
            interpret_registry_status(Platform.NPM, "foo", status_code)
        assert str(status_code) in excinfo.value.message


class TestSocialInterpretation:
    """Instagram and X read the same status codes differently."""

    @given(body=st.text(max_size=200))
    def test_instagram_ok_is_always_taken(self, body: str) -> None:
        assert interpret_instagram_response("foo", 200, body).status == ProbeStatus.TAKEN

    def test_instagram_not_found_is_available(self) -> None:
        assert interpret_instagram_response("foo", 404, "").status == ProbeStatus.AVAILABLE

    @pytest.mark.parametrize("marker", ["This account doesn't exist", "Account suspended"])
    def test_x_missing_account_marker_is_available(self, marker: str) -> None:
        body = f"<html><body><span>{marker}</span></body></html>"
        assert interpret_x_response("foo", 200, body).status == ProbeStatus.AVAILABLE

    def test_x_profile_page_is_taken(self) -> None:
        body = '<html><body>"screen_name":"foo"</body></html>'
        assert interpret_x_response("foo", 200, body).status == ProbeStatus.TAKEN

    @pytest.mark.parametrize("interpret", [interpret_instagram_response, interpret_x_response])
    def test_rate_limit_raises(self, interpret) -> None:
        with pytest.raises(RateLimitedError) as excinfo:
            interpret("foo", 429, "")
        assert excinfo.value.message == "Rate limited"

    @given(status_code=other_status_strategy)
    def test_other_status_is_transport_error(self, status_code: int) -> None:
        with pytest.raises(TransportError) as excinfo:
            interpret_x_response("foo", status_code, "")
        assert excinfo.value.message == f"Status: {status_code}"


class TestGitHubSignals:
    """Profile existence and exact repository matches."""

    @pytest.mark.parametrize("status_code,expected", [
        (200, True), (301, True), (302, True), (404, False), (500, False),
    ])
    def test_profile_status_codes(self, status_code: int, expected: bool) -> None:
        assert profile_page_exists(status_code) is expected

    @given(name=name_strategy)
    def test_repository_match_is_case_insensitive(self, name: str) -> None:
        payload = {"items": [{"name": "unrelated-x"}, {"name": name.upper()}]}
        assert repository_name_matches(name, payload)

    def test_partial_repository_name_does_not_match(self) -> None:
        payload = {"items": [{"name": "foobar"}, {"name": "my-foo"}]}
        assert not repository_name_matches("foo", payload)

    @pytest.mark.parametrize("payload", [None, [], {}, {"items": None}, {"items": ["foo"]}])
    def test_unexpected_payload_shapes_do_not_match(self, payload) -> None:
        assert not repository_name_matches("foo", payload)


class TestRegistryProbe:
    """RegistryProbe over a mocked transport."""

    def test_available_name(self) -> None:
        result = run_async(check_with(
            lambda client: RegistryProbe(Platform.NPM, client),
            lambda request: httpx.Response(404),
            "available-name",
        ))
        assert result.platform == Platform.NPM
        assert result.name == "available-name"
        assert result.status == ProbeStatus.AVAILABLE
        assert result.error is None
        assert result.cached is False

    def test_requests_package_metadata_url(self) -> None:
        seen = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(str(request.url))
            return httpx.Response(200, json={"info": {}})

        result = run_async(check_with(lambda client: RegistryProbe(Platform.PYPI, client), handler, "requests"))

        assert result.status == ProbeStatus.TAKEN
        assert seen == ["https://pypi.org/pypi/requests/json"]

    def test_unexpected_status_is_error(self) -> None:
        result = run_async(check_with(
            lambda client: RegistryProbe(Platform.NPM, client),
            lambda request: httpx.Response(503),
            "foo",
        ))
        assert result.status == ProbeStatus.ERROR
        assert result.error == "Unexpected status: 503"

    def test_network_failure_is_error(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        result = run_async(check_with(lambda client: RegistryProbe(Platform.NPM, client), handler, "foo"))
        assert result.status == ProbeStatus.ERROR
        assert "connection refused" in result.error

    def test_timeout_is_error(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ReadTimeout("timed out", request=request)

        result = run_async(check_with(lambda client: RegistryProbe(Platform.PYPI, client), handler, "foo"))
        assert result.status == ProbeStatus.ERROR
        assert "timed out" in result.error

    def test_rejects_non_registry_platform(self) -> None:
        with pytest.raises(ValueError):
            RegistryProbe(Platform.GITHUB, None)


class TestSocialProbes:
    """Instagram and X probes over a mocked transport."""

    def test_x_rate_limited(self) -> None:
        result = run_async(check_with(XProbe, lambda request: httpx.Response(429), "foo"))
        assert result.status == ProbeStatus.ERROR
        assert result.error == "Rate limited"

    def test_x_suspended_account_is_available(self) -> None:
        result = run_async(check_with(
            XProbe,
            lambda request: httpx.Response(200, text="<div>Account suspended</div>"),
            "foo",
        ))
        assert result.status == ProbeStatus.AVAILABLE

    def test_instagram_sends_browser_headers(self) -> None:
        seen = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, text="<html>login</html>")

        result = run_async(check_with(InstagramProbe, handler, "foo"))

        assert result.status == ProbeStatus.TAKEN
        assert str(seen[0].url) == "https://www.instagram.com/foo/"
        assert "Mozilla" in seen[0].headers["User-Agent"]

    def test_instagram_other_status(self) -> None:
        result = run_async(check_with(InstagramProbe, lambda request: httpx.Response(500), "foo"))
        assert result.status == ProbeStatus.ERROR
        assert result.error == "Status: 500"


def github_handler(profile_status: int, repos: list, fail_profile: bool = False, fail_search: bool = False):
    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.host == "github.com":
            if fail_profile:
                raise httpx.ConnectError("profile down", request=request)
            return httpx.Response(profile_status)
        if request.url.host == "api.github.com":
            if fail_search:
                raise httpx.ConnectError("search down", request=request)
            return httpx.Response(200, json={"items": [{"name": repo} for repo in repos]})
        return httpx.Response(404)
    return handler


class TestGitHubProbe:
    """GitHub probe combines the profile check and the repository search."""

    @pytest.mark.parametrize("profile_status,repos,expected", [
        (404, [], ProbeStatus.AVAILABLE),
        (200, [], ProbeStatus.TAKEN),
        (301, [], ProbeStatus.TAKEN),
        (404, ["Foo"], ProbeStatus.TAKEN),
        (404, ["foobar"], ProbeStatus.AVAILABLE),
    ])
    def test_signal_combinations(self, profile_status: int, repos: list, expected: ProbeStatus) -> None:
        result = run_async(check_with(GitHubProbe, github_handler(profile_status, repos), "foo"))
        assert result.status == expected

    def test_sub_check_failures_count_as_absence(self) -> None:
        handler = github_handler(200, ["foo"], fail_profile=True, fail_search=True)
        result = run_async(check_with(GitHubProbe, handler, "foo"))
        assert result.status == ProbeStatus.AVAILABLE
        assert result.error is None

    def test_one_failed_sub_check_does_not_hide_the_other(self) -> None:
        handler = github_handler(404, ["foo"], fail_profile=True)
        result = run_async(check_with(GitHubProbe, handler, "foo"))
        assert result.status == ProbeStatus.TAKEN

    def test_profile_redirects_are_not_followed(self) -> None:
        methods = []

        def handler(request: httpx.Request) -> httpx.Response:
            methods.append((request.method, request.url.host))
            if request.url.host == "github.com":
                return httpx.Response(302, headers={"Location": "https://github.com/login"})
            return httpx.Response(200, json={"items": []})

        result = run_async(check_with(GitHubProbe, handler, "foo"))

        assert result.status == ProbeStatus.TAKEN
        assert methods.count(("HEAD", "github.com")) == 1

    def test_token_is_sent_when_configured(self) -> None:
        auth_headers = []

        def handler(request: httpx.Request) -> httpx.Response:
            auth_headers.append(request.headers.get("Authorization"))
            return httpx.Response(404)

        run_async(check_with(
            lambda client: GitHubProbe(client, GitHubConfig(token="ghp_secret")),
            handler,
            "foo",
        ))

        assert auth_headers == ["token ghp_secret", "token ghp_secret"]

    def test_no_token_no_authorization_header(self) -> None:
        auth_headers = []
        user_agents = []

        def handler(request: httpx.Request) -> httpx.Response:
            auth_headers.append(request.headers.get("Authorization"))
            user_agents.append(request.headers.get("User-Agent"))
            return httpx.Response(404)

        run_async(check_with(GitHubProbe, handler, "foo"))

        assert auth_headers == [None, None]
        assert user_agents == ["name-probe", "name-probe"]


class TestProbeContract:
    """Every HTTP probe satisfies the Probe protocol and never raises."""

    @given(name=name_strategy, status_code=st.integers(min_value=200, max_value=599))
    @settings(max_examples=50, deadline=None)
    def test_probes_never_raise(self, name: str, status_code: int) -> None:
        factories = [
            GitHubProbe,
            lambda client: RegistryProbe(Platform.NPM, client),
            lambda client: RegistryProbe(Platform.PYPI, client),
            InstagramProbe,
            XProbe,
        ]

        async def run_all():
            async with mock_client(lambda request: httpx.Response(status_code, text="")) as client:
                probes = [factory(client) for factory in factories]
                return [await probe.check(name) for probe in probes], probes

        results, probes = run_async(run_all())

        for probe, result in zip(probes, results):
            assert isinstance(probe, Probe)
            assert result.platform == probe.platform
            assert result.name == probe.target(name)
            assert (result.error is not None) == (result.status == ProbeStatus.ERROR)
