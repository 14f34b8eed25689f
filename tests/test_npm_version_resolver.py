"""Tests for NPM version resolver."""

from unittest.mock import MagicMock

import pytest
import semantic_version

from conftest import FakeHttpClient, STANDARD_VERSIONS
from errors import ResolutionError, TransportError
from versioning.resolvers.npm import NpmVersionResolver, registry_package_url


@pytest.fixture
def resolver(fake_client):
    """Resolver against the standard release history."""
    return NpmVersionResolver(fake_client)


class TestNpmVersionResolver:
    """Version selection against a stubbed registry."""

    @pytest.mark.parametrize(
        "constraints, expected",
        [
            (["1.0.0"], "1.0.0"),
            (["~> 1.0.0"], "1.0.2"),
            (["~> 1.0"], "1.1.0"),
            (["> 1.0.0", "< 1.0.2"], "1.0.1"),
            (["1.0.x"], "1.0.2"),
            (["^1.0.0"], "1.1.0"),
            ([">= 1.0"], "2.0.0"),
        ],
    )
    def test_picks_highest_satisfying_version(self, resolver, constraints, expected):
        assert resolver.resolve("package-name", constraints) == semantic_version.Version(expected)

    def test_prereleases_are_never_selected(self):
        client = FakeHttpClient(packages={"package-name": STANDARD_VERSIONS + ["2.1.0-beta.1", "3.0.0-rc.1"]})
        resolver = NpmVersionResolver(client)

        assert str(resolver.resolve("package-name", [">= 2.0.0"])) == "2.0.0"
        with pytest.raises(ResolutionError):
            resolver.resolve("package-name", ["3.0.0-rc.1"])

    def test_invalid_registry_versions_are_skipped(self):
        client = FakeHttpClient(packages={"package-name": ["1.0.0", "not-a-version", "1.2"]})
        resolver = NpmVersionResolver(client)

        assert str(resolver.resolve("package-name", [">= 0"])) == "1.0.0"

    def test_no_match_names_package_and_constraints(self, resolver):
        with pytest.raises(ResolutionError, match=r"package-name satisfies ~> 3\.0"):
            resolver.resolve("package-name", ["~> 3.0"])

    def test_conflicting_constraints(self, resolver):
        with pytest.raises(ResolutionError):
            resolver.resolve("package-name", ["> 1.0.1", "< 1.0.2"])

    def test_one_registry_call_per_package(self, fake_client, resolver):
        resolver.resolve("package-name", ["1.0.0"])
        resolver.resolve("package-name", ["~> 1.0"])

        assert fake_client.get_calls == ["https://registry.npmjs.org/package-name"]

    def test_listings_are_not_shared_between_instances(self, fake_client):
        NpmVersionResolver(fake_client).resolve("package-name", ["1.0.0"])
        NpmVersionResolver(fake_client).resolve("package-name", ["1.0.0"])

        assert len(fake_client.get_calls) == 2


class TestFetchCandidates:
    """Registry failures surface as TransportError."""

    def test_returns_version_keys(self, resolver):
        assert resolver.fetch_candidates("package-name") == STANDARD_VERSIONS

    def test_unknown_package(self, resolver):
        with pytest.raises(TransportError, match="HTTP 404 for package missing"):
            resolver.fetch_candidates("missing")

    @pytest.mark.parametrize("body", [None, [], {"name": "x"}, {"versions": ["1.0.0"]}])
    def test_unreadable_packument(self, body):
        client = MagicMock()
        client.get_json.return_value = (200, body)

        with pytest.raises(TransportError, match="unreadable packument"):
            NpmVersionResolver(client).fetch_candidates("package-name")

    def test_unexpected_client_errors_are_wrapped(self):
        client = MagicMock()
        client.get_json.side_effect = ValueError("boom")

        with pytest.raises(TransportError, match=r"ValueError: boom") as excinfo:
            NpmVersionResolver(client).fetch_candidates("package-name")
        assert isinstance(excinfo.value.__cause__, ValueError)

    def test_transport_errors_pass_through(self):
        client = MagicMock()
        client.get_json.side_effect = TransportError("down")

        with pytest.raises(TransportError, match="^down$"):
            NpmVersionResolver(client).fetch_candidates("package-name")

    def test_custom_registry_url(self):
        client = FakeHttpClient()
        client.get_json = MagicMock(return_value=(200, {"versions": {"1.0.0": {}}}))

        NpmVersionResolver(client, registry_url="https://npm.example.com").fetch_candidates("a")

        client.get_json.assert_called_once_with("https://npm.example.com/a", context="npm")


class TestRegistryPackageUrl:
    def test_scoped_package_is_encoded(self):
        assert registry_package_url("https://registry.npmjs.org/", "@hotwired/stimulus") == (
            "https://registry.npmjs.org/@hotwired%2Fstimulus"
        )

    def test_plain_package(self):
        assert registry_package_url("https://registry.npmjs.org", "react") == "https://registry.npmjs.org/react"
