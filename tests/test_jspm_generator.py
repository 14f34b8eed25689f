"""Tests for the JSPM URL resolver."""

from unittest.mock import MagicMock

import pytest

from conftest import FakeHttpClient
from errors import ResolutionError, TransportError
from importmap.generator import JspmUrlResolver
from versioning.models import InstallTarget


def _client(status, body):
    client = MagicMock()
    client.post_json.return_value = (status, body)
    return client


class TestJspmPayload:
    """Request body sent to the generator."""

    def test_payload_shape(self):
        client = FakeHttpClient()
        JspmUrlResolver(client).resolve([
            InstallTarget("package-name@1.0.0"),
            InstallTarget("dayjs@1.11.10", "./plugin/utc.js"),
        ])

        url, payload = client.post_calls[0]
        assert url == "https://api.jspm.io/generate"
        assert payload == {
            "install": [
                {"target": "package-name@1.0.0"},
                {"target": "dayjs@1.11.10", "subpath": "./plugin/utc.js"},
            ],
            "flattenScope": True,
            "env": ["browser", "module", "production"],
            "defaultProvider": "jspm.io",
        }

    def test_overrides(self):
        client = FakeHttpClient()
        resolver = JspmUrlResolver(
            client,
            generator_url="https://generator.example.com/generate",
            default_provider="unpkg",
        )
        resolver.resolve([InstallTarget("a@1.0.0")])

        url, payload = client.post_calls[0]
        assert url == "https://generator.example.com/generate"
        assert payload["defaultProvider"] == "unpkg"
        assert payload["env"] == ["browser", "module", "production"]


class TestJspmResponse:
    """Response handling."""

    def test_imports_are_sorted(self):
        client = _client(200, {"map": {"imports": {"z": "https://z", "a": "https://a", "m": "https://m"}}})

        result = JspmUrlResolver(client).resolve([InstallTarget("z@1.0.0")])

        assert list(result) == ["a", "m", "z"]

    def test_scopes_are_discarded(self):
        client = _client(200, {
            "map": {
                "imports": {"package-name": "https://ga.jspm.io/npm:package-name@1.0.0/index.js"},
                "scopes": {"https://ga.jspm.io/": {"dep": "https://ga.jspm.io/npm:dep@2.0.0/index.js"}},
            }
        })

        result = JspmUrlResolver(client).resolve([InstallTarget("package-name@1.0.0")])

        assert result == {"package-name": "https://ga.jspm.io/npm:package-name@1.0.0/index.js"}

    def test_error_response_carries_service_message(self):
        client = _client(400, {"error": "Unable to resolve npm:package-name@9.9.9"})

        with pytest.raises(ResolutionError, match="Unable to resolve npm:package-name@9.9.9"):
            JspmUrlResolver(client).resolve([InstallTarget("package-name@9.9.9")])

    def test_error_response_without_message(self):
        with pytest.raises(ResolutionError, match="HTTP 502"):
            JspmUrlResolver(_client(502, None)).resolve([InstallTarget("a@1.0.0")])

    def test_non_json_success(self):
        with pytest.raises(TransportError):
            JspmUrlResolver(_client(200, None)).resolve([InstallTarget("a@1.0.0")])

    @pytest.mark.parametrize("body", [{}, {"map": {}}, {"map": {"imports": []}}, {"map": []}])
    def test_missing_imports(self, body):
        with pytest.raises(ResolutionError, match="no import map"):
            JspmUrlResolver(_client(200, body)).resolve([InstallTarget("a@1.0.0")])

    @pytest.mark.parametrize("url", [None, 42, "", {"default": "https://x"}])
    def test_non_string_urls_are_rejected(self, url):
        client = _client(200, {"map": {"imports": {"a": "https://a", "b": url}}})

        with pytest.raises(ResolutionError, match="no URL returned for b"):
            JspmUrlResolver(client).resolve([InstallTarget("a@1.0.0")])
