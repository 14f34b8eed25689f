"""Shared HTTP helpers used by the registry and generator clients.

Encapsulates request/timeout error handling behind a narrow client seam so
resolvers never see ``requests`` exceptions and tests can substitute a
deterministic stand-in.
"""
from __future__ import annotations

import json
import logging
from typing import Any, Optional, Protocol, Tuple

import requests

from constants import Constants
from errors import TransportError
from common.logging_utils import extra_context, is_debug_enabled, safe_url, Timer

logger = logging.getLogger(__name__)

JsonResponse = Tuple[int, Optional[Any]]


class HttpClient(Protocol):
    """Minimal JSON-over-HTTP interface used by the resolvers."""

    def get_json(self, url: str, *, context: str) -> JsonResponse:
        """Return ``(status_code, parsed_body_or_none)`` for a GET."""

    def post_json(self, url: str, payload: Any, *, context: str) -> JsonResponse:
        """Return ``(status_code, parsed_body_or_none)`` for a JSON POST."""


def _parse_body(response: requests.Response, url: str, context: str) -> Optional[Any]:
    """Decode a JSON body, returning None when it is empty or not JSON."""
    if not response.text:
        return None
    try:
        return json.loads(response.text)
    except json.JSONDecodeError:
        if is_debug_enabled(logger):
            logger.debug(
                "JSON decode error",
                extra=extra_context(
                    event="parse",
                    component="http_client",
                    outcome="json_decode_error",
                    status_code=response.status_code,
                    target=safe_url(url),
                    context=context,
                ),
            )
        return None


class RequestsHttpClient:
    """``HttpClient`` backed by a ``requests.Session``.

    Timeouts and connection failures are raised as ``TransportError``; HTTP
    error statuses are returned to the caller, which decides what they mean.
    """

    def __init__(
        self,
        *,
        timeout: float = Constants.REQUEST_TIMEOUT,
        session: Optional[requests.Session] = None,
    ):
        self._timeout = timeout
        self._session = session or requests.Session()
        self._session.headers.setdefault("User-Agent", Constants.USER_AGENT)

    def close(self) -> None:
        """Release pooled connections."""
        self._session.close()

    def __enter__(self) -> "RequestsHttpClient":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    def get_json(self, url: str, *, context: str) -> JsonResponse:
        """Perform a GET request and parse the JSON response.

        Args:
            url: Target URL.
            context: Human-readable source tag for logs (e.g., "npm").

        Returns:
            Tuple of (status_code, parsed_json_or_none).

        Raises:
            TransportError: The request timed out or could not connect.
        """
        response = self._send(
            "GET", url, context=context, headers={"Accept": "application/json"}
        )
        return response.status_code, _parse_body(response, url, context)

    def post_json(self, url: str, payload: Any, *, context: str) -> JsonResponse:
        """Perform a POST request with a JSON body and parse the JSON response.

        Args:
            url: Target URL.
            payload: JSON-serializable request body.
            context: Human-readable source tag for logs (e.g., "jspm").

        Returns:
            Tuple of (status_code, parsed_json_or_none).

        Raises:
            TransportError: The request timed out or could not connect.
        """
        response = self._send(
            "POST",
            url,
            context=context,
            data=json.dumps(payload),
            headers={"Content-Type": "application/json", "Accept": "application/json"},
        )
        return response.status_code, _parse_body(response, url, context)

    def _send(self, method: str, url: str, *, context: str, **kwargs: Any) -> requests.Response:
        safe_target = safe_url(url)
        with Timer() as t:
            if is_debug_enabled(logger):
                logger.debug(
                    "HTTP request",
                    extra=extra_context(
                        event="http_request",
                        component="http_client",
                        action=method,
                        target=safe_target,
                        context=context,
                    ),
                )
            try:
                res = self._session.request(method, url, timeout=self._timeout, **kwargs)
            except requests.Timeout as exc:
                logger.error(
                    "%s request timed out after %s seconds", context, self._timeout
                )
                raise TransportError(
                    f"{context} request to {safe_target} timed out after {self._timeout} seconds"
                ) from exc
            except requests.RequestException as exc:  # includes ConnectionError
                logger.error("%s connection error: %s", context, exc)
                raise TransportError(
                    f"{context} request to {safe_target} failed ({exc.__class__.__name__}: {exc})"
                ) from exc
            if is_debug_enabled(logger):
                logger.debug(
                    "HTTP response",
                    extra=extra_context(
                        event="http_response",
                        component="http_client",
                        action=method,
                        status_code=res.status_code,
                        duration_ms=t.duration_ms(),
                        target=safe_target,
                        context=context,
                    ),
                )
            return res
