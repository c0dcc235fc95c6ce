from __future__ import annotations

import math
import time
from collections.abc import Callable, Mapping
from typing import Any

import httpx
from tenacity import RetryCallState, Retrying, retry_if_exception_type, stop_after_attempt

from hubspot_mcp import config
from hubspot_mcp.connectors.base import HubSpotAPIError, RateLimitedError
from hubspot_mcp.ratelimit import SlidingWindowLimiter

_BODY_METHODS = frozenset({"POST", "PATCH", "PUT"})


def _retry_after_seconds(resp: httpx.Response) -> float:
    raw = resp.headers.get("Retry-After")
    if not raw:
        return config.DEFAULT_RETRY_AFTER_SECONDS
    try:
        seconds = float(raw)
    except ValueError:
        # HTTP-date and other non-numeric forms fall back to the default.
        return config.DEFAULT_RETRY_AFTER_SECONDS
    if not math.isfinite(seconds):
        return config.DEFAULT_RETRY_AFTER_SECONDS
    return max(seconds, 0.0)


def _wait_retry_after(retry_state: RetryCallState) -> float:
    exc = retry_state.outcome.exception() if retry_state.outcome else None
    if isinstance(exc, RateLimitedError):
        return exc.retry_after
    return config.DEFAULT_RETRY_AFTER_SECONDS


def _resp_text(resp: httpx.Response) -> str:
    try:
        return resp.text
    except Exception:
        return ""


def _drop_unset(params: Mapping[str, Any] | None) -> dict[str, str] | None:
    if not params:
        return None
    kept = {k: str(v) for k, v in params.items() if v is not None}
    return kept or None


class HubSpotClient:
    """Single choke point for every call to the HubSpot CRM v3 API.

    Every request is admitted by a sliding-window limiter (100 req / 10 s). A
    429 from HubSpot is retried exactly once after its Retry-After delay; any
    other non-2xx status raises HubSpotAPIError straight away.
    """

    def __init__(
        self,
        token: str,
        *,
        base_url: str = config.API,
        timeout: float = 30.0,
        limiter: SlidingWindowLimiter | None = None,
        transport: httpx.BaseTransport | None = None,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self.limiter = limiter or SlidingWindowLimiter()
        self._sleep = sleep
        self._http = httpx.Client(
            base_url=base_url,
            headers={"Authorization": f"Bearer {token}", "Content-Type": "application/json"},
            timeout=timeout,
            transport=transport,
        )

    @classmethod
    def from_settings(cls, settings: config.Settings, **kwargs: Any) -> HubSpotClient:
        return cls(
            settings.access_token,
            base_url=settings.base_url,
            timeout=settings.timeout_seconds,
            **kwargs,
        )

    def close(self) -> None:
        self._http.close()

    def __enter__(self) -> HubSpotClient:
        return self

    def __exit__(self, *exc: object) -> None:
        self.close()

    def _send(self, request: httpx.Request, *, final: bool) -> httpx.Response:
        r = self._http.send(request)
        if r.status_code == 429 and not final:
            raise RateLimitedError(_retry_after_seconds(r))
        if not r.is_success:
            raise HubSpotAPIError(r.status_code, r.reason_phrase, _resp_text(r))
        return r

    def request(
        self,
        method: str,
        path: str,
        body: Any = None,
        params: Mapping[str, Any] | None = None,
    ) -> dict[str, Any]:
        self.limiter.acquire()
        method = method.upper()
        request = self._http.build_request(
            method,
            path,
            params=_drop_unset(params),
            json=body if body is not None and method in _BODY_METHODS else None,
        )
        retrying = Retrying(
            retry=retry_if_exception_type(RateLimitedError),
            stop=stop_after_attempt(2),
            wait=_wait_retry_after,
            sleep=self._sleep,
            reraise=True,
        )
        for attempt in retrying:
            with attempt:
                r = self._send(request, final=attempt.retry_state.attempt_number > 1)
        if r.status_code == 204:
            return {}
        return r.json()

    def get(self, path: str, params: Mapping[str, Any] | None = None) -> dict[str, Any]:
        return self.request("GET", path, params=params)

    def post(self, path: str, body: Any = None) -> dict[str, Any]:
        return self.request("POST", path, body)

    def patch(self, path: str, body: Any = None) -> dict[str, Any]:
        return self.request("PATCH", path, body)

    def put(self, path: str, body: Any = None) -> dict[str, Any]:
        return self.request("PUT", path, body)
