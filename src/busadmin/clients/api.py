"""HTTP client for the catalogue REST backend."""

from __future__ import annotations

import logging
import time
from typing import Any, Callable, Mapping, Optional, TypeVar

import httpx

from ..config import settings

logger = logging.getLogger(__name__)

TokenProvider = Callable[[], Optional[str]]
T = TypeVar("T")


class ApiError(Exception):
    """Backend call failed. ``status`` is 0 when no HTTP response was received."""

    def __init__(self, message: str, status: int = 0, data: Any = None) -> None:
        super().__init__(message)
        self.status = status
        self.data = data


def build_api_error(status: int, data: Any) -> ApiError:
    message = None
    if isinstance(data, dict):
        message = data.get("detail") or data.get("message") or data.get("error")
    elif isinstance(data, str) and data.strip() and status == 0:
        message = data
    return ApiError(str(message) if message else f"HTTP {status}", status=status, data=data)


def parse_response(response: httpx.Response) -> Any:
    if response.status_code == 204:
        return None
    text = response.text
    if not text:
        return None
    content_type = response.headers.get("content-type", "")
    if "application/json" in content_type:
        try:
            return response.json()
        except ValueError:
            return text
    return text


def decode_payload(parse: Callable[[Any], T], data: Any) -> T:
    """Run ``parse`` over a response body, reporting malformed bodies as ``ApiError``."""
    try:
        return parse(data)
    except ValueError as exc:  # includes pydantic.ValidationError
        logger.warning(f"Malformed backend response: {exc}")
        raise ApiError("Unexpected response from backend", status=502, data=data) from exc


class ApiClient:
    def __init__(
        self,
        base_url: str | None = None,
        *,
        token_provider: TokenProvider | None = None,
        timeout: float | None = None,
        max_retries: int | None = None,
        backoff_seconds: float | None = None,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self.base_url = (base_url or settings.backend_base_url or "").rstrip("/")
        if not self.base_url:
            raise ValueError("Backend base URL is not configured.")
        self.token_provider = token_provider or (lambda: settings.backend_token)
        self.timeout = timeout if timeout is not None else settings.backend_timeout_seconds
        self.max_retries = max_retries if max_retries is not None else settings.backend_max_retries
        self.backoff_seconds = backoff_seconds if backoff_seconds is not None else settings.backend_backoff_seconds
        self._client = httpx.Client(
            base_url=self.base_url,
            timeout=httpx.Timeout(self.timeout, connect=min(self.timeout, 10.0)),
            transport=transport,
        )

    def __enter__(self) -> "ApiClient":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    def close(self) -> None:
        self._client.close()

    def _headers(self) -> dict[str, str]:
        headers = {"Accept": "application/json, */*"}
        token = self.token_provider()
        if token:
            headers["Authorization"] = f"Bearer {token}"
        return headers

    def request(
        self,
        method: str,
        path: str,
        *,
        json: Any = None,
        params: Mapping[str, Any] | None = None,
    ) -> Any:
        """Send a request and return the parsed body.

        Only GET requests are retried, and only when the backend could not be
        reached; a mutation that fails is reported to the caller as is.
        """
        url = path if path.startswith("/") else f"/{path}"
        retries = self.max_retries if method == "GET" else 0
        attempt = 0
        while True:
            try:
                response = self._client.request(
                    method,
                    url,
                    json=json,
                    params=params,
                    headers=self._headers(),
                )
            except httpx.TimeoutException as exc:
                attempt += 1
                if attempt > retries:
                    logger.warning(f"{method} {url} timed out after {attempt} attempt(s): {exc}")
                    raise ApiError("Request timed out", status=0) from exc
                wait_time = self.backoff_seconds * (2 ** (attempt - 1))
                logger.debug(f"{method} {url} timed out, retrying in {wait_time:.1f}s (attempt {attempt}/{retries})")
                time.sleep(wait_time)
                continue
            except httpx.TransportError as exc:
                attempt += 1
                if attempt > retries:
                    logger.warning(f"{method} {url} failed: {exc}")
                    raise ApiError(f"Failed to reach backend at {self.base_url}: {exc}", status=0) from exc
                wait_time = self.backoff_seconds * (2 ** (attempt - 1))
                logger.debug(f"{method} {url} network error, retrying in {wait_time:.1f}s (attempt {attempt}/{retries})")
                time.sleep(wait_time)
                continue

            data = parse_response(response)
            if response.is_error:
                logger.info(f"{method} {url} -> {response.status_code}")
                raise build_api_error(response.status_code, data)
            return data

    def get(self, path: str, *, params: Mapping[str, Any] | None = None) -> Any:
        return self.request("GET", path, params=params)

    def post(self, path: str, body: Any = None) -> Any:
        return self.request("POST", path, json=body)

    def put(self, path: str, body: Any = None) -> Any:
        return self.request("PUT", path, json=body)

    def patch(self, path: str, body: Any = None) -> Any:
        return self.request("PATCH", path, json=body)

    def delete(self, path: str) -> Any:
        return self.request("DELETE", path)


def check_health(client: ApiClient, path: str = "/catalog/offices/") -> bool:
    """Check that the backend answers a cheap list request."""
    try:
        client.get(path, params={"page_size": 1})
        return True
    except ApiError as exc:
        logger.warning(f"Backend health check failed: {exc}")
        return False
