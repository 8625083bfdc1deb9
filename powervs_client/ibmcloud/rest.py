"""HTTP plumbing shared by the IBM Cloud API clients."""
from typing import Any, Optional

import httpx
from loguru import logger

from powervs_client.errors import ProviderError


def error_detail(response: httpx.Response) -> str:
    """Extract the provider's error description from a failed response."""
    try:
        body = response.json()
    except ValueError:
        return response.text
    if not isinstance(body, dict):
        return response.text
    for key in ("description", "message", "errorMessage", "error"):
        if isinstance(body.get(key), str):
            return body[key]
    errors = body.get("errors")
    if isinstance(errors, list) and errors and isinstance(errors[0], dict):
        return errors[0].get("message", response.text)
    return response.text


class RestClient:
    """Base client for an IBM Cloud REST endpoint.

    Requests go through a lazily created httpx.Client. HTTP status errors and
    transport errors are converted into ProviderError.
    """

    def __init__(
        self,
        base_url: str,
        auth: Optional[httpx.Auth] = None,
        headers: Optional[dict] = None,
        timeout: float = 60.0,
        debug: bool = False,
    ):
        self.base_url = base_url.rstrip("/")
        self.auth = auth
        self.headers = headers or {}
        self.timeout = timeout
        self.debug = debug
        self._client = None

    @property
    def client(self) -> httpx.Client:
        """Lazy-initialize HTTP client."""
        if self._client is None:
            event_hooks = {}
            if self.debug:
                event_hooks = {
                    "request": [self._log_request],
                    "response": [self._log_response],
                }
            self._client = httpx.Client(
                base_url=self.base_url,
                auth=self.auth,
                headers=self.headers,
                timeout=self.timeout,
                event_hooks=event_hooks,
            )
        return self._client

    @staticmethod
    def _log_request(request: httpx.Request) -> None:
        logger.debug("request: {} {}", request.method, request.url)

    @staticmethod
    def _log_response(response: httpx.Response) -> None:
        request = response.request
        logger.debug("response: {} {} -> {}", request.method, request.url, response.status_code)

    def _request(self, method: str, path: str, **kwargs) -> Any:
        """Make HTTP request and handle errors."""
        try:
            response = self.client.request(method, path, **kwargs)
        except httpx.RequestError as e:
            raise ProviderError(f"Connection failed: {e}") from e
        if response.status_code >= 400:
            raise ProviderError(
                f"API error: {error_detail(response)}", response.status_code
            )
        if not response.content:
            return None
        try:
            return response.json()
        except ValueError as e:
            raise ProviderError(f"Invalid response body: {e}", response.status_code) from e

    def close(self) -> None:
        """Close the HTTP client."""
        if self._client is not None:
            self._client.close()
            self._client = None
