"""IBM Cloud IAM account session.

This module exchanges an API key for an IAM access token and provides the
httpx auth flow every other IBM Cloud client authenticates with.
"""
from dataclasses import dataclass
from typing import Optional

import httpx
from loguru import logger

from powervs_client.config import DEFAULT_IAM_ENDPOINT
from powervs_client.errors import AuthenticationError


APIKEY_GRANT_TYPE = "urn:ibm:params:oauth:grant-type:apikey"

# Public "bx:bx" client credentials used by the IBM Cloud CLI and SDKs
IAM_CLIENT_AUTHORIZATION = "Basic Yng6Yng="

IAM_TIMEOUT = 60.0


@dataclass
class IAMConfig:
    """Account session state.

    Attributes:
        api_key: IBM Cloud API key (never logged)
        iam_endpoint: IAM base URL
        iam_access_token: "<token_type> <access_token>" once authenticated
        iam_refresh_token: Refresh token from the last exchange
        expiration: Token expiry as a unix timestamp
    """

    api_key: str
    iam_endpoint: str = DEFAULT_IAM_ENDPOINT
    iam_access_token: Optional[str] = None
    iam_refresh_token: Optional[str] = None
    expiration: Optional[int] = None

    def __repr__(self) -> str:
        return (
            f"IAMConfig(iam_endpoint={self.iam_endpoint!r}, "
            f"authenticated={self.iam_access_token is not None})"
        )


class IAMAuth(httpx.Auth):
    """Authentication class that attaches the session's IAM token.

    Authenticates on first use when the session holds no token yet, and
    re-runs the API key exchange once if the provider answers 401.
    """

    def __init__(self, session: "IAMSession"):
        self.session = session

    def auth_flow(self, request):
        if self.session.config.iam_access_token is None:
            self.session.authenticate()
        request.headers["Authorization"] = self.session.config.iam_access_token
        response = yield request
        if response.status_code == 401:
            logger.info("IAM token rejected, authenticating again")
            self.session.authenticate()
            request.headers["Authorization"] = self.session.config.iam_access_token
            yield request


class IAMSession:
    """Account-scoped IBM Cloud session."""

    def __init__(self, api_key: str, iam_endpoint: str = DEFAULT_IAM_ENDPOINT):
        """Initialize the session.

        Args:
            api_key: IBM Cloud API key
            iam_endpoint: IAM base URL
        """
        self.config = IAMConfig(api_key=api_key, iam_endpoint=iam_endpoint.rstrip("/"))
        self._client = None
        self._auth = None

    @property
    def client(self) -> httpx.Client:
        """Lazy-initialize HTTP client for the token service."""
        if self._client is None:
            self._client = httpx.Client(timeout=IAM_TIMEOUT)
        return self._client

    @property
    def auth(self) -> IAMAuth:
        """httpx auth flow bound to this session."""
        if self._auth is None:
            self._auth = IAMAuth(self)
        return self._auth

    @property
    def access_token(self) -> Optional[str]:
        return self.config.iam_access_token

    @property
    def authenticated(self) -> bool:
        return self.config.iam_access_token is not None

    def authenticate(self) -> None:
        """Exchange the API key for an IAM access token.

        Raises:
            AuthenticationError: If the exchange fails for any reason
        """
        url = f"{self.config.iam_endpoint}/identity/token"
        logger.debug("requesting IAM token from {}", self.config.iam_endpoint)
        try:
            response = self.client.post(
                url,
                data={"grant_type": APIKEY_GRANT_TYPE, "apikey": self.config.api_key},
                headers={
                    "Accept": "application/json",
                    "Authorization": IAM_CLIENT_AUTHORIZATION,
                },
            )
            response.raise_for_status()
            token = response.json()
        except httpx.HTTPStatusError as e:
            raise AuthenticationError(
                f"IAM rejected the API key (HTTP {e.response.status_code})"
            ) from e
        except httpx.HTTPError as e:
            raise AuthenticationError(f"Could not connect to IAM: {e}") from e
        except ValueError as e:
            raise AuthenticationError(f"Invalid IAM token response: {e}") from e

        if not isinstance(token, dict) or not token.get("access_token"):
            raise AuthenticationError("IAM token response has no access_token")

        token_type = token.get("token_type") or "Bearer"
        self.config.iam_access_token = f"{token_type} {token['access_token']}"
        self.config.iam_refresh_token = token.get("refresh_token")
        self.config.expiration = token.get("expiration")
        logger.info("authenticated with IAM")

    def close(self) -> None:
        """Close the HTTP client."""
        if self._client is not None:
            self._client.close()
            self._client = None
