"""Tests for ibmcloud/iam.py.

Tests use mocks to avoid requiring a real IBM Cloud API key.
"""
import httpx
import pytest
from unittest.mock import MagicMock, patch

from powervs_client.errors import AuthenticationError
from powervs_client.ibmcloud.iam import APIKEY_GRANT_TYPE, IAMSession


def _token_response(access_token="eyJ.tok.en", token_type="Bearer"):
    response = MagicMock()
    response.json.return_value = {
        "access_token": access_token,
        "refresh_token": "refresh-123",
        "token_type": token_type,
        "expires_in": 3600,
        "expiration": 1700003600,
    }
    return response


class TestIAMSession:
    """Tests for IAMSession."""

    def test_init_is_unauthenticated(self):
        session = IAMSession("my-api-key")
        assert session.authenticated is False
        assert session.access_token is None

    def test_repr_hides_api_key(self):
        session = IAMSession("my-api-key")
        assert "my-api-key" not in repr(session.config)

    @patch("powervs_client.ibmcloud.iam.httpx.Client")
    def test_authenticate(self, mock_client_class):
        """Should post the API key grant and cache the token."""
        mock_client = MagicMock()
        mock_client_class.return_value = mock_client
        mock_client.post.return_value = _token_response()

        session = IAMSession("my-api-key", iam_endpoint="https://iam.example.com/")
        session.authenticate()

        assert session.access_token == "Bearer eyJ.tok.en"
        assert session.config.iam_refresh_token == "refresh-123"
        assert session.config.expiration == 1700003600
        call_args = mock_client.post.call_args
        assert call_args[0][0] == "https://iam.example.com/identity/token"
        assert call_args.kwargs["data"] == {
            "grant_type": APIKEY_GRANT_TYPE,
            "apikey": "my-api-key",
        }

    @patch("powervs_client.ibmcloud.iam.httpx.Client")
    def test_authenticate_rejected(self, mock_client_class):
        """Should raise AuthenticationError when IAM rejects the key."""
        mock_client = MagicMock()
        mock_client_class.return_value = mock_client
        response = MagicMock()
        response.raise_for_status.side_effect = httpx.HTTPStatusError(
            "bad key", request=MagicMock(), response=MagicMock(status_code=400)
        )
        mock_client.post.return_value = response

        session = IAMSession("bad-key")
        with pytest.raises(AuthenticationError) as exc:
            session.authenticate()
        assert "400" in exc.value.message
        assert "bad-key" not in exc.value.message
        assert session.authenticated is False

    @patch("powervs_client.ibmcloud.iam.httpx.Client")
    def test_authenticate_connection_error(self, mock_client_class):
        mock_client = MagicMock()
        mock_client_class.return_value = mock_client
        mock_client.post.side_effect = httpx.ConnectError("Connection refused")

        with pytest.raises(AuthenticationError):
            IAMSession("my-api-key").authenticate()

    @patch("powervs_client.ibmcloud.iam.httpx.Client")
    def test_authenticate_without_access_token(self, mock_client_class):
        mock_client = MagicMock()
        mock_client_class.return_value = mock_client
        response = MagicMock()
        response.json.return_value = {"errorMessage": "nope"}
        mock_client.post.return_value = response

        with pytest.raises(AuthenticationError):
            IAMSession("my-api-key").authenticate()


class TestIAMAuth:
    """Tests for the httpx auth flow."""

    def test_authenticates_lazily(self):
        session = IAMSession("my-api-key")

        def fake_authenticate():
            session.config.iam_access_token = "Bearer first"

        with patch.object(session, "authenticate", side_effect=fake_authenticate) as mock_auth:
            flow = session.auth.auth_flow(httpx.Request("GET", "https://example.com/"))
            request = next(flow)

        assert mock_auth.call_count == 1
        assert request.headers["Authorization"] == "Bearer first"

    def test_uses_cached_token(self):
        session = IAMSession("my-api-key")
        session.config.iam_access_token = "Bearer cached"

        with patch.object(session, "authenticate") as mock_auth:
            flow = session.auth.auth_flow(httpx.Request("GET", "https://example.com/"))
            request = next(flow)
            with pytest.raises(StopIteration):
                flow.send(httpx.Response(200))

        mock_auth.assert_not_called()
        assert request.headers["Authorization"] == "Bearer cached"

    def test_reauthenticates_once_on_401(self):
        session = IAMSession("my-api-key")
        session.config.iam_access_token = "Bearer stale"

        def fake_authenticate():
            session.config.iam_access_token = "Bearer fresh"

        with patch.object(session, "authenticate", side_effect=fake_authenticate) as mock_auth:
            flow = session.auth.auth_flow(httpx.Request("GET", "https://example.com/"))
            next(flow)
            retried = flow.send(httpx.Response(401))
            with pytest.raises(StopIteration):
                flow.send(httpx.Response(401))

        assert mock_auth.call_count == 1
        assert retried.headers["Authorization"] == "Bearer fresh"
