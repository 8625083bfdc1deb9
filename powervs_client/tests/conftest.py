"""Pytest fixtures for powervs_client tests."""
import os
import pytest
import jwt
from unittest.mock import MagicMock

from powervs_client.models import PVMInstance, PVMInstances


TEST_SIGNING_KEY = "not-the-iam-key-but-long-enough-for-hs256"


@pytest.fixture
def mock_env_vars():
    """Fixture to set up and tear down environment variables."""
    original_env = os.environ.copy()

    def _set_env(**kwargs):
        for key, value in kwargs.items():
            if value is None:
                os.environ.pop(key, None)
            else:
                os.environ[key] = value

    yield _set_env

    # Restore original environment
    os.environ.clear()
    os.environ.update(original_env)


@pytest.fixture
def token_claims():
    """Claims of a production IAM access token."""
    return {
        "id": "IBMid-2700012345",
        "email": "dev@example.com",
        "account": {"bss": "abc123account", "valid": True},
        "iss": "https://iam.cloud.ibm.com/identity",
        "iat": 1700000000,
        "exp": 1700003600,
    }


@pytest.fixture
def make_token():
    """Mint a signed JWT for the given claims."""
    def _make(claims):
        return jwt.encode(claims, TEST_SIGNING_KEY, algorithm="HS256")
    return _make


@pytest.fixture
def access_token(make_token, token_claims):
    """Bearer-prefixed access token as stored by the account session."""
    return f"Bearer {make_token(token_claims)}"


@pytest.fixture
def make_instances():
    """Build a PVMInstances listing from server names."""
    def _make(*names):
        return PVMInstances(pvm_instances=[
            PVMInstance(pvm_instance_id=f"id-{name}", server_name=name, status="ACTIVE")
            for name in names
        ])
    return _make


@pytest.fixture
def mock_response():
    """Build an httpx-like response mock."""
    def _make(status_code=200, json_data=None, content=None):
        response = MagicMock()
        response.status_code = status_code
        response.json.return_value = json_data
        if content is None:
            content = b"" if json_data is None else b"{...}"
        response.content = content
        response.text = str(json_data)
        return response
    return _make
