"""Identity extraction from IAM access tokens.

The token is decoded, not verified: it was just issued to us by IAM over
TLS, so signature verification is skipped. Swap ``decode_identity`` for a
verifying implementation if tokens ever arrive from an untrusted source.
"""
from dataclasses import dataclass
from typing import Optional

import jwt

from powervs_client.errors import IdentityDecodeError


BEARER_PREFIX = "Bearer "

PRODUCTION_IAM_ISSUER = "https://iam.cloud.ibm.com"

CLOUD_ENVIRONMENT_PRODUCTION = "bluemix"
CLOUD_ENVIRONMENT_STAGING = "staging"
CLOUD_TYPE_PUBLIC = "public"


@dataclass(frozen=True)
class Identity:
    """User and account details carried by an access token."""
    id: str
    account: str
    cloud_environment: str
    api_generation: int
    email: Optional[str] = None
    cloud_type: str = CLOUD_TYPE_PUBLIC


def strip_bearer(access_token: str) -> str:
    if access_token.startswith(BEARER_PREFIX):
        return access_token[len(BEARER_PREFIX):]
    return access_token


def _string_claim(claims: dict, name: str) -> str:
    value = claims.get(name)
    if not isinstance(value, str):
        raise IdentityDecodeError.missing_claim(name)
    return value


def decode_identity(access_token: str, generation: int) -> Identity:
    """Decode the user identity from an IAM access token.

    Args:
        access_token: Access token, optionally prefixed with "Bearer "
        generation: API generation the caller targets

    Returns:
        Identity decoded from the token claims

    Raises:
        IdentityDecodeError: If the token is malformed or a mandatory claim
            is missing
    """
    if not access_token:
        raise IdentityDecodeError("access token is empty")
    token = strip_bearer(access_token)

    try:
        claims = jwt.decode(token, options={"verify_signature": False})
    except jwt.InvalidTokenError as e:
        raise IdentityDecodeError(f"failed to parse access token: {e}") from e

    user_id = _string_claim(claims, "id")

    email = claims.get("email")
    if email is not None and not isinstance(email, str):
        raise IdentityDecodeError.missing_claim("email")

    account = claims.get("account")
    if not isinstance(account, dict) or not isinstance(account.get("bss"), str):
        raise IdentityDecodeError.missing_claim("account.bss")

    issuer = _string_claim(claims, "iss")
    if PRODUCTION_IAM_ISSUER in issuer:
        cloud_environment = CLOUD_ENVIRONMENT_PRODUCTION
    else:
        cloud_environment = CLOUD_ENVIRONMENT_STAGING

    return Identity(
        id=user_id,
        email=email,
        account=account["bss"],
        cloud_environment=cloud_environment,
        cloud_type=CLOUD_TYPE_PUBLIC,
        api_generation=generation,
    )
