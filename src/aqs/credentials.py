"""Caller identity for AQS requests.

AQS identifies (rather than authenticates) callers by an email address and a
key that the service mails out after ``signup``. Credentials are built
explicitly with ``create_user`` or looked up at call time through a provider;
nothing here is cached or written to disk.
"""

from __future__ import annotations

import os
from typing import Optional, Protocol, Union, runtime_checkable
from urllib.parse import urlencode

import requests

from aqs import _client, config
from aqs.errors import MissingCredentialsError
from aqs.logging_config import get_logger
from aqs.models import QueryResult, UserCredential

logger = get_logger(__name__)


@runtime_checkable
class CredentialProvider(Protocol):
    def get_credential(self) -> UserCredential: ...


class EnvCredentialProvider:
    """Read the email and key from environment variables when asked."""

    def __init__(self, email_var: str = config.EMAIL_ENV_VAR, key_var: str = config.KEY_ENV_VAR) -> None:
        self.email_var = email_var
        self.key_var = key_var

    def get_email(self) -> Optional[str]:
        return os.getenv(self.email_var) or None

    def get_key(self) -> Optional[str]:
        return os.getenv(self.key_var) or None

    def get_credential(self, email: Optional[str] = None, key: Optional[str] = None) -> UserCredential:
        """Fill whichever of ``email``/``key`` is missing from the environment."""
        email = email or self.get_email()
        key = key or self.get_key()
        if not email or not key:
            raise MissingCredentialsError(
                f"Missing AQS credentials: pass email and key or set {self.email_var} and {self.key_var}"
            )
        return UserCredential(email=email, key=key)


class StaticCredentialProvider:
    """Hand out one fixed credential."""

    def __init__(self, credential: UserCredential) -> None:
        self.credential = credential

    def get_credential(self) -> UserCredential:
        return self.credential


def create_user(
    email: Optional[str] = None,
    key: Optional[str] = None,
    provider: Optional[CredentialProvider] = None,
) -> UserCredential:
    """Build a credential, falling back to a provider for missing values.

    Args:
        email: Address registered with AQS
        key: Key AQS mailed to that address
        provider: Source for values not given explicitly; defaults to the
            ``AQS_EMAIL``/``AQS_KEY`` environment variables. Any object with
            ``get_credential()`` works; only the environment provider is
            consulted value by value

    Raises:
        MissingCredentialsError: If the email or key is still empty
    """
    if email and key:
        return UserCredential(email=email, key=key)
    provider = provider or EnvCredentialProvider()
    if isinstance(provider, EnvCredentialProvider):
        return provider.get_credential(email, key)
    fallback = provider.get_credential()
    return UserCredential(email=email or fallback.email, key=key or fallback.key)


def resolve_user(user: Union[UserCredential, CredentialProvider, None]) -> UserCredential:
    """Return the credential for one call from a credential, a provider or the environment."""
    if isinstance(user, UserCredential):
        return user
    if user is None:
        return create_user()
    if isinstance(user, CredentialProvider):
        return user.get_credential()
    raise TypeError(f"Expected a UserCredential or credential provider, got {type(user).__name__}")


def signup(
    email: str,
    session: requests.Session | None = None,
    base_url: str | None = None,
    retries: int | None = None,
) -> QueryResult:
    """Register ``email`` with AQS; the key arrives by email, not in the result.

    Calling this again for an address that is already registered makes AQS
    issue a new key.
    """
    if not email:
        raise MissingCredentialsError("signup requires an email address")
    root = (base_url or config.AQS_BASE_URL).rstrip("/")
    url = f"{root}/signup?{urlencode({'email': email})}"
    own_session = session is None
    sess = session or _client.make_session()
    try:
        payload = _client.fetch_json(sess, url, retries=retries)
    finally:
        if own_session:
            sess.close()
    result = _client.parse_response(payload, url=url)
    if not result.empty:
        for message in result.data.iloc[:, 0]:
            logger.info(f"AQS signup: {message}")
    return result
