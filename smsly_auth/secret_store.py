"""
Signing Secret Store
====================
Process-wide, read-only handle for the token signing secret.

Usage:
    from smsly_auth.secret_store import SecretStore

    secret = SecretStore.from_env()            # JWT_SECRET
    secret = SecretStore.from_vault(path="auth/jwt")  # HashiCorp Vault KV v2
"""

import os
from typing import Optional

import hvac
from hvac.exceptions import InvalidPath
import structlog

from .exceptions import SecretUnavailable

logger = structlog.get_logger(__name__)


class SecretStore:
    """
    Immutable holder for the symmetric signing secret.

    The value is never included in ``repr``/``str`` output and is only
    handed out through ``reveal()``.
    """

    __slots__ = ("_value", "_source")

    def __init__(self, value: Optional[str], source: str = "explicit"):
        object.__setattr__(self, "_value", value or "")
        object.__setattr__(self, "_source", source)

    def __setattr__(self, name, value):
        raise AttributeError("SecretStore is read-only")

    def __repr__(self) -> str:
        state = "loaded" if self._value else "empty"
        return f"SecretStore(source={self._source!r}, state={state})"

    __str__ = __repr__

    @property
    def source(self) -> str:
        return self._source

    @property
    def is_loaded(self) -> bool:
        return bool(self._value)

    def reveal(self) -> str:
        """
        Return the raw secret.

        Raises:
            SecretUnavailable: If no secret was loaded
        """
        if not self._value:
            raise SecretUnavailable(f"Signing secret not loaded (source={self._source})")
        return self._value

    @classmethod
    def from_env(cls, variable: str = "JWT_SECRET") -> "SecretStore":
        """Load the secret from an environment variable."""
        store = cls(os.environ.get(variable), source=f"env:{variable}")
        if not store.is_loaded:
            logger.warning("Signing secret missing from environment", variable=variable)
        return store

    @classmethod
    def from_vault(
        cls,
        path: str,
        key: str = "secret",
        url: Optional[str] = None,
        token: Optional[str] = None,
        mount_point: str = "smsly",
        client: Optional[hvac.Client] = None,
    ) -> "SecretStore":
        """
        Load the secret from HashiCorp Vault KV v2.

        Args:
            path: Secret path under the mount (e.g. "auth/jwt")
            key: Field inside the secret holding the value
            url: Vault address (defaults to VAULT_ADDR)
            token: Vault token (defaults to VAULT_TOKEN)
            mount_point: KV v2 mount point
            client: Pre-built hvac client (tests, custom auth methods)

        Raises:
            SecretUnavailable: If Vault is unreachable, unauthenticated or
                the secret is missing
        """
        if client is None:
            client = hvac.Client(
                url=url or os.environ.get("VAULT_ADDR", "https://vault.smsly.cloud"),
                token=token or os.environ.get("VAULT_TOKEN"),
            )
        try:
            if not client.is_authenticated():
                raise SecretUnavailable("Vault authentication failed. Check VAULT_TOKEN.")
            secret = client.secrets.kv.v2.read_secret_version(
                path=path,
                mount_point=mount_point,
            )
            value = secret["data"]["data"].get(key)
        except SecretUnavailable:
            raise
        except InvalidPath as e:
            logger.error("Signing secret not found in Vault", path=f"{mount_point}/{path}")
            raise SecretUnavailable(f"Secret not found at {mount_point}/{path}") from e
        except Exception as e:
            logger.error("Failed to read signing secret from Vault", error=type(e).__name__)
            raise SecretUnavailable("Failed to read signing secret from Vault") from e

        if not value:
            raise SecretUnavailable(f"Key {key!r} missing at {mount_point}/{path}")

        logger.info("Signing secret loaded", source="vault", path=f"{mount_point}/{path}")
        return cls(value, source=f"vault:{mount_point}/{path}")
