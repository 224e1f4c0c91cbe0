"""Credential contract for authenticated npm registries.

Credentials are stored and looked up by the host (a credentials store, a
vault, environment variables...). This package only consumes them: a
:class:`CredentialResolver` turns a registry's ``credentials_id`` into a
ready-to-use :class:`Credential`.
"""

from __future__ import annotations

import base64
from dataclasses import dataclass
from typing import TYPE_CHECKING, Dict, Iterable, List, Mapping, Optional, Protocol, runtime_checkable

import structlog

if TYPE_CHECKING:
    from .registry import NpmRegistry

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class Credential:
    """Ready-to-use credential for registry operations.

    Attributes:
        username: Username for basic auth or empty for token auth
        secret: The actual credential (password or token)
        expires_at: Optional Unix timestamp when credential expires
    """
    username: str
    secret: str
    expires_at: Optional[float] = None  # Unix epoch seconds

    @property
    def is_token(self) -> bool:
        """True for bearer tokens (written as ``_authToken``)."""
        return not self.username

    def __repr__(self) -> str:
        return f"Credential(username={self.username!r}, secret='****', expires_at={self.expires_at!r})"


def basic_auth_token(credential: Credential) -> str:
    """Standard base64 of the UTF-8 bytes of ``username:secret``."""
    raw = f"{credential.username}:{credential.secret}".encode("utf-8")
    return base64.b64encode(raw).decode("ascii")


@runtime_checkable
class CredentialResolver(Protocol):
    """Protocol for looking up credentials by id.

    Implementations may restrict a credential to the registry host, hence
    the registry URL is passed along with the id.
    """

    def resolve(self, credentials_id: str, url: Optional[str]) -> Optional[Credential]:
        """Return the credential for ``credentials_id`` or ``None`` if unknown."""
        ...


class InMemoryCredentialResolver:
    """Resolver backed by a plain ``id -> Credential`` mapping."""

    def __init__(self, credentials: Optional[Mapping[str, Credential]] = None):
        self._credentials: Dict[str, Credential] = dict(credentials or {})

    def add(self, credentials_id: str, credential: Credential) -> None:
        self._credentials[credentials_id] = credential

    def resolve(self, credentials_id: str, url: Optional[str]) -> Optional[Credential]:
        return self._credentials.get(credentials_id)


def resolve_credentials(
    registries: Iterable["NpmRegistry"],
    resolver: CredentialResolver,
) -> Dict[str, Credential]:
    """Resolve the credential of every registry that declares one.

    Returns:
        Mapping of registry URL to credential. Registries without a
        ``credentials_id``, or whose id is unknown to the resolver, are
        absent: they are templated without authentication.
    """
    resolved: Dict[str, Credential] = {}
    for registry in registries:
        if registry.credentials_id is None:
            continue
        credential = resolver.resolve(registry.credentials_id, registry.url)
        if credential is None:
            logger.warning(
                "credential_not_found",
                credentials_id=registry.credentials_id,
                registry=registry.url,
            )
            continue
        resolved[registry.url] = credential
    return resolved


def secrets_for_masking(credentials: Iterable[Credential]) -> List[str]:
    """Secret strings a host should mask in build logs.

    Includes the derived basic-auth token, which is what ends up in the
    npmrc file for username/password credentials.
    """
    secrets: List[str] = []
    for credential in credentials:
        if credential.secret and credential.secret not in secrets:
            secrets.append(credential.secret)
        if not credential.is_token:
            token = basic_auth_token(credential)
            if token not in secrets:
                secrets.append(token)
    return secrets


__all__ = [
    "Credential",
    "CredentialResolver",
    "InMemoryCredentialResolver",
    "basic_auth_token",
    "resolve_credentials",
    "secrets_for_masking",
]
