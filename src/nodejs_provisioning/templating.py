"""Inject registry and authentication entries into an npmrc document.

For a global registry the top-level keys are written::

    registry = https://npm.acme.com/
    always-auth = true
    _auth = <base64 user:secret>

For a scoped registry every scope is routed to the registry and the
authentication is bound to the registry prefix (URL without scheme)::

    @acme:registry = https://npm.acme.com/
    //npm.acme.com/:always-auth = true
    //npm.acme.com/:_auth = <base64 user:secret>

Token credentials (empty username) are written as ``_authToken`` instead
of ``_auth``.
"""

from typing import Iterable, Mapping, Optional

import structlog

from .auth import Credential, basic_auth_token
from .constants import (
    NPM_SETTINGS_ALWAYS_AUTH,
    NPM_SETTINGS_AUTH,
    NPM_SETTINGS_AUTHTOKEN,
    NPM_SETTINGS_REGISTRY,
)
from .errors import InvalidRegistryUrlError
from .npmrc import ConfigDocument
from .registry import SCOPE_PREFIX, NpmRegistry, parse_url

logger = structlog.get_logger(__name__)


def _trim_slash(url: str) -> str:
    if url.endswith("/"):
        return url[:-1]
    return url


def fix_url(url: str) -> str:
    """Ensure ``url`` ends with ``/``, otherwise npm won't match scoped entries."""
    if not url.endswith("/"):
        return url + "/"
    return url


def calculate_prefix(url: str) -> str:
    """Registry prefix used to bind settings to a registry.

    Example:
        >>> calculate_prefix("https://npm.acme.com/repository/npm/")
        '//npm.acme.com/repository/npm/'

    Raises:
        InvalidRegistryUrlError: If ``url`` is not an absolute URL
    """
    trimmed = _trim_slash(url)
    parsed = parse_url(trimmed)
    if parsed is None:
        raise InvalidRegistryUrlError(f"Invalid url {url}")
    return "//" + trimmed[len(parsed.scheme + "://"):] + "/"


def compose(registry_prefix: str, setting: str) -> str:
    """Bind ``setting`` to a registry prefix or scope."""
    return f"{registry_prefix}:{setting}"


class RegistryTemplater:
    """Writes registry entries into a :class:`ConfigDocument`.

    Args:
        npm9_format: npm 9 removed ``always-auth`` and ignores unscoped auth;
            when set, no ``always-auth`` key is written and the global
            registry's auth is bound to its prefix.
    """

    def __init__(self, npm9_format: bool = False):
        self.npm9_format = npm9_format

    def apply(
        self,
        document: ConfigDocument,
        registries: Iterable[NpmRegistry],
        credentials_by_url: Mapping[str, Credential],
    ) -> ConfigDocument:
        """Add every registry to ``document``, in order, and return it.

        ``credentials_by_url`` maps registry URL to its resolved credential;
        a registry missing from it is written without authentication.
        """
        for registry in registries:
            credential = credentials_by_url.get(registry.url)

            if registry.has_scopes:
                scopes = registry.scopes_as_list
                if not scopes:
                    continue
                prefix = calculate_prefix(registry.url)
                registry_url = fix_url(registry.url)
                for scope in scopes:
                    document.set(compose(SCOPE_PREFIX + scope, NPM_SETTINGS_REGISTRY), registry_url)
                self._set_auth(document, prefix, credential)
            else:
                document.set(NPM_SETTINGS_REGISTRY, registry.url)
                prefix = calculate_prefix(registry.url) if self.npm9_format else None
                self._set_auth(document, prefix, credential)

            logger.debug(
                "registry_entry_added",
                registry=registry.url,
                scopes=registry.scopes_as_list,
                authenticated=credential is not None,
            )

        return document

    def _set_auth(
        self,
        document: ConfigDocument,
        prefix: Optional[str],
        credential: Optional[Credential],
    ) -> None:
        def key(setting: str) -> str:
            return compose(prefix, setting) if prefix else setting

        if not self.npm9_format:
            document.set(key(NPM_SETTINGS_ALWAYS_AUTH), credential is not None)
        if credential is None:
            return
        if credential.is_token:
            document.set(key(NPM_SETTINGS_AUTHTOKEN), credential.secret)
        else:
            document.set(key(NPM_SETTINGS_AUTH), basic_auth_token(credential))


def fill_registry(
    content: Optional[str],
    registries: Iterable[NpmRegistry],
    credentials_by_url: Mapping[str, Credential],
    npm9_format: bool = False,
) -> str:
    """Parse ``content``, add the registries and return the new npmrc text."""
    document = ConfigDocument.loads(content)
    RegistryTemplater(npm9_format=npm9_format).apply(document, registries, credentials_by_url)
    return document.dumps()


__all__ = [
    "RegistryTemplater",
    "calculate_prefix",
    "compose",
    "fix_url",
    "fill_registry",
]
