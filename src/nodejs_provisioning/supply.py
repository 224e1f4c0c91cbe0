"""Supply the npmrc of a stored config to a build.

This is the step a host runs when a build asks for an npm user config:
verify the registries, resolve their credentials, template the stored
content and hand back the text to write into the workspace.
"""

from typing import List

import structlog

from .auth import CredentialResolver, resolve_credentials, secrets_for_masking
from .errors import NpmConfigError, VerifyConfigError
from .npmrc import ConfigDocument
from .registry import NpmConfig
from .templating import RegistryTemplater

logger = structlog.get_logger(__name__)

DEFAULT_TEMPLATE = """\
; Set a new registry for a scoped package
; https://docs.npmjs.com/misc/scope#associating-a-scope-with-a-registry
; @myscope:registry = https://mycustomregistry.example.org
"""


def new_config(config_id: str) -> NpmConfig:
    """A fresh config pre-filled with the default template."""
    return NpmConfig(
        id=config_id,
        name="MyNpmrcConfig",
        comment="user config",
        content=DEFAULT_TEMPLATE,
    )


def supply_npmrc(config: NpmConfig, resolver: CredentialResolver) -> str:
    """Content of the npmrc file a build receives for ``config``.

    Raises:
        NpmConfigError: If the registries don't pass verification, in which
            case nothing is templated, or have no usable registry prefix
    """
    try:
        registries = config.verify()
    except VerifyConfigError as e:
        raise NpmConfigError(f"Invalid user config: {e}") from e

    content = config.content
    if len(registries) == 0:
        return content or ""

    logger.info("adding_registry_entries", config_id=config.id, registries=len(registries))
    credentials = resolve_credentials(registries, resolver)

    document = ConfigDocument.loads(content)
    try:
        RegistryTemplater(npm9_format=config.npm9_format).apply(document, registries, credentials)
    except VerifyConfigError as e:
        # ${...} urls pass verification but have no registry prefix
        raise NpmConfigError(f"Invalid user config: {e}") from e
    return document.dumps()


def sensitive_content(config: NpmConfig, resolver: CredentialResolver) -> List[str]:
    """Values to mask in the logs of a build that received ``config``."""
    if not config.registries:
        return []
    credentials = resolve_credentials(config.registries, resolver)
    return secrets_for_masking(credentials.values())


class NpmrcSupplier:
    """Default :class:`~nodejs_provisioning.ports.NpmConfigSupplier`."""

    def supply(self, config: NpmConfig, resolver: CredentialResolver) -> str:
        return supply_npmrc(config, resolver)


__all__ = [
    "DEFAULT_TEMPLATE",
    "NpmrcSupplier",
    "new_config",
    "sensitive_content",
    "supply_npmrc",
]
