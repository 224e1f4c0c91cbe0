"""Capabilities provided by the host build orchestrator.

The core of this package is pure: it never launches processes, downloads
archives or writes into a workspace. A host plugs it into its lifecycle by
implementing these protocols, typically by delegating to the pure
functions of this package.
"""

from pathlib import Path
from typing import Dict, List, Protocol, runtime_checkable

from .auth import CredentialResolver
from .errors import UnsupportedPlatformError
from .installer import CPU, Platform, is_version_blacklisted, resolve_path_for
from .registry import NpmConfig


@runtime_checkable
class InstallerPathResolver(Protocol):
    """Resolve where the installer of a release lives for a worker."""

    def resolve_path_for(self, version: str, platform: Platform, cpu: CPU) -> str:
        """Relative path of the installer archive inside the release folder.

        Raises:
            UnsupportedPlatformError: If no installer exists for the combination
        """
        ...


@runtime_checkable
class EnvironmentContributor(Protocol):
    """Supply environment variables to a build."""

    def build_env_vars(self) -> Dict[str, str]:
        """Variables to add; ``PATH+XYZ`` keys are prepended to ``PATH``."""
        ...


@runtime_checkable
class FileProvisioner(Protocol):
    """Make a file available to a build for its lifetime."""

    def provision(self, content: str, sensitive: List[str]) -> Path:
        """Write ``content`` where the build can read it.

        Args:
            content: File content
            sensitive: Values the host must mask from build logs

        Returns:
            Path of the provisioned file on the worker
        """
        ...

    def release(self, path: Path) -> None:
        """Delete a file provisioned by :meth:`provision`."""
        ...


@runtime_checkable
class NpmConfigSupplier(Protocol):
    """Produce the npmrc content of a stored config for a build."""

    def supply(self, config: NpmConfig, resolver: CredentialResolver) -> str:
        ...


class LatestInstallerPathResolver:
    """Path resolver for every supported release layout."""

    def resolve_path_for(self, version: str, platform: Platform, cpu: CPU) -> str:
        return resolve_path_for(version, platform, cpu)


def find_resolver_for(version: str) -> InstallerPathResolver:
    """Path resolver matching the archive layout of a release.

    Raises:
        UnsupportedPlatformError: If the release layout is not supported
    """
    if is_version_blacklisted(version):
        raise UnsupportedPlatformError(
            f"Provided version ({version}) installer structure not (yet) supported"
        )
    return LatestInstallerPathResolver()


__all__ = [
    "CredentialResolver",
    "InstallerPathResolver",
    "EnvironmentContributor",
    "FileProvisioner",
    "NpmConfigSupplier",
    "LatestInstallerPathResolver",
    "find_resolver_for",
]
