"""Provisioning exceptions."""

from typing import Sequence


class ProvisioningError(Exception):
    """Base class for all nodejs-provisioning errors."""
    pass


class FormatError(ProvisioningError, ValueError):
    """Raised when a version or version range string is malformed."""
    pass


class UnsupportedPlatformError(ProvisioningError, ValueError):
    """Raised when no installer exists for a version/platform/cpu combination."""
    pass


class DetectionFailedError(ProvisioningError):
    """Raised when the platform or CPU of a machine cannot be detected."""
    pass


class VerifyConfigError(ProvisioningError):
    """Raised when an npm configuration fails verification."""
    pass


class EmptyRegistryUrlError(VerifyConfigError):
    """Raised when a registry has no URL."""
    pass


class InvalidRegistryUrlError(VerifyConfigError):
    """Raised when a registry URL cannot be parsed."""
    pass


class InvalidScopesError(VerifyConfigError):
    """Raised when a scoped registry declares no usable scope."""
    pass


class TooManyGlobalRegistriesError(VerifyConfigError):
    """Raised when more than one registry in a config is unscoped.

    Attributes:
        urls: URLs of every global registry found, in declaration order
    """

    def __init__(self, urls: Sequence[str]):
        self.urls = tuple(urls)
        super().__init__(
            "Too many registries configured as global (only one is allowed): "
            + ", ".join(self.urls)
        )


class NpmConfigError(ProvisioningError):
    """Raised when an npm config file cannot be supplied to a build."""
    pass


__all__ = [
    "ProvisioningError",
    "FormatError",
    "UnsupportedPlatformError",
    "DetectionFailedError",
    "VerifyConfigError",
    "EmptyRegistryUrlError",
    "InvalidRegistryUrlError",
    "InvalidScopesError",
    "TooManyGlobalRegistriesError",
    "NpmConfigError",
]
