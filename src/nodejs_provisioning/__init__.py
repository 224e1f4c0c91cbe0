"""nodejs-provisioning - NodeJS tool provisioning and npmrc templating for builds."""

from .version import PACKAGE_VERSION
from .errors import (
    ProvisioningError,
    FormatError,
    UnsupportedPlatformError,
    DetectionFailedError,
    VerifyConfigError,
    EmptyRegistryUrlError,
    InvalidRegistryUrlError,
    InvalidScopesError,
    TooManyGlobalRegistriesError,
    NpmConfigError,
)
from .versioning import Version, VersionRange, compare_versions
from .npmrc import ConfigDocument, Property, Comment
from .auth import (
    Credential,
    CredentialResolver,
    InMemoryCredentialResolver,
    basic_auth_token,
    resolve_credentials,
    secrets_for_masking,
)
from .registry import (
    MessageKind,
    ValidationMessage,
    NpmRegistry,
    NpmConfig,
    VerifiedRegistries,
    check_url,
    check_scopes,
    verify_registries,
)
from .templating import (
    RegistryTemplater,
    calculate_prefix,
    compose,
    fill_registry,
)
from .installer import (
    Platform,
    CPU,
    is_version_blacklisted,
    is_msi,
    release_url,
    resolve_path_for,
    resolve_download_url,
    select_installables,
)
from .environment import (
    NodeJSInstallation,
    NodeJSInstallations,
    default_cache_location,
    per_executor_cache_location,
    npm_environment,
)
from .ports import (
    InstallerPathResolver,
    EnvironmentContributor,
    FileProvisioner,
    NpmConfigSupplier,
    LatestInstallerPathResolver,
    find_resolver_for,
)
from .supply import (
    DEFAULT_TEMPLATE,
    NpmrcSupplier,
    new_config,
    sensitive_content,
    supply_npmrc,
)

__version__ = PACKAGE_VERSION

__all__ = [
    # Version
    "PACKAGE_VERSION",
    # Errors
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
    # Versions and ranges
    "Version",
    "VersionRange",
    "compare_versions",
    # npmrc document
    "ConfigDocument",
    "Property",
    "Comment",
    # Credentials
    "Credential",
    "CredentialResolver",
    "InMemoryCredentialResolver",
    "basic_auth_token",
    "resolve_credentials",
    "secrets_for_masking",
    # Registries and verification
    "MessageKind",
    "ValidationMessage",
    "NpmRegistry",
    "NpmConfig",
    "VerifiedRegistries",
    "check_url",
    "check_scopes",
    "verify_registries",
    # Templating
    "RegistryTemplater",
    "calculate_prefix",
    "compose",
    "fill_registry",
    # Installer resolution
    "Platform",
    "CPU",
    "is_version_blacklisted",
    "is_msi",
    "release_url",
    "resolve_path_for",
    "resolve_download_url",
    "select_installables",
    # Build environment
    "NodeJSInstallation",
    "NodeJSInstallations",
    "default_cache_location",
    "per_executor_cache_location",
    "npm_environment",
    # Ports (host capabilities)
    "InstallerPathResolver",
    "EnvironmentContributor",
    "FileProvisioner",
    "NpmConfigSupplier",
    "LatestInstallerPathResolver",
    "find_resolver_for",
    # Supply step
    "DEFAULT_TEMPLATE",
    "NpmrcSupplier",
    "new_config",
    "sensitive_content",
    "supply_npmrc",
]
