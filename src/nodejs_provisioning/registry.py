"""npm registry and npm config file definitions.

An :class:`NpmConfig` is a stored ``.npmrc`` template plus the list of
registries to inject into it when a build asks for the file. Each
:class:`NpmRegistry` is either *global* (no scopes, becomes the default
``registry``) or *scoped* (serves only ``@scope/*`` packages).

Verification happens before templating: :func:`verify_registries` is the
only producer of :class:`VerifiedRegistries`, which is what the supply step
hands to the templater.
"""

import enum
import os
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Iterator, List, Optional, Sequence, Tuple
from urllib.parse import urlparse

import yaml
from pydantic import BaseModel, Field, field_validator

from .errors import (
    EmptyRegistryUrlError,
    InvalidRegistryUrlError,
    InvalidScopesError,
    TooManyGlobalRegistriesError,
)

SCOPE_PREFIX = "@"

_VARIABLE_RE = re.compile(r"\$\{.*\}")


class MessageKind(enum.Enum):
    """Severity of a field validation message."""
    OK = "ok"
    WARNING = "warning"
    ERROR = "error"


@dataclass(frozen=True)
class ValidationMessage:
    """Result of validating a single user-entered field."""
    kind: MessageKind
    message: str = ""

    @property
    def is_error(self) -> bool:
        return self.kind is MessageKind.ERROR


OK = ValidationMessage(MessageKind.OK)


def parse_url(url: Optional[str]):
    """Parse an absolute URL, returning ``None`` when it is unusable."""
    if url is None or not url.strip():
        return None
    try:
        parsed = urlparse(url.strip())
    except ValueError:
        return None
    if not parsed.scheme or not parsed.netloc:
        return None
    return parsed


def check_url(url: Optional[str]) -> ValidationMessage:
    """Validate a registry URL as entered by a user.

    URLs containing ``${...}`` are accepted as-is since they are expanded
    by the build environment later.
    """
    if url is None or not url.strip():
        return ValidationMessage(MessageKind.ERROR, "Empty registry URL")
    if not _VARIABLE_RE.search(url) and parse_url(url) is None:
        return ValidationMessage(MessageKind.ERROR, f"Invalid registry URL: {url}")
    return OK


def check_scopes(has_scopes: bool, scopes: Optional[str]) -> ValidationMessage:
    """Validate a whitespace separated list of scopes."""
    scopes = scopes.strip() if scopes else None
    if not has_scopes:
        return OK
    if not scopes:
        return ValidationMessage(MessageKind.ERROR, "Scopes are required for a scoped registry")
    for scope in scopes.split():
        if scope.startswith(SCOPE_PREFIX):
            if len(scope) == 1:
                return ValidationMessage(MessageKind.ERROR, "Invalid scope: '@' alone is not a scope")
            return ValidationMessage(
                MessageKind.WARNING,
                f"Scope '{scope}' should be written without the leading '@'",
            )
    return OK


class NpmRegistry(BaseModel):
    """A registry entry injected into an npm config file.

    Attributes:
        url: Registry endpoint, e.g. "https://npm.acme.com/repository/npm/"
        credentials_id: Id handed to the credential resolver, None for anonymous
        scopes: Space separated scope names without '@', None for the global registry
    """

    url: Optional[str] = None
    credentials_id: Optional[str] = None
    scopes: Optional[str] = None

    model_config = {"frozen": True}

    @field_validator("url", "credentials_id", mode="before")
    def empty_to_none(cls, v):
        if isinstance(v, str):
            v = v.strip()
        if v == "":
            return None
        return v

    @field_validator("scopes", mode="before")
    def normalize_scopes(cls, v):
        if isinstance(v, (list, tuple)):
            v = " ".join(str(s) for s in v)
        if v == "" or v is None:
            return None
        # a bare '@' leaves an empty but still scoped value
        return " ".join(s.lstrip(SCOPE_PREFIX) for s in v.split() if s.lstrip(SCOPE_PREFIX))

    @property
    def has_scopes(self) -> bool:
        return self.scopes is not None

    @property
    def is_global(self) -> bool:
        return not self.has_scopes

    @property
    def scopes_as_list(self) -> List[str]:
        """Scope names in declaration order, duplicates removed."""
        if not self.has_scopes:
            return []
        return list(dict.fromkeys(self.scopes.split()))

    def verify(self) -> None:
        """Raise if the URL or scopes would produce a broken npmrc.

        Raises:
            EmptyRegistryUrlError: If the URL is blank
            InvalidRegistryUrlError: If the URL cannot be parsed
            InvalidScopesError: If the registry is scoped but has no valid scope
        """
        url_check = check_url(self.url)
        if url_check.is_error:
            if self.url is None or not self.url.strip():
                raise EmptyRegistryUrlError(url_check.message)
            raise InvalidRegistryUrlError(url_check.message)

        scopes_check = check_scopes(self.has_scopes, self.scopes)
        if scopes_check.is_error:
            raise InvalidScopesError(f"{scopes_check.message} (registry {self.url})")

    def __str__(self) -> str:
        text = f"url: {self.url}"
        if self.scopes is not None:
            text += f" scopes: [{self.scopes}]"
        if self.credentials_id is not None:
            text += f" credentialId: {self.credentials_id}"
        return text


@dataclass(frozen=True)
class VerifiedRegistries:
    """Registries that passed :func:`verify_registries`.

    At most one of them is global.
    """
    registries: Tuple[NpmRegistry, ...]

    def __iter__(self) -> Iterator[NpmRegistry]:
        return iter(self.registries)

    def __len__(self) -> int:
        return len(self.registries)

    def __getitem__(self, index: int) -> NpmRegistry:
        return self.registries[index]

    @property
    def global_registry(self) -> Optional[NpmRegistry]:
        for registry in self.registries:
            if registry.is_global:
                return registry
        return None


def verify_registries(registries: Sequence[NpmRegistry]) -> VerifiedRegistries:
    """Verify every registry and that at most one of them is global.

    Raises:
        VerifyConfigError: Subclass describing the first invalid registry, or
            TooManyGlobalRegistriesError naming every global registry URL
    """
    global_urls = []
    for registry in registries:
        registry.verify()
        if registry.is_global:
            global_urls.append(registry.url)

    if len(global_urls) > 1:
        raise TooManyGlobalRegistriesError(global_urls)

    return VerifiedRegistries(tuple(registries))


class NpmConfig(BaseModel):
    """Stored npm user config (``.npmrc``) with registries to inject.

    Attributes:
        id: Unique id of the config file
        name: Display name
        comment: Free-text description
        content: npmrc template text
        registries: Registries added to the content at supply time
        npm9_format: Write auth in the npm >= 9 layout (no always-auth, prefixed auth)
    """

    id: str
    name: Optional[str] = None
    comment: Optional[str] = None
    content: Optional[str] = None
    registries: List[NpmRegistry] = Field(default_factory=list)
    npm9_format: bool = False

    @field_validator("id")
    def validate_id(cls, v):
        if not v or not v.strip():
            raise ValueError("Config id cannot be empty")
        return v

    @field_validator("name", "comment", "content", mode="before")
    def trim_to_none(cls, v):
        if v is None:
            return None
        v = str(v).strip()
        return v or None

    @field_validator("registries", mode="before")
    def none_to_empty(cls, v):
        return [] if v is None else v

    def verify(self) -> VerifiedRegistries:
        """Verify the registries of this config."""
        return verify_registries(self.registries)

    @classmethod
    def from_yaml(cls, path: Path) -> "NpmConfig":
        """Load from a specific YAML file."""
        with open(path) as f:
            data = yaml.safe_load(f)
        return cls(**data)

    @classmethod
    def from_yaml_string(cls, yaml_str: str) -> "NpmConfig":
        """Load from YAML string."""
        data = yaml.safe_load(yaml_str)
        return cls(**data)

    def to_yaml(self, path: Path) -> None:
        """Save to a specific YAML file."""
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)

        with open(path, "w") as f:
            yaml.safe_dump(self.model_dump(exclude_none=True), f, default_flow_style=False, sort_keys=False)

        # Restrict permissions, templates may embed auth
        os.chmod(path, 0o600)

    def to_yaml_string(self) -> str:
        """Export to YAML string."""
        return yaml.safe_dump(self.model_dump(exclude_none=True), default_flow_style=False, sort_keys=False)


__all__ = [
    "MessageKind",
    "ValidationMessage",
    "NpmRegistry",
    "NpmConfig",
    "VerifiedRegistries",
    "check_url",
    "check_scopes",
    "parse_url",
    "verify_registries",
]
