"""Build environment contributed by a NodeJS installation.

A build that uses a NodeJS installation gets ``NODEJS_HOME`` and the
installation ``bin`` folder prepended to its ``PATH`` (through the host's
``PATH+NODEJS`` convention). Optionally npm is pointed at a per-executor
cache and at the user config supplied for the build.
"""

from pathlib import Path, PurePosixPath, PureWindowsPath
from typing import Dict, List, Optional

import yaml
from pydantic import BaseModel, Field, field_serializer, field_validator

from .constants import (
    ENVVAR_NODEJS_HOME,
    ENVVAR_NODEJS_PATH,
    NPM_CACHE_LOCATION,
    NPM_USERCONFIG,
)
from .installer import Platform


class NodeJSInstallation(BaseModel):
    """A named NodeJS installation on workers.

    Attributes:
        name: Tool name referenced by builds
        home: Installation folder on the worker, None until installed
        platform: Worker platform, decides the bin folder layout
    """

    name: str
    home: Optional[str] = None
    platform: Platform = Platform.LINUX

    @field_validator("name")
    def validate_name(cls, v):
        if not v or not v.strip():
            raise ValueError("Installation name cannot be empty")
        return v.strip()

    @field_validator("home", mode="before")
    def empty_home(cls, v):
        if v is None or not str(v).strip():
            return None
        return str(v)

    @field_validator("platform", mode="before")
    def parse_platform(cls, v):
        if isinstance(v, str):
            try:
                return Platform[v.upper()]
            except KeyError:
                raise ValueError(f"Unknown platform: {v}") from None
        return v

    @field_serializer("platform")
    def dump_platform(self, v: Platform) -> str:
        return v.name

    def bin_path(self) -> Optional[str]:
        """Folder holding the node and npm executables."""
        if self.home is None:
            return None
        if not self.platform.bin_folder:
            return self.home
        if self.platform is Platform.WINDOWS:
            return str(PureWindowsPath(self.home, self.platform.bin_folder))
        return str(PurePosixPath(self.home, self.platform.bin_folder))

    def executable(self) -> Optional[str]:
        """Path of the node executable, without checking it exists."""
        bin_path = self.bin_path()
        if bin_path is None:
            return None
        if self.platform is Platform.WINDOWS:
            return str(PureWindowsPath(bin_path, self.platform.node_file_name))
        return str(PurePosixPath(bin_path, self.platform.node_file_name))

    def build_env_vars(self) -> Dict[str, str]:
        """Environment variables a build using this installation receives."""
        if self.home is None:
            return {}
        return {
            ENVVAR_NODEJS_HOME: self.home,
            ENVVAR_NODEJS_PATH: self.bin_path(),
        }


class NodeJSInstallations(BaseModel):
    """Configured NodeJS installations, passed explicitly to whoever needs them."""

    installations: List[NodeJSInstallation] = Field(default_factory=list)

    @field_validator("installations")
    def unique_names(cls, v):
        names = [i.name for i in v]
        duplicates = sorted({n for n in names if names.count(n) > 1})
        if duplicates:
            raise ValueError(f"Duplicate installation names: {', '.join(duplicates)}")
        return v

    def get(self, name: str) -> Optional[NodeJSInstallation]:
        for installation in self.installations:
            if installation.name == name:
                return installation
        return None

    @classmethod
    def from_yaml(cls, path: Path) -> "NodeJSInstallations":
        """Load from a specific YAML file."""
        with open(path) as f:
            data = yaml.safe_load(f)
        return cls(**(data or {}))

    def to_yaml_string(self) -> str:
        """Export to YAML string."""
        data = self.model_dump(exclude_none=True, mode="json")
        return yaml.safe_dump(data, default_flow_style=False, sort_keys=False)


def default_cache_location(root: Optional[Path] = None, executor_number: Optional[int] = None) -> Optional[Path]:
    """npm's own default cache; nothing is overridden."""
    return None


def per_executor_cache_location(root: Optional[Path], executor_number: Optional[int]) -> Optional[Path]:
    """A private npm cache per executor under the worker root.

    Concurrent builds on one worker never share a cache folder.
    """
    if root is None or executor_number is None:
        return None
    return Path(root) / "npm-cache" / str(executor_number)


def npm_environment(
    cache_location: Optional[Path] = None,
    userconfig: Optional[Path] = None,
) -> Dict[str, str]:
    """npm related environment variables for a build."""
    env: Dict[str, str] = {}
    if cache_location is not None:
        env[NPM_CACHE_LOCATION] = str(cache_location)
    if userconfig is not None:
        env[NPM_USERCONFIG] = str(userconfig)
    return env


__all__ = [
    "NodeJSInstallation",
    "NodeJSInstallations",
    "default_cache_location",
    "per_executor_cache_location",
    "npm_environment",
]
