"""NodeJS installer path resolution.

Given an installer version and the platform/CPU of a worker, compute where
the matching distribution archive lives on nodejs.org (or a mirror of it).
Historical releases changed archive layout several times; the version
ranges below encode which layout and which architectures exist for a
release.
"""

import enum
import platform as _platform
from typing import Iterable, List, Optional

import structlog

from .constants import PUBLIC_NODEJS_URL
from .errors import DetectionFailedError, UnsupportedPlatformError
from .versioning import Version, VersionRange

logger = structlog.get_logger(__name__)

EXTENSION = "tar.gz"
EXTENSION_ZIP = "zip"
EXTENSION_MSI = "msi"

# Releases before 0.8.6 and 0.9.0 don't follow any supported archive layout
BLACKLISTED_RANGE = VersionRange.parse("[0, 0.8.6)")
BLACKLISTED_VERSION = Version(0, 9, 0)

# Windows releases published only as MSI packages
MSI_RANGES = (
    VersionRange.parse("[0, 4.5)"),
    VersionRange.parse("[5, 6.2]"),
)

SUNOS_AMD64_MISSING = VersionRange.parse("[7, 7.5)")


class Platform(enum.Enum):
    """Operating system of a worker, with its NodeJS file layout."""
    LINUX = ("linux", "node", "npm", "bin")
    WINDOWS = ("win", "node.exe", "npm.cmd", "")
    OSX = ("darwin", "node", "npm", "bin")
    SUNOS = ("sunos", "node", "npm", "bin")
    AIX = ("aix", "node", "npm", "bin")

    def __init__(self, dist_name: str, node_file_name: str, npm_file_name: str, bin_folder: str):
        self.dist_name = dist_name
        self.node_file_name = node_file_name
        self.npm_file_name = npm_file_name
        self.bin_folder = bin_folder

    @classmethod
    def detect(cls, os_name: str) -> "Platform":
        """Map an OS name (``platform.system()``, ``os.name`` property...) to a Platform.

        Raises:
            DetectionFailedError: If the OS is not recognised
        """
        name = (os_name or "").lower()
        if "linux" in name:
            return cls.LINUX
        if "windows" in name:
            return cls.WINDOWS
        if "mac" in name or "darwin" in name:
            return cls.OSX
        if "sunos" in name or "solaris" in name:
            return cls.SUNOS
        if "aix" in name:
            return cls.AIX
        raise DetectionFailedError(f"Unknown OS name: {name}")

    @classmethod
    def current(cls) -> "Platform":
        return cls.detect(_platform.system())


class CPU(enum.Enum):
    """CPU architecture of a worker."""
    i386 = "i386"
    amd64 = "amd64"
    armv7l = "armv7l"
    armv6l = "armv6l"
    arm64 = "arm64"
    ppc64 = "ppc64"

    @classmethod
    def detect(cls, arch: str, machine: Optional[str] = None) -> "CPU":
        """Map an architecture name to a CPU.

        Args:
            arch: Coarse architecture as reported by the runtime
            machine: Output of ``uname -m``, needed to tell ARM variants apart

        Raises:
            DetectionFailedError: If the architecture is not recognised
        """
        name = (arch or "").lower()
        if "amd64" in name or "86_64" in name:
            return cls.amd64
        if "86" in name:
            return cls.i386
        if "arm" in name or "aarch64" in name:
            variant = (machine or name).strip().lower()
            if variant == "armv7l":
                return cls.armv7l
            if variant == "armv6l":
                return cls.armv6l
            if variant in ("arm64", "aarch64"):
                return cls.arm64
        if "ppc" in name:
            return cls.ppc64
        raise DetectionFailedError(f"Unknown CPU architecture: {name}")

    @classmethod
    def current(cls) -> "CPU":
        machine = _platform.machine()
        return cls.detect(machine, machine)


def is_version_blacklisted(version: str) -> bool:
    """True for releases whose installer layout is not supported."""
    node_version = Version.parse_lenient(version)
    return BLACKLISTED_RANGE.includes(node_version) or node_version == BLACKLISTED_VERSION


def is_msi(version: str) -> bool:
    """True if the Windows build of ``version`` is distributed as an MSI."""
    node_version = Version.parse_lenient(version)
    return any(msi_range.includes(node_version) for msi_range in MSI_RANGES)


def _unsupported_arch(version: str, cpu: CPU, platform: Platform) -> UnsupportedPlatformError:
    return UnsupportedPlatformError(
        f"NodeJS {version} is not available for {cpu.name} on {platform.name}"
    )


def resolve_path_for(version: str, platform: Platform, cpu: CPU) -> str:
    """Relative path of the installer archive inside a release folder.

    Example:
        >>> resolve_path_for("8.0.0", Platform.LINUX, CPU.amd64)
        'node-v8.0.0-linux-x64.tar.gz'

    Raises:
        UnsupportedPlatformError: If there is no build for this combination
    """
    path = ""
    os_name: Optional[str] = platform.dist_name
    msi = False

    if platform is Platform.WINDOWS:
        msi = is_msi(version)
        if msi:
            os_name = None
            extension = EXTENSION_MSI
        else:
            extension = EXTENSION_ZIP
    else:
        extension = EXTENSION

    node_version = Version.parse_lenient(version)

    if cpu is CPU.i386:
        if (platform is Platform.OSX and node_version >= Version(4, 0, 0)) or (
            platform in (Platform.SUNOS, Platform.LINUX) and node_version >= Version(10, 0, 0)
        ):
            raise _unsupported_arch(version, cpu, platform)
        arch = "x86"
    elif cpu is CPU.amd64:
        if platform is Platform.SUNOS and (
            SUNOS_AMD64_MISSING.includes(node_version) or node_version == Version(0, 12, 18)
        ):
            raise _unsupported_arch(version, cpu, platform)
        if msi and node_version < Version(4, 0, 0):
            path = "x64/"
        arch = "x64"
    elif cpu is CPU.arm64 or cpu is CPU.armv7l:
        if node_version < Version(4, 0, 0):
            raise _unsupported_arch(version, cpu, platform)
        arch = cpu.name
    elif cpu is CPU.armv6l:
        if (
            node_version >= Version(12, 0, 0)
            or node_version == Version(8, 6, 0)
            or node_version < Version(4, 0, 0)
        ):
            raise _unsupported_arch(version, cpu, platform)
        arch = cpu.name
    elif cpu is CPU.ppc64:
        if platform is not Platform.AIX or node_version < Version(6, 7, 0):
            raise _unsupported_arch(version, cpu, platform)
        arch = cpu.name
    else:
        raise UnsupportedPlatformError(f"NodeJS {version} is not available for CPU {cpu!r}")

    if os_name is None:
        return f"{path}node-v{version}-{arch}.{extension}"
    return f"{path}node-v{version}-{os_name}-{arch}.{extension}"


def release_url(version: str) -> str:
    """Folder of a release on the public distribution site."""
    return f"{PUBLIC_NODEJS_URL}/v{version}/"


def resolve_download_url(
    base_url: Optional[str],
    mirror_url: Optional[str],
    version: str,
    platform: Platform,
    cpu: CPU,
) -> str:
    """Full download URL of the installer for a worker.

    Args:
        base_url: Release folder URL, defaults to the public nodejs.org folder
        mirror_url: Replaces the public distribution root when set
        version: Installer version, e.g. "18.17.1"
        platform: Worker operating system
        cpu: Worker CPU

    Raises:
        UnsupportedPlatformError: If the version is blacklisted or not built
            for this platform/cpu
    """
    if is_version_blacklisted(version):
        raise UnsupportedPlatformError(
            f"Provided version ({version}) installer structure not (yet) supported"
        )

    relative_path = resolve_path_for(version, platform, cpu)

    url = base_url or release_url(version)
    if mirror_url:
        url = url.replace(PUBLIC_NODEJS_URL, mirror_url.rstrip("/"))
    if not url.endswith("/"):
        url += "/"

    download_url = url + relative_path
    logger.debug(
        "installer_url_resolved",
        version=version,
        platform=platform.name,
        cpu=cpu.name,
        url=download_url,
    )
    return download_url


def select_installables(versions: Iterable[str]) -> List[str]:
    """Supported installer versions, newest first."""
    supported = [v for v in versions if not is_version_blacklisted(v)]
    return sorted(supported, key=Version.parse_lenient, reverse=True)


__all__ = [
    "Platform",
    "CPU",
    "BLACKLISTED_RANGE",
    "BLACKLISTED_VERSION",
    "MSI_RANGES",
    "is_version_blacklisted",
    "is_msi",
    "release_url",
    "resolve_path_for",
    "resolve_download_url",
    "select_installables",
]
