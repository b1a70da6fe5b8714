"""
Platform conventions for naming and locating the OpenVINO shared libraries.

Each OS family gets one PlatformConventions variant; the one matching the
running interpreter is selected once, at import time, as ``CURRENT``.
"""

import sys
from pathlib import Path
from typing import List, NamedTuple, Tuple


# Sub-paths of a locally built OpenVINO source tree.
KNOWN_BUILD_SUBDIRECTORIES: Tuple[str, ...] = (
    "bin/intel64/Debug/lib",
    "bin/intel64/Release/lib",
    "temp/tbb/lib",
)


class SearchRoot(NamedTuple):
    """A default location plus the sub-paths probed beneath it."""

    path: Path
    subdirectories: Tuple[str, ...]


class PlatformConventions:
    """
    File naming and default search locations for one OS family.

    Subclasses only override class attributes; the methods are shared.
    """

    name = "posix"
    prefix = "lib"
    suffix = ".so"
    library_path_variable = "LD_LIBRARY_PATH"
    path_separator = ":"

    # Directories the system package manager installs into, probed as-is.
    system_directories: Tuple[str, ...] = ()
    # Archive installation roots, probed with the installation sub-paths.
    default_install_directories: Tuple[str, ...] = ()
    install_subdirectories: Tuple[str, ...] = (
        "runtime/lib/intel64",
        "runtime/3rdparty/tbb/lib",
        "",  # the root itself, for flat layouts
    )
    build_subdirectories: Tuple[str, ...] = KNOWN_BUILD_SUBDIRECTORIES

    def file_name(self, logical_name: str) -> str:
        """
        Map a logical library name to this platform's file name.

        Example:
            >>> LinuxConventions().file_name("openvino_c")
            'libopenvino_c.so'
        """
        return f"{self.prefix}{logical_name}{self.suffix}"

    def default_search_roots(self) -> List[SearchRoot]:
        """Return the OS default locations, system directories first."""
        roots = [SearchRoot(Path(d), ("",)) for d in self.system_directories]
        roots.extend(
            SearchRoot(Path(d), self.install_subdirectories)
            for d in self.default_install_directories
        )
        return roots

    def split_search_path(self, value: str) -> List[Path]:
        """Split a library search path variable into directories, dropping empty entries."""
        return [Path(entry) for entry in value.split(self.path_separator) if entry.strip()]

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.name}>"


class LinuxConventions(PlatformConventions):
    name = "linux"
    system_directories = (
        "/usr/lib/x86_64-linux-gnu",  # DEB packages (OpenVINO >= 2022.3)
        "/lib/x86_64-linux-gnu",  # DEB packages (TBB)
        "/usr/lib/aarch64-linux-gnu",
        "/usr/lib64",  # RPM packages
    )
    default_install_directories = (
        "/opt/intel/openvino_2022",
        "/opt/intel/openvino",
    )
    install_subdirectories = (
        "runtime/lib/intel64",
        "runtime/lib/aarch64",
        "runtime/3rdparty/tbb/lib",
        "",
    )


class MacOSConventions(PlatformConventions):
    name = "macos"
    suffix = ".dylib"
    library_path_variable = "DYLD_LIBRARY_PATH"
    default_install_directories = (
        "/opt/intel/openvino_2022",
        "/opt/intel/openvino",
    )
    install_subdirectories = (
        "runtime/lib/intel64/Release",
        "runtime/lib/arm64/Release",
        "runtime/lib/intel64",
        "runtime/3rdparty/tbb/lib",
        "",
    )


class WindowsConventions(PlatformConventions):
    name = "windows"
    prefix = ""
    suffix = ".dll"
    library_path_variable = "PATH"
    path_separator = ";"
    default_install_directories = (
        "C:\\Program Files (x86)\\Intel\\openvino_2022",
        "C:\\Program Files (x86)\\Intel\\openvino",
    )
    install_subdirectories = (
        "runtime/bin/intel64/Release",
        "runtime/bin/intel64/Debug",
        "runtime/3rdparty/tbb/bin",
        "",
    )


def conventions_for(platform: str) -> PlatformConventions:
    """
    Select the conventions for a ``sys.platform`` value.

    Unknown platforms fall back to the generic POSIX variant.
    """
    if platform.startswith("linux"):
        return LinuxConventions()
    if platform == "darwin":
        return MacOSConventions()
    if platform == "win32":
        return WindowsConventions()
    return PlatformConventions()


CURRENT = conventions_for(sys.platform)
