"""
Library locator for the OpenVINO shared libraries.

Searches, in order, and returns the first readable file found:

1. OPENVINO_BUILD_DIR (a local source build, probed with build sub-paths)
2. OPENVINO_INSTALL_DIR (an installed distribution)
3. INTEL_OPENVINO_DIR (set by OpenVINO's own setupvars script)
4. The OS library search path (LD_LIBRARY_PATH, DYLD_LIBRARY_PATH or PATH)
5. The OS default installation locations
"""

import enum
import logging
import os
import re
import threading
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Iterator, List, Mapping, Optional, Tuple

from .conventions import CURRENT, PlatformConventions
from .errors import LibraryNotFound, PluginsXmlNotFound

logger = logging.getLogger(__name__)

ENV_OPENVINO_BUILD_DIR = "OPENVINO_BUILD_DIR"
ENV_OPENVINO_INSTALL_DIR = "OPENVINO_INSTALL_DIR"
ENV_INTEL_OPENVINO_DIR = "INTEL_OPENVINO_DIR"
ENV_OPENVINO_PLUGINS_XML = "OPENVINO_PLUGINS_XML"

PLUGINS_XML = "plugins.xml"


class SourceKind(enum.Enum):
    BUILD_DIR = "build directory"
    INSTALL_DIR = "install directory"
    SETUPVARS_DIR = "setupvars directory"
    LIBRARY_PATH = "library path"
    DEFAULT_DIR = "default location"


# Sources named explicitly through an environment variable
_OVERRIDE_KINDS = (SourceKind.BUILD_DIR, SourceKind.INSTALL_DIR, SourceKind.SETUPVARS_DIR)


@dataclass(frozen=True)
class CandidateSource:
    """One place to look: a root directory and the sub-paths probed under it."""

    kind: SourceKind
    root: Path
    subdirectories: Tuple[str, ...] = ("",)

    def directories(self) -> Iterator[Path]:
        for sub in self.subdirectories:
            yield self.root / sub if sub else self.root


@dataclass(frozen=True)
class SearchResult:
    """Outcome of one fresh search, including everything that was looked at."""

    name: str
    file_name: str
    path: Optional[Path]
    probed: Tuple[Path, ...]
    sources: Tuple[CandidateSource, ...]

    @property
    def found(self) -> bool:
        return self.path is not None


def _is_readable_file(path: Path) -> bool:
    # is_file() follows symlinks
    return path.is_file() and os.access(path, os.R_OK)


class Finder:
    """
    Locate OpenVINO libraries by logical name.

    Args:
        conventions: Platform naming and default locations. Defaults to the
            running platform.
        environ: Environment mapping to read. Defaults to the live ``os.environ``.

    Example:
        >>> finder = Finder()
        >>> finder.find("openvino_c")  # doctest: +SKIP
        PosixPath('/opt/intel/openvino/runtime/lib/intel64/libopenvino_c.so')
    """

    def __init__(
        self,
        conventions: Optional[PlatformConventions] = None,
        environ: Optional[Mapping[str, str]] = None,
    ):
        self.conventions = conventions if conventions is not None else CURRENT
        self._environ = environ if environ is not None else os.environ
        self._resolved: Dict[str, Path] = {}
        self._lock = threading.Lock()

    def _env_dir(self, variable: str) -> Optional[Path]:
        value = self._environ.get(variable, "").strip()
        return Path(value) if value else None

    def candidate_sources(self) -> List[CandidateSource]:
        """
        Return the sources to search, highest priority first.

        Unset environment variables contribute nothing.
        """
        conventions = self.conventions
        sources: List[CandidateSource] = []

        build_dir = self._env_dir(ENV_OPENVINO_BUILD_DIR)
        if build_dir is not None:
            sources.append(CandidateSource(
                SourceKind.BUILD_DIR, build_dir, conventions.build_subdirectories
            ))

        for variable, kind in (
            (ENV_OPENVINO_INSTALL_DIR, SourceKind.INSTALL_DIR),
            (ENV_INTEL_OPENVINO_DIR, SourceKind.SETUPVARS_DIR),
        ):
            install_dir = self._env_dir(variable)
            if install_dir is not None:
                sources.append(CandidateSource(
                    kind, install_dir, conventions.install_subdirectories
                ))

        search_path = self._environ.get(conventions.library_path_variable, "")
        for entry in conventions.split_search_path(search_path):
            sources.append(CandidateSource(SourceKind.LIBRARY_PATH, entry))

        for root in conventions.default_search_roots():
            sources.append(CandidateSource(
                SourceKind.DEFAULT_DIR, root.path, root.subdirectories
            ))

        return sources

    def search(self, name: str) -> SearchResult:
        """
        Run a fresh search for a library, ignoring any cached result.

        Args:
            name: Logical library name (e.g. "openvino_c").

        Returns:
            SearchResult with the path of the first hit (or None) and the
            ordered directories and sources inspected.
        """
        file_name = self.conventions.file_name(name)
        logger.info("Attempting to find library: %s", file_name)

        probed: List[Path] = []
        inspected: List[CandidateSource] = []
        for source in self.candidate_sources():
            if not source.root.is_dir():
                if source.kind in _OVERRIDE_KINDS:
                    logger.warning("Ignoring %s %s: not a directory", source.kind.value, source.root)
                elif source.kind is SourceKind.LIBRARY_PATH:
                    logger.debug("Skipping %s %s: not a directory", source.kind.value, source.root)
                continue
            inspected.append(source)
            for directory in source.directories():
                probed.append(directory)
                candidate = directory / file_name
                logger.debug("Searching in: %s", directory)
                if _is_readable_file(candidate):
                    path = Path(os.path.abspath(candidate))
                    logger.info("Found library at path: %s (%s)", path, source.kind.value)
                    return SearchResult(name, file_name, path, tuple(probed), tuple(inspected))

        return SearchResult(name, file_name, None, tuple(probed), tuple(inspected))

    def find(self, name: str) -> Path:
        """
        Find a library, reusing the path resolved earlier by this finder.

        Only hits are cached; a cached path is never replaced.

        Raises:
            LibraryNotFound: If no source contains the library file.
        """
        with self._lock:
            cached = self._resolved.get(name)
            if cached is not None:
                return cached
            result = self.search(name)
            if result.path is None:
                raise LibraryNotFound(name, result.file_name, result.probed)
            self._resolved[name] = result.path
            return result.path

    def cached(self, name: str) -> Optional[Path]:
        """Return the cached path for a library, if it was already found."""
        with self._lock:
            return self._resolved.get(name)

    def find_plugins_xml(self, library_name: str = "openvino_c") -> Path:
        """
        Find the plugins.xml file OpenVINO reads to map devices to plugin libraries.

        Checks OPENVINO_PLUGINS_XML, then the directory of the located
        library, then the latest ``openvino-<version>`` directory beside it
        (the layout of DEB/RPM installations).

        Raises:
            PluginsXmlNotFound: If no candidate exists.
        """
        override = self._environ.get(ENV_OPENVINO_PLUGINS_XML, "").strip()
        if override:
            return Path(override)

        try:
            library = self.find(library_name)
        except LibraryNotFound as e:
            raise PluginsXmlNotFound(None, e.probed) from e

        library_dir = library.parent
        candidates = [library_dir / PLUGINS_XML]
        latest = _latest_version_dir(library_dir, "openvino-")
        if latest is not None:
            candidates.append(latest / PLUGINS_XML)

        for candidate in candidates:
            logger.debug("Searching in: %s", candidate.parent)
            if candidate.is_file():
                logger.info("Found plugins.xml at path: %s", candidate)
                return candidate
        raise PluginsXmlNotFound(library, [c.parent for c in candidates])


def _version_key(version: str) -> Tuple:
    # numeric parts sort before and independently of text parts, so 2022.10 > 2022.3
    return tuple(
        (0, int(part), "") if part.isdigit() else (1, 0, part)
        for part in re.split(r"[.\-]", version)
    )


def _latest_version_dir(directory: Path, prefix: str) -> Optional[Path]:
    """Return the ``<prefix><version>`` sub-directory with the highest version."""
    try:
        entries = [e for e in directory.iterdir() if e.is_dir() and e.name.startswith(prefix)]
    except OSError:
        return None
    if not entries:
        return None
    return max(entries, key=lambda e: _version_key(e.name[len(prefix):]))


_default_finder: Optional[Finder] = None
_default_lock = threading.Lock()


def default_finder() -> Finder:
    """Return the process-wide finder used when none is injected."""
    global _default_finder
    with _default_lock:
        if _default_finder is None:
            _default_finder = Finder()
        return _default_finder


def find(name: str) -> Path:
    """Find a library with the process-wide finder; see Finder.find."""
    return default_finder().find(name)
