"""
Shared fixtures for the openvino-sys tests.

Tests never touch the real environment or the system's OpenVINO install:
finders get an explicit environ mapping and conventions whose default
locations point into tmp_path, and binders get a counting fake loader.
"""

import os
import sys
import threading
import time
from pathlib import Path
from typing import Dict, Iterable, List, Optional

import pytest

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from openvino_sys.conventions import LinuxConventions
from openvino_sys.finder import Finder
from openvino_sys.manifest import OPENVINO_C_MANIFEST, manifest_names

LIBRARY_NAME = "openvino_c"
LIBRARY_FILE = "libopenvino_c.so"


class FixtureConventions(LinuxConventions):
    """Linux file naming with default locations under a test directory."""

    path_separator = os.pathsep

    def __init__(self, system_directories: Iterable[Path] = (),
                 default_install_directories: Iterable[Path] = ()):
        self.system_directories = tuple(str(d) for d in system_directories)
        self.default_install_directories = tuple(str(d) for d in default_install_directories)


def make_library(directory: Path, file_name: str = LIBRARY_FILE) -> Path:
    """Create a placeholder library file, with parent directories."""
    directory.mkdir(parents=True, exist_ok=True)
    path = directory / file_name
    path.write_bytes(b"\x7fELF placeholder")
    return path


class FakeImage:
    def __init__(self, path: Path):
        self.path = path
        self.closed = False


class FakeLoader:
    """
    Image loader double that counts loads and unloads.

    Args:
        symbols: Exported symbol names. Defaults to the full OpenVINO manifest.
        error: If set, every open fails with OSError(error).
        delay: Seconds to sleep inside open, to widen race windows.
    """

    def __init__(self, symbols: Optional[Iterable[str]] = None,
                 error: Optional[str] = None, delay: float = 0.0):
        if symbols is None:
            symbols = manifest_names(OPENVINO_C_MANIFEST)
        self.symbols = set(symbols)
        self.error = error
        self.delay = delay
        self.open_calls = 0
        self.loads = 0
        self.unloads = 0
        self.images: List[FakeImage] = []
        self._lock = threading.Lock()

    def open(self, path: Path) -> FakeImage:
        with self._lock:
            self.open_calls += 1
        if self.delay:
            time.sleep(self.delay)
        if self.error is not None:
            raise OSError(self.error)
        if not Path(path).exists():
            raise OSError(f"{path}: cannot open shared object file: No such file or directory")
        image = FakeImage(Path(path))
        with self._lock:
            self.loads += 1
            self.images.append(image)
        return image

    def symbol(self, image: FakeImage, name: str):
        if name not in self.symbols:
            return None

        def entry(*args):
            return (name, args)

        entry.__name__ = name
        return entry

    def close(self, image: FakeImage) -> None:
        assert not image.closed, "image closed twice"
        image.closed = True
        with self._lock:
            self.unloads += 1

    @property
    def live_images(self) -> List[FakeImage]:
        return [image for image in self.images if not image.closed]


class FixedFinder:
    """Finder double that always returns one path and counts lookups."""

    def __init__(self, path: Path):
        self.path = path
        self.calls = 0

    def find(self, name: str) -> Path:
        self.calls += 1
        return self.path


class ExplodingFinder:
    """Finder double that fails the test if a search is attempted."""

    def find(self, name: str) -> Path:
        raise AssertionError(f"library search attempted for {name!r}")


@pytest.fixture
def environ() -> Dict[str, str]:
    """An empty environment; tests add only the variables they need."""
    return {}


@pytest.fixture
def conventions() -> FixtureConventions:
    return FixtureConventions()


@pytest.fixture
def finder(conventions, environ) -> Finder:
    return Finder(conventions=conventions, environ=environ)


@pytest.fixture
def library_file(tmp_path) -> Path:
    return make_library(tmp_path / "lib")


@pytest.fixture
def loader() -> FakeLoader:
    return FakeLoader()
