"""Tests against a real system library through ctypes."""

import ctypes
import ctypes.util
import sys
from pathlib import Path

import pytest

from openvino_sys.binder import bind
from openvino_sys.errors import LoadFailed, SymbolNotFound
from openvino_sys.loader import CtypesLoader
from openvino_sys.manifest import Signature

LIBC = ctypes.util.find_library("c")

pytestmark = pytest.mark.skipif(
    not sys.platform.startswith("linux") or LIBC is None,
    reason="needs a Linux C library",
)

# a bare soname; wrapping it in Path skips the OpenVINO search
LIBC_PATH = Path(LIBC) if LIBC else None

STRLEN = [Signature("strlen", ctypes.c_size_t, (ctypes.c_char_p,))]


@pytest.fixture
def ctypes_loader():
    return CtypesLoader()


def test_symbol_lookup(ctypes_loader):
    image = ctypes_loader.open(LIBC)

    assert ctypes_loader.symbol(image, "strlen") is not None
    assert ctypes_loader.symbol(image, "ov_core_create") is None


def test_bind_and_call(ctypes_loader):
    with bind(LIBC_PATH, manifest=STRLEN, loader=ctypes_loader) as handle:
        assert handle.strlen(b"hello") == 5


def test_missing_symbol(ctypes_loader):
    manifest = STRLEN + [Signature("ov_core_create", ctypes.c_int, None)]

    with pytest.raises(SymbolNotFound) as exc_info:
        bind(LIBC_PATH, manifest=manifest, loader=ctypes_loader)

    assert exc_info.value.symbol == "ov_core_create"


def test_not_a_library(tmp_path, ctypes_loader):
    bogus = tmp_path / "libopenvino_c.so"
    bogus.write_text("not an ELF image")

    with pytest.raises(LoadFailed) as exc_info:
        bind(bogus, loader=ctypes_loader)

    assert exc_info.value.path == bogus
    assert exc_info.value.diagnostic


class CountingLoader(CtypesLoader):
    def __init__(self):
        super().__init__()
        self.closes = 0

    def close(self, image):
        self.closes += 1
        super().close(image)


def test_rejected_signature_unloads():
    loader = CountingLoader()
    manifest = [Signature("strlen", ctypes.c_size_t, (object,))]

    with pytest.raises(TypeError):
        bind(LIBC_PATH, manifest=manifest, loader=loader)

    assert loader.closes == 1
