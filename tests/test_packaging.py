"""
Packaging and public API checks for openvino-sys.

Tests verify that:
1. The package ships a py.typed marker for PEP 561
2. Everything in __all__ exists at runtime
3. Public entry points carry usable type hints
"""

import sys
from pathlib import Path

import pytest


def test_py_typed_marker_exists():
    """Verify py.typed marker file exists for PEP 561 compliance."""
    import openvino_sys

    module_path = Path(openvino_sys.__file__).parent
    py_typed = module_path / "py.typed"

    assert py_typed.exists(), "py.typed marker file must exist"
    assert py_typed.is_file(), "py.typed must be a file"


def test_error_codes_exported():
    """Verify error codes are integers and unique."""
    from openvino_sys import errors

    codes = [getattr(errors, name) for name in dir(errors) if name.startswith("OV_LINK_")]

    assert len(codes) == 8
    assert all(isinstance(code, int) for code in codes)
    assert len(set(codes)) == len(codes)


def test_public_api_exported():
    """Verify all public API is exported in __all__."""
    import openvino_sys

    expected_exports = [
        "Finder",
        "Library",
        "LibraryHandle",
        "LinkConfig",
        "LinkMode",
        "BindError",
        "LibraryNotFound",
        "LoadFailed",
        "SymbolNotFound",
        "UseAfterUnbind",
        "bind",
        "find",
        "get_library_path",
        "load_library",
    ]

    assert hasattr(openvino_sys, "__all__"), "__all__ must be defined"
    all_exports = set(openvino_sys.__all__)

    for name in expected_exports:
        assert name in all_exports, f"{name} must be in __all__"
        assert hasattr(openvino_sys, name), f"{name} must be exported"


def test_no_unused_constants_exported():
    """Only the C API that has a manifest is exported by logical name."""
    import openvino_sys

    constants = {name for name in openvino_sys.__all__ if name.isupper()}
    assert constants == {"CURRENT", "OPENVINO_C", "OPENVINO_C_MANIFEST"}


def test_type_completeness():
    """All __all__ exports should exist at runtime."""
    import openvino_sys

    for name in openvino_sys.__all__:
        assert hasattr(openvino_sys, name), f"{name} in __all__ but not found at runtime"


def test_exceptions_share_base():
    import openvino_sys

    for name in openvino_sys.__all__:
        value = getattr(openvino_sys, name)
        if isinstance(value, type) and issubclass(value, Exception):
            assert issubclass(value, openvino_sys.BindError)


def test_context_manager_protocol():
    """LibraryHandle supports the context manager protocol."""
    from openvino_sys import LibraryHandle

    assert hasattr(LibraryHandle, "__enter__")
    assert hasattr(LibraryHandle, "__exit__")


@pytest.mark.skipif(sys.version_info < (3, 9), reason="Type hints require Python 3.9+")
def test_runtime_type_hints():
    """Verify runtime type hints are accessible (Python 3.9+)."""
    from typing import get_type_hints

    from openvino_sys import Finder, bind

    assert get_type_hints(Finder.find)["return"] is Path
    assert "return" in get_type_hints(bind)


def test_version_attribute():
    """Verify __version__ attribute exists and is correct type."""
    import openvino_sys

    assert isinstance(openvino_sys.__version__, str)
    parts = openvino_sys.__version__.split(".")
    assert len(parts) >= 2, "Version should be in semantic format (e.g., 1.0.0)"


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
