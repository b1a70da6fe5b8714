"""
Standard error message formatting and exception types for openvino-sys.

Every failure raised while locating or binding the OpenVINO libraries uses
the same message format:

    [Component] Operation failed: {reason}. Expected: {expected}.
"""

from pathlib import Path
from typing import Dict, Optional, Sequence


# Error codes
OV_LINK_OK = 0
OV_LINK_ERR_NOT_FOUND = -1
OV_LINK_ERR_LOAD = -2
OV_LINK_ERR_SYMBOL = -3
OV_LINK_ERR_UNBOUND = -4
OV_LINK_ERR_DISABLED = -5
OV_LINK_ERR_PLUGINS_XML = -6
OV_LINK_ERR_CONFIG = -7


# Error code to component mapping
_ERROR_COMPONENTS: Dict[int, str] = {
    OV_LINK_ERR_NOT_FOUND: "Finder",
    OV_LINK_ERR_LOAD: "Loader",
    OV_LINK_ERR_SYMBOL: "Binder",
    OV_LINK_ERR_UNBOUND: "Handle",
    OV_LINK_ERR_DISABLED: "Linker",
    OV_LINK_ERR_PLUGINS_XML: "Finder",
    OV_LINK_ERR_CONFIG: "Config",
}


# Error code to expected behavior mapping
_ERROR_EXPECTATIONS: Dict[int, str] = {
    OV_LINK_ERR_NOT_FOUND: (
        "Set OPENVINO_INSTALL_DIR or OPENVINO_BUILD_DIR to an OpenVINO tree, "
        "source the OpenVINO setupvars script, or add the library directory "
        "to the library search path"
    ),
    OV_LINK_ERR_LOAD: (
        "A shared library built for this platform with all of its "
        "dependencies resolvable by the system loader"
    ),
    OV_LINK_ERR_SYMBOL: "An OpenVINO C API library exporting every required entry point",
    OV_LINK_ERR_UNBOUND: "Library handle must be bound before calling its entry points",
    OV_LINK_ERR_DISABLED: "Unset OPENVINO_SKIP_LINKING to call into the OpenVINO libraries",
    OV_LINK_ERR_PLUGINS_XML: (
        "Set OPENVINO_PLUGINS_XML or install plugins.xml beside the OpenVINO libraries"
    ),
    OV_LINK_ERR_CONFIG: "Valid link configuration values",
}


def format_error(component: str, operation: str, reason: str, expected: str) -> str:
    """
    Format an error message according to the standard format.

    Args:
        component: The component that failed (Finder, Loader, Binder, etc.)
        operation: The operation that failed
        reason: Detailed explanation of what went wrong
        expected: What was expected or how to fix the issue

    Returns:
        Formatted error message.

    Example:
        >>> format_error("Loader", "Load library", "file too short", "A valid image")
        '[Loader] Load library failed: file too short. Expected: A valid image.'
    """
    return f"[{component}] {operation} failed: {reason}. Expected: {expected}."


def get_component_for_error_code(code: int) -> str:
    """Get the component name for an error code."""
    return _ERROR_COMPONENTS.get(code, "Linker")


def get_expectation_for_error_code(code: int) -> str:
    """Get the expected behavior for an error code."""
    return _ERROR_EXPECTATIONS.get(code, "Valid input and proper usage")


def format_standardized_error(
    code: int,
    detail: str,
    operation: Optional[str] = None,
    context: Optional[str] = None
) -> str:
    """
    Format a standardized error message from an error code and detail.

    The component and expected behavior are derived from the error code.

    Args:
        code: Error code (e.g., OV_LINK_ERR_LOAD)
        detail: What went wrong
        operation: Optional operation description (auto-generated if not provided)
        context: Optional context information

    Returns:
        Formatted error message.
    """
    component = get_component_for_error_code(code)
    expected = get_expectation_for_error_code(code)

    if operation is None:
        operation = _get_default_operation(code)

    if context:
        operation = f"{operation} ({context})"

    return format_error(component, operation, detail, expected)


def _get_default_operation(code: int) -> str:
    """Get default operation name for an error code."""
    operations = {
        OV_LINK_ERR_NOT_FOUND: "Locate library",
        OV_LINK_ERR_LOAD: "Load library",
        OV_LINK_ERR_SYMBOL: "Resolve symbol",
        OV_LINK_ERR_UNBOUND: "Call entry point",
        OV_LINK_ERR_DISABLED: "Call entry point",
        OV_LINK_ERR_PLUGINS_XML: "Locate plugins.xml",
        OV_LINK_ERR_CONFIG: "Read link configuration",
    }
    return operations.get(code, "Link operation")


def format_not_found_error(file_name: str, probed: Sequence[Path]) -> str:
    """
    Format a library search failure.

    Args:
        file_name: Platform file name that was searched for
        probed: Directories checked, in search order

    Returns:
        Formatted error message listing every probed directory.
    """
    if probed:
        where = ", ".join(str(p) for p in probed)
        detail = f"not found in {len(probed)} probed directories ({where})"
    else:
        detail = "no search location was available"
    return format_standardized_error(
        OV_LINK_ERR_NOT_FOUND, detail, operation=f"Locate library '{file_name}'"
    )


def format_load_error(path: Path, diagnostic: str) -> str:
    """Format an OS-level load failure, keeping the loader diagnostic verbatim."""
    return format_standardized_error(
        OV_LINK_ERR_LOAD, diagnostic, operation=f"Load library '{path}'"
    )


def format_symbol_error(symbol: str, path: Path) -> str:
    """Format a missing entry point failure."""
    return format_standardized_error(
        OV_LINK_ERR_SYMBOL,
        f"symbol '{symbol}' is missing from the loaded image",
        operation=f"Resolve symbols in '{path}'"
    )


def format_unbound_error(symbol: str) -> str:
    """Format a call through a released handle."""
    return format_standardized_error(
        OV_LINK_ERR_UNBOUND,
        "Library handle already unbound",
        operation=f"Call '{symbol}'"
    )


class BindError(Exception):
    """
    Base exception for library location and binding failures.

    All messages follow the standard format:
    [Component] Operation failed: {reason}. Expected: {expected}.

    Attributes:
        message: Formatted error message
        code: Error code (e.g., OV_LINK_ERR_LOAD)
        context: Additional context dictionary
    """

    code = OV_LINK_OK

    def __init__(self, message: str, code: Optional[int] = None, context: Optional[dict] = None):
        self.message = message
        if code is not None:
            self.code = code
        self.context = context or {}
        super().__init__(message)


class LibraryNotFound(BindError):
    """No candidate source contained the library file."""

    code = OV_LINK_ERR_NOT_FOUND

    def __init__(self, name: str, file_name: str, probed: Sequence[Path]):
        self.name = name
        self.file_name = file_name
        self.probed = list(probed)
        super().__init__(
            format_not_found_error(file_name, self.probed),
            context={"name": name, "file_name": file_name, "probed": self.probed},
        )


class LoadFailed(BindError):
    """The OS loader refused the image; ``diagnostic`` is its message verbatim."""

    code = OV_LINK_ERR_LOAD

    def __init__(self, path: Path, diagnostic: str):
        self.path = path
        self.diagnostic = diagnostic
        super().__init__(
            format_load_error(path, diagnostic),
            context={"path": path, "diagnostic": diagnostic},
        )


class SymbolNotFound(BindError):
    """The loaded image lacks a required entry point."""

    code = OV_LINK_ERR_SYMBOL

    def __init__(self, symbol: str, path: Path):
        self.symbol = symbol
        self.path = path
        super().__init__(
            format_symbol_error(symbol, path),
            context={"symbol": symbol, "path": path},
        )


class UseAfterUnbind(BindError):
    """An entry point was called after its owning handle was released."""

    code = OV_LINK_ERR_UNBOUND

    def __init__(self, symbol: str, path: Optional[Path] = None):
        self.symbol = symbol
        self.path = path
        super().__init__(
            format_unbound_error(symbol),
            context={"symbol": symbol, "path": path},
        )


class LinkingDisabled(BindError):
    """Linking was skipped by configuration, so there is no handle to call into."""

    code = OV_LINK_ERR_DISABLED

    def __init__(self, name: str, symbol: Optional[str] = None):
        self.name = name
        self.symbol = symbol
        operation = f"Call '{symbol}'" if symbol else f"Bind library '{name}'"
        super().__init__(
            format_standardized_error(
                OV_LINK_ERR_DISABLED,
                "Linking is disabled by OPENVINO_SKIP_LINKING",
                operation=operation,
            ),
            context={"name": name, "symbol": symbol},
        )


class PluginsXmlNotFound(BindError):
    """The ``plugins.xml`` device configuration could not be located."""

    code = OV_LINK_ERR_PLUGINS_XML

    def __init__(self, library_path: Optional[Path], probed: Sequence[Path] = ()):
        self.library_path = library_path
        self.probed = list(probed)
        if library_path is None:
            detail = "the OpenVINO C library itself could not be located"
        else:
            detail = f"no plugins.xml beside '{library_path}'"
        super().__init__(
            format_standardized_error(OV_LINK_ERR_PLUGINS_XML, detail),
            context={"library_path": library_path, "probed": self.probed},
        )


class ConfigError(BindError, ValueError):
    """An environment variable holds a value the link configuration cannot use."""

    code = OV_LINK_ERR_CONFIG

    def __init__(self, variable: str, value: str, allowed: Sequence[str]):
        self.variable = variable
        self.value = value
        self.allowed = list(allowed)
        super().__init__(
            format_error(
                "Config",
                f"Read {variable}",
                f"unsupported value '{value}'",
                "One of " + ", ".join(repr(a) for a in self.allowed),
            ),
            context={"variable": variable, "value": value},
        )
