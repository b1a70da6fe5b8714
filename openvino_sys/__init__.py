"""
openvino-sys: locate and bind the OpenVINO C API shared libraries.

Example:
    >>> import openvino_sys
    >>> openvino_sys.get_library_path()  # doctest: +SKIP
    PosixPath('/opt/intel/openvino/runtime/lib/intel64/libopenvino_c.so')
    >>> handle = openvino_sys.load_library()  # doctest: +SKIP
    >>> sorted(handle.symbol_names)[:2]  # doctest: +SKIP
    ['ov_available_devices_free', 'ov_compiled_model_free']
"""

from .binder import (
    BindState,
    BindStatus,
    BoundFunction,
    LibraryHandle,
    LinkMode,
    SymbolTable,
    bind,
)
from .config import LinkConfig
from .conventions import CURRENT, PlatformConventions, conventions_for
from .errors import (
    BindError,
    ConfigError,
    LibraryNotFound,
    LinkingDisabled,
    LoadFailed,
    PluginsXmlNotFound,
    SymbolNotFound,
    UseAfterUnbind,
)
from .finder import CandidateSource, Finder, SearchResult, SourceKind, find
from .lib import Library, default_library, get_library_path, load_library, state_for
from .loader import CtypesLoader
from .manifest import OPENVINO_C, OPENVINO_C_MANIFEST, Signature

__version__ = "0.1.0"
__all__ = [
    "BindError",
    "BindState",
    "BindStatus",
    "BoundFunction",
    "CandidateSource",
    "ConfigError",
    "CtypesLoader",
    "CURRENT",
    "Finder",
    "Library",
    "LibraryHandle",
    "LibraryNotFound",
    "LinkConfig",
    "LinkMode",
    "LinkingDisabled",
    "LoadFailed",
    "OPENVINO_C",
    "OPENVINO_C_MANIFEST",
    "PlatformConventions",
    "PluginsXmlNotFound",
    "SearchResult",
    "Signature",
    "SourceKind",
    "SymbolNotFound",
    "SymbolTable",
    "UseAfterUnbind",
    "bind",
    "conventions_for",
    "default_library",
    "find",
    "get_library_path",
    "load_library",
    "state_for",
]
