"""
The fixed set of OpenVINO C API entry points every binding must resolve.

Only the entry points needed to create a core, read and compile a model and
report errors live here; the rest of the C API is declared by the generated
binding layer on top of a bound handle.
"""

import ctypes
from typing import Any, NamedTuple, Optional, Sequence, Tuple

OPENVINO_C = "openvino_c"


class Signature(NamedTuple):
    """Name and ctypes prototype of one required entry point.

    ``argtypes`` of None leaves argument conversion to ctypes, which is
    required for variadic functions.
    """

    name: str
    restype: Any
    argtypes: Optional[Tuple[Any, ...]]


# Opaque pointer types
class ov_core_t(ctypes.Structure):
    pass


class ov_model_t(ctypes.Structure):
    pass


class ov_compiled_model_t(ctypes.Structure):
    pass


class ov_version_t(ctypes.Structure):
    _fields_ = [
        ("buildNumber", ctypes.c_char_p),
        ("description", ctypes.c_char_p),
    ]


class ov_available_devices_t(ctypes.Structure):
    _fields_ = [
        ("devices", ctypes.POINTER(ctypes.c_char_p)),
        ("size", ctypes.c_size_t),
    ]


ov_core_ptr = ctypes.POINTER(ov_core_t)
ov_model_ptr = ctypes.POINTER(ov_model_t)
ov_compiled_model_ptr = ctypes.POINTER(ov_compiled_model_t)

# ov_status_e
ov_status_e = ctypes.c_int
OV_STATUS_OK = 0


OPENVINO_C_MANIFEST: Tuple[Signature, ...] = (
    # Version and error reporting
    Signature("ov_get_openvino_version", ov_status_e, (ctypes.POINTER(ov_version_t),)),
    Signature("ov_version_free", None, (ctypes.POINTER(ov_version_t),)),
    Signature("ov_get_error_info", ctypes.c_char_p, (ov_status_e,)),
    Signature("ov_free", None, (ctypes.c_void_p,)),

    # Core
    Signature("ov_core_create", ov_status_e, (ctypes.POINTER(ov_core_ptr),)),
    Signature(
        "ov_core_create_with_config",
        ov_status_e,
        (ctypes.c_char_p, ctypes.POINTER(ov_core_ptr)),
    ),
    Signature("ov_core_free", None, (ov_core_ptr,)),
    Signature(
        "ov_core_get_available_devices",
        ov_status_e,
        (ov_core_ptr, ctypes.POINTER(ov_available_devices_t)),
    ),
    Signature("ov_available_devices_free", None, (ctypes.POINTER(ov_available_devices_t),)),

    # Models
    Signature(
        "ov_core_read_model",
        ov_status_e,
        (ov_core_ptr, ctypes.c_char_p, ctypes.c_char_p, ctypes.POINTER(ov_model_ptr)),
    ),
    Signature("ov_model_free", None, (ov_model_ptr,)),
    # variadic property list
    Signature("ov_core_compile_model", ov_status_e, None),
    Signature("ov_compiled_model_free", None, (ov_compiled_model_ptr,)),
)


def manifest_names(manifest: Sequence[Signature]) -> Tuple[str, ...]:
    """Return the entry point names of a manifest, in declaration order."""
    return tuple(sig.name for sig in manifest)


def apply_signature(func: Any, signature: Signature) -> None:
    """Configure a resolved ctypes function pointer for type safety."""
    if signature.argtypes is not None:
        func.argtypes = list(signature.argtypes)
    func.restype = signature.restype
