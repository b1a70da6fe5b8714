"""
OS-level shared library loading through ctypes.

The binder talks to an image loader with three operations (open, symbol,
close) so tests can substitute a counting fake for the real loader.
"""

import ctypes
import logging
import sys
from pathlib import Path
from typing import Any, Callable, Optional

import _ctypes

logger = logging.getLogger(__name__)

# RTLD_LOCAL keeps OpenVINO's symbols out of the global namespace.
PREFERRED_LOAD_FLAG = getattr(ctypes, "RTLD_LOCAL", 0)


class CtypesLoader:
    """
    Open, query and close shared library images with ctypes.

    Args:
        mode: dlopen flags passed to ``ctypes.CDLL`` (ignored on Windows).
    """

    def __init__(self, mode: int = PREFERRED_LOAD_FLAG):
        self.mode = mode

    def open(self, path: Path) -> ctypes.CDLL:
        """
        Load the image at ``path``.

        Raises:
            OSError: If the system loader rejects the file (missing file or
                dependency, wrong architecture, permissions).
        """
        return ctypes.CDLL(str(path), mode=self.mode)

    def symbol(self, image: ctypes.CDLL, name: str) -> Optional[Callable[..., Any]]:
        """
        Look up an exported function.

        Returns:
            A fresh ctypes function pointer, or None if the symbol is
            missing or resolves to a null address.
        """
        try:
            func = image[name]
        except AttributeError:
            return None
        if not ctypes.cast(func, ctypes.c_void_p).value:
            return None
        return func

    def close(self, image: ctypes.CDLL) -> None:
        """Release the OS handle; function pointers from ``image`` become invalid."""
        if sys.platform == "win32":
            _ctypes.FreeLibrary(image._handle)
        else:
            _ctypes.dlclose(image._handle)
        logger.debug("Closed image %s", image._name)
