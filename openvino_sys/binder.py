"""
Bind a shared library image and its required entry points into one handle.

THREAD SAFETY:
=============
``bind`` itself runs on the calling thread without locking. Sharing one
bound library between threads goes through a BindState, which runs the
first bind exactly once and hands every caller the same handle (or the
same error). Once bound, a handle's symbol table is immutable and may be
read from any thread.

LIFETIME:
========
Entry points are only reachable through their LibraryHandle. The callables
it returns check on every call that the handle is still bound, so calling
into an unloaded image raises UseAfterUnbind instead of crashing.
"""

import enum
import logging
import os
import threading
from collections.abc import Mapping
from pathlib import Path
from typing import Any, Callable, Dict, Iterator, Optional, Sequence, Tuple, Union

from .errors import BindError, LoadFailed, SymbolNotFound, UseAfterUnbind
from .finder import Finder, default_finder
from .loader import CtypesLoader
from .manifest import OPENVINO_C_MANIFEST, Signature, apply_signature

logger = logging.getLogger(__name__)


class LinkMode(enum.Enum):
    """When the library is located and loaded."""

    # Fixed when the bindings are configured; failures surface immediately.
    BUILD_TIME = "dynamic"
    # Deferred until the first native call.
    RUNTIME_FIRST_USE = "runtime"


class BindStatus(enum.Enum):
    UNBOUND = "unbound"
    LOADING = "loading"
    BOUND = "bound"
    FAILED = "failed"


class SymbolTable(Mapping):
    """Immutable mapping from entry point name to resolved function pointer."""

    def __init__(self, functions: Dict[str, Any]):
        self._functions = dict(functions)

    def __getitem__(self, name: str) -> Any:
        return self._functions[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._functions)

    def __len__(self) -> int:
        return len(self._functions)

    def __repr__(self) -> str:
        return f"<SymbolTable {len(self)} symbols>"


class BoundFunction:
    """A native entry point reachable only while its handle is bound."""

    __slots__ = ("_handle", "name")

    def __init__(self, handle: "LibraryHandle", name: str):
        self._handle = handle
        self.name = name

    def __call__(self, *args: Any) -> Any:
        return self._handle._call(self.name, args)

    def __repr__(self) -> str:
        return f"<BoundFunction {self.name} of {self._handle.path}>"


class LibraryHandle:
    """
    A loaded library image and its resolved entry points.

    The handle owns the OS image; every function obtained from it shares its
    lifetime. Use it as a context manager or call ``unbind()`` explicitly.

    Example:
        >>> with bind("openvino_c") as handle:  # doctest: +SKIP
        ...     core = ov_core_ptr()
        ...     handle.ov_core_create(ctypes.byref(core))
    """

    def __init__(self, path: Path, image: Any, symbols: SymbolTable, loader: Any):
        self._path = path
        self._image = image
        self._symbols = symbols
        self._loader = loader
        self._names = frozenset(symbols)
        self._bound = True

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.unbind()
        return False

    @property
    def path(self) -> Path:
        """Path the image was loaded from."""
        return self._path

    @property
    def is_bound(self) -> bool:
        return self._bound

    @property
    def symbol_names(self) -> frozenset:
        """Names of every resolved entry point."""
        return self._names

    def function(self, name: str) -> BoundFunction:
        """
        Get a callable for a resolved entry point.

        Raises:
            UseAfterUnbind: If the handle was already released.
            KeyError: If ``name`` is not part of the bound manifest.
        """
        if not self._bound:
            raise UseAfterUnbind(name, self._path)
        if name not in self._names:
            raise KeyError(name)
        return BoundFunction(self, name)

    def __getattr__(self, name: str) -> BoundFunction:
        # Only called for names not found normally; keep private lookups out.
        if name.startswith("_"):
            raise AttributeError(name)
        try:
            return self.function(name)
        except KeyError:
            raise AttributeError(
                f"'{type(self).__name__}' has no entry point '{name}'"
            ) from None

    def __contains__(self, name: str) -> bool:
        return name in self._names

    def _call(self, name: str, args: Tuple[Any, ...]) -> Any:
        if not self._bound:
            raise UseAfterUnbind(name, self._path)
        return self._symbols[name](*args)

    def unbind(self) -> None:
        """Release the image. Every function obtained from this handle becomes unusable."""
        if not self._bound:
            return
        self._bound = False
        self._symbols = SymbolTable({})
        image, self._image = self._image, None
        self._loader.close(image)
        logger.info("Unloaded library: %s", self._path)

    def __repr__(self) -> str:
        state = "bound" if self._bound else "unbound"
        return f"<LibraryHandle {self._path} ({state}, {len(self._names)} symbols)>"


def _is_explicit_path(library: Union[str, "os.PathLike[str]"]) -> bool:
    if not isinstance(library, str):
        return True
    return os.sep in library or (os.altsep is not None and os.altsep in library)


def bind(
    library: Union[str, "os.PathLike[str]"],
    link_mode: LinkMode = LinkMode.RUNTIME_FIRST_USE,
    *,
    manifest: Sequence[Signature] = OPENVINO_C_MANIFEST,
    finder: Optional[Finder] = None,
    loader: Optional[Any] = None,
) -> LibraryHandle:
    """
    Load a library and resolve every entry point of a manifest.

    Either the whole manifest resolves and a handle is returned, or an
    error is raised and nothing stays loaded.

    Args:
        library: Logical name (e.g. "openvino_c") searched with the finder,
            or an explicit path (any path-like, or a string containing a
            path separator) that is loaded without searching.
        link_mode: Recorded for diagnostics; both modes bind the same way,
            they differ in when the caller invokes ``bind``.
        manifest: Entry points that must resolve.
        finder: Locator for logical names. Defaults to the process-wide finder.
        loader: Image loader. Defaults to CtypesLoader.

    Returns:
        A bound LibraryHandle.

    Raises:
        LibraryNotFound: If a logical name cannot be located.
        LoadFailed: If the system loader rejects the image.
        SymbolNotFound: If a manifest entry point is missing.
    """
    if loader is None:
        loader = CtypesLoader()

    if _is_explicit_path(library):
        path = Path(library)
        logger.debug("Binding %s from explicit path (%s link)", path, link_mode.value)
    else:
        if finder is None:
            finder = default_finder()
        path = finder.find(library)
        logger.debug("Binding %s from located path %s (%s link)", library, path, link_mode.value)

    try:
        image = loader.open(path)
    except OSError as e:
        raise LoadFailed(path, str(e)) from e
    logger.info("Loaded library: %s", path)

    functions: Dict[str, Any] = {}
    try:
        for signature in manifest:
            func = loader.symbol(image, signature.name)
            if func is None:
                raise SymbolNotFound(signature.name, path)
            apply_signature(func, signature)
            functions[signature.name] = func
    except BaseException as e:
        logger.debug("Resolving symbols in %s failed (%s); unloading", path, e)
        loader.close(image)
        raise
    logger.debug("Resolved %d symbols in %s", len(functions), path)

    return LibraryHandle(path, image, SymbolTable(functions), loader)


class BindState:
    """
    Holds the single bind outcome for one library.

    The transition out of UNBOUND happens under a lock, so concurrent first
    callers run exactly one bind and all see its outcome. Failures are sticky:
    the same error is raised to every later caller until ``reset()``.

    A held handle that a caller unbinds directly (e.g. by leaving a ``with``
    block) counts as UNBOUND; the next ``get_or_bind`` binds again.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._status = BindStatus.UNBOUND
        self._handle: Optional[LibraryHandle] = None
        self._error: Optional[BindError] = None
        self.attempts = 0

    @property
    def status(self) -> BindStatus:
        if self._status is BindStatus.BOUND and not self._handle.is_bound:
            return BindStatus.UNBOUND
        return self._status

    @property
    def handle(self) -> Optional[LibraryHandle]:
        handle = self._handle
        if handle is not None and not handle.is_bound:
            return None
        return handle

    @property
    def error(self) -> Optional[BindError]:
        return self._error

    def get_or_bind(self, binder: Callable[[], LibraryHandle]) -> LibraryHandle:
        """
        Return the bound handle, running ``binder`` if nothing was attempted yet.

        Raises:
            BindError: The error of the one bind attempt, replayed on every call.
        """
        with self._lock:
            if self._status is BindStatus.BOUND:
                if self._handle.is_bound:
                    return self._handle
                # unbound by a caller holding the shared handle
                logger.debug("Held handle %s was unbound; binding again", self._handle.path)
                self._handle = None
                self._status = BindStatus.UNBOUND
            if self._status is BindStatus.FAILED:
                raise self._error.with_traceback(None)

            self._status = BindStatus.LOADING
            self.attempts += 1
            try:
                handle = binder()
            except BindError as e:
                self._status = BindStatus.FAILED
                self._error = e
                logger.info("Binding failed; the error is kept for later callers: %s", e)
                raise
            except BaseException:
                self._status = BindStatus.UNBOUND
                raise
            self._handle = handle
            self._status = BindStatus.BOUND
            return handle

    def release(self) -> None:
        """Unbind the held handle, if any, and return to UNBOUND."""
        with self._lock:
            if self._status is not BindStatus.BOUND:
                return
            handle, self._handle = self._handle, None
            self._status = BindStatus.UNBOUND
            handle.unbind()

    def reset(self) -> None:
        """Release any handle and forget a cached failure."""
        with self._lock:
            handle, self._handle = self._handle, None
            self._error = None
            self._status = BindStatus.UNBOUND
        if handle is not None:
            handle.unbind()

    def __repr__(self) -> str:
        return f"<BindState {self._status.value}>"
