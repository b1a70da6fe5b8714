"""
Library loading utilities for the OpenVINO C API.

A Library ties a logical library name to a link configuration and a
BindState. The module-level helpers share one BindState per logical name
across the process, so the default API never loads the same library twice.
"""

import logging
import threading
from pathlib import Path
from typing import Any, Dict, Optional, Sequence

from .binder import BindState, LibraryHandle, LinkMode, bind
from .config import LinkConfig
from .errors import LibraryNotFound, LinkingDisabled
from .finder import Finder, default_finder
from .manifest import OPENVINO_C, OPENVINO_C_MANIFEST, Signature, manifest_names

logger = logging.getLogger(__name__)


class LazyFunction:
    """Entry point that binds its library on first call."""

    __slots__ = ("_library", "name")

    def __init__(self, library: "Library", name: str):
        self._library = library
        self.name = name

    def __call__(self, *args: Any) -> Any:
        if self._library.config.skip_linking:
            raise LinkingDisabled(self._library.name, self.name)
        return self._library.handle().function(self.name)(*args)

    def __repr__(self) -> str:
        return f"<LazyFunction {self.name} of {self._library.name}>"


class Library:
    """
    An OpenVINO library bound according to a link configuration.

    With ``LinkMode.BUILD_TIME`` the library is bound in the constructor from
    ``config.lib_path`` (or the library search when no path is configured),
    so failures surface immediately. With ``LinkMode.RUNTIME_FIRST_USE``
    nothing is loaded until ``handle()``, ``load()`` or the first entry
    point call. With ``config.skip_linking`` nothing is ever loaded.

    Args:
        name: Logical library name.
        config: Link configuration. Defaults to ``LinkConfig.from_env()``.
        manifest: Entry points that must resolve.
        finder: Locator for the logical name.
        loader: Image loader passed to ``bind``.
        state: Bind state holder. Defaults to a fresh, private BindState.

    Example:
        >>> ov = Library()
        >>> core = ov_core_ptr()  # doctest: +SKIP
        >>> ov.ov_core_create(ctypes.byref(core))  # loads on first call  # doctest: +SKIP
    """

    def __init__(
        self,
        name: str = OPENVINO_C,
        config: Optional[LinkConfig] = None,
        *,
        manifest: Sequence[Signature] = OPENVINO_C_MANIFEST,
        finder: Optional[Finder] = None,
        loader: Optional[Any] = None,
        state: Optional[BindState] = None,
    ):
        self.name = name
        self.config = config if config is not None else LinkConfig.from_env()
        self._manifest = tuple(manifest)
        self._names = frozenset(manifest_names(self._manifest))
        self._finder = finder
        self._loader = loader
        self._state = state if state is not None else BindState()

        if self.config.skip_linking:
            logger.info("Linking of %s skipped by configuration", name)
        elif self.config.link_mode is LinkMode.BUILD_TIME:
            self.handle()

    @property
    def state(self) -> BindState:
        return self._state

    def _bind(self) -> LibraryHandle:
        target = self.config.lib_path if self.config.lib_path is not None else self.name
        return bind(
            target,
            self.config.link_mode,
            manifest=self._manifest,
            finder=self._finder,
            loader=self._loader,
        )

    def handle(self) -> LibraryHandle:
        """
        Return the bound handle, binding on first use.

        Raises:
            LinkingDisabled: If linking is skipped by configuration.
            BindError: The (cached) failure of the one bind attempt.
        """
        if self.config.skip_linking:
            raise LinkingDisabled(self.name)
        return self._state.get_or_bind(self._bind)

    def load(self) -> None:
        """Bind now instead of on first call."""
        self.handle()

    def find(self) -> Optional[Path]:
        """
        Return the path this library links (or will link) to, if known.

        A configured ``lib_path`` is returned as is; otherwise the path of the
        bound handle, or the result of the library search.
        """
        if self.config.lib_path is not None:
            return self.config.lib_path
        handle = self._state.handle
        if handle is not None:
            return handle.path
        finder = self._finder if self._finder is not None else default_finder()
        try:
            return finder.find(self.name)
        except LibraryNotFound:
            return None

    def unload(self) -> None:
        """Release the handle; the next call binds again."""
        self._state.release()

    def __getattr__(self, name: str) -> LazyFunction:
        if name.startswith("_") or name not in self._names:
            raise AttributeError(f"'{type(self).__name__}' has no entry point '{name}'")
        return LazyFunction(self, name)

    def __repr__(self) -> str:
        return f"<Library {self.name} ({self.config.link_mode.value}, {self._state.status.value})>"


# Process-wide bind state, one per logical library name
_STATES: Dict[str, BindState] = {}
_LIBRARIES: Dict[str, Library] = {}
_REGISTRY_LOCK = threading.Lock()


def state_for(name: str) -> BindState:
    """Return the process-wide BindState for a logical library name."""
    with _REGISTRY_LOCK:
        state = _STATES.get(name)
        if state is None:
            state = _STATES[name] = BindState()
        return state


def default_library(name: str = OPENVINO_C) -> Library:
    """
    Return the process-wide Library for a logical name, configured from the environment.

    Raises:
        BindError: In build-time link mode, if the eager bind fails.
    """
    with _REGISTRY_LOCK:
        library = _LIBRARIES.get(name)
    if library is not None:
        return library
    library = Library(name, state=state_for(name))
    with _REGISTRY_LOCK:
        return _LIBRARIES.setdefault(name, library)


def get_library_path() -> Optional[Path]:
    """
    Find the OpenVINO C library.

    Returns:
        Path to the library, or None if not found.
    """
    return default_library().find()


def load_library(path: Optional[Path] = None) -> LibraryHandle:
    """
    Load the OpenVINO C library.

    Args:
        path: Optional explicit path to the library.
              If None, follows the environment's link configuration.

    Returns:
        The process-wide LibraryHandle. A library that is already bound is
        returned as is, even if ``path`` differs.

    Raises:
        BindError: If the library cannot be located, loaded or bound.
    """
    if path is None:
        return default_library().handle()
    return state_for(OPENVINO_C).get_or_bind(lambda: bind(Path(path)))
