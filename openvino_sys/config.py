"""
Link configuration read from the environment.

    OPENVINO_LINKING       "runtime" (default) or "dynamic"
    OPENVINO_LIB_PATH      explicit library path; bypasses the library search
    OPENVINO_SKIP_LINKING  set to 1/true/yes/on to never load the library
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional

from .binder import LinkMode
from .errors import ConfigError

ENV_OPENVINO_LINKING = "OPENVINO_LINKING"
ENV_OPENVINO_LIB_PATH = "OPENVINO_LIB_PATH"
ENV_OPENVINO_SKIP_LINKING = "OPENVINO_SKIP_LINKING"

_TRUE_VALUES = ("1", "true", "yes", "on")
_FALSE_VALUES = ("", "0", "false", "no", "off")


@dataclass(frozen=True)
class LinkConfig:
    link_mode: LinkMode = LinkMode.RUNTIME_FIRST_USE
    lib_path: Optional[Path] = None
    skip_linking: bool = False

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "LinkConfig":
        """
        Build a configuration from environment variables.

        Args:
            environ: Mapping to read instead of ``os.environ``.

        Raises:
            ConfigError: If a variable holds an unsupported value.
        """
        if environ is None:
            environ = os.environ

        mode_value = environ.get(ENV_OPENVINO_LINKING, LinkMode.RUNTIME_FIRST_USE.value)
        mode_value = mode_value.strip().lower()
        try:
            link_mode = LinkMode(mode_value)
        except ValueError:
            raise ConfigError(
                ENV_OPENVINO_LINKING, mode_value, [m.value for m in LinkMode]
            ) from None

        lib_path_value = environ.get(ENV_OPENVINO_LIB_PATH, "").strip()
        lib_path = Path(lib_path_value) if lib_path_value else None

        skip_value = environ.get(ENV_OPENVINO_SKIP_LINKING, "").strip().lower()
        if skip_value in _TRUE_VALUES:
            skip_linking = True
        elif skip_value in _FALSE_VALUES:
            skip_linking = False
        else:
            raise ConfigError(
                ENV_OPENVINO_SKIP_LINKING, skip_value, _TRUE_VALUES + _FALSE_VALUES[1:]
            )

        return cls(link_mode=link_mode, lib_path=lib_path, skip_linking=skip_linking)
