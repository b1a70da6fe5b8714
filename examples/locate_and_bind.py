"""
Locate and bind the OpenVINO C library, then query its version and devices.

Shows both link modes, the search report and error handling. Point it at an
OpenVINO installation first, for example:

    OPENVINO_INSTALL_DIR=/opt/intel/openvino python examples/locate_and_bind.py
"""

import ctypes
import logging
import sys
from typing import List

import openvino_sys
from openvino_sys.manifest import OV_STATUS_OK, ov_available_devices_t, ov_core_ptr, ov_version_t


# =============================================================================
# Locating
# =============================================================================


def report_search(finder: openvino_sys.Finder) -> None:
    """Print every source and directory one fresh search inspects."""
    result: openvino_sys.SearchResult = finder.search(openvino_sys.OPENVINO_C)
    for source in result.sources:
        print(f"   {source.kind.value}: {source.root}")
    print(f"   Probed {len(result.probed)} directories")
    print(f"   Found: {result.path}")


# =============================================================================
# Calling into the library
# =============================================================================


def openvino_version(ov: openvino_sys.Library) -> str:
    version = ov_version_t()
    status: int = ov.ov_get_openvino_version(ctypes.byref(version))
    if status != OV_STATUS_OK:
        raise RuntimeError(f"ov_get_openvino_version returned {status}")
    try:
        return version.buildNumber.decode()
    finally:
        ov.ov_version_free(ctypes.byref(version))


def available_devices(ov: openvino_sys.Library) -> List[str]:
    core = ov_core_ptr()
    if ov.ov_core_create(ctypes.byref(core)) != OV_STATUS_OK:
        raise RuntimeError("ov_core_create failed")
    devices = ov_available_devices_t()
    try:
        if ov.ov_core_get_available_devices(core, ctypes.byref(devices)) != OV_STATUS_OK:
            raise RuntimeError("ov_core_get_available_devices failed")
        names = [devices.devices[i].decode() for i in range(devices.size)]
        ov.ov_available_devices_free(ctypes.byref(devices))
        return names
    finally:
        ov.ov_core_free(core)


def main() -> int:
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")

    print("1. Search:")
    report_search(openvino_sys.Finder())
    print()

    print("2. Runtime first-use binding:")
    ov = openvino_sys.Library(config=openvino_sys.LinkConfig())
    print(f"   {ov!r}")
    try:
        print(f"   OpenVINO {openvino_version(ov)}")
    except openvino_sys.BindError as e:
        print(f"   Bind error [{e.code}]: {e.message}")
        return 1
    print(f"   {ov!r}")
    print()

    print("3. Devices:")
    for name in available_devices(ov):
        print(f"   {name}")
    print()

    print("4. plugins.xml:")
    try:
        print(f"   {openvino_sys.Finder().find_plugins_xml()}")
    except openvino_sys.PluginsXmlNotFound as e:
        print(f"   {e.message}")

    ov.unload()
    return 0


if __name__ == "__main__":
    sys.exit(main())
