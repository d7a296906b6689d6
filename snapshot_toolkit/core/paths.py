"""
Reference image path resolution.

Reference images live at ``{root}{suffix}/{key}.png``. The suffix is appended
to the root as a plain string so that ``/refs`` + ``_linux`` gives
``/refs_linux``, and an empty suffix selects the root itself.
"""

import re
import sys
from pathlib import Path

REFERENCE_IMAGE_EXTENSION = ".png"

_UNSAFE_KEY_CHARS = re.compile(r"[^A-Za-z0-9_.\-]")


def default_suffixes() -> tuple[str, ...]:
    """
    Get the default reference directory suffixes, in priority order.

    The platform-specific directory is tried first, then the shared root.

    Returns:
        tuple[str, ...]: ("_<sys.platform>", ""), for instance ("_linux", "")
        on Linux or ("_darwin", "") on macOS
    """
    return (f"_{sys.platform}", "")


def reference_directory(root: Path | str, suffix: str) -> Path:
    """
    Get the reference directory for one suffix variant.

    Args:
        root: Reference image root
        suffix: Suffix appended verbatim to the root path

    Returns:
        Path: ``{root}{suffix}``
    """
    return Path(f"{Path(root)}{suffix}")


def reference_key(test_name: str, identifier: str = "") -> str:
    """
    Build a file-safe reference key from a test name and optional identifier.

    ``/`` in the test name separates subdirectories (module, class, test) and
    is kept; every other unsafe character becomes ``_``. The identifier is
    flattened completely.

    Args:
        test_name: Name of the test (e.g. "test_button[dark]" or
            "tests/test_ui/TestButton/test_button")
        identifier: Optional identifier when a test takes several snapshots

    Returns:
        str: Key such as "test_button_dark_" or "test_button_dark__pressed"

    Example:
        >>> reference_key("test_button", "pressed")
        'test_button_pressed'
    """
    key = "/".join(_UNSAFE_KEY_CHARS.sub("_", part) for part in test_name.split("/"))
    if identifier:
        key = f"{key}_{_UNSAFE_KEY_CHARS.sub('_', identifier)}"
    return key


def node_reference_name(nodeid: str) -> str:
    """
    Turn a pytest node id into a slash-separated test name.

    Parametrize ids stay on the last segment; any ``/`` inside them is
    flattened so it does not open a subdirectory.

    Example:
        >>> node_reference_name("tests/test_ui.py::TestButton::test_press[dark]")
        'tests/test_ui/TestButton/test_press[dark]'
    """
    path, _, names = nodeid.partition("::")
    if path.endswith(".py"):
        path = path[: -len(".py")]
    if not names:
        return path
    names, bracket, params = names.partition("[")
    parts = names.split("::")
    parts[-1] += bracket + params.replace("/", "_")
    return "/".join([path, *parts])

