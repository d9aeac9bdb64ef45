"""Spec loader — reads and validates the grouped browser spec file."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Optional

from browser_matrix.core.errors import SpecLoadError
from browser_matrix.core.models import BrowserVersionSpec, GroupedBrowserSpec

DEFAULT_SPECS_FILE = "browsers.json"


def _require_str(obj: dict, key: str, where: str) -> str:
    value = obj.get(key)
    if not isinstance(value, str) or not value:
        raise SpecLoadError(f"{where}: '{key}' must be a non-empty string")
    return value


def _optional_str(obj: dict, key: str, where: str) -> Optional[str]:
    value = obj.get(key)
    if value is not None and not isinstance(value, str):
        raise SpecLoadError(f"{where}: '{key}' must be a string or null")
    return value


def parse_grouped_specs(data: Any) -> list[GroupedBrowserSpec]:
    """Validate decoded JSON and build GroupedBrowserSpec objects."""
    if not isinstance(data, list):
        raise SpecLoadError(
            f"Spec file must contain a list of groups, got {type(data).__name__}"
        )

    groups = []
    for i, raw_group in enumerate(data):
        where = f"group[{i}]"
        if not isinstance(raw_group, dict):
            raise SpecLoadError(f"{where}: expected an object")

        raw_browsers = raw_group.get("browsers")
        if not isinstance(raw_browsers, list):
            raise SpecLoadError(f"{where}: 'browsers' must be a list")

        browsers = []
        for j, raw_browser in enumerate(raw_browsers):
            entry_where = f"{where}.browsers[{j}]"
            if not isinstance(raw_browser, dict):
                raise SpecLoadError(f"{entry_where}: expected an object")
            browsers.append(
                BrowserVersionSpec(
                    browser=_require_str(raw_browser, "browser", entry_where),
                    browser_version=_optional_str(
                        raw_browser, "browser_version", entry_where
                    ),
                )
            )

        groups.append(
            GroupedBrowserSpec(
                os=_require_str(raw_group, "os", where),
                os_version=_require_str(raw_group, "os_version", where),
                device=_optional_str(raw_group, "device", where),
                browsers=tuple(browsers),
            )
        )
    return groups


def load_grouped_specs(path: str | Path) -> list[GroupedBrowserSpec]:
    """Read ``path`` and return its grouped browser specs.

    Raises:
        SpecLoadError: If the file is missing, is not JSON, or does not
            have the expected shape.
    """
    try:
        text = Path(path).read_text(encoding="utf-8")
    except OSError as e:
        raise SpecLoadError(f"Cannot read spec file {path}: {e}") from e

    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise SpecLoadError(f"Spec file {path} is not valid JSON: {e}") from e

    return parse_grouped_specs(data)
