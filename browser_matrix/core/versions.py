"""Browser version parsing helpers."""

from __future__ import annotations

import re
from typing import Optional

from browser_matrix.core.models import (
    ExactList,
    LastN,
    NoVersion,
    VersionConstraint,
)

_STABLE_VERSION_RE = re.compile(r"\d+(\.\d+)?")
_LAST_N_RE = re.compile(r"last (\d+)")
_NUMERIC_PREFIX_RE = re.compile(r"^\s*[+-]?(\d+(\.\d*)?|\.\d+)([eE][+-]?\d+)?")


def is_stable_version(version: Optional[str]) -> bool:
    """True for unversioned entries and plain ``N`` / ``N.M`` versions.

    Beta and dev channel strings ("71.0 beta", "dev") are rejected.
    """
    if not version:
        return True
    return bool(_STABLE_VERSION_RE.fullmatch(str(version)))


def parse_browser_version(raw: Optional[str]) -> VersionConstraint:
    """Turn the raw ``browser_version`` of a spec entry into a constraint.

    - empty or missing -> NoVersion
    - "last N"         -> LastN(N)
    - "9,10"           -> ExactList({"9", "10"}), values are not trimmed
    """
    if not raw:
        return NoVersion()

    match = _LAST_N_RE.search(raw)
    if match:
        return LastN(int(match.group(1)))

    parts = raw.split(",")
    return ExactList(frozenset(parts), tuple(parts))


def numeric_version(version: Optional[str]) -> float:
    """Sort key for version strings, read like a float.

    Only the leading numeric part counts, so "10.0-beta" sorts as 10.0.
    Strings without a numeric prefix sort below every number.
    """
    if version is None:
        return float("-inf")
    match = _NUMERIC_PREFIX_RE.match(str(version))
    if not match:
        return float("-inf")
    return float(match.group(0))
