"""Matcher — resolves grouped browser specs against the provider catalog."""

from __future__ import annotations

import logging
from typing import Iterable

from browser_matrix.core.errors import (
    InsufficientVersionsError,
    NoMatchingBrowsersError,
)
from browser_matrix.core.models import (
    AvailableBrowser,
    ExactList,
    GroupedBrowserSpec,
    LastN,
    ResolvedSpec,
    TargetSelection,
)
from browser_matrix.core.versions import numeric_version, parse_browser_version

logger = logging.getLogger(__name__)


def flatten_specs(grouped: Iterable[GroupedBrowserSpec]) -> list[ResolvedSpec]:
    """One ResolvedSpec per browser entry, inheriting the group's os/device."""
    resolved = []
    for group in grouped:
        for entry in group.browsers:
            resolved.append(
                ResolvedSpec(
                    device=group.device,
                    os=group.os,
                    os_version=group.os_version,
                    browser=entry.browser,
                    browser_version=parse_browser_version(
                        entry.browser_version
                    ),
                )
            )
    return resolved


def match_spec(
    catalog: Iterable[AvailableBrowser], spec: ResolvedSpec
) -> list[AvailableBrowser]:
    """Return the catalog entries selected by a single resolved spec.

    Raises:
        InsufficientVersionsError: A "last N" spec has fewer than N candidates.
        NoMatchingBrowsersError: Nothing is left after filtering.
    """
    candidates = [
        b
        for b in catalog
        if b.device == spec.device
        and b.os == spec.os
        and b.os_version == spec.os_version
        and b.browser == spec.browser
    ]

    constraint = spec.browser_version
    if isinstance(constraint, ExactList):
        candidates = [
            b for b in candidates if b.browser_version in constraint.versions
        ]
    elif isinstance(constraint, LastN):
        # Ties and non-numeric suffixes keep catalog order (stable sort).
        candidates.sort(
            key=lambda b: numeric_version(b.browser_version), reverse=True
        )
        if len(candidates) < constraint.n:
            raise InsufficientVersionsError(spec, available=len(candidates))
        candidates = candidates[: constraint.n]

    if not candidates:
        raise NoMatchingBrowsersError(spec)

    return candidates


def resolve_targets(
    catalog: Iterable[AvailableBrowser],
    grouped: Iterable[GroupedBrowserSpec],
) -> TargetSelection:
    """Match every declared spec and merge the results by identity key.

    A browser requested by more than one spec is kept once (last write wins)
    and reported in ``TargetSelection.warnings``. Duplicates are only logged
    at debug level, so callers that want to surface them must read
    ``warnings`` themselves; the CLI prints them.
    """
    catalog = list(catalog)
    targets: dict[str, AvailableBrowser] = {}
    warnings: list[str] = []

    for spec in flatten_specs(grouped):
        for browser in match_spec(catalog, spec):
            key = browser.identity_key()
            if key in targets:
                message = f"duplicate browser: {key}"
                logger.debug("Duplicate browser %s", key)
                warnings.append(message)
            targets[key] = browser

    logger.debug("Resolved %d target browsers", len(targets))
    return TargetSelection(
        browsers=tuple(targets.values()), warnings=tuple(warnings)
    )
