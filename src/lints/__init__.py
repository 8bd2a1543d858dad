"""
Lint passes over typed function bodies.

Importing this package declares every lint in LINT_REGISTRY.
"""

from typing import List, Optional

from lints.base import Lint, LateContext, LateLintPass, LINT_REGISTRY, declare_lint, get_lint
from lints.missing_owner_check import MissingOwnerCheck

# Every pass, in run order
ALL_PASSES = [MissingOwnerCheck]


def create_passes(selected: Optional[List[str]] = None) -> List[LateLintPass]:
    """Instantiate passes, optionally only those declaring a lint in `selected`."""
    passes = [cls() for cls in ALL_PASSES]
    if selected is None:
        return passes
    wanted = set(selected)
    return [p for p in passes if any(lint.name in wanted for lint in p.lints)]


__all__ = [
    "Lint",
    "LateContext",
    "LateLintPass",
    "LINT_REGISTRY",
    "ALL_PASSES",
    "declare_lint",
    "get_lint",
    "create_passes",
    "MissingOwnerCheck",
]
