"""Compatibility tier between current and target Gradle versions."""

from collections.abc import Callable, Sequence

from gradlemedic.core.models import BreakingChange, Compatibility, Deprecation, Impact

DEFAULT_DEPRECATION_THRESHOLD = 10
DEFAULT_BREAKING_THRESHOLD = 3

Rule = Callable[[Sequence[Deprecation], Sequence[BreakingChange]], bool]


def assess_compatibility(
    deprecations: Sequence[Deprecation],
    breaking_changes: Sequence[BreakingChange],
    *,
    deprecation_threshold: int = DEFAULT_DEPRECATION_THRESHOLD,
    breaking_threshold: int = DEFAULT_BREAKING_THRESHOLD,
) -> Compatibility:
    """Classify the migration distance.

    Rules are checked in order and the first match wins:

    1. ``breaking_threshold`` or more high-impact breaking changes: breaking
    2. any breaking change: major-changes
    3. ``deprecation_threshold`` or more deprecations: minor-changes
    4. otherwise: compatible

    Args:
        deprecations: Detected deprecations.
        breaking_changes: Detected breaking changes.
        deprecation_threshold: Deprecation count for minor-changes.
        breaking_threshold: High-impact breaking change count for breaking.

    Returns:
        Compatibility tier.
    """
    rules: list[tuple[Rule, Compatibility]] = [
        (
            lambda _, bcs: sum(1 for bc in bcs if bc.impact == Impact.HIGH)
            >= breaking_threshold,
            Compatibility.BREAKING,
        ),
        (lambda _, bcs: len(bcs) > 0, Compatibility.MAJOR_CHANGES),
        (lambda deps, _: len(deps) >= deprecation_threshold, Compatibility.MINOR_CHANGES),
    ]

    for predicate, tier in rules:
        if predicate(deprecations, breaking_changes):
            return tier
    return Compatibility.COMPATIBLE
