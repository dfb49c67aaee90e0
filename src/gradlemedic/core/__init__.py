"""Core module containing the gradlemedic data models."""

from gradlemedic.core.models import (
    UNKNOWN_VERSION,
    BreakingChange,
    Category,
    Compatibility,
    Deprecation,
    Effort,
    Fix,
    FixApplicationResult,
    HealthReport,
    HealthSections,
    HealthVerdict,
    Impact,
    ManualStep,
    MigrationPlan,
    MigrationReport,
    Phase,
    Priority,
    QuickFix,
    Recommendation,
    RiskLevel,
    SectionStatus,
    SubagentResult,
    VersionInfo,
)

__all__ = [
    "UNKNOWN_VERSION",
    "BreakingChange",
    "Category",
    "Compatibility",
    "Deprecation",
    "Effort",
    "Fix",
    "FixApplicationResult",
    "HealthReport",
    "HealthSections",
    "HealthVerdict",
    "Impact",
    "ManualStep",
    "MigrationPlan",
    "MigrationReport",
    "Phase",
    "Priority",
    "QuickFix",
    "Recommendation",
    "RiskLevel",
    "SectionStatus",
    "SubagentResult",
    "VersionInfo",
]
