"""Core data models for gradlemedic.

Field names are snake_case in Python. Every model also accepts and emits the
camelCase spelling used in the JSON exchanged with the text-analysis service
(``removedIn``, ``autoFixable``, ``quickFixes`` ...).
"""

from collections.abc import Iterator
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

UNKNOWN_VERSION = "unknown"


class HealthVerdict(str, Enum):
    """Overall build health verdict."""

    HEALTHY = "healthy"
    NEEDS_ATTENTION = "needs-attention"
    CRITICAL = "critical"


class SectionStatus(str, Enum):
    """Status of a single category analysis."""

    OK = "ok"
    WARNING = "warning"
    ERROR = "error"


class Category(str, Enum):
    """Fixed health analysis categories."""

    PERFORMANCE = "performance"
    CACHING = "caching"
    DEPENDENCIES = "dependencies"
    STRUCTURE = "structure"


class Priority(str, Enum):
    """Recommendation priority."""

    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class Effort(str, Enum):
    """Effort needed to act on a recommendation."""

    QUICK = "quick"
    MODERATE = "moderate"
    SIGNIFICANT = "significant"


class Impact(str, Enum):
    """Impact of a breaking change, also used as migration phase risk."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


RiskLevel = Impact


class Compatibility(str, Enum):
    """Compatibility tier between the current and target Gradle versions."""

    COMPATIBLE = "compatible"
    MINOR_CHANGES = "minor-changes"
    MAJOR_CHANGES = "major-changes"
    BREAKING = "breaking"


class _Model(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


# ==================== Health diagnosis ====================


class SubagentResult(_Model):
    """Structured result of one category analysis."""

    status: SectionStatus = SectionStatus.OK
    summary: str = "Analysis complete"
    details: list[str] = Field(default_factory=list)
    metrics: dict[str, Any] | None = None


class Recommendation(_Model):
    """A ranked recommendation produced by the synthesis step."""

    priority: Priority = Priority.MEDIUM
    category: str = ""
    title: str
    description: str = ""
    effort: Effort = Effort.MODERATE


class QuickFix(_Model):
    """A suggested shell command. Never executed by gradlemedic."""

    id: str
    description: str
    command: str
    safe: bool = Field(default=False, description="Advisory only")


class HealthSections(_Model):
    """Category results keyed by the four fixed categories."""

    performance: SubagentResult
    caching: SubagentResult
    dependencies: SubagentResult
    structure: SubagentResult

    def items(self) -> Iterator[tuple[Category, SubagentResult]]:
        """Iterate over (category, result) pairs in fixed order."""
        for category in Category:
            yield category, getattr(self, category.value)


class HealthReport(_Model):
    """Unified build health report."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    overall: HealthVerdict = HealthVerdict.HEALTHY
    sections: HealthSections
    recommendations: list[Recommendation] = Field(default_factory=list)
    quick_fixes: list[QuickFix] = Field(default_factory=list, alias="quickFixes")
    synthesized: bool = Field(
        default=True,
        description="False when the synthesis step failed and defaults were kept",
    )


# ==================== Migration analysis ====================


class VersionInfo(_Model):
    """Detected Gradle and toolchain versions."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    current: str = UNKNOWN_VERSION
    wrapper: bool = False
    java_version: str | None = Field(default=None, alias="javaVersion")
    kotlin_version: str | None = Field(default=None, alias="kotlinVersion")


class Deprecation(_Model):
    """A deprecated API usage found in a build script."""

    api: str
    location: str = Field(default="", description="file:line")
    replacement: str = ""
    removed_in: str = Field(default="", alias="removedIn")
    auto_fixable: bool = Field(default=False, alias="autoFixable")


class BreakingChange(_Model):
    """A change that will break the build on the target version."""

    id: str
    description: str
    impact: Impact = Impact.MEDIUM
    affected_files: list[str] = Field(default_factory=list, alias="affectedFiles")
    solution: str = ""


class Fix(_Model):
    """A literal text substitution in one file."""

    id: str
    description: str
    file: str
    old_code: str = Field(..., alias="oldCode")
    new_code: str = Field(..., alias="newCode")
    safe: bool = False


class Phase(_Model):
    """One ordered phase of a migration plan."""

    order: int = Field(..., ge=1)
    name: str
    description: str = ""
    steps: list[str] = Field(default_factory=list)
    risk: RiskLevel = RiskLevel.LOW


class ManualStep(_Model):
    """A migration step that needs human judgment."""

    order: int = Field(..., ge=1)
    title: str
    description: str = ""
    commands: list[str] = Field(default_factory=list)
    verification: str


class MigrationPlan(_Model):
    """Ordered phases, manual steps, and an effort estimate."""

    phases: list[Phase]
    manual_steps: list[ManualStep] = Field(default_factory=list, alias="manualSteps")
    effort: str = Field(..., min_length=1)


class MigrationReport(_Model):
    """Complete migration analysis report."""

    current_version: str = Field(..., alias="currentVersion")
    target_version: str = Field(..., alias="targetVersion")
    compatibility: Compatibility = Compatibility.COMPATIBLE
    phases: list[Phase] = Field(default_factory=list)
    deprecations: list[Deprecation] = Field(default_factory=list)
    breaking_changes: list[BreakingChange] = Field(
        default_factory=list, alias="breakingChanges"
    )
    auto_fixable: list[Fix] = Field(default_factory=list, alias="autoFixable")
    manual_steps: list[ManualStep] = Field(default_factory=list, alias="manualSteps")
    estimated_effort: str = Field(default="", alias="estimatedEffort")


class FixApplicationResult(_Model):
    """Outcome of one apply_fixes() invocation, by fix id."""

    dry_run: bool = Field(default=False, alias="dryRun")
    applied: list[str] = Field(default_factory=list)
    unchanged: list[str] = Field(default_factory=list)
    skipped: list[str] = Field(default_factory=list)
    failed: list[str] = Field(default_factory=list)
