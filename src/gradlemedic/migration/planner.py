"""Migration plan builder."""

from pydantic import ValidationError

from gradlemedic.analysis import prompts
from gradlemedic.analysis.text_service import TextAnalysisService, extract_json
from gradlemedic.config import AnalysisConfig
from gradlemedic.core.models import (
    BreakingChange,
    Deprecation,
    ManualStep,
    MigrationPlan,
    Phase,
    RiskLevel,
    VersionInfo,
)
from gradlemedic.errors import ParseError
from gradlemedic.migration.versions import (
    java_supported,
    known_removals,
    known_version_for,
    upgrade_path,
)
from gradlemedic.utils.fallback import try_or_default
from gradlemedic.utils.logging import get_logger

logger = get_logger(__name__)

PHASE_NAMES = (
    "Preparation",
    "Fix Deprecations",
    "Update Wrapper",
    "Fix Breaking Changes",
    "Verification",
)
DEFAULT_EFFORT = "1-3 hours"


def wrapper_command(target_version: str, executable: str = "./gradlew") -> str:
    """Command that updates the wrapper to target_version."""
    return f"{executable} wrapper --gradle-version {target_version}"


def get_default_plan(version_info: VersionInfo, target_version: str) -> MigrationPlan:
    """Build the standard five-phase plan for a version upgrade.

    Args:
        version_info: Detected versions.
        target_version: Target Gradle version.

    Returns:
        Plan whose Update Wrapper phase names target_version literally.
    """
    deprecation_steps = ["Run with --warning-mode=all", "Fix deprecation warnings"]
    for hop in upgrade_path(version_info.current, target_version):
        deprecation_steps.append(f"Upgrade to Gradle {hop} and fix its deprecation warnings")
    deprecation_steps.append("Verify build")

    breaking_steps = ["Fix API changes", "Update plugin versions", "Resolve incompatibilities"]
    for api in known_removals(version_info.current, target_version):
        breaking_steps.append(f"Remove usages of {api}")

    phases = [
        Phase(
            order=1,
            name="Preparation",
            description="Back up and verify current build works",
            steps=["Create branch", "Run full build", "Document current behavior"],
            risk=RiskLevel.LOW,
        ),
        Phase(
            order=2,
            name="Fix Deprecations",
            description="Address deprecated API usage",
            steps=deprecation_steps,
            risk=RiskLevel.MEDIUM,
        ),
        Phase(
            order=3,
            name="Update Wrapper",
            description=f"Update to Gradle {target_version}",
            steps=[wrapper_command(target_version), "Commit wrapper files"],
            risk=RiskLevel.LOW,
        ),
        Phase(
            order=4,
            name="Fix Breaking Changes",
            description="Address any compilation errors",
            steps=breaking_steps,
            risk=RiskLevel.HIGH,
        ),
        Phase(
            order=5,
            name="Verification",
            description="Verify migrated build",
            steps=["Clean build", "Run all tests", "Check build scans"],
            risk=RiskLevel.LOW,
        ),
    ]

    manual_steps = [
        ManualStep(
            order=1,
            title="Check Plugin Compatibility",
            description="Verify all plugins support the target Gradle version",
            commands=["./gradlew buildEnvironment"],
            verification="All plugins resolve successfully",
        ),
        ManualStep(
            order=2,
            title="Update Kotlin Version",
            description="Ensure Kotlin plugin is compatible",
            verification="Build completes without Kotlin errors",
        ),
        ManualStep(
            order=3,
            title="Enable Configuration Cache",
            description="Test with configuration cache enabled",
            commands=["./gradlew build --configuration-cache"],
            verification="Build succeeds with configuration cache",
        ),
    ]

    if java_supported(version_info.java_version, target_version) is False:
        known = known_version_for(target_version)
        manual_steps.append(
            ManualStep(
                order=len(manual_steps) + 1,
                title="Upgrade Java runtime",
                description=(
                    f"Java {version_info.java_version} cannot run Gradle {target_version} "
                    f"(supported: Java {known.min_java}-{known.max_java})"
                ),
                commands=["java -version"],
                verification="java -version reports a supported release",
            )
        )

    return MigrationPlan(phases=phases, manual_steps=manual_steps, effort=DEFAULT_EFFORT)


def is_valid_plan(plan: MigrationPlan, target_version: str) -> bool:
    """Check that a plan has the five required phases in order."""
    if [phase.name for phase in plan.phases] != list(PHASE_NAMES):
        return False
    if [phase.order for phase in plan.phases] != list(range(1, len(PHASE_NAMES) + 1)):
        return False
    if not plan.manual_steps:
        return False
    wrapper_phase = plan.phases[PHASE_NAMES.index("Update Wrapper")]
    return any(target_version in step for step in wrapper_phase.steps)


class MigrationPlanner:
    """Builds migration plans, preferring a service-generated plan."""

    def __init__(
        self,
        service: TextAnalysisService,
        config: AnalysisConfig | None = None,
    ) -> None:
        self._service = service
        self._config = config or AnalysisConfig()

    async def plan(
        self,
        version_info: VersionInfo,
        target_version: str,
        deprecations: list[Deprecation],
        breaking_changes: list[BreakingChange],
    ) -> MigrationPlan:
        """Create the migration plan.

        The service plan is used only when it parses and has the required
        phase structure. Anything else yields get_default_plan().
        """
        logger.info("Creating migration plan")

        prompt = prompts.planning_prompt(
            version_info, target_version, len(deprecations), len(breaking_changes)
        )
        text = await try_or_default(
            lambda: self._service.invoke(prompt, self._config.migration_max_tokens),
            "",
            "Migration planning",
        )

        if text:
            try:
                plan = MigrationPlan.model_validate(extract_json(text, "object"))
            except (ParseError, ValidationError) as e:
                logger.warning("Invalid migration plan response: %s", e)
            else:
                if is_valid_plan(plan, target_version):
                    return plan
                logger.warning("Migration plan response has the wrong phase structure")

        return get_default_plan(version_info, target_version)
