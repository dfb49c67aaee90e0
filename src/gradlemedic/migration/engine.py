"""Migration analysis engine.

Coordinates the migration workflow:
1. Detect the current Gradle, Java and Kotlin versions
2. Resolve the target version
3. Scan build scripts for deprecations and breaking changes
4. Generate auto-fixes and a migration plan
5. Classify compatibility
"""

from pathlib import Path

from gradlemedic.analysis.text_service import TextAnalysisService
from gradlemedic.config import GradlemedicConfig
from gradlemedic.core.models import Compatibility, MigrationReport
from gradlemedic.migration.compatibility import assess_compatibility
from gradlemedic.migration.fix_generator import FixGenerator
from gradlemedic.migration.planner import MigrationPlanner
from gradlemedic.migration.scanner import BuildScriptScanner, collect_build_scripts
from gradlemedic.migration.versions import VersionResolver
from gradlemedic.utils.logging import get_logger

logger = get_logger(__name__)

NO_EFFORT = "0 minutes"


def empty_report(current: str, target: str) -> MigrationReport:
    """Report for a project already on the target version."""
    return MigrationReport(
        current_version=current,
        target_version=target,
        compatibility=Compatibility.COMPATIBLE,
        estimated_effort=NO_EFFORT,
    )


class MigrationEngine:
    """Produces a migration report for one project."""

    def __init__(
        self,
        project_dir: str | Path,
        service: TextAnalysisService,
        config: GradlemedicConfig | None = None,
        resolver: VersionResolver | None = None,
        scanner: BuildScriptScanner | None = None,
        planner: MigrationPlanner | None = None,
        fix_generator: FixGenerator | None = None,
    ) -> None:
        """Initialize the engine.

        Args:
            project_dir: Gradle project directory.
            service: Text-analysis service.
            config: Configuration.
            resolver: Version resolver (created from config if omitted).
            scanner: Build script scanner (created from config if omitted).
            planner: Migration planner (created from config if omitted).
            fix_generator: Fix generator (created from config if omitted).
        """
        self._project_dir = Path(project_dir)
        self._config = config or GradlemedicConfig()
        migration = self._config.migration

        self._resolver = resolver or VersionResolver(self._project_dir, migration)
        self._scanner = scanner or BuildScriptScanner(service, self._config.analysis)
        self._planner = planner or MigrationPlanner(service, self._config.analysis)
        self._fix_generator = fix_generator or FixGenerator(migration.default_fix_file)

    async def analyze(self, target_version: str | None = None) -> MigrationReport:
        """Run the migration analysis.

        Args:
            target_version: Explicit target, else the resolver's default.

        Returns:
            Migration report.

        Raises:
            MissingTargetVersionError: If no target version can be determined.
        """
        logger.info("Starting Gradle migration analysis")

        version_info = await self._resolver.detect_version()
        target = await self._resolver.resolve_target(target_version)
        current = version_info.current

        logger.info("Current version: %s, target version: %s", current, target)

        if current == target:
            logger.info("Already on Gradle %s", target)
            return empty_report(current, target)

        scripts = collect_build_scripts(self._project_dir)
        logger.debug("Collected %d build scripts", len(scripts))

        deprecations = await self._scanner.scan_deprecations(scripts, current, target)
        breaking_changes = await self._scanner.detect_breaking_changes(scripts, current, target)
        fixes = self._fix_generator.generate(deprecations, breaking_changes)
        plan = await self._planner.plan(version_info, target, deprecations, breaking_changes)

        migration = self._config.migration
        compatibility = assess_compatibility(
            deprecations,
            breaking_changes,
            deprecation_threshold=migration.deprecation_threshold,
            breaking_threshold=migration.breaking_threshold,
        )

        return MigrationReport(
            current_version=current,
            target_version=target,
            compatibility=compatibility,
            phases=plan.phases,
            deprecations=deprecations,
            breaking_changes=breaking_changes,
            auto_fixable=fixes,
            manual_steps=plan.manual_steps,
            estimated_effort=plan.effort,
        )
