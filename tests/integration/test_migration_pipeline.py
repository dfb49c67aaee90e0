"""End-to-end tests running the analysis pipelines against real project files."""

import json
from collections.abc import Callable
from pathlib import Path
from unittest.mock import AsyncMock, patch

import pytest
from rich.console import Console

from gradlemedic.analysis.doctor import HealthDoctor
from gradlemedic.analysis.probe import ProjectProbe
from gradlemedic.core.models import Compatibility, HealthVerdict, SectionStatus
from gradlemedic.errors import ProbeError
from gradlemedic.migration.applicator import FixApplicator
from gradlemedic.migration.engine import MigrationEngine
from gradlemedic.migration.planner import PHASE_NAMES
from gradlemedic.migration.versions import VersionResolver
from gradlemedic.report.printer import ReportPrinter, report_to_json

from helpers import FailingTextService, StubTextService

LEGACY_SCRIPT = 'dependencies {\n    compile("com.google.guava:guava:31.1-jre")\n}\ntasks.create("hello")\n'


@pytest.fixture(autouse=True)
def no_java():
    with patch.object(VersionResolver, "_detect_java_version", AsyncMock(return_value=None)):
        yield


class TestMigrationPipeline:
    """Migration analysis followed by fix application."""

    @pytest.mark.asyncio
    async def test_already_on_target(self, make_gradle_project: Callable[..., Path]) -> None:
        """A project on the target version needs no migration."""
        project = make_gradle_project("8.5")

        report = await MigrationEngine(project, FailingTextService()).analyze("8.5")

        assert report.compatibility == Compatibility.COMPATIBLE
        assert report.phases == []
        assert report.estimated_effort == "0 minutes"

    @pytest.mark.asyncio
    async def test_offline_analysis_and_apply(
        self, make_gradle_project: Callable[..., Path]
    ) -> None:
        """With the service down, local scanning still drives fixes that apply cleanly."""
        project = make_gradle_project("7.6", LEGACY_SCRIPT)
        service = FailingTextService()

        report = await MigrationEngine(project, service).analyze("8.11")

        assert service.calls == 3
        assert report.current_version == "7.6"
        assert report.compatibility == Compatibility.COMPATIBLE
        assert [d.location for d in report.deprecations] == [
            "build.gradle.kts:2",
            "build.gradle.kts:4",
        ]
        assert [p.name for p in report.phases] == list(PHASE_NAMES)
        assert "./gradlew wrapper --gradle-version 8.11" in report.phases[2].steps

        console = Console(record=True, width=200)
        applicator = FixApplicator(project, console=console)
        result = applicator.apply_fixes(report)

        assert result.applied == ["DEP-1", "DEP-2"]
        assert result.failed == []
        assert "COMMON-3" in result.unchanged
        assert (project / "build.gradle.kts").read_text() == (
            'dependencies {\n    implementation("com.google.guava:guava:31.1-jre")\n}\n'
            'tasks.register("hello")\n'
        )

    @pytest.mark.asyncio
    async def test_dry_run_leaves_files(self, make_gradle_project: Callable[..., Path]) -> None:
        """A dry run reports every fix and writes nothing."""
        project = make_gradle_project("7.6", LEGACY_SCRIPT)
        report = await MigrationEngine(project, FailingTextService()).analyze("8.11")

        console = Console(record=True, width=200)
        result = FixApplicator(project, dry_run=True, console=console).apply_fixes(report)

        assert result.applied == []
        assert result.skipped == [fix.id for fix in report.auto_fixable]
        assert (project / "build.gradle.kts").read_text() == LEGACY_SCRIPT
        assert "Dry run" in console.export_text()

    @pytest.mark.asyncio
    async def test_service_findings_reach_report_json(
        self, make_gradle_project: Callable[..., Path]
    ) -> None:
        """Service-reported breaking changes drive the tier and the JSON output."""
        project = make_gradle_project("6.9", LEGACY_SCRIPT)
        breaking = [
            {"id": f"BC00{i}", "description": "API removed", "impact": "high", "solution": "Migrate"}
            for i in range(1, 4)
        ]

        def respond(prompt: str) -> str:
            if "deprecated APIs" in prompt:
                return "[]"
            if "breaking changes when upgrading" in prompt:
                return json.dumps(breaking)
            return "not a plan"

        report = await MigrationEngine(project, StubTextService(respond)).analyze("8.11")

        assert report.compatibility == Compatibility.BREAKING
        assert report.deprecations == []
        data = json.loads(report_to_json(report))
        assert data["compatibility"] == "breaking"
        assert [bc["id"] for bc in data["breakingChanges"]] == ["BC001", "BC002", "BC003"]

        console = Console(record=True, width=200)
        ReportPrinter(console).print_migration_report(report)
        assert "[BC003] API removed" in console.export_text()


class TestHealthPipeline:
    """Health diagnosis with a partially failing probe."""

    @pytest.mark.asyncio
    async def test_probe_failure_still_reports(self, temp_dir: Path) -> None:
        """A failing probe tool degrades to empty input instead of aborting."""

        async def execute(tool_name: str, args: list[str]) -> str:
            if tool_name.startswith("cache"):
                raise ProbeError(tool_name, returncode=1, stderr="jbang not found")
            return '{"modules": 12, "gradleVersion": "8.5"}'

        def respond(prompt: str) -> str:
            if "orchestrator" in prompt:
                return '```json\n{"overall": "critical", "recommendations": [], "quickFixes": []}\n```'
            if "caching expert" in prompt:
                return "Critical: no cache report available"
            return "Project looks fine"

        probe = ProjectProbe(temp_dir)
        service = StubTextService(respond)
        with patch.object(ProjectProbe, "_execute", AsyncMock(side_effect=execute)):
            report = await HealthDoctor(probe, service).diagnose()

        assert report.overall == HealthVerdict.CRITICAL
        assert report.synthesized is True
        assert report.sections.caching.status == SectionStatus.ERROR
        assert report.sections.performance.status == SectionStatus.OK
        assert '"modules": 12' in service.prompts[0]
        assert len(service.prompts) == 5
