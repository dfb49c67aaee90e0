"""Pytest configuration and fixtures for gradlemedic tests."""

import tempfile
from collections.abc import Callable, Generator
from pathlib import Path

import pytest

from gradlemedic.core.models import (
    BreakingChange,
    Deprecation,
    Fix,
    Impact,
    MigrationReport,
)


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for tests."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def make_gradle_project(temp_dir: Path) -> Callable[..., Path]:
    """Factory creating a Gradle project with a wrapper and build script."""

    def _make(
        gradle_version: str | None = "8.5",
        build_script: str = 'plugins {\n    kotlin("jvm") version "1.9.22"\n}\n',
    ) -> Path:
        if gradle_version is not None:
            wrapper_dir = temp_dir / "gradle" / "wrapper"
            wrapper_dir.mkdir(parents=True, exist_ok=True)
            (wrapper_dir / "gradle-wrapper.properties").write_text(
                "distributionBase=GRADLE_USER_HOME\n"
                "distributionUrl=https\\://services.gradle.org/distributions/"
                f"gradle-{gradle_version}-bin.zip\n"
            )
        (temp_dir / "build.gradle.kts").write_text(build_script)
        (temp_dir / "settings.gradle.kts").write_text('rootProject.name = "sample"\n')
        return temp_dir

    return _make


@pytest.fixture
def sample_deprecations() -> list[Deprecation]:
    """Deprecations mixing auto-fixable and manual entries."""
    return [
        Deprecation(
            api="compile(",
            location="app/build.gradle.kts:12",
            replacement="implementation(",
            removed_in="7.0",
            auto_fixable=True,
        ),
        Deprecation(
            api="project.convention",
            location="build.gradle.kts:3",
            replacement="project.extensions",
            removed_in="9.0",
            auto_fixable=False,
        ),
    ]


@pytest.fixture
def sample_breaking_changes() -> list[BreakingChange]:
    """Breaking changes of mixed impact."""
    return [
        BreakingChange(
            id="BC001",
            description="archiveName removed",
            impact=Impact.HIGH,
            affected_files=["build.gradle.kts"],
            solution="Use archiveFileName.set()",
        ),
        BreakingChange(
            id="BC002",
            description="Plugin requires update",
            impact=Impact.LOW,
            solution="Bump plugin version",
        ),
    ]


@pytest.fixture
def migration_report_with_fixes() -> MigrationReport:
    """Migration report with two safe fixes and one unsafe fix."""
    return MigrationReport(
        current_version="7.6",
        target_version="8.11",
        auto_fixable=[
            Fix(
                id="DEP-1",
                description="Replace compile( with implementation(",
                file="build.gradle.kts",
                old_code="compile(",
                new_code="implementation(",
                safe=True,
            ),
            Fix(
                id="DEP-2",
                description="Rewrite convention access",
                file="build.gradle.kts",
                old_code="project.convention",
                new_code="project.extensions",
                safe=False,
            ),
            Fix(
                id="COMMON-3",
                description="Use lazy task registration",
                file="build.gradle.kts",
                old_code="tasks.create(",
                new_code="tasks.register(",
                safe=True,
            ),
        ],
    )
