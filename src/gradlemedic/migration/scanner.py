"""Build script collection and deprecation/breaking-change scanning."""

import os
import re
from dataclasses import dataclass
from pathlib import Path

from pydantic import TypeAdapter, ValidationError

from gradlemedic.analysis import prompts
from gradlemedic.analysis.text_service import TextAnalysisService, extract_json
from gradlemedic.config import AnalysisConfig
from gradlemedic.core.models import BreakingChange, Deprecation
from gradlemedic.errors import ParseError
from gradlemedic.utils.fallback import try_or_default
from gradlemedic.utils.logging import get_logger

logger = get_logger(__name__)

BUILD_SCRIPT_NAMES = frozenset(
    {"build.gradle", "build.gradle.kts", "settings.gradle", "settings.gradle.kts"}
)
SKIP_DIRS = frozenset({"build", ".gradle", "node_modules", ".git", ".idea"})
MAX_SCRIPTS = 20


@dataclass
class KnownDeprecation:
    """A well-known deprecated API recognizable by a regex."""

    pattern: re.Pattern[str]
    api: str
    replacement: str
    removed_in: str
    auto_fixable: bool = False


KNOWN_DEPRECATIONS: list[KnownDeprecation] = [
    KnownDeprecation(re.compile(r"(?<![\w.])compile\("), "compile(", "implementation(", "7.0", True),
    KnownDeprecation(re.compile(r"(?<![\w.])compile\s+['\"]"), "compile", "implementation", "7.0"),
    KnownDeprecation(re.compile(r"(?<![\w.])testCompile[\s(]"), "testCompile", "testImplementation", "7.0"),
    KnownDeprecation(re.compile(r"(?<![\w.])runtime[\s(]"), "runtime", "runtimeOnly", "7.0"),
    KnownDeprecation(re.compile(r"tasks\.create\("), "tasks.create(", "tasks.register(", "", True),
    KnownDeprecation(re.compile(r"tasks\.getByName\("), "tasks.getByName(", "tasks.named(", "", True),
    KnownDeprecation(re.compile(r"\.convention\."), "project.convention", "project.extensions", "9.0"),
    KnownDeprecation(re.compile(r"\barchiveName\s*="), "archiveName", "archiveFileName.set()", "8.0"),
    KnownDeprecation(re.compile(r"\bbaseName\s*="), "baseName", "archiveBaseName.set()", "8.0"),
    KnownDeprecation(re.compile(r"\bdestinationDir\s*="), "destinationDir", "destinationDirectory.set()", "8.0"),
    KnownDeprecation(re.compile(r"\bbuildDir\b"), "buildDir", "layout.buildDirectory", "9.0"),
]

_deprecation_list = TypeAdapter(list[Deprecation])
_breaking_change_list = TypeAdapter(list[BreakingChange])


def collect_build_scripts(
    project_dir: str | Path,
    limit: int = MAX_SCRIPTS,
) -> dict[str, str]:
    """Read Gradle build and settings scripts under a project.

    Args:
        project_dir: Project root.
        limit: Maximum number of scripts to collect.

    Returns:
        Mapping of project-relative POSIX path to script content.
    """
    root = Path(project_dir)
    scripts: dict[str, str] = {}

    for dirpath, dirnames, filenames in os.walk(root):
        dirnames[:] = sorted(d for d in dirnames if d not in SKIP_DIRS)
        for filename in sorted(filenames):
            if filename not in BUILD_SCRIPT_NAMES:
                continue
            path = Path(dirpath) / filename
            try:
                content = path.read_text(encoding="utf-8")
            except (OSError, UnicodeDecodeError) as e:
                logger.warning("Skipping unreadable build script %s: %s", path, e)
                continue
            scripts[path.relative_to(root).as_posix()] = content
            if len(scripts) >= limit:
                return scripts

    return scripts


def scan_known_deprecations(scripts: dict[str, str]) -> list[Deprecation]:
    """Find well-known deprecated APIs line by line.

    Args:
        scripts: Mapping of file path to content.

    Returns:
        One deprecation per matching pattern per line, in file order.
    """
    deprecations: list[Deprecation] = []

    for file, content in scripts.items():
        for line_number, line in enumerate(content.splitlines(), start=1):
            for known in KNOWN_DEPRECATIONS:
                if known.pattern.search(line):
                    deprecations.append(
                        Deprecation(
                            api=known.api,
                            location=f"{file}:{line_number}",
                            replacement=known.replacement,
                            removed_in=known.removed_in,
                            auto_fixable=known.auto_fixable,
                        )
                    )

    return deprecations


class BuildScriptScanner:
    """Asks the text-analysis service about deprecations and breaking changes."""

    def __init__(
        self,
        service: TextAnalysisService,
        config: AnalysisConfig | None = None,
    ) -> None:
        self._service = service
        self._config = config or AnalysisConfig()

    async def scan_deprecations(
        self,
        scripts: dict[str, str],
        current: str,
        target: str,
    ) -> list[Deprecation]:
        """Find deprecated API usage.

        Falls back to the local regex scan when the service call fails or its
        response is not a valid deprecation list.
        """
        logger.info("Scanning for deprecated APIs")
        if not scripts:
            return []

        prompt = prompts.deprecation_prompt(scripts, current, target)
        text = await try_or_default(
            lambda: self._service.invoke(prompt, self._config.migration_max_tokens),
            None,
            "Deprecation scan",
        )

        if text is not None:
            try:
                return _deprecation_list.validate_python(extract_json(text, "array"))
            except (ParseError, ValidationError) as e:
                logger.warning("Invalid deprecation scan response: %s", e)

        logger.info("Using built-in deprecation patterns")
        return scan_known_deprecations(scripts)

    async def detect_breaking_changes(
        self,
        scripts: dict[str, str],
        current: str,
        target: str,
    ) -> list[BreakingChange]:
        """Find changes that will break the build on the target version."""
        logger.info("Detecting breaking changes")
        if not scripts:
            return []

        prompt = prompts.breaking_change_prompt(scripts, current, target)
        text = await try_or_default(
            lambda: self._service.invoke(prompt, self._config.migration_max_tokens),
            "",
            "Breaking change detection",
        )
        if not text:
            return []

        try:
            return _breaking_change_list.validate_python(extract_json(text, "array"))
        except (ParseError, ValidationError) as e:
            logger.warning("Invalid breaking change response: %s", e)
            return []
