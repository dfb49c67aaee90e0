"""Gradle version detection and known version data.

Sources:
- Gradle compatibility matrix (docs.gradle.org/current/userguide/compatibility.html)
- Gradle upgrade guides for 6.x, 7.x and 8.x
"""

import asyncio
import re
from dataclasses import dataclass, field
from pathlib import Path

from gradlemedic.config import MigrationConfig
from gradlemedic.core.models import UNKNOWN_VERSION, VersionInfo
from gradlemedic.errors import MissingTargetVersionError
from gradlemedic.utils.http import AsyncHttpClient
from gradlemedic.utils.logging import get_logger

logger = get_logger(__name__)

WRAPPER_PROPERTIES = Path("gradle") / "wrapper" / "gradle-wrapper.properties"
KOTLIN_BUILD_SCRIPT = "build.gradle.kts"

LATEST_KNOWN_VERSION = "8.11"

WRAPPER_VERSION_PATTERN = re.compile(r"gradle-(\d+\.\d+(\.\d+)?)")
KOTLIN_VERSION_PATTERN = re.compile(
    r"kotlin.*version.*[\"'](\d+\.\d+\.\d+)[\"']", re.IGNORECASE
)
JAVA_VERSION_PATTERN = re.compile(r'version "(?:1\.)?(\d+)')


@dataclass
class KnownVersion:
    """Compatibility data for one Gradle release."""

    version: str
    min_java: int
    max_java: int
    deprecations: list[str] = field(default_factory=list)
    removals: list[str] = field(default_factory=list)


KNOWN_VERSIONS: list[KnownVersion] = [
    KnownVersion("7.0", min_java=8, max_java=16, deprecations=["compile", "testCompile"]),
    KnownVersion("7.6", min_java=8, max_java=19, deprecations=["archiveName"], removals=["compile"]),
    KnownVersion("8.0", min_java=8, max_java=19, removals=["archiveName", "archivesBaseName"]),
    KnownVersion("8.5", min_java=8, max_java=21),
    KnownVersion("8.11", min_java=8, max_java=23),
]


def parse_version(version: str) -> tuple[int, ...]:
    """Parse a version string to a comparable tuple."""
    parts = re.findall(r"\d+", version)
    return tuple(int(p) for p in parts[:3]) if parts else (0,)


def parse_wrapper_version(text: str) -> str | None:
    """Extract the Gradle version from gradle-wrapper.properties content."""
    match = WRAPPER_VERSION_PATTERN.search(text)
    return match.group(1) if match else None


def parse_kotlin_version(text: str) -> str | None:
    """Extract the Kotlin plugin version from a Kotlin DSL build script."""
    match = KOTLIN_VERSION_PATTERN.search(text)
    return match.group(1) if match else None


def parse_java_version(text: str) -> str | None:
    """Extract the Java major version from ``java -version`` output.

    Legacy ``1.x`` version strings map to ``x``.
    """
    match = JAVA_VERSION_PATTERN.search(text)
    return match.group(1) if match else None


def known_version_for(target: str) -> KnownVersion | None:
    """Return the newest known release not newer than target."""
    target_v = parse_version(target)
    candidates = [k for k in KNOWN_VERSIONS if parse_version(k.version) <= target_v]
    if not candidates:
        return None
    return max(candidates, key=lambda k: parse_version(k.version))


def known_removals(current: str, target: str) -> list[str]:
    """List APIs removed by releases after current up to and including target."""
    if current == UNKNOWN_VERSION:
        return []
    current_v = parse_version(current)
    target_v = parse_version(target)

    removals: list[str] = []
    for known in KNOWN_VERSIONS:
        if current_v < parse_version(known.version) <= target_v:
            removals.extend(r for r in known.removals if r not in removals)
    return removals


def upgrade_path(current: str, target: str) -> list[str]:
    """Intermediate releases to pass through between current and target.

    Gradle only guarantees deprecation warnings one major release ahead, so
    large jumps go through the last minor of each major in between.

    Args:
        current: Current Gradle version, possibly ``unknown``.
        target: Target Gradle version.

    Returns:
        Ordered list of intermediate versions, empty for direct upgrades.
    """
    if current == UNKNOWN_VERSION:
        return []
    current_v = parse_version(current)
    target_v = parse_version(target)

    hops: list[str] = []
    if current_v < (6,) and target_v >= (7,):
        hops.append("6.9")
    if current_v < (7, 6) and target_v >= (8,):
        hops.append("7.6")
    return hops


def java_supported(java_version: str | None, target: str) -> bool | None:
    """Whether the detected Java major version can run the target Gradle.

    Returns:
        True or False from the known data, None when either side is unknown.
    """
    if not java_version or not java_version.isdigit():
        return None
    known = known_version_for(target)
    if known is None:
        return None
    return known.min_java <= int(java_version) <= known.max_java


class VersionResolver:
    """Determines current and target Gradle versions for a project."""

    def __init__(
        self,
        project_dir: str | Path,
        config: MigrationConfig | None = None,
    ) -> None:
        """Initialize the resolver.

        Args:
            project_dir: Gradle project directory.
            config: Migration configuration.
        """
        self._project_dir = Path(project_dir)
        self._config = config or MigrationConfig()

    async def detect_version(self) -> VersionInfo:
        """Detect the wrapper, Kotlin and Java versions.

        Each probe is independent. A missing or unreadable source leaves its
        field absent, and this method never raises.
        """
        current = UNKNOWN_VERSION
        wrapper = False

        wrapper_text = self._read_text(WRAPPER_PROPERTIES)
        if wrapper_text is not None:
            version = parse_wrapper_version(wrapper_text)
            if version:
                current = version
                wrapper = True

        kotlin_version = None
        build_script = self._read_text(Path(KOTLIN_BUILD_SCRIPT))
        if build_script is not None:
            kotlin_version = parse_kotlin_version(build_script)

        java_version = await self._detect_java_version()

        info = VersionInfo(
            current=current,
            wrapper=wrapper,
            java_version=java_version,
            kotlin_version=kotlin_version,
        )
        logger.debug("Detected versions: %s", info)
        return info

    def _read_text(self, relative: Path) -> str | None:
        """Read a project file, returning None when it cannot be read."""
        path = self._project_dir / relative
        try:
            return path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            logger.debug("Could not read %s: %s", path, e)
            return None

    async def _detect_java_version(self) -> str | None:
        """Run ``java -version`` and parse the major version."""
        try:
            process = await asyncio.create_subprocess_exec(
                "java",
                "-version",
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.STDOUT,
            )
            output, _ = await process.communicate()
        except OSError as e:
            logger.debug("java -version failed: %s", e)
            return None

        return parse_java_version(output.decode(errors="replace"))

    async def resolve_target(self, explicit: str | None = None) -> str:
        """Determine the target Gradle version.

        Args:
            explicit: Version requested by the user, if any.

        Returns:
            The explicit version, the online current release, or the
            configured latest known version, in that order.

        Raises:
            MissingTargetVersionError: If no source yields a version.
        """
        if explicit:
            return explicit

        if self._config.check_latest_online:
            online = await self._fetch_latest_version()
            if online:
                return online

        if self._config.latest_known_version:
            return self._config.latest_known_version

        raise MissingTargetVersionError()

    async def _fetch_latest_version(self) -> str | None:
        """Ask the Gradle versions service for the current release."""
        try:
            async with AsyncHttpClient() as client:
                data = await client.get_json(self._config.versions_url)
        except Exception as e:
            logger.warning("Could not fetch latest Gradle version: %s", e)
            return None

        version = data.get("version") if isinstance(data, dict) else None
        if version:
            logger.info("Latest Gradle release: %s", version)
        return version
