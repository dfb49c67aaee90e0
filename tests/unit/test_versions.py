"""Tests for version detection and known version data."""

from collections.abc import Callable
from pathlib import Path
from unittest.mock import AsyncMock, patch

import httpx
import pytest

from gradlemedic.config import MigrationConfig
from gradlemedic.core.models import UNKNOWN_VERSION
from gradlemedic.errors import MissingTargetVersionError
from gradlemedic.migration import versions
from gradlemedic.migration.versions import (
    VersionResolver,
    java_supported,
    known_removals,
    parse_java_version,
    parse_kotlin_version,
    parse_wrapper_version,
    upgrade_path,
)


class TestParsers:
    """Tests for the version parsers."""

    def test_wrapper_version(self) -> None:
        """Versions are read from the distribution URL."""
        text = "distributionUrl=https\\://services.gradle.org/distributions/gradle-8.5-bin.zip"
        assert parse_wrapper_version(text) == "8.5"

    def test_wrapper_patch_version(self) -> None:
        """Three-part versions are kept whole."""
        assert parse_wrapper_version("gradle-7.6.4-all.zip") == "7.6.4"

    def test_wrapper_without_version(self) -> None:
        """Content without a distribution token yields None."""
        assert parse_wrapper_version("distributionBase=GRADLE_USER_HOME") is None

    def test_kotlin_version(self) -> None:
        """The Kotlin plugin version is found case-insensitively."""
        assert parse_kotlin_version('Kotlin("jvm") version "1.9.22"') == "1.9.22"
        assert parse_kotlin_version('id("java")') is None

    def test_java_version(self) -> None:
        """The major version comes from java -version output."""
        assert parse_java_version('openjdk version "17.0.9" 2023-10-17') == "17"
        assert parse_java_version('java version "1.8.0_392"') == "8"
        assert parse_java_version('openjdk version "11.0.21"') == "11"
        assert parse_java_version("command not found") is None


class TestUpgradePath:
    """Tests for intermediate upgrade hops."""

    @pytest.mark.parametrize(
        ("current", "target", "expected"),
        [
            ("5.6", "8.11", ["6.9", "7.6"]),
            ("6.9", "8.11", ["7.6"]),
            ("7.2", "8.5", ["7.6"]),
            ("7.6", "8.11", []),
            ("8.0", "8.11", []),
            ("5.6", "6.9", []),
            (UNKNOWN_VERSION, "8.11", []),
        ],
    )
    def test_hops(self, current: str, target: str, expected: list[str]) -> None:
        """Large jumps pass through the last minor of each major."""
        assert upgrade_path(current, target) == expected


class TestJavaSupported:
    """Tests for Java compatibility lookups."""

    def test_supported(self) -> None:
        """Java 21 runs Gradle 8.5."""
        assert java_supported("21", "8.5") is True

    def test_too_new(self) -> None:
        """Java 21 is too new for Gradle 8.0."""
        assert java_supported("21", "8.0") is False

    def test_unknown(self) -> None:
        """Unknown inputs give None."""
        assert java_supported(None, "8.5") is None
        assert java_supported("17", "6.0") is None


class TestKnownRemovals:
    """Tests for removal lookup."""

    def test_removals_in_range(self) -> None:
        """Removals from every release after current are collected."""
        assert known_removals("7.0", "8.11") == ["compile", "archiveName", "archivesBaseName"]

    def test_no_removals_within_same_release(self) -> None:
        """No known releases in range means no removals."""
        assert known_removals("8.0", "8.11") == []


class TestVersionResolver:
    """Tests for VersionResolver."""

    @pytest.mark.asyncio
    async def test_detect_from_wrapper(self, make_gradle_project: Callable[..., Path]) -> None:
        """Wrapper, Kotlin and Java versions are detected."""
        project = make_gradle_project("8.5")
        resolver = VersionResolver(project)

        with patch.object(resolver, "_detect_java_version", AsyncMock(return_value="17")):
            info = await resolver.detect_version()

        assert info.current == "8.5"
        assert info.wrapper is True
        assert info.kotlin_version == "1.9.22"
        assert info.java_version == "17"

    @pytest.mark.asyncio
    async def test_missing_wrapper(self, temp_dir: Path) -> None:
        """A project without a wrapper is the unknown state, not an error."""
        resolver = VersionResolver(temp_dir)

        with patch.object(resolver, "_detect_java_version", AsyncMock(return_value=None)):
            info = await resolver.detect_version()

        assert info.current == UNKNOWN_VERSION
        assert info.wrapper is False
        assert info.kotlin_version is None
        assert info.java_version is None

    @pytest.mark.asyncio
    async def test_missing_java_executable(self, temp_dir: Path) -> None:
        """A java binary that cannot be started leaves java_version absent."""
        resolver = VersionResolver(temp_dir)
        with patch(
            "asyncio.create_subprocess_exec",
            AsyncMock(side_effect=FileNotFoundError("java")),
        ):
            info = await resolver.detect_version()
        assert info.java_version is None

    @pytest.mark.asyncio
    async def test_resolve_explicit_target(self, temp_dir: Path) -> None:
        """An explicit target always wins."""
        resolver = VersionResolver(temp_dir)
        assert await resolver.resolve_target("8.0") == "8.0"

    @pytest.mark.asyncio
    async def test_resolve_default_target(self, temp_dir: Path) -> None:
        """Without online lookup the latest known version is used."""
        resolver = VersionResolver(temp_dir)
        assert await resolver.resolve_target(None) == "8.11"

    @pytest.mark.asyncio
    async def test_resolve_no_target(self, temp_dir: Path) -> None:
        """No explicit or configured target is a configuration error."""
        resolver = VersionResolver(temp_dir, MigrationConfig(latest_known_version=None))
        with pytest.raises(MissingTargetVersionError):
            await resolver.resolve_target(None)

    @pytest.mark.asyncio
    async def test_resolve_online(self, temp_dir: Path) -> None:
        """The online lookup returns the service's current version."""
        transport = httpx.MockTransport(
            lambda request: httpx.Response(200, json={"version": "8.12"})
        )
        config = MigrationConfig(check_latest_online=True)
        resolver = VersionResolver(temp_dir, config)

        real_client = versions.AsyncHttpClient
        with patch.object(
            versions,
            "AsyncHttpClient",
            lambda: real_client(max_retries=0, transport=transport),
        ):
            assert await resolver.resolve_target(None) == "8.12"

    @pytest.mark.asyncio
    async def test_resolve_online_failure_falls_back(self, temp_dir: Path) -> None:
        """A failed online lookup falls back to the latest known version."""
        transport = httpx.MockTransport(lambda request: httpx.Response(404))
        config = MigrationConfig(check_latest_online=True)
        resolver = VersionResolver(temp_dir, config)

        real_client = versions.AsyncHttpClient
        with patch.object(
            versions,
            "AsyncHttpClient",
            lambda: real_client(max_retries=0, transport=transport),
        ):
            assert await resolver.resolve_target(None) == "8.11"
