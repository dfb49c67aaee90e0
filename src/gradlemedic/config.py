"""Configuration management for gradlemedic."""

import os
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field, field_validator

from gradlemedic.errors import MissingTokenError

API_KEY_ENV = "ANTHROPIC_API_KEY"
MODEL_ENV = "ANTHROPIC_MODEL"

CONFIG_FILENAMES = (".gradlemedic.yml", ".gradlemedic.yaml")


class AnalysisConfig(BaseModel):
    """Configuration for calls to the text-analysis service."""

    model: str = Field(
        default="claude-sonnet-4-5-20250929",
        description="Model identifier sent with every analysis request",
    )
    max_tokens: int = Field(
        default=2000,
        ge=1,
        description="Output bound for each category analysis",
    )
    synthesis_max_tokens: int = Field(
        default=3000,
        ge=1,
        description="Output bound for the health synthesis request",
    )
    migration_max_tokens: int = Field(
        default=4000,
        ge=1,
        description="Output bound for deprecation, breaking-change and planning requests",
    )
    concurrent: bool = Field(
        default=True,
        description="Issue the four category analyses concurrently",
    )


class ProbeConfig(BaseModel):
    """Configuration for the project probe tools."""

    runner: str = Field(
        default="jbang",
        description="Executable used to run probe tools (jbang, java)",
    )
    tools_dir: str = Field(
        default="./tools",
        description="Directory containing the probe tool sources",
    )
    project_analyzer: str = Field(
        default="gradle-analyzer.java",
        description="Tool that emits project metadata as JSON",
    )
    cache_validator: str = Field(
        default="cache-validator.java",
        description="Tool that validates build and configuration cache setup",
    )

    @field_validator("runner")
    @classmethod
    def validate_runner(cls, v: str) -> str:
        """Validate probe runner value."""
        allowed = {"jbang", "java"}
        if v.lower() not in allowed:
            raise ValueError(f"runner must be one of: {allowed}")
        return v.lower()


class MigrationConfig(BaseModel):
    """Configuration for migration analysis."""

    latest_known_version: str | None = Field(
        default="8.11",
        description="Target version used when none is given explicitly",
    )
    check_latest_online: bool = Field(
        default=False,
        description="Look up the current Gradle release from versions_url",
    )
    versions_url: str = Field(
        default="https://services.gradle.org/versions/current",
        description="Gradle versions service endpoint",
    )
    deprecation_threshold: int = Field(
        default=10,
        ge=1,
        description="Deprecation count at which a migration needs minor changes",
    )
    breaking_threshold: int = Field(
        default=3,
        ge=1,
        description="High-impact breaking change count at which a migration is breaking",
    )
    default_fix_file: str = Field(
        default="build.gradle.kts",
        description="Build script targeted by the common safe fixes",
    )


class GradlemedicConfig(BaseModel):
    """Complete gradlemedic configuration."""

    version: int = Field(default=1, description="Configuration file version")
    analysis: AnalysisConfig = Field(default_factory=AnalysisConfig)
    probe: ProbeConfig = Field(default_factory=ProbeConfig)
    migration: MigrationConfig = Field(default_factory=MigrationConfig)
    api_key: str | None = Field(
        default=None,
        description="Anthropic API key (prefer ANTHROPIC_API_KEY env var)",
        repr=False,
    )


def find_config_file(start_path: Path | None = None) -> Path | None:
    """Find the nearest .gradlemedic.yml configuration file.

    Searches from start_path up to the root directory.

    Args:
        start_path: Starting directory for search (defaults to cwd).

    Returns:
        Path to config file if found, None otherwise.
    """
    if start_path is None:
        start_path = Path.cwd()

    current = start_path.resolve()

    while current != current.parent:
        for filename in CONFIG_FILENAMES:
            config_path = current / filename
            if config_path.exists():
                return config_path

        current = current.parent

    return None


def load_config(
    config_path: Path | None = None,
    start_path: Path | None = None,
) -> GradlemedicConfig:
    """Load configuration from file and environment variables.

    Priority (highest to lowest):
    1. Environment variables
    2. Config file
    3. Defaults

    Args:
        config_path: Path to config file (searches if not provided).
        start_path: Directory to start the config file search from.

    Returns:
        Loaded configuration.
    """
    config_data: dict[str, Any] = {}

    if config_path is None:
        config_path = find_config_file(start_path)

    if config_path and config_path.exists():
        with open(config_path) as f:
            file_data = yaml.safe_load(f)
            if file_data:
                config_data = file_data

    api_key = os.environ.get(API_KEY_ENV)
    if api_key:
        config_data["api_key"] = api_key

    model = os.environ.get(MODEL_ENV)
    if model:
        config_data.setdefault("analysis", {})
        config_data["analysis"]["model"] = model

    return GradlemedicConfig(**config_data)


def require_api_key(config: GradlemedicConfig) -> str:
    """Return the configured API key.

    Raises:
        MissingTokenError: If no key is configured.
    """
    if not config.api_key:
        raise MissingTokenError(API_KEY_ENV)
    return config.api_key


def generate_example_config() -> str:
    """Generate an example configuration file.

    Returns:
        YAML string of example configuration.
    """
    example = """# gradlemedic configuration

version: 1

# Text-analysis settings (API key via ANTHROPIC_API_KEY env var)
analysis:
  # Model used for every analysis request (ANTHROPIC_MODEL overrides)
  model: claude-sonnet-4-5-20250929
  # Output bound per category analysis
  max_tokens: 2000
  # Output bound for the health synthesis
  synthesis_max_tokens: 3000
  # Output bound for migration scans and planning
  migration_max_tokens: 4000
  # Run the four health categories concurrently
  concurrent: true

# Project probe tools
probe:
  # jbang or java
  runner: jbang
  tools_dir: ./tools
  project_analyzer: gradle-analyzer.java
  cache_validator: cache-validator.java

# Migration analysis
migration:
  # Target used when --target is not given
  latest_known_version: "8.11"
  # Ask services.gradle.org for the current release instead
  check_latest_online: false
  versions_url: https://services.gradle.org/versions/current
  # Deprecations needed for "minor-changes"
  deprecation_threshold: 10
  # High-impact breaking changes needed for "breaking"
  breaking_threshold: 3
  # Build script targeted by the common safe fixes
  default_fix_file: build.gradle.kts
"""
    return example
