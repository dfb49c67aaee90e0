"""Gradle version migration analysis.

Components:
- versions: Version detection, known release data and upgrade paths
- compatibility: Compatibility tier classification
- scanner: Build script collection and deprecation scanning
- planner: Migration plan builder
- fix_generator: Auto-fix generation
- applicator: Safe fix application
- engine: Migration analysis orchestrator
"""

from gradlemedic.migration.applicator import FixApplicator
from gradlemedic.migration.compatibility import assess_compatibility
from gradlemedic.migration.engine import MigrationEngine
from gradlemedic.migration.fix_generator import (
    COMMON_SAFE_FIXES,
    FixGenerator,
    generate_auto_fixes,
)
from gradlemedic.migration.planner import MigrationPlanner, get_default_plan
from gradlemedic.migration.scanner import (
    BuildScriptScanner,
    collect_build_scripts,
    scan_known_deprecations,
)
from gradlemedic.migration.versions import (
    KNOWN_VERSIONS,
    LATEST_KNOWN_VERSION,
    VersionResolver,
    java_supported,
    parse_wrapper_version,
    upgrade_path,
)

__all__ = [
    "FixApplicator",
    "assess_compatibility",
    "MigrationEngine",
    "COMMON_SAFE_FIXES",
    "FixGenerator",
    "generate_auto_fixes",
    "MigrationPlanner",
    "get_default_plan",
    "BuildScriptScanner",
    "collect_build_scripts",
    "scan_known_deprecations",
    "KNOWN_VERSIONS",
    "LATEST_KNOWN_VERSION",
    "VersionResolver",
    "java_supported",
    "parse_wrapper_version",
    "upgrade_path",
]
