"""Auto-fix generation for deprecated Gradle APIs."""

from dataclasses import dataclass

from gradlemedic.core.models import BreakingChange, Deprecation, Fix


@dataclass
class CommonFix:
    """A version-independent literal rewrite."""

    old: str
    new: str
    description: str


# Long-deprecated tokens whose modern replacement is a pure rename
COMMON_SAFE_FIXES: list[CommonFix] = [
    CommonFix("tasks.create(", "tasks.register(", "Use lazy task registration"),
    CommonFix("tasks.getByName(", "tasks.named(", "Use lazy task reference"),
    CommonFix("compile(", "implementation(", "Replace compile with implementation"),
    CommonFix("testCompile(", "testImplementation(", "Replace testCompile with testImplementation"),
    CommonFix("runtime(", "runtimeOnly(", "Replace runtime with runtimeOnly"),
]


class FixGenerator:
    """Turns deprecations into literal text substitutions."""

    def __init__(self, default_fix_file: str = "build.gradle.kts"):
        """Initialize the fix generator.

        Args:
            default_fix_file: Build script targeted by the common fixes.
        """
        self._default_fix_file = default_fix_file

    def generate(
        self,
        deprecations: list[Deprecation],
        breaking_changes: list[BreakingChange] | None = None,
    ) -> list[Fix]:
        """Generate fixes for auto-fixable deprecations plus the common catalog.

        Breaking changes never produce fixes; they are accepted so callers can
        pass the full scan result.

        Args:
            deprecations: Detected deprecations.
            breaking_changes: Detected breaking changes (unused).

        Returns:
            Ordered fix list with unique ids.
        """
        fixes: list[Fix] = []

        for dep in deprecations:
            if not dep.auto_fixable:
                continue
            fixes.append(
                Fix(
                    id=f"DEP-{len(fixes) + 1}",
                    description=f"Replace {dep.api} with {dep.replacement}",
                    file=dep.location.split(":")[0] or self._default_fix_file,
                    old_code=dep.api,
                    new_code=dep.replacement,
                    safe=bool(dep.api and dep.replacement),
                )
            )

        for common in COMMON_SAFE_FIXES:
            fixes.append(
                Fix(
                    id=f"COMMON-{len(fixes) + 1}",
                    description=common.description,
                    file=self._default_fix_file,
                    old_code=common.old,
                    new_code=common.new,
                    safe=True,
                )
            )

        return fixes


def generate_auto_fixes(
    deprecations: list[Deprecation],
    breaking_changes: list[BreakingChange] | None = None,
    default_fix_file: str = "build.gradle.kts",
) -> list[Fix]:
    """Convenience function to generate auto-fixes.

    Args:
        deprecations: Detected deprecations.
        breaking_changes: Detected breaking changes (never fixed).
        default_fix_file: Build script targeted by the common fixes.

    Returns:
        List of fixes.
    """
    return FixGenerator(default_fix_file).generate(deprecations, breaking_changes)
