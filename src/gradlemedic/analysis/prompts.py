"""Prompt templates for health and migration analyses."""

import json

from gradlemedic.core.models import Category, HealthSections, VersionInfo

CATEGORY_PROMPTS: dict[Category, str] = {
    Category.PERFORMANCE: """You are a Gradle performance expert. Analyze this project data and identify performance issues:

{data}

Focus on:
1. Configuration time vs execution time ratio
2. Parallel execution opportunities
3. Build cache effectiveness
4. Task avoidance patterns
5. JVM arguments optimization

Provide a concise summary and specific actionable recommendations.""",
    Category.CACHING: """You are a Gradle caching expert. Analyze this cache validation report:

{data}

Focus on:
1. Build cache configuration and effectiveness
2. Configuration cache compatibility
3. Task cacheability issues
4. Remote cache setup opportunities
5. Cache hit rate optimization

Provide a concise summary and specific recommendations.""",
    Category.DEPENDENCIES: """You are a Gradle dependency expert. Analyze this project for dependency issues:

{data}

Focus on:
1. Potential dependency conflicts
2. Version alignment opportunities
3. Version catalog usage
4. Dependency resolution strategy
5. Unused dependency detection

Provide a concise summary and recommendations.""",
    Category.STRUCTURE: """You are a Gradle build structure expert. Analyze this project structure:

{data}

Focus on:
1. Multi-project build organization
2. buildSrc or convention plugin usage
3. Settings file configuration
4. Project dependency graph
5. Build script organization

Provide a concise summary and recommendations.""",
}

SYNTHESIS_PROMPT = """You are the Gradle Doctor orchestrator. Review these analysis results and provide:
1. Overall health assessment (healthy/needs-attention/critical)
2. Top 5 prioritized recommendations
3. Quick wins (safe, high-impact fixes)

{sections}

Format as JSON with: overall, recommendations[], quickFixes[]
Each recommendation has: priority (high/medium/low), category, title, description, effort (quick/moderate/significant).
Each quick fix has: id, description, command, safe (boolean).

Return ONLY the JSON object."""

DEPRECATION_PROMPT = """You are a Gradle migration expert. Analyze these build scripts for deprecated APIs.

Current Gradle version: {current}
Target Gradle version: {target}

Build scripts:
{scripts}

Find ALL deprecated API usages that need to change before {target}. For each, provide:
1. The deprecated API/pattern
2. File location
3. Replacement API
4. Version where it's removed
5. Whether it can be auto-fixed with simple text replacement

Common deprecations to look for:
- tasks.create() -> tasks.register()
- tasks.getByName() -> tasks.named()
- archiveName -> archiveFileName.set()
- archivesBaseName -> base.archivesName.set()
- destinationDir -> destinationDirectory.set()
- compile/testCompile -> implementation/testImplementation
- project.convention.getPlugin() -> project.extensions.getByType()
- buildDir -> layout.buildDirectory

Return as JSON array:
[{{"api": "...", "location": "file:line", "replacement": "...", "removedIn": "8.0", "autoFixable": true}}]

Return ONLY the JSON array, no other text."""

BREAKING_CHANGE_PROMPT = """You are a Gradle migration expert. Identify breaking changes when upgrading from {current} to {target}.

Build scripts:
{scripts}

Identify breaking changes that WILL cause build failures. Consider:
1. Removed APIs (not just deprecated)
2. Changed behavior
3. Plugin compatibility issues
4. Java version requirements
5. Configuration changes

For each breaking change provide:
- Unique ID
- Description
- Impact level (low/medium/high)
- Affected files
- Solution

Return as JSON array:
[{{"id": "BC001", "description": "...", "impact": "high", "affectedFiles": ["build.gradle.kts"], "solution": "..."}}]

Return ONLY the JSON array. If no breaking changes found, return []."""

PLANNING_PROMPT = """You are a Gradle migration expert. Create a detailed migration plan.

Current: Gradle {current}, Java {java}
Target: Gradle {target}
Deprecations found: {deprecations}
Breaking changes: {breaking_changes}

Create a phased migration plan with:
1. Exactly five ordered phases: Preparation, Fix Deprecations, Update Wrapper, Fix Breaking Changes, Verification
2. Manual steps that require human intervention
3. Effort estimate

Return as JSON:
{{
  "phases": [
    {{"order": 1, "name": "Preparation", "description": "...", "steps": ["..."], "risk": "low"}}
  ],
  "manualSteps": [
    {{"order": 1, "title": "...", "description": "...", "commands": ["..."], "verification": "..."}}
  ],
  "effort": "2-4 hours"
}}

Return ONLY the JSON object."""


def category_prompt(category: Category, data: str) -> str:
    """Build the analysis prompt for one health category."""
    return CATEGORY_PROMPTS[category].format(data=data or "(no data available)")


def synthesis_prompt(sections: HealthSections) -> str:
    """Build the synthesis prompt from the four category results."""
    lines = [
        f"{category.value.capitalize()}: {json.dumps(result.model_dump(mode='json', exclude_none=True))}"
        for category, result in sections.items()
    ]
    return SYNTHESIS_PROMPT.format(sections="\n".join(lines))


def format_scripts(scripts: dict[str, str]) -> str:
    """Concatenate build scripts with file headers."""
    return "\n\n".join(f"--- {name} ---\n{content}" for name, content in scripts.items())


def deprecation_prompt(scripts: dict[str, str], current: str, target: str) -> str:
    """Build the deprecation scan prompt."""
    return DEPRECATION_PROMPT.format(
        current=current, target=target, scripts=format_scripts(scripts)
    )


def breaking_change_prompt(scripts: dict[str, str], current: str, target: str) -> str:
    """Build the breaking change detection prompt."""
    return BREAKING_CHANGE_PROMPT.format(
        current=current, target=target, scripts=format_scripts(scripts)
    )


def planning_prompt(
    version_info: VersionInfo,
    target: str,
    deprecation_count: int,
    breaking_change_count: int,
) -> str:
    """Build the migration planning prompt."""
    return PLANNING_PROMPT.format(
        current=version_info.current,
        java=version_info.java_version or "unknown",
        target=target,
        deprecations=deprecation_count,
        breaking_changes=breaking_change_count,
    )
