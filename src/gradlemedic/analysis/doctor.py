"""Health diagnosis orchestrator.

Coordinates the build health workflow:
1. Probe the project (metadata and cache validation)
2. Analyze each category (performance, caching, dependencies, structure)
3. Classify each analysis into a status, summary and details
4. Synthesize an overall verdict, recommendations and quick fixes

Every external call degrades to an empty value on failure, so diagnose()
always returns a report.
"""

import asyncio
from typing import Any, TypeVar

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from gradlemedic.analysis import prompts
from gradlemedic.analysis.classifier import classify
from gradlemedic.analysis.probe import ProjectProbe
from gradlemedic.analysis.text_service import TextAnalysisService, extract_json
from gradlemedic.config import AnalysisConfig
from gradlemedic.core.models import (
    Category,
    HealthReport,
    HealthSections,
    HealthVerdict,
    QuickFix,
    Recommendation,
    SubagentResult,
)
from gradlemedic.errors import ParseError
from gradlemedic.utils.fallback import try_or_default
from gradlemedic.utils.logging import get_logger

logger = get_logger(__name__)

ItemT = TypeVar("ItemT", Recommendation, QuickFix)


class SynthesisResult(BaseModel):
    """Expected shape of the synthesis response."""

    model_config = ConfigDict(populate_by_name=True)

    overall: HealthVerdict
    recommendations: list[Recommendation] = Field(default_factory=list)
    quick_fixes: list[QuickFix] = Field(default_factory=list, alias="quickFixes")


def _valid_items(items: Any, model: type[ItemT], label: str) -> list[ItemT]:
    """Validate list entries one by one, dropping the invalid ones."""
    if items is None:
        return []
    if not isinstance(items, list):
        logger.warning("Ignoring synthesis %s: expected a list", label)
        return []

    valid: list[ItemT] = []
    for index, item in enumerate(items):
        try:
            valid.append(model.model_validate(item))
        except ValidationError as e:
            logger.warning("Dropping invalid %s #%d: %d errors", label, index, e.error_count())
    return valid


def parse_synthesis(text: str) -> SynthesisResult:
    """Parse the synthesis response.

    Only ``overall`` is required. Malformed recommendations and quick fixes
    are dropped individually, and null lists count as empty.

    Raises:
        ParseError: If the response has no object or no valid verdict.
    """
    data = extract_json(text, "object")
    try:
        overall = HealthVerdict(data.get("overall"))
    except (TypeError, ValueError) as e:
        raise ParseError(f"Invalid synthesis verdict: {data.get('overall')!r}") from e

    return SynthesisResult(
        overall=overall,
        recommendations=_valid_items(data.get("recommendations"), Recommendation, "recommendation"),
        quick_fixes=_valid_items(data.get("quickFixes"), QuickFix, "quick fix"),
    )


class HealthDoctor:
    """Runs category analyses and synthesizes a unified health report."""

    def __init__(
        self,
        probe: ProjectProbe,
        service: TextAnalysisService,
        config: AnalysisConfig | None = None,
    ) -> None:
        """Initialize the doctor.

        Args:
            probe: Project probe for the project under diagnosis.
            service: Text-analysis service.
            config: Analysis configuration.
        """
        self._probe = probe
        self._service = service
        self._config = config or AnalysisConfig()

    async def diagnose(self) -> HealthReport:
        """Run the full diagnosis.

        Returns:
            The health report. Degraded inputs still produce a report.
        """
        logger.info("Starting Gradle health analysis")

        project_data = await self._probe.analyze_project()
        cache_data = await self._probe.validate_cache()

        inputs = {
            Category.PERFORMANCE: project_data,
            Category.CACHING: cache_data,
            Category.DEPENDENCIES: project_data,
            Category.STRUCTURE: project_data,
        }

        if self._config.concurrent:
            results = await asyncio.gather(
                *(self._analyze_category(category, data) for category, data in inputs.items())
            )
        else:
            results = [
                await self._analyze_category(category, data)
                for category, data in inputs.items()
            ]

        sections = HealthSections(
            **{category.value: result for category, result in zip(inputs, results)}
        )

        return await self._synthesize(sections)

    async def _analyze_category(self, category: Category, data: str) -> SubagentResult:
        """Analyze and classify one category."""
        logger.info("Analyzing %s", category.value)

        prompt = prompts.category_prompt(category, data)
        analysis = await try_or_default(
            lambda: self._service.invoke(prompt, self._config.max_tokens),
            "",
            f"{category.value.capitalize()} analysis",
        )
        return classify(analysis, category.value)

    async def _synthesize(self, sections: HealthSections) -> HealthReport:
        """Produce the final report from the category results."""
        logger.info("Synthesizing results")

        prompt = prompts.synthesis_prompt(sections)
        text = await try_or_default(
            lambda: self._service.invoke(prompt, self._config.synthesis_max_tokens),
            "",
            "Synthesis",
        )

        try:
            synthesis = parse_synthesis(text)
        except ParseError as e:
            logger.warning("Failed to parse synthesis, keeping defaults: %s", e.message)
            return HealthReport(sections=sections, synthesized=False)

        return HealthReport(
            overall=synthesis.overall,
            sections=sections,
            recommendations=synthesis.recommendations,
            quick_fixes=synthesis.quick_fixes,
        )
