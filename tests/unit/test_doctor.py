"""Tests for the health diagnosis orchestrator."""

import asyncio
import json
from unittest.mock import AsyncMock

import pytest

from gradlemedic.analysis.doctor import HealthDoctor, parse_synthesis
from gradlemedic.analysis.probe import ProjectProbe
from gradlemedic.config import AnalysisConfig
from gradlemedic.core.models import HealthVerdict, Priority, SectionStatus
from gradlemedic.errors import ParseError

from helpers import FailingTextService, StubTextService

SYNTHESIS_RESPONSE = json.dumps(
    {
        "overall": "needs-attention",
        "recommendations": [
            {
                "priority": "high",
                "category": "caching",
                "title": "Enable build cache",
                "description": "Set org.gradle.caching=true",
                "effort": "quick",
            }
        ],
        "quickFixes": [
            {
                "id": "QF1",
                "description": "Enable parallel",
                "command": "echo org.gradle.parallel=true >> gradle.properties",
                "safe": True,
            }
        ],
    }
)


def make_probe(project: str = "project-json", cache: str = "cache-report") -> ProjectProbe:
    probe = ProjectProbe("/proj")
    probe.analyze_project = AsyncMock(return_value=project)
    probe.validate_cache = AsyncMock(return_value=cache)
    return probe


def respond(prompt: str) -> str:
    if "orchestrator" in prompt:
        return SYNTHESIS_RESPONSE
    if "caching expert" in prompt:
        return "Cache warning\n- build cache disabled\n\n- no remote cache"
    if "performance expert" in prompt:
        return "Configuration phase fails often"
    return "Looks fine\n- nothing to do"


class TestParseSynthesis:
    """Tests for synthesis parsing."""

    def test_parses_camel_case(self) -> None:
        """quickFixes maps onto quick_fixes."""
        result = parse_synthesis(SYNTHESIS_RESPONSE)
        assert result.overall == HealthVerdict.NEEDS_ATTENTION
        assert result.recommendations[0].priority == Priority.HIGH
        assert result.quick_fixes[0].id == "QF1"

    def test_invalid_verdict(self) -> None:
        """Unknown verdicts are parse errors."""
        with pytest.raises(ParseError):
            parse_synthesis('{"overall": "fine"}')

    def test_missing_verdict(self) -> None:
        """A response without a verdict is a parse error."""
        with pytest.raises(ParseError):
            parse_synthesis('{"recommendations": []}')

    def test_invalid_items_dropped_verdict_kept(self) -> None:
        """One malformed recommendation does not discard the verdict."""
        text = json.dumps(
            {
                "overall": "critical",
                "recommendations": [
                    {"priority": "critical", "title": "Bad priority", "effort": "quick"},
                    {"priority": "high", "title": "Enable build cache", "effort": "quick"},
                ],
                "quickFixes": [{"description": "no id", "command": "true"}],
            }
        )
        result = parse_synthesis(text)
        assert result.overall == HealthVerdict.CRITICAL
        assert [r.title for r in result.recommendations] == ["Enable build cache"]
        assert result.quick_fixes == []

    def test_null_lists_are_empty(self) -> None:
        """Null recommendation and quick fix lists count as empty."""
        result = parse_synthesis('{"overall": "healthy", "recommendations": null, "quickFixes": null}')
        assert result.recommendations == []
        assert result.quick_fixes == []


class TestHealthDoctor:
    """Tests for HealthDoctor.diagnose."""

    @pytest.mark.asyncio
    async def test_full_diagnosis(self) -> None:
        """Category results and synthesis are combined into the report."""
        service = StubTextService(respond)
        report = await HealthDoctor(make_probe(), service).diagnose()

        assert report.overall == HealthVerdict.NEEDS_ATTENTION
        assert report.synthesized is True
        assert report.sections.caching.status == SectionStatus.WARNING
        assert report.sections.caching.details == ["- build cache disabled", "- no remote cache"]
        assert report.sections.performance.status == SectionStatus.ERROR
        assert report.sections.structure.status == SectionStatus.OK
        assert report.recommendations[0].title == "Enable build cache"
        assert report.quick_fixes[0].safe is True
        assert len(service.prompts) == 5

    @pytest.mark.asyncio
    async def test_probe_outputs_reach_prompts(self) -> None:
        """Caching embeds cache output; other categories embed project data."""
        service = StubTextService(respond)
        await HealthDoctor(make_probe("PROJECT-DATA", "CACHE-DATA"), service).diagnose()

        category_prompts = service.prompts[:4]
        caching = [p for p in category_prompts if "caching expert" in p]
        assert len(caching) == 1
        assert "CACHE-DATA" in caching[0]
        others = [p for p in category_prompts if "caching expert" not in p]
        assert all("PROJECT-DATA" in p for p in others)

    @pytest.mark.asyncio
    async def test_synthesis_runs_after_all_categories(self) -> None:
        """The synthesis prompt is the last call and contains all sections."""
        service = StubTextService(respond)
        await HealthDoctor(make_probe(), service).diagnose()

        synthesis = service.prompts[-1]
        assert "orchestrator" in synthesis
        for label in ("Performance", "Caching", "Dependencies", "Structure"):
            assert f"{label}:" in synthesis

    @pytest.mark.asyncio
    async def test_sequential_mode(self) -> None:
        """Sequential mode produces the same sections."""
        config = AnalysisConfig(concurrent=False)
        concurrent = await HealthDoctor(make_probe(), StubTextService(respond)).diagnose()
        sequential = await HealthDoctor(
            make_probe(), StubTextService(respond), config
        ).diagnose()
        assert concurrent.sections == sequential.sections

    @pytest.mark.asyncio
    async def test_category_calls_are_concurrent(self) -> None:
        """The four category calls overlap in concurrent mode."""
        in_flight = 0
        peak = 0

        class SlowService:
            async def invoke(self, prompt: str, max_tokens: int | None = None) -> str:
                nonlocal in_flight, peak
                in_flight += 1
                peak = max(peak, in_flight)
                await asyncio.sleep(0.01)
                in_flight -= 1
                return ""

        await HealthDoctor(make_probe(), SlowService()).diagnose()
        assert peak == 4

    @pytest.mark.asyncio
    async def test_invalid_synthesis_keeps_defaults(self) -> None:
        """Malformed synthesis output leaves the default verdict."""
        service = StubTextService(
            lambda p: "not json at all" if "orchestrator" in p else "Critical failure"
        )
        report = await HealthDoctor(make_probe(), service).diagnose()

        assert report.overall == HealthVerdict.HEALTHY
        assert report.recommendations == []
        assert report.quick_fixes == []
        assert report.synthesized is False
        assert report.sections.performance.status == SectionStatus.ERROR

    @pytest.mark.asyncio
    async def test_critical_verdict_survives_bad_recommendation(self) -> None:
        """An out-of-vocabulary recommendation does not lose a critical verdict."""
        synthesis = json.dumps(
            {
                "overall": "critical",
                "recommendations": [
                    {"priority": "critical", "category": "caching", "title": "Fix cache", "effort": "quick"}
                ],
                "quickFixes": [],
            }
        )
        service = StubTextService(lambda p: synthesis if "orchestrator" in p else "Looks fine")
        report = await HealthDoctor(make_probe(), service).diagnose()

        assert report.overall == HealthVerdict.CRITICAL
        assert report.synthesized is True
        assert report.recommendations == []

    @pytest.mark.asyncio
    async def test_service_failure_still_returns_report(self) -> None:
        """Every call failing still yields a complete report."""
        service = FailingTextService()
        report = await HealthDoctor(make_probe("", ""), service).diagnose()

        assert service.calls == 5
        for _, section in report.sections.items():
            assert section.status == SectionStatus.OK
            assert section.summary == "Analysis complete"
        assert report.synthesized is False

    @pytest.mark.asyncio
    async def test_probe_called_twice(self) -> None:
        """The probe runs once for metadata and once for the cache."""
        probe = make_probe()
        await HealthDoctor(probe, StubTextService(respond)).diagnose()
        probe.analyze_project.assert_awaited_once()
        probe.validate_cache.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_max_tokens_from_config(self) -> None:
        """Category and synthesis calls use their configured bounds."""
        config = AnalysisConfig(max_tokens=111, synthesis_max_tokens=222)
        service = StubTextService(respond)
        await HealthDoctor(make_probe(), service, config).diagnose()
        assert service.max_tokens == [111, 111, 111, 111, 222]
