"""Build health diagnosis.

Components:
- probe: Run project introspection tools
- text_service: Text-analysis service protocol and Anthropic client
- classifier: Keyword classification of category analyses
- prompts: Prompt templates for every analysis request
- doctor: Health diagnosis orchestrator
"""

from gradlemedic.analysis.classifier import classify, classify_status
from gradlemedic.analysis.doctor import HealthDoctor, SynthesisResult, parse_synthesis
from gradlemedic.analysis.probe import ProjectProbe
from gradlemedic.analysis.text_service import (
    AnthropicTextService,
    TextAnalysisService,
    create_text_service,
    extract_json,
    first_text_block,
)

__all__ = [
    # Classifier
    "classify",
    "classify_status",
    # Doctor
    "HealthDoctor",
    "SynthesisResult",
    "parse_synthesis",
    # Probe
    "ProjectProbe",
    # Text service
    "AnthropicTextService",
    "TextAnalysisService",
    "create_text_service",
    "extract_json",
    "first_text_block",
]
