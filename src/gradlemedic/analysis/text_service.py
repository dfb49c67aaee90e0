"""Text-analysis service client.

The orchestrators only depend on the ``TextAnalysisService`` protocol: one
prompt in, free-form text out. ``AnthropicTextService`` is the production
implementation backed by the Anthropic Messages API.
"""

import json
from collections.abc import Iterable
from typing import Any, Literal, Protocol

from gradlemedic.config import GradlemedicConfig, require_api_key
from gradlemedic.errors import AnalysisServiceError, ParseError
from gradlemedic.utils.logging import get_logger

logger = get_logger(__name__)


class TextAnalysisService(Protocol):
    """Anything that can turn a prompt into analysis text."""

    async def invoke(self, prompt: str, max_tokens: int | None = None) -> str:
        """Send one user prompt and return the response text."""
        ...


def first_text_block(blocks: Iterable[Any] | None) -> str:
    """Return the text of the first ``type == "text"`` content block.

    Blocks may be SDK objects or plain mappings. Non-text blocks (tool calls,
    thinking) are skipped.

    Args:
        blocks: Response content blocks.

    Returns:
        The first block's text, or an empty string when there is none.
    """
    for block in blocks or []:
        if isinstance(block, dict):
            block_type = block.get("type")
            text = block.get("text")
        else:
            block_type = getattr(block, "type", None)
            text = getattr(block, "text", None)
        if block_type == "text":
            return text or ""
    return ""


def extract_json(text: str, kind: Literal["object", "array"] = "object") -> Any:
    """Parse the JSON object or array embedded in a model response.

    Everything between the first opening bracket and the last closing bracket
    is parsed, so code fences and surrounding prose are tolerated.

    Args:
        text: Response text.
        kind: Expected top-level JSON type.

    Returns:
        Parsed JSON value (dict for objects, list for arrays).

    Raises:
        ParseError: If no JSON value of the requested kind can be parsed.
    """
    opener, closer = ("{", "}") if kind == "object" else ("[", "]")
    start = text.find(opener)
    end = text.rfind(closer) + 1

    if start < 0 or end <= start:
        raise ParseError(f"No JSON {kind} found in response")

    try:
        data = json.loads(text[start:end])
    except json.JSONDecodeError as e:
        raise ParseError(f"Malformed JSON {kind} in response: {e}") from e

    expected = dict if kind == "object" else list
    if not isinstance(data, expected):
        raise ParseError(f"Expected a JSON {kind}, got {type(data).__name__}")

    return data


class AnthropicTextService:
    """Text analysis backed by the Anthropic Messages API."""

    def __init__(
        self,
        api_key: str,
        model: str,
        max_tokens: int = 2000,
        client: Any | None = None,
    ) -> None:
        """Initialize the service.

        Args:
            api_key: Anthropic API key.
            model: Model identifier.
            max_tokens: Default output bound per request.
            client: Pre-built ``AsyncAnthropic`` client (used by tests).
        """
        if client is None:
            import anthropic

            # Each call is attempted once.
            client = anthropic.AsyncAnthropic(api_key=api_key, max_retries=0)

        self._client = client
        self._model = model
        self._max_tokens = max_tokens

    @property
    def model(self) -> str:
        """Model identifier used for requests."""
        return self._model

    async def invoke(self, prompt: str, max_tokens: int | None = None) -> str:
        """Send a single user message and return the first text block.

        Raises:
            AnalysisServiceError: If the request fails.
        """
        try:
            response = await self._client.messages.create(
                model=self._model,
                max_tokens=max_tokens or self._max_tokens,
                messages=[{"role": "user", "content": prompt}],
            )
        except Exception as e:
            raise AnalysisServiceError(e) from e

        text = first_text_block(response.content)
        if not text:
            logger.debug("Response from %s contained no text block", self._model)
        return text


def create_text_service(config: GradlemedicConfig) -> AnthropicTextService:
    """Build the production text-analysis service from configuration.

    Raises:
        MissingTokenError: If no API key is configured.
    """
    return AnthropicTextService(
        api_key=require_api_key(config),
        model=config.analysis.model,
        max_tokens=config.analysis.max_tokens,
    )
