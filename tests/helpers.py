"""Test doubles shared across the test suite."""

from collections.abc import Callable


class StubTextService:
    """Text-analysis service that answers from a prompt-matching callback."""

    def __init__(self, respond: Callable[[str], str] | None = None) -> None:
        self._respond = respond or (lambda prompt: "")
        self.prompts: list[str] = []
        self.max_tokens: list[int | None] = []

    async def invoke(self, prompt: str, max_tokens: int | None = None) -> str:
        self.prompts.append(prompt)
        self.max_tokens.append(max_tokens)
        return self._respond(prompt)


class FailingTextService:
    """Text-analysis service whose every call raises."""

    def __init__(self) -> None:
        self.calls = 0

    async def invoke(self, prompt: str, max_tokens: int | None = None) -> str:
        self.calls += 1
        raise ConnectionError("service unavailable")
