"""Graceful degradation for calls to external collaborators."""

from collections.abc import Awaitable, Callable
from typing import TypeVar

from gradlemedic.utils.logging import get_logger

logger = get_logger(__name__)

T = TypeVar("T")


async def try_or_default(
    call: Callable[[], Awaitable[T]],
    fallback: T,
    description: str,
) -> T:
    """Await a collaborator call, substituting a fallback value on failure.

    Failures are logged at warning level and never re-raised. Each call is
    attempted exactly once.

    Args:
        call: Zero-argument callable returning the awaitable to run.
        fallback: Value returned when the call raises.
        description: Human-readable name of the call, used in the log line.

    Returns:
        The call's result, or the fallback.
    """
    try:
        return await call()
    except Exception as e:
        logger.warning("%s failed, continuing without it: %s", description, e)
        return fallback
