"""Project probe: runs external introspection tools against a Gradle project."""

import asyncio
from pathlib import Path

from gradlemedic.config import ProbeConfig
from gradlemedic.errors import ProbeError
from gradlemedic.utils.fallback import try_or_default
from gradlemedic.utils.logging import get_logger

logger = get_logger(__name__)


class ProjectProbe:
    """Runs probe tools and captures their standard output.

    Each tool is invoked as ``<runner> <tools_dir>/<tool> <project_dir> <args...>``.
    """

    def __init__(
        self,
        project_dir: str | Path,
        config: ProbeConfig | None = None,
    ) -> None:
        """Initialize the probe.

        Args:
            project_dir: Gradle project directory.
            config: Probe configuration.
        """
        self._project_dir = Path(project_dir)
        self._config = config or ProbeConfig()

    def build_command(self, tool_name: str, args: list[str]) -> list[str]:
        """Build the argv for one tool invocation."""
        tool_path = Path(self._config.tools_dir) / tool_name
        return [self._config.runner, str(tool_path), str(self._project_dir), *args]

    async def _execute(self, tool_name: str, args: list[str]) -> str:
        """Run a tool and return stdout.

        Raises:
            ProbeError: If the tool cannot be started or exits non-zero.
        """
        argv = self.build_command(tool_name, args)
        logger.debug("Running probe: %s", " ".join(argv))

        try:
            process = await asyncio.create_subprocess_exec(
                *argv,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
        except OSError as e:
            raise ProbeError(tool_name, stderr=str(e)) from e

        stdout, stderr = await process.communicate()

        if process.returncode != 0:
            raise ProbeError(
                tool_name,
                returncode=process.returncode,
                stderr=stderr.decode(errors="replace"),
            )

        return stdout.decode(errors="replace")

    async def run_tool(self, tool_name: str, args: list[str] | None = None) -> str:
        """Run a tool, returning an empty string if it fails."""
        return await try_or_default(
            lambda: self._execute(tool_name, args or []),
            "",
            f"Probe tool {tool_name}",
        )

    async def analyze_project(self) -> str:
        """Collect general project metadata as JSON text."""
        return await self.run_tool(self._config.project_analyzer, ["--json"])

    async def validate_cache(self) -> str:
        """Collect build and configuration cache validation output."""
        return await self.run_tool(self._config.cache_validator, [])
