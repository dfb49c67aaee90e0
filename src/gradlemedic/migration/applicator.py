"""Applies safe auto-fixes to build scripts."""

import asyncio
from pathlib import Path

from rich.console import Console
from rich.markup import escape

from gradlemedic.core.models import FixApplicationResult, MigrationReport
from gradlemedic.errors import FixApplicationError
from gradlemedic.migration.planner import wrapper_command
from gradlemedic.utils.logging import get_logger

logger = get_logger(__name__)

DRY_RUN_MARKER = "Dry run"


class FixApplicator:
    """Applies the safe fixes of a migration report, one at a time.

    In dry-run mode every fix is printed and no file is read or written.
    In live mode unsafe fixes are skipped without being read, and each safe
    fix reads its file exactly once.
    """

    def __init__(
        self,
        project_dir: str | Path,
        dry_run: bool = False,
        console: Console | None = None,
    ) -> None:
        """Initialize the applicator.

        Args:
            project_dir: Directory fix paths are relative to.
            dry_run: Report intended changes without touching files.
            console: Console for progress output.
        """
        self._project_dir = Path(project_dir)
        self.dry_run = dry_run
        self._console = console or Console()

    def apply_fixes(self, report: MigrationReport) -> FixApplicationResult:
        """Apply the report's auto-fixes.

        Args:
            report: Migration report whose auto_fixable list is applied.

        Returns:
            Fix ids grouped by outcome.
        """
        result = FixApplicationResult(dry_run=self.dry_run)

        if self.dry_run:
            self._console.print(
                f"[bold yellow]{DRY_RUN_MARKER}:[/bold yellow] no files will be modified"
            )
            for fix in report.auto_fixable:
                label = "safe" if fix.safe else "unsafe, would skip"
                self._console.print(
                    f"  Would apply {fix.id} ({label}): {escape(fix.description)} in {fix.file}"
                )
                result.skipped.append(fix.id)
            return result

        self._console.print("[bold]Applying fixes...[/bold]")

        for fix in report.auto_fixable:
            if not fix.safe:
                self._console.print(f"  [yellow]Skipping unsafe fix {fix.id}[/yellow]")
                result.skipped.append(fix.id)
                continue

            path = self._project_dir / fix.file
            try:
                content = self._read(path)
                if not fix.old_code:
                    raise FixApplicationError(fix.file, message=f"Fix {fix.id} has no code to replace")
                updated = content.replace(fix.old_code, fix.new_code, 1)
                if updated == content:
                    result.unchanged.append(fix.id)
                    continue
                self._write(path, updated)
            except FixApplicationError as e:
                logger.error("Fix %s failed: %s", fix.id, e.message)
                self._console.print(f"  [red]Failed {fix.id}: {escape(e.message)}[/red]")
                result.failed.append(fix.id)
                continue

            self._console.print(f"  [green]Applied {fix.id}:[/green] {escape(fix.description)}")
            result.applied.append(fix.id)

        logger.info(
            "Fixes applied: %d, unchanged: %d, skipped: %d, failed: %d",
            len(result.applied),
            len(result.unchanged),
            len(result.skipped),
            len(result.failed),
        )
        return result

    def _read(self, path: Path) -> str:
        try:
            return path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            raise FixApplicationError(str(path), e) from e

    def _write(self, path: Path, content: str) -> None:
        try:
            path.write_text(content, encoding="utf-8")
        except OSError as e:
            raise FixApplicationError(str(path), e) from e

    async def update_wrapper(self, target_version: str) -> bool:
        """Update the Gradle wrapper to target_version.

        Uses the project's ``gradlew`` when present, else ``gradle``.

        Returns:
            True when the command succeeded (always True in dry-run).
        """
        executable = "./gradlew" if (self._project_dir / "gradlew").exists() else "gradle"
        command = wrapper_command(target_version, executable)

        if self.dry_run:
            self._console.print(f"  Would run: {command}")
            return True

        self._console.print(f"Updating wrapper to Gradle {target_version}...")
        try:
            process = await asyncio.create_subprocess_exec(
                *command.split(),
                cwd=self._project_dir,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.STDOUT,
            )
            output, _ = await process.communicate()
        except OSError as e:
            logger.error("Wrapper update failed to start: %s", e)
            self._console.print(f"[red]Wrapper update failed: {escape(str(e))}[/red]")
            return False

        if process.returncode != 0:
            logger.error("Wrapper update failed: %s", output.decode(errors="replace").strip())
            self._console.print(
                f"[red]Wrapper update failed with exit code {process.returncode}[/red]"
            )
            return False

        self._console.print(f"[green]Wrapper updated to Gradle {target_version}[/green]")
        return True
