"""Console rendering of health and migration reports."""

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from gradlemedic.core.models import (
    Compatibility,
    HealthReport,
    HealthVerdict,
    Impact,
    MigrationReport,
    Priority,
    SectionStatus,
)

RULE = "═" * 59

VERDICT_SYMBOLS = {
    HealthVerdict.HEALTHY: "✅",
    HealthVerdict.NEEDS_ATTENTION: "⚠️",
    HealthVerdict.CRITICAL: "🚨",
}

STATUS_SYMBOLS = {
    SectionStatus.OK: "✅",
    SectionStatus.WARNING: "⚠️",
    SectionStatus.ERROR: "❌",
}

PRIORITY_SYMBOLS = {
    Priority.HIGH: "🔴",
    Priority.MEDIUM: "🟡",
    Priority.LOW: "🟢",
}

COMPATIBILITY_SYMBOLS = {
    Compatibility.COMPATIBLE: "✅",
    Compatibility.MINOR_CHANGES: "🟡",
    Compatibility.MAJOR_CHANGES: "🟠",
    Compatibility.BREAKING: "🔴",
}

IMPACT_SYMBOLS = {
    Impact.HIGH: "🔴",
    Impact.MEDIUM: "🟠",
    Impact.LOW: "🟡",
}

RISK_SYMBOLS = {
    Impact.HIGH: "🔴",
    Impact.MEDIUM: "🟠",
    Impact.LOW: "🟢",
}

MAX_DEPRECATIONS_SHOWN = 10
MAX_FIXES_SHOWN = 5


def report_to_json(report: HealthReport | MigrationReport) -> str:
    """Serialize a report with the camelCase field names."""
    return report.model_dump_json(by_alias=True, indent=2)


class ReportPrinter:
    """Renders reports to a rich console.

    Empty sections are omitted.
    """

    def __init__(self, console: Console | None = None) -> None:
        self.console = console or Console()

    def _header(self, title: str) -> None:
        self.console.print()
        self.console.print(RULE)
        self.console.print(f"[bold]{title:^59}[/bold]")
        self.console.print(RULE)
        self.console.print()

    def print_health_report(self, report: HealthReport) -> None:
        """Print a build health report."""
        c = self.console
        self._header("GRADLE BUILD HEALTH REPORT")

        c.print(
            f"Overall: {VERDICT_SYMBOLS[report.overall]} "
            f"[bold]{report.overall.value.upper()}[/bold]"
        )
        if not report.synthesized:
            c.print("[dim]Synthesis unavailable; showing category results only.[/dim]")
        c.print()

        table = Table(title="Categories")
        table.add_column("Category", style="cyan")
        table.add_column("Status")
        table.add_column("Summary")
        for category, section in report.sections.items():
            table.add_row(
                category.value.capitalize(),
                f"{STATUS_SYMBOLS[section.status]} {section.status.value}",
                escape(section.summary),
            )
        c.print(table)

        for category, section in report.sections.items():
            if not section.details:
                continue
            c.print(f"\n[bold]{category.value.capitalize()}[/bold]")
            for detail in section.details:
                c.print(f"   {escape(detail)}")

        if report.recommendations:
            c.print("\n[bold]📋 Recommendations:[/bold]")
            for i, rec in enumerate(report.recommendations, start=1):
                c.print(
                    f"   {i}. {PRIORITY_SYMBOLS[rec.priority]} {escape(rec.title)} "
                    f"[dim]({escape(rec.category)}, {rec.effort.value})[/dim]"
                )
                if rec.description:
                    c.print(f"      {escape(rec.description)}")

        if report.quick_fixes:
            c.print("\n[bold]⚡ Quick Fixes:[/bold]")
            for fix in report.quick_fixes:
                marker = "[green]safe[/green]" if fix.safe else "[yellow]review first[/yellow]"
                c.print(f"   {escape(f'[{fix.id}]')} {escape(fix.description)} ({marker})")
                c.print(f"      $ {escape(fix.command)}")

        c.print()
        c.print(RULE)

    def print_migration_report(self, report: MigrationReport) -> None:
        """Print a migration report."""
        c = self.console
        self._header("GRADLE MIGRATION REPORT")

        c.print(f"📦 Current Version: {report.current_version}")
        c.print(f"🎯 Target Version:  {report.target_version}")
        c.print(f"⏱️  Estimated Effort: {escape(report.estimated_effort)}\n")

        c.print(
            f"Compatibility: {COMPATIBILITY_SYMBOLS[report.compatibility]} "
            f"[bold]{report.compatibility.value.upper()}[/bold]\n"
        )

        safe_fixes = [fix for fix in report.auto_fixable if fix.safe]

        c.print("📊 Summary:")
        c.print(f"   Deprecations found: {len(report.deprecations)}")
        c.print(f"   Breaking changes:   {len(report.breaking_changes)}")
        c.print(f"   Auto-fixable:       {len(safe_fixes)}")

        if report.deprecations:
            c.print("\n[bold]⚠️  Deprecations:[/bold]")
            for dep in report.deprecations[:MAX_DEPRECATIONS_SHOWN]:
                fixable = "🔧" if dep.auto_fixable else "📝"
                c.print(f"   {fixable} {escape(dep.api)} → {escape(dep.replacement)}")
                c.print(f"      Location: {escape(dep.location)}")
                if dep.removed_in:
                    c.print(f"      Removed in: {dep.removed_in}")
            if len(report.deprecations) > MAX_DEPRECATIONS_SHOWN:
                c.print(f"   ... and {len(report.deprecations) - MAX_DEPRECATIONS_SHOWN} more")

        if report.breaking_changes:
            c.print("\n[bold]🚨 Breaking Changes:[/bold]")
            for bc in report.breaking_changes:
                c.print(f"   {IMPACT_SYMBOLS[bc.impact]} \\[{escape(bc.id)}] {escape(bc.description)}")
                if bc.solution:
                    c.print(f"      Solution: {escape(bc.solution)}")

        if report.phases:
            c.print("\n[bold]📋 Migration Phases:[/bold]")
            for phase in report.phases:
                c.print(f"   {phase.order}. {escape(phase.name)} {RISK_SYMBOLS[phase.risk]}")
                if phase.description:
                    c.print(f"      {escape(phase.description)}")
                for step in phase.steps:
                    c.print(f"      • {escape(step)}")

        if safe_fixes:
            c.print("\n[bold]🔧 Available Auto-Fixes:[/bold]")
            for fix in safe_fixes[:MAX_FIXES_SHOWN]:
                c.print(f"   • {escape(fix.description)}")
            if len(safe_fixes) > MAX_FIXES_SHOWN:
                c.print(f"   ... and {len(safe_fixes) - MAX_FIXES_SHOWN} more")
            c.print("\n   Run with --apply to apply safe fixes automatically.")

        if report.manual_steps:
            c.print("\n[bold]📝 Manual Steps Required:[/bold]")
            for step in report.manual_steps:
                c.print(f"   {step.order}. {escape(step.title)}")
                if step.description:
                    c.print(f"      {escape(step.description)}")
                for command in step.commands:
                    c.print(f"      $ {escape(command)}")
                c.print(f"      ✓ Verify: {escape(step.verification)}")

        c.print()
        c.print(RULE)
