"""Console summary and persisted JSON report."""

from dataclasses import replace
from datetime import datetime, timezone

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel
from rich.console import Console
from rich.table import Table

from .conflicts import find_duplicates
from .models import Conflict, DeclarationType, FixPlan, Location, Severity, Strategy, SyncResult
from .workspace import Workspace

SEVERITY_STYLES = {
    Severity.HIGH: "bold red",
    Severity.MEDIUM: "yellow",
    Severity.LOW: "green",
}


class ReportModel(BaseModel):
    """Base for report models serialized with camelCase keys."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class LocationReport(ReportModel):
    package: str
    declaration_type: DeclarationType
    manifest_path: str


class VersionReport(ReportModel):
    specifier: str
    packages: list[str]
    locations: list[LocationReport]


class ConflictReport(ReportModel):
    dependency: str
    severity: Severity
    versions: list[VersionReport]


class ChangeReport(ReportModel):
    package: str
    manifest_path: str
    declaration_type: DeclarationType
    from_version: str
    to_version: str
    delta: str


class FixPlanReport(ReportModel):
    dependency: str
    target_version: str
    changes: list[ChangeReport]


class SyncReport(ReportModel):
    """The artifact written at the workspace root after every run."""

    timestamp: datetime
    strategy: Strategy
    status: str
    applied: bool
    error: str | None = None
    warnings: list[str]
    conflicts: list[ConflictReport]
    fix_plan: list[FixPlanReport]
    applied_changes: list[FixPlanReport]
    duplicates: dict[str, dict[str, list[LocationReport]]]


def _location_report(location: Location) -> LocationReport:
    return LocationReport(
        package=location.package,
        declaration_type=location.declaration_type,
        manifest_path=location.manifest_path,
    )


def _conflict_report(conflict: Conflict) -> ConflictReport:
    return ConflictReport(
        dependency=conflict.dependency,
        severity=conflict.severity,
        versions=[
            VersionReport(
                specifier=group.specifier,
                packages=group.packages,
                locations=[_location_report(loc) for loc in group.locations],
            )
            for group in conflict.versions
        ],
    )


def _fix_plan_report(plan: FixPlan) -> FixPlanReport:
    return FixPlanReport(
        dependency=plan.dependency,
        target_version=plan.target_version,
        changes=[
            ChangeReport(
                package=change.package,
                manifest_path=change.manifest_path,
                declaration_type=change.declaration_type,
                from_version=change.from_version,
                to_version=change.to_version,
                delta=change.delta,
            )
            for change in plan.changes
        ],
    )


def applied_plans(result: SyncResult) -> list[FixPlan]:
    """Narrow the fix plans to the changes that were actually written."""
    written = set(result.applied_changes)
    plans = []
    for plan in result.fix_plans:
        changes = tuple(change for change in plan.changes if change in written)
        if changes:
            plans.append(replace(plan, changes=changes))
    return plans


def build_report(result: SyncResult, timestamp: datetime | None = None) -> SyncReport:
    """Convert a sync result into its persisted form."""
    duplicates = find_duplicates(result.index)
    return SyncReport(
        timestamp=timestamp or datetime.now(timezone.utc),
        strategy=result.strategy,
        status=result.status,
        applied=result.applied,
        error=result.error,
        warnings=list(result.scan.warnings),
        conflicts=[_conflict_report(c) for c in result.conflicts],
        fix_plan=[_fix_plan_report(p) for p in result.fix_plans],
        applied_changes=[_fix_plan_report(p) for p in applied_plans(result)],
        duplicates={
            dependency: {
                spec: [_location_report(loc) for loc in locations]
                for spec, locations in versions.items()
            }
            for dependency, versions in duplicates.items()
        },
    )


def write_report(workspace: Workspace, report: SyncReport, filename: str) -> str:
    """Persist a report at the workspace root, replacing any previous one.

    Returns:
        Where the report was written
    """
    content = report.model_dump_json(by_alias=True, indent=2)
    return workspace.write_artifact(filename, content + "\n")


def severity_counts(conflicts: list[Conflict]) -> dict[Severity, int]:
    counts = {severity: 0 for severity in Severity}
    for conflict in conflicts:
        counts[conflict.severity] += 1
    return counts


def render_summary(console: Console, result: SyncResult) -> None:
    """Print conflicts by severity and the fixes applied or planned."""
    conflicts = list(result.conflicts)
    counts = severity_counts(conflicts)

    console.print(f"Strategy: [bold]{result.strategy.value}[/bold]")
    console.print(
        f"Found {len(conflicts)} conflict(s): "
        + ", ".join(
            f"[{SEVERITY_STYLES[severity]}]{counts[severity]} {severity.value}[/]"
            for severity in (Severity.HIGH, Severity.MEDIUM, Severity.LOW)
        )
    )

    for warning in result.scan.warnings:
        console.print(f"Warning: {warning}", style="yellow")

    if conflicts:
        table = Table(title="Conflicts")
        table.add_column("Dependency", style="cyan")
        table.add_column("Severity")
        table.add_column("Versions")
        for conflict in conflicts:
            table.add_row(
                conflict.dependency,
                f"[{SEVERITY_STYLES[conflict.severity]}]{conflict.severity.value}[/]",
                "\n".join(
                    f"{group.specifier}: {', '.join(group.packages)}"
                    for group in conflict.versions
                ),
            )
        console.print(table)

    plans = applied_plans(result) if result.applied else list(result.fix_plans)
    if plans:
        title = "Fixes applied" if result.applied else "Fix plan (not applied)"
        table = Table(title=title)
        table.add_column("Dependency", style="cyan")
        table.add_column("Target")
        table.add_column("Changes")
        for plan in plans:
            table.add_row(
                plan.dependency,
                plan.target_version,
                "\n".join(
                    f"{c.package} ({c.declaration_type.value}): {c.from_version} -> {c.to_version}"
                    for c in plan.changes
                ),
            )
        console.print(table)
    elif conflicts:
        console.print("No manifest changes needed")

    skipped = sum(len(plan.changes) for plan in result.fix_plans) - len(result.applied_changes)
    if result.applied and skipped:
        console.print(f"Skipped {skipped} change(s) whose declaration no longer exists", style="yellow")

    if result.report_path:
        console.print(f"Report saved to {result.report_path}")
