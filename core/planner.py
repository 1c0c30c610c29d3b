"""Target version selection and fix planning."""

from .models import ROOT_PACKAGE, Change, Conflict, FixPlan, Strategy
from .versions import pick_latest, semver_delta


def select_target(conflict: Conflict, strategy: Strategy) -> str:
    """Pick the single specifier every location of a conflict should use.

    Args:
        conflict: Conflict to resolve
        strategy: WORKSPACE_FIRST uses the root's specifier when the root
            declares one and falls back to LATEST otherwise

    Returns:
        Target specifier
    """
    if strategy is Strategy.WORKSPACE_FIRST:
        for group in conflict.versions:
            if ROOT_PACKAGE in group.packages:
                return group.specifier

    return pick_latest(conflict.specifiers)


def plan_fix(conflict: Conflict, target: str) -> FixPlan:
    """List the edits that move every location of a conflict to target."""
    changes = tuple(
        Change(
            package=location.package,
            manifest_path=location.manifest_path,
            declaration_type=location.declaration_type,
            from_version=group.specifier,
            to_version=target,
            delta=semver_delta(group.specifier, target),
        )
        for group in conflict.versions
        if group.specifier != target
        for location in group.locations
    )
    return FixPlan(dependency=conflict.dependency, target_version=target, changes=changes)


def plan_fixes(conflicts: list[Conflict], strategy: Strategy) -> list[FixPlan]:
    """Plan fixes for all conflicts, dropping plans with nothing to change."""
    plans = []
    for conflict in conflicts:
        plan = plan_fix(conflict, select_target(conflict, strategy))
        if plan.changes:
            plans.append(plan)
    return plans
