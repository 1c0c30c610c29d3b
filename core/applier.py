"""Manifest rewriting for planned fixes."""

import logging

from .errors import ManifestReadError, ManifestWriteError
from .installer import Installer
from .models import Change, FixPlan
from .workspace import Workspace

logger = logging.getLogger(__name__)


def apply_change(workspace: Workspace, dependency: str, change: Change) -> bool:
    """Rewrite one declaration in the manifest currently on disk.

    The manifest is re-read rather than taken from the scan so edits made
    since then are kept.

    Returns:
        False if the declaration no longer exists and nothing was written

    Raises:
        ManifestWriteError: If the manifest cannot be read back or written
    """
    try:
        data = workspace.read_manifest(change.manifest_path)
    except ManifestReadError as e:
        raise ManifestWriteError(change.manifest_path, e.reason) from e

    section = data.get(change.declaration_type.value)
    if not isinstance(section, dict) or dependency not in section:
        logger.warning(
            "%s no longer declares %s in %s; skipping",
            change.package,
            dependency,
            change.declaration_type.value,
        )
        return False

    section[dependency] = change.to_version
    workspace.write_manifest(change.manifest_path, data)
    logger.info("%s: %s %s -> %s", change.package, dependency, change.from_version, change.to_version)
    return True


def apply_fixes(
    workspace: Workspace, installer: Installer, fix_plans: list[FixPlan]
) -> list[Change]:
    """Write every planned change, then reinstall once.

    Manifests already rewritten stay rewritten if a later write or the
    install fails.

    Args:
        workspace: Workspace holding the manifests
        installer: Collaborator used to reinstall after the rewrites
        fix_plans: Plans produced by the planner

    Returns:
        Changes that were actually written

    Raises:
        ManifestWriteError: If a manifest cannot be rewritten
        InstallCommandError: If the reinstall fails
    """
    applied = []
    for plan in fix_plans:
        for change in plan.changes:
            if apply_change(workspace, plan.dependency, change):
                applied.append(change)

    if applied:
        installer.install(workspace.root)
    return applied
