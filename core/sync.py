"""The DepSync pipeline: read, index, detect, plan, apply, report."""

import logging
from dataclasses import replace

from .applier import apply_fixes
from .config import SyncOptions
from .conflicts import detect_conflicts
from .errors import InstallCommandError, ManifestWriteError
from .index import build_index
from .installer import Installer
from .models import SyncResult
from .planner import plan_fixes
from .report import build_report, write_report
from .workspace import Workspace, read_workspace

logger = logging.getLogger(__name__)


def run_sync(workspace: Workspace, installer: Installer, options: SyncOptions) -> SyncResult:
    """Run one full sync against a workspace.

    Each stage finishes before the next starts. The report is persisted even
    when applying fixes fails; the failure is then re-raised.

    Args:
        workspace: Workspace to read and rewrite
        installer: Collaborator called once after manifests are rewritten
        options: Strategy, auto-fix flag and report name

    Returns:
        Result of the run, including where the report was written

    Raises:
        WorkspaceReadError: If the root manifest cannot be read
        ManifestWriteError: If a manifest cannot be rewritten
        InstallCommandError: If the reinstall fails
    """
    scan = read_workspace(workspace)
    logger.info("Scanned %d package(s)", len(scan.manifests))

    index = build_index(scan.manifests)
    conflicts = detect_conflicts(index)
    fix_plans = plan_fixes(conflicts, options.strategy)
    logger.info("%d conflict(s), %d fix plan(s)", len(conflicts), len(fix_plans))

    result = SyncResult(
        strategy=options.strategy,
        scan=scan,
        index=index,
        conflicts=tuple(conflicts),
        fix_plans=tuple(fix_plans),
        auto_fix=options.auto_fix,
    )

    failure = None
    if options.auto_fix and fix_plans:
        try:
            applied = apply_fixes(workspace, installer, fix_plans)
            result = replace(result, applied=True, applied_changes=tuple(applied))
        except (ManifestWriteError, InstallCommandError) as e:
            logger.error("Applying fixes failed: %s", e)
            failure = e
            result = replace(result, status="failed", error=str(e))

    report_path = write_report(workspace, build_report(result), options.report_name)
    result = replace(result, report_path=report_path)

    if failure is not None:
        raise failure
    return result
