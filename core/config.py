"""Run configuration for DepSync."""

from dataclasses import dataclass

from .models import Strategy

DEFAULT_INSTALL_COMMAND = "pnpm install"
DEFAULT_PACKAGES_DIR = "packages"
DEFAULT_REPORT_NAME = "deps-sync-report.json"
MANIFEST_FILENAME = "package.json"


@dataclass
class SyncOptions:
    """Options controlling a single sync run."""

    strategy: Strategy = Strategy.WORKSPACE_FIRST
    auto_fix: bool = True
    install_command: str = DEFAULT_INSTALL_COMMAND
    packages_dir: str = DEFAULT_PACKAGES_DIR
    report_name: str = DEFAULT_REPORT_NAME
