"""Error types raised by the DepSync engine."""


class DepSyncError(Exception):
    """Base class for all DepSync failures."""


class WorkspaceReadError(DepSyncError):
    """The root manifest is missing or unparsable."""


class ManifestReadError(DepSyncError):
    """A sub-package manifest is missing or unparsable."""

    def __init__(self, path: str, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"Cannot read manifest in {path}: {reason}")


class ManifestWriteError(DepSyncError):
    """A manifest could not be rewritten."""

    def __init__(self, path: str, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"Cannot write manifest in {path}: {reason}")


class InstallCommandError(DepSyncError):
    """The package manager install command exited non-zero."""

    def __init__(self, command: str, returncode: int):
        self.command = command
        self.returncode = returncode
        super().__init__(f"Install command '{command}' failed with exit code {returncode}")
