"""Workspace discovery and package.json reading/writing."""

import json
import logging
from pathlib import Path
from typing import Any, Protocol

from .config import DEFAULT_PACKAGES_DIR, MANIFEST_FILENAME
from .errors import ManifestReadError, ManifestWriteError, WorkspaceReadError
from .models import ROOT_PACKAGE, DeclarationType, Manifest, WorkspaceScan

logger = logging.getLogger(__name__)


class Workspace(Protocol):
    """Storage for a workspace's manifests."""

    root: str

    def list_members(self) -> list[tuple[str, str]]:
        """Return (package name, manifest path) for every sub-package directory."""
        ...

    def read_manifest(self, path: str) -> dict[str, Any]:
        """Return the parsed manifest stored at path.

        Raises:
            ManifestReadError: If the manifest is missing or unparsable
        """
        ...

    def write_manifest(self, path: str, data: dict[str, Any]) -> None:
        """Replace the manifest stored at path.

        Raises:
            ManifestWriteError: If the manifest cannot be written
        """
        ...

    def write_artifact(self, filename: str, content: str) -> str:
        """Write a file at the workspace root and return where it went."""
        ...


def dump_manifest(data: dict[str, Any]) -> str:
    """Serialize a manifest the way package managers format package.json."""
    return json.dumps(data, indent=2, ensure_ascii=False) + "\n"


class FileSystemWorkspace:
    """Workspace backed by package.json files on disk."""

    def __init__(self, root: str | Path, packages_dir: str = DEFAULT_PACKAGES_DIR):
        self.root = str(Path(root).resolve())
        self.packages_dir = packages_dir

    def list_members(self) -> list[tuple[str, str]]:
        packages_path = Path(self.root) / self.packages_dir
        if not packages_path.is_dir():
            logger.info("No %s directory under %s", self.packages_dir, self.root)
            return []

        return [
            (child.name, str(child))
            for child in sorted(packages_path.iterdir())
            if child.is_dir()
        ]

    def read_manifest(self, path: str) -> dict[str, Any]:
        manifest_file = Path(path) / MANIFEST_FILENAME
        try:
            content = manifest_file.read_text(encoding="utf-8")
        except FileNotFoundError:
            raise ManifestReadError(path, f"{MANIFEST_FILENAME} not found")
        except OSError as e:
            raise ManifestReadError(path, str(e))
        except UnicodeDecodeError as e:
            raise ManifestReadError(path, f"invalid UTF-8: {e}")

        try:
            data = json.loads(content)
        except json.JSONDecodeError as e:
            raise ManifestReadError(path, f"invalid JSON: {e}")

        if not isinstance(data, dict):
            raise ManifestReadError(path, "top-level JSON value is not an object")
        return data

    def write_manifest(self, path: str, data: dict[str, Any]) -> None:
        manifest_file = Path(path) / MANIFEST_FILENAME
        try:
            manifest_file.write_text(dump_manifest(data), encoding="utf-8")
        except OSError as e:
            raise ManifestWriteError(path, str(e))

    def write_artifact(self, filename: str, content: str) -> str:
        target = Path(self.root) / filename
        target.write_text(content, encoding="utf-8")
        return str(target)


def manifest_from_data(name: str, path: str, data: dict[str, Any]) -> Manifest:
    """Build a Manifest from parsed package.json content.

    Raises:
        ManifestReadError: If a declaration block is not a name -> string mapping
    """
    sections = {}
    for declaration_type in DeclarationType:
        block = data.get(declaration_type.value) or {}
        if not isinstance(block, dict) or not all(
            isinstance(spec, str) for spec in block.values()
        ):
            raise ManifestReadError(
                path, f"'{declaration_type.value}' is not a mapping of name to version"
            )
        sections[declaration_type] = dict(block)

    declared_name = data.get("name")
    return Manifest(
        name=name,
        path=path,
        dependencies=sections[DeclarationType.DEPENDENCIES],
        dev_dependencies=sections[DeclarationType.DEV_DEPENDENCIES],
        peer_dependencies=sections[DeclarationType.PEER_DEPENDENCIES],
        declared_name=declared_name if isinstance(declared_name, str) else None,
    )


def read_workspace(workspace: Workspace) -> WorkspaceScan:
    """Read the root manifest and every sub-package manifest.

    Args:
        workspace: Workspace to scan

    Returns:
        Scan with manifests keyed by package name, "root" first

    Raises:
        WorkspaceReadError: If the root manifest cannot be read
    """
    try:
        root_data = workspace.read_manifest(workspace.root)
        root_manifest = manifest_from_data(ROOT_PACKAGE, workspace.root, root_data)
    except ManifestReadError as e:
        raise WorkspaceReadError(f"Cannot read root manifest: {e.reason}") from e

    manifests = {ROOT_PACKAGE: root_manifest}
    warnings = []

    for name, path in workspace.list_members():
        if name == ROOT_PACKAGE:
            logger.warning("Skipping package directory named '%s': name is reserved", name)
            warnings.append(f"Skipped {name}: package name is reserved for the workspace root")
            continue

        try:
            manifests[name] = manifest_from_data(name, path, workspace.read_manifest(path))
        except ManifestReadError as e:
            logger.warning("Skipping package %s: %s", name, e.reason)
            warnings.append(f"Skipped {name}: {e.reason}")
            continue

        manifest = manifests[name]
        logger.info(
            "%s: %d deps, %d devDeps",
            name,
            len(manifest.dependencies),
            len(manifest.dev_dependencies),
        )

    return WorkspaceScan(root=workspace.root, manifests=manifests, warnings=tuple(warnings))
