"""Pytest configuration and fixtures."""

import copy
import json

import pytest

from core.errors import InstallCommandError, ManifestReadError, ManifestWriteError


class InMemoryWorkspace:
    """Workspace that keeps manifests in a dict keyed by path."""

    def __init__(self, root="/ws"):
        self.root = root
        self.members: list[tuple[str, str]] = []
        self.files: dict[str, object] = {}
        self.artifacts: dict[str, str] = {}
        self.read_only: set[str] = set()
        self.writes: list[str] = []

    def add(self, name, data):
        """Register a sub-package; data may be a dict, raw text or None for missing."""
        path = f"{self.root}/packages/{name}"
        self.members.append((name, path))
        if data is not None:
            self.files[path] = data
        return path

    def list_members(self):
        return list(self.members)

    def read_manifest(self, path):
        if path not in self.files:
            raise ManifestReadError(path, "package.json not found")
        data = self.files[path]
        if isinstance(data, str):
            try:
                data = json.loads(data)
            except json.JSONDecodeError as e:
                raise ManifestReadError(path, f"invalid JSON: {e}")
        return copy.deepcopy(data)

    def write_manifest(self, path, data):
        if path in self.read_only:
            raise ManifestWriteError(path, "permission denied")
        self.files[path] = copy.deepcopy(data)
        self.writes.append(path)

    def write_artifact(self, filename, content):
        self.artifacts[filename] = content
        return f"{self.root}/{filename}"


class RecordingInstaller:
    """Installer that records calls instead of spawning a package manager."""

    def __init__(self, fail_with=None):
        self.calls: list[tuple[str, bool]] = []
        self.fail_with = fail_with

    def install(self, path, frozen=False):
        self.calls.append((path, frozen))
        if self.fail_with is not None:
            raise InstallCommandError("pnpm install", self.fail_with)


@pytest.fixture
def memory_workspace():
    """Empty in-memory workspace with a bare root manifest."""
    workspace = InMemoryWorkspace()
    workspace.files[workspace.root] = {"name": "monorepo"}
    return workspace


@pytest.fixture
def installer():
    return RecordingInstaller()


@pytest.fixture
def failing_installer():
    return RecordingInstaller(fail_with=1)


@pytest.fixture
def scenario_a(memory_workspace):
    """Root, x and y disagreeing on lodash across major versions."""
    memory_workspace.files[memory_workspace.root] = {
        "name": "monorepo",
        "dependencies": {"lodash": "^4.17.21"},
    }
    memory_workspace.add("x", {"name": "@mono/x", "dependencies": {"lodash": "^4.17.0"}})
    memory_workspace.add("y", {"name": "@mono/y", "devDependencies": {"lodash": "^3.0.0"}})
    return memory_workspace


@pytest.fixture
def scenario_b(memory_workspace):
    """Two sub-packages pinning different chalk patches, root silent."""
    memory_workspace.add("x", {"dependencies": {"chalk": "4.1.0"}})
    memory_workspace.add("y", {"dependencies": {"chalk": "4.1.2"}})
    return memory_workspace


@pytest.fixture
def disk_workspace(tmp_path):
    """Write a workspace to disk from {package: manifest} and return its root.

    The "root" key becomes the root package.json; other keys become
    packages/<name>/package.json. String values are written verbatim.
    """

    def _make(manifests):
        for name, data in manifests.items():
            directory = tmp_path if name == "root" else tmp_path / "packages" / name
            directory.mkdir(parents=True, exist_ok=True)
            content = data if isinstance(data, str) else json.dumps(data, indent=2) + "\n"
            (directory / "package.json").write_text(content)
        return tmp_path

    return _make
