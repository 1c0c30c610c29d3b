"""Tests for workspace discovery and manifest reading."""

import json

import pytest

from core.errors import ManifestReadError, ManifestWriteError, WorkspaceReadError
from core.models import ROOT_PACKAGE
from core.workspace import FileSystemWorkspace, dump_manifest, manifest_from_data, read_workspace


class TestReadWorkspace:
    """Test reading the root and sub-package manifests."""

    def test_root_first_then_members_in_order(self, disk_workspace):
        root = disk_workspace({
            "root": {"name": "mono", "dependencies": {"lodash": "^4.17.21"}},
            "beta": {"name": "@mono/beta"},
            "alpha": {"name": "@mono/alpha", "devDependencies": {"jest": "^29.0.0"}},
        })

        scan = read_workspace(FileSystemWorkspace(root))

        assert list(scan.manifests) == [ROOT_PACKAGE, "alpha", "beta"]
        assert scan.manifests["alpha"].dev_dependencies == {"jest": "^29.0.0"}
        assert scan.manifests["alpha"].declared_name == "@mono/alpha"
        assert scan.manifests[ROOT_PACKAGE].path == str(root.resolve())
        assert scan.warnings == ()

    def test_missing_root_is_fatal(self, tmp_path):
        with pytest.raises(WorkspaceReadError):
            read_workspace(FileSystemWorkspace(tmp_path))

    def test_unparsable_root_is_fatal(self, disk_workspace):
        root = disk_workspace({"root": "{not json"})
        with pytest.raises(WorkspaceReadError):
            read_workspace(FileSystemWorkspace(root))

    def test_bad_member_is_skipped(self, disk_workspace):
        root = disk_workspace({
            "root": {"name": "mono"},
            "broken": "{oops",
            "good": {"dependencies": {"chalk": "4.1.0"}},
        })
        (root / "packages" / "empty").mkdir()

        scan = read_workspace(FileSystemWorkspace(root))

        assert list(scan.manifests) == [ROOT_PACKAGE, "good"]
        assert len(scan.warnings) == 2
        assert any("broken" in w for w in scan.warnings)
        assert any("empty" in w for w in scan.warnings)

    def test_non_utf8_member_is_skipped(self, disk_workspace):
        root = disk_workspace({"root": {"name": "mono"}, "good": {}})
        bad = root / "packages" / "bad"
        bad.mkdir()
        (bad / "package.json").write_bytes(b'{"name": "\xff\xfe"}')

        scan = read_workspace(FileSystemWorkspace(root))

        assert list(scan.manifests) == [ROOT_PACKAGE, "good"]
        assert any("bad" in w and "UTF-8" in w for w in scan.warnings)

    def test_non_utf8_root_is_fatal(self, tmp_path):
        (tmp_path / "package.json").write_bytes(b'{"name": "\xff"}')
        with pytest.raises(WorkspaceReadError):
            read_workspace(FileSystemWorkspace(tmp_path))

    def test_no_packages_directory(self, disk_workspace):
        root = disk_workspace({"root": {"name": "mono"}})
        scan = read_workspace(FileSystemWorkspace(root))
        assert list(scan.manifests) == [ROOT_PACKAGE]

    def test_files_in_packages_dir_are_ignored(self, disk_workspace):
        root = disk_workspace({"root": {"name": "mono"}, "a": {}})
        (root / "packages" / "README.md").write_text("hi")
        scan = read_workspace(FileSystemWorkspace(root))
        assert list(scan.manifests) == [ROOT_PACKAGE, "a"]

    def test_custom_packages_dir(self, tmp_path):
        (tmp_path / "package.json").write_text("{}")
        (tmp_path / "libs" / "core").mkdir(parents=True)
        (tmp_path / "libs" / "core" / "package.json").write_text("{}")

        scan = read_workspace(FileSystemWorkspace(tmp_path, packages_dir="libs"))

        assert "core" in scan.manifests

    def test_member_named_root_is_skipped(self, memory_workspace):
        memory_workspace.add(ROOT_PACKAGE, {"dependencies": {"a": "1.0.0"}})
        scan = read_workspace(memory_workspace)
        assert scan.manifests[ROOT_PACKAGE].path == memory_workspace.root
        assert len(scan.warnings) == 1

    def test_peer_dependencies_are_read(self, memory_workspace):
        memory_workspace.add("ui", {"peerDependencies": {"react": "^18.0.0"}})
        scan = read_workspace(memory_workspace)
        assert scan.manifests["ui"].peer_dependencies == {"react": "^18.0.0"}


class TestManifestFromData:
    """Test conversion of parsed JSON into a Manifest."""

    def test_non_mapping_section_rejected(self):
        with pytest.raises(ManifestReadError):
            manifest_from_data("x", "/x", {"dependencies": ["lodash"]})

    def test_non_string_specifier_rejected(self):
        with pytest.raises(ManifestReadError):
            manifest_from_data("x", "/x", {"devDependencies": {"jest": 29}})

    def test_null_section_is_empty(self):
        manifest = manifest_from_data("x", "/x", {"dependencies": None})
        assert manifest.dependencies == {}


class TestFileSystemWorkspace:
    """Test manifest storage on disk."""

    def test_top_level_array_rejected(self, tmp_path):
        (tmp_path / "package.json").write_text("[]")
        with pytest.raises(ManifestReadError):
            FileSystemWorkspace(tmp_path).read_manifest(str(tmp_path))

    def test_write_keeps_key_order_and_trailing_newline(self, tmp_path):
        workspace = FileSystemWorkspace(tmp_path)
        data = {"name": "x", "version": "1.0.0", "dependencies": {"b": "1", "a": "2"}}

        workspace.write_manifest(str(tmp_path), data)

        content = (tmp_path / "package.json").read_text()
        assert content == dump_manifest(data)
        assert content.endswith("}\n")
        assert list(json.loads(content)["dependencies"]) == ["b", "a"]

    def test_write_failure(self, tmp_path):
        workspace = FileSystemWorkspace(tmp_path)
        with pytest.raises(ManifestWriteError):
            workspace.write_manifest(str(tmp_path / "missing-dir"), {})

    def test_write_artifact(self, tmp_path):
        path = FileSystemWorkspace(tmp_path).write_artifact("report.json", "{}")
        assert (tmp_path / "report.json").read_text() == "{}"
        assert path.endswith("report.json")
