"""Core data models for DepSync."""

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum

ROOT_PACKAGE = "root"


class DeclarationType(str, Enum):
    """Manifest sections that declare dependencies."""

    DEPENDENCIES = "dependencies"
    DEV_DEPENDENCIES = "devDependencies"
    PEER_DEPENDENCIES = "peerDependencies"


# peerDependencies are read but never take part in conflict detection
INDEXED_TYPES = (DeclarationType.DEPENDENCIES, DeclarationType.DEV_DEPENDENCIES)


class Strategy(str, Enum):
    """Rule used to pick the target version of a conflict."""

    WORKSPACE_FIRST = "workspace-first"
    LATEST = "latest"


class Severity(str, Enum):
    """Risk classification of a conflict."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


@dataclass(frozen=True)
class Manifest:
    """A workspace member's declared dependency set."""

    name: str
    path: str
    dependencies: Mapping[str, str] = field(default_factory=dict)
    dev_dependencies: Mapping[str, str] = field(default_factory=dict)
    peer_dependencies: Mapping[str, str] = field(default_factory=dict)
    declared_name: str | None = None

    def declarations(self, declaration_type: DeclarationType) -> Mapping[str, str]:
        """Return the name -> specifier mapping for one manifest section."""
        if declaration_type is DeclarationType.DEPENDENCIES:
            return self.dependencies
        if declaration_type is DeclarationType.DEV_DEPENDENCIES:
            return self.dev_dependencies
        return self.peer_dependencies


@dataclass(frozen=True)
class Location:
    """Where a dependency specifier was declared."""

    package: str
    declaration_type: DeclarationType
    manifest_path: str


# dependency name -> specifier -> locations, all in declaration order
DependencyIndex = Mapping[str, Mapping[str, tuple[Location, ...]]]


@dataclass(frozen=True)
class WorkspaceScan:
    """Manifests read from a workspace, root first."""

    root: str
    manifests: Mapping[str, Manifest]
    warnings: tuple[str, ...] = ()


@dataclass(frozen=True)
class VersionGroup:
    """All locations that declare the same specifier."""

    specifier: str
    locations: tuple[Location, ...]

    @property
    def packages(self) -> list[str]:
        return [loc.package for loc in self.locations]


@dataclass(frozen=True)
class Conflict:
    """A dependency declared with more than one distinct specifier."""

    dependency: str
    versions: tuple[VersionGroup, ...]
    severity: Severity

    @property
    def specifiers(self) -> list[str]:
        return [group.specifier for group in self.versions]


@dataclass(frozen=True)
class Change:
    """A single manifest edit."""

    package: str
    manifest_path: str
    declaration_type: DeclarationType
    from_version: str
    to_version: str
    delta: str = "unknown"  # major, minor, patch, downgrade, none, unknown


@dataclass(frozen=True)
class FixPlan:
    """Edits needed to converge one dependency on its target version."""

    dependency: str
    target_version: str
    changes: tuple[Change, ...]

    @property
    def packages(self) -> list[str]:
        return [change.package for change in self.changes]


@dataclass(frozen=True)
class Overlap:
    """A dependency declared by both the root and a sub-package."""

    package: str
    declaration_type: DeclarationType
    dependency: str
    version: str
    root_version: str

    @property
    def matches(self) -> bool:
        return self.version == self.root_version


@dataclass(frozen=True)
class SyncResult:
    """Everything a sync run produced, stage by stage."""

    strategy: Strategy
    scan: WorkspaceScan
    index: DependencyIndex
    conflicts: tuple[Conflict, ...]
    fix_plans: tuple[FixPlan, ...]
    auto_fix: bool = True
    applied: bool = False
    applied_changes: tuple[Change, ...] = ()
    status: str = "ok"  # ok, failed
    error: str | None = None
    report_path: str | None = None

    @property
    def unresolved_high(self) -> list[Conflict]:
        """High-severity conflicts not converged by an applied fix."""
        fixed = {plan.dependency for plan in self.fix_plans} if self.applied else set()
        return [
            conflict
            for conflict in self.conflicts
            if conflict.severity is Severity.HIGH and conflict.dependency not in fixed
        ]

    @property
    def exit_code(self) -> int:
        if self.status != "ok" or self.unresolved_high:
            return 1
        return 0
