"""Conflict detection and severity classification."""

import logging

from .models import Conflict, DependencyIndex, Severity, VersionGroup
from .versions import major_token

logger = logging.getLogger(__name__)


def find_duplicates(index: DependencyIndex) -> DependencyIndex:
    """Return the index entries declared with more than one distinct specifier.

    Specifiers are compared literally: "^4.1.0" and "4.1.0" disagree.
    """
    return {
        dependency: versions
        for dependency, versions in index.items()
        if len(versions) > 1
    }


def classify_severity(specifiers: list[str]) -> Severity:
    """Score a disagreement by how many major tokens its specifiers span.

    This is a textual proxy for risk, not a semver comparison: "^1.0.0" and
    ">=1.5 <3" share the major token "1" even though their ranges differ.
    """
    majors = {major_token(spec) for spec in specifiers}
    if len(majors) > 1:
        return Severity.HIGH
    if len(specifiers) > 2:
        return Severity.MEDIUM
    return Severity.LOW


def detect_conflicts(index: DependencyIndex) -> list[Conflict]:
    """Build one Conflict per dependency with disagreeing specifiers.

    Args:
        index: Dependency index built from the workspace

    Returns:
        Conflicts in index order
    """
    conflicts = []
    for dependency, versions in find_duplicates(index).items():
        groups = tuple(
            VersionGroup(specifier=spec, locations=locations)
            for spec, locations in versions.items()
        )
        conflict = Conflict(
            dependency=dependency,
            versions=groups,
            severity=classify_severity([group.specifier for group in groups]),
        )
        logger.debug(
            "Conflict on %s (%s): %s",
            dependency,
            conflict.severity.value,
            ", ".join(conflict.specifiers),
        )
        conflicts.append(conflict)
    return conflicts
