"""Root versus sub-package declaration overlap."""

from .models import ROOT_PACKAGE, DeclarationType, Overlap, WorkspaceScan


def find_overlaps(scan: WorkspaceScan) -> list[Overlap]:
    """Find dependencies a sub-package re-declares in the same section as the root.

    Unlike conflict detection this covers peerDependencies too.

    Args:
        scan: Workspace scan with the root manifest

    Returns:
        Overlaps ordered by package, then section, then declaration
    """
    root = scan.manifests[ROOT_PACKAGE]
    overlaps = []

    for name, manifest in scan.manifests.items():
        if name == ROOT_PACKAGE:
            continue
        for declaration_type in DeclarationType:
            root_declarations = root.declarations(declaration_type)
            for dependency, version in manifest.declarations(declaration_type).items():
                if dependency in root_declarations:
                    overlaps.append(
                        Overlap(
                            package=name,
                            declaration_type=declaration_type,
                            dependency=dependency,
                            version=version,
                            root_version=root_declarations[dependency],
                        )
                    )
    return overlaps
