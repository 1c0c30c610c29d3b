"""Cross-package dependency index."""

from collections.abc import Mapping

from .models import INDEXED_TYPES, DependencyIndex, Location, Manifest


def build_index(manifests: Mapping[str, Manifest]) -> DependencyIndex:
    """Group every declared specifier by dependency name.

    Only dependencies and devDependencies are indexed. Packages, declaration
    types and declarations are visited in order, so the same manifests always
    produce the same index.

    Args:
        manifests: Manifests keyed by package name

    Returns:
        Mapping of dependency name -> specifier -> locations
    """
    buckets: dict[str, dict[str, list[Location]]] = {}

    for package_name, manifest in manifests.items():
        for declaration_type in INDEXED_TYPES:
            for dependency, specifier in manifest.declarations(declaration_type).items():
                versions = buckets.setdefault(dependency, {})
                versions.setdefault(specifier, []).append(
                    Location(
                        package=package_name,
                        declaration_type=declaration_type,
                        manifest_path=manifest.path,
                    )
                )

    return {
        dependency: {spec: tuple(locations) for spec, locations in versions.items()}
        for dependency, versions in buckets.items()
    }
