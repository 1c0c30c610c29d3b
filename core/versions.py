"""Specifier comparison heuristics.

Specifiers are compared as text, not resolved as semantic-version ranges.
Everything that interprets a specifier string lives in this module so a real
semver library can replace it without touching the rest of the engine.
"""

import re

from packaging.version import InvalidVersion, Version

_LEADING_NON_DIGITS = re.compile(r"^\D+")
_SEGMENT = re.compile(r"^(\d*)(.*)$")


def strip_range_prefix(specifier: str) -> str:
    """Drop every leading non-digit character (``^``, ``~``, ``>=``, spaces...).

    Args:
        specifier: Version specifier as declared in a manifest

    Returns:
        The specifier starting at its first digit, or "" if it has none
    """
    return _LEADING_NON_DIGITS.sub("", specifier)


def major_token(specifier: str) -> str:
    """Return the text before the first dot of the stripped specifier."""
    return strip_range_prefix(specifier).split(".", 1)[0]


def version_key(specifier: str) -> tuple:
    """Build a numeric-aware sort key for a specifier.

    Each dot segment compares by its leading integer, then by whatever text
    follows it. Segments without digits sort below any numbered segment.
    Pre-release and build metadata get no special treatment.
    """
    stripped = strip_range_prefix(specifier)
    if not stripped:
        return ()

    key = []
    for segment in stripped.split("."):
        digits, rest = _SEGMENT.match(segment).groups()
        key.append((int(digits) if digits else -1, rest))
    return tuple(key)


def pick_latest(specifiers: list[str]) -> str:
    """Pick the specifier whose stripped form ranks highest.

    Ties keep the specifier declared first.

    Raises:
        ValueError: If no specifiers are given
    """
    if not specifiers:
        raise ValueError("Cannot pick the latest of zero specifiers")
    return sorted(specifiers, key=version_key, reverse=True)[0]


def semver_delta(from_version: str, to_version: str) -> str:
    """Describe the jump between two specifiers.

    Args:
        from_version: Specifier currently declared
        to_version: Specifier it will be replaced with

    Returns:
        "major", "minor", "patch", "downgrade", "none" or "unknown"
    """
    try:
        old_ver = Version(strip_range_prefix(from_version))
        new_ver = Version(strip_range_prefix(to_version))
    except InvalidVersion:
        return "unknown"

    if new_ver == old_ver:
        return "none"
    if new_ver < old_ver:
        return "downgrade"
    if new_ver.major > old_ver.major:
        return "major"
    if new_ver.minor > old_ver.minor:
        return "minor"
    if new_ver.micro > old_ver.micro:
        return "patch"
    return "unknown"
