"""Version comparison by string prefix.

Upstream tags are well-formed ``X.Y.Z`` triples, so comparing fixed-width
prefixes is enough to tell which segment changed. Shorter strings compare
on whatever prefix they have.
"""

from .release import ReleaseSeverity

MAJOR_PREFIX = 3  # "X.Y"
MINOR_PREFIX = 5  # "X.Y.Z"


def is_major_difference(version: str, latest: str) -> bool:
    """True if the ``X.Y`` prefixes differ."""
    return version[:MAJOR_PREFIX] != latest[:MAJOR_PREFIX]


def is_minor_difference(version: str, latest: str) -> bool:
    """True if the ``X.Y.Z`` prefixes differ."""
    return version[:MINOR_PREFIX] != latest[:MINOR_PREFIX]


def is_patch_difference(version: str, latest: str) -> bool:
    """True if the versions differ at all."""
    return version != latest


def short_version(version: str) -> str:
    """Return the ``X.Y`` label used for documentation links."""
    return version[:MAJOR_PREFIX]


def classify_difference(version: str, latest: str) -> ReleaseSeverity:
    """
    Classify the actual magnitude of the difference between two versions.

    The widest segment wins, so a major difference is never reported as
    anything weaker.

    Args:
        version: Deployed version.
        latest: Latest upstream version.

    Returns:
        The strongest severity that applies, or NONE if equal.
    """
    if is_major_difference(version, latest):
        return ReleaseSeverity.MAJOR
    if is_minor_difference(version, latest):
        return ReleaseSeverity.MINOR
    if is_patch_difference(version, latest):
        return ReleaseSeverity.PATCH
    return ReleaseSeverity.NONE
