"""Composite subject identifiers carried in MyInfo Business access tokens"""

from typing import Any, Mapping, NamedTuple, Optional

SUBJECT_DELIMITER = "_"


class CompositeSubject(NamedTuple):
    """
    Two identifiers joined in a token's ``sub`` claim

    For MyInfo Business the primary ID is the entity UEN and the secondary
    ID is the user's UUID, e.g. ``12345678A_499bb4c4-7462-0716-41ac-71fcb021a548``.
    """

    primary_id: str
    secondary_id: str

    @property
    def uen(self) -> str:
        return self.primary_id

    @property
    def uuid(self) -> str:
        return self.secondary_id


def parse_subject(claims: Optional[Mapping[str, Any]]) -> Optional[CompositeSubject]:
    """
    Extract the composite subject from verified claims

    Returns:
        CompositeSubject, or None if ``sub`` is missing or does not split into
        exactly two non-empty parts
    """
    if not claims:
        return None

    sub = claims.get("sub")
    if not sub or not isinstance(sub, str):
        return None

    parts = sub.split(SUBJECT_DELIMITER)
    if len(parts) != 2 or not all(parts):
        return None

    return CompositeSubject(parts[0], parts[1])
