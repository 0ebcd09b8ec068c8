"""
Base Models for Engine Snapshots

Base classes with strict validation settings for the records the engine
consumes and returns.

MOTIVATION:
    Snapshots flow between the engine and an external storage layer. Strict
    validation keeps a typo in a stored column from silently becoming a
    default value, and immutability keeps a caller's snapshot unchanged
    while the engine derives a new one from it.

Usage:
    # Immutable record persisted by the caller
    class ItemSnapshot(Snapshot):
        id: str
        reps: int

    # Read-only summary computed from a corpus
    class CorpusSummary(Summary):
        total: int

Architecture:
    Storage row → Snapshot.model_validate(row) → Scheduler → Snapshot → Storage
"""

from pydantic import BaseModel, ConfigDict


class Snapshot(BaseModel):
    """
    Base model for persisted engine records.

    Features:
        - extra="forbid": Unknown fields raise ValidationError
        - frozen=True: Instances are immutable; derive with model_copy(update=...)
        - validate_default=True: Validates default values
        - from_attributes=True: Allows ORM row conversion
    """

    model_config = ConfigDict(
        extra="forbid",  # Reject unknown fields
        frozen=True,  # Snapshots are never mutated in place
        validate_default=True,  # Validate defaults
        from_attributes=True,  # Enable ORM conversion
    )


class Summary(BaseModel):
    """
    Base model for read-only views computed from a corpus.

    More lenient than Snapshot: summaries are never persisted as the source
    of truth, so extra fields are ignored.
    """

    model_config = ConfigDict(
        extra="ignore",
        validate_default=True,
        from_attributes=True,
    )
