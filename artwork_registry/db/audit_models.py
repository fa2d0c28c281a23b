"""
Audit trail for the artwork catalog.

One row per committed change to an Artwork, Artist or Character. Usage
changes are recorded against their Artwork as ``linked``/``unlinked`` with
the usage key (``<character_id>-<character_type>-<slot>``) in the snapshot,
so an artwork's history reads as one timeline and survives its deletion.
"""

from typing import Any, Dict

from sqlalchemy import JSON, Column, DateTime, Enum, Index, String, Text
from sqlalchemy.sql import func

from .base import Base

# Mirrors catalog.enums.ActorKind
audit_actor_kind_enum = Enum("human", "system", name="audit_actor_kind")

audit_action_enum = Enum(
    "created",
    "updated",
    "deleted",
    "linked",
    "unlinked",
    name="audit_action",
)

audit_entity_kind_enum = Enum("Artwork", "Artist", "Character", name="audit_entity_kind")


class AuditLogModel(Base):
    """A before/after snapshot of one catalog change and who made it."""

    __tablename__ = "audit_log"

    id = Column(String(36), primary_key=True)
    ts = Column(DateTime(timezone=True), nullable=False, default=func.now())

    actor_kind = Column(audit_actor_kind_enum, nullable=False)
    # "admin-api", "cli" or the configured default actor
    actor_id = Column(String(128), nullable=False)

    action = Column(audit_action_enum, nullable=False)

    entity_kind = Column(audit_entity_kind_enum, nullable=False)
    # Artwork/Artist ULID, or "<character_type>/<character_id>"
    entity_id = Column(String(160), nullable=False)

    before = Column(JSON, nullable=True)
    after = Column(JSON, nullable=True)

    note = Column(Text, nullable=True)

    __table_args__ = (
        # GET /artworks/{id}/history
        Index("ix_audit_log_entity_ts", "entity_kind", "entity_id", "ts"),
        # GET /audit?entity_kind=...
        Index("ix_audit_log_kind_ts", "entity_kind", "ts"),
        Index("ix_audit_log_ts", "ts"),
    )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "ts": self.ts.isoformat() if self.ts else None,
            "actor_kind": self.actor_kind,
            "actor_id": self.actor_id,
            "action": self.action,
            "entity_kind": self.entity_kind,
            "entity_id": self.entity_id,
            "before": self.before,
            "after": self.after,
            "note": self.note,
        }
