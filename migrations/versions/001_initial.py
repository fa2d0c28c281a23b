"""Create catalog tables

Revision ID: 001_initial
Revises:
Create Date: 2026-09-14

"""
import sqlalchemy as sa
from alembic import op

# revision identifiers
revision = "001_initial"
down_revision = None
branch_labels = None
depends_on = None

CHARACTER_TYPE = sa.Enum("killer", "survivor", name="character_type")
SLOT_NAME = sa.Enum(
    "portrait",
    "background",
    "primary_header",
    "gallery_list",
    "legacy_header",
    name="slot_name",
)
ARTIST_PLATFORM = sa.Enum("twitter", "instagram", "youtube", name="artist_platform")


def upgrade() -> None:
    op.create_table(
        "artists",
        sa.Column("id", sa.String(128), primary_key=True),
        sa.Column("name", sa.String(256), nullable=False),
        sa.Column("platform", ARTIST_PLATFORM, nullable=False),
        sa.Column("url", sa.String(2000), nullable=False),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.func.now(),
        ),
    )
    op.create_index("ix_artists_name", "artists", ["name"])

    op.create_table(
        "artworks",
        sa.Column("id", sa.String(128), primary_key=True),
        sa.Column("url", sa.String(2000), nullable=False),
        sa.Column(
            "artist_id",
            sa.String(128),
            sa.ForeignKey("artists.id", ondelete="SET NULL"),
            nullable=True,
        ),
        sa.Column("notes", sa.Text, nullable=True),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.func.now(),
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.func.now(),
        ),
        sa.UniqueConstraint("url", name="uq_artworks_url"),
    )
    op.create_index("ix_artworks_artist_id", "artworks", ["artist_id"])
    op.create_index("ix_artworks_created_at", "artworks", ["created_at"])

    op.create_table(
        "artwork_usages",
        sa.Column("id", sa.String(128), primary_key=True),
        sa.Column(
            "artwork_id",
            sa.String(128),
            sa.ForeignKey("artworks.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("character_type", CHARACTER_TYPE, nullable=False),
        sa.Column("character_id", sa.String(128), nullable=False),
        sa.Column("slot", SLOT_NAME, nullable=False),
        sa.Column("display_order", sa.Integer, nullable=True),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.func.now(),
        ),
        sa.UniqueConstraint(
            "artwork_id",
            "character_type",
            "character_id",
            "slot",
            name="uq_artwork_usages_natural_key",
        ),
    )
    op.create_index("ix_artwork_usages_artwork_id", "artwork_usages", ["artwork_id"])
    op.create_index(
        "ix_artwork_usages_character",
        "artwork_usages",
        ["character_type", "character_id"],
    )

    op.create_table(
        "characters",
        sa.Column("character_type", CHARACTER_TYPE, primary_key=True),
        sa.Column("id", sa.String(128), primary_key=True),
        sa.Column("name", sa.String(256), nullable=True),
        sa.Column("order", sa.Integer, nullable=True),
        sa.Column("image_url", sa.String(2000), nullable=True),
        sa.Column("background_image_url", sa.String(2000), nullable=True),
        sa.Column("header_url", sa.String(2000), nullable=True),
        sa.Column("artist_urls", sa.JSON, nullable=False),
        sa.Column("legacy_header_urls", sa.JSON, nullable=False),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.func.now(),
        ),
    )

    op.create_table(
        "audit_log",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column(
            "ts",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.func.now(),
        ),
        sa.Column(
            "actor_kind",
            sa.Enum("human", "system", name="audit_actor_kind"),
            nullable=False,
        ),
        sa.Column("actor_id", sa.String(128), nullable=False),
        sa.Column(
            "action",
            sa.Enum(
                "created",
                "updated",
                "deleted",
                "linked",
                "unlinked",
                name="audit_action",
            ),
            nullable=False,
        ),
        sa.Column(
            "entity_kind",
            sa.Enum("Artwork", "Artist", "Character", name="audit_entity_kind"),
            nullable=False,
        ),
        sa.Column("entity_id", sa.String(160), nullable=False),
        sa.Column("before", sa.JSON, nullable=True),
        sa.Column("after", sa.JSON, nullable=True),
        sa.Column("note", sa.Text, nullable=True),
    )
    op.create_index(
        "ix_audit_log_entity_ts", "audit_log", ["entity_kind", "entity_id", "ts"]
    )
    op.create_index("ix_audit_log_kind_ts", "audit_log", ["entity_kind", "ts"])
    op.create_index("ix_audit_log_ts", "audit_log", ["ts"])


def downgrade() -> None:
    op.drop_table("audit_log")
    op.drop_table("characters")
    op.drop_table("artwork_usages")
    op.drop_table("artworks")
    op.drop_table("artists")

    bind = op.get_bind()
    for enum in (
        sa.Enum(name="audit_action"),
        sa.Enum(name="audit_entity_kind"),
        sa.Enum(name="audit_actor_kind"),
        SLOT_NAME,
        CHARACTER_TYPE,
        ARTIST_PLATFORM,
    ):
        enum.drop(bind, checkfirst=True)
