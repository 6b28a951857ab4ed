"""Initial schema for cgplayer

Revision ID: 20261019_000000
Revises: None
Create Date: 2026-10-19 00:00:00.000000

Creates every table of the choir media service:
- Accounts (users, user_roles, user_voice_profiles) and locations
- Songs with their voice variants, playlists and playlist items
- Lyrics, events with their song program and soloists

Default accounts are not inserted here; the server bootstraps them at startup
when the users table is empty.

Revision format: YYYYMMDD_HHMMSS_description

"""

from typing import Sequence, Union

import sqlalchemy as sa

from alembic import op

# revision identifiers, used by Alembic.
revision: str = "20261019_000000"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create all tables."""

    # Create locations table
    op.create_table(
        "locations",
        sa.Column("id", sa.String(32), nullable=False),
        sa.Column("name", sa.String(200), nullable=False),
        sa.Column("type", sa.String(32), nullable=False),
        sa.Column("address", sa.String(255), nullable=True),
        sa.Column("city", sa.String(100), nullable=False),
        sa.Column("region", sa.String(100), nullable=True),
        sa.Column("country", sa.String(100), nullable=False),
        sa.Column("color", sa.String(16), nullable=True),
        sa.Column("phone", sa.String(32), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.Index("ix_locations_city", "city"),
        sa.Index("ix_locations_is_active", "is_active"),
    )

    # Create users table
    op.create_table(
        "users",
        sa.Column("id", sa.String(32), nullable=False),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("username", sa.String(64), nullable=False),
        sa.Column("first_name", sa.String(100), nullable=False),
        sa.Column("last_name", sa.String(100), nullable=False),
        sa.Column("phone", sa.String(32), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=False),
        sa.Column("location_id", sa.String(32), nullable=True),
        sa.Column("password_hash", sa.String(), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["location_id"], ["locations.id"]),
        sa.Index("ix_users_email", "email", unique=True),
        sa.Index("ix_users_username", "username", unique=True),
        sa.Index("ix_users_is_active", "is_active"),
        sa.Index("ix_users_location_id", "location_id"),
    )

    # Create user_roles table
    op.create_table(
        "user_roles",
        sa.Column("id", sa.String(32), nullable=False),
        sa.Column("user_id", sa.String(32), nullable=False),
        sa.Column("role", sa.String(16), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"]),
        sa.UniqueConstraint("user_id", "role", name="uq_user_roles_user_role"),
        sa.Index("ix_user_roles_user_id", "user_id"),
    )

    # Create user_voice_profiles table
    op.create_table(
        "user_voice_profiles",
        sa.Column("id", sa.String(32), nullable=False),
        sa.Column("user_id", sa.String(32), nullable=False),
        sa.Column("voice_type", sa.String(16), nullable=False),
        sa.Column("assigned_by", sa.String(32), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"]),
        sa.ForeignKeyConstraint(["assigned_by"], ["users.id"]),
        sa.UniqueConstraint("user_id", "voice_type", name="uq_voice_profiles_user_voice"),
        sa.Index("ix_user_voice_profiles_user_id", "user_id"),
    )

    # Create songs table
    op.create_table(
        "songs",
        sa.Column("id", sa.String(32), nullable=False),
        sa.Column("title", sa.String(255), nullable=False),
        sa.Column("artist", sa.String(255), nullable=True),
        sa.Column("album", sa.String(255), nullable=True),
        sa.Column("genre", sa.String(100), nullable=True),
        sa.Column("duration", sa.Integer(), nullable=True),
        sa.Column("file_name", sa.String(255), nullable=False),
        sa.Column("file_path", sa.String(512), nullable=False),
        sa.Column("file_size", sa.Integer(), nullable=False),
        sa.Column("mime_type", sa.String(100), nullable=False),
        sa.Column("folder_name", sa.String(255), nullable=True),
        sa.Column("voice_type", sa.String(16), nullable=True),
        sa.Column("parent_song_id", sa.String(32), nullable=True),
        sa.Column("cover_color", sa.String(16), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=False),
        sa.Column("uploaded_by", sa.String(32), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["parent_song_id"], ["songs.id"]),
        sa.ForeignKeyConstraint(["uploaded_by"], ["users.id"]),
        sa.Index("ix_songs_title", "title"),
        sa.Index("ix_songs_folder_name", "folder_name"),
        sa.Index("ix_songs_voice_type", "voice_type"),
        sa.Index("ix_songs_parent_song_id", "parent_song_id"),
        sa.Index("ix_songs_is_active", "is_active"),
        sa.Index("ix_songs_uploaded_by", "uploaded_by"),
        sa.Index("ix_songs_created_at", "created_at"),
    )

    # Create playlists table
    op.create_table(
        "playlists",
        sa.Column("id", sa.String(32), nullable=False),
        sa.Column("name", sa.String(200), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("is_public", sa.Boolean(), nullable=False),
        sa.Column("image_url", sa.String(512), nullable=True),
        sa.Column("user_id", sa.String(32), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"]),
        sa.Index("ix_playlists_is_public", "is_public"),
        sa.Index("ix_playlists_user_id", "user_id"),
        sa.Index("ix_playlists_created_at", "created_at"),
    )

    # Create playlist_items table
    op.create_table(
        "playlist_items",
        sa.Column("id", sa.String(32), nullable=False),
        sa.Column("playlist_id", sa.String(32), nullable=False),
        sa.Column("song_id", sa.String(32), nullable=False),
        sa.Column("order", sa.Integer(), nullable=False),
        sa.Column("added_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["playlist_id"], ["playlists.id"]),
        sa.ForeignKeyConstraint(["song_id"], ["songs.id"]),
        sa.Index("ix_playlist_items_playlist_id", "playlist_id"),
        sa.Index("ix_playlist_items_song_id", "song_id"),
    )

    # Create lyrics table
    op.create_table(
        "lyrics",
        sa.Column("id", sa.String(32), nullable=False),
        sa.Column("content", sa.Text(), nullable=False),
        sa.Column("timestamp", sa.Float(), nullable=True),
        sa.Column("voice_type", sa.String(16), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=False),
        sa.Column("song_id", sa.String(32), nullable=False),
        sa.Column("created_by", sa.String(32), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["song_id"], ["songs.id"]),
        sa.ForeignKeyConstraint(["created_by"], ["users.id"]),
        sa.Index("ix_lyrics_is_active", "is_active"),
        sa.Index("ix_lyrics_song_id", "song_id"),
    )

    # Create events table
    op.create_table(
        "events",
        sa.Column("id", sa.String(32), nullable=False),
        sa.Column("title", sa.String(255), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("date", sa.DateTime(), nullable=False),
        sa.Column("location_id", sa.String(32), nullable=True),
        sa.Column("category", sa.String(100), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["location_id"], ["locations.id"]),
        sa.Index("ix_events_date", "date"),
        sa.Index("ix_events_location_id", "location_id"),
        sa.Index("ix_events_category", "category"),
        sa.Index("ix_events_is_active", "is_active"),
    )

    # Create event_songs table
    op.create_table(
        "event_songs",
        sa.Column("id", sa.String(32), nullable=False),
        sa.Column("event_id", sa.String(32), nullable=False),
        sa.Column("song_id", sa.String(32), nullable=False),
        sa.Column("order", sa.Integer(), nullable=False),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["event_id"], ["events.id"]),
        sa.ForeignKeyConstraint(["song_id"], ["songs.id"]),
        sa.Index("ix_event_songs_event_id", "event_id"),
        sa.Index("ix_event_songs_song_id", "song_id"),
    )

    # Create event_soloists table
    op.create_table(
        "event_soloists",
        sa.Column("id", sa.String(32), nullable=False),
        sa.Column("event_id", sa.String(32), nullable=False),
        sa.Column("user_id", sa.String(32), nullable=False),
        sa.Column("song_id", sa.String(32), nullable=True),
        sa.Column("soloist_type", sa.String(8), nullable=False),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["event_id"], ["events.id"]),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"]),
        sa.ForeignKeyConstraint(["song_id"], ["songs.id"]),
        sa.Index("ix_event_soloists_event_id", "event_id"),
        sa.Index("ix_event_soloists_user_id", "user_id"),
    )


def downgrade() -> None:
    """Drop all tables created in upgrade."""
    op.drop_table("event_soloists")
    op.drop_table("event_songs")
    op.drop_table("events")
    op.drop_table("lyrics")
    op.drop_table("playlist_items")
    op.drop_table("playlists")
    op.drop_table("songs")
    op.drop_table("user_voice_profiles")
    op.drop_table("user_roles")
    op.drop_table("users")
    op.drop_table("locations")
