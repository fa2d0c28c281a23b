"""Tests for the artwork-registry command line."""

import pytest
from typer.testing import CliRunner

from artwork_registry.catalog.character import CharacterUpsert
from artwork_registry.catalog.services import CharacterService
from artwork_registry.cli import app
from artwork_registry.db.base import get_session_local, reset_engine

runner = CliRunner()


@pytest.fixture
def cli_db(tmp_path, monkeypatch):
    """Point the CLI at a throwaway SQLite file with tables created."""
    monkeypatch.setenv("DATABASE_URL", f"sqlite:///{tmp_path / 'cli.db'}")
    reset_engine()
    result = runner.invoke(app, ["init-db"])
    assert result.exit_code == 0, result.output
    yield
    reset_engine()


def _seed_trapper():
    db = get_session_local()()
    try:
        CharacterService(db).upsert(
            "killer",
            "trapper",
            CharacterUpsert(
                name="The Trapper",
                image_url="https://cdn.example/p.png",
                artist_urls=["https://cdn.example/g.png"],
            ),
        )
    finally:
        db.close()


def test_init_db(cli_db):
    result = runner.invoke(app, ["init-db"])
    assert result.exit_code == 0
    assert "Database initialized" in result.output


def test_promote_unmatched_dry_run(cli_db):
    _seed_trapper()

    result = runner.invoke(app, ["promote-unmatched", "--dry-run"])

    assert result.exit_code == 0, result.output
    assert "2 link(s) would be promoted" in result.output


def test_promote_unmatched(cli_db):
    _seed_trapper()

    result = runner.invoke(app, ["promote-unmatched"])
    assert result.exit_code == 0, result.output
    assert "Promoted 2/2" in result.output

    again = runner.invoke(app, ["unmatched"])
    assert "No unmatched links" in again.output


def test_promote_single(cli_db):
    result = runner.invoke(
        app, ["promote", "https://cdn.example/p.png", "killer", "trapper", "portrait"]
    )

    assert result.exit_code == 0, result.output
    assert "artwork" in result.output


def test_promote_blank_url_fails(cli_db):
    result = runner.invoke(app, ["promote", "  ", "killer", "trapper", "portrait"])

    assert result.exit_code == 1
    assert "url" in result.output


def test_report(cli_db):
    runner.invoke(app, ["promote", "https://cdn.example/p.png", "killer", "trapper", "portrait"])

    result = runner.invoke(app, ["report"])

    assert result.exit_code == 0, result.output
    assert "Artworks: 1" in result.output
    assert "killer/trapper" in result.output


def test_artworks_listing(cli_db):
    runner.invoke(app, ["promote", "https://cdn.example/p.png", "killer", "trapper", "portrait"])

    result = runner.invoke(app, ["artworks"])

    assert result.exit_code == 0, result.output
    assert "Artworks" in result.output
