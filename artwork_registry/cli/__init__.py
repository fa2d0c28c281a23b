"""
Command Line Interface for Artwork Registry.
"""

from contextlib import contextmanager
from typing import Iterator, Optional

import typer
from rich import print as rprint
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from sqlalchemy.orm import Session

from ..catalog.artwork import Artwork
from ..catalog.enums import ActorKind, CharacterType, SlotName
from ..catalog.errors import ArtworkRegistryError
from ..catalog.services import ArtworkStore, CharacterService, PromotionService
from ..catalog.views import find_unmatched_links, group_by_character, summarize
from ..config import get_settings
from ..db.base import create_tables, get_session_local
from ..logging_config import configure_logging

app = typer.Typer(help="Artwork Registry - artwork and usage catalog for the character gallery")
console = Console()

CLI_ACTOR = {"actor_kind": ActorKind.HUMAN.value, "actor_id": "cli"}


@app.callback()
def main(
    log_level: str = typer.Option(None, help="Override LOG_LEVEL for this run"),
) -> None:
    settings = get_settings()
    configure_logging(log_level or settings.log_level, fmt="console")


@contextmanager
def _session() -> Iterator[Session]:
    """Open a session and turn catalog errors into a red message + exit 1."""
    db = get_session_local()()
    try:
        yield db
    except ArtworkRegistryError as exc:
        console.print(f"[red]❌ {exc.message}[/red]")
        raise typer.Exit(code=1)
    finally:
        db.close()


@app.command("init-db")
def init_db() -> None:
    """Create all catalog tables in the configured database."""
    create_tables()
    console.print("✅ Database initialized")


@app.command()
def serve(
    port: int = typer.Option(None, help="Port to run the API server on"),
    host: str = typer.Option(None, help="Host to bind the server to"),
    reload: bool = typer.Option(False, help="Reload on code changes"),
) -> None:
    """Start the admin API server."""
    import uvicorn

    settings = get_settings()
    rprint(Panel.fit("🎨 Starting Artwork Registry", style="bold blue"))
    uvicorn.run(
        "artwork_registry.main:app",
        host=host or settings.api_host,
        port=port or settings.api_port,
        reload=reload,
    )


@app.command()
def artworks(
    limit: int = typer.Option(50, help="Number of artworks to show"),
    offset: int = typer.Option(0, help="Number of artworks to skip"),
) -> None:
    """List registered artworks, newest first."""
    with _session() as db:
        rows = ArtworkStore(db, **CLI_ACTOR).list(offset=offset, limit=limit)

        table = Table(title="Artworks", show_header=True, header_style="bold magenta")
        table.add_column("ID", style="cyan")
        table.add_column("URL")
        table.add_column("Artist")
        table.add_column("Usages", justify="right")
        for artwork in rows:
            table.add_row(
                artwork.id,
                artwork.url,
                artwork.artist.name if artwork.artist else "-",
                str(len(artwork.usages)),
            )
        console.print(table)


@app.command()
def unmatched(
    character_type: Optional[CharacterType] = typer.Option(None, "--type", help="Only this category"),
) -> None:
    """Show character-embedded URLs that are not registered artworks yet."""
    with _session() as db:
        links = find_unmatched_links(
            CharacterService(db, **CLI_ACTOR).list_read_models(character_type),
            ArtworkStore(db, **CLI_ACTOR).known_urls(),
        )

        if not links:
            console.print("✅ No unmatched links")
            return

        table = Table(title=f"Unmatched links ({len(links)})", header_style="bold magenta")
        table.add_column("Character", style="cyan")
        table.add_column("Field")
        table.add_column("Slot")
        table.add_column("URL")
        for link in links:
            table.add_row(
                f"{link.character_type.value}/{link.character_id}",
                link.field,
                link.slot.value,
                link.url,
            )
        console.print(table)


@app.command()
def promote(
    url: str = typer.Argument(..., help="Image URL embedded on the character"),
    character_type: CharacterType = typer.Argument(..., help="killer or survivor"),
    character_id: str = typer.Argument(..., help="Character id"),
    slot: SlotName = typer.Argument(..., help="Slot the URL is used in"),
    artist_id: Optional[str] = typer.Option(None, help="Credit this artist on creation"),
    detach: bool = typer.Option(False, help="Remove the URL from the character afterwards"),
) -> None:
    """Promote one URL into the artwork catalog."""
    with _session() as db:
        artwork_id = PromotionService(db, **CLI_ACTOR).promote(
            url, character_type, character_id, slot, artist_id=artist_id, detach=detach
        )
        console.print(f"✅ {url} -> artwork {artwork_id}")


@app.command("promote-unmatched")
def promote_unmatched(
    character_type: Optional[CharacterType] = typer.Option(None, "--type", help="Only this category"),
    artist_id: Optional[str] = typer.Option(None, help="Credit this artist on creation"),
    detach: bool = typer.Option(False, help="Remove promoted URLs from characters"),
    dry_run: bool = typer.Option(False, "--dry-run", help="Only count what would be promoted"),
) -> None:
    """Promote every unmatched link in one batch."""
    with _session() as db:
        if dry_run:
            links = find_unmatched_links(
                CharacterService(db, **CLI_ACTOR).list_read_models(character_type),
                ArtworkStore(db, **CLI_ACTOR).known_urls(),
            )
            console.print(f"🔎 {len(links)} link(s) would be promoted")
            return

        report = PromotionService(db, **CLI_ACTOR).promote_unmatched(
            character_type=character_type, artist_id=artist_id, detach=detach
        )
        console.print(f"✅ Promoted {report.succeeded}/{report.total}")
        for failure in report.failures:
            console.print(
                f"[red]  #{failure.index} {failure.url}: {failure.error_code} {failure.error_message}[/red]"
            )
        if report.failed:
            raise typer.Exit(code=1)


@app.command()
def report() -> None:
    """Summarise the catalog and list artworks per character."""
    with _session() as db:
        full_set = [
            Artwork.model_validate(a.to_dict())
            for a in ArtworkStore(db, **CLI_ACTOR).list_all()
        ]

        stats = summarize(full_set)
        console.print(
            Panel.fit(
                f"Artworks: {stats['artworks']}  Usages: {stats['usages']}  "
                f"Unassigned: {stats['unassigned']}  Characters: {stats['characters']}",
                title="Catalog",
                style="bold blue",
            )
        )

        table = Table(show_header=True, header_style="bold magenta")
        table.add_column("Character", style="cyan")
        table.add_column("Artworks", justify="right")
        groups = group_by_character(full_set)
        for key in sorted(groups, key=lambda k: (k.is_unassigned, k.label())):
            table.add_row(key.label(), str(len(groups[key])))
        console.print(table)


if __name__ == "__main__":
    app()
