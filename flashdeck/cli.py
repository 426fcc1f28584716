"""
flashdeck: Terminal Flashcards with SM-2 Scheduling.

A Rich terminal interface over the deck store, scheduler and study queue.

Commands:
- flashdeck decks          - List stored decks
- flashdeck create         - Create an empty deck
- flashdeck study          - Study a deck
- flashdeck add            - Add a card
- flashdeck browse         - Show cards with their scheduling state
- flashdeck edit           - Edit a card's text
- flashdeck delete-card    - Delete a card
- flashdeck delete-deck    - Delete a deck
- flashdeck stats          - Show deck statistics
- flashdeck import-csv     - Import a CSV file as a deck
- flashdeck import-folder  - Import every CSV file in a folder
- flashdeck list-csv       - List CSV files available for import
- flashdeck export         - Export all decks to a backup file
- flashdeck import-backup  - Restore decks from a backup file
"""
from __future__ import annotations

import sys
from pathlib import Path
from typing import Optional

import typer
from loguru import logger
from rich.console import Console
from rich.panel import Panel
from rich.prompt import Confirm, Prompt
from rich.table import Table

from config import get_settings

from .errors import FlashdeckError
from .models import Card, Deck, ReviewRating
from .scheduler import SM2Config, SM2Scheduler
from .storage import DeckStorage
from .storage.csv_import import filename_to_title_case
from .study_session import SessionState, StudySession

# =============================================================================
# CLI Setup
# =============================================================================

app = typer.Typer(
    name="flashdeck",
    help="flashdeck: spaced-repetition flashcards in the terminal",
    no_args_is_help=True,
)
console = Console()


# =============================================================================
# Styling
# =============================================================================

RATING_COLORS = {
    ReviewRating.AGAIN: "red",
    ReviewRating.HARD: "yellow",
    ReviewRating.GOOD: "green",
    ReviewRating.EASY: "cyan",
}


def style_rating(rating: ReviewRating, text: str | None = None) -> str:
    """Get styled rating string."""
    color = RATING_COLORS[rating]
    return f"[{color}]{text or rating.label}[/{color}]"


# =============================================================================
# Helpers
# =============================================================================


def _open_store() -> DeckStorage:
    settings = get_settings()
    return DeckStorage(settings.resolved_decks_dir, settings.resolved_backup_dir)


def _build_scheduler() -> SM2Scheduler:
    return SM2Scheduler(SM2Config(**get_settings().get_scheduler_config()))


def _resolve_deck(store: DeckStorage, ref: str) -> Deck:
    """
    Find a deck by id, id prefix or name (case-insensitive).

    Exits with an error message if no single deck matches.
    """
    if ref.isalnum():
        deck = store.load_deck(ref)
        if deck is not None:
            return deck

    summaries = store.list_decks()
    matches = [s for s in summaries if s.name.lower() == ref.lower()]
    if not matches:
        matches = [s for s in summaries if s.id.startswith(ref)]

    if len(matches) != 1:
        reason = "No deck matches" if not matches else "Several decks match"
        console.print(f"[red]{reason} '{ref}'[/red]")
        raise typer.Exit(1)

    deck = store.load_deck(matches[0].id)
    if deck is None:
        console.print(f"[red]Deck '{ref}' disappeared while loading[/red]")
        raise typer.Exit(1)
    return deck


def _resolve_card(deck: Deck, ref: str) -> Card:
    """Find a card by id or id prefix."""
    card = deck.get_card(ref)
    if card is not None:
        return card

    matches = [c for c in deck.cards if c.id.startswith(ref)]
    if len(matches) != 1:
        console.print(f"[red]No single card matches '{ref}' in '{deck.name}'[/red]")
        raise typer.Exit(1)
    return matches[0]


# =============================================================================
# Display Helpers
# =============================================================================


def display_card_front(card: Card, position: int, remaining: int) -> None:
    """Display the front of a card."""
    status = "new" if card.is_new() else f"reviewed {card.total_reviews}x"
    header = f"Card {position}  |  {remaining} left  |  {status}"

    console.print(
        Panel(
            card.front,
            title=header,
            title_align="left",
            border_style="cyan",
            padding=(1, 2),
        )
    )


def display_card_back(card: Card) -> None:
    """Display the back of a card."""
    console.print(Panel(card.back, border_style="green", padding=(1, 2)))


def display_rating_choices(preview: list[tuple[ReviewRating, str]]) -> None:
    """Show each rating with the interval it would schedule."""
    parts = [
        f"{i}. {style_rating(rating)} [dim]({label})[/dim]"
        for i, (rating, label) in enumerate(preview, 1)
    ]
    console.print("  ".join(parts))


def _display_session_summary(stats: dict) -> None:
    """Display end-of-session summary."""
    console.print()
    console.print(
        Panel(
            f"[bold]Session Complete![/bold]\n\n"
            f"Deck: {stats['deck_name']}\n"
            f"Cards studied: {stats['cards_studied']}\n"
            f"Duration: {stats['duration_minutes']:.1f} minutes\n"
            f"Pace: {stats['cards_per_minute']:.1f} cards/min\n"
            f"Retention: {stats['retention_percent']:.1f}%",
            title="Summary",
            border_style="green",
        )
    )
    if stats.get("struggling_cards"):
        console.print(
            f"[yellow]{len(stats['struggling_cards'])} cards failed more than once this session.[/yellow]"
        )


# =============================================================================
# Deck Commands
# =============================================================================


@app.command()
def decks() -> None:
    """List stored decks."""
    store = _open_store()
    summaries = store.list_decks()

    if not summaries:
        console.print("[yellow]No decks yet.[/yellow] Create one with 'flashdeck create NAME'.")
        return

    table = Table(title="Decks")
    table.add_column("ID", style="dim")
    table.add_column("Name", style="bold")
    table.add_column("Cards", justify="right")
    table.add_column("Description")

    for s in summaries:
        table.add_row(s.id[:8], s.name, str(s.card_count), s.description)

    console.print(table)


@app.command()
def create(
    name: str = typer.Argument(..., help="Deck name"),
    description: str = typer.Option("", "--description", "-d", help="Deck description"),
) -> None:
    """Create an empty deck."""
    if not name.strip():
        console.print("[red]Deck name cannot be empty[/red]")
        raise typer.Exit(1)

    deck = _open_store().create_deck(name, description)
    console.print(f"[green]Created deck '{deck.name}'[/green] [dim]({deck.id})[/dim]")


@app.command("delete-deck")
def delete_deck(
    deck_ref: str = typer.Argument(..., help="Deck id or name"),
    confirm: bool = typer.Option(False, "--yes", "-y", help="Skip confirmation"),
) -> None:
    """Delete a deck and all its cards."""
    store = _open_store()
    deck = _resolve_deck(store, deck_ref)

    if not confirm and not Confirm.ask(
        f"Delete deck '{deck.name}' ({len(deck.cards)} cards)?", default=False
    ):
        raise typer.Exit(0)

    store.delete_deck(deck.id)
    console.print(f"[green]Deleted deck '{deck.name}'[/green]")


@app.command()
def stats(deck_ref: str = typer.Argument(..., help="Deck id or name")) -> None:
    """Show new, learning and due counts for a deck."""
    deck = _resolve_deck(_open_store(), deck_ref)
    deck_stats = deck.get_stats()

    console.print(f"\n[bold cyan]{deck.name}[/bold cyan]")
    if deck.description:
        console.print(f"[dim]{deck.description}[/dim]")

    table = Table(show_header=False, box=None)
    table.add_column("Metric", style="dim")
    table.add_column("Value", style="bold")

    table.add_row("New", f"[blue]{deck_stats.new_cards}[/blue]")
    table.add_row("Learning", f"[yellow]{deck_stats.learning_cards}[/yellow]")
    table.add_row("Due", f"[green]{deck_stats.due_cards}[/green]")
    table.add_row("Total cards", str(deck_stats.total_cards))

    console.print(table)
    if not deck_stats.has_work:
        console.print("[dim]Nothing to study right now.[/dim]")


# =============================================================================
# Study
# =============================================================================


@app.command()
def study(
    deck_ref: str = typer.Argument(..., help="Deck id or name"),
    new_limit: Optional[int] = typer.Option(
        None,
        "--new", "-n",
        help="Maximum new cards this session (default from settings)",
    ),
) -> None:
    """
    Start an interactive study session.

    Due cards come first, then new cards. Cards rated Again come back
    later in the same session. The deck is saved after every rating.
    """
    store = _open_store()
    deck = _resolve_deck(store, deck_ref)

    limit = new_limit if new_limit is not None else get_settings().new_cards_per_session
    session = StudySession(deck, scheduler=_build_scheduler(), store=store, new_card_limit=limit)

    if session.start() is SessionState.COMPLETE:
        console.print(f"\n[green]Nothing to study in '{deck.name}'.[/green]")
        console.print("Add cards with 'flashdeck add' or check back later.")
        raise typer.Exit(0)

    console.print(f"\n[bold cyan]{deck.name}[/bold cyan] - {session.remaining + 1} cards queued")

    position = 0
    try:
        while session.state is SessionState.QUESTION:
            position += 1
            card = session.current_card
            console.print()
            display_card_front(card, position, session.remaining)

            Prompt.ask("[dim]Press Enter to reveal[/dim]", default="", show_default=False)
            session.reveal()
            display_card_back(card)

            display_rating_choices(session.interval_preview)
            choice = Prompt.ask("Rating", choices=["1", "2", "3", "4"], default="3")
            session.rate(ReviewRating.parse(choice))

            if session.last_save_error is not None:
                console.print(f"[red]Could not save progress: {session.last_save_error}[/red]")

    except KeyboardInterrupt:
        console.print("\n\n[yellow]Session interrupted.[/yellow]")

    _display_session_summary(session.summary())


# =============================================================================
# Card Commands
# =============================================================================


@app.command()
def add(
    deck_ref: str = typer.Argument(..., help="Deck id or name"),
    front: Optional[str] = typer.Option(None, "--front", "-f", help="Prompt text"),
    back: Optional[str] = typer.Option(None, "--back", "-b", help="Answer text"),
) -> None:
    """Add a card to a deck (prompts for missing sides)."""
    store = _open_store()
    deck = _resolve_deck(store, deck_ref)

    front = front if front is not None else Prompt.ask("Front")
    back = back if back is not None else Prompt.ask("Back")

    card = deck.add_card(front, back)
    if card is None:
        console.print("[yellow]Front and back are both required; nothing added.[/yellow]")
        return

    store.save_deck(deck)
    console.print(f"[green]Added card to '{deck.name}'[/green] [dim]({card.id[:8]})[/dim]")


@app.command()
def edit(
    deck_ref: str = typer.Argument(..., help="Deck id or name"),
    card_ref: str = typer.Argument(..., help="Card id or id prefix"),
    front: Optional[str] = typer.Option(None, "--front", "-f", help="New prompt text"),
    back: Optional[str] = typer.Option(None, "--back", "-b", help="New answer text"),
) -> None:
    """Edit a card's text. Its review history is kept."""
    store = _open_store()
    deck = _resolve_deck(store, deck_ref)
    card = _resolve_card(deck, card_ref)

    front = front if front is not None else Prompt.ask("Front", default=card.front)
    back = back if back is not None else Prompt.ask("Back", default=card.back)

    if not deck.update_card(card.id, front, back):
        console.print("[yellow]Front and back are both required; card unchanged.[/yellow]")
        return

    store.save_deck(deck)
    console.print("[green]Card updated[/green]")


@app.command("delete-card")
def delete_card(
    deck_ref: str = typer.Argument(..., help="Deck id or name"),
    card_ref: str = typer.Argument(..., help="Card id or id prefix"),
    confirm: bool = typer.Option(False, "--yes", "-y", help="Skip confirmation"),
) -> None:
    """Delete a card from a deck."""
    store = _open_store()
    deck = _resolve_deck(store, deck_ref)
    card = _resolve_card(deck, card_ref)

    if not confirm and not Confirm.ask(f"Delete card '{card.front}'?", default=False):
        raise typer.Exit(0)

    deck.delete_card(card.id)
    store.save_deck(deck)
    console.print("[green]Card deleted[/green]")


@app.command()
def browse(deck_ref: str = typer.Argument(..., help="Deck id or name")) -> None:
    """List a deck's cards in insertion order."""
    deck = _resolve_deck(_open_store(), deck_ref)

    if not deck.cards:
        console.print(f"[yellow]'{deck.name}' has no cards.[/yellow]")
        return

    table = Table(title=deck.name)
    table.add_column("ID", style="dim")
    table.add_column("Front")
    table.add_column("Back")
    table.add_column("Status")
    table.add_column("Interval", justify="right")
    table.add_column("Ease", justify="right")
    table.add_column("Reviews", justify="right")
    table.add_column("Lapses", justify="right", style="red")

    for card in deck.cards:
        table.add_row(
            card.id[:8],
            card.front,
            card.back,
            card.due_description(),
            f"{card.interval}d",
            f"{card.ease_factor:.2f}",
            str(card.total_reviews),
            str(card.lapses),
        )

    console.print(table)


# =============================================================================
# Import / Export
# =============================================================================


@app.command("import-csv")
def import_csv(
    csv_path: Path = typer.Argument(..., help="CSV file with front,back columns"),
    name: Optional[str] = typer.Option(None, "--name", "-n", help="Deck name (default: from filename)"),
) -> None:
    """Import a CSV file as a new deck."""
    store = _open_store()
    deck_name = name or filename_to_title_case(csv_path.stem) or "Imported Deck"
    deck = store.import_csv(csv_path, deck_name)

    if not deck.cards:
        console.print(f"[yellow]No valid cards found in {csv_path}[/yellow]")
        raise typer.Exit(1)

    store.save_deck(deck)
    console.print(f"[green]Imported {len(deck.cards)} cards into '{deck.name}'[/green]")


@app.command("import-folder")
def import_folder(folder: Path = typer.Argument(..., help="Folder containing CSV files")) -> None:
    """Import every CSV file in a folder, one deck per file."""
    results = _open_store().import_folder(folder)

    if not results:
        console.print(f"[yellow]No cards imported from {folder}[/yellow]")
        return

    for deck_name, count in results:
        console.print(f"  [green]+[/green] {deck_name} [dim]({count} cards)[/dim]")
    console.print(f"[green]Imported {len(results)} decks[/green]")


@app.command("list-csv")
def list_csv(folder: Path = typer.Argument(..., help="Folder to scan")) -> None:
    """List CSV files available for bulk import."""
    files = _open_store().list_csv_files(folder)

    if not files:
        console.print(f"[yellow]No CSV files in {folder}[/yellow]")
        return

    for path in files:
        console.print(f"  {path.name}")


@app.command()
def export(
    output: Optional[Path] = typer.Option(None, "--output", "-o", help="Backup file path"),
) -> None:
    """Export all decks into one backup file."""
    store = _open_store()
    target = output or store.default_backup_path()
    count = store.export_backup(target)
    console.print(f"[green]Exported {count} decks to {target}[/green]")


@app.command("import-backup")
def import_backup(path: Path = typer.Argument(..., help="Backup file to restore")) -> None:
    """Restore decks from a backup. Decks that already exist are skipped."""
    result = _open_store().import_backup(path)

    if result.skipped:
        console.print(
            f"[green]Imported {result.imported} decks[/green] "
            f"[dim]({result.skipped} skipped - already exist)[/dim]"
        )
    else:
        console.print(f"[green]Imported {result.imported} decks[/green]")


# =============================================================================
# Entry Point
# =============================================================================


def configure_logging() -> None:
    """Route loguru output to stderr (and an optional log file)."""
    settings = get_settings()

    logger.remove()
    logger.add(
        sys.stderr,
        level=settings.log_level,
        format="<level>{message}</level>",
    )
    if settings.log_file:
        logger.add(
            settings.log_file,
            level="DEBUG",
            rotation="1 MB",
            retention=3,
            format="{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name}:{function} - {message}",
        )


def main() -> None:
    """CLI entry point."""
    configure_logging()

    try:
        app()
    except FlashdeckError as e:
        console.print(f"[red]Error:[/red] {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
