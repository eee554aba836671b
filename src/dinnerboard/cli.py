"""Command-line interface for Dinnerboard."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Optional

import typer

from dinnerboard.config import get_settings
from dinnerboard.db.grocery_lists import get_active_grocery_list
from dinnerboard.db.repository import Database
from dinnerboard.logging_utils import configure_logging
from dinnerboard.planning.grocery import regenerate_grocery_list
from dinnerboard.planning.suggestions import get_meal_suggestions
from dinnerboard.seed import seed_database

app = typer.Typer(help="Dinnerboard dinner planning commands.")


def _open_database() -> Database:
    settings = get_settings()
    configure_logging(
        settings.log_level,
        settings.log_format,
        [settings.api_token or "", settings.webhook_secret or ""],
    )
    return Database.from_settings(settings).open()


def _echo_json(payload: object, pretty: bool) -> None:
    typer.echo(json.dumps(payload, indent=2 if pretty else None, sort_keys=pretty))


@app.command()
def refresh(
    pretty: bool = typer.Option(True, "--pretty/--no-pretty", help="Pretty-print output JSON."),
) -> None:
    """Regenerate the grocery list for the next seven days and make it active."""

    with _open_database() as database:
        grocery_list = regenerate_grocery_list(database)
    _echo_json(grocery_list.model_dump(mode="json"), pretty)


@app.command("grocery-list")
def grocery_list(
    pretty: bool = typer.Option(True, "--pretty/--no-pretty", help="Pretty-print output JSON."),
) -> None:
    """Show the active grocery list grouped by category."""

    with _open_database() as database:
        active = get_active_grocery_list(database)
    if active is None:
        typer.secho("No active grocery list found.", fg=typer.colors.YELLOW)
        raise typer.Exit(code=1)

    grouped = {
        category: [item.model_dump(mode="json") for item in items]
        for category, items in active.grouped_items().items()
    }
    _echo_json({"id": active.id, "start_date": str(active.start_date), "items": grouped}, pretty)


@app.command()
def suggest(
    limit: Optional[int] = typer.Option(None, "--limit", min=1, help="Number of suggestions."),
    pretty: bool = typer.Option(True, "--pretty/--no-pretty", help="Pretty-print output JSON."),
) -> None:
    """Rank meals that reuse pantry staples and this week's ingredients."""

    settings = get_settings()
    with _open_database() as database:
        suggestions = get_meal_suggestions(database, limit=limit or settings.suggestion_limit)
    _echo_json([suggestion.model_dump(mode="json") for suggestion in suggestions], pretty)


@app.command()
def seed(
    csv_path: Optional[Path] = typer.Argument(
        None, exists=True, dir_okay=False, help="Meals CSV export to import."
    ),
    pantry: bool = typer.Option(True, "--pantry/--no-pantry", help="Install default staples."),
) -> None:
    """Import meal templates from CSV and install the default pantry staples."""

    with _open_database() as database:
        report = seed_database(database, csv_path, include_pantry_staples=pantry)
    typer.echo(f"Imported {report.meals} meal(s) and {report.pantry_items} pantry staple(s).")


@app.command()
def serve(
    host: str = typer.Option("127.0.0.1", "--host"),
    port: int = typer.Option(8000, "--port"),
    reload: bool = typer.Option(False, "--reload"),
) -> None:
    """Run the HTTP API with uvicorn."""

    from dinnerboard.server.run import main as run_server

    run_server(host=host, port=port, reload=reload)


def main(argv: Optional[list[str]] = None) -> None:
    """Entry point for `python -m dinnerboard`."""
    app(prog_name="dinnerboard", args=argv)


if __name__ == "__main__":
    main()
