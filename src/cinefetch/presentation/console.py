"""Rich console collaborators used by the CLI."""

from __future__ import annotations

import json
from typing import Any, Callable, Optional, Sequence

from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from cinefetch.presentation.base import RetryTrigger
from cinefetch.presentation.cards import Movie, build_card
from cinefetch.presentation.sanitize import sanitize_url


class ConsoleRenderer:
    """Prints movies as a table, or as sanitized JSON."""

    def __init__(self, console: Optional[Console] = None, output_format: str = "text"):
        self.console = console or Console()
        self.output_format = output_format

    def render(self, movies: Sequence[Any]) -> None:
        if self.output_format == "json":
            rows = []
            for record in movies:
                movie = Movie.from_raw(record)
                data = movie.model_dump()
                data["image_url"] = sanitize_url(movie.image_url)
                rows.append(data)
            self.console.print_json(json.dumps(rows))
            return

        table = Table(title=f"Movies ({len(movies)})", show_lines=False)
        table.add_column("Title", style="bold")
        table.add_column("Year")
        table.add_column("Genre")
        table.add_column("Stars")
        table.add_column("Poster", overflow="fold")
        for record in movies:
            movie = Movie.from_raw(record)
            card = build_card(record)
            table.add_row(
                Text(card.title),
                Text(movie.year or ""),
                Text(movie.genre or ""),
                Text(f"{movie.stars or ''}/5"),
                Text(card.image_data_src),
            )
        self.console.print(table)


class ConsoleErrorPresenter:
    """Prints the error panel and optionally offers to retry."""

    def __init__(
        self,
        console: Optional[Console] = None,
        confirm: Optional[Callable[[str], bool]] = None,
    ):
        """
        Args:
            console: Rich console (stderr is a good choice)
            confirm: Prompt callable; when given, a "yes" schedules the retry
        """
        self.console = console or Console(stderr=True)
        self.confirm = confirm
        self.last_message: Optional[str] = None
        self.pending_retry: Optional[RetryTrigger] = None

    def show_error(self, message: str, retry: RetryTrigger) -> None:
        self.last_message = message
        self.console.print(Panel(message, title="[bold red]Error", border_style="red"))
        if self.confirm is not None and self.confirm("try again?"):
            self.pending_retry = retry
        else:
            self.pending_retry = None
            self.console.print("[dim]Run the command again to retry.[/dim]")
