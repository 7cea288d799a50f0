"""CLI interface for cinefetch."""

import asyncio
import json
from typing import List, Optional

import typer
from rich.console import Console
from rich.syntax import Syntax
from rich.tree import Tree

app = typer.Typer(
    name="cinefetch",
    help="cinefetch: resilient movies client",
    add_completion=False
)
console = Console()
console_err = Console(stderr=True)


def _load(config_path: Optional[str], profile: Optional[str], overrides: Optional[List[str]] = None):
    from cinefetch.config.manager import ConfigManager

    return ConfigManager().load_config(
        config_path=config_path,
        profile=profile,
        overrides=overrides,
    )


async def _drive(orchestrator, presenter):
    """Run one fetch, wait for its background refresh and honour retries.

    Returns the FetchResult of the first delivery and of the last outcome.
    """
    async with orchestrator:
        first = await orchestrator.get_movies()
        last = first
        while True:
            if last.refresh_scheduled:
                refreshed = await orchestrator.wait_for_refresh()
                if refreshed is not None:
                    last = refreshed
            retry = presenter.pending_retry
            if retry is None:
                break
            presenter.pending_retry = None
            last = await retry()
            if last.ok:
                first = last
    return first, last


@app.command()
def movies(
    config_path: Optional[str] = typer.Option(
        None,
        "--config",
        "-c",
        help="Path to config file (defaults to config/defaults/config.yaml)"
    ),
    profile: Optional[str] = typer.Option(
        None,
        "--profile",
        "-p",
        help="Config profile to use (e.g., slow_network, offline_first)"
    ),
    overrides: Optional[List[str]] = typer.Option(
        None,
        "--set",
        "-s",
        help="Config override, e.g. --set fetch.cache_ttl=60 (repeatable)"
    ),
    output_format: str = typer.Option(
        "text",
        "--output",
        "-o",
        help="Output format: text, json, or html"
    ),
    interactive: bool = typer.Option(
        False,
        "--interactive",
        "-i",
        help="Offer to retry when the fetch fails"
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Enable verbose output"
    ),
):
    """Fetch movies and render them.

    Examples:
        cinefetch movies
        cinefetch movies --output json
        cinefetch movies --profile slow_network --interactive
        cinefetch movies --set fetch.api_url=https://example.com/movies
    """
    if output_format not in {"text", "json", "html"}:
        console_err.print(f"[bold red]Error:[/bold red] Unknown output format: {output_format}")
        raise typer.Exit(code=1)

    try:
        from cinefetch.core.factory import build_orchestrator
        from cinefetch.logging_config import configure_from_config
        from cinefetch.presentation import ConsoleErrorPresenter, ConsoleRenderer, HtmlRenderer

        config = _load(config_path, profile, overrides)
        if verbose:
            config.logging.level = "DEBUG"
        configure_from_config(config.logging)

        if output_format == "html":
            renderer = HtmlRenderer()
        else:
            renderer = ConsoleRenderer(console, output_format=output_format)
        presenter = ConsoleErrorPresenter(
            console_err,
            confirm=(lambda prompt: typer.confirm(prompt, default=True)) if interactive else None,
        )

        orchestrator = build_orchestrator(config, renderer, presenter)
        first, last = asyncio.run(_drive(orchestrator, presenter))

        if output_format == "html" and renderer.html:
            console.print(renderer.html, markup=False, highlight=False, soft_wrap=True)

        if verbose:
            console_err.print_json(json.dumps(orchestrator.get_status()))

    except Exception as e:
        console_err.print(f"[bold red]Error:[/bold red] {e}")
        if verbose:
            import traceback
            console_err.print(traceback.format_exc())
        raise typer.Exit(code=1)

    if not first.ok:
        raise typer.Exit(code=1)


@app.command()
def config(
    config_path: Optional[str] = typer.Option(
        None,
        "--config",
        "-c",
        help="Path to config file"
    ),
    profile: Optional[str] = typer.Option(
        None,
        "--profile",
        "-p",
        help="Config profile to use"
    ),
    output_format: str = typer.Option(
        "tree",
        "--output",
        "-o",
        help="Output format: tree, json, or yaml"
    ),
):
    """Display current configuration.

    Examples:
        cinefetch config
        cinefetch config --profile slow_network
        cinefetch config --output json
    """
    try:
        from cinefetch.config.manager import ConfigManager

        manager = ConfigManager()
        cfg = manager.load_config(config_path=config_path, profile=profile)

        if output_format == "json":
            console.print_json(json.dumps(manager.to_dict(cfg)))

        elif output_format == "yaml":
            console.print(Syntax(manager.to_yaml(cfg), "yaml", theme="monokai"))

        else:  # tree
            tree = Tree(f"[bold]{cfg.project}[/bold] v{cfg.version}")

            fetch_tree = tree.add("[cyan]Fetch")
            fetch_tree.add(f"API URL: {cfg.fetch.api_url}")
            fetch_tree.add(f"Request Timeout: {cfg.fetch.request_timeout}s")
            fetch_tree.add(f"Cache TTL: {cfg.fetch.cache_ttl}s")

            resilience_tree = tree.add("[cyan]Resilience")
            resilience_tree.add(f"Failure Threshold: {cfg.resilience.failure_threshold}")
            resilience_tree.add(f"Open Duration: {cfg.resilience.open_duration}s")
            resilience_tree.add(f"Max Retries: {cfg.resilience.max_retries}")
            resilience_tree.add(f"Initial Delay: {cfg.resilience.initial_delay}s")
            resilience_tree.add(f"Max Delay: {cfg.resilience.max_delay or 'uncapped'}")

            storage_tree = tree.add("[cyan]Storage")
            storage_tree.add(f"Backend: {cfg.storage.backend}")
            if cfg.storage.backend == "file":
                storage_tree.add(f"Path: {cfg.storage.path}")

            console.print(tree)

    except Exception as e:
        console_err.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(code=1)


@app.command()
def version():
    """Show cinefetch version."""
    from cinefetch import __version__

    console.print(f"[bold]cinefetch[/bold] v{__version__}")


# ============================================================================
# Cache Commands
# ============================================================================

cache_app = typer.Typer(help="Inspect or clear the cached movies snapshot")
app.add_typer(cache_app, name="cache")


def _open_cache(config_path: Optional[str], profile: Optional[str]):
    from cinefetch.core.cache import MovieCache
    from cinefetch.core.factory import create_store

    cfg = _load(config_path, profile)
    return cfg, MovieCache(create_store(cfg.storage), key=cfg.fetch.cache_key)


@cache_app.command("show")
def cache_show(
    config_path: Optional[str] = typer.Option(None, "--config", "-c", help="Path to config file"),
    profile: Optional[str] = typer.Option(None, "--profile", "-p", help="Config profile to use"),
):
    """Show the age and size of the cached snapshot."""
    from cinefetch.core.clock import SystemClock

    try:
        cfg, cache = _open_cache(config_path, profile)
    except Exception as e:
        console_err.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(code=1)

    entry = cache.read()
    if entry is None:
        console.print("[yellow]No cached movies[/yellow]")
        return

    now = SystemClock().now()
    state = "stale" if entry.is_stale(now, cfg.fetch.cache_ttl) else "fresh"
    console.print(
        f"[bold]{len(entry.payload)}[/bold] movies cached "
        f"{entry.age(now):.0f}s ago ([cyan]{state}[/cyan], ttl {cfg.fetch.cache_ttl:.0f}s)"
    )


@cache_app.command("clear")
def cache_clear(
    config_path: Optional[str] = typer.Option(None, "--config", "-c", help="Path to config file"),
    profile: Optional[str] = typer.Option(None, "--profile", "-p", help="Config profile to use"),
):
    """Delete the cached snapshot."""
    try:
        _, cache = _open_cache(config_path, profile)
    except Exception as e:
        console_err.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(code=1)

    if cache.clear():
        console.print("[green]Cache cleared[/green]")
    else:
        console.print("[yellow]No cached movies[/yellow]")


def main():
    app()


if __name__ == "__main__":
    main()
