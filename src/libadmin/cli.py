"""Command line interface for :mod:`libadmin`."""

import json
import logging

import click

from .client import LibraryAPIError, LibraryClient

__all__ = [
    "main",
]

DEFAULT_API_URL = "http://localhost:5000/api"


@click.group()
@click.version_option()
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose logging")
@click.pass_context
def main(ctx: click.Context, verbose: bool) -> None:
    """libadmin - library catalog backend with a read-through cache."""
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose

    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
            force=True,
        )
        logging.getLogger("libadmin").setLevel(logging.DEBUG)
    else:
        logging.basicConfig(level=logging.WARNING, format="%(levelname)s: %(message)s", force=True)


@main.command()
@click.option("--host", default="0.0.0.0", show_default=True, help="Bind address")
@click.option("--port", default=5000, show_default=True, type=int, help="Port")
@click.option("--debug", is_flag=True, help="Run Flask in debug mode")
def serve(host: str, port: int, debug: bool) -> None:
    """Run the backend API server.

    Configuration comes from environment variables (DATABASE_PATH,
    CACHE_TYPE, CACHE_DEFAULT_TTL, CACHE_MAX_SIZE, CACHE_SWEEP_INTERVAL,
    REDIS_URL).
    """
    from libadmin.backend.app import create_app

    app = create_app()
    click.echo(f"Serving libadmin API on http://{host}:{port}/api")
    app.run(host=host, port=port, debug=debug)


@main.group()
def cache() -> None:
    """Inspect or clear the server cache."""


@cache.command("stats")
@click.option("--url", default=DEFAULT_API_URL, show_default=True, help="API root URL")
def cache_stats(url: str) -> None:
    """Print the server cache statistics as JSON."""
    client = LibraryClient(url, cache={"type": "memory", "options": {"sweepInterval": 0}})
    try:
        stats = client.cache_stats()
    except LibraryAPIError as exc:
        raise click.ClickException(str(exc)) from exc
    finally:
        client.close()
    click.echo(json.dumps(stats, indent=2))


@cache.command("clear")
@click.option("--url", default=DEFAULT_API_URL, show_default=True, help="API root URL")
def cache_clear(url: str) -> None:
    """Drop every server cache entry and reset its counters."""
    client = LibraryClient(url, cache={"type": "memory", "options": {"sweepInterval": 0}})
    try:
        client.clear_server_cache()
    except LibraryAPIError as exc:
        raise click.ClickException(str(exc)) from exc
    finally:
        client.close()
    click.echo("Cache cleared")


if __name__ == "__main__":
    main()
