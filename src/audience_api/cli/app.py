"""Typer CLI root application with serve and count commands."""

import asyncio
import json

import typer

from audience_api.core.config import get_settings
from audience_api.core.logging import setup_logging

app = typer.Typer(name="audience-api", help="Audience count aggregation CLI")


@app.callback()
def _main_callback() -> None:
    """Initialize logging for all CLI commands."""
    settings = get_settings()
    setup_logging(settings.log_level, log_dir=settings.log_dir)


@app.command()
def serve(
    reload: bool = typer.Option(False, "--reload", help="Enable auto-reload for development"),
    host: str = typer.Option("0.0.0.0", "--host", help="Bind host"),  # noqa: S104
    port: int = typer.Option(8000, "--port", help="Bind port"),
) -> None:
    """Start the API server."""
    import uvicorn

    uvicorn.run(
        "audience_api.main:create_app",
        factory=True,
        host=host,
        port=port,
        reload=reload,
    )


@app.command()
def count(
    universe: list[str] = typer.Option(..., "--universe", "-u", help="Universe field (repeatable)"),
    state: list[str] = typer.Option([], "--state", help="Selected state (repeatable)"),
    county: list[str] = typer.Option([], "--county", help="Selected county (repeatable)"),
    level: list[str] = typer.Option([], "--level", help="Geography level to break down (repeatable)"),
    top_n: int | None = typer.Option(None, "--top-n", help="Entries kept per geography level"),
) -> None:
    """Aggregate an audience selection and print the result as JSON."""
    asyncio.run(_run_count(universe, state, county, level, top_n))


async def _run_count(
    universe: list[str],
    states: list[str],
    counties: list[str],
    levels: list[str],
    top_n: int | None,
) -> None:
    from audience_api.lib.counting_client import CountingServiceClient, CountingServiceError
    from audience_api.lib.geo_resolver import GeoResolutionError, GeoSelection
    from audience_api.services.aggregation_service import aggregate_audience

    settings = get_settings()
    client = CountingServiceClient(
        settings.counting_api_base_url,
        api_key=settings.counting_api_key,
        timeout=settings.counting_api_timeout,
    )
    try:
        result = await aggregate_audience(
            client,
            universe,
            GeoSelection(state=tuple(states), county=tuple(counties)),
            requested_levels=levels or None,
            top_n=top_n if top_n is not None else settings.geography_top_n,
        )
    except (GeoResolutionError, CountingServiceError) as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(code=1) from exc
    finally:
        await client.close()

    typer.echo(json.dumps(result.to_payload(), indent=2))
