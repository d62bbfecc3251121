"""Leitner CLI — serve the study API and inspect configuration and schedules."""

import json
import logging
import sys
from typing import Annotated

import typer

from leitner.application.config import resolve_config
from leitner.domain.constants import MAX_BUCKET

# ---------------------------------------------------------------------------
# Root app
# ---------------------------------------------------------------------------

app = typer.Typer(
    help="leitner: Modified-Leitner spaced-repetition scheduler.",
    no_args_is_help=True,
    rich_markup_mode="rich",
)

config_app = typer.Typer(help="Manage leitner configuration.")
app.add_typer(config_app, name="config")

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Global callback
# ---------------------------------------------------------------------------


@app.callback()
def main_callback(
    ctx: typer.Context,
    verbose: Annotated[
        int,
        typer.Option(
            "--verbose", "-v", count=True, help="Increase verbosity. Repeat for more detail."
        ),
    ] = 0,
):
    """Global settings for leitner."""
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    config = resolve_config()
    logging.basicConfig(
        level=logging.DEBUG if verbose else config.log_level,
        format="%(levelname)s:%(name)s:%(message)s",
        stream=sys.stderr,
    )


# ---------------------------------------------------------------------------
# Root commands
# ---------------------------------------------------------------------------


@app.command()
def serve(
    host: Annotated[str | None, typer.Option(help="Host to bind the server to.")] = None,
    port: Annotated[int | None, typer.Option(help="Port to bind the server to.")] = None,
    reload: Annotated[bool, typer.Option(help="Enable auto-reload.")] = False,
):
    """[bold green]Serve[/bold green] the study API."""
    import uvicorn

    config = resolve_config({"host": host, "port": port})
    logger.info(f"Starting server on {config.host}:{config.port}")
    uvicorn.run("leitner.server:app", host=config.host, port=config.port, reload=reload)


@app.command()
def intervals(
    day: Annotated[int, typer.Option(min=0, help="Day number to check (starting from 0).")] = 0,
    json_output: Annotated[bool, typer.Option("--json", help="Output as JSON.")] = False,
):
    """Show each bucket's review interval and whether it is due on a day."""
    from leitner.application.scheduler import is_bucket_due, review_interval

    rows = [
        {
            "bucket": bucket,
            "interval_days": review_interval(bucket),
            "due": is_bucket_due(bucket, day),
        }
        for bucket in range(MAX_BUCKET + 1)
    ]

    if json_output:
        typer.echo(json.dumps({"day": day, "buckets": rows}, indent=2))
        return

    typer.echo(f"Day {day}")
    for row in rows:
        status = typer.style("due", fg="green") if row["due"] else "-"
        typer.echo(f"  Bucket {row['bucket']}: every {row['interval_days']} day(s)  {status}")


# ---------------------------------------------------------------------------
# Config subgroup
# ---------------------------------------------------------------------------


@config_app.command("show")
def config_show():
    """Display final resolved configuration."""
    config = resolve_config()
    typer.echo(json.dumps(config.model_dump(), indent=2))


def main():
    app()


if __name__ == "__main__":
    main()
