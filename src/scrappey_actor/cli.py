# src/scrappey_actor/cli.py
"""
Command-line interface for the Scrappey actor.

This module provides CLI commands to:
- Run one scrape job from an input JSON file and append the result to a dataset
- Preview the request body a given input would send (no network)
- List the commands Scrappey understands
"""

from dotenv import load_dotenv
load_dotenv(override=True)  # picks up SCRAPPEY_API_KEY etc. from a .env in the project root

import json
from typing import Optional

import typer

from scrappey_actor.actor import run_job
from scrappey_actor.config import load_settings
from scrappey_actor.errors import ScrappeyActorError
from scrappey_actor.io.dataset import open_dataset
from scrappey_actor.io.input import load_input
from scrappey_actor.logging_utils import configure_logging
from scrappey_actor.pipeline.command import COMMAND_MAP, SHORT_COMMANDS
from scrappey_actor.pipeline.request import build_request_body
from scrappey_actor.pipeline.validate import validate_input

# Typer app instance for CLI commands
app = typer.Typer(help="Scrappey actor: one input -> one Scrappey call -> one dataset record")


def _fail(e: Exception) -> None:
    typer.secho(f"Error: {e}", fg=typer.colors.RED, err=True)
    raise typer.Exit(code=1)


@app.command()
def run(
    input_path: Optional[str] = typer.Option(None, "--input", "-i", help="Input JSON file ('-' for stdin)"),
    dataset: Optional[str] = typer.Option(None, "--dataset", "-d", help="JSONL dataset path ('-' for stdout)"),
    api_key: Optional[str] = typer.Option(None, "--api-key", help="Used when the input has no scrappeyApiKey"),
):
    """
    Read input -> validate -> call Scrappey -> append one record to the dataset.
    Exits with code 1 on any failure.
    """
    settings = load_settings()
    configure_logging(settings.log_level)

    input_path = input_path or settings.input_path
    target = dataset or settings.dataset_path

    sink = open_dataset(target)
    try:
        job = load_input(input_path, api_key=api_key or settings.api_key)
        record = run_job(job, sink=sink, settings=settings)
    except ScrappeyActorError as e:
        _fail(e)
        return
    finally:
        sink.close()

    summary = {
        "url": record.url,
        "cmd": record.cmd,
        "statusCode": record.statusCode,
        "verified": record.verified,
        "session": record.session,
        "timeElapsed": record.timeElapsed,
        "dataset": target,
    }
    # keep stdout clean for the record itself when writing the dataset there
    typer.echo(json.dumps(summary, indent=2), err=target == "-")


@app.command()
def build_body(
    input_path: Optional[str] = typer.Option(None, "--input", "-i", help="Input JSON file ('-' for stdin)"),
):
    """
    Dry run: validate the input and print the body that would be sent.
    The API key travels in the query string, so it never shows up here.
    """
    settings = load_settings()
    try:
        job = validate_input(load_input(input_path or settings.input_path, api_key=settings.api_key))
        body = build_request_body(job)
    except ScrappeyActorError as e:
        _fail(e)
        return
    typer.echo(json.dumps(body, indent=2, ensure_ascii=False))


@app.command()
def commands():
    """List the accepted `cmd` values and what they map to."""
    for short in SHORT_COMMANDS:
        typer.echo(f"{short:<8} -> {COMMAND_MAP[short]}")


if __name__ == "__main__":
    app()
