"""CLI entrypoint for tikentoken."""

from __future__ import annotations

import asyncio
import logging
import os
import sys

import typer
from rich.logging import RichHandler

from tikentoken.config import GatewayConfig, resolve_config
from tikentoken.env import load_dotenv
from tikentoken.gateway import Gateway
from tikentoken.options import parse_extra_options
from tikentoken.types import Failure, Operation, Result
from tikentoken.ui.console import get_err_console
from tikentoken.ui.progress import status_spinner
from tikentoken.ui.render import render_config_table, render_error, render_result

app = typer.Typer(
    add_completion=False,
    help="Tokenize, embed or chat with text through an Ollama inference service.",
)


@app.command()
def main(
    text: list[str] = typer.Argument(None, help="Input text. Read from stdin when omitted."),
    model: str = typer.Option(
        None,
        "--model",
        help="Model name (default: embeddinggemma for tokenize/embed, tinyllama for chat).",
    ),
    format: str = typer.Option("id", "--format", help='Token format. Only "id" is supported.'),
    extra_options: str = typer.Option(
        "",
        "--extra_options",
        help='Tokenize options as key:value pairs, e.g. "add_bos:true,add_eos:false".',
    ),
    embed: bool = typer.Option(False, "--embed", help="Compute an embedding instead of tokens."),
    chat: bool = typer.Option(False, "--chat", help="Generate a chat response instead of tokens."),
    ollama_url: str = typer.Option(None, "--ollama_url", help="Ollama API base URL."),
    embed_dim: int = typer.Option(None, "--embed_dim", help="Embedding dimension (default: 768)."),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show resolved settings and debug logs."),
) -> None:
    """Tokenize text by default; use --embed or --chat for the other operations."""
    load_dotenv()
    _configure_logging(verbose)

    try:
        config = resolve_config().with_base_url(ollama_url)
        options = parse_extra_options(extra_options or "")
    except ValueError as exc:
        render_error(f"Error: {exc}")
        raise typer.Exit(code=1) from exc

    try:
        subject = _read_input(text)
    except UnicodeDecodeError as exc:
        render_error("Error: Input is not valid UTF-8 text.")
        raise typer.Exit(code=1) from exc
    if not subject:
        render_error("Error: No input provided.")
        raise typer.Exit(code=1)

    if chat:
        operation = Operation.CHAT
    elif embed:
        operation = Operation.EMBED
    else:
        operation = Operation.TOKENIZE

    dim = config.embed_dim if embed_dim is None else embed_dim
    if verbose:
        render_config_table(
            [
                ("Operation", operation.value),
                ("Base URL", config.base_url),
                ("Model", model or _default_model(config, operation)),
                ("Dimension", str(dim) if operation is Operation.EMBED else "-"),
            ]
        )

    result = asyncio.run(
        _execute(
            operation,
            subject,
            config=config,
            model=model,
            token_format=format,
            extra_options=options,
            dim=dim,
        )
    )

    if isinstance(result, Failure):
        render_error(f"{operation.label} error: {result.reason}")
        raise typer.Exit(code=1)

    if operation is Operation.TOKENIZE:
        render_result("Tokens: " + " ".join(str(token) for token in result.value))
    elif operation is Operation.EMBED:
        render_result(f"Embedding (psql vector): {format_vector(result.value)}")
    else:
        render_result(result.value)


async def _execute(
    operation: Operation,
    subject: str,
    *,
    config: GatewayConfig,
    model: str | None,
    token_format: str,
    extra_options: dict[str, str | bool],
    dim: int,
) -> Result:
    async with Gateway(config=config) as gateway:
        if operation is Operation.CHAT:
            with status_spinner("Generating response"):
                return await gateway.chat(subject, model)
        if operation is Operation.EMBED:
            return await gateway.embed(subject, dim, model)
        return await gateway.tokenize(subject, model, token_format, extra_options)


def format_vector(values: list[float]) -> str:
    return "[" + ",".join(repr(float(value)) for value in values) + "]"


def _read_input(args: list[str] | None) -> str:
    if args:
        return " ".join(args).strip()
    if sys.stdin is None or sys.stdin.isatty():
        return ""
    return sys.stdin.read().strip()


def _default_model(config: GatewayConfig, operation: Operation) -> str:
    if operation is Operation.CHAT:
        return config.chat_model
    if operation is Operation.EMBED:
        return config.embed_model
    return config.tokenize_model


def _configure_logging(verbose: bool) -> None:
    level_name = "DEBUG" if verbose else os.getenv("TIKENTOKEN_LOG_LEVEL", "WARNING")
    level = logging.getLevelName(level_name.upper())
    if not isinstance(level, int):
        level = logging.WARNING
    handler = RichHandler(console=get_err_console(), show_path=False, show_time=False)
    logging.basicConfig(level=level, format="%(message)s", handlers=[handler], force=True)
    # keep httpx request lines out of normal output
    logging.getLogger("httpx").setLevel(logging.DEBUG if verbose else logging.WARNING)


if __name__ == "__main__":
    app()
