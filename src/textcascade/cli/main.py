import json
from pathlib import Path

import typer
from rich.console import Console
from rich.table import Table

from ..chunking import build_splitter_from_settings, verify_documents
from ..chunking.splitters import LineTextSplitter, RecursiveTextSplitter, TextSplitter
from ..chunking.verify import LINE_SPLITTER_TOLERANCE
from ..core.config import ConfigurationError, Settings
from ..core.logging import log, setup_logging

app = typer.Typer(add_completion=False, help="textcascade CLI")


def _load_settings(
    config_file: str | None,
    content_type: str | None,
    chunk_size: int | None,
    chunk_overlap: int | None,
    count_whitespace: bool | None,
    separators: list[str] | None,
    debug: bool,
) -> Settings:
    """Env vars < config file < CLI flags."""
    try:
        settings = Settings.load_config(config_file)
    except Exception as e:
        typer.echo(f"❌ Config error: {e}", err=True)
        raise typer.Exit(2) from e

    overrides = {
        "CONTENT_TYPE": content_type,
        "CHUNK_SIZE": chunk_size,
        "CHUNK_OVERLAP": chunk_overlap,
        "COUNT_WHITESPACE": count_whitespace,
        "CUSTOM_SEPARATORS": separators or None,
    }
    updates = {key: value for key, value in overrides.items() if value is not None}
    if debug:
        updates["SPLIT_DEBUG"] = True

    settings = settings.model_copy(update=updates)
    setup_logging(settings.LOG_FORMAT, debug=settings.SPLIT_DEBUG)  # type: ignore[arg-type]
    log.debug("config.loaded", config_file=config_file or "auto-discovered")
    return settings


def _build(settings: Settings) -> TextSplitter:
    try:
        return build_splitter_from_settings(settings)
    except ConfigurationError as e:
        typer.echo(f"❌ Config error: {e}", err=True)
        raise typer.Exit(2) from e


def _read(path: Path) -> str:
    if not path.exists():
        typer.echo(f"❌ File not found: {path}", err=True)
        raise typer.Exit(1)
    return path.read_text(encoding="utf-8")


ConfigOption = typer.Option(
    None, "--config", help="Config file (.textcascade.yaml auto-discovered)"
)
TypeOption = typer.Option(
    None, "--type", "-t", help="Content type: generic|markdown|source|custom"
)
SizeOption = typer.Option(None, "--chunk-size", help="Significant characters per chunk")
OverlapOption = typer.Option(None, "--chunk-overlap", help="Characters reserved for overlap")
WhitespaceOption = typer.Option(
    None,
    "--count-whitespace/--ignore-whitespace",
    help="Count leading/trailing whitespace of each line",
)
SeparatorOption = typer.Option(
    None, "--separator", help="Custom separator regex, coarsest first (repeatable)"
)
DebugOption = typer.Option(False, "--debug", help="Log intermediate groupings to stderr")


@app.command()
def chunk(
    files: list[Path] = typer.Argument(..., help="Text files to split"),
    config_file: str | None = ConfigOption,
    content_type: str | None = TypeOption,
    chunk_size: int | None = SizeOption,
    chunk_overlap: int | None = OverlapOption,
    count_whitespace: bool | None = WhitespaceOption,
    separators: list[str] | None = SeparatorOption,
    debug: bool = DebugOption,
    output_format: str = typer.Option("ndjson", "--format", help="Output format: ndjson|table"),
) -> None:
    """Split files into chunks with line provenance."""
    settings = _load_settings(
        config_file, content_type, chunk_size, chunk_overlap, count_whitespace, separators, debug
    )
    splitter = _build(settings)

    texts = [_read(path) for path in files]
    metadatas = [{"source": str(path)} for path in files]
    documents = splitter.create_documents(texts, metadatas)
    log.debug("chunk.complete", files=len(files), documents=len(documents))

    if output_format == "table":
        table = Table(title=f"{len(documents)} chunks")
        table.add_column("#", justify="right")
        table.add_column("Source")
        table.add_column("Lines")
        table.add_column("Chars", justify="right")
        table.add_column("Preview")
        for position, document in enumerate(documents):
            lines = document.lines
            preview = document.content.strip().replace("\n", " ⏎ ")[:60]
            table.add_row(
                str(position),
                document.metadata.get("source", ""),
                f"{lines.start}-{lines.end}",
                str(len(document.content)),
                preview,
            )
        Console().print(table)
        return

    for document in documents:
        typer.echo(json.dumps(document.model_dump(), ensure_ascii=False))


@app.command()
def verify(
    files: list[Path] = typer.Argument(..., help="Text files to split and verify"),
    config_file: str | None = ConfigOption,
    content_type: str | None = TypeOption,
    chunk_size: int | None = SizeOption,
    chunk_overlap: int | None = OverlapOption,
    count_whitespace: bool | None = WhitespaceOption,
    separators: list[str] | None = SeparatorOption,
    tolerance: int | None = typer.Option(
        None,
        "--tolerance",
        help="Allowed distance from chunk size (default 5 for line splitting, 30% otherwise)",
    ),
) -> None:
    """Split files and report provenance, coverage and budget checks as JSON."""
    settings = _load_settings(
        config_file, content_type, chunk_size, chunk_overlap, count_whitespace, separators, False
    )
    splitter = _build(settings)
    if tolerance is None and isinstance(splitter, LineTextSplitter):
        tolerance = LINE_SPLITTER_TOLERANCE

    reports = {}
    for path in files:
        text = _read(path)
        documents = splitter.create_documents([text])
        reports[str(path)] = verify_documents(
            documents,
            text,
            splitter.chunk_size,
            count_whitespace=splitter.count_whitespace,
            tolerance=tolerance,
            check_lossless=isinstance(splitter, RecursiveTextSplitter),
        )

    typer.echo(json.dumps(reports, indent=2))
    if not all(report["ok"] for report in reports.values()):
        raise typer.Exit(3)


@app.command()
def config(
    config_file: str | None = ConfigOption,
) -> None:
    """Print effective settings."""
    settings = _load_settings(config_file, None, None, None, None, None, False)
    for k, v in settings.model_dump().items():
        typer.echo(f"{k}={v}")


@app.command()
def version() -> None:
    from .. import __version__

    typer.echo(__version__)


if __name__ == "__main__":
    app()
