from __future__ import annotations

from pathlib import Path

import typer
import uvicorn
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from ..api import create_app
from ..config import AppConfig, dump_config
from ..core import ConversionService
from ..errors import ConversionError, SourceDirectoryError
from ..loader import load_source
from ..models import ConversionResult
from ..settings import resolve_config
from ..utils import atomic_write

console = Console()
err_console = Console(stderr=True)

app = typer.Typer(help="Convert Vue component templates into Markdown documentation")


def _load_config(path: Path | None) -> AppConfig:
    return resolve_config(path)


def _report(result: ConversionResult) -> None:
    if result.ok:
        target = result.output_path.name if result.output_path else "-"
        console.print(f"[green]✅ Converted[/green] {escape(result.source_name)} → {escape(target)}")
    else:
        console.print(
            f"[red]❌ Failed[/red] {escape(result.source_name)}: "
            f"{result.error_code} - {escape(result.error_message or '')}"
        )


@app.command()
def batch(
    config: Path | None = typer.Option(None, "--config", help="Path to config.toml"),
    source_dir: Path | None = typer.Option(None, "--source-dir", help="Override runtime.source_dir"),
    output_dir: Path | None = typer.Option(None, "--output-dir", help="Override runtime.output_dir"),
    parallel: int | None = typer.Option(None, "--parallel", min=1, help="Parallel workers"),
) -> None:
    cfg = _load_config(config)
    service = ConversionService(cfg)
    try:
        batch_result = service.batch_convert(
            parallelism=parallel,
            source_dir=source_dir,
            output_dir=output_dir,
            on_result=_report,
        )
    except SourceDirectoryError as exc:
        console.print(f"[red]Batch aborted[/red]: {escape(str(exc))}")
        raise typer.Exit(2) from exc

    summary = batch_result.summary
    if summary.warnings:
        table = Table(title="Warnings")
        table.add_column("Code")
        table.add_column("Files")
        for code, count in sorted(summary.warnings.items()):
            table.add_row(code, str(count))
        console.print(table)
    console.print(
        f"Processed {summary.total} files: "
        f"{summary.successes} succeeded, {summary.failures} failed."
    )


@app.command()
def convert(
    file: Path,
    output: Path | None = typer.Option(None, "--output", "-o", help="Write Markdown here instead of stdout"),
    product: str | None = typer.Option(None, "--product", help="Product name used in the description"),
    config: Path | None = typer.Option(None, "--config", help="Path to config.toml"),
) -> None:
    cfg = _load_config(config)
    if product:
        cfg.site.product_name = product
    service = ConversionService(cfg)
    try:
        source = load_source(file.parent, file.name)
        converted = service.convert_text(source.text, source.name)
        if output is not None:
            atomic_write(output, converted.text)
    except ConversionError as exc:
        console.print(f"[red]Conversion failed[/red]: {exc.code} - {escape(str(exc))}")
        raise typer.Exit(1) from exc
    except OSError as exc:
        console.print(f"[red]Conversion failed[/red]: WRITE_FAILED - {escape(str(exc))}")
        raise typer.Exit(1) from exc
    if output is None:
        typer.echo(converted.text, nl=False)
    else:
        console.print(f"[green]Success[/green]: {escape(file.name)} → {escape(str(output))}")
    for warning in converted.warnings:
        err_console.print(f"[yellow]Warning[/yellow]: {warning}")


@app.command("show-config")
def show_config(
    config: Path | None = typer.Option(None, "--config", help="Path to config.toml"),
) -> None:
    typer.echo(dump_config(_load_config(config)))


@app.command()
def serve(
    config: Path | None = typer.Option(None, "--config", help="Path to config.toml"),
) -> None:
    """Run the local API on the configured host and port."""

    cfg = _load_config(config)
    try:
        api_app = create_app(config=cfg)
    except RuntimeError as exc:
        console.print(f"[red]{escape(str(exc))}[/red]")
        raise typer.Exit(1) from exc
    console.print(f"Serving on http://{cfg.api.host}:{cfg.api.port}")
    uvicorn.run(api_app, host=cfg.api.host, port=cfg.api.port)


if __name__ == "__main__":
    app()
