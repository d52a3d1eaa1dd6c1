from __future__ import annotations
import asyncio
from pathlib import Path
from typing import List, Optional

import typer
from rich import print
from rich.console import Console
from rich.markup import escape
from rich.progress import BarColumn, Progress, TaskID, TextColumn
from rich.table import Table

from . import events
from .batch import BatchItem, EmptyBatchError, ItemStatus, build_batch, parse_url_list, run_batch
from .config import Config, load_config
from .logging_setup import setup_logging
from .paths import get_dirs
from .presets import DownloadOptions, OutputFormat, Quality
from .runner import stream_download

console = Console()

app = typer.Typer(no_args_is_help=True)


def _setup(console_logs: bool = True) -> Config:
    cfg = load_config()
    setup_logging(cfg.log_level, console=console_logs)
    return cfg


def _progress() -> Progress:
    return Progress(
        TextColumn("{task.description:<12}"),
        BarColumn(),
        TextColumn("{task.percentage:>5.1f}%"),
        TextColumn("[dim]{task.fields[status]}"),
        console=console,
    )


async def _run_single(options: DownloadOptions, cfg: Config, progress: Progress, task: TaskID):
    """Drive one download, mirroring its events onto a progress bar."""
    result = None
    async for event in stream_download(options, cfg):
        if event.type == events.PROGRESS:
            progress.update(
                task,
                completed=event.data["percent"],
                description=event.data["stage"],
                status=event.data["message"],
            )
        elif event.type == events.WARNING:
            progress.console.print(f"[yellow]{escape(event.data['message'])}[/yellow]")
        else:
            result = event
    return result


@app.command("serve")
def serve_cmd(
    host: str = typer.Option(None, help="Bind address"),
    port: int = typer.Option(None, help="Port to listen on"),
):
    """Start the download API server."""
    cfg = _setup()
    h = host or cfg.web_host
    p = port or cfg.web_port
    import uvicorn
    from .web.app import create_app
    uvicorn.run(create_app(cfg), host=h, port=p)


@app.command("download")
def download_cmd(
    url: str = typer.Argument(..., help="Media page URL"),
    quality: Quality = typer.Option(Quality.BEST, "--quality", "-q"),
    output_format: OutputFormat = typer.Option(OutputFormat.MP4, "--format", "-f"),
    filename: Optional[str] = typer.Option(None, "--filename", "-o", help="Custom base filename"),
    subtitles: bool = typer.Option(False, "--subtitles", help="Embed subtitles (language from config)"),
):
    """Download a single URL with live progress."""
    cfg = _setup(console_logs=False)
    options = DownloadOptions(
        url=url.strip(),
        quality=quality,
        custom_filename=filename,
        subtitles=subtitles,
        output_format=output_format,
    )

    with _progress() as progress:
        task = progress.add_task("Starting", total=100, status="")
        result = asyncio.run(_run_single(options, cfg, progress, task))

    if result is not None and result.type == events.COMPLETE:
        print(f"[green]Saved[/green] {result.data['filename']} in {Path(cfg.download_dir).resolve()}")
        return
    data = result.data if result is not None else {"message": "Download failed"}
    print(f"[red]{escape(data['message'])}[/red]")
    if data.get("detail"):
        print(f"[dim]{escape(data['detail'])}[/dim]")
    raise typer.Exit(1)


async def _run_batch(items: list[BatchItem], template: DownloadOptions, cfg: Config, progress: Progress):
    tasks = [
        progress.add_task("pending", total=100, status=item.url)
        for item in items
    ]
    async for index, event in run_batch(items, template, cfg):
        if event.type == events.PROGRESS:
            progress.update(tasks[index], completed=event.data["percent"],
                            description=event.data["stage"], status=event.data["message"])
        elif event.type == events.WARNING:
            progress.console.print(f"[yellow]#{index + 1}: {escape(event.data['message'])}[/yellow]")
        elif event.type == events.ERROR:
            progress.update(tasks[index], description="Failed", status=event.data["message"])


@app.command("batch")
def batch_cmd(
    urls: Optional[List[str]] = typer.Argument(None, help="URLs to download in order"),
    file: Optional[Path] = typer.Option(None, "--file", "-i", exists=True, dir_okay=False,
                                        help="Text file with one URL per line"),
    quality: Quality = typer.Option(Quality.BEST, "--quality", "-q"),
    output_format: OutputFormat = typer.Option(OutputFormat.MP4, "--format", "-f"),
    filename: Optional[str] = typer.Option(None, "--filename", "-o",
                                           help="Custom base filename (numbered per item)"),
    subtitles: bool = typer.Option(False, "--subtitles"),
):
    """Download several URLs one after another; failures don't stop the batch."""
    cfg = _setup(console_logs=False)
    all_urls = list(urls or [])
    if file:
        all_urls += parse_url_list(file.read_text(encoding="utf-8"))
    try:
        items = build_batch(all_urls)
    except EmptyBatchError as e:
        print(f"[red]{e}[/red]")
        raise typer.Exit(2)

    template = DownloadOptions(
        url="",
        quality=quality,
        custom_filename=filename,
        subtitles=subtitles,
        output_format=output_format,
    )
    with _progress() as progress:
        asyncio.run(_run_batch(items, template, cfg, progress))

    t = Table(title="Batch results")
    t.add_column("#", justify="right")
    t.add_column("Status")
    t.add_column("URL")
    t.add_column("Result")
    for i, item in enumerate(items, start=1):
        ok = item.status == ItemStatus.COMPLETE
        t.add_row(
            str(i),
            "[green]complete[/green]" if ok else "[red]error[/red]",
            escape(item.url),
            escape(item.filename if ok else (item.error or "")),
        )
    console.print(t)

    failed = sum(1 for item in items if item.status != ItemStatus.COMPLETE)
    if failed:
        print(f"[yellow]{failed} of {len(items)} download(s) failed[/yellow]")
        raise typer.Exit(1)


@app.command("paths")
def show_paths():
    """Show where clipfetch keeps config, logs and cache."""
    cfg = _setup(console_logs=False)
    t = Table(title="clipfetch paths")
    t.add_column("Kind"); t.add_column("Location")
    for k, p in get_dirs().items():
        t.add_row(k, str(p))
    t.add_row("downloads", str(Path(cfg.download_dir).resolve()))
    console.print(t)


if __name__ == "__main__":
    app()
