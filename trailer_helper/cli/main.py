# Copyright (c) 2025 Trae AI. All rights reserved.

import typer
import yaml
from pathlib import Path
from typing import List, Optional
from rich.console import Console
from rich.table import Table
from rich.progress import Progress
from ..core.config import Config
from ..core.exceptions import CatalogError, ConfigError, ProviderIdError
from ..core.models import ItemKind, MediaItem, MediaType, OutcomeStatus
from ..core.provider_ids import ProviderIdModel, read_provider_id_model, write_provider_id_model
from ..core.trailers import is_ignored, stub_path_for, trailers_dir_for
from ..infrastructure.db.database import Database
from ..infrastructure.db.repository import LibraryRepository, LogRepository
from ..services.trailer_service import TrailerService

app = typer.Typer(help="NAS Trailer Helper - Keep trailer stubs in sync with your library.")
console = Console()

STATUS_STYLES = {
    OutcomeStatus.CREATED: "green",
    OutcomeStatus.REMOVED: "yellow",
    OutcomeStatus.FAILED: "red",
}


def _load_config(config_path: str) -> Config:
    try:
        return Config.load(config_path)
    except ConfigError as e:
        console.print(f"[red]Error loading config:[/red] {e}")
        raise typer.Exit(1)


def _open_repos(config: Config):
    db = Database(Path(config.database_path))
    return LibraryRepository(db), LogRepository(db)


@app.command("run")
def run_trailers(config_path: str = "config.yaml"):
    """
    Generate or clean up trailer stubs for all managed movies.
    """
    config = _load_config(config_path)
    library_repo, log_repo = _open_repos(config)
    service = TrailerService(config, library_repo, log_repo)

    if not config.enable_trailers:
        console.print("[yellow]Trailer generation is disabled in config.[/yellow]")
        return

    with Progress() as progress:
        task = progress.add_task("[green]Generating trailers...", total=100)
        try:
            report = service.run(progress=lambda p: progress.update(task, completed=p))
        except CatalogError as e:
            console.print(f"[red]Catalog query failed:[/red] {e}")
            raise typer.Exit(1)

    changed = [o for o in report.outcomes if o.status in STATUS_STYLES]
    if changed:
        table = Table(title="Trailer Changes")
        table.add_column("Item", style="magenta")
        table.add_column("Result")
        table.add_column("Details", style="cyan")
        for o in changed:
            style = STATUS_STYLES[o.status]
            table.add_row(o.item_name, f"[{style}]{o.status.value}[/{style}]", o.reason or str(o.stub_path or ""))
        console.print(table)

    summary = report.summary()
    console.print(
        f"\nProcessed [bold]{len(report.outcomes)}[/bold] items: "
        f"[green]{summary['created']} created[/green], "
        f"[yellow]{summary['removed']} removed[/yellow], "
        f"{summary['unchanged']} unchanged, {summary['ignored']} ignored, "
        f"[red]{summary['failed']} failed[/red]."
    )


@app.command("list")
def list_items(config_path: str = "config.yaml"):
    """
    List catalog items and the state of their trailer stubs.
    """
    config = _load_config(config_path)
    library_repo, _ = _open_repos(config)
    items = library_repo.get_all()

    table = Table(title="Library Items")
    table.add_column("ID", style="dim")
    table.add_column("Name", style="magenta")
    table.add_column("Kind", style="green")
    table.add_column("Managed")
    table.add_column("Trailer URL", style="cyan")
    table.add_column("Stub", style="yellow")

    for item in items:
        trailers_dir = trailers_dir_for(item.container_path)
        if is_ignored(trailers_dir):
            stub_state = "ignored"
        elif stub_path_for(trailers_dir, item.name).is_file():
            stub_state = "present"
        else:
            stub_state = "-"
        table.add_row(
            str(item.id),
            item.name,
            item.kind.value,
            "yes" if config.provider_id_key in item.provider_ids else "no",
            item.trailer_url or "",
            stub_state,
        )

    console.print(table)
    console.print(f"\nFound [bold]{len(items)}[/bold] items.")


@app.command("add")
def add_item(
    name: str,
    container_path: Path,
    trailer_url: Optional[str] = typer.Option(None, "--trailer-url", "-t"),
    kind: ItemKind = typer.Option(ItemKind.MOVIE, "--kind"),
    provider: str = typer.Option("", "--provider", help="Upstream provider name stored in the provider id"),
    pid: str = typer.Option("", "--pid", help="Upstream id stored in the provider id"),
    config_path: str = "config.yaml",
):
    """
    Register a media item in the catalog and tag it with the provider id.
    """
    config = _load_config(config_path)
    library_repo, log_repo = _open_repos(config)

    item = MediaItem(
        name=name,
        container_path=container_path,
        kind=kind,
        remote_trailers=[trailer_url] if trailer_url else [],
    )
    write_provider_id_model(item, config.provider_id_key, ProviderIdModel(provider=provider, id=pid))
    library_repo.save(item)
    log_repo.add("ADD", item.name, f"Added item {item.id} at {container_path}")
    console.print(f"[green]Added[/green] {item.name} (id {item.id}).")


@app.command("import")
def import_items(file: Path, config_path: str = "config.yaml"):
    """
    Import items from a YAML list of {name, container_path, kind, trailer_url, provider, pid}.
    """
    config = _load_config(config_path)
    library_repo, log_repo = _open_repos(config)

    try:
        with open(file, "r", encoding="utf-8") as f:
            entries = yaml.safe_load(f) or []
    except (OSError, yaml.YAMLError) as e:
        console.print(f"[red]Error reading {file}:[/red] {e}")
        raise typer.Exit(1)

    if not isinstance(entries, list):
        console.print(f"[red]{file} must contain a list of items.[/red]")
        raise typer.Exit(1)

    imported = 0
    errors: List[str] = []
    for entry in entries:
        try:
            trailer_url = entry.get("trailer_url")
            item = MediaItem(
                name=entry["name"],
                container_path=Path(entry["container_path"]),
                kind=ItemKind(entry.get("kind", ItemKind.MOVIE.value)),
                media_type=MediaType(entry.get("media_type", MediaType.VIDEO.value)),
                remote_trailers=[trailer_url] if trailer_url else [],
            )
            pid_model = ProviderIdModel(provider=str(entry.get("provider") or ""), id=str(entry.get("pid") or ""))
            write_provider_id_model(item, config.provider_id_key, pid_model)
            library_repo.save(item)
            imported += 1
        except (AttributeError, KeyError, ValueError) as e:
            errors.append(f"{entry}: {e}")

    log_repo.add("IMPORT", str(file), f"Imported {imported} items")
    console.print(f"[green]Imported {imported} items.[/green]")
    for err in errors:
        console.print(f"[red]Skipped[/red] {err}")


@app.command("pid")
def show_provider_id(item_id: int, config_path: str = "config.yaml"):
    """
    Show the decoded provider id stored on an item.
    """
    config = _load_config(config_path)
    library_repo, _ = _open_repos(config)

    item = library_repo.get(item_id)
    if not item:
        console.print(f"[red]Item {item_id} not found.[/red]")
        raise typer.Exit(1)

    try:
        model = read_provider_id_model(item, config.provider_id_key)
    except ProviderIdError as e:
        console.print(f"[red]Cannot decode provider id:[/red] {e}")
        raise typer.Exit(1)

    table = Table(title=f"Provider Id for {item.name}")
    table.add_column("Field", style="magenta")
    table.add_column("Value", style="cyan")
    for field, value in model.model_dump().items():
        table.add_row(field, "" if value is None else str(value))
    console.print(table)


@app.command("info")
def task_info(config_path: str = "config.yaml"):
    """
    Show the trailer task descriptor and its default schedule.
    """
    config = _load_config(config_path)
    library_repo, _ = _open_repos(config)
    service = TrailerService(config, library_repo)

    console.print(f"[bold]{service.name}[/bold] ({service.key})")
    console.print(service.description)
    console.print(f"Category: {service.category}")
    for trigger in service.default_triggers():
        console.print(f"Trigger: {trigger.type} at {trigger.hour:02d}:{trigger.minute:02d}")
    if not config.enable_trailers:
        console.print("[yellow]Disabled in config.[/yellow]")


if __name__ == "__main__":
    app()
