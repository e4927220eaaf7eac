from __future__ import annotations

import questionary
from rich.console import Console
from rich.table import Table

from clinkstore.storage.errors import StorageError
from clinkstore.storage.factory import get_registry
from clinkstore.storage.registry import StorageRegistry

console = Console()

DEFAULT_CHOICE = "(default)"
BACK_CHOICE = "Back"


def main_menu(registry: StorageRegistry | None = None) -> None:
    if registry is None:
        registry = get_registry()

    console.print()
    console.print("[bold]Content Link Storage[/bold]", style="cyan")
    console.print()

    while True:
        choice = questionary.select(
            "Main Menu",
            choices=[
                "Store File",
                "Get URL",
                "Delete File",
                "List Storages",
                "Exit",
            ],
        ).ask()

        if choice is None or choice == "Exit":
            console.print("[bold]Bye![/bold]")
            break
        elif choice == "Store File":
            _store_file(registry)
        elif choice == "Get URL":
            _get_url(registry)
        elif choice == "Delete File":
            _delete_file(registry)
        elif choice == "List Storages":
            _list_storages(registry)


def _store_file(registry: StorageRegistry) -> None:
    console.print()
    console.print("[bold]Store File[/bold]", style="cyan")

    file_path = questionary.path("Local file:").ask()
    if not file_path:
        console.print("[yellow]Cancelled.[/yellow]")
        return

    path = questionary.text("Store as (logical path):", default=file_path).ask()
    if not path:
        console.print("[yellow]Cancelled.[/yellow]")
        return

    choices = [DEFAULT_CHOICE] + registry.keys() + [BACK_CHOICE]
    storage_key = questionary.select("Storage:", choices=choices).ask()
    if storage_key is None or storage_key == BACK_CHOICE:
        return

    try:
        if storage_key == DEFAULT_CHOICE:
            clink = registry.create_clink(file_path, path)
        else:
            clink = registry.create_clink_in_storage(file_path, path, storage_key)
    except StorageError as e:
        console.print(f"[red]Failed to store file: {e}[/red]")
        return

    console.print(f"[green bold]Stored:[/green bold] {clink}")
    url = registry.get_url(clink)
    if url:
        console.print(f"URL: {url}")


def _get_url(registry: StorageRegistry) -> None:
    clink = questionary.text("cLink:").ask()
    if not clink:
        console.print("[yellow]Cancelled.[/yellow]")
        return

    url = registry.get_url(clink)
    if not url:
        console.print(f"[yellow]No URL available for {clink}.[/yellow]")
        return
    console.print(url)


def _delete_file(registry: StorageRegistry) -> None:
    clink = questionary.text("cLink:").ask()
    if not clink:
        console.print("[yellow]Cancelled.[/yellow]")
        return

    if not questionary.confirm(f"Delete {clink}?", default=False).ask():
        return

    try:
        registry.delete(clink)
    except StorageError as e:
        console.print(f"[red]Failed to delete: {e}[/red]")
        return
    console.print(f"[green bold]Deleted {clink}.[/green bold]")


def _list_storages(registry: StorageRegistry) -> None:
    storages = registry.storages

    table = Table(title="Storages")
    table.add_column("Key", style="bold")
    table.add_column("Backend")
    table.add_column("Default")

    for key in sorted(storages):
        default = "yes" if key == registry.default_key else ""
        table.add_row(key, type(storages[key]).__name__, default)

    console.print()
    console.print(table)
    console.print()
