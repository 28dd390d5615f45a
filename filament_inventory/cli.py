"""Menu-driven terminal interface for the filament inventory."""
from __future__ import annotations

from pathlib import Path
from typing import Callable, Iterable, List, Optional

import typer
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.prompt import Confirm, IntPrompt, Prompt
from rich.table import Table

from .config import get_settings
from .exceptions import InventoryError
from .inventory import FIELD_DELIMITER, FilamentRecord, InventoryStore
from .logging_config import get_logger, setup_logging
from .threshold import ThresholdSetting

logger = get_logger(__name__)

app = typer.Typer(add_completion=False, no_args_is_help=False)
console = Console()

MENU_OPTIONS = [
    ("a", "Check Current Inventory"),
    ("b", "Add New Inventory"),
    ("c", "Modify Current Inventory"),
    ("d", "Remove From Inventory"),
    ("e", "Set Warning Level"),
    ("f", "Exit Application"),
]


# ----------------------------
# Helpers
# ----------------------------
def header(title: str) -> None:
    console.clear()
    console.print(Panel.fit(f"[bold]{escape(title)}[/bold]", border_style="green"))


def pause() -> None:
    console.print()
    console.input("Press Enter to continue...")


def ask_text(label: str) -> str:
    """Ask until a non-blank value without delimiters is given; returns it uppercased."""
    while True:
        value = Prompt.ask(label, console=console, default="", show_default=False).strip()
        if not value:
            console.print("[red]Field was left blank.[/red]")
            continue
        if FIELD_DELIMITER in value:
            console.print("[red]Commas are not allowed.[/red]")
            continue
        return value.upper()


def ask_grams(label: str) -> int:
    while True:
        value = IntPrompt.ask(label, console=console)
        if value >= 0:
            return value
        console.print("[red]Please enter a non-negative number of grams.[/red]")


def confirm(question: str) -> bool:
    return Confirm.ask(question, console=console)


def records_table(records: Iterable[FilamentRecord], *, title: Optional[str] = None) -> Table:
    table = Table(title=title)
    table.add_column("Type")
    table.add_column("Color")
    table.add_column("Remaining (g)", justify="right")
    for record in records:
        table.add_row(
            escape(record.material_type),
            escape(record.color),
            str(record.quantity_grams),
        )
    return table


def show_inventory(store: InventoryStore) -> None:
    console.print(records_table(store.load_all()))


# ----------------------------
# Menu actions
# ----------------------------
def display_inventory(store: InventoryStore, threshold: ThresholdSetting) -> None:
    header("Current Filament Inventory")
    show_inventory(store)
    pause()


def add_inventory(store: InventoryStore, threshold: ThresholdSetting) -> None:
    header("Add New Filament")
    if not confirm("Would you like to add a new roll of filament?"):
        console.print("Returning to the previous menu.")
        pause()
        return

    while True:
        header("Add New Filament")
        material_type = ask_text("Enter the type of material to add (PLA, PETG, ABS, etc.)")
        color = ask_text("Enter the color of the filament")
        grams = ask_grams("Enter roll size in grams")
        summary = escape(f"{grams} grams of {color} {material_type}")
        if confirm(f"{summary} filament will be added as a new item. Confirm?"):
            store.append(material_type, color, grams)
            console.print("[green]Filament added.[/green]")
        else:
            console.print("Information not stored.")

        if not confirm("Would you like to add another?"):
            return


def modify_inventory(store: InventoryStore, threshold: ThresholdSetting) -> None:
    header("Modify Inventory")
    if not confirm("Would you like to modify the current inventory?"):
        console.print("Returning to the previous menu.")
        pause()
        return

    while True:
        header("Modify Inventory Count")
        show_inventory(store)
        material_type = ask_text("Please enter a material type")
        color = ask_text("Please enter the color of material to modify")
        label = escape(f"{color} {material_type}")
        if not confirm(f"{label} will be modified. Continue?"):
            console.print("Returning to the previous menu.")
            pause()
            return

        direction = Prompt.ask(
            f"Would you like to add or subtract to the {label} count?",
            console=console,
            choices=["A", "S"],
            case_sensitive=False,
        )
        grams = ask_grams("By how many grams?")
        if store.find_and_update(material_type, color, grams, direction == "A"):
            console.print("[green]Data successfully modified.[/green]")
        else:
            console.print("[yellow]Data to modify not found.[/yellow]")

        if not confirm("Modify another item?"):
            return


def remove_inventory(store: InventoryStore, threshold: ThresholdSetting) -> None:
    header("Remove Filament")
    if not confirm("Would you like to remove an item from inventory?"):
        console.print("Returning to the previous menu.")
        pause()
        return

    while True:
        header("Remove Inventory Line")
        show_inventory(store)
        material_type = ask_text("Please enter a material type")
        color = ask_text("Please enter the color of material of that type to remove")
        label = escape(f"{color} {material_type}")
        if confirm(f"{label} will be removed completely. This action cannot be undone. Continue?"):
            if store.find_and_delete(material_type, color):
                console.print("[green]Data successfully removed.[/green]")
            else:
                console.print("[yellow]Data to remove not found.[/yellow]")
        else:
            console.print("Data not removed.")

        if not confirm("Remove another line?"):
            return


def set_warning_level(store: InventoryStore, threshold: ThresholdSetting) -> None:
    header("Set Warning Level")
    level = ask_grams("Enter an alert level, in grams, to display on the home page")
    threshold.set(level)
    console.print(f"The warning level has been changed to {level} grams.")
    pause()


ACTIONS: dict[str, Callable[[InventoryStore, ThresholdSetting], None]] = {
    "a": display_inventory,
    "b": add_inventory,
    "c": modify_inventory,
    "d": remove_inventory,
    "e": set_warning_level,
}


def report_error(exc: InventoryError) -> None:
    logger.info("Menu action failed", extra={"code": exc.code})
    console.print(f"[red]Error:[/red] {escape(str(exc))}")


def show_warning_table(store: InventoryStore, threshold: ThresholdSetting) -> None:
    console.print("\nLow inventory notifications:")
    try:
        level = threshold.get()
        records: List[FilamentRecord] = store.low_stock(level)
    except InventoryError as exc:
        report_error(exc)
        return
    console.print(records_table(records, title=f"At or below {level} g"))


# ----------------------------
# Menu-first entry
# ----------------------------
def run_menu(store: InventoryStore, threshold: ThresholdSetting) -> None:
    while True:
        header("Filament Manager: Main Menu")
        menu = Table(show_header=False, box=None)
        for key, description in MENU_OPTIONS:
            menu.add_row(f"{key}:", description)
        console.print(menu)
        show_warning_table(store, threshold)

        choice = Prompt.ask(
            "\nEnter option",
            console=console,
            choices=[key for key, _ in MENU_OPTIONS],
            case_sensitive=False,
        )
        if choice == "f":
            break
        try:
            ACTIONS[choice](store, threshold)
        except InventoryError as exc:
            report_error(exc)
            pause()

    console.clear()
    console.print("\nThank you for using Filament Manager!\n")


@app.command()
def main(
    data_dir: Optional[Path] = typer.Option(
        None,
        "--data-dir",
        help="Directory holding Inventory.txt and Sentinel.txt.",
    ),
) -> None:
    """Track on-hand 3D printing filament by material and color."""
    settings = get_settings()
    if data_dir is not None:
        settings = settings.model_copy(update={"data_dir": data_dir})
    setup_logging(settings)

    store = InventoryStore(settings.inventory_path)
    threshold = ThresholdSetting(settings.threshold_path, default=settings.default_threshold)
    logger.info("Starting filament inventory", extra={"data_dir": str(settings.data_dir)})
    run_menu(store, threshold)


__all__ = ["app", "main", "run_menu"]
