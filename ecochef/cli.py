#!/usr/bin/env python3
"""Terminal front end for EcoChef.

Usage:
    ecochef
    ecochef --image fridge.jpg   # Detect ingredients from a file at start
    ecochef --debug              # DEBUG logs

Screens:
- Home: scan with the camera, upload an image file or type ingredients
- Camera: Enter captures, d finishes, x/Escape cancels
- Ingredients: add, remove, toggle priority, dietary preference, suggest
- Recipes: pick one to see the details
- Recipe detail: shopping list, ingredients and numbered steps
"""

import asyncio
import logging
import sys
from typing import Optional

from rich.console import Console
from rich.panel import Panel
from rich.prompt import Prompt
from rich.table import Table

from ecochef.controller.controller import STATUS_SUGGESTING, ViewController
from ecochef.ingestion.images import STATUS_ANALYZING, STATUS_DETECTING
from ecochef.models.models import DietaryPreference, Outcome, ViewState
from ecochef.providers.factory import build_gateway
from ecochef.utils.logger import logger, set_level

console = Console()

PREFERENCE_LABELS = {
    DietaryPreference.NONE: "Todo",
    DietaryPreference.VEGETARIAN: "Vegetariano",
    DietaryPreference.VEGAN: "Vegano",
}

USAGE = "Usage: ecochef [--debug] [--image PATH]"


def show_message(outcome: Optional[Outcome]) -> None:
    if outcome is not None and not outcome.ok and outcome.message:
        console.print(f"[red]✗ {outcome.message}[/red]")


def satisfiability_label(missing: int) -> str:
    if missing == 0:
        return "[green]Tienes todo ✨[/green]"
    return f"[yellow]Faltan {missing} {'cosa' if missing == 1 else 'cosas'}[/yellow]"


# ============================================================================
# Screens
# ============================================================================


async def home_screen(controller: ViewController) -> bool:
    """Returns False when the user quits."""
    console.print(
        Panel(
            "[bold]1[/bold] Escanear con la cámara\n"
            "[bold]2[/bold] Subir una imagen\n"
            "[bold]3[/bold] Escribir ingredientes\n"
            "[bold]q[/bold] Salir",
            title="🥦 EcoChef",
            subtitle="Cocina con lo que tienes",
        )
    )
    choice = Prompt.ask("Opción", choices=["1", "2", "3", "q"], default="1")

    if choice == "q":
        return False
    if choice == "1":
        show_message(await controller.start_scan())
    elif choice == "2":
        path = Prompt.ask("Ruta de la imagen")
        with console.status(STATUS_ANALYZING):
            show_message(await controller.upload_file(path))
    else:
        controller.manual_entry()
    return True


async def camera_screen(controller: ViewController) -> None:
    count = len(controller.session.capture)
    console.print(
        f"[bold cyan]📷 Cámara[/bold cyan]  {count} {'foto tomada' if count == 1 else 'fotos tomadas'}"
    )
    key = Prompt.ask("[Enter] capturar · [d] listo · [x] cancelar", default="", show_default=False)

    if key.strip().lower() == "d":
        with console.status(STATUS_DETECTING):
            show_message(await controller.finish_camera())
        return

    outcome = controller.handle_key(key or "enter")
    if outcome is None and key.strip().lower() == "x":
        outcome = controller.cancel_camera()
    if outcome is not None and not outcome.ok and not outcome.message:
        console.print("[dim]La cámara aún no está lista[/dim]")
    show_message(outcome)


def render_roster(controller: ViewController) -> None:
    session = controller.session
    table = Table(title="Tus ingredientes", show_lines=False)
    table.add_column("#", justify="right", style="dim")
    table.add_column("Ingrediente")
    table.add_column("Prioridad", justify="center")
    for index, item in enumerate(session.roster, start=1):
        table.add_row(str(index), item.name, "⏰" if item.is_priority else "")
    if len(session.roster) == 0:
        table.add_row("", "[dim]Sin ingredientes todavía[/dim]", "")
    console.print(table)
    console.print(f"Dieta: [bold]{PREFERENCE_LABELS[session.preference]}[/bold]")


def _ingredient_id_at(controller: ViewController, position: str) -> Optional[str]:
    items = controller.session.roster.items
    if not position.isdigit() or not (1 <= int(position) <= len(items)):
        console.print("[red]✗ Número de ingrediente no válido[/red]")
        return None
    return items[int(position) - 1].id


async def roster_screen(controller: ViewController) -> None:
    render_roster(controller)
    command = Prompt.ask(
        "[a nombre] añadir · [x n] quitar · [p n] prioridad · [v] dieta · [s] recetas · [b] volver"
    ).strip()
    action, _, argument = command.partition(" ")
    action = action.lower()
    argument = argument.strip()

    if action == "a":
        controller.add_ingredient(argument)
    elif action in ("x", "p"):
        ingredient_id = _ingredient_id_at(controller, argument)
        if ingredient_id is not None:
            if action == "x":
                controller.remove_ingredient(ingredient_id)
            else:
                controller.toggle_priority(ingredient_id)
    elif action == "v":
        labels = {label.lower(): pref for pref, label in PREFERENCE_LABELS.items()}
        choice = Prompt.ask("Dieta", choices=list(labels), default="todo")
        controller.set_preference(labels[choice])
    elif action == "s":
        with console.status(STATUS_SUGGESTING):
            show_message(await controller.request_recipes())
    elif action == "b":
        controller.back()


def recipes_screen(controller: ViewController) -> None:
    recipes = controller.session.recipes
    table = Table(title="Recetas sugeridas")
    table.add_column("#", justify="right", style="dim")
    table.add_column("Receta")
    table.add_column("Tiempo")
    table.add_column("Dificultad")
    table.add_column("")
    for index, recipe in enumerate(recipes, start=1):
        table.add_row(
            str(index),
            f"[bold]{recipe.title}[/bold]\n[dim]{recipe.description}[/dim]",
            recipe.time,
            recipe.difficulty.value,
            satisfiability_label(len(recipe.missing_ingredients)),
        )
    console.print(table)

    choice = Prompt.ask("Número de receta · [b] volver").strip().lower()
    if choice == "b":
        controller.back()
    elif choice.isdigit() and 1 <= int(choice) <= len(recipes):
        show_message(controller.select_recipe(recipes[int(choice) - 1]))
    else:
        console.print("[red]✗ Opción no válida[/red]")


def detail_screen(controller: ViewController) -> None:
    recipe = controller.session.selected_recipe
    lines = [
        f"⏱ {recipe.time}   📊 {recipe.difficulty.value}",
        "",
        recipe.description,
    ]
    if recipe.missing_ingredients:
        lines += ["", "[bold yellow]Te falta comprar:[/bold yellow]"]
        lines += [f"  • {name}" for name in recipe.missing_ingredients]
    lines += ["", "[bold]Ingredientes:[/bold]"]
    lines += [f"  • {name}" for name in recipe.ingredients_used]
    lines += ["", "[bold]Preparación:[/bold]"]
    lines += [f"  {number}. {step}" for number, step in recipe.numbered_steps] or ["  Sin pasos indicados."]
    console.print(Panel("\n".join(lines), title=recipe.title))

    Prompt.ask("[b] volver", default="b", show_default=False)
    controller.back()


# ============================================================================
# Main loop
# ============================================================================


async def run_app(controller: ViewController, image_path: Optional[str] = None) -> None:
    """Drive the controller until the user quits on Home."""
    if image_path:
        with console.status(STATUS_ANALYZING):
            show_message(await controller.upload_file(image_path))

    try:
        while True:
            view = controller.view
            if view == ViewState.HOME:
                if not await home_screen(controller):
                    break
            elif view == ViewState.CAMERA:
                await camera_screen(controller)
            elif view == ViewState.INGREDIENTS:
                await roster_screen(controller)
            elif view == ViewState.RECIPES:
                recipes_screen(controller)
            else:
                detail_screen(controller)
    finally:
        controller.shutdown()


def main(argv: Optional[list[str]] = None) -> int:
    args = list(sys.argv[1:] if argv is None else argv)
    image_path = None

    index = 0
    while index < len(args):
        arg = args[index]
        if arg == "--debug":
            set_level(logging.DEBUG)
        elif arg == "--image":
            index += 1
            if index >= len(args):
                print("Error: --image flag requires a file path")
                return 1
            image_path = args[index]
        elif arg in ("-h", "--help"):
            print(USAGE)
            return 0
        else:
            print(f"Unknown argument: {arg}")
            print(USAGE)
            return 1
        index += 1

    try:
        gateway = build_gateway()
    except ValueError as e:
        console.print(f"[red]✗ Configuration error: {e}[/red]")
        return 1

    controller = ViewController(gateway)
    try:
        asyncio.run(run_app(controller, image_path=image_path))
    except KeyboardInterrupt:
        logger.info("Interrupted by user.")
    return 0


if __name__ == "__main__":
    sys.exit(main())
