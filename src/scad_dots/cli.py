from __future__ import annotations

import importlib.util
import logging
import pathlib
import sys
import traceback
from types import ModuleType
from typing import Optional

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel
from rich.table import Table

from scad_dots._config import get_render_settings
from scad_dots.core import traits
from scad_dots.core.utils import Axis
from scad_dots.errors import ScadDotsError, error_chain
from scad_dots.parse import first_difference
from scad_dots.render import RenderQuality, to_code

logger = logging.getLogger(__name__)

console = Console()
app = typer.Typer(help="Render scad_dots models to OpenSCAD and check them against saved renderings.")


class ModelBuildError(RuntimeError):
    """Raised when a model module cannot provide a usable tree."""


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show debug logging."),
) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
        force=True,
    )


def _load_module(path: pathlib.Path) -> ModuleType:
    module_name = "scad_dots_user_model"
    if module_name in sys.modules:
        del sys.modules[module_name]

    spec = importlib.util.spec_from_file_location(module_name, path)
    if spec is None or spec.loader is None:
        raise typer.BadParameter(f"Unable to import model at {path}")

    module = importlib.util.module_from_spec(spec)
    # Register module so features relying on sys.modules (e.g., dataclasses) work.
    sys.modules[module_name] = module
    spec.loader.exec_module(module)
    logger.debug("Loaded model module %s", path)
    return module


def _format_exception(exc: BaseException) -> str:
    if isinstance(exc, ScadDotsError):
        return "\n".join(error_chain(exc))
    return "".join(traceback.format_exception(exc))


def _call_model(model_path: pathlib.Path, function_name: str) -> object:
    if not model_path.exists():
        raise typer.BadParameter(f"Model path {model_path} does not exist.")
    module = _load_module(model_path)
    function = getattr(module, function_name, None)
    if function is None or not callable(function):
        raise ModelBuildError(f"{model_path} must define a callable {function_name}() function.")
    return function()


def _build(model_path: pathlib.Path) -> object:
    try:
        return _call_model(model_path, "build")
    except ModelBuildError as exc:
        raise typer.BadParameter(str(exc)) from exc
    except ScadDotsError as exc:
        console.print(Panel.fit(_format_exception(exc), title="Model build failed", style="red"))
        raise typer.Exit(code=1) from exc


def _render(thing, quality: RenderQuality) -> str:
    try:
        return to_code(thing, quality)
    except (ScadDotsError, TypeError) as exc:
        console.print(Panel.fit(_format_exception(exc), title="Render failed", style="red"))
        raise typer.Exit(code=1) from exc


def _next_available_path(path: pathlib.Path) -> pathlib.Path:
    """Return a non-conflicting path by appending ' (n)' before the suffix."""

    if not path.exists():
        return path

    n = 1
    while True:
        candidate = path.parent / f"{path.stem} ({n}){path.suffix}"
        if not candidate.exists():
            return candidate
        n += 1


@app.command()
def render(
    model: pathlib.Path = typer.Argument(..., help="Python module defining build()."),
    output: pathlib.Path = typer.Option(
        pathlib.Path("model.scad"),
        "--output",
        "-o",
        help="Path to the OpenSCAD file that will be produced.",
    ),
    quality: Optional[RenderQuality] = typer.Option(
        None, "--quality", case_sensitive=False, help="Curve resolution; defaults to the configured quality."
    ),
    overwrite: bool = typer.Option(False, "--overwrite", help="Allow replacing an existing file."),
) -> None:
    """
    Build the model and write it as OpenSCAD source.
    """

    quality = quality or get_render_settings().quality
    code = _render(_build(model), quality)

    final_output = output
    if output.exists() and not overwrite:
        final_output = _next_available_path(output)
        console.print(f"[yellow]Output {output} exists; writing to {final_output} instead.[/yellow]")

    final_output.parent.mkdir(parents=True, exist_ok=True)
    final_output.write_text(code)
    console.print(
        Panel(
            f"Wrote {quality.value} quality OpenSCAD to [green]{final_output}[/green].",
            title="Render complete",
            border_style="green",
        )
    )


@app.command()
def check(
    model: pathlib.Path = typer.Argument(..., help="Python module defining build()."),
    expected: pathlib.Path = typer.Argument(..., help="Previously rendered OpenSCAD file."),
) -> None:
    """
    Render the model at low quality and compare it with an expected rendering.
    """

    if not expected.exists():
        raise typer.BadParameter(f"Expected file {expected} does not exist.")

    settings = get_render_settings()
    actual = _render(_build(model), RenderQuality.LOW)
    try:
        difference = first_difference(actual, expected.read_text(), settings.max_relative)
    except ScadDotsError as exc:
        console.print(Panel.fit(_format_exception(exc), title="Could not parse expected file", style="red"))
        raise typer.Exit(code=1) from exc

    if difference is not None:
        console.print(Panel.fit(difference, title="Models don't match", style="red"))
        raise typer.Exit(code=1)
    console.print(f"[green]{model} matches {expected}.[/green]")


@app.command()
def bounds(
    model: pathlib.Path = typer.Argument(..., help="Python module defining dots()."),
) -> None:
    """
    Print the bounding box of everything the model's dots() returns.
    """

    try:
        dots = _call_model(model, "dots")
    except ModelBuildError as exc:
        raise typer.BadParameter(str(exc)) from exc

    table = Table(title=f"Bounds of {model.name}")
    table.add_column("Axis")
    table.add_column("Min", justify="right")
    table.add_column("Max", justify="right")
    table.add_column("Length", justify="right")
    for axis in Axis:
        low = traits.min_coord(dots, axis)
        high = traits.max_coord(dots, axis)
        table.add_row(axis.name, f"{low:.4g}", f"{high:.4g}", f"{high - low:.4g}")
    console.print(table)
