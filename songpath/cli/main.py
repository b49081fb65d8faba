from __future__ import annotations
from pathlib import Path
from typing import Optional
import typer
from rich import print
from rich.markup import escape
from rich.table import Table
from dotenv import load_dotenv
import logging

from .. import __version__
from ..core.config import load_options, load_templates, resolve_template, template_names
from ..core.organizer import export_csv, get_filename_for_song, simulate
from ..core.scanner import read_song
from ..core.tags import KNOWN_TAGS, UNIQUE_TAGS
from ..core.validator import describe_template, validate_template

app = typer.Typer(help="SongPath CLI: rutas de archivo a partir de plantillas de etiquetas")
load_dotenv()
logging.basicConfig(level=logging.INFO, format="%(levelname)s:%(name)s:%(message)s")

DEFAULT_DATA_DIR = Path.home() / ".songpath"
PLAN_CSV = DEFAULT_DATA_DIR / "logs" / "plan.csv"

RemoveProblematic = typer.Option(
    None, "--remove-problematic/--keep-problematic", help="Quitar :?*\"<>| y puntos de las etiquetas"
)
RemoveNonFat = typer.Option(
    None, "--fat/--no-fat", help="Solo caracteres válidos en FAT (transliterando)"
)
RemoveNonAscii = typer.Option(None, "--ascii/--no-ascii", help="Solo caracteres ASCII")
AllowAsciiExt = typer.Option(
    None, "--ascii-ext/--no-ascii-ext", help="Permitir ASCII extendido (hasta 255) con --ascii"
)
ReplaceSpaces = typer.Option(
    None, "--underscores/--spaces", help="Sustituir espacios por guiones bajos"
)


def _options(data, **flags):
    try:
        return load_options(flags, data=data)
    except ValueError as e:
        print(f"[red]Configuración inválida:[/red] {e}")
        raise typer.Exit(1)


def _template(name: str, data) -> str:
    tpl = resolve_template(name, data)
    problems = validate_template(tpl)
    if problems:
        print(f"[red]Plantilla inválida[/red] {escape(repr(tpl))}")
        for p in problems:
            print(" -", p)
        raise typer.Exit(1)
    return tpl


def _load_config():
    try:
        return load_templates()
    except ValueError as e:
        print(f"[red]Configuración inválida:[/red] {e}")
        raise typer.Exit(1)


@app.command()
def render(
    file: str = typer.Option(..., "--file", help="Archivo de audio"),
    template: str = typer.Option("default", "--template", help="Nombre o patrón de plantilla"),
    extension: str = typer.Option("", "--extension", help="Extensión forzada del destino"),
    remove_problematic: Optional[bool] = RemoveProblematic,
    remove_non_fat: Optional[bool] = RemoveNonFat,
    remove_non_ascii: Optional[bool] = RemoveNonAscii,
    allow_ascii_ext: Optional[bool] = AllowAsciiExt,
    replace_spaces: Optional[bool] = ReplaceSpaces,
):
    """Muestra la ruta que la plantilla genera para un archivo."""
    data = _load_config()
    tpl = _template(template, data)
    options = _options(
        data,
        remove_problematic=remove_problematic,
        remove_non_fat=remove_non_fat,
        remove_non_ascii=remove_non_ascii,
        allow_ascii_ext=allow_ascii_ext,
        replace_spaces=replace_spaces,
    )
    song = read_song(Path(file))
    result = get_filename_for_song(tpl, song, options, extension)
    if result is None:
        print("[red]La plantilla no produce una ruta válida para[/red]", escape(file))
        raise typer.Exit(1)
    print(escape(result.path))
    if not result.unique:
        print("[yellow]Aviso:[/yellow] la ruta no incluye %title ni %track; puede repetirse.")


@app.command()
def organize(
    path: str = typer.Option(..., "--path", help="Carpeta a recorrer"),
    dest: str = typer.Option(..., "--dest", help="Carpeta destino"),
    template: str = typer.Option("default", "--template"),
    extension: str = typer.Option("", "--extension", help="Extensión forzada del destino"),
    export: bool = typer.Option(True, "--export/--no-export", help="Exportar CSV de plan"),
    remove_problematic: Optional[bool] = RemoveProblematic,
    remove_non_fat: Optional[bool] = RemoveNonFat,
    remove_non_ascii: Optional[bool] = RemoveNonAscii,
    allow_ascii_ext: Optional[bool] = AllowAsciiExt,
    replace_spaces: Optional[bool] = ReplaceSpaces,
):
    """Vista previa del plan de organización (no mueve archivos)."""
    data = _load_config()
    tpl = _template(template, data)
    options = _options(
        data,
        remove_problematic=remove_problematic,
        remove_non_fat=remove_non_fat,
        remove_non_ascii=remove_non_ascii,
        allow_ascii_ext=allow_ascii_ext,
        replace_spaces=replace_spaces,
    )
    plan = simulate(Path(path), Path(dest), tpl, options, extension)
    print(f"[cyan]{len(plan)}[/cyan] elementos en el plan.")
    _print_plan(plan)
    if export:
        csv_path = export_csv(plan, PLAN_CSV)
        print("CSV:", csv_path)


@app.command()
def check(template: str = typer.Argument(..., help="Nombre o patrón de plantilla")):
    """Valida una plantilla y muestra sus etiquetas y secciones."""
    data = _load_config()
    tpl = resolve_template(template, data)
    problems = validate_template(tpl)
    info = describe_template(tpl)
    print("Plantilla:", escape(tpl))
    print("Etiquetas:", ", ".join(info["tags"]) or "-")
    print("Secciones opcionales:", escape(", ".join(info["blocks"])) or "-")
    if problems:
        for p in problems:
            print("[red]✗[/red]", p)
        raise typer.Exit(1)
    print("[green]Plantilla válida[/green]")


@app.command()
def tags():
    """Lista las etiquetas disponibles y las plantillas configuradas."""
    table = Table(title="Etiquetas")
    table.add_column("Etiqueta")
    table.add_column("Identifica la pista")
    for tag in KNOWN_TAGS:
        table.add_row(f"%{tag}", "sí" if tag in UNIQUE_TAGS else "")
    print(table)
    data = _load_config()
    print("Plantillas:", ", ".join(template_names(data)))


@app.command()
def version():
    print(__version__)


def _print_plan(plan):
    table = Table(title="Vista previa (simulate)")
    table.add_column("Source", overflow="fold")
    table.add_column("Target", overflow="fold")
    for e in plan[:200]:
        table.add_row(escape(e.source), escape(e.target))
    print(table)
