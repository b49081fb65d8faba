from __future__ import annotations

import logging
import os
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any, Mapping

import yaml

logger = logging.getLogger(__name__)

TEMPLATES_FILE = Path("config/templates.yml")
DEFAULT_TEMPLATE = "%albumartist/%album{ (Disc %disc)}/{%track - }%title.%extension"

ENV_TEMPLATES = "SONGPATH_TEMPLATES"
ENV_PREFIX = "SONGPATH_"

_TRUE = {"1", "true", "yes", "on", "si", "sí"}
_FALSE = {"0", "false", "no", "off"}


@dataclass(frozen=True)
class FormatOptions:
    """Switches applied while rendering a path; immutable for one render."""

    remove_problematic: bool = False
    remove_non_fat: bool = False
    remove_non_ascii: bool = False
    allow_ascii_ext: bool = False
    replace_spaces: bool = True


OPTION_NAMES = tuple(f.name for f in fields(FormatOptions))


def templates_path() -> Path:
    return Path(os.getenv(ENV_TEMPLATES) or TEMPLATES_FILE)


def load_templates(path: Path | None = None) -> dict[str, Any]:
    cfg_p = path or templates_path()
    try:
        data = yaml.safe_load(cfg_p.read_text(encoding="utf-8"))
    except FileNotFoundError:
        logger.debug("No templates file at %s, using built-in default", cfg_p)
        return {}
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValueError(f"{cfg_p}: se esperaba un mapa YAML en la raíz")
    return data


def resolve_template(name: str, data: Mapping[str, Any] | None = None) -> str:
    """Return the pattern called ``name``, or ``name`` itself as a pattern."""
    if data is None:
        data = load_templates()
    if name == "default":
        return data.get("default") or DEFAULT_TEMPLATE
    for alt in data.get("alternativas", []) or []:
        if isinstance(alt, dict) and alt.get("name") == name:
            return alt["pattern"]
    return name


def template_names(data: Mapping[str, Any]) -> list[str]:
    names = ["default"]
    for alt in data.get("alternativas", []) or []:
        if isinstance(alt, dict) and alt.get("name"):
            names.append(str(alt["name"]))
    return names


def parse_bool(value: Any, *, key: str) -> bool:
    if isinstance(value, bool):
        return value
    text = str(value).strip().lower()
    if text in _TRUE:
        return True
    if text in _FALSE:
        return False
    raise ValueError(f"Valor no válido para {key}: {value!r} (usa true/false)")


def load_options(
    overrides: Mapping[str, bool | None] | None = None,
    *,
    data: Mapping[str, Any] | None = None,
    env: Mapping[str, str] | None = None,
) -> FormatOptions:
    """Build options with precedence defaults < YAML ``options`` < env < overrides."""
    if data is None:
        data = load_templates()
    if env is None:
        env = os.environ

    values: dict[str, bool] = {}

    file_options = data.get("options") or {}
    if not isinstance(file_options, Mapping):
        raise ValueError("La sección 'options' debe ser un mapa")
    unknown = [k for k in file_options if k not in OPTION_NAMES]
    if unknown:
        raise ValueError(
            f"Opción desconocida '{unknown[0]}' en options; válidas: {', '.join(OPTION_NAMES)}"
        )
    for key, value in file_options.items():
        values[key] = parse_bool(value, key=key)

    for key in OPTION_NAMES:
        env_key = ENV_PREFIX + key.upper()
        if env.get(env_key) not in (None, ""):
            values[key] = parse_bool(env[env_key], key=env_key)

    for key, value in (overrides or {}).items():
        if value is None:
            continue
        if key not in OPTION_NAMES:
            raise ValueError(f"Opción desconocida '{key}'")
        values[key] = bool(value)

    return replace(FormatOptions(), **values)
