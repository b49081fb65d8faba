from __future__ import annotations

import re
from typing import List

from .tags import KNOWN_TAGS
from .template import BLOCK_PATTERN, TAG_PATTERN

_block_re = re.compile(BLOCK_PATTERN)
_tag_re = re.compile(TAG_PATTERN)


def validate_template(template: str) -> List[str]:
    """Problems that make ``template`` unacceptable (empty list when valid).

    Optional sections may not be nested and every placeholder must be a
    known tag.
    """
    problems: List[str] = []
    level = 0
    for ch in template:
        if ch == "{":
            level += 1
        elif ch == "}":
            level -= 1
        if level < 0:
            problems.append("Hay una '}' sin su '{' correspondiente")
            break
        if level > 1:
            problems.append("Las secciones opcionales {...} no se pueden anidar")
            break
    else:
        if level != 0:
            problems.append("Falta cerrar una sección opcional con '}'")

    for m in _tag_re.finditer(template):
        tag = m.group(1)
        if tag not in KNOWN_TAGS:
            problems.append(f"Etiqueta desconocida: %{tag}")
    return problems


def is_valid_template(template: str) -> bool:
    return not validate_template(template)


def describe_template(template: str) -> dict[str, list[str]]:
    return {
        "tags": [m.group(1) for m in _tag_re.finditer(template)],
        "blocks": [m.group(1) for m in _block_re.finditer(template)],
    }
