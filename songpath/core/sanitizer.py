from __future__ import annotations

import re
import unicodedata

from .config import FormatOptions
from .constants import (
    INVALID_FAT_CHARACTERS,
    INVALID_PREFIX_CHARACTERS,
    PROBLEMATIC_CHARACTERS,
)
from .utils import complete_base_name, file_suffix, transliterate

_whitespace = re.compile(r"\s")


def strip_non_ascii(path: str, allow_ascii_ext: bool = False) -> str:
    """Drop characters at or above 128 (255 with ``allow_ascii_ext``).

    A dropped character is replaced by the base of its canonical
    decomposition when that base is below the limit: ``é`` -> ``e``.
    """
    limit = 255 if allow_ascii_ext else 128
    stripped: list[str] = []
    for c in path:
        if ord(c) < limit:
            stripped.append(c)
            continue
        decomposed = unicodedata.normalize("NFD", c)
        if decomposed != c and ord(decomposed[0]) < limit:
            stripped.append(decomposed[0])
    return "".join(stripped)


def simplify_whitespace(path: str) -> str:
    return " ".join(path.split())


def sanitize(path: str, options: FormatOptions) -> str:
    """Character level clean-up of a rendered path."""
    if options.remove_problematic:
        path = PROBLEMATIC_CHARACTERS.sub("", path)
    if options.remove_non_fat or (options.remove_non_ascii and not options.allow_ascii_ext):
        path = transliterate(path)
    if options.remove_non_fat:
        path = INVALID_FAT_CHARACTERS.sub("", path)
    if options.remove_non_ascii:
        path = strip_non_ascii(path, options.allow_ascii_ext)
    return simplify_whitespace(path)


def split_extension(path: str, extension: str = "", source_suffix: str = "") -> tuple[str, str]:
    """Return ``(path without suffix, extension)``.

    ``extension`` wins; otherwise the path's own suffix is used, then
    ``source_suffix``. A suffix holding whitespace (``Mr. Brown``) is part of
    the name, not an extension.
    """
    head, _, name = path.rpartition("/")
    own = file_suffix(name)
    if _whitespace.search(own):
        own, stem = "", name
    else:
        stem = complete_base_name(name)
    if not extension:
        extension = own or source_suffix
    if head and head != ".":
        return f"{head}/{stem}", extension
    return stem, extension


def fix_prefixes(path: str) -> str:
    """Strip leading invalid-prefix characters and padding from each segment.

    ``...`` becomes an empty segment, never ``..``.
    """
    parts = []
    for part in path.split("/"):
        part = part.strip()
        while part.startswith(INVALID_PREFIX_CHARACTERS):
            part = part[1:].strip()
        parts.append(part)
    return "/".join(parts)


def finalize_path(
    path: str,
    options: FormatOptions,
    extension: str = "",
    source_suffix: str = "",
) -> str:
    """Run every sanitizing stage and append the extension."""
    path = sanitize(path, options)
    path, extension = split_extension(path, extension, source_suffix)
    path = fix_prefixes(path)
    if options.replace_spaces:
        path = _whitespace.sub("_", path)
        extension = _whitespace.sub("_", extension)
    if extension:
        path = f"{path}.{extension}"
    return path
