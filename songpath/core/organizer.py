from __future__ import annotations

import csv
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, List

from .config import FormatOptions
from .sanitizer import finalize_path
from .scanner import iter_songs
from .song import Song
from .template import evaluate
from .utils import complete_base_name, file_suffix

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RenderResult:
    path: str
    unique: bool = False


@dataclass(frozen=True)
class PlanEntry:
    source: str
    target: str
    unique: bool = False


def normalize_template(template: str) -> str:
    return template.replace("\\", "/")


def get_filename_for_song(
    template: str,
    song: Song,
    options: FormatOptions | None = None,
    extension: str = "",
) -> RenderResult | None:
    """Render ``template`` for ``song`` into a relative, sanitized path.

    Returns ``None`` when no usable path can be produced: the template and
    the song's own file name are both empty, or the directory part of the
    result is empty (``/name``), or no file name is left (``dir/``), or a
    segment is left empty once sanitized (a tag value of ``...``).
    """
    options = options or FormatOptions()
    block = evaluate(normalize_template(template), song, options)
    filepath = block.text

    if not filepath:
        filepath = song.basefilename

    head, sep, name = filepath.rpartition("/")
    if not complete_base_name(name):
        # Keep the directory but never produce an extension-only file name.
        filepath = f"{head}/{song.basefilename}" if sep else song.basefilename

    head, sep, name = filepath.rpartition("/")
    if not name or (sep and not head):
        logger.debug("[organize] no usable path for %s from %r", song.path, template)
        return None

    filepath = finalize_path(filepath, options, extension, song.extension)
    if "" in filepath.split("/"):
        logger.debug("[organize] empty segment in %r for %s", filepath, song.path)
        return None
    return RenderResult(filepath, block.unique)


def _dedupe(target: str, taken: set[str], sep_char: str = " ") -> str:
    if target not in taken:
        return target
    head, sep, name = target.rpartition("/")
    stem, suffix = complete_base_name(name), file_suffix(name)
    i = 1
    while True:
        candidate = f"{stem}{sep_char}({i})" + (f".{suffix}" if suffix else "")
        candidate = f"{head}{sep}{candidate}"
        if candidate not in taken:
            return candidate
        i += 1


def plan_songs(
    songs: Iterable[Song],
    template: str,
    options: FormatOptions | None = None,
    extension: str = "",
) -> List[PlanEntry]:
    options = options or FormatOptions()
    sep_char = "_" if options.replace_spaces else " "
    plan: List[PlanEntry] = []
    taken: set[str] = set()
    for song in songs:
        result = get_filename_for_song(template, song, options, extension)
        if result is None:
            logger.warning("[organize] skipping %s: template gives no valid path", song.path)
            continue
        target = _dedupe(result.path, taken, sep_char)
        if target != result.path:
            logger.info("[organize] %s collides, renamed to %s", result.path, target)
        taken.add(target)
        plan.append(PlanEntry(song.path, target, result.unique))
    return plan


def simulate(
    root: Path,
    dest: Path,
    template: str,
    options: FormatOptions | None = None,
    extension: str = "",
) -> List[PlanEntry]:
    """Preview where every audio file under ``root`` would go inside ``dest``.

    Nothing is moved.
    """
    dest = dest.expanduser().resolve()
    plan = plan_songs(iter_songs(root), template, options, extension)
    return [PlanEntry(e.source, str(dest / e.target), e.unique) for e in plan]


def export_csv(plan: List[PlanEntry], out_csv: Path):
    out_csv.parent.mkdir(parents=True, exist_ok=True)
    with out_csv.open("w", newline="", encoding="utf-8") as f:
        w = csv.writer(f)
        w.writerow(["source", "target", "unique"])
        w.writerows((e.source, e.target, int(e.unique)) for e in plan)
    return out_csv
