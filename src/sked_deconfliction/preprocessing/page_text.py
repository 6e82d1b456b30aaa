from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from pathlib import Path
from typing import Iterable, List, Protocol, Sequence

from sked_deconfliction.config.vt9 import SCHEDULE_URL_TEMPLATE

ROW_TOLERANCE = 3.0


class PageTextProvider(Protocol):
    """Anything that hands over a day's schedule as one string per page."""

    def pages(self) -> List[str]:
        ...


@dataclass(frozen=True)
class TextFragment:
    text: str
    x: float
    y: float


class TextFilePageProvider:
    """
    Page texts from plain text files, one file per page.
    A file with form feeds holds several pages.
    """

    def __init__(self, paths: Sequence[Path]) -> None:
        self.paths = [Path(p) for p in paths]

    def pages(self) -> List[str]:
        out: List[str] = []
        for path in self.paths:
            if not path.exists():
                raise FileNotFoundError(f"Missing file: {path}")
            text = path.read_text(encoding="utf-8")
            out.extend(text.split("\f") if "\f" in text else [text])
        return out


def assemble_page_text(fragments: Iterable[TextFragment], tolerance: float = ROW_TOLERANCE) -> str:
    """
    Rebuild reading order from positioned text fragments.

    Fragments whose y lies within `tolerance` of a row's first fragment
    join that row. Rows run top to bottom (PDF y grows upwards), fragments
    left to right; the result is one line of text per printed row.
    """
    rows: List[List[TextFragment]] = []
    for frag in fragments:
        row = next((r for r in rows if abs(r[0].y - frag.y) <= tolerance), None)
        if row is None:
            rows.append([frag])
        else:
            row.append(frag)

    rows.sort(key=lambda r: -r[0].y)
    return "\n".join(
        " ".join(f.text for f in sorted(row, key=lambda f: f.x))
        for row in rows
    )


def build_schedule_url(day: date, template: str = SCHEDULE_URL_TEMPLATE) -> str:
    return template.format(date=day.isoformat())
