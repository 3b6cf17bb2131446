"""Metadata panel for one RFC, shared by the TUI overlay and ``lazyrfc info``."""

from __future__ import annotations

import textwrap
from collections.abc import Iterable

from ..ansi import fit_ansi_line
from ..models import RfcMeta
from .style import BOLD, ERROR, FAINT, MUTED, PANEL_BG, RESET, paint, status_color

LABEL_WIDTH = 14
DOI_BASE_URL = "https://doi.org/"


def _rfc_list(numbers: Iterable[int]) -> str:
    return ", ".join(f"RFC {n}" for n in numbers)


def info_fields(meta: RfcMeta) -> list[tuple[str, str]]:
    """Return ``(label, value)`` pairs describing ``meta``, skipping empty fields."""
    fields = [
        ("Title", meta.title),
        ("Authors", ", ".join(meta.authors) or "Unknown"),
        ("Date", meta.date.label()),
        ("Status", meta.status),
        ("Stream", meta.stream),
    ]
    if meta.wg:
        fields.append(("WG", meta.wg))
    if meta.area:
        fields.append(("Area", meta.area))
    fields.append(("Pages", str(meta.page_count)))
    if meta.keywords:
        fields.append(("Keywords", ", ".join(meta.keywords)))
    if meta.obsoletes:
        fields.append(("Obsoletes", _rfc_list(meta.obsoletes)))
    if meta.obsoleted_by:
        fields.append(("Obsoleted by", _rfc_list(meta.obsoleted_by)))
    if meta.updates:
        fields.append(("Updates", _rfc_list(meta.updates)))
    if meta.updated_by:
        fields.append(("Updated by", _rfc_list(meta.updated_by)))
    if meta.doi:
        fields.append(("DOI", DOI_BASE_URL + meta.doi))
    if meta.errata:
        fields.append(("Errata", meta.errata))
    return fields


def _value_style(meta: RfcMeta, label: str) -> str:
    if label == "Status":
        return status_color(meta.status)
    if label == "Obsoleted by":
        return ERROR
    if label == "Title":
        return BOLD
    return ""


def info_lines(meta: RfcMeta, width: int, color: bool = True) -> list[str]:
    """Return wrapped label/value rows plus the abstract for ``width`` columns."""
    value_width = max(10, width - LABEL_WIDTH)
    out: list[str] = []
    for label, value in info_fields(meta):
        wrapped = textwrap.wrap(value, value_width) or [""]
        style = _value_style(meta, label) if color else ""
        for idx, chunk in enumerate(wrapped):
            prefix = label.ljust(LABEL_WIDTH) if idx == 0 else " " * LABEL_WIDTH
            if color:
                out.append(paint(prefix, MUTED) + (paint(chunk, style) if style else chunk))
            else:
                out.append(prefix + chunk)
    if meta.abstract:
        out.append("")
        out.append(paint("Abstract", MUTED) if color else "Abstract")
        for paragraph in meta.abstract.split("\n\n"):
            for chunk in textwrap.wrap(paragraph, max(10, width)):
                out.append(paint(chunk, FAINT) if color else chunk)
    return out


def info_box(meta: RfcMeta, width: int, max_height: int) -> list[str]:
    """Return a bordered metadata panel at most ``max_height`` rows tall."""
    inner = max(12, width - 2)
    body = info_lines(meta, inner - 2)
    title = f" RFC {meta.number} "
    rows = [f"{FAINT}┌{title}{'─' * max(0, inner - len(title))}┐{RESET}"]
    for line in body[: max(0, max_height - 2)]:
        rows.append(f"{FAINT}│{RESET}{PANEL_BG} {fit_ansi_line(line, inner - 2)}{PANEL_BG} {RESET}{FAINT}│{RESET}")
    rows.append(f"{FAINT}└{'─' * inner}┘{RESET}")
    return rows
