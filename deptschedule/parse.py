"""
Parsing (catalog HTML -> seed payload).

A department page lists its reference data in three tables:

    <table id="professors">  ID | Name | Department
    <table id="classrooms">  Room | Capacity | Projector
    <table id="courses">     ID | Name | Type

Columns are matched by header text (case-insensitive, a few aliases allowed),
so column order does not matter. Rows that cannot be read are skipped and
reported; the result is a payload accepted by deptschedule.seed.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

from bs4 import BeautifulSoup

from deptschedule.model import parse_course_type


# header text -> payload key, per table
COLUMN_ALIASES: Dict[str, Dict[str, str]] = {
    "professors": {
        "id": "id",
        "name": "name",
        "professor": "name",
        "department": "department",
        "dept": "department",
    },
    "classrooms": {
        "room": "number",
        "number": "number",
        "room number": "number",
        "capacity": "capacity",
        "seats": "capacity",
        "projector": "has_projector",
    },
    "courses": {
        "id": "id",
        "name": "name",
        "course": "name",
        "type": "type",
    },
}

TRUE_WORDS = {"yes", "y", "true", "1", "x", "✓", "✔"}


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _header_keys(table: Any, aliases: Dict[str, str]) -> List[Optional[str]]:
    """
    Map each header cell of the table to a payload key (None = ignored column).
    """
    header_row = table.find("tr")
    if header_row is None:
        return []
    cells = header_row.find_all(["th", "td"])
    return [aliases.get(c.get_text(" ", strip=True).lower()) for c in cells]


def _table_rows(soup: BeautifulSoup, table_id: str) -> List[Dict[str, str]]:
    """
    Extract the body rows of one table as {payload_key: cell_text} dicts.
    """
    table = soup.select_one(f"table#{table_id}")
    if table is None:
        return []

    keys = _header_keys(table, COLUMN_ALIASES[table_id])
    rows: List[Dict[str, str]] = []

    # First row is the header
    for row in table.find_all("tr")[1:]:
        cells = row.find_all("td")
        if not cells:
            continue
        record: Dict[str, str] = {}
        for key, cell in zip(keys, cells):
            if key:
                record[key] = cell.get_text(" ", strip=True)
        if record:
            rows.append(record)

    return rows


def _to_professor(raw: Dict[str, str]) -> Dict[str, Any]:
    return {"id": int(raw["id"]), "name": raw.get("name", ""), "department": raw.get("department", "")}


def _to_classroom(raw: Dict[str, str]) -> Dict[str, Any]:
    number = raw["number"].strip()
    if not number:
        raise ValueError("empty room number")
    return {
        "number": number,
        "capacity": int(raw["capacity"]),
        "has_projector": raw.get("has_projector", "").strip().lower() in TRUE_WORDS,
    }


def _to_course(raw: Dict[str, str]) -> Dict[str, Any]:
    return {"id": int(raw["id"]), "name": raw.get("name", ""), "type": parse_course_type(raw["type"]).value}


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def parse_catalog_html(html: str) -> Tuple[Dict[str, Any], List[str]]:
    """
    Parse a catalog page.

    Returns (payload, skipped) where `skipped` holds one message per row
    that could not be converted.
    """
    soup = BeautifulSoup(html, "html.parser")

    converters = {
        "professors": _to_professor,
        "classrooms": _to_classroom,
        "courses": _to_course,
    }

    payload: Dict[str, Any] = {}
    skipped: List[str] = []

    for table_id, convert in converters.items():
        out: List[Dict[str, Any]] = []
        for raw in _table_rows(soup, table_id):
            try:
                out.append(convert(raw))
            except (KeyError, ValueError) as exc:
                skipped.append(f"{table_id}: {raw} ({exc})")
        payload[table_id] = out

    payload["lessons"] = []
    return payload, skipped


def parse_catalog_file(path: str | Path) -> Tuple[Dict[str, Any], List[str]]:
    return parse_catalog_html(Path(path).read_text(encoding="utf-8"))
