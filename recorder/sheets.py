# recorder/sheets.py — classeur stocké en base (feuilles, cellules, largeurs de colonnes)
# Adressage A1 (« B1 », « E1:E5 ») comme dans un tableur.
from __future__ import annotations
import re
from typing import Any, Iterable, List, Optional, Tuple, Union

from sqlalchemy import func

from models import Sheet, SheetCell, SheetColumn
from recorder.errors import InvalidArgument

_A1_RE = re.compile(r"^([A-Za-z]{1,3})([1-9][0-9]*)$")

Position = Tuple[int, int]


def column_index(letters: str) -> int:
    n = 0
    for ch in letters.upper():
        n = n * 26 + (ord(ch) - ord("A") + 1)
    return n


def column_letters(index: int) -> str:
    if index < 1:
        raise InvalidArgument(f"bad column index: {index}")
    out = ""
    while index:
        index, rem = divmod(index - 1, 26)
        out = chr(ord("A") + rem) + out
    return out


def parse_a1(ref: str) -> Position:
    """'B1' -> (1, 2) as (row, col)."""
    m = _A1_RE.match((ref or "").strip())
    if not m:
        raise InvalidArgument(f"invalid cell reference: {ref!r}")
    return int(m.group(2)), column_index(m.group(1))


def parse_range(ref: str) -> Tuple[Position, Position]:
    parts = (ref or "").split(":")
    if len(parts) == 1:
        p = parse_a1(parts[0])
        return p, p
    if len(parts) != 2:
        raise InvalidArgument(f"invalid range: {ref!r}")
    (r1, c1), (r2, c2) = parse_a1(parts[0]), parse_a1(parts[1])
    return (min(r1, r2), min(c1, c2)), (max(r1, r2), max(c1, c2))


class SheetHandle:
    """One sheet of the workbook. Writes are flushed, committing is left to the caller."""

    def __init__(self, session, sheet: Sheet):
        self.session = session
        self.sheet = sheet

    @property
    def name(self) -> str:
        return self.sheet.name

    def _cells(self):
        return SheetCell.query.filter_by(sheet_id=self.sheet.id)

    def _cell(self, row: int, col: int) -> Optional[SheetCell]:
        return self._cells().filter_by(row=row, col=col).first()

    def last_row(self) -> int:
        return self.session.query(func.max(SheetCell.row)) \
                   .filter(SheetCell.sheet_id == self.sheet.id).scalar() or 0

    def last_column(self) -> int:
        return self.session.query(func.max(SheetCell.col)) \
                   .filter(SheetCell.sheet_id == self.sheet.id).scalar() or 0

    def get_value(self, ref: Union[str, Position]) -> Any:
        row, col = parse_a1(ref) if isinstance(ref, str) else ref
        cell = self._cell(row, col)
        return cell.value if cell else ""

    def set_value(self, ref: Union[str, Position], value: Any, *, bold: Optional[bool] = None) -> None:
        row, col = parse_a1(ref) if isinstance(ref, str) else ref
        cell = self._cell(row, col)
        if cell is None:
            cell = SheetCell(sheet_id=self.sheet.id, row=row, col=col, bold=bool(bold))
            self.session.add(cell)
        elif bold is not None:
            cell.bold = bold
        cell.value = value
        self.session.flush()

    def get_values(self, ref: str) -> List[List[Any]]:
        (r1, c1), (r2, c2) = parse_range(ref)
        found = {(c.row, c.col): c.value for c in
                 self._cells().filter(SheetCell.row.between(r1, r2),
                                      SheetCell.col.between(c1, c2))}
        return [[found.get((r, c), "") for c in range(c1, c2 + 1)] for r in range(r1, r2 + 1)]

    def get_row(self, row: int, width: Optional[int] = None) -> List[Any]:
        width = width if width is not None else self.last_column()
        if width < 1:
            return []
        return self.get_values(f"A{row}:{column_letters(width)}{row}")[0]

    def rows(self, start: int = 1) -> List[List[Any]]:
        last, width = self.last_row(), self.last_column()
        if last < start or width < 1:
            return []
        return self.get_values(f"A{start}:{column_letters(width)}{last}")

    def append_row(self, values: Iterable[Any]) -> int:
        row = self.last_row() + 1
        for col, value in enumerate(values, start=1):
            self.session.add(SheetCell(sheet_id=self.sheet.id, row=row, col=col, value=value))
        self.session.flush()
        return row

    def set_bold(self, row: int, col: int, n_cols: int = 1, bold: bool = True) -> None:
        for c in range(col, col + n_cols):
            cell = self._cell(row, c)
            if cell is None:
                self.session.add(SheetCell(sheet_id=self.sheet.id, row=row, col=c, value="", bold=bold))
            else:
                cell.bold = bold
        self.session.flush()

    def is_bold(self, row: int, col: int) -> bool:
        cell = self._cell(row, col)
        return bool(cell and cell.bold)

    def set_column_width(self, col: int, width: int) -> None:
        entry = SheetColumn.query.filter_by(sheet_id=self.sheet.id, col=col).first()
        if entry is None:
            self.session.add(SheetColumn(sheet_id=self.sheet.id, col=col, width=width))
        else:
            entry.width = width
        self.session.flush()

    def column_width(self, col: int) -> Optional[int]:
        entry = SheetColumn.query.filter_by(sheet_id=self.sheet.id, col=col).first()
        return entry.width if entry else None


class Workbook:
    def __init__(self, session):
        self.session = session

    def get_sheet(self, name: str) -> Optional[SheetHandle]:
        sheet = Sheet.query.filter_by(name=name).first()
        return SheetHandle(self.session, sheet) if sheet else None

    def insert_sheet(self, name: str) -> SheetHandle:
        sheet = Sheet(name=name)
        self.session.add(sheet)
        self.session.flush()
        return SheetHandle(self.session, sheet)

    def get_or_insert_sheet(self, name: str) -> SheetHandle:
        return self.get_sheet(name) or self.insert_sheet(name)
