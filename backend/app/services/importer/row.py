"""
Row abstraction for parsed spreadsheet data and the field lookup rules.
"""
import math
from collections.abc import Mapping
from typing import Any, Dict, Iterator, Optional, Sequence

from app.utils import fuzzy_key


def _cell_text(value: Any) -> Optional[str]:
    if value is None:
        return None
    if isinstance(value, float) and math.isnan(value):
        return None
    if isinstance(value, float) and value.is_integer():
        # Spreadsheet engines hand back 31000.0 for integer cells
        return str(int(value))
    return str(value)


class Row(Mapping):
    """
    One data row of an uploaded sheet: header -> cell text (or None),
    in file column order. Immutable.
    """

    __slots__ = ("_cells",)

    def __init__(self, cells: Mapping[str, Any]):
        self._cells: Dict[str, Optional[str]] = {
            str(header): _cell_text(value) for header, value in cells.items()
        }

    def __getitem__(self, header: str) -> Optional[str]:
        return self._cells[header]

    def __iter__(self) -> Iterator[str]:
        return iter(self._cells)

    def __len__(self) -> int:
        return len(self._cells)

    def __repr__(self) -> str:
        return f"Row({self._cells!r})"

    def text(self, header: Optional[str]) -> Optional[str]:
        """Trimmed cell text for a header, None when missing or blank."""
        if header is None:
            return None
        value = self._cells.get(header)
        if value is None:
            return None
        value = value.strip()
        return value or None

    def is_blank(self) -> bool:
        return all(self.text(header) is None for header in self._cells)

    def to_raw(self) -> Dict[str, Optional[str]]:
        """Plain dict copy of the original cells, for error records."""
        return dict(self._cells)


def extract_field(
    row: Row,
    field: str,
    mapped_header: Optional[str],
    alternatives: Sequence[str] = (),
) -> Optional[str]:
    """
    Resolve the value of one canonical field from a row.

    Resolution order:
    1. the header chosen by the column mapping
    2. each alternative header name, in order
    3. any row key that equals the field name or an alternative once
       trimmed, stripped of spaces and lower-cased

    Returns:
        First non-empty trimmed value, or None if the field is absent
    """
    value = row.text(mapped_header)
    if value is not None:
        return value

    for header in alternatives:
        value = row.text(header)
        if value is not None:
            return value

    targets = {fuzzy_key(field)}
    targets.update(fuzzy_key(header) for header in alternatives)
    for header in row:
        if fuzzy_key(header) in targets:
            value = row.text(header)
            if value is not None:
                return value

    return None
