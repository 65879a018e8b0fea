from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar, Literal

from blockdoc.domain.blocks import default_metadata
from blockdoc.domain.entities import BlockType, BorderStyle, TableCell, TableMetadata, TextAlignment

from .base import BlockEditor, BlockUpdate

HEADER_PLACEHOLDER = "Header"


@dataclass(frozen=True)
class CellPosition:
    row: int
    col: int


class TableEditor(BlockEditor):
    """
    Rectangular grid of cells.

    Structural edits rebuild every row to the same width; the grid never
    drops below one row or one column.
    """

    block_types: ClassVar[frozenset[BlockType]] = frozenset(["table"])

    def __init__(self, *args, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self.selected_cell: CellPosition | None = None

    @property
    def metadata(self) -> TableMetadata:
        metadata = self.block.metadata
        return metadata if isinstance(metadata, TableMetadata) else default_metadata("table")

    @property
    def rows(self) -> list[list[TableCell]]:
        return self.metadata.rows

    @property
    def row_count(self) -> int:
        return len(self.rows)

    @property
    def column_count(self) -> int:
        return max((len(row) for row in self.rows), default=0)

    def _with_rows(self, rows: list[list[TableCell]], **changes: object) -> BlockUpdate:
        width = max((len(row) for row in rows), default=0)
        rect = [row + [TableCell() for _ in range(width - len(row))] for row in rows]
        return self._emit(metadata=self.metadata.model_copy(update={"rows": rect, **changes}))

    def _in_range(self, row: int, col: int) -> bool:
        return 0 <= row < self.row_count and 0 <= col < self.column_count

    # --- Cells ---

    def update_cell(self, row: int, col: int, content: str) -> BlockUpdate | None:
        if not self._in_range(row, col):
            return None
        return self._change_cell(row, col, content=content)

    def set_cell_alignment(self, row: int, col: int, alignment: TextAlignment) -> BlockUpdate | None:
        if not self._in_range(row, col):
            return None
        return self._change_cell(row, col, alignment=alignment)

    def _change_cell(self, row: int, col: int, **changes: object) -> BlockUpdate:
        rows = [
            [cell.model_copy(update=changes) if (r, c) == (row, col) else cell for c, cell in enumerate(cells)]
            for r, cells in enumerate(self.rows)
        ]
        return self._with_rows(rows)

    # --- Structure ---

    def add_row(self, index: int | None = None, position: Literal["before", "after"] = "after") -> BlockUpdate:
        """Insert an empty row next to `index`; appended at the end without one."""
        width = self.column_count or 1
        if index is None:
            insert_at = self.row_count
        else:
            index = min(max(index, 0), self.row_count - 1)
            insert_at = index + 1 if position == "after" else index
        new_row = [TableCell() for _ in range(width)]
        rows = [*self.rows[:insert_at], new_row, *self.rows[insert_at:]]
        return self._with_rows(rows)

    def add_column(self, index: int | None = None, position: Literal["before", "after"] = "after") -> BlockUpdate:
        """Insert a column next to `index`; the header row gets a placeholder title."""
        width = self.column_count
        if index is None:
            insert_at = width
        else:
            index = min(max(index, 0), max(width - 1, 0))
            insert_at = index + 1 if position == "after" else index
        header = bool(self.metadata.has_header)
        rows = []
        for r, row in enumerate(self.rows):
            cell = TableCell(content=HEADER_PLACEHOLDER if header and r == 0 else "")
            rows.append([*row[:insert_at], cell, *row[insert_at:]])
        return self._with_rows(rows)

    def can_delete_row(self) -> bool:
        return self.row_count > 1

    def can_delete_column(self) -> bool:
        return self.column_count > 1

    def delete_row(self, index: int) -> BlockUpdate | None:
        if not self.can_delete_row() or not 0 <= index < self.row_count:
            return None
        rows = [row for r, row in enumerate(self.rows) if r != index]
        if self.selected_cell:
            row, col = self.selected_cell.row, self.selected_cell.col
            if row == index:
                self.selected_cell = None
            elif row > index:
                self.selected_cell = CellPosition(row - 1, col)
        return self._with_rows(rows)

    def delete_column(self, index: int) -> BlockUpdate | None:
        if not self.can_delete_column() or not 0 <= index < self.column_count:
            return None
        rows = [[cell for c, cell in enumerate(row) if c != index] for row in self.rows]
        if self.selected_cell:
            row, col = self.selected_cell.row, self.selected_cell.col
            if col == index:
                self.selected_cell = None
            elif col > index:
                self.selected_cell = CellPosition(row, col - 1)
        return self._with_rows(rows)

    # --- Settings ---

    def toggle_header(self) -> BlockUpdate:
        return self._with_rows(self.rows, has_header=not self.metadata.has_header)

    def toggle_alternating_colors(self) -> BlockUpdate:
        return self._with_rows(self.rows, alternating_colors=not self.metadata.alternating_colors)

    def set_border_style(self, style: BorderStyle) -> BlockUpdate:
        return self._with_rows(self.rows, border_style=style)

    # --- Navigation ---

    def select_cell(self, row: int, col: int) -> bool:
        if not self._in_range(row, col):
            return False
        self.selected_cell = CellPosition(row, col)
        return True

    def handle_key(self, key: str, shift: bool = False) -> bool:
        """Move the cell selection; returns whether the key was consumed."""
        if key == "Escape":
            self.selected_cell = None
            return True
        if self.selected_cell is None:
            return False

        row, col = self.selected_cell.row, self.selected_cell.col
        max_row, max_col = self.row_count - 1, self.column_count - 1

        if key == "Tab":
            if shift:
                if col > 0:
                    self.select_cell(row, col - 1)
                elif row > 0:
                    self.select_cell(row - 1, max_col)
            elif col < max_col:
                self.select_cell(row, col + 1)
            elif row < max_row:
                self.select_cell(row + 1, 0)
            return True

        if key in ("Enter", "ArrowDown"):
            if row < max_row:
                return self.select_cell(row + 1, col)
            return key == "Enter"
        if key == "ArrowUp":
            return row > 0 and self.select_cell(row - 1, col)
        if key == "ArrowLeft":
            return col > 0 and self.select_cell(row, col - 1)
        if key == "ArrowRight":
            return col < max_col and self.select_cell(row, col + 1)
        return False
