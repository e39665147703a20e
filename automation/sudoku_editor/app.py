"""Sudoku Editor — Textual TUI application.

Launch with:  python -m automation.sudoku_editor
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from playwright.async_api import Error as PlaywrightError
from textual import on, work
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal, ScrollableContainer, Vertical
from textual.widgets import Button, Footer, Header, Input, Label, Log

from . import storage
from .browser import BrowserPreview
from .converter import prune_givens
from .dimensions import DimensionsFrozenError, DimensionsState
from .models import BoxDimensions, GivensMap, LayoutMetrics, cell_key
from .render import render_html, render_text
from .solver_client import (
    DEFAULT_ENDPOINT,
    DEFAULT_TIMEOUT,
    AlreadySolvedError,
    SolveClient,
    SolveError,
    SubmissionCoordinator,
    SubmissionInFlightError,
)
from .stylesheet import LayoutError, LayoutStyle, StyleSynchronizer

# ── Utility ──────────────────────────────────────────────────


def _parse_box_count(text: str) -> int | None:
    """Input text → int; empty or lone sign → None (treated as "no value")."""
    text = text.strip()
    if text in ("", "-", "+"):
        return None
    return int(text)


# ── Grid widget ──────────────────────────────────────────────


class SudokuGrid(Vertical):
    """One ``Horizontal`` per row, one ``.cell`` Input per column.

    Owns the sparse ``givens`` the user types and the ``solution``
    shown once the solver answers.
    """

    def __init__(self, **kw: Any) -> None:
        super().__init__(**kw)
        self.givens: GivensMap = {}
        self.solution: GivensMap | None = None
        self._grid_size = 0

    async def rebuild(self, dimensions: BoxDimensions) -> None:
        size = dimensions.grid_size
        self._grid_size = size
        self.givens = prune_givens(self.givens, size)
        await self.remove_children()

        width = len(str(abs(size)))
        rows: list[Horizontal] = []
        for r in range(size):
            cells = []
            for c in range(size):
                classes = "cell"
                if (c + 1) % dimensions.per_row == 0 and c + 1 != size:
                    classes += " box-right"
                cells.append(Input(
                    str(self.givens.get(cell_key(r, c), "")),
                    id=f"cell-{r}-{c}",
                    classes=classes,
                    max_length=width,
                    restrict=r"[0-9]*",
                ))
            row_classes = "grid-row"
            if (r + 1) % dimensions.per_column == 0 and r + 1 != size:
                row_classes += " box-bottom"
            rows.append(Horizontal(*cells, id=f"row{r}", classes=row_classes))
        if rows:
            await self.mount_all(rows)

    @on(Input.Changed, ".cell")
    def _on_cell_changed(self, event: Input.Changed) -> None:
        event.stop()
        if self.solution is not None or not event.input.id:
            return
        _, r, c = event.input.id.split("-")
        key = cell_key(int(r), int(c))
        text = event.value.strip()
        if text.isdigit() and 1 <= int(text) <= self._grid_size:
            self.givens[key] = int(text)
        else:
            self.givens.pop(key, None)

    def set_solution(self, solution: GivensMap) -> None:
        self.solution = solution
        for cell in self.query(".cell").results(Input):
            _, r, c = (cell.id or "cell-0-0").split("-")
            key = cell_key(int(r), int(c))
            if key not in self.givens and key in solution:
                cell.value = str(solution[key])
                cell.add_class("solved")
            cell.disabled = True


# ── Main App ─────────────────────────────────────────────────


class SudokuEditorApp(App[None]):
    """Edit givens, send them to the solver, keep the page layout in sync."""

    TITLE = "Sudoku Editor"

    CSS = """
    #config-bar {
        height: auto;
        padding: 0 1;
    }

    #config-bar Label {
        padding: 1 1;
    }

    #config-bar Input {
        width: 12;
    }

    #config-bar Button {
        margin-left: 2;
    }

    #body {
        height: 1fr;
    }

    #grid-scroll {
        width: 2fr;
        padding: 0 1;
    }

    #sudoku {
        width: auto;
        height: auto;
    }

    .grid-row {
        width: auto;
        height: 3;
    }

    .grid-row.box-bottom {
        margin-bottom: 1;
    }

    .cell {
        width: 6;
        height: 3;
    }

    .cell.box-right {
        margin-right: 2;
    }

    .cell.solved {
        color: $accent;
    }

    #layout-log {
        width: 1fr;
        border: solid $primary;
        margin: 1 0;
    }
    """

    BINDINGS = [
        Binding("ctrl+s", "solve", "Solve"),
        Binding("ctrl+e", "export", "Export HTML"),
        Binding("ctrl+l", "relayout", "Relayout"),
        Binding("ctrl+p", "print_grid", "Print Grid"),
        Binding("ctrl+q", "quit", "Quit"),
    ]

    def __init__(
        self,
        endpoint: str = DEFAULT_ENDPOINT,
        dimensions: BoxDimensions | None = None,
        *,
        timeout: float | None = DEFAULT_TIMEOUT,
        preview: bool = True,
        export_path: str | Path | None = None,
        **kw: Any,
    ) -> None:
        super().__init__(**kw)
        self.dimensions = DimensionsState()
        if dimensions is not None:
            self.dimensions.set_dimensions(dimensions.per_row, dimensions.per_column)
        self.coordinator = SubmissionCoordinator(SolveClient(endpoint, timeout=timeout))
        self.style = LayoutStyle()
        self.preview = BrowserPreview(self.style) if preview else None
        self.export_path = export_path
        self.metrics: LayoutMetrics | None = None

        self.dimensions.subscribe(self._on_dimensions_changed)
        self.coordinator.subscribe(self._on_solution)

    # ── compose ──────────────────────────────────────────────

    def compose(self) -> ComposeResult:
        dims = self.dimensions.dimensions
        yield Header()
        with Horizontal(id="config-bar"):
            yield Label("Boxes per row")
            yield Input(str(dims.per_row), id="boxes-per-row", type="integer")
            yield Label("× per column")
            yield Input(str(dims.per_column), id="boxes-per-column", type="integer")
            yield Button("Solve", id="btn-solve", variant="primary")
            yield Button("Export HTML", id="btn-export")
        with Horizontal(id="body"):
            with ScrollableContainer(id="grid-scroll"):
                yield SudokuGrid(id="sudoku")
            yield Log(id="layout-log", max_lines=500)
        yield Footer()

    def on_mount(self) -> None:
        self._rebuild_grid()

    async def on_unmount(self) -> None:
        if self.preview is not None:
            await self.preview.close()

    # ── helpers ──────────────────────────────────────────────

    @property
    def grid(self) -> SudokuGrid:
        return self.query_one("#sudoku", SudokuGrid)

    def _log(self, text: str) -> None:
        self.query_one("#layout-log", Log).write_line(text)

    async def _progress(self, text: str) -> None:
        self._log(text)

    def _set_controls_disabled(self, disabled: bool) -> None:
        for selector in ("#boxes-per-row", "#boxes-per-column", "#btn-solve"):
            self.query_one(selector).disabled = disabled

    # ── configuration ────────────────────────────────────────

    @on(Input.Changed, "#boxes-per-row, #boxes-per-column")
    def _on_box_count_changed(self) -> None:
        try:
            per_row = _parse_box_count(self.query_one("#boxes-per-row", Input).value)
            per_column = _parse_box_count(self.query_one("#boxes-per-column", Input).value)
            self.dimensions.set_dimensions(per_row, per_column)
        except ValueError:
            self.notify("Box counts must be whole numbers", severity="error")
        except DimensionsFrozenError as exc:
            self.notify(str(exc), severity="warning")

    def _on_dimensions_changed(self, dimensions: BoxDimensions) -> None:
        self._rebuild_grid()

    @work(exclusive=True, group="grid")
    async def _rebuild_grid(self) -> None:
        await self.grid.rebuild(self.dimensions.dimensions)
        self.call_after_refresh(self._relayout)

    # ── layout ───────────────────────────────────────────────

    def action_relayout(self) -> None:
        self._relayout()

    @work(exclusive=True, group="layout")
    async def _relayout(self) -> None:
        if self.preview is None:
            return

        dims = self.dimensions.dimensions
        grid = self.grid
        try:
            await self.preview.start()
            await self.preview.show(dims.grid_size, grid.givens, grid.solution)
            sync = StyleSynchronizer(self.style, self.preview.measurer)
            self.metrics = await sync.refresh(dims)
        except LayoutError as exc:
            self._log(f"✗ {exc}")
            self.notify(str(exc), severity="error")
            return
        except (PlaywrightError, RuntimeError) as exc:
            self._log(f"✗ Layout failed: {exc}")
            self.notify(f"Layout preview unavailable: {exc}", severity="error")
            return

        self._log(f"Layout {dims.per_row}×{dims.per_column}:")
        for rule in self.style.rules:
            self._log(f"  {rule}")
        if self.metrics.overflows:
            self._log(
                f"  ! rows are {self.metrics.row_width:g}px wide, "
                f"container is {self.metrics.container_width:g}px"
            )

    # ── solving ──────────────────────────────────────────────

    @on(Button.Pressed, "#btn-solve")
    def action_solve(self) -> None:
        if self.coordinator.solved:
            self.notify("Already solved", severity="warning")
            return
        self._run_solve()

    @work(group="solve")
    async def _run_solve(self) -> None:
        givens = dict(self.grid.givens)
        dims = self.dimensions.dimensions
        self.dimensions.freeze()
        self._set_controls_disabled(True)
        try:
            await self.coordinator.submit(givens, dims, progress_callback=self._progress)
        except (SubmissionInFlightError, AlreadySolvedError) as exc:
            self.notify(str(exc), severity="warning")
        except SolveError as exc:
            self.dimensions.unfreeze()
            self._set_controls_disabled(False)
            self.notify(str(exc), severity="error")

    def _on_solution(self, solution: GivensMap | None) -> None:
        if solution is None:
            return
        self.grid.set_solution(solution)
        self._set_controls_disabled(True)
        self.notify(f"Solved — {len(solution)} cells")
        self.call_after_refresh(self._relayout)

    # ── output ───────────────────────────────────────────────

    @on(Button.Pressed, "#btn-export")
    def action_export(self) -> None:
        dims = self.dimensions.dimensions
        grid = self.grid
        page = render_html(
            dims.grid_size, grid.givens, grid.solution, css=self.style.css_text(),
        )
        try:
            path = storage.write_text(page, self.export_path)
        except OSError as exc:
            self.notify(f"Export failed: {exc}", severity="error")
            return
        self.notify(f"Exported {path.name}")

    def action_print_grid(self) -> None:
        grid = self.grid
        shown = grid.solution if grid.solution is not None else grid.givens
        for line in render_text(shown, self.dimensions.dimensions).splitlines():
            self._log(line)
