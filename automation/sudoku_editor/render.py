"""HTML and plain-text renderings of a grid.

The HTML page follows the DOM contract the stylesheet rules target:
a ``#sudoku`` container, one ``div#row{r}`` per row, one ``.cell``
per column.
"""

from __future__ import annotations

import html as html_mod
from typing import Mapping

from . import _layout_sizes as sizes
from .models import BoxDimensions, cell_key

_EMPTY = "·"

_BASE_CSS = f"""
body {{ font-family: sans-serif; margin: 1em; }}
#{sizes.CONTAINER_ID} {{ width: 100%; max-width: 800px; border: 2px solid black; }}
#{sizes.CONTAINER_ID} > div {{ white-space: nowrap; }}
.{sizes.CELL_CLASS} {{
  display: inline-block;
  box-sizing: content-box;
  border: 1px solid #999;
  text-align: center;
  vertical-align: top;
  overflow: hidden;
}}
.{sizes.CELL_CLASS}.given {{ font-weight: bold; }}
.{sizes.CELL_CLASS}.solved {{ color: #1565c0; }}
"""


def _cell_html(key: str, givens: Mapping[str, int], solution: Mapping[str, int] | None) -> str:
    if key in givens:
        return f'<div class="{sizes.CELL_CLASS} given">{givens[key]}</div>'
    if solution and key in solution:
        return f'<div class="{sizes.CELL_CLASS} solved">{solution[key]}</div>'
    return f'<div class="{sizes.CELL_CLASS}"></div>'


def render_html(
    grid_size: int,
    givens: Mapping[str, int],
    solution: Mapping[str, int] | None = None,
    css: str = "",
    title: str = "Sudoku",
) -> str:
    """Return a standalone page for a *grid_size* × *grid_size* grid.

    *css* goes into the ``<style id="layout-style">`` element the
    layout engine owns.
    """
    rows: list[str] = []
    for r in range(grid_size):
        cells = "".join(_cell_html(cell_key(r, c), givens, solution) for c in range(grid_size))
        rows.append(f'  <div id="{sizes.ROW_ID_PREFIX}{r}">{cells}</div>')

    return "\n".join([
        "<!DOCTYPE html>",
        "<html>",
        "<head>",
        '<meta charset="utf-8">',
        f"<title>{html_mod.escape(title)}</title>",
        f"<style>{_BASE_CSS}</style>",
        f'<style id="{sizes.STYLE_ELEMENT_ID}">\n{css}\n</style>',
        "</head>",
        "<body>",
        f'<div id="{sizes.CONTAINER_ID}">',
        *rows,
        "</div>",
        "</body>",
        "</html>",
        "",
    ])


def render_text(grid: Mapping[str, int], dimensions: BoxDimensions) -> str:
    """Boxed text grid, ``·`` for empty cells.

    Vertical bars follow every ``per_row``-th cell and separator lines
    every ``per_column``-th row, the same grouping the stylesheet uses.
    """
    size = dimensions.grid_size
    width = len(str(size))

    lines: list[str] = []
    for r in range(size):
        chunks: list[str] = []
        for start in range(0, size, dimensions.per_row):
            digits = [
                str(grid.get(cell_key(r, c), _EMPTY)).rjust(width)
                for c in range(start, min(start + dimensions.per_row, size))
            ]
            chunks.append(" ".join(digits))
        lines.append("|" + "|".join(chunks) + "|")
        if (r + 1) % dimensions.per_column == 0 and r + 1 != size:
            inner = "".join("+" if ch == "|" else "-" for ch in lines[-1][1:-1])
            lines.append(f"|{inner}|")

    border = "-" * len(lines[0]) if lines else ""
    return "\n".join([border, *lines, border])
