"""Pixel budget for the browser rendering of the grid.

The browser lays the grid out as one ``div`` per row holding
``grid_size`` inline ``.cell`` elements.  These numbers feed the
analytic first pass of the stylesheet recompute and must match the
base styles in ``render.py``.

─── Horizontal budget of one row (left → right) ───────────────

Item                       px     Notes
─────────────────────────  ─────  ──────────────────────────────
Container slack              5    Outer border of #sudoku
Per box                      4    Box separator share (5px right border,
                                  minus the 1px cell border it replaces)
Per cell                     2    1px left + 1px right cell border
─────────────────────────  ─────

So for a container ``W`` px wide:

    cell = floor((((W - 5) / per_row) - 4) / per_column - 2)

  W = 500, 3 × 3   →   floor(((165 - 4) / 3) - 2)  =  floor(51.67)  =  51

─── Second pass ───────────────────────────────────────────────

Borders change the box model, so the real cell width is read back
from the page after the first rules are live:

  font-size    0.9 × measured cell width
  line-height  1.0 × measured cell width

─── CSS values that must stay in sync ─────────────────────────

  .cell border            →  1px   (render.py base style)
  box separator border    →  5px   (BOX_BORDER)
  container selector      →  #sudoku
  cell class              →  .cell
"""

from __future__ import annotations

CONTAINER_SLACK_PX = 5
BOX_SLACK_PX = 4
CELL_SLACK_PX = 2

BOX_BORDER = "5px solid black"
FONT_SCALE = 0.9

CONTAINER_ID = "sudoku"
CELL_CLASS = "cell"
ROW_ID_PREFIX = "row"
STYLE_ELEMENT_ID = "layout-style"
