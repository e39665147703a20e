"""Entry point: python -m automation.sudoku_editor [--endpoint URL] [--boxes-per-row N] ..."""

from __future__ import annotations

import argparse
import warnings

from .models import DEFAULT_BOXES, BoxDimensions
from .solver_client import DEFAULT_ENDPOINT, DEFAULT_TIMEOUT
from .storage import DEFAULT_EXPORT_PATH


def _box_count(text: str) -> int:
    """argparse type: a non-zero whole number of boxes."""
    try:
        value = int(text)
    except ValueError:
        raise argparse.ArgumentTypeError(f"not a whole number: {text!r}") from None
    if not value:
        raise argparse.ArgumentTypeError("box count must not be 0")
    return value


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Sudoku Editor — TUI for entering givens and sending them to a solver",
    )
    parser.add_argument(
        "--endpoint",
        default=DEFAULT_ENDPOINT,
        help=f"Solving service URL (default: {DEFAULT_ENDPOINT})",
    )
    parser.add_argument("--boxes-per-row", type=_box_count, default=DEFAULT_BOXES)
    parser.add_argument("--boxes-per-column", type=_box_count, default=DEFAULT_BOXES)
    parser.add_argument(
        "--timeout",
        type=float,
        default=DEFAULT_TIMEOUT,
        help="Seconds to wait for the solver; 0 waits forever",
    )
    parser.add_argument(
        "--no-preview",
        action="store_true",
        help="Skip the headless-browser layout preview",
    )
    parser.add_argument(
        "--export",
        default=None,
        help=f"Where Export HTML writes the page (default: {DEFAULT_EXPORT_PATH})",
    )
    return parser.parse_args(argv)


def main() -> None:
    # Suppress harmless asyncio pipe cleanup warnings from the browser subprocess
    warnings.filterwarnings("ignore", message="unclosed transport", category=ResourceWarning)

    args = parse_args()

    from .app import SudokuEditorApp

    app = SudokuEditorApp(
        endpoint=args.endpoint,
        dimensions=BoxDimensions(
            per_row=args.boxes_per_row, per_column=args.boxes_per_column,
        ),
        timeout=args.timeout or None,
        preview=not args.no_preview,
        export_path=args.export,
    )
    app.run()


if __name__ == "__main__":
    main()
