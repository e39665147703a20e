import asyncio

import httpx
from textual.widgets import Input

from automation.sudoku_editor.app import SudokuEditorApp
from automation.sudoku_editor.models import BoxDimensions
from automation.sudoku_editor.solver_client import SolveClient


def _solution(size):
    return [
        {"row": r, "column": c, "digit": (r + c) % size + 1}
        for r in range(size)
        for c in range(size)
    ]


def test_changing_box_counts_rebuilds_the_grid():
    async def scenario():
        app = SudokuEditorApp(preview=False)
        async with app.run_test(size=(160, 60)) as pilot:
            await app.workers.wait_for_complete()
            await pilot.pause()
            assert len(app.query(".cell")) == 81

            app.query_one("#boxes-per-row", Input).value = "2"
            await pilot.pause()
            await app.workers.wait_for_complete()
            await pilot.pause()
            assert app.dimensions.dimensions.per_row == 2
            assert len(app.query(".cell")) == 36

            app.query_one("#boxes-per-column", Input).value = ""
            await pilot.pause()
            assert app.dimensions.grid_size == 6

    asyncio.run(scenario())


def test_solve_fills_and_locks_the_grid():
    async def scenario():
        bodies = []

        def handler(request):
            bodies.append(request.content)
            return httpx.Response(200, json={"solution": _solution(4)})

        app = SudokuEditorApp(preview=False)
        app.coordinator.client = SolveClient(
            "http://solver.test/solve", transport=httpx.MockTransport(handler),
        )
        async with app.run_test(size=(160, 60)) as pilot:
            app.query_one("#boxes-per-row", Input).value = "2"
            app.query_one("#boxes-per-column", Input).value = "2"
            await pilot.pause()
            await app.workers.wait_for_complete()
            await pilot.pause()

            app.query_one("#cell-0-0", Input).value = "1"
            await pilot.pause()
            assert app.grid.givens == {"0,0": 1}

            app.action_solve()
            await app.workers.wait_for_complete()
            await pilot.pause()

            assert len(bodies) == 1
            assert app.coordinator.solved is True
            assert app.dimensions.frozen is True
            assert app.query_one("#btn-solve").disabled is True
            assert app.query_one("#cell-1-1", Input).value == "3"
            assert app.query_one("#cell-1-1", Input).disabled is True

    asyncio.run(scenario())


def test_failed_solve_unlocks_controls_and_allows_retry():
    async def scenario():
        responses = [
            httpx.Response(500, text="solver crashed"),
            httpx.Response(200, json={"solution": _solution(9)}),
        ]

        app = SudokuEditorApp(preview=False)
        app.coordinator.client = SolveClient(
            "http://solver.test/solve",
            transport=httpx.MockTransport(lambda request: responses.pop(0)),
        )
        notices = []
        app.notify = lambda message, **kw: notices.append((message, kw.get("severity")))

        async with app.run_test(size=(160, 60)) as pilot:
            await app.workers.wait_for_complete()
            await pilot.pause()

            app.action_solve()
            await app.workers.wait_for_complete()
            await pilot.pause()

            assert app.coordinator.solved is False
            assert app.dimensions.frozen is False
            assert app.query_one("#btn-solve").disabled is False
            assert app.query_one("#boxes-per-row").disabled is False
            assert app.query_one("#boxes-per-column").disabled is False
            assert any(sev == "error" and "HTTP 500" in msg for msg, sev in notices)

            app.action_solve()
            await app.workers.wait_for_complete()
            await pilot.pause()

            assert app.coordinator.solved is True
            assert app.dimensions.frozen is True
            assert app.query_one("#btn-solve").disabled is True
            assert responses == []

    asyncio.run(scenario())


def test_zero_box_count_at_startup_keeps_defaults():
    app = SudokuEditorApp(preview=False, dimensions=BoxDimensions(per_row=0, per_column=4))
    assert app.dimensions.dimensions == BoxDimensions()
