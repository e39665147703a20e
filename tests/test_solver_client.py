import asyncio
import json

import httpx
import pytest

from automation.sudoku_editor.models import BoxDimensions
from automation.sudoku_editor.solver_client import (
    AlreadySolvedError,
    SolveClient,
    SolveError,
    SubmissionCoordinator,
    SubmissionInFlightError,
)

ENDPOINT = "http://solver.test/solve"


def _full_solution(size=9):
    return [
        {"row": r, "column": c, "digit": (r * 3 + r // 3 + c) % size + 1}
        for r in range(size)
        for c in range(size)
    ]


def _coordinator(handler):
    client = SolveClient(ENDPOINT, transport=httpx.MockTransport(handler))
    return SubmissionCoordinator(client)


def test_submit_end_to_end():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["method"] = request.method
        seen["url"] = str(request.url)
        seen["body"] = json.loads(request.content)
        return httpx.Response(200, json={"solution": _full_solution()})

    coordinator = _coordinator(handler)
    notified = []
    coordinator.subscribe(notified.append)

    solution = asyncio.run(
        coordinator.submit({"0,0": 5, "2,3": 9}, BoxDimensions(per_row=3, per_column=3)),
    )

    assert seen["method"] == "POST"
    assert seen["url"] == ENDPOINT
    assert seen["body"] == {
        "givens": [
            {"row": 0, "column": 0, "digit": 5},
            {"row": 2, "column": 3, "digit": 9},
        ],
        "boxesPerRow": 3,
        "boxesPerColumn": 3,
    }
    assert len(solution) == 81
    assert coordinator.solved is True
    assert coordinator.solution == solution
    assert notified == [solution]


def test_json_encoded_string_body_is_accepted():
    def handler(request):
        return httpx.Response(200, json=json.dumps({"solution": _full_solution(4)}))

    coordinator = _coordinator(handler)
    solution = asyncio.run(coordinator.submit({}, BoxDimensions(per_row=2, per_column=2)))
    assert len(solution) == 16


def test_http_error_status_leaves_session_unsolved():
    coordinator = _coordinator(lambda request: httpx.Response(500, text="boom"))

    with pytest.raises(SolveError, match="HTTP 500"):
        asyncio.run(coordinator.submit({"0,0": 1}, BoxDimensions()))
    assert coordinator.solved is False
    assert coordinator.in_flight is False
    assert isinstance(coordinator.last_error, SolveError)


def test_transport_failure_is_reported():
    def handler(request):
        raise httpx.ConnectError("refused", request=request)

    coordinator = _coordinator(handler)
    with pytest.raises(SolveError, match="Could not reach solver"):
        asyncio.run(coordinator.submit({}, BoxDimensions()))
    assert coordinator.solved is False


def test_malformed_body_is_reported():
    coordinator = _coordinator(lambda request: httpx.Response(200, content=b"<html>"))
    with pytest.raises(SolveError, match="invalid JSON"):
        asyncio.run(coordinator.submit({}, BoxDimensions()))


def test_missing_solution_is_an_error():
    coordinator = _coordinator(lambda request: httpx.Response(200, json={"solution": None}))
    with pytest.raises(SolveError, match="no solution"):
        asyncio.run(coordinator.submit({}, BoxDimensions()))
    assert coordinator.solution is None


def test_retry_after_failure_succeeds():
    responses = [
        httpx.Response(503, text="busy"),
        httpx.Response(200, json={"solution": _full_solution()}),
    ]
    coordinator = _coordinator(lambda request: responses.pop(0))

    with pytest.raises(SolveError):
        asyncio.run(coordinator.submit({}, BoxDimensions()))
    asyncio.run(coordinator.submit({}, BoxDimensions()))
    assert coordinator.solved is True
    assert coordinator.last_error is None


def test_second_submit_after_success_is_refused():
    coordinator = _coordinator(
        lambda request: httpx.Response(200, json={"solution": _full_solution()}),
    )
    asyncio.run(coordinator.submit({}, BoxDimensions()))
    with pytest.raises(AlreadySolvedError):
        asyncio.run(coordinator.submit({}, BoxDimensions()))


def test_concurrent_submit_is_refused_while_in_flight():
    async def scenario():
        release = asyncio.Event()

        async def handler(request):
            await release.wait()
            return httpx.Response(200, json={"solution": _full_solution()})

        coordinator = SubmissionCoordinator(
            SolveClient(ENDPOINT, transport=httpx.MockTransport(handler)),
        )
        first = asyncio.create_task(coordinator.submit({}, BoxDimensions()))
        await asyncio.sleep(0)
        assert coordinator.in_flight is True
        with pytest.raises(SubmissionInFlightError):
            await coordinator.submit({}, BoxDimensions())
        release.set()
        return await first

    solution = asyncio.run(scenario())
    assert len(solution) == 81


def test_progress_messages_are_forwarded():
    messages = []

    async def progress(msg):
        messages.append(msg)

    coordinator = _coordinator(
        lambda request: httpx.Response(200, json={"solution": _full_solution()}),
    )
    asyncio.run(coordinator.submit({"0,0": 5}, BoxDimensions(), progress_callback=progress))
    assert messages[0].startswith("Submitting 1 givens")
    assert messages[-1] == "✓ Solved — 81 cells"


def test_any_2xx_status_is_accepted():
    coordinator = _coordinator(
        lambda request: httpx.Response(201, json={"solution": _full_solution(4)}),
    )
    solution = asyncio.run(coordinator.submit({}, BoxDimensions(per_row=2, per_column=2)))
    assert len(solution) == 16
