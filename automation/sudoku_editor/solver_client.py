"""Client for the remote solving service.

``SolveClient`` speaks the wire protocol (``POST /solve``), while
``SubmissionCoordinator`` owns the solution state and the rule that a
session is solved at most once.
"""

from __future__ import annotations

import json
from typing import Any, Callable, Coroutine, Mapping

import httpx
from pydantic import ValidationError

from .converter import from_records, to_records
from .models import BoxDimensions, GivensMap, SolveRequest, SolveResponse

DEFAULT_ENDPOINT = "http://localhost:8080/solve"
DEFAULT_TIMEOUT: float = 60.0

ProgressCB = Callable[[str], Coroutine[Any, Any, None]] | None
SolutionListener = Callable[[GivensMap | None], None]


class SolveError(RuntimeError):
    """The solving service could not be reached or answered badly."""


class SubmissionInFlightError(SolveError):
    """A second submit was fired before the first one came back."""


class AlreadySolvedError(SolveError):
    """The session already holds a solution."""


def _parse_body(resp: httpx.Response) -> SolveResponse:
    try:
        body = resp.json()
        # The reference backend writes the JSON document as a JSON string.
        if isinstance(body, str):
            body = json.loads(body)
    except ValueError as exc:
        raise SolveError(f"Solver returned invalid JSON: {exc}") from exc

    if not isinstance(body, dict):
        raise SolveError(f"Solver returned {type(body).__name__}, expected an object")
    try:
        return SolveResponse.model_validate(body)
    except ValidationError as exc:
        raise SolveError(f"Malformed solver response: {exc}") from exc


class SolveClient:
    """Thin async wrapper around ``POST {endpoint}``."""

    def __init__(
        self,
        endpoint: str = DEFAULT_ENDPOINT,
        *,
        timeout: float | None = DEFAULT_TIMEOUT,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.endpoint = endpoint
        self.timeout = timeout
        self._transport = transport

    async def solve(self, request: SolveRequest) -> SolveResponse:
        try:
            async with httpx.AsyncClient(
                timeout=self.timeout,
                transport=self._transport,
                headers={"Accept": "application/json"},
            ) as client:
                resp = await client.post(self.endpoint, json=request.to_wire())
        except httpx.HTTPError as exc:
            raise SolveError(f"Could not reach solver at {self.endpoint}: {exc}") from exc

        if not resp.is_success:
            raise SolveError(f"Solver HTTP {resp.status_code}: {resp.text[:200]}")
        return _parse_body(resp)


class SubmissionCoordinator:
    """Sends the grid to the solver and keeps the answer."""

    def __init__(self, client: SolveClient) -> None:
        self.client = client
        self.solution: GivensMap | None = None
        self.last_error: SolveError | None = None
        self._in_flight = False
        self._listeners: list[SolutionListener] = []

    @property
    def solved(self) -> bool:
        return self.solution is not None

    @property
    def in_flight(self) -> bool:
        return self._in_flight

    def subscribe(self, listener: SolutionListener) -> Callable[[], None]:
        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe

    @staticmethod
    def build_request(givens: Mapping[str, int], dimensions: BoxDimensions) -> SolveRequest:
        return SolveRequest(
            givens=to_records(givens),
            boxes_per_row=dimensions.per_row,
            boxes_per_column=dimensions.per_column,
        )

    async def submit(
        self,
        givens: Mapping[str, int],
        dimensions: BoxDimensions,
        progress_callback: ProgressCB = None,
    ) -> GivensMap:
        """Solve *givens* and store the result.

        Raises ``SolveError`` (kept in ``last_error``) if the service fails
        or returns no solution; the coordinator then stays unsolved and the
        caller may try again.
        """
        if self.solved:
            raise AlreadySolvedError("Puzzle is already solved")
        if self._in_flight:
            raise SubmissionInFlightError("A solve request is already pending")

        async def _progress(msg: str) -> None:
            if progress_callback:
                await progress_callback(msg)

        request = self.build_request(givens, dimensions)
        self._in_flight = True
        try:
            await _progress(
                f"Submitting {len(request.givens)} givens "
                f"({dimensions.per_row}×{dimensions.per_column} boxes) to {self.client.endpoint}"
            )
            response = await self.client.solve(request)
            solution = from_records(response.solution)
            if solution is None:
                raise SolveError("Solver response has no solution")
        except SolveError as exc:
            self.last_error = exc
            await _progress(f"✗ {exc}")
            raise
        finally:
            self._in_flight = False

        self.last_error = None
        self.solution = solution
        await _progress(f"✓ Solved — {len(solution)} cells")
        for listener in list(self._listeners):
            listener(solution)
        return solution
