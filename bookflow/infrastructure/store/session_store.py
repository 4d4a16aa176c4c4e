from __future__ import annotations

import uuid

from bookflow.application.use_cases.booking_flow import BookingFlowController


class MemorySessionStore:
    """Live booking flows keyed by session id. One controller per booking attempt."""

    def __init__(self, limit: int = 1000) -> None:
        self._flows: dict[str, BookingFlowController] = {}
        self._limit = limit

    def new_session_id(self) -> str:
        return uuid.uuid4().hex

    def get(self, session_id: str) -> BookingFlowController | None:
        return self._flows.get(session_id)

    def put(self, session_id: str, flow: BookingFlowController) -> None:
        self._flows[session_id] = flow
        if len(self._flows) > self._limit:
            oldest = next(iter(self._flows))
            del self._flows[oldest]

    def remove(self, session_id: str) -> None:
        self._flows.pop(session_id, None)
