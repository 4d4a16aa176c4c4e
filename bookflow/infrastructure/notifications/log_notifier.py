from __future__ import annotations

import logging

from bookflow.application.ports.notification import NotificationPort
from bookflow.domain.entities.appointment import AppointmentSnapshot


class LogNotifier(NotificationPort):
    def __init__(self) -> None:
        self._logger = logging.getLogger(__name__)

    async def send_confirmation(self, appointment_id: str, snapshot: AppointmentSnapshot) -> None:
        self._logger.info(
            "Mock booking confirmation",
            extra={
                "appointment_id": appointment_id,
                "recipient": snapshot.client_phone,
                "start": f"{snapshot.date.isoformat()} {snapshot.start_time}",
            },
        )
