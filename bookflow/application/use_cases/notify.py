from __future__ import annotations

import logging

from bookflow.application.ports.notification import NotificationPort
from bookflow.domain.entities.appointment import AppointmentSnapshot


class NotifyBookingUseCase:
    """Sends the booking confirmation. Failures are logged and never reach the caller."""

    def __init__(self, notifier: NotificationPort) -> None:
        self._notifier = notifier
        self._logger = logging.getLogger(__name__)

    async def execute(self, appointment_id: str, snapshot: AppointmentSnapshot) -> bool:
        try:
            await self._notifier.send_confirmation(appointment_id, snapshot)
        except Exception as e:
            self._logger.exception(
                "Confirmation notification failed",
                extra={"appointment_id": appointment_id, "error": str(e)},
            )
            return False
        self._logger.info("Confirmation notification sent", extra={"appointment_id": appointment_id})
        return True
