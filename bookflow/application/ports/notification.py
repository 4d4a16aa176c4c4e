from abc import ABC, abstractmethod

from bookflow.domain.entities.appointment import AppointmentSnapshot


class NotificationPort(ABC):
    @abstractmethod
    async def send_confirmation(self, appointment_id: str, snapshot: AppointmentSnapshot) -> None:
        raise NotImplementedError
