from __future__ import annotations

from abc import ABC, abstractmethod

from bookflow.domain.entities.booking_link import BookingLink


class BookingLinkPort(ABC):
    @abstractmethod
    async def get_link(self, company_slug: str, link_slug: str) -> BookingLink:
        """Resolve a public booking link. Raises NotFoundError for missing or inactive links."""
        raise NotImplementedError
