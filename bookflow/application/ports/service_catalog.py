from __future__ import annotations

from abc import ABC, abstractmethod

from bookflow.domain.entities.service_catalog import Service


class ServiceCatalogPort(ABC):
    @abstractmethod
    async def get_services(self, company_id: str, branch_id: str | None) -> list[Service]:
        """Services bookable online for a company branch."""
        raise NotImplementedError
