from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from barbershop.domain.entities.service import Service, TieredPrice


class SizePricesRecord(BaseModel):
    p: float
    m: float
    g: float


class ServiceRecord(BaseModel):
    """Service document stored under services/{id}."""

    model_config = ConfigDict(extra="ignore")

    name: str = Field(min_length=1)
    description: str | None = None
    duration: int | None = Field(None, ge=0)
    price: float | None = Field(None, ge=0)
    sizes: SizePricesRecord | None = None

    def to_service(self, service_id: str) -> Service:
        return Service(
            id=service_id,
            name=self.name,
            description=self.description,
            duration_minutes=self.duration,
            price=self.price,
            sizes=TieredPrice(self.sizes.p, self.sizes.m, self.sizes.g) if self.sizes else None,
        )

    @classmethod
    def from_service(cls, service: Service) -> ServiceRecord:
        return cls(
            name=service.name,
            description=service.description,
            duration=service.duration_minutes,
            price=service.price,
            sizes=(
                SizePricesRecord(p=service.sizes.small, m=service.sizes.medium, g=service.sizes.large)
                if service.sizes
                else None
            ),
        )

    def to_document(self) -> dict[str, Any]:
        # The hosted store rejects explicit nulls.
        return self.model_dump(exclude_none=True)
