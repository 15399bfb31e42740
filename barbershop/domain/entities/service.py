from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class DurationClass(str, Enum):
    ZERO = "zero"  # no time impact (eyebrows, consultation)
    SHORT = "short"  # 30 minutes
    LONG = "long"  # 60 minutes (chemical treatments)


class ServiceSize(str, Enum):
    SMALL = "P"
    MEDIUM = "M"
    LARGE = "G"


@dataclass(frozen=True)
class TieredPrice:
    small: float
    medium: float
    large: float

    def for_size(self, size: ServiceSize | None) -> float:
        if size == ServiceSize.SMALL:
            return self.small
        if size == ServiceSize.LARGE:
            return self.large
        return self.medium


@dataclass(frozen=True)
class Service:
    id: str
    name: str
    description: str | None = None
    duration_minutes: int | None = None
    price: float | None = None
    sizes: TieredPrice | None = None

    @property
    def duration_class(self) -> DurationClass:
        if not self.duration_minutes:
            return DurationClass.ZERO
        if self.duration_minutes >= 60:
            return DurationClass.LONG
        return DurationClass.SHORT

    @property
    def is_tiered(self) -> bool:
        return self.sizes is not None

    def display_name(self, size: ServiceSize | None = None) -> str:
        if self.sizes is None:
            return self.name
        return f"{self.name} {(size or ServiceSize.MEDIUM).value}"

    def price_for(self, size: ServiceSize | None = None) -> float:
        if self.sizes is not None:
            return self.sizes.for_size(size)
        return self.price or 0.0
