from dataclasses import dataclass
from enum import Enum
from typing import Optional


class DeliveryStatus(str, Enum):
    DELIVERED = "delivered"
    SKIPPED = "skipped"
    FAILED = "failed"


@dataclass(frozen=True)
class DeliveryResult:
    """Outcome of a single send on one channel"""

    status: DeliveryStatus
    reason: Optional[str] = None

    @classmethod
    def delivered(cls) -> "DeliveryResult":
        return cls(DeliveryStatus.DELIVERED)

    @classmethod
    def skipped(cls, reason: str) -> "DeliveryResult":
        return cls(DeliveryStatus.SKIPPED, reason)

    @classmethod
    def failed(cls, reason: str) -> "DeliveryResult":
        return cls(DeliveryStatus.FAILED, reason)

    @property
    def ok(self) -> bool:
        return self.status == DeliveryStatus.DELIVERED
