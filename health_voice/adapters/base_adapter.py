import time
import uuid
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Generic, TypeVar, Union

from health_voice.utils.models import Measurement, OxygenMeasurement, TrendSeries

T = TypeVar("T")


class ProviderFailure(Exception):
    """Raised when a measurement could not be obtained from a provider."""
    pass


@dataclass(frozen=True)
class Ok(Generic[T]):
    value: T


@dataclass(frozen=True)
class Failed:
    reason: str


ProviderResult = Union[Ok[T], Failed]


def new_measurement_id(prefix: str) -> str:
    # Millisecond stamp plus a random suffix so concurrent calls never collide
    return f"{prefix}-{int(time.time() * 1000)}-{uuid.uuid4().hex[:8]}"


def now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


class MeasurementProvider(ABC):
    """
    An abstract base class that defines the standard interface for all
    vital-sign measurement providers. Implementations never raise for an
    unavailable measurement; they return Failed with a reason instead.
    """

    name: str = "provider"

    @abstractmethod
    async def measure_heart_rate(self, user_id: str) -> ProviderResult[Measurement]:
        """
        Takes a single heart-rate reading (beats per minute) for the user.
        """
        pass

    @abstractmethod
    async def measure_oxygen(self, user_id: str) -> ProviderResult[OxygenMeasurement]:
        """
        Takes a single blood-oxygen reading (percent, never above 100) for the user.
        """
        pass

    @abstractmethod
    async def get_trends(self, user_id: str) -> ProviderResult[TrendSeries]:
        """
        Returns the user's daily trend points in chronological order
        (the last element is the most recent).
        """
        pass
