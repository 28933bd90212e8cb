import random
from typing import Dict, Optional

from health_voice.adapters.base_adapter import MeasurementProvider, Ok, ProviderResult, new_measurement_id, now_iso
from health_voice.utils.models import Measurement, OxygenMeasurement, TrendSeries, UserProfile
from health_voice.utils.profiles import MOCK_USERS, lookup_profile
from health_voice.logger import get_logger

logger = get_logger(__name__)

HEART_RATE_JITTER = 3
OXYGEN_JITTER = 1
HEART_RATE_CONFIDENCE = 0.95
OXYGEN_CONFIDENCE = 0.92


class MockPPGAdapter(MeasurementProvider):
    """
    Synthetic measurement provider backed by a fixed table of user profiles.
    Readings are the profile's base value plus a small random jitter, so the
    shape is deterministic while the values vary per call. Never fails.
    """

    name = "synthetic"

    def __init__(self, profiles: Dict[str, UserProfile] = MOCK_USERS, rng: Optional[random.Random] = None):
        self.profiles = profiles
        self.rng = rng or random.Random()

    def _profile(self, user_id: str) -> UserProfile:
        profile, used_default = lookup_profile(user_id, self.profiles)
        if used_default:
            logger.info(f"No synthetic profile for user '{user_id}', using default profile.")
        return profile

    async def measure_heart_rate(self, user_id: str) -> ProviderResult[Measurement]:
        profile = self._profile(user_id)
        variation = self.rng.randint(-HEART_RATE_JITTER, HEART_RATE_JITTER)
        return Ok(Measurement(
            value=profile.current_heart_rate + variation,
            confidence=HEART_RATE_CONFIDENCE,
            measurement_id=new_measurement_id("hr"),
            timestamp=now_iso(),
        ))

    async def measure_oxygen(self, user_id: str) -> ProviderResult[OxygenMeasurement]:
        profile = self._profile(user_id)
        variation = self.rng.randint(-OXYGEN_JITTER, OXYGEN_JITTER)
        return Ok(OxygenMeasurement(
            value=min(100, profile.current_oxygen + variation),
            confidence=OXYGEN_CONFIDENCE,
            measurement_id=new_measurement_id("ox"),
            timestamp=now_iso(),
        ))

    async def get_trends(self, user_id: str) -> ProviderResult[TrendSeries]:
        profile = self._profile(user_id)
        return Ok(list(profile.trends))
