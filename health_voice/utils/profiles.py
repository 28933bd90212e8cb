from datetime import datetime, timezone
from typing import Dict, Tuple

from health_voice.utils.models import TrendPoint, UserProfile

DEFAULT_USER_ID = "demo-user"

# Read-only at request time
MOCK_USERS: Dict[str, UserProfile] = {
    DEFAULT_USER_ID: UserProfile(
        user_id=DEFAULT_USER_ID,
        current_heart_rate=72,
        current_oxygen=98,
        trends=[
            TrendPoint(date="2025-07-30", avg_heart_rate=68, avg_oxygen=97, trend="stable"),
            TrendPoint(date="2025-07-31", avg_heart_rate=70, avg_oxygen=98, trend="improving"),
            TrendPoint(date="2025-08-01", avg_heart_rate=71, avg_oxygen=98, trend="stable"),
            TrendPoint(date="2025-08-02", avg_heart_rate=72, avg_oxygen=98, trend="stable"),
        ],
        last_measurement=datetime.now(timezone.utc),
    ),
}


def lookup_profile(user_id: str, profiles: Dict[str, UserProfile] = MOCK_USERS) -> Tuple[UserProfile, bool]:
    """
    Returns the profile for user_id and whether the default profile was used
    in its place. Unknown users always get the demo-user profile.
    """
    if user_id in profiles:
        return profiles[user_id], False
    return profiles[DEFAULT_USER_ID], True
