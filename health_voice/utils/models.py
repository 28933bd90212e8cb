import datetime as dt
from enum import Enum
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel
from typing import List, Optional


class Intent(str, Enum):
    HEART_RATE = "heart_rate"
    OXYGEN = "oxygen"
    TRENDS = "trends"
    UNKNOWN = "unknown"


class CamelModel(BaseModel):
    """Base for models exchanged with JS clients and the PPG service (camelCase on the wire)."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class HealthQueryRequest(CamelModel):
    query: Optional[str] = None
    user_language: str = "zu"
    user_id: str = "demo-user"


class Query(BaseModel):
    model_config = ConfigDict(frozen=True)

    text: str
    user_language: str
    user_id: str


class Measurement(CamelModel):
    # value is None when the device has not produced a reading yet
    value: Optional[float] = None
    confidence: Optional[float] = Field(default=None, ge=0, le=1)
    measurement_id: str
    timestamp: str
    status: str = "completed"


class OxygenMeasurement(Measurement):
    value: Optional[float] = Field(default=None, ge=0, le=100)


class TrendPoint(CamelModel):
    date: dt.date
    avg_heart_rate: float
    avg_oxygen: Optional[float] = None
    # Passed through as sent; only a missing label reads as "stable"
    trend: Optional[str] = None


TrendSeries = List[TrendPoint]


class UserProfile(BaseModel):
    user_id: str
    current_heart_rate: int
    current_oxygen: int = Field(..., le=100)
    trends: TrendSeries = Field(..., min_length=1)
    last_measurement: dt.datetime


class PipelineResult(CamelModel):
    original_query: str
    english_query: str
    english_response: str
    translated_response: str
    language: str
    timestamp: dt.datetime


class SynthesisRequest(BaseModel):
    text: str
    language: str = "zu-ZA"
    voice: str = "zu-ZA-ThandoNeural"
