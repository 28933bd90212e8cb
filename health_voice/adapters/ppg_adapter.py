import httpx
from pydantic import BaseModel, ValidationError
from typing import Any, Dict, Optional, Type

from health_voice.adapters.base_adapter import (
    Failed, MeasurementProvider, Ok, ProviderFailure, ProviderResult, new_measurement_id, now_iso,
)
from health_voice.utils.models import Measurement, OxygenMeasurement, TrendPoint, TrendSeries
from health_voice.logger import get_logger

logger = get_logger(__name__)

TRIGGER_REASON = "voice"


# --- PPG Service Adapter Implementation ---
class PPGServiceAdapter(MeasurementProvider):
    """
    Adapter for the remote PPG measurement service. Every call is bounded by
    `timeout` seconds; timeouts, bad statuses and malformed payloads come back
    as Failed so the caller can fall back to synthetic data.
    """

    name = "remote"

    def __init__(self, base_url: str, timeout: float = 5.0, transport: Optional[httpx.AsyncBaseTransport] = None):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._transport = transport

    async def measure_heart_rate(self, user_id: str) -> ProviderResult[Measurement]:
        try:
            payload = await self._request("POST", "/api/ppg/heartrate", json=self._trigger_body(user_id))
            return Ok(self._to_measurement(payload, "heartRate", Measurement, "hr"))
        except ProviderFailure as e:
            logger.warning(f"Heart rate measurement failed for user '{user_id}': {e}")
            return Failed(str(e))

    async def measure_oxygen(self, user_id: str) -> ProviderResult[OxygenMeasurement]:
        try:
            payload = await self._request("POST", "/api/ppg/oxygen", json=self._trigger_body(user_id))
            return Ok(self._to_measurement(payload, "oxygenLevel", OxygenMeasurement, "ox"))
        except ProviderFailure as e:
            logger.warning(f"Blood oxygen measurement failed for user '{user_id}': {e}")
            return Failed(str(e))

    async def get_trends(self, user_id: str) -> ProviderResult[TrendSeries]:
        try:
            payload = await self._request("GET", "/api/health/trends", params={"userId": user_id})
            return Ok(self._to_trends(payload))
        except ProviderFailure as e:
            logger.warning(f"Trend lookup failed for user '{user_id}': {e}")
            return Failed(str(e))

    async def _request(self, method: str, path: str, **kwargs) -> Any:
        url = f"{self.base_url}{path}"
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
                response = await client.request(method, url, **kwargs)
                response.raise_for_status()
                return response.json()
        except httpx.TimeoutException as e:
            raise ProviderFailure(f"Timed out after {self.timeout}s calling {url}") from e
        except httpx.HTTPStatusError as e:
            raise ProviderFailure(f"{url} returned HTTP {e.response.status_code}") from e
        except httpx.RequestError as e:
            raise ProviderFailure(f"Could not reach {url}: {e}") from e
        except ValueError as e:
            raise ProviderFailure(f"{url} returned a non-JSON body") from e

    @staticmethod
    def _trigger_body(user_id: str) -> Dict[str, str]:
        return {"userId": user_id, "triggeredBy": TRIGGER_REASON}

    @staticmethod
    def _to_measurement(payload: Any, field: str, model: Type[BaseModel], id_prefix: str) -> BaseModel:
        """
        Validates a measurement payload. The reading field must be present; it may be
        null while the device waits for a finger, but otherwise must be a number.
        A missing id or timestamp is filled in locally and confidence is optional,
        so a bare reading such as {"heartRate": 81} is still a usable answer.
        """
        if not isinstance(payload, dict) or field not in payload:
            raise ProviderFailure(f"Measurement payload is missing '{field}'")
        value = payload[field]
        if value is not None and (isinstance(value, bool) or not isinstance(value, (int, float))):
            raise ProviderFailure(f"Measurement field '{field}' is not numeric: {value!r}")

        data = {k: v for k, v in payload.items() if k != field}
        data["value"] = value
        data["measurementId"] = str(data["measurementId"]) if data.get("measurementId") is not None else new_measurement_id(id_prefix)
        data["timestamp"] = str(data["timestamp"]) if data.get("timestamp") is not None else now_iso()
        if data.get("status") is None:
            data.pop("status", None)
        try:
            return model.model_validate(data)
        except ValidationError as e:
            raise ProviderFailure(f"Malformed measurement payload: {e}") from e

    @staticmethod
    def _to_trends(payload: Any) -> TrendSeries:
        if not isinstance(payload, list):
            raise ProviderFailure("Trends payload is not a list")
        try:
            return [TrendPoint.model_validate(entry) for entry in payload]
        except ValidationError as e:
            raise ProviderFailure(f"Malformed trend entry: {e}") from e
