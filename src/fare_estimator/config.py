"""Runtime settings read from the environment (and a ``.env`` file if present)."""

from __future__ import annotations

import logging
import os

from dotenv import load_dotenv
from pydantic import BaseModel

from .models import Coordinate, PricingConfig, PricingMode

DEFAULT_HOME = Coordinate(lat=-6.242476645426871, lon=107.07192446114526)
DEFAULT_MAP_CENTER = Coordinate(lat=-6.2088, lon=106.8456)
DEFAULT_ZOOM = 10

NOMINATIM_URL = "https://nominatim.openstreetmap.org"
OSRM_URL = "https://router.project-osrm.org"
USER_AGENT = "fare-estimator/0.1"

_TRUTHY = {"1", "true", "yes", "on"}


class Settings(BaseModel):
    home: Coordinate = DEFAULT_HOME
    pricing: PricingConfig = PricingConfig()
    nominatim_url: str = NOMINATIM_URL
    osrm_url: str = OSRM_URL
    user_agent: str = USER_AGENT
    accept_language: str | None = None
    # None means no timeout, matching a browser fetch
    request_timeout: float | None = None
    latest_only: bool = False
    map_center: Coordinate = DEFAULT_MAP_CENTER
    map_zoom: int = DEFAULT_ZOOM
    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> Settings:
        """Build settings from ``FARE_*`` environment variables."""
        load_dotenv()
        env = os.environ

        home = DEFAULT_HOME
        if "FARE_HOME_LAT" in env or "FARE_HOME_LON" in env:
            home = Coordinate(
                lat=float(env.get("FARE_HOME_LAT", DEFAULT_HOME.lat)),
                lon=float(env.get("FARE_HOME_LON", DEFAULT_HOME.lon)),
            )

        defaults = PricingConfig()
        pricing = PricingConfig(
            mode=PricingMode(env.get("FARE_PRICING_MODE", defaults.mode.value)),
            base_fee=float(env.get("FARE_BASE_FEE", defaults.base_fee)),
            per_km_rate=float(env.get("FARE_PER_KM_RATE", defaults.per_km_rate)),
            rounding_unit=float(env.get("FARE_ROUNDING_UNIT", defaults.rounding_unit)),
        )

        timeout = env.get("FARE_REQUEST_TIMEOUT")
        return cls(
            home=home,
            pricing=pricing,
            nominatim_url=env.get("FARE_NOMINATIM_URL", NOMINATIM_URL),
            osrm_url=env.get("FARE_OSRM_URL", OSRM_URL),
            user_agent=env.get("FARE_USER_AGENT", USER_AGENT),
            accept_language=env.get("FARE_ACCEPT_LANGUAGE") or None,
            request_timeout=float(timeout) if timeout else None,
            latest_only=env.get("FARE_LATEST_ONLY", "").lower() in _TRUTHY,
            log_level=env.get("FARE_LOG_LEVEL", "INFO").upper(),
        )


def configure_logging(level: str = "INFO") -> None:
    """Install a root handler once; later calls only adjust the level."""
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    logging.getLogger().setLevel(level)
