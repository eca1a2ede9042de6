"""
Runtime configuration for the PregnancyForecast API.

Values come from the environment (a local .env is loaded first). Invalid
values log a warning and fall back to their defaults; nothing here raises.
"""
import logging
import os
from functools import lru_cache
from typing import List, Optional

from dotenv import load_dotenv
from pydantic import BaseModel, Field

logger = logging.getLogger(__name__)

_TRUE_VALUES = {'1', 'true', 'yes', 'on'}
_LOG_LEVELS = {'CRITICAL', 'ERROR', 'WARNING', 'INFO', 'DEBUG'}


class Settings(BaseModel):
    host: str = '0.0.0.0'
    port: int = 8001
    allowed_origins: List[str] = Field(default_factory=lambda: ['*'])
    log_level: str = 'INFO'
    # Fixed seed for projection jitter; None draws fresh noise per request
    projection_seed: Optional[int] = None
    # Derive the seed from the request body when no fixed seed is set
    deterministic_projection: bool = False


def load_settings() -> Settings:
    load_dotenv()

    port = _int_env('PORT', 8001)
    seed = _int_env('PROJECTION_SEED', None)

    origins = [o.strip() for o in os.getenv('ALLOWED_ORIGINS', '*').split(',') if o.strip()]

    log_level = os.getenv('LOG_LEVEL', 'INFO').upper()
    if log_level not in _LOG_LEVELS:
        logger.warning(f"LOG_LEVEL '{log_level}' not recognized, using INFO")
        log_level = 'INFO'

    return Settings(
        host=os.getenv('HOST', '0.0.0.0'),
        port=port,
        allowed_origins=origins or ['*'],
        log_level=log_level,
        projection_seed=seed,
        deterministic_projection=os.getenv('DETERMINISTIC_PROJECTION', '').lower() in _TRUE_VALUES,
    )


@lru_cache()
def get_settings() -> Settings:
    return load_settings()


def _int_env(name: str, default: Optional[int]) -> Optional[int]:
    raw = os.getenv(name)
    if raw is None or raw == '':
        return default
    try:
        return int(raw)
    except ValueError:
        logger.warning(f"{name}='{raw}' is not an integer, using {default}")
        return default
