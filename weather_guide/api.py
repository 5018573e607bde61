"""HTTP API for the weather guide: conditions, persona advice, travel advisory and the tip board."""

import hmac
import time
from typing import List, Optional

import redis
import requests
from fastapi import APIRouter, Depends, Header, HTTPException, Query, status
from pydantic import BaseModel, Field

from .advice_engine import generate_advice
from .config import settings
from .data_sources import INDIAN_CITIES, WeatherProviderError, build_data_source
from .daylight import local_hour, weather_theme
from .domain import (
    AdviceMessage,
    LocalTip,
    PersonaMode,
    SnapshotSource,
    TipCategory,
    TravelAdvisory,
    WeatherSnapshot,
    WeatherTheme,
)
from .tip_manager import add_tip, delete_tip, like_tip, list_tips
from .travel_advisory import community_prompt, generate_travel_advisory, welcome_message
from .weather_service import WeatherLookup, get_weather
from utils.logging_utils import get_tagged_logger, mask_url

logger = get_tagged_logger(__name__, tag="weather_guide/api")

_redis_client = None
if settings.api_key_redis_url:
    try:
        _redis_client = redis.Redis.from_url(settings.api_key_redis_url)
        logger.info("API key checks will use Redis backend",
                    extra={"redis_url": mask_url(settings.api_key_redis_url)})
    except (redis.RedisError, ValueError) as exc:
        logger.warning("Failed to connect to Redis for API key checks; falling back to static key",
                       extra={"error": str(exc)})


def require_api_key(x_api_key: str | None = Header(default=None)):
    """
    Validate X-API-Key header against Redis (if configured) or the static api_key setting.
    """
    # No key configured anywhere: open access (dev/default mode).
    if not settings.api_key and not _redis_client:
        return

    if not x_api_key:
        logger.debug("No API key provided")
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Missing API key")

    if _redis_client:
        logger.debug("Checking API key against Redis")
        try:
            if _redis_client.sismember(settings.api_key_redis_set, x_api_key):
                return
        except redis.RedisError as e:
            logger.warning("Redis API key lookup error; falling back to static key",
                           extra={"error": str(e)})

    if settings.api_key and hmac.compare_digest(str(x_api_key), str(settings.api_key)):
        return

    logger.debug("Invalid API key provided")
    raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid API key")


router = APIRouter(dependencies=[Depends(require_api_key)])
DATA_SOURCE = build_data_source(settings)


class CitiesResponse(BaseModel):
    """Static list of suggested locations."""
    cities: List[str]


class WeatherResponse(BaseModel):
    """Current snapshot with its origin and presentation theme."""
    snapshot: WeatherSnapshot
    source: SnapshotSource
    error: Optional[str] = None
    theme: WeatherTheme


class AdviceRequest(BaseModel):
    """Run the advice engine over a snapshot the client already holds."""
    snapshot: WeatherSnapshot
    mode: PersonaMode = PersonaMode.GENERAL
    hour: Optional[int] = Field(default=None, ge=0, le=23)


class AdviceResponse(BaseModel):
    """Ordered advice batch; messages[0] is always the greeting."""
    snapshot: WeatherSnapshot
    source: Optional[SnapshotSource] = None
    mode: PersonaMode
    hour: int
    messages: List[AdviceMessage]


class TravelAdvisoryResponse(BaseModel):
    """Everything the local-guide panel shows on open."""
    snapshot: WeatherSnapshot
    source: Optional[SnapshotSource] = None
    welcome: str
    community_prompt: str
    advisory: TravelAdvisory


class TipRequest(BaseModel):
    """Incoming community tip."""
    location: str
    author: str
    content: str
    category: TipCategory = TipCategory.GENERAL


class TipListResponse(BaseModel):
    location: str
    tips: List[LocalTip]


def _now_epoch() -> float:
    return time.time()


def _lookup(city: str | None, lat: float | None, lon: float | None) -> WeatherLookup:
    """Resolve query parameters to a snapshot, mapping provider failures to 502."""
    if (lat is None) != (lon is None):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST,
                            detail="Provide both lat and lon, or neither.")
    try:
        return get_weather(city=city, latitude=lat, longitude=lon, data_source=DATA_SOURCE)
    except (WeatherProviderError, requests.RequestException) as exc:
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=f"Weather provider error: {exc}")


def _resolve_hour(snapshot: WeatherSnapshot, hour: int | None) -> int:
    """Caller-supplied hour, else the current hour at the snapshot's location."""
    if hour is not None:
        return hour
    return local_hour(snapshot, _now_epoch())


@router.get("/cities", response_model=CitiesResponse)
def get_cities():
    """Return the suggested city list for location search."""
    return CitiesResponse(cities=list(INDIAN_CITIES))


@router.get("/weather", response_model=WeatherResponse)
def get_current_weather(city: Optional[str] = None,
                        lat: Optional[float] = Query(default=None, ge=-90, le=90),
                        lon: Optional[float] = Query(default=None, ge=-180, le=180)):
    """Return current conditions plus the day/night theme."""
    lookup = _lookup(city, lat, lon)
    logger.info("Served weather", extra={"location": lookup.snapshot.location, "source": lookup.source.value})
    return WeatherResponse(
        snapshot=lookup.snapshot,
        source=lookup.source,
        error=lookup.error,
        theme=weather_theme(lookup.snapshot, _now_epoch()),
    )


@router.get("/advice", response_model=AdviceResponse)
def get_advice(city: Optional[str] = None,
               lat: Optional[float] = Query(default=None, ge=-90, le=90),
               lon: Optional[float] = Query(default=None, ge=-180, le=180),
               mode: PersonaMode = PersonaMode.GENERAL,
               hour: Optional[int] = Query(default=None, ge=0, le=23)):
    """Fetch conditions for a location and generate persona advice."""
    lookup = _lookup(city, lat, lon)
    resolved_hour = _resolve_hour(lookup.snapshot, hour)
    messages = generate_advice(lookup.snapshot, mode, resolved_hour)
    logger.info("Generated advice",
                extra={"location": lookup.snapshot.location, "mode": mode.value, "count": len(messages)})
    return AdviceResponse(
        snapshot=lookup.snapshot,
        source=lookup.source,
        mode=mode,
        hour=resolved_hour,
        messages=messages,
    )


@router.post("/advice", response_model=AdviceResponse)
def post_advice(req: AdviceRequest):
    """Re-run the engine for a held snapshot, e.g. after the persona changes."""
    resolved_hour = _resolve_hour(req.snapshot, req.hour)
    messages = generate_advice(req.snapshot, req.mode, resolved_hour)
    return AdviceResponse(snapshot=req.snapshot, mode=req.mode, hour=resolved_hour, messages=messages)


def _travel_response(snapshot: WeatherSnapshot, source: SnapshotSource | None) -> TravelAdvisoryResponse:
    return TravelAdvisoryResponse(
        snapshot=snapshot,
        source=source,
        welcome=welcome_message(snapshot.location),
        community_prompt=community_prompt(),
        advisory=generate_travel_advisory(snapshot),
    )


@router.get("/travel-advisory", response_model=TravelAdvisoryResponse)
def get_travel_advisory(city: Optional[str] = None,
                        lat: Optional[float] = Query(default=None, ge=-90, le=90),
                        lon: Optional[float] = Query(default=None, ge=-180, le=180)):
    """Fetch conditions and build the local-guide advisory."""
    lookup = _lookup(city, lat, lon)
    return _travel_response(lookup.snapshot, lookup.source)


@router.post("/travel-advisory", response_model=TravelAdvisoryResponse)
def post_travel_advisory(snapshot: WeatherSnapshot):
    """Build the local-guide advisory for a held snapshot."""
    return _travel_response(snapshot, None)


@router.get("/tips", response_model=TipListResponse)
def get_tips(location: str):
    """List community tips for a location, newest first."""
    return TipListResponse(location=location, tips=list_tips(location))


@router.post("/tips", response_model=LocalTip, status_code=status.HTTP_201_CREATED)
def create_tip(req: TipRequest):
    """Post a community tip."""
    try:
        return add_tip(req.location, req.author, req.content, req.category)
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc))


@router.post("/tips/{tip_id}/like", response_model=LocalTip)
def like(tip_id: str):
    """Add a like to a tip."""
    tip = like_tip(tip_id)
    if tip is None:
        raise HTTPException(status_code=404, detail="Unknown tip ID")
    return tip


@router.delete("/tips/{tip_id}", status_code=status.HTTP_204_NO_CONTENT)
def remove_tip(tip_id: str):
    """Delete a tip."""
    if not delete_tip(tip_id):
        raise HTTPException(status_code=404, detail="Unknown tip ID")
