"""HTTP endpoint for the capture UI.

POST /parse-task takes one utterance plus optional context and answers with
the parsed item. Only blank/malformed input (400) and unexpected faults (500)
are errors; both carry an {"error": "..."} body.
"""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict, Field

from voicetask.config import settings
from voicetask.errors import InvalidInputError
from voicetask.google.maps import MapsClient
from voicetask.models import Coordinates, ParseRequest, SavedLocation
from voicetask.sentry import capture_parse_failure, init_sentry
from voicetask.services.pipeline import ParsePipeline

logger = logging.getLogger(__name__)


class LatLng(BaseModel):
    lat: float
    lng: float


class SavedLocationIn(BaseModel):
    name: str
    lat: float
    lng: float
    radius_m: float | None = None


class ParseTaskRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    text: str | None = None
    user_timezone: str | None = Field(default=None, alias="userTimezone")
    user_location: LatLng | None = Field(default=None, alias="userLocation")
    saved_locations: list[SavedLocationIn] = Field(default_factory=list, alias="savedLocations")
    default_radius: float | None = Field(default=None, alias="defaultRadius")

    def to_parse_request(self) -> ParseRequest:
        radius = self.default_radius or settings.default_radius_m
        return ParseRequest(
            text=self.text or "",
            user_timezone=self.user_timezone,
            user_location=(
                Coordinates(self.user_location.lat, self.user_location.lng)
                if self.user_location
                else None
            ),
            saved_locations=[
                SavedLocation(name=s.name, lat=s.lat, lng=s.lng, radius_m=s.radius_m or radius)
                for s in self.saved_locations
            ],
            default_radius=self.default_radius,
        )


_maps_client: MapsClient | None = None
_pipeline: ParsePipeline | None = None


async def get_pipeline() -> ParsePipeline:
    """Shared pipeline, built on first use inside the event loop."""
    global _maps_client, _pipeline
    if _pipeline is None:
        if settings.has_google_maps:
            _maps_client = MapsClient()
        _pipeline = ParsePipeline(maps_client=_maps_client)
    return _pipeline


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    global _maps_client, _pipeline
    # No-op without SENTRY_DSN, and when the CLI already started it
    init_sentry()
    yield
    if _maps_client:
        await _maps_client.close()
    _maps_client = None
    _pipeline = None


def error_response(message: str, status_code: int) -> JSONResponse:
    return JSONResponse({"error": message}, status_code=status_code)


app = FastAPI(title="voicetask", lifespan=lifespan)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_allow_origins,
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["*"],
)


@app.get("/health")
async def health() -> dict:
    return {"status": "ok", "maps": settings.has_google_maps}


@app.post("/parse-task")
async def parse_task(request: Request, pipeline: ParsePipeline = Depends(get_pipeline)):
    try:
        payload = ParseTaskRequest.model_validate(await request.json())
    except ValueError as e:
        logger.warning(f"Rejected malformed request body: {type(e).__name__}")
        return error_response("Invalid request body", 400)

    parse_request = payload.to_parse_request()
    try:
        result = await pipeline.parse(parse_request)
    except InvalidInputError as e:
        return error_response(e.message, 400)
    except Exception as e:
        logger.exception(f"Error parsing task: {e}")
        capture_parse_failure(e, parse_request)
        return error_response("Failed to parse task", 500)

    return result.to_dict()
