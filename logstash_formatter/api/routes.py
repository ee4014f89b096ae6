"""
API Routes
----------
Preview endpoints for pipeline debugging. Thin controllers — no encoding
logic lives here.

  POST /encode  LogEvent JSON → the Logstash line this process would emit
  GET  /config  the active tags, custom fields and time zone

Pydantic's RequestValidationError is reshaped to the error contract in main.
"""

import time
import uuid

from fastapi import APIRouter, Depends
from fastapi.responses import Response

from logstash_formatter.core.config import get_formatter_config
from logstash_formatter.core.logging import get_logger, log_request_event
from logstash_formatter.models.schemas import ConfigResponse, ErrorResponse, LogEvent
from logstash_formatter.services.encoder import EventEncoder
from logstash_formatter.services.hostname import get_host_name

router = APIRouter()
logger = get_logger(__name__)

NDJSON_MEDIA_TYPE = "application/x-ndjson"


def get_encoder() -> EventEncoder:
    return EventEncoder(get_formatter_config(), get_host_name())


@router.post(
    "/encode",
    response_class=Response,
    responses={
        200: {"content": {NDJSON_MEDIA_TYPE: {}}, "description": "The encoded event line"},
        422: {"model": ErrorResponse, "description": "Invalid event"},
    },
    summary="Render a log event as a Logstash JSON line.",
)
async def encode_event(
    event: LogEvent,
    encoder: EventEncoder = Depends(get_encoder),
) -> Response:
    request_id = str(uuid.uuid4())
    t_start = time.monotonic()

    line = encoder.encode(event)

    latency_ms = int((time.monotonic() - t_start) * 1000)
    log_request_event(
        logger, request_id, "event_encoded",
        level=event.level.name,
        has_thrown=event.thrown is not None,
        encoded_bytes=len(line.encode("utf-8")),
        latency_ms=latency_ms,
    )

    return Response(
        content=line,
        media_type=NDJSON_MEDIA_TYPE,
        headers={"X-Request-ID": request_id},
    )


@router.get("/config", response_model=ConfigResponse)
async def show_config(encoder: EventEncoder = Depends(get_encoder)) -> ConfigResponse:
    config = encoder.config
    return ConfigResponse(
        tags=list(config.tags),
        fields=dict(config.custom_fields),
        timezone=config.timezone,
    )
