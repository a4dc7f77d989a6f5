"""Plan router: POST /plan-viaje and its CORS/method handling."""

import logging

import httpx
from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse, Response

from plan_viaje.config import Settings, settings
from plan_viaje.schemas.plan import PlanRequest
from plan_viaje.services.airtable_client import AirtableClient, AirtableConfig
from plan_viaje.services.planner.errors import ClientInputError, PlannerError
from plan_viaje.services.planner.orchestrator import TripPlanner, new_request_id
from plan_viaje.services.retry_policy import RetryPolicy

logger = logging.getLogger(__name__)

router = APIRouter()

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "POST, OPTIONS",
    "Access-Control-Allow-Headers": "Content-Type, Authorization",
}

MISSING_LOCALITY = "Falta la zona o el municipio. Envía al menos 'zona' (por ejemplo, 'maresme')."


def get_settings() -> Settings:
    return settings


def get_transport() -> httpx.AsyncBaseTransport | None:
    """Transport for the Airtable client; None means real network."""
    return None


def error_response(
    status_code: int, message: str, request_id: str, headers: dict | None = None, **extra
) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"error": message, "requestId": request_id, **extra},
        headers={**CORS_HEADERS, **(headers or {})},
    )


@router.options("/plan-viaje")
async def plan_viaje_options():
    return Response(status_code=200, headers=CORS_HEADERS)


@router.api_route("/plan-viaje", methods=["GET", "HEAD", "PUT", "PATCH", "DELETE", "TRACE"], include_in_schema=False)
async def plan_viaje_method_not_allowed():
    return error_response(
        405,
        "Método no permitido. Usa POST.",
        new_request_id(),
        headers={"Allow": "POST, OPTIONS"},
    )


@router.post("/plan-viaje")
async def plan_viaje(
    request: Request,
    req: PlanRequest | None = None,
    cfg: Settings = Depends(get_settings),
    transport: httpx.AsyncBaseTransport | None = Depends(get_transport),
):
    """Assemble lodging, dining, experiences and beaches for a zone or municipality."""
    request_id = new_request_id()
    req = req or PlanRequest()

    try:
        if not req.has_locality:
            raise ClientInputError(MISSING_LOCALITY)

        airtable_config = AirtableConfig.from_settings(cfg)
        retry = RetryPolicy(delay=airtable_config.retry_delay)

        async with AirtableClient(airtable_config, retry=retry, transport=transport) as client:
            payload = await TripPlanner(client).plan(req, request_id)

    except PlannerError as e:
        log = logger.info if isinstance(e, ClientInputError) else logger.error
        log(f"[{request_id}] {request.method} {request.url.path} rejected: {e.message}")
        return error_response(e.status_code, e.message, request_id)
    except Exception as e:
        logger.exception(f"[{request_id}] plan-viaje failed: {e}")
        return error_response(500, "Error interno al preparar el plan de viaje.", request_id)

    return JSONResponse(status_code=200, content=payload, headers=CORS_HEADERS)
