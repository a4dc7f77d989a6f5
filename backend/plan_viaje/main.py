import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.encoders import jsonable_encoder

from plan_viaje.config import settings

# ─── Logging setup (console, plus file when LOG_FILE is set) ───
_log_level = getattr(logging, settings.log_level.upper(), logging.INFO)

_handlers: list[logging.Handler] = [logging.StreamHandler()]
if settings.log_file:
    _log_path = Path(settings.log_file)
    _log_path.parent.mkdir(parents=True, exist_ok=True)
    _handlers.append(
        RotatingFileHandler(
            _log_path,
            maxBytes=10 * 1024 * 1024,  # 10 MB
            backupCount=5,
            encoding="utf-8",
        )
    )

logging.basicConfig(
    level=_log_level,
    format="%(asctime)s %(levelname)-8s [%(name)s] %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
    handlers=_handlers,
)

# Quiet noisy libraries
logging.getLogger("httpcore").setLevel(logging.WARNING)
logging.getLogger("httpx").setLevel(logging.WARNING)
logging.getLogger("uvicorn.access").setLevel(logging.WARNING)

from plan_viaje.routers import plan
from plan_viaje.routers.plan import error_response
from plan_viaje.services.planner.orchestrator import new_request_id

logger = logging.getLogger(__name__)


app = FastAPI(
    title="plan-viaje",
    description="Pet-friendly travel plan assembled from Airtable",
    version="0.1.0",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origin_list,
    allow_methods=["POST", "OPTIONS"],
    allow_headers=["Content-Type", "Authorization"],
)

app.include_router(plan.router, tags=["plan"])


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    request_id = new_request_id()
    logger.info(f"[{request_id}] {request.method} {request.url.path} invalid body: {exc.errors()}")
    return error_response(
        400,
        "Cuerpo de la petición no válido.",
        request_id,
        detalle=jsonable_encoder(exc.errors()),
    )


@app.get("/health")
async def health():
    return {"status": "ok"}
