"""Trip planner: runs the four category pipelines concurrently and assembles the plan."""

import asyncio
import json
import logging
import time
import uuid
from dataclasses import dataclass, field

from plan_viaje.schemas.plan import PlanRequest, PlanResponse
from plan_viaje.services.airtable_client import AirtableClient, AirtableError, build_locality_formula
from plan_viaje.services.planner.config import CategorySpec, PlannerConfig, planner_config
from plan_viaje.services.planner.records import normalize
from plan_viaje.services.planner.scoring import SELECTORS
from plan_viaje.services.planner.variety import make_seed, pick

logger = logging.getLogger(__name__)


def new_request_id() -> str:
    return uuid.uuid4().hex


@dataclass
class CategoryOutcome:
    """Result of one category task: either records or an error."""
    key: str
    records: list[dict] = field(default_factory=list)
    raw_count: int = 0
    error: dict | None = None

    @property
    def failed(self) -> bool:
        return self.error is not None


class TripPlanner:
    """Fans out one task per category and merges whatever settles."""

    def __init__(self, client: AirtableClient, config: PlannerConfig = planner_config):
        self.client = client
        self.config = config

    async def plan(self, req: PlanRequest, request_id: str | None = None) -> dict:
        """
        Build the plan for a validated request.

        Category failures are reported under "errors" and never abort the
        sibling categories; "ok" is False when any category failed.
        """
        request_id = request_id or new_request_id()
        start_time = time.monotonic()

        categories = self.config.categories
        results = await asyncio.gather(
            *(self._run_category(category, req, request_id) for category in categories),
            return_exceptions=True,
        )

        outcomes: dict[str, CategoryOutcome] = {}
        for category, result in zip(categories, results):
            if isinstance(result, CategoryOutcome):
                outcomes[category.key] = result
            elif isinstance(result, AirtableError):
                outcomes[category.key] = CategoryOutcome(key=category.key, error=result.to_dict())
            elif isinstance(result, Exception):
                logger.error(f"[{request_id}] {category.key} pipeline crashed: {type(result).__name__}: {result}")
                outcomes[category.key] = CategoryOutcome(
                    key=category.key, error={"message": str(result) or type(result).__name__, "status": None}
                )
            else:
                raise result

        errors = {key: o.error for key, o in outcomes.items() if o.failed}
        payload = PlanResponse(
            ok=not errors,
            requestId=request_id,
            errors=errors,
            zona=req.zona,
            municipio_preferido=req.municipio_preferido,
            tamano_perro=req.tamano_perro,
            duracion_dias=req.duracion_dias,
            tipo_viaje=req.tipo_viaje,
            **{key: o.records for key, o in outcomes.items()},
        ).model_dump()

        elapsed_ms = int((time.monotonic() - start_time) * 1000)
        self._log_summary(request_id, outcomes, elapsed_ms)
        return payload

    async def _run_category(self, category: CategorySpec, req: PlanRequest, request_id: str) -> CategoryOutcome:
        if category.key == "playas" and not req.quiere_playa:
            return CategoryOutcome(key=category.key)

        formula = build_locality_formula(req.municipio_preferido, req.zona)
        raw = await self.client.fetch_all(
            category.table,
            formula=formula,
            hard_limit=category.hard_limit,
        )

        records = normalize(raw)
        ranked = SELECTORS[category.key](records, req, self.config)
        chosen = pick(ranked, make_seed(request_id, category.seed_tag), category.pick)

        return CategoryOutcome(
            key=category.key,
            records=[c.record.to_dict() for c in chosen],
            raw_count=len(raw),
        )

    def _log_summary(self, request_id: str, outcomes: dict[str, CategoryOutcome], elapsed_ms: int) -> None:
        summary = {
            "requestId": request_id,
            "ok": not any(o.failed for o in outcomes.values()),
            "errors": {
                key: f"{o.error.get('status') or '-'} {o.error.get('message', '')[:200]}"
                for key, o in outcomes.items() if o.failed
            },
            "raw": {key: o.raw_count for key, o in outcomes.items()},
            "out": {key: len(o.records) for key, o in outcomes.items()},
            "elapsed_ms": elapsed_ms,
        }
        line = json.dumps(summary, ensure_ascii=False)
        if summary["ok"]:
            logger.info(f"plan-viaje {line}")
        else:
            logger.warning(f"plan-viaje {line}")
