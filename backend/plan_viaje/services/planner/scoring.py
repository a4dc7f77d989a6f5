"""Category filters and scorers: eligibility rules and desirability points per category.

Every selector follows the same shape:
  locality filter → category filter → integer score → stable sort desc → top-K pool

Field names read here are the Airtable column names:
  municipio, zona                         locality (all tables)
  tamanos_admitidos                       lodging: accepted dog sizes
  apto_familias, eco_certificado,
  accesible, admite_varios_perros         lodging flags
  terraza                                 dining flag
  ideal_para, tipo_actividad              experiences: audience / activity tags
  web, google_maps                        links (all tables)
"""

from dataclasses import dataclass
from typing import Callable

from plan_viaje.schemas.plan import PlanRequest
from plan_viaje.services.planner.config import PlannerConfig, planner_config
from plan_viaje.services.planner.records import CategoryRecord


@dataclass
class ScoredCandidate:
    record: CategoryRecord
    score: int = 0


def _norm(value: str | None) -> str:
    return (value or "").strip().lower()


def matches_locality(record: CategoryRecord, req: PlanRequest) -> bool:
    """Municipality match when requested, otherwise zone match."""
    if req.municipio_preferido:
        return _norm(record.text("municipio")) == _norm(req.municipio_preferido)
    if req.zona:
        return _norm(record.text("zona")) == _norm(req.zona)
    return True


def _has_tag(record: CategoryRecord, name: str, wanted: str) -> bool:
    target = _norm(wanted)
    return any(_norm(t) == target for t in record.tags(name))


def _rank(candidates: list[ScoredCandidate], pool_size: int | None) -> list[ScoredCandidate]:
    # sorted() is stable, including with reverse=True
    ranked = sorted(candidates, key=lambda c: c.score, reverse=True)
    return ranked if pool_size is None else ranked[:pool_size]


# ---------- Lodging ----------


def score_lodging(record: CategoryRecord, cfg: PlannerConfig = planner_config) -> int:
    w = cfg.lodging
    score = 0
    if record.flag("apto_familias"):
        score += w.family_friendly
    if record.flag("eco_certificado"):
        score += w.eco_certified
    if record.flag("accesible"):
        score += w.accessible
    if record.flag("admite_varios_perros"):
        score += w.multi_pet
    if record.has_value("web"):
        score += w.website
    if record.has_value("google_maps"):
        score += w.map_link
    return score


def select_lodging(
    records: list[CategoryRecord], req: PlanRequest, cfg: PlannerConfig = planner_config
) -> list[ScoredCandidate]:
    eligible = [r for r in records if matches_locality(r, req)]
    if req.tamano_perro:
        eligible = [r for r in eligible if _has_tag(r, "tamanos_admitidos", req.tamano_perro)]
    candidates = [ScoredCandidate(r, score_lodging(r, cfg)) for r in eligible]
    return _rank(candidates, cfg.category("alojamientos").pool_size)


# ---------- Dining ----------


def score_dining(record: CategoryRecord, cfg: PlannerConfig = planner_config) -> int:
    w = cfg.dining
    score = 0
    if record.flag("terraza"):
        score += w.terrace
    if record.has_value("web"):
        score += w.website
    if record.has_value("google_maps"):
        score += w.map_link
    return score


def select_dining(
    records: list[CategoryRecord], req: PlanRequest, cfg: PlannerConfig = planner_config
) -> list[ScoredCandidate]:
    candidates = [
        ScoredCandidate(r, score_dining(r, cfg))
        for r in records
        if matches_locality(r, req)
    ]
    return _rank(candidates, cfg.category("restaurantes").pool_size)


# ---------- Experiences ----------


def score_experience(record: CategoryRecord, cfg: PlannerConfig = planner_config) -> int:
    w = cfg.experiences
    score = 0
    if record.flag("eco_certificado"):
        score += w.eco_certified
    if record.has_value("web"):
        score += w.website
    if record.has_value("google_maps"):
        score += w.map_link
    if any(_norm(t) in w.outdoor_tags for t in record.tags("tipo_actividad")):
        score += w.outdoor
    return score


def select_experiences(
    records: list[CategoryRecord], req: PlanRequest, cfg: PlannerConfig = planner_config
) -> list[ScoredCandidate]:
    w = cfg.experiences
    eligible = [r for r in records if matches_locality(r, req)]
    if req.tipo_viaje in w.family_trip_types:
        for_families = [r for r in eligible if _has_tag(r, "ideal_para", w.family_audience)]
        # Never narrow down to nothing
        if for_families:
            eligible = for_families
    candidates = [ScoredCandidate(r, score_experience(r, cfg)) for r in eligible]
    return _rank(candidates, cfg.category("experiencias").pool_size)


# ---------- Beaches ----------


def select_beaches(
    records: list[CategoryRecord], req: PlanRequest, cfg: PlannerConfig = planner_config
) -> list[ScoredCandidate]:
    candidates = [ScoredCandidate(r) for r in records if matches_locality(r, req)]
    return _rank(candidates, cfg.category("playas").pool_size)


Selector = Callable[[list[CategoryRecord], PlanRequest, PlannerConfig], list[ScoredCandidate]]

SELECTORS: dict[str, Selector] = {
    "alojamientos": select_lodging,
    "restaurantes": select_dining,
    "experiencias": select_experiences,
    "playas": select_beaches,
}
