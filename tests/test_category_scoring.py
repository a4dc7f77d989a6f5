import copy

from conftest import rec

from plan_viaje.schemas.plan import PlanRequest
from plan_viaje.services.planner.records import CategoryRecord, normalize
from plan_viaje.services.planner.scoring import (
    matches_locality,
    score_dining,
    score_experience,
    score_lodging,
    select_beaches,
    select_dining,
    select_experiences,
    select_lodging,
)


def test_locality_is_case_and_whitespace_insensitive():
    r = CategoryRecord(id="r1", fields={"municipio": " Sitges ", "zona": "garraf"})
    assert matches_locality(r, PlanRequest(municipio_preferido="sitges"))
    assert matches_locality(r, PlanRequest(zona="GARRAF "))


def test_municipio_takes_precedence_over_zona():
    r = CategoryRecord(id="r1", fields={"municipio": "Calella", "zona": "maresme"})
    assert not matches_locality(r, PlanRequest(zona="maresme", municipio_preferido="Mataró"))
    assert matches_locality(r, PlanRequest(zona="garraf", municipio_preferido="calella"))


def test_locality_without_criteria_matches_everything():
    r = CategoryRecord(id="r1", fields={})
    assert matches_locality(r, PlanRequest())


def test_lodging_score_components():
    full = CategoryRecord(id="r", fields={
        "apto_familias": True, "eco_certificado": True, "accesible": True,
        "admite_varios_perros": True, "web": "https://x", "google_maps": "https://m",
    })
    assert score_lodging(full) == 9
    assert score_lodging(CategoryRecord(id="e", fields={})) == 0
    assert score_lodging(CategoryRecord(id="f", fields={"apto_familias": True})) == 3


def test_dining_and_experience_scores():
    assert score_dining(CategoryRecord(id="d", fields={"terraza": True, "web": "w", "google_maps": "m"})) == 4
    exp = CategoryRecord(id="x", fields={
        "eco_certificado": True, "web": "w", "google_maps": "m", "tipo_actividad": ["Hiking", "kayak"],
    })
    assert score_experience(exp) == 5
    assert score_experience(CategoryRecord(id="y", fields={"tipo_actividad": ["museo"]})) == 0


def test_maresme_mediano_lodging_scenario():
    qualifying = [
        rec(f"ok{i}", zona="maresme", tamanos_admitidos=["pequeño", "mediano"])
        for i in range(5)
    ]
    wrong_size = [
        rec(f"bad{i}", zona="maresme", tamanos_admitidos=["grande"])
        for i in range(3)
    ]
    req = PlanRequest(zona="maresme", tamano_perro="mediano")
    ranked = select_lodging(normalize(qualifying + wrong_size), req)
    ids = {c.record.id for c in ranked}
    assert ids == {f"ok{i}" for i in range(5)}


def test_lodging_without_size_keeps_all_local_records():
    raw = [rec("a", zona="maresme"), rec("b", zona="garraf")]
    ranked = select_lodging(normalize(raw), PlanRequest(zona="maresme"))
    assert [c.record.id for c in ranked] == ["a"]


def test_sort_is_descending_and_stable_for_ties():
    raw = [
        rec("t1", zona="z"),
        rec("hi", zona="z", terraza=True),
        rec("t2", zona="z"),
        rec("t3", zona="z"),
    ]
    ranked = select_dining(normalize(raw), PlanRequest(zona="z"))
    assert [c.record.id for c in ranked] == ["hi", "t1", "t2", "t3"]


def test_pool_sizes_are_capped():
    raw = [rec(f"r{i}", zona="z") for i in range(50)]
    records = normalize(raw)
    req = PlanRequest(zona="z")
    assert len(select_lodging(records, req)) == 12
    assert len(select_dining(records, req)) == 15
    assert len(select_experiences(records, req)) == 30
    assert len(select_beaches(records, req)) == 50


def test_family_experiences_are_narrowed_when_possible():
    raw = [
        rec("fam", municipio="Calella", ideal_para=["familias"]),
        rec("solo", municipio="Calella", ideal_para=["parejas"], eco_certificado=True),
    ]
    ranked = select_experiences(normalize(raw), PlanRequest(municipio_preferido="Calella", tipo_viaje="familias"))
    assert [c.record.id for c in ranked] == ["fam"]


def test_family_filter_falls_back_when_nothing_matches():
    raw = [
        rec(f"e{i}", municipio="Calella", ideal_para=["parejas"], web="w" if i % 2 else "")
        for i in range(10)
    ]
    req = PlanRequest(municipio_preferido="Calella", tipo_viaje="familias")
    ranked = select_experiences(normalize(raw), req)
    assert len(ranked) == 10
    assert [c.score for c in ranked] == sorted((c.score for c in ranked), reverse=True)


def test_family_filter_only_for_family_trip_types():
    raw = [
        rec("fam", zona="z", ideal_para=["familias"]),
        rec("other", zona="z", ideal_para=["parejas"]),
    ]
    ranked = select_experiences(normalize(raw), PlanRequest(zona="z", tipo_viaje="aventura"))
    assert {c.record.id for c in ranked} == {"fam", "other"}


def test_select_is_idempotent_and_does_not_mutate_input():
    raw = [
        rec(f"r{i}", zona="maresme", tamanos_admitidos=["mediano"], apto_familias=i % 3 == 0, web="w")
        for i in range(20)
    ]
    records = normalize(raw)
    snapshot = copy.deepcopy(records)
    req = PlanRequest(zona="maresme", tamano_perro="mediano")

    first = [(c.record.id, c.score) for c in select_lodging(records, req)]
    second = [(c.record.id, c.score) for c in select_lodging(records, req)]
    assert first == second
    assert records == snapshot
