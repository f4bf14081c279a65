import logging

import pytest

from conftest import FIXED_NOW, FIXED_TODAY
from src.errors import NotFoundError, ValidationError
from src.schemas import InspectionRequest
from src.seed import seed_aggregate
from src.services import recorder, registry

logger = logging.getLogger("test_inspection")

CHECKLIST = [{"id": "c1", "label": "x", "checked": True}]


def inspection(**fields):
    data = {"equipmentId": "FE-001", "status": "Falha", "checklistItems": CHECKLIST}
    data.update(fields)
    return InspectionRequest.model_validate(data)


@pytest.mark.parametrize("verdict, status", [
    ("OK", "ok"),
    ("Falha", "fail"),
    ("Pendente", "maintenance"),
    ("qualquer coisa", "maintenance"),
    ("ok", "maintenance"),
])
def test_status_mapping(verdict, status):
    assert recorder.equipment_status_for(verdict) == status


def test_inspection_id_and_date_format():
    assert recorder.inspection_id(FIXED_NOW) == "insp_1729950312345"
    assert recorder.inspection_id(FIXED_NOW, {"insp_1729950312345"}) == "insp_1729950312346"
    assert recorder.format_instant(FIXED_NOW) == "2024-10-26T13:45:12.345Z"


def test_evidence_policy_only_when_enforced():
    recorder.check_evidence(inspection(), enforce=False)
    recorder.check_evidence(inspection(status="OK"), enforce=True)
    recorder.check_evidence(inspection(evidencePhoto="data:image/jpeg;base64,AAA"), enforce=True)
    with pytest.raises(ValidationError):
        recorder.check_evidence(inspection(), enforce=True)


def test_submit_on_aggregate_updates_equipment_and_history():
    aggregate = seed_aggregate()
    registry.create_equipment(aggregate, "FE-001", "Predio 1", "Extintores de Incêndio", "2024-01-01")

    record, equipment = recorder.submit_inspection(aggregate, inspection(), FIXED_NOW)

    assert equipment["status"] == "fail"
    assert equipment["lastInspected"] == FIXED_TODAY
    assert aggregate["inspectionHistory"] == [record]
    assert record["checklistItems"] == CHECKLIST
    assert record["inspectionDate"] == "2024-10-26T13:45:12.345Z"


def test_submit_on_aggregate_unknown_equipment():
    aggregate = seed_aggregate()
    with pytest.raises(NotFoundError):
        recorder.submit_inspection(aggregate, inspection(equipmentId="NAO-EXISTE"), FIXED_NOW)
    assert aggregate["inspectionHistory"] == []


# Testes contra os armazenamentos (relacional e documento)

def test_failed_inspection_scenario(store):
    store.create_equipment("FE-001", "Predio 1", "Extintores de Incêndio")

    result = store.submit_inspection(
        {"equipmentId": "FE-001", "status": "Falha", "checklistItems": CHECKLIST}
    )

    assert result["updatedEquipment"]["status"] == "fail"
    assert result["updatedEquipment"]["lastInspected"] == FIXED_TODAY
    saved = result["savedInspection"]
    assert saved["status"] == "Falha"
    assert saved["checklistItems"] == CHECKLIST

    aggregate = store.get_aggregate()
    assert aggregate["inspectionHistory"] == [saved]
    found = store.find_equipment("FE-001")
    assert found["item"]["status"] == "fail"
    assert found["item"]["lastInspected"] == FIXED_TODAY


def test_checklist_snapshot_is_a_copy(store):
    checklist = [{"id": "c1", "label": "Lacre intacto?", "checked": False}]
    result = store.submit_inspection(
        {"equipmentId": "FH-EXT-PKG-001", "status": "OK", "checklistItems": checklist}
    )
    checklist[0]["checked"] = True
    checklist.append({"id": "c2", "label": "novo", "checked": True})

    stored = store.get_aggregate()["inspectionHistory"][0]
    assert stored["checklistItems"] == [{"id": "c1", "label": "Lacre intacto?", "checked": False}]
    assert result["savedInspection"]["checklistItems"] == stored["checklistItems"]


def test_empty_checklist_is_accepted(store):
    result = store.submit_inspection(
        {"equipmentId": "FH-EXT-PKG-001", "status": "Pendente", "checklistItems": []}
    )
    assert result["updatedEquipment"]["status"] == "maintenance"
    assert result["savedInspection"]["checklistItems"] == []


@pytest.mark.parametrize("payload", [
    {"status": "OK", "checklistItems": []},
    {"equipmentId": "FH-EXT-PKG-001", "checklistItems": []},
    {"equipmentId": "FH-EXT-PKG-001", "status": "OK"},
    {"equipmentId": "", "status": "OK", "checklistItems": []},
])
def test_incomplete_inspection_is_rejected(store, payload):
    with pytest.raises(ValidationError):
        store.submit_inspection(payload)
    assert store.get_aggregate()["inspectionHistory"] == []


def test_unknown_equipment_writes_nothing(store):
    before = store.get_aggregate()
    with pytest.raises(NotFoundError):
        store.submit_inspection({"equipmentId": "NAO-EXISTE", "status": "OK", "checklistItems": []})
    assert store.get_aggregate() == before


def test_failure_mid_transaction_leaves_no_trace(store, monkeypatch):
    before = store.get_aggregate()

    def broken_build_record(*args, **kwargs):
        raise RuntimeError("falha simulada ao montar o registro")

    monkeypatch.setattr(recorder, "build_record", broken_build_record)
    with pytest.raises(RuntimeError):
        store.submit_inspection({"equipmentId": "FE-BLD1-FL2-004", "status": "Falha", "checklistItems": CHECKLIST})

    after = store.get_aggregate()
    assert after["inspectionHistory"] == before["inspectionHistory"] == []
    assert after["equipmentData"] == before["equipmentData"]


def test_same_instant_inspections_get_distinct_ids(store):
    first = store.submit_inspection({"equipmentId": "FH-EXT-PKG-001", "status": "OK", "checklistItems": []})
    second = store.submit_inspection({"equipmentId": "FH-EXT-PKG-001", "status": "Falha", "checklistItems": []})

    assert first["savedInspection"]["id"] == "insp_1729950312345"
    assert second["savedInspection"]["id"] == "insp_1729950312346"
    history = store.get_aggregate()["inspectionHistory"]
    assert [h["id"] for h in history] == ["insp_1729950312345", "insp_1729950312346"]
    assert store.find_equipment("FH-EXT-PKG-001")["item"]["status"] == "fail"


def test_history_survives_equipment_deletion(store):
    store.submit_inspection({"equipmentId": "SA-BLD1-FL2-015", "status": "OK", "checklistItems": []})
    store.delete_equipment("SA-BLD1-FL2-015")

    history = store.get_aggregate()["inspectionHistory"]
    assert [h["equipmentId"] for h in history] == ["SA-BLD1-FL2-015"]
    with pytest.raises(NotFoundError):
        store.submit_inspection({"equipmentId": "SA-BLD1-FL2-015", "status": "OK", "checklistItems": []})


def test_evidence_required_when_configured(store):
    store.require_failure_evidence = True
    with pytest.raises(ValidationError):
        store.submit_inspection({"equipmentId": "FH-EXT-PKG-001", "status": "Falha", "checklistItems": []})

    result = store.submit_inspection({
        "equipmentId": "FH-EXT-PKG-001",
        "status": "Falha",
        "checklistItems": [],
        "evidencePhoto": "data:image/jpeg;base64,AAA",
    })
    assert result["savedInspection"]["evidencePhoto"] == "data:image/jpeg;base64,AAA"
    logger.info(f"Vistoria com evidência salva: {result['savedInspection']['id']}")
