import pytest

from src.errors import ConflictError, NotFoundError
from src.seed import seed_aggregate
from src.services import registry


@pytest.fixture
def aggregate():
    return seed_aggregate()


def category_named(aggregate, name):
    return next(c for c in aggregate["equipmentData"] if c["name"] == name)


def test_create_equipment_appends_at_end_with_ok_status(aggregate):
    item = registry.create_equipment(aggregate, "FE-002", "Predio 2", "Extintores de Incêndio", "2024-10-26")

    assert item == {"id": "FE-002", "location": "Predio 2", "lastInspected": "2024-10-26", "status": "ok"}
    items = category_named(aggregate, "Extintores de Incêndio")["items"]
    assert items[-1]["id"] == "FE-002"
    assert len(items) == 4


def test_create_equipment_twice_conflicts(aggregate):
    registry.create_equipment(aggregate, "FE-002", "Predio 2", "Extintores de Incêndio", "2024-10-26")
    with pytest.raises(ConflictError):
        registry.create_equipment(aggregate, "FE-002", "Outro lugar", "Alarmes de Fumaça", "2024-10-26")


def test_equipment_id_match_is_case_sensitive(aggregate):
    item = registry.create_equipment(aggregate, "fe-bld1-fl2-004", "Predio 2", "Extintores de Incêndio", "2024-10-26")
    assert item["id"] == "fe-bld1-fl2-004"


def test_create_equipment_unknown_category_creates_nothing(aggregate):
    names_before = [c["name"] for c in aggregate["equipmentData"]]
    with pytest.raises(NotFoundError):
        registry.create_equipment(aggregate, "SN-001", "Predio 1", "Sensores", "2024-10-26")
    assert [c["name"] for c in aggregate["equipmentData"]] == names_before


def test_delete_missing_equipment_leaves_categories_untouched(aggregate):
    before = seed_aggregate()["equipmentData"]
    with pytest.raises(NotFoundError):
        registry.delete_equipment(aggregate, "NAO-EXISTE")
    assert aggregate["equipmentData"] == before


def test_delete_equipment_removes_item(aggregate):
    registry.delete_equipment(aggregate, "SA-BLD1-FL2-015")
    assert category_named(aggregate, "Alarmes de Fumaça")["items"] == []
    with pytest.raises(NotFoundError):
        registry.find_equipment(aggregate, "SA-BLD1-FL2-015")


def test_category_names_are_unique_ignoring_case(aggregate):
    registry.create_category(aggregate, "extintores")
    with pytest.raises(ConflictError):
        registry.create_category(aggregate, "Extintores")


def test_new_category_gets_default_icon_and_no_items(aggregate):
    category = registry.create_category(aggregate, "Sensores")
    assert category == {"name": "Sensores", "icon": "new_label", "items": []}


def test_find_equipment_returns_category_and_item(aggregate):
    category, item = registry.find_equipment(aggregate, "FH-EXT-PKG-001")
    assert category["name"] == "Hidrantes de Incêndio"
    assert registry.lookup_result(category, item) == {
        "categoryName": "Hidrantes de Incêndio",
        "categoryIcon": "fire_hydrant",
        "item": item,
    }


@pytest.mark.parametrize("raw, expected", [
    ("  fe-bld1-fl2-004 ", "FE-BLD1-FL2-004"),
    ("SA-BLD1-FL2-015", "SA-BLD1-FL2-015"),
    ("", ""),
    (None, ""),
])
def test_normalize_lookup_id(raw, expected):
    assert registry.normalize_lookup_id(raw) == expected


def test_refresh_stats_derives_score_and_failures(aggregate):
    stats = registry.refresh_stats(aggregate["stats"], aggregate["equipmentData"])

    by_icon = {s["icon"]: s for s in stats}
    # 3 de 5 equipamentos 'ok', 1 em falha
    assert by_icon["verified"]["value"] == "60%"
    assert by_icon["error"]["value"] == 1
    assert by_icon["notification_important"]["value"] == 5
    # a entrada não é alterada
    assert aggregate["stats"][0]["value"] == "98%"


def test_refresh_stats_without_equipment():
    stats = registry.refresh_stats(
        [{"icon": "verified", "value": "0%"}, {"icon": "error", "value": 3}], []
    )
    assert stats == [{"icon": "verified", "value": "100%"}, {"icon": "error", "value": 0}]
