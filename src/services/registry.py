"""
Regras do cadastro de equipamentos.

As funções operam sobre o agregado em forma de dicionário (modo documento e
snapshot estático); o modo relacional reaproveita os construtores e as
mensagens daqui para manter o mesmo comportamento.
"""
import logging

from src.errors import ConflictError, NotFoundError

logger = logging.getLogger(__name__)

DEFAULT_CATEGORY_ICON = "new_label"


def normalize_lookup_id(raw_id):
    """Normaliza o ID digitado/escaneado: sem espaços nas pontas e em maiúsculas"""
    return (raw_id or "").strip().upper()


def category_key(name):
    return name.lower()


def new_equipment(equipment_id, location, today):
    """Equipamento recém-cadastrado: sempre 'ok' e inspecionado na data de criação"""
    return {
        "id": equipment_id,
        "location": location,
        "lastInspected": today,
        "status": "ok",
    }


def new_category(name):
    return {"name": name, "icon": DEFAULT_CATEGORY_ICON, "items": []}


def lookup_result(category, item):
    return {
        "categoryName": category["name"],
        "categoryIcon": category["icon"],
        "item": item,
    }


# Mensagens compartilhadas entre os modos de armazenamento
def duplicate_equipment_error(equipment_id):
    return ConflictError(f"O ID de equipamento '{equipment_id}' já existe.")


def unknown_category_error(name):
    return NotFoundError(f"Categoria '{name}' não encontrada.")


def unknown_equipment_error(equipment_id):
    return NotFoundError(f"Equipamento com ID {equipment_id} não encontrado.")


def duplicate_category_error(name):
    return ConflictError(f"A categoria '{name}' já existe.")


def find_equipment(aggregate, equipment_id):
    """Busca exata por ID em todas as categorias; retorna (categoria, item)"""
    for category in aggregate["equipmentData"]:
        for item in category["items"]:
            if item["id"] == equipment_id:
                return category, item
    raise unknown_equipment_error(equipment_id)


def create_equipment(aggregate, equipment_id, location, category_name, today):
    """Inclui o equipamento no final da lista da categoria e o retorna"""
    for category in aggregate["equipmentData"]:
        if any(item["id"] == equipment_id for item in category["items"]):
            raise duplicate_equipment_error(equipment_id)

    target = None
    for category in aggregate["equipmentData"]:
        if category["name"] == category_name:
            target = category
            break
    if target is None:
        raise unknown_category_error(category_name)

    item = new_equipment(equipment_id, location, today)
    target["items"].append(item)
    logger.info(f"Equipamento {equipment_id} incluído na categoria {category_name}")
    return item


def delete_equipment(aggregate, equipment_id):
    """Remove o equipamento; o histórico de vistorias é mantido"""
    for category in aggregate["equipmentData"]:
        for index, item in enumerate(category["items"]):
            if item["id"] == equipment_id:
                del category["items"][index]
                logger.info(f"Equipamento {equipment_id} excluído da categoria {category['name']}")
                return
    raise unknown_equipment_error(equipment_id)


def create_category(aggregate, name):
    key = category_key(name)
    if any(category_key(category["name"]) == key for category in aggregate["equipmentData"]):
        raise duplicate_category_error(name)

    category = new_category(name)
    aggregate["equipmentData"].append(category)
    logger.info(f"Categoria {name} criada")
    return category


def refresh_stats(stats, equipment_data):
    """
    Recalcula os indicadores derivados do estado dos equipamentos.

    O indicador 'verified' recebe o percentual de equipamentos 'ok' e o
    indicador 'error' a quantidade de equipamentos em falha; os demais são
    mantidos como estão.
    """
    items = [item for category in equipment_data for item in category["items"]]
    total = len(items)
    ok_count = sum(1 for item in items if item["status"] == "ok")
    fail_count = sum(1 for item in items if item["status"] == "fail")
    score = round(ok_count * 100 / total) if total else 100

    refreshed = []
    for stat in stats or []:
        stat = dict(stat)
        if stat.get("icon") == "verified":
            stat["value"] = f"{score}%"
        elif stat.get("icon") == "error":
            stat["value"] = fail_count
        refreshed.append(stat)
    return refreshed
