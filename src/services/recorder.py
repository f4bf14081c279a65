"""
Registro de vistorias.

Cada vistoria gera um registro imutável no histórico e, na mesma operação,
atualiza status e data da última inspeção do equipamento vistoriado.
"""
import logging
from datetime import datetime, timedelta, timezone

from src.errors import ValidationError
from src.services import registry

logger = logging.getLogger(__name__)

# Veredito do checklist -> status operacional do equipamento
STATUS_MAP = {
    "OK": "ok",
    "Falha": "fail",
}
FALLBACK_STATUS = "maintenance"

EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


def equipment_status_for(verdict):
    """Mapeamento total: OK -> ok, Falha -> fail, qualquer outro -> maintenance"""
    return STATUS_MAP.get(verdict, FALLBACK_STATUS)


def requires_evidence(verdict):
    return verdict == "Falha"


def check_evidence(payload, enforce):
    if enforce and requires_evidence(payload.status) and not payload.evidencePhoto:
        raise ValidationError("Foto de evidência é obrigatória para vistorias com falha.")


def today_for(now):
    return now.date().isoformat()


def format_instant(now):
    """ISO-8601 em UTC com milissegundos e sufixo Z"""
    return now.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def inspection_id(now, taken=()):
    """Gera 'insp_<epoch-ms>', avançando 1 ms enquanto o ID já existir"""
    stamp = (now - EPOCH) // timedelta(milliseconds=1)
    while f"insp_{stamp}" in taken:
        stamp += 1
    return f"insp_{stamp}"


def build_record(payload, record_id, now):
    """Monta o registro com uma cópia do checklist no momento do envio"""
    return {
        "id": record_id,
        "inspectionDate": format_instant(now),
        "equipmentId": payload.equipmentId,
        "status": payload.status,
        "checklistItems": [item.model_dump() for item in payload.checklistItems],
        "evidencePhoto": payload.evidencePhoto,
        "observations": payload.observations,
        "generalObservations": payload.generalObservations,
        "technicianId": payload.technicianId,
    }


def submit_inspection(aggregate, payload, now):
    """
    Aplica a vistoria sobre o agregado em memória.

    Retorna (registro salvo, equipamento atualizado). O chamador é
    responsável por persistir o agregado de uma só vez.
    """
    _, item = registry.find_equipment(aggregate, payload.equipmentId)

    item["status"] = equipment_status_for(payload.status)
    item["lastInspected"] = today_for(now)

    history = aggregate.setdefault("inspectionHistory", [])
    record_id = inspection_id(now, {record["id"] for record in history})
    record = build_record(payload, record_id, now)
    history.append(record)

    logger.info(f"Vistoria {record_id} registrada para {payload.equipmentId}: {payload.status}")
    return record, dict(item)
