"""
Contrato comum dos armazenamentos do agregado de dados do aplicativo.

Toda validação de entrada e as regras compartilhadas ficam nesta classe;
cada modo de armazenamento implementa apenas os ganchos de leitura e escrita.
"""
import json
import logging
from datetime import datetime, timezone

from src.errors import ReadOnlyStoreError, ServiceUnavailableError
from src.schemas import (
    ClientPatchRequest,
    InspectionRequest,
    NewCategoryRequest,
    NewEquipmentRequest,
    ScheduleRequest,
    parse_body,
)
from src.services import recorder, registry

logger = logging.getLogger(__name__)


def utcnow():
    return datetime.now(timezone.utc)


class AppDataStore:
    backend = None
    read_only = False

    def __init__(self, clock=None, require_failure_evidence=False):
        self.clock = clock or utcnow
        self.require_failure_evidence = require_failure_evidence
        self._ready = False

    # Ciclo de vida

    def initialize(self):
        """Prepara o armazenamento (esquema e dados iniciais) e o marca como pronto"""
        self._setup()
        self._ready = True
        logger.info(f"Armazenamento '{self.backend}' pronto")

    def is_ready(self):
        return self._ready

    def ensure_ready(self):
        if not self._ready:
            raise ServiceUnavailableError(
                "Serviço indisponível: o banco de dados está sendo inicializado. Tente novamente em instantes."
            )

    def ensure_writable(self):
        if self.read_only:
            raise ReadOnlyStoreError("Modo somente leitura: não é possível salvar alterações.")

    # Leitura

    def get_aggregate(self):
        self.ensure_ready()
        aggregate = self._load_aggregate()
        aggregate["stats"] = registry.refresh_stats(aggregate.get("stats"), aggregate["equipmentData"])
        return aggregate

    def find_equipment(self, equipment_id):
        """Retorna {categoryName, categoryIcon, item} ou NotFoundError"""
        self.ensure_ready()
        return self._find_equipment(equipment_id)

    def export_snapshot(self, path):
        """Grava o agregado atual como snapshot JSON para o modo offline"""
        aggregate = self.get_aggregate()
        with open(path, "w", encoding="utf-8") as fh:
            json.dump(aggregate, fh, ensure_ascii=False, indent=2)
        logger.info(f"Snapshot exportado para {path}")
        return aggregate

    # Escrita

    def create_equipment(self, equipment_id, location, category):
        self.ensure_ready()
        self.ensure_writable()
        request = parse_body(
            NewEquipmentRequest, {"id": equipment_id, "location": location, "category": category}
        )
        today = recorder.today_for(self.clock())
        item = self._create_equipment(request, today)
        return {"item": item, "category": request.category}

    def delete_equipment(self, equipment_id):
        self.ensure_ready()
        self.ensure_writable()
        self._delete_equipment(equipment_id)

    def create_category(self, name):
        self.ensure_ready()
        self.ensure_writable()
        request = parse_body(NewCategoryRequest, {"name": name})
        return self._create_category(request.name)

    def update_client_fields(self, partial):
        """Atualiza apenas floorPlanUrl/coverImageUrl; retorna o cliente atualizado"""
        self.ensure_ready()
        self.ensure_writable()
        request = parse_body(ClientPatchRequest, partial)
        return self._update_client_fields(request.partial())

    def update_inspection_schedule(self, date, time):
        self.ensure_ready()
        self.ensure_writable()
        request = parse_body(ScheduleRequest, {"date": date, "time": time})
        schedule = {"date": request.date, "time": request.time}
        self._update_inspection_schedule(schedule)
        return schedule

    def submit_inspection(self, payload):
        """
        Registra uma vistoria e atualiza o equipamento na mesma transação.

        Retorna {"savedInspection": registro, "updatedEquipment": equipamento}.
        """
        self.ensure_ready()
        self.ensure_writable()
        if not isinstance(payload, InspectionRequest):
            payload = parse_body(InspectionRequest, payload)
        recorder.check_evidence(payload, self.require_failure_evidence)
        record, equipment = self._submit_inspection(payload, self.clock())
        return {"savedInspection": record, "updatedEquipment": equipment}

    # Ganchos de cada modo de armazenamento

    def _setup(self):
        raise NotImplementedError

    def _load_aggregate(self):
        raise NotImplementedError

    def _find_equipment(self, equipment_id):
        category, item = registry.find_equipment(self._load_aggregate(), equipment_id)
        return registry.lookup_result(category, item)

    def _create_equipment(self, request, today):
        raise NotImplementedError

    def _delete_equipment(self, equipment_id):
        raise NotImplementedError

    def _create_category(self, name):
        raise NotImplementedError

    def _update_client_fields(self, partial):
        raise NotImplementedError

    def _update_inspection_schedule(self, schedule):
        raise NotImplementedError

    def _submit_inspection(self, payload, now):
        raise NotImplementedError
