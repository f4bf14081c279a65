import logging
import traceback
from contextlib import contextmanager

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from src.errors import AppDataError, InternalError
from src.extensions import db
from src.models.equipment import (
    AppState,
    Client,
    Equipment,
    EquipmentCategory,
    InspectionRecord,
)
from src.seed import STATE_KEYS, seed_aggregate
from src.services import recorder, registry
from src.stores.base import AppDataStore

logger = logging.getLogger(__name__)

CLIENT_FIELDS = {
    "floorPlanUrl": "floor_plan_url",
    "coverImageUrl": "cover_image_url",
}


class RelationalAppDataStore(AppDataStore):
    """Agregado projetado em tabelas; cada escrita é uma transação explícita"""
    backend = "relational"

    def __init__(self, session=None, **kwargs):
        super().__init__(**kwargs)
        self._session = session

    @property
    def session(self):
        return self._session if self._session is not None else db.session

    @contextmanager
    def _transaction(self, conflict=None):
        """
        Executa o bloco em uma transação: commit no final ou rollback completo.

        Violações de unicidade viram o erro devolvido por `conflict`, quando
        informado; demais falhas do banco viram InternalError.
        """
        try:
            yield self.session
            self.session.commit()
        except AppDataError:
            self.session.rollback()
            raise
        except IntegrityError as e:
            self.session.rollback()
            if conflict is not None:
                raise conflict() from e
            logger.error(f"Violação de integridade: {str(e)}")
            raise InternalError("Erro ao gravar no banco de dados.") from e
        except SQLAlchemyError as e:
            self.session.rollback()
            logger.error(f"Erro no banco de dados: {str(e)}")
            logger.error(traceback.format_exc())
            raise InternalError("Erro ao gravar no banco de dados.") from e
        except Exception:
            self.session.rollback()
            raise

    def _setup(self):
        db.create_all()
        if self.session.query(Client).count() > 0:
            logger.info("Banco de dados já populado")
            return

        logger.info("Banco de dados vazio. Inserindo dados iniciais...")
        data = seed_aggregate()
        with self._transaction():
            c = data["client"]
            self.session.add(Client(
                name=c["name"],
                address=c["address"],
                contact_person=c["contactPerson"],
                phone=c["phone"],
                email=c["email"],
                image_url=c["imageUrl"],
                floor_plan_url=c["floorPlanUrl"],
                cover_image_url=c["coverImageUrl"],
            ))

            for category_data in data["equipmentData"]:
                category = EquipmentCategory(
                    name=category_data["name"],
                    name_key=registry.category_key(category_data["name"]),
                    icon=category_data["icon"],
                )
                self.session.add(category)
                self.session.flush()
                for position, item in enumerate(category_data["items"], start=1):
                    self.session.add(Equipment(
                        id=item["id"],
                        location=item["location"],
                        last_inspected=item["lastInspected"],
                        status=item["status"],
                        category_id=category.id,
                        position=position,
                    ))

            for record in data["inspectionHistory"]:
                self.session.add(self._record_row(record))

            for key in STATE_KEYS:
                self.session.add(AppState(key=key, value=data[key]))
        logger.info("Dados iniciais inseridos com sucesso")

    def _load_aggregate(self):
        try:
            client = self.session.query(Client).order_by(Client.id).first()
            categories = self.session.query(EquipmentCategory).order_by(EquipmentCategory.id).all()
            history = (
                self.session.query(InspectionRecord)
                .order_by(InspectionRecord.created_at, InspectionRecord.id)
                .all()
            )
            state = {row.key: row.value for row in self.session.query(AppState).all()}
        except SQLAlchemyError as e:
            logger.error(f"Erro ao ler o banco de dados: {str(e)}")
            raise InternalError("Erro ao ler o banco de dados.") from e

        aggregate = {
            "client": client.to_dict() if client else None,
            "equipmentData": [category.to_dict() for category in categories],
            "inspectionHistory": [record.to_dict() for record in history],
        }
        for key in STATE_KEYS:
            aggregate[key] = state.get(key)
        return aggregate

    def _find_equipment(self, equipment_id):
        row = (
            self.session.query(Equipment, EquipmentCategory)
            .join(EquipmentCategory, Equipment.category_id == EquipmentCategory.id)
            .filter(Equipment.id == equipment_id)
            .first()
        )
        if row is None:
            raise registry.unknown_equipment_error(equipment_id)
        equipment, category = row
        return {
            "categoryName": category.name,
            "categoryIcon": category.icon,
            "item": equipment.to_dict(),
        }

    def _create_equipment(self, request, today):
        with self._transaction(conflict=lambda: registry.duplicate_equipment_error(request.id)):
            if self.session.get(Equipment, request.id) is not None:
                raise registry.duplicate_equipment_error(request.id)

            category = self.session.query(EquipmentCategory).filter_by(name=request.category).first()
            if category is None:
                raise registry.unknown_category_error(request.category)

            last_position = (
                self.session.query(func.max(Equipment.position))
                .filter(Equipment.category_id == category.id)
                .scalar()
            )
            item = registry.new_equipment(request.id, request.location, today)
            self.session.add(Equipment(
                id=item["id"],
                location=item["location"],
                last_inspected=item["lastInspected"],
                status=item["status"],
                category_id=category.id,
                position=(last_position or 0) + 1,
            ))
        logger.info(f"Equipamento {request.id} incluído na categoria {request.category}")
        return item

    def _delete_equipment(self, equipment_id):
        with self._transaction():
            deleted = self.session.query(Equipment).filter(Equipment.id == equipment_id).delete()
            if deleted == 0:
                raise registry.unknown_equipment_error(equipment_id)
        logger.info(f"Equipamento {equipment_id} excluído")

    def _category_by_key(self, key):
        return self.session.query(EquipmentCategory).filter(EquipmentCategory.name_key == key).first()

    def _create_category(self, name):
        key = registry.category_key(name)
        category = registry.new_category(name)
        with self._transaction(conflict=lambda: registry.duplicate_category_error(name)):
            if self._category_by_key(key) is not None:
                raise registry.duplicate_category_error(name)
            self.session.add(EquipmentCategory(name=name, name_key=key, icon=category["icon"]))
        logger.info(f"Categoria {name} criada")
        return category

    def _update_client_fields(self, partial):
        with self._transaction():
            client = self.session.query(Client).order_by(Client.id).first()
            if client is None:
                raise InternalError("Cliente não encontrado no banco de dados.")
            for field, value in partial.items():
                setattr(client, CLIENT_FIELDS[field], value)
            updated = client.to_dict()
        return updated

    def _update_inspection_schedule(self, schedule):
        with self._transaction():
            row = self.session.get(AppState, "inspection")
            if row is None:
                self.session.add(AppState(key="inspection", value=schedule))
            else:
                row.value = dict(schedule)

    def _submit_inspection(self, payload, now):
        with self._transaction():
            equipment = (
                self.session.query(Equipment)
                .filter(Equipment.id == payload.equipmentId)
                .with_for_update()
                .first()
            )
            if equipment is None:
                raise registry.unknown_equipment_error(payload.equipmentId)

            equipment.status = recorder.equipment_status_for(payload.status)
            equipment.last_inspected = recorder.today_for(now)

            taken = set()
            record_id = recorder.inspection_id(now)
            while self.session.get(InspectionRecord, record_id) is not None:
                taken.add(record_id)
                record_id = recorder.inspection_id(now, taken)

            record = recorder.build_record(payload, record_id, now)
            self.session.add(self._record_row(record))
            updated = equipment.to_dict()

        logger.info(f"Vistoria {record['id']} registrada para {payload.equipmentId}: {payload.status}")
        return record, updated

    @staticmethod
    def _record_row(record):
        return InspectionRecord(
            id=record["id"],
            inspection_date=record["inspectionDate"],
            equipment_id=record["equipmentId"],
            status=record["status"],
            checklist_items=record["checklistItems"],
            evidence_photo=record["evidencePhoto"],
            observations=record["observations"],
            general_observations=record["generalObservations"],
            technician_id=record["technicianId"],
        )
