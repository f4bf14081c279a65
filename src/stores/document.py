import copy
import logging

from sqlalchemy import select, update
from sqlalchemy.exc import SQLAlchemyError

from src.errors import AppDataError, InternalError
from src.extensions import db
from src.models.equipment import AppDocument
from src.seed import seed_aggregate
from src.services import recorder, registry
from src.stores.base import AppDataStore, utcnow

logger = logging.getLogger(__name__)

DOCUMENT_ID = "app-data"


class DocumentAppDataStore(AppDataStore):
    """
    Agregado completo guardado em um único documento JSON versionado.

    Cada escrita lê o documento e sua versão, aplica a alteração em uma
    cópia e grava com `UPDATE ... WHERE version = <lida>` (compare-and-swap).
    Se outra escrita venceu a corrida, a operação é repetida sobre o estado
    novo, até `max_retries` vezes.
    """
    backend = "document"

    def __init__(self, session=None, document_id=DOCUMENT_ID, max_retries=5, **kwargs):
        super().__init__(**kwargs)
        self._session = session
        self.document_id = document_id
        self.max_retries = max_retries

    @property
    def session(self):
        return self._session if self._session is not None else db.session

    def _setup(self):
        db.create_all()
        if self.session.get(AppDocument, self.document_id) is not None:
            logger.info("Documento de dados já existe")
            return
        logger.info("Documento de dados ausente. Gravando dados iniciais...")
        try:
            self.session.add(AppDocument(id=self.document_id, version=1, data=seed_aggregate()))
            self.session.commit()
        except SQLAlchemyError:
            self.session.rollback()
            raise

    def _read(self):
        """Lê (versão, dados) direto do banco, sem passar pelo mapa de identidade"""
        try:
            row = self.session.execute(
                select(AppDocument.version, AppDocument.data).where(AppDocument.id == self.document_id)
            ).one_or_none()
        except SQLAlchemyError as e:
            self.session.rollback()
            logger.error(f"Erro ao ler o documento: {str(e)}")
            raise InternalError("Erro ao ler o banco de dados.") from e
        if row is None:
            raise InternalError("Documento de dados não encontrado.")
        return row.version, copy.deepcopy(row.data)

    def _compare_and_swap(self, version, data):
        """Grava o documento se a versão ainda for a lida; retorna se gravou"""
        result = self.session.execute(
            update(AppDocument)
            .where(AppDocument.id == self.document_id, AppDocument.version == version)
            .values(data=data, version=version + 1, updated_at=utcnow())
            .execution_options(synchronize_session=False)
        )
        if result.rowcount != 1:
            self.session.rollback()
            return False
        self.session.commit()
        return True

    def _transact(self, mutate):
        """Aplica `mutate(agregado)` com releitura e nova tentativa em caso de corrida"""
        for attempt in range(1, self.max_retries + 1):
            version, aggregate = self._read()
            try:
                result = mutate(aggregate)
                if self._compare_and_swap(version, aggregate):
                    return result
            except AppDataError:
                self.session.rollback()
                raise
            except SQLAlchemyError as e:
                self.session.rollback()
                logger.error(f"Erro ao gravar o documento: {str(e)}")
                raise InternalError("Erro ao gravar no banco de dados.") from e
            except Exception:
                self.session.rollback()
                raise
            logger.warning(f"Versão {version} do documento mudou durante a escrita (tentativa {attempt})")
        raise InternalError("Não foi possível gravar os dados: muitas escritas simultâneas.")

    def _load_aggregate(self):
        _, aggregate = self._read()
        return aggregate

    def _create_equipment(self, request, today):
        return self._transact(
            lambda aggregate: registry.create_equipment(
                aggregate, request.id, request.location, request.category, today
            )
        )

    def _delete_equipment(self, equipment_id):
        self._transact(lambda aggregate: registry.delete_equipment(aggregate, equipment_id))

    def _create_category(self, name):
        return copy.deepcopy(self._transact(lambda aggregate: registry.create_category(aggregate, name)))

    def _update_client_fields(self, partial):
        def apply(aggregate):
            aggregate["client"].update(partial)
            return dict(aggregate["client"])
        return self._transact(apply)

    def _update_inspection_schedule(self, schedule):
        def apply(aggregate):
            aggregate["inspection"] = dict(schedule)
        self._transact(apply)

    def _submit_inspection(self, payload, now):
        record, equipment = self._transact(
            lambda aggregate: recorder.submit_inspection(aggregate, payload, now)
        )
        return copy.deepcopy(record), equipment
