import json
import logging
import os

from src.errors import InternalError
from src.stores.base import AppDataStore

logger = logging.getLogger(__name__)


class StaticAppDataStore(AppDataStore):
    """Snapshot JSON somente leitura (mesmo formato do agregado)"""
    backend = "static"
    read_only = True

    def __init__(self, path, **kwargs):
        super().__init__(**kwargs)
        self.path = path

    def _setup(self):
        if not os.path.exists(self.path):
            raise FileNotFoundError(f"Snapshot não encontrado: {self.path}")
        # Falha cedo se o arquivo não for um agregado válido
        self._load_aggregate()

    def _load_aggregate(self):
        try:
            with open(self.path, encoding="utf-8") as fh:
                aggregate = json.load(fh)
        except (OSError, json.JSONDecodeError) as e:
            logger.error(f"Erro ao ler snapshot {self.path}: {str(e)}")
            raise InternalError("Erro ao ler os dados locais.") from e
        if not isinstance(aggregate, dict) or "equipmentData" not in aggregate:
            raise InternalError("Snapshot com formato inválido.")
        aggregate.setdefault("inspectionHistory", [])
        return aggregate
