from flask import current_app

from src.stores.base import AppDataStore
from src.stores.document import DocumentAppDataStore
from src.stores.relational import RelationalAppDataStore
from src.stores.static import StaticAppDataStore

EXTENSION_KEY = "app_data_store"


def build_store(config):
    """Cria o armazenamento indicado em STORE_BACKEND"""
    backend = config["STORE_BACKEND"]
    options = {"require_failure_evidence": config["REQUIRE_FAILURE_EVIDENCE"]}

    if backend == "relational":
        return RelationalAppDataStore(**options)
    if backend == "document":
        return DocumentAppDataStore(max_retries=config["DOCUMENT_STORE_MAX_RETRIES"], **options)
    if backend == "static":
        return StaticAppDataStore(config["STATIC_SNAPSHOT_PATH"], **options)
    raise ValueError(f"STORE_BACKEND desconhecido: {backend}")


def get_store():
    return current_app.extensions[EXTENSION_KEY]


__all__ = [
    "AppDataStore",
    "DocumentAppDataStore",
    "RelationalAppDataStore",
    "StaticAppDataStore",
    "build_store",
    "get_store",
]
