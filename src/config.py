import os

BASE_DIR = os.path.dirname(os.path.abspath(__file__))


def _env_bool(name, default=False):
    value = os.environ.get(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


class Config:
    """Configuração padrão, lida das variáveis de ambiente"""
    SECRET_KEY = os.environ.get("SECRET_KEY", "vistoria_secret_key")

    SQLALCHEMY_DATABASE_URI = os.environ.get("DATABASE_URL", "sqlite:///vistoria.db")
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    # relational | document | static
    STORE_BACKEND = os.environ.get("STORE_BACKEND", "relational")
    STATIC_SNAPSHOT_PATH = os.environ.get(
        "STATIC_SNAPSHOT_PATH", os.path.join(BASE_DIR, "static", "data.json")
    )
    DOCUMENT_STORE_MAX_RETRIES = int(os.environ.get("DOCUMENT_STORE_MAX_RETRIES", "5"))

    IMAGE_PROXY_TIMEOUT = float(os.environ.get("IMAGE_PROXY_TIMEOUT", "5"))
    REQUIRE_FAILURE_EVIDENCE = _env_bool("REQUIRE_FAILURE_EVIDENCE")

    # Limite do corpo JSON (fotos de evidência vêm embutidas em base64)
    MAX_CONTENT_LENGTH = 10 * 1024 * 1024

    LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")
    PORT = int(os.environ.get("PORT", "8080"))
