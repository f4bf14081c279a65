import os
import sys
import logging
from datetime import datetime, timezone
from urllib.parse import urlsplit

import pytest
import requests
from requests.adapters import BaseAdapter
from requests.structures import CaseInsensitiveDict

# Adicionar diretório pai ao path para importar módulos do projeto
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from src.extensions import db
from src.main import create_app
from src.stores import get_store

logger = logging.getLogger("tests")

FIXED_NOW = datetime(2024, 10, 26, 13, 45, 12, 345000, tzinfo=timezone.utc)
FIXED_TODAY = "2024-10-26"

BASE_URL = "http://testserver"


def make_app(tmp_path, backend, **overrides):
    config = {
        "TESTING": True,
        "SQLALCHEMY_DATABASE_URI": f"sqlite:///{tmp_path / 'vistoria_test.db'}",
        "STORE_BACKEND": backend,
    }
    config.update(overrides)
    return create_app(config)


@pytest.fixture(params=["relational", "document"])
def app(request, tmp_path):
    """Aplicação com banco SQLite temporário, uma vez para cada modo gravável"""
    app = make_app(tmp_path, request.param)
    with app.app_context():
        get_store().clock = lambda: FIXED_NOW
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def static_app(tmp_path):
    app = make_app(tmp_path, "static")
    with app.app_context():
        yield app


@pytest.fixture
def store(app):
    return get_store()


@pytest.fixture
def client(app):
    return app.test_client()


class FlaskTransport(BaseAdapter):
    """Adaptador do requests que entrega as chamadas ao test client do Flask"""

    def __init__(self, test_client, api_down=False):
        super().__init__()
        self.test_client = test_client
        self.api_down = api_down
        self.calls = []

    def send(self, request, **kwargs):
        parts = urlsplit(request.url)
        self.calls.append((request.method, parts.path))
        if self.api_down and parts.path.startswith("/api/"):
            raise requests.ConnectionError("API fora do ar")

        path = parts.path + (f"?{parts.query}" if parts.query else "")
        headers = {k: v for k, v in request.headers.items() if k.lower() != "content-length"}
        flask_response = self.test_client.open(
            path, method=request.method, data=request.body, headers=headers
        )

        response = requests.Response()
        response.status_code = flask_response.status_code
        response._content = flask_response.get_data()
        response.headers = CaseInsensitiveDict(flask_response.headers)
        response.encoding = "utf-8"
        response.url = request.url
        response.request = request
        return response

    def close(self):
        pass


def http_session(test_client, api_down=False):
    session = requests.Session()
    transport = FlaskTransport(test_client, api_down=api_down)
    session.mount(BASE_URL, transport)
    return session, transport
