import sys
import os
sys.path.insert(0, os.path.dirname(os.path.dirname(__file__)))  # DON\'T CHANGE THIS !!!

from flask import Flask
import logging
import traceback
import click
from flask_cors import CORS

from src.config import Config
from src.extensions import db
from src.stores import EXTENSION_KEY, build_store, get_store

logger = logging.getLogger(__name__)


def create_app(overrides=None):
    """Cria e configura a aplicação Flask"""
    app = Flask(__name__)
    app.config.from_object(Config)
    if overrides:
        app.config.update(overrides)

    # Configurar logging
    logging.basicConfig(
        level=app.config["LOG_LEVEL"],
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    CORS(app)  # Habilitar CORS para todas as rotas

    # Inicializar SQLAlchemy
    db.init_app(app)

    # Importar modelos após inicializar db
    from src.models import equipment  # noqa: F401

    store = build_store(app.config)
    app.extensions[EXTENSION_KEY] = store

    with app.app_context():
        try:
            store.initialize()
        except Exception as e:
            # A API responde 503 até o armazenamento ficar pronto
            logger.critical(f"Falha ao inicializar o armazenamento '{store.backend}': {str(e)}")
            logger.critical(traceback.format_exc())

    # Importar e registrar blueprints APÓS a inicialização do DB
    from src.routes.api import api_bp
    from src.routes.site import site_bp

    app.register_blueprint(api_bp)
    app.register_blueprint(site_bp)

    register_commands(app)
    return app


def register_commands(app):
    @app.cli.command("init-db")
    def init_db():
        """Cria as tabelas e insere os dados iniciais"""
        store = get_store()
        store.initialize()
        click.echo(f"Armazenamento '{store.backend}' inicializado.")

    @app.cli.command("export-snapshot")
    @click.argument("path", required=False)
    def export_snapshot(path):
        """Grava o agregado atual como snapshot para o modo offline"""
        path = path or os.path.join(app.static_folder, "data.json")
        get_store().export_snapshot(path)
        click.echo(f"Snapshot gravado em {path}")


if __name__ == "__main__":
    app = create_app()
    # Iniciar servidor de desenvolvimento
    logger.info(f"Servidor ouvindo na porta {app.config['PORT']}. Verificação de saúde em /healthz.")
    app.run(host="0.0.0.0", port=app.config["PORT"], debug=False)
