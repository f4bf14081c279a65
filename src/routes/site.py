from flask import Blueprint, Response, current_app, jsonify, request, send_from_directory
import os

from werkzeug.security import safe_join

site_bp = Blueprint("site", __name__)


@site_bp.route("/healthz")
def healthz():
    """Verificação de saúde: independe do banco de dados"""
    return Response("OK", status=200, mimetype="text/plain")


@site_bp.app_errorhandler(404)
def not_found(e):
    if request.path.startswith("/api/"):
        return jsonify({"message": f"Rota {request.path} não encontrada."}), 404
    return e


@site_bp.route("/api", methods=["GET", "POST", "PUT", "PATCH", "DELETE"], defaults={"path": ""})
@site_bp.route("/api/<path:path>", methods=["GET", "POST", "PUT", "PATCH", "DELETE"])
def api_not_found(path):
    return jsonify({"message": f"Rota /api/{path} não encontrada."}), 404


@site_bp.route("/", defaults={"path": ""})
@site_bp.route("/<path:path>")
def spa(path):
    """Arquivos estáticos; qualquer outra rota devolve o index.html do aplicativo"""
    static_folder = current_app.static_folder
    if path:
        candidate = safe_join(static_folder, path)
        if candidate is not None and os.path.isfile(candidate):
            return send_from_directory(static_folder, path)
    return send_from_directory(static_folder, "index.html")
