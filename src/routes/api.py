from flask import Blueprint, Response, current_app, jsonify, request, stream_with_context
import logging
import traceback
from urllib.parse import unquote

import requests
from werkzeug.exceptions import HTTPException

from src.errors import AppDataError, ValidationError
from src.schemas import InspectionRequest, parse_body
from src.stores import get_store

logger = logging.getLogger(__name__)

api_bp = Blueprint("api", __name__, url_prefix="/api")

# Rotas da API que não dependem do banco de dados
STORE_FREE_ENDPOINTS = {"api.image_proxy"}

PROXY_CHUNK_SIZE = 8192


def _json_body():
    """Corpo JSON da requisição; precisa ser um objeto"""
    body = request.get_json(silent=True)
    if body is None:
        return {}
    if not isinstance(body, dict):
        raise ValidationError("O corpo da requisição deve ser um objeto JSON.")
    return body


@api_bp.before_request
def check_store_ready():
    """Registra a chamada e bloqueia a API enquanto o armazenamento não estiver pronto"""
    logger.info(f"{request.method} {request.full_path.rstrip('?')}")
    if request.endpoint in STORE_FREE_ENDPOINTS:
        return None
    get_store().ensure_ready()
    return None


@api_bp.errorhandler(AppDataError)
def handle_app_data_error(e):
    if e.status_code >= 500:
        logger.error(f"Erro na operação: {e.message}")
    else:
        logger.warning(f"Requisição recusada ({e.status_code}): {e.message}")
    return jsonify(e.to_dict()), e.status_code


@api_bp.errorhandler(Exception)
def handle_unexpected_error(e):
    if isinstance(e, HTTPException):
        return jsonify({"message": e.description}), e.code
    logger.error(f"Erro interno: {str(e)}")
    logger.error(traceback.format_exc())
    return jsonify({"message": "Erro interno do servidor."}), 500


@api_bp.route("/app-data", methods=["GET"])
def get_app_data():
    """Retorna o agregado completo de dados do aplicativo"""
    return jsonify(get_store().get_aggregate())


@api_bp.route("/equipment/<path:equipment_id>", methods=["GET"])
def get_equipment(equipment_id):
    """Busca um equipamento pelo ID exato"""
    return jsonify(get_store().find_equipment(equipment_id))


@api_bp.route("/client", methods=["PATCH"])
def update_client():
    """Atualiza planta baixa e/ou imagem de capa do cliente"""
    updated = get_store().update_client_fields(_json_body())
    return jsonify(updated)


@api_bp.route("/inspection", methods=["PATCH"])
def schedule_inspection():
    """Reagenda a próxima vistoria"""
    body = _json_body()
    schedule = get_store().update_inspection_schedule(body.get("date"), body.get("time"))
    return jsonify(schedule)


@api_bp.route("/equipment", methods=["POST"])
def create_equipment():
    """Cadastra um novo equipamento em uma categoria existente"""
    body = _json_body()
    result = get_store().create_equipment(body.get("id"), body.get("location"), body.get("category"))
    return jsonify(result), 201


@api_bp.route("/equipment/<path:equipment_id>", methods=["DELETE"])
def delete_equipment(equipment_id):
    get_store().delete_equipment(equipment_id)
    return jsonify({"message": "Equipamento excluído com sucesso."}), 200


@api_bp.route("/categories", methods=["POST"])
def create_category():
    """Cria uma nova categoria de equipamento"""
    category = get_store().create_category(_json_body().get("name"))
    return jsonify(category), 201


@api_bp.route("/inspections", methods=["POST"])
def create_inspection():
    """Registra uma vistoria e devolve o registro salvo e o equipamento atualizado"""
    payload = parse_body(InspectionRequest, _json_body())
    result = get_store().submit_inspection(payload)
    return jsonify({"message": "Vistoria salva com sucesso.", **result}), 201


@api_bp.route("/image-proxy", methods=["GET"])
def image_proxy():
    """Repassa uma imagem remota (evita bloqueios de CORS na geração de relatórios)"""
    url = request.args.get("url")
    if not url:
        return Response("A URL da imagem é obrigatória", status=400, mimetype="text/plain")

    try:
        upstream = requests.get(
            unquote(url),
            stream=True,
            timeout=current_app.config["IMAGE_PROXY_TIMEOUT"],
        )
    except requests.RequestException as e:
        logger.error(f"Erro ao buscar imagem: {str(e)}")
        return Response("Falha ao buscar a imagem", status=500, mimetype="text/plain")

    try:
        upstream.raise_for_status()
    except requests.RequestException as e:
        upstream.close()
        logger.error(f"Erro ao buscar imagem: {str(e)}")
        return Response("Falha ao buscar a imagem", status=500, mimetype="text/plain")

    def relay():
        try:
            for chunk in upstream.iter_content(chunk_size=PROXY_CHUNK_SIZE):
                if chunk:
                    yield chunk
        finally:
            upstream.close()

    content_type = upstream.headers.get("Content-Type", "application/octet-stream")
    return Response(stream_with_context(relay()), content_type=content_type)
