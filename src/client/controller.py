"""
Controlador de estado do lado do cliente.

Mantém em memória uma cópia do agregado obtida uma única vez da API e, após
cada alteração confirmada pelo servidor, corrige apenas a parte afetada com
os valores devolvidos pelo servidor. Se a API estiver fora do ar, carrega o
snapshot estático e passa a operar somente leitura.
"""
import logging
from urllib.parse import quote

import requests

from src.services.registry import lookup_result, normalize_lookup_id

logger = logging.getLogger(__name__)

OFFLINE_BANNER = "Modo offline: Apenas visualização."


class ApiError(Exception):
    """Falha devolvida pela API (mensagem pronta para o usuário)"""

    def __init__(self, message, status_code=None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class OfflineError(Exception):
    """Operação recusada porque o aplicativo está em modo offline"""

    def __init__(self, message):
        super().__init__(message)
        self.message = message


class ClientStateController:
    def __init__(self, base_url, session=None, snapshot_url=None, timeout=10):
        self.base_url = base_url.rstrip("/")
        self.api_url = f"{self.base_url}/api"
        self.snapshot_url = snapshot_url or f"{self.base_url}/data.json"
        self.session = session or requests.Session()
        self.timeout = timeout

        self.app_data = None
        self.offline = False
        self.error = None

    # Carga inicial

    def load(self):
        """Busca o agregado na API; em caso de falha, usa o snapshot estático"""
        try:
            self.app_data = self._request("GET", "/app-data", default_error="Falha ao buscar dados do servidor.")
            self.offline = False
            self.error = None
            return self.app_data
        except (requests.RequestException, ApiError) as e:
            logger.warning(f"{e} Tentando modo offline.")

        try:
            response = self.session.get(self.snapshot_url, timeout=self.timeout)
            response.raise_for_status()
            self.app_data = response.json()
        except (requests.RequestException, ValueError) as e:
            self.error = "Falha ao carregar dados locais."
            logger.error(f"{self.error} {str(e)}")
            raise ApiError(self.error) from e

        self.offline = True
        self.error = OFFLINE_BANNER
        logger.info("Dados carregados do snapshot local (modo offline)")
        return self.app_data

    # Consultas locais

    def find_equipment(self, raw_id):
        """Procura o equipamento no estado local pelo ID normalizado"""
        equipment_id = normalize_lookup_id(raw_id)
        if not equipment_id:
            return None
        for category in self._data()["equipmentData"]:
            for item in category["items"]:
                if item["id"] == equipment_id:
                    return lookup_result(category, item)
        return None

    def fetch_equipment(self, raw_id):
        """Consulta o equipamento direto na API (busca por ID/QR code)"""
        self._ensure_online("Modo offline: a busca no servidor não está disponível.")
        equipment_id = normalize_lookup_id(raw_id)
        return self._request(
            "GET", f"/equipment/{quote(equipment_id, safe='')}",
            default_error="Equipamento não encontrado.",
        )

    # Alterações

    def add_equipment(self, equipment_id, location, category):
        self._ensure_online("Modo offline: Não é possível salvar novos equipamentos.")
        saved = self._request(
            "POST", "/equipment",
            json={"id": equipment_id, "location": location, "category": category},
            default_error="Falha ao salvar o equipamento.",
        )

        categories = self._data()["equipmentData"]
        for existing in categories:
            if existing["name"] == saved["category"]:
                existing["items"].append(saved["item"])
                break
        else:
            categories.append({"name": saved["category"], "icon": "new_label", "items": [saved["item"]]})
        return saved["item"]

    def add_category(self, name):
        self._ensure_online("Modo offline: Não é possível salvar novas categorias.")
        category = self._request(
            "POST", "/categories", json={"name": name},
            default_error="Falha ao salvar a categoria.",
        )
        self._data()["equipmentData"].append(category)
        return category

    def delete_equipment(self, equipment_id):
        # Sem fila local: exclusões offline são recusadas
        self._ensure_online(f"Modo offline: Não é possível excluir o equipamento {equipment_id}.")
        self._request(
            "DELETE", f"/equipment/{quote(equipment_id, safe='')}",
            default_error="Falha ao excluir o equipamento.",
        )
        data = self._data()
        data["equipmentData"] = [
            {**category, "items": [item for item in category["items"] if item["id"] != equipment_id]}
            for category in data["equipmentData"]
        ]

    def update_client_info(self, update_data):
        self._ensure_online("Modo offline: Não é possível salvar alterações.")
        client = self._request(
            "PATCH", "/client", json=update_data,
            default_error="Falha ao atualizar informações do cliente.",
        )
        self._data()["client"] = client
        return client

    def update_floor_plan(self, url):
        return self.update_client_info({"floorPlanUrl": url})

    def update_cover_image(self, url):
        return self.update_client_info({"coverImageUrl": url})

    def schedule_inspection(self, date, time):
        self._ensure_online("Modo offline: Não é possível reagendar vistorias.")
        schedule = self._request(
            "PATCH", "/inspection", json={"date": date, "time": time},
            default_error="Falha ao reagendar a vistoria.",
        )
        self._data()["inspection"] = schedule
        return schedule

    def save_inspection(self, inspection_data):
        """
        Envia a vistoria e aplica a resposta do servidor ao estado local:
        o equipamento é substituído pelo devolvido e o registro entra no histórico.
        """
        self._ensure_online("Modo offline: Não é possível salvar vistorias.")
        data = self._data()
        payload = dict(inspection_data)
        if not payload.get("technicianId"):
            payload["technicianId"] = (data.get("userProfile") or {}).get("technicianId")

        result = self._request(
            "POST", "/inspections", json=payload,
            default_error="Falha ao salvar a vistoria.",
        )
        saved = result["savedInspection"]
        updated = result["updatedEquipment"]

        data["equipmentData"] = [
            {**category, "items": [updated if item["id"] == updated["id"] else item for item in category["items"]]}
            for category in data["equipmentData"]
        ]
        data["inspectionHistory"] = [*data.get("inspectionHistory", []), saved]
        return result

    # Auxiliares

    def _data(self):
        if self.app_data is None:
            raise RuntimeError("Estado não carregado: chame load() primeiro")
        return self.app_data

    def _ensure_online(self, message):
        if self.offline:
            raise OfflineError(message)

    def _request(self, method, path, json=None, default_error="Falha na comunicação com o servidor."):
        response = self.session.request(method, f"{self.api_url}{path}", json=json, timeout=self.timeout)
        if not response.ok:
            try:
                message = response.json().get("message")
            except ValueError:
                message = None
            raise ApiError(message or default_error, response.status_code)
        return response.json()
