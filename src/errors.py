"""
Exceções de domínio do sistema de vistorias.

Cada exceção carrega o código HTTP correspondente; o blueprint da API
converte qualquer AppDataError em uma resposta JSON {"message": ...}.
"""


class AppDataError(Exception):
    """Erro base das operações sobre os dados do aplicativo"""
    status_code = 500

    def __init__(self, message, status_code=None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code

    def to_dict(self):
        return {"message": self.message}


class ValidationError(AppDataError):
    """Campos obrigatórios ausentes ou malformados"""
    status_code = 400


class NotFoundError(AppDataError):
    """Equipamento ou categoria inexistente"""
    status_code = 404


class ReadOnlyStoreError(AppDataError):
    """Tentativa de escrita em um armazenamento somente leitura"""
    status_code = 405


class ConflictError(AppDataError):
    """ID de equipamento ou nome de categoria duplicado"""
    status_code = 409


class InternalError(AppDataError):
    """Falha inesperada no armazenamento"""
    status_code = 500


class ServiceUnavailableError(AppDataError):
    """Armazenamento ainda não inicializado"""
    status_code = 503
