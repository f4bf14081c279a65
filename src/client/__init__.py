from src.client.controller import ApiError, ClientStateController, OfflineError

__all__ = ["ApiError", "ClientStateController", "OfflineError"]
