# bot_vouchers/core/api.py
import logging
from typing import Any, Callable, Dict, Optional

import requests

logger = logging.getLogger(__name__)

NETWORK_ERROR_MESSAGE = "Erro de rede. Verifique sua conexão e tente novamente."


class ApiError(Exception):
    """Falha ao falar com a API: resposta fora de 2xx ou erro de rede (status_code=None)."""

    def __init__(self, message: str, status_code: Optional[int] = None, payload: Any = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.payload = payload

    @property
    def is_not_found(self) -> bool:
        return self.status_code == 404


def _response_payload(response: Optional[requests.Response]) -> Any:
    if response is None:
        return None
    try:
        return response.json()
    except ValueError:
        return response.text


class ApiClient:
    """Cliente HTTP da API REST. Injeta o token Bearer em toda requisição."""

    def __init__(self, base_url: str, timeout: float = 15,
                 token_provider: Optional[Callable[[], Optional[str]]] = None,
                 session: Optional[requests.Session] = None):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.token_provider = token_provider
        self.session = session or requests.Session()

    def _headers(self) -> Dict[str, str]:
        headers = {"Content-Type": "application/json"}
        token = self.token_provider() if self.token_provider else None
        if token:
            headers["Authorization"] = f"Bearer {token}"
        return headers

    def request(self, method: str, path: str, params: Optional[Dict[str, Any]] = None,
                json: Optional[Dict[str, Any]] = None) -> Any:
        url = f"{self.base_url}{path}"
        logger.debug("API Request: %s %s params=%s data=%s", method, url, params, json)
        try:
            response = self.session.request(
                method, url, params=params, json=json, headers=self._headers(), timeout=self.timeout
            )
            response.raise_for_status()
        except requests.exceptions.HTTPError as e:
            status = e.response.status_code if e.response is not None else None
            payload = _response_payload(e.response)
            message = payload.get("message") if isinstance(payload, dict) else None
            if status == 404:
                logger.info("API 404: %s %s", method, path)
            else:
                logger.error("API Error: %s %s status=%s data=%s", method, path, status, payload)
            raise ApiError(message or f"Erro {status} ao acessar {path}", status, payload) from e
        except requests.exceptions.RequestException as e:
            logger.error("API Error: %s %s sem resposta: %s", method, path, e)
            raise ApiError(NETWORK_ERROR_MESSAGE) from e

        logger.debug("API Response: %s %s status=%s", method, path, response.status_code)
        if not response.content:
            return None
        return response.json()

    def get(self, path: str, params: Optional[Dict[str, Any]] = None) -> Any:
        return self.request("GET", path, params=params)

    def post(self, path: str, data: Dict[str, Any]) -> Any:
        return self.request("POST", path, json=data)

    def put(self, path: str, data: Dict[str, Any]) -> Any:
        return self.request("PUT", path, json=data)

    def delete(self, path: str) -> Any:
        return self.request("DELETE", path)
