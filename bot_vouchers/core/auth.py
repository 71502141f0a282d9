# bot_vouchers/core/auth.py
import json
import logging
from typing import Any, Dict, Optional

from bot_vouchers.core.api import ApiError
from bot_vouchers.core.services import AuthService
from bot_vouchers.core.storage import LocalStore

logger = logging.getLogger(__name__)

TOKEN_KEY = "token"
USER_KEY = "user"


class AuthSession:
    """Sessão do usuário: token e perfil guardados no armazenamento local."""

    def __init__(self, service: AuthService, store: LocalStore):
        self.service = service
        self.store = store
        self.token: Optional[str] = None
        self.user: Optional[Dict[str, Any]] = None
        self.error: Optional[str] = None

    @property
    def is_authenticated(self) -> bool:
        return bool(self.token) and self.user is not None

    def load(self) -> "AuthSession":
        token = self.store.get_item(TOKEN_KEY)
        stored_user = self.store.get_item(USER_KEY)
        if token and stored_user:
            try:
                self.user = json.loads(stored_user)
                self.token = token
            except ValueError:
                logger.warning("Usuário salvo inválido, ignorando sessão anterior")
        return self

    def login(self, email: str, password: str) -> Dict[str, Any]:
        self.error = None
        try:
            response = self.service.login(email, password)
        except ApiError as e:
            self.error = e.message if e.status_code is not None else "Erro de rede. Tente novamente."
            raise
        self.store.set_item(TOKEN_KEY, response["token"])
        self.store.set_item(USER_KEY, json.dumps(response.get("user") or {}, ensure_ascii=False))
        self.token = response["token"]
        self.user = response.get("user") or {}
        logger.info("Login realizado para %s", email)
        return self.user

    def logout(self) -> None:
        self.store.remove_item(TOKEN_KEY)
        self.store.remove_item(USER_KEY)
        self.token = None
        self.user = None

    @property
    def display_name(self) -> str:
        name = (self.user or {}).get("name") or ""
        return " ".join(name.split()[:2]) or "Usuário"
