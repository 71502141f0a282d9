# bot_vouchers/core/services.py
import logging
from typing import Any, Callable, Dict, List, Optional, Tuple

from bot_vouchers.core.api import ApiClient, ApiError
from bot_vouchers.core.models import Expense, Voucher, expense_payload, voucher_payload

logger = logging.getLogger(__name__)

# Leituras de lista/resumo que recebem 404 significam "nada encontrado",
# não erro: retornamos o formato vazio.

Page = Tuple[List[Any], Dict[str, Any]]


def collect_pages(fetch_page: Callable[[int, Optional[int]], Page], offset: int = 0,
                  limit: Optional[int] = None) -> List[Any]:
    """
    Com `limit` lê uma única página. Sem ele segue `pagination.hasNextPage`
    até a última página e devolve tudo junto.
    """
    items, pagination = fetch_page(offset, limit)
    collected = list(items)
    if limit is not None:
        return collected
    while pagination.get("hasNextPage") and items:
        offset += len(items)
        items, pagination = fetch_page(offset, None)
        collected.extend(items)
    return collected


# --- Vouchers ---
class VoucherService:
    LIST_PATH = "/v2/voucher/getlist"
    CREATE_PATH = "/v2/voucher/create"
    UPDATE_PATH = "/v2/voucher/update/{id}"
    DELETE_PATH = "/v2/voucher/delete/{id}"
    HOME_SUMMARY_PATH = "/v2/voucher/home-summary"

    def __init__(self, client: ApiClient):
        self.client = client

    def list_page(self, offset: int = 0, limit: Optional[int] = None,
                  date_from: Optional[str] = None, date_to: Optional[str] = None) -> Page:
        """Uma página de vouchers e o bloco `pagination` da resposta."""
        params = {"offset": offset, "limit": limit, "from": date_from, "to": date_to}
        try:
            data = self.client.get(self.LIST_PATH, params=params)
        except ApiError as e:
            if e.is_not_found:
                logger.info("Nenhum voucher encontrado para os critérios %s", params)
                return [], {}
            raise
        data = data or {}
        vouchers = [Voucher.from_api(item) for item in data.get("vouchers") or []]
        return vouchers, data.get("pagination") or {}

    def list(self, offset: int = 0, limit: Optional[int] = None,
             date_from: Optional[str] = None, date_to: Optional[str] = None) -> List[Voucher]:
        """Obtém os vouchers (opcionalmente entre `date_from` e `date_to`, inclusive).

        Sem `limit`, percorre todas as páginas a partir de `offset`.
        """
        return collect_pages(lambda o, n: self.list_page(o, n, date_from, date_to), offset, limit)

    def recent(self, limit: int = 5) -> List[Voucher]:
        return self.list(offset=0, limit=limit)

    def home_summary(self, month_start_day: int) -> Dict[str, Any]:
        """Resumo da home calculado no servidor: três períodos + vouchers recentes."""
        try:
            data = self.client.get(self.HOME_SUMMARY_PATH, params={"monthStartDay": month_start_day})
        except ApiError as e:
            if e.is_not_found:
                logger.info("Nenhum dado para o resumo da home")
                return {"periods": [], "recentVouchers": []}
            raise
        data = data or {}
        return {
            "periods": data.get("periods") or [],
            "recentVouchers": [Voucher.from_api(item) for item in data.get("recentVouchers") or []],
        }

    def create(self, data: Dict[str, Any]) -> Any:
        return self.client.post(self.CREATE_PATH, voucher_payload(data))

    def update(self, voucher_id: str, data: Dict[str, Any]) -> Any:
        return self.client.put(self.UPDATE_PATH.format(id=voucher_id), voucher_payload(data))

    def delete(self, voucher_id: str) -> Any:
        return self.client.delete(self.DELETE_PATH.format(id=voucher_id))


# --- Gastos ---
class ExpenseService:
    LIST_PATH = "/expense/getlist"
    DETAIL_PATH = "/expense/{id}"
    CREATE_PATH = "/expense/create"
    UPDATE_PATH = "/expense/update/{id}"
    DELETE_PATH = "/expense/delete/{id}"
    SUMMARY_PATH = "/expense/summary/categories"

    def __init__(self, client: ApiClient):
        self.client = client

    def list_page(self, offset: int = 0, limit: Optional[int] = None,
                  date_from: Optional[str] = None, date_to: Optional[str] = None,
                  category: Optional[str] = None) -> Page:
        params = {"offset": offset, "limit": limit, "from": date_from, "to": date_to, "category": category}
        try:
            data = self.client.get(self.LIST_PATH, params=params)
        except ApiError as e:
            if e.is_not_found:
                logger.info("Nenhum gasto encontrado para os critérios %s", params)
                return [], {}
            raise
        data = data or {}
        expenses = [Expense.from_api(item) for item in data.get("expenses") or []]
        return expenses, data.get("pagination") or {}

    def list(self, offset: int = 0, limit: Optional[int] = None,
             date_from: Optional[str] = None, date_to: Optional[str] = None,
             category: Optional[str] = None) -> List[Expense]:
        return collect_pages(lambda o, n: self.list_page(o, n, date_from, date_to, category), offset, limit)

    def get(self, expense_id: str) -> Expense:
        data = self.client.get(self.DETAIL_PATH.format(id=expense_id))
        return Expense.from_api(data["expense"])

    def category_summary(self, start_date: Optional[str] = None, end_date: Optional[str] = None) -> Dict[str, Any]:
        """Total por categoria calculado no servidor: {"summary": {...}, "total": n}."""
        params = {"startDate": start_date, "endDate": end_date}
        try:
            data = self.client.get(self.SUMMARY_PATH, params=params)
        except ApiError as e:
            if e.is_not_found:
                logger.info("Nenhum gasto para o resumo por categoria")
                return {"summary": {}, "total": 0}
            raise
        data = data or {}
        return {"summary": data.get("summary") or {}, "total": data.get("total") or 0}

    def create(self, data: Dict[str, Any]) -> Any:
        return self.client.post(self.CREATE_PATH, expense_payload(data))

    def update(self, expense_id: str, data: Dict[str, Any]) -> Any:
        return self.client.put(self.UPDATE_PATH.format(id=expense_id), expense_payload(data))

    def delete(self, expense_id: str) -> Any:
        return self.client.delete(self.DELETE_PATH.format(id=expense_id))


# --- Estatísticas ---
class StatisticsService:
    EARNINGS_PATH = "/v2/voucher/statistics/earnings"

    def __init__(self, client: ApiClient):
        self.client = client

    def earnings(self, date_from: Optional[str] = None, date_to: Optional[str] = None) -> Dict[str, Any]:
        """Série temporal de ganhos: {"data": [{date, value, count}], "summary": {...}}."""
        return self.client.get(self.EARNINGS_PATH, params={"from": date_from, "to": date_to}) or {}


# --- Autenticação ---
class AuthService:
    LOGIN_PATH = "/auth/login"

    def __init__(self, client: ApiClient):
        self.client = client

    def login(self, email: str, password: str) -> Dict[str, Any]:
        return self.client.post(self.LOGIN_PATH, {"email": email, "password": password})
