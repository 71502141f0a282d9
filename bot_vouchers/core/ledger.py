# bot_vouchers/core/ledger.py
"""
Ledger: dono de uma coleção de registros financeiros (vouchers ou gastos).

Guarda a coleção inteira vinda da API, o ponteiro do "mês atual" e deriva dele
a lista filtrada/ordenada, o total e o total por categoria. Uma única recarga
pode estar em andamento por vez; pedidos feitos enquanto ela roda são
descartados. Mutações sempre recarregam a coleção depois de concluídas.
"""
import asyncio
import datetime
import logging
from enum import Enum
from typing import Any, Callable, Dict, List, Optional, Set

from bot_vouchers.core.aggregation import AggregationResult, default_category, filter_and_aggregate
from bot_vouchers.core.api import ApiError
from bot_vouchers.core.models import FinancialRecord
from bot_vouchers.core.periods import Period, add_months, custom_period
from bot_vouchers.core.settings import Settings
from bot_vouchers.utils.text_utils import format_date_range

logger = logging.getLogger(__name__)


class LoadState(Enum):
    IDLE = "idle"
    LOADING = "loading"


class Ledger:
    def __init__(self, name: str, service: Any, settings: Settings,
                 category_of: Callable[[FinancialRecord], str] = default_category,
                 send_window: bool = True,
                 summary_loader: Optional[Callable[[Period], Dict[str, Any]]] = None,
                 anchor: Optional[datetime.date] = None):
        """
        `service` precisa de list/create/update/delete. Com `send_window` o
        período ativo vai como from/to para a API; sem ele a coleção completa é
        baixada e o filtro fica só do lado do cliente (que roda sempre).
        """
        self.name = name
        self.service = service
        self.settings = settings
        self.category_of = category_of
        self.send_window = send_window
        self.summary_loader = summary_loader

        self.records: List[FinancialRecord] = []
        self.anchor = anchor or datetime.date.today()
        self.state = LoadState.IDLE
        self.is_submitting = False
        self.error: Optional[str] = None
        self._category_summary: Optional[Dict[str, Any]] = None
        self._summary_window: Optional[Period] = None

        self._version = 0
        self._cache_key = None
        self._cache_value: Optional[AggregationResult] = None
        self._reload_tasks: Set[asyncio.Task] = set()
        self._unsubscribe = settings.subscribe(self._on_settings_changed)

    # --- Visões derivadas ---
    @property
    def window(self) -> Period:
        return custom_period(self.anchor, self.settings.month_start_day)

    @property
    def is_loading(self) -> bool:
        return self.state is LoadState.LOADING

    def _aggregate(self) -> AggregationResult:
        key = (self._version, self.window)
        if key != self._cache_key:
            self._cache_value = filter_and_aggregate(self.records, key[1], self.category_of)
            self._cache_key = key
        return self._cache_value

    @property
    def filtered(self) -> List[FinancialRecord]:
        return self._aggregate().filtered

    @property
    def total(self) -> float:
        return self._aggregate().total

    @property
    def category_breakdown(self) -> Dict[str, float]:
        return self._aggregate().category_breakdown

    @property
    def category_summary(self) -> Optional[Dict[str, Any]]:
        """Resumo do servidor, só enquanto corresponder ao período ativo."""
        if self._summary_window != self.window:
            return None
        return self._category_summary

    def period_label(self, with_year: bool = False) -> str:
        window = self.window
        return format_date_range(window.start, window.end, with_year)

    def get_by_id(self, record_id: str) -> Optional[FinancialRecord]:
        return next((r for r in self.records if r.id == record_id), None)

    def records_in_month(self, month: int) -> List[FinancialRecord]:
        """Registros cujo mês de calendário (1-12) é `month`, em toda a coleção."""
        return [r for r in self.records if r.date.month == month]

    # --- Ponteiro do período ---
    def set_current_period_anchor(self, anchor: datetime.date) -> None:
        self.anchor = anchor
        self._schedule_reload()

    def shift_period(self, months: int) -> None:
        self.set_current_period_anchor(add_months(self.anchor, months))

    def _on_settings_changed(self, key: str, value: object) -> None:
        if key == "month_start_day":
            self._schedule_reload()

    def _schedule_reload(self) -> None:
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            logger.warning("%s: sem event loop ativo, recarga não agendada", self.name)
            return
        task = loop.create_task(self.reload())
        self._reload_tasks.add(task)
        task.add_done_callback(self._reload_tasks.discard)

    async def wait_pending_reload(self) -> None:
        """Aguarda as recargas agendadas por mudanças de período ou de configuração."""
        if self._reload_tasks:
            await asyncio.gather(*list(self._reload_tasks))

    # --- Carga ---
    async def reload(self, filters: Optional[Dict[str, Any]] = None) -> None:
        if self.state is LoadState.LOADING:
            logger.debug("%s: recarga já em andamento, pedido descartado", self.name)
            return

        self.state = LoadState.LOADING
        self.error = None
        window = self.window
        params: Dict[str, Any] = {"offset": 0}
        if self.send_window:
            params["date_from"] = window.start.strftime("%Y-%m-%d")
            params["date_to"] = window.end.strftime("%Y-%m-%d")
        params.update(filters or {})

        try:
            records = await asyncio.to_thread(self.service.list, **params)
        except ApiError as e:
            self.error = e.message or f"Falha ao carregar {self.name}"
            logger.error("Erro ao carregar %s: %s", self.name, e)
        except Exception:
            self.error = f"Falha ao carregar {self.name}"
            logger.exception("Erro inesperado ao carregar %s", self.name)
        else:
            self.records = list(records)
            self._version += 1
            # O resumo também fica dentro da trava: só uma carga por vez
            if self.summary_loader is not None:
                await self._load_summary(window)
        finally:
            self.state = LoadState.IDLE

    async def _load_summary(self, window: Period) -> None:
        try:
            summary = await asyncio.to_thread(self.summary_loader, window)
        except ApiError as e:
            logger.error("Erro ao carregar resumo por categoria de %s: %s", self.name, e)
        except Exception:
            logger.exception("Erro inesperado ao carregar resumo por categoria de %s", self.name)
        else:
            self._category_summary = summary
            self._summary_window = window

    # --- Mutações ---
    async def _mutate(self, action: str, func: Callable[..., Any], *args: Any) -> Any:
        self.is_submitting = True
        self.error = None
        try:
            result = await asyncio.to_thread(func, *args)
            await self.reload()
            return result
        except Exception as e:
            self.error = getattr(e, "message", None) or f"Falha ao {action}"
            logger.error("Erro ao %s (%s): %s", action, self.name, e)
            raise
        finally:
            self.is_submitting = False

    async def create(self, data: Dict[str, Any]) -> Any:
        return await self._mutate("adicionar", self.service.create, data)

    async def update(self, record_id: str, data: Dict[str, Any]) -> Any:
        return await self._mutate("atualizar", self.service.update, record_id, data)

    async def delete(self, record_id: str) -> Any:
        return await self._mutate("excluir", self.service.delete, record_id)

    def close(self) -> None:
        self._unsubscribe()


def voucher_ledger(service: Any, settings: Settings, **kwargs: Any) -> Ledger:
    """Vouchers: coleção completa baixada, categoria pelo prefixo do código."""
    return Ledger("vouchers", service, settings,
                  category_of=default_category, send_window=False, **kwargs)


def expense_ledger(service: Any, settings: Settings, **kwargs: Any) -> Ledger:
    """Gastos: período enviado à API e resumo por categoria do servidor."""

    def load_summary(window: Period) -> Dict[str, Any]:
        return service.category_summary(
            start_date=window.start.strftime("%Y-%m-%d"),
            end_date=window.end.strftime("%Y-%m-%d"),
        )

    return Ledger("gastos", service, settings, send_window=True, summary_loader=load_summary, **kwargs)
