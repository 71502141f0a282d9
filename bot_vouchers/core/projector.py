# bot_vouchers/core/projector.py
import asyncio
import datetime
from typing import Callable, List, NamedTuple, Sequence

from bot_vouchers.core.aggregation import filter_and_aggregate, net_value
from bot_vouchers.core.ledger import Ledger
from bot_vouchers.core.models import FinancialRecord, Voucher
from bot_vouchers.core.periods import custom_period, period_title
from bot_vouchers.core.services import VoucherService
from bot_vouchers.core.settings import Settings
from bot_vouchers.utils.text_utils import format_date_range


DEFAULT_OFFSETS = (-2, -1, 0)
RECENT_LIMIT = 5


class PeriodSummary(NamedTuple):
    title: str
    date_range: str
    gross_value: float
    month_offset: int

    def net_value(self, discount_percentage: float) -> float:
        return net_value(self.gross_value, discount_percentage)


class HomeSummary(NamedTuple):
    periods: List[PeriodSummary]
    recent_vouchers: List[Voucher]


def project_periods(records: Sequence[FinancialRecord], today: datetime.date, start_day: int,
                    offsets: Sequence[int] = DEFAULT_OFFSETS) -> List[PeriodSummary]:
    """
    Um resumo por deslocamento, sempre relativo a `today` (não ao mês que o
    usuário está navegando). O valor é o bruto; o líquido é calculado na exibição.
    """
    summaries = []
    for offset in offsets:
        window = custom_period(today, start_day, month_offset=offset)
        result = filter_and_aggregate(records, window)
        summaries.append(PeriodSummary(
            title=period_title(offset),
            date_range=format_date_range(window.start, window.end, with_year=True),
            gross_value=result.total,
            month_offset=offset,
        ))
    return summaries


def most_recent(records: Sequence[FinancialRecord], limit: int = RECENT_LIMIT) -> List[FinancialRecord]:
    return sorted(records, key=lambda r: (r.date, r.id), reverse=True)[:limit]


class ClientSideProjector:
    """Calcula os três períodos a partir da coleção completa do ledger de vouchers."""

    def __init__(self, ledger: Ledger, settings: Settings, offsets: Sequence[int] = DEFAULT_OFFSETS,
                 today_provider: Callable[[], datetime.date] = datetime.date.today):
        self.ledger = ledger
        self.settings = settings
        self.offsets = offsets
        self.today_provider = today_provider

    async def summary(self) -> HomeSummary:
        periods = project_periods(self.ledger.records, self.today_provider(),
                                  self.settings.month_start_day, self.offsets)
        return HomeSummary(periods, most_recent(self.ledger.records))


class ServerSideProjector:
    """Usa o endpoint /v2/voucher/home-summary, que já devolve os períodos prontos."""

    def __init__(self, service: VoucherService, settings: Settings):
        self.service = service
        self.settings = settings

    async def summary(self) -> HomeSummary:
        data = await asyncio.to_thread(self.service.home_summary, self.settings.month_start_day)
        periods = [
            PeriodSummary(
                title=item.get("title") or period_title(int(item.get("monthOffset", 0))),
                date_range=item.get("dateRange", ""),
                gross_value=float(item.get("value") or 0),
                month_offset=int(item.get("monthOffset", 0)),
            )
            for item in data["periods"]
        ]
        return HomeSummary(periods, data["recentVouchers"])
