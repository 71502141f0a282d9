# bot_vouchers/core/periods.py
"""
Cálculo do "mês personalizado" (período de faturamento).

O período começa às 00:00 do dia `start_day` e termina às 23:59:59.999 do dia
anterior ao início do período seguinte. Dias inexistentes no mês (ex: dia 31
em abril) avançam para o mês seguinte, do mesmo jeito que `new Date(a, m, d)`.
"""
import datetime
from typing import NamedTuple, Optional, Union

DateLike = Union[datetime.date, datetime.datetime]

END_OF_DAY = datetime.time(23, 59, 59, 999000)


class Period(NamedTuple):
    start: datetime.datetime
    end: datetime.datetime

    def contains(self, moment: DateLike) -> bool:
        """Intervalo fechado: inclui as duas pontas."""
        if not isinstance(moment, datetime.datetime):
            moment = datetime.datetime.combine(moment, datetime.time.min)
        return self.start <= moment <= self.end


def overflow_date(year: int, month: int, day: int) -> datetime.date:
    """Monta uma data aceitando mês fora de 1..12 e dia além do fim do mês.

    Ex: overflow_date(2024, 0, 10) -> 2023-12-10
    Ex: overflow_date(2024, 4, 31) -> 2024-05-01
    """
    extra_years, month_index = divmod(month - 1, 12)
    first_day = datetime.date(year + extra_years, month_index + 1, 1)
    return first_day + datetime.timedelta(days=day - 1)


def add_months(moment: DateLike, months: int) -> DateLike:
    """Soma meses mantendo o dia do mês (com transbordo, como Date.setMonth)."""
    shifted = overflow_date(moment.year, moment.month + months, moment.day)
    if isinstance(moment, datetime.datetime):
        return datetime.datetime.combine(shifted, moment.time())
    return shifted


def validate_start_day(start_day: int) -> int:
    if not isinstance(start_day, int) or isinstance(start_day, bool) or not 1 <= start_day <= 31:
        raise ValueError(f"Dia de início do mês inválido: {start_day!r} (use 1 a 31)")
    return start_day


def custom_period(reference_date: DateLike, start_day: int, month_offset: Optional[int] = None) -> Period:
    """
    Retorna o período [início, fim] que contém `reference_date`.

    Sem `month_offset`, se o dia de referência ainda não chegou ao `start_day`
    o período é o que começou no mês anterior. Com um `month_offset` explícito
    (inclusive 0) o início é sempre o `start_day` do mês de referência
    deslocado, sem essa regra.
    """
    validate_start_day(start_day)
    month = reference_date.month + (month_offset or 0)
    if month_offset is None and reference_date.day < start_day:
        month -= 1

    start = overflow_date(reference_date.year, month, start_day)
    end = add_months(start, 1) - datetime.timedelta(days=1)
    return Period(
        datetime.datetime.combine(start, datetime.time.min),
        datetime.datetime.combine(end, END_OF_DAY),
    )


def period_title(month_offset: int) -> str:
    if month_offset == 0:
        return "Período atual"
    if month_offset == -1:
        return "Período anterior"
    if month_offset == 1:
        return "Próximo período"
    if month_offset < 0:
        return f"Há {abs(month_offset)} períodos"
    return f"Daqui a {month_offset} períodos"
