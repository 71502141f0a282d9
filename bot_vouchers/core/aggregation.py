# bot_vouchers/core/aggregation.py
from typing import Callable, Dict, List, NamedTuple, Optional, Sequence

import pandas as pd

from bot_vouchers.core.models import FinancialRecord
from bot_vouchers.core.periods import Period


class AggregationResult(NamedTuple):
    filtered: List[FinancialRecord]
    total: float
    category_breakdown: Dict[str, float]


EMPTY_RESULT = AggregationResult([], 0.0, {})


def default_category(record: FinancialRecord) -> str:
    return record.category


def filter_and_aggregate(records: Sequence[FinancialRecord],
                         window: Period,
                         category_of: Optional[Callable[[FinancialRecord], str]] = None) -> AggregationResult:
    """
    Filtra os registros cuja data cai em [window.start, window.end], ordena do
    mais recente para o mais antigo (empate: id crescente) e soma os valores,
    no total e por categoria. Categorias sem registros no período não aparecem.
    """
    if not records:
        return AggregationResult([], 0.0, {})
    category_of = category_of or default_category

    df = pd.DataFrame({
        "record": list(records),
        "id": [str(r.id) for r in records],
        "date": pd.to_datetime([r.date for r in records]),
        "value": [float(r.value) for r in records],
        "category": [category_of(r) for r in records],
    })

    df = df[(df["date"] >= window.start) & (df["date"] <= window.end)]
    if df.empty:
        return AggregationResult([], 0.0, {})

    df = df.sort_values(["date", "id"], ascending=[False, True])
    breakdown = df.groupby("category", sort=False)["value"].sum()

    return AggregationResult(
        filtered=df["record"].tolist(),
        total=float(df["value"].sum()),
        category_breakdown={str(category): float(total) for category, total in breakdown.items()},
    )


def net_value(gross: float, discount_percentage: float) -> float:
    """Valor líquido exibido: bruto menos o desconto configurado."""
    return gross * (1 - discount_percentage)
