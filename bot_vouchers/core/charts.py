# bot_vouchers/core/charts.py
import io
from typing import Any, Callable, Dict, Optional, Union

import matplotlib

matplotlib.use("Agg")

import matplotlib.pyplot as plt  # noqa: E402
import matplotlib.ticker as mticker  # noqa: E402
import pandas as pd  # noqa: E402

# Configurações globais para os gráficos
plt.rcParams['font.family'] = 'sans-serif'
plt.rcParams['font.size'] = 10
plt.rcParams['axes.labelsize'] = 12
plt.rcParams['axes.titlesize'] = 14
plt.rcParams['legend.fontsize'] = 10

COLORS = {
    'Ganho': '#28a745',
    'Quantidade': '#007bff',
    'Fatias_Variadas': ['#1f77b4', '#ff7f0e', '#2ca02c', '#d62728', '#9467bd', '#8c564b',
                        '#e377c2', '#7f7f7f', '#bcbd22', '#17becf'],
}

BRL_FORMATTER = mticker.FormatStrFormatter('R$%.2f')


def _to_png(fig) -> io.BytesIO:
    buf = io.BytesIO()
    fig.savefig(buf, format='png', dpi=150)
    buf.seek(0)
    plt.close(fig)
    return buf


def generate_earnings_chart(statistics: Dict[str, Any]) -> Union[io.BytesIO, None]:
    """Gráfico da série de ganhos devolvida por /v2/voucher/statistics/earnings."""
    points = statistics.get('data') or []
    df = pd.DataFrame(points)
    if df.empty or 'date' not in df.columns:
        return None

    df['date'] = pd.to_datetime(df['date'])
    df = df.sort_values('date')
    summary = statistics.get('summary') or {}
    interval = summary.get('intervalDays') or 1

    fig, ax = plt.subplots(figsize=(12, 6))
    ax.plot(df['date'], df['value'], marker='o', color=COLORS['Ganho'], label='Ganhos')
    ax.fill_between(df['date'], df['value'], alpha=0.15, color=COLORS['Ganho'])
    ax.set_title(f"Ganhos no período (pontos a cada {interval} dia(s))", fontweight='bold')
    ax.set_ylabel('Valor (R$)')
    ax.set_xlabel('Data')
    ax.yaxis.set_major_formatter(BRL_FORMATTER)
    ax.grid(axis='y', linestyle='--', alpha=0.7)

    if 'count' in df.columns:
        ax_count = ax.twinx()
        ax_count.bar(df['date'], df['count'], width=max(interval * 0.6, 0.5),
                     alpha=0.25, color=COLORS['Quantidade'], label='Vouchers')
        ax_count.set_ylabel('Quantidade de vouchers')

    total = summary.get('totalEarnings')
    if total is not None:
        ax.text(0.01, 0.97, f"Total: R${float(total):.2f} em {summary.get('voucherCount', 0)} vouchers",
                transform=ax.transAxes, va='top', fontsize=10)

    fig.autofmt_xdate()
    fig.tight_layout()
    return _to_png(fig)


def generate_category_chart(breakdown: Dict[str, float],
                            label_of: Optional[Callable[[str], str]] = None,
                            title: str = 'Total por Categoria') -> Union[io.BytesIO, None]:
    """Gráfico de barras do total por categoria (ex: category_breakdown de um ledger)."""
    if not breakdown:
        return None
    label_of = label_of or (lambda code: code)

    series = pd.Series(breakdown, dtype=float).sort_values(ascending=False)
    labels = [label_of(code) for code in series.index]

    fig, ax = plt.subplots(figsize=(12, 7))
    bars = ax.bar(labels, series.values, color=COLORS['Fatias_Variadas'][:len(labels)])
    ax.set_title(title, fontsize=16, fontweight='bold')
    ax.set_ylabel('Valor (R$)')
    ax.set_xlabel('Categoria')
    ax.bar_label(bars, fmt='R$%.2f', fontsize=8, padding=3)
    ax.yaxis.set_major_formatter(BRL_FORMATTER)
    ax.grid(axis='y', linestyle='--', alpha=0.7)
    plt.setp(ax.get_xticklabels(), rotation=45, ha='right')

    fig.tight_layout()
    return _to_png(fig)
