# dompetku/core/charts.py
import io
from typing import List, Union

import matplotlib
matplotlib.use("Agg")
import matplotlib.pyplot as plt
import matplotlib.ticker as mticker
import pandas as pd

from dompetku.core.aggregation import BalancePoint, CategoryTotal
from dompetku.utils.text_utils import format_rupiah

# Pengaturan global grafik
plt.style.use('seaborn-v0_8-darkgrid')
plt.rcParams['font.family'] = 'sans-serif'
plt.rcParams['font.size'] = 10
plt.rcParams['axes.labelsize'] = 12
plt.rcParams['axes.titlesize'] = 14
plt.rcParams['xtick.labelsize'] = 10
plt.rcParams['ytick.labelsize'] = 10
plt.rcParams['legend.fontsize'] = 10

BALANCE_COLOR = '#3B82F6'


def _rupiah_millions(value, _pos) -> str:
    return f"Rp {value / 1_000_000:.1f}jt"


def _to_png(fig) -> io.BytesIO:
    buf = io.BytesIO()
    fig.savefig(buf, format='png', dpi=150)
    buf.seek(0)
    plt.close(fig)
    return buf


def generate_balance_chart(series: List[BalancePoint]) -> Union[io.BytesIO, None]:
    """Grafik garis perkembangan saldo per bulan."""
    if not series:
        return None

    data = pd.Series([float(p.balance) for p in series], index=[p.month for p in series])

    fig, ax = plt.subplots(figsize=(10, 6))
    data.plot(kind='line', ax=ax, color=BALANCE_COLOR, linewidth=3, marker='o', markersize=6)

    ax.set_title('Perkembangan Saldo', fontsize=16, fontweight='bold')
    ax.set_ylabel('Saldo (Rp)')
    ax.set_xlabel('Bulan')
    ax.set_xticks(range(len(data)))
    ax.set_xticklabels(data.index)
    ax.grid(axis='y', linestyle='--', alpha=0.7)
    ax.yaxis.set_major_formatter(mticker.FuncFormatter(_rupiah_millions))
    fig.tight_layout()

    return _to_png(fig)


def generate_expense_chart(categories: List[CategoryTotal]) -> Union[io.BytesIO, None]:
    """Grafik pie pengeluaran per kategori dengan warna dari palet tetap."""
    if not categories:
        return None

    values = [float(c.value) for c in categories]
    total = sum(values)
    if total <= 0:
        return None

    fig, ax = plt.subplots(figsize=(10, 7))
    wedges, _texts, _autotexts = ax.pie(
        values,
        colors=[c.color for c in categories],
        autopct=lambda p: f'{p:.0f}%',
        startangle=90,
        pctdistance=0.8,
    )
    ax.set_title('Pengeluaran per Kategori', fontsize=16, fontweight='bold')
    ax.axis('equal')

    labels = [f"{c.name}: {format_rupiah(c.value)}" for c in categories]
    ax.legend(wedges, labels, title="Kategori", loc="center left", bbox_to_anchor=(1, 0, 0.5, 1))
    fig.tight_layout()

    return _to_png(fig)
