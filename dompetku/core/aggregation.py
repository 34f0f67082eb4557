# dompetku/core/aggregation.py
from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Dict, Iterable, List, Optional

import pandas as pd

from dompetku.core.errors import ValidationError
from dompetku.core.models import Budget, Goal, Rekening, Sumber, Transaction

MONTH_LABELS = ["Jan", "Feb", "Mar", "Apr", "Mei", "Jun", "Jul", "Agu", "Sep", "Okt", "Nov", "Des"]

# Palet grafik pengeluaran, dipakai bergiliran sesuai urutan kategori
CATEGORY_COLORS = ["#3B82F6", "#10B981", "#F59E0B", "#EF4444", "#8B5CF6", "#06B6D4"]

OTHER_CATEGORY = "Other"


@dataclass(frozen=True)
class BalancePoint:
    month: str
    balance: Decimal
    period: str


@dataclass(frozen=True)
class CategoryTotal:
    name: str
    value: Decimal
    color: str


@dataclass(frozen=True)
class DashboardTotals:
    total_income: Decimal
    total_expense: Decimal
    balance: Decimal
    active_goals: int


@dataclass(frozen=True)
class BudgetUsage:
    budget: Budget
    spent: Decimal
    percentage: float


def _signed(transaction: Transaction) -> Decimal:
    return transaction.jumlah if transaction.is_income else -transaction.jumlah


def month_periods(months_back: int, as_of: date) -> pd.PeriodIndex:
    """N bulan terakhir termasuk bulan berjalan, dari yang paling lama."""
    if months_back < 1:
        raise ValidationError("months_back minimal 1")
    end = pd.Period(year=as_of.year, month=as_of.month, freq="M")
    return pd.period_range(end=end, periods=months_back, freq="M")


def monthly_balance_series(transactions: Iterable[Transaction], months_back: int = 6,
                           as_of: Optional[date] = None) -> List[BalancePoint]:
    """
    Saldo per bulan (pemasukan - pengeluaran) untuk N bulan terakhir.
    Batas bulan inklusif dan hanya memakai kolom tanggal transaksi.
    Bulan tanpa transaksi bernilai 0.
    """
    periods = month_periods(months_back, as_of or date.today())

    df = pd.DataFrame([(t.tanggal, _signed(t)) for t in transactions], columns=["tanggal", "jumlah"])
    totals: Dict[pd.Period, Decimal] = {}
    if not df.empty:
        df["bulan"] = pd.to_datetime(df["tanggal"]).dt.to_period("M")
        df = df[df["bulan"].isin(periods)]
        for bulan, values in df.groupby("bulan")["jumlah"]:
            totals[bulan] = sum(values, Decimal(0))

    return [
        BalancePoint(
            month=MONTH_LABELS[p.month - 1],
            balance=totals.get(p, Decimal(0)),
            period=str(p),
        )
        for p in periods
    ]


def expense_by_category(expenses: Iterable[Transaction]) -> List[CategoryTotal]:
    totals: Dict[str, Decimal] = {}
    for expense in expenses:
        name = expense.kategori_nama or OTHER_CATEGORY
        totals[name] = totals.get(name, Decimal(0)) + expense.jumlah
    return [
        CategoryTotal(name=name, value=value, color=CATEGORY_COLORS[i % len(CATEGORY_COLORS)])
        for i, (name, value) in enumerate(totals.items())
    ]


def balance_by_source(transactions: Iterable[Transaction], sumber: Sumber,
                      rekening: Optional[Rekening] = None) -> Decimal:
    """Saldo satu sumber dana; untuk Debit bisa dipersempit ke satu rekening."""
    total = Decimal(0)
    for t in transactions:
        if t.sumber != sumber:
            continue
        if rekening is not None and t.rekening != rekening:
            continue
        total += _signed(t)
    return total


def dashboard_totals(incomes: Iterable[Transaction], expenses: Iterable[Transaction],
                     goals: Iterable[Goal]) -> DashboardTotals:
    total_income = sum((t.jumlah for t in incomes), Decimal(0))
    total_expense = sum((t.jumlah for t in expenses), Decimal(0))
    return DashboardTotals(
        total_income=total_income,
        total_expense=total_expense,
        balance=total_income - total_expense,
        active_goals=len(list(goals)),
    )


def budget_usage(budgets: Iterable[Budget], expenses: Iterable[Transaction]) -> List[BudgetUsage]:
    """Pemakaian budget: total pengeluaran kategori pada bulan/tahun budget."""
    expenses = list(expenses)
    usages = []
    for budget in budgets:
        spent = sum(
            (
                e.jumlah for e in expenses
                if e.kategori_id == budget.kategori_id
                and e.tanggal.month == budget.bulan
                and e.tanggal.year == budget.tahun
            ),
            Decimal(0),
        )
        percentage = float(spent / budget.limit_amount * 100) if budget.limit_amount > 0 else 0.0
        usages.append(BudgetUsage(budget=budget, spent=spent, percentage=percentage))
    return usages
