# dompetku/core/db.py
from datetime import date
from typing import Any, Dict, List, Union

from dompetku.core.models import (
    Budget, Category, Debt, DebtPayment, DebtStatus, Goal, KategoriTipe, Saving, Sumber, Transaction,
)
from dompetku.core.store import RecordStore

TABLE_KATEGORI = "kategori"
TABLE_GOALS = "goals"
TABLE_GOAL_SAVINGS = "goal_savings"
TABLE_HUTANG = "hutang"
TABLE_PEMBAYARAN_HUTANG = "pembayaran_hutang"
TABLE_BUDGET = "budget"


def _first(rows: List[Dict[str, Any]]) -> Union[Dict[str, Any], None]:
    return rows[0] if rows else None


# --- Transaksi (pemasukan / pengeluaran) ---
def get_transactions(store: RecordStore, tipe: KategoriTipe,
                     start: Union[date, None] = None,
                     end: Union[date, None] = None,
                     search: Union[str, None] = None) -> List[Transaction]:
    """
    Ambil transaksi satu tipe, opsional dibatasi rentang tanggal (inklusif)
    dan kata kunci di keterangan (tanpa beda huruf besar/kecil).
    """
    select = "*, kategori(nama)" if tipe == KategoriTipe.PENGELUARAN else "*"
    rows = store.find(
        tipe.value,
        select=select,
        order="tanggal",
        desc=True,
        gte={"tanggal": start.isoformat()} if start else None,
        lte={"tanggal": end.isoformat()} if end else None,
        ilike={"keterangan": search} if search else None,
    )
    return [Transaction.from_row(row, tipe) for row in rows]


def add_transaction(store: RecordStore, transaction: Transaction) -> Transaction:
    row = store.insert(transaction.tipe.value, transaction.to_row())
    return Transaction.from_row(row, transaction.tipe)


def update_transaction(store: RecordStore, transaction: Transaction) -> None:
    store.update(transaction.tipe.value, transaction.id, transaction.to_row())


def delete_transaction(store: RecordStore, tipe: KategoriTipe, transaction_id: str) -> None:
    store.delete(tipe.value, transaction_id)


# --- Kategori ---
def get_categories(store: RecordStore, tipe: Union[KategoriTipe, None] = None) -> List[Category]:
    filters = {"tipe": tipe.value} if tipe else None
    rows = store.find(TABLE_KATEGORI, filters=filters, order="nama")
    return [Category.from_row(row) for row in rows]


def add_category(store: RecordStore, nama: str, tipe: KategoriTipe) -> Category:
    row = store.insert(TABLE_KATEGORI, {"nama": nama, "tipe": tipe.value})
    return Category.from_row(row)


# --- Goals ---
def get_goals(store: RecordStore) -> List[Goal]:
    rows = store.find(TABLE_GOALS, order="created_at", desc=True)
    return [Goal.from_row(row) for row in rows]


def get_goal(store: RecordStore, goal_id: str) -> Union[Goal, None]:
    row = _first(store.find(TABLE_GOALS, filters={"id": goal_id}))
    return Goal.from_row(row) if row else None


def add_goal(store: RecordStore, goal: Goal) -> Goal:
    return Goal.from_row(store.insert(TABLE_GOALS, goal.to_row()))


def update_goal(store: RecordStore, goal_id: str, patch: Dict[str, Any]) -> None:
    store.update(TABLE_GOALS, goal_id, patch)


def delete_goal(store: RecordStore, goal_id: str) -> None:
    """Hapus goal beserta riwayat tabungannya."""
    store.delete_where(TABLE_GOAL_SAVINGS, {"goal_id": goal_id})
    store.delete(TABLE_GOALS, goal_id)


# --- Tabungan goal ---
def get_savings(store: RecordStore,
                goal_id: Union[str, None] = None,
                sumber: Union[Sumber, None] = None,
                limit: Union[int, None] = None) -> List[Saving]:
    filters = {}
    if goal_id:
        filters["goal_id"] = goal_id
    if sumber:
        filters["sumber"] = sumber.value
    rows = store.find(TABLE_GOAL_SAVINGS, filters=filters, select="*, goals(nama)",
                      order="created_at", desc=True, limit=limit)
    return [Saving.from_row(row) for row in rows]


def get_saving(store: RecordStore, saving_id: str) -> Union[Saving, None]:
    row = _first(store.find(TABLE_GOAL_SAVINGS, filters={"id": saving_id}))
    return Saving.from_row(row) if row else None


def add_saving(store: RecordStore, saving: Saving) -> Saving:
    return Saving.from_row(store.insert(TABLE_GOAL_SAVINGS, saving.to_row()))


def update_saving(store: RecordStore, saving_id: str, patch: Dict[str, Any]) -> None:
    store.update(TABLE_GOAL_SAVINGS, saving_id, patch)


def delete_saving(store: RecordStore, saving_id: str) -> None:
    store.delete(TABLE_GOAL_SAVINGS, saving_id)


# --- Hutang ---
def get_debts(store: RecordStore, status: Union[DebtStatus, None] = None) -> List[Debt]:
    filters = {"status": status.value} if status else None
    rows = store.find(TABLE_HUTANG, filters=filters, order="created_at", desc=True)
    return [Debt.from_row(row) for row in rows]


def get_debt(store: RecordStore, debt_id: str) -> Union[Debt, None]:
    row = _first(store.find(TABLE_HUTANG, filters={"id": debt_id}))
    return Debt.from_row(row) if row else None


def add_debt(store: RecordStore, debt: Debt) -> Debt:
    return Debt.from_row(store.insert(TABLE_HUTANG, debt.to_row()))


def update_debt(store: RecordStore, debt_id: str, patch: Dict[str, Any]) -> None:
    store.update(TABLE_HUTANG, debt_id, patch)


def delete_debt(store: RecordStore, debt_id: str) -> None:
    """Hapus hutang beserta riwayat pembayarannya."""
    store.delete_where(TABLE_PEMBAYARAN_HUTANG, {"hutang_id": debt_id})
    store.delete(TABLE_HUTANG, debt_id)


# --- Pembayaran hutang ---
def get_debt_payments(store: RecordStore, debt_id: Union[str, None] = None) -> List[DebtPayment]:
    filters = {"hutang_id": debt_id} if debt_id else None
    rows = store.find(TABLE_PEMBAYARAN_HUTANG, filters=filters, order="tanggal")
    return [DebtPayment.from_row(row) for row in rows]


def get_debt_payment(store: RecordStore, payment_id: str) -> Union[DebtPayment, None]:
    row = _first(store.find(TABLE_PEMBAYARAN_HUTANG, filters={"id": payment_id}))
    return DebtPayment.from_row(row) if row else None


def add_debt_payment(store: RecordStore, payment: DebtPayment) -> DebtPayment:
    return DebtPayment.from_row(store.insert(TABLE_PEMBAYARAN_HUTANG, payment.to_row()))


def delete_debt_payment(store: RecordStore, payment_id: str) -> None:
    store.delete(TABLE_PEMBAYARAN_HUTANG, payment_id)


# --- Budget ---
def get_budgets(store: RecordStore, bulan: int, tahun: int) -> List[Budget]:
    rows = store.find(TABLE_BUDGET, filters={"bulan": bulan, "tahun": tahun}, select="*, kategori(nama)")
    return [Budget.from_row(row) for row in rows]


def add_budget(store: RecordStore, budget: Budget) -> Budget:
    return Budget.from_row(store.insert(TABLE_BUDGET, budget.to_row()))
