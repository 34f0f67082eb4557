# dompetku/core/services.py
"""
Lapisan service: validasi -> tulis ke Supabase -> update baris turunan.

Setiap operasi yang mengubah ledger terdiri dari beberapa penulisan berurutan
(misalnya insert pembayaran lalu update baris hutang). Tidak ada transaksi
database: StoreError pertama menghentikan langkah berikutnya dan diteruskan ke
pemanggil, tanpa retry. Karena semua pembacaan menghitung ulang
jumlah_terbayar/progress dari riwayat event, agregat yang basi akibat
kegagalan parsial akan pulih sendiri pada pembacaan berikutnya.
"""
import calendar
import dataclasses
import itertools
import threading
from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from typing import Dict, List, Optional, Tuple

from dompetku.core import aggregation, db, debts, goals, notifications
from dompetku.core.errors import ValidationError
from dompetku.core.models import (
    Budget, Category, Debt, DebtPayment, Goal, KategoriTipe, Rekening, Saving, Sumber, Transaction, to_json_number,
)
from dompetku.core.store import RecordStore
from dompetku.utils.logging_setup import get_logger

logger = get_logger("dompetku.core.services")


class RequestFence:
    """Penghitung generasi monoton: hasil refresh yang sudah basi bisa dibuang."""

    def __init__(self):
        self._counter = itertools.count(1)
        self._current = 0
        self._lock = threading.Lock()

    def begin(self) -> int:
        with self._lock:
            self._current = next(self._counter)
            return self._current

    def is_current(self, token: int) -> bool:
        with self._lock:
            return token == self._current


@dataclass(frozen=True)
class Dashboard:
    as_of: date
    totals: aggregation.DashboardTotals
    monthly_balance: List[aggregation.BalancePoint]
    expense_by_category: List[aggregation.CategoryTotal]
    source_balances: Dict[str, Decimal] = field(default_factory=dict)
    installments: Optional[debts.InstallmentSummary] = None


def _require_text(value: Optional[str], message: str) -> str:
    if value is None or not str(value).strip():
        raise ValidationError(message)
    return str(value).strip()


def _require_positive(amount: Optional[Decimal], message: str) -> Decimal:
    if amount is None or amount <= 0:
        raise ValidationError(message)
    return amount


EDITABLE_DEBT_FIELDS = (
    "nama_kreditor", "tanggal_hutang", "tanggal_jatuh_tempo", "keterangan",
    "cicilan_per_bulan", "tanggal_cicilan", "lama_cicilan",
)


def _check_installment_plan(cicilan_per_bulan: Optional[Decimal] = None,
                            tanggal_cicilan: Optional[int] = None,
                            lama_cicilan: Optional[int] = None) -> None:
    if cicilan_per_bulan is not None:
        _require_positive(cicilan_per_bulan, "Cicilan per bulan harus lebih dari 0")
    if tanggal_cicilan is not None and not 1 <= tanggal_cicilan <= 31:
        raise ValidationError("Tanggal cicilan harus antara 1 dan 31")
    if lama_cicilan is not None and lama_cicilan <= 0:
        raise ValidationError("Lama cicilan harus lebih dari 0 bulan")


class LedgerService:
    def __init__(self, store: RecordStore, reject_overpayment: bool = False):
        self.store = store
        self.payment_validator = debts.reject_overpayment if reject_overpayment else None

    # --- Transaksi ---
    def _validate_transaction(self, transaction: Transaction) -> None:
        if transaction.jumlah is None or transaction.jumlah <= 0 or not transaction.keterangan.strip():
            raise ValidationError("Jumlah dan keterangan harus diisi")
        if transaction.rekening is not None and transaction.sumber != Sumber.DEBIT:
            raise ValidationError("Rekening hanya berlaku untuk sumber Debit")

    def add_transaction(self, tipe: KategoriTipe, jumlah: Decimal, keterangan: str,
                        sumber: Sumber = Sumber.CASH, rekening: Optional[Rekening] = None,
                        kategori_id: Optional[str] = None, tanggal: Optional[date] = None) -> Transaction:
        transaction = Transaction(
            id=None,
            tipe=tipe,
            tanggal=tanggal or date.today(),
            jumlah=jumlah,
            keterangan=keterangan or "",
            sumber=sumber,
            rekening=rekening,
            kategori_id=kategori_id if tipe == KategoriTipe.PENGELUARAN else None,
        )
        self._validate_transaction(transaction)
        stored = db.add_transaction(self.store, transaction)
        logger.info("%s %s ditambahkan", tipe.value, stored.id)
        return stored

    def update_transaction(self, transaction: Transaction) -> None:
        if not transaction.id:
            raise ValidationError("Transaksi belum punya id")
        self._validate_transaction(transaction)
        db.update_transaction(self.store, transaction)

    def delete_transaction(self, tipe: KategoriTipe, transaction_id: str) -> None:
        db.delete_transaction(self.store, tipe, transaction_id)

    def list_transactions(self, tipe: KategoriTipe, start: Optional[date] = None,
                          end: Optional[date] = None, search: Optional[str] = None) -> List[Transaction]:
        return db.get_transactions(self.store, tipe, start=start, end=end, search=search)

    # --- Kategori ---
    def add_category(self, nama: str, tipe: KategoriTipe) -> Category:
        return db.add_category(self.store, _require_text(nama, "Nama kategori harus diisi"), tipe)

    def list_categories(self, tipe: Optional[KategoriTipe] = None) -> List[Category]:
        return db.get_categories(self.store, tipe)

    # --- Goals ---
    def add_goal(self, nama: str, target: Decimal, deadline: Optional[date] = None) -> Goal:
        if not nama or not str(nama).strip() or target is None:
            raise ValidationError("Nama dan target harus diisi")
        _require_positive(target, "Target harus lebih dari 0")
        return db.add_goal(self.store, Goal(id=None, nama=nama.strip(), target=target, deadline=deadline))

    def update_goal(self, goal_id: str, nama: str, target: Decimal, deadline: Optional[date] = None) -> None:
        if not nama or not str(nama).strip() or target is None:
            raise ValidationError("Nama dan target harus diisi")
        _require_positive(target, "Target harus lebih dari 0")
        db.update_goal(self.store, goal_id, {
            "nama": nama.strip(),
            "target": to_json_number(target),
            "deadline": deadline.isoformat() if deadline else None,
        })

    def delete_goal(self, goal_id: str) -> None:
        db.delete_goal(self.store, goal_id)

    def _load_goal(self, goal_id: str) -> Goal:
        goal = db.get_goal(self.store, goal_id)
        if goal is None:
            raise ValidationError(f"Target {goal_id} tidak ditemukan")
        return goals.derive_goal(goal, db.get_savings(self.store, goal_id=goal_id))

    def get_goal(self, goal_id: str) -> Goal:
        return self._load_goal(goal_id)

    def list_goals(self) -> List[Goal]:
        all_savings = db.get_savings(self.store)
        return [goals.derive_goal(goal, all_savings) for goal in db.get_goals(self.store)]

    def _write_progress(self, goal: Goal) -> None:
        db.update_goal(self.store, goal.id, {"progress": goal.to_row()["progress"]})

    def contribute(self, goal_id: str, amount: Decimal, sumber: Sumber = Sumber.CASH,
                   keterangan: str = "", tanggal: Optional[date] = None) -> Tuple[Goal, Saving]:
        _require_positive(amount, "Jumlah harus lebih dari 0")
        goal = self._load_goal(goal_id)
        new_goal, saving = goals.contribute(goal, amount, sumber, keterangan, tanggal)
        stored = db.add_saving(self.store, saving)
        self._write_progress(new_goal)
        logger.info("Tabungan %s ke target %s, progress %s", amount, goal_id, new_goal.progress)
        return new_goal, stored

    def _load_saving(self, saving_id: str) -> Saving:
        saving = db.get_saving(self.store, saving_id)
        if saving is None:
            raise ValidationError(f"Tabungan {saving_id} tidak ditemukan")
        return saving

    def edit_contribution(self, saving_id: str, new_amount: Decimal,
                          new_note: Optional[str] = None) -> Tuple[Goal, Saving]:
        _require_positive(new_amount, "Jumlah harus lebih dari 0")
        saving = self._load_saving(saving_id)
        goal = self._load_goal(saving.goal_id)
        new_goal, updated = goals.edit_contribution(goal, saving, new_amount, new_note)
        db.update_saving(self.store, saving_id, {
            "jumlah": updated.to_row()["jumlah"],
            "keterangan": updated.keterangan,
        })
        self._write_progress(new_goal)
        return new_goal, updated

    def delete_contribution(self, saving_id: str) -> Goal:
        saving = self._load_saving(saving_id)
        goal = self._load_goal(saving.goal_id)
        new_goal = goals.delete_contribution(goal, saving)
        db.delete_saving(self.store, saving_id)
        self._write_progress(new_goal)
        return new_goal

    def savings_by_source(self) -> Dict[Sumber, Decimal]:
        return goals.aggregate_by_source(db.get_savings(self.store))

    def savings_history(self, limit: int = 10) -> List[Saving]:
        return db.get_savings(self.store, limit=limit)

    # --- Hutang ---
    def add_debt(self, nama_kreditor: str, jumlah_hutang: Decimal,
                 tanggal_hutang: Optional[date] = None,
                 tanggal_jatuh_tempo: Optional[date] = None,
                 keterangan: str = "",
                 cicilan_per_bulan: Optional[Decimal] = None,
                 tanggal_cicilan: Optional[int] = None,
                 lama_cicilan: Optional[int] = None) -> Debt:
        if not nama_kreditor or not str(nama_kreditor).strip() or jumlah_hutang is None:
            raise ValidationError("Nama kreditor dan jumlah hutang harus diisi")
        _require_positive(jumlah_hutang, "Jumlah hutang harus lebih dari 0")
        _check_installment_plan(cicilan_per_bulan, tanggal_cicilan, lama_cicilan)
        debt = Debt(
            id=None,
            nama_kreditor=nama_kreditor.strip(),
            jumlah_hutang=jumlah_hutang,
            tanggal_hutang=tanggal_hutang or date.today(),
            tanggal_jatuh_tempo=tanggal_jatuh_tempo,
            keterangan=keterangan or "",
            status=debts.derive_status(jumlah_hutang, Decimal(0)),
            cicilan_per_bulan=cicilan_per_bulan,
            tanggal_cicilan=tanggal_cicilan,
            lama_cicilan=lama_cicilan,
        )
        return db.add_debt(self.store, debt)

    def _load_debt(self, debt_id: str) -> Debt:
        debt = db.get_debt(self.store, debt_id)
        if debt is None:
            raise ValidationError(f"Hutang {debt_id} tidak ditemukan")
        return debts.derive_debt(debt, db.get_debt_payments(self.store, debt_id))

    def get_debt(self, debt_id: str) -> Debt:
        return self._load_debt(debt_id)

    def update_debt(self, debt_id: str, jumlah_hutang: Optional[Decimal] = None, **changes) -> Debt:
        """Ubah data hutang. Perubahan pokok ikut menghitung ulang status."""
        if "status" in changes or "jumlah_terbayar" in changes:
            raise ValidationError("Status dan jumlah terbayar dihitung dari riwayat pembayaran")
        unknown = sorted(set(changes) - set(EDITABLE_DEBT_FIELDS))
        if unknown:
            raise ValidationError(f"Kolom hutang tidak dikenal: {', '.join(unknown)}")
        _check_installment_plan(
            changes.get("cicilan_per_bulan"), changes.get("tanggal_cicilan"), changes.get("lama_cicilan"),
        )
        debt = self._load_debt(debt_id)
        if "nama_kreditor" in changes:
            changes["nama_kreditor"] = _require_text(changes["nama_kreditor"], "Nama kreditor harus diisi")
        if changes:
            debt = dataclasses.replace(debt, **changes)
        if jumlah_hutang is not None:
            debt = debts.with_principal(debt, jumlah_hutang)
        row = debt.to_row()
        db.update_debt(self.store, debt_id, row)
        return debt

    def delete_debt(self, debt_id: str) -> None:
        db.delete_debt(self.store, debt_id)

    def list_debts(self, status_filter: str = "semua", as_of: Optional[date] = None) -> List[Debt]:
        all_payments = db.get_debt_payments(self.store)
        derived = [debts.derive_debt(debt, all_payments) for debt in db.get_debts(self.store)]
        return debts.filter_debts(derived, status_filter, as_of or date.today())

    def _write_paid(self, debt: Debt) -> None:
        row = debt.to_row()
        db.update_debt(self.store, debt.id, {"jumlah_terbayar": row["jumlah_terbayar"], "status": row["status"]})

    def record_payment(self, debt_id: str, amount: Decimal,
                       tanggal: Optional[date] = None) -> Tuple[Debt, DebtPayment]:
        _require_positive(amount, "Jumlah pembayaran harus lebih dari 0")
        debt = self._load_debt(debt_id)
        new_debt, payment = debts.record_payment(debt, amount, tanggal, self.payment_validator)
        stored = db.add_debt_payment(self.store, payment)
        self._write_paid(new_debt)
        logger.info("Pembayaran %s untuk hutang %s, status %s", amount, debt_id, new_debt.status.value)
        return new_debt, stored

    def delete_payment(self, payment_id: str) -> Debt:
        payment = db.get_debt_payment(self.store, payment_id)
        if payment is None:
            raise ValidationError(f"Pembayaran {payment_id} tidak ditemukan")
        debt = self._load_debt(payment.hutang_id)
        new_debt = debts.delete_payment(debt, payment)
        db.delete_debt_payment(self.store, payment_id)
        self._write_paid(new_debt)
        return new_debt

    def list_payments(self, debt_id: str) -> List[DebtPayment]:
        return db.get_debt_payments(self.store, debt_id)

    def migrate_legacy_debts(self) -> int:
        """
        Hutang lama hanya menyimpan jumlah_terbayar tanpa riwayat pembayaran.
        Buat satu pembayaran pembuka agar pembacaan dari event tetap benar.
        """
        all_payments = db.get_debt_payments(self.store)
        paid_ids = {p.hutang_id for p in all_payments}
        migrated = 0
        for debt in db.get_debts(self.store):
            if debt.id in paid_ids or debt.jumlah_terbayar <= 0:
                continue
            db.add_debt_payment(self.store, DebtPayment(
                id=None,
                hutang_id=debt.id,
                jumlah=debt.jumlah_terbayar,
                tanggal=debt.tanggal_hutang or date.today(),
            ))
            migrated += 1
        if migrated:
            logger.info("%s hutang lama dimigrasi ke riwayat pembayaran", migrated)
        return migrated

    def monthly_installments(self, as_of: Optional[date] = None) -> debts.InstallmentSummary:
        return debts.aggregate_monthly_installments(self.list_debts(), as_of or date.today())

    # --- Budget ---
    def add_budget(self, kategori_id: str, limit_amount: Decimal, bulan: int, tahun: int) -> Budget:
        _require_text(kategori_id, "Kategori harus diisi")
        _require_positive(limit_amount, "Limit budget harus lebih dari 0")
        if not 1 <= bulan <= 12:
            raise ValidationError("Bulan harus antara 1 dan 12")
        return db.add_budget(self.store, Budget(
            id=None, kategori_id=kategori_id, limit_amount=limit_amount, bulan=bulan, tahun=tahun,
        ))

    def list_budgets(self, bulan: int, tahun: int) -> List[Budget]:
        return db.get_budgets(self.store, bulan, tahun)

    def budget_usage(self, as_of: Optional[date] = None) -> List[aggregation.BudgetUsage]:
        as_of = as_of or date.today()
        budgets = db.get_budgets(self.store, as_of.month, as_of.year)
        if not budgets:
            return []
        start = as_of.replace(day=1)
        end = as_of.replace(day=calendar.monthrange(as_of.year, as_of.month)[1])
        expenses = db.get_transactions(self.store, KategoriTipe.PENGELUARAN, start=start, end=end)
        return aggregation.budget_usage(budgets, expenses)

    # --- Dashboard ---
    def dashboard(self, as_of: Optional[date] = None, months_back: int = 6) -> Dashboard:
        as_of = as_of or date.today()
        incomes = db.get_transactions(self.store, KategoriTipe.PEMASUKAN)
        expenses = db.get_transactions(self.store, KategoriTipe.PENGELUARAN)
        all_transactions = incomes + expenses

        source_balances = {
            Sumber.CASH.value: aggregation.balance_by_source(all_transactions, Sumber.CASH),
            Sumber.DEBIT.value: aggregation.balance_by_source(all_transactions, Sumber.DEBIT),
        }
        for rekening in Rekening:
            source_balances[rekening.value] = aggregation.balance_by_source(
                all_transactions, Sumber.DEBIT, rekening
            )

        return Dashboard(
            as_of=as_of,
            totals=aggregation.dashboard_totals(incomes, expenses, db.get_goals(self.store)),
            monthly_balance=aggregation.monthly_balance_series(all_transactions, months_back, as_of),
            expense_by_category=aggregation.expense_by_category(expenses),
            source_balances=source_balances,
            installments=self.monthly_installments(as_of),
        )

    # --- Notifikasi ---
    def notifications(self, as_of: Optional[date] = None) -> List[notifications.Notification]:
        as_of = as_of or date.today()
        return (
            notifications.goal_deadline_notifications(db.get_goals(self.store), as_of)
            + notifications.debt_due_notifications(self.list_debts(as_of=as_of), as_of)
            + notifications.budget_limit_notifications(self.budget_usage(as_of))
        )
