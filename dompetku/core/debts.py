# dompetku/core/debts.py
"""
Ledger hutang: menjaga pasangan turunan (jumlah_terbayar, status) pada Debt.

Status tidak pernah di-set langsung. Status selalu dihitung ulang dari
jumlah_terbayar setiap kali pembayaran ditambah, diubah atau dihapus:
``lunas`` jika jumlah_terbayar >= jumlah_hutang, selain itu ``aktif``.

Pembayaran yang melebihi sisa hutang tetap diterima, kecuali ada validator
(misalnya ``reject_overpayment``) yang dipasang oleh pemanggil.
"""
import dataclasses
from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Callable, Iterable, List, Optional, Tuple

from dompetku.core.errors import ValidationError
from dompetku.core.models import Debt, DebtPayment, DebtStatus

PaymentValidator = Callable[[Debt, Decimal], None]

STATUS_FILTERS = ("semua", "aktif", "lunas", "lewat_tempo")


def derive_status(jumlah_hutang: Decimal, jumlah_terbayar: Decimal) -> DebtStatus:
    return DebtStatus.LUNAS if jumlah_terbayar >= jumlah_hutang else DebtStatus.AKTIF


def _with_paid(debt: Debt, jumlah_terbayar: Decimal) -> Debt:
    return dataclasses.replace(
        debt,
        jumlah_terbayar=jumlah_terbayar,
        status=derive_status(debt.jumlah_hutang, jumlah_terbayar),
    )


def reject_overpayment(debt: Debt, amount: Decimal) -> None:
    """Validator opsional: tolak pembayaran di atas sisa hutang."""
    if amount > compute_remaining(debt):
        raise ValidationError(
            f"Pembayaran melebihi sisa hutang ({compute_remaining(debt)})"
        )


def record_payment(debt: Debt, amount: Decimal,
                   tanggal: Optional[date] = None,
                   validator: Optional[PaymentValidator] = None) -> Tuple[Debt, DebtPayment]:
    """Catat pembayaran; kembalikan debt baru dan record pembayaran yang harus disimpan."""
    if amount is None or amount <= 0:
        raise ValidationError("Jumlah pembayaran harus lebih dari 0")
    if validator is not None:
        validator(debt, amount)
    payment = DebtPayment(id=None, hutang_id=debt.id, jumlah=amount, tanggal=tanggal or date.today())
    return _with_paid(debt, debt.jumlah_terbayar + amount), payment


def delete_payment(debt: Debt, payment: DebtPayment) -> Debt:
    return _with_paid(debt, max(Decimal(0), debt.jumlah_terbayar - payment.jumlah))


def derive_debt(debt: Debt, payments: Iterable[DebtPayment]) -> Debt:
    """Hitung ulang jumlah_terbayar dan status dari seluruh riwayat pembayaran."""
    total = sum((p.jumlah for p in payments if p.hutang_id == debt.id), Decimal(0))
    return _with_paid(debt, total)


def with_principal(debt: Debt, jumlah_hutang: Decimal) -> Debt:
    """Ubah pokok hutang; status ikut dihitung ulang."""
    if jumlah_hutang is None or jumlah_hutang <= 0:
        raise ValidationError("Jumlah hutang harus lebih dari 0")
    return _with_paid(dataclasses.replace(debt, jumlah_hutang=jumlah_hutang), debt.jumlah_terbayar)


def compute_remaining(debt: Debt) -> Decimal:
    # Nilai tersimpan bisa melebihi pokok; yang ditampilkan tidak pernah negatif.
    return max(Decimal(0), debt.jumlah_hutang - debt.jumlah_terbayar)


def compute_progress_percentage(debt: Debt) -> float:
    if debt.status == DebtStatus.LUNAS:
        return 100.0
    if debt.jumlah_hutang <= 0:
        return 0.0
    percentage = debt.jumlah_terbayar / debt.jumlah_hutang * 100
    return float(min(max(percentage, Decimal(0)), Decimal(100)))


def is_overdue(debt: Debt, as_of: date) -> bool:
    return (
        debt.tanggal_jatuh_tempo is not None
        and debt.tanggal_jatuh_tempo < as_of
        and debt.status != DebtStatus.LUNAS
    )


def filter_debts(debts: Iterable[Debt], status_filter: str, as_of: date) -> List[Debt]:
    if status_filter not in STATUS_FILTERS:
        raise ValidationError(f"Filter status tidak dikenal: {status_filter}")
    if status_filter == "aktif":
        return [d for d in debts if d.status == DebtStatus.AKTIF]
    if status_filter == "lunas":
        return [d for d in debts if d.status == DebtStatus.LUNAS]
    if status_filter == "lewat_tempo":
        return [d for d in debts if is_overdue(d, as_of)]
    return list(debts)


@dataclass(frozen=True)
class InstallmentSummary:
    as_of: date
    debts: List[Debt]
    total: Decimal


def aggregate_monthly_installments(debts: Iterable[Debt], as_of: date) -> InstallmentSummary:
    """
    Total beban cicilan bulan ini: jumlah datar dari semua rencana cicilan aktif.
    tanggal_cicilan tidak dicocokkan dengan kalender.
    """
    items = [d for d in debts if d.status == DebtStatus.AKTIF and d.has_installment_plan]
    total = sum((d.cicilan_per_bulan for d in items), Decimal(0))
    return InstallmentSummary(as_of=as_of, debts=items, total=total)
