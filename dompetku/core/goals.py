# dompetku/core/goals.py
import dataclasses
from datetime import date
from decimal import Decimal
from typing import Dict, Iterable, Optional, Tuple

from dompetku.core.errors import ValidationError
from dompetku.core.models import Goal, Saving, Sumber


def _require_positive(amount: Decimal) -> None:
    if amount is None or amount <= 0:
        raise ValidationError("Jumlah harus lebih dari 0")


def contribute(goal: Goal, amount: Decimal, sumber: Sumber = Sumber.CASH,
               keterangan: str = "", tanggal: Optional[date] = None) -> Tuple[Goal, Saving]:
    """Tambah tabungan ke goal; progress bertambah sebesar amount."""
    _require_positive(amount)
    saving = Saving(
        id=None,
        goal_id=goal.id,
        jumlah=amount,
        sumber=sumber,
        keterangan=keterangan,
        tanggal=tanggal or date.today(),
    )
    return dataclasses.replace(goal, progress=goal.progress + amount), saving


def edit_contribution(goal: Goal, saving: Saving, new_amount: Decimal,
                      new_note: Optional[str] = None) -> Tuple[Goal, Saving]:
    _require_positive(new_amount)
    delta = new_amount - saving.jumlah
    updated = dataclasses.replace(
        saving,
        jumlah=new_amount,
        keterangan=saving.keterangan if new_note is None else new_note,
    )
    return dataclasses.replace(goal, progress=max(Decimal(0), goal.progress + delta)), updated


def delete_contribution(goal: Goal, saving: Saving) -> Goal:
    return dataclasses.replace(goal, progress=max(Decimal(0), goal.progress - saving.jumlah))


def derive_goal(goal: Goal, savings: Iterable[Saving]) -> Goal:
    """Progress dihitung dari seluruh riwayat tabungan goal ini."""
    total = sum((s.jumlah for s in savings if s.goal_id == goal.id), Decimal(0))
    return dataclasses.replace(goal, progress=max(Decimal(0), total))


def compute_goal_percentage(goal: Goal) -> float:
    if goal.target <= 0:
        return 0.0
    percentage = goal.progress / goal.target * 100
    return float(min(max(percentage, Decimal(0)), Decimal(100)))


def aggregate_by_source(savings: Iterable[Saving]) -> Dict[Sumber, Decimal]:
    totals = {sumber: Decimal(0) for sumber in Sumber}
    for saving in savings:
        totals[saving.sumber] += saving.jumlah
    return totals
