# dompetku/core/notifications.py
from dataclasses import dataclass
from datetime import date
from typing import Iterable, List

from dompetku.core.aggregation import BudgetUsage
from dompetku.core.models import Debt, DebtStatus, Goal

GOAL_DEADLINE_DAYS = 7
DEBT_DUE_DAYS = 5
BUDGET_WARNING_PERCENT = 90


@dataclass(frozen=True)
class Notification:
    id: str
    type: str
    title: str
    message: str
    priority: str


def goal_deadline_notifications(goals: Iterable[Goal], as_of: date) -> List[Notification]:
    notifs = []
    for goal in goals:
        if goal.deadline is None:
            continue
        days_left = (goal.deadline - as_of).days
        if 0 < days_left <= GOAL_DEADLINE_DAYS:
            notifs.append(Notification(
                id=f"goal-{goal.id}",
                type="goal",
                title="Target Mendekati Deadline",
                message=f'Target "{goal.nama}" akan berakhir dalam {days_left} hari',
                priority="high" if days_left <= 3 else "medium",
            ))
    return notifs


def debt_due_notifications(debts: Iterable[Debt], as_of: date) -> List[Notification]:
    notifs = []
    for debt in debts:
        if debt.status != DebtStatus.AKTIF or debt.tanggal_jatuh_tempo is None:
            continue
        days_left = (debt.tanggal_jatuh_tempo - as_of).days
        if 0 <= days_left <= DEBT_DUE_DAYS:
            notifs.append(Notification(
                id=f"debt-{debt.id}",
                type="debt",
                title="Hutang Jatuh Tempo",
                message=f'Hutang "{debt.nama_kreditor}" jatuh tempo dalam {days_left} hari',
                priority="high" if days_left <= 1 else "medium",
            ))
    return notifs


def budget_limit_notifications(usages: Iterable[BudgetUsage]) -> List[Notification]:
    notifs = []
    for usage in usages:
        if usage.percentage >= BUDGET_WARNING_PERCENT:
            nama = usage.budget.kategori_nama or "Tanpa kategori"
            notifs.append(Notification(
                id=f"budget-{usage.budget.id}",
                type="budget",
                title="Budget Hampir Habis",
                message=f'Budget "{nama}" sudah {usage.percentage:.0f}% terpakai',
                priority="high",
            ))
    return notifs
