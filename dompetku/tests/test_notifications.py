import unittest
from datetime import date
from decimal import Decimal

from dompetku.core import notifications
from dompetku.core.aggregation import BudgetUsage
from dompetku.core.models import Budget, Debt, DebtStatus, Goal

TODAY = date(2024, 6, 10)


class TestNotifications(unittest.TestCase):
    def test_goal_deadline_window(self):
        goals = [
            Goal(id="1", nama="Liburan", target=Decimal("1"), deadline=date(2024, 6, 12)),
            Goal(id="2", nama="Laptop", target=Decimal("1"), deadline=date(2024, 6, 17)),
            Goal(id="3", nama="Motor", target=Decimal("1"), deadline=date(2024, 6, 18)),
            Goal(id="4", nama="Lewat", target=Decimal("1"), deadline=TODAY),
            Goal(id="5", nama="Tanpa deadline", target=Decimal("1")),
        ]

        result = notifications.goal_deadline_notifications(goals, TODAY)

        self.assertEqual([n.id for n in result], ["goal-1", "goal-2"])
        self.assertEqual([n.priority for n in result], ["high", "medium"])
        self.assertEqual(result[0].message, 'Target "Liburan" akan berakhir dalam 2 hari')

    def test_debt_due_only_for_active(self):
        debts = [
            Debt(id="1", nama_kreditor="Budi", jumlah_hutang=Decimal("1"), tanggal_jatuh_tempo=TODAY),
            Debt(id="2", nama_kreditor="Sari", jumlah_hutang=Decimal("1"), tanggal_jatuh_tempo=date(2024, 6, 15)),
            Debt(id="3", nama_kreditor="Andi", jumlah_hutang=Decimal("1"), tanggal_jatuh_tempo=date(2024, 6, 16)),
            Debt(id="4", nama_kreditor="Lunas", jumlah_hutang=Decimal("1"), jumlah_terbayar=Decimal("1"),
                 status=DebtStatus.LUNAS, tanggal_jatuh_tempo=TODAY),
        ]

        result = notifications.debt_due_notifications(debts, TODAY)

        self.assertEqual([(n.id, n.priority) for n in result], [("debt-1", "high"), ("debt-2", "medium")])

    def test_budget_warning_at_90_percent(self):
        budget = Budget(id="b1", kategori_id="k1", limit_amount=Decimal("100"), bulan=6, tahun=2024,
                        kategori_nama="Makanan")
        usages = [
            BudgetUsage(budget=budget, spent=Decimal("90"), percentage=90.0),
            BudgetUsage(budget=budget, spent=Decimal("89"), percentage=89.0),
        ]

        [result] = notifications.budget_limit_notifications(usages)

        self.assertEqual(result.id, "budget-b1")
        self.assertEqual(result.priority, "high")
        self.assertEqual(result.message, 'Budget "Makanan" sudah 90% terpakai')


if __name__ == "__main__":
    unittest.main()
