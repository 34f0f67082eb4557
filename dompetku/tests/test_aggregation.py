import unittest
from datetime import date
from decimal import Decimal

from dompetku.core import aggregation
from dompetku.core.errors import ValidationError
from dompetku.core.models import Budget, Goal, KategoriTipe, Rekening, Sumber, Transaction


def income(jumlah, tanggal, **kwargs):
    return Transaction(id=None, tipe=KategoriTipe.PEMASUKAN, tanggal=tanggal, jumlah=Decimal(jumlah), **kwargs)


def expense(jumlah, tanggal=date(2024, 6, 1), **kwargs):
    return Transaction(id=None, tipe=KategoriTipe.PENGELUARAN, tanggal=tanggal, jumlah=Decimal(jumlah), **kwargs)


class TestMonthlyBalance(unittest.TestCase):
    def test_six_points_oldest_first_with_empty_months(self):
        transactions = [
            income("5000000", date(2024, 6, 1)),
            expense("1500000", date(2024, 6, 30)),
            income("200000", date(2024, 3, 15)),
            expense("50000", date(2024, 1, 31)),
            income("999999", date(2023, 12, 31)),  # di luar jendela
            income("777777", date(2024, 7, 1)),  # setelah as_of
        ]

        series = aggregation.monthly_balance_series(transactions, 6, as_of=date(2024, 6, 15))

        self.assertEqual([p.month for p in series], ["Jan", "Feb", "Mar", "Apr", "Mei", "Jun"])
        self.assertEqual([p.period for p in series][0], "2024-01")
        self.assertEqual(
            [p.balance for p in series],
            [Decimal("-50000"), Decimal(0), Decimal("200000"), Decimal(0), Decimal(0), Decimal("3500000")],
        )

    def test_window_crosses_year(self):
        series = aggregation.monthly_balance_series([], 3, as_of=date(2024, 2, 10))
        self.assertEqual([p.period for p in series], ["2023-12", "2024-01", "2024-02"])
        self.assertEqual([p.month for p in series], ["Des", "Jan", "Feb"])
        self.assertTrue(all(p.balance == 0 for p in series))

    def test_months_back_must_be_positive(self):
        with self.assertRaises(ValidationError):
            aggregation.monthly_balance_series([], 0, as_of=date(2024, 2, 10))


class TestExpenseByCategory(unittest.TestCase):
    def test_groups_in_first_seen_order_with_other_bucket(self):
        result = aggregation.expense_by_category([
            expense("10000", kategori_nama="Food"),
            expense("5000", kategori_nama="Food"),
            expense("2000"),
        ])

        self.assertEqual([(c.name, c.value) for c in result], [("Food", Decimal("15000")), ("Other", Decimal("2000"))])
        self.assertEqual([c.color for c in result], ["#3B82F6", "#10B981"])

    def test_colors_cycle(self):
        result = aggregation.expense_by_category(
            [expense("1", kategori_nama=f"K{i}") for i in range(7)]
        )
        self.assertEqual(result[6].color, result[0].color)


class TestBalanceBySource(unittest.TestCase):
    def setUp(self):
        self.transactions = [
            income("1000000", date(2024, 6, 1), sumber=Sumber.DEBIT, rekening=Rekening.BTN),
            expense("200000", sumber=Sumber.DEBIT, rekening=Rekening.BTN),
            income("300000", date(2024, 6, 2), sumber=Sumber.DEBIT, rekening=Rekening.DANA),
            expense("50000", sumber=Sumber.CASH),
            income("80000", date(2024, 6, 3), sumber=Sumber.CASH),
        ]

    def test_by_sumber(self):
        self.assertEqual(aggregation.balance_by_source(self.transactions, Sumber.CASH), Decimal("30000"))
        self.assertEqual(aggregation.balance_by_source(self.transactions, Sumber.DEBIT), Decimal("1100000"))

    def test_by_rekening(self):
        self.assertEqual(
            aggregation.balance_by_source(self.transactions, Sumber.DEBIT, Rekening.BTN), Decimal("800000")
        )
        self.assertEqual(
            aggregation.balance_by_source(self.transactions, Sumber.DEBIT, Rekening.SEABANK), Decimal(0)
        )

    def test_legacy_memo_rows_count_for_their_bank(self):
        row = {"id": "1", "tanggal": "2024-06-01", "jumlah": 45000,
               "keterangan": "Seabank - Token listrik", "sumber": "Debit"}
        legacy = Transaction.from_row(row, KategoriTipe.PENGELUARAN)
        self.assertEqual(
            aggregation.balance_by_source([legacy], Sumber.DEBIT, Rekening.SEABANK), Decimal("-45000")
        )

    def test_legacy_memo_mentions_bank_anywhere(self):
        row = {"id": "1", "tanggal": "2024-06-01", "jumlah": 80000,
               "keterangan": "Transfer ke btn", "sumber": "Debit"}
        legacy = Transaction.from_row(row, KategoriTipe.PENGELUARAN)
        self.assertEqual(legacy.rekening, Rekening.BTN)
        self.assertEqual(
            aggregation.balance_by_source([legacy], Sumber.DEBIT, Rekening.BTN), Decimal("-80000")
        )

    def test_memo_prefix_ignored_for_cash(self):
        row = {"id": "1", "tanggal": "2024-06-01", "jumlah": 45000, "keterangan": "DANA - titip", "sumber": "Cash"}
        self.assertIsNone(Transaction.from_row(row, KategoriTipe.PEMASUKAN).rekening)


class TestTotalsAndBudget(unittest.TestCase):
    def test_dashboard_totals(self):
        totals = aggregation.dashboard_totals(
            [income("5000000", date(2024, 6, 1))],
            [expense("1250000"), expense("250000")],
            [Goal(id="g1", nama="Laptop", target=Decimal("1"))],
        )
        self.assertEqual(totals.total_income, Decimal("5000000"))
        self.assertEqual(totals.total_expense, Decimal("1500000"))
        self.assertEqual(totals.balance, Decimal("3500000"))
        self.assertEqual(totals.active_goals, 1)

    def test_budget_usage_counts_own_month_only(self):
        budget = Budget(id="b1", kategori_id="k1", limit_amount=Decimal("1000000"), bulan=6, tahun=2024)
        expenses = [
            expense("600000", date(2024, 6, 3), kategori_id="k1"),
            expense("300000", date(2024, 6, 20), kategori_id="k1"),
            expense("500000", date(2024, 5, 31), kategori_id="k1"),
            expense("400000", date(2024, 6, 5), kategori_id="k2"),
        ]

        [usage] = aggregation.budget_usage([budget], expenses)

        self.assertEqual(usage.spent, Decimal("900000"))
        self.assertEqual(usage.percentage, 90.0)


if __name__ == "__main__":
    unittest.main()
