import unittest
from decimal import Decimal

from dompetku.core import charts
from dompetku.core.aggregation import BalancePoint, CategoryTotal

PNG_SIGNATURE = b"\x89PNG"


class TestCharts(unittest.TestCase):
    def test_balance_chart_renders_png(self):
        series = [
            BalancePoint(month="Mei", balance=Decimal("-50000"), period="2024-05"),
            BalancePoint(month="Jun", balance=Decimal("3500000"), period="2024-06"),
        ]
        buf = charts.generate_balance_chart(series)
        self.assertEqual(buf.read(4), PNG_SIGNATURE)

    def test_expense_chart_renders_png(self):
        buf = charts.generate_expense_chart([
            CategoryTotal(name="Food", value=Decimal("15000"), color="#3B82F6"),
            CategoryTotal(name="Other", value=Decimal("2000"), color="#10B981"),
        ])
        self.assertEqual(buf.read(4), PNG_SIGNATURE)

    def test_empty_input_gives_no_chart(self):
        self.assertIsNone(charts.generate_balance_chart([]))
        self.assertIsNone(charts.generate_expense_chart([]))
        zero = [CategoryTotal(name="Food", value=Decimal(0), color="#3B82F6")]
        self.assertIsNone(charts.generate_expense_chart(zero))


if __name__ == "__main__":
    unittest.main()
