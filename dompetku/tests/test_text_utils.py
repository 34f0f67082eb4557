# tests/test_text_utils.py
import unittest
from decimal import Decimal

from dompetku.core.errors import ValidationError
from dompetku.core.models import Rekening, Sumber
from dompetku.utils.text_utils import format_rupiah, parse_amount, parse_sumber


class TestFormatRupiah(unittest.TestCase):
    def test_whole_numbers(self):
        self.assertEqual(format_rupiah(1500000), "Rp 1.500.000")
        self.assertEqual(format_rupiah(Decimal("0")), "Rp 0")
        self.assertEqual(format_rupiah(999), "Rp 999")

    def test_decimals(self):
        self.assertEqual(format_rupiah(Decimal("2500.5")), "Rp 2.500,50")

    def test_negative(self):
        self.assertEqual(format_rupiah(-75000), "-Rp 75.000")

    def test_none(self):
        self.assertEqual(format_rupiah(None), "Rp 0")


class TestParseAmount(unittest.TestCase):
    def test_plain_and_thousands(self):
        self.assertEqual(parse_amount("150000"), Decimal("150000"))
        self.assertEqual(parse_amount("150.000"), Decimal("150000"))
        self.assertEqual(parse_amount("Rp 1.250.000,50"), Decimal("1250000.50"))

    def test_suffixes(self):
        self.assertEqual(parse_amount("2jt"), Decimal("2000000"))
        self.assertEqual(parse_amount("1,5jt"), Decimal("1500000"))
        self.assertEqual(parse_amount("50rb"), Decimal("50000"))
        self.assertEqual(parse_amount("20K"), Decimal("20000"))

    def test_single_dot_is_decimal(self):
        self.assertEqual(parse_amount("1.5jt"), Decimal("1500000"))
        self.assertEqual(parse_amount("2.5rb"), Decimal("2500"))
        self.assertEqual(parse_amount("150.00"), Decimal("150"))
        self.assertEqual(parse_amount("1.500rb"), Decimal("1500000"))

    def test_invalid(self):
        for text in ("", "abc", "12x", "0", "-500", "1.50.0", "12.34,5"):
            with self.assertRaises(ValidationError):
                parse_amount(text)


class TestParseSumber(unittest.TestCase):
    def test_sources(self):
        self.assertEqual(parse_sumber("cash"), (Sumber.CASH, None))
        self.assertEqual(parse_sumber("Tunai"), (Sumber.CASH, None))
        self.assertEqual(parse_sumber("debit"), (Sumber.DEBIT, None))

    def test_bank_means_debit(self):
        self.assertEqual(parse_sumber("dana"), (Sumber.DEBIT, Rekening.DANA))
        self.assertEqual(parse_sumber("SEABANK"), (Sumber.DEBIT, Rekening.SEABANK))

    def test_unknown(self):
        with self.assertRaises(ValidationError):
            parse_sumber("kartu kredit")


if __name__ == "__main__":
    unittest.main()
