# dompetku/utils/text_utils.py
import re
from decimal import Decimal, InvalidOperation
from typing import Tuple, Union

from dompetku.core.errors import ValidationError
from dompetku.core.models import Rekening, Sumber


def format_rupiah(value: Union[Decimal, int, float, None]) -> str:
    """Format angka menjadi string Rupiah 'Rp 1.000.000'.
    Ex: 1500000 -> "Rp 1.500.000"
    Ex: 2500.5 -> "Rp 2.500,50"
    Ex: -75000 -> "-Rp 75.000"
    """
    if value is None:
        return "Rp 0"
    value = Decimal(str(value))
    sign = "-" if value < 0 else ""
    value = abs(value)
    if value == value.to_integral_value():
        body = f"{int(value):,}".replace(",", ".")
    else:
        body = f"{value:,.2f}".replace(",", "_").replace(".", ",").replace("_", ".")
    return f"{sign}Rp {body}"


THOUSANDS_PATTERN = re.compile(r"\d{1,3}(\.\d{3})+")


def _normalize_number(number: str, text: str) -> str:
    # Titik = ribuan, koma = desimal (format Indonesia)
    if "," in number:
        whole, _sep, fraction = number.partition(",")
        if "." in whole and not THOUSANDS_PATTERN.fullmatch(whole):
            raise ValidationError(f"Jumlah tidak valid: '{text}'")
        return f"{whole.replace('.', '')}.{fraction}"
    if THOUSANDS_PATTERN.fullmatch(number):
        return number.replace(".", "")
    if number.count(".") > 1:
        raise ValidationError(f"Jumlah tidak valid: '{text}'")
    return number


def parse_amount(text: str) -> Decimal:
    """Baca jumlah uang yang diketik user.
    Ex: "150000" -> 150000
    Ex: "150.000" -> 150000  (titik sebagai pemisah ribuan)
    Ex: "Rp 1.250.000,50" -> 1250000.50
    Ex: "2jt" -> 2000000, "50rb" -> 50000
    Ex: "1.5jt" -> 1500000, "150.00" -> 150  (satu titik tanpa grup ribuan = desimal)
    """
    if not text:
        raise ValidationError("Jumlah harus diisi")
    s = text.strip().lower().replace("rp", "").replace(" ", "")

    multiplier = 1
    match = re.fullmatch(r"([\d.,]+)(jt|juta|rb|ribu|k)?", s)
    if not match:
        raise ValidationError(f"Jumlah tidak valid: '{text}'")
    number, suffix = match.groups()
    if suffix in ("jt", "juta"):
        multiplier = 1_000_000
    elif suffix in ("rb", "ribu", "k"):
        multiplier = 1_000

    number = _normalize_number(number, text)
    try:
        amount = Decimal(number) * multiplier
    except InvalidOperation:
        raise ValidationError(f"Jumlah tidak valid: '{text}'")
    if amount <= 0:
        raise ValidationError("Jumlah harus lebih dari 0")
    return amount


def parse_sumber(text: str) -> Tuple[Sumber, Union[Rekening, None]]:
    """'cash' / 'debit' atau nama rekening (dana, btn, seabank) yang berarti Debit."""
    s = (text or "").strip().lower()
    if s in ("cash", "tunai"):
        return Sumber.CASH, None
    if s == "debit":
        return Sumber.DEBIT, None
    for rekening in Rekening:
        if rekening.value.lower() == s:
            return Sumber.DEBIT, rekening
    raise ValidationError(f"Sumber dana tidak dikenal: '{text}'. Pakai cash, debit, dana, btn atau seabank.")
