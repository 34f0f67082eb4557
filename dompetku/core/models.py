# dompetku/core/models.py
from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Any, Dict, Optional, Union

# Model mengikuti nama kolom tabel Supabase apa adanya.
# Nilai uang selalu Decimal di dalam aplikasi.


class Sumber(str, Enum):
    CASH = "Cash"
    DEBIT = "Debit"


class Rekening(str, Enum):
    DANA = "DANA"
    BTN = "BTN"
    SEABANK = "Seabank"


class DebtStatus(str, Enum):
    AKTIF = "aktif"
    LUNAS = "lunas"


class KategoriTipe(str, Enum):
    PEMASUKAN = "pemasukan"
    PENGELUARAN = "pengeluaran"


def to_decimal(value: Any) -> Decimal:
    """Ubah angka dari Supabase (int, float atau string) menjadi Decimal."""
    if value is None or value == "":
        return Decimal(0)
    if isinstance(value, Decimal):
        return value
    try:
        return Decimal(str(value))
    except InvalidOperation:
        raise ValueError(f"Jumlah tidak valid: {value!r}")


def to_json_number(value: Decimal) -> Union[int, float]:
    """Decimal tidak bisa di-serialize oleh client HTTP; kirim int kalau bulat."""
    if value == value.to_integral_value():
        return int(value)
    return float(value)


def parse_date(value: Any) -> Optional[date]:
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return date.fromisoformat(str(value)[:10])


def _enum_or_none(enum_cls, value):
    if value is None or value == "":
        return None
    if isinstance(value, enum_cls):
        return value
    for member in enum_cls:
        if member.value.lower() == str(value).strip().lower():
            return member
    return None


def rekening_from_memo(keterangan: str) -> Optional[Rekening]:
    """Baris lama menyimpan bank di memo, biasanya sebagai prefiks: "DANA - makan siang".

    Prefiks dicek dulu; kalau tidak ada, nama rekening pertama yang muncul di mana saja
    dalam memo (tanpa beda huruf besar/kecil) dipakai, mis. "Transfer ke BTN".
    """
    if not keterangan:
        return None
    prefixed = _enum_or_none(Rekening, keterangan.split(" - ", 1)[0])
    if prefixed is not None:
        return prefixed
    lowered = keterangan.lower()
    for rekening in Rekening:
        if rekening.value.lower() in lowered:
            return rekening
    return None


@dataclass(frozen=True)
class Category:
    id: str
    nama: str
    tipe: KategoriTipe

    @classmethod
    def from_row(cls, row: Dict[str, Any]) -> "Category":
        return cls(id=row["id"], nama=row["nama"], tipe=KategoriTipe(row["tipe"]))


@dataclass(frozen=True)
class Transaction:
    id: Optional[str]
    tipe: KategoriTipe
    tanggal: date
    jumlah: Decimal
    keterangan: str = ""
    sumber: Sumber = Sumber.CASH
    rekening: Optional[Rekening] = None
    kategori_id: Optional[str] = None
    kategori_nama: Optional[str] = None

    @property
    def is_income(self) -> bool:
        return self.tipe == KategoriTipe.PEMASUKAN

    @classmethod
    def from_row(cls, row: Dict[str, Any], tipe: KategoriTipe) -> "Transaction":
        sumber = _enum_or_none(Sumber, row.get("sumber")) or Sumber.CASH
        keterangan = row.get("keterangan") or ""
        rekening = _enum_or_none(Rekening, row.get("rekening"))
        if rekening is None and sumber == Sumber.DEBIT:
            rekening = rekening_from_memo(keterangan)
        kategori = row.get("kategori")
        kategori_nama = kategori.get("nama") if isinstance(kategori, dict) else None
        return cls(
            id=row.get("id"),
            tipe=tipe,
            tanggal=parse_date(row["tanggal"]),
            jumlah=to_decimal(row["jumlah"]),
            keterangan=keterangan,
            sumber=sumber,
            rekening=rekening,
            kategori_id=row.get("kategori_id"),
            kategori_nama=kategori_nama,
        )

    def to_row(self) -> Dict[str, Any]:
        row = {
            "tanggal": self.tanggal.isoformat(),
            "jumlah": to_json_number(self.jumlah),
            "keterangan": self.keterangan,
            "sumber": self.sumber.value,
            "rekening": self.rekening.value if self.rekening else None,
        }
        if self.tipe == KategoriTipe.PENGELUARAN:
            row["kategori_id"] = self.kategori_id
        return row


@dataclass(frozen=True)
class Goal:
    id: Optional[str]
    nama: str
    target: Decimal
    progress: Decimal = Decimal(0)
    deadline: Optional[date] = None

    @classmethod
    def from_row(cls, row: Dict[str, Any]) -> "Goal":
        return cls(
            id=row.get("id"),
            nama=row["nama"],
            target=to_decimal(row["target"]),
            progress=to_decimal(row.get("progress")),
            deadline=parse_date(row.get("deadline")),
        )

    def to_row(self) -> Dict[str, Any]:
        return {
            "nama": self.nama,
            "target": to_json_number(self.target),
            "progress": to_json_number(self.progress),
            "deadline": self.deadline.isoformat() if self.deadline else None,
        }


@dataclass(frozen=True)
class Saving:
    id: Optional[str]
    goal_id: str
    jumlah: Decimal
    sumber: Sumber = Sumber.CASH
    keterangan: str = ""
    tanggal: Optional[date] = None
    goal_nama: Optional[str] = None

    @classmethod
    def from_row(cls, row: Dict[str, Any]) -> "Saving":
        goal = row.get("goals")
        return cls(
            id=row.get("id"),
            goal_id=row["goal_id"],
            jumlah=to_decimal(row["jumlah"]),
            sumber=_enum_or_none(Sumber, row.get("sumber")) or Sumber.CASH,
            keterangan=row.get("keterangan") or "",
            tanggal=parse_date(row.get("tanggal")),
            goal_nama=goal.get("nama") if isinstance(goal, dict) else None,
        )

    def to_row(self) -> Dict[str, Any]:
        return {
            "goal_id": self.goal_id,
            "jumlah": to_json_number(self.jumlah),
            "sumber": self.sumber.value,
            "keterangan": self.keterangan,
            "tanggal": self.tanggal.isoformat() if self.tanggal else None,
        }


@dataclass(frozen=True)
class Debt:
    id: Optional[str]
    nama_kreditor: str
    jumlah_hutang: Decimal
    jumlah_terbayar: Decimal = Decimal(0)
    tanggal_hutang: Optional[date] = None
    tanggal_jatuh_tempo: Optional[date] = None
    keterangan: str = ""
    status: DebtStatus = DebtStatus.AKTIF
    cicilan_per_bulan: Optional[Decimal] = None
    tanggal_cicilan: Optional[int] = None
    lama_cicilan: Optional[int] = None

    @property
    def has_installment_plan(self) -> bool:
        return self.cicilan_per_bulan is not None and self.tanggal_cicilan is not None

    @classmethod
    def from_row(cls, row: Dict[str, Any]) -> "Debt":
        cicilan = row.get("cicilan_per_bulan")
        return cls(
            id=row.get("id"),
            nama_kreditor=row["nama_kreditor"],
            jumlah_hutang=to_decimal(row["jumlah_hutang"]),
            jumlah_terbayar=to_decimal(row.get("jumlah_terbayar")),
            tanggal_hutang=parse_date(row.get("tanggal_hutang")),
            tanggal_jatuh_tempo=parse_date(row.get("tanggal_jatuh_tempo")),
            keterangan=row.get("keterangan") or "",
            status=_enum_or_none(DebtStatus, row.get("status")) or DebtStatus.AKTIF,
            cicilan_per_bulan=to_decimal(cicilan) if cicilan is not None else None,
            tanggal_cicilan=row.get("tanggal_cicilan"),
            lama_cicilan=row.get("lama_cicilan"),
        )

    def to_row(self) -> Dict[str, Any]:
        return {
            "nama_kreditor": self.nama_kreditor,
            "jumlah_hutang": to_json_number(self.jumlah_hutang),
            "jumlah_terbayar": to_json_number(self.jumlah_terbayar),
            "tanggal_hutang": self.tanggal_hutang.isoformat() if self.tanggal_hutang else None,
            "tanggal_jatuh_tempo": self.tanggal_jatuh_tempo.isoformat() if self.tanggal_jatuh_tempo else None,
            "keterangan": self.keterangan,
            "status": self.status.value,
            "cicilan_per_bulan": to_json_number(self.cicilan_per_bulan) if self.cicilan_per_bulan is not None else None,
            "tanggal_cicilan": self.tanggal_cicilan,
            "lama_cicilan": self.lama_cicilan,
        }


@dataclass(frozen=True)
class DebtPayment:
    id: Optional[str]
    hutang_id: str
    jumlah: Decimal
    tanggal: Optional[date] = None

    @classmethod
    def from_row(cls, row: Dict[str, Any]) -> "DebtPayment":
        return cls(
            id=row.get("id"),
            hutang_id=row["hutang_id"],
            jumlah=to_decimal(row["jumlah"]),
            tanggal=parse_date(row.get("tanggal")),
        )

    def to_row(self) -> Dict[str, Any]:
        return {
            "hutang_id": self.hutang_id,
            "jumlah": to_json_number(self.jumlah),
            "tanggal": self.tanggal.isoformat() if self.tanggal else None,
        }


@dataclass(frozen=True)
class Budget:
    id: Optional[str]
    kategori_id: str
    limit_amount: Decimal
    bulan: int
    tahun: int
    kategori_nama: Optional[str] = None

    @classmethod
    def from_row(cls, row: Dict[str, Any]) -> "Budget":
        kategori = row.get("kategori")
        return cls(
            id=row.get("id"),
            kategori_id=row["kategori_id"],
            limit_amount=to_decimal(row["limit_amount"]),
            bulan=int(row["bulan"]),
            tahun=int(row["tahun"]),
            kategori_nama=kategori.get("nama") if isinstance(kategori, dict) else None,
        )

    def to_row(self) -> Dict[str, Any]:
        return {
            "kategori_id": self.kategori_id,
            "limit_amount": to_json_number(self.limit_amount),
            "bulan": self.bulan,
            "tahun": self.tahun,
        }
