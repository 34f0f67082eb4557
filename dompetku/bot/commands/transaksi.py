from typing import List, Union

from telegram import Update
from telegram.ext import ContextTypes

from dompetku.bot.commands.utils import get_service, reply_failure
from dompetku.core.errors import DompetkuError, ValidationError
from dompetku.core.models import KategoriTipe
from dompetku.core.services import LedgerService
from dompetku.utils.text_utils import format_rupiah, parse_amount, parse_sumber


def _resolve_category(service: LedgerService, words: List[str]) -> Union[str, None]:
    """Kata terakhir '#Nama' dicocokkan ke kategori pengeluaran (tanpa beda huruf besar/kecil)."""
    if not words or not words[-1].startswith("#"):
        return None
    nama = words.pop()[1:].lower()
    for kategori in service.list_categories(KategoriTipe.PENGELUARAN):
        if kategori.nama.lower() == nama:
            return kategori.id
    raise ValidationError(f"Kategori '{nama}' tidak ditemukan")


async def _record(update: Update, context: ContextTypes.DEFAULT_TYPE, tipe: KategoriTipe) -> None:
    service = get_service(context)
    if not context.args or len(context.args) < 3:
        await update.message.reply_text(
            f"Cara pakai: `/{tipe.value} [jumlah] [sumber] [keterangan]`\n"
            f"Contoh: `/{tipe.value} 50rb cash Makan siang`"
        )
        return

    try:
        jumlah = parse_amount(context.args[0])
        sumber, rekening = parse_sumber(context.args[1])
        words = list(context.args[2:])
        kategori_id = _resolve_category(service, words) if tipe == KategoriTipe.PENGELUARAN else None
        transaction = service.add_transaction(
            tipe, jumlah, " ".join(words), sumber=sumber, rekening=rekening, kategori_id=kategori_id,
        )
    except DompetkuError as e:
        await reply_failure(update, e, f"Gagal menambah {tipe.value}")
        return

    via = transaction.rekening.value if transaction.rekening else transaction.sumber.value
    await update.message.reply_text(
        f"✅ {tipe.value.capitalize()} {format_rupiah(transaction.jumlah)} ({transaction.keterangan}) via {via} berhasil ditambahkan"
    )


async def pemasukan_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Catat pemasukan."""
    await _record(update, context, KategoriTipe.PEMASUKAN)


async def pengeluaran_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Catat pengeluaran, kategori opsional lewat '#Nama' di akhir."""
    await _record(update, context, KategoriTipe.PENGELUARAN)
