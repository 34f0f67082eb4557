from datetime import date

from telegram import Update
from telegram.ext import ContextTypes

from dompetku.core.errors import DompetkuError, ValidationError
from dompetku.core.services import LedgerService
from dompetku.utils.logging_setup import get_logger

logger = get_logger("dompetku.bot.commands")


def get_service(context: ContextTypes.DEFAULT_TYPE) -> LedgerService:
    return context.bot_data["ledger_service"]


def parse_tanggal(text: str) -> date:
    try:
        return date.fromisoformat(text)
    except ValueError:
        raise ValidationError(f"Tanggal tidak valid: '{text}'. Pakai format AAAA-BB-HH.")


def looks_like_date(text: str) -> bool:
    return len(text) == 10 and text[4] == "-" and text[7] == "-" and text.replace("-", "").isdigit()


async def reply_failure(update: Update, error: DompetkuError, failure_message: str) -> None:
    """Error validasi ditampilkan apa adanya; error Supabase diganti satu pesan umum."""
    if isinstance(error, ValidationError):
        await update.message.reply_text(f"⚠️ {error}")
    else:
        logger.warning("%s: %s", failure_message, error)
        await update.message.reply_text(f"❌ {failure_message}. Coba lagi nanti. 😟")


async def start_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Kirim pesan sambutan saat perintah /start dipanggil."""
    await update.message.reply_text(
        "Halo! Aku bot keuanganmu 💰. Catat **pemasukan**, **pengeluaran**, **hutang** dan **tabungan** di sini.\n\n"
        "Perintah utama:\n"
        "- `/saldo` ringkasan saldo dan grafik 6 bulan terakhir.\n"
        "- `/pemasukan [jumlah] [sumber] [keterangan]` catat pemasukan.\n"
        "- `/pengeluaran [jumlah] [sumber] [keterangan] [#kategori]` catat pengeluaran.\n"
        "- `/hutang` daftar hutang, `/bayar [id] [jumlah]` catat pembayaran.\n"
        "- `/target` daftar target tabungan, `/nabung [id] [jumlah] [sumber]` menabung.\n"
        "- `/help` untuk semua perintah."
    )


async def help_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Kirim daftar perintah saat /help dipanggil."""
    await update.message.reply_text(
        "**Cara pakai:**\n"
        "Sumber dana: `cash`, `debit`, atau rekening `dana`, `btn`, `seabank` (otomatis Debit).\n"
        "Jumlah boleh ditulis `150000`, `150.000`, `50rb`, `2jt` atau `1.5jt`.\n\n"
        "**Transaksi:**\n"
        "- `/pemasukan 5jt debit Gaji bulan ini`\n"
        "- `/pengeluaran 25rb dana Makan siang #Makanan`\n"
        "- `/saldo`: ringkasan saldo, saldo per sumber dan grafik saldo.\n"
        "- `/grafik_pengeluaran`: grafik pengeluaran per kategori.\n\n"
        "**Hutang:**\n"
        "- `/hutang [semua|aktif|lunas|lewat_tempo]`: daftar hutang.\n"
        "- `/tambah_hutang 1jt Budi [2025-12-31]`: tambah hutang, jatuh tempo opsional.\n"
        "- `/bayar [id_hutang] [jumlah]`: catat pembayaran.\n"
        "- `/hapus_bayar [id_pembayaran]`: hapus pembayaran.\n"
        "- `/cicilan`: total cicilan bulan ini.\n\n"
        "**Tabungan:**\n"
        "- `/target`: daftar target tabungan.\n"
        "- `/tambah_target 5jt Liburan [2025-12-31]`: tambah target.\n"
        "- `/nabung [id_target] [jumlah] [sumber] [catatan]`: menabung.\n"
        "- `/ubah_tabungan [id_tabungan] [jumlah] [catatan]`: ubah tabungan.\n"
        "- `/hapus_tabungan [id_tabungan]`: hapus tabungan.\n"
        "- `/tabungan`: saldo tabungan per sumber dan riwayat.\n\n"
        "- `/notifikasi`: deadline target, jatuh tempo hutang dan budget yang hampir habis."
    )
