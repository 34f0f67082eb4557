from datetime import date
from decimal import Decimal

from telegram import Update
from telegram.ext import ContextTypes
from telegram.helpers import escape_markdown

from dompetku.bot.commands.utils import get_service, looks_like_date, parse_tanggal, reply_failure
from dompetku.core import debts
from dompetku.core.errors import DompetkuError
from dompetku.core.models import Debt, DebtStatus
from dompetku.utils.text_utils import format_rupiah, parse_amount


def _debt_line(debt: Debt, as_of: date) -> str:
    icon = "✅" if debt.status == DebtStatus.LUNAS else ("⏰" if debts.is_overdue(debt, as_of) else "🔴")
    line = (
        f"{icon} `{debt.id}` {escape_markdown(debt.nama_kreditor)}: {format_rupiah(debt.jumlah_terbayar)} / "
        f"{format_rupiah(debt.jumlah_hutang)} ({debts.compute_progress_percentage(debt):.0f}%)"
    )
    if debt.tanggal_jatuh_tempo:
        line += f", jatuh tempo {debt.tanggal_jatuh_tempo.isoformat()}"
    return line


async def hutang_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Daftar hutang. Filter opsional: semua, aktif, lunas, lewat_tempo."""
    service = get_service(context)
    status_filter = context.args[0].lower() if context.args else "semua"
    today = date.today()
    try:
        debt_list = service.list_debts(status_filter, as_of=today)
    except DompetkuError as e:
        await reply_failure(update, e, "Gagal mengambil data hutang")
        return

    if not debt_list:
        await update.message.reply_text("Tidak ada hutang untuk filter ini. 🎉")
        return

    total_sisa = sum((debts.compute_remaining(d) for d in debt_list), Decimal(0))
    message = f"**Daftar Hutang ({escape_markdown(status_filter)})**\n\n"
    message += "\n".join(_debt_line(d, today) for d in debt_list)
    message += f"\n\nTotal sisa: {format_rupiah(total_sisa)}"
    await update.message.reply_text(message, parse_mode="Markdown")


async def tambah_hutang_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Tambah hutang: /tambah_hutang <jumlah> <nama kreditor> [AAAA-BB-HH]."""
    service = get_service(context)
    if not context.args or len(context.args) < 2:
        await update.message.reply_text(
            "Cara pakai: `/tambah_hutang [jumlah] [nama kreditor] [jatuh tempo AAAA-BB-HH]`\n"
            "Contoh: `/tambah_hutang 1jt Budi 2025-12-31`"
        )
        return

    try:
        jumlah = parse_amount(context.args[0])
        words = list(context.args[1:])
        jatuh_tempo = parse_tanggal(words.pop()) if len(words) > 1 and looks_like_date(words[-1]) else None
        debt = service.add_debt(" ".join(words), jumlah, tanggal_jatuh_tempo=jatuh_tempo)
    except DompetkuError as e:
        await reply_failure(update, e, "Gagal menambah hutang")
        return

    await update.message.reply_text(
        f"✅ Hutang ke {escape_markdown(debt.nama_kreditor)} sebesar {format_rupiah(debt.jumlah_hutang)} dicatat (id `{debt.id}`)",
        parse_mode="Markdown",
    )


async def bayar_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Catat pembayaran hutang: /bayar <id_hutang> <jumlah>."""
    service = get_service(context)
    if not context.args or len(context.args) != 2:
        await update.message.reply_text("Cara pakai: `/bayar [id_hutang] [jumlah]`\nContoh: `/bayar 12 400rb`")
        return

    try:
        debt, payment = service.record_payment(context.args[0], parse_amount(context.args[1]))
    except DompetkuError as e:
        await reply_failure(update, e, "Gagal mencatat pembayaran")
        return

    message = (
        f"✅ Pembayaran {format_rupiah(payment.jumlah)} ke {escape_markdown(debt.nama_kreditor)} dicatat (id `{payment.id}`).\n"
        f"Terbayar {format_rupiah(debt.jumlah_terbayar)} dari {format_rupiah(debt.jumlah_hutang)}, "
        f"sisa {format_rupiah(debts.compute_remaining(debt))}."
    )
    if debt.status == DebtStatus.LUNAS:
        message += "\n🎉 Hutang sudah lunas!"
    await update.message.reply_text(message, parse_mode="Markdown")


async def hapus_bayar_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Hapus satu pembayaran hutang; status hutang dihitung ulang."""
    service = get_service(context)
    if not context.args or len(context.args) != 1:
        await update.message.reply_text("Cara pakai: `/hapus_bayar [id_pembayaran]`")
        return

    try:
        debt = service.delete_payment(context.args[0])
    except DompetkuError as e:
        await reply_failure(update, e, "Gagal menghapus pembayaran")
        return

    await update.message.reply_text(
        f"🗑️ Pembayaran dihapus. Hutang ke {debt.nama_kreditor} sekarang {debt.status.value}, "
        f"terbayar {format_rupiah(debt.jumlah_terbayar)} dari {format_rupiah(debt.jumlah_hutang)}."
    )


async def cicilan_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    service = get_service(context)
    try:
        summary = service.monthly_installments()
    except DompetkuError as e:
        await reply_failure(update, e, "Gagal menghitung cicilan")
        return

    if not summary.debts:
        await update.message.reply_text("Tidak ada cicilan aktif bulan ini.")
        return

    message = "**Cicilan Bulan Ini**\n\n"
    for debt in summary.debts:
        message += f"- {escape_markdown(debt.nama_kreditor)}: {format_rupiah(debt.cicilan_per_bulan)} (tanggal {debt.tanggal_cicilan})\n"
    message += f"\nTotal: {format_rupiah(summary.total)}"
    await update.message.reply_text(message, parse_mode="Markdown")
