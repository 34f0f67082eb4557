import asyncio

from telegram import Update
from telegram.ext import ContextTypes

from dompetku.bot.commands.utils import get_service, logger, reply_failure
from dompetku.config import DOMPETKU_MONTHS_BACK
from dompetku.core import aggregation, charts
from dompetku.core.errors import DompetkuError
from dompetku.core.models import KategoriTipe
from dompetku.core.services import RequestFence
from dompetku.utils.text_utils import format_rupiah


def _dashboard_text(dashboard) -> str:
    totals = dashboard.totals
    message = (
        "**Ringkasan Keuangan**\n\n"
        f"Total Pemasukan: {format_rupiah(totals.total_income)}\n"
        f"Total Pengeluaran: {format_rupiah(totals.total_expense)}\n"
        f"Saldo: {format_rupiah(totals.balance)}\n"
        f"Target Aktif: {totals.active_goals}\n\n"
        "**Saldo per Sumber**\n"
    )
    for nama, saldo in dashboard.source_balances.items():
        message += f"- {nama}: {format_rupiah(saldo)}\n"
    if dashboard.installments and dashboard.installments.debts:
        message += f"\nCicilan bulan ini: {format_rupiah(dashboard.installments.total)}"
    return message


async def saldo_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Kirim ringkasan dashboard dan grafik perkembangan saldo."""
    service = get_service(context)
    fence = context.chat_data.setdefault("dashboard_fence", RequestFence())
    token = fence.begin()

    await update.message.reply_text("Menghitung saldo, tunggu sebentar...")
    try:
        dashboard = await asyncio.to_thread(service.dashboard, None, DOMPETKU_MONTHS_BACK)
    except DompetkuError as e:
        await reply_failure(update, e, "Gagal mengambil data dashboard")
        return

    if not fence.is_current(token):
        # Ada /saldo yang lebih baru; hasil ini sudah basi.
        logger.debug("Hasil dashboard token %s dibuang", token)
        return

    await update.message.reply_text(_dashboard_text(dashboard), parse_mode="Markdown")
    chart_buffer = charts.generate_balance_chart(dashboard.monthly_balance)
    if chart_buffer:
        chart_buffer.name = "saldo_chart.png"
        await update.message.reply_photo(photo=chart_buffer, caption="Perkembangan saldo:")


async def grafik_pengeluaran_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Kirim grafik pengeluaran per kategori."""
    service = get_service(context)
    try:
        expenses = service.list_transactions(KategoriTipe.PENGELUARAN)
    except DompetkuError as e:
        await reply_failure(update, e, "Gagal mengambil data pengeluaran")
        return

    chart_buffer = charts.generate_expense_chart(aggregation.expense_by_category(expenses))
    if chart_buffer:
        chart_buffer.name = "pengeluaran_chart.png"
        await update.message.reply_photo(photo=chart_buffer, caption="Pengeluaran per kategori:")
    else:
        await update.message.reply_text("Belum ada pengeluaran untuk ditampilkan. Catat pengeluaran dulu ya!")
