from telegram import Update
from telegram.ext import ContextTypes
from telegram.helpers import escape_markdown

from dompetku.bot.commands.utils import get_service, looks_like_date, parse_tanggal, reply_failure
from dompetku.core import goals
from dompetku.core.errors import DompetkuError
from dompetku.core.models import Goal
from dompetku.utils.text_utils import format_rupiah, parse_amount, parse_sumber


def _goal_summary(goal: Goal) -> str:
    return (
        f"{escape_markdown(goal.nama)}: {format_rupiah(goal.progress)} / {format_rupiah(goal.target)} "
        f"({goals.compute_goal_percentage(goal):.0f}%)"
    )


async def target_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Daftar target tabungan beserta progresnya."""
    service = get_service(context)
    try:
        goal_list = service.list_goals()
    except DompetkuError as e:
        await reply_failure(update, e, "Gagal mengambil data target")
        return

    if not goal_list:
        await update.message.reply_text("Belum ada target tabungan. Buat dengan `/tambah_target`.")
        return

    message = "**Target Tabungan:**\n\n"
    for goal in goal_list:
        message += f"- `{goal.id}` {_goal_summary(goal)}"
        if goal.deadline:
            message += f", deadline {goal.deadline.isoformat()}"
        message += "\n"
    await update.message.reply_text(message, parse_mode="Markdown")


async def tambah_target_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    service = get_service(context)
    if not context.args or len(context.args) < 2:
        await update.message.reply_text(
            "Cara pakai: `/tambah_target [jumlah] [nama] [deadline AAAA-BB-HH]`\n"
            "Contoh: `/tambah_target 5jt Liburan 2025-12-31`"
        )
        return

    try:
        target = parse_amount(context.args[0])
        words = list(context.args[1:])
        deadline = parse_tanggal(words.pop()) if len(words) > 1 and looks_like_date(words[-1]) else None
        goal = service.add_goal(" ".join(words), target, deadline)
    except DompetkuError as e:
        await reply_failure(update, e, "Gagal menambah target")
        return

    await update.message.reply_text(
        f"✅ Target '{escape_markdown(goal.nama)}' sebesar {format_rupiah(goal.target)} dibuat (id `{goal.id}`)",
        parse_mode="Markdown",
    )


async def nabung_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Tambah tabungan: /nabung <id_target> <jumlah> <sumber> [catatan]."""
    service = get_service(context)
    if not context.args or len(context.args) < 3:
        await update.message.reply_text(
            "Cara pakai: `/nabung [id_target] [jumlah] [cash|debit] [catatan]`\n"
            "Contoh: `/nabung 3 50rb cash Sisa uang makan`"
        )
        return

    try:
        amount = parse_amount(context.args[1])
        sumber, _rekening = parse_sumber(context.args[2])
        goal, saving = service.contribute(context.args[0], amount, sumber, " ".join(context.args[3:]))
    except DompetkuError as e:
        await reply_failure(update, e, "Gagal menambah tabungan")
        return

    message = f"💰 Tabungan {format_rupiah(saving.jumlah)} ({saving.sumber.value}) dicatat (id `{saving.id}`).\n"
    message += _goal_summary(goal)
    if goal.progress >= goal.target:
        message += "\n🎉 Target tercapai!"
    await update.message.reply_text(message, parse_mode="Markdown")


async def ubah_tabungan_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Ubah jumlah (dan catatan) satu tabungan."""
    service = get_service(context)
    if not context.args or len(context.args) < 2:
        await update.message.reply_text("Cara pakai: `/ubah_tabungan [id_tabungan] [jumlah] [catatan]`")
        return

    new_note = " ".join(context.args[2:]) or None
    try:
        goal, _saving = service.edit_contribution(context.args[0], parse_amount(context.args[1]), new_note)
    except DompetkuError as e:
        await reply_failure(update, e, "Gagal mengubah tabungan")
        return

    await update.message.reply_text(f"✏️ Tabungan diubah. {_goal_summary(goal)}", parse_mode="Markdown")


async def hapus_tabungan_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    service = get_service(context)
    if not context.args or len(context.args) != 1:
        await update.message.reply_text("Cara pakai: `/hapus_tabungan [id_tabungan]`")
        return

    try:
        goal = service.delete_contribution(context.args[0])
    except DompetkuError as e:
        await reply_failure(update, e, "Gagal menghapus tabungan")
        return

    await update.message.reply_text(f"🗑️ Tabungan dihapus. {_goal_summary(goal)}", parse_mode="Markdown")


async def tabungan_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Total tabungan per sumber dan riwayat tabungan terbaru."""
    service = get_service(context)
    try:
        by_source = service.savings_by_source()
        history = service.savings_history()
    except DompetkuError as e:
        await reply_failure(update, e, "Gagal mengambil data tabungan")
        return

    message = "**Tabungan per Sumber:**\n"
    for sumber, total in by_source.items():
        message += f"- {sumber.value}: {format_rupiah(total)}\n"

    if history:
        message += "\n**Riwayat Terbaru:**\n"
        for saving in history:
            note = f" ({escape_markdown(saving.keterangan)})" if saving.keterangan else ""
            message += (
                f"- `{saving.id}` {saving.tanggal or '-'} {escape_markdown(saving.goal_nama or '-')}: "
                f"{format_rupiah(saving.jumlah)} via {saving.sumber.value}{note}\n"
            )
    await update.message.reply_text(message, parse_mode="Markdown")
