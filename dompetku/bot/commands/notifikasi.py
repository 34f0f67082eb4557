from telegram import Update
from telegram.ext import ContextTypes
from telegram.helpers import escape_markdown

from dompetku.bot.commands.utils import get_service, reply_failure
from dompetku.core.errors import DompetkuError

PRIORITY_ICONS = {"high": "🔴", "medium": "🟡", "low": "🔵"}


async def notifikasi_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Kirim daftar pengingat: deadline target, jatuh tempo hutang, budget hampir habis."""
    service = get_service(context)
    try:
        items = service.notifications()
    except DompetkuError as e:
        await reply_failure(update, e, "Gagal mengambil notifikasi")
        return

    if not items:
        await update.message.reply_text("Tidak ada notifikasi. Semua aman! 👍")
        return

    message = "**Notifikasi:**\n\n"
    for item in items:
        message += f"{PRIORITY_ICONS.get(item.priority, '•')} **{escape_markdown(item.title)}**\n{escape_markdown(item.message)}\n\n"
    await update.message.reply_text(message.strip(), parse_mode="Markdown")
