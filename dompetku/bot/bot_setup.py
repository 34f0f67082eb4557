from telegram.ext import Application, CommandHandler

from dompetku.bot.commands import ALL_COMMANDS
from dompetku.utils.logging_setup import get_logger

logger = get_logger("dompetku.bot.bot_setup")


def setup_and_run_bot(config: dict) -> Application:
    """
    Siapkan aplikasi bot Telegram (semua CommandHandler).
    Mengembalikan Application yang siap dipakai oleh server WSGI.
    """
    application = Application.builder().token(config["TELEGRAM_BOT_TOKEN"]).build()

    # LedgerService dibagikan ke semua perintah lewat bot_data
    application.bot_data["ledger_service"] = config["LEDGER_SERVICE"]

    for name, callback in ALL_COMMANDS.items():
        application.add_handler(CommandHandler(name, callback))

    logger.info("Bot Telegram siap untuk webhook dengan %s perintah", len(ALL_COMMANDS))
    # run_polling() tidak dipanggil di sini; Application dijalankan oleh server WSGI.
    return application
