# dompetku/main.py
import asyncio

from flask import Flask, request, jsonify
from telegram import Update

from dompetku import config
from dompetku.bot.bot_setup import setup_and_run_bot
from dompetku.core.services import LedgerService
from dompetku.core.store import RecordStore, get_supabase_client
from dompetku.utils.logging_setup import configure_logging, get_logger

WEBHOOK_PATH = "/webhook"

configure_logging(config.DOMPETKU_LOG_LEVEL)
logger = get_logger("dompetku.main")


def build_service() -> LedgerService:
    store = RecordStore(get_supabase_client(), config.DOMPETKU_USER_ID)
    service = LedgerService(store, reject_overpayment=config.DOMPETKU_REJECT_OVERPAYMENT)
    service.migrate_legacy_debts()
    return service


def create_app(ptb_application) -> Flask:
    flask_app = Flask(__name__)

    @flask_app.route(WEBHOOK_PATH, methods=["POST"])
    async def telegram_webhook():
        if not request.is_json:
            logger.error("Webhook menerima request yang bukan JSON")
            return jsonify({"status": "error", "message": "Request must be JSON"}), 400

        update_json = request.get_json()
        logger.debug("Webhook menerima update: %s", list(update_json.keys()) if update_json else None)

        try:
            update = Update.de_json(update_json, ptb_application.bot)
            await ptb_application.process_update(update)
            return jsonify({"status": "ok"}), 200
        except Exception:
            logger.exception("Gagal memproses update Telegram")
            return jsonify({"status": "error", "message": "Failed to process update"}), 500

    return flask_app


# Setup global: dijalankan sekali saat modul dimuat oleh Gunicorn
try:
    ptb_application = setup_and_run_bot({
        "TELEGRAM_BOT_TOKEN": config.TELEGRAM_BOT_TOKEN,
        "LEDGER_SERVICE": build_service(),
    })
    asyncio.run(ptb_application.initialize())
    logger.info("Application python-telegram-bot berhasil diinisialisasi")

    wsgi_app = create_app(ptb_application)
except Exception:
    logger.exception("Error kritis saat inisialisasi dompetku.main")
    raise
