# dompetku/config.py
import os
from dotenv import load_dotenv

load_dotenv()

# Telegram
TELEGRAM_BOT_TOKEN = os.getenv("TELEGRAM_BOT_TOKEN")

# Supabase
SUPABASE_URL = os.getenv("SUPABASE_URL")
SUPABASE_KEY = os.getenv("SUPABASE_KEY")

# Pemilik data (auth.users.id di Supabase)
DOMPETKU_USER_ID = os.getenv("DOMPETKU_USER_ID")

DOMPETKU_LOG_LEVEL = os.getenv("DOMPETKU_LOG_LEVEL", "INFO")

# Jumlah bulan pada grafik saldo
DOMPETKU_MONTHS_BACK = int(os.getenv("DOMPETKU_MONTHS_BACK", "6"))

# Tolak pembayaran hutang yang melebihi sisa hutang
DOMPETKU_REJECT_OVERPAYMENT = os.getenv("DOMPETKU_REJECT_OVERPAYMENT", "false").lower() in ("1", "true", "yes")
