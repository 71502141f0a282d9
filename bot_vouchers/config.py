# bot_vouchers/config.py
import os
from dotenv import load_dotenv

load_dotenv()

# Configurações do Telegram
TELEGRAM_BOT_TOKEN = os.getenv("TELEGRAM_BOT_TOKEN")
WEBHOOK_PATH = os.getenv("WEBHOOK_PATH", "/webhook")

# Configurações da API REST de vouchers e gastos
API_URL = os.getenv("API_URL", "http://localhost:3000")
API_TIMEOUT = float(os.getenv("API_TIMEOUT", "15"))

# Armazenamento local (token, usuário e preferências)
STORAGE_PATH = os.getenv("STORAGE_PATH", os.path.join("data", "storage.json"))

# Valores padrão das preferências
DEFAULT_DISCOUNT_PERCENTAGE = float(os.getenv("DEFAULT_DISCOUNT_PERCENTAGE", "0.15"))
DEFAULT_MONTH_START_DAY = int(os.getenv("DEFAULT_MONTH_START_DAY", "1"))

# "client" calcula o resumo da home localmente, "server" usa /v2/voucher/home-summary
HOME_SUMMARY_MODE = os.getenv("HOME_SUMMARY_MODE", "client")

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
