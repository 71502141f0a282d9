# bot_vouchers/main.py
import asyncio
import logging

from flask import Flask, jsonify, request
from telegram import Update
from telegram.ext import Application

from bot_vouchers import config
from bot_vouchers.bot.bot_setup import load_ledgers, setup_bot

logger = logging.getLogger(__name__)


def load_config() -> dict:
    return {
        "TELEGRAM_BOT_TOKEN": config.TELEGRAM_BOT_TOKEN,
        "API_URL": config.API_URL,
        "API_TIMEOUT": config.API_TIMEOUT,
        "STORAGE_PATH": config.STORAGE_PATH,
        "DEFAULT_DISCOUNT_PERCENTAGE": config.DEFAULT_DISCOUNT_PERCENTAGE,
        "DEFAULT_MONTH_START_DAY": config.DEFAULT_MONTH_START_DAY,
        "HOME_SUMMARY_MODE": config.HOME_SUMMARY_MODE,
    }


def create_flask_app(ptb_application: Application, webhook_path: str = config.WEBHOOK_PATH) -> Flask:
    """Aplicação Flask que recebe os updates do Telegram via webhook."""
    flask_app = Flask(__name__)

    @flask_app.route(webhook_path, methods=["POST"])
    async def telegram_webhook():
        if not request.is_json:
            logger.error("Webhook recebeu uma requisição que não é JSON.")
            return jsonify({"status": "error", "message": "Request must be JSON"}), 400

        update_json = request.get_json()
        logger.debug("Webhook recebeu update: %s", update_json.keys() if update_json else None)

        try:
            update = Update.de_json(update_json, ptb_application.bot)
            await ptb_application.process_update(update)
            return jsonify({"status": "ok"}), 200
        except Exception:
            logger.exception("Falha ao processar update do Telegram")
            return jsonify({"status": "error", "message": "Failed to process update"}), 500

    return flask_app


async def _startup(ptb_application: Application) -> None:
    # post_init só roda no polling; no webhook a primeira carga é feita aqui
    await ptb_application.initialize()
    await load_ledgers(ptb_application)


def create_wsgi_app() -> Flask:
    """Monta e inicializa o bot uma única vez para ser servido pelo Gunicorn.

    Uso: gunicorn "bot_vouchers.main:create_wsgi_app()"
    """
    logging.basicConfig(level=config.LOG_LEVEL,
                        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s")
    ptb_application = setup_bot(load_config())
    asyncio.run(_startup(ptb_application))
    logger.info("Aplicação do bot inicializada para webhook.")
    return create_flask_app(ptb_application)


def main() -> None:
    """Inicia o bot em modo polling (desenvolvimento local)."""
    logging.basicConfig(level=config.LOG_LEVEL,
                        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s")
    application = setup_bot(load_config())
    logger.info("Bot Telegram iniciado em modo polling.")
    application.run_polling(allowed_updates=Update.ALL_TYPES)


if __name__ == "__main__":
    main()
