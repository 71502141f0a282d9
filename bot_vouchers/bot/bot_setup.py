# bot_vouchers/bot/bot_setup.py
import asyncio
import logging

from telegram import Update
from telegram.ext import Application, CommandHandler, ContextTypes, ConversationHandler, MessageHandler, filters

from bot_vouchers.bot.commands import ALL_COMMANDS
from bot_vouchers.bot.handlers import (
    ASKING_CONFIRMATION, ASKING_DATE, ASKING_DESTINATION, ASKING_REQUEST_CODE,
    ASKING_START, ASKING_TAX_NUMBER, ASKING_VALUE,
    cancel_voucher_form, handle_confirmation, handle_date, handle_destination,
    handle_request_code, handle_start, handle_tax_number, handle_value, new_voucher_command,
)
from bot_vouchers.core.api import ApiClient
from bot_vouchers.core.auth import TOKEN_KEY, AuthSession
from bot_vouchers.core.ledger import expense_ledger, voucher_ledger
from bot_vouchers.core.projector import ClientSideProjector, ServerSideProjector
from bot_vouchers.core.services import AuthService, ExpenseService, StatisticsService, VoucherService
from bot_vouchers.core.settings import Settings
from bot_vouchers.core.storage import LocalStore

logger = logging.getLogger(__name__)

TEXT_ONLY = filters.TEXT & ~filters.COMMAND


def build_services(config: dict) -> dict:
    """
    Monta o armazenamento local, as preferências, a sessão, os serviços da API
    e os dois ledgers. Tudo vai para o bot_data da aplicação.
    """
    store = LocalStore(config["STORAGE_PATH"])
    settings = Settings(store, config["DEFAULT_DISCOUNT_PERCENTAGE"], config["DEFAULT_MONTH_START_DAY"]).load()
    client = ApiClient(config["API_URL"], timeout=config["API_TIMEOUT"],
                       token_provider=lambda: store.get_item(TOKEN_KEY))

    voucher_service = VoucherService(client)
    expense_service = ExpenseService(client)
    vouchers = voucher_ledger(voucher_service, settings)
    expenses = expense_ledger(expense_service, settings)

    if config.get("HOME_SUMMARY_MODE") == "server":
        projector = ServerSideProjector(voucher_service, settings)
    else:
        projector = ClientSideProjector(vouchers, settings)

    return {
        "settings": settings,
        "auth": AuthSession(AuthService(client), store).load(),
        "vouchers": vouchers,
        "expenses": expenses,
        "projector": projector,
        "statistics_service": StatisticsService(client),
    }


async def load_ledgers(application: Application) -> None:
    """Primeira carga dos ledgers quando já existe uma sessão salva."""
    data = application.bot_data
    if data["auth"].is_authenticated:
        await asyncio.gather(data["vouchers"].reload(), data["expenses"].reload())
        logger.info("Ledgers carregados: %d vouchers, %d gastos",
                    len(data["vouchers"].records), len(data["expenses"].records))


async def error_handler(update: object, context: ContextTypes.DEFAULT_TYPE) -> None:
    logger.error("Erro ao processar update %s", update, exc_info=context.error)
    if isinstance(update, Update) and update.effective_message:
        await update.effective_message.reply_text("Ops! 😬 Algo deu errado. Tente novamente em instantes.")


def setup_bot(config: dict) -> Application:
    """
    Configura a aplicação do bot do Telegram (Handlers, Comandos, Conversas).
    Retorna o objeto Application configurado, pronto para polling ou webhook.
    """
    application = Application.builder().token(config["TELEGRAM_BOT_TOKEN"]).post_init(load_ledgers).build()
    application.bot_data.update(build_services(config))

    # --- Conversa do cadastro de voucher ---
    # Registrada antes dos comandos para que /cancelar chegue até ela.
    conv_handler = ConversationHandler(
        entry_points=[CommandHandler("novo_voucher", new_voucher_command)],
        states={
            ASKING_TAX_NUMBER: [MessageHandler(TEXT_ONLY, handle_tax_number)],
            ASKING_REQUEST_CODE: [MessageHandler(TEXT_ONLY, handle_request_code)],
            ASKING_DATE: [MessageHandler(TEXT_ONLY, handle_date)],
            ASKING_VALUE: [MessageHandler(TEXT_ONLY, handle_value)],
            ASKING_START: [MessageHandler(TEXT_ONLY, handle_start)],
            ASKING_DESTINATION: [MessageHandler(TEXT_ONLY, handle_destination)],
            ASKING_CONFIRMATION: [MessageHandler(TEXT_ONLY, handle_confirmation)],
        },
        fallbacks=[CommandHandler("cancelar", cancel_voucher_form)],
    )
    application.add_handler(conv_handler)

    for name, callback in ALL_COMMANDS.items():
        application.add_handler(CommandHandler(name, callback))

    application.add_error_handler(error_handler)

    logger.info("Bot Telegram configurado com %d comandos.", len(ALL_COMMANDS) + 1)
    return application
