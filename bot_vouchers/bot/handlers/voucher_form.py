from typing import Any, Dict

from telegram import ReplyKeyboardMarkup, ReplyKeyboardRemove, Update
from telegram.ext import ContextTypes, ConversationHandler

from bot_vouchers.bot.commands.utils import md, requires_login
from bot_vouchers.bot.handlers import (
    ASKING_CONFIRMATION,
    ASKING_DATE,
    ASKING_DESTINATION,
    ASKING_REQUEST_CODE,
    ASKING_START,
    ASKING_TAX_NUMBER,
    ASKING_VALUE,
)
from bot_vouchers.core.api import ApiError
from bot_vouchers.core.models import voucher_category_label
from bot_vouchers.utils.text_utils import (
    ValidationError,
    format_brl,
    parse_date_arg,
    parse_money,
    require,
)

PENDING_KEY = "pending_voucher"
CONFIRMATION_KEYBOARD = ReplyKeyboardMarkup([["Sim ✅", "Não ❌"]], one_time_keyboard=True, resize_keyboard=True)


def _pending(context: ContextTypes.DEFAULT_TYPE) -> Dict[str, Any]:
    return context.user_data.setdefault(PENDING_KEY, {})


@requires_login
async def new_voucher_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> int:
    """Inicia o cadastro de um voucher, campo a campo."""
    context.user_data[PENDING_KEY] = {}
    await update.message.reply_text(
        "🧾 Novo voucher! Qual é o número da nota fiscal? (use /cancelar para desistir)",
        reply_markup=ReplyKeyboardRemove(),
    )
    return ASKING_TAX_NUMBER


async def handle_tax_number(update: Update, context: ContextTypes.DEFAULT_TYPE) -> int:
    try:
        _pending(context)["taxNumber"] = require(update.message.text, "Nota fiscal")
    except ValidationError as e:
        await update.message.reply_text(f"⚠️ {e}")
        return ASKING_TAX_NUMBER
    await update.message.reply_text("🏷️ Qual é o código da solicitação? (ex: MAN-0123)")
    return ASKING_REQUEST_CODE


async def handle_request_code(update: Update, context: ContextTypes.DEFAULT_TYPE) -> int:
    try:
        code = require(update.message.text, "Código da solicitação").upper()
    except ValidationError as e:
        await update.message.reply_text(f"⚠️ {e}")
        return ASKING_REQUEST_CODE
    _pending(context)["requestCode"] = code
    await update.message.reply_text("📅 Qual a data do voucher? (AAAA-MM-DD ou DD/MM/AAAA)")
    return ASKING_DATE


async def handle_date(update: Update, context: ContextTypes.DEFAULT_TYPE) -> int:
    try:
        _pending(context)["date"] = parse_date_arg(update.message.text)
    except ValidationError as e:
        await update.message.reply_text(f"⚠️ {e} 🗓️")
        return ASKING_DATE
    await update.message.reply_text("💰 Qual o valor? (ex: 87,50)")
    return ASKING_VALUE


async def handle_value(update: Update, context: ContextTypes.DEFAULT_TYPE) -> int:
    try:
        _pending(context)["value"] = parse_money(update.message.text)
    except ValidationError as e:
        await update.message.reply_text(f"⚠️ {e} 🔢")
        return ASKING_VALUE
    await update.message.reply_text("📍 De onde saiu? (origem)")
    return ASKING_START


async def handle_start(update: Update, context: ContextTypes.DEFAULT_TYPE) -> int:
    try:
        _pending(context)["start"] = require(update.message.text, "Origem")
    except ValidationError as e:
        await update.message.reply_text(f"⚠️ {e}")
        return ASKING_START
    await update.message.reply_text("🏁 E o destino?")
    return ASKING_DESTINATION


async def handle_destination(update: Update, context: ContextTypes.DEFAULT_TYPE) -> int:
    try:
        _pending(context)["destination"] = require(update.message.text, "Destino")
    except ValidationError as e:
        await update.message.reply_text(f"⚠️ {e}")
        return ASKING_DESTINATION
    await send_confirmation_message(update, context)
    return ASKING_CONFIRMATION


async def send_confirmation_message(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    pending = _pending(context)
    code = pending["requestCode"]
    await update.message.reply_text(
        "Confirma o *voucher*? 🧾\n"
        f"📄 Nota: *{md(pending['taxNumber'])}*\n"
        f"🏷️ Solicitação: *{md(code)}* ({md(voucher_category_label(code[:3]))})\n"
        f"📅 Data: *{pending['date']:%d/%m/%Y}*\n"
        f"💰 Valor: *{format_brl(pending['value'])}*\n"
        f"📍 {md(pending['start'])} → {md(pending['destination'])}\n\n"
        "*Tudo certo?* 🤔",
        reply_markup=CONFIRMATION_KEYBOARD,
        parse_mode="Markdown",
    )


async def handle_confirmation(update: Update, context: ContextTypes.DEFAULT_TYPE) -> int:
    """Lida com a confirmação (Sim/Não) do voucher."""
    user_response = (update.message.text or "").lower()
    pending = context.user_data.get(PENDING_KEY)

    if not pending:
        await update.message.reply_text(
            "Ops! 😬 Não encontrei um voucher pendente para confirmar. 🔄",
            reply_markup=ReplyKeyboardRemove(),
        )
        return ConversationHandler.END

    if user_response in ("sim ✅", "sim"):
        ledger = context.bot_data["vouchers"]
        try:
            await ledger.create(pending)
        except ApiError:
            # Mantém o cadastro aberto para o usuário tentar de novo
            await update.message.reply_text(
                f"❌ {ledger.error}\nQuer tentar enviar de novo?",
                reply_markup=CONFIRMATION_KEYBOARD,
            )
            return ASKING_CONFIRMATION

        context.user_data.pop(PENDING_KEY, None)
        await update.message.reply_text(
            f"✅ Voucher de {format_brl(pending['value'])} registrado com sucesso! 🎉",
            reply_markup=ReplyKeyboardRemove(),
        )
        return ConversationHandler.END

    if user_response in ("não ❌", "não", "nao"):
        context.user_data.pop(PENDING_KEY, None)
        await update.message.reply_text("Cadastro cancelado. 👍", reply_markup=ReplyKeyboardRemove())
        return ConversationHandler.END

    await update.message.reply_text("Por favor, responda apenas 'Sim ✅' ou 'Não ❌'.",
                                    reply_markup=CONFIRMATION_KEYBOARD)
    return ASKING_CONFIRMATION


async def cancel_voucher_form(update: Update, context: ContextTypes.DEFAULT_TYPE) -> int:
    context.user_data.pop(PENDING_KEY, None)
    await update.message.reply_text("Cadastro cancelado. 👍", reply_markup=ReplyKeyboardRemove())
    return ConversationHandler.END
