from telegram import Update
from telegram.ext import ContextTypes

from bot_vouchers.utils.text_utils import (
    ValidationError,
    format_percent,
    parse_discount,
    parse_month_start_day,
)


async def config_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    settings = context.bot_data["settings"]
    await update.message.reply_text(
        "⚙️ *Configurações*\n"
        f"💸 Desconto: {format_percent(settings.discount_percentage)}\n"
        f"📅 Início do mês: dia {settings.month_start_day}",
        parse_mode="Markdown",
    )


async def discount_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    settings = context.bot_data["settings"]
    if not context.args:
        await update.message.reply_text("Uso: `/desconto [valor]` (ex: `0.15` ou `15%`)", parse_mode="Markdown")
        return
    try:
        value = parse_discount(context.args[0])
    except ValidationError as e:
        await update.message.reply_text(f"⚠️ Valor Inválido: {e}")
        return

    settings.set_discount_percentage(value)
    await update.message.reply_text(f"✅ Desconto definido em {format_percent(value)}.")


async def month_start_day_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    settings = context.bot_data["settings"]
    if not context.args:
        await update.message.reply_text("Uso: `/inicio_mes [dia]` (1 a 31)", parse_mode="Markdown")
        return
    try:
        day = parse_month_start_day(context.args[0])
    except ValidationError as e:
        await update.message.reply_text(f"⚠️ Valor Inválido: {e}")
        return

    # Os ledgers estão inscritos nas configurações e recarregam sozinhos
    settings.set_month_start_day(day)
    for key in ("vouchers", "expenses"):
        await context.bot_data[key].wait_pending_reload()
    await update.message.reply_text(
        f"✅ O mês agora começa no dia {day}. Período atual: {context.bot_data['vouchers'].period_label()}"
    )
