from telegram import Update
from telegram.ext import ContextTypes

from bot_vouchers.bot.commands.utils import format_voucher_line, md, requires_login
from bot_vouchers.core.api import ApiError
from bot_vouchers.utils.text_utils import format_brl, format_percent


@requires_login
async def summary_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Resumo da home: três períodos de vouchers (bruto e líquido) e os mais recentes."""
    projector = context.bot_data["projector"]
    settings = context.bot_data["settings"]
    auth = context.bot_data["auth"]

    try:
        summary = await projector.summary()
    except ApiError as e:
        await update.message.reply_text(f"❌ Não foi possível carregar o resumo: {e.message}")
        return

    message = f"Olá, {md(auth.display_name)}! 👋\n\n"
    message += f"💵 Valores líquidos com desconto de {format_percent(settings.discount_percentage)}:\n\n"
    for period in summary.periods:
        message += (
            f"*{period.title}* ({period.date_range})\n"
            f"   Referente aos vouchers: {format_brl(period.gross_value)} → "
            f"*{format_brl(period.net_value(settings.discount_percentage))}*\n"
        )
    if not summary.periods:
        message += "Nenhum período encontrado.\n"

    message += "\n🕒 *Vouchers recentes:*\n"
    if summary.recent_vouchers:
        message += "\n".join(format_voucher_line(v) for v in summary.recent_vouchers)
    else:
        message += "Nenhum voucher registrado ainda."
    await update.message.reply_text(message, parse_mode="Markdown")
