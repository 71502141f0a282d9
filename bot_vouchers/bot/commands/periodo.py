from telegram import Update
from telegram.ext import ContextTypes

from bot_vouchers.bot.commands.utils import requires_login


async def _shift_period(update: Update, context: ContextTypes.DEFAULT_TYPE, months: int) -> None:
    ledgers = [context.bot_data["vouchers"], context.bot_data["expenses"]]
    for ledger in ledgers:
        ledger.shift_period(months)
    # A mudança do ponteiro agenda a recarga; esperamos para responder com dados novos
    for ledger in ledgers:
        await ledger.wait_pending_reload()

    await update.message.reply_text(
        f"📅 Período: *{ledgers[0].period_label(with_year=True)}*\n"
        "Use /vouchers ou /gastos para ver os registros.",
        parse_mode="Markdown",
    )


@requires_login
async def previous_period_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    await _shift_period(update, context, -1)


@requires_login
async def next_period_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    await _shift_period(update, context, 1)
