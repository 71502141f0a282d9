import asyncio

from telegram import Update
from telegram.ext import ContextTypes

from bot_vouchers.bot.commands.utils import requires_login
from bot_vouchers.core import charts
from bot_vouchers.core.api import ApiError


@requires_login
async def statistics_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Gera e envia o gráfico de ganhos do período atual."""
    service = context.bot_data["statistics_service"]
    window = context.bot_data["vouchers"].window

    await update.message.reply_text("Gerando suas estatísticas de ganhos, por favor aguarde...")
    try:
        statistics = await asyncio.to_thread(
            service.earnings, window.start.strftime("%Y-%m-%d"), window.end.strftime("%Y-%m-%d")
        )
    except ApiError:
        await update.message.reply_text("❌ Erro ao carregar estatísticas de ganhos")
        return

    chart_buffer = charts.generate_earnings_chart(statistics)
    if chart_buffer:
        chart_buffer.name = "ganhos_chart.png"
        await update.message.reply_photo(photo=chart_buffer, caption="Aqui estão seus ganhos no período:")
    else:
        await update.message.reply_text("Ainda não há ganhos neste período para gerar o gráfico.")
