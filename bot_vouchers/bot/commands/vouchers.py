from typing import Any, Dict

from telegram import Update
from telegram.ext import ContextTypes

from bot_vouchers.bot.commands.utils import (
    error_banner,
    format_breakdown,
    format_voucher_line,
    md,
    requires_login,
)
from bot_vouchers.core import charts
from bot_vouchers.core.api import ApiError
from bot_vouchers.core.models import voucher_category_label
from bot_vouchers.utils.text_utils import (
    ValidationError,
    format_brl,
    parse_date_arg,
    parse_money,
    require,
)

# Campos aceitos por /editar_voucher -> chave da API
VOUCHER_FIELDS = {
    "nota": "taxNumber",
    "codigo": "requestCode",
    "código": "requestCode",
    "data": "date",
    "valor": "value",
    "origem": "start",
    "destino": "destination",
}


def parse_voucher_field(field: str, raw_value: str) -> Dict[str, Any]:
    """Converte `campo valor` da edição no dicionário parcial enviado à API."""
    key = VOUCHER_FIELDS.get(field.lower())
    if key is None:
        raise ValidationError(f"Campo desconhecido '{field}'. Use: {', '.join(sorted(set(VOUCHER_FIELDS)))}")
    if key == "date":
        return {key: parse_date_arg(raw_value)}
    if key == "value":
        return {key: parse_money(raw_value)}
    return {key: require(raw_value, field)}


@requires_login
async def vouchers_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Lista os vouchers do período atual com total bruto/líquido e total por categoria."""
    ledger = context.bot_data["vouchers"]
    settings = context.bot_data["settings"]

    message = error_banner(ledger)
    message += f"🧾 **Vouchers de {ledger.period_label()}**\n\n"
    if not ledger.filtered:
        message += "Nenhum voucher neste período."
        await update.message.reply_text(message, parse_mode="Markdown")
        return

    message += "\n".join(format_voucher_line(v) for v in ledger.filtered)
    message += (
        f"\n\n💰 Total bruto: *{format_brl(ledger.total)}*"
        f"\n💵 Total líquido: *{format_brl(settings.net_value(ledger.total))}*"
        f"\n\n🏷️ Por categoria:\n{format_breakdown(ledger.category_breakdown, voucher_category_label)}"
    )
    await update.message.reply_text(message, parse_mode="Markdown")


@requires_login
async def voucher_detail_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    ledger = context.bot_data["vouchers"]
    if not context.args:
        await update.message.reply_text("Uso: `/voucher [id]`", parse_mode="Markdown")
        return

    voucher = ledger.get_by_id(context.args[0])
    if voucher is None:
        await update.message.reply_text("🤷 Voucher não encontrado.")
        return

    settings = context.bot_data["settings"]
    await update.message.reply_text(
        f"🧾 *Voucher* `{voucher.id}`\n"
        f"📄 Nota fiscal: {md(voucher.tax_number)}\n"
        f"🏷️ Solicitação: {md(voucher.request_code)} ({md(voucher_category_label(voucher.category))})\n"
        f"📅 Data: {voucher.date:%d/%m/%Y}\n"
        f"📍 {md(voucher.start)} → {md(voucher.destination)}\n"
        f"💰 Valor: {format_brl(voucher.value)} (líquido {format_brl(settings.net_value(voucher.value))})",
        parse_mode="Markdown",
    )


@requires_login
async def edit_voucher_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    ledger = context.bot_data["vouchers"]
    if len(context.args or []) < 3:
        await update.message.reply_text(
            "Uso: `/editar_voucher [id] [campo] [valor]`\nEx: `/editar_voucher 42 valor 87,50`",
            parse_mode="Markdown",
        )
        return

    voucher_id, field = context.args[0], context.args[1]
    try:
        changes = parse_voucher_field(field, " ".join(context.args[2:]))
    except ValidationError as e:
        await update.message.reply_text(f"⚠️ {e}")
        return

    try:
        await ledger.update(voucher_id, changes)
    except ApiError:
        await update.message.reply_text(f"❌ {ledger.error}")
        return
    await update.message.reply_text("✅ Voucher atualizado!")


@requires_login
async def delete_voucher_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    ledger = context.bot_data["vouchers"]
    if not context.args:
        await update.message.reply_text("Uso: `/apagar_voucher [id]`", parse_mode="Markdown")
        return

    try:
        await ledger.delete(context.args[0])
    except ApiError:
        await update.message.reply_text(f"❌ {ledger.error}")
        return
    await update.message.reply_text("🗑️ Voucher excluído.")


@requires_login
async def category_chart_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Gera e envia o gráfico dos vouchers do período por categoria."""
    ledger = context.bot_data["vouchers"]
    chart_buffer = charts.generate_category_chart(
        ledger.category_breakdown, voucher_category_label,
        title=f"Vouchers por categoria ({ledger.period_label()})",
    )
    if chart_buffer:
        chart_buffer.name = "vouchers_por_categoria.png"
        await update.message.reply_photo(photo=chart_buffer, caption="Aqui estão seus vouchers por categoria:")
    else:
        await update.message.reply_text("Ainda não há vouchers neste período para gerar o gráfico.")
