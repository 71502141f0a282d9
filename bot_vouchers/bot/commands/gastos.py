import asyncio
import datetime
from typing import Any, Dict

from telegram import Update
from telegram.ext import ContextTypes

from bot_vouchers.bot.commands.utils import (
    error_banner,
    format_breakdown,
    format_expense_line,
    md,
    requires_login,
)
from bot_vouchers.core.api import ApiError
from bot_vouchers.core.models import ExpenseCategory, expense_category_label
from bot_vouchers.utils.text_utils import (
    ValidationError,
    format_brl,
    parse_date_arg,
    parse_money,
)

EXPENSE_FIELDS = {
    "valor": "value",
    "categoria": "category",
    "data": "date",
    "descricao": "description",
    "descrição": "description",
    "pagamento": "paymentMethod",
}


def parse_category(text: str) -> ExpenseCategory:
    category = ExpenseCategory.from_text(text)
    if category is None:
        options = ", ".join(c.label for c in ExpenseCategory)
        raise ValidationError(f"Categoria inválida '{text}'. Opções: {options}")
    return category


def parse_new_expense(args) -> Dict[str, Any]:
    """`valor categoria [AAAA-MM-DD] [descrição...]` -> dados do novo gasto."""
    if len(args) < 2:
        raise ValidationError("Informe pelo menos o valor e a categoria.")
    data: Dict[str, Any] = {
        "value": parse_money(args[0]),
        "category": parse_category(args[1]),
        "date": datetime.date.today(),
    }
    rest = list(args[2:])
    if rest:
        try:
            data["date"] = parse_date_arg(rest[0])
            rest = rest[1:]
        except ValidationError:
            pass  # não é data: faz parte da descrição
    if rest:
        data["description"] = " ".join(rest)
    return data


def parse_expense_field(field: str, raw_value: str) -> Dict[str, Any]:
    key = EXPENSE_FIELDS.get(field.lower())
    if key is None:
        raise ValidationError(f"Campo desconhecido '{field}'. Use: {', '.join(sorted(set(EXPENSE_FIELDS)))}")
    if key == "value":
        return {key: parse_money(raw_value)}
    if key == "category":
        return {key: parse_category(raw_value)}
    if key == "date":
        return {key: parse_date_arg(raw_value)}
    return {key: raw_value.strip() or None}


@requires_login
async def expenses_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Lista os gastos do período atual, total e total por categoria."""
    ledger = context.bot_data["expenses"]

    message = error_banner(ledger)
    message += f"💸 **Gastos de {ledger.period_label()}**\n\n"
    if not ledger.filtered:
        message += "Nenhum gasto neste período."
        await update.message.reply_text(message, parse_mode="Markdown")
        return

    message += "\n".join(format_expense_line(e) for e in ledger.filtered)
    message += f"\n\n💰 Total: *{format_brl(ledger.total)}*"
    message += f"\n\n🏷️ Por categoria:\n{format_breakdown(ledger.category_breakdown, expense_category_label)}"

    summary = ledger.category_summary
    if summary and summary.get("summary"):
        message += (
            f"\n\n📊 Resumo do servidor ({format_brl(float(summary['total']))}):\n"
            f"{format_breakdown(summary['summary'], expense_category_label)}"
        )
    await update.message.reply_text(message, parse_mode="Markdown")


@requires_login
async def expense_detail_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    ledger = context.bot_data["expenses"]
    if not context.args:
        await update.message.reply_text("Uso: `/gasto [id]`", parse_mode="Markdown")
        return

    expense = ledger.get_by_id(context.args[0])
    if expense is None:
        # Fora do período carregado: busca direto na API
        try:
            expense = await asyncio.to_thread(ledger.service.get, context.args[0])
        except ApiError as e:
            if e.is_not_found:
                await update.message.reply_text("🤷 Gasto não encontrado.")
            else:
                await update.message.reply_text(f"❌ {e.message}")
            return

    await update.message.reply_text(
        f"💸 *Gasto* `{expense.id}`\n"
        f"💰 Valor: {format_brl(expense.value)}\n"
        f"🏷️ Categoria: {expense_category_label(expense.category)}\n"
        f"📅 Data: {expense.date:%d/%m/%Y}\n"
        f"📝 Descrição: {md(expense.description or 'sem detalhes')}\n"
        f"💳 Pagamento: {md(expense.payment_method or 'Não Informado')}",
        parse_mode="Markdown",
    )


@requires_login
async def new_expense_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    ledger = context.bot_data["expenses"]
    try:
        data = parse_new_expense(context.args or [])
    except ValidationError as e:
        await update.message.reply_text(
            f"⚠️ {e}\nUso: `/novo_gasto [valor] [categoria] [AAAA-MM-DD] [descrição]`",
            parse_mode="Markdown",
        )
        return

    try:
        await ledger.create(data)
    except ApiError:
        await update.message.reply_text(f"❌ {ledger.error}")
        return
    await update.message.reply_text(
        f"✅ Gasto de {format_brl(data['value'])} em '{data['category'].label}' registrado com sucesso! 🎉"
    )


@requires_login
async def edit_expense_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    ledger = context.bot_data["expenses"]
    if len(context.args or []) < 3:
        await update.message.reply_text(
            "Uso: `/editar_gasto [id] [campo] [valor]`\nEx: `/editar_gasto 7 categoria lazer`",
            parse_mode="Markdown",
        )
        return

    expense_id, field = context.args[0], context.args[1]
    try:
        changes = parse_expense_field(field, " ".join(context.args[2:]))
    except ValidationError as e:
        await update.message.reply_text(f"⚠️ {e}")
        return

    try:
        await ledger.update(expense_id, changes)
    except ApiError:
        await update.message.reply_text(f"❌ {ledger.error}")
        return
    await update.message.reply_text("✅ Gasto atualizado!")


@requires_login
async def delete_expense_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    ledger = context.bot_data["expenses"]
    if not context.args:
        await update.message.reply_text("Uso: `/apagar_gasto [id]`", parse_mode="Markdown")
        return

    try:
        await ledger.delete(context.args[0])
    except ApiError:
        await update.message.reply_text(f"❌ {ledger.error}")
        return
    await update.message.reply_text("🗑️ Gasto excluído.")
