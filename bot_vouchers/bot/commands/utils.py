import functools
from typing import Awaitable, Callable

from telegram import Update
from telegram.ext import ContextTypes
from telegram.helpers import escape_markdown

from bot_vouchers.core.ledger import Ledger
from bot_vouchers.core.models import Expense, Voucher, expense_category_label, voucher_category_label
from bot_vouchers.utils.text_utils import format_brl

Handler = Callable[[Update, ContextTypes.DEFAULT_TYPE], Awaitable[None]]


def md(text: object) -> str:
    """Escapa texto livre (digitado pelo usuário) para mensagens com parse_mode="Markdown"."""
    return escape_markdown(str(text))


async def start_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Envia uma mensagem quando o comando /start é emitido."""
    await update.message.reply_text(
        "Olá! Sou seu bot de **vouchers** e **gastos**. 🚕💸\n\n"
        "Comece com `/login [email] [senha]` e depois:\n"
        "- `/resumo` para ver os três últimos períodos de vouchers.\n"
        "- `/vouchers` e `/gastos` para ver o período atual.\n"
        "- `/anterior` e `/proximo` para navegar entre os períodos.\n"
        "- `/novo_voucher` e `/novo_gasto` para registrar.\n"
        "- `/config` para ver o desconto e o dia de início do mês.\n"
        "- `/help` para mais informações.",
        parse_mode="Markdown",
    )


async def help_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Envia uma mensagem quando o comando /help é emitido."""
    await update.message.reply_text(
        "**Conta:**\n"
        "- `/login [email] [senha]`: Entra na sua conta.\n"
        "- `/sair`: Sai da conta.\n\n"
        "**Resumo e períodos:**\n"
        "- `/resumo`: Valores bruto e líquido dos três últimos períodos e os vouchers recentes.\n"
        "- `/vouchers`: Vouchers do período atual, total e total por categoria.\n"
        "- `/gastos`: Gastos do período atual, total e total por categoria.\n"
        "- `/anterior` / `/proximo`: Muda o período exibido.\n"
        "- `/estatisticas`: Gráfico dos ganhos do período.\n"
        "- `/grafico_categorias`: Gráfico dos vouchers por categoria.\n\n"
        "**Vouchers:**\n"
        "- `/novo_voucher`: Cadastro passo a passo (use `/cancelar` para desistir).\n"
        "- `/voucher [id]`: Detalhes de um voucher.\n"
        "- `/editar_voucher [id] [campo] [valor]`: campos `nota`, `codigo`, `data`, `valor`, `origem`, `destino`.\n"
        "- `/apagar_voucher [id]`: Exclui um voucher.\n\n"
        "**Gastos:**\n"
        "- `/novo_gasto [valor] [categoria] [AAAA-MM-DD] [descrição]`: ex: `/novo_gasto 35,90 alimentacao 2025-07-10 almoço`.\n"
        "- `/gasto [id]`: Detalhes de um gasto.\n"
        "- `/editar_gasto [id] [campo] [valor]`: campos `valor`, `categoria`, `data`, `descricao`, `pagamento`.\n"
        "- `/apagar_gasto [id]`: Exclui um gasto.\n\n"
        "**Configurações:**\n"
        "- `/config`: Mostra as configurações atuais.\n"
        "- `/desconto [valor]`: Define o desconto (ex: `0.15` ou `15%`).\n"
        "- `/inicio_mes [dia]`: Define o dia (1 a 31) em que o mês começa.",
        parse_mode="Markdown",
    )


def requires_login(handler: Handler) -> Handler:
    """Só executa o comando se houver uma sessão ativa."""

    @functools.wraps(handler)
    async def wrapper(update: Update, context: ContextTypes.DEFAULT_TYPE):
        auth = context.bot_data["auth"]
        if not auth.is_authenticated:
            await update.message.reply_text("🔒 Você precisa entrar primeiro: `/login [email] [senha]`",
                                            parse_mode="Markdown")
            return None
        return await handler(update, context)

    return wrapper


def format_voucher_line(voucher: Voucher) -> str:
    return (
        f"📅 {voucher.date:%d/%m/%Y} | {format_brl(voucher.value)} | "
        f"{md(voucher.request_code)} ({md(voucher_category_label(voucher.category))}) | "
        f"{md(voucher.start or '?')} → {md(voucher.destination or '?')} | id `{voucher.id}`"
    )


def format_expense_line(expense: Expense) -> str:
    description = f" - {md(expense.description)}" if expense.description else ""
    return (
        f"📅 {expense.date:%d/%m/%Y} | {format_brl(expense.value)} | "
        f"{expense_category_label(expense.category)}{description} | id `{expense.id}`"
    )


def format_breakdown(breakdown, label_of) -> str:
    lines = []
    for code, total in sorted(breakdown.items(), key=lambda item: item[1], reverse=True):
        lines.append(f"- {md(label_of(code))}: {format_brl(total)}")
    return "\n".join(lines)


def error_banner(ledger: Ledger) -> str:
    """Dados antigos + aviso: uma recarga com erro não apaga a lista."""
    if ledger.error:
        return f"⚠️ {md(ledger.error)} (mostrando os últimos dados carregados)\n\n"
    return ""
