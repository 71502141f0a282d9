# bot_vouchers/bot/commands/__init__.py

from .utils import start_command, help_command
from .auth import login_command, logout_command
from .resumo import summary_command
from .periodo import next_period_command, previous_period_command
from .preferences import config_command, discount_command, month_start_day_command
from .estatisticas import statistics_command
from .vouchers import (
    category_chart_command,
    delete_voucher_command,
    edit_voucher_command,
    voucher_detail_command,
    vouchers_command,
)
from .gastos import (
    delete_expense_command,
    edit_expense_command,
    expense_detail_command,
    expenses_command,
    new_expense_command,
)

# Nome do comando no Telegram -> função
ALL_COMMANDS = {
    "start": start_command,
    "help": help_command,
    "login": login_command,
    "sair": logout_command,
    "resumo": summary_command,
    "vouchers": vouchers_command,
    "gastos": expenses_command,
    "anterior": previous_period_command,
    "proximo": next_period_command,
    "voucher": voucher_detail_command,
    "editar_voucher": edit_voucher_command,
    "apagar_voucher": delete_voucher_command,
    "grafico_categorias": category_chart_command,
    "gasto": expense_detail_command,
    "novo_gasto": new_expense_command,
    "editar_gasto": edit_expense_command,
    "apagar_gasto": delete_expense_command,
    "config": config_command,
    "desconto": discount_command,
    "inicio_mes": month_start_day_command,
    "estatisticas": statistics_command,
}
