# bot_vouchers/utils/text_utils.py
import datetime
import math
import re
from typing import Optional, Union

MESES_ABREVIADOS = ["jan.", "fev.", "mar.", "abr.", "mai.", "jun.",
                    "jul.", "ago.", "set.", "out.", "nov.", "dez."]


class ValidationError(ValueError):
    """Entrada do usuário inválida; bloqueia o envio antes de qualquer chamada à API."""


def parse_decimal(value: Union[str, int, float], minimum: Optional[float] = None) -> float:
    """Converte um valor monetário em float.
    Ex: "18,50" -> 18.5
    Ex: "R$ 1.234,56" -> 1234.56
    Ex: "18.50" -> 18.5
    """
    if isinstance(value, bool):
        raise ValidationError("Valor deve ser um número válido")
    if isinstance(value, (int, float)):
        number = float(value)
    else:
        text = re.sub(r"R\$\s?", "", str(value)).strip()
        if "," in text:
            # Formato brasileiro: ponto separa milhar, vírgula separa decimais
            text = text.replace(".", "").replace(",", ".")
        try:
            number = float(text)
        except ValueError:
            raise ValidationError("Valor deve ser um número válido")
    if math.isnan(number) or math.isinf(number):
        raise ValidationError("Valor deve ser um número válido")
    if minimum is not None and number < minimum:
        raise ValidationError(f"Valor deve ser maior que {minimum:g}")
    return number


def parse_money(text: str) -> float:
    """Valor de formulário: precisa ser numérico e positivo."""
    number = parse_decimal(text, minimum=0)
    if number == 0:
        raise ValidationError("Valor deve ser maior que 0")
    return number


def parse_date_arg(text: str) -> datetime.date:
    """Aceita AAAA-MM-DD ou DD/MM/AAAA."""
    text = (text or "").strip()
    for fmt in ("%Y-%m-%d", "%d/%m/%Y"):
        try:
            return datetime.datetime.strptime(text, fmt).date()
        except ValueError:
            continue
    raise ValidationError("Formato de data inválido. Use AAAA-MM-DD ou DD/MM/AAAA.")


def parse_discount(text: str) -> float:
    """Desconto como fração (0.15) ou porcentagem (15 ou 15%)."""
    raw = (text or "").strip()
    is_percent = raw.endswith("%")
    number = parse_decimal(raw.rstrip("%").strip())
    if is_percent or number > 1:
        number = number / 100
    if not 0 <= number <= 1:
        raise ValidationError("Por favor, insira um valor entre 0 e 1")
    return number


def parse_month_start_day(text: str) -> int:
    try:
        day = int(str(text).strip())
    except ValueError:
        raise ValidationError("Por favor, insira um valor entre 1 e 31")
    if not 1 <= day <= 31:
        raise ValidationError("Por favor, insira um valor entre 1 e 31")
    return day


def require(value: Optional[str], field_name: str) -> str:
    if value is None or not str(value).strip():
        raise ValidationError(f"{field_name} é obrigatório")
    return str(value).strip()


def format_brl(value: float) -> str:
    """Ex: 1234.5 -> "R$ 1.234,50" """
    sign = "-" if value < 0 else ""
    inteiro, decimais = f"{abs(value):,.2f}".split(".")
    return f"{sign}R$ {inteiro.replace(',', '.')},{decimais}"


def format_short_date(moment: Union[datetime.date, datetime.datetime], with_year: bool = False) -> str:
    """Ex: 2024-02-10 -> "10 de fev." (ou "10 de fev. de 2024")."""
    text = f"{moment.day:02d} de {MESES_ABREVIADOS[moment.month - 1]}"
    if with_year:
        text += f" de {moment.year}"
    return text


def format_date_range(start, end, with_year: bool = False) -> str:
    return f"{format_short_date(start, with_year)} - {format_short_date(end, with_year)}"


def format_percent(fraction: float) -> str:
    return f"{fraction * 100:g}%"
