# bot_vouchers/core/models.py
import datetime
import logging
from enum import Enum
from typing import Any, Dict, Optional, Union

from bot_vouchers.utils.text_utils import parse_decimal

logger = logging.getLogger(__name__)

# Os registros chegam da API como dicionários em camelCase. Estas classes
# convertem para atributos Python e de volta para o formato de envio.

VOUCHER_CATEGORY_LABELS = {
    "MAN": "Manutenção",
    "TRN": "Transporte",
    "DEL": "Entrega",
    "OPE": "Operacional",
    "ADM": "Administrativo",
    "GES": "Gestão",
    "ENG": "Engenharia",
}


def voucher_category_label(code: str) -> str:
    """Nome amigável da categoria do voucher; códigos desconhecidos passam direto."""
    return VOUCHER_CATEGORY_LABELS.get(code, code)


def parse_record_date(value: Union[str, datetime.date, datetime.datetime]) -> datetime.datetime:
    """
    Converte a data econômica do registro para um datetime ingênuo em UTC.

    "2024-03-12" vira 2024-03-12 00:00. Timestamps com fuso são levados para
    UTC antes de perder o fuso, assim a data nunca "volta" um dia.
    """
    if isinstance(value, datetime.datetime):
        parsed = value
    elif isinstance(value, datetime.date):
        return datetime.datetime.combine(value, datetime.time.min)
    else:
        text = str(value).strip()
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        try:
            parsed = datetime.datetime.fromisoformat(text)
        except ValueError:
            raise ValueError(f"Data inválida no registro: {value!r}")
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(datetime.timezone.utc).replace(tzinfo=None)
    return parsed


def format_wire_date(value: Union[str, datetime.date, datetime.datetime]) -> str:
    """Datas são enviadas para a API como AAAA-MM-DD."""
    if isinstance(value, str):
        return parse_record_date(value).strftime("%Y-%m-%d")
    return value.strftime("%Y-%m-%d")


def format_wire_value(value: float) -> str:
    """O serviço de vouchers espera vírgula decimal: 150.5 -> "150,5"."""
    text = ("%.2f" % value).rstrip("0").rstrip(".")
    return text.replace(".", ",")


class FinancialRecord:
    """Base comum de vouchers e gastos: id, data econômica e valor."""

    def __init__(self, id: str, date: Union[str, datetime.date, datetime.datetime], value: Union[float, str]):
        self.id = id
        self.date = parse_record_date(date)
        self.value = value if isinstance(value, float) else parse_decimal(value)

    @property
    def category(self) -> str:
        raise NotImplementedError

    def __repr__(self) -> str:
        return f"<{type(self).__name__} id={self.id!r} date={self.date:%Y-%m-%d} value={self.value}>"


class Voucher(FinancialRecord):
    def __init__(self, id: str, tax_number: str, request_code: str, date, value,
                 start: str = "", destination: str = ""):
        super().__init__(id, date, value)
        self.tax_number = tax_number
        self.request_code = request_code
        self.start = start
        self.destination = destination

    @property
    def category(self) -> str:
        # Os 3 primeiros caracteres do código da solicitação (ex: "MAN-01" -> "MAN")
        return (self.request_code or "")[:3]

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> "Voucher":
        return cls(
            id=str(data["id"]),
            tax_number=data.get("taxNumber", ""),
            request_code=data.get("requestCode", ""),
            date=data["date"],
            value=data.get("value", 0),
            start=data.get("start", ""),
            destination=data.get("destination", ""),
        )


def voucher_payload(data: Dict[str, Any]) -> Dict[str, Any]:
    """Formata os campos de um voucher (completos ou parciais) para envio."""
    payload = dict(data)
    if payload.get("date") is not None:
        payload["date"] = format_wire_date(payload["date"])
    if isinstance(payload.get("value"), (int, float)):
        payload["value"] = format_wire_value(float(payload["value"]))
    return payload


class ExpenseCategory(str, Enum):
    FOOD = "FOOD"
    TRANSPORT = "TRANSPORT"
    HOUSING = "HOUSING"
    ENTERTAINMENT = "ENTERTAINMENT"
    HEALTHCARE = "HEALTHCARE"
    EDUCATION = "EDUCATION"
    UTILITIES = "UTILITIES"
    SHOPPING = "SHOPPING"
    OTHER = "OTHER"

    @property
    def label(self) -> str:
        return EXPENSE_CATEGORY_LABELS[self]

    @classmethod
    def from_text(cls, text: str) -> Optional["ExpenseCategory"]:
        """Aceita o código (FOOD) ou o nome em português (alimentação/alimentacao)."""
        normalized = text.strip().lower()
        for category in cls:
            label = category.label.lower()
            if normalized in (category.value.lower(), label, _strip_accents(label)):
                return category
        return None


EXPENSE_CATEGORY_LABELS = {
    ExpenseCategory.FOOD: "Alimentação",
    ExpenseCategory.TRANSPORT: "Transporte",
    ExpenseCategory.HOUSING: "Moradia",
    ExpenseCategory.ENTERTAINMENT: "Lazer",
    ExpenseCategory.HEALTHCARE: "Saúde",
    ExpenseCategory.EDUCATION: "Educação",
    ExpenseCategory.UTILITIES: "Contas",
    ExpenseCategory.SHOPPING: "Compras",
    ExpenseCategory.OTHER: "Outros",
}


def expense_category_label(code: str) -> str:
    try:
        return ExpenseCategory(code).label
    except ValueError:
        return code


def _strip_accents(text: str) -> str:
    return text.translate(str.maketrans("áàãâéêíóõôúç", "aaaaeeiooouc"))


class Expense(FinancialRecord):
    def __init__(self, id: str, value, category: ExpenseCategory, date,
                 description: Optional[str] = None, payment_method: Optional[str] = None,
                 user_id: Optional[str] = None, created_at: Optional[str] = None,
                 updated_at: Optional[str] = None):
        super().__init__(id, date, value)
        self.expense_category = category
        self.description = description
        self.payment_method = payment_method
        self.user_id = user_id
        self.created_at = created_at
        self.updated_at = updated_at

    @property
    def category(self) -> str:
        return self.expense_category.value

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> "Expense":
        raw_category = str(data.get("category") or ExpenseCategory.OTHER.value).upper()
        try:
            category = ExpenseCategory(raw_category)
        except ValueError:
            logger.warning("Categoria de gasto desconhecida '%s', usando OTHER", raw_category)
            category = ExpenseCategory.OTHER
        return cls(
            id=str(data["id"]),
            value=data.get("value", 0),
            category=category,
            date=data["date"],
            description=data.get("description"),
            payment_method=data.get("paymentMethod"),
            user_id=data.get("userId"),
            created_at=data.get("createdAt"),
            updated_at=data.get("updatedAt"),
        )


def expense_payload(data: Dict[str, Any]) -> Dict[str, Any]:
    """Formata os campos de um gasto para envio (valor segue numérico)."""
    payload = dict(data)
    if payload.get("date") is not None:
        payload["date"] = format_wire_date(payload["date"])
    if isinstance(payload.get("category"), ExpenseCategory):
        payload["category"] = payload["category"].value
    if isinstance(payload.get("value"), int):
        payload["value"] = float(payload["value"])
    return payload
