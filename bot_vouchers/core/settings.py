# bot_vouchers/core/settings.py
import logging
from typing import Callable, List

from bot_vouchers.config import DEFAULT_DISCOUNT_PERCENTAGE, DEFAULT_MONTH_START_DAY
from bot_vouchers.core.aggregation import net_value
from bot_vouchers.core.periods import validate_start_day
from bot_vouchers.core.storage import LocalStore

logger = logging.getLogger(__name__)

DISCOUNT_KEY = "@settings_discountPercentage"
MONTH_START_DAY_KEY = "@settings_monthStartDay"

SettingsListener = Callable[[str, object], None]


class Settings:
    """
    Preferências do usuário: desconto (fração entre 0 e 1) e dia de início do mês.

    Carregadas uma vez na inicialização; só mudam pelos setters, que gravam no
    armazenamento local na hora e avisam quem se inscreveu com `subscribe`.
    """

    def __init__(self, store: LocalStore,
                 default_discount: float = DEFAULT_DISCOUNT_PERCENTAGE,
                 default_month_start_day: int = DEFAULT_MONTH_START_DAY):
        self._store = store
        self._discount_percentage = default_discount
        self._month_start_day = default_month_start_day
        self._listeners: List[SettingsListener] = []

    @property
    def discount_percentage(self) -> float:
        return self._discount_percentage

    @property
    def month_start_day(self) -> int:
        return self._month_start_day

    def load(self) -> "Settings":
        stored_discount = self._store.get_item(DISCOUNT_KEY)
        if stored_discount is not None:
            try:
                value = float(stored_discount)
                if 0 <= value <= 1:
                    self._discount_percentage = value
                else:
                    logger.warning("Desconto salvo fora do intervalo: %s", stored_discount)
            except ValueError:
                logger.warning("Desconto salvo inválido: %r", stored_discount)

        stored_day = self._store.get_item(MONTH_START_DAY_KEY)
        if stored_day is not None:
            try:
                self._month_start_day = validate_start_day(int(stored_day))
            except ValueError:
                logger.warning("Dia de início do mês salvo inválido: %r", stored_day)
        return self

    def set_discount_percentage(self, value: float) -> None:
        if not 0 <= value <= 1:
            raise ValueError("Por favor, insira um valor entre 0 e 1")
        self._store.set_item(DISCOUNT_KEY, str(value))
        self._discount_percentage = value
        self._notify("discount_percentage", value)

    def set_month_start_day(self, day: int) -> None:
        validate_start_day(day)
        self._store.set_item(MONTH_START_DAY_KEY, str(day))
        self._month_start_day = day
        self._notify("month_start_day", day)

    def subscribe(self, listener: SettingsListener) -> Callable[[], None]:
        """Registra um ouvinte de mudanças; retorna a função que cancela a inscrição."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _notify(self, key: str, value: object) -> None:
        for listener in list(self._listeners):
            listener(key, value)

    def net_value(self, gross: float) -> float:
        return net_value(gross, self._discount_percentage)
