# --- Estados da Conversa do cadastro de voucher ---
ASKING_TAX_NUMBER = 0
ASKING_REQUEST_CODE = 1
ASKING_DATE = 2
ASKING_VALUE = 3
ASKING_START = 4
ASKING_DESTINATION = 5
ASKING_CONFIRMATION = 6

from .voucher_form import (  # noqa: E402
    cancel_voucher_form,
    handle_confirmation,
    handle_date,
    handle_destination,
    handle_request_code,
    handle_start,
    handle_tax_number,
    handle_value,
    new_voucher_command,
)

ALL_HANDLERS = {
    new_voucher_command,
    handle_tax_number,
    handle_request_code,
    handle_date,
    handle_value,
    handle_start,
    handle_destination,
    handle_confirmation,
    cancel_voucher_form,
}
