# tests/test_voucher_form.py
import datetime
import unittest
from unittest.mock import AsyncMock, MagicMock

from telegram.ext import ConversationHandler

from bot_vouchers.bot.handlers import (
    ASKING_CONFIRMATION, ASKING_DATE, ASKING_DESTINATION, ASKING_REQUEST_CODE, ASKING_START,
    ASKING_TAX_NUMBER, ASKING_VALUE,
    cancel_voucher_form, handle_confirmation, handle_date, handle_destination, handle_request_code,
    handle_start, handle_tax_number, handle_value, new_voucher_command,
)
from bot_vouchers.bot.handlers.voucher_form import PENDING_KEY
from bot_vouchers.core.api import ApiError
from bot_vouchers.core.ledger import Ledger


class TestVoucherForm(unittest.IsolatedAsyncioTestCase):
    def setUp(self):
        self.ledger = MagicMock(spec=Ledger)
        self.ledger.create = AsyncMock()
        self.auth = MagicMock()
        self.auth.is_authenticated = True
        self.context = MagicMock()
        self.context.user_data = {}
        self.context.bot_data = {"vouchers": self.ledger, "auth": self.auth}

    def make_update(self, text):
        update = MagicMock()
        update.message.text = text
        update.message.reply_text = AsyncMock()
        return update

    async def answer(self, handler, text):
        update = self.make_update(text)
        state = await handler(update, self.context)
        return state, update.message.reply_text.call_args.args[0]

    async def fill_form(self):
        self.assertEqual((await self.answer(new_voucher_command, "/novo_voucher"))[0], ASKING_TAX_NUMBER)
        self.assertEqual((await self.answer(handle_tax_number, "12345"))[0], ASKING_REQUEST_CODE)
        self.assertEqual((await self.answer(handle_request_code, "man-0042"))[0], ASKING_DATE)
        self.assertEqual((await self.answer(handle_date, "12/03/2024"))[0], ASKING_VALUE)
        self.assertEqual((await self.answer(handle_value, "87,50"))[0], ASKING_START)
        self.assertEqual((await self.answer(handle_start, "Centro"))[0], ASKING_DESTINATION)
        state, message = await self.answer(handle_destination, "Aeroporto")
        self.assertEqual(state, ASKING_CONFIRMATION)
        return message

    async def test_full_flow_creates_voucher(self):
        confirmation = await self.fill_form()
        self.assertIn("MAN-0042", confirmation)
        self.assertIn("Manutenção", confirmation)
        self.assertIn("R$ 87,50", confirmation)

        state, message = await self.answer(handle_confirmation, "Sim ✅")

        self.assertEqual(state, ConversationHandler.END)
        self.ledger.create.assert_awaited_once_with({
            "taxNumber": "12345", "requestCode": "MAN-0042", "date": datetime.date(2024, 3, 12),
            "value": 87.5, "start": "Centro", "destination": "Aeroporto",
        })
        self.assertIn("registrado com sucesso", message)
        self.assertNotIn(PENDING_KEY, self.context.user_data)

    async def test_invalid_answers_repeat_the_question(self):
        await self.answer(new_voucher_command, "/novo_voucher")
        self.assertEqual((await self.answer(handle_tax_number, "   "))[0], ASKING_TAX_NUMBER)
        await self.answer(handle_tax_number, "1")
        await self.answer(handle_request_code, "TRN-1")
        self.assertEqual((await self.answer(handle_date, "amanhã"))[0], ASKING_DATE)
        await self.answer(handle_date, "2024-03-12")
        state, message = await self.answer(handle_value, "-3")
        self.assertEqual(state, ASKING_VALUE)
        self.assertIn("maior que 0", message)

    async def test_api_failure_keeps_form_open(self):
        await self.fill_form()
        self.ledger.create.side_effect = ApiError("Nota fiscal já cadastrada", 409)
        self.ledger.error = "Nota fiscal já cadastrada"

        state, message = await self.answer(handle_confirmation, "sim")

        self.assertEqual(state, ASKING_CONFIRMATION)
        self.assertIn("Nota fiscal já cadastrada", message)
        self.assertIn(PENDING_KEY, self.context.user_data)

    async def test_declining_cancels(self):
        await self.fill_form()
        state, _ = await self.answer(handle_confirmation, "Não ❌")
        self.assertEqual(state, ConversationHandler.END)
        self.ledger.create.assert_not_awaited()
        self.assertNotIn(PENDING_KEY, self.context.user_data)

    async def test_unexpected_answer_asks_again(self):
        await self.fill_form()
        state, message = await self.answer(handle_confirmation, "talvez")
        self.assertEqual(state, ASKING_CONFIRMATION)
        self.assertIn("Sim", message)

    async def test_confirmation_without_pending_voucher(self):
        state, message = await self.answer(handle_confirmation, "sim")
        self.assertEqual(state, ConversationHandler.END)
        self.assertIn("Não encontrei", message)

    async def test_cancel(self):
        await self.answer(new_voucher_command, "/novo_voucher")
        state, _ = await self.answer(cancel_voucher_form, "/cancelar")
        self.assertEqual(state, ConversationHandler.END)
        self.assertNotIn(PENDING_KEY, self.context.user_data)

    async def test_requires_login(self):
        self.auth.is_authenticated = False
        state, message = await self.answer(new_voucher_command, "/novo_voucher")
        self.assertIsNone(state)
        self.assertIn("/login", message)


if __name__ == "__main__":
    unittest.main()
