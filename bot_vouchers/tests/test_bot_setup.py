# tests/test_bot_setup.py
import tempfile
import unittest
from pathlib import Path

from telegram.ext import CommandHandler, ConversationHandler

from bot_vouchers.bot.bot_setup import build_services, setup_bot
from bot_vouchers.bot.commands import ALL_COMMANDS
from bot_vouchers.core.ledger import Ledger
from bot_vouchers.core.projector import ClientSideProjector, ServerSideProjector


class TestBotSetup(unittest.TestCase):
    def setUp(self):
        self.tmp = tempfile.TemporaryDirectory()
        self.config = {
            "TELEGRAM_BOT_TOKEN": "123456:TEST-TOKEN",
            "API_URL": "http://api.test",
            "API_TIMEOUT": 5,
            "STORAGE_PATH": str(Path(self.tmp.name) / "storage.json"),
            "DEFAULT_DISCOUNT_PERCENTAGE": 0.15,
            "DEFAULT_MONTH_START_DAY": 10,
            "HOME_SUMMARY_MODE": "client",
        }

    def tearDown(self):
        self.tmp.cleanup()

    def test_build_services(self):
        services = build_services(self.config)
        self.assertIsInstance(services["vouchers"], Ledger)
        self.assertIsInstance(services["expenses"], Ledger)
        self.assertIsInstance(services["projector"], ClientSideProjector)
        self.assertEqual(services["settings"].month_start_day, 10)
        self.assertFalse(services["auth"].is_authenticated)
        self.assertFalse(services["vouchers"].send_window)
        self.assertTrue(services["expenses"].send_window)

    def test_server_summary_mode(self):
        self.config["HOME_SUMMARY_MODE"] = "server"
        self.assertIsInstance(build_services(self.config)["projector"], ServerSideProjector)

    def test_registers_commands_and_conversation(self):
        application = setup_bot(self.config)
        handlers = application.handlers[0]

        conversations = [h for h in handlers if isinstance(h, ConversationHandler)]
        self.assertEqual(len(conversations), 1)

        commands = set()
        for handler in handlers:
            if isinstance(handler, CommandHandler):
                commands |= set(handler.commands)
        self.assertEqual(commands, set(ALL_COMMANDS))
        self.assertIn("vouchers", application.bot_data)


if __name__ == "__main__":
    unittest.main()
