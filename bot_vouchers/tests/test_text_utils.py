# tests/test_text_utils.py
import datetime
import unittest

from bot_vouchers.utils.text_utils import (
    ValidationError, format_brl, format_date_range, format_percent, format_short_date,
    parse_date_arg, parse_decimal, parse_discount, parse_money, parse_month_start_day, require,
)


class TestParsers(unittest.TestCase):
    def test_parse_decimal_formats(self):
        self.assertEqual(parse_decimal("18,50"), 18.5)
        self.assertEqual(parse_decimal("18.50"), 18.5)
        self.assertEqual(parse_decimal("R$ 1.234,56"), 1234.56)
        self.assertEqual(parse_decimal(7), 7.0)

    def test_parse_decimal_rejects_garbage(self):
        for invalid in ("abc", "", "nan", "inf", True):
            with self.assertRaises(ValidationError):
                parse_decimal(invalid)

    def test_parse_money_must_be_positive(self):
        self.assertEqual(parse_money("87,50"), 87.5)
        with self.assertRaises(ValidationError):
            parse_money("0")
        with self.assertRaises(ValidationError):
            parse_money("-5")

    def test_parse_date_arg(self):
        self.assertEqual(parse_date_arg("2024-03-12"), datetime.date(2024, 3, 12))
        self.assertEqual(parse_date_arg("12/03/2024"), datetime.date(2024, 3, 12))
        with self.assertRaises(ValidationError):
            parse_date_arg("12-03-2024")

    def test_parse_discount(self):
        self.assertEqual(parse_discount("0.15"), 0.15)
        self.assertEqual(parse_discount("15%"), 0.15)
        self.assertEqual(parse_discount("15"), 0.15)
        self.assertEqual(parse_discount("0"), 0)
        with self.assertRaises(ValidationError):
            parse_discount("150")

    def test_parse_month_start_day(self):
        self.assertEqual(parse_month_start_day("10"), 10)
        for invalid in ("0", "32", "dez"):
            with self.assertRaises(ValidationError):
                parse_month_start_day(invalid)

    def test_require(self):
        self.assertEqual(require("  NF-1 ", "Nota"), "NF-1")
        with self.assertRaises(ValidationError) as ctx:
            require("   ", "Nota")
        self.assertIn("Nota", str(ctx.exception))


class TestFormatters(unittest.TestCase):
    def test_format_brl(self):
        self.assertEqual(format_brl(1234.5), "R$ 1.234,50")
        self.assertEqual(format_brl(0), "R$ 0,00")
        self.assertEqual(format_brl(-10), "-R$ 10,00")

    def test_format_short_date(self):
        self.assertEqual(format_short_date(datetime.date(2024, 2, 10)), "10 de fev.")
        self.assertEqual(format_short_date(datetime.date(2024, 2, 10), with_year=True), "10 de fev. de 2024")

    def test_format_date_range(self):
        text = format_date_range(datetime.date(2024, 2, 10), datetime.date(2024, 3, 9))
        self.assertEqual(text, "10 de fev. - 09 de mar.")

    def test_format_percent(self):
        self.assertEqual(format_percent(0.15), "15%")


if __name__ == "__main__":
    unittest.main()
