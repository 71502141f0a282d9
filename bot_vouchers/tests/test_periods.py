# tests/test_periods.py
import datetime
import unittest

from bot_vouchers.core.periods import (
    Period, add_months, custom_period, overflow_date, period_title, validate_start_day,
)

dt = datetime.datetime


class TestCustomPeriod(unittest.TestCase):
    def test_reference_before_start_day_uses_previous_month(self):
        period = custom_period(datetime.date(2024, 3, 5), 10)
        self.assertEqual(period.start, dt(2024, 2, 10))
        self.assertEqual(period.end, dt(2024, 3, 9, 23, 59, 59, 999000))

    def test_reference_after_start_day_uses_current_month(self):
        period = custom_period(datetime.date(2024, 3, 15), 10)
        self.assertEqual(period.start, dt(2024, 3, 10))
        self.assertEqual(period.end, dt(2024, 4, 9, 23, 59, 59, 999000))

    def test_reference_on_start_day_starts_that_day(self):
        period = custom_period(datetime.date(2024, 3, 10), 10)
        self.assertEqual(period.start, dt(2024, 3, 10))

    def test_start_day_one_is_calendar_month(self):
        period = custom_period(datetime.date(2024, 2, 20), 1)
        self.assertEqual(period.start, dt(2024, 2, 1))
        self.assertEqual(period.end, dt(2024, 2, 29, 23, 59, 59, 999000))

    def test_accepts_datetime_reference(self):
        period = custom_period(dt(2024, 3, 15, 18, 30), 10)
        self.assertEqual(period.start, dt(2024, 3, 10))

    def test_explicit_offset_ignores_boundary_rule(self):
        # Dia 5 ainda não chegou ao dia 10, mas com offset explícito não há recuo
        self.assertEqual(custom_period(datetime.date(2024, 3, 5), 10, 0).start, dt(2024, 3, 10))
        self.assertEqual(custom_period(datetime.date(2024, 3, 5), 10, -1).start, dt(2024, 2, 10))
        self.assertEqual(custom_period(datetime.date(2024, 3, 5), 10, -2).start, dt(2024, 1, 10))

    def test_offset_crosses_year(self):
        period = custom_period(datetime.date(2024, 1, 15), 10, -1)
        self.assertEqual(period.start, dt(2023, 12, 10))
        self.assertEqual(period.end, dt(2024, 1, 9, 23, 59, 59, 999000))

    def test_window_spans_one_month(self):
        for start_day in range(1, 32):
            for month in range(1, 13):
                reference = datetime.date(2024, month, 15)
                period = custom_period(reference, start_day)
                self.assertLessEqual(period.start, dt(2024, month, 15))
                self.assertGreaterEqual(period.end, dt(2024, month, 15))
                if start_day <= 28:
                    # Acima de 28 o início pode transbordar para o mês seguinte
                    self.assertEqual(period.start.day, start_day)
                self.assertEqual(add_months(period.start, 1) - datetime.timedelta(milliseconds=1), period.end)

    def test_consecutive_periods_do_not_overlap(self):
        previous = custom_period(datetime.date(2024, 6, 20), 10, -1)
        current = custom_period(datetime.date(2024, 6, 20), 10, 0)
        self.assertEqual(previous.end + datetime.timedelta(milliseconds=1), current.start)

    def test_start_day_past_month_length_overflows(self):
        # 31 de abril não existe: o início transborda para 1º de maio
        period = custom_period(datetime.date(2024, 4, 30), 31, 0)
        self.assertEqual(period.start, dt(2024, 5, 1))
        self.assertEqual(period.end, dt(2024, 5, 31, 23, 59, 59, 999000))

    def test_invalid_start_day(self):
        for invalid in (0, 32, -1, True):
            with self.assertRaises(ValueError):
                custom_period(datetime.date(2024, 3, 15), invalid)


class TestPeriodHelpers(unittest.TestCase):
    def test_contains_is_closed_interval(self):
        period = custom_period(datetime.date(2024, 3, 15), 10)
        self.assertTrue(period.contains(period.start))
        self.assertTrue(period.contains(period.end))
        self.assertTrue(period.contains(datetime.date(2024, 4, 9)))
        self.assertFalse(period.contains(datetime.date(2024, 4, 10)))
        self.assertFalse(period.contains(dt(2024, 3, 9, 23, 59)))

    def test_overflow_date(self):
        self.assertEqual(overflow_date(2024, 0, 10), datetime.date(2023, 12, 10))
        self.assertEqual(overflow_date(2024, 13, 1), datetime.date(2025, 1, 1))
        self.assertEqual(overflow_date(2023, 2, 30), datetime.date(2023, 3, 2))

    def test_add_months_keeps_time(self):
        self.assertEqual(add_months(dt(2024, 1, 10, 8, 0), 2), dt(2024, 3, 10, 8, 0))
        self.assertEqual(add_months(datetime.date(2024, 1, 31), 1), datetime.date(2024, 3, 2))

    def test_validate_start_day(self):
        self.assertEqual(validate_start_day(1), 1)
        self.assertEqual(validate_start_day(31), 31)
        with self.assertRaises(ValueError):
            validate_start_day("10")

    def test_period_title(self):
        self.assertEqual(period_title(0), "Período atual")
        self.assertEqual(period_title(-1), "Período anterior")
        self.assertEqual(period_title(1), "Próximo período")
        self.assertEqual(period_title(-2), "Há 2 períodos")
        self.assertEqual(period_title(3), "Daqui a 3 períodos")

    def test_period_is_tuple(self):
        period = Period(dt(2024, 1, 1), dt(2024, 1, 31))
        start, end = period
        self.assertEqual(start.month, end.month)


if __name__ == "__main__":
    unittest.main()
