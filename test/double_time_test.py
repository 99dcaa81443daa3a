from datetime import date

from config import PayrollRules
from engine.double_time import bonus_hours, double_time_dates, evaluate

FRIDAY = date(2024, 6, 14)


def test_bonus_equals_hours_up_to_nine():
    assert bonus_hours(5) == 5
    assert bonus_hours(9) == 9
    assert bonus_hours(0) == 0


def test_bonus_capped_at_eighteen_total():
    assert bonus_hours(12) == 6
    assert bonus_hours(18) == 0
    assert bonus_hours(20) == 0


def test_no_bonus_off_double_time_dates():
    assert evaluate(date(2024, 6, 13), 12, {FRIDAY}) == (False, 0.0)


def test_bonus_on_double_time_date():
    assert evaluate(FRIDAY, 12, {FRIDAY}) == (True, 6)
    assert evaluate(FRIDAY, 5, {FRIDAY}) == (True, 5)


def test_custom_rules():
    rules = PayrollRules(double_time_threshold=8, double_time_cap=16)
    assert bonus_hours(10, rules) == 6


def test_fridays_and_holidays_in_range():
    dates = double_time_dates(date(2024, 6, 1), date(2024, 6, 30), holidays=[date(2024, 6, 17), date(2024, 7, 4)])
    assert dates == {
        date(2024, 6, 7),
        date(2024, 6, 14),
        date(2024, 6, 17),
        date(2024, 6, 21),
        date(2024, 6, 28),
    }
