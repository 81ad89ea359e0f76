import pytest

from shopcore.currency import CURRENCY_SIGNS, SUPPORTED_CURRENCIES, convert


def test_base_currency_is_identity():
    assert convert(649000, "KZT") == 649000


@pytest.mark.parametrize(
    "amount,code,expected",
    [
        (649000, "RUB", 129800),
        (18990, "RUB", 3798),
        (15990, "USD", 35),  # 35.178
        (18990, "USD", 42),  # 41.778
        (2500, "USD", 6),  # 5.5 rounds half up
        (0, "USD", 0),
    ],
)
def test_conversion_rounds_to_whole_units(amount, code, expected):
    result = convert(amount, code)
    assert result == expected
    assert isinstance(result, int)


def test_unknown_currency_uses_base_rate():
    assert convert(15990, "EUR") == 15990


def test_every_supported_currency_has_a_sign():
    assert set(SUPPORTED_CURRENCIES) == set(CURRENCY_SIGNS) == {"KZT", "RUB", "USD"}
