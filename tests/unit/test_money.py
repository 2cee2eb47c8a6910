"""Tests for om_common.money."""
from decimal import Decimal

from src.om_common.money import to_minor_units, to_money


class TestToMoney:
    def test_int_gets_two_places(self) -> None:
        assert to_money(1000) == Decimal("1000.00")
        assert str(to_money(1000)) == "1000.00"

    def test_float_has_no_binary_noise(self) -> None:
        assert to_money(0.1 + 0.2) == Decimal("0.30")

    def test_rounds_half_up(self) -> None:
        assert to_money("2.345") == Decimal("2.35")
        assert to_money("2.344") == Decimal("2.34")


class TestToMinorUnits:
    def test_whole_amount(self) -> None:
        assert to_minor_units(Decimal("1000")) == 100000

    def test_fractional_amount(self) -> None:
        assert to_minor_units(Decimal("10.50")) == 1050

    def test_float_input(self) -> None:
        assert to_minor_units(19.99) == 1999

    def test_zero(self) -> None:
        assert to_minor_units(0) == 0
