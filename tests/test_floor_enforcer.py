"""
Unit Tests for Floor Enforcer

Tests verify standalone and combo floors, WHT-adjusted floors and idempotence.
"""

from decimal import Decimal

import pytest

from quote_engine.calculators.floor import FloorEnforcer


class TestStandaloneFloor:
    """One product family selected: floored at $6,500."""

    @pytest.fixture
    def enforcer(self):
        return FloorEnforcer()

    def test_physician_below_floor_is_raised(self, enforcer):
        result = enforcer.enforce({"utd": Decimal("5000")}, ("utd",), apply_wht=False)

        assert result.year1_nets["utd"] == Decimal("6500")
        assert result.floor_adjusted is True
        assert result.notes == ["UTD adjusted to Minimum Floor"]

    def test_bed_below_floor_is_raised(self, enforcer):
        result = enforcer.enforce({"ld": Decimal("3150")}, ("ld",), apply_wht=False)

        assert result.year1_nets["ld"] == Decimal("6500")
        assert result.notes == ["LD adjusted to Minimum Floor"]

    def test_floor_is_wht_adjusted(self, enforcer):
        """$6,500 / 0.95 = $6,842.11"""
        result = enforcer.enforce({"utd": Decimal("6600")}, ("utd",), apply_wht=True)

        assert result.year1_nets["utd"] == Decimal("6500") / Decimal("0.95")
        assert result.floor_adjusted is True

    def test_above_floor_passes_through(self, enforcer):
        result = enforcer.enforce({"utd": Decimal("27263.16")}, ("utd",), apply_wht=True)

        assert result.year1_nets["utd"] == Decimal("27263.16")
        assert result.floor_adjusted is False
        assert result.notes == []


class TestComboFloor:
    """Both families selected: only the per-bed product is floored, at $4,000."""

    @pytest.fixture
    def enforcer(self):
        return FloorEnforcer()

    def test_bed_raised_to_combo_floor(self, enforcer):
        nets = {"utd": Decimal("1000"), "ld": Decimal("3150")}
        result = enforcer.enforce(nets, ("utd", "ld"), apply_wht=False)

        assert result.year1_nets["ld"] == Decimal("4000")
        # Physician product is not floored in a combo
        assert result.year1_nets["utd"] == Decimal("1000")
        assert result.notes == ["LD adjusted to Combo Floor"]

    def test_combo_floor_is_wht_adjusted(self, enforcer):
        nets = {"utd": Decimal("30000"), "ld": Decimal("3150")}
        result = enforcer.enforce(nets, ("utd", "ld"), apply_wht=True)

        assert result.year1_nets["ld"] == Decimal("4000") / Decimal("0.95")


class TestFloorProperties:

    @pytest.fixture
    def enforcer(self):
        return FloorEnforcer()

    def test_enforcement_is_idempotent(self, enforcer):
        first = enforcer.enforce({"utd": Decimal("10"), "ld": Decimal("20")}, ("utd", "ld"), True)
        second = enforcer.enforce(first.year1_nets, ("utd", "ld"), True)

        assert second.year1_nets == first.year1_nets
        assert second.floor_adjusted is False

    def test_input_nets_are_not_mutated(self, enforcer):
        nets = {"utd": Decimal("100")}
        enforcer.enforce(nets, ("utd",), apply_wht=False)

        assert nets == {"utd": Decimal("100")}

    def test_unknown_products_have_no_floor(self, enforcer):
        result = enforcer.enforce({"other": Decimal("1")}, ("other",), apply_wht=False)

        assert result.year1_nets == {"other": Decimal("1")}
        assert result.floor_adjusted is False
