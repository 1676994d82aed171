"""
Integration Test Scenarios for the Quote Pricing Engine

These tests cover real-world quoting scenarios end to end, from the UI payload
to the JSON-ready response.

Run with: python -m pytest tests/test_integration_scenarios.py -v

IMPORTANT: This file has a companion business summary document:
    docs/test_scenarios_business_summary.md

When adding or modifying tests, please update the business summary document
to keep them in sync. The summary provides plain-English explanations of
each test scenario for business stakeholders.
"""


import pytest

from quote_engine import QuoteProcessor


def _payload(**overrides):
    payload = {
        "dealType": "New Logo",
        "channel": "Direct",
        "selectedProducts": ["utd"],
        "productInputs": {
            "utd": {"count": 100, "variant": "ANYWHERE", "baseDiscount": 0}
        },
        "years": 1,
        "method": "MYFPI (Inflation)",
        "rates": [8, 8, 8, 8, 8],
        "applyWHT": False,
        "flatPricing": False,
        "rounding": False,
    }
    payload.update(overrides)
    return payload


class TestNewLogoDirect:
    """Direct new-logo deals are priced in USD with no VAT."""

    @pytest.fixture
    def processor(self):
        return QuoteProcessor()

    def test_standalone_physician_three_year_inflation(self, processor):
        """100 physicians, WHT on, 3 years at 8% annual inflation."""
        result = processor.process_from_dict(_payload(years=3, applyWHT=True))
        years = result["yearly_results"]

        # $25,900 / 0.95 = $27,263.16, then +8% per year
        assert [y["gross_usd"] for y in years] == [27263.16, 29444.21, 31799.75]
        assert result["totals"]["total_gross_usd"] == 88507.12
        assert result["metrics"]["acv_usd"]["value"] == 29502.37
        assert all(y["vat_sar"] == 0 for y in years)
        assert years[0]["floor_adjusted"] is False
        assert result["unit_economics"][0]["monthly_per_unit"] == 24.59
        assert result["currency_to_display"] == "USD"

    def test_small_deal_raised_to_minimum_floor(self, processor):
        """10 physicians x $259 = $2,590 is below the $6,500 floor."""
        result = processor.process_from_dict(
            _payload(productInputs={"utd": {"count": 10, "variant": "ANYWHERE"}})
        )
        year1 = result["yearly_results"][0]

        assert year1["gross_usd"] == 6500.0
        assert year1["floor_adjusted"] is True
        assert year1["notes"] == ["UTD adjusted to Minimum Floor"]


class TestIndirectChannels:
    """Fulfilment and partner-sourced deals: SAR, VAT and recognition factors."""

    @pytest.fixture
    def processor(self):
        return QuoteProcessor()

    def test_fulfilment_new_logo_recognition_and_vat(self, processor):
        """100 beds of BASE PKG, 2 years at 5%."""
        result = processor.process_from_dict(
            _payload(
                channel="Fulfilment",
                selectedProducts=["ld"],
                productInputs={"ld": {"count": 100, "variant": "BASE PKG"}},
                years=2,
                rates=[5, 5],
            )
        )
        year1, year2 = result["yearly_results"]

        assert year1["gross_usd"] == 8000.0
        assert year1["gross_sar"] == 30080.0
        assert year1["vat_sar"] == 4512.0
        assert year1["grand_total_sar"] == 34592.0
        assert year1["net_usd"] == 7400.0  # 92.5% in year 1
        assert year1["net_sar"] == 27824.0

        assert year2["gross_usd"] == 8400.0
        assert year2["gross_sar"] == 31590.0  # 31,584 rounded up to 31,590
        assert year2["net_usd"] == 7980.0  # 95% from year 2

        assert result["totals"]["total_net_usd"] == 15380.0
        assert result["unit_economics"][0]["currency"] == "SAR"
        assert result["unit_economics"][0]["monthly_per_unit"] == 25.7
        assert result["currency_to_display"] == "SAR"

    def test_partner_sourced_renewal_recognition(self, processor):
        """Partner-sourced renewals recognize 90% in every year."""
        result = processor.process_from_dict(
            _payload(
                dealType="Renewal",
                channel="Partner Sourced",
                productInputs={
                    "utd": {
                        "count": 100,
                        "variant": "ANYWHERE",
                        "existingVariant": "ANYWHERE",
                        "expiringAmount": 20000,
                    }
                },
                renewalUpliftRates={"utd": 8},
            )
        )
        year1 = result["yearly_results"][0]
        metrics = result["metrics"]

        assert year1["gross_usd"] == 21600.0
        assert year1["net_usd"] == 19440.0
        assert metrics["renewal_base_acv"]["value"] == 21600.0
        assert metrics["net_renewal_base_acv"]["value"] == 19440.0
        assert metrics["upsell_acv"]["value"] == 0.0


class TestRenewalUpgradePaths:
    """Renewal pricing from the expiring amount and the variant change."""

    @pytest.fixture
    def processor(self):
        return QuoteProcessor()

    def _renewal(self, product_id, inputs, uplift):
        return _payload(
            dealType="Renewal",
            selectedProducts=[product_id],
            productInputs={product_id: inputs},
            renewalUpliftRates={product_id: uplift},
        )

    def test_base_to_mid_upgrade_creates_upsell(self, processor):
        """ANYWHERE -> UTDADV: expiring x (1 + 5% + 8%)."""
        result = processor.process_from_dict(
            self._renewal(
                "utd",
                {"count": 100, "variant": "UTDADV", "existingVariant": "ANYWHERE", "expiringAmount": 20000},
                5,
            )
        )
        metrics = result["metrics"]

        assert result["yearly_results"][0]["gross_usd"] == 22600.0
        assert metrics["renewal_base_acv"]["value"] == 21000.0
        assert metrics["upsell_acv"]["value"] == 1600.0

    def test_bed_feature_addon_is_pure_upsell(self, processor):
        """BASE PKG -> +FLINK+IPE adds $28 per bed on top of the uplifted base."""
        result = processor.process_from_dict(
            self._renewal(
                "ld",
                {"count": 50, "variant": "+FLINK+IPE", "existingVariant": "BASE PKG", "expiringAmount": 8000},
                5,
            )
        )
        metrics = result["metrics"]

        assert result["yearly_results"][0]["gross_usd"] == 9800.0
        assert metrics["renewal_base_acv"]["value"] == 8400.0
        assert metrics["upsell_acv"]["value"] == 1400.0

    def test_stats_change_overrides_path_price(self, processor):
        """A headcount change priced fresh above the path price replaces it."""
        result = processor.process_from_dict(
            self._renewal(
                "utd",
                {
                    "count": 100,
                    "variant": "ANYWHERE",
                    "existingVariant": "ANYWHERE",
                    "expiringAmount": 10000,
                    "changeInStats": True,
                },
                8,
            )
        )
        metrics = result["metrics"]

        assert result["yearly_results"][0]["gross_usd"] == 25900.0
        assert metrics["renewal_base_acv"]["value"] == 10800.0
        assert metrics["upsell_acv"]["value"] == 15100.0


class TestComboFloor:
    """Both product families together: the per-bed product is floored at $4,000."""

    @pytest.fixture
    def processor(self):
        return QuoteProcessor()

    def test_combo_renewal_raises_bed_to_combo_floor(self, processor):
        result = processor.process_from_dict(
            _payload(
                dealType="Renewal",
                channel="Fulfilment",
                selectedProducts=["utd", "ld"],
                productInputs={
                    "utd": {
                        "count": 100,
                        "variant": "ANYWHERE",
                        "existingVariant": "ANYWHERE",
                        "expiringAmount": 20000,
                    },
                    "ld": {
                        "count": 50,
                        "variant": "BASE PKG",
                        "existingVariant": "BASE PKG",
                        "expiringAmount": 3000,
                    },
                },
                renewalUpliftRates={"utd": 8, "ld": 5},
            )
        )
        year1 = result["yearly_results"][0]
        ld = next(item for item in year1["breakdown"] if item["id"] == "ld")

        assert ld["gross"] == 4000.0
        assert year1["floor_adjusted"] is True
        assert year1["notes"] == ["LD adjusted to Combo Floor"]
        # Renewal base keeps the uplifted 3,150, the floor top-up shows as upsell
        assert result["metrics"]["renewal_base_acv"]["value"] == 24750.0
        assert result["metrics"]["upsell_acv"]["value"] == 850.0


class TestPriceProtection:
    """MYPP anchors the computed price in the final year."""

    @pytest.fixture
    def processor(self):
        return QuoteProcessor()

    def test_mypp_anchors_final_year(self, processor):
        result = processor.process_from_dict(
            _payload(method="MYPP (Price Protection)", years=3, rates=[0, 10, 10])
        )

        assert [y["gross_usd"] for y in result["yearly_results"]] == [21404.96, 23545.45, 25900.0]


class TestFlatPricingAndRounding:
    """Flat installments and currency-friendly rounding."""

    @pytest.fixture
    def processor(self):
        return QuoteProcessor()

    def test_flat_pricing_equal_installments(self, processor):
        result = processor.process_from_dict(_payload(years=3, applyWHT=True, flatPricing=True))

        assert [y["gross_usd"] for y in result["yearly_results"]] == [29502.37] * 3
        assert result["totals"]["total_gross_usd"] == 88507.12

    def test_direct_rounding_to_hundred(self, processor):
        result = processor.process_from_dict(_payload(applyWHT=True, rounding=True))

        assert result["yearly_results"][0]["gross_usd"] == 27300.0

    def test_indirect_rounding_to_thousand_sar(self, processor):
        result = processor.process_from_dict(
            _payload(channel="Fulfilment", applyWHT=True, rounding=True)
        )
        year1 = result["yearly_results"][0]

        # 27,263.16 USD = 102,509.47 SAR -> 103,000 SAR
        assert year1["gross_sar"] == 103000.0
        assert year1["vat_sar"] == 15450.0
        assert year1["grand_total_sar"] == 118450.0
        assert year1["gross_usd"] == 27393.62
