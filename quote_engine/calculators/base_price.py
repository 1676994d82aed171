"""
Year-1 Base Price Resolver

Computes each selected product's year-1 net USD price from list price, count,
discount and WHT, and for renewals from the expiring amount and upgrade path.
"""

import logging
from decimal import Decimal

from ..catalog import PHYSICIAN_PRODUCT, classify_transition, get_product, short_name
from ..models import DealConfiguration, DealType, ProcessingContext, ProductResolution, UpsellRule, Year1Resolution
from .currency import gross_up_wht
from .upsell import HUNDRED, RenewalTerms, apply_rule

logger = logging.getLogger(__name__)


class BasePriceResolver:
    """Resolves year-1 net prices for every selected product."""

    def resolve(self, ctx: ProcessingContext) -> Year1Resolution:
        """
        Resolve year-1 prices.

        New Logo:
        - list price x count, less base discount, grossed up for WHT

        Renewal:
        - priced from the expiring amount via the transition rule table
        - the renewal base of each product accumulates into renewal_base_total
        """
        config = ctx.config
        result = Year1Resolution()

        for product_id in config.selected_products:
            base_net = self._calculate_base_net(config, product_id)

            if config.deal_type == DealType.RENEWAL:
                resolution = self._resolve_renewal(config, product_id, base_net, result)
                result.renewal_base_total += resolution.renewal_base
            else:
                resolution = ProductResolution(
                    product_id=product_id, base_net=base_net, year1_net=base_net
                )

            logger.debug("Year-1 net for %s: %s", product_id, resolution.year1_net)
            result.products[product_id] = resolution

        return result

    def _calculate_base_net(self, config: DealConfiguration, product_id: str) -> Decimal:
        """Fresh per-unit price: count x list price, discounted, WHT grossed-up."""
        inputs = config.input_for(product_id)
        product = get_product(product_id)
        list_price = product.list_price(inputs.variant) if product else Decimal("0")

        base_gross = list_price * inputs.count
        base_net = base_gross * (1 - inputs.base_discount / HUNDRED)
        return gross_up_wht(base_net, config.apply_wht)

    def _resolve_renewal(
        self,
        config: DealConfiguration,
        product_id: str,
        base_net: Decimal,
        result: Year1Resolution,
    ) -> ProductResolution:
        """Price a renewal from its expiring amount and variant transition."""
        inputs = config.input_for(product_id)
        terms = RenewalTerms(
            expiring=inputs.expiring_amount,
            uplift_rate=config.renewal_uplift_for(product_id),
            count=inputs.count,
            apply_wht=config.apply_wht,
        )

        rule = classify_transition(product_id, inputs.renewing_from, inputs.variant)
        if rule == UpsellRule.UNMAPPED:
            transition = f"{short_name(product_id)} {inputs.renewing_from} -> {inputs.variant}"
            logger.warning("Unmapped renewal transition %s, pricing at standard base", transition)
            result.unmapped_transitions.append(transition)
            result.notes.append(f"{transition} has no upgrade rule; priced at standard renewal base")

        price, renewal_base = apply_rule(rule, terms)

        # A stats change that prices above the upgrade path is a real change,
        # so only the uplift portion counts as renewal base.
        stats_override = (
            product_id == PHYSICIAN_PRODUCT and inputs.change_in_stats and base_net > price
        )
        if stats_override:
            price = base_net
            renewal_base = terms.standard_base

        return ProductResolution(
            product_id=product_id,
            base_net=base_net,
            year1_net=price,
            standard_base=terms.standard_base,
            renewal_base=renewal_base,
            rule=rule,
            stats_override=stats_override,
        )
