"""Decides which scenarios are in scope for a customer."""
from __future__ import annotations

from src.shared.models.flags import Customer, CustomerConfiguration
from src.shared.models.scenarios import Scenario


def scenario_applies(
    scenario: Scenario,
    customer: Customer,
    configuration: CustomerConfiguration,
) -> bool:
    """Return whether *scenario* should be tested for *customer*.

    The customer must own the scenario's product, and every required flag
    must be exactly ``True`` in that product's configuration block.
    """
    if scenario.product not in customer.products:
        return False

    if scenario.required_flags:
        product_config = configuration.get(scenario.product)
        if product_config is None:
            return False
        for flag_key in scenario.required_flags:
            if not product_config.is_enabled(flag_key):
                return False

    return True
