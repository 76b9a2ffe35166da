"""Diff engine for two revisions of the flag document.

Works on the raw parsed JSON rather than the validated models so that an
old revision that no longer matches the current schema can still be
compared.  A flag key missing from one side is represented by
:data:`ABSENT`, which is distinct from an explicit JSON ``null``.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


class _Absent:
    """Type of the :data:`ABSENT` marker."""

    def __repr__(self) -> str:
        return "ABSENT"


ABSENT: Any = _Absent()


@dataclass
class ConfigChange:
    customer: str
    customer_key: str
    product: str
    product_key: str
    flag: str
    old_value: Any = ABSENT
    new_value: Any = ABSENT


@dataclass
class NoteChange:
    customer: str
    customer_key: str
    product: str
    product_key: str
    flag: str
    old_note: str = ""
    new_note: str = ""


@dataclass
class CustomerProductChange:
    customer: str
    customer_key: str
    added: list[str] = field(default_factory=list)
    removed: list[str] = field(default_factory=list)


@dataclass
class FlagChanges:
    """Everything that differs between two revisions."""
    customers_added: list[dict[str, Any]] = field(default_factory=list)
    customers_removed: list[dict[str, Any]] = field(default_factory=list)
    products_added: list[dict[str, Any]] = field(default_factory=list)
    products_removed: list[dict[str, Any]] = field(default_factory=list)
    flags_added: list[str] = field(default_factory=list)
    flags_removed: list[str] = field(default_factory=list)
    config_changes: list[ConfigChange] = field(default_factory=list)
    note_changes: list[NoteChange] = field(default_factory=list)
    customer_product_changes: list[CustomerProductChange] = field(default_factory=list)

    @property
    def total(self) -> int:
        """Count reported in the changelog footer."""
        return (
            len(self.config_changes)
            + len(self.note_changes)
            + len(self.flags_added)
            + len(self.flags_removed)
            + len(self.customers_added)
            + len(self.customers_removed)
        )


def _ordered_union(*iterables: Any) -> list[Any]:
    return list(dict.fromkeys(item for iterable in iterables for item in iterable))


def _by_key(items: list[dict[str, Any]]) -> dict[str, dict[str, Any]]:
    return {item["key"]: item for item in items}


def _flag_keys(data: dict[str, Any]) -> list[str]:
    return [
        flag["key"]
        for flags in (data.get("flagDefinitions") or {}).values()
        for flag in flags
    ]


def _product_name(data: dict[str, Any], product_key: str) -> str:
    for product in data.get("products", []):
        if product.get("key") == product_key:
            return product.get("name", product_key)
    return product_key


def detect_changes(
    old_data: dict[str, Any] | None, new_data: dict[str, Any] | None
) -> FlagChanges:
    """Compare two parsed flag documents.

    Returns an empty :class:`FlagChanges` when either side is missing.
    """
    changes = FlagChanges()
    if not old_data or not new_data:
        return changes

    old_products = _by_key(old_data.get("products", []))
    new_products = _by_key(new_data.get("products", []))
    changes.products_added = [p for k, p in new_products.items() if k not in old_products]
    changes.products_removed = [p for k, p in old_products.items() if k not in new_products]

    old_customers = _by_key(old_data.get("customers", []))
    new_customers = _by_key(new_data.get("customers", []))
    changes.customers_added = [
        c for k, c in new_customers.items() if k not in old_customers
    ]
    changes.customers_removed = [
        c for k, c in old_customers.items() if k not in new_customers
    ]

    for key, new_customer in new_customers.items():
        old_customer = old_customers.get(key)
        if old_customer is None:
            continue
        old_products_owned = old_customer.get("products", [])
        new_products_owned = new_customer.get("products", [])
        added = [p for p in new_products_owned if p not in old_products_owned]
        removed = [p for p in old_products_owned if p not in new_products_owned]
        if added or removed:
            changes.customer_product_changes.append(
                CustomerProductChange(
                    customer=new_customer.get("name", key),
                    customer_key=key,
                    added=added,
                    removed=removed,
                )
            )

    old_flag_keys = _flag_keys(old_data)
    new_flag_keys = _flag_keys(new_data)
    changes.flags_added = [k for k in new_flag_keys if k not in old_flag_keys]
    changes.flags_removed = [k for k in old_flag_keys if k not in new_flag_keys]

    old_configs = old_data.get("configurations") or {}
    new_configs = new_data.get("configurations") or {}

    for customer_key in _ordered_union(old_customers, new_customers):
        if customer_key not in old_customers or customer_key not in new_customers:
            # Added and removed customers are reported above
            continue
        customer_name = new_customers[customer_key].get("name", customer_key)
        old_config = old_configs.get(customer_key) or {}
        new_config = new_configs.get(customer_key) or {}

        for product_key in _ordered_union(old_config, new_config):
            product_name = _product_name(new_data, product_key)
            old_block = old_config.get(product_key) or {}
            new_block = new_config.get(product_key) or {}
            old_flags = old_block.get("flags") or {}
            new_flags = new_block.get("flags") or {}
            old_notes = old_block.get("notes") or {}
            new_notes = new_block.get("notes") or {}

            for flag_key in _ordered_union(old_flags, new_flags):
                old_value = old_flags.get(flag_key, ABSENT)
                new_value = new_flags.get(flag_key, ABSENT)
                if old_value != new_value or type(old_value) is not type(new_value):
                    changes.config_changes.append(
                        ConfigChange(
                            customer=customer_name,
                            customer_key=customer_key,
                            product=product_name,
                            product_key=product_key,
                            flag=flag_key,
                            old_value=old_value,
                            new_value=new_value,
                        )
                    )

            for flag_key in _ordered_union(old_notes, new_notes):
                old_note = old_notes.get(flag_key) or ""
                new_note = new_notes.get(flag_key) or ""
                if old_note != new_note:
                    changes.note_changes.append(
                        NoteChange(
                            customer=customer_name,
                            customer_key=customer_key,
                            product=product_name,
                            product_key=product_key,
                            flag=flag_key,
                            old_note=old_note,
                            new_note=new_note,
                        )
                    )

    return changes


def has_changes(changes: FlagChanges) -> bool:
    return bool(
        changes.customers_added
        or changes.customers_removed
        or changes.products_added
        or changes.products_removed
        or changes.flags_added
        or changes.flags_removed
        or changes.config_changes
        or changes.note_changes
        or changes.customer_product_changes
    )
