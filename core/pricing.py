# core/pricing.py: item area/amount + project totals

from dataclasses import dataclass
from typing import Iterable, Protocol

from core.errors import DataIntegrityError

# Area divisor for length x width. Must stay 92903 to match stored quotes.
AREA_DIVISOR = 92903


class _HasAmount(Protocol):
    amount: float


@dataclass(frozen=True)
class ItemMetrics:
    sqft: float
    amount: float


@dataclass(frozen=True)
class ProjectTotals:
    items_total: float
    extra_costs_total: float
    final_total: float


def compute_item_metrics(length: float, width: float, quantity: int,
                         effective_rate: float) -> ItemMetrics:
    """
    sqft   = round(length * width / 92903, 2)
    amount = round(sqft * effective_rate * quantity, 2)

    Depth is informational and never part of the area. No validation here:
    callers reject non-positive dimensions / quantity before calling.
    """
    sqft = round((length * width) / AREA_DIVISOR, 2)
    amount = round(sqft * effective_rate * quantity, 2)
    return ItemMetrics(sqft=sqft, amount=amount)


def effective_rate(item, material) -> float:
    """
    Per-item custom rate wins over the catalog rate, including an explicit 0.
    Raise DataIntegrityError if the catalog rate is needed but the material
    is gone. Never price an orphaned item at 0.
    """
    custom = getattr(item, "custom_rate", None)
    if custom is not None and custom >= 0:
        return float(custom)
    if material is None:
        material_id = getattr(item, "material_id", None)
        raise DataIntegrityError(
            f"Material '{material_id}' referenced by item '{getattr(item, 'name', '')}' "
            f"is not in the catalog"
        )
    return float(material.rate_per_sqft)


def _sum_amounts(entries: Iterable[_HasAmount]) -> float:
    # Insertion order, so repeated sums over the same list are bit-identical
    total = 0.0
    for entry in entries or []:
        total += float(entry.amount or 0.0)
    return total


def project_items_total(items: Iterable[_HasAmount]) -> float:
    return _sum_amounts(items)


def extra_costs_total(extra_costs: Iterable[_HasAmount]) -> float:
    return _sum_amounts(extra_costs)


def final_total(items: Iterable[_HasAmount], extra_costs: Iterable[_HasAmount]) -> float:
    return project_items_total(items) + extra_costs_total(extra_costs)


def project_totals(items, extra_costs) -> ProjectTotals:
    items = list(items or [])
    extra_costs = list(extra_costs or [])
    return ProjectTotals(
        items_total=project_items_total(items),
        extra_costs_total=extra_costs_total(extra_costs),
        final_total=final_total(items, extra_costs),
    )


__all__ = [
    "AREA_DIVISOR",
    "ItemMetrics",
    "ProjectTotals",
    "compute_item_metrics",
    "effective_rate",
    "project_items_total",
    "extra_costs_total",
    "final_total",
    "project_totals",
]
