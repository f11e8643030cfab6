"""Item area/amount and project totals."""

import pytest

from core.errors import DataIntegrityError
from core.catalog import MaterialInfo
from core.pricing import (
    AREA_DIVISOR,
    compute_item_metrics,
    effective_rate,
    extra_costs_total,
    final_total,
    project_items_total,
    project_totals,
)
from schemas.project_schema import ExtraCost, ProjectItem


def _item(**overrides):
    fields = dict(id="i1", name="Base cabinet", length=600, width=400, depth=0,
                  material_id="oak", quantity=2, sqft=2.58, amount=4902.0)
    fields.update(overrides)
    return ProjectItem(**fields)


OAK = MaterialInfo(id="oak", name="Oak Wood", rate_per_sqft=950.0, project_type_id="kitchen")


class TestComputeItemMetrics:

    def test_divisor(self):
        assert AREA_DIVISOR == 92903

    def test_worked_example(self):
        m = compute_item_metrics(600, 400, 2, 950)
        assert m.sqft == 2.58
        assert m.amount == 4902.0

    def test_sqft_is_rounded_before_amount(self):
        # 1000 x 1000 / 92903 = 10.7639..., priced on the rounded 10.76
        m = compute_item_metrics(1000, 1000, 1, 100)
        assert m.sqft == 10.76
        assert m.amount == 1076.0

    def test_zero_rate(self):
        m = compute_item_metrics(600, 400, 3, 0)
        assert m.sqft == 2.58
        assert m.amount == 0.0


class TestEffectiveRate:

    def test_catalog_rate(self):
        assert effective_rate(_item(), OAK) == 950.0

    def test_custom_rate_wins(self):
        assert effective_rate(_item(custom_rate=1200), OAK) == 1200.0

    def test_custom_rate_zero_is_an_override(self):
        assert effective_rate(_item(custom_rate=0), OAK) == 0.0

    def test_custom_rate_ignores_missing_material(self):
        assert effective_rate(_item(custom_rate=500), None) == 500.0

    def test_missing_material_raises(self):
        with pytest.raises(DataIntegrityError):
            effective_rate(_item(material_id="gone"), None)


class TestTotals:

    def test_empty_project(self):
        assert project_items_total([]) == 0
        assert extra_costs_total([]) == 0
        assert final_total([], []) == 0

    def test_negative_extra_cost_is_a_discount(self):
        items = [_item(amount=10000.0)]
        costs = [ExtraCost(id="c1", name="Discount", amount=-1500.0)]
        totals = project_totals(items, costs)
        assert totals.items_total == 10000.0
        assert totals.extra_costs_total == -1500.0
        assert totals.final_total == 8500.0

    def test_final_total_is_sum_of_parts(self):
        items = [_item(id="a", amount=4902.0), _item(id="b", amount=1076.0)]
        costs = [ExtraCost(id="c1", name="Delivery", amount=750.0)]
        assert final_total(items, costs) == project_items_total(items) + extra_costs_total(costs)

    def test_repeated_sums_are_identical(self):
        items = [_item(id=str(n), amount=0.1 * n) for n in range(20)]
        assert project_items_total(items) == project_items_total(items)


_SWEEP = [
    (length, width, quantity, rate)
    for length in (1, 12.5, 300, 600, 1234.75, 2400)
    for width in (0.5, 45.25, 400, 900)
    for quantity in (1, 2, 7)
    for rate in (0, 0.01, 494, 950, 1140.5)
]


class TestComputeItemMetricsSweep:

    @pytest.mark.parametrize("length,width,quantity,rate", _SWEEP)
    def test_amount_uses_rounded_sqft(self, length, width, quantity, rate):
        m = compute_item_metrics(length, width, quantity, rate)
        sqft = round(length * width / 92903, 2)
        assert m.sqft == sqft
        assert m.amount == round(sqft * rate * quantity, 2)
        assert m.amount >= 0
        if rate == 0:
            assert m.amount == 0
