"""In-memory project operations: items, extra costs, milestones, photos."""

from datetime import datetime, timezone

import pytest

from core.aggregate import (
    add_extra_cost,
    add_item,
    add_milestone,
    add_photo,
    remove_extra_cost,
    remove_item,
    remove_milestone,
    remove_photo,
    sorted_milestones,
    update_extra_cost,
    update_item,
    update_milestone,
    update_photo,
)
from core.errors import NotFoundError, ValidationError
from core.pricing import project_totals
from schemas.project_schema import (
    ExtraCostCreate,
    ExtraCostUpdate,
    ItemCreate,
    ItemUpdate,
    MilestoneCreate,
    MilestoneUpdate,
    PhotoCreate,
    PhotoUpdate,
)

LATER = datetime(2026, 4, 1, 12, 0, tzinfo=timezone.utc)
OLD = datetime(2020, 1, 1, tzinfo=timezone.utc)


def _cabinet(**overrides):
    fields = dict(name="Base cabinet", length=600, width=400, material_id="oak", quantity=2)
    fields.update(overrides)
    return ItemCreate(**fields)


class TestItems:

    def test_add_computes_metrics(self, doc, catalog, fixed_clock):
        item = add_item(doc, _cabinet(), catalog, clock=fixed_clock)
        assert item.sqft == 2.58
        assert item.amount == 4902.0
        assert doc.items == [item]
        assert doc.updated_at == fixed_clock()

    def test_custom_rate_zero(self, doc, catalog):
        item = add_item(doc, _cabinet(custom_rate=0), catalog)
        assert item.amount == 0.0

    def test_name_is_trimmed(self, doc, catalog):
        assert add_item(doc, _cabinet(name="  Wall unit "), catalog).name == "Wall unit"

    @pytest.mark.parametrize("overrides,field", [
        ({"name": "   "}, "name"),
        ({"length": 0}, "length"),
        ({"width": -1}, "width"),
        ({"depth": -5}, "depth"),
        ({"quantity": 0}, "quantity"),
        ({"material_id": ""}, "material_id"),
        ({"custom_rate": -10}, "custom_rate"),
        ({"length": float("inf")}, "length"),
    ])
    def test_invalid_item_leaves_document_unchanged(self, doc, catalog, overrides, field):
        with pytest.raises(ValidationError) as exc:
            add_item(doc, _cabinet(**overrides), catalog)
        assert exc.value.field == field
        assert doc.items == []
        assert doc.updated_at is None

    def test_unknown_material(self, doc, catalog):
        with pytest.raises(NotFoundError):
            add_item(doc, _cabinet(material_id="walnut"), catalog)
        assert doc.items == []

    def test_update_matches_fresh_create(self, doc, catalog):
        item = add_item(doc, _cabinet(), catalog)
        updated = update_item(doc, item.id, ItemUpdate(length=900, material_id="mdf", quantity=3), catalog)

        fresh = add_item(doc.model_copy(update={"items": []}),
                         _cabinet(length=900, material_id="mdf", quantity=3), catalog)
        assert (updated.sqft, updated.amount) == (fresh.sqft, fresh.amount)
        assert updated.id == item.id
        assert doc.items[0] == updated

    def test_update_null_custom_rate_clears_override(self, doc, catalog):
        item = add_item(doc, _cabinet(custom_rate=100), catalog)
        updated = update_item(doc, item.id, ItemUpdate(custom_rate=None), catalog)
        assert updated.custom_rate is None
        assert updated.amount == 4902.0

    def test_update_omitted_fields_unchanged(self, doc, catalog):
        item = add_item(doc, _cabinet(note="soft close"), catalog)
        updated = update_item(doc, item.id, ItemUpdate(quantity=1), catalog)
        assert updated.note == "soft close"
        assert updated.amount == 2451.0

    def test_update_invalid_keeps_old_item(self, doc, catalog):
        item = add_item(doc, _cabinet(), catalog)
        with pytest.raises(ValidationError):
            update_item(doc, item.id, ItemUpdate(width=0), catalog)
        assert doc.items == [item]

    def test_update_unknown_id(self, doc, catalog):
        with pytest.raises(NotFoundError):
            update_item(doc, "nope", ItemUpdate(quantity=2), catalog)

    def test_remove_is_idempotent(self, doc, catalog, fixed_clock):
        item = add_item(doc, _cabinet(), catalog, clock=fixed_clock)
        assert remove_item(doc, item.id, clock=lambda: LATER) is True
        assert doc.items == []
        assert doc.updated_at == LATER

        before = doc.model_copy(deep=True)
        assert remove_item(doc, item.id) is False
        assert doc == before


class TestExtraCosts:

    def test_add_and_totals(self, doc, catalog):
        add_item(doc, _cabinet(), catalog)
        add_extra_cost(doc, ExtraCostCreate(name="Delivery", amount=500))
        add_extra_cost(doc, ExtraCostCreate(name="Discount", amount=-402))
        totals = project_totals(doc.items, doc.extra_costs)
        assert totals.extra_costs_total == 98.0
        assert totals.final_total == 5000.0

    def test_blank_name_rejected(self, doc):
        with pytest.raises(ValidationError):
            add_extra_cost(doc, ExtraCostCreate(name=" ", amount=10))
        assert doc.extra_costs == []

    def test_non_finite_amount_rejected(self, doc):
        with pytest.raises(ValidationError):
            add_extra_cost(doc, ExtraCostCreate(name="Bad", amount=float("nan")))

    def test_update(self, doc):
        cost = add_extra_cost(doc, ExtraCostCreate(name="Delivery", amount=500, note="city"))
        updated = update_extra_cost(doc, cost.id, ExtraCostUpdate(amount=650))
        assert updated.amount == 650
        assert updated.note == "city"
        assert doc.extra_costs == [updated]

    def test_remove_is_idempotent(self, doc):
        cost = add_extra_cost(doc, ExtraCostCreate(name="Delivery", amount=500))
        assert remove_extra_cost(doc, cost.id) is True
        assert remove_extra_cost(doc, cost.id) is False


class TestMilestones:

    def test_default_order_is_position(self, doc):
        first = add_milestone(doc, MilestoneCreate(name="Design"))
        second = add_milestone(doc, MilestoneCreate(name="Production"))
        assert (first.order, second.order) == (0, 1)

    def test_sorted_by_order(self, doc):
        add_milestone(doc, MilestoneCreate(name="Install", order=5))
        add_milestone(doc, MilestoneCreate(name="Design", order=1))
        assert [m.name for m in sorted_milestones(doc)] == ["Design", "Install"]

    def test_created_completed_is_stamped(self, doc, fixed_clock):
        m = add_milestone(doc, MilestoneCreate(name="Measure", status="completed"), clock=fixed_clock)
        assert m.completed_date == fixed_clock()

    def test_completion_stamps_once(self, doc, fixed_clock):
        m = add_milestone(doc, MilestoneCreate(name="Design"))
        assert m.completed_date is None

        done = update_milestone(doc, m.id, MilestoneUpdate(status="completed"), clock=fixed_clock)
        assert done.completed_date == fixed_clock()

        again = update_milestone(doc, m.id, MilestoneUpdate(status="completed"), clock=lambda: LATER)
        assert again.completed_date == fixed_clock()

    def test_leaving_completed_keeps_date(self, doc, fixed_clock):
        m = add_milestone(doc, MilestoneCreate(name="Design", status="completed"), clock=fixed_clock)
        reopened = update_milestone(doc, m.id, MilestoneUpdate(status="in-progress"))
        assert reopened.status == "in-progress"
        assert reopened.completed_date == fixed_clock()

    def test_completed_date_rejected_on_open_milestone(self, doc):
        with pytest.raises(ValidationError) as exc:
            add_milestone(doc, MilestoneCreate(name="Design", status="pending", completed_date=OLD))
        assert exc.value.field == "completed_date"
        assert doc.milestones == []

    def test_completed_date_patch_rejected_unless_completing(self, doc, fixed_clock):
        m = add_milestone(doc, MilestoneCreate(name="Design"))
        with pytest.raises(ValidationError):
            update_milestone(doc, m.id, MilestoneUpdate(completed_date=OLD))
        assert doc.milestones == [m]

        done = update_milestone(doc, m.id, MilestoneUpdate(status="completed"), clock=fixed_clock)
        assert done.completed_date == fixed_clock()

    def test_completed_date_accepted_with_completion(self, doc):
        m = add_milestone(doc, MilestoneCreate(name="Design"))
        done = update_milestone(doc, m.id, MilestoneUpdate(status="completed", completed_date=OLD))
        assert done.completed_date == OLD

    def test_reopened_milestone_can_be_edited(self, doc, fixed_clock):
        m = add_milestone(doc, MilestoneCreate(name="Design", status="completed"), clock=fixed_clock)
        update_milestone(doc, m.id, MilestoneUpdate(status="pending"))
        renamed = update_milestone(doc, m.id, MilestoneUpdate(name="Concept design"))
        assert renamed.completed_date == fixed_clock()

    def test_update_unknown_id(self, doc):
        with pytest.raises(NotFoundError):
            update_milestone(doc, "missing", MilestoneUpdate(name="x"))

    def test_remove_is_idempotent(self, doc):
        m = add_milestone(doc, MilestoneCreate(name="Design"))
        assert remove_milestone(doc, m.id) is True
        assert remove_milestone(doc, m.id) is False


class TestPhotos:

    def _photo(self, **overrides):
        fields = dict(url="http://test/media/projects/p/a.jpg", file_name="a.jpg")
        fields.update(overrides)
        return PhotoCreate(**fields)

    def test_add_stamps_uploaded_at(self, doc, fixed_clock):
        photo = add_photo(doc, self._photo(caption="  "), clock=fixed_clock)
        assert photo.uploaded_at == fixed_clock()
        assert photo.category == "progress"
        assert photo.caption is None

    def test_update_only_touches_caption_and_category(self, doc, fixed_clock):
        photo = add_photo(doc, self._photo(), clock=fixed_clock)
        updated = update_photo(doc, photo.id, PhotoUpdate(caption="After install", category="after"),
                               clock=lambda: LATER)
        assert updated.caption == "After install"
        assert updated.category == "after"
        assert updated.uploaded_at == fixed_clock()
        assert updated.url == photo.url
        assert doc.updated_at == LATER

    def test_remove_returns_photo(self, doc):
        photo = add_photo(doc, self._photo())
        assert remove_photo(doc, photo.id) == photo
        assert remove_photo(doc, photo.id) is None
        assert doc.photos == []
