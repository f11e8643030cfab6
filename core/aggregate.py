"""In-memory operations on a project's nested collections.

Every function takes a :class:`ProjectDocument`, validates its input before
touching anything, applies the change, and stamps ``updated_at`` from the
injected clock. Persisting the changed collection is the caller's job
(see ``crud.project_crud.save_collection``).

Conventions:
  * ``add_*`` returns the created entry.
  * ``update_*`` returns the updated entry; unknown ids raise NotFoundError.
  * ``remove_*`` is idempotent: it returns False (None for photos) and leaves the document
    untouched when the id is not present.
"""

import math
import uuid
from datetime import datetime, timezone
from typing import Callable

from core.catalog import MaterialCatalog
from core.errors import NotFoundError, ValidationError
from core.logging_config import get_logger
from core.pricing import compute_item_metrics, effective_rate
from schemas.project_schema import (
    ExtraCost,
    ExtraCostCreate,
    ExtraCostUpdate,
    ItemCreate,
    ItemUpdate,
    Milestone,
    MilestoneCreate,
    MilestoneUpdate,
    PhotoCreate,
    PhotoUpdate,
    ProjectDocument,
    ProjectItem,
    ProjectPhoto,
)

logger = get_logger(__name__)

Clock = Callable[[], datetime]

MILESTONE_STATUSES = ("pending", "in-progress", "completed")
PHOTO_CATEGORIES = ("before", "progress", "after", "material")


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _new_id() -> str:
    return str(uuid.uuid4())


def _touch(project: ProjectDocument, clock: Clock) -> None:
    project.updated_at = clock()


def _find(entries: list, entry_id: str, kind: str) -> int:
    for idx, entry in enumerate(entries):
        if entry.id == entry_id:
            return idx
    raise NotFoundError(kind, entry_id)


def _remove(entries: list, entry_id: str) -> list | None:
    kept = [e for e in entries if e.id != entry_id]
    if len(kept) == len(entries):
        return None
    return kept


# ---------- validation ----------

def _require_name(value, field: str = "name") -> str:
    if value is None or not str(value).strip():
        raise ValidationError(f"{field} is required", field=field)
    return str(value).strip()


def _require_finite(value, field: str) -> float:
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{field} must be a number", field=field) from None
    if not math.isfinite(number):
        raise ValidationError(f"{field} must be a finite number", field=field)
    return number


def _validate_item_fields(fields: dict) -> None:
    _require_name(fields.get("name"))
    if _require_finite(fields.get("length"), "length") <= 0:
        raise ValidationError("length must be greater than 0", field="length")
    if _require_finite(fields.get("width"), "width") <= 0:
        raise ValidationError("width must be greater than 0", field="width")
    if _require_finite(fields.get("depth", 0.0), "depth") < 0:
        raise ValidationError("depth cannot be negative", field="depth")

    quantity = fields.get("quantity")
    if isinstance(quantity, bool) or not isinstance(quantity, int) or quantity < 1:
        raise ValidationError("quantity must be a whole number of at least 1", field="quantity")

    if not fields.get("material_id"):
        raise ValidationError("material_id is required", field="material_id")

    custom_rate = fields.get("custom_rate")
    if custom_rate is not None and _require_finite(custom_rate, "custom_rate") < 0:
        raise ValidationError("custom_rate cannot be negative", field="custom_rate")


def _build_item(item_id: str, fields: dict, catalog: MaterialCatalog) -> ProjectItem:
    _validate_item_fields(fields)
    material = catalog.require(fields["material_id"])
    draft = ProjectItem(id=item_id, sqft=0.0, amount=0.0, **{
        k: v for k, v in fields.items() if k not in ("id", "sqft", "amount")
    })
    draft.name = draft.name.strip()
    rate = effective_rate(draft, material)
    metrics = compute_item_metrics(draft.length, draft.width, draft.quantity, rate)
    draft.sqft = metrics.sqft
    draft.amount = metrics.amount
    return draft


# ---------- items ----------

def add_item(project: ProjectDocument, draft: ItemCreate, catalog: MaterialCatalog,
             clock: Clock = utcnow) -> ProjectItem:
    item = _build_item(_new_id(), draft.model_dump(), catalog)
    project.items = [*project.items, item]
    _touch(project, clock)
    logger.info("project %s: added item %s (%.2f sqft, amount %.2f)",
                project.id, item.id, item.sqft, item.amount)
    return item


def update_item(project: ProjectDocument, item_id: str, patch: ItemUpdate,
                catalog: MaterialCatalog, clock: Clock = utcnow) -> ProjectItem:
    idx = _find(project.items, item_id, "Item")
    merged = project.items[idx].model_dump()
    merged.update(patch.model_dump(exclude_unset=True))
    # Patch nulls on required fields mean "unchanged"; custom_rate/note null clears them
    for key in ("name", "length", "width", "depth", "material_id", "quantity"):
        if merged.get(key) is None:
            merged[key] = getattr(project.items[idx], key)

    item = _build_item(item_id, merged, catalog)
    items = list(project.items)
    items[idx] = item
    project.items = items
    _touch(project, clock)
    logger.info("project %s: updated item %s (amount %.2f)", project.id, item.id, item.amount)
    return item


def remove_item(project: ProjectDocument, item_id: str, clock: Clock = utcnow) -> bool:
    kept = _remove(project.items, item_id)
    if kept is None:
        return False
    project.items = kept
    _touch(project, clock)
    logger.info("project %s: removed item %s", project.id, item_id)
    return True


# ---------- extra costs ----------

def _validate_extra_cost(fields: dict) -> None:
    _require_name(fields.get("name"))
    _require_finite(fields.get("amount"), "amount")


def add_extra_cost(project: ProjectDocument, draft: ExtraCostCreate,
                   clock: Clock = utcnow) -> ExtraCost:
    fields = draft.model_dump()
    _validate_extra_cost(fields)
    fields["name"] = fields["name"].strip()
    cost = ExtraCost(id=_new_id(), **fields)
    project.extra_costs = [*project.extra_costs, cost]
    _touch(project, clock)
    logger.info("project %s: added extra cost %s (%.2f)", project.id, cost.id, cost.amount)
    return cost


def update_extra_cost(project: ProjectDocument, cost_id: str, patch: ExtraCostUpdate,
                      clock: Clock = utcnow) -> ExtraCost:
    idx = _find(project.extra_costs, cost_id, "Extra cost")
    current = project.extra_costs[idx]
    merged = current.model_dump()
    merged.update(patch.model_dump(exclude_unset=True))
    for key in ("name", "amount"):
        if merged.get(key) is None:
            merged[key] = getattr(current, key)
    _validate_extra_cost(merged)
    merged["name"] = merged["name"].strip()

    cost = ExtraCost(**merged)
    costs = list(project.extra_costs)
    costs[idx] = cost
    project.extra_costs = costs
    _touch(project, clock)
    return cost


def remove_extra_cost(project: ProjectDocument, cost_id: str, clock: Clock = utcnow) -> bool:
    kept = _remove(project.extra_costs, cost_id)
    if kept is None:
        return False
    project.extra_costs = kept
    _touch(project, clock)
    logger.info("project %s: removed extra cost %s", project.id, cost_id)
    return True


# ---------- milestones ----------

def _validate_milestone(fields: dict) -> None:
    _require_name(fields.get("name"))
    if fields.get("status") not in MILESTONE_STATUSES:
        raise ValidationError(f"status must be one of {', '.join(MILESTONE_STATUSES)}", field="status")


def _reject_open_completion_date(completed_date, status: str) -> None:
    if completed_date is not None and status != "completed":
        raise ValidationError("completed_date can only be set on a completed milestone",
                              field="completed_date")


def sorted_milestones(project: ProjectDocument) -> list[Milestone]:
    return sorted(project.milestones, key=lambda m: m.order)


def add_milestone(project: ProjectDocument, draft: MilestoneCreate,
                  clock: Clock = utcnow) -> Milestone:
    fields = draft.model_dump()
    _validate_milestone(fields)
    _reject_open_completion_date(fields.get("completed_date"), fields["status"])
    fields["name"] = fields["name"].strip()
    if fields.get("order") is None:
        fields["order"] = len(project.milestones)
    if fields["status"] == "completed" and fields.get("completed_date") is None:
        fields["completed_date"] = clock()

    milestone = Milestone(id=_new_id(), **fields)
    project.milestones = [*project.milestones, milestone]
    _touch(project, clock)
    logger.info("project %s: added milestone %s", project.id, milestone.id)
    return milestone


def update_milestone(project: ProjectDocument, milestone_id: str, patch: MilestoneUpdate,
                     clock: Clock = utcnow) -> Milestone:
    """
    Moving to 'completed' stamps completed_date with clock() unless one is
    already stored or supplied in the patch. Moving away from 'completed'
    leaves completed_date as it was. A completed_date sent for a milestone
    that does not end up completed is rejected.
    """
    idx = _find(project.milestones, milestone_id, "Milestone")
    current = project.milestones[idx]
    changes = patch.model_dump(exclude_unset=True)
    merged = current.model_dump()
    merged.update(changes)
    for key in ("name", "status", "order"):
        if merged.get(key) is None:
            merged[key] = getattr(current, key)
    _validate_milestone(merged)
    _reject_open_completion_date(changes.get("completed_date"), merged["status"])
    merged["name"] = merged["name"].strip()

    if merged["status"] == "completed" and merged.get("completed_date") is None:
        merged["completed_date"] = clock()

    milestone = Milestone(**merged)
    milestones = list(project.milestones)
    milestones[idx] = milestone
    project.milestones = milestones
    _touch(project, clock)
    if current.status != milestone.status:
        logger.info("project %s: milestone %s %s -> %s",
                    project.id, milestone.id, current.status, milestone.status)
    return milestone


def remove_milestone(project: ProjectDocument, milestone_id: str, clock: Clock = utcnow) -> bool:
    kept = _remove(project.milestones, milestone_id)
    if kept is None:
        return False
    project.milestones = kept
    _touch(project, clock)
    logger.info("project %s: removed milestone %s", project.id, milestone_id)
    return True


# ---------- photos ----------

def _validate_photo(fields: dict) -> None:
    _require_name(fields.get("file_name"), field="file_name")
    if not fields.get("url"):
        raise ValidationError("url is required", field="url")
    if fields.get("category") not in PHOTO_CATEGORIES:
        raise ValidationError(f"category must be one of {', '.join(PHOTO_CATEGORIES)}", field="category")


def add_photo(project: ProjectDocument, draft: PhotoCreate, clock: Clock = utcnow) -> ProjectPhoto:
    fields = draft.model_dump()
    _validate_photo(fields)
    if fields.get("caption") is not None:
        fields["caption"] = fields["caption"].strip() or None
    photo = ProjectPhoto(id=_new_id(), uploaded_at=clock(), **fields)
    project.photos = [*project.photos, photo]
    _touch(project, clock)
    logger.info("project %s: added photo %s (%s)", project.id, photo.id, photo.file_name)
    return photo


def update_photo(project: ProjectDocument, photo_id: str, patch: PhotoUpdate,
                 clock: Clock = utcnow) -> ProjectPhoto:
    idx = _find(project.photos, photo_id, "Photo")
    current = project.photos[idx]
    changes = patch.model_dump(exclude_unset=True)
    if "category" in changes and changes["category"] is None:
        del changes["category"]
    if changes.get("caption") is not None:
        changes["caption"] = changes["caption"].strip() or None
    if "category" in changes and changes["category"] not in PHOTO_CATEGORIES:
        raise ValidationError(f"category must be one of {', '.join(PHOTO_CATEGORIES)}", field="category")

    # url, file_name and uploaded_at are fixed at upload time
    photo = current.model_copy(update=changes)
    photos = list(project.photos)
    photos[idx] = photo
    project.photos = photos
    _touch(project, clock)
    return photo


def remove_photo(project: ProjectDocument, photo_id: str, clock: Clock = utcnow) -> ProjectPhoto | None:
    """Return the removed photo so the caller can delete its stored file, or None."""
    for photo in project.photos:
        if photo.id == photo_id:
            project.photos = [p for p in project.photos if p.id != photo_id]
            _touch(project, clock)
            logger.info("project %s: removed photo %s", project.id, photo_id)
            return photo
    return None
