from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from core.aggregate import (
    add_extra_cost,
    add_item,
    remove_extra_cost,
    remove_item,
    update_extra_cost,
    update_item,
)
from core.auth import get_owned_project
from core.database import get_db
from crud.catalog_crud import load_material_catalog
from crud.project_crud import load_document, save_collection
from schemas.project_schema import (
    ExtraCost,
    ExtraCostCreate,
    ExtraCostUpdate,
    ItemCreate,
    ItemUpdate,
    ProjectItem,
)


router = APIRouter(prefix="/projects/{project_id}", tags=["Project items"])


@router.post("/items", response_model=ProjectItem, status_code=201)
def create_item(payload: ItemCreate, proj = Depends(get_owned_project), db: Session = Depends(get_db)):
    doc = load_document(proj)
    item = add_item(doc, payload, load_material_catalog(db))
    save_collection(db, proj, doc, "items")
    return item


@router.patch("/items/{item_id}", response_model=ProjectItem)
def patch_item(item_id: str, payload: ItemUpdate, proj = Depends(get_owned_project), db: Session = Depends(get_db)):
    doc = load_document(proj)
    item = update_item(doc, item_id, payload, load_material_catalog(db))
    save_collection(db, proj, doc, "items")
    return item


@router.delete("/items/{item_id}", status_code=204)
def delete_item(item_id: str, proj = Depends(get_owned_project), db: Session = Depends(get_db)):
    doc = load_document(proj)
    if remove_item(doc, item_id):
        save_collection(db, proj, doc, "items")
    return None


@router.post("/extra-costs", response_model=ExtraCost, status_code=201)
def create_extra_cost(payload: ExtraCostCreate, proj = Depends(get_owned_project), db: Session = Depends(get_db)):
    doc = load_document(proj)
    cost = add_extra_cost(doc, payload)
    save_collection(db, proj, doc, "extra_costs")
    return cost


@router.patch("/extra-costs/{cost_id}", response_model=ExtraCost)
def patch_extra_cost(cost_id: str, payload: ExtraCostUpdate, proj = Depends(get_owned_project), db: Session = Depends(get_db)):
    doc = load_document(proj)
    cost = update_extra_cost(doc, cost_id, payload)
    save_collection(db, proj, doc, "extra_costs")
    return cost


@router.delete("/extra-costs/{cost_id}", status_code=204)
def delete_extra_cost(cost_id: str, proj = Depends(get_owned_project), db: Session = Depends(get_db)):
    doc = load_document(proj)
    if remove_extra_cost(doc, cost_id):
        save_collection(db, proj, doc, "extra_costs")
    return None
