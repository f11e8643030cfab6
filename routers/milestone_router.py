from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from core.aggregate import add_milestone, remove_milestone, sorted_milestones, update_milestone
from core.auth import get_owned_project
from core.database import get_db
from crud.project_crud import load_document, save_collection
from schemas.project_schema import Milestone, MilestoneCreate, MilestoneUpdate


router = APIRouter(prefix="/projects/{project_id}/milestones", tags=["Milestones"])


@router.get("/", response_model=list[Milestone])
def list_all(proj = Depends(get_owned_project)):
    return sorted_milestones(load_document(proj))


@router.post("/", response_model=Milestone, status_code=201)
def create(payload: MilestoneCreate, proj = Depends(get_owned_project), db: Session = Depends(get_db)):
    doc = load_document(proj)
    milestone = add_milestone(doc, payload)
    save_collection(db, proj, doc, "milestones")
    return milestone


@router.patch("/{milestone_id}", response_model=Milestone)
def update(milestone_id: str, payload: MilestoneUpdate, proj = Depends(get_owned_project), db: Session = Depends(get_db)):
    doc = load_document(proj)
    milestone = update_milestone(doc, milestone_id, payload)
    save_collection(db, proj, doc, "milestones")
    return milestone


@router.delete("/{milestone_id}", status_code=204)
def delete(milestone_id: str, proj = Depends(get_owned_project), db: Session = Depends(get_db)):
    doc = load_document(proj)
    if remove_milestone(doc, milestone_id):
        save_collection(db, proj, doc, "milestones")
    return None
