from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import Response
from sqlalchemy.orm import Session

from core.auth import get_current_user, get_owned_project
from core.database import get_db
from core.messaging import build_booking_message, messaging_link
from core.quotation import build_quotation, quotation_filename, render_quotation_pdf
from core.storage import MediaStorage, get_storage
from crud.catalog_crud import get_project_type, load_material_catalog
from crud.project_crud import list_projects, create_project, update_project, delete_project
from schemas.collection_schema import MessagingLinkResponse
from schemas.project_schema import ProjectCreate, ProjectResponse, ProjectUpdate
from schemas.quotation_schema import Quotation


router = APIRouter(prefix="/projects", tags=["Projects"])


@router.get("/", response_model=list[ProjectResponse])
def list_all(
    q: str | None = None,
    skip: int = 0,
    limit: int = 100,
    db: Session = Depends(get_db),
    current_user = Depends(get_current_user),
):
    return list_projects(db, user_id=current_user.id, search=q, skip=skip, limit=limit)


@router.get("/{project_id}", response_model=ProjectResponse)
def read_one(proj = Depends(get_owned_project)):
    return proj


@router.post("/", response_model=ProjectResponse, status_code=201)
def create(payload: ProjectCreate, db: Session = Depends(get_db), current_user = Depends(get_current_user)):
    return create_project(db, payload, user_id=current_user.id)


@router.patch("/{project_id}", response_model=ProjectResponse)
def update(
    project_id: str,
    payload: ProjectUpdate,
    db: Session = Depends(get_db),
    current_user = Depends(get_current_user),
):
    proj = update_project(db, project_id, payload, user_id=current_user.id)
    if not proj:
        raise HTTPException(status_code=404, detail="Project not found")
    return proj


@router.delete("/{project_id}", status_code=204)
def delete(
    project_id: str,
    db: Session = Depends(get_db),
    storage: MediaStorage = Depends(get_storage),
    current_user = Depends(get_current_user),
):
    ok = delete_project(db, project_id, storage, user_id=current_user.id)
    if not ok:
        raise HTTPException(status_code=404, detail="Project not found")
    return None


def _quotation_for(db: Session, proj) -> Quotation:
    project = ProjectResponse.model_validate(proj)
    return build_quotation(project, get_project_type(db, proj.type_id), load_material_catalog(db))


@router.get("/{project_id}/quotation", response_model=Quotation)
def quotation(proj = Depends(get_owned_project), db: Session = Depends(get_db)):
    return _quotation_for(db, proj)


@router.get("/{project_id}/quotation.pdf")
def quotation_pdf(proj = Depends(get_owned_project), db: Session = Depends(get_db)):
    pdf = render_quotation_pdf(_quotation_for(db, proj))
    filename = quotation_filename(proj)
    return Response(
        content=pdf,
        media_type="application/pdf",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@router.get("/{project_id}/booking-link", response_model=MessagingLinkResponse)
def booking_link(proj = Depends(get_owned_project), db: Session = Depends(get_db)):
    project = ProjectResponse.model_validate(proj)
    project_type = get_project_type(db, proj.type_id)
    message = build_booking_message(project, project_type.name if project_type else None)
    return MessagingLinkResponse(url=messaging_link(message), message=message)
