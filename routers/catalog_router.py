from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from core.auth import get_current_user, require_admin
from core.database import get_db
from crud.catalog_crud import (
    create_material,
    create_project_type,
    delete_material,
    delete_project_type,
    get_project_type,
    list_materials,
    list_project_types,
    update_material,
    update_project_type,
)
from schemas.catalog_schema import (
    MaterialCreate,
    MaterialResponse,
    MaterialUpdate,
    ProjectTypeCreate,
    ProjectTypeResponse,
    ProjectTypeUpdate,
)


router = APIRouter(tags=["Catalog"])


@router.get("/project-types", response_model=list[ProjectTypeResponse])
def list_types(skip: int = 0, limit: int = 100, db: Session = Depends(get_db), current_user = Depends(get_current_user)):
    return list_project_types(db, skip=skip, limit=limit)


@router.get("/project-types/{type_id}", response_model=ProjectTypeResponse)
def read_type(type_id: str, db: Session = Depends(get_db), current_user = Depends(get_current_user)):
    pt = get_project_type(db, type_id)
    if not pt:
        raise HTTPException(status_code=404, detail="Project type not found")
    return pt


@router.post("/project-types", response_model=ProjectTypeResponse, status_code=201)
def create_type(payload: ProjectTypeCreate, db: Session = Depends(get_db), admin = Depends(require_admin)):
    return create_project_type(db, payload)


@router.patch("/project-types/{type_id}", response_model=ProjectTypeResponse)
def update_type(type_id: str, payload: ProjectTypeUpdate, db: Session = Depends(get_db), admin = Depends(require_admin)):
    pt = update_project_type(db, type_id, payload)
    if not pt:
        raise HTTPException(status_code=404, detail="Project type not found")
    return pt


@router.delete("/project-types/{type_id}", status_code=204)
def delete_type(type_id: str, db: Session = Depends(get_db), admin = Depends(require_admin)):
    ok = delete_project_type(db, type_id)
    if not ok:
        raise HTTPException(status_code=404, detail="Project type not found")
    return None


@router.post("/project-types/{type_id}/materials", response_model=MaterialResponse, status_code=201)
def create_type_material(type_id: str, payload: MaterialCreate, db: Session = Depends(get_db), admin = Depends(require_admin)):
    material = create_material(db, type_id, payload)
    if not material:
        raise HTTPException(status_code=404, detail="Project type not found")
    return material


@router.get("/materials", response_model=list[MaterialResponse])
def list_all_materials(project_type_id: str | None = None, db: Session = Depends(get_db), current_user = Depends(get_current_user)):
    return list_materials(db, project_type_id=project_type_id)


@router.patch("/materials/{material_id}", response_model=MaterialResponse)
def update_one_material(material_id: str, payload: MaterialUpdate, db: Session = Depends(get_db), admin = Depends(require_admin)):
    material = update_material(db, material_id, payload)
    if not material:
        raise HTTPException(status_code=404, detail="Material not found")
    return material


@router.delete("/materials/{material_id}", status_code=204)
def delete_one_material(material_id: str, db: Session = Depends(get_db), admin = Depends(require_admin)):
    ok = delete_material(db, material_id)
    if not ok:
        raise HTTPException(status_code=404, detail="Material not found")
    return None
