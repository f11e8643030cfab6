import json
import os

from sqlalchemy import desc
from sqlalchemy.orm import Session, selectinload

from core.catalog import MaterialCatalog
from core.database import commit_or_raise
from core.logging_config import get_logger
from models.catalog import Material, ProjectType
from schemas.catalog_schema import MaterialCreate, MaterialUpdate, ProjectTypeCreate, ProjectTypeUpdate

logger = get_logger(__name__)

APP_DIR = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
DEFAULT_CATALOG_PATH = os.path.join(APP_DIR, "data", "default_catalog.json")


# ---------- project types ----------

def get_project_type(db: Session, type_id: str):
    return db.query(ProjectType).filter(ProjectType.id == type_id).first()


def list_project_types(db: Session, skip: int = 0, limit: int = 100):
    return (
        db.query(ProjectType)
        .options(selectinload(ProjectType.materials))
        .order_by(desc(ProjectType.created_at))
        .offset(skip)
        .limit(limit)
        .all()
    )


def create_project_type(db: Session, payload: ProjectTypeCreate):
    pt = ProjectType(**payload.model_dump())
    db.add(pt)
    commit_or_raise(db, "create project type")
    db.refresh(pt)
    logger.info("created project type %s (%s)", pt.id, pt.name)
    return pt


def update_project_type(db: Session, type_id: str, payload: ProjectTypeUpdate):
    pt = get_project_type(db, type_id)
    if not pt:
        return None
    for k, v in payload.model_dump(exclude_unset=True).items():
        if v is not None:
            setattr(pt, k, v)
    commit_or_raise(db, "update project type")
    db.refresh(pt)
    return pt


def delete_project_type(db: Session, type_id: str) -> bool:
    pt = get_project_type(db, type_id)
    if not pt:
        return False
    db.delete(pt)
    commit_or_raise(db, "delete project type")
    logger.info("deleted project type %s", type_id)
    return True


# ---------- materials ----------

def get_material(db: Session, material_id: str):
    return db.query(Material).filter(Material.id == material_id).first()


def list_materials(db: Session, project_type_id: str | None = None):
    q = db.query(Material)
    if project_type_id:
        q = q.filter(Material.project_type_id == project_type_id)
    return q.order_by(Material.created_at).all()


def create_material(db: Session, project_type_id: str, payload: MaterialCreate):
    if not get_project_type(db, project_type_id):
        return None
    material = Material(project_type_id=project_type_id, **payload.model_dump())
    db.add(material)
    commit_or_raise(db, "create material")
    db.refresh(material)
    logger.info("created material %s (%s @ %.2f)", material.id, material.name, material.rate_per_sqft)
    return material


def update_material(db: Session, material_id: str, payload: MaterialUpdate):
    material = get_material(db, material_id)
    if not material:
        return None
    for k, v in payload.model_dump(exclude_unset=True).items():
        if v is not None:
            setattr(material, k, v)
    commit_or_raise(db, "update material")
    db.refresh(material)
    return material


def delete_material(db: Session, material_id: str) -> bool:
    material = get_material(db, material_id)
    if not material:
        return False
    db.delete(material)
    commit_or_raise(db, "delete material")
    logger.info("deleted material %s", material_id)
    return True


def load_material_catalog(db: Session) -> MaterialCatalog:
    """Snapshot of every material, injected into pricing and aggregate calls."""
    return MaterialCatalog.from_materials(db.query(Material).all())


# ---------- seeding ----------

def seed_default_catalog(db: Session, path: str = DEFAULT_CATALOG_PATH) -> int:
    """Insert the default project types when the catalog is empty. Returns types created."""
    if db.query(ProjectType).first() is not None:
        return 0
    with open(path, "r", encoding="utf-8") as f:
        data = json.load(f)

    created = 0
    for entry in data.get("project_types", []):
        pt = ProjectType(
            name=entry["name"],
            icon=entry.get("icon", ""),
            description=entry.get("description", ""),
        )
        for m in entry.get("materials", []):
            pt.materials.append(Material(name=m["name"], rate_per_sqft=float(m["rate_per_sqft"])))
        db.add(pt)
        created += 1
    commit_or_raise(db, "seed default catalog")
    logger.info("seeded %d default project types", created)
    return created
