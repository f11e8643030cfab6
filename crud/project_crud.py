from sqlalchemy import desc, func, or_, select
from sqlalchemy.orm import Session

from core.aggregate import Clock, utcnow
from core.database import commit_or_raise
from core.errors import NotFoundError, PersistenceError, ValidationError
from core.logging_config import get_logger
from core.storage import MediaStorage
from models.catalog import ProjectType
from models.project import Project
from schemas.project_schema import ProjectCreate, ProjectDocument, ProjectUpdate

logger = get_logger(__name__)

COLLECTION_FIELDS = ("items", "extra_costs", "milestones", "photos")


def get_project(db: Session, project_id: str, user_id: str | None = None):
    q = db.query(Project).filter(Project.id == project_id)
    if user_id:
        q = q.filter(Project.user_id == user_id)
    return q.first()


def _escape_like(value: str) -> str:
    return value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def list_projects(
    db: Session,
    user_id: str | None = None,
    search: str | None = None,
    skip: int = 0,
    limit: int = 100,
):
    q = db.query(Project)
    if user_id:
        q = q.filter(Project.user_id == user_id)
    if search and search.strip():
        # Dashboard search: project name or project-type name
        term = f"%{_escape_like(search.strip().lower())}%"
        type_ids = select(ProjectType.id).where(func.lower(ProjectType.name).like(term, escape="\\"))
        q = q.filter(or_(
            func.lower(Project.name).like(term, escape="\\"),
            Project.type_id.in_(type_ids),
        ))
    return q.order_by(desc(Project.updated_at)).offset(skip).limit(limit).all()


def _require_type(db: Session, type_id: str):
    if not db.query(ProjectType.id).filter(ProjectType.id == type_id).first():
        raise NotFoundError("Project type", type_id)


def create_project(db: Session, payload: ProjectCreate, user_id: str, clock: Clock = utcnow):
    if not payload.name or not payload.name.strip():
        raise ValidationError("name is required", field="name")
    _require_type(db, payload.type_id)

    now = clock()
    proj = Project(
        user_id=user_id,
        type_id=payload.type_id,
        name=payload.name.strip(),
        customer_name=payload.customer_name,
        customer_mobile=payload.customer_mobile,
        customer_address=payload.customer_address,
        items=[],
        extra_costs=[],
        milestones=[],
        photos=[],
        created_at=now,
        updated_at=now,
    )
    db.add(proj)
    commit_or_raise(db, "create project")
    db.refresh(proj)
    logger.info("user %s created project %s", user_id, proj.id)
    return proj


def update_project(db: Session, project_id: str, payload: ProjectUpdate,
                   user_id: str | None = None, clock: Clock = utcnow):
    proj = get_project(db, project_id, user_id=user_id)
    if not proj:
        return None
    changes = payload.model_dump(exclude_unset=True)
    if "name" in changes:
        if not changes["name"] or not changes["name"].strip():
            raise ValidationError("name is required", field="name")
        changes["name"] = changes["name"].strip()
    if changes.get("type_id") is None:
        changes.pop("type_id", None)
    else:
        _require_type(db, changes["type_id"])

    for k, v in changes.items():
        setattr(proj, k, v)
    proj.updated_at = clock()
    commit_or_raise(db, "update project")
    db.refresh(proj)
    return proj


def delete_project(db: Session, project_id: str, storage: MediaStorage,
                   user_id: str | None = None) -> bool:
    proj = get_project(db, project_id, user_id=user_id)
    if not proj:
        return False

    # Stored photos go first; a failing delete is logged and never blocks the row delete
    for photo in proj.photos or []:
        key = storage.key_from_url(photo.get("url", ""))
        if not key:
            continue
        try:
            storage.delete(key)
        except PersistenceError as e:
            logger.warning("project %s: %s", project_id, e.message)
    try:
        storage.delete_project(project_id)
    except PersistenceError as e:
        logger.warning("project %s: %s", project_id, e.message)

    db.delete(proj)
    commit_or_raise(db, "delete project")
    logger.info("deleted project %s", project_id)
    return True


def load_document(proj: Project) -> ProjectDocument:
    return ProjectDocument(
        id=proj.id,
        items=proj.items or [],
        extra_costs=proj.extra_costs or [],
        milestones=proj.milestones or [],
        photos=proj.photos or [],
        updated_at=proj.updated_at,
    )


def save_collection(db: Session, proj: Project, doc: ProjectDocument, *fields: str):
    """
    Write whole nested collections back to the row (last writer wins per
    column) together with updated_at, then commit. Nothing is reported as
    saved until the commit succeeds.
    """
    for field in fields:
        if field not in COLLECTION_FIELDS:
            raise ValueError(f"Unknown project collection '{field}'")
        setattr(proj, field, [entry.model_dump(mode="json") for entry in getattr(doc, field)])
    proj.updated_at = doc.updated_at
    commit_or_raise(db, f"save project {proj.id} {', '.join(fields)}")
    db.refresh(proj)
    return proj
