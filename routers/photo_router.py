from typing import Optional

from fastapi import APIRouter, Depends, File, Form, HTTPException, Request, UploadFile
from sqlalchemy.orm import Session

from core.aggregate import PHOTO_CATEGORIES, add_photo, remove_photo, update_photo
from core.auth import get_owned_project
from core.database import get_db
from core.errors import AppError, PersistenceError, ValidationError
from core.logging_config import get_logger
from core.storage import MediaStorage, get_storage
from crud.project_crud import load_document, save_collection
from schemas.project_schema import PhotoCreate, PhotoUpdate, ProjectPhoto

logger = get_logger(__name__)

router = APIRouter(prefix="/projects/{project_id}/photos", tags=["Photos"])


@router.post("/", response_model=ProjectPhoto, status_code=201)
def upload_photo(
    request: Request,
    photo: UploadFile = File(...),
    caption: Optional[str] = Form(None),
    category: str = Form("progress"),
    proj = Depends(get_owned_project),
    db: Session = Depends(get_db),
    storage: MediaStorage = Depends(get_storage),
):
    if category not in PHOTO_CATEGORIES:
        raise ValidationError(f"category must be one of {', '.join(PHOTO_CATEGORIES)}", field="category")
    if not photo.filename:
        raise ValidationError("file_name is required", field="file_name")

    try:
        stored = storage.save(proj.id, photo.filename, photo.file, content_type=photo.content_type)
    except FileExistsError:
        raise HTTPException(status_code=409, detail="Duplicate photo") from None

    doc = load_document(proj)
    draft = PhotoCreate(
        url=storage.url_for(str(request.base_url), stored.key),
        file_name=stored.key.rsplit("/", 1)[-1],
        caption=caption,
        category=category,
    )
    try:
        created = add_photo(doc, draft)
        save_collection(db, proj, doc, "photos")
    except AppError:
        # The project never referenced the file; drop it
        try:
            storage.delete(stored.key)
        except PersistenceError as e:
            logger.warning("orphaned upload %s left on disk: %s", stored.key, e.message)
        raise
    return created


@router.patch("/{photo_id}", response_model=ProjectPhoto)
def update(photo_id: str, payload: PhotoUpdate, proj = Depends(get_owned_project), db: Session = Depends(get_db)):
    doc = load_document(proj)
    photo = update_photo(doc, photo_id, payload)
    save_collection(db, proj, doc, "photos")
    return photo


@router.delete("/{photo_id}", status_code=204)
def delete(
    photo_id: str,
    proj = Depends(get_owned_project),
    db: Session = Depends(get_db),
    storage: MediaStorage = Depends(get_storage),
):
    doc = load_document(proj)
    removed = remove_photo(doc, photo_id)
    if removed is None:
        return None
    save_collection(db, proj, doc, "photos")

    key = storage.key_from_url(removed.url)
    if key:
        try:
            storage.delete(key)
        except PersistenceError as e:
            logger.warning("project %s: %s", proj.id, e.message)
    return None
