from fastapi import APIRouter, HTTPException

from core.collections import get_collection, list_collections
from core.messaging import build_consultation_message, messaging_link
from schemas.collection_schema import Collection, MessagingLinkResponse


router = APIRouter(prefix="/collections", tags=["Collections"])


@router.get("/", response_model=list[Collection])
def list_all(popular: bool = False):
    return list_collections(popular_only=popular)


@router.get("/{slug}", response_model=Collection)
def read_one(slug: str):
    collection = get_collection(slug)
    if not collection:
        raise HTTPException(status_code=404, detail="Collection not found")
    return collection


@router.get("/{slug}/consultation-link", response_model=MessagingLinkResponse)
def consultation_link(slug: str):
    collection = get_collection(slug)
    if not collection:
        raise HTTPException(status_code=404, detail="Collection not found")
    message = build_consultation_message(collection.title)
    return MessagingLinkResponse(url=messaging_link(message), message=message)
