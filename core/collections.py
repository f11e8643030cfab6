# core/collections.py: furniture collection showcase loader + helpers

import json
import os

from pydantic import TypeAdapter

from schemas.collection_schema import Collection

APP_DIR = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
COLLECTIONS_PATH = os.path.join(APP_DIR, "data", "collections.json")

_collections_adapter = TypeAdapter(list[Collection])

# ---------- simple in-process cache ----------
_CACHE: list[Collection] | None = None
_CACHE_KEY: tuple[str, float | None] | None = None


def _read_from_disk(path: str) -> list[Collection]:
    if not os.path.exists(path):
        raise FileNotFoundError(f"Missing collections at {path}")
    with open(path, "r", encoding="utf-8") as f:
        data = json.load(f)
    return _collections_adapter.validate_python(data.get("collections", []))


def load_collections(path: str = COLLECTIONS_PATH) -> list[Collection]:
    """Read once, re-read when the file changes on disk."""
    global _CACHE, _CACHE_KEY
    try:
        mtime = os.path.getmtime(path)
    except OSError:
        mtime = None

    key = (path, mtime)
    if _CACHE is None or _CACHE_KEY != key:
        _CACHE = _read_from_disk(path)
        _CACHE_KEY = key
    return _CACHE


def list_collections(popular_only: bool = False, path: str = COLLECTIONS_PATH) -> list[Collection]:
    items = load_collections(path)
    if popular_only:
        return [c for c in items if c.popular]
    return list(items)


def get_collection(slug: str, path: str = COLLECTIONS_PATH) -> Collection | None:
    for c in load_collections(path):
        if c.slug == slug:
            return c
    return None
