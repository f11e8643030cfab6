import os
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from uvicorn.middleware.proxy_headers import ProxyHeadersMiddleware
from fastapi.staticfiles import StaticFiles
from core.database import Base, SessionLocal, engine
from core.errors import register_exception_handlers
from core.logging_config import configure_logging, get_logger
from crud.catalog_crud import seed_default_catalog
from routers import user_router, catalog_router, collection_router
from routers import project_router, item_router, milestone_router, photo_router
from models import user, project, catalog  # noqa: F401
from core.config import settings

configure_logging(settings.LOG_LEVEL)
logger = get_logger(__name__)

Base.metadata.create_all(bind=engine)


@asynccontextmanager
async def lifespan(app: FastAPI):
    if settings.SEED_DEFAULT_CATALOG:
        db = SessionLocal()
        try:
            seed_default_catalog(db)
        finally:
            db.close()
    logger.info("Furniture Quotation API ready")
    yield


app = FastAPI(title="Furniture Quotation API", lifespan=lifespan)

# Respect X-Forwarded-Proto/Host when behind a proxy (Docker/nginx/etc.)
app.add_middleware(ProxyHeadersMiddleware, trusted_hosts="*")

# CORS: allow all domains and headers/methods
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=["*"],
)

register_exception_handlers(app)

app.include_router(user_router.router)
app.include_router(catalog_router.router)
app.include_router(collection_router.router)
app.include_router(project_router.router)
app.include_router(item_router.router)
app.include_router(milestone_router.router)
app.include_router(photo_router.router)

# Static media mount (project photos)
os.makedirs(settings.MEDIA_DIR, exist_ok=True)
app.mount(
    settings.MEDIA_URL_PATH,
    StaticFiles(directory=settings.MEDIA_DIR),
    name="media",
)

@app.get("/")
def root():
    return {"message": "Furniture Quotation API Ready"}
