from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.api.exception_handlers import register_exception_handlers
from app.api.middleware import authenticate_request, init_firebase
from app.api.routes import (
    auth_router,
    listings_router,
    transactions_router,
    universities_router,
)
from app.core.config import config
from app.core.logging import get_logger
from app.db.database import engine, init_db
from app.services.media.cloudinary_service import configure_cloudinary

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Perform startup tasks
    init_firebase()
    configure_cloudinary(config)
    await init_db()
    logger.info("%s started", config.app_name)
    yield

    # Cleanup
    await engine.dispose()


app = FastAPI(title=config.app_name, lifespan=lifespan)

register_exception_handlers(app)

app.include_router(auth_router)
app.include_router(universities_router)
app.include_router(listings_router)
app.include_router(transactions_router)

# added last, CORS wraps the auth middleware
app.middleware("http")(authenticate_request)
app.add_middleware(
    CORSMiddleware,
    allow_origins=config.cors_origins,
    # credentials only for an explicit origin list
    allow_credentials="*" not in config.cors_origins,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get("/", summary="Health check")
async def root():
    return {"message": f"{config.app_name} is running"}
