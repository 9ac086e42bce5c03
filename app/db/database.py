import ssl

from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.ext.asyncio.session import AsyncSession
from sqlalchemy.orm import sessionmaker
from sqlmodel import SQLModel

from app.core import config
from app.core.logging import get_logger

logger = get_logger(__name__)

# DATABASE_URL is already normalized to an async driver by the settings
db_url = make_url(config.config.database_url)

# upgrade connection to use SSL
connect_args = {}
if db_url.get_backend_name() == "sqlite":
    connect_args["check_same_thread"] = False
elif config.config.render_env == config.Environment.PRODUCTION:
    connect_args["ssl"] = ssl.create_default_context()

engine = create_async_engine(
    db_url,
    echo=config.config.db_echo,
    future=True,
    connect_args=connect_args,
)

logger.info("Database configured: %s", db_url.render_as_string(hide_password=True))

# factory for creating asynchronous sessions (AsyncSession)
async_session = sessionmaker(
    bind=engine,
    class_=AsyncSession,
    # objects remain available after committing a transaction
    expire_on_commit=False,
)


async def init_db():
    # importing the models registers their tables on SQLModel.metadata
    from app.models import (  # noqa: F401
        listing_media_model,
        listing_model,
        transaction_model,
        university_model,
        user_model,
    )

    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)
