from sqlalchemy import text
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlmodel.ext.asyncio.session import AsyncSession
from framework.logging.logger import get_logger
from .base import BaseDatabaseDriver

logger = get_logger("sql_driver")

class SQLDriver(BaseDatabaseDriver):
    def __init__(self, url: str):
        self.engine = create_async_engine(url, echo=False, future=True, pool_pre_ping=True)
        self.session_factory = sessionmaker(
            self.engine, class_=AsyncSession, expire_on_commit=False
        )

    async def connect(self):
        """Connect to database (SQLModel engine manages connections)."""
        async with self.engine.begin() as conn:
            await conn.execute(text("SELECT 1"))

    async def disconnect(self):
        """Disconnect from database."""
        await self.engine.dispose()

    async def ping(self) -> bool:
        try:
            await self.connect()
            return True
        except Exception as e:
            logger.error(f"Database ping failed: {str(e)}")
            return False

    def new_session(self) -> AsyncSession:
        """Open a session; the caller (UnitOfWork) owns and closes it."""
        return self.session_factory()
