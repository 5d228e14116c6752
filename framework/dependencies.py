from typing import AsyncIterator
from fastapi import Query
from framework.config import settings
from framework.database.manager import DatabaseManager
from framework.repository.unit_of_work import UnitOfWork


async def get_uow() -> AsyncIterator[UnitOfWork]:
    """Dependency: one UnitOfWork per request, disposed when the response is done."""
    session = DatabaseManager.get_instance().sql.new_session()
    uow = UnitOfWork(session=session)
    try:
        yield uow
    finally:
        await uow.dispose()


class PageParams:
    """Dependency: common paging query parameters. Clamping happens in the repository."""

    def __init__(
        self,
        page_number: int = Query(1, alias="pageNumber"),
        page_size: int = Query(settings.PAGE_SIZE_DEFAULT, alias="pageSize"),
    ):
        self.page_number = page_number
        self.page_size = page_size
