from enum import Enum
from typing import Any, Optional
from pydantic import BaseModel
from framework.repository.pagination import Page

class ResponseState(str, Enum):
    SUCCESS = "success"
    ERROR = "error"
    NOT_FOUND = "not_found"
    UNAUTHORIZED = "unauthorized"
    FORBIDDEN = "forbidden"
    BAD_REQUEST = "bad_request"
    VALIDATION_ERROR = "validation_error"
    CONFLICT = "conflict"

class ResponseModel(BaseModel):
    data: Optional[Any] = None
    state: ResponseState = ResponseState.SUCCESS
    message: Optional[str] = None

    @staticmethod
    def success(data: Any = None, message: str = "success"):
        return {"data": data, "state": ResponseState.SUCCESS.value, "message": message}

    @staticmethod
    def fail(state: ResponseState = ResponseState.ERROR, message: str = "error", data: Any = None):
        return {"data": data, "state": ResponseState(state).value, "message": message}

    @staticmethod
    def paginated(page: Page, data: Any, message: str = "success"):
        """Envelope for a page; `data` is the already-mapped page items."""
        return {
            "data": data,
            "state": ResponseState.SUCCESS.value,
            "message": message,
            "totalCount": page.total_count,
            "pageNumber": page.page_number,
            "pageSize": page.page_size,
            "totalPages": page.total_pages,
            "hasNextPage": page.has_next_page,
            "hasPreviousPage": page.has_previous_page,
        }
