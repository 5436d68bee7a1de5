from pydantic import BaseModel
from typing import Optional
from enum import Enum


class ErrorCode(str, Enum):
    # Shop related
    SHOP_REQUIRED = "SHOP_001"
    INVALID_SHOP_DOMAIN = "SHOP_002"

    # Timer related
    TIMER_NOT_FOUND = "TIMER_001"
    TIMER_KIND_IMMUTABLE = "TIMER_002"

    # Generic
    VALIDATION_FAILED = "VALIDATION_001"
    INTERNAL_ERROR = "INTERNAL_001"


class Error(BaseModel):
    code: ErrorCode
    message: str
    details: Optional[dict] = None


class BaseResponse(BaseModel):
    success: bool = True
    data: Optional[dict] = None
    error: Optional[Error] = None
    meta: Optional[dict] = None
