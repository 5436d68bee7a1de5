import re
from typing import Optional

from fastapi import Query, Request

from timerapi.config import settings
from timerapi.core.exceptions import InvalidShopDomainError, ShopRequiredError

_SHOP_DOMAIN_RE = re.compile(settings.SHOP_DOMAIN_PATTERN)


def _extract_shop(request: Request, shop_param: Optional[str]) -> Optional[str]:
    """헤더 우선, 없으면 쿼리 파라미터에서 상점 도메인을 읽습니다."""
    raw = request.headers.get(settings.SHOP_HEADER_NAME) or shop_param
    if raw is None:
        return None
    raw = raw.strip()
    return raw or None


def get_current_shop(
    request: Request,
    shop: Optional[str] = Query(None, description="상점 도메인 (헤더가 없을 때)"),
) -> str:
    """
    요청의 상점(테넌트) 도메인을 확인합니다.

    모든 타이머 조회/수정은 이 값으로 범위가 제한되며,
    다른 상점의 타이머에는 접근할 수 없습니다.

    Raises:
        ShopRequiredError: 상점 도메인이 없는 경우 401
        InvalidShopDomainError: *.myshopify.com 형식이 아닌 경우 400
    """
    value = _extract_shop(request, shop)
    if not value:
        raise ShopRequiredError()
    if not _SHOP_DOMAIN_RE.match(value):
        raise InvalidShopDomainError(value)
    return value
