"""
타이머 타게팅 매칭

상품/컬렉션 컨텍스트에 적용될 수 있는 타이머 후보 중 정확히 하나를 고릅니다.

정렬 기준:
    1) 구체성 (개별 상품 3 > 컬렉션 2 > 전체 상품 1)
    2) priority (높은 값 우선, 같은 구체성 안에서만 의미 있음)
    3) created_at (최근 생성 우선)

세 기준이 모두 같으면 입력 순서를 유지하는 안정 정렬의 첫 번째 항목이 선택됩니다.
"""

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Iterable, List, Optional, Tuple

from timerapi.schemas.timer import TargetType, TimerSchema, TimerStatus
from timerapi.services.timer_status import is_active
from timerapi.utils.timezone_utils import ensure_utc

logger = logging.getLogger(__name__)

SPECIFICITY_PRODUCT = 3
SPECIFICITY_COLLECTION = 2
SPECIFICITY_ALL = 1

# 다시 확인할 가치가 있는 저장 상태 (draft/expired는 조회 단계에서 제외)
CANDIDATE_STATUSES: Tuple[TimerStatus, ...] = (
    TimerStatus.ACTIVE,
    TimerStatus.SCHEDULED,
)


@dataclass(frozen=True)
class TimerMatch:
    timer: TimerSchema
    specificity: int

    @property
    def sort_key(self) -> Tuple[int, int, datetime]:
        return (
            self.specificity,
            self.timer.priority or 0,
            ensure_utc(self.timer.created_at),
        )


def targeting_specificity(
    timer: TimerSchema,
    product_id: Optional[str] = None,
    collection_id: Optional[str] = None,
) -> Optional[int]:
    """타이머가 요청 컨텍스트를 대상으로 하면 구체성 점수를, 아니면 None을 반환합니다."""
    if timer.target_type == TargetType.PRODUCTS:
        if product_id and product_id in timer.target_ids:
            return SPECIFICITY_PRODUCT
        return None

    if timer.target_type == TargetType.COLLECTIONS:
        if collection_id and collection_id in timer.target_ids:
            return SPECIFICITY_COLLECTION
        return None

    if timer.target_type == TargetType.ALL:
        return SPECIFICITY_ALL

    return None


def rank_matches(
    shop: str,
    product_id: Optional[str],
    collection_id: Optional[str],
    timers: Iterable[TimerSchema],
    now: datetime,
) -> List[TimerMatch]:
    """조건에 맞는 타이머를 우선순위 순서로 정렬해 반환합니다."""
    matches: List[TimerMatch] = []
    for timer in timers:
        if timer.shop != shop:
            continue
        if timer.status not in CANDIDATE_STATUSES:
            continue
        if not is_active(timer, now):
            continue

        specificity = targeting_specificity(timer, product_id, collection_id)
        if specificity is None:
            continue
        matches.append(TimerMatch(timer=timer, specificity=specificity))

    # reverse=True도 동일 키의 원래 순서를 보존함
    matches.sort(key=lambda match: match.sort_key, reverse=True)
    return matches


def find_matching_timer(
    shop: str,
    product_id: Optional[str],
    collection_id: Optional[str],
    timers: Iterable[TimerSchema],
    now: datetime,
) -> Optional[TimerSchema]:
    """
    요청 컨텍스트에 노출할 단일 타이머를 선택합니다.

    Args:
        shop: 상점 도메인
        product_id: 상품 ID (선택)
        collection_id: 컬렉션 ID (선택)
        timers: 후보 타이머 목록
        now: 기준 시각

    Returns:
        Optional[TimerSchema]: 선택된 타이머 (없으면 None)
    """
    matches = rank_matches(shop, product_id, collection_id, timers, now)
    if not matches:
        return None

    selected = matches[0].timer
    if len(matches) > 1:
        logger.warning(
            f"[Timer Conflict] {len(matches)} timers match shop={shop} "
            f"product={product_id} collection={collection_id}. "
            f'Selected: "{selected.name}" (id={selected.id}, priority={selected.priority})'
        )
        logger.info(
            "[Timer Conflict] Other matching timers: %s",
            [
                {
                    "id": match.timer.id,
                    "name": match.timer.name,
                    "specificity": match.specificity,
                    "priority": match.timer.priority,
                    "created_at": match.timer.created_at.isoformat(),
                }
                for match in matches[1:]
            ],
        )
    return selected
