from datetime import datetime, timedelta, timezone

import pytest
from pydantic import ValidationError

from timerapi.schemas.timer import (
    TargetType,
    TimerCreate,
    TimerCustomization,
    TimerKind,
    TimerStatus,
    TimerUpdate,
)

START = datetime(2024, 6, 15, tzinfo=timezone.utc)
END = datetime(2024, 6, 16, tzinfo=timezone.utc)


class TestTimerCreate:
    """타이머 생성 요청 검증 테스트"""

    def test_fixed_defaults(self):
        # Act
        payload = TimerCreate(
            name="Sale", kind="fixed", start_date=START, end_date=END
        )

        # Assert
        assert payload.status == TimerStatus.DRAFT
        assert payload.target_type == TargetType.ALL
        assert payload.priority == 0
        assert payload.customization.background_color == "#ff0000"
        assert payload.customization.message == "Hurry! Sale ends in"

    def test_fixed_requires_end_after_start(self):
        with pytest.raises(ValidationError):
            TimerCreate(name="Sale", kind="fixed", start_date=END, end_date=START)

    def test_fixed_requires_dates(self):
        with pytest.raises(ValidationError):
            TimerCreate(name="Sale", kind="fixed", start_date=START)

    def test_evergreen_requires_duration_in_range(self):
        with pytest.raises(ValidationError):
            TimerCreate(name="Offer", kind="evergreen")
        with pytest.raises(ValidationError):
            TimerCreate(name="Offer", kind="evergreen", duration_seconds=30)
        with pytest.raises(ValidationError):
            TimerCreate(name="Offer", kind="evergreen", duration_seconds=86401)

    def test_evergreen_rejects_dates(self):
        with pytest.raises(ValidationError):
            TimerCreate(
                name="Offer", kind="evergreen", duration_seconds=600, start_date=START
            )

    def test_targeted_timer_requires_ids(self):
        with pytest.raises(ValidationError):
            TimerCreate(
                name="Sale",
                kind="fixed",
                start_date=START,
                end_date=END,
                target_type="products",
            )

    def test_all_target_clears_ids(self):
        # Act
        payload = TimerCreate(
            name="Sale",
            kind="fixed",
            start_date=START,
            end_date=END,
            target_type="all",
            target_ids=["42"],
        )

        # Assert
        assert payload.target_ids == []

    def test_priority_bounds(self):
        with pytest.raises(ValidationError):
            TimerCreate(
                name="Sale", kind="fixed", start_date=START, end_date=END, priority=101
            )

    def test_html_is_stripped_from_text(self):
        # Act
        payload = TimerCreate(
            name="<script>x</script>Sale",
            kind=TimerKind.FIXED,
            start_date=START,
            end_date=END,
            customization={"title": "<b>Hot</b> deal"},
        )

        # Assert
        assert payload.name == "xSale"
        assert payload.customization.title == "Hot deal"

    def test_naive_dates_become_utc(self):
        # Act
        payload = TimerCreate(
            name="Sale",
            kind="fixed",
            start_date=datetime(2024, 6, 15),
            end_date=datetime(2024, 6, 16),
        )

        # Assert
        assert payload.start_date == START
        assert payload.start_date.tzinfo is not None


class TestTimerCustomization:
    @pytest.mark.parametrize("color", ["#fff", "#A1B2C3"])
    def test_valid_colors(self, color):
        assert TimerCustomization(background_color=color).background_color == color

    @pytest.mark.parametrize("color", ["red", "#12345", "ff0000"])
    def test_invalid_colors(self, color):
        with pytest.raises(ValidationError):
            TimerCustomization(background_color=color)

    def test_invalid_urgency_notification(self):
        with pytest.raises(ValidationError):
            TimerCustomization(urgency_notification="shake")


class TestTimerUpdate:
    def test_requires_at_least_one_field(self):
        with pytest.raises(ValidationError):
            TimerUpdate()

    def test_tracks_only_sent_fields(self):
        # Act
        payload = TimerUpdate(priority=3)

        # Assert
        assert payload.model_dump(exclude_unset=True) == {"priority": 3}
        assert payload.end_date is None
        assert payload.model_fields_set == {"priority"}
