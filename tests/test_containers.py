from timerapi.containers import Container, RepositoryModule, ServiceModule
from timerapi.database.connection import SessionLocal
from timerapi.services.impression_service import ImpressionRecorder
from timerapi.services.timer_scheduler import TimerScheduler


class TestContainer:
    """애플리케이션 컨테이너 구성 테스트"""

    def test_background_components_are_singletons(self):
        # Arrange
        container = Container()

        # Act
        scheduler = container.services.timer_scheduler()
        recorder = container.services.impression_recorder()

        # Assert
        assert isinstance(scheduler, TimerScheduler)
        assert isinstance(recorder, ImpressionRecorder)
        assert scheduler is container.services.timer_scheduler()
        assert recorder is container.services.impression_recorder()
        assert scheduler.session_factory is SessionLocal
        assert recorder.session_factory is SessionLocal
        assert scheduler.interval_minutes == container.config.config().SCHEDULER_INTERVAL_MINUTES

    def test_only_injected_providers_are_registered(self):
        # Act
        service_providers = set(ServiceModule.providers)
        repository_providers = set(RepositoryModule.providers)

        # Assert
        assert service_providers == {
            "config",
            "repositories",
            "timer_service",
            "impression_recorder",
            "timer_scheduler",
        }
        assert repository_providers == {"get_db", "session_factory"}
