from dependency_injector import containers, providers

from timerapi.config import Settings
from timerapi.database.connection import SessionLocal
from timerapi.database.session import get_db
from timerapi.services.impression_service import ImpressionRecorder
from timerapi.services.timer_scheduler import TimerScheduler
from timerapi.services.timer_service import TimerService
from timerapi.utils.timezone_utils import SystemClock


class ConfigModule(containers.DeclarativeContainer):
    """Application configuration."""

    config = providers.Singleton(Settings)
    clock = providers.Singleton(SystemClock)


class RepositoryModule(containers.DeclarativeContainer):
    """Database repositories."""

    get_db = providers.Resource(get_db)
    session_factory = providers.Object(SessionLocal)


class ServiceModule(containers.DeclarativeContainer):
    """Service layer dependencies."""

    config = providers.DependenciesContainer()
    repositories = providers.DependenciesContainer()

    timer_service = providers.Factory(
        TimerService, db=repositories.get_db, clock=config.clock
    )
    impression_recorder = providers.Singleton(
        ImpressionRecorder,
        session_factory=repositories.session_factory,
        clock=config.clock,
    )
    timer_scheduler = providers.Singleton(
        TimerScheduler,
        session_factory=repositories.session_factory,
        interval_minutes=config.config.provided.SCHEDULER_INTERVAL_MINUTES,
        clock=config.clock,
    )


class Container(containers.DeclarativeContainer):
    """Application container."""

    wiring_config = containers.WiringConfiguration(
        modules=[
            "timerapi.routers.timer_router",
            "timerapi.routers.public_router",
            "timerapi.routers.analytics_router",
            "timerapi.routers.health_router",
        ],
    )

    config = providers.Container(ConfigModule)
    repositories = providers.Container(RepositoryModule)
    services = providers.Container(
        ServiceModule, config=config, repositories=repositories
    )
