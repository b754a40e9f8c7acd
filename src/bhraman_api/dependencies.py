"""FastAPI dependency injection providers for domain services.

The DatabasePool is created by the application factory and stored on
``app.state.db_pool``. Every service is built per request around the
pool's connected DynamoDBService, so nothing here is a module-level
singleton.

Usage in routes:
    from bhraman_api.dependencies import get_booking_service

    @router.get("/bookings")
    def list_bookings(service: BookingService = Depends(get_booking_service)):
        ...

Service Dependency Graph:
    DatabasePool (app.state.db_pool)
        └── DynamoDBService
                ├── UserDirectory
                │       └── AuthorizationGate
                ├── PackageCatalog
                │       └── BookingService
                │               └── DashboardService
                └── HomeConfigService

Testing:
    Build the app with create_app(pool=...) or override get_db.
"""

from fastapi import Depends, Request

from bhraman.services.authorization import AuthorizationGate
from bhraman.services.bookings import BookingService
from bhraman.services.dashboard import DashboardService
from bhraman.services.dynamodb import DatabasePool, DynamoDBService
from bhraman.services.home_config import HomeConfigService
from bhraman.services.packages import PackageCatalog
from bhraman.services.users import UserDirectory


def get_db_pool(request: Request) -> DatabasePool:
    """The pool owned by the running application."""
    pool: DatabasePool = request.app.state.db_pool
    return pool


def get_db(pool: DatabasePool = Depends(get_db_pool)) -> DynamoDBService:
    """Connected DynamoDB service; raises DATABASE_UNAVAILABLE on failure."""
    return pool.connect()


def get_user_directory(db: DynamoDBService = Depends(get_db)) -> UserDirectory:
    return UserDirectory(db=db)


def get_authorization_gate(
    users: UserDirectory = Depends(get_user_directory),
) -> AuthorizationGate:
    return AuthorizationGate(users=users)


def get_package_catalog(db: DynamoDBService = Depends(get_db)) -> PackageCatalog:
    return PackageCatalog(db=db)


def get_booking_service(
    db: DynamoDBService = Depends(get_db),
    catalog: PackageCatalog = Depends(get_package_catalog),
) -> BookingService:
    return BookingService(db=db, catalog=catalog)


def get_home_config_service(db: DynamoDBService = Depends(get_db)) -> HomeConfigService:
    return HomeConfigService(db=db)


def get_dashboard_service(
    db: DynamoDBService = Depends(get_db),
    bookings: BookingService = Depends(get_booking_service),
) -> DashboardService:
    return DashboardService(db=db, bookings=bookings)
