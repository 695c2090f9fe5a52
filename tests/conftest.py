import os

os.environ["SHOP_ADMIN_DATABASE_URL"] = "sqlite://"
os.environ["SHOP_ADMIN_RUN_MIGRATIONS_ON_STARTUP"] = "false"
os.environ["SHOP_ADMIN_ADMIN_TOKEN"] = "test-token"

import pytest  # noqa: E402
from sqlalchemy import create_engine  # noqa: E402
from sqlalchemy.orm import sessionmaker  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from shop_admin import models  # noqa: E402,F401
from shop_admin.core.database import Base  # noqa: E402
from shop_admin.services.order_admin_service import OrderLifecycleManager  # noqa: E402
from shop_admin.services.payment_gateway import EpayGatewayClient  # noqa: E402
from shop_admin.services.view_events import RecentInvalidations, ViewInvalidationNotifier  # noqa: E402

from factories import allow_all  # noqa: E402


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
        future=True,
    )
    Base.metadata.create_all(engine)
    try:
        yield engine
    finally:
        engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(bind=engine, autoflush=False, autocommit=False, future=True)


@pytest.fixture
def invalidations():
    return RecentInvalidations()


@pytest.fixture
def notifier(invalidations):
    notifier = ViewInvalidationNotifier()
    notifier.subscribe(invalidations)
    return notifier


@pytest.fixture
def gateway():
    return EpayGatewayClient(None, None)


@pytest.fixture
def manager(session_factory, notifier, gateway):
    return OrderLifecycleManager(
        session_factory,
        authorize=allow_all,
        notifier=notifier,
        gateway=gateway,
    )


@pytest.fixture
def seed(session_factory):
    """Insert rows in one committed transaction."""

    def _seed(*rows):
        with session_factory.begin() as session:
            session.add_all(rows)

    return _seed
