from sqlalchemy import create_engine, inspect

from shop_admin.core.migrations import upgrade_database


def test_upgrade_creates_schema(tmp_path):
    url = f"sqlite:///{tmp_path / 'shop.db'}"

    upgrade_database(url)

    engine = create_engine(url)
    try:
        inspector = inspect(engine)
        tables = set(inspector.get_table_names())
        card_columns = {column["name"] for column in inspector.get_columns("cards")}
    finally:
        engine.dispose()

    assert {"orders", "cards", "login_users", "refund_requests", "alembic_version"} <= tables
    assert {"reserved_order_id", "reserved_at", "is_used"} <= card_columns
