from pathlib import Path

from alembic import command
from alembic.config import Config
from sqlalchemy import create_engine, inspect

PROJECT_ROOT = Path(__file__).resolve().parents[1]


def _alembic_config() -> Config:
    config = Config(str(PROJECT_ROOT / "alembic.ini"))
    config.set_main_option("script_location", str(PROJECT_ROOT / "alembic"))
    config.attributes["configure_logger"] = False
    return config


def test_upgrade_and_downgrade(tmp_path, monkeypatch):
    db_path = tmp_path / "migrated.db"
    monkeypatch.setenv("SHOP_ADMIN_DB_PATH", str(db_path))
    config = _alembic_config()

    command.upgrade(config, "head")

    engine = create_engine(f"sqlite:///{db_path}")
    inspector = inspect(engine)
    assert {"useraccount", "product", "orders", "payment"} <= set(inspector.get_table_names())
    email_indexes = [ix for ix in inspector.get_indexes("useraccount") if ix["column_names"] == ["email"]]
    assert email_indexes and email_indexes[0]["unique"]
    order_columns = {column["name"] for column in inspector.get_columns("orders")}
    assert {"user_id", "customer_info", "items", "payment_status", "tracking_number"} <= order_columns
    engine.dispose()

    command.downgrade(config, "base")

    engine = create_engine(f"sqlite:///{db_path}")
    assert set(inspect(engine).get_table_names()) <= {"alembic_version"}
    engine.dispose()
