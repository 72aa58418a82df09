# tests/test_migrations.py
"""The Alembic history must build the same schema as the models."""

from sqlalchemy import create_engine, inspect

from talent_connect.db.session import Base
from talent_connect.scripts.migrate import run_upgrade_head


def test_upgrade_head_creates_every_table(tmp_path) -> None:
    url = f"sqlite:///{tmp_path / 'migrated.db'}"
    run_upgrade_head(url)

    engine = create_engine(url)
    try:
        inspector = inspect(engine)
        tables = set(inspector.get_table_names()) - {"alembic_version"}
        assert tables == set(Base.metadata.tables)

        conversation_uniques = {
            tuple(constraint["column_names"])
            for constraint in inspector.get_unique_constraints("conversations")
        }
        conversation_indexes = {
            tuple(index["column_names"])
            for index in inspector.get_indexes("conversations")
            if index.get("unique")
        }
        assert ("pair_key",) in conversation_uniques | conversation_indexes
    finally:
        engine.dispose()
