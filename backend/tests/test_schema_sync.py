from pathlib import Path
from uuid import uuid4

from sqlalchemy import Boolean, Column, Index, Integer, MetaData, String, Table, create_engine, inspect, text

from tutorial_cms.utils.schema_sync import sync_missing_schema_objects


def test_sync_missing_schema_objects_adds_column_index_and_backfills():
    db_path = Path(f"./schema_sync_{uuid4().hex}.db").resolve()
    engine = create_engine(f"sqlite:///{db_path}")

    base_metadata = MetaData()
    Table(
        "scheduled_content",
        base_metadata,
        Column("id", Integer, primary_key=True),
        Column("content_id", String(32), nullable=False),
    )
    base_metadata.create_all(engine)
    with engine.begin() as conn:
        conn.execute(text("INSERT INTO scheduled_content (id, content_id) VALUES (1, 'abc')"))

    target_metadata = MetaData()
    table = Table(
        "scheduled_content",
        target_metadata,
        Column("id", Integer, primary_key=True),
        Column("content_id", String(32), nullable=False),
        Column("executed", Boolean, nullable=True, default=False),
        Column("created_by", Integer, nullable=True),
    )
    Index("idx_scheduled_content_content", table.c.content_id)
    Table("not_created_yet", target_metadata, Column("id", Integer, primary_key=True))

    applied = sync_missing_schema_objects(engine, target_metadata)

    assert applied == [
        "scheduled_content.executed",
        "scheduled_content.created_by",
        "idx_scheduled_content_content",
    ]
    inspector = inspect(engine)
    column_names = {row["name"] for row in inspector.get_columns("scheduled_content")}
    index_names = {row.get("name") for row in inspector.get_indexes("scheduled_content")}
    assert {"executed", "created_by"} <= column_names
    assert "idx_scheduled_content_content" in index_names
    assert "not_created_yet" not in inspector.get_table_names()
    with engine.connect() as conn:
        row = conn.execute(text("SELECT executed, created_by FROM scheduled_content WHERE id = 1")).one()
    assert row[0] == 0
    assert row[1] is None

    assert sync_missing_schema_objects(engine, target_metadata) == []

    engine.dispose()
    if db_path.exists():
        db_path.unlink()
