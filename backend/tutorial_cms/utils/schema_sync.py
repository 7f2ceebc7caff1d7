"""기존 DB에 모델 메타데이터 기준 누락 컬럼/인덱스를 보충하는 런타임 스키마 동기화 유틸리티."""

from __future__ import annotations

import logging
from typing import List

from sqlalchemy import inspect, text
from sqlalchemy.engine import Engine
from sqlalchemy.schema import Column, CreateColumn, CreateIndex, MetaData

logger = logging.getLogger(__name__)


def _scalar_default(column: Column):
    default = column.default
    if default is None or not getattr(default, "is_scalar", False):
        return None
    return default.arg


def sync_missing_schema_objects(engine: Engine, metadata: MetaData) -> List[str]:
    """누락된 컬럼/인덱스를 추가하고 적용한 변경 목록("table.column", "index명")을 돌려준다.

    새 컬럼에 스칼라 기본값이 있으면 기존 행도 그 값으로 채운다.
    테이블 자체가 없으면 ``create_all``의 몫이므로 건너뛴다.
    """
    inspector = inspect(engine)
    existing_tables = set(inspector.get_table_names())
    preparer = engine.dialect.identifier_preparer
    applied: List[str] = []

    with engine.begin() as conn:
        for table in metadata.sorted_tables:
            if table.name not in existing_tables:
                continue
            table_sql = preparer.format_table(table)

            current_columns = {col["name"] for col in inspector.get_columns(table.name)}
            for column in table.columns:
                if column.name in current_columns:
                    continue
                ddl = str(CreateColumn(column).compile(dialect=engine.dialect)).strip()
                conn.execute(text(f"ALTER TABLE {table_sql} ADD COLUMN {ddl}"))
                default = _scalar_default(column)
                if default is not None:
                    column_sql = preparer.format_column(column)
                    conn.execute(
                        text(f"UPDATE {table_sql} SET {column_sql} = :value WHERE {column_sql} IS NULL"),
                        {"value": default},
                    )
                applied.append(f"{table.name}.{column.name}")

            current_indexes = {idx.get("name") for idx in inspector.get_indexes(table.name)}
            for index in table.indexes:
                if index.name and index.name not in current_indexes:
                    conn.execute(CreateIndex(index))
                    applied.append(index.name)

    if applied:
        logger.info("schema sync applied: %s", ", ".join(applied))
    return applied
