"""
방언(dialect)별 INSERT ... ON CONFLICT 헬퍼
- postgresql / sqlite: ON CONFLICT (...) DO NOTHING / DO UPDATE
- mysql / mariadb: INSERT IGNORE / ON DUPLICATE KEY UPDATE
- 값/컬럼은 ORM 속성명(소문자)으로 받고, 내부에서 실제 컬럼(대문자)으로 변환
"""
from typing import Any, Dict, Sequence, Type

from sqlalchemy import inspect
from sqlalchemy.dialects import mysql, postgresql, sqlite
from sqlalchemy.ext.asyncio import AsyncSession


def _dialect_insert(dialect_name: str, model: Type[Any]):
    table = model.__table__
    if dialect_name == "postgresql":
        return postgresql.insert(table)
    if dialect_name == "sqlite":
        return sqlite.insert(table)
    if dialect_name in ("mysql", "mariadb"):
        return mysql.insert(table)
    raise NotImplementedError(f"upsert 를 지원하지 않는 DB 방언입니다: {dialect_name}")


def _to_columns(model: Type[Any], values: Dict[str, Any]) -> Dict[Any, Any]:
    """ORM 속성명 → Column 객체 키로 변환"""
    columns = inspect(model).columns
    return {columns[attr]: value for attr, value in values.items()}


async def insert_or_ignore(
    db: AsyncSession,
    model: Type[Any],
    values: Dict[str, Any],
    conflict_attrs: Sequence[str],
) -> bool:
    """
    충돌(유니크 제약) 시 아무것도 하지 않는 INSERT
    - 반환: 실제로 행이 삽입되었으면 True
    """
    dialect_name = db.get_bind().dialect.name
    columns = inspect(model).columns
    stmt = _dialect_insert(dialect_name, model).values(_to_columns(model, values))
    if dialect_name in ("mysql", "mariadb"):
        stmt = stmt.prefix_with("IGNORE")
    else:
        stmt = stmt.on_conflict_do_nothing(index_elements=[columns[attr] for attr in conflict_attrs])

    result = await db.execute(stmt)
    return (result.rowcount or 0) > 0


async def insert_or_update(
    db: AsyncSession,
    model: Type[Any],
    values: Dict[str, Any],
    conflict_attrs: Sequence[str],
    update_attrs: Sequence[str],
) -> None:
    """
    충돌 시 update_attrs 에 해당하는 값으로 갱신하는 INSERT (upsert)
    """
    dialect_name = db.get_bind().dialect.name
    columns = inspect(model).columns
    insert_values = _to_columns(model, values)
    update_values = {columns[attr]: values[attr] for attr in update_attrs}

    stmt = _dialect_insert(dialect_name, model).values(insert_values)
    if dialect_name in ("mysql", "mariadb"):
        stmt = stmt.on_duplicate_key_update(update_values)
    else:
        stmt = stmt.on_conflict_do_update(
            index_elements=[columns[attr] for attr in conflict_attrs],
            set_=update_values,
        )
    await db.execute(stmt)
