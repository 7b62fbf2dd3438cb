from __future__ import annotations

from attendify.database.bootstrap import apply_schema, list_tables
from attendify.database.connection import DBConfig, DatabaseConnection
from attendify.main import load_settings


def main() -> None:
    settings = load_settings()
    conn = DatabaseConnection(DBConfig(url=settings.DATABASE_URL, pool=dict(settings.DB_POOL)))
    try:
        apply_schema(conn)
        tables = list_tables(conn)
    finally:
        conn.dispose()

    print(f"OK: Applied schema -> {conn.describe()} (tables={len(tables)})")


if __name__ == "__main__":
    main()
