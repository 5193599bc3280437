# src/storage/schema.py
"""
Схема таблицы geodata и набор индексов.

Таблица только пополняется (append-only), поэтому по created_at
помимо B-tree строится BRIN индекс для запросов по диапазону времени.
"""

from src.common.constants import GEODATA_TABLE

# Колонки атрибутов в порядке вставки: (имя, SQL тип)
GEODATA_COLUMNS: tuple[tuple[str, str], ...] = (
    ("hostname", "VARCHAR(100)"),
    ("country", "VARCHAR(100)"),
    ("country_code", "VARCHAR(10)"),
    ("region", "VARCHAR(10)"),
    ("region_name", "VARCHAR(100)"),
    ("city", "VARCHAR(100)"),
    ("zip", "VARCHAR(20)"),
    ("lat", "DOUBLE PRECISION"),
    ("lon", "DOUBLE PRECISION"),
    ("timezone", "VARCHAR(100)"),
    ("isp", "VARCHAR(255)"),
    ("org", "VARCHAR(255)"),
    ("as_info", "VARCHAR(255)"),
)

CREATE_TABLE_SQL = f"""
    CREATE TABLE IF NOT EXISTS {GEODATA_TABLE} (
        id BIGSERIAL PRIMARY KEY,
        {", ".join(f"{name} {sql_type}" for name, sql_type in GEODATA_COLUMNS)},
        created_at TIMESTAMPTZ NOT NULL DEFAULT NOW()
    )
"""

# Добавляет колонки, появившиеся после создания таблицы
ADD_COLUMNS_SQL: tuple[str, ...] = tuple(
    f"ALTER TABLE {GEODATA_TABLE} ADD COLUMN IF NOT EXISTS {name} {sql_type}"
    for name, sql_type in GEODATA_COLUMNS
) + (
    f"ALTER TABLE {GEODATA_TABLE} ADD COLUMN IF NOT EXISTS created_at TIMESTAMPTZ NOT NULL DEFAULT NOW()",
)

# Одноколоночные индексы под фильтры по отдельным атрибутам
SINGLE_COLUMN_INDEXES: tuple[str, ...] = (
    "hostname",
    "country",
    "country_code",
    "region",
    "city",
    "zip",
    "timezone",
    "isp",
    "org",
    "created_at",
)

# Имя индекса -> выражение (USING ... (колонки))
COMPOSITE_INDEXES: dict[str, str] = {
    "idx_country_city": "(country, city)",
    "idx_coordinates": "(lat, lon)",
    # ISP в пределах страны
    "idx_isp_country": "(isp, country)",
    # Страна -> регион -> город
    "idx_geo_location": "(country, region, city)",
    "idx_created_at_brin": "USING BRIN (created_at)",
    # Под будущие запросы по близости координат
    "idx_lat_lon_gist": "USING GIST (point(lat, lon))",
}


def index_statements() -> list[str]:
    """Возвращает идемпотентные CREATE INDEX для всех индексов таблицы."""
    statements = [
        f"CREATE INDEX IF NOT EXISTS idx_{column} ON {GEODATA_TABLE} ({column})"
        for column in SINGLE_COLUMN_INDEXES
    ]
    statements.extend(
        f"CREATE INDEX IF NOT EXISTS {name} ON {GEODATA_TABLE} {expression}"
        for name, expression in COMPOSITE_INDEXES.items()
    )
    return statements


ANALYZE_SQL = f"ANALYZE {GEODATA_TABLE}"

INSERT_SQL = f"""
    INSERT INTO {GEODATA_TABLE} ({", ".join(name for name, _ in GEODATA_COLUMNS)})
    VALUES ({", ".join(f"${i}" for i in range(1, len(GEODATA_COLUMNS) + 1))})
    RETURNING id, created_at
"""

# Произвольный ключ advisory lock для миграции
MIGRATION_LOCK_ID = 742031906
