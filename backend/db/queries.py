"""
Read-only queries against the dealer database.

Inventory comes from the `unit.get_inventory` stored procedure; its
positional parameters are:

    inventory_id, status[], location[], year, rep, manufacturer, make,
    sub_make, model, production_zone, vin, motor_vin, stocknumber,
    include_transport, include_created_by, include_retail_customer,
    include_characteristic_data
"""

from typing import Dict, List, Optional, Sequence

from sqlalchemy import Float, Integer, case, cast, func, null, select, text
from sqlalchemy.ext.asyncio import AsyncSession

from core.config import settings
from db.location import LocationDetail, UnitClass

IN_INVENTORY_STATUS = 8
NUMERIC_TEXT = r"^[0-9.\-]+$"

INVENTORY_SQL = """
    SELECT * FROM unit.get_inventory(
        NULL,
        CAST(:status AS INTEGER[]),
        CAST(:location_ids AS INTEGER[]),
        NULL, NULL, NULL, NULL, NULL, NULL, NULL, NULL, NULL, NULL,
        FALSE,
        FALSE,
        FALSE,
        TRUE
    )
    WHERE condition = 'New'
    {class_filter}
    ORDER BY year DESC, manufacturer, make, model
"""


def _display_storename():
    return case(
        (LocationDetail.storename == "RVFix", "Corp"),
        else_=LocationDetail.storename,
    ).label("storename")


def _numeric_or_null(column, label: str):
    return case(
        (column.op("~")(NUMERIC_TEXT), cast(column, Float)),
        else_=null(),
    ).label(label)


def _visible_locations(stmt):
    return stmt.where(LocationDetail.location.notin_(settings.excluded_location_codes)).order_by(
        LocationDetail.location.asc()
    )


async def fetch_locations(db: AsyncSession) -> List[Dict]:
    stmt = _visible_locations(
        select(
            cast(LocationDetail.cmf, Integer).label("cmf"),
            LocationDetail.location,
            _display_storename(),
            func.substring(LocationDetail.address, r"\d{5}$").label("zipcode"),
            _numeric_or_null(LocationDetail.lat, "latitude"),
            _numeric_or_null(LocationDetail.lon, "longitude"),
        )
    )
    result = await db.execute(stmt)
    return [dict(row) for row in result.mappings().all()]


async def fetch_location_addresses(db: AsyncSession) -> List[Dict]:
    stmt = _visible_locations(
        select(
            cast(LocationDetail.cmf, Integer).label("cmf"),
            LocationDetail.location,
            _display_storename(),
            LocationDetail.address1,
            LocationDetail.address2,
            LocationDetail.city,
            LocationDetail.state,
            LocationDetail.zipcode,
            LocationDetail.country,
        )
    )
    result = await db.execute(stmt)
    return [dict(row) for row in result.mappings().all()]


async def fetch_unit_classes(db: AsyncSession) -> List[Dict]:
    result = await db.execute(select(UnitClass).order_by(UnitClass.class_.asc()))
    return [uc.to_schema for uc in result.scalars().all()]


async def fetch_inventory(
    db: AsyncSession,
    location_ids: Sequence[int],
    class_names: Optional[Sequence[str]] = None,
) -> List[Dict]:
    params = {"status": [IN_INVENTORY_STATUS], "location_ids": list(location_ids)}
    class_filter = ""
    if class_names:
        class_filter = "AND class = ANY(CAST(:class_names AS VARCHAR[]))"
        params["class_names"] = list(class_names)

    result = await db.execute(text(INVENTORY_SQL.format(class_filter=class_filter)), params)
    return [dict(row) for row in result.mappings().all()]


EXPLORE_QUERIES = {
    "cmfTables": """
        SELECT table_schema, table_name, table_type
        FROM information_schema.tables
        WHERE table_name ILIKE '%cmf%'
          AND table_schema NOT IN ('pg_catalog', 'information_schema')
        ORDER BY table_schema, table_name
    """,
    "locationDetailColumns": """
        SELECT column_name, data_type, character_maximum_length
        FROM information_schema.columns
        WHERE table_name = 'location_detail'
        ORDER BY ordinal_position
    """,
    "tablesWithAddressColumns": """
        SELECT DISTINCT table_name, column_name, data_type
        FROM information_schema.columns
        WHERE table_schema = 'public'
          AND (column_name ILIKE '%zip%' OR column_name ILIKE '%postal%' OR column_name ILIKE '%address%')
        ORDER BY table_name, column_name
    """,
    "cmfForeignKeys": """
        SELECT tc.table_name, kcu.column_name,
               ccu.table_name AS foreign_table_name, ccu.column_name AS foreign_column_name
        FROM information_schema.table_constraints AS tc
        JOIN information_schema.key_column_usage AS kcu ON tc.constraint_name = kcu.constraint_name
        JOIN information_schema.constraint_column_usage AS ccu ON ccu.constraint_name = tc.constraint_name
        WHERE tc.constraint_type = 'FOREIGN KEY'
          AND (kcu.column_name ILIKE '%cmf%' OR ccu.column_name ILIKE '%cmf%')
        ORDER BY tc.table_name
    """,
}

EXPLORE_SINGLE_ROW_QUERIES = {
    "sampleLocationData": """
        SELECT * FROM location_detail
        WHERE location NOT IN ('GMI', 'POC', 'COR')
        LIMIT 1
    """,
    "sampleInventoryCMF": """
        SELECT cmf_id, location, stocknumber
        FROM unit.get_inventory(
            NULL, ARRAY[8]::INTEGER[], NULL, NULL, NULL, NULL, NULL, NULL, NULL,
            NULL, NULL, NULL, NULL, FALSE, FALSE, FALSE, TRUE
        )
        WHERE cmf_id IS NOT NULL
        LIMIT 1
    """,
}


async def explore_cmf(db: AsyncSession) -> Dict:
    """Introspect where CMF ids and addresses live in the database."""
    results: Dict = {}
    for key, sql in EXPLORE_QUERIES.items():
        rows = (await db.execute(text(sql))).mappings().all()
        results[key] = [dict(r) for r in rows]
    for key, sql in EXPLORE_SINGLE_ROW_QUERIES.items():
        row = (await db.execute(text(sql))).mappings().first()
        results[key] = dict(row) if row else None
    return results
