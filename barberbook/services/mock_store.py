from __future__ import annotations

import copy
import itertools
from collections import defaultdict
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, DefaultDict, Dict, Iterable, List, Optional, Sequence, Tuple

from barberbook.clients.supabase import SUPPORTED_OPERATORS, Filter, Row
from barberbook.services.exceptions import DownstreamServiceError

DEMO_SHOP_ID = "shop-demo"
DEMO_SHOP_SLUG = "barbearia-central"
DEMO_OWNER_USER_ID = "user-owner-demo"
DEMO_STAFF_USER_ID = "user-staff-demo"
DEMO_MASTER_USER_ID = "user-master-demo"
DEMO_BARBER_IDS = ("barber-joao", "barber-pedro")
DEMO_SERVICE_IDS = ("svc-corte", "svc-barba", "svc-combo")

_ID_PREFIXES = {
    "barbershop_settings": "shop",
    "barbershop_members": "mbr",
    "master_admins": "adm",
    "barbers": "barber",
    "services": "svc",
    "availability": "avl",
    "clients": "cli",
    "appointments": "apt",
    "payments": "pay",
}

# Unique column sets enforced on insert/upsert, mirroring the database constraints.
_UNIQUE_KEYS: Dict[str, Tuple[Tuple[str, ...], ...]] = {
    "barbershop_settings": (("slug",),),
    "availability": (("barbershop_id", "day_of_week"),),
    "master_admins": (("user_id",),),
}


def _utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def _matches(row: Row, filters: Sequence[Filter]) -> bool:
    for column, operator, value in filters:
        if operator not in SUPPORTED_OPERATORS:
            raise ValueError(f"Unsupported filter operator: {operator!r}")
        current = row.get(column)
        if operator == "eq" and current != value:
            return False
        if operator == "neq" and current == value:
            return False
        if operator == "in" and current not in list(value):
            return False
        if operator == "is" and current is not value:
            return False
        if operator in {"gt", "gte", "lt", "lte"}:
            if current is None:
                return False
            if operator == "gt" and not current > value:
                return False
            if operator == "gte" and not current >= value:
                return False
            if operator == "lt" and not current < value:
                return False
            if operator == "lte" and not current <= value:
                return False
    return True


def _sort_rows(rows: List[Row], order: Sequence[str]) -> List[Row]:
    # Stable sorts applied from the least significant key backwards.
    for clause in reversed(list(order)):
        column, _, direction = clause.partition(".")
        descending = direction.startswith("desc")
        rows.sort(
            key=lambda row: (row.get(column) is None, row.get(column)),
            reverse=descending,
        )
    return rows


class InMemoryTables:
    """Dictionary backed implementation of the table gateway."""

    def __init__(self) -> None:
        self._tables: DefaultDict[str, Dict[str, Row]] = defaultdict(dict)
        self._counters: DefaultDict[str, itertools.count] = defaultdict(
            lambda: itertools.count(1)
        )

    def _next_id(self, table: str) -> str:
        prefix = _ID_PREFIXES.get(table, table)
        return f"{prefix}-{next(self._counters[table]):05d}"

    def _find_conflict(self, table: str, row: Row, keys: Tuple[str, ...]) -> Optional[Row]:
        for existing in self._tables[table].values():
            if existing.get("id") == row.get("id"):
                continue
            if all(existing.get(key) == row.get(key) for key in keys):
                return existing
        return None

    def _check_unique(self, table: str, row: Row) -> None:
        for keys in _UNIQUE_KEYS.get(table, ()):
            if self._find_conflict(table, row, keys) is not None:
                raise DownstreamServiceError(
                    f"Duplicate value for {table} ({', '.join(keys)})",
                    status_code=409,
                )

    def _store(self, table: str, row: Row) -> Row:
        record = copy.deepcopy(row)
        record.setdefault("id", self._next_id(table))
        record.setdefault("created_at", _utc_now_iso())
        self._check_unique(table, record)
        self._tables[table][record["id"]] = record
        return copy.deepcopy(record)

    async def select(
        self,
        table: str,
        *,
        filters: Sequence[Filter] = (),
        order: Sequence[str] = (),
        limit: int | None = None,
    ) -> List[Row]:
        rows = [
            copy.deepcopy(row)
            for row in self._tables[table].values()
            if _matches(row, filters)
        ]
        rows = _sort_rows(rows, order)
        if limit is not None:
            rows = rows[:limit]
        return rows

    async def insert(self, table: str, rows: Row | List[Row]) -> List[Row]:
        batch = rows if isinstance(rows, list) else [rows]
        return [self._store(table, row) for row in batch]

    async def update(
        self, table: str, values: Row, *, filters: Sequence[Filter]
    ) -> List[Row]:
        if not filters:
            raise ValueError("Refusing to update without filters")
        updated: List[Row] = []
        for row_id, row in list(self._tables[table].items()):
            if not _matches(row, filters):
                continue
            candidate = {**row, **copy.deepcopy(values), "id": row_id}
            self._check_unique(table, candidate)
            self._tables[table][row_id] = candidate
            updated.append(copy.deepcopy(candidate))
        return updated

    async def upsert(
        self, table: str, rows: Row | List[Row], *, on_conflict: str
    ) -> List[Row]:
        keys = tuple(column.strip() for column in on_conflict.split(",") if column.strip())
        batch = rows if isinstance(rows, list) else [rows]
        results: List[Row] = []
        for row in batch:
            existing = self._find_conflict(table, row, keys)
            if existing is None:
                results.append(self._store(table, row))
                continue
            merged = {**existing, **copy.deepcopy(row), "id": existing["id"]}
            self._tables[table][existing["id"]] = merged
            results.append(copy.deepcopy(merged))
        return results

    async def delete(self, table: str, *, filters: Sequence[Filter]) -> List[Row]:
        if not filters:
            raise ValueError("Refusing to delete without filters")
        removed: List[Row] = []
        for row_id, row in list(self._tables[table].items()):
            if _matches(row, filters):
                removed.append(self._tables[table].pop(row_id))
        return removed

    def rows(self, table: str) -> List[Row]:
        return [copy.deepcopy(row) for row in self._tables[table].values()]

    def seed(self, table: str, rows: Iterable[Row]) -> None:
        for row in rows:
            self._store(table, row)


def _seed_demo_shop(tables: InMemoryTables) -> None:
    tables.seed(
        "barbershop_settings",
        [
            {
                "id": DEMO_SHOP_ID,
                "name": "Barbearia Central",
                "slug": DEMO_SHOP_SLUG,
                "description": "Cortes clássicos e barba na régua",
                "logo_url": "barbearia-central/logo.png",
                "hero_background_url": None,
                "is_active": True,
                "updated_at": "2026-01-10T12:00:00+00:00",
            }
        ],
    )
    tables.seed("master_admins", [{"id": "adm-demo", "user_id": DEMO_MASTER_USER_ID}])

    joao, pedro = DEMO_BARBER_IDS
    tables.seed(
        "barbers",
        [
            {
                "id": joao,
                "barbershop_id": DEMO_SHOP_ID,
                "name": "João Silva",
                "email": "joao@central.example",
                "phone": "(11) 98765-0001",
                "specialty": "Degradê",
            },
            {
                "id": pedro,
                "barbershop_id": DEMO_SHOP_ID,
                "name": "Pedro Santos",
                "email": "pedro@central.example",
                "phone": "(11) 98765-0002",
                "specialty": "Barba",
            },
        ],
    )
    tables.seed(
        "barbershop_members",
        [
            {
                "id": "mbr-owner-demo",
                "user_id": DEMO_OWNER_USER_ID,
                "barbershop_id": DEMO_SHOP_ID,
                "role": "owner",
                "barber_id": joao,
            },
            {
                "id": "mbr-staff-demo",
                "user_id": DEMO_STAFF_USER_ID,
                "barbershop_id": DEMO_SHOP_ID,
                "role": "staff",
                "barber_id": pedro,
            },
        ],
    )

    corte, barba, combo = DEMO_SERVICE_IDS
    tables.seed(
        "services",
        [
            {
                "id": corte,
                "barbershop_id": DEMO_SHOP_ID,
                "name": "Corte",
                "duration": 30,
                "price": 45.0,
                "description": "Corte masculino tradicional",
                "is_active": True,
            },
            {
                "id": barba,
                "barbershop_id": DEMO_SHOP_ID,
                "name": "Barba",
                "duration": 20,
                "price": 30.0,
                "description": None,
                "is_active": True,
            },
            {
                "id": combo,
                "barbershop_id": DEMO_SHOP_ID,
                "name": "Corte + Barba",
                "duration": 60,
                "price": 70.0,
                "description": "Combo completo",
                "is_active": True,
            },
        ],
    )

    lunch = [{"start": "12:00", "end": "13:00"}]
    week: List[Dict[str, Any]] = [
        {"day_of_week": 0, "start_time": "09:00", "end_time": "19:00", "is_active": False, "breaks": []}
    ]
    for day in range(1, 6):
        week.append(
            {
                "day_of_week": day,
                "start_time": "09:00",
                "end_time": "19:00",
                "is_active": True,
                "breaks": list(lunch),
            }
        )
    week.append(
        {"day_of_week": 6, "start_time": "09:00", "end_time": "14:00", "is_active": True, "breaks": []}
    )
    tables.seed(
        "availability",
        [{**day, "barbershop_id": DEMO_SHOP_ID} for day in week],
    )


@dataclass
class MockDataStore:
    tables: InMemoryTables


_mock_store: Optional[MockDataStore] = None


def get_mock_store() -> MockDataStore:
    global _mock_store
    if _mock_store is None:
        tables = InMemoryTables()
        _seed_demo_shop(tables)
        _mock_store = MockDataStore(tables=tables)
    return _mock_store


def reset_mock_store() -> None:
    global _mock_store
    _mock_store = None
