"""Shared fixtures: an in-memory stand-in for the Supabase PostgREST builder."""
import re
from types import SimpleNamespace
from unittest.mock import patch

import pytest

_OR_ITEM_RE = re.compile(r'(\w+)\.ilike\.("(?:[^"\\]|\\.)*"|[^,]*)')


def _column_value(row, column):
    if "->>" in column:
        parent, key = column.split("->>", 1)
        value = (row.get(parent) or {}).get(key)
        return None if value is None else str(value)
    return row.get(column)


def _like_matches(value, pattern):
    if value is None:
        return False
    regex = "".join(
        ".*" if ch == "%" else "." if ch == "_" else re.escape(ch) for ch in pattern
    )
    return re.fullmatch(regex, str(value), re.IGNORECASE | re.DOTALL) is not None


def _unquote(value):
    if len(value) >= 2 and value[0] == value[-1] == '"':
        return re.sub(r"\\(.)", r"\1", value[1:-1])
    return value


class FakeQuery:
    """Evaluates the subset of PostgREST filters the service uses."""

    def __init__(self, client, table, columns, count=None, head=False):
        self.client = client
        self.table = table
        self.columns = columns
        self.count = count
        self.head = head
        self.calls = []
        self._filters = []
        self._orders = []
        self._range = None
        self._limit = None

    def _filter(self, name, column, value, fn):
        self.calls.append((name, column, value))
        self._filters.append(fn)
        return self

    def eq(self, column, value):
        return self._filter("eq", column, value, lambda r: _column_value(r, column) == value)

    def gte(self, column, value):
        def fn(r):
            v = _column_value(r, column)
            return v is not None and v >= value

        return self._filter("gte", column, value, fn)

    def lte(self, column, value):
        def fn(r):
            v = _column_value(r, column)
            return v is not None and v <= value

        return self._filter("lte", column, value, fn)

    def ilike(self, column, pattern):
        return self._filter(
            "ilike", column, pattern, lambda r: _like_matches(_column_value(r, column), pattern)
        )

    def or_(self, filters):
        items = [(col, _unquote(pat)) for col, pat in _OR_ITEM_RE.findall(filters)]
        return self._filter(
            "or_", "", filters,
            lambda r: any(_like_matches(_column_value(r, col), pat) for col, pat in items),
        )

    def order(self, column, desc=False):
        self.calls.append(("order", column, desc))
        self._orders.append((column, desc))
        return self

    def range(self, start, end):
        self.calls.append(("range", start, end))
        self._range = (start, end)
        return self

    def limit(self, size):
        self.calls.append(("limit", size, None))
        self._limit = size
        return self

    def execute(self):
        if self.head and self.client.fail_count:
            raise RuntimeError("count query failed")
        if not self.head and self.client.fail_data:
            raise RuntimeError("connection reset by peer")

        rows = [r for r in self.client.rows if all(fn(r) for fn in self._filters)]
        # Postgres default: NULLS LAST ascending, NULLS FIRST descending.
        for column, desc in reversed(self._orders):
            rows.sort(key=lambda r: (r.get(column) is None, r.get(column)), reverse=desc)
        total = len(rows)
        if self._range is not None:
            rows = rows[self._range[0] : self._range[1] + 1]
        if self._limit is not None:
            rows = rows[: self._limit]
        return SimpleNamespace(
            data=[] if self.head else [dict(r) for r in rows],
            count=total if self.count else None,
        )


class FakeTable:
    def __init__(self, client, name):
        self.client = client
        self.name = name

    def select(self, *columns, count=None, head=None):
        query = FakeQuery(self.client, self.name, columns, count=count, head=bool(head))
        self.client.queries.append(query)
        return query


class FakeAuth:
    def __init__(self, tokens):
        self.tokens = tokens

    def get_user(self, token):
        if token not in self.tokens:
            raise RuntimeError("invalid JWT")
        return SimpleNamespace(user=SimpleNamespace(id=self.tokens[token]))


class FakeSupabase:
    def __init__(self, rows):
        self.rows = rows
        self.queries = []
        self.tables = []
        self.fail_data = False
        self.fail_count = False
        self.auth = FakeAuth({"sponsor-token": "sponsor-1", "investor-token": "investor-1"})

    def table(self, name):
        self.tables.append(name)
        return FakeTable(self, name)

    @property
    def data_queries(self):
        return [q for q in self.queries if not q.head]

    @property
    def count_queries(self):
        return [q for q in self.queries if q.head]


def make_opportunity(n, **overrides):
    row = {
        "id": f"opp-{n}",
        "opportunity_name": f"Opportunity {n}",
        "opportunity_description": "Stabilized asset with upside",
        "property_type": "multifamily",
        "investment_strategy": "core_plus",
        "total_project_cost": 2_000_000,
        "equity_requirement": 500_000,
        "minimum_investment": 25_000,
        "maximum_investment": 250_000,
        "projected_irr": 0.12,
        "property_address": {"street": f"{n} Main St", "city": "Austin", "state": "TX",
                             "zip": "78701", "country": "US"},
        "business_plan": "Hold and lease",
        "value_creation_strategy": "Unit renovations",
        "public_listing": True,
        "featured_listing": False,
        "accredited_only": True,
        "status": "active",
        "created_at": f"2025-01-{n:02d}T12:00:00+00:00",
        "updated_at": f"2025-01-{n:02d}T12:00:00+00:00",
        "sponsor_id": "sponsor-1",
    }
    row.update(overrides)
    return row


@pytest.fixture
def opportunity_rows():
    rows = [make_opportunity(n) for n in range(1, 13)]
    rows[2].update(featured_listing=True)
    rows[7].update(featured_listing=True)
    rows[0].update(
        opportunity_name="Downtown Office Tower",
        property_type="office",
        investment_strategy="value_add",
        minimum_investment=50_000,
        projected_irr=0.18,
        property_address={"city": "New York", "state": "NY"},
    )
    rows[4].update(
        opportunity_description="Conversion of a vacant OFFICE block into lofts",
        minimum_investment=100_000,
        projected_irr=0.21,
        property_address={"city": "Brooklyn", "state": "NY"},
    )
    rows[5].update(business_plan="Lease-up of a suburban office park", minimum_investment=10_000)
    rows.extend(
        [
            make_opportunity(20, opportunity_name="Private Office Deal", public_listing=False),
            make_opportunity(21, opportunity_name="Draft Office Deal", status="draft"),
            make_opportunity(22, opportunity_name="Funded Office Deal", status="closed"),
            make_opportunity(23, opportunity_name="Cancelled Deal", status="archived",
                             sponsor_id="sponsor-2"),
            make_opportunity(24, opportunity_name="Sponsor Draft", status="draft",
                             sponsor_id="sponsor-2", featured_listing=True),
        ]
    )
    return rows


@pytest.fixture
def fake_supabase(opportunity_rows):
    client = FakeSupabase(opportunity_rows)
    with patch("app.services.opportunity_service.get_supabase", return_value=client), \
         patch("app.api.deps.get_supabase", return_value=client):
        yield client
