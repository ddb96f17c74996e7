from __future__ import annotations

from decimal import Decimal
from typing import Mapping, Protocol

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchone

_POLICY_COLUMNS = (
    "housing_allowance_pct",
    "transport_allowance_pct",
    "tax_pct",
    "provident_fund_pct",
    "health_insurance_amount",
    "overtime_multiplier",
    "standard_hours_per_day",
    "days_per_month",
)


class PolicyRepository(Protocol):
    def get_overrides(self, organization_id: int) -> Mapping[str, Decimal]:
        """Organization-level policy values; missing/NULL fields are omitted."""

        raise NotImplementedError


class MySQLPolicyRepository(PolicyRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_overrides(self, organization_id: int) -> Mapping[str, Decimal]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {', '.join(_POLICY_COLUMNS)} FROM organization_pay_policies WHERE organization_id=%s",
                (int(organization_id),),
            )
            r = fetchone(cur)
            if not r:
                return {}
            return {k: v for k, v in r.items() if v is not None}
