"""MySQL layout of the backend collections.

Columns keep the backend's camelCase names so rows travel unchanged between
the REST and MySQL stores. Dates are ``YYYY-MM-DD`` strings (month filters are
string-prefix matches), clock times are ``HH:MM`` strings.
"""

from __future__ import annotations

from ..core.enums import Collection

_ID = "`id` CHAR(32) NOT NULL PRIMARY KEY"
_COMPANY = "`companyId` VARCHAR(64) NOT NULL"

TABLE_DDL: dict[Collection, list[str]] = {
    Collection.EMPLOYEES: [
        "`name` VARCHAR(160) NOT NULL",
        "`role` VARCHAR(120) NOT NULL",
        "`paymentModality` VARCHAR(10) NOT NULL DEFAULT 'DIARIA'",
        "`defaultValue` DECIMAL(12,2) NOT NULL DEFAULT 0",
        "`status` VARCHAR(10) NOT NULL DEFAULT 'active'",
        "`shiftStart` VARCHAR(8) NULL",
        "`breakStart` VARCHAR(8) NULL",
        "`breakEnd` VARCHAR(8) NULL",
        "`shiftEnd` VARCHAR(8) NULL",
        "`cpf` VARCHAR(20) NULL",
        "`birthDate` VARCHAR(10) NULL",
        "`address` VARCHAR(255) NULL",
        "`phone` VARCHAR(40) NULL",
        "`paymentType` VARCHAR(10) NULL",
        "`pixKey` VARCHAR(120) NULL",
        "`bankAccount` VARCHAR(120) NULL",
    ],
    Collection.ATTENDANCE: [
        "`employeeId` CHAR(32) NOT NULL",
        "`date` VARCHAR(10) NOT NULL",
        "`status` VARCHAR(10) NOT NULL",
        "`value` DECIMAL(12,2) NOT NULL DEFAULT 0",
        "`bonusValue` DECIMAL(12,2) NOT NULL DEFAULT 0",
        "`discountValue` DECIMAL(12,2) NOT NULL DEFAULT 0",
        "`discountObservation` VARCHAR(500) NULL",
        "`paymentStatus` VARCHAR(10) NOT NULL DEFAULT 'pendente'",
        "`clockIn` VARCHAR(8) NULL",
        "`breakStart` VARCHAR(8) NULL",
        "`breakEnd` VARCHAR(8) NULL",
        "`clockOut` VARCHAR(8) NULL",
        "UNIQUE KEY `uq_attendance_day` (`companyId`, `employeeId`, `date`)",
    ],
    Collection.AREAS: [
        "`name` VARCHAR(160) NOT NULL",
        "`startDate` VARCHAR(10) NOT NULL",
        "`endDate` VARCHAR(10) NULL",
        "`startReference` VARCHAR(255) NOT NULL",
        "`endReference` VARCHAR(255) NULL",
        "`observations` TEXT NULL",
        "`responsibleEmployeeId` CHAR(32) NULL",
        "`status` VARCHAR(12) NOT NULL DEFAULT 'executing'",
    ],
    Collection.SERVICES: [
        "`areaId` CHAR(32) NOT NULL",
        "`type` VARCHAR(40) NOT NULL",
        "`areaM2` DECIMAL(14,2) NOT NULL DEFAULT 0",
        "`unitValue` DECIMAL(12,4) NOT NULL DEFAULT 0",
        "`totalValue` DECIMAL(14,2) NOT NULL DEFAULT 0",
        "`serviceDate` VARCHAR(10) NOT NULL",
    ],
    Collection.INVENTORY: [
        "`name` VARCHAR(160) NOT NULL",
        "`category` VARCHAR(60) NOT NULL",
        "`currentQty` DECIMAL(12,2) NOT NULL DEFAULT 0",
        "`minQty` DECIMAL(12,2) NOT NULL DEFAULT 0",
        "`unitValue` DECIMAL(12,2) NOT NULL DEFAULT 0",
    ],
    Collection.INVENTORY_MOVEMENTS: [
        "`itemId` CHAR(32) NOT NULL",
        "`quantity` DECIMAL(12,2) NOT NULL",
        "`date` VARCHAR(10) NOT NULL",
        "`movementType` VARCHAR(10) NULL",
        "`destination` VARCHAR(160) NULL",
        "`observation` VARCHAR(255) NULL",
    ],
    Collection.CASH_IN: [
        "`date` VARCHAR(10) NOT NULL",
        "`value` DECIMAL(14,2) NOT NULL",
        "`type` VARCHAR(80) NULL",
        "`reference` VARCHAR(255) NULL",
    ],
    Collection.CASH_OUT: [
        "`date` VARCHAR(10) NOT NULL",
        "`value` DECIMAL(14,2) NOT NULL",
        "`type` VARCHAR(80) NULL",
        "`reference` VARCHAR(255) NULL",
    ],
    Collection.MONTHLY_GOALS: [
        "`period` CHAR(7) NOT NULL",
        "`production` DECIMAL(14,2) NOT NULL DEFAULT 0",
        "`revenue` DECIMAL(14,2) NOT NULL DEFAULT 0",
        "UNIQUE KEY `uq_goal_period` (`companyId`, `period`)",
    ],
    Collection.COMPANY_SETTINGS: [
        "`serviceRates` TEXT NULL",
        "`financeCategories` TEXT NULL",
        "`inventoryCategories` TEXT NULL",
    ],
}

JSON_COLUMNS = frozenset({"serviceRates", "financeCategories", "inventoryCategories"})


def _column_name(definition: str) -> str | None:
    if not definition.startswith("`"):
        return None
    return definition.split("`")[1]


TABLE_COLUMNS: dict[Collection, frozenset[str]] = {
    collection: frozenset({"id", "companyId"} | {c for c in map(_column_name, cols) if c})
    for collection, cols in TABLE_DDL.items()
}


def create_table_sql(collection: Collection) -> str:
    body = ",\n  ".join([_ID, _COMPANY, *TABLE_DDL[collection], "KEY `ix_company` (`companyId`)"])
    return f"CREATE TABLE IF NOT EXISTS `{collection.value}` (\n  {body}\n) ENGINE=InnoDB DEFAULT CHARSET=utf8mb4"


SCHEMA_SQL = ";\n\n".join(create_table_sql(c) for c in TABLE_DDL) + ";\n"
