from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """Perfil do usuário (controla o que o menu exibe)."""

    MASTER = "DIRETORIA_MASTER"
    ADMIN = "ADMIN"
    OPERATIONAL = "OPERATIONAL"


class EmployeeStatus(str, Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"


class PaymentModality(str, Enum):
    """DIARIA: paid per worked day. CLT: salaried, fixed shift."""

    DIARIA = "DIARIA"
    CLT = "CLT"


class StoredStatus(str, Enum):
    """Coarse attendance status persisted in the backend."""

    PRESENT = "present"
    PARTIAL = "partial"
    ABSENT = "absent"


class VirtualStatus(str, Enum):
    """UI-facing attendance classification derived from the stored row."""

    PRESENT = "present"
    PARTIAL = "partial"
    ABSENT = "absent"
    ATESTADO = "atestado"
    JUSTIFIED = "justified"
    VACATION = "vacation"


class LeaveKind(str, Enum):
    NONE = "none"
    MEDICAL_CERTIFICATE = "medical_certificate"
    JUSTIFIED_ABSENCE = "justified_absence"
    VACATION = "vacation"


class PaymentStatus(str, Enum):
    PENDING = "pendente"
    PAID = "pago"


class AreaStatus(str, Enum):
    EXECUTING = "executing"
    FINISHED = "finished"


class ServiceType(str, Enum):
    VARRICAO_KM = "Varrição (KM)"
    CAPINA_MANUAL_M2 = "C. Manual (m²)"
    ROCADA_MECANIZADA_M2 = "Roçada Meq (m²)"
    ROCADA_TRATOR_M2 = "Roç. c/ Trator (m²)"
    BOCA_DE_LOBO = "Boca de Lobo"
    PINTURA_MEIO_FIO = "Pint. Meio Fio"


class MovementKind(str, Enum):
    ENTRY = "entrada"
    EXIT = "saida"


class Capability(str, Enum):
    PRODUCTION = "production"
    FINANCE = "finance"
    INVENTORY = "inventory"
    EMPLOYEES = "employees"
    ANALYTICS = "analytics"
    AI = "ai"
    MANAGEMENT = "management"
    SETTINGS = "settings"


class Collection(str, Enum):
    """Backend tables the core reads and writes."""

    AREAS = "areas"
    SERVICES = "services"
    EMPLOYEES = "employees"
    ATTENDANCE = "attendance_records"
    INVENTORY = "inventory"
    INVENTORY_MOVEMENTS = "inventory_exits"
    CASH_IN = "cash_in"
    CASH_OUT = "cash_out"
    MONTHLY_GOALS = "monthly_goals"
    COMPANY_SETTINGS = "company_settings"
