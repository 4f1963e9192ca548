"""Status codec for attendance rows.

The backend has no leave-type column: a record stored as ``absent`` carries
the kind of leave as a 4-character prefix of ``discountObservation``::

    [AT] -> atestado (medical certificate)
    [FJ] -> falta justificada (justified absence)
    [FE] -> férias (vacation)

Inside the package the leave kind is a tagged value (``LeaveKind``); the
prefix only exists in stored rows. A free-text note that itself starts with
one of the reserved tokens is rejected, since it would decode as a leave.
"""

from __future__ import annotations

from typing import Any, Mapping, Optional

from ..core.enums import LeaveKind, StoredStatus, VirtualStatus
from ..core.exceptions import ValidationError

PREFIX_LENGTH = 4

PREFIX_BY_STATUS: dict[VirtualStatus, str] = {
    VirtualStatus.ATESTADO: "[AT]",
    VirtualStatus.JUSTIFIED: "[FJ]",
    VirtualStatus.VACATION: "[FE]",
}
STATUS_BY_PREFIX: dict[str, VirtualStatus] = {v: k for k, v in PREFIX_BY_STATUS.items()}
RESERVED_PREFIXES = tuple(PREFIX_BY_STATUS.values())

_LEAVE_BY_STATUS: dict[VirtualStatus, LeaveKind] = {
    VirtualStatus.ATESTADO: LeaveKind.MEDICAL_CERTIFICATE,
    VirtualStatus.JUSTIFIED: LeaveKind.JUSTIFIED_ABSENCE,
    VirtualStatus.VACATION: LeaveKind.VACATION,
}
_STATUS_BY_LEAVE: dict[LeaveKind, VirtualStatus] = {v: k for k, v in _LEAVE_BY_STATUS.items()}

_SHORTHAND: dict[VirtualStatus, str] = {
    VirtualStatus.PRESENT: "P",
    VirtualStatus.PARTIAL: "H",
    VirtualStatus.ABSENT: "F",
    VirtualStatus.ATESTADO: "AT",
    VirtualStatus.JUSTIFIED: "FJ",
    VirtualStatus.VACATION: "FE",
}

PAID_STATUSES = frozenset(
    {
        VirtualStatus.PRESENT,
        VirtualStatus.PARTIAL,
        VirtualStatus.ATESTADO,
        VirtualStatus.JUSTIFIED,
        VirtualStatus.VACATION,
    }
)


def split_observation(stored: Optional[str]) -> tuple[Optional[VirtualStatus], str]:
    """Return (leave status or None, human text) for a stored observation."""
    text = stored or ""
    head = text[:PREFIX_LENGTH]
    if head in STATUS_BY_PREFIX:
        return STATUS_BY_PREFIX[head], text[PREFIX_LENGTH:].strip()
    return None, text.strip()


def decode_virtual_status(row: Mapping[str, Any]) -> VirtualStatus:
    stored = StoredStatus(row.get("status") or StoredStatus.ABSENT.value)
    if stored != StoredStatus.ABSENT:
        return VirtualStatus(stored.value)
    leave, _ = split_observation(row.get("discountObservation"))
    return leave or VirtualStatus.ABSENT


def decode_observation_text(stored: Optional[str]) -> str:
    return split_observation(stored)[1]


def check_free_text(free_text: Optional[str]) -> str:
    text = (free_text or "").strip()
    if text.startswith(RESERVED_PREFIXES):
        raise ValidationError(
            f"A observação não pode começar com {', '.join(RESERVED_PREFIXES)}"
        )
    return text


def compose_observation(virtual: VirtualStatus, text: str) -> str:
    return PREFIX_BY_STATUS.get(virtual, "") + text


def encode_observation(virtual: VirtualStatus, free_text: Optional[str]) -> str:
    return compose_observation(virtual, check_free_text(free_text))


def stored_status_for(virtual: VirtualStatus) -> StoredStatus:
    if virtual in (VirtualStatus.PRESENT, VirtualStatus.PARTIAL):
        return StoredStatus(virtual.value)
    return StoredStatus.ABSENT


def leave_kind_for(virtual: VirtualStatus) -> LeaveKind:
    return _LEAVE_BY_STATUS.get(virtual, LeaveKind.NONE)


def virtual_for(stored: StoredStatus, leave_kind: LeaveKind) -> VirtualStatus:
    if stored != StoredStatus.ABSENT:
        return VirtualStatus(stored.value)
    return _STATUS_BY_LEAVE.get(leave_kind, VirtualStatus.ABSENT)


def status_to_shorthand(virtual: Optional[VirtualStatus]) -> str:
    if virtual is None:
        return "-"
    return _SHORTHAND.get(virtual, "-")


def counts_as_paid(virtual: VirtualStatus) -> bool:
    return virtual in PAID_STATUSES
