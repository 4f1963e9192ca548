import pytest

from fera_backoffice.attendance import codec
from fera_backoffice.core.enums import LeaveKind, StoredStatus, VirtualStatus
from fera_backoffice.core.exceptions import ValidationError

LEAVES = [VirtualStatus.ATESTADO, VirtualStatus.JUSTIFIED, VirtualStatus.VACATION]
NOTES = ["", "consulta médica", "  com espaços  ", "[XX] outro colchete", "AT sem colchete"]


@pytest.mark.parametrize("status", LEAVES)
@pytest.mark.parametrize("note", NOTES)
def test_leave_status_survives_the_stored_observation(status, note):
    stored = codec.encode_observation(status, note)
    row = {"status": "absent", "discountObservation": stored}

    assert codec.decode_virtual_status(row) == status
    assert codec.decode_observation_text(stored) == note.strip()


def test_encode_is_plain_concatenation():
    assert codec.encode_observation(VirtualStatus.ATESTADO, " texto ") == "[AT]texto"
    assert codec.encode_observation(VirtualStatus.PRESENT, "texto") == "texto"
    assert codec.encode_observation(VirtualStatus.ABSENT, "") == ""


def test_empty_observation_on_absent_row_is_plain_absence():
    assert codec.decode_virtual_status({"status": "absent", "discountObservation": None}) == VirtualStatus.ABSENT
    assert codec.decode_virtual_status({"status": "absent", "discountObservation": ""}) == VirtualStatus.ABSENT


def test_prefix_is_ignored_unless_row_is_absent():
    row = {"status": "present", "discountObservation": "[FE]férias?"}
    assert codec.decode_virtual_status(row) == VirtualStatus.PRESENT


@pytest.mark.parametrize("note", ["[AT] lembrar", "[FJ]", "  [FE] algo"])
def test_free_text_with_reserved_prefix_is_rejected(note):
    with pytest.raises(ValidationError):
        codec.encode_observation(VirtualStatus.JUSTIFIED, note)


@pytest.mark.parametrize(
    "status,expected",
    [
        (VirtualStatus.PRESENT, "P"),
        (VirtualStatus.PARTIAL, "H"),
        (VirtualStatus.ABSENT, "F"),
        (VirtualStatus.ATESTADO, "AT"),
        (VirtualStatus.JUSTIFIED, "FJ"),
        (VirtualStatus.VACATION, "FE"),
        (None, "-"),
    ],
)
def test_shorthand(status, expected):
    assert codec.status_to_shorthand(status) == expected


def test_leave_kind_round_trip():
    for status in VirtualStatus:
        stored = codec.stored_status_for(status)
        assert codec.virtual_for(stored, codec.leave_kind_for(status)) == status

    assert codec.leave_kind_for(VirtualStatus.PRESENT) == LeaveKind.NONE
    assert codec.stored_status_for(VirtualStatus.VACATION) == StoredStatus.ABSENT
