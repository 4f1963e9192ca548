from fera_backoffice.core.enums import Collection
from fera_backoffice.store import reducers
from fera_backoffice.store.payload import assemble_payload
from fera_backoffice.store.snapshot import AppSnapshot


def test_payload_nests_services_and_picks_settings():
    rows = {
        Collection.AREAS: [{"id": "a1", "companyId": "fera", "name": "Centro", "startDate": "2025-01-01"}],
        Collection.SERVICES: [
            {"id": "s1", "companyId": "fera", "areaId": "a1", "type": "Boca de Lobo", "areaM2": 2, "unitValue": 45, "serviceDate": "2025-01-02"},
            {"id": "s2", "companyId": "outra", "areaId": "a1", "type": "Boca de Lobo", "areaM2": 9, "unitValue": 45, "serviceDate": "2025-01-02"},
        ],
        Collection.COMPANY_SETTINGS: [
            {"id": "c1", "companyId": "fera", "serviceRates": {"Boca de Lobo": 50}},
            {"id": "c2", "companyId": "outra", "serviceRates": {"Boca de Lobo": 1}},
        ],
    }

    payload = assemble_payload(rows, company_id="fera", is_global_role=False)
    snapshot = AppSnapshot.from_payload("fera", payload)

    assert [s.id for s in snapshot.areas[0].services] == ["s1"]
    assert snapshot.config.id == "c1"
    assert snapshot.config.service_rates
    assert payload["attendanceRecords"] == []


def test_goals_as_mapping_are_accepted():
    snapshot = AppSnapshot.from_payload("fera", {"monthlyGoals": {"2025-01": {"production": 500, "revenue": 900}}})

    assert snapshot.goal_for("2025-01").production == 500
    assert snapshot.goal_for("2025-02").production == 0


def test_reducers_never_mutate_their_input():
    state = reducers.empty_state()
    first = reducers.upsert_row(state, Collection.AREAS, {"id": "a1", "name": "Centro"})
    second = reducers.upsert_row(first, Collection.AREAS, {"id": "a1", "name": "Norte"})
    third = reducers.remove_row(second, Collection.AREAS, "a1")

    assert state[Collection.AREAS] == ()
    assert reducers.find_row(first, Collection.AREAS, "a1")["name"] == "Centro"
    assert reducers.find_row(second, Collection.AREAS, "a1")["name"] == "Norte"
    assert third[Collection.AREAS] == ()
