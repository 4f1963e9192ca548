import pytest

from fera_backoffice.core.enums import Collection
from fera_backoffice.core.exceptions import SyncError
from fera_backoffice.store.memory_store import InMemoryRecordStore
from fera_backoffice.store.protocol import TransactionalSettlementStore


def test_insert_assigns_an_id(store):
    saved = store.save(Collection.CASH_IN, {"companyId": "fera", "value": 10})

    assert saved["id"]
    assert store.fetch_company_snapshot("fera", False)["cashIn"] == [saved]


def test_update_merges_fields(store):
    store.save(Collection.INVENTORY, {"id": "i-luva", "currentQty": 3})

    luva = next(i for i in store.fetch_company_snapshot("fera", False)["inventory"] if i["id"] == "i-luva")
    assert luva["currentQty"] == 3
    assert luva["name"] == "Luva"


def test_update_of_missing_row_fails(store):
    with pytest.raises(SyncError):
        store.save(Collection.INVENTORY, {"id": "nada", "currentQty": 3})


def test_fetched_payload_is_not_affected_by_later_writes(store):
    before = store.fetch_company_snapshot("fera", False)

    store.save(Collection.INVENTORY, {"id": "i-luva", "currentQty": 0})
    store.delete(Collection.AREAS, "a-centro")

    assert next(i for i in before["inventory"] if i["id"] == "i-luva")["currentQty"] == 10
    assert len(before["areas"]) == 1


def test_company_scope(store):
    scoped = store.fetch_company_snapshot("fera", False)
    everything = store.fetch_company_snapshot(None, True)

    assert {e["id"] for e in scoped["employees"]} == {"e-diaria", "e-clt", "e-inativo"}
    assert "e-outra" in {e["id"] for e in everything["employees"]}


def test_apply_settlement_only_pays_pending_rows(rows):
    store = InMemoryRecordStore(
        {
            Collection.ATTENDANCE: [
                rows.attendance("r1", "e1", "2025-03-01", value=100, bonus=10),
                rows.attendance("r2", "e1", "2025-03-02", value=100, paid=True),
                {**rows.attendance("r3", "e1", "2025-03-03"), "companyId": rows.other_company},
            ]
        }
    )
    assert isinstance(store, TransactionalSettlementStore)

    saved, summed = store.apply_settlement(
        company_id=rows.company, record_ids=["r1", "r2", "r3"], cash_out_row={"companyId": rows.company, "type": "Pagamento"}
    )

    assert [row["id"] for row in summed] == ["r1"]
    assert summed[0]["bonusValue"] == 10
    assert saved["value"] == 110
    assert store.apply_settlement(company_id=rows.company, record_ids=["r1"], cash_out_row={}) == (None, [])
