from leadgrid.infra.storage import LeadStore


def test_append_preserves_order(make_lead) -> None:
    store = LeadStore()
    first = [make_lead("A"), make_lead("B")]
    second = [make_lead("C")]
    assert store.append(first) == 2
    assert store.append(second) == 1
    assert [lead.name for lead in store.snapshot()] == ["A", "B", "C"]
    assert len(store) == 3


def test_snapshot_is_stable_between_mutations(make_lead) -> None:
    store = LeadStore()
    store.append([make_lead("A"), make_lead("B")])
    before = store.snapshot()
    assert store.snapshot() == before
    store.append([make_lead("C")])
    assert len(before) == 2
    assert [lead.name for lead in store] == ["A", "B", "C"]


def test_reset_clears_leads_and_link(make_lead) -> None:
    store = LeadStore()
    store.reset("session-1")
    assert store.is_linked_to("session-1")
    leads = [make_lead("A"), make_lead("B")]
    store.append(leads)
    store.reset()
    assert store.snapshot() == ()
    assert store.session_id is None
    assert not store.is_linked_to("session-1")

    store.append([make_lead("C")])
    old_ids = {lead.id for lead in leads}
    assert all(lead.id not in old_ids for lead in store.snapshot())


def test_append_ignores_empty_batches(make_lead) -> None:
    store = LeadStore()
    assert store.append([]) == 0
    assert store.snapshot() == ()


def test_names_skip_missing(make_lead) -> None:
    store = LeadStore()
    store.append([make_lead("A"), make_lead(None, phone="1"), make_lead("B")])
    assert store.names() == ["A", "B"]
