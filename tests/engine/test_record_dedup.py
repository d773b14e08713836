from leadgrid.engine.dedup import RecordDeduplicator, normalize_name


def test_filter_new_is_case_insensitive(make_lead) -> None:
    existing = [make_lead("Joe's Diner")]
    incoming = [make_lead("joe's diner"), make_lead("Ace Plumbing")]
    kept = RecordDeduplicator().filter_new(existing, incoming)
    assert [lead.name for lead in kept] == ["Ace Plumbing"]


def test_filter_new_preserves_incoming_order(make_lead) -> None:
    incoming = [make_lead("C"), make_lead("A"), make_lead("B")]
    kept = RecordDeduplicator().filter_new([make_lead("x")], incoming)
    assert kept == incoming


def test_duplicates_inside_one_batch_are_kept(make_lead) -> None:
    incoming = [make_lead("Ace"), make_lead("ACE")]
    kept = RecordDeduplicator().filter_new([make_lead("Bolt")], incoming)
    assert len(kept) == 2


def test_comparison_does_not_trim(make_lead) -> None:
    kept = RecordDeduplicator().filter_new([make_lead("Ace")], [make_lead(" Ace")])
    assert [lead.name for lead in kept] == [" Ace"]
    assert normalize_name("  MiXeD ") == "  mixed "


def test_split_reports_dropped(make_lead) -> None:
    result = RecordDeduplicator().split(
        [make_lead("Ace"), make_lead("Bolt")],
        [make_lead("bolt"), make_lead("Cog"), make_lead("ACE")],
    )
    assert [lead.name for lead in result.kept] == ["Cog"]
    assert [lead.name for lead in result.dropped] == ["bolt", "ACE"]
    assert result.has_new


def test_empty_existing_keeps_everything(make_lead) -> None:
    incoming = [make_lead("Ace"), make_lead(None, phone="555")]
    assert RecordDeduplicator().filter_new([], incoming) == incoming
