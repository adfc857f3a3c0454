"""Unit tests for services.aggregator.selector module."""

from recentnotes.nips import is_expired
from recentnotes.services.aggregator.selector import select_recent


def never_expired(record) -> bool:
    return False


class TestSelectRecent:
    """Top-K selection by creation time."""

    def test_keeps_newest_oldest_first(self, make_record) -> None:
        records = {r.id: r for r in (make_record(i, created_at=i * 100) for i in range(1, 6))}

        selected = select_recent(records, 3, never_expired)

        assert [r.created_at for r in selected] == [300, 400, 500]

    def test_fewer_records_than_count(self, make_record) -> None:
        records = {r.id: r for r in (make_record(1, 200), make_record(2, 100))}

        selected = select_recent(records, 7, never_expired)

        assert [r.created_at for r in selected] == [100, 200]

    def test_non_positive_count_returns_empty(self, make_record) -> None:
        records = {r.id: r for r in (make_record(1), make_record(2))}

        assert select_recent(records, 0, never_expired) == []
        assert select_recent(records, -1, never_expired) == []

    def test_empty_input(self) -> None:
        assert select_recent({}, 3, never_expired) == []

    def test_accepts_iterable(self, make_record) -> None:
        records = [make_record(1, 300), make_record(2, 100), make_record(3, 200)]

        selected = select_recent(records, 2, never_expired)

        assert [r.created_at for r in selected] == [200, 300]

    def test_ties_keep_insertion_order(self, make_record) -> None:
        first, second, third = make_record(1, 100), make_record(2, 100), make_record(3, 100)
        records = {r.id: r for r in (first, second, third)}

        assert select_recent(records, 3, never_expired) == [first, second, third]
        assert select_recent(records, 2, never_expired) == [second, third]


class TestExpiry:
    """Expired records never occupy a slot."""

    def test_expired_excluded_before_ranking(self, make_record) -> None:
        now = 10_000
        expired = make_record(1, 900, tags=[["expiration", "5000"]])
        live = [make_record(i, i * 100) for i in range(2, 6)]
        records = {r.id: r for r in (*live, expired)}

        selected = select_recent(records, 3, lambda r: is_expired(r, now=now))

        assert expired not in selected
        assert [r.created_at for r in selected] == [300, 400, 500]

    def test_future_expiration_kept(self, make_record) -> None:
        record = make_record(1, 100, tags=[["expiration", "20000"]])

        selected = select_recent({record.id: record}, 1, lambda r: is_expired(r, now=10_000))

        assert selected == [record]

    def test_all_expired(self, make_record) -> None:
        records = {r.id: r for r in (make_record(i, tags=[["expiration", "1"]]) for i in range(3))}

        assert select_recent(records, 3, lambda r: is_expired(r, now=10)) == []
