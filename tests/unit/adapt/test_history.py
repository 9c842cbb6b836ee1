"""
Unit tests for history reduction helpers.
"""

import datetime

from app.adapt.history import top_sets_by_session
from app.schemas.history import SetRecord

D1 = datetime.date(2026, 3, 10)
D2 = datetime.date(2026, 3, 12)


def _make_set(session_id, date, weight, reps, rpe=None, is_warmup=False):
    return SetRecord(
        session_id=session_id, session_date=date, exercise_id="bench_press",
        weight=weight, reps=reps, rpe=rpe, is_warmup=is_warmup,
    )


class TestTopSetsBySession:
    def test_heaviest_working_set_per_session(self):
        records = [
            _make_set(1, D1, 135.0, 10, is_warmup=True),
            _make_set(1, D1, 185.0, 8, rpe=7.5),
            _make_set(1, D1, 195.0, 6, rpe=8.5),
            _make_set(2, D2, 200.0, 5, rpe=8.0),
        ]
        top = top_sets_by_session(records)
        assert [(p.session_id, p.weight, p.reps) for p in top] == [(2, 200.0, 5), (1, 195.0, 6)]

    def test_warmups_never_count(self):
        records = [
            _make_set(1, D1, 300.0, 3, is_warmup=True),
            _make_set(1, D1, 200.0, 5),
        ]
        assert top_sets_by_session(records)[0].weight == 200.0

    def test_ties_broken_by_reps(self):
        records = [_make_set(1, D1, 200.0, 5), _make_set(1, D1, 200.0, 7, rpe=9.0)]
        top = top_sets_by_session(records)
        assert top[0].reps == 7
        assert top[0].rpe == 9.0

    def test_empty_sets_ignored(self):
        records = [_make_set(1, D1, 0.0, 10), _make_set(2, D2, 100.0, 0)]
        assert top_sets_by_session(records) == []

    def test_newest_first_regardless_of_input_order(self):
        records = [_make_set(1, D1, 100.0, 5), _make_set(2, D2, 90.0, 5)]
        assert [p.date for p in top_sets_by_session(records)] == [D2, D1]
