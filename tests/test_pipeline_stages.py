"""Tests for the individual selection stages."""

import pytest

from meetpoll.domain.models import Participant, RankedDate, Settings
from meetpoll.domain.policies import DefaultCoreDatePolicy, DefaultRepairPolicy
from meetpoll.scheduling.assignment_builder import AssignmentBuilder
from meetpoll.scheduling.availability import AvailabilityIndex
from meetpoll.scheduling.date_selector import DateSelector
from meetpoll.scheduling.ranker import CandidateRanker
from meetpoll.scheduling.repair import AttendanceState, ShortfallRepairer
from meetpoll.scheduling.warning_collector import WarningCollector


class TestAvailabilityIndex:
    """Tests for AvailabilityIndex."""

    def test_counts_distinct_participants(self):
        participants = [
            Participant(id="a", name="A", available_dates=["2024-01-01", "2024-01-02"]),
            Participant(id="b", name="B", available_dates=["2024-01-01"]),
        ]
        index = AvailabilityIndex.build(participants)

        assert index.tally == {"2024-01-01": 2, "2024-01-02": 1}
        assert index.get_voters("2024-01-01") == frozenset({"a", "b"})
        assert len(index) == 2

    def test_unknown_date(self):
        index = AvailabilityIndex.build([])

        assert index.get_votes("2024-01-01") == 0
        assert index.get_voters("2024-01-01") == frozenset()


class TestCandidateRanker:
    """Tests for CandidateRanker."""

    def test_orders_by_votes_then_date(self):
        tally = {"2024-01-03": 2, "2024-01-01": 1, "2024-01-02": 2, "2024-01-04": 5}
        ranked = list(CandidateRanker().rank(tally))

        assert ranked == [
            RankedDate("2024-01-04", 5),
            RankedDate("2024-01-02", 2),
            RankedDate("2024-01-03", 2),
            RankedDate("2024-01-01", 1),
        ]

    def test_order_does_not_depend_on_insertion(self):
        items = [("2024-02-0%d" % i, i % 3) for i in range(1, 10)]
        forward = list(CandidateRanker().rank(dict(items)))
        backward = list(CandidateRanker().rank(dict(reversed(items))))

        assert forward == backward

    def test_rank_is_lazy(self):
        ranked = CandidateRanker().rank({"2024-01-01": 1})

        assert next(ranked) == RankedDate("2024-01-01", 1)
        with pytest.raises(StopIteration):
            next(ranked)


class TestDateSelector:
    """Tests for DateSelector."""

    @pytest.fixture
    def ranked(self):
        return [
            RankedDate("2024-01-05", 4),
            RankedDate("2024-01-02", 3),
            RankedDate("2024-01-03", 2),
            RankedDate("2024-01-01", 1),
        ]

    def test_baseline_takes_top_valid_dates(self, ranked):
        warnings = WarningCollector()
        outcome = DateSelector().select(
            ranked, Settings(min_participants_per_meeting=2, min_meeting_dates=2), warnings
        )

        assert outcome.baseline == ["2024-01-05", "2024-01-02"]
        assert [c.date for c in outcome.valid_dates] == [
            "2024-01-05",
            "2024-01-02",
            "2024-01-03",
        ]
        assert not outcome.halted
        assert len(warnings) == 0

    def test_halts_without_quorum(self, ranked):
        warnings = WarningCollector()
        outcome = DateSelector().select(
            ranked, Settings(min_participants_per_meeting=5), warnings
        )

        assert outcome.halted
        assert outcome.baseline == []
        assert outcome.valid_dates == []
        assert len(warnings) == 1

    def test_shortfall_is_not_fatal(self, ranked):
        warnings = WarningCollector()
        outcome = DateSelector().select(
            ranked, Settings(min_participants_per_meeting=3, min_meeting_dates=5), warnings
        )

        assert not outcome.halted
        assert outcome.baseline == ["2024-01-05", "2024-01-02"]
        assert warnings.to_list() == [
            "5 meeting dates were requested, but only 2 dates meet the quorum of 3."
        ]


class TestShortfallRepairer:
    """Tests for ShortfallRepairer."""

    def _run(self, participants, min_meetings, baseline_size=1, policy=None):
        index = AvailabilityIndex.build(participants)
        valid = list(CandidateRanker().rank(index.tally))
        baseline = [c.date for c in valid[:baseline_size]]
        warnings = WarningCollector()
        repairer = ShortfallRepairer(repair_policy=policy)
        dates = repairer.repair(baseline, valid, participants, index, min_meetings, warnings)
        return dates, warnings.to_list()

    def test_disabled_when_minimum_is_zero(self):
        participants = [
            Participant(id="a", name="A", available_dates=["2024-01-01"]),
            Participant(id="b", name="B", available_dates=["2024-01-02"]),
        ]
        dates, warnings = self._run(participants, min_meetings=0)

        assert dates == ["2024-01-01"]
        assert warnings == []

    def test_noop_when_everyone_satisfied(self):
        participants = [
            Participant(id="a", name="A", available_dates=["2024-01-01", "2024-01-02"]),
            Participant(id="b", name="B", available_dates=["2024-01-01"]),
        ]
        dates, warnings = self._run(participants, min_meetings=1)

        assert dates == ["2024-01-01"]
        assert warnings == []

    def test_skips_candidates_without_improvement(self):
        """02 helps nobody short; 03 satisfies the remaining participant."""
        participants = [
            Participant(id="a", name="A", available_dates=["2024-01-01", "2024-01-02"]),
            Participant(id="b", name="B", available_dates=["2024-01-01", "2024-01-02"]),
            Participant(id="c", name="C", available_dates=["2024-01-01", "2024-01-02"]),
            Participant(id="d", name="D", available_dates=["2024-01-03"]),
        ]
        dates, warnings = self._run(participants, min_meetings=1)

        assert dates == ["2024-01-01", "2024-01-03"]
        assert warnings == []

    def test_equal_count_keeps_current_selection(self):
        """A candidate that leaves as many participants short is not adopted."""
        participants = [
            Participant(id="a", name="A", available_dates=["2024-01-01"]),
            Participant(id="b", name="B", available_dates=["2024-01-01"]),
            Participant(id="c", name="C", available_dates=["2024-01-02", "2024-01-03"]),
            Participant(id="d", name="D", available_dates=["2024-01-02", "2024-01-03"]),
        ]
        dates, warnings = self._run(participants, min_meetings=2)

        # 02 and 03 would lift c and d to 1 meeting, still short of 2.
        assert dates == ["2024-01-01"]
        assert "A (1)" in warnings[0]
        assert "D (0)" in warnings[0]

    def test_custom_candidate_cap(self):
        participants = [
            Participant(id=f"p{i}", name=f"P{i}", available_dates=[f"2024-01-{i:02d}"])
            for i in range(1, 8)
        ]
        dates, warnings = self._run(
            participants, min_meetings=1, policy=DefaultRepairPolicy(candidate_cap=3)
        )

        assert len(dates) == 4
        assert len(warnings) == 1
        assert "P5 (0), P6 (0), P7 (0)" in warnings[0]

    def test_attendance_state_delta_matches_rescan(self):
        participants = [
            Participant(id="a", name="A", available_dates=["d1", "d2"]),
            Participant(id="b", name="B", available_dates=["d2"]),
            Participant(id="c", name="C", available_dates=["d3"]),
        ]
        state = AttendanceState.from_selection(participants, ["d1"], threshold=1)

        assert state.unsatisfied_count == 2
        assert state.unsatisfied_after(frozenset({"a", "b"})) == 1
        rescan = AttendanceState.from_selection(participants, ["d1", "d2"], threshold=1)
        assert rescan.unsatisfied_count == 1

        state.add_date(frozenset({"a", "b"}))
        assert state.counts == rescan.counts


class TestAssignmentBuilder:
    """Tests for AssignmentBuilder."""

    @pytest.fixture
    def builder(self):
        return AssignmentBuilder()

    def test_assignments_are_chronological(self, builder):
        participants = [
            Participant(id="a", name="A", available_dates=["2024-01-09", "2024-01-01"]),
            Participant(id="b", name="B", available_dates=["2024-01-05"]),
        ]
        assignments = builder.build_assignments(
            ["2024-01-09", "2024-01-05", "2024-01-01"], participants
        )

        assert assignments == {
            "a": ["2024-01-01", "2024-01-09"],
            "b": ["2024-01-05"],
        }

    def test_participant_without_overlap_gets_empty_list(self, builder):
        participants = [Participant(id="a", name="A", available_dates=["2024-01-02"])]

        assert builder.build_assignments(["2024-01-01"], participants) == {"a": []}

    @pytest.mark.parametrize(
        "count,expected",
        [(0, 0), (1, 1), (3, 1), (4, 1), (5, 2), (8, 2), (9, 3), (21, 6)],
    )
    def test_core_count(self, builder, count, expected):
        selected = [f"2024-02-{i:02d}" for i in range(count, 0, -1)]
        core = builder.build_core_dates(selected)

        assert len(core) == expected
        assert core == [f"2024-02-{i:02d}" for i in range(1, expected + 1)]

    def test_custom_core_fraction(self):
        builder = AssignmentBuilder(core_policy=DefaultCoreDatePolicy(core_fraction=0.5))

        assert builder.build_core_dates(["c", "a", "b", "d"]) == ["a", "b"]


class TestWarningCollector:
    """Tests for WarningCollector."""

    def test_keeps_order_and_duplicates(self):
        collector = WarningCollector()
        collector.add("first")
        collector.add("second")
        collector.add("first")

        assert collector.to_list() == ["first", "second", "first"]
        assert len(collector) == 3

    def test_snapshot_is_a_copy(self):
        collector = WarningCollector()
        snapshot = collector.to_list()
        collector.add("late")

        assert snapshot == []
