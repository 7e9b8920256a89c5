import pytest

from courseoverview.models.assignment import Assignment
from courseoverview.models.quiz import Quiz
from courseoverview.services.overview import is_assignment_open, is_quiz_active, open_assignment_ids


def assignment(due=0, cutoff=0, allow_from=0, id=1):
    return Assignment(id=id, due_date=due, cutoff_date=cutoff, allow_submissions_from_date=allow_from)


@pytest.mark.parametrize("now", [0, 150, 10**10])
def test_assignment_without_dates_is_always_open(now):
    assert is_assignment_open(assignment(), now) is True


@pytest.mark.parametrize(
    "now, expected",
    [(50, False), (100, True), (250, True), (300, True), (301, False)],
)
def test_assignment_with_cutoff_is_open_between_allow_from_and_cutoff(now, expected):
    a = assignment(due=200, cutoff=300, allow_from=100)
    assert is_assignment_open(a, now) is expected


def test_due_date_without_cutoff_stays_open_after_due():
    a = assignment(due=200, allow_from=100)
    assert is_assignment_open(a, 99) is False
    assert is_assignment_open(a, 10_000) is True


def test_allow_from_without_due_date():
    a = assignment(allow_from=100)
    assert is_assignment_open(a, 99) is False
    assert is_assignment_open(a, 100) is True


def test_unset_attributes_count_as_zero():
    assert is_assignment_open(Assignment(id=1), 150) is True


def test_open_assignment_ids_keeps_only_open():
    items = [
        assignment(id=1),
        assignment(id=2, due=200, cutoff=300, allow_from=100),
        assignment(id=3, allow_from=500),
    ]
    assert open_assignment_ids(items, 400) == {1}


@pytest.mark.parametrize(
    "time_open, time_close, now, expected",
    [
        (0, 0, 150, True),
        (100, 0, 150, True),
        (200, 0, 150, False),
        (100, 200, 150, True),
        (100, 200, 250, False),
        (100, 200, 200, True),
        (150, 200, 150, False),
    ],
)
def test_quiz_window(time_open, time_close, now, expected):
    assert is_quiz_active(Quiz(time_open=time_open, time_close=time_close), now) is expected
