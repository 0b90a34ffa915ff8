from __future__ import annotations

from datetime import UTC, datetime

import pytest
from src.domain.errors import InvalidFieldError
from src.domain.filters import ReviewFilters, RoleAssignmentFilters
from src.domain.models import ReviewDiscriminant


@pytest.mark.parametrize(
    ("show_instructors", "show_courses", "expected"),
    [
        (True, False, ReviewDiscriminant.INSTRUCTOR),
        (True, None, ReviewDiscriminant.INSTRUCTOR),
        (False, True, ReviewDiscriminant.COURSE),
        (None, True, ReviewDiscriminant.COURSE),
        (True, True, None),
        (False, False, None),
        (None, None, None),
    ],
)
def test_review_filter_category(
    show_instructors: bool | None,
    show_courses: bool | None,
    expected: ReviewDiscriminant | None,
) -> None:
    filters = ReviewFilters(show_instructors=show_instructors, show_courses=show_courses)

    assert filters.category is expected


def test_assignment_filters_reject_inverted_range() -> None:
    with pytest.raises(InvalidFieldError):
        RoleAssignmentFilters(
            assigned_from=datetime(2025, 2, 1, tzinfo=UTC),
            assigned_to=datetime(2025, 1, 1, tzinfo=UTC),
        )


def test_assignment_filters_accept_open_ranges() -> None:
    filters = RoleAssignmentFilters(expires_from=datetime(2025, 1, 1, tzinfo=UTC))

    assert filters.expires_to is None
    assert filters.status is None
