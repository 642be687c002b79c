"""Delegate assignment engine.

Pure functions over ``BookingFormState``: every edit returns a new state and
nothing here touches persistence. The same status functions drive live feedback
while the customer edits the form and the final gate at submission.
"""

from collections.abc import Sequence
from dataclasses import dataclass, replace
from enum import Enum

from bookings.domain.errors import (
    CourseAssignmentError,
    DelegateMinimumError,
    DelegateWithoutCourseError,
    IncompleteDelegateError,
    UnknownCourseSelectedError,
)
from bookings.domain.models import BookingFormState, Course, Delegate
from bookings.domain.value_objects import CourseId

# (attribute, label shown to the customer)
REQUIRED_DELEGATE_FIELDS = (
    ("name", "full name"),
    ("national_insurance", "National Insurance number"),
    ("date_of_birth", "date of birth"),
    ("address", "home address"),
    ("postcode", "postcode"),
)

EDITABLE_DELEGATE_FIELDS = frozenset(
    {"name", "national_insurance", "date_of_birth", "address", "postcode", "email", "phone"}
)
UPPERCASE_DELEGATE_FIELDS = frozenset({"national_insurance", "postcode"})


class AssignmentStatus(str, Enum):
    VALID = "valid"
    INSUFFICIENT = "insufficient"
    EXCESS = "excess"
    UNKNOWN = "unknown"


@dataclass(frozen=True)
class CourseValidationStatus:
    course_id: CourseId
    status: AssignmentStatus
    assigned: int
    required: int


@dataclass(frozen=True)
class DelegateStatus:
    index: int
    missing_fields: tuple[str, ...]
    has_course: bool

    @property
    def complete(self) -> bool:
        return not self.missing_fields and self.has_course


def minimum_delegates(courses: Sequence[Course]) -> int:
    """Smallest delegate list that can still fill the most demanding course."""
    if not courses:
        return 1
    return max(course.required_delegates.value for course in courses)


def _blank_delegate(courses: Sequence[Course]) -> Delegate:
    # With a single course there is nothing to choose.
    if len(courses) == 1:
        return Delegate(selected_courses=frozenset({courses[0].id}))
    return Delegate()


def start_form(courses: Sequence[Course]) -> BookingFormState:
    """Return a fresh state with one blank delegate per mandatory seat."""
    courses = tuple(courses)
    delegates = tuple(_blank_delegate(courses) for _ in range(minimum_delegates(courses)))
    return BookingFormState(courses=courses, delegates=delegates)


def add_delegate(state: BookingFormState) -> BookingFormState:
    return replace(state, delegates=state.delegates + (_blank_delegate(state.courses),))


def remove_delegate(state: BookingFormState, index: int) -> BookingFormState:
    """Remove the delegate at ``index``.

    Raises:
        DelegateMinimumError: If the list is already at the minimum size.
        IndexError: If ``index`` does not address a delegate.
    """
    minimum = minimum_delegates(state.courses)
    if len(state.delegates) <= minimum:
        raise DelegateMinimumError(minimum)
    if not 0 <= index < len(state.delegates):
        raise IndexError(f"No delegate at position {index}")
    delegates = state.delegates[:index] + state.delegates[index + 1 :]
    return replace(state, delegates=delegates)


def _replace_delegate(state: BookingFormState, index: int, delegate: Delegate) -> BookingFormState:
    if not 0 <= index < len(state.delegates):
        raise IndexError(f"No delegate at position {index}")
    delegates = list(state.delegates)
    delegates[index] = delegate
    return replace(state, delegates=tuple(delegates))


def toggle_course_for_delegate(
    state: BookingFormState, delegate_index: int, course_id: CourseId, select: bool
) -> BookingFormState:
    delegate = state.delegates[delegate_index]
    if select:
        selected = delegate.selected_courses | {course_id}
    else:
        selected = delegate.selected_courses - {course_id}
    return _replace_delegate(state, delegate_index, replace(delegate, selected_courses=selected))


def update_delegate(state: BookingFormState, index: int, **fields) -> BookingFormState:
    """Replace personal details on one delegate.

    National Insurance numbers and postcodes are stored upper-cased. Course
    selection is changed through ``toggle_course_for_delegate`` only.
    """
    unknown = set(fields) - EDITABLE_DELEGATE_FIELDS
    if unknown:
        raise ValueError(f"Cannot edit delegate field(s): {', '.join(sorted(unknown))}")
    for name in UPPERCASE_DELEGATE_FIELDS & set(fields):
        if isinstance(fields[name], str):
            fields[name] = fields[name].upper()
    delegate = state.delegates[index]
    return _replace_delegate(state, index, replace(delegate, **fields))


def course_validation_status(state: BookingFormState, course_id: CourseId) -> CourseValidationStatus:
    assigned = sum(1 for delegate in state.delegates if course_id in delegate.selected_courses)
    course = state.course(course_id)
    if course is None:
        return CourseValidationStatus(course_id, AssignmentStatus.UNKNOWN, assigned, 0)

    required = course.required_delegates.value
    if assigned == required:
        status = AssignmentStatus.VALID
    elif assigned < required:
        status = AssignmentStatus.INSUFFICIENT
    else:
        status = AssignmentStatus.EXCESS
    return CourseValidationStatus(course_id, status, assigned, required)


def course_statuses(state: BookingFormState) -> list[CourseValidationStatus]:
    return [course_validation_status(state, course.id) for course in state.courses]


def missing_fields(delegate: Delegate) -> tuple[str, ...]:
    missing = []
    for attribute, label in REQUIRED_DELEGATE_FIELDS:
        value = getattr(delegate, attribute)
        if value is None or (isinstance(value, str) and not value.strip()):
            missing.append(label)
    return tuple(missing)


def delegate_status(state: BookingFormState, index: int) -> DelegateStatus:
    delegate = state.delegates[index]
    return DelegateStatus(
        index=index,
        missing_fields=missing_fields(delegate),
        has_course=bool(delegate.selected_courses) or not state.courses,
    )


def delegate_statuses(state: BookingFormState) -> list[DelegateStatus]:
    return [delegate_status(state, index) for index in range(len(state.delegates))]


def delegate_label(delegate: Delegate, index: int) -> str:
    position = f"Delegate {index + 1}"
    if delegate.name.strip():
        return f"{position} ({delegate.name.strip()})"
    return position


def validate_for_submission(state: BookingFormState) -> None:
    """Check the whole form and raise on the first problem found.

    Checks run in this order: enough delegates for the most demanding
    course, personal details of every delegate, every delegate has a course,
    every selected course is on the roster, and every course has exactly its
    required number of delegates.

    Raises:
        DelegateMinimumError
        IncompleteDelegateError
        DelegateWithoutCourseError
        UnknownCourseSelectedError
        CourseAssignmentError
    """
    minimum = minimum_delegates(state.courses)
    if len(state.delegates) < minimum:
        raise DelegateMinimumError(minimum)

    for index, delegate in enumerate(state.delegates):
        missing = missing_fields(delegate)
        if missing:
            raise IncompleteDelegateError(delegate_label(delegate, index), list(missing))

    if state.courses:
        roster = {course.id for course in state.courses}
        for index, delegate in enumerate(state.delegates):
            if not delegate.selected_courses:
                raise DelegateWithoutCourseError(delegate_label(delegate, index))
            if not delegate.selected_courses <= roster:
                raise UnknownCourseSelectedError(delegate_label(delegate, index))

    for course in state.courses:
        result = course_validation_status(state, course.id)
        if result.status is not AssignmentStatus.VALID:
            raise CourseAssignmentError(course.name, result.assigned, result.required)
