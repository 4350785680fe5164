"""
Validity rules and derived state for hackathon definitions.

Everything here is a pure function of the values passed in. Callers supply the
current time; nothing reads the clock or the database.
"""
import math
from collections import namedtuple

DRAFT = 'draft'
PUBLISHED = 'published'
ONGOING = 'ongoing'
COMPLETED = 'completed'
CANCELLED = 'cancelled'

STATUS_TRANSITIONS = {
    DRAFT: {PUBLISHED, CANCELLED},
    PUBLISHED: {DRAFT, ONGOING, COMPLETED, CANCELLED},
    ONGOING: {COMPLETED, CANCELLED},
    COMPLETED: set(),
    CANCELLED: set(),
}

REGISTRATION_OPEN = 'open'
REGISTRATION_CLOSED = 'closed'
REGISTRATION_FULL = 'full'

UPCOMING = 'upcoming'

REQUIRED_WEIGHT_TOTAL = 100

Violation = namedtuple('Violation', ['field', 'message'])


def _get(definition, name, default=None):
    if isinstance(definition, dict):
        return definition.get(name, default)
    return getattr(definition, name, default)


def _criterion_weight(criterion):
    if isinstance(criterion, dict):
        return criterion.get('weight')
    return getattr(criterion, 'weight', None)


def validate_hackathon(definition):
    """
    Return the list of violated invariants for a hackathon definition.

    ``definition`` may be a mapping (validated serializer data merged with the
    stored instance) or an object exposing the same attribute names. An empty
    list means the definition is valid.
    """
    violations = []

    start_date = _get(definition, 'start_date')
    end_date = _get(definition, 'end_date')
    deadline = _get(definition, 'registration_deadline')

    if start_date is not None and end_date is not None and start_date >= end_date:
        violations.append(Violation('end_date', 'End date must be after start date'))
    if deadline is not None and start_date is not None and deadline >= start_date:
        violations.append(Violation('registration_deadline', 'Registration deadline must be before start date'))

    team_size_min = _get(definition, 'team_size_min', 1)
    team_size_max = _get(definition, 'team_size_max', 4)
    max_participants = _get(definition, 'max_participants', 100)

    if team_size_min is not None and team_size_min < 1:
        violations.append(Violation('team_size_min', 'Minimum team size must be at least 1'))
    if team_size_max is not None and team_size_max < 1:
        violations.append(Violation('team_size_max', 'Maximum team size must be at least 1'))
    if team_size_min is not None and team_size_max is not None and team_size_min > team_size_max:
        violations.append(Violation('team_size_min', 'Minimum team size cannot be greater than maximum team size'))
    if max_participants is not None and max_participants < 1:
        violations.append(Violation('max_participants', 'Maximum participants must be at least 1'))

    criteria = list(_get(definition, 'judging_criteria') or [])
    if criteria:
        weights = [_criterion_weight(c) or 0 for c in criteria]
        if any(weight < 0 or weight > 100 for weight in weights):
            violations.append(Violation('judging_criteria', 'Each judging criterion weight must be between 0 and 100'))
        if sum(weights) != REQUIRED_WEIGHT_TOTAL:
            violations.append(Violation('judging_criteria', 'Judging criteria weights must sum to 100'))

    return violations


def registration_status(hackathon, now):
    if now > hackathon.registration_deadline:
        return REGISTRATION_CLOSED
    if hackathon.registration_count >= hackathon.max_participants:
        return REGISTRATION_FULL
    return REGISTRATION_OPEN


def temporal_status(hackathon, now):
    if now < hackathon.start_date:
        return UPCOMING
    if hackathon.start_date <= now <= hackathon.end_date:
        return ONGOING
    return COMPLETED


def can_register(hackathon, now):
    return (
        now <= hackathon.registration_deadline
        and hackathon.registration_count < hackathon.max_participants
        and hackathon.status == PUBLISHED
    )


def duration_days(hackathon):
    seconds = abs((hackathon.end_date - hackathon.start_date).total_seconds())
    return math.ceil(seconds / 86400)


def can_change_status(hackathon, target):
    # completed and cancelled hackathons are never re-opened
    if target == hackathon.status:
        return True
    return target in STATUS_TRANSITIONS.get(hackathon.status, ())
