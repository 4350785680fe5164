"""
Registration lifecycle: status transitions plus the check-in and project
submission flags.

Status moves between pending, confirmed, waitlisted and rejected, and ends in
cancelled, which is terminal. ``checked_in`` and ``project_submitted`` are
orthogonal flags that can each be set once on a non-cancelled registration.

Every transition returns an ``Outcome``: the decision, the field changes to
apply when allowed, and whether the hackathon's registration count has to be
recomputed afterwards. Inputs are never mutated.
"""
from dataclasses import dataclass, field
from typing import Any, Dict

from django.conf import settings

from .eligibility import (
    ALLOWED, Decision, DenialReason, validate_cancellation, validate_check_in,
    validate_new_registration, validate_project_submission, validate_registration_data,
    validate_update,
)
from .models import CANCELLED, CONFIRMED, PENDING, REJECTED, WAITLISTED

STATUS_TRANSITIONS = {
    PENDING: {CONFIRMED, WAITLISTED, REJECTED},
    WAITLISTED: {CONFIRMED, REJECTED},
    CONFIRMED: {WAITLISTED, REJECTED},
    REJECTED: {CONFIRMED},
    CANCELLED: set(),
}

PROJECT_FIELDS = (
    'title', 'description', 'github_repo', 'live_demo', 'presentation_link', 'video_demo', 'technologies',
)


@dataclass(frozen=True)
class Outcome:
    decision: Decision
    changes: Dict[str, Any] = field(default_factory=dict)
    recount_required: bool = False

    @property
    def allowed(self):
        return self.decision.allowed

    @classmethod
    def denied(cls, decision):
        return cls(decision=decision)


def auto_confirm(hackathon, draft):
    return CONFIRMED


def manual_approval(hackathon, draft):
    return PENDING


def default_acceptance_policy():
    if getattr(settings, 'REGISTRATION_AUTO_CONFIRM', True):
        return auto_confirm
    return manual_approval


def crosses_cancelled_boundary(current, target):
    return (current == CANCELLED) != (target == CANCELLED)


_CANCELLED_DENIAL = Decision.deny(DenialReason.REGISTRATION_CANCELLED, 'Registration has been cancelled')


class RegistrationLifecycle:

    def __init__(self, acceptance_policy=None):
        self.acceptance_policy = acceptance_policy or default_acceptance_policy()

    def register(self, hackathon, draft, now, existing=None):
        decision = validate_new_registration(hackathon, draft, now, existing=existing)
        if not decision.allowed:
            return Outcome.denied(decision)
        status = self.acceptance_policy(hackathon, draft)
        return Outcome(decision=ALLOWED, changes={'status': status}, recount_required=True)

    def update(self, registration, hackathon, draft, now):
        decision = validate_update(registration, hackathon, now)
        if decision.allowed:
            decision = validate_registration_data(hackathon, draft)
        if not decision.allowed:
            return Outcome.denied(decision)
        return Outcome(decision=ALLOWED)

    def change_status(self, registration, target):
        current = registration.status
        if current == CANCELLED:
            return Outcome.denied(_CANCELLED_DENIAL)
        if target not in STATUS_TRANSITIONS.get(current, set()):
            return Outcome.denied(Decision.deny(
                DenialReason.INVALID_STATUS_TRANSITION,
                f'Cannot change registration status from {current} to {target}',
            ))
        return Outcome(
            decision=ALLOWED,
            changes={'status': target},
            recount_required=crosses_cancelled_boundary(current, target),
        )

    def confirm(self, registration):
        return self.change_status(registration, CONFIRMED)

    def cancel(self, registration, hackathon, now):
        decision = validate_cancellation(registration, hackathon, now)
        if not decision.allowed:
            return Outcome.denied(decision)
        return Outcome(decision=ALLOWED, changes={'status': CANCELLED}, recount_required=True)

    def check_in(self, registration, hackathon, now):
        if registration.status == CANCELLED:
            return Outcome.denied(_CANCELLED_DENIAL)
        decision = validate_check_in(registration, hackathon, now)
        if not decision.allowed:
            return Outcome.denied(decision)
        return Outcome(decision=ALLOWED, changes={'checked_in': True, 'check_in_time': now})

    def submit_project(self, registration, hackathon, project, now):
        if registration.status == CANCELLED:
            return Outcome.denied(_CANCELLED_DENIAL)
        decision = validate_project_submission(registration, hackathon, now)
        if not decision.allowed:
            return Outcome.denied(decision)
        details = {key: project[key] for key in PROJECT_FIELDS if key in project}
        details['submission_time'] = now.isoformat()
        return Outcome(decision=ALLOWED, changes={'project_submitted': True, 'project_details': details})
