"""
Eligibility rules for the registration lifecycle.

Each validator inspects a hackathon snapshot, a registration snapshot (or a
draft for registrations that do not exist yet) and the current time, and
returns a ``Decision``. A denial carries the reason and a user-facing message;
validators never raise for business conditions and never write anything.
"""
from dataclasses import dataclass, field
from datetime import timedelta
from enum import Enum
from typing import List, Optional

from hackathon.rules import can_register

from .models import CANCELLED, SOLO, TEAM

CANCELLATION_WINDOW = timedelta(hours=24)


class DenialReason(str, Enum):
    HACKATHON_NOT_REGISTRABLE = 'hackathon_not_registrable'
    DUPLICATE_REGISTRATION = 'duplicate_registration'
    TEAM_DATA_MISSING = 'team_data_missing'
    TEAM_SIZE_OUT_OF_BOUNDS = 'team_size_out_of_bounds'
    CONSENT_REQUIRED = 'consent_required'
    REGISTRATION_CANCELLED = 'registration_cancelled'
    HACKATHON_ALREADY_STARTED = 'hackathon_already_started'
    ALREADY_CANCELLED = 'already_cancelled'
    PAST_CANCELLATION_DEADLINE = 'past_cancellation_deadline'
    ALREADY_CHECKED_IN = 'already_checked_in'
    HACKATHON_NOT_STARTED = 'hackathon_not_started'
    ALREADY_SUBMITTED = 'already_submitted'
    INVALID_STATUS_TRANSITION = 'invalid_status_transition'


@dataclass(frozen=True)
class Decision:
    reason: Optional[DenialReason] = None
    message: str = ''

    @property
    def allowed(self):
        return self.reason is None

    @classmethod
    def deny(cls, reason, message):
        return cls(reason=reason, message=message)


ALLOWED = Decision()


@dataclass
class TeamMemberDraft:
    name: str
    email: str
    role: str = ''


@dataclass
class RegistrationDraft:
    """The registration-relevant part of a record that is not stored yet."""

    participant_id: Optional[int] = None
    participation_type: str = SOLO
    team_name: str = ''
    team_members: List[TeamMemberDraft] = field(default_factory=list)
    agree_to_terms: bool = False
    agree_to_code_of_conduct: bool = False

    @property
    def team_size(self):
        return team_size(self.participation_type, len(self.team_members))

    @classmethod
    def from_data(cls, data, participant_id=None):
        members = [
            TeamMemberDraft(name=m.get('name', ''), email=m.get('email', ''), role=m.get('role', ''))
            for m in data.get('team_members') or []
        ]
        return cls(
            participant_id=participant_id,
            participation_type=data.get('participation_type', SOLO),
            team_name=data.get('team_name') or '',
            team_members=members,
            agree_to_terms=bool(data.get('agree_to_terms', False)),
            agree_to_code_of_conduct=bool(data.get('agree_to_code_of_conduct', False)),
        )


def team_size(participation_type, member_count):
    # the registrant counts as a member of their own team
    if participation_type == SOLO:
        return 1
    return member_count + 1


def validate_registration_data(hackathon, draft):
    """Team data, team size and consent checks shared by create and update."""
    if draft.participation_type == TEAM:
        if not draft.team_name.strip() or not draft.team_members:
            return Decision.deny(
                DenialReason.TEAM_DATA_MISSING,
                'Team name and at least one team member are required for team participation',
            )

    size = draft.team_size
    if size < hackathon.team_size_min or size > hackathon.team_size_max:
        return Decision.deny(
            DenialReason.TEAM_SIZE_OUT_OF_BOUNDS,
            f'Team size must be between {hackathon.team_size_min} and {hackathon.team_size_max} members',
        )

    if not draft.agree_to_terms or not draft.agree_to_code_of_conduct:
        return Decision.deny(
            DenialReason.CONSENT_REQUIRED,
            'Must agree to terms and conditions and code of conduct',
        )
    return ALLOWED


def validate_new_registration(hackathon, draft, now, existing=None):
    if not can_register(hackathon, now):
        return Decision.deny(
            DenialReason.HACKATHON_NOT_REGISTRABLE,
            'Registration is not available for this hackathon',
        )
    if existing is not None and existing.status != CANCELLED:
        return Decision.deny(
            DenialReason.DUPLICATE_REGISTRATION,
            'You are already registered for this hackathon',
        )
    return validate_registration_data(hackathon, draft)


def validate_update(registration, hackathon, now):
    if registration.status == CANCELLED:
        return Decision.deny(DenialReason.REGISTRATION_CANCELLED, 'Cannot update cancelled registration')
    if now >= hackathon.start_date:
        return Decision.deny(
            DenialReason.HACKATHON_ALREADY_STARTED,
            'Cannot update registration after hackathon has started',
        )
    return ALLOWED


def cancellation_deadline(hackathon):
    return hackathon.start_date - CANCELLATION_WINDOW


def validate_cancellation(registration, hackathon, now):
    if registration.status == CANCELLED:
        return Decision.deny(DenialReason.ALREADY_CANCELLED, 'Registration is already cancelled')
    if now >= cancellation_deadline(hackathon):
        return Decision.deny(
            DenialReason.PAST_CANCELLATION_DEADLINE,
            'Cannot cancel registration within 24 hours of hackathon start time',
        )
    return ALLOWED


def validate_check_in(registration, hackathon, now):
    if registration.checked_in:
        return Decision.deny(DenialReason.ALREADY_CHECKED_IN, 'Participant is already checked in')
    if now < hackathon.start_date:
        return Decision.deny(DenialReason.HACKATHON_NOT_STARTED, 'Cannot check in before hackathon starts')
    return ALLOWED


def validate_project_submission(registration, hackathon, now):
    if registration.project_submitted:
        return Decision.deny(DenialReason.ALREADY_SUBMITTED, 'Project already submitted')
    if now < hackathon.start_date:
        return Decision.deny(DenialReason.HACKATHON_NOT_STARTED, 'Cannot submit project before hackathon starts')
    return ALLOWED
