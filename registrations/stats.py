"""Aggregate counts over a hackathon's registrations."""
from .models import HackathonRegistration, SOLO, TEAM

STATUSES = [value for value, _ in HackathonRegistration.STATUS_CHOICES]


def _value(registration, name, default=None):
    if isinstance(registration, dict):
        return registration.get(name, default)
    return getattr(registration, name, default)


def aggregate_registrations(registrations):
    """
    Fold registrations into counts in a single pass.

    Accepts model instances or plain mappings with the same field names.
    Frequency tables keep the order in which a value was first seen.
    """
    by_status = {status: 0 for status in STATUSES}
    by_participation_type = {SOLO: 0, TEAM: 0}
    skills = {}
    organizations = {}
    total = checked_in = projects_submitted = 0

    for registration in registrations:
        total += 1
        status = _value(registration, 'status')
        by_status[status] = by_status.get(status, 0) + 1

        participation_type = _value(registration, 'participation_type', SOLO)
        by_participation_type[participation_type] = by_participation_type.get(participation_type, 0) + 1

        if _value(registration, 'checked_in', False):
            checked_in += 1
        if _value(registration, 'project_submitted', False):
            projects_submitted += 1

        for skill in _value(registration, 'skill_set') or []:
            skills[skill] = skills.get(skill, 0) + 1

        organization = _value(registration, 'organization_name')
        if organization:
            organizations[organization] = organizations.get(organization, 0) + 1

    return {
        'total': total,
        'by_status': by_status,
        'checked_in': checked_in,
        'projects_submitted': projects_submitted,
        'by_participation_type': by_participation_type,
        'skills': skills,
        'organizations': organizations,
    }


def registration_rate(confirmed, max_participants):
    if not max_participants:
        return 0
    return round(confirmed / max_participants * 100, 2)
