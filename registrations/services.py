import logging

from django.db import IntegrityError, transaction

from .eligibility import Decision, DenialReason
from .lifecycle import Outcome
from .models import CANCELLED, SOLO, TEAM, HackathonRegistration, TeamMember

logger = logging.getLogger(__name__)


class DuplicateRegistrationError(Exception):
    pass


class RegistrationService:
    """Applies lifecycle outcomes to stored registrations."""

    DUPLICATE_DENIAL = Decision.deny(
        DenialReason.DUPLICATE_REGISTRATION,
        'You are already registered for this hackathon',
    )

    @staticmethod
    def refresh_registration_count(hackathon):
        """Recompute the hackathon's materialized counts over non-cancelled registrations."""
        active = HackathonRegistration.objects.filter(hackathon=hackathon).exclude(status=CANCELLED)
        hackathon.registration_count = active.count()
        hackathon.team_count = active.filter(participation_type=TEAM).count()
        hackathon.project_submissions = active.filter(project_submitted=True).count()
        hackathon.save(update_fields=['registration_count', 'team_count', 'project_submissions', 'updated_at'])
        return hackathon.registration_count

    @staticmethod
    def create_registration(hackathon, user, outcome, data):
        """
        Store a new registration accepted by the lifecycle.

        Raises ``DuplicateRegistrationError`` when the unique constraint on
        (hackathon, user) rejects the insert.
        """
        team_members = data.pop('team_members', [])
        if data.get('participation_type', SOLO) == SOLO:
            data['team_name'] = ''
            team_members = []
        try:
            with transaction.atomic():
                registration = HackathonRegistration.objects.create(
                    hackathon=hackathon,
                    user=user,
                    **data,
                    **outcome.changes
                )
                for member in team_members:
                    TeamMember.objects.create(registration=registration, **member)
        except IntegrityError:
            logger.warning(f"Duplicate registration rejected for user {user.id} in hackathon {hackathon.id}")
            raise DuplicateRegistrationError()

        logger.info(f"Registration {registration.id} created for hackathon {hackathon.id} with status {registration.status}")
        if outcome.recount_required:
            RegistrationService.refresh_registration_count(hackathon)
        return registration

    @staticmethod
    def update_registration(registration, data):
        team_members = data.pop('team_members', None)
        with transaction.atomic():
            for attr, value in data.items():
                setattr(registration, attr, value)
            if registration.participation_type == SOLO:
                # team name and members only exist for team participation
                registration.team_name = ''
                team_members = []
            registration.save()
            if team_members is not None:
                registration.team_members.all().delete()
                for member in team_members:
                    TeamMember.objects.create(registration=registration, **member)
        if 'participation_type' in data:
            RegistrationService.refresh_registration_count(registration.hackathon)
        return registration

    @staticmethod
    def apply(registration, outcome: Outcome):
        """Write an allowed outcome's changes and refresh counts if asked to."""
        if not outcome.allowed:
            return registration
        for attr, value in outcome.changes.items():
            setattr(registration, attr, value)
        if outcome.changes:
            registration.save(update_fields=list(outcome.changes) + ['updated_at'])
        if outcome.recount_required or 'project_submitted' in outcome.changes:
            RegistrationService.refresh_registration_count(registration.hackathon)
        return registration
