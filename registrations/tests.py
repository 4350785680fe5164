from datetime import datetime, timedelta
from unittest.mock import patch

from django.test import SimpleTestCase, TestCase, override_settings
from django.utils import timezone
from rest_framework.test import APIClient

from accounts.models import User
from hackathon.models import Hackathon
from utils.clock import FixedClock
from .eligibility import (
    DenialReason, RegistrationDraft, TeamMemberDraft, cancellation_deadline, validate_new_registration,
    validate_registration_data,
)
from .lifecycle import RegistrationLifecycle, auto_confirm, default_acceptance_policy, manual_approval
from .models import HackathonRegistration, TeamMember
from .services import RegistrationService
from .stats import aggregate_registrations, registration_rate
from .views import (
    CancelRegistrationView, CheckInView, HackathonRegisterView, RegistrationDetailView, SubmitProjectView,
)

NOW = timezone.make_aware(datetime(2025, 3, 1, 12, 0))


def make_hackathon(**overrides):
    values = dict(
        title='Build Week',
        short_description='A week of building',
        theme='AI',
        start_date=NOW + timedelta(days=7),
        end_date=NOW + timedelta(days=9),
        registration_deadline=NOW + timedelta(days=1),
        team_size_min=1,
        team_size_max=4,
        max_participants=100,
        organizer_name='Org',
        organizer_email='org@example.com',
        status='published',
        is_published=True,
    )
    values.update(overrides)
    return Hackathon(**values)


def team_draft(members=1, name='Foo', terms=True, conduct=True):
    return RegistrationDraft(
        participant_id=1,
        participation_type='team',
        team_name=name,
        team_members=[TeamMemberDraft(name=f'M{i}', email=f'm{i}@example.com') for i in range(members)],
        agree_to_terms=terms,
        agree_to_code_of_conduct=conduct,
    )


def solo_draft(terms=True, conduct=True):
    return RegistrationDraft(participant_id=1, agree_to_terms=terms, agree_to_code_of_conduct=conduct)


class EligibilityTest(SimpleTestCase):

    def test_team_size_bounds(self):
        hackathon = make_hackathon(team_size_min=2, team_size_max=4)
        decision = validate_registration_data(hackathon, solo_draft())
        self.assertEqual(decision.reason, DenialReason.TEAM_SIZE_OUT_OF_BOUNDS)
        self.assertTrue(validate_registration_data(hackathon, team_draft(members=2)).allowed)
        decision = validate_registration_data(hackathon, team_draft(members=4))
        self.assertEqual(decision.reason, DenialReason.TEAM_SIZE_OUT_OF_BOUNDS)

    def test_team_data_required_for_team_participation(self):
        hackathon = make_hackathon()
        self.assertEqual(
            validate_registration_data(hackathon, team_draft(members=0)).reason, DenialReason.TEAM_DATA_MISSING
        )
        self.assertEqual(
            validate_registration_data(hackathon, team_draft(name='  ')).reason, DenialReason.TEAM_DATA_MISSING
        )

    def test_consent_required(self):
        hackathon = make_hackathon()
        self.assertEqual(
            validate_registration_data(hackathon, solo_draft(conduct=False)).reason, DenialReason.CONSENT_REQUIRED
        )
        self.assertEqual(
            validate_registration_data(hackathon, solo_draft(terms=False)).reason, DenialReason.CONSENT_REQUIRED
        )

    def test_not_registrable_when_full(self):
        hackathon = make_hackathon(max_participants=10, registration_count=10)
        decision = validate_new_registration(hackathon, solo_draft(), NOW)
        self.assertEqual(decision.reason, DenialReason.HACKATHON_NOT_REGISTRABLE)

        hackathon.registration_count = 9
        self.assertTrue(validate_new_registration(hackathon, solo_draft(), NOW).allowed)

    def test_not_registrable_after_deadline_or_unpublished(self):
        hackathon = make_hackathon()
        later = hackathon.registration_deadline + timedelta(seconds=1)
        self.assertEqual(
            validate_new_registration(hackathon, solo_draft(), later).reason, DenialReason.HACKATHON_NOT_REGISTRABLE
        )
        draft_hackathon = make_hackathon(status='draft', is_published=False)
        self.assertEqual(
            validate_new_registration(draft_hackathon, solo_draft(), NOW).reason,
            DenialReason.HACKATHON_NOT_REGISTRABLE
        )

    def test_duplicate_registration(self):
        hackathon = make_hackathon()
        existing = HackathonRegistration(status='confirmed')
        decision = validate_new_registration(hackathon, solo_draft(), NOW, existing=existing)
        self.assertEqual(decision.reason, DenialReason.DUPLICATE_REGISTRATION)

        cancelled = HackathonRegistration(status='cancelled')
        self.assertTrue(validate_new_registration(hackathon, solo_draft(), NOW, existing=cancelled).allowed)

    def test_cancellation_deadline_is_a_day_before_start(self):
        hackathon = make_hackathon()
        self.assertEqual(cancellation_deadline(hackathon), hackathon.start_date - timedelta(hours=24))


class LifecycleTest(SimpleTestCase):

    def setUp(self):
        self.lifecycle = RegistrationLifecycle(acceptance_policy=auto_confirm)
        self.hackathon = make_hackathon(team_size_min=1, team_size_max=3)

    def test_team_registration_is_confirmed(self):
        outcome = self.lifecycle.register(self.hackathon, team_draft(members=1, name='Foo'), NOW)
        self.assertTrue(outcome.allowed)
        self.assertEqual(outcome.changes, {'status': 'confirmed'})
        self.assertTrue(outcome.recount_required)

    def test_manual_approval_leaves_registration_pending(self):
        lifecycle = RegistrationLifecycle(acceptance_policy=manual_approval)
        outcome = lifecycle.register(self.hackathon, solo_draft(), NOW)
        self.assertEqual(outcome.changes['status'], 'pending')

    @override_settings(REGISTRATION_AUTO_CONFIRM=False)
    def test_default_policy_follows_setting(self):
        self.assertIs(default_acceptance_policy(), manual_approval)

    def test_cancellation_window(self):
        registration = HackathonRegistration(status='confirmed')
        start = self.hackathon.start_date

        outcome = self.lifecycle.cancel(registration, self.hackathon, start - timedelta(hours=25))
        self.assertTrue(outcome.allowed)
        self.assertEqual(outcome.changes, {'status': 'cancelled'})
        self.assertTrue(outcome.recount_required)

        outcome = self.lifecycle.cancel(registration, self.hackathon, start - timedelta(hours=23))
        self.assertEqual(outcome.decision.reason, DenialReason.PAST_CANCELLATION_DEADLINE)

    def test_cancel_twice(self):
        registration = HackathonRegistration(status='cancelled')
        outcome = self.lifecycle.cancel(registration, self.hackathon, NOW)
        self.assertEqual(outcome.decision.reason, DenialReason.ALREADY_CANCELLED)

    def test_second_check_in_is_rejected(self):
        during = self.hackathon.start_date + timedelta(hours=1)
        registration = HackathonRegistration(status='confirmed')
        outcome = self.lifecycle.check_in(registration, self.hackathon, during)
        self.assertEqual(outcome.changes, {'checked_in': True, 'check_in_time': during})

        registration.checked_in = True
        registration.check_in_time = during
        outcome = self.lifecycle.check_in(registration, self.hackathon, during + timedelta(minutes=5))
        self.assertEqual(outcome.decision.reason, DenialReason.ALREADY_CHECKED_IN)
        self.assertEqual(outcome.changes, {})
        self.assertEqual(registration.check_in_time, during)

    def test_check_in_before_start(self):
        registration = HackathonRegistration(status='confirmed')
        outcome = self.lifecycle.check_in(registration, self.hackathon, NOW)
        self.assertEqual(outcome.decision.reason, DenialReason.HACKATHON_NOT_STARTED)

    def test_project_submission_before_start(self):
        registration = HackathonRegistration(status='confirmed')
        outcome = self.lifecycle.submit_project(registration, self.hackathon, {'title': 'Bot'}, NOW)
        self.assertEqual(outcome.decision.reason, DenialReason.HACKATHON_NOT_STARTED)

    def test_project_submission(self):
        during = self.hackathon.start_date + timedelta(hours=3)
        registration = HackathonRegistration(status='confirmed')
        outcome = self.lifecycle.submit_project(
            registration, self.hackathon, {'title': 'Bot', 'github_repo': 'https://github.com/x/bot'}, during
        )
        self.assertTrue(outcome.allowed)
        self.assertTrue(outcome.changes['project_submitted'])
        self.assertEqual(outcome.changes['project_details']['title'], 'Bot')
        self.assertEqual(outcome.changes['project_details']['submission_time'], during.isoformat())

        registration.project_submitted = True
        outcome = self.lifecycle.submit_project(registration, self.hackathon, {'title': 'Again'}, during)
        self.assertEqual(outcome.decision.reason, DenialReason.ALREADY_SUBMITTED)

    def test_cancelled_registration_cannot_check_in_or_submit(self):
        during = self.hackathon.start_date + timedelta(hours=1)
        registration = HackathonRegistration(status='cancelled')
        self.assertEqual(
            self.lifecycle.check_in(registration, self.hackathon, during).decision.reason,
            DenialReason.REGISTRATION_CANCELLED
        )
        self.assertEqual(
            self.lifecycle.submit_project(registration, self.hackathon, {'title': 'x'}, during).decision.reason,
            DenialReason.REGISTRATION_CANCELLED
        )

    def test_update_rules(self):
        registration = HackathonRegistration(status='confirmed')
        self.assertTrue(self.lifecycle.update(registration, self.hackathon, solo_draft(), NOW).allowed)

        started = self.hackathon.start_date
        outcome = self.lifecycle.update(registration, self.hackathon, solo_draft(), started)
        self.assertEqual(outcome.decision.reason, DenialReason.HACKATHON_ALREADY_STARTED)

        outcome = self.lifecycle.update(registration, self.hackathon, team_draft(members=3), NOW)
        self.assertEqual(outcome.decision.reason, DenialReason.TEAM_SIZE_OUT_OF_BOUNDS)

        cancelled = HackathonRegistration(status='cancelled')
        outcome = self.lifecycle.update(cancelled, self.hackathon, solo_draft(), NOW)
        self.assertEqual(outcome.decision.reason, DenialReason.REGISTRATION_CANCELLED)

    def test_status_transitions(self):
        pending = HackathonRegistration(status='pending')
        self.assertEqual(self.lifecycle.confirm(pending).changes, {'status': 'confirmed'})
        self.assertFalse(self.lifecycle.change_status(pending, 'waitlisted').recount_required)

        rejected = HackathonRegistration(status='rejected')
        outcome = self.lifecycle.change_status(rejected, 'waitlisted')
        self.assertEqual(outcome.decision.reason, DenialReason.INVALID_STATUS_TRANSITION)

        cancelled = HackathonRegistration(status='cancelled')
        outcome = self.lifecycle.confirm(cancelled)
        self.assertEqual(outcome.decision.reason, DenialReason.REGISTRATION_CANCELLED)


class StatsTest(SimpleTestCase):

    def test_aggregate(self):
        stats = aggregate_registrations([
            {'status': 'confirmed', 'participation_type': 'solo', 'checked_in': True,
             'skill_set': ['python', 'react'], 'organization_name': 'Acme'},
            {'status': 'confirmed', 'participation_type': 'team', 'project_submitted': True,
             'skill_set': ['python'], 'organization_name': 'Acme'},
            {'status': 'cancelled', 'participation_type': 'solo', 'skill_set': [], 'organization_name': ''},
        ])
        self.assertEqual(stats['total'], 3)
        self.assertEqual(stats['by_status'], {
            'pending': 0, 'confirmed': 2, 'waitlisted': 0, 'rejected': 0, 'cancelled': 1
        })
        self.assertEqual(stats['checked_in'], 1)
        self.assertEqual(stats['projects_submitted'], 1)
        self.assertEqual(stats['by_participation_type'], {'solo': 2, 'team': 1})
        self.assertEqual(stats['skills'], {'python': 2, 'react': 1})
        self.assertEqual(stats['organizations'], {'Acme': 2})

    def test_empty(self):
        stats = aggregate_registrations([])
        self.assertEqual(stats['total'], 0)
        self.assertEqual(stats['skills'], {})

    def test_registration_rate(self):
        self.assertEqual(registration_rate(1, 3), 33.33)
        self.assertEqual(registration_rate(5, 0), 0)


REGISTRATION_PAYLOAD = {
    'full_name': 'Ada Lovelace',
    'email': 'Ada@Example.com',
    'organization_name': 'Analytical Engines',
    'current_role': 'Engineer',
    'skill_set': ['python', 'math'],
    'participation_type': 'solo',
    'agree_to_terms': True,
    'agree_to_code_of_conduct': True,
}


class RegistrationAPITest(TestCase):

    def setUp(self):
        self.organizer = User.objects.create_user(
            username='organizer', email='org@example.com', password='password123', is_organizer=True
        )
        self.participant = User.objects.create_user(
            username='ada', email='ada@example.com', password='password123'
        )
        self.other = User.objects.create_user(
            username='bob', email='bob@example.com', password='password123'
        )
        self.hackathon = make_hackathon(created_by=self.organizer)
        self.hackathon.save()
        self.client = APIClient()
        self.clock = FixedClock(NOW)

    def register(self, user, payload=None):
        self.client.force_authenticate(user=user)
        with patch.object(HackathonRegisterView, 'clock', self.clock):
            return self.client.post(
                f'/api/v1/hackathons/{self.hackathon.id}/register/', payload or REGISTRATION_PAYLOAD, format='json'
            )

    def test_register(self):
        resp = self.register(self.participant)
        self.assertEqual(resp.status_code, 201)
        self.assertEqual(resp.data['registration']['status'], 'confirmed')
        self.assertEqual(resp.data['registration']['email'], 'ada@example.com')
        self.assertTrue(resp.data['registration_number'].startswith('REG'))
        self.hackathon.refresh_from_db()
        self.assertEqual(self.hackathon.registration_count, 1)

    def test_register_team(self):
        payload = dict(
            REGISTRATION_PAYLOAD,
            participation_type='team',
            team_name='Foo',
            team_members=[{'name': 'Grace', 'email': 'GRACE@example.com', 'role': 'dev'}],
        )
        resp = self.register(self.participant, payload)
        self.assertEqual(resp.status_code, 201)
        self.assertEqual(resp.data['registration']['team_size'], 2)
        member = TeamMember.objects.get(registration_id=resp.data['registration']['id'])
        self.assertEqual(member.email, 'grace@example.com')

    def test_register_twice(self):
        self.assertEqual(self.register(self.participant).status_code, 201)
        resp = self.register(self.participant)
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(resp.data['reason'], 'duplicate_registration')
        self.assertEqual(HackathonRegistration.objects.count(), 1)

    def test_register_without_consent(self):
        resp = self.register(self.participant, dict(REGISTRATION_PAYLOAD, agree_to_terms=False))
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(resp.data['reason'], 'consent_required')

    def test_register_full_hackathon(self):
        self.hackathon.max_participants = 1
        self.hackathon.save()
        self.assertEqual(self.register(self.participant).status_code, 201)
        resp = self.register(self.other)
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(resp.data['reason'], 'hackathon_not_registrable')

    def test_register_unknown_hackathon(self):
        self.client.force_authenticate(user=self.participant)
        resp = self.client.post('/api/v1/hackathons/9999/register/', REGISTRATION_PAYLOAD, format='json')
        self.assertEqual(resp.status_code, 404)
        self.assertEqual(resp.data['error'], 'Hackathon not found.')

    def test_register_requires_authentication(self):
        resp = self.client.post(f'/api/v1/hackathons/{self.hackathon.id}/register/', REGISTRATION_PAYLOAD, format='json')
        self.assertEqual(resp.status_code, 401)

    def test_cancel_frees_a_place(self):
        registration_id = self.register(self.participant).data['registration']['id']
        self.client.force_authenticate(user=self.participant)
        with patch.object(CancelRegistrationView, 'clock', self.clock):
            resp = self.client.post(f'/api/v1/hackathons/registrations/{registration_id}/cancel/')
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.data['registration']['status'], 'cancelled')
        self.hackathon.refresh_from_db()
        self.assertEqual(self.hackathon.registration_count, 0)

    def test_cancel_inside_window(self):
        registration_id = self.register(self.participant).data['registration']['id']
        self.client.force_authenticate(user=self.participant)
        late = FixedClock(self.hackathon.start_date - timedelta(hours=23))
        with patch.object(CancelRegistrationView, 'clock', late):
            resp = self.client.post(f'/api/v1/hackathons/registrations/{registration_id}/cancel/')
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(resp.data['reason'], 'past_cancellation_deadline')

    def test_cancel_someone_elses_registration(self):
        registration_id = self.register(self.participant).data['registration']['id']
        self.client.force_authenticate(user=self.other)
        resp = self.client.post(f'/api/v1/hackathons/registrations/{registration_id}/cancel/')
        self.assertEqual(resp.status_code, 403)

    def test_check_in_by_organizer(self):
        registration_id = self.register(self.participant).data['registration']['id']
        during = FixedClock(self.hackathon.start_date + timedelta(hours=1))

        self.client.force_authenticate(user=self.participant)
        resp = self.client.post(f'/api/v1/hackathons/registrations/{registration_id}/checkin/')
        self.assertEqual(resp.status_code, 403)

        self.client.force_authenticate(user=self.organizer)
        with patch.object(CheckInView, 'clock', during):
            resp = self.client.post(f'/api/v1/hackathons/registrations/{registration_id}/checkin/')
            self.assertEqual(resp.status_code, 200)
            self.assertTrue(resp.data['registration']['checked_in'])

            resp = self.client.post(f'/api/v1/hackathons/registrations/{registration_id}/checkin/')
            self.assertEqual(resp.status_code, 400)
            self.assertEqual(resp.data['reason'], 'already_checked_in')

    def test_submit_project(self):
        registration_id = self.register(self.participant).data['registration']['id']
        self.client.force_authenticate(user=self.participant)
        url = f'/api/v1/hackathons/registrations/{registration_id}/submit/'
        project = {'title': 'Difference Engine', 'github_repo': 'https://github.com/ada/engine'}

        with patch.object(SubmitProjectView, 'clock', self.clock):
            resp = self.client.post(url, project, format='json')
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(resp.data['reason'], 'hackathon_not_started')

        during = FixedClock(self.hackathon.start_date + timedelta(hours=2))
        with patch.object(SubmitProjectView, 'clock', during):
            resp = self.client.post(url, project, format='json')
        self.assertEqual(resp.status_code, 200)
        self.assertTrue(resp.data['registration']['project_submitted'])
        self.assertEqual(resp.data['registration']['project_details']['title'], 'Difference Engine')

    def test_status_change_by_organizer(self):
        registration_id = self.register(self.participant).data['registration']['id']
        self.client.force_authenticate(user=self.organizer)
        url = f'/api/v1/hackathons/registrations/{registration_id}/status/'

        resp = self.client.post(url, {'status': 'waitlisted', 'admin_notes': 'over capacity'}, format='json')
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.data['registration']['status'], 'waitlisted')
        self.assertEqual(resp.data['registration']['admin_notes'], 'over capacity')

        resp = self.client.post(url, {'status': 'pending'}, format='json')
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(resp.data['reason'], 'invalid_status_transition')

    def test_update_registration(self):
        registration_id = self.register(self.participant).data['registration']['id']
        self.client.force_authenticate(user=self.participant)
        url = f'/api/v1/hackathons/registrations/{registration_id}/'
        with patch.object(RegistrationDetailView, 'clock', self.clock):
            resp = self.client.patch(url, {'motivation': 'Curiosity'}, format='json')
            self.assertEqual(resp.status_code, 200)
            self.assertEqual(resp.data['registration']['motivation'], 'Curiosity')

            resp = self.client.patch(url, {'participation_type': 'team'}, format='json')
            self.assertEqual(resp.status_code, 400)
            self.assertEqual(resp.data['reason'], 'team_data_missing')

    def test_my_registrations(self):
        self.register(self.participant)
        self.client.force_authenticate(user=self.participant)
        resp = self.client.get('/api/v1/hackathons/registrations/my/')
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.data['pagination']['total'], 1)
        self.assertEqual(resp.data['registrations'][0]['hackathon']['title'], 'Build Week')

    def test_hackathon_registrations_for_owner_only(self):
        self.register(self.participant)
        url = f'/api/v1/hackathons/{self.hackathon.id}/registrations/'

        self.client.force_authenticate(user=self.other)
        self.assertEqual(self.client.get(url).status_code, 403)

        self.client.force_authenticate(user=self.organizer)
        resp = self.client.get(url, {'search': 'lovelace'})
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(len(resp.data['registrations']), 1)
        self.assertEqual(resp.data['pagination']['limit'], 20)

    def test_refresh_registration_count(self):
        HackathonRegistration.objects.create(
            hackathon=self.hackathon, user=self.participant, full_name='Ada', email='ada@example.com',
            organization_name='A', current_role='Engineer', status='confirmed'
        )
        HackathonRegistration.objects.create(
            hackathon=self.hackathon, user=self.other, full_name='Bob', email='bob@example.com',
            organization_name='B', current_role='Engineer', status='cancelled'
        )
        self.assertEqual(RegistrationService.refresh_registration_count(self.hackathon), 1)

    def test_switching_team_to_solo_drops_team_data(self):
        payload = dict(
            REGISTRATION_PAYLOAD,
            participation_type='team',
            team_name='Foo',
            team_members=[{'name': 'Grace', 'email': 'grace@example.com'}],
        )
        registration_id = self.register(self.participant, payload).data['registration']['id']
        self.hackathon.refresh_from_db()
        self.assertEqual(self.hackathon.team_count, 1)

        self.client.force_authenticate(user=self.participant)
        with patch.object(RegistrationDetailView, 'clock', self.clock):
            resp = self.client.patch(
                f'/api/v1/hackathons/registrations/{registration_id}/', {'participation_type': 'solo'}, format='json'
            )
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.data['registration']['team_name'], '')
        self.assertEqual(resp.data['registration']['team_members'], [])

        registration = HackathonRegistration.objects.get(id=registration_id)
        self.assertEqual(registration.participation_type, 'solo')
        self.assertEqual(registration.team_name, '')
        self.assertEqual(registration.team_members.count(), 0)
        self.hackathon.refresh_from_db()
        self.assertEqual(self.hackathon.team_count, 0)

    def test_solo_registration_ignores_team_fields(self):
        payload = dict(REGISTRATION_PAYLOAD, team_name='Stray', team_members=[{'name': 'X', 'email': 'x@example.com'}])
        resp = self.register(self.participant, payload)
        self.assertEqual(resp.status_code, 201)
        self.assertEqual(resp.data['registration']['team_name'], '')
        self.assertEqual(TeamMember.objects.count(), 0)

    def test_project_submission_updates_hackathon_counter(self):
        registration_id = self.register(self.participant).data['registration']['id']
        self.client.force_authenticate(user=self.participant)
        during = FixedClock(self.hackathon.start_date + timedelta(hours=2))
        with patch.object(SubmitProjectView, 'clock', during):
            resp = self.client.post(
                f'/api/v1/hackathons/registrations/{registration_id}/submit/', {'title': 'Engine'}, format='json'
            )
        self.assertEqual(resp.status_code, 200)
        self.hackathon.refresh_from_db()
        self.assertEqual(self.hackathon.project_submissions, 1)
