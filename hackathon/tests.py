from datetime import datetime, timedelta
from unittest.mock import patch

from django.test import SimpleTestCase, TestCase
from django.utils import timezone
from rest_framework.test import APIClient

from accounts.models import User
from registrations.models import HackathonRegistration
from utils.clock import FixedClock
from . import rules
from .models import Hackathon
from .views import FeaturedHackathonsView, HackathonListView

NOW = timezone.make_aware(datetime(2025, 3, 1, 12, 0))


def definition(**overrides):
    values = {
        'start_date': NOW + timedelta(days=7),
        'end_date': NOW + timedelta(days=9),
        'registration_deadline': NOW + timedelta(days=5),
        'team_size_min': 1,
        'team_size_max': 4,
        'max_participants': 100,
    }
    values.update(overrides)
    return values


class HackathonRulesTest(SimpleTestCase):

    def test_valid_definition(self):
        self.assertEqual(rules.validate_hackathon(definition()), [])

    def test_date_ordering(self):
        violations = rules.validate_hackathon(definition(end_date=NOW + timedelta(days=7)))
        self.assertEqual([v.field for v in violations], ['end_date'])

        violations = rules.validate_hackathon(definition(registration_deadline=NOW + timedelta(days=7)))
        self.assertEqual([v.message for v in violations], ['Registration deadline must be before start date'])

    def test_team_size_ordering(self):
        violations = rules.validate_hackathon(definition(team_size_min=5, team_size_max=4))
        self.assertEqual(violations[0].message, 'Minimum team size cannot be greater than maximum team size')

    def test_judging_weights(self):
        accepted = [{'criterion': 'Impact', 'weight': 40}, {'criterion': 'Design', 'weight': 30},
                    {'criterion': 'Code', 'weight': 30}]
        self.assertEqual(rules.validate_hackathon(definition(judging_criteria=accepted)), [])

        rejected = [{'criterion': 'Impact', 'weight': 40}, {'criterion': 'Design', 'weight': 30},
                    {'criterion': 'Code', 'weight': 20}]
        violations = rules.validate_hackathon(definition(judging_criteria=rejected))
        self.assertEqual([v.message for v in violations], ['Judging criteria weights must sum to 100'])

    def test_registration_status(self):
        hackathon = Hackathon(**definition(max_participants=2))
        self.assertEqual(rules.registration_status(hackathon, NOW), rules.REGISTRATION_OPEN)
        hackathon.registration_count = 2
        self.assertEqual(rules.registration_status(hackathon, NOW), rules.REGISTRATION_FULL)
        later = hackathon.registration_deadline + timedelta(minutes=1)
        self.assertEqual(rules.registration_status(hackathon, later), rules.REGISTRATION_CLOSED)

    def test_temporal_status(self):
        hackathon = Hackathon(**definition())
        self.assertEqual(rules.temporal_status(hackathon, NOW), rules.UPCOMING)
        self.assertEqual(rules.temporal_status(hackathon, hackathon.start_date), rules.ONGOING)
        self.assertEqual(rules.temporal_status(hackathon, hackathon.end_date + timedelta(seconds=1)), rules.COMPLETED)

    def test_duration_days_rounds_up(self):
        hackathon = Hackathon(**definition(end_date=NOW + timedelta(days=8, hours=1)))
        self.assertEqual(rules.duration_days(hackathon), 2)

    def test_can_register_requires_published(self):
        hackathon = Hackathon(status='draft', **definition())
        self.assertFalse(rules.can_register(hackathon, NOW))
        hackathon.status = 'published'
        self.assertTrue(rules.can_register(hackathon, NOW))

    def test_terminal_status_is_never_reopened(self):
        self.assertFalse(rules.can_change_status(Hackathon(status='completed'), 'published'))
        self.assertFalse(rules.can_change_status(Hackathon(status='cancelled'), 'draft'))
        self.assertTrue(rules.can_change_status(Hackathon(status='draft'), 'published'))

    def test_publish_toggle_only_before_the_event_runs(self):
        ongoing = Hackathon(status='ongoing')
        self.assertFalse(rules.can_change_status(ongoing, 'draft'))
        self.assertFalse(rules.can_change_status(ongoing, 'published'))
        self.assertTrue(rules.can_change_status(ongoing, 'completed'))
        self.assertTrue(rules.can_change_status(Hackathon(status='published'), 'cancelled'))
        self.assertFalse(rules.can_change_status(Hackathon(status='draft'), 'completed'))


HACKATHON_PAYLOAD = {
    'title': 'Build Week',
    'short_description': 'A week of building',
    'theme': 'AI',
    'tags': ['ml', 'web'],
    'start_date': '2030-06-10T09:00:00Z',
    'end_date': '2030-06-12T18:00:00Z',
    'registration_deadline': '2030-06-01T00:00:00Z',
    'location': 'Lagos',
    'mode': 'hybrid',
    'team_size_min': 1,
    'team_size_max': 4,
    'max_participants': 50,
    'organizer_name': 'Build Org',
    'organizer_email': 'org@example.com',
    'prizes': [{'position': '1st', 'amount': '$1000'}],
    'judging_criteria': [
        {'criterion': 'Impact', 'weight': 40},
        {'criterion': 'Design', 'weight': 30},
        {'criterion': 'Code', 'weight': 30},
    ],
    'is_published': True,
}


class HackathonAPITest(TestCase):

    def setUp(self):
        self.organizer = User.objects.create_user(
            username='organizer', email='org@example.com', password='password123', is_organizer=True
        )
        self.participant = User.objects.create_user(
            username='participant', email='p@example.com', password='password123'
        )
        self.admin = User.objects.create_user(
            username='admin', email='admin@example.com', password='password123', is_admin=True
        )
        self.client = APIClient()

    def create(self, payload=None, user=None):
        self.client.force_authenticate(user=user or self.organizer)
        return self.client.post('/api/v1/hackathons/', payload or HACKATHON_PAYLOAD, format='json')

    def test_create_published(self):
        resp = self.create()
        self.assertEqual(resp.status_code, 201)
        hackathon = resp.data['hackathon']
        self.assertEqual(hackathon['status'], 'published')
        self.assertEqual(hackathon['created_by']['username'], 'organizer')
        self.assertEqual(len(hackathon['judging_criteria']), 3)
        self.assertEqual(hackathon['duration_days'], 3)

    def test_create_rejects_bad_weights(self):
        payload = dict(HACKATHON_PAYLOAD, judging_criteria=[{'criterion': 'Impact', 'weight': 90}])
        resp = self.create(payload)
        self.assertEqual(resp.status_code, 400)
        self.assertIn('judging_criteria', resp.data)
        self.assertEqual(Hackathon.objects.count(), 0)

    def test_create_rejects_bad_dates(self):
        payload = dict(HACKATHON_PAYLOAD, registration_deadline='2030-06-11T00:00:00Z')
        resp = self.create(payload)
        self.assertEqual(resp.status_code, 400)
        self.assertIn('registration_deadline', resp.data)

    def test_participant_cannot_create(self):
        resp = self.create(user=self.participant)
        self.assertEqual(resp.status_code, 403)

    def test_draft_then_publish(self):
        self.client.force_authenticate(user=self.organizer)
        resp = self.client.post('/api/v1/hackathons/draft/', HACKATHON_PAYLOAD, format='json')
        self.assertEqual(resp.status_code, 201)
        hackathon_id = resp.data['hackathon']['id']
        self.assertEqual(resp.data['hackathon']['status'], 'draft')

        self.client.force_authenticate(user=self.participant)
        self.assertEqual(self.client.get(f'/api/v1/hackathons/{hackathon_id}/').status_code, 403)
        self.assertEqual(self.client.post(f'/api/v1/hackathons/{hackathon_id}/publish/').status_code, 403)

        self.client.force_authenticate(user=self.organizer)
        resp = self.client.post(f'/api/v1/hackathons/{hackathon_id}/publish/')
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.data['hackathon']['status'], 'published')

    def test_completed_hackathon_cannot_be_published(self):
        hackathon_id = self.create().data['hackathon']['id']
        Hackathon.objects.filter(id=hackathon_id).update(status='completed')
        resp = self.client.post(f'/api/v1/hackathons/{hackathon_id}/publish/')
        self.assertEqual(resp.status_code, 400)
        resp = self.client.patch(f'/api/v1/hackathons/{hackathon_id}/', {'is_published': True}, format='json')
        self.assertEqual(resp.status_code, 400)

    def test_list_hides_drafts_from_public(self):
        self.create()
        self.create(dict(HACKATHON_PAYLOAD, title='Secret', is_published=False))
        self.client.force_authenticate(user=None)
        with patch.object(HackathonListView, 'clock', FixedClock(NOW)):
            resp = self.client.get('/api/v1/hackathons/')
        self.assertEqual(resp.status_code, 200)
        self.assertEqual([h['title'] for h in resp.data['hackathons']], ['Build Week'])
        self.assertEqual(resp.data['pagination']['limit'], 12)
        self.assertEqual(resp.data['hackathons'][0]['registration_status'], 'open')

        self.client.force_authenticate(user=self.admin)
        resp = self.client.get('/api/v1/hackathons/')
        self.assertEqual(resp.data['pagination']['total'], 2)

    def test_list_filters(self):
        self.create()
        self.create(dict(HACKATHON_PAYLOAD, title='Web Jam', theme='Web', mode='online', tags=['web']))
        self.client.force_authenticate(user=None)

        resp = self.client.get('/api/v1/hackathons/', {'mode': 'online'})
        self.assertEqual([h['title'] for h in resp.data['hackathons']], ['Web Jam'])

        resp = self.client.get('/api/v1/hackathons/', {'tags': 'ml'})
        self.assertEqual([h['title'] for h in resp.data['hackathons']], ['Build Week'])

        resp = self.client.get('/api/v1/hackathons/', {'sort_by': 'title', 'sort_order': 'desc'})
        self.assertEqual([h['title'] for h in resp.data['hackathons']], ['Web Jam', 'Build Week'])

        with patch.object(HackathonListView, 'clock', FixedClock(NOW)):
            resp = self.client.get('/api/v1/hackathons/', {'date_range': 'completed'})
        self.assertEqual(resp.data['hackathons'], [])

    def test_featured(self):
        self.create()
        self.client.force_authenticate(user=None)
        with patch.object(FeaturedHackathonsView, 'clock', FixedClock(NOW)):
            resp = self.client.get('/api/v1/hackathons/featured/')
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(len(resp.data), 1)

    def test_update_by_owner_only(self):
        hackathon_id = self.create().data['hackathon']['id']
        url = f'/api/v1/hackathons/{hackathon_id}/'

        self.client.force_authenticate(user=self.participant)
        self.assertEqual(self.client.patch(url, {'title': 'Mine'}, format='json').status_code, 403)

        self.client.force_authenticate(user=self.organizer)
        resp = self.client.patch(url, {'title': 'Build Week 2'}, format='json')
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.data['hackathon']['title'], 'Build Week 2')

        resp = self.client.patch(url, {'end_date': '2030-06-09T00:00:00Z'}, format='json')
        self.assertEqual(resp.status_code, 400)

    def test_delete_blocked_by_active_registrations(self):
        hackathon_id = self.create().data['hackathon']['id']
        registration = HackathonRegistration.objects.create(
            hackathon_id=hackathon_id, user=self.participant, full_name='P', email='p@example.com',
            organization_name='Org', current_role='Dev', status='confirmed'
        )
        url = f'/api/v1/hackathons/{hackathon_id}/'
        self.assertEqual(self.client.delete(url).status_code, 400)

        registration.status = 'cancelled'
        registration.save()
        self.assertEqual(self.client.delete(url).status_code, 200)
        self.assertFalse(Hackathon.objects.filter(id=hackathon_id).exists())

    def test_detail_includes_registration_for_caller(self):
        hackathon_id = self.create().data['hackathon']['id']
        HackathonRegistration.objects.create(
            hackathon_id=hackathon_id, user=self.participant, full_name='P', email='p@example.com',
            organization_name='Org', current_role='Dev', status='confirmed', skill_set=['python']
        )
        url = f'/api/v1/hackathons/{hackathon_id}/'

        self.client.force_authenticate(user=self.participant)
        resp = self.client.get(url)
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.data['user_registration']['status'], 'confirmed')
        self.assertIsNone(resp.data['registration_stats'])

        self.client.force_authenticate(user=self.organizer)
        resp = self.client.get(url)
        self.assertEqual(resp.data['registration_stats']['total'], 1)
        self.assertIsNone(resp.data['user_registration'])

    def test_stats(self):
        hackathon_id = self.create().data['hackathon']['id']
        HackathonRegistration.objects.create(
            hackathon_id=hackathon_id, user=self.participant, full_name='P', email='p@example.com',
            organization_name='Org', current_role='Dev', status='confirmed', skill_set=['python']
        )
        resp = self.client.get(f'/api/v1/hackathons/{hackathon_id}/stats/')
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.data['registration_stats']['by_status']['confirmed'], 1)
        self.assertEqual(resp.data['skill_stats'], {'python': 1})
        self.assertEqual(resp.data['organization_stats'], {'Org': 1})
        self.assertEqual(resp.data['registration_rate'], 2.0)

    def test_not_found(self):
        resp = self.client.get('/api/v1/hackathons/9999/')
        self.assertEqual(resp.status_code, 404)
        self.assertEqual(resp.data['error'], 'Hackathon not found.')

    def test_cancelled_hackathon_rejects_publish_and_registration(self):
        hackathon_id = self.create().data['hackathon']['id']
        url = f'/api/v1/hackathons/{hackathon_id}/'
        resp = self.client.patch(url, {'status': 'cancelled'}, format='json')
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(Hackathon.objects.get(id=hackathon_id).status, 'cancelled')

        self.assertEqual(self.client.post(f'/api/v1/hackathons/{hackathon_id}/publish/').status_code, 400)
        resp = self.client.patch(url, {'status': 'published'}, format='json')
        self.assertEqual(resp.status_code, 400)
        self.assertIn('status', resp.data)

        self.client.force_authenticate(user=self.participant)
        resp = self.client.post(f'/api/v1/hackathons/{hackathon_id}/register/', {
            'full_name': 'Pat',
            'email': 'p@example.com',
            'organization_name': 'Org',
            'current_role': 'Dev',
            'participation_type': 'solo',
            'agree_to_terms': True,
            'agree_to_code_of_conduct': True,
        }, format='json')
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(resp.data['reason'], 'hackathon_not_registrable')

    def test_ongoing_hackathon_cannot_return_to_draft(self):
        hackathon_id = self.create().data['hackathon']['id']
        url = f'/api/v1/hackathons/{hackathon_id}/'
        self.assertEqual(self.client.patch(url, {'status': 'ongoing'}, format='json').status_code, 200)

        resp = self.client.patch(url, {'is_published': False}, format='json')
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(Hackathon.objects.get(id=hackathon_id).status, 'ongoing')

        resp = self.client.patch(url, {'status': 'completed'}, format='json')
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.data['hackathon']['status'], 'completed')

    def test_new_hackathon_cannot_start_cancelled(self):
        resp = self.create(dict(HACKATHON_PAYLOAD, status='cancelled'))
        self.assertEqual(resp.status_code, 400)
        self.assertIn('status', resp.data)

    def test_unpublish_returns_to_draft(self):
        hackathon_id = self.create().data['hackathon']['id']
        resp = self.client.patch(f'/api/v1/hackathons/{hackathon_id}/', {'is_published': False}, format='json')
        self.assertEqual(resp.status_code, 200)
        hackathon = Hackathon.objects.get(id=hackathon_id)
        self.assertEqual(hackathon.status, 'draft')
        self.assertTrue(hackathon.is_draft)

    def test_tag_filter_matches_non_ascii_tags(self):
        self.create(dict(HACKATHON_PAYLOAD, title='Café Hack', tags=['café']))
        self.create()
        self.client.force_authenticate(user=None)
        resp = self.client.get('/api/v1/hackathons/', {'tags': 'café'})
        self.assertEqual([h['title'] for h in resp.data['hackathons']], ['Café Hack'])
