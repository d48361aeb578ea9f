"""Tests for gigfrog.services.pipeline.get_pipeline."""
from datetime import datetime, timezone, timedelta

from gigfrog.services.pipeline import get_pipeline

BASE_TIME = datetime(2026, 1, 15, 10, 0, tzinfo=timezone.utc)


class TestGetPipeline:

    def test_empty(self, db_session, alice):
        assert get_pipeline(db_session, alice) == []

    def test_groups_sorted_by_status_name(self, db_session, make_lead, make_saved_lead, alice):
        make_saved_lead(make_lead(), current_status='saved')
        make_saved_lead(make_lead(), current_status='applied')
        make_saved_lead(make_lead(), current_status='saved')
        make_saved_lead(make_lead(), current_status='offer')

        groups = get_pipeline(db_session, alice)
        assert [g['_id'] for g in groups] == ['applied', 'offer', 'saved']
        assert [g['count'] for g in groups] == [1, 1, 2]
        assert all(len(g['leads']) == g['count'] for g in groups)

    def test_item_shape(self, db_session, make_lead, make_saved_lead, alice):
        lead = make_lead(title='Staff Engineer')
        saved = make_saved_lead(lead)

        item = get_pipeline(db_session, alice)[0]['leads'][0]
        assert item['savedLead']['_id'] == saved.id
        assert item['leadDetails']['title'] == 'Staff Engineer'
        assert item['referral'] is None

    def test_only_callers_saved_leads(self, db_session, make_lead, make_saved_lead, alice, bob):
        lead = make_lead(is_global=True)
        make_saved_lead(lead, user_id='user-alice')
        make_saved_lead(lead, user_id='user-bob', current_status='applied')
        groups = get_pipeline(db_session, bob)
        assert [(g['_id'], g['count']) for g in groups] == [('applied', 1)]

    def test_missing_lead_gives_null_details(self, db_session, make_lead, make_saved_lead, alice):
        lead = make_lead()
        make_saved_lead(lead)
        db_session.delete(lead)
        db_session.commit()
        item = get_pipeline(db_session, alice)[0]['leads'][0]
        assert item['leadDetails'] is None

    def test_earliest_linked_referral(self, db_session, make_lead, make_saved_lead, make_referral, alice):
        saved = make_saved_lead(make_lead())
        make_referral(name='Later', linked_leads=[saved.id], created_at=BASE_TIME + timedelta(days=5))
        make_referral(name='Earlier', linked_leads=[saved.id], created_at=BASE_TIME + timedelta(days=1))
        make_referral(name='Unlinked', linked_leads=[], created_at=BASE_TIME)

        item = get_pipeline(db_session, alice)[0]['leads'][0]
        assert item['referral']['name'] == 'Earlier'

    def test_other_users_referrals_ignored(self, db_session, make_lead, make_saved_lead, make_referral, alice):
        saved = make_saved_lead(make_lead())
        make_referral(user_id='user-bob', linked_leads=[saved.id])
        assert get_pipeline(db_session, alice)[0]['leads'][0]['referral'] is None
