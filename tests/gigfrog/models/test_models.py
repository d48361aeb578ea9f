"""Tests for model serialisation (camelCase wire format)."""
from gigfrog.models.activity import LeadActivity
from gigfrog.models.lead import Lead
from gigfrog.models.referral import Referral


class TestLeadToDict:

    def test_persisted_lead(self, make_lead):
        lead = make_lead()
        data = lead.to_dict()
        assert data['_id'] == lead.id
        assert data['contactEmail'] == 'dana@acme.example'
        assert data['additionalEmails'] == ['jobs@acme.example']
        assert data['createdAt'].startswith('2026-01-15T10:01')
        assert data['datePosted'] is None

    def test_unset_links_omitted(self):
        data = Lead(title='E', company='A', additional_links=None).to_dict()
        assert 'additionalLinks' not in data

    def test_empty_links_kept(self):
        assert Lead(title='E', company='A', additional_links=[]).to_dict()['additionalLinks'] == []

    def test_defaults_on_transient_lead(self):
        data = Lead(title='E', company='A').to_dict()
        assert data['isGlobal'] is False
        assert data['compensation'] == {}
        assert data['location'] == ''


class TestSavedLeadToDict:

    def test_keys(self, make_lead, make_saved_lead):
        saved = make_saved_lead(make_lead())
        data = saved.to_dict()
        assert data['leadId'] == saved.lead_id
        assert data['currentStatus'] == 'saved'
        assert data['appliedAt'] is None
        assert len(data['statusHistory']) == 1


class TestReferralToDict:

    def test_keys(self, make_referral):
        data = make_referral(linked_leads=['x']).to_dict()
        assert data['linkedLeads'] == ['x']
        assert data['activityHistory'][0]['action'] == 'created'
        assert data['userId'] == 'user-alice'

    def test_transient_referral_lists(self):
        data = Referral(name='Sam').to_dict()
        assert data['linkedLeads'] == []
        assert data['activityHistory'] == []


class TestLeadActivityToDict:

    def test_keys(self, db_session):
        entry = LeadActivity(
            user_id='user-alice', lead_id='lead-1', saved_lead_id='saved-1',
            action='status_changed', details={'from': 'saved', 'to': 'applied'},
            description='Status changed from saved to applied',
        )
        db_session.add(entry)
        db_session.commit()
        data = entry.to_dict()
        assert data['userLeadId'] == 'saved-1'
        assert data['details'] == {'from': 'saved', 'to': 'applied'}
        assert data['createdAt'] is not None

    def test_unlinked_entry(self):
        data = LeadActivity(user_id='u', lead_id='l', action='unsaved').to_dict()
        assert data['userLeadId'] is None
        assert data['details'] is None
        assert data['description'] == ''
