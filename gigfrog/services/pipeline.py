"""
Pipeline view — a user's saved leads grouped by current status.

Each group is {_id: status, count, leads: [{savedLead, leadDetails, referral}]}.
Groups are ordered by status name. leadDetails is None when the lead row no
longer exists; referral is the user's earliest referral linked to the entry.
"""
from itertools import groupby

from gigfrog.models.lead import Lead
from gigfrog.models.referral import Referral
from gigfrog.models.saved_lead import SavedLead


def _referrals_by_saved_lead(session, user):
    referrals = (
        session.query(Referral)
        .filter(Referral.user_id == user.id)
        .order_by(Referral.created_at, Referral.id)
        .all()
    )
    by_saved_lead = {}
    for referral in referrals:
        for saved_lead_id in referral.linked_leads or []:
            by_saved_lead.setdefault(saved_lead_id, referral)
    return by_saved_lead


def get_pipeline(session, user):
    rows = (
        session.query(SavedLead, Lead)
        .outerjoin(Lead, Lead.id == SavedLead.lead_id)
        .filter(SavedLead.user_id == user.id)
        .order_by(SavedLead.current_status, SavedLead.last_activity_at.desc(), SavedLead.id)
        .all()
    )
    referrals = _referrals_by_saved_lead(session, user)

    groups = []
    for status, group_rows in groupby(rows, key=lambda row: row[0].current_status):
        items = []
        for saved, lead in group_rows:
            referral = referrals.get(saved.id)
            items.append({
                'savedLead': saved.to_dict(),
                'leadDetails': lead.to_dict() if lead else None,
                'referral': referral.to_dict() if referral else None,
            })
        groups.append({'_id': status, 'count': len(items), 'leads': items})
    return groups
