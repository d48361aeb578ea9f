"""
Referral store — personal contacts, owner-scoped.

Each update appends exactly one activity entry; when several things change in
one call the description is picked by describe_update()'s priority order.
"""
import logging

from gigfrog.database import utcnow
from gigfrog.errors import NotFound, ValidationFailed
from gigfrog.models.referral import Referral
from gigfrog.models.saved_lead import SavedLead
from gigfrog.schemas import parse_id

logger = logging.getLogger('services.referrals')


def activity_entry(action, description, at=None):
    at = at or utcnow()
    return {'timestamp': at.isoformat(), 'action': action, 'description': description}


def describe_update(referral, changes):
    """Notes change first, then link growth, then link shrink, else generic."""
    if 'notes' in changes and changes['notes'] != (referral.notes or ''):
        return 'Notes updated'
    if 'linked_leads' in changes:
        before = len(referral.linked_leads or [])
        after = len(changes['linked_leads'])
        if after > before:
            return 'Lead linked'
        if after < before:
            return 'Lead unlinked'
    return 'Referral updated'


def _check_links(session, user, linked_leads):
    """Normalise linked saved-lead ids; every one must be a saved lead of `user`."""
    ids = []
    for value in linked_leads:
        saved_lead_id = parse_id(value, 'linked lead id')
        if saved_lead_id not in ids:
            ids.append(saved_lead_id)
    if not ids:
        return ids

    owned = {
        row.id for row in
        session.query(SavedLead.id)
        .filter(SavedLead.user_id == user.id, SavedLead.id.in_(ids))
        .all()
    }
    missing = [i for i in ids if i not in owned]
    if missing:
        raise ValidationFailed(f'Unknown saved lead(s): {", ".join(missing)}')
    return ids


def _owned(session, referral_id, user):
    referral = session.get(Referral, referral_id)
    if referral is None or referral.user_id != user.id:
        raise NotFound('Referral not found')
    return referral


def list_referrals(session, user):
    referrals = (
        session.query(Referral)
        .filter(Referral.user_id == user.id)
        .order_by(Referral.created_at.desc(), Referral.id)
        .all()
    )
    return [r.to_dict() for r in referrals]


def get_referral(session, referral_id, user):
    return _owned(session, referral_id, user)


def get_activity(session, referral_id, user):
    return list(_owned(session, referral_id, user).activity_history or [])


def create_referral(session, user, payload):
    now = utcnow()
    referral = Referral(
        user_id=user.id,
        name=payload.name,
        company=payload.company,
        email=payload.email,
        linkedin=payload.linkedin,
        notes=payload.notes,
        linked_leads=_check_links(session, user, payload.linked_leads),
        activity_history=[activity_entry('created', 'Referral created', now)],
        created_at=now,
        updated_at=now,
    )
    session.add(referral)
    session.commit()
    logger.info("User %s created referral %s", user.id, referral.id)
    return referral


def update_referral(session, referral_id, user, payload):
    referral = _owned(session, referral_id, user)
    changes = payload.changes()
    if 'linked_leads' in changes:
        changes['linked_leads'] = _check_links(session, user, changes['linked_leads'])

    description = describe_update(referral, changes)
    for name, value in changes.items():
        setattr(referral, name, value)
    referral.activity_history = [
        *(referral.activity_history or []),
        activity_entry('updated', description),
    ]
    session.commit()
    logger.info("Referral %s updated: %s", referral.id, description)
    return referral


def delete_referral(session, referral_id, user):
    referral = _owned(session, referral_id, user)
    session.delete(referral)
    session.commit()
    logger.info("User %s deleted referral %s", user.id, referral_id)
