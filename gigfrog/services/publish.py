"""
Publishing: promote leads from a user's pipeline to the shared (global) pool.

A published lead is owned by 'community' and remembers who shared it and when.
Bulk publishing also strips personal contact data and additional links; a single
publish keeps them. Publishing a lead that is already global changes nothing.
"""
import logging

from gigfrog.config import COMMUNITY_OWNER
from gigfrog.database import utcnow
from gigfrog.errors import NotFound
from gigfrog.models.lead import CONTACT_FIELDS, Lead
from gigfrog.models.saved_lead import SavedLead

logger = logging.getLogger('services.publish')


def mark_public(lead, user, now):
    """Move `lead` into the global pool in place."""
    lead.is_global = True
    lead.created_by = COMMUNITY_OWNER
    lead.shared_by = user.id
    lead.shared_at = now
    if lead.date_posted is None:
        lead.date_posted = now
    return lead


def strip_contacts(lead):
    for name in CONTACT_FIELDS:
        setattr(lead, name, [] if name == 'additional_emails' else '')
    lead.additional_links = None
    return lead


def publish_single(session, user, lead_id):
    saved = session.query(SavedLead).filter_by(user_id=user.id, lead_id=lead_id).first()
    if saved is None:
        raise NotFound('Lead not found in your pipeline')
    lead = session.get(Lead, lead_id)
    if lead is None:
        raise NotFound('Lead not found')

    if lead.is_global:
        logger.info("Lead %s already global; nothing to publish", lead_id)
        return {'message': 'Lead published successfully', 'leadId': lead_id}

    mark_public(lead, user, utcnow())
    session.commit()
    logger.info("User %s published lead %s", user.id, lead_id)
    return {'message': 'Lead published successfully', 'leadId': lead_id}


def publish_all(session, user):
    """Publish every non-global lead in the caller's pipeline. Commits lead by lead."""
    lead_ids = [
        row.lead_id for row in
        session.query(SavedLead.lead_id).filter(SavedLead.user_id == user.id).all()
    ]
    if not lead_ids:
        return {'message': 'No leads to publish', 'count': 0}

    leads = (
        session.query(Lead)
        .filter(Lead.id.in_(lead_ids), Lead.is_global.is_(False))
        .order_by(Lead.created_at, Lead.id)
        .all()
    )
    if not leads:
        return {'message': 'All leads are already public', 'count': 0}

    count = 0
    for lead in leads:
        strip_contacts(mark_public(lead, user, utcnow()))
        session.commit()
        count += 1

    logger.info("User %s published %d lead(s)", user.id, count)
    return {'message': f'{count} lead(s) published successfully', 'count': count}
