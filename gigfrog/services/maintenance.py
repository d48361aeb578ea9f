"""
One-off data maintenance, run from scripts/.

migrate_to_multiuser() moves a single-user database onto per-user ownership;
make_saved_leads_private() takes a user's pipeline leads out of the global pool.
"""
import logging

from sqlalchemy import or_

from gigfrog.config import SYSTEM_OWNER
from gigfrog.database import utcnow
from gigfrog.models.lead import Lead
from gigfrog.models.referral import Referral
from gigfrog.models.saved_lead import SavedLead

logger = logging.getLogger('services.maintenance')

LEGACY_USER_ID = 'user123'


def migrate_to_multiuser(session, user_id, legacy_user_id=LEGACY_USER_ID):
    """
    Leads with no owner become global 'system' leads; saved leads and referrals
    of the legacy placeholder user (or with no user) are handed to user_id.

    Returns {'leads': n, 'saved_leads': n, 'referrals': n}.
    """
    if not user_id:
        raise ValueError('user_id is required')
    now = utcnow()

    leads = (
        session.query(Lead)
        .filter(or_(Lead.created_by.is_(None), Lead.created_by == ''))
        .update({Lead.is_global: True, Lead.created_by: SYSTEM_OWNER, Lead.updated_at: now},
                synchronize_session=False)
    )
    logger.info("Marked %d ownerless lead(s) as global", leads)

    saved_leads = (
        session.query(SavedLead)
        .filter(SavedLead.user_id == legacy_user_id)
        .update({SavedLead.user_id: user_id, SavedLead.updated_at: now}, synchronize_session=False)
    )
    logger.info("Reassigned %d saved lead(s) from %s to %s", saved_leads, legacy_user_id, user_id)

    referrals = (
        session.query(Referral)
        .filter(or_(Referral.user_id == legacy_user_id, Referral.user_id == ''))
        .update({Referral.user_id: user_id, Referral.updated_at: now}, synchronize_session=False)
    )
    logger.info("Reassigned %d referral(s) to %s", referrals, user_id)

    session.commit()
    return {'leads': leads, 'saved_leads': saved_leads, 'referrals': referrals}


def make_saved_leads_private(session, user_id):
    """Set is_global=False on every global lead in the user's pipeline. Returns the number changed."""
    if not user_id:
        raise ValueError('user_id is required')

    lead_ids = [
        row.lead_id for row in
        session.query(SavedLead.lead_id).filter(SavedLead.user_id == user_id).all()
    ]
    if not lead_ids:
        logger.info("No saved leads for user %s", user_id)
        return 0

    count = (
        session.query(Lead)
        .filter(Lead.id.in_(lead_ids), Lead.is_global.is_(True))
        .update({Lead.is_global: False}, synchronize_session=False)
    )
    session.commit()
    logger.info("Made %d lead(s) private for user %s", count, user_id)
    return count
