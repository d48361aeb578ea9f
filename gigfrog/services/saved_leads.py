"""
Saved-lead (pipeline entry) store.

Status moves are only legal along STATUS_TRANSITIONS. Every move appends one
entry to status_history; the applied/interviewing/offer milestone timestamps
are set the first time the status is reached and never overwritten.

Saves, status moves, priority changes and removals also add a LeadActivity row
in the same commit; get_activity() reads that timeline newest first.
"""
import logging

from sqlalchemy.exc import IntegrityError

from gigfrog.database import utcnow
from gigfrog.errors import Conflict, NotFound, ValidationFailed
from gigfrog.models.activity import ACTIONS, LeadActivity
from gigfrog.models.lead import Lead, new_id
from gigfrog.models.saved_lead import SavedLead
from gigfrog.services import leads as lead_store

logger = logging.getLogger('services.saved_leads')

# Backward moves are allowed to correct mistakes, but `rejected` cannot go
# straight to `offer` while `archived` can.
STATUS_TRANSITIONS = {
    'saved':        ('applied', 'rejected', 'archived'),
    'applied':      ('saved', 'interviewing', 'rejected', 'archived'),
    'interviewing': ('saved', 'applied', 'offer', 'rejected', 'archived'),
    'offer':        ('saved', 'applied', 'interviewing', 'rejected', 'archived'),
    'rejected':     ('saved', 'applied', 'interviewing', 'archived'),
    'archived':     ('saved', 'applied', 'interviewing', 'offer', 'rejected'),
}

MILESTONE_FIELDS = {
    'applied': 'applied_at',
    'interviewing': 'interviewing_at',
    'offer': 'offer_at',
}

SAVED_NOTE = 'Lead saved to pipeline'


def can_transition(current, new):
    return new in STATUS_TRANSITIONS.get(current, ())


def history_entry(status, note, at):
    return {'status': status, 'timestamp': at.isoformat(), 'note': note}


def record_activity(session, saved, action, description, details=None, at=None, linked=True):
    """Stage a timeline entry for `saved`; the caller commits."""
    if action not in ACTIONS:
        raise ValueError(f'Unknown activity action: {action}')
    entry = LeadActivity(
        user_id=saved.user_id,
        lead_id=saved.lead_id,
        saved_lead_id=saved.id if linked else None,
        action=action,
        details=details,
        description=description,
        created_at=at or utcnow(),
    )
    session.add(entry)
    return entry


def _owned(session, saved_lead_id, user):
    saved = session.get(SavedLead, saved_lead_id)
    if saved is None or saved.user_id != user.id:
        raise NotFound('Saved lead not found')
    return saved


def _with_lead(session, saved):
    data = saved.to_dict()
    lead = session.get(Lead, saved.lead_id)
    data['leadDetails'] = lead.to_dict() if lead else None
    return data


# ── Reads ────────────────────────────────────────────────────────────────────

def list_saved_leads(session, user, status=None, priority=None):
    query = session.query(SavedLead).filter(SavedLead.user_id == user.id)
    if status:
        query = query.filter(SavedLead.current_status == status)
    if priority:
        query = query.filter(SavedLead.priority == priority)
    saved_leads = query.order_by(SavedLead.last_activity_at.desc(), SavedLead.id).all()
    return [_with_lead(session, saved) for saved in saved_leads]


def get_saved_lead(session, saved_lead_id, user):
    return _with_lead(session, _owned(session, saved_lead_id, user))


def get_saved_lead_for_lead(session, lead_id, user):
    """The caller's pipeline entry for a given lead."""
    saved = session.query(SavedLead).filter_by(user_id=user.id, lead_id=lead_id).first()
    if saved is None:
        raise NotFound('Saved lead not found')
    return _with_lead(session, saved)


def get_activity(session, saved_lead_id, user):
    """Activity timeline for one of the caller's saved leads, newest first."""
    saved = _owned(session, saved_lead_id, user)
    entries = (
        session.query(LeadActivity)
        .filter(LeadActivity.saved_lead_id == saved.id)
        .order_by(LeadActivity.created_at.desc(), LeadActivity.id)
        .all()
    )
    return [entry.to_dict() for entry in entries]


# ── Writes ───────────────────────────────────────────────────────────────────

def save_lead(session, user, payload):
    """Add a visible lead to the caller's pipeline. A second save of the same lead is a Conflict."""
    lead = lead_store.get_lead(session, payload.lead_id, user)

    now = utcnow()
    saved = SavedLead(
        id=new_id(),
        user_id=user.id,
        lead_id=lead.id,
        current_status='saved',
        status_history=[history_entry('saved', SAVED_NOTE, now)],
        priority=payload.priority or 'medium',
        notes=payload.notes or '',
        saved_at=now,
        last_activity_at=now,
    )
    session.add(saved)
    record_activity(session, saved, 'saved', f'Saved {lead.title} at {lead.company}', at=now)
    try:
        session.commit()
    except IntegrityError:
        session.rollback()
        raise Conflict('Lead already saved')

    logger.info("User %s saved lead %s (%s at %s)", user.id, lead.id, lead.title, lead.company)
    return _with_lead(session, saved)


def change_status(saved, new_status, note=None, now=None):
    """Move `saved` to new_status in place. Raises Conflict for an illegal move."""
    current = saved.current_status
    if not can_transition(current, new_status):
        raise Conflict(f'Cannot transition from {current} to {new_status}')

    now = now or utcnow()
    entry = history_entry(new_status, note or f'Status changed to {new_status}', now)
    # Reassign rather than append so the JSON column is marked dirty
    saved.status_history = [*(saved.status_history or []), entry]
    saved.current_status = new_status

    milestone = MILESTONE_FIELDS.get(new_status)
    if milestone and getattr(saved, milestone) is None:
        setattr(saved, milestone, now)

    saved.last_activity_at = now
    return saved


def update_saved_lead(session, saved_lead_id, user, payload):
    """Status change and/or priority/notes update on one of the caller's saved leads."""
    saved = _owned(session, saved_lead_id, user)
    sent = payload.model_fields_set

    if payload.status is None and 'priority' not in sent and 'notes' not in sent:
        raise ValidationFailed('Nothing to update: send status, priority or notes')

    now = utcnow()
    if payload.status is not None:
        old_status = saved.current_status
        change_status(saved, payload.status, payload.note, now=now)
        record_activity(
            session, saved, 'status_changed',
            f'Status changed from {old_status} to {payload.status}',
            details={'from': old_status, 'to': payload.status}, at=now,
        )
        logger.info("Saved lead %s: %s -> %s", saved.id, old_status, payload.status)

    if 'priority' in sent and payload.priority is not None and payload.priority != saved.priority:
        old_priority = saved.priority
        saved.priority = payload.priority
        record_activity(
            session, saved, 'priority_changed',
            f'Priority changed from {old_priority} to {payload.priority}',
            details={'from': old_priority, 'to': payload.priority}, at=now,
        )
    if 'notes' in sent:
        saved.notes = payload.notes or ''

    saved.last_activity_at = now
    session.commit()
    return _with_lead(session, saved)


def remove_saved_lead(session, saved_lead_id, user):
    saved = _owned(session, saved_lead_id, user)
    record_activity(session, saved, 'unsaved', 'Lead removed from pipeline', linked=False)
    session.delete(saved)
    session.commit()
    logger.info("User %s removed saved lead %s", user.id, saved_lead_id)
