"""
Lead store — paginated listing, lookup, create, update and delete.

Visibility: a lead is visible iff is_global, or created_by == 'system', or
created_by == the caller's id. Anonymous callers only see the first two.
Only the owner, an admin, or anyone for 'system'-owned leads may update; only
admins may delete.
"""
import logging
import math

from sqlalchemy import or_

from gigfrog.config import SYSTEM_OWNER, DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE
from gigfrog.errors import Forbidden, NotFound, ValidationFailed
from gigfrog.models.lead import Lead
from gigfrog.services.auth import is_admin

logger = logging.getLogger('services.leads')

DEFAULT_SORT = '-createdAt'

# `_id` sorts by creation order, like an ObjectId would
SORT_COLUMNS = {
    '_id': Lead.created_at,
    'createdAt': Lead.created_at,
    'updatedAt': Lead.updated_at,
    'datePosted': Lead.date_posted,
    'title': Lead.title,
    'company': Lead.company,
}

ADMIN_ONLY_FIELDS = ('is_global', 'created_by')


# ── Visibility ───────────────────────────────────────────────────────────────

def visibility_clause(user):
    """SQL predicate matching the leads `user` (or an anonymous caller) may see."""
    clauses = [Lead.is_global.is_(True), Lead.created_by == SYSTEM_OWNER]
    if user is not None:
        clauses.append(Lead.created_by == user.id)
    return or_(*clauses)


def is_visible(lead, user):
    if lead.is_global or lead.created_by == SYSTEM_OWNER:
        return True
    return user is not None and lead.created_by == user.id


def can_edit(lead, user):
    if user is None:
        return False
    return is_admin(user) or lead.created_by in (SYSTEM_OWNER, user.id)


# ── Query parsing ────────────────────────────────────────────────────────────

def _positive_int(raw, name, default):
    if raw is None or raw == '':
        return default
    try:
        value = int(raw)
    except (TypeError, ValueError):
        raise ValidationFailed(f'{name} must be an integer')
    if value < 1:
        raise ValidationFailed(f'{name} must be >= 1')
    return value


def parse_pagination(page=None, limit=None):
    """Validate raw page/limit query values. Returns (page, limit)."""
    page_num = _positive_int(page, 'page', 1)
    limit_num = _positive_int(limit, 'limit', DEFAULT_PAGE_SIZE)
    if limit_num > MAX_PAGE_SIZE:
        raise ValidationFailed(f'limit must be <= {MAX_PAGE_SIZE}')
    return page_num, limit_num


def parse_sort(sort):
    """'-field' → descending, 'field' → ascending."""
    sort = sort or DEFAULT_SORT
    descending = sort.startswith('-')
    field = sort[1:] if descending else sort
    column = SORT_COLUMNS.get(field)
    if column is None:
        raise ValidationFailed(f'Unsupported sort field: {field}')
    return column.desc() if descending else column.asc()


def _like_pattern(text):
    escaped = text.replace('\\', '\\\\').replace('%', '\\%').replace('_', '\\_')
    return f'%{escaped}%'


# ── Operations ───────────────────────────────────────────────────────────────

def list_leads(session, user=None, page=1, limit=DEFAULT_PAGE_SIZE, sort=DEFAULT_SORT,
               search=None, industry=None, location=None):
    """
    One page of visible leads. `search` matches title, company or location;
    `industry` is exact; `location` is a case-insensitive substring.
    """
    order = parse_sort(sort)

    query = session.query(Lead).filter(visibility_clause(user))
    search = (search or '').strip()
    if search:
        pattern = _like_pattern(search)
        query = query.filter(or_(
            Lead.title.ilike(pattern, escape='\\'),
            Lead.company.ilike(pattern, escape='\\'),
            Lead.location.ilike(pattern, escape='\\'),
        ))
    if industry:
        query = query.filter(Lead.industry == industry)
    location = (location or '').strip()
    if location:
        query = query.filter(Lead.location.ilike(_like_pattern(location), escape='\\'))

    total = query.count()
    leads = (
        query.order_by(order, Lead.id)
        .offset((page - 1) * limit)
        .limit(limit)
        .all()
    )
    return {
        'leads': [lead.to_dict() for lead in leads],
        'totalLeads': total,
        'page': page,
        'limit': limit,
        'totalPages': math.ceil(total / limit),
    }


def get_lead(session, lead_id, user=None):
    """Return the Lead if it exists and is visible to `user`, else NotFound."""
    lead = session.get(Lead, lead_id)
    if lead is None or not is_visible(lead, user):
        raise NotFound('Lead not found')
    return lead


def create_lead(session, payload, user):
    """Create a lead owned by `user`. Only admins create global leads."""
    fields = payload.changes()
    requested_global = fields.pop('is_global', None)
    requested_owner = fields.pop('created_by', None)

    if is_admin(user):
        is_global = True if requested_global is None else requested_global
        created_by = requested_owner or user.id
    else:
        is_global = False
        created_by = user.id

    lead = Lead(**fields, is_global=is_global, created_by=created_by)
    session.add(lead)
    session.commit()
    logger.info("Lead %s created by %s (global=%s)", lead.id, user.id, is_global)
    return lead


def update_lead(session, lead_id, payload, user):
    lead = session.get(Lead, lead_id)
    if lead is None or not (is_admin(user) or is_visible(lead, user)):
        raise NotFound('Lead not found')
    if not can_edit(lead, user):
        raise Forbidden('Not authorized to update this lead')

    fields = payload.changes()
    if not is_admin(user):
        for name in ADMIN_ONLY_FIELDS:
            fields.pop(name, None)

    for name, value in fields.items():
        setattr(lead, name, value)
    session.commit()
    logger.info("Lead %s updated by %s: %s", lead.id, user.id, sorted(fields))
    return lead


def delete_lead(session, lead_id, user):
    if not is_admin(user):
        raise Forbidden('Only admins can delete leads')
    lead = session.get(Lead, lead_id)
    if lead is None:
        raise NotFound('Lead not found')
    session.delete(lead)
    session.commit()
    logger.info("Lead %s deleted by %s", lead_id, user.id)
