"""
SavedLead model — one row per (user, lead) pair in a user's pipeline.

Stored in the `userleads` table. status_history is append-only: entries are
{status, timestamp, note} and are never edited or removed.
"""
from sqlalchemy import Column, Text, DateTime, JSON, Index, UniqueConstraint

from gigfrog.database import Base, utcnow, isoformat
from gigfrog.models.lead import new_id


class SavedLead(Base):
    __tablename__ = 'userleads'

    id = Column(Text, primary_key=True, default=new_id)
    user_id = Column(Text, nullable=False, index=True)
    lead_id = Column(Text, nullable=False, index=True)  # leads.id, not enforced
    current_status = Column(Text, nullable=False, default='saved')
    status_history = Column(JSON, nullable=False, default=list)
    priority = Column(Text, nullable=False, default='medium')
    notes = Column(Text, default='')
    saved_at = Column(DateTime(timezone=True), default=utcnow)
    applied_at = Column(DateTime(timezone=True), nullable=True)
    interviewing_at = Column(DateTime(timezone=True), nullable=True)
    offer_at = Column(DateTime(timezone=True), nullable=True)
    last_activity_at = Column(DateTime(timezone=True), default=utcnow)
    created_at = Column(DateTime(timezone=True), default=utcnow)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)

    __table_args__ = (
        UniqueConstraint('user_id', 'lead_id', name='uq_userlead_user_lead'),
        Index('ix_userleads_user_status', 'user_id', 'current_status'),
        Index('ix_userleads_user_activity', 'user_id', 'last_activity_at'),
    )

    def to_dict(self):
        return {
            '_id': self.id,
            'userId': self.user_id,
            'leadId': self.lead_id,
            'currentStatus': self.current_status,
            'statusHistory': list(self.status_history or []),
            'priority': self.priority,
            'notes': self.notes or '',
            'savedAt': isoformat(self.saved_at),
            'appliedAt': isoformat(self.applied_at),
            'interviewingAt': isoformat(self.interviewing_at),
            'offerAt': isoformat(self.offer_at),
            'lastActivityAt': isoformat(self.last_activity_at),
            'createdAt': isoformat(self.created_at),
            'updatedAt': isoformat(self.updated_at),
        }
