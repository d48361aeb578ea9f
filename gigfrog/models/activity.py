"""
LeadActivity model — timeline entries for a user's saved leads.

Rows are written alongside the change they describe and never edited. There is
no foreign key to `userleads`, so an `unsaved` entry outlives its saved lead.
"""
from sqlalchemy import Column, Text, DateTime, JSON, Index

from gigfrog.database import Base, utcnow, isoformat
from gigfrog.models.lead import new_id

ACTIONS = (
    'saved',
    'status_changed',
    'priority_changed',
    'note_added',
    'lead_updated',
    'message_sent',
    'message_received',
    'unsaved',
)


class LeadActivity(Base):
    __tablename__ = 'activities'

    id = Column(Text, primary_key=True, default=new_id)
    user_id = Column(Text, nullable=False)
    lead_id = Column(Text, nullable=False)
    saved_lead_id = Column(Text, nullable=True)  # userleads.id, not enforced
    action = Column(Text, nullable=False)
    details = Column(JSON, nullable=True)
    description = Column(Text, default='')
    created_at = Column(DateTime(timezone=True), default=utcnow)

    __table_args__ = (
        Index('ix_activities_saved_lead_created', 'saved_lead_id', 'created_at'),
        Index('ix_activities_user_created', 'user_id', 'created_at'),
    )

    def to_dict(self):
        return {
            '_id': self.id,
            'userId': self.user_id,
            'leadId': self.lead_id,
            'userLeadId': self.saved_lead_id,
            'action': self.action,
            'details': dict(self.details) if self.details else None,
            'description': self.description or '',
            'createdAt': isoformat(self.created_at),
        }
