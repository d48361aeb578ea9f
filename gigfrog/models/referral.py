"""
Referral model — a personal contact owned by one user.

linked_leads holds SavedLead ids. activity_history is append-only
({timestamp, action, description}).
"""
from sqlalchemy import Column, Text, DateTime, JSON

from gigfrog.database import Base, utcnow, isoformat
from gigfrog.models.lead import new_id


class Referral(Base):
    __tablename__ = 'referrals'

    id = Column(Text, primary_key=True, default=new_id)
    user_id = Column(Text, nullable=False, index=True)
    name = Column(Text, nullable=False)
    company = Column(Text, default='')
    email = Column(Text, default='')
    linkedin = Column(Text, default='')
    notes = Column(Text, default='')
    linked_leads = Column(JSON, nullable=False, default=list)
    activity_history = Column(JSON, nullable=False, default=list)
    created_at = Column(DateTime(timezone=True), default=utcnow)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)

    def to_dict(self):
        return {
            '_id': self.id,
            'userId': self.user_id,
            'name': self.name,
            'company': self.company or '',
            'email': self.email or '',
            'linkedin': self.linkedin or '',
            'notes': self.notes or '',
            'linkedLeads': list(self.linked_leads or []),
            'activityHistory': list(self.activity_history or []),
            'createdAt': isoformat(self.created_at),
            'updatedAt': isoformat(self.updated_at),
        }
