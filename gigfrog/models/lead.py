"""
Lead model — one row per job opportunity, public (global) or privately owned.

Visibility: a lead is visible to a user iff is_global, or created_by is the
'system' sentinel, or created_by is the user's id.
"""
import uuid

from sqlalchemy import Column, Text, Boolean, DateTime, JSON, Index

from gigfrog.database import Base, utcnow, isoformat

CONTACT_FIELDS = ('contact_name', 'contact_email', 'additional_emails', 'contact_linkedin')


def new_id():
    return str(uuid.uuid4())


class Lead(Base):
    __tablename__ = 'leads'

    id = Column(Text, primary_key=True, default=new_id)
    title = Column(Text, nullable=False)
    company = Column(Text, nullable=False)
    location = Column(Text, default='')
    team = Column(Text, default='')
    compensation = Column(JSON, default=dict)  # {min, max, currency, raw}
    contact_name = Column(Text, default='')
    contact_email = Column(Text, default='')
    additional_emails = Column(JSON, default=list)
    additional_links = Column(JSON, nullable=True)  # [{title, url}]
    contact_linkedin = Column(Text, default='')
    source_link = Column(Text, default='')
    source_application_link = Column(Text, default='')
    date_posted = Column(DateTime(timezone=True), nullable=True)
    industry = Column(Text, default='')
    is_global = Column(Boolean, nullable=False, default=False)
    created_by = Column(Text, nullable=True)  # user id, 'system' or 'community'
    shared_by = Column(Text, nullable=True)
    shared_at = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), default=utcnow)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)

    __table_args__ = (
        Index('ix_leads_company_title', 'company', 'title'),
        Index('ix_leads_created_by', 'created_by'),
        Index('ix_leads_is_global', 'is_global'),
        Index('ix_leads_created_at', 'created_at'),
    )

    def to_dict(self):
        data = {
            '_id': self.id,
            'title': self.title,
            'company': self.company,
            'location': self.location or '',
            'team': self.team or '',
            'compensation': self.compensation or {},
            'contactName': self.contact_name or '',
            'contactEmail': self.contact_email or '',
            'additionalEmails': self.additional_emails or [],
            'contactLinkedIn': self.contact_linkedin or '',
            'sourceLink': self.source_link or '',
            'sourceApplicationLink': self.source_application_link or '',
            'datePosted': isoformat(self.date_posted),
            'industry': self.industry or '',
            'isGlobal': bool(self.is_global),
            'createdBy': self.created_by,
            'sharedBy': self.shared_by,
            'sharedAt': isoformat(self.shared_at),
            'createdAt': isoformat(self.created_at),
            'updatedAt': isoformat(self.updated_at),
        }
        # Published leads have their links removed entirely, not emptied
        if self.additional_links is not None:
            data['additionalLinks'] = self.additional_links
        return data
