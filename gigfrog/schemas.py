"""
Request schemas — every JSON body is parsed into one of these before any
business logic runs. Wire names are camelCase; attributes are snake_case.
"""
import uuid
from datetime import datetime
from typing import List, Literal, Optional
from urllib.parse import urlparse

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel

from gigfrog.errors import ValidationFailed
from gigfrog.services.compensation import parse_compensation

Status = Literal['saved', 'applied', 'interviewing', 'offer', 'rejected', 'archived']
Priority = Literal['high', 'medium', 'low']


def parse_id(value, name='id'):
    """Validate an opaque record id from a query string or body."""
    if not value:
        raise ValidationFailed(f'Missing {name}')
    try:
        return str(uuid.UUID(str(value)))
    except (ValueError, AttributeError):
        raise ValidationFailed(f'Invalid {name}: {value}')


def parse_request(model, data):
    """Validate a decoded JSON body against `model`. Non-object bodies are rejected."""
    if not isinstance(data, dict):
        raise ValidationFailed('Request body must be a JSON object')
    return model.model_validate(data)


class RequestModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra='ignore',
        str_strip_whitespace=True,
    )


# ── Leads ─────────────────────────────────────────────────────────────────────

class Compensation(RequestModel):
    min: Optional[int] = None
    max: Optional[int] = None
    currency: str = 'USD'
    raw: str = ''


class AdditionalLink(RequestModel):
    title: str = ''
    url: str = ''


_LEAD_TEXT_FIELDS = (
    'location', 'team', 'contact_name', 'contact_email', 'contact_linkedin',
    'source_link', 'source_application_link', 'industry',
)


class LeadUpdate(RequestModel):
    """Partial lead body. Only fields present in the JSON are applied."""
    title: Optional[str] = Field(None, min_length=1)
    company: Optional[str] = Field(None, min_length=1)
    location: Optional[str] = None
    team: Optional[str] = None
    compensation: Optional[Compensation] = None
    contact_name: Optional[str] = None
    contact_email: Optional[str] = None
    additional_emails: Optional[List[str]] = None
    additional_links: Optional[List[AdditionalLink]] = None
    contact_linkedin: Optional[str] = Field(None, alias='contactLinkedIn')
    source_link: Optional[str] = None
    source_application_link: Optional[str] = None
    date_posted: Optional[datetime] = None
    industry: Optional[str] = None
    is_global: Optional[bool] = None
    created_by: Optional[str] = None

    @field_validator('title', 'company')
    @classmethod
    def _not_null(cls, value):
        if value is None:
            raise ValueError('must not be null')
        return value

    @field_validator(*_LEAD_TEXT_FIELDS, mode='before')
    @classmethod
    def _null_text_is_empty(cls, value):
        return '' if value is None else value

    @field_validator('compensation', mode='before')
    @classmethod
    def _parse_free_text_compensation(cls, value):
        if isinstance(value, (str, int, float)) and not isinstance(value, bool):
            return parse_compensation(value)
        return value

    @field_validator('contact_email')
    @classmethod
    def _lower_email(cls, value):
        return value.lower() if value else value

    @field_validator('additional_emails')
    @classmethod
    def _lower_emails(cls, value):
        if value is None:
            return value
        return [email.strip().lower() for email in value if email and email.strip()]

    def changes(self):
        """Dict of the fields the caller actually sent, keyed by column name."""
        return self.model_dump(exclude_unset=True)


class LeadCreate(LeadUpdate):
    title: str = Field(min_length=1)
    company: str = Field(min_length=1)


# ── Saved leads ───────────────────────────────────────────────────────────────

class SaveLeadRequest(RequestModel):
    lead_id: str
    priority: Optional[Priority] = None
    notes: Optional[str] = None


class SavedLeadUpdate(RequestModel):
    status: Optional[Status] = None
    note: Optional[str] = None
    priority: Optional[Priority] = None
    notes: Optional[str] = None


# ── Referrals ─────────────────────────────────────────────────────────────────

class ReferralCreate(RequestModel):
    name: str = Field(min_length=1)
    company: str = ''
    email: str = ''
    linkedin: str = ''
    notes: str = ''
    linked_leads: List[str] = Field(default_factory=list)

    @field_validator('company', 'email', 'linkedin', 'notes', mode='before')
    @classmethod
    def _null_text_is_empty(cls, value):
        return '' if value is None else value


class ReferralUpdate(RequestModel):
    name: Optional[str] = Field(None, min_length=1)
    company: Optional[str] = None
    email: Optional[str] = None
    linkedin: Optional[str] = None
    notes: Optional[str] = None
    linked_leads: Optional[List[str]] = None

    @field_validator('name')
    @classmethod
    def _not_null(cls, value):
        if value is None:
            raise ValueError('must not be null')
        return value

    @field_validator('company', 'email', 'linkedin', 'notes', mode='before')
    @classmethod
    def _null_text_is_empty(cls, value):
        return '' if value is None else value

    @field_validator('linked_leads', mode='before')
    @classmethod
    def _null_links_are_empty(cls, value):
        return [] if value is None else value

    def changes(self):
        return self.model_dump(exclude_unset=True)


# ── Publish ───────────────────────────────────────────────────────────────────

class PublishRequest(RequestModel):
    mode: Literal['single', 'all']
    lead_id: Optional[str] = None

    @model_validator(mode='after')
    def _single_needs_lead(self):
        if self.mode == 'single' and not self.lead_id:
            raise ValueError('leadId is required when mode is "single"')
        return self


# ── Parse job URL ─────────────────────────────────────────────────────────────

class ParseJobUrlRequest(RequestModel):
    url: str = Field(min_length=1)

    @field_validator('url')
    @classmethod
    def _http_only(cls, value):
        parsed = urlparse(value)
        if parsed.scheme not in ('http', 'https') or not parsed.netloc:
            raise ValueError('URL must be an absolute http(s) URL')
        return value
