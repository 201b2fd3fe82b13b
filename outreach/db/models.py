"""Database models for the outreach campaign service."""
from __future__ import annotations

import enum

from sqlalchemy import JSON, Column, DateTime, Enum, ForeignKey, Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import declarative_base, relationship

from outreach.utils.datetime import utcnow

Base = declarative_base()


class CampaignStatus(str, enum.Enum):
    DRAFT = "DRAFT"
    SCHEDULED = "SCHEDULED"
    ACTIVE = "ACTIVE"
    COMPLETED = "COMPLETED"


class EmailLogStatus(str, enum.Enum):
    QUEUED = "QUEUED"
    SENT = "SENT"
    OPENED = "OPENED"
    REPLIED = "REPLIED"
    BOUNCED = "BOUNCED"


class Tenant(Base):
    __tablename__ = "tenants"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False)
    deleted_at = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), default=utcnow)

    templates = relationship("EmailTemplate", back_populates="tenant")
    campaigns = relationship("EmailCampaign", back_populates="tenant")


class EmailTemplate(Base):
    __tablename__ = "email_templates"

    id = Column(Integer, primary_key=True, index=True)
    tenant_id = Column(Integer, ForeignKey("tenants.id"), nullable=False, index=True)
    name = Column(String(255), nullable=False)
    subject = Column(String(255), nullable=False, default="")
    body = Column(Text, nullable=False, default="")
    deleted_at = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), default=utcnow)

    tenant = relationship("Tenant", back_populates="templates")
    campaigns = relationship("EmailCampaign", back_populates="template")


SCHEDULE_UNIQUE_CONSTRAINT = "uq_email_campaigns_tenant_template_schedule"


class EmailCampaign(Base):
    __tablename__ = "email_campaigns"
    __table_args__ = (UniqueConstraint("tenant_id", "template_id", "scheduled_at", name=SCHEDULE_UNIQUE_CONSTRAINT),)

    id = Column(Integer, primary_key=True, index=True)
    tenant_id = Column(Integer, ForeignKey("tenants.id"), nullable=False, index=True)
    template_id = Column(Integer, ForeignKey("email_templates.id"), nullable=False)
    scheduled_at = Column(DateTime(timezone=True), nullable=True)
    status = Column(Enum(CampaignStatus, name="campaign_status"), nullable=False, default=CampaignStatus.DRAFT)
    created_at = Column(DateTime(timezone=True), default=utcnow)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)

    tenant = relationship("Tenant", back_populates="campaigns")
    template = relationship("EmailTemplate", back_populates="campaigns")
    # Rows are removed by ON DELETE CASCADE when the campaign goes away.
    logs = relationship("EmailLog", back_populates="campaign", cascade="all, delete-orphan", passive_deletes=True)
    campaign_leads = relationship("CampaignLead", back_populates="campaign", cascade="all, delete-orphan", passive_deletes=True)


class EmailLog(Base):
    __tablename__ = "email_logs"

    id = Column(Integer, primary_key=True)
    campaign_id = Column(Integer, ForeignKey("email_campaigns.id", ondelete="CASCADE"), nullable=False, index=True)
    recipient_email = Column(String(320), nullable=True)
    status = Column(String(50), nullable=False, default=EmailLogStatus.QUEUED.value)
    created_at = Column(DateTime(timezone=True), default=utcnow)

    campaign = relationship("EmailCampaign", back_populates="logs")


class CampaignLead(Base):
    __tablename__ = "campaign_leads"

    id = Column(Integer, primary_key=True)
    campaign_id = Column(Integer, ForeignKey("email_campaigns.id", ondelete="CASCADE"), nullable=False, index=True)
    email = Column(String(320), nullable=False)
    created_at = Column(DateTime(timezone=True), default=utcnow)

    campaign = relationship("EmailCampaign", back_populates="campaign_leads")


class Plan(Base):
    __tablename__ = "plans"

    id = Column(Integer, primary_key=True)
    name = Column(String(120), nullable=False)
    code = Column(String(50), unique=True, nullable=False)
    description = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), default=utcnow)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)

    versions = relationship(
        "PlanVersion",
        back_populates="plan",
        order_by=lambda: [PlanVersion.created_at.desc(), PlanVersion.id.desc()],
        cascade="all, delete-orphan",
    )


class PlanVersion(Base):
    __tablename__ = "plan_versions"

    id = Column(Integer, primary_key=True)
    plan_id = Column(Integer, ForeignKey("plans.id"), nullable=False, index=True)
    base_price_cents = Column(Integer, nullable=False)
    version = Column(Integer, nullable=False, default=1)
    zone = Column(String(50), nullable=True)
    bucket = Column(String(50), nullable=True)
    cadence = Column(String(50), nullable=True)
    components = Column(JSON, nullable=True)
    created_at = Column(DateTime(timezone=True), default=utcnow)

    plan = relationship("Plan", back_populates="versions")
