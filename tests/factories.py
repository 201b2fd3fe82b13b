"""Row builders for tests; every helper commits so API requests can see the data."""
from __future__ import annotations

from datetime import datetime

from sqlalchemy.orm import Session

from outreach.db import models
from outreach.utils.datetime import utcnow


def make_tenant(db: Session, name: str = "Acme", deleted: bool = False) -> models.Tenant:
    tenant = models.Tenant(name=name, deleted_at=utcnow() if deleted else None)
    db.add(tenant)
    db.commit()
    db.refresh(tenant)
    return tenant


def make_template(
    db: Session,
    tenant: models.Tenant,
    name: str = "Welcome",
    deleted: bool = False,
) -> models.EmailTemplate:
    template = models.EmailTemplate(
        tenant_id=tenant.id,
        name=name,
        subject=f"{name} subject",
        body="Hello {{ first_name }}",
        deleted_at=utcnow() if deleted else None,
    )
    db.add(template)
    db.commit()
    db.refresh(template)
    return template


def make_campaign(
    db: Session,
    template: models.EmailTemplate,
    scheduled_at: datetime | None = None,
    statuses: dict[str, int] | None = None,
    leads: int = 0,
) -> models.EmailCampaign:
    campaign = models.EmailCampaign(
        tenant_id=template.tenant_id,
        template_id=template.id,
        scheduled_at=scheduled_at,
    )
    db.add(campaign)
    db.flush()
    for status, count in (statuses or {}).items():
        for index in range(count):
            db.add(
                models.EmailLog(
                    campaign_id=campaign.id,
                    recipient_email=f"{status.lower()}-{index}@example.com",
                    status=status,
                )
            )
    for index in range(leads):
        db.add(models.CampaignLead(campaign_id=campaign.id, email=f"lead-{index}@example.com"))
    db.commit()
    db.refresh(campaign)
    return campaign
