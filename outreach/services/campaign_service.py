"""Tenant-scoped campaign lookups and dashboard aggregation."""
from __future__ import annotations

import math
from collections import Counter
from datetime import datetime
from typing import Any, Iterable

from sqlalchemy.orm import Session, selectinload

from outreach.db import models
from outreach.utils.logger import logger


def get_active_tenant(db: Session, tenant_id: int) -> models.Tenant | None:
    return (
        db.query(models.Tenant)
        .filter(models.Tenant.id == tenant_id, models.Tenant.deleted_at.is_(None))
        .first()
    )


def get_usable_template(db: Session, tenant_id: int, template_id: int) -> models.EmailTemplate | None:
    """Return the template only if the tenant owns it and it is not soft-deleted."""

    return (
        db.query(models.EmailTemplate)
        .filter(
            models.EmailTemplate.id == template_id,
            models.EmailTemplate.tenant_id == tenant_id,
            models.EmailTemplate.deleted_at.is_(None),
        )
        .first()
    )


def find_scheduled_duplicate(
    db: Session,
    tenant_id: int,
    template_id: int,
    scheduled_at: datetime | None,
) -> models.EmailCampaign | None:
    # `== None` renders as IS NULL, so unscheduled campaigns collide with each other too.
    return (
        db.query(models.EmailCampaign)
        .filter(
            models.EmailCampaign.tenant_id == tenant_id,
            models.EmailCampaign.template_id == template_id,
            models.EmailCampaign.scheduled_at == scheduled_at,
        )
        .first()
    )


def get_tenant_campaign(
    db: Session,
    campaign_id: int,
    tenant_id: int,
    *,
    with_relations: bool = False,
) -> models.EmailCampaign | None:
    """Fetch a campaign by id and owner in one query.

    A campaign that exists under another tenant is indistinguishable from a
    missing one.
    """

    query = db.query(models.EmailCampaign).filter(
        models.EmailCampaign.id == campaign_id,
        models.EmailCampaign.tenant_id == tenant_id,
    )
    if with_relations:
        query = query.options(
            selectinload(models.EmailCampaign.template),
            selectinload(models.EmailCampaign.logs),
        )
    return query.first()


def list_tenant_campaigns(db: Session, tenant_id: int, *, include_leads: bool = False) -> list[models.EmailCampaign]:
    """Newest-first campaigns for a tenant with template and logs loaded."""

    options = [
        selectinload(models.EmailCampaign.template),
        selectinload(models.EmailCampaign.logs),
    ]
    if include_leads:
        options.append(selectinload(models.EmailCampaign.campaign_leads))
    return (
        db.query(models.EmailCampaign)
        .options(*options)
        .filter(models.EmailCampaign.tenant_id == tenant_id)
        .order_by(models.EmailCampaign.created_at.desc(), models.EmailCampaign.id.desc())
        .all()
    )


def percent(part: int, whole: int) -> int:
    """Whole-number percentage rounded half up; 0 when ``whole`` is 0."""

    if not whole:
        return 0
    return math.floor(part / whole * 100 + 0.5)


def build_dashboard(campaigns: Iterable[models.EmailCampaign]) -> dict[str, Any]:
    """Summarise send/open/reply counts per campaign and across the tenant.

    Only logs whose status is exactly SENT, OPENED or REPLIED are counted.
    The summary rates are weighted by emails sent, not averaged per campaign.
    """

    total_sent = 0
    total_opened = 0
    total_replied = 0
    cards = []

    for campaign in campaigns:
        counts = Counter(log.status for log in campaign.logs)
        sent = counts[models.EmailLogStatus.SENT.value]
        opened = counts[models.EmailLogStatus.OPENED.value]
        replied = counts[models.EmailLogStatus.REPLIED.value]

        total_sent += sent
        total_opened += opened
        total_replied += replied

        cards.append(
            {
                "id": campaign.id,
                "name": campaign.template.name,
                "status": campaign.status,
                "scheduled_at": campaign.scheduled_at,
                "total_leads": len(campaign.campaign_leads),
                "emails_sent": sent,
                "open_rate": percent(opened, sent),
                "reply_rate": percent(replied, sent),
            }
        )

    logger.debug("Dashboard built for %s campaigns (%s emails sent)", len(cards), total_sent)
    return {
        "summary": {
            "total_campaigns": len(cards),
            "total_emails_sent": total_sent,
            "avg_open_rate": percent(total_opened, total_sent),
            "avg_reply_rate": percent(total_replied, total_sent),
        },
        "campaigns": cards,
    }
