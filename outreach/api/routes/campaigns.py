"""Campaign management endpoints."""
from __future__ import annotations

from datetime import datetime

from fastapi import APIRouter, Depends, Query, status
from pydantic import BaseModel
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from outreach.api.schemas import CamelModel
from outreach.core.errors import ConflictError, MissingInputError, NotFoundError, store_errors
from outreach.db import models
from outreach.db.session import get_db
from outreach.services import campaign_service
from outreach.utils.logger import logger

router = APIRouter(prefix="/campaigns", tags=["campaigns"])

CAMPAIGN_NOT_FOUND = "Campaign not found or does not belong to tenant"
DUPLICATE_SCHEDULE = "Campaign is already scheduled with the same tenant, template, and scheduled time"
TENANT_REQUIRED_IN_QUERY = "tenantId is required in query."

# Fields a PATCH may clear; the rest are NOT NULL columns.
NULLABLE_UPDATE_FIELDS = {"scheduled_at"}


class CampaignCreate(CamelModel):
    tenant_id: int | None = None
    template_id: int | None = None
    scheduled_at: datetime | None = None


class CampaignUpdate(CamelModel):
    tenant_id: int | None = None
    template_id: int | None = None
    scheduled_at: datetime | None = None
    status: models.CampaignStatus | None = None


class TemplateSummary(CamelModel):
    id: int
    tenant_id: int
    name: str
    subject: str


class EmailLogResponse(CamelModel):
    id: int
    campaign_id: int
    recipient_email: str | None = None
    status: str
    created_at: datetime | None = None


class CampaignResponse(CamelModel):
    id: int
    tenant_id: int
    template_id: int
    scheduled_at: datetime | None = None
    status: models.CampaignStatus
    created_at: datetime | None = None
    updated_at: datetime | None = None


class CampaignDetailResponse(CampaignResponse):
    template: TemplateSummary
    logs: list[EmailLogResponse] = []


class CampaignDeleteResponse(BaseModel):
    message: str


class DashboardSummary(CamelModel):
    total_campaigns: int
    total_emails_sent: int
    avg_open_rate: int
    avg_reply_rate: int


class CampaignCard(CamelModel):
    id: int
    name: str
    status: models.CampaignStatus
    scheduled_at: datetime | None = None
    total_leads: int
    emails_sent: int
    open_rate: int
    reply_rate: int


class DashboardResponse(CamelModel):
    summary: DashboardSummary
    campaigns: list[CampaignCard]


def _is_duplicate_schedule(exc: IntegrityError) -> bool:
    """True only for a violation of the (tenant, template, scheduled_at) unique constraint."""

    orig = exc.orig
    if getattr(orig, "sqlstate", None) is not None:
        # psycopg reports the violated constraint by name.
        diag = getattr(orig, "diag", None)
        return orig.sqlstate == "23505" and getattr(diag, "constraint_name", None) == models.SCHEDULE_UNIQUE_CONSTRAINT
    message = str(orig)
    return models.SCHEDULE_UNIQUE_CONSTRAINT in message or (
        "UNIQUE constraint failed" in message and "email_campaigns.scheduled_at" in message
    )


def _commit_or_conflict(db: Session) -> None:
    """Commit, turning a duplicate-schedule violation into a 409.

    Any other integrity failure propagates to ``store_errors``.
    """

    try:
        db.commit()
    except IntegrityError as exc:
        if not _is_duplicate_schedule(exc):
            raise
        db.rollback()
        raise ConflictError(DUPLICATE_SCHEDULE) from exc


def _get_owned_campaign(db: Session, campaign_id: int, tenant_id: int, **kwargs) -> models.EmailCampaign:
    campaign = campaign_service.get_tenant_campaign(db, campaign_id, tenant_id, **kwargs)
    if campaign is None:
        raise NotFoundError(CAMPAIGN_NOT_FOUND)
    return campaign


@router.post("/", response_model=CampaignResponse, status_code=status.HTTP_201_CREATED)
def create_campaign(payload: CampaignCreate, db: Session = Depends(get_db)) -> CampaignResponse:
    """Create a campaign for a tenant's template at a given schedule."""

    if not payload.tenant_id or not payload.template_id:
        raise MissingInputError("tenantId and templateId are required")

    with store_errors(db, "creating campaign"):
        if campaign_service.get_active_tenant(db, payload.tenant_id) is None:
            raise NotFoundError("Tenant not found")

        template = campaign_service.get_usable_template(db, payload.tenant_id, payload.template_id)
        if template is None:
            raise NotFoundError("Template not found or does not belong to tenant")

        duplicate = campaign_service.find_scheduled_duplicate(
            db, payload.tenant_id, payload.template_id, payload.scheduled_at
        )
        if duplicate is not None:
            raise ConflictError(DUPLICATE_SCHEDULE)

        campaign = models.EmailCampaign(
            tenant_id=payload.tenant_id,
            template_id=payload.template_id,
            scheduled_at=payload.scheduled_at,
        )
        db.add(campaign)
        _commit_or_conflict(db)
        db.refresh(campaign)
        logger.info("Created campaign %s for tenant %s", campaign.id, campaign.tenant_id)
        return CampaignResponse.model_validate(campaign)


@router.get("/", response_model=list[CampaignDetailResponse])
def list_campaigns(
    tenant_id: int | None = Query(default=None, alias="tenantId"),
    db: Session = Depends(get_db),
) -> list[CampaignDetailResponse]:
    """List a tenant's campaigns, newest first."""

    if not tenant_id:
        raise MissingInputError("tenantId is required in query")
    return _list_for_tenant(db, tenant_id)


@router.get("/tenant/{tenant_id}", response_model=list[CampaignDetailResponse])
def list_tenant_campaigns(tenant_id: int, db: Session = Depends(get_db)) -> list[CampaignDetailResponse]:
    """List a tenant's campaigns, newest first."""

    return _list_for_tenant(db, tenant_id)


def _list_for_tenant(db: Session, tenant_id: int) -> list[CampaignDetailResponse]:
    with store_errors(db, "fetching campaigns"):
        campaigns = campaign_service.list_tenant_campaigns(db, tenant_id)
        return [CampaignDetailResponse.model_validate(c) for c in campaigns]


@router.get("/{tenant_id}/dashboard", response_model=DashboardResponse)
def get_campaign_dashboard(tenant_id: int, db: Session = Depends(get_db)) -> DashboardResponse:
    """Send/open/reply statistics for every campaign of a tenant.

    An unknown tenant yields an empty, zeroed dashboard.
    """

    with store_errors(
        db,
        "building campaign dashboard",
        message="Failed to fetch campaign dashboard.",
        catch_all=True,
    ):
        campaigns = campaign_service.list_tenant_campaigns(db, tenant_id, include_leads=True)
        return DashboardResponse.model_validate(campaign_service.build_dashboard(campaigns))


@router.get("/{campaign_id}", response_model=CampaignDetailResponse)
def get_campaign(
    campaign_id: int,
    tenant_id: int | None = Query(default=None, alias="tenantId"),
    db: Session = Depends(get_db),
) -> CampaignDetailResponse:
    """Fetch a single campaign owned by the tenant."""

    if not tenant_id:
        raise MissingInputError(TENANT_REQUIRED_IN_QUERY)

    with store_errors(db, "fetching campaign"):
        campaign = _get_owned_campaign(db, campaign_id, tenant_id, with_relations=True)
        return CampaignDetailResponse.model_validate(campaign)


@router.patch("/{campaign_id}", response_model=CampaignResponse)
def update_campaign(
    campaign_id: int,
    payload: CampaignUpdate,
    db: Session = Depends(get_db),
) -> CampaignResponse:
    """Apply a partial update to a campaign owned by the tenant.

    ``tenantId`` only scopes the lookup and is never written. A new
    ``templateId`` is not re-checked against the tenant.
    """

    if not payload.tenant_id:
        raise MissingInputError("tenantId is required in body")

    with store_errors(db, "updating campaign"):
        campaign = _get_owned_campaign(db, campaign_id, payload.tenant_id)

        updates = payload.model_dump(exclude_unset=True, exclude={"tenant_id"})
        for field, value in updates.items():
            if value is None and field not in NULLABLE_UPDATE_FIELDS:
                continue
            setattr(campaign, field, value)

        db.add(campaign)
        _commit_or_conflict(db)
        db.refresh(campaign)
        return CampaignResponse.model_validate(campaign)


@router.delete("/{campaign_id}", response_model=CampaignDeleteResponse)
def delete_campaign(
    campaign_id: int,
    tenant_id: int | None = Query(default=None, alias="tenantId"),
    db: Session = Depends(get_db),
) -> CampaignDeleteResponse:
    """Hard-delete a campaign owned by the tenant."""

    if not tenant_id:
        raise MissingInputError(TENANT_REQUIRED_IN_QUERY)

    with store_errors(db, "deleting campaign"):
        campaign = _get_owned_campaign(db, campaign_id, tenant_id)
        db.delete(campaign)
        db.commit()
        logger.info("Deleted campaign %s for tenant %s", campaign_id, tenant_id)
        return CampaignDeleteResponse(message="Campaign deleted successfully")
