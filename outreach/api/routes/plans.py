"""Plan catalogue endpoints."""
from __future__ import annotations

from datetime import datetime
from typing import Any

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session, selectinload

from outreach.api.schemas import CamelModel
from outreach.core.errors import store_errors
from outreach.db import models
from outreach.db.session import get_db
from outreach.utils.flatten import flatten

router = APIRouter(prefix="/plans", tags=["plans"])


class FlatPlanResponse(CamelModel):
    id: int
    name: str
    code: str
    description: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None
    version_id: int | None = None
    base_price_cents: int | None = None
    version: int | None = None
    zone: str | None = None
    bucket: str | None = None
    cadence: str | None = None
    components: list[Any] = []


def _plan_record(plan: models.Plan) -> dict[str, Any]:
    """Plan columns plus its newest version only."""

    newest = plan.versions[:1]
    return {
        "id": plan.id,
        "name": plan.name,
        "code": plan.code,
        "description": plan.description,
        "created_at": plan.created_at,
        "updated_at": plan.updated_at,
        "versions": [
            {
                "id": version.id,
                "base_price_cents": version.base_price_cents,
                "version": version.version,
                "zone": version.zone,
                "bucket": version.bucket,
                "cadence": version.cadence,
                "components": version.components,
            }
            for version in newest
        ],
    }


@router.get("/", response_model=list[FlatPlanResponse])
def list_plans(db: Session = Depends(get_db)) -> list[FlatPlanResponse]:
    """List plans with their latest version inlined."""

    with store_errors(db, "fetching plans"):
        plans = (
            db.query(models.Plan)
            .options(selectinload(models.Plan.versions))
            .filter(models.Plan.versions.any())
            .order_by(models.Plan.created_at.desc(), models.Plan.id.desc())
            .all()
        )
        return [FlatPlanResponse.model_validate(record) for record in flatten([_plan_record(p) for p in plans])]
