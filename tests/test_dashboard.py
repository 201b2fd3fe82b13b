"""Tests for campaign dashboard aggregation."""
from __future__ import annotations

from datetime import datetime
from types import SimpleNamespace

from sqlalchemy.exc import OperationalError

from outreach.services import campaign_service
from outreach.services.campaign_service import build_dashboard, percent
from tests.factories import make_campaign, make_template, make_tenant


def _campaign(campaign_id: int, statuses: dict[str, int], leads: int = 0, name: str = "Launch"):
    logs = [SimpleNamespace(status=status) for status, count in statuses.items() for _ in range(count)]
    return SimpleNamespace(
        id=campaign_id,
        template=SimpleNamespace(name=name),
        status="ACTIVE",
        scheduled_at=None,
        logs=logs,
        campaign_leads=[object()] * leads,
    )


def test_percent_rounds_half_up():
    assert percent(1, 8) == 13
    assert percent(3, 8) == 38
    assert percent(1, 3) == 33
    assert percent(5, 0) == 0


def test_single_campaign_rates():
    dashboard = build_dashboard([_campaign(1, {"SENT": 10, "OPENED": 4, "REPLIED": 2}, leads=25)])

    card = dashboard["campaigns"][0]
    assert card["emails_sent"] == 10
    assert card["open_rate"] == 40
    assert card["reply_rate"] == 20
    assert card["total_leads"] == 25
    assert card["name"] == "Launch"
    assert dashboard["summary"] == {
        "total_campaigns": 1,
        "total_emails_sent": 10,
        "avg_open_rate": 40,
        "avg_reply_rate": 20,
    }


def test_other_statuses_are_ignored():
    dashboard = build_dashboard([_campaign(1, {"SENT": 4, "QUEUED": 7, "BOUNCED": 3, "OPENED": 1})])

    card = dashboard["campaigns"][0]
    assert card["emails_sent"] == 4
    assert card["open_rate"] == 25


def test_summary_is_weighted_by_sent():
    dashboard = build_dashboard(
        [
            _campaign(1, {"SENT": 10, "OPENED": 5}),
            _campaign(2, {"SENT": 30}),
        ]
    )

    assert [card["open_rate"] for card in dashboard["campaigns"]] == [50, 0]
    # 5 / 40 opened overall, not the mean of 50% and 0%.
    assert dashboard["summary"]["avg_open_rate"] == 13
    assert dashboard["summary"]["total_emails_sent"] == 40


def test_campaign_without_sends_has_zero_rates():
    dashboard = build_dashboard([_campaign(1, {"OPENED": 3, "REPLIED": 1})])

    card = dashboard["campaigns"][0]
    assert card["open_rate"] == 0
    assert card["reply_rate"] == 0
    assert dashboard["summary"]["avg_open_rate"] == 0


def test_empty_dashboard():
    assert build_dashboard([]) == {
        "summary": {
            "total_campaigns": 0,
            "total_emails_sent": 0,
            "avg_open_rate": 0,
            "avg_reply_rate": 0,
        },
        "campaigns": [],
    }


def test_dashboard_endpoint(client, db):
    tenant = make_tenant(db)
    first = make_campaign(db, make_template(db, tenant, name="Intro"), scheduled_at=datetime(2026, 11, 1, 9))
    second = make_campaign(
        db,
        make_template(db, tenant, name="Follow up"),
        statuses={"SENT": 10, "OPENED": 4, "REPLIED": 2},
        leads=3,
    )

    response = client.get(f"/campaigns/{tenant.id}/dashboard")

    assert response.status_code == 200
    payload = response.json()
    assert payload["summary"] == {
        "totalCampaigns": 2,
        "totalEmailsSent": 10,
        "avgOpenRate": 40,
        "avgReplyRate": 20,
    }
    cards = payload["campaigns"]
    assert [card["id"] for card in cards] == [second.id, first.id]
    assert cards[0] == {
        "id": second.id,
        "name": "Follow up",
        "status": "DRAFT",
        "scheduledAt": None,
        "totalLeads": 3,
        "emailsSent": 10,
        "openRate": 40,
        "replyRate": 20,
    }
    assert cards[1]["openRate"] == 0


def test_dashboard_for_unknown_tenant_is_zeroed(client):
    response = client.get("/campaigns/4242/dashboard")

    assert response.status_code == 200
    assert response.json() == {
        "summary": {"totalCampaigns": 0, "totalEmailsSent": 0, "avgOpenRate": 0, "avgReplyRate": 0},
        "campaigns": [],
    }


def test_dashboard_store_failure(client, monkeypatch):
    def broken_list(*args, **kwargs):
        raise OperationalError("SELECT", {}, Exception("timeout"))

    monkeypatch.setattr(campaign_service, "list_tenant_campaigns", broken_list)

    response = client.get("/campaigns/1/dashboard")

    assert response.status_code == 500
    assert response.json() == {"error": "Failed to fetch campaign dashboard."}


def test_dashboard_aggregation_failure_uses_dashboard_message(client, monkeypatch):
    def broken_build(campaigns):
        raise ValueError("bad log status")

    monkeypatch.setattr(campaign_service, "build_dashboard", broken_build)

    response = client.get("/campaigns/1/dashboard")

    assert response.status_code == 500
    assert response.json() == {"error": "Failed to fetch campaign dashboard."}
