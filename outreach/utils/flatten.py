"""Flatten plans carrying a nested ``versions`` list into single records."""
from __future__ import annotations

from typing import Any, Mapping, Sequence


def flatten(plans: Sequence[Mapping[str, Any]]) -> list[dict[str, Any]]:
    """Return one flat record per plan built from its first version.

    Callers fetch only the newest version per plan, so only ``versions[0]``
    is consulted. Missing version fields become ``None`` (``components``
    becomes ``[]``), but ``base_price_cents`` is read straight from
    ``plan["versions"][0]``: a plan without versions raises here instead of
    defaulting.
    """

    flat = []
    for plan in plans:
        versions = plan.get("versions")
        version = versions[0] if versions else {}
        # TODO: guard the price read like the other version fields once consumers handle None prices.
        base_price_cents = plan["versions"][0].get("base_price_cents")

        flat.append(
            {
                "id": plan.get("id"),
                "name": plan.get("name"),
                "code": plan.get("code"),
                "description": plan.get("description"),
                "created_at": plan.get("created_at"),
                "updated_at": plan.get("updated_at"),
                "version_id": version.get("id") or None,
                "base_price_cents": base_price_cents,
                "version": version.get("version") or None,
                "zone": version.get("zone") or None,
                "bucket": version.get("bucket") or None,
                "cadence": version.get("cadence") or None,
                "components": version.get("components") or [],
            }
        )
    return flat
