"""Index template routes."""
import copy
from typing import Optional

from fastapi import Depends, HTTPException, Request
from pydantic import BaseModel, Field

from ..constants import API_BASE_PATH
from ..core.cluster import ScopedClusterClient, encode_name
from ..core.rate_limit import limiter
from ..types import RouteDependencies
from .dependencies import get_cluster_caller, is_not_found, raise_for_error
from .index import lifecycle_settings


class AddPolicyToTemplate(BaseModel):
    template_name: str = Field(..., alias="templateName", min_length=1)
    policy_name: str = Field(..., alias="policyName", min_length=1)
    alias_name: Optional[str] = Field(None, alias="aliasName")


def is_reserved_system_template(template_name: str, index_patterns: list[str]) -> bool:
    return template_name.startswith("kibana_index_template") or (
        template_name.startswith(".")
        and all("*" not in pattern for pattern in index_patterns)
    )


def filter_and_format_templates(templates: dict[str, dict]) -> list[dict]:
    """Drop reserved system templates and expose their lifecycle settings."""
    formatted = []
    for template_name, template in templates.items():
        settings = template.get("settings") or {}
        index_patterns = template.get("index_patterns") or []
        if is_reserved_system_template(template_name, index_patterns):
            continue

        index_settings = settings.get("index") or {}
        formatted.append({
            "name": template_name,
            "index_lifecycle_name": (index_settings.get("lifecycle") or {}).get("name"),
            "index_patterns": index_patterns,
            "allocation_rules": index_settings.get("routing"),
            "settings": settings,
        })
    return formatted


def merge(target: dict, patch: dict) -> dict:
    """Recursively merge ``patch`` into a copy of ``target``."""
    merged = copy.deepcopy(target)
    for key, value in patch.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def register_templates_routes(deps: RouteDependencies) -> None:
    router = deps.router
    guard = [Depends(deps.license.guard_api_route)]

    @router.get(f"{API_BASE_PATH}/templates", dependencies=guard)
    @limiter.limit("100/minute")
    async def list_templates(
        request: Request,
        caller: ScopedClusterClient = Depends(get_cluster_caller),
    ):
        """List user index templates with their lifecycle policy."""
        try:
            templates = await caller("GET", "/_template")
            return filter_and_format_templates(templates)
        except Exception as e:
            raise_for_error(e, deps.lib)

    @router.post(f"{API_BASE_PATH}/template", dependencies=guard)
    @limiter.limit("30/minute")
    async def add_policy_to_template(
        request: Request,
        payload: AddPolicyToTemplate,
        caller: ScopedClusterClient = Depends(get_cluster_caller),
    ):
        """Set the lifecycle policy of an index template."""
        try:
            response = await caller("GET", f"/_template/{encode_name(payload.template_name)}")
        except Exception as e:
            if is_not_found(e):
                response = {}
            else:
                raise_for_error(e, deps.lib)

        template = response.get(payload.template_name)
        if template is None:
            raise HTTPException(404, f"Index template not found: {payload.template_name}")

        template = merge(
            template,
            {"settings": lifecycle_settings(payload.policy_name, payload.alias_name)},
        )
        try:
            return await caller(
                "PUT", f"/_template/{encode_name(payload.template_name)}", body=template
            )
        except Exception as e:
            raise_for_error(e, deps.lib)
