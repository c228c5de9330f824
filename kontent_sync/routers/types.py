"""
Content types endpoint, used to fill the content type selector of the upload form
"""
from typing import Any, Dict, List

from fastapi import APIRouter, Depends, Query, status

from kontent_sync.core.settings import Environment, KontentSettings, get_kontent_settings
from kontent_sync.schemas.sync_schema import ContentTypesResponseSchema
from kontent_sync.services.kontent.kontent_client import KontentClient
from kontent_sync.services.sync.models import RunContext

router = APIRouter(
    prefix="/api",
    tags=["Content Types"]
)


def filter_list_types(types: List[Dict[str, Any]]) -> List[Dict[str, str]]:
    """Keep the content types whose name contains 'list'"""
    return [
        {"name": content_type["name"], "codename": content_type["codename"]}
        for content_type in types
        if "list" in content_type.get("name", "").lower()
    ]


@router.get("/types", status_code=status.HTTP_200_OK, response_model=ContentTypesResponseSchema)
async def get_content_types(
    environment: Environment = Query(Environment.DEV, description="Environment to list the types of"),
    settings: KontentSettings = Depends(get_kontent_settings)
):
    """List the 'list' content types of the environment's Kontent project"""
    context = RunContext.from_settings(environment, "", settings)
    async with KontentClient(context, timeout=settings.kontent_request_timeout) as client:
        types = await client.list_content_types()
    return {"types": filter_list_types(types)}
