"""
AI document generation (admin)

- POST /ai/generate-srs          - SRS draft (OpenAI)
- POST /ai/generate-tasks        - Task breakdown within a budget (Gemini)
- POST /ai/generate-description  - Project description (Gemini)
"""

from fastapi import APIRouter, Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import get_db
from app.core.rate_limiter import limiter
from app.models.user import User
from app.schemas.ai import (
    SRSRequest,
    SRSResponse,
    TaskGenerationRequest,
    TaskGenerationResponse,
    DescriptionRequest,
    DescriptionResponse,
)
from app.modules.auth.dependencies import get_current_admin
from app.services.ai_document_service import ai_document_service
from app.services.crud_service import client_crud

router = APIRouter(prefix="/ai", tags=["AI Documents"])


@router.post("/generate-srs", response_model=SRSResponse)
@limiter.limit("10/minute")
async def generate_srs(
    request: Request,
    srs_request: SRSRequest,
    admin: User = Depends(get_current_admin),
):
    srs_content = await ai_document_service.generate_srs(srs_request)
    return SRSResponse(srs_content=srs_content)


@router.post("/generate-tasks", response_model=TaskGenerationResponse)
@limiter.limit("10/minute")
async def generate_tasks(
    request: Request,
    task_request: TaskGenerationRequest,
    admin: User = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db)
):
    client_name = None
    if task_request.client_id:
        client = await client_crud.get_or_404(db, task_request.client_id)
        client_name = client.client_name

    tasks = await ai_document_service.generate_tasks(task_request, client_name=client_name)
    return TaskGenerationResponse(tasks=tasks)


@router.post("/generate-description", response_model=DescriptionResponse)
@limiter.limit("10/minute")
async def generate_description(
    request: Request,
    description_request: DescriptionRequest,
    admin: User = Depends(get_current_admin),
):
    description = await ai_document_service.generate_description(description_request)
    return DescriptionResponse(description=description)
