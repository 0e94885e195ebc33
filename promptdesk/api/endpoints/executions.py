"""
Execution API endpoints - template substitution runs and their history.
"""
import logging
from typing import List
from fastapi import APIRouter, Depends, status

from promptdesk.api.deps import get_execution_service
from promptdesk.models.schemas import (
    ExecuteRequest,
    ExecutionDetailResponse,
    ExecutionResponse,
    ExecutionResult,
)
from promptdesk.services.execution_service import ExecutionService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/executions", tags=["executions"])


@router.get("/prompt/{prompt_id}", response_model=List[ExecutionResponse])
async def list_executions(prompt_id: str, service: ExecutionService = Depends(get_execution_service)):
    """The 50 most recent executions of a prompt."""
    return await service.list_by_prompt(prompt_id)


@router.get("/{execution_id}", response_model=ExecutionDetailResponse)
async def get_execution(execution_id: str, service: ExecutionService = Depends(get_execution_service)):
    return await service.get(execution_id)


@router.post(
    "/execute",
    response_model=ExecutionResult,
    response_model_exclude_none=True,
    status_code=status.HTTP_201_CREATED,
)
async def execute_prompt(data: ExecuteRequest, service: ExecutionService = Depends(get_execution_service)):
    """
    Fill a prompt's placeholders with ``parameters``.

    Always responds 201 once the attempt is recorded; a failed run has
    ``success: false`` and an ``error`` message.
    """
    return await service.execute(data)
