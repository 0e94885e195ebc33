"""
Execution database repository - bookkeeping for template-substitution runs.
"""
import logging
from datetime import datetime
from typing import List, Optional
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from promptdesk.database.models.execution import Execution
from promptdesk.database.models.enums import ExecutionStatus

logger = logging.getLogger(__name__)


async def create(
    session: AsyncSession,
    prompt_id: str,
    input: Optional[str] = None,
    status: ExecutionStatus = ExecutionStatus.RUNNING,
    output: Optional[str] = None,
    started_at: Optional[datetime] = None,
    completed_at: Optional[datetime] = None,
    duration: Optional[int] = None,
) -> Execution:
    """
    Insert a single execution row.

    New runs start in RUNNING state; the other arguments exist for imports and seeding.
    """
    execution = Execution(
        prompt_id=prompt_id,
        input=input,
        status=status,
        output=output,
        completed_at=completed_at,
        duration=duration,
    )
    if started_at is not None:
        execution.started_at = started_at
    session.add(execution)
    await session.flush()
    await session.refresh(execution)
    return execution


async def finish(
    session: AsyncSession,
    execution: Execution,
    status: ExecutionStatus,
    completed_at: datetime,
    duration: int,
    output: Optional[str] = None,
    error_msg: Optional[str] = None,
) -> Execution:
    """Record the final state of a run."""
    execution.status = status
    execution.output = output
    execution.error_msg = error_msg
    execution.completed_at = completed_at
    execution.duration = duration
    await session.flush()
    return execution


async def list_by_prompt(session: AsyncSession, prompt_id: str, limit: int = 50) -> List[Execution]:
    """Most recent executions of a prompt, newest first."""
    stmt = (
        select(Execution)
        .where(Execution.prompt_id == prompt_id)
        .order_by(Execution.started_at.desc(), Execution.id.desc())
        .limit(limit)
    )
    result = await session.execute(stmt)
    return list(result.scalars().all())


async def get_by_id(session: AsyncSession, execution_id: str) -> Optional[Execution]:
    stmt = select(Execution).where(Execution.id == execution_id)
    result = await session.execute(stmt)
    return result.scalar_one_or_none()

