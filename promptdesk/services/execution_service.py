"""
Execution service - fills ``{{placeholder}}`` markers in a prompt's content
and keeps a record of every attempt.

A failed attempt is reported in the result (``success=False``) and stored
as a FAILED execution; it is never raised to the HTTP layer.
"""
import json
import logging
import re
import time
from typing import Any, Dict, List, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from promptdesk.core.exceptions import ExecutionNotFoundException, PromptNotFoundException
from promptdesk.core.logging import log_event
from promptdesk.database.base import utcnow
from promptdesk.database.models.enums import ExecutionStatus
from promptdesk.models.schemas import (
    ExecuteRequest,
    ExecutionDetailResponse,
    ExecutionMetadata,
    ExecutionResponse,
    ExecutionResult,
    PromptRecord,
)
from promptdesk.repositories import execution_db_repository, prompt_db_repository

logger = logging.getLogger(__name__)

HISTORY_LIMIT = 50


def format_parameter(value: Any) -> str:
    """
    Render a parameter value as placeholder text.

    Booleans become ``true``/``false``, None becomes ``null``, whole floats
    lose their ``.0`` and lists/objects are written as JSON.
    """
    if isinstance(value, bool):
        return "true" if value else "false"
    if value is None:
        return "null"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, (list, dict)):
        return json.dumps(value, ensure_ascii=False, separators=(",", ":"))
    return str(value)


def render_template(content: str, parameters: Optional[Dict[str, Any]]) -> str:
    """
    Replace every ``{{ key }}`` (spaces inside the braces optional) with its value.

    Keys are matched literally. Placeholders without a parameter are left untouched.
    """
    for key, value in (parameters or {}).items():
        pattern = re.compile(r"\{\{\s*" + re.escape(key) + r"\s*\}\}")
        replacement = format_parameter(value)
        content = pattern.sub(lambda _match: replacement, content)
    return content


def _elapsed_ms(started: float) -> int:
    return int(round((time.perf_counter() - started) * 1000))


class ExecutionService:
    """Execution operations within one database session."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def list_by_prompt(self, prompt_id: str) -> List[ExecutionResponse]:
        executions = await execution_db_repository.list_by_prompt(self.session, prompt_id, limit=HISTORY_LIMIT)
        return [ExecutionResponse.model_validate(e) for e in executions]

    async def get(self, execution_id: str) -> ExecutionDetailResponse:
        execution = await execution_db_repository.get_by_id(self.session, execution_id)
        if execution is None:
            raise ExecutionNotFoundException(execution_id)

        prompt = await prompt_db_repository.get_by_id(self.session, execution.prompt_id)
        return ExecutionDetailResponse(
            **dict(ExecutionResponse.model_validate(execution)),
            prompt=PromptRecord.model_validate(prompt) if prompt is not None else None,
        )

    async def execute(self, data: ExecuteRequest) -> ExecutionResult:
        """
        Run template substitution for ``data.prompt_id`` and record the outcome.

        On success the prompt's usage counter is incremented.
        """
        started = time.perf_counter()
        execution = await execution_db_repository.create(
            self.session,
            prompt_id=data.prompt_id,
            input=json.dumps(data.parameters, ensure_ascii=False) if data.parameters is not None else None,
            status=ExecutionStatus.RUNNING,
        )

        try:
            prompt = await prompt_db_repository.get_by_id(self.session, data.prompt_id)
            if prompt is None:
                raise PromptNotFoundException(data.prompt_id)

            output = render_template(prompt.content, data.parameters)
            duration = _elapsed_ms(started)
            await execution_db_repository.finish(
                self.session,
                execution,
                status=ExecutionStatus.SUCCESS,
                output=output,
                completed_at=utcnow(),
                duration=duration,
            )
            await prompt_db_repository.increment_usage(self.session, prompt.id)

        except Exception as e:
            duration = _elapsed_ms(started)
            error = str(e) or type(e).__name__
            await execution_db_repository.finish(
                self.session,
                execution,
                status=ExecutionStatus.FAILED,
                error_msg=error,
                completed_at=utcnow(),
                duration=duration,
            )
            log_event(
                level="WARNING",
                logger=__name__,
                function="execute",
                operation="prompt_execute",
                event="execution_failed",
                message=f"Execution {execution.id} failed: {error}",
                context={"prompt_id": data.prompt_id, "duration_ms": duration},
            )
            return ExecutionResult(
                success=False,
                error=error,
                metadata=ExecutionMetadata(duration=duration, execution_id=execution.id),
            )

        log_event(
            level="INFO",
            logger=__name__,
            function="execute",
            operation="prompt_execute",
            event="execution_succeeded",
            message=f"Execution {execution.id} succeeded",
            context={"prompt_id": data.prompt_id, "duration_ms": duration},
        )
        return ExecutionResult(
            success=True,
            output=output,
            metadata=ExecutionMetadata(duration=duration, execution_id=execution.id),
        )
