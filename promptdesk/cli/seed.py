"""
Sample data for a fresh database: default tags, three example prompts, one
recorded execution and the default settings.

Seeding is idempotent. Tags and settings that exist are left alone, and a
sample prompt is only created when no live prompt has its title.
"""
import json
import logging
import random
from dataclasses import dataclass
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from promptdesk.database.base import utcnow
from promptdesk.database.models.enums import ExecutionStatus, Language, PromptType
from promptdesk.models.schemas import PromptCreateRequest
from promptdesk.repositories import execution_db_repository, prompt_db_repository, tag_db_repository
from promptdesk.services.prompt_service import PromptService
from promptdesk.services.settings_service import SettingsService

logger = logging.getLogger(__name__)

DEFAULT_TAGS = (
    ("javascript", "#F7DF1E", "code"),
    ("react", "#61DAFB", "react"),
    ("typescript", "#3178C6", "code"),
    ("python", "#3776AB", "code"),
    ("ai", "#8B5CF6", "brain"),
    ("image", "#EC4899", "image"),
)

SAMPLE_PROMPTS = (
    PromptCreateRequest(
        title="React Component Generator",
        description="Generate a reusable React component with TypeScript and props",
        content=(
            "Create a React component called {{componentName}} that:\n"
            "- Uses TypeScript for type safety\n"
            "- Accepts props: {{propsList}}\n"
            "- Implements {{functionality}}\n"
            "- Includes proper JSDoc comments\n"
            "- Exports as default"
        ),
        type=PromptType.CODE,
        language=Language.EN,
        tags=["react", "typescript"],
    ),
    PromptCreateRequest(
        title="Image Generation Prompt",
        description="Professional photography prompt for AI image generation",
        content=(
            "A professional photograph of {{subject}}, {{style}} style, \n"
            "shot on {{camera}}, {{lighting}} lighting, {{composition}} composition, \n"
            "high resolution, 8k, award-winning photography"
        ),
        type=PromptType.IMAGE,
        language=Language.EN,
        tags=["ai", "image"],
    ),
    PromptCreateRequest(
        title="نمونه پرامپت فارسی",
        description="یک پرامپت نمونه به زبان فارسی برای تست قابلیت RTL",
        content=(
            "یک متن {{موضوع}} در مورد {{عنوان}} بنویس که:\n"
            "- شامل {{تعداد}} پاراگراف باشد\n"
            "- سبک نگارش {{سبک}} داشته باشد\n"
            "- برای {{مخاطب}} مناسب باشد"
        ),
        type=PromptType.TEXT,
        language=Language.FA,
    ),
)

SAMPLE_EXECUTION_INPUT = {
    "componentName": "UserProfile",
    "propsList": "name, email, avatar",
    "functionality": "display user information",
}
SAMPLE_EXECUTION_OUTPUT = """export default function UserProfile({ name, email, avatar }) {
  return (
    <div className="user-profile">
      <img src={avatar} alt={name} />
      <h2>{name}</h2>
      <p>{email}</p>
    </div>
  );
}"""


@dataclass
class SeedReport:
    tags: int = 0
    prompts: int = 0
    executions: int = 0
    settings: int = 0


async def seed_database(session: AsyncSession, rng: Optional[random.Random] = None) -> SeedReport:
    """Insert whatever sample data is missing and report what was added."""
    report = SeedReport()

    for name, color, icon in DEFAULT_TAGS:
        if await tag_db_repository.insert_if_missing(session, name=name, color=color, icon=icon):
            report.tags += 1

    prompts = PromptService(session, rng=rng)
    for index, sample in enumerate(SAMPLE_PROMPTS):
        if await prompt_db_repository.get_by_title(session, sample.title) is not None:
            continue
        created = await prompts.create(sample)
        report.prompts += 1

        if index == 0:
            now = utcnow()
            await execution_db_repository.create(
                session,
                prompt_id=created.id,
                input=json.dumps(SAMPLE_EXECUTION_INPUT),
                output=SAMPLE_EXECUTION_OUTPUT,
                status=ExecutionStatus.SUCCESS,
                started_at=now,
                completed_at=now,
                duration=123,
            )
            report.executions += 1

    report.settings = await SettingsService(session).seed_defaults()

    logger.info(f"Seed complete: {report}")
    return report
