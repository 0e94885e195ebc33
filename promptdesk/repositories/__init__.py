"""
Repository layer exports.

This module exports all database repositories for easy import.
"""
from promptdesk.repositories import prompt_db_repository
from promptdesk.repositories import tag_db_repository
from promptdesk.repositories import version_db_repository
from promptdesk.repositories import execution_db_repository
from promptdesk.repositories import image_db_repository
from promptdesk.repositories import settings_db_repository

__all__ = [
    'prompt_db_repository',
    'tag_db_repository',
    'version_db_repository',
    'execution_db_repository',
    'image_db_repository',
    'settings_db_repository',
]
