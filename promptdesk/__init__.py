"""
PromptDesk backend.
Local REST API for creating, tagging, versioning, searching and executing prompts.
"""

__version__ = "1.0.0"
