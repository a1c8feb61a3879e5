"""Prompts package."""

from autoreconcile.prompts.statement import (
    STATEMENT_PROMPT,
    STATEMENT_RESPONSE_SCHEMA,
    get_statement_prompt,
)

__all__ = [
    "STATEMENT_PROMPT",
    "STATEMENT_RESPONSE_SCHEMA",
    "get_statement_prompt",
]
