"""Bank statement extraction through an OpenRouter vision model."""

import base64
import json
import mimetypes
import re
from datetime import date
from decimal import Decimal, InvalidOperation
from pathlib import PurePath
from typing import Any

import httpx

from autoreconcile.config import settings
from autoreconcile.logger import get_logger
from autoreconcile.models import BankCode, StatementRecord
from autoreconcile.prompts import STATEMENT_RESPONSE_SCHEMA, get_statement_prompt
from autoreconcile.services.openrouter_streaming import (
    OpenRouterStreamError,
    accumulate_stream,
    stream_openrouter_json,
)

logger = get_logger(__name__)

DEFAULT_MIME_TYPE = "image/jpeg"
_FENCED_JSON = re.compile(r"```(?:json)?\s*(.*?)\s*```", re.DOTALL)


class ExtractionError(Exception):
    """Raised when a statement document cannot be turned into a statement record."""

    pass


def guess_mime_type(filename: str, mime_type: str | None = None) -> str:
    """Resolve the MIME type sent to the model for ``filename``."""
    if mime_type and mime_type != "application/octet-stream":
        return mime_type
    guessed, _ = mimetypes.guess_type(filename)
    if guessed:
        return guessed
    if PurePath(filename).suffix.lower() == ".pdf":
        return "application/pdf"
    return DEFAULT_MIME_TYPE


def parse_model_json(content: str) -> dict[str, Any]:
    """Decode the model response, tolerating markdown code fences."""
    try:
        parsed = json.loads(content)
    except json.JSONDecodeError as e:
        fenced = _FENCED_JSON.search(content)
        if not fenced:
            raise ExtractionError(f"Failed to parse JSON response: {e}") from e
        try:
            parsed = json.loads(fenced.group(1))
        except json.JSONDecodeError as inner:
            raise ExtractionError(f"Failed to parse JSON response: {inner}") from inner

    if isinstance(parsed, list) and parsed and isinstance(parsed[0], dict):
        parsed = parsed[0]
    if not isinstance(parsed, dict):
        raise ExtractionError("Model response is not a JSON object")
    return parsed


def _parse_amount(value: Any) -> Decimal | None:
    if value is None or isinstance(value, bool):
        return None
    try:
        amount = Decimal(str(value).replace(",", "").strip())
    except InvalidOperation:
        return None
    return amount if amount.is_finite() else None


def _parse_statement_date(value: Any) -> str:
    if value:
        try:
            return date.fromisoformat(str(value).strip()).isoformat()
        except ValueError:
            logger.warning("Invalid statement date from model, using today", raw_date=str(value))
    return date.today().isoformat()


def _parse_bank_name(value: Any) -> str | None:
    if value is None:
        return None
    bank_name = str(value).strip()
    if not bank_name or bank_name.lower() == BankCode.UNKNOWN.value.lower():
        return None
    return bank_name


def build_statement_record(data: dict[str, Any], source_name: str) -> StatementRecord:
    """Validate extracted fields and build the statement record.

    ``accountNumber`` and ``endingBalance`` are mandatory; the date defaults
    to today and the bank name is optional.
    """
    account_number = str(data.get("accountNumber") or "").strip()
    if not account_number:
        raise ExtractionError("Account number could not be determined from the statement")

    ending_balance = _parse_amount(data.get("endingBalance"))
    if ending_balance is None:
        raise ExtractionError("Ending balance could not be determined from the statement")

    return StatementRecord(
        source_name=source_name,
        account_number=account_number,
        ending_balance=ending_balance,
        statement_date=_parse_statement_date(data.get("statementDate")),
        bank_name=_parse_bank_name(data.get("bankName")),
    )


class StatementExtractor:
    """Extracts statement summaries from documents via OpenRouter."""

    def __init__(
        self,
        *,
        api_key: str | None = None,
        base_url: str | None = None,
        primary_model: str | None = None,
        fallback_models: list[str] | None = None,
        timeout: float | None = None,
    ) -> None:
        self.api_key = api_key if api_key is not None else settings.openrouter_api_key
        self.base_url = base_url or settings.openrouter_base_url
        self.primary_model = primary_model or settings.primary_model
        self.fallback_models = (
            fallback_models if fallback_models is not None else settings.fallback_models
        )
        self.timeout = timeout or settings.extraction_timeout_seconds

    def _build_messages(self, content: bytes, mime_type: str) -> list[dict[str, Any]]:
        b64_content = base64.b64encode(content).decode("utf-8")
        return [
            {
                "role": "user",
                "content": [
                    {"type": "text", "text": get_statement_prompt()},
                    {
                        "type": "image_url",
                        "image_url": {"url": f"data:{mime_type};base64,{b64_content}"},
                    },
                ],
            }
        ]

    async def extract_fields(self, content: bytes, mime_type: str) -> dict[str, Any]:
        """Call the model chain and return the raw extracted fields."""
        if not content:
            raise ExtractionError("File content is required")
        if not self.api_key:
            raise ExtractionError("OpenRouter API key not configured")

        messages = self._build_messages(content, mime_type)
        models = [model for model in [self.primary_model, *self.fallback_models] if model]
        error_summary: dict[str, int] = {}
        last_error: ExtractionError | None = None

        for attempt, model in enumerate(models, start=1):
            logger.info(
                "Attempting statement extraction",
                model=model,
                attempt=attempt,
                total=len(models),
                mime_type=mime_type,
            )
            try:
                raw = await accumulate_stream(
                    stream_openrouter_json(
                        messages=messages,
                        model=model,
                        api_key=self.api_key,
                        base_url=self.base_url,
                        timeout=self.timeout,
                        response_format=STATEMENT_RESPONSE_SCHEMA,
                    )
                )
            except OpenRouterStreamError as e:
                logger.warning(
                    "Statement extraction HTTP error",
                    model=model,
                    attempt=attempt,
                    error=str(e),
                    retryable=e.retryable,
                )
                error_summary["http_error"] = error_summary.get("http_error", 0) + 1
                last_error = ExtractionError(f"Model {model} failed: {e}")
                continue
            except httpx.HTTPError as e:
                logger.warning(
                    "Statement extraction transport error",
                    model=model,
                    attempt=attempt,
                    error=str(e),
                    error_type=type(e).__name__,
                )
                error_summary["transport"] = error_summary.get("transport", 0) + 1
                last_error = ExtractionError(f"Model {model} unreachable: {type(e).__name__}")
                continue

            if not raw.strip():
                logger.error("Model returned empty response", model=model)
                error_summary["empty_response"] = error_summary.get("empty_response", 0) + 1
                last_error = ExtractionError(f"Model {model} returned empty response")
                continue

            try:
                parsed = parse_model_json(raw)
            except ExtractionError as e:
                logger.error(
                    "Failed to parse model JSON",
                    model=model,
                    raw_preview=raw[:500],
                    content_length=len(raw),
                )
                error_summary["json_parse"] = error_summary.get("json_parse", 0) + 1
                last_error = e
                continue

            logger.info("Statement extraction successful", model=model)
            return parsed

        if error_summary:
            breakdown = ", ".join(f"{count} {kind}" for kind, count in error_summary.items())
            logger.error(
                "All extraction models failed",
                models_tried=len(models),
                error_breakdown=error_summary,
            )
            raise ExtractionError(f"All {len(models)} models failed. Breakdown: {breakdown}. Last: {last_error}")

        raise last_error or ExtractionError("No extraction model configured")

    async def extract_statement(
        self,
        content: bytes,
        filename: str,
        mime_type: str | None = None,
    ) -> StatementRecord:
        """Extract one statement record from a document."""
        resolved_mime = guess_mime_type(filename, mime_type)
        logger.info("Extracting statement", filename=filename, mime_type=resolved_mime)
        data = await self.extract_fields(content, resolved_mime)
        statement = build_statement_record(data, source_name=filename)
        logger.info(
            "Statement extracted",
            filename=filename,
            bank_name=statement.bank_name,
            statement_date=statement.statement_date,
        )
        return statement
