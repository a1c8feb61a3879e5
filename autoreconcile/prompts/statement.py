"""Prompt templates for bank statement extraction."""

STATEMENT_PROMPT = """Analyze this bank statement document (image, PDF or Word file).
Extract the data needed to reconcile the account against the company ledger.

Return a SINGLE JSON object:
{
  "accountNumber": "1234567890",
  "endingBalance": 125000.50,
  "statementDate": "2025-01-31",
  "bankName": "KBANK"
}

Rules:
1. accountNumber: the main account number from the statement header, digits only
   (remove dashes and spaces).
2. endingBalance: the CLOSING balance at the end of the statement period, as a number.
   - Look for "Ending Balance", "Closing Balance", "C/F", "Carried Forward",
     "ยอดยกไป", "ยอดคงเหลือปลายงวด", "ยอดคงเหลือ".
   - Do NOT return "Beginning Balance", "B/F", "Brought Forward", "Total Debits",
     "Total Credits" or "Available Balance" (unless it equals the ledger balance).
   - The amount must belong to the LATEST date in the statement.
3. statementDate: the "As of" date, statement date or date of the ending balance,
   formatted YYYY-MM-DD.
4. bankName: the issuing bank code if identifiable (KTB, SCB, KBANK, BBL, TTB, BAY, GSB).
"""

# JSON schema enforced through the OpenRouter response_format parameter
STATEMENT_RESPONSE_SCHEMA = {
    "type": "json_schema",
    "json_schema": {
        "name": "bank_statement_summary",
        "strict": False,
        "schema": {
            "type": "object",
            "properties": {
                "accountNumber": {"type": "string"},
                "endingBalance": {"type": "number"},
                "statementDate": {"type": "string"},
                "bankName": {"type": "string"},
            },
            "required": ["accountNumber", "endingBalance"],
        },
    },
}


def get_statement_prompt() -> str:
    """Return the extraction prompt sent alongside each document."""
    return STATEMENT_PROMPT
