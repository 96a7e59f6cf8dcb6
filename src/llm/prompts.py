# src/llm/prompts.py — v1
"""Prompt construction for AI metadata extraction.

The system prompt fixes the JSON contract checked by
validation.response_validator; keep both in sync.
"""

from __future__ import annotations

from docsorter.llm.models import Message

DEFAULT_MAX_TEXT_CHARS = 3000
TRUNCATION_MARKER = "\n\n[Text truncated...]"

SYSTEM_PROMPT = """You are a document metadata extraction assistant. Your task is to analyze document text and extract structured information about the client, date, and document type.

CRITICAL REQUIREMENTS:
1. You MUST respond with ONLY valid JSON
2. Do not include any text before or after the JSON
3. Use the exact field names specified below
4. Provide confidence scores as numbers between 0.0 and 1.0
5. If information is not found, use null for the value and 0.0 for confidence
6. Extract relevant text snippets that support your findings

REQUIRED JSON STRUCTURE:
{
  "clientName": "string or null",
  "clientConfidence": "number between 0.0 and 1.0",
  "date": "string in YYYY-MM-DD format or null",
  "dateConfidence": "number between 0.0 and 1.0",
  "docType": "string or null",
  "docTypeConfidence": "number between 0.0 and 1.0",
  "snippets": ["array of supporting text snippets"]
}

FIELD GUIDELINES:
- clientName: Company, organization, or person name (e.g., "Acme Corporation", "John Smith")
- date: Document date in YYYY-MM-DD format (e.g., "2024-01-15")
- docType: Document type (e.g., "Invoice", "Contract", "Receipt", "Statement", "Report")
- snippets: Array of 1-3 relevant text excerpts that support your findings
- confidence: How certain you are (0.0 = not found, 1.0 = very certain)"""

EXAMPLES = """

EXAMPLES:

Example 1 - Invoice:
Input: "INVOICE #12345\\nAcme Corporation\\n123 Business St\\nInvoice Date: January 15, 2024\\nAmount Due: $1,500.00"
Output: {
  "clientName": "Acme Corporation",
  "clientConfidence": 0.95,
  "date": "2024-01-15",
  "dateConfidence": 0.90,
  "docType": "Invoice",
  "docTypeConfidence": 0.98,
  "snippets": ["INVOICE #12345", "Acme Corporation", "Invoice Date: January 15, 2024"]
}

Example 2 - Contract:
Input: "SERVICE AGREEMENT\\nBetween ABC Company and XYZ Corp\\nEffective Date: March 1, 2024\\nThis agreement covers..."
Output: {
  "clientName": "ABC Company",
  "clientConfidence": 0.85,
  "date": "2024-03-01",
  "dateConfidence": 0.80,
  "docType": "Contract",
  "docTypeConfidence": 0.90,
  "snippets": ["SERVICE AGREEMENT", "Between ABC Company and XYZ Corp", "Effective Date: March 1, 2024"]
}

Example 3 - Unclear Document:
Input: "Random text with no clear structure or identifiable information"
Output: {
  "clientName": null,
  "clientConfidence": 0.0,
  "date": null,
  "dateConfidence": 0.0,
  "docType": null,
  "docTypeConfidence": 0.0,
  "snippets": []
}"""

USER_PROMPT_TEMPLATE = """Please analyze the following document text and extract the metadata as specified in the system instructions. Respond with ONLY the JSON object, no additional text.

DOCUMENT TEXT:
{text}"""


def truncate_text(text: str, max_chars: int = DEFAULT_MAX_TEXT_CHARS) -> str:
    """Cut ``text`` to ``max_chars`` and append the truncation marker."""
    if len(text) <= max_chars:
        return text
    return text[:max_chars] + TRUNCATION_MARKER


def build_system_prompt(include_examples: bool = True) -> str:
    return SYSTEM_PROMPT + EXAMPLES if include_examples else SYSTEM_PROMPT


def build_metadata_messages(
    text: str,
    max_chars: int = DEFAULT_MAX_TEXT_CHARS,
    include_examples: bool = True,
) -> tuple[str, list[Message]]:
    """System prompt and user messages for one document.

    Returns:
        ``(system, messages)`` ready for BaseLLMClient.complete().
    """
    user = USER_PROMPT_TEMPLATE.format(text=truncate_text(text, max_chars))
    return build_system_prompt(include_examples), [Message(role="user", content=user)]
