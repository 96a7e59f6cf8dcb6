# src/heuristics/keywords.py — v1
"""Keyword tables shared by the heuristic extractors.

Kept as plain module constants so every classifier reads the same data and
tests can reference it directly.
"""

from __future__ import annotations

import re
from functools import lru_cache

# Primary dictionary: document type -> indicative keywords (lowercase).
DOC_TYPE_KEYWORDS: dict[str, tuple[str, ...]] = {
    "Invoice": (
        "invoice", "bill", "billing", "amount due", "payment due",
        "total amount", "invoice number", "billed to",
    ),
    "Resume": (
        "resume", "cv", "curriculum vitae", "professional summary",
        "work experience", "education", "skills", "objective",
    ),
    "Contract": (
        "contract", "agreement", "terms and conditions", "service agreement",
        "partnership agreement", "nda", "non-disclosure",
    ),
    "Statement": (
        "statement", "account statement", "bank statement", "balance",
        "account balance", "transaction history",
    ),
    "Receipt": (
        "receipt", "payment received", "thank you for your payment",
        "transaction", "purchase confirmation",
    ),
    "Proposal": (
        "proposal", "project proposal", "business proposal", "scope of work",
        "deliverables",
    ),
    "Report": (
        "report", "analysis", "findings", "conclusions", "executive summary",
        "monthly report",
    ),
    "Letter": (
        "dear", "sincerely", "yours truly", "letter", "correspondence", "memo",
    ),
    "Tax Document": (
        "tax return", "w-2", "1099", "irs", "federal tax", "state tax",
        "deduction",
    ),
    "Legal Document": (
        "legal", "court", "lawsuit", "litigation", "attorney", "lawyer",
        "legal notice",
    ),
}

# Secondary word-frequency map: single token -> document type.
SECONDARY_KEYWORDS: dict[str, str] = {
    "invoice": "Invoice",
    "payment": "Invoice",
    "due": "Invoice",
    "subtotal": "Invoice",
    "quote": "Quote",
    "quotation": "Quote",
    "estimate": "Quote",
    "minutes": "Meeting Minutes",
    "agenda": "Meeting Minutes",
    "attendees": "Meeting Minutes",
    "manual": "Manual",
    "instructions": "Manual",
    "guide": "Manual",
    "policy": "Policy",
    "premium": "Policy",
    "coverage": "Policy",
    "certificate": "Certificate",
    "certify": "Certificate",
    "certified": "Certificate",
    "order": "Purchase Order",
    "shipment": "Purchase Order",
    "shipping": "Purchase Order",
    "prescription": "Medical Record",
    "patient": "Medical Record",
    "diagnosis": "Medical Record",
    "application": "Application",
    "applicant": "Application",
    "form": "Form",
}

STOP_WORDS: frozenset[str] = frozenset({
    "a", "about", "above", "after", "again", "all", "am", "an", "and", "any",
    "are", "as", "at", "be", "been", "before", "being", "below", "between",
    "both", "but", "by", "can", "could", "did", "do", "does", "doing", "down",
    "during", "each", "few", "for", "from", "further", "had", "has", "have",
    "having", "he", "her", "here", "hers", "him", "his", "how", "i", "if",
    "in", "into", "is", "it", "its", "just", "me", "more", "most", "my", "no",
    "nor", "not", "now", "of", "off", "on", "once", "only", "or", "other",
    "our", "ours", "out", "over", "own", "same", "she", "should", "so",
    "some", "such", "than", "that", "the", "their", "them", "then", "there",
    "these", "they", "this", "those", "through", "to", "too", "under",
    "until", "up", "very", "was", "we", "were", "what", "when", "where",
    "which", "while", "who", "whom", "why", "will", "with", "would", "you",
    "your", "yours",
})

MONTH_NAMES: tuple[str, ...] = (
    "january", "february", "march", "april", "may", "june", "july",
    "august", "september", "october", "november", "december",
)

# Billing labels name the party being charged; they score highest.
BILLING_LABELS: tuple[str, ...] = (
    "bill to", "billed to", "invoice to", "sold to", "client", "customer",
)
CLIENT_LABELS: tuple[str, ...] = (
    "from", "attention", "attn", "re", "prepared for", "to",
)

COMPANY_SUFFIXES: frozenset[str] = frozenset({
    "inc", "corp", "corporation", "llc", "ltd", "co", "company", "group",
    "llp", "plc", "gmbh",
})

# Capitalised words that start many lines but are never client names.
NAME_STOP_WORDS: frozenset[str] = frozenset({
    "invoice", "date", "total", "amount", "due", "page", "bill", "billed",
    "payment", "balance", "statement", "receipt", "contract", "agreement",
    "report", "proposal", "letter", "dear", "sincerely", "subject", "re",
    "from", "to", "attention", "attn", "client", "customer", "number",
    "tax", "subtotal", "description", "quantity", "price", "thank", "thanks",
    "terms", "summary", "the", "this", "please", "confidential",
} | set(MONTH_NAMES))

# Words on the same line that mark a date as the document date.
DATE_CONTEXT_WORDS: tuple[str, ...] = (
    "date", "dated", "issued", "invoice", "effective", "as of", "on",
)


@lru_cache(maxsize=512)
def _keyword_pattern(keyword: str) -> re.Pattern[str]:
    return re.compile(rf"\b{re.escape(keyword)}\b", re.IGNORECASE)


def count_keyword(keyword: str, content: str) -> int:
    """Number of whole-word occurrences of ``keyword`` in ``content``."""
    return len(_keyword_pattern(keyword).findall(content))


def has_label(line: str, labels: tuple[str, ...]) -> bool:
    """True when ``line`` contains one of ``labels`` followed by a colon."""
    return any(
        re.search(rf"\b{re.escape(label)}\s*:", line, re.IGNORECASE)
        for label in labels
    )
