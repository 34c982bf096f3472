"""Pre-send message classifier.

Checks run in a fixed order and the first hit wins: denylisted terms, then
contact details, then length.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Optional

INAPPROPRIATE_CONTENT = "inappropriate_content"
CONTACT_INFO_SHARING = "contact_info_sharing"
SPAM = "spam"

DEFAULT_MAX_LENGTH = 2000

INAPPROPRIATE_KEYWORDS = (
    "scam",
    "fraud",
    "money laundering",
    "drug",
    "weapon",
    "hate",
    "kill",
    "attack",
)

CONTACT_INFO_PATTERNS = (
    re.compile(r"\b[\w.-]+@[\w.-]+\.\w{2,4}\b", re.IGNORECASE),
    re.compile(r"\b(\+?\d{1,3}[- ]?)?\d{10}\b"),
    re.compile(r"\b(\+?\d{1,3}[- ]?)?\d{3}[- ]?\d{3}[- ]?\d{4}\b"),
    re.compile(r"whatsapp", re.IGNORECASE),
    re.compile(r"telegram", re.IGNORECASE),
    re.compile(r"phone number", re.IGNORECASE),
    re.compile(r"email address", re.IGNORECASE),
)


@dataclass(slots=True, frozen=True)
class SafetyCheckResult:
    is_safe: bool
    flagged_reason: Optional[str] = None
    flagged_content: Optional[str] = None


SAFE = SafetyCheckResult(is_safe=True)


def check_message_safety(content: str, max_length: int = DEFAULT_MAX_LENGTH) -> SafetyCheckResult:
    lowered = content.lower()
    for keyword in INAPPROPRIATE_KEYWORDS:
        if keyword in lowered:
            return SafetyCheckResult(False, INAPPROPRIATE_CONTENT, keyword)

    for pattern in CONTACT_INFO_PATTERNS:
        if pattern.search(content):
            return SafetyCheckResult(False, CONTACT_INFO_SHARING, "Potential contact information detected")

    if len(content) > max_length:
        return SafetyCheckResult(False, SPAM, "Message too long")

    return SAFE


__all__ = [
    "SafetyCheckResult",
    "check_message_safety",
    "INAPPROPRIATE_CONTENT",
    "CONTACT_INFO_SHARING",
    "SPAM",
    "INAPPROPRIATE_KEYWORDS",
]
