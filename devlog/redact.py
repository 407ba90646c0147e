"""Sensitive-data filter for posts.

Every rule is a named predicate over the raw document text (frontmatter
included). A document that trips any rule is dropped from the build as a
whole; nothing is partially redacted.

This is a best-effort tripwire for obvious accidents such as a pasted token
or a private key. It is not a security guarantee: the rule set is
incomplete, and a secret that does not match one of the shapes below will
be published.
"""

from __future__ import annotations

import re
from typing import Callable, NamedTuple, Optional

# First entries of the BIP-39 English wordlist. Any two distinct words are
# enough to trip the rule, which also fires on ordinary prose ("able to ...
# about"); that imprecision is known and accepted.
RECOVERY_WORDS = ("abandon", "ability", "able", "about", "above")
RECOVERY_WORD_RE = re.compile(r"\b(" + "|".join(RECOVERY_WORDS) + r")\b", re.IGNORECASE)

CREDENTIAL_KEYWORD_RE = re.compile(
    r"\b(?:password|passwd|secret|api[ _-]?key|private[ _-]?key)\b\s*(?:[:=]|is\b)",
    re.IGNORECASE,
)
API_KEY_TOKEN_RE = re.compile(
    r"\b(?:"
    r"gh[pousr]_[A-Za-z0-9]{36,}"
    r"|github_pat_[A-Za-z0-9_]{22,}"
    r"|glpat-[A-Za-z0-9_-]{20,}"
    r"|sk-(?:proj-|ant-)?[A-Za-z0-9_-]{20,}"
    r"|(?:pk|rk)_(?:live|test)_[A-Za-z0-9]{16,}"
    r"|xox[abposr]-[A-Za-z0-9-]{10,}"
    r"|AIza[0-9A-Za-z_-]{35}"
    r"|npm_[A-Za-z0-9]{36}"
    r")"
)
BEARER_TOKEN_RE = re.compile(r"\bbearer\s+[A-Za-z0-9._~+/-]{20,}=*", re.IGNORECASE)
PRIVATE_KEY_BLOCK_RE = re.compile(r"-----BEGIN (?:[A-Z0-9]+ )*PRIVATE KEY(?: BLOCK)?-----")
CREDENTIAL_URL_RE = re.compile(r"\b[a-z][a-z0-9+.-]*://[^\s:/@]+:[^\s/@]+@[^\s/]+", re.IGNORECASE)
CLOUD_ACCESS_KEY_RE = re.compile(r"\b(?:AKIA|ASIA|AGPA|AIDA|AROA)[0-9A-Z]{16}\b")
CLAIM_URL_RE = re.compile(r"/(?:claim|verify)/[A-Za-z0-9_-]{20,}", re.IGNORECASE)


class SensitiveRule(NamedTuple):
    name: str
    matches: Callable[[str], bool]


def _pattern(regex: re.Pattern) -> Callable[[str], bool]:
    return lambda text: regex.search(text) is not None


def has_recovery_phrase(text: str) -> bool:
    found = {match.lower() for match in RECOVERY_WORD_RE.findall(text)}
    return len(found) >= 2


SENSITIVE_RULES: tuple[SensitiveRule, ...] = (
    SensitiveRule("credential-keyword", _pattern(CREDENTIAL_KEYWORD_RE)),
    SensitiveRule("api-key-token", _pattern(API_KEY_TOKEN_RE)),
    SensitiveRule("bearer-token", _pattern(BEARER_TOKEN_RE)),
    SensitiveRule("private-key-block", _pattern(PRIVATE_KEY_BLOCK_RE)),
    SensitiveRule("credential-url", _pattern(CREDENTIAL_URL_RE)),
    SensitiveRule("cloud-access-key", _pattern(CLOUD_ACCESS_KEY_RE)),
    SensitiveRule("claim-url", _pattern(CLAIM_URL_RE)),
    SensitiveRule("recovery-phrase", has_recovery_phrase),
)


def find_sensitive_rule(text: str, rules: tuple[SensitiveRule, ...] = SENSITIVE_RULES) -> Optional[str]:
    """Return the name of the first rule that matches, or ``None``."""
    for rule in rules:
        if rule.matches(text):
            return rule.name
    return None


def contains_sensitive_data(text: str) -> bool:
    return find_sensitive_rule(text) is not None
