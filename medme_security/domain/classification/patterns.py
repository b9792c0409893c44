"""Signature matchers for browser security reports. Pure predicates, no I/O."""

import re
from dataclasses import dataclass
from typing import Iterable, Optional, Sequence


@dataclass(frozen=True)
class Signature:
    name: str
    pattern: "re.Pattern[str]"

    def matches(self, value: Optional[str]) -> bool:
        if not value:
            return False
        return self.pattern.search(value) is not None


def _literal(name: str, text: str) -> Signature:
    return Signature(name=name, pattern=re.compile(re.escape(text), re.IGNORECASE))


def _regex(name: str, expression: str) -> Signature:
    return Signature(name=name, pattern=re.compile(expression, re.IGNORECASE))


# Known-benign noise: browser extensions, injected scripts, ad blockers, dev tooling.
FALSE_POSITIVE_SIGNATURES: Sequence[Signature] = (
    _literal("chrome_extension", "chrome-extension://"),
    _literal("firefox_extension", "moz-extension://"),
    _literal("safari_extension", "safari-extension://"),
    _literal("injected_script", "data:text/javascript"),
    _literal("blank_frame", "about:blank"),
    _literal("ublock_origin", "ublock-origin"),
    _literal("adblock", "adblock"),
    _literal("ghostery", "ghostery"),
    _literal("webpack_internal", "webpack-internal://"),
    _literal("dev_eval", "eval"),
)

XSS_SIGNATURES: Sequence[Signature] = (
    _literal("javascript_uri", "javascript:"),
    _literal("html_data_uri", "data:text/html"),
    _literal("vbscript_uri", "vbscript:"),
    _literal("inline_script", "<script"),
    _literal("eval_call", "eval("),
)

SQL_INJECTION_SIGNATURES: Sequence[Signature] = (
    _regex("select_from", r"\bselect\b.*\bfrom\b"),
    _regex("union_select", r"\bunion\b.*\bselect\b"),
    _regex("drop_table", r"\bdrop\b.*\btable\b"),
    _regex("insert_into", r"\binsert\b.*\binto\b"),
)


def match_signature(value: Optional[str], signatures: Iterable[Signature]) -> Optional[Signature]:
    """First signature contained in value, or None. Empty or missing value never matches."""
    if not value:
        return None
    for signature in signatures:
        if signature.matches(value):
            return signature
    return None


def first_match(values: Iterable[Optional[str]], signatures: Sequence[Signature]) -> Optional[Signature]:
    """First signature matching any of the candidate strings, checked in order."""
    for value in values:
        found = match_signature(value, signatures)
        if found is not None:
            return found
    return None


def is_known_false_positive(*values: Optional[str]) -> bool:
    return first_match(values, FALSE_POSITIVE_SIGNATURES) is not None


def detect_xss(*values: Optional[str]) -> Optional[Signature]:
    return first_match(values, XSS_SIGNATURES)


def detect_sql_injection(*values: Optional[str]) -> Optional[Signature]:
    return first_match(values, SQL_INJECTION_SIGNATURES)
