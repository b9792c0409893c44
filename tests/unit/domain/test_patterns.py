"""Signature matchers: false positives, XSS and SQL injection."""

import pytest

from medme_security.domain.classification.patterns import (
    FALSE_POSITIVE_SIGNATURES,
    XSS_SIGNATURES,
    detect_sql_injection,
    detect_xss,
    is_known_false_positive,
    match_signature,
)


@pytest.mark.parametrize(
    "blocked_uri",
    [
        "chrome-extension://abc/x.js",
        "moz-extension://abc/content.js",
        "safari-extension://com.example/inject.js",
        "data:text/javascript;base64,YWxlcnQoMSk=",
        "about:blank",
        "https://cdn.example/ublock-origin/filter.js",
        "https://adblock.example/list.js",
        "https://ghostery.example/tracker.js",
        "webpack-internal:///./src/app.js",
        "eval",
    ],
)
def test_known_false_positive_signatures_match(blocked_uri):
    assert is_known_false_positive(blocked_uri)


def test_false_positive_checked_against_directive_too():
    assert is_known_false_positive("https://example.com/a.js", "script-src 'unsafe-eval'")


def test_false_positive_match_is_case_insensitive():
    assert is_known_false_positive("CHROME-EXTENSION://ABC/x.js")


def test_ordinary_uri_is_not_false_positive():
    assert not is_known_false_positive("https://evil.example/x.js", "script-src")


@pytest.mark.parametrize("value", [None, ""])
def test_missing_values_never_match(value):
    assert match_signature(value, FALSE_POSITIVE_SIGNATURES) is None
    assert match_signature(value, XSS_SIGNATURES) is None
    assert not is_known_false_positive(value, value)


@pytest.mark.parametrize(
    "value,name",
    [
        ("javascript:alert(1)", "javascript_uri"),
        ("data:text/html,<b>x</b>", "html_data_uri"),
        ("VBScript:msgbox", "vbscript_uri"),
        ("https://x.example/?q=<script>alert(1)</script>", "inline_script"),
        ("https://x.example/?q=eval(atob('x'))", "eval_call"),
    ],
)
def test_xss_signatures(value, name):
    found = detect_xss(value)
    assert found is not None
    assert found.name == name


def test_xss_checks_source_file_when_blocked_uri_clean():
    assert detect_xss("https://cdn.example/app.js", "javascript:void(0)") is not None


@pytest.mark.parametrize(
    "value",
    [
        "https://x.example/?q=SELECT name FROM users",
        "https://x.example/?q=1 UNION ALL SELECT password",
        "https://x.example/?q=drop table patients",
        "https://x.example/?q=insert into audit_logs",
    ],
)
def test_sql_injection_signatures(value):
    assert detect_sql_injection(value) is not None


def test_sql_injection_needs_word_boundaries():
    assert detect_sql_injection("https://x.example/selection/fromage") is None


def test_clean_uri_has_no_attack_signature():
    assert detect_xss("https://cdn.example/app.js") is None
    assert detect_sql_injection("https://cdn.example/app.js") is None
