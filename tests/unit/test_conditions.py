"""Unit tests for the guard-condition language."""

from __future__ import annotations

import pytest

from helpdesk_workflows.engine.workflow.conditions import (
    ConditionSyntaxError,
    Equality,
    Membership,
    check_condition,
    evaluate_condition,
    parse_condition,
)


@pytest.mark.parametrize("expr", [None, "", "   ", "&&", " && "])
def test_empty_expression_passes(expr: str | None) -> None:
    assert evaluate_condition(expr, {}) is True
    assert evaluate_condition(expr, {"priority": "low"}) is True


def test_equality_is_case_insensitive() -> None:
    assert evaluate_condition("priority = high", {"priority": "High"}) is True
    assert evaluate_condition('priority = "HIGH"', {"priority": "high"}) is True
    assert evaluate_condition("priority = high", {"priority": "low"}) is False


def test_membership() -> None:
    assert evaluate_condition("priority in (low,normal)", {"priority": "high"}) is False
    assert evaluate_condition('channel in ("Email", chat)', {"channel": "email"}) is True
    assert evaluate_condition("channel IN (web)", {"channel": "WEB"}) is True


def test_conjunction_requires_every_clause() -> None:
    expr = 'channel in (email, chat) && priority = "high"'
    assert evaluate_condition(expr, {"channel": "chat", "priority": "high"}) is True
    assert evaluate_condition(expr, {"channel": "phone", "priority": "high"}) is False
    assert evaluate_condition(expr, {"channel": "chat", "priority": "low"}) is False


def test_missing_key_compares_as_empty_string() -> None:
    assert evaluate_condition("category = hardware", {}) is False
    assert evaluate_condition("category = hardware", {"category": "Hardware"}) is True


def test_values_may_contain_spaces_and_hyphens() -> None:
    tree = parse_condition('category = "on-site repair"')
    assert tree.clauses == (Equality(key="category", value="on-site repair"),)
    assert evaluate_condition('category = "on-site repair"', {"category": "On-Site Repair"})


@pytest.mark.parametrize(
    "expr",
    [
        "priority = high || priority = urgent",
        "priority == high",
        "!priority = high",
        "priority",
        "priority = high && (channel = email)",
    ],
)
def test_malformed_expression_fails_closed(expr: str) -> None:
    assert evaluate_condition(expr, {"priority": "high", "channel": "email"}) is False
    with pytest.raises(ConditionSyntaxError):
        parse_condition(expr)


def test_parse_builds_clauses_in_order() -> None:
    tree = parse_condition("channel in ('email', chat) && requester = employee")
    assert tree.clauses == (
        Membership(key="channel", values=("email", "chat")),
        Equality(key="requester", value="employee"),
    )


def test_check_condition_reports_message_only_for_bad_input() -> None:
    assert check_condition(None) is None
    assert check_condition("priority = high") is None
    message = check_condition("priority != high")
    assert message is not None
    assert "priority != high" in message
