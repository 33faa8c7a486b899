"""Tests for identifier normalization."""
import re

import pytest

from utils.identifiers import normalize_identifier

SAMPLES = [
    "Full Name",
    "Sample Customers",
    "  padded  name ",
    "Prix (€) 2024",
    "tabs\tand\nnewlines",
    "already_normal",
    "MiXeD-Case.Name",
    "!!!",
    "",
    "Ünïcödé Wörds",
    "a    b",
]


@pytest.mark.parametrize("name, expected", [
    ("Full Name", "full_name"),
    ("Customers", "customers"),
    ("Sample Customers", "sample_customers"),
    ("a    b", "a_b"),
    ("tabs\tand\nnewlines", "tabs_and_newlines"),
    ("Prix (€) 2024", "prix__2024"),
    ("MiXeD-Case.Name", "mixedcasename"),
    ("order_id", "order_id"),
])
def test_normalize_examples(name, expected):
    assert normalize_identifier(name) == expected


@pytest.mark.parametrize("name", ["", "!!!", "€€", "---"])
def test_all_stripped_input_is_empty(name):
    assert normalize_identifier(name) == ""


def test_none_is_empty():
    assert normalize_identifier(None) == ""


@pytest.mark.parametrize("name", SAMPLES)
def test_output_charset(name):
    assert re.fullmatch(r"[a-z0-9_]*", normalize_identifier(name))


@pytest.mark.parametrize("name", SAMPLES)
def test_idempotent(name):
    once = normalize_identifier(name)
    assert normalize_identifier(once) == once
