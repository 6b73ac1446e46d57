"""Tests for constraint parsing and compatibility checks."""

import pytest
from semver import Version

from promptseg.kernel.constraint import (
    ConstraintParseError,
    VersionExtractionError,
    VersionRequirement,
    extract_version_triple,
    is_compatible,
    parse_comparator,
)


def _matches(requirement: str, version: str) -> bool:
    return VersionRequirement.parse(requirement).matches(Version.parse(version))


@pytest.mark.parametrize("version", ["v12.0.0\n", "0.0.1", "node v99.1.2-nightly", ""])
def test_absent_constraint_is_compatible(version):
    assert is_compatible(version, None) is True


@pytest.mark.parametrize("constraint", ["not a range", ">=>=1.0.0", "1.2.3.4", "^", "~>1.0", ">=1.0.0 ||", "1.*.3", ">=*"])
def test_malformed_constraint_fails_open(constraint):
    assert is_compatible("v12.0.0", constraint) is True


def test_malformed_constraint_fails_open_before_version_extraction():
    """A bad constraint is never checked against the version text."""
    assert is_compatible("no digits here", "garbage") is True


def test_engines_range_satisfied():
    assert is_compatible("v12.0.0\n", ">=12.0.0") is True


def test_engines_range_violated():
    assert is_compatible("v12.0.0\n", "<12.0.0") is False


def test_comma_separated_comparators_are_anded():
    assert is_compatible("v12.5.0", ">=12.0.0, <13.0.0") is True
    assert is_compatible("v13.0.0", ">=12.0.0, <13.0.0") is False


def test_missing_version_triple_is_a_precondition_violation():
    with pytest.raises(VersionExtractionError):
        is_compatible("node: command not found", ">=12.0.0")


def test_extract_first_triple():
    assert extract_version_triple("v12.16.3 (lts 10.0.1)") == "12.16.3"
    assert extract_version_triple("release-1.2.3-rc") == "1.2.3"


@pytest.mark.parametrize("text", ["", "v12", "12.0", "version twelve"])
def test_extract_without_triple_raises(text):
    with pytest.raises(VersionExtractionError):
        extract_version_triple(text)


@pytest.mark.parametrize(
    "requirement, inside, outside",
    [
        ("^1.2.3", ["1.2.3", "1.9.0"], ["1.2.2", "2.0.0"]),
        ("^0.2.3", ["0.2.3", "0.2.9"], ["0.3.0", "0.2.2"]),
        ("^0.0.3", ["0.0.3"], ["0.0.4", "0.0.2"]),
        ("^1.2", ["1.2.0", "1.99.0"], ["1.1.9", "2.0.0"]),
        ("^0.0", ["0.0.0", "0.0.9"], ["0.1.0"]),
        ("^0", ["0.0.0", "0.9.9"], ["1.0.0"]),
        ("~1.2.3", ["1.2.3", "1.2.9"], ["1.3.0", "1.2.2"]),
        ("~1.2", ["1.2.0", "1.2.9"], ["1.3.0"]),
        ("~1", ["1.0.0", "1.9.9"], ["2.0.0"]),
        ("=1.2.3", ["1.2.3"], ["1.2.4"]),
        ("=1.2", ["1.2.0", "1.2.7"], ["1.3.0"]),
        (">1.2.3", ["1.2.4"], ["1.2.3"]),
        (">1.2", ["1.3.0"], ["1.2.9"]),
        (">1", ["2.0.0"], ["1.9.9"]),
        (">=1.2", ["1.2.0"], ["1.1.9"]),
        ("<1.2.3", ["1.2.2"], ["1.2.3"]),
        ("<1.2", ["1.1.9"], ["1.2.0"]),
        ("<=1.2.3", ["1.2.3"], ["1.2.4"]),
        ("<=1.2", ["1.2.9"], ["1.3.0"]),
        ("<=1", ["1.9.9"], ["2.0.0"]),
        ("1.2.3", ["1.2.3", "1.5.0"], ["2.0.0"]),
        ("1.*", ["1.0.0", "1.9.9"], ["2.0.0", "0.9.9"]),
        ("1.2.x", ["1.2.0", "1.2.9"], ["1.3.0"]),
        ("12.X", ["12.0.0", "12.20.1"], ["14.0.0"]),
        (">= 10.13.0", ["12.0.0"], ["10.12.0"]),
    ],
)
def test_comparator_semantics(requirement, inside, outside):
    for version in inside:
        assert _matches(requirement, version), f"{requirement} should match {version}"
    for version in outside:
        assert not _matches(requirement, version), f"{requirement} should not match {version}"


@pytest.mark.parametrize("requirement", ["", "   ", "*", "x", "=*"])
def test_match_everything(requirement):
    assert _matches(requirement, "0.0.0")
    assert _matches(requirement, "123.4.5")


def test_prerelease_comparator_bound():
    assert _matches(">=1.2.3-alpha.1", "1.2.3")
    assert not _matches("<1.2.3-beta", "1.2.3")


def test_prerelease_version_needs_same_release_comparator():
    assert _matches(">=1.2.3-alpha.1", "1.2.3-rc.1")
    assert not _matches(">=1.0.0", "1.2.3-rc.1")


def test_build_metadata_is_ignored():
    assert _matches("=1.2.3+build.5", "1.2.3")


@pytest.mark.parametrize("text", ["", "1.2.3-", "a.b.c", "1.x.2", "^*", "1.2-beta", ">=>=1"])
def test_comparator_parse_errors(text):
    with pytest.raises(ConstraintParseError):
        parse_comparator(text)


@pytest.mark.parametrize("text", [",", ">=1.0.0,", ",<2.0.0"])
def test_empty_comparator_in_list_is_an_error(text):
    with pytest.raises(ConstraintParseError):
        VersionRequirement.parse(text)


@pytest.mark.parametrize("constraint", [">=12.0.0-0", ">12.0.0-1", "^12.0.0-0", ">=12.0.0-r1", "~12.0.0-beta.2"])
def test_prerelease_bound_sorts_before_its_release(constraint):
    assert is_compatible("v12.0.0", constraint) is True


@pytest.mark.parametrize("constraint", ["<12.0.0-1", "<12.0.0-foo", "<=12.0.0-rc.1"])
def test_release_is_above_its_prerelease_bound(constraint):
    assert is_compatible("v12.0.0", constraint) is False


def test_prerelease_identifiers_order_by_semver_rules():
    # numeric identifiers compare numerically and sort before alphanumeric ones
    assert _matches(">1.0.0-alpha.2", "1.0.0-alpha.10")
    assert _matches(">1.0.0-alpha.9", "1.0.0-alpha.beta")
    assert _matches(">1.0.0-1", "1.0.0-alpha")
    assert not _matches(">1.0.0-beta", "1.0.0-Beta")


def test_leading_zero_runtime_version_fails_open():
    assert is_compatible("v012.0.0", "<1.0.0") is True


@pytest.mark.parametrize("text", ["012.0.0", "1.02.0", ">=1.0.00", "1.0.0-01"])
def test_leading_zeros_are_rejected(text):
    with pytest.raises(ConstraintParseError):
        parse_comparator(text)
