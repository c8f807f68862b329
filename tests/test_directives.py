from __future__ import annotations

import textwrap

import pytest

from ci_planner.directives import has_directive, lower_unique, normalize_list, parse_directives


def test_parse_directives_reads_line_start_assignments() -> None:
    message = textwrap.dedent(
        """
        Fix the mesh partitioner

        Only=feelpp testsuite
          targets = ubuntu:24.04, debian:13
        skip=python
        """
    )

    directives = parse_directives(message)

    assert directives == {
        "only": "feelpp testsuite",
        "targets": "ubuntu:24.04, debian:13",
        "skip": "python",
    }


def test_parse_directives_ignores_mid_line_and_markdown() -> None:
    message = textwrap.dedent(
        """
        Please run with only=feelpp if possible.
        - skip=python
        # mode=full
        See [docs](https://example.com/?targets=fedora:42)
        """
    )

    assert parse_directives(message) == {}


def test_parse_directives_last_occurrence_wins() -> None:
    assert parse_directives("mode=full\nmode=components") == {"mode": "components"}


def test_parse_directives_keeps_equals_in_value_and_unknown_keys() -> None:
    directives = parse_directives("extra_flags = -DFOO=1 -DBAR=2\ncc=clang")

    assert directives["extra_flags"] == "-DFOO=1 -DBAR=2"
    assert directives["cc"] == "clang"


def test_parse_directives_captures_blank_value_after_whitespace() -> None:
    directives = parse_directives("only=   ")

    assert directives == {"only": ""}
    assert normalize_list(directives["only"]) == []


def test_parse_directives_handles_crlf_and_empty_input() -> None:
    assert parse_directives("mode=full\r\nskip=mor\r\n") == {"mode": "full", "skip": "mor"}
    assert parse_directives("") == {}
    assert parse_directives(None) == {}


def test_parse_directives_rejects_keys_with_digits_or_dashes() -> None:
    assert parse_directives("only-jobs=feelpp\njobs2=mor") == {}


@pytest.mark.parametrize("separator", ["\r", "\f", "\v", "\x1c", "\x85", "\u2028"])
def test_parse_directives_only_breaks_lines_on_newline(separator: str) -> None:
    text = f"prose{separator}only=feelpp\nskip=mor"

    assert parse_directives(text) == {"skip": "mor"}
    assert has_directive(f"prose{separator}only=feelpp") is False


@pytest.mark.parametrize(
    ("text", "expected"),
    [
        ("only=feelpp", True),
        ("  Targets = fedora:42", True),
        ("Title\n\nexclude=debian:12", True),
        ("please use only=feelpp", False),
        ("foo=bar", False),
        ("mode=", False),
        ("only=   ", False),
        ("prose\ronly=feelpp", False),
        ("", False),
        (None, False),
    ],
)
def test_has_directive_matches_recognised_keys_at_line_start(text: str | None, expected: bool) -> None:
    assert has_directive(text) is expected


def test_normalize_list_splits_folds_and_deduplicates() -> None:
    raw = "FeelPP, testsuite  feelpp,,\tMOR\nmor"

    assert normalize_list(raw) == ["feelpp", "testsuite", "mor"]


def test_normalize_list_joins_sequences() -> None:
    assert normalize_list(["Ubuntu:24.04", "debian:13 fedora:42", "ubuntu:24.04"]) == [
        "ubuntu:24.04",
        "debian:13",
        "fedora:42",
    ]


def test_normalize_list_is_idempotent() -> None:
    raw = " b, A ,a,, c  b "
    once = normalize_list(raw)

    assert once == ["b", "a", "c"]
    assert normalize_list(" ".join(once)) == once
    assert normalize_list(once) == once


def test_normalize_list_empty_inputs() -> None:
    assert normalize_list("") == []
    assert normalize_list(None) == []
    assert normalize_list([]) == []
    assert normalize_list(" ,, ") == []


def test_lower_unique_preserves_first_position() -> None:
    assert lower_unique(["Mor", "feelpp", "MOR", " ", "Feelpp"]) == ["mor", "feelpp"]
