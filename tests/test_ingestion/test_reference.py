"""Tests for repository locator parsing."""

from __future__ import annotations

import pytest

from reposcope.ingestion.errors import MalformedReference
from reposcope.ingestion.reference import parse_reference
from reposcope.ingestion.schemas import RepositoryReference


class TestAcceptedForms:
    def test_shorthand_without_branch(self) -> None:
        ref = parse_reference("octocat/Hello-World")
        assert ref == RepositoryReference(
            owner="octocat", name="Hello-World", branch=None
        )

    def test_url_with_tree_branch(self) -> None:
        ref = parse_reference("https://github.com/acme/widgets/tree/dev")
        assert ref.owner == "acme"
        assert ref.name == "widgets"
        assert ref.branch == "dev"

    def test_plain_url(self) -> None:
        ref = parse_reference("https://github.com/acme/widgets")
        assert (ref.owner, ref.name, ref.branch) == ("acme", "widgets", None)

    def test_tree_url_with_subpath_keeps_branch_only(self) -> None:
        ref = parse_reference(
            "https://github.com/acme/widgets/tree/release/src/lib"
        )
        assert ref.branch == "release"

    def test_git_suffix_and_trailing_slash(self) -> None:
        assert parse_reference("https://github.com/acme/widgets.git").name == (
            "widgets"
        )
        assert parse_reference("https://github.com/acme/widgets/").name == (
            "widgets"
        )
        assert parse_reference("acme/widgets.git").name == "widgets"

    def test_whitespace_is_trimmed(self) -> None:
        ref = parse_reference("  acme/widgets \n")
        assert ref.full_name == "acme/widgets"

    def test_case_is_preserved(self) -> None:
        ref = parse_reference("https://github.com/OctoCat/Hello-World")
        assert ref.owner == "OctoCat"
        assert ref.name == "Hello-World"

    def test_http_scheme_accepted(self) -> None:
        assert parse_reference("http://github.com/a/b").full_name == "a/b"

    def test_extra_segments_without_tree_ignored(self) -> None:
        ref = parse_reference("https://github.com/a/b/pulls")
        assert ref.full_name == "a/b"
        assert ref.branch is None


class TestBranchPrecedence:
    def test_explicit_branch_beats_url_branch(self) -> None:
        ref = parse_reference(
            "https://github.com/acme/widgets/tree/dev", branch="main"
        )
        assert ref.branch == "main"

    def test_explicit_branch_with_shorthand(self) -> None:
        assert parse_reference("a/b", branch="feature").branch == "feature"

    def test_blank_explicit_branch_falls_back_to_url(self) -> None:
        ref = parse_reference("https://github.com/a/b/tree/dev", branch="  ")
        assert ref.branch == "dev"


class TestMalformed:
    @pytest.mark.parametrize(
        "locator",
        [
            "not a url",
            "",
            "   ",
            "octocat",
            "https://gitlab.com/acme/widgets",
            "https://github.com/acme",
            "github.com/acme/widgets",
            "ftp://github.com/acme/widgets",
            "a/b/c",
        ],
    )
    def test_rejected(self, locator: str) -> None:
        with pytest.raises(MalformedReference) as info:
            parse_reference(locator)
        assert info.value.status_code == 400

    def test_empty_input_message(self) -> None:
        with pytest.raises(MalformedReference, match="required"):
            parse_reference("")

    def test_tree_without_branch_has_no_branch(self) -> None:
        ref = parse_reference("https://github.com/a/b/tree")
        assert ref.branch is None


def test_reference_is_immutable() -> None:
    ref = parse_reference("a/b")
    with pytest.raises(Exception):
        ref.owner = "c"  # type: ignore[misc]
