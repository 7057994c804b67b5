"""Tests for section requests and heading matching."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from usefulreadme.pod_parser import parse_document
from usefulreadme.schemas import Heading, SectionRequest, SynthesizedSection
from usefulreadme.sections import heading_matches, match_section, normalize_section_title


def _heading(title: str, level: int = 1) -> Heading:
    return Heading(level=level, title=title)


class TestSectionRequest:
    """Tests for SectionRequest parsing."""

    def test_slashes_make_a_pattern(self) -> None:
        request = SectionRequest.parse("/authors?/")

        assert request.kind == "pattern"
        assert request.value == "authors?"
        assert str(request) == "/authors?/"

    def test_plain_text_is_literal(self) -> None:
        request = SectionRequest.parse("see also")

        assert request.kind == "literal"
        assert request.pattern is None

    def test_invalid_pattern_is_rejected(self) -> None:
        """A malformed regex fails at construction."""
        with pytest.raises(ValidationError):
            SectionRequest.parse("/[unclosed/")

    def test_blank_literal_is_rejected(self) -> None:
        with pytest.raises(ValidationError):
            SectionRequest.parse("   ")

    @pytest.mark.parametrize(
        ("text", "expected"),
        [
            ("version", SynthesizedSection.VERSION),
            ("INSTALLATION", SynthesizedSection.INSTALLATION),
            ("Requirements", SynthesizedSection.REQUIREMENTS),
            ("synopsis", None),
            ("/version/", None),
        ],
    )
    def test_synthesizer_lookup(self, text: str, expected: SynthesizedSection | None) -> None:
        """Only literal requests for known names have a generator."""
        assert SectionRequest.parse(text).synthesizer == expected


class TestHeadingMatches:
    """Tests for heading_matches."""

    @pytest.mark.parametrize(
        "title",
        ["SEE ALSO", "see also", "  See   Also ", "See\tAlso"],
    )
    def test_literal_ignores_case_and_whitespace(self, title: str) -> None:
        assert heading_matches(_heading(title), SectionRequest.parse("see also"))

    def test_literal_requires_same_words(self) -> None:
        assert not heading_matches(_heading("SEE ALSO TOO"), SectionRequest.parse("see also"))

    @pytest.mark.parametrize(
        ("title", "expected"),
        [
            ("AUTHOR", True),
            ("Authors", True),
            ("AUTHORS AND CONTRIBUTORS", False),
            ("CO-AUTHOR", False),
        ],
    )
    def test_pattern_needs_full_match(self, title: str, expected: bool) -> None:
        assert heading_matches(_heading(title), SectionRequest.parse("/authors?/")) is expected

    def test_pattern_alternatives_match_whole_title(self) -> None:
        """Later alternatives are tried when an earlier one only matches a prefix."""
        request = SectionRequest.parse("/copyright|license|copyright and license/")

        assert heading_matches(_heading("COPYRIGHT AND LICENSE"), request)
        assert heading_matches(_heading("License"), request)
        assert not heading_matches(_heading("LICENSE TERMS"), request)

    def test_normalize_section_title(self) -> None:
        assert normalize_section_title("  Copyright  and\nLicense ") == "copyright and license"


class TestMatchSection:
    """Tests for match_section."""

    def test_first_match_in_document_order(self) -> None:
        document = parse_document("=head1 Author\n\nA\n\n=head1 AUTHORS\n\nB\n")

        found = match_section(document, SectionRequest.parse("/authors?/"))

        assert found is not None
        assert found.title == "Author"

    def test_only_top_level_headings_match(self) -> None:
        document = parse_document("=head1 DESCRIPTION\n\n=head2 SYNOPSIS\n\nNested\n")

        assert match_section(document, SectionRequest.parse("synopsis")) is None

    def test_section_carries_its_content(self) -> None:
        document = parse_document("=head1 NAME\n\nFoo\n\n=head2 More\n\nBar\n\n=head1 NEXT\n")

        found = match_section(document, SectionRequest.parse("name"))

        assert found is not None
        assert [getattr(child, "title", None) for child in found.children] == [None, "More"]
