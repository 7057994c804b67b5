"""Tests for POD extraction, parsing, and serialization."""

from __future__ import annotations

import pytest

from usefulreadme.exceptions import ParseError
from usefulreadme.pod import to_pod
from usefulreadme.pod_parser import (
    extract_pod,
    nest_sections,
    parse_document,
    parse_pod,
    split_paragraphs,
    strip_pod,
    top_level_headings,
)
from usefulreadme.schemas import Command, Heading, ListBlock, ListItem, Region, Text, Verbatim


class TestExtractPod:
    """Tests for extract_pod."""

    def test_collects_blocks_after_end(self, module_source: str) -> None:
        """POD after __END__ is extracted and the code is not."""
        pod = extract_pod(module_source, "lib/Foo/Bar.pm")

        assert pod.startswith("=head1 NAME")
        assert "sub answer" not in pod
        assert "=cut" not in pod
        assert pod.endswith("\n")

    def test_joins_interleaved_blocks(self) -> None:
        """Separate POD blocks are joined with blank lines."""
        source = "=head1 NAME\n\nFoo\n\n=cut\n\nsub x {}\n\n=head1 DESCRIPTION\n\nBar\n\n=cut\n"

        pod = extract_pod(source)

        assert pod == "=head1 NAME\n\nFoo\n\n=head1 DESCRIPTION\n\nBar\n"

    def test_source_without_pod(self) -> None:
        """Plain code yields an empty string."""
        assert extract_pod("package Foo;\n1;\n", "lib/Foo.pm") == ""
        assert extract_pod("", "lib/Foo.pm") == ""

    def test_pod_file_is_returned_verbatim(self) -> None:
        """A .pod file is all documentation."""
        text = "Leading text\n\n=head1 NAME\n\nFoo\n"
        assert extract_pod(text, "lib/Foo.pod") == text


class TestStripPod:
    """Tests for strip_pod."""

    def test_removes_documentation(self, module_source: str) -> None:
        """Only code lines remain."""
        code = strip_pod(module_source.split("__END__")[0] + "\n=head1 X\n\nY\n\n=cut\n\n1;\n")

        assert "=head1" not in code
        assert "package Foo::Bar;" in code


class TestParsePod:
    """Tests for parse_pod."""

    def test_paragraph_kinds(self) -> None:
        """Commands, ordinary text and verbatim paragraphs are told apart."""
        nodes = parse_pod("=encoding utf8\n\n=head1 NAME\n\nFoo\n\n  code\n")

        assert nodes == [
            Command(command="encoding", content="utf8"),
            Heading(level=1, title="NAME"),
            Text(content="Foo"),
            Verbatim(content="  code"),
        ]

    def test_consecutive_verbatim_paragraphs_merge(self) -> None:
        """Verbatim paragraphs separated by blank lines stay one block."""
        nodes = parse_pod("  first\n\n  second\n")

        assert nodes == [Verbatim(content="  first\n\n  second")]

    def test_pod_and_cut_are_dropped(self) -> None:
        """=pod and =cut carry no content."""
        assert parse_pod("=pod\n\nText\n\n=cut\n") == [Text(content="Text")]

    def test_lists_nest(self) -> None:
        """=over/=back become list blocks owning their items."""
        nodes = parse_pod("=over 4\n\n=item *\n\nOne\n\n=over 2\n\n=item Two\n\n=back\n\n=back\n")

        assert len(nodes) == 1
        outer = nodes[0]
        assert isinstance(outer, ListBlock)
        assert outer.indent == "4"
        assert outer.children[0] == ListItem(marker="*")
        assert outer.children[1] == Text(content="One")
        inner = outer.children[2]
        assert isinstance(inner, ListBlock)
        assert inner.indent == "2"
        assert inner.children == [ListItem(marker="Two")]

    def test_data_region_keeps_raw_paragraphs(self) -> None:
        """Paragraphs inside a non-POD region are kept as raw text."""
        nodes = parse_pod("=begin html\n\n<p>Hi</p>\n\n=head1 Not a heading\n\n=end html\n")

        assert nodes == [
            Region(
                name="html",
                is_pod=False,
                children=[Text(content="<p>Hi</p>"), Text(content="=head1 Not a heading")],
            )
        ]

    def test_pod_region(self) -> None:
        """A colon-prefixed region holds parsed POD."""
        nodes = parse_pod("=begin :readme\n\n=head1 INSTALL\n\nRun it.\n\n=end :readme\n")

        assert nodes == [
            Region(
                name="readme",
                is_pod=True,
                children=[Heading(level=1, title="INSTALL"), Text(content="Run it.")],
            )
        ]

    def test_for_region(self) -> None:
        """=for holds a single paragraph."""
        nodes = parse_pod("=for text Plain text only\n")

        assert nodes == [Region(name="text", children=[Text(content="Plain text only")])]

    def test_heading_title_whitespace_is_collapsed(self) -> None:
        """Heading titles are single-spaced."""
        nodes = parse_pod("=head2   See\n  Also\n")

        assert nodes == [Heading(level=2, title="See Also")]

    def test_split_paragraphs_handles_whitespace_lines(self) -> None:
        """Lines holding only spaces separate paragraphs."""
        assert split_paragraphs("a\n  \nb\r\n\r\nc") == ["a", "b", "c"]


class TestNestSections:
    """Tests for nest_sections and parse_document."""

    def test_headings_own_following_nodes(self) -> None:
        """Each heading collects nodes until a heading of the same or higher level."""
        document = parse_document(
            "=head1 A\n\nOne\n\n=head2 A.1\n\nTwo\n\n=head1 B\n\nThree\n"
        )

        assert [node.title for node in top_level_headings(document)] == ["A", "B"]
        first = document[0]
        assert isinstance(first, Heading)
        assert first.children[0] == Text(content="One")
        sub = first.children[1]
        assert isinstance(sub, Heading)
        assert sub.title == "A.1"
        assert sub.children == [Text(content="Two")]

    def test_readme_regions_are_unwrapped(self) -> None:
        """Sections inside =begin :readme are matched like any other."""
        document = parse_document(
            "=head1 NAME\n\nFoo\n\n=begin :readme\n\n=head1 INSTALLATION\n\nRun it.\n\n=end :readme\n"
        )

        assert [node.title for node in top_level_headings(document)] == ["NAME", "INSTALLATION"]

    def test_other_regions_stay_wrapped(self) -> None:
        """Only readme regions are unwrapped."""
        document = parse_document("=head1 NAME\n\n=begin :other\n\n=head1 HIDDEN\n\n=end :other\n")

        assert [node.title for node in top_level_headings(document)] == ["NAME"]

    def test_depth_bound(self) -> None:
        """Nesting deeper than the bound is a parse error."""
        region = Region(name="readme", is_pod=True, children=[Text(content="x")])
        for _ in range(3):
            region = Region(name="readme", is_pod=True, children=[region])

        with pytest.raises(ParseError):
            nest_sections([region], max_depth=2)

    def test_input_nodes_are_not_mutated(self) -> None:
        """Re-nesting copies headings."""
        flat = parse_pod("=head1 A\n\nOne\n")
        nest_sections(flat)

        assert flat[0] == Heading(level=1, title="A")


class TestToPod:
    """Tests for POD serialization."""

    def test_every_paragraph_ends_with_blank_line(self) -> None:
        """The canonical form separates paragraphs with one blank line."""
        nodes = [
            Heading(
                level=1,
                title="REQUIREMENTS",
                children=[
                    Text(content="Needs:"),
                    ListBlock(children=[ListItem(marker="*", content="L<Moo>")]),
                ],
            )
        ]

        assert to_pod(nodes) == (
            "=head1 REQUIREMENTS\n\nNeeds:\n\n=over 4\n\n=item *\n\nL<Moo>\n\n=back\n\n"
        )

    def test_pod_region_round_trip(self) -> None:
        """A POD region is written with its colon."""
        pod = "=begin :readme\n\n=head1 X\n\nY\n\n=end :readme\n\n"

        assert to_pod(parse_pod(pod)) == pod

    def test_depth_bound(self) -> None:
        """Serializing beyond the bound is a parse error."""
        block = ListBlock(children=[])
        for _ in range(5):
            block = ListBlock(children=[block])

        with pytest.raises(ParseError):
            to_pod([block], max_depth=3)
