"""Tests for POD formatting-code parsing."""

from __future__ import annotations

import pytest

from usefulreadme.exceptions import ParseError
from usefulreadme.inline import FormattingCode, Link, parse_inline, parse_link, plain_text, resolve_escape


class TestParseInline:
    """Tests for parse_inline."""

    def test_text_and_codes(self) -> None:
        nodes = parse_inline("plain B<bold> end")

        assert nodes == ["plain ", FormattingCode(code="B", children=["bold"]), " end"]

    def test_nested_codes(self) -> None:
        nodes = parse_inline("B<bold I<and italic>>")

        assert nodes == [
            FormattingCode(code="B", children=["bold ", FormattingCode(code="I", children=["and italic"])]),
        ]

    def test_double_angle_brackets(self) -> None:
        """Multiple brackets need whitespace inside and allow bare angle brackets."""
        nodes = parse_inline("C<< $a->b >> after")

        assert nodes == [FormattingCode(code="C", children=["$a->b"]), " after"]

    def test_unterminated_code_closes_at_end(self) -> None:
        nodes = parse_inline("B<never closed")

        assert nodes == [FormattingCode(code="B", children=["never closed"])]

    def test_depth_bound(self) -> None:
        with pytest.raises(ParseError):
            parse_inline("B<" * 5 + "x" + ">" * 5, max_depth=3)

    def test_plain_text(self) -> None:
        assert plain_text(parse_inline("B<a> E<lt>I<b>E<gt>X<index>Z<>")) == "a <b>"


class TestResolveEscape:
    """Tests for resolve_escape."""

    @pytest.mark.parametrize(
        ("name", "expected"),
        [
            ("lt", "<"),
            ("gt", ">"),
            ("verbar", "|"),
            ("sol", "/"),
            ("0x41", "A"),
            ("065", "5"),
            ("65", "A"),
            ("eacute", "é"),
            ("zzz", "E<zzz>"),
        ],
    )
    def test_escapes(self, name: str, expected: str) -> None:
        assert resolve_escape(name) == expected


class TestParseLink:
    """Tests for parse_link."""

    @pytest.mark.parametrize(
        ("text", "expected"),
        [
            ("L<Moo>", Link(label=None, name="Moo", section=None, url=None)),
            ("L<CPAN|https://www.cpan.org>", Link(label="CPAN", name=None, section=None, url="https://www.cpan.org")),
            ('L<Foo::Bar/"SEE ALSO">', Link(label=None, name="Foo::Bar", section="SEE ALSO", url=None)),
            ("L<Foo/bar>", Link(label=None, name="Foo", section="bar", url=None)),
            ('L<"DESCRIPTION">', Link(label=None, name=None, section="DESCRIPTION", url=None)),
            ("L<the docs|Foo::Bar>", Link(label="the docs", name="Foo::Bar", section=None, url=None)),
        ],
    )
    def test_forms(self, text: str, expected: Link) -> None:
        node = parse_inline(text)[0]

        assert isinstance(node, FormattingCode)
        assert parse_link(node.children) == expected

    def test_display(self) -> None:
        assert Link(label=None, name="Foo", section="bar", url=None).display == '"bar" in Foo'
        assert Link(label=None, name=None, section=None, url="https://x.org").display == "https://x.org"
