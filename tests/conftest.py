"""Test setup for usefulreadme."""

from __future__ import annotations

import json
import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

from usefulreadme.schemas import DistFile, Distribution  # noqa: E402

MODULE_SOURCE = """package Foo::Bar;

use strict;
use warnings;

our $VERSION = '1.002';

sub answer { 42 }

1;

__END__

=head1 NAME

Foo::Bar - Do useful things

=head1 SYNOPSIS

  use Foo::Bar;
  my $answer = Foo::Bar::answer();

=head1 DESCRIPTION

This module does B<useful> things with L<Moo>.

=head1 INTERNALS

Not meant for the README.

=head1 AUTHOR

Jane Doe

=head1 COPYRIGHT AND LICENSE

This software is copyright (c) 2024 by Jane Doe.

=cut
"""

CHANGES = """Revision history for Foo-Bar

1.002     2024-03-01 10:00:00+00:00
  [Bug Fixes]
  - Fixed a crash
    when input was empty.
  - Better errors
    - nested detail

  [Enhancements]
  - New option

1.001     2024-01-15
  - Initial release
"""

META = {
    "name": "Foo-Bar",
    "version": "1.002",
    "prereqs": {
        "runtime": {
            "requires": {
                "perl": "5.010",
                "Moo": "2.004",
                "List::Util": "0",
            }
        },
        "test": {"requires": {"Test::More": "0.96"}},
    },
}


@pytest.fixture
def module_source() -> str:
    """A main module with POD after ``__END__``."""
    return MODULE_SOURCE


@pytest.fixture
def changes_text() -> str:
    """A changelog with two releases."""
    return CHANGES


@pytest.fixture
def distribution() -> Distribution:
    """An in-memory distribution with a build descriptor and two dependencies."""
    return Distribution(
        name="Foo-Bar",
        version="1.002",
        main_module="lib/Foo/Bar.pm",
        runtime_requires={"Moo": "2.004", "List::Util": None},
        files=[
            DistFile(name="Changes", content=CHANGES),
            DistFile(name="Makefile.PL", content="use ExtUtils::MakeMaker;\n"),
            DistFile(name="lib/Foo/Bar.pm", content=MODULE_SOURCE),
        ],
    )


@pytest.fixture
def dist_root(tmp_path: Path) -> Path:
    """A distribution checkout on disk with META.json, a changelog and a main module."""
    (tmp_path / "META.json").write_text(json.dumps(META), encoding="utf-8")
    (tmp_path / "Changes").write_text(CHANGES, encoding="utf-8")
    (tmp_path / "Makefile.PL").write_text("use ExtUtils::MakeMaker;\n", encoding="utf-8")
    module = tmp_path / "lib" / "Foo" / "Bar.pm"
    module.parent.mkdir(parents=True)
    module.write_text(MODULE_SOURCE, encoding="utf-8")
    return tmp_path
