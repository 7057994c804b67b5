"""Tests for weaving generated sections into module POD."""

from __future__ import annotations

import pytest

from usefulreadme.exceptions import ConfigurationError
from usefulreadme.schemas import Distribution
from usefulreadme.weaver import (
    InstallationInstructions,
    RecentChanges,
    Requirements,
    WeaveInput,
    weave_document,
    weave_module,
)

POD = "=head1 NAME\n\nFoo::Bar - Do useful things\n"


class TestWeaveDocument:
    """Tests for weave_document."""

    def test_sections_are_appended_in_order(self, distribution: Distribution) -> None:
        weave_input = WeaveInput(distribution=distribution, filename="lib/Foo/Bar.pm")

        pod = weave_document(POD, [Requirements(), InstallationInstructions()], weave_input)

        assert pod.startswith("=head1 NAME\n\nFoo::Bar - Do useful things\n\n=head1 REQUIREMENTS\n\n")
        assert pod.index("=head1 REQUIREMENTS") < pod.index("=head1 INSTALLATION")
        assert "=item *\n\nL<Moo> version 2.004 or later\n\n" in pod

    def test_region_wraps_section(self, distribution: Distribution) -> None:
        weave_input = WeaveInput(distribution=distribution, filename="lib/Foo/Bar.pm")

        pod = weave_document(POD, [Requirements(region=":readme")], weave_input)

        assert "=begin :readme\n\n=head1 REQUIREMENTS\n\n" in pod
        assert pod.endswith("=back\n\n=end :readme\n\n")

    def test_empty_requirements_are_skipped(self, distribution: Distribution) -> None:
        dist = distribution.model_copy(update={"runtime_requires": {}})

        pod = weave_document(POD, [Requirements()], WeaveInput(distribution=dist, filename="lib/Foo/Bar.pm"))

        assert pod == POD + "\n"

    def test_distribution_is_required(self) -> None:
        with pytest.raises(ConfigurationError, match="Requirements"):
            weave_document(POD, [Requirements()], WeaveInput(distribution=None))


class TestRecentChanges:
    """Tests for the recent-changes weaver."""

    def test_changelog_defaults(self) -> None:
        assert RecentChanges().changelog_name(WeaveInput(distribution=None)) == "Changes"

    def test_empty_changelog_adopts_release_tooling_file(self) -> None:
        weave_input = WeaveInput(distribution=None, next_release_filename="CHANGES.md")

        assert RecentChanges(changelog="").changelog_name(weave_input) == "CHANGES.md"
        assert RecentChanges(changelog="CHANGES.md").changelog_name(weave_input) == "CHANGES.md"

    def test_changelog_conflict_is_fatal(self) -> None:
        weave_input = WeaveInput(distribution=None, next_release_filename="CHANGES.md")

        with pytest.raises(ConfigurationError, match="CHANGES.md"):
            RecentChanges().changelog_name(weave_input)

    def test_main_module_gets_section(self, distribution: Distribution) -> None:
        weave_input = WeaveInput(distribution=distribution, filename="lib/Foo/Bar.pm")

        pod = weave_document(POD, [RecentChanges()], weave_input)

        assert "=head1 RECENT CHANGES\n\nChanges for version 1.002 (2024-03-01)\n\n" in pod
        assert "Initial release" not in pod

    def test_other_modules_are_skipped(self, distribution: Distribution) -> None:
        weave_input = WeaveInput(distribution=distribution, filename="lib/Foo/Bar/Util.pm")

        assert "RECENT CHANGES" not in weave_document(POD, [RecentChanges()], weave_input)
        assert "RECENT CHANGES" in weave_document(POD, [RecentChanges(all_modules=True)], weave_input)

    def test_version_override(self, distribution: Distribution) -> None:
        weave_input = WeaveInput(distribution=distribution, filename="lib/Foo/Bar.pm", version="1.001")

        pod = weave_document(POD, [RecentChanges()], weave_input)

        assert "Changes for version 1.001 (2024-01-15)" in pod

    def test_missing_changelog(self, distribution: Distribution) -> None:
        weave_input = WeaveInput(distribution=distribution, filename="lib/Foo/Bar.pm")

        pod = weave_document(POD, [RecentChanges(changelog="NEWS")], weave_input)

        assert "RECENT CHANGES" not in pod


class TestWeaveModule:
    """Tests for weave_module."""

    def test_pod_moves_after_end(self, module_source: str, distribution: Distribution) -> None:
        weave_input = WeaveInput(distribution=distribution, filename="lib/Foo/Bar.pm")

        woven = weave_module(module_source, [Requirements()], weave_input)

        code, pod = woven.split("__END__\n\n", 1)
        assert code.startswith("package Foo::Bar;")
        assert code.endswith("1;\n\n")
        assert "=head1" not in code
        assert pod.startswith("=head1 NAME\n\n")
        assert "=head1 REQUIREMENTS" in pod
        assert woven.endswith("=cut\n")
        assert woven.count("__END__") == 1

    def test_inline_pod_is_moved(self, distribution: Distribution) -> None:
        source = "package Foo::Bar;\n\n=head1 NAME\n\nFoo::Bar\n\n=cut\n\nsub x { 1 }\n\n1;\n"

        woven = weave_module(source, [], WeaveInput(distribution=distribution, filename="lib/Foo/Bar.pm"))

        assert woven.startswith("package Foo::Bar;\n")
        assert woven.endswith("sub x { 1 }\n\n1;\n\n__END__\n\n=head1 NAME\n\nFoo::Bar\n\n=cut\n")

    def test_pod_file_stays_pod(self, distribution: Distribution) -> None:
        weave_input = WeaveInput(distribution=distribution, filename="lib/Foo/Bar.pod")

        woven = weave_module(POD, [Requirements()], weave_input)

        assert woven.startswith("=head1 NAME")
        assert "__END__" not in woven
        assert "=cut" not in woven

    def test_no_pod_returns_code(self) -> None:
        source = "package Foo;\n1;\n"

        assert weave_module(source, [], WeaveInput(distribution=None, filename="lib/Foo.pm")) == source

    def test_data_section_is_kept(self, distribution: Distribution) -> None:
        source = "package Foo::Bar;\n1;\n__DATA__\nalpha\nbeta\n\n=head1 NAME\n\nFoo::Bar\n\n=cut\n"
        weave_input = WeaveInput(distribution=distribution, filename="lib/Foo/Bar.pm")

        woven = weave_module(source, [Requirements()], weave_input)

        assert woven.startswith("package Foo::Bar;\n1;\n\n=head1 NAME\n\nFoo::Bar\n\n=head1 REQUIREMENTS\n\n")
        assert woven.endswith("=back\n\n=cut\n\n__DATA__\nalpha\nbeta\n")
        assert "__END__" not in woven

    def test_text_after_end_is_kept(self) -> None:
        source = "package Foo;\n1;\n__END__\nraw text\n"

        woven = weave_module(source, [], WeaveInput(distribution=None, filename="lib/Foo.pm"))

        assert woven == "package Foo;\n1;\n\n__END__\nraw text\n"
