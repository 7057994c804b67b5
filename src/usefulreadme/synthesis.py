"""Generate standard sections from distribution metadata."""

from __future__ import annotations

import re
from typing import Callable

from usefulreadme.config import CPAN_INSTALL_GUIDE_URL, CPAN_URL, DZIL_URL
from usefulreadme.schemas import (
    DistFile,
    Distribution,
    DocumentNode,
    Heading,
    ListBlock,
    ListItem,
    SynthesizedSection,
    Text,
    Verbatim,
)
from usefulreadme.utils.logging_config import get_logger

logger = get_logger(__name__)

_BUILDER_RE = re.compile(r"\A(?:Build|Makefile)\.PL\Z")
_INSTALL_DOC_RE = re.compile(r"\AINSTALL(?:\.(?:txt|md|mkdn))?\Z", re.IGNORECASE)


def version_section(distribution: Distribution, *, header: str = "VERSION") -> Heading:
    """``=head1 VERSION`` with the resolved distribution version."""
    return Heading(level=1, title=header, children=[Text(content=f"version {distribution.version}")])


def detect_builder(files: list[DistFile]) -> str | None:
    """Name of the first ``Makefile.PL``/``Build.PL`` in the file set."""
    for file in files:
        if _BUILDER_RE.match(file.name):
            return file.name
    return None


def detect_install_doc(files: list[DistFile]) -> str | None:
    """Name of the first ``INSTALL`` document (``.txt``, ``.md``, ``.mkdn`` allowed)."""
    for file in files:
        if _INSTALL_DOC_RE.match(file.name):
            return file.name
    return None


def installation_section(
    distribution: Distribution,
    *,
    header: str = "INSTALLATION",
    builder: str | None = None,
) -> Heading:
    """Step-by-step installation instructions.

    Args:
        distribution: Metadata and file set of the distribution.
        header: Heading title.
        builder: ``Makefile.PL`` or ``Build.PL``; detected from the file set
            when not given. Manual build commands are omitted when neither
            is known.
    """
    package = distribution.package_name
    nodes: list[DocumentNode] = [
        Text(
            content=(
                f"The latest version of this module (along with any dependencies) can be installed from "
                f"L<CPAN|{CPAN_URL}> with the C<cpan> tool that is included with Perl:"
            )
        ),
        Verbatim(content=f"    cpan {package}"),
        Text(
            content=(
                "You can also extract the distribution archive and install this module "
                "(along with any dependencies):"
            )
        ),
        Verbatim(content="    cpan ."),
    ]

    builder = builder or detect_builder(distribution.files)
    if builder:
        cmd = "perl Build" if builder.startswith("Build") else "make"
        nodes.append(Text(content="You can also install this module manually using the following commands:"))
        nodes.append(
            Verbatim(
                content="\n".join(
                    (f"    perl {builder}", f"    {cmd}", f"    {cmd} test", f"    {cmd} install")
                )
            )
        )
    else:
        logger.debug("No build descriptor found; omitting manual install step")

    example = f"F<{builder}> file" if builder else "builder file such as F<Makefile.PL>"
    nodes.append(
        Text(
            content=(
                f"If you are working with the source repository, then it may not have a {example}.  "
                f"But you can use the L<Dist::Zilla|{DZIL_URL}> tool to build and install this module:"
            )
        )
    )
    nodes.append(
        Verbatim(content="\n".join(("    dzil build", "    dzil test", '    dzil install --install-command="cpan ."')))
    )

    install_doc = detect_install_doc(distribution.files)
    if install_doc:
        also = f"the F<{install_doc}> file included with this distribution"
    else:
        also = f"L<How to install CPAN modules|{CPAN_INSTALL_GUIDE_URL}>"
    nodes.append(Text(content=f"For more information, see {also}."))

    return Heading(level=1, title=header, children=nodes)


def requirements_section(distribution: Distribution, *, header: str = "REQUIREMENTS") -> Heading | None:
    """Bulleted runtime dependencies, or ``None`` when there are none."""
    requires = distribution.runtime_requires
    if not requires:
        logger.debug("No runtime requirements; omitting requirements section")
        return None

    items: list[DocumentNode] = []
    for name in sorted(requires):
        version = requires[name]
        text = f"L<{name}>"
        # "0" means any version in CPAN::Meta prereqs.
        if version and version != "0":
            text += f" version {version} or later"
        items.append(ListItem(marker="*", content=text))

    return Heading(
        level=1,
        title=header,
        children=[
            Text(content="This module lists the following modules as runtime dependencies:"),
            ListBlock(indent="4", children=items),
        ],
    )


SYNTHESIZERS: dict[SynthesizedSection, Callable[[Distribution], Heading | None]] = {
    SynthesizedSection.VERSION: version_section,
    SynthesizedSection.INSTALLATION: installation_section,
    SynthesizedSection.REQUIREMENTS: requirements_section,
}


def synthesize_section(name: SynthesizedSection, distribution: Distribution) -> Heading | None:
    """Run the generator registered for ``name``."""
    return SYNTHESIZERS[name](distribution)
