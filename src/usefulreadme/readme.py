"""Generate a README from a distribution's main module."""

from __future__ import annotations

import os
import stat
import tempfile
from pathlib import Path, PurePosixPath

from usefulreadme.assembler import assemble_sections, generate_raw_pod, parse_source
from usefulreadme.renderers import render
from usefulreadme.schemas import (
    DistFile,
    Distribution,
    Location,
    Phase,
    ReadmeResult,
    RenderConfig,
)
from usefulreadme.utils.logging_config import get_logger

logger = get_logger(__name__)


def render_readme(
    source: str,
    config: RenderConfig,
    distribution: Distribution,
    *,
    filename: str = "",
) -> ReadmeResult:
    """Run one render pass over ``source`` and return the result.

    A source without POD produces empty content and no sections.
    """
    document = parse_source(source, filename)
    if document is None:
        return ReadmeResult(filename=config.output_filename, content="", sections=[])

    assembled = assemble_sections(document, config, distribution)
    content = render(assembled.to_pod(), config.type, renderer=config.renderer_func)
    return ReadmeResult(filename=config.output_filename, content=content, sections=assembled.titles)


def write_readme(directory: Path, filename: str, content: str) -> Path:
    """Write ``content`` to ``directory/filename`` atomically."""
    target = write_atomic(directory / filename, content)
    logger.info("README written", extra={"path": str(target), "bytes": len(content.encode("utf-8"))})
    return target


def write_atomic(target: Path, content: str) -> Path:
    """Write ``content`` to ``target`` through a temporary file in the same directory.

    The temporary file replaces ``target`` only once it is fully written. It
    takes over the mode of an existing ``target``; a new file gets the mode
    the umask allows.
    """
    target.parent.mkdir(parents=True, exist_ok=True)
    fd, temp_path = tempfile.mkstemp(prefix=f".{target.name}.", suffix=".tmp", dir=target.parent)
    try:
        with os.fdopen(fd, "w", encoding="utf-8", newline="") as handle:
            handle.write(content)
        os.chmod(temp_path, _file_mode(target))
        os.replace(temp_path, target)
    except BaseException:
        try:
            os.unlink(temp_path)
        except OSError:
            pass
        raise
    return target


def _file_mode(target: Path) -> int:
    """Mode for the rewritten file: the current one, else what the umask allows."""
    try:
        return stat.S_IMODE(target.stat().st_mode)
    except FileNotFoundError:
        umask = os.umask(0)
        os.umask(umask)
        return 0o666 & ~umask


class UsefulReadme:
    """README generation for one distribution under one configuration."""

    def __init__(self, config: RenderConfig, distribution: Distribution) -> None:
        self.config = config
        self.distribution = distribution

    @property
    def source_name(self) -> str:
        """The configured source, else the main module or its ``.pod`` sibling."""
        if self.config.source:
            return self.config.source
        main = PurePosixPath(self.distribution.main_module)
        pod_sibling = str(main.with_suffix(".pod"))
        if main.suffix == ".pm" and self.distribution.find_file(pod_sibling) is not None:
            return pod_sibling
        return self.distribution.main_module

    def source_text(self) -> str:
        file = self.distribution.find_file(self.source_name)
        if file is None:
            logger.warning("Source file not in distribution", extra={"source": self.source_name})
            return ""
        return file.content

    def generate(self) -> ReadmeResult:
        """Render the README from the distribution's current file set."""
        return render_readme(self.source_text(), self.config, self.distribution, filename=self.source_name)

    def generate_raw_pod(self) -> str:
        """The assembled POD before format conversion."""
        return generate_raw_pod(self.source_text(), self.config, self.distribution, filename=self.source_name)

    def generate_readme_content(self) -> str:
        return self.generate().content

    def create_readme(self, directory: Path) -> Path:
        """Render and write the README into ``directory``."""
        result = self.generate()
        return write_readme(directory, result.filename, result.content)

    def after_build(self, build_root: Path, root: Path) -> Path | None:
        """Write the README after a build, when configured for the build phase."""
        if self.config.phase is not Phase.BUILD:
            return None
        directory = build_root if self.config.location is Location.BUILD else root
        return self.create_readme(directory)

    def after_release(self, root: Path) -> Path | None:
        """Write the README into ``root`` after a release.

        The source is read again from disk, since the release may have
        rewritten it (for example to insert the released version).
        """
        if self.config.phase is not Phase.RELEASE:
            return None
        self.refresh_source(root)
        return self.create_readme(root)

    def refresh_source(self, root: Path) -> None:
        """Replace the in-memory source text with the file under ``root``."""
        path = root / self.source_name
        if not path.is_file():
            logger.warning("Source file missing on disk", extra={"path": str(path)})
            return
        content = path.read_text(encoding="utf-8")
        files = [file for file in self.distribution.files if file.name != self.source_name]
        files.append(DistFile(name=self.source_name, content=content))
        self.distribution = self.distribution.model_copy(update={"files": files})
