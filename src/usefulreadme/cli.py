"""Command-line entry points for usefulreadme."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Any

from usefulreadme.config import DEFAULT_CHANGELOG, USEFULREADME_LOG_LEVEL
from usefulreadme.dist_ini import load_dist_ini
from usefulreadme.distribution import META_FILE, load_distribution
from usefulreadme.exceptions import ConfigurationError, UsefulReadmeError
from usefulreadme.readme import UsefulReadme, write_atomic
from usefulreadme.schemas import Distribution, Location, OutputFormat, Phase, RenderConfig
from usefulreadme.utils.logging_config import configure_logging, get_logger
from usefulreadme.weaver import (
    InstallationInstructions,
    RecentChanges,
    Requirements,
    WeaveInput,
    Weaver,
    weave_module,
)

logger = get_logger(__name__)

EXIT_FAILURE = 1
EXIT_CONFIGURATION = 2


def _add_verbose_option(parser: argparse.ArgumentParser, *, suppress_default: bool = False) -> None:
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        default=argparse.SUPPRESS if suppress_default else False,
        help="Log debug output to stderr.",
    )


def _add_root_option(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--root",
        default=".",
        help="Distribution root holding META.json and dist.ini (defaults to current directory).",
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="usefulreadme",
        description="Generate README files from a Perl distribution's POD.",
    )
    _add_verbose_option(parser)
    subparsers = parser.add_subparsers(dest="command", required=True)

    readme_parser = subparsers.add_parser("readme", help="Generate the README for a distribution.")
    _add_verbose_option(readme_parser, suppress_default=True)
    _add_root_option(readme_parser)
    readme_parser.add_argument("--type", choices=[fmt.value for fmt in OutputFormat], help="Output format.")
    readme_parser.add_argument(
        "--section",
        dest="sections",
        action="append",
        metavar="NAME",
        help="Section to include, in order; use /regex/ for a pattern. Repeatable.",
    )
    readme_parser.add_argument(
        "--no-fallback",
        dest="section_fallback",
        action="store_const",
        const=False,
        default=None,
        help="Do not generate version, installation or requirements sections.",
    )
    readme_parser.add_argument("--phase", choices=[phase.value for phase in Phase])
    readme_parser.add_argument("--location", choices=[location.value for location in Location])
    readme_parser.add_argument(
        "--build-root",
        help="Build directory used when location is 'build' (defaults to the root).",
    )
    readme_parser.add_argument("--filename", help="Output file name.")
    readme_parser.add_argument("--source", help="File to take the POD from (defaults to the main module).")
    readme_parser.add_argument(
        "--stdout",
        action="store_true",
        help="Print the README instead of writing it.",
    )

    weave_parser = subparsers.add_parser("weave", help="Add generated sections to a module's POD.")
    _add_verbose_option(weave_parser, suppress_default=True)
    _add_root_option(weave_parser)
    weave_parser.add_argument("file", help="Module or .pod file to weave.")
    weave_parser.add_argument("--installation", action="store_true", help="Add installation instructions.")
    weave_parser.add_argument("--requirements", action="store_true", help="Add runtime requirements.")
    weave_parser.add_argument("--recent-changes", action="store_true", help="Add this version's changes.")
    weave_parser.add_argument("--region", default="", help="Wrap each section in this POD region, e.g. :readme.")
    weave_parser.add_argument("--changelog", default=DEFAULT_CHANGELOG, help="Changelog file name.")
    weave_parser.add_argument("--version", dest="release_version", default="", help="Version to report.")
    weave_parser.add_argument(
        "--all-modules",
        action="store_true",
        help="Add recent changes to modules other than the main module.",
    )
    weave_parser.add_argument("--in-place", action="store_true", help="Rewrite FILE instead of printing.")
    return parser


def main(argv: list[str] | None = None) -> None:
    """CLI entrypoint for usefulreadme commands."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    configure_logging(logging.DEBUG if args.verbose else USEFULREADME_LOG_LEVEL)

    try:
        if args.command == "readme":
            _run_readme(args)
        elif args.command == "weave":
            _run_weave(args)
        else:  # pragma: no cover - argparse enforces choices
            parser.exit(EXIT_FAILURE, "Unknown command\n")
    except ConfigurationError as exc:
        parser.exit(EXIT_CONFIGURATION, f"usefulreadme: configuration error: {exc}\n")
    except UsefulReadmeError as exc:
        parser.exit(EXIT_FAILURE, f"usefulreadme {args.command} failed: {exc}\nRun with --verbose for more details.\n")
    except OSError as exc:
        parser.exit(EXIT_FAILURE, f"usefulreadme {args.command} failed: {exc}\n")


def readme_options(args: argparse.Namespace, root: Path) -> dict[str, Any]:
    """Merge dist.ini options with command-line flags; flags win."""
    options = load_dist_ini(root)
    for key in ("type", "sections", "section_fallback", "phase", "location", "filename", "source"):
        value = getattr(args, key, None)
        if value is not None:
            options[key] = value
    return options


def _run_readme(args: argparse.Namespace) -> None:
    root = Path(args.root)
    config = RenderConfig.from_options(**readme_options(args, root))
    readme = UsefulReadme(config, load_distribution(root))

    if args.stdout:
        sys.stdout.write(readme.generate_readme_content())
        return

    if config.phase is Phase.RELEASE:
        path = readme.after_release(root)
    else:
        build_root = Path(args.build_root) if args.build_root else root
        path = readme.after_build(build_root, root)
    if path is not None:
        print(f"README written to {_relativize(path)}")


def _run_weave(args: argparse.Namespace) -> None:
    root = Path(args.root)
    path = Path(args.file)
    distribution: Distribution | None = None
    if (root / META_FILE).is_file():
        distribution = load_distribution(root)

    weavers: list[Weaver] = []
    if args.installation:
        weavers.append(InstallationInstructions(region=args.region))
    if args.requirements:
        weavers.append(Requirements(region=args.region))
    if args.recent_changes:
        weavers.append(
            RecentChanges(
                changelog=args.changelog,
                version=args.release_version,
                region=args.region,
                all_modules=args.all_modules,
            )
        )

    weave_input = WeaveInput(
        distribution=distribution,
        filename=_dist_relative(path, root),
        version=args.release_version or None,
    )
    woven = weave_module(path.read_text(encoding="utf-8"), weavers, weave_input)

    if args.in_place:
        write_atomic(path, woven)
        logger.info("Module rewritten", extra={"path": str(path), "weavers": len(weavers)})
    else:
        sys.stdout.write(woven)


def _dist_relative(path: Path, root: Path) -> str:
    try:
        return path.resolve().relative_to(root.resolve()).as_posix()
    except ValueError:
        return path.as_posix()


def _relativize(path: Path) -> str:
    try:
        return str(path.relative_to(Path.cwd()))
    except ValueError:
        return str(path)


if __name__ == "__main__":
    main(sys.argv[1:])
