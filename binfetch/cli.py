"""Command-line interface for binfetch."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

import requests

from . import __version__
from .cache import DirectoryCache, cache_key, tool_path
from .config import BinfetchConfig, InstallOptions, ToolEntry, ToolInfo, split_repo
from .detect import arch_aliases, resolve_arch, resolve_platform
from .errors import BinfetchError
from .github import GitHubClient
from .install import Installer
from .utils import console, log, setup_logging


def _options_from_args(args: argparse.Namespace) -> InstallOptions:
    return InstallOptions(
        tag=args.tag,
        platform=args.platform,
        arch=args.arch,
        cache=getattr(args, "cache", False),
        chmod=getattr(args, "chmod", None) or "755",
    )


def _targets(args: argparse.Namespace, config: BinfetchConfig) -> list[ToolEntry]:
    """Tools named on the command line, or every tool in the config."""
    if not args.repos:
        return list(config.tools)
    options = _options_from_args(args)
    targets = []
    for repo in args.repos:
        owner, project = split_repo(repo)
        targets.append(ToolEntry(owner=owner, project=project, options=options))
    return targets


def install_tools(args: argparse.Namespace, config: BinfetchConfig) -> int:
    """Install the requested tools; return the number that failed."""
    targets = _targets(args, config)
    if not targets:
        log("Nothing to install: pass owner/project or list tools in the config", "warning")
        return 0

    client = GitHubClient(
        token=config.token,
        api_url=config.api_url,
        timeout=config.timeout,
        max_retries=config.max_retries,
    )
    installer = Installer(config, client, DirectoryCache(config.cache_dir))

    failed = 0
    for entry in targets:
        try:
            result = installer.install(entry.owner, entry.project, entry.options)
        except (BinfetchError, OSError, requests.RequestException) as e:
            log(f"Failed to install {entry.repo}: {e}", "error")
            failed += 1
            continue
        if not result.ok:
            failed += 1
    return failed


def resolve_tool(args: argparse.Namespace, config: BinfetchConfig) -> int:
    """Print what an install would resolve to without touching the network."""
    owner, project = split_repo(args.repo)
    options = _options_from_args(args)
    info = ToolInfo(
        owner,
        project,
        options.tag,
        resolve_platform(options.platform),
        resolve_arch(options.arch),
    )
    console.print(f"[bold]platform[/]    {info.platform}")
    console.print(f"[bold]arch[/]        {', '.join(arch_aliases(info.arch))}")
    console.print(f"[bold]cache key[/]   {cache_key(info) or '(not cached)'}")
    console.print(f"[bold]destination[/] {tool_path(info, config.tool_cache_dir)}")
    return 0


def show_version(_args: argparse.Namespace, _config: BinfetchConfig) -> int:
    console.print(f"[yellow]binfetch[/] [bold]v{__version__}[/]")
    return 0


def _add_target_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--tag", default="latest", help="Release tag to install")
    parser.add_argument("--platform", help="Platform to install for (default: this host)")
    parser.add_argument("--arch", help="Architecture to install for (default: this host)")


def create_parser() -> argparse.ArgumentParser:
    """Create command-line argument parser."""
    parser = argparse.ArgumentParser(
        prog="binfetch",
        description="binfetch - Install GitHub release binaries for this platform",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable verbose output",
    )
    parser.add_argument(
        "--config-file",
        type=str,
        help="Path to configuration file",
    )
    parser.add_argument(
        "--tool-cache-dir",
        type=str,
        help="Directory releases are installed into",
    )

    subparsers = parser.add_subparsers(dest="command", help="Command to execute")

    # install command
    install_parser = subparsers.add_parser("install", help="Install release binaries")
    install_parser.add_argument(
        "repos",
        nargs="*",
        help="Repositories as owner/project (all configured tools if not specified)",
    )
    _add_target_arguments(install_parser)
    install_parser.add_argument(
        "--cache",
        action=argparse.BooleanOptionalAction,
        default=False,
        help="Reuse and store installs of fixed tags across runs",
    )
    install_parser.add_argument(
        "--chmod",
        default="755",
        help="Permission mode applied to the extracted files",
    )
    install_parser.set_defaults(func=install_tools)

    # resolve command
    resolve_parser = subparsers.add_parser(
        "resolve",
        help="Show the platform, cache key and destination an install would use",
    )
    resolve_parser.add_argument("repo", help="Repository as owner/project")
    _add_target_arguments(resolve_parser)
    resolve_parser.set_defaults(func=resolve_tool)

    # version command
    version_parser = subparsers.add_parser("version", help="Print version information")
    version_parser.set_defaults(func=show_version)

    return parser


def main(argv: list[str] | None = None) -> None:
    """Main function to parse arguments and execute commands."""
    parser = create_parser()
    args = parser.parse_args(argv)

    setup_logging(args.verbose)

    try:
        config = BinfetchConfig.load_from_file(args.config_file).apply_environment()
        if args.tool_cache_dir:
            config.tool_cache_dir = Path(args.tool_cache_dir)
        config.validate()

        if not hasattr(args, "func"):
            parser.print_help()
            return
        failed = args.func(args, config)
    except (BinfetchError, OSError, ValueError, requests.RequestException) as e:
        log(f"Error: {e!s}", "error")
        sys.exit(1)
    except Exception:  # noqa: BLE001
        log("Unexpected failure, please file an issue", "error", print_exception=True)
        sys.exit(1)

    if failed:
        sys.exit(1)


if __name__ == "__main__":
    main()
