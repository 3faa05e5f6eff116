"""CLI for Registry Tag Reaper."""

import argparse
import sys
from pathlib import Path

from .config import RegistryConfig
from .models.plan import ReapResult
from .models.registry_category import RegistryCategory
from .services.reaper import Reaper


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        description=(
            "Reap tags from an Azure Container Registry repository.  Keeps"
            " 'latest', the most recent semantic version tags, and the most"
            " recent alphanumeric (six or more characters) tags."
        ),
        epilog="example: %(prog)s myregistry myrepo --dry-run",
    )
    parser.add_argument(
        "registry", help="Name of the Azure Container Registry"
    )
    parser.add_argument(
        "repository", help="Name of the repository in the registry"
    )
    parser.add_argument(
        "-c",
        "--config-file",
        "--file",
        type=Path,
        help="reaper config file (YAML) with defaults",
        default=None,
    )
    parser.add_argument(
        "-d",
        "--debug",
        action="store_true",
        help="Enable debug logging",
        default=False,
    )
    parser.add_argument(
        "-x",
        "--dry-run",
        action="store_true",
        help="Dry run only: show what would be deleted without deleting",
        default=False,
    )
    parser.add_argument(
        "--keep-semver",
        type=int,
        help="number of most recent semantic version tags to keep",
        default=None,
    )
    parser.add_argument(
        "--keep-alphanumeric",
        type=int,
        help="number of most recent alphanumeric tags to keep",
        default=None,
    )
    parser.add_argument(
        "--category",
        choices=[x.value for x in RegistryCategory],
        help="how to talk to the registry (default: az)",
        default=None,
    )
    parser.add_argument(
        "-i",
        "--input-file",
        type=Path,
        help="use the tag list from this file instead of scanning",
        default=None,
    )
    parser.add_argument(
        "-o",
        "--output-file",
        type=Path,
        help="write the scanned tag list to this file",
        default=None,
    )
    return parser.parse_args(argv)


def _load_config(args: argparse.Namespace) -> RegistryConfig:
    if args.config_file:
        cfg = RegistryConfig.from_file(
            args.config_file,
            registry=args.registry,
            repository=args.repository,
        )
    else:
        cfg = RegistryConfig(
            registry=args.registry, repository=args.repository
        )

    # Override settings in config with anything specified here
    if args.dry_run:
        cfg.dry_run = True
    if args.debug:
        cfg.debug = True
    if args.keep_semver is not None:
        cfg.keep.semver = args.keep_semver
    if args.keep_alphanumeric is not None:
        cfg.keep.alphanumeric = args.keep_alphanumeric
    if args.category is not None:
        cfg.category = RegistryCategory(args.category)
    if args.input_file is not None:
        cfg.input_file = args.input_file
    return cfg


def _print_summary(result: ReapResult) -> None:
    print("Summary:")
    print(f"  Deleted: {len(result.deleted)}")
    print(f"  Failed: {len(result.failed)}")
    print(f"  Kept: {result.kept}")


def main(argv: list[str] | None = None) -> int:
    """Reap one repository.  Returns the process exit status."""
    args = _parse_args(argv)
    cfg = _load_config(args)

    reaper = Reaper(cfg)
    if cfg.dry_run:
        print("DRY RUN MODE - No tags will be deleted")
    print(
        f"Cleaning repository: {cfg.repository} in registry: {cfg.registry}"
    )
    reaper.populate()
    if args.output_file:
        reaper.dump(args.output_file)
    reaper.plan()
    if cfg.dry_run:
        reaper.report()
        return 0
    result = reaper.reap()
    if result.deleted or result.failed:
        _print_summary(result)
    return 0 if result.success else 1


def run() -> None:
    """Console script entry point."""
    sys.exit(main())
