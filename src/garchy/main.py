import sys
from pathlib import Path

from garchy import __version__
from garchy.config import get_config, set_config, use_config_file
from garchy.exceptions import GarchyError
from garchy.logger import configure_logging, get_logger
from garchy.services.prompt import Prompter
from garchy.services.provisioner import Provisioner

logger = get_logger(__name__)


def run(argv: list[str] | None = None) -> int:
    """Parse arguments, run provisioning and print the summary.

    Returns:
        Process exit code: 0 on success, 1 on a fatal error, 130 on interrupt
    """
    import argparse

    parser = argparse.ArgumentParser(
        prog="garchy",
        description="GArchy - install package tiers and stow dotfiles for installed software",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  garchy                        # Interactive run with ~/GArchy/packages
  garchy --root ~/src/GArchy    # Use another checkout for the package lists
  garchy --yes --no-mirrors     # Accept every optional set, keep the mirrorlist
        """,
    )
    parser.add_argument("--config", type=Path, metavar="FILE", help="YAML configuration file")
    parser.add_argument("--root", type=Path, metavar="DIR", help="GArchy root containing packages/")
    parser.add_argument("--dotfiles-dir", type=Path, metavar="DIR", help="Dotfiles checkout location")
    parser.add_argument("-y", "--yes", action="store_true", help="Answer yes to every confirmation")
    parser.add_argument("--no-mirrors", action="store_true", help="Do not refresh the mirrorlist")
    parser.add_argument("--no-aur", action="store_true", help="Skip the AUR helper and AUR tiers")
    parser.add_argument("--no-dotfiles", action="store_true", help="Do not deploy dotfiles")
    parser.add_argument("--no-services", action="store_true", help="Do not enable system services")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")
    parser.add_argument("--version", action="version", version=f"GArchy {__version__}")

    args = parser.parse_args(argv)

    try:
        config = use_config_file(args.config) if args.config else get_config()
    except GarchyError as e:
        configure_logging()
        logger.error(str(e))
        return 1

    if args.root:
        config.paths.root_dir = args.root.expanduser()
        config.paths.packages_dir = config.paths.root_dir / "packages"
    if args.dotfiles_dir:
        config.paths.dotfiles_dir = args.dotfiles_dir.expanduser()
    if args.yes:
        config.advanced.assume_yes = True
    if args.no_mirrors:
        config.mirrors.enabled = False
    if args.no_aur:
        config.sources.community_enabled = False
    if args.no_dotfiles:
        config.dotfiles.enabled = False
    if args.no_services:
        config.services.enabled = False
    if args.verbose:
        config.advanced.log_level = "DEBUG"
    set_config(config)

    configure_logging(config.advanced.log_level, config.advanced.log_format)
    logger.info(f"Starting GArchy setup (packages in {config.paths.packages_dir})")

    provisioner = Provisioner(config, Prompter(assume_yes=config.advanced.assume_yes))
    try:
        report = provisioner.run()
    except KeyboardInterrupt:
        logger.error("Interrupted, aborting run")
        return 130
    except GarchyError as e:
        logger.error(f"Provisioning aborted: {e}")
        print("\n".join(provisioner.report.summary_lines()))
        return 1

    print("\n".join(report.summary_lines()))
    logger.info("GArchy setup complete. Reboot to start your session.")
    return 0


def main() -> None:
    """Main entry point with CLI argument parsing."""
    sys.exit(run())


if __name__ == "__main__":
    main()
