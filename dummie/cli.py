#!/usr/bin/env python3
"""
dummie - command line entry point.

Subcommands: strucview, translate, info, version-check, browser-detect, config
"""

import argparse
import logging
import os
import platform
import subprocess
import sys

import requests

from . import __version__
from .browsers import candidate_paths, env_hint, find_chrome
from .config import DummieConfig, parse_value
from .display import Display
from .strucview import ALL_LEVELS, DirectoryNotFoundError, parse_depth, print_tree
from .translate import TranslationError, translate_text

PACKAGE_NAME = "dummie-tools"
PYPI_URL = f"https://pypi.org/pypi/{PACKAGE_NAME}/json"

logger = logging.getLogger("dummie")


def setup_logging(debug=False, quiet=False, log_file=None):
    """Setup logging configuration"""
    if debug:
        level = logging.DEBUG
    elif quiet:
        level = logging.ERROR
    else:
        level = logging.WARNING

    handlers = [logging.StreamHandler()]
    if log_file:
        handlers.append(logging.FileHandler(log_file))
    logging.basicConfig(
        level=level,
        format='%(asctime)s - %(levelname)s - %(message)s',
        handlers=handlers,
        force=True,
    )


def parse_level(value):
    """Depth argument: a non-negative integer, or 'la' for all levels"""
    try:
        return parse_depth(value)
    except ValueError as e:
        raise argparse.ArgumentTypeError(str(e)) from e


def build_parser(config):
    parser = argparse.ArgumentParser(
        prog="dummie",
        description="dummie-tools CLI",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s strucview -l 2
  %(prog)s strucview -d ./src -l la --interactive
  %(prog)s translate "good morning" -f en -t de
        """
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("-d", "--debug", action="store_true", help="Enable debug mode")
    parser.add_argument("-q", "--quiet", action="store_true", help="Suppress output")

    subparsers = parser.add_subparsers(dest='command', help='Available commands')

    strucview_parser = subparsers.add_parser('strucview', help='Print directory tree view')
    strucview_parser.add_argument("-l", "--level", type=parse_level,
                                  default=str(config.get("strucview", "level", "3")),
                                  help=f"Max depth level (or use '{ALL_LEVELS}' for all)")
    strucview_parser.add_argument("-d", "--dir", default=".", help="Directory to scan (default: .)")
    strucview_parser.add_argument("-i", "--interactive", action="store_true",
                                  default=bool(config.get("strucview", "interactive", False)),
                                  help="Ask before collapsing node_modules, dist, .git, ...")
    strucview_parser.add_argument("-s", "--skip", nargs="*", default=[],
                                  help="Extra directory names to collapse")

    translate_parser = subparsers.add_parser(
        'translate', help='Translate text using HTTP API with headless browser fallback')
    translate_parser.add_argument("text", help="Text to translate")
    translate_parser.add_argument("-f", "--from", dest="from_lang",
                                  default=config.get("translate", "from", "en"),
                                  help="Source language code (default: %(default)s)")
    translate_parser.add_argument("-t", "--to", dest="to_lang",
                                  default=config.get("translate", "to", "vi"),
                                  help="Target language code (default: %(default)s)")

    subparsers.add_parser('info', help='Display system and environment information')
    subparsers.add_parser('version-check', help=f'Check for a new version of {PACKAGE_NAME}')
    subparsers.add_parser('browser-detect', help='Detect browser installations for translation')

    config_parser = subparsers.add_parser('config', help='Show or change settings')
    group = config_parser.add_mutually_exclusive_group()
    group.add_argument("--list", action="store_true", help="List current settings")
    group.add_argument("--set", nargs=2, metavar=("KEY", "VALUE"), help="Set section.key to VALUE")
    group.add_argument("--reset", action="store_true", help="Restore default settings")

    return parser


def cmd_strucview(args, config, display):
    skip_dirs = set(config.get("strucview", "skip_dirs") or []) | set(args.skip)
    default_skip_dirs = config.get("strucview", "default_skip_dirs") or []
    logger.debug("strucview dir=%s level=%s skip=%s", args.dir, args.level, sorted(skip_dirs))
    try:
        print_tree(args.dir, args.level,
                   skip_dirs=skip_dirs,
                   default_skip_dirs=default_skip_dirs,
                   interactive=args.interactive)
    except DirectoryNotFoundError as e:
        display.error(f"Error processing directory: {e}")
        return 1
    return 0


def cmd_translate(args, config, display):
    try:
        result = translate_text(args.text, args.from_lang, args.to_lang, config=config)
    except TranslationError as e:
        display.error(f"Translation error: {e}")
        return 1
    print(result)
    return 0


def pip_version():
    try:
        out = subprocess.run([sys.executable, "-m", "pip", "--version"],
                             capture_output=True, text=True, check=True).stdout
    except (OSError, subprocess.CalledProcessError):
        return None
    return out.split()[1] if out else None


def cmd_info(args, config, display):
    display.line(f"{PACKAGE_NAME} Information:")
    display.line(f"Version: {__version__}")
    display.line(f"Python Version: {platform.python_version()}")
    display.line(f"OS: {sys.platform} ({platform.machine()})")
    display.line(f"Pip Version: {pip_version() or 'Not available'}")
    display.line(f"Package Location: {os.path.dirname(os.path.abspath(__file__))}")
    display.line(f"Config File: {config.config_path}")
    return 0


def latest_version(timeout=10):
    response = requests.get(PYPI_URL, timeout=timeout)
    response.raise_for_status()
    return response.json()["info"]["version"]


def cmd_version_check(args, config, display):
    display.info("Checking for updates...")
    try:
        latest = latest_version()
    except (requests.RequestException, KeyError, ValueError) as e:
        display.error(f"Failed to check for updates: {e}")
        return 1

    if latest == __version__:
        display.success(f"You are using the latest version ({__version__}).")
    else:
        display.line(f"Current version: {__version__}")
        display.line(f"Latest version: {latest}")
        display.line(f"You can update using: pip install -U {PACKAGE_NAME}")
    return 0


def cmd_browser_detect(args, config, display):
    display.info("Detecting browsers for translation feature...")
    path = find_chrome()
    if path:
        display.success(f"Found Chrome at: {path}")
        display.line()
        display.line("To use this browser for translations, set the CHROME_PATH environment variable:")
        display.line()
        display.line(env_hint(path))
        return 0

    display.warning("No Chrome installation found in common locations.")
    for candidate in candidate_paths():
        logger.debug("Looked for %s", candidate)
    display.line()
    display.line("Manual configuration needed:")
    display.line("1. Install Google Chrome, or run: playwright install chromium")
    display.line("2. Set the CHROME_PATH environment variable to your Chrome executable")
    display.line()
    display.line(f"Example: {env_hint('/path/to/chrome')}")
    return 0


def cmd_config(args, config, display):
    if args.set:
        key, raw = args.set
        try:
            config.set(key, parse_value(raw))
            config.save_config()
        except (KeyError, ValueError, OSError) as e:
            display.error(f"Failed to update config: {e}")
            return 1
        display.success(f"Set {key} = {config.get(*key.split('.', 1))!r}")
        return 0

    if args.reset:
        config.reset()
        try:
            config.save_config()
        except OSError as e:
            display.error(f"Failed to save config: {e}")
            return 1
        display.success("Configuration reset to defaults")
        return 0

    display.line(f"# {config.config_path}")
    for key, value in config.items():
        display.line(f"{key} = {value!r}")
    return 0


COMMANDS = {
    'strucview': cmd_strucview,
    'translate': cmd_translate,
    'info': cmd_info,
    'version-check': cmd_version_check,
    'browser-detect': cmd_browser_detect,
    'config': cmd_config,
}


def main(argv=None):
    config = DummieConfig()
    parser = build_parser(config)
    args = parser.parse_args(argv)

    setup_logging(args.debug, args.quiet, config.get("logging", "file"))
    display = Display(quiet=args.quiet)

    if not args.command:
        parser.print_help()
        return 0

    return COMMANDS[args.command](args, config, display)


if __name__ == "__main__":
    sys.exit(main())
