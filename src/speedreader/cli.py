"""CLI/bootstrap helpers for the speedreader application."""

from __future__ import annotations

import argparse
import logging
import logging.handlers
import os
import sys
from collections.abc import Callable, Mapping
from pathlib import Path
from typing import Any

from keyring.errors import KeyringError
from platformdirs import user_config_dir

from speedreader.action_messages import (
    build_actionable_error,
    build_actionable_warning,
    build_session_summary,
)
from speedreader.config import fold_session_totals, load_config, save_config
from speedreader.models import CONFIG_APP_NAME, UserConfig
from speedreader.services.interfaces import (
    CredentialStore,
    FeedClient,
    KeyringCredentialStore,
    connect_miniflux,
)
from speedreader.session import ReaderSession

logger = logging.getLogger(__name__)

ENV_MINIFLUX_URL = "MINIFLUX_URL"
ENV_MINIFLUX_TOKEN = "MINIFLUX_API_TOKEN"


def _read_words(path: Path) -> list[str] | int:
    """Read and split a local text file. Returns words or an exit code."""
    text_file = path.expanduser()
    if not text_file.exists():
        print(
            build_actionable_error(
                f"open {text_file}",
                why="the file does not exist",
                next_step="check the path or run speedreader without a file to browse Miniflux",
            ),
            file=sys.stderr,
        )
        return 1
    if text_file.is_dir():
        print(
            build_actionable_error(
                f"open {text_file}",
                why="it is a directory, not a file",
                next_step="pass a plain text file",
            ),
            file=sys.stderr,
        )
        return 1
    try:
        content = text_file.read_text(encoding="utf-8", errors="replace")
    except OSError as e:
        print(
            build_actionable_error(
                f"read {text_file}",
                why=str(e),
                next_step="check the file permissions",
            ),
            file=sys.stderr,
        )
        return 1
    words = content.split()
    if not words:
        print(
            build_actionable_error(
                f"read {text_file}",
                why="the file contains no words",
                next_step="pass a file with some text in it",
            ),
            file=sys.stderr,
        )
        return 1
    return words


def _resolve_credentials(
    config: UserConfig,
    credential_store: CredentialStore,
    environ: Mapping[str, str],
) -> tuple[str, str]:
    """Find the Miniflux URL and token: environment first, then config and keyring."""
    url = environ.get(ENV_MINIFLUX_URL, "").strip() or config.miniflux_url.strip()
    token = environ.get(ENV_MINIFLUX_TOKEN, "").strip()
    if not token and url:
        try:
            token = credential_store.get_token()
        except KeyringError as e:
            logger.warning("Could not read token from keyring: %s", e)
            print(
                build_actionable_warning(
                    "Could not read the Miniflux token from the system keyring",
                    why=str(e) or type(e).__name__,
                    next_step=f"set {ENV_MINIFLUX_TOKEN} or log in again",
                ),
                file=sys.stderr,
            )
            token = ""
    return url, token


def _configure_logging(debug: bool) -> None:
    """Configure logging. When debug=True, logs to file at DEBUG level."""
    if not debug:
        # Default: suppress all logging (TUI captures stderr)
        logging.disable(logging.CRITICAL)
        return

    log_dir = Path(user_config_dir(CONFIG_APP_NAME))
    log_dir.mkdir(parents=True, exist_ok=True)
    log_file = log_dir / "debug.log"

    handler = logging.handlers.RotatingFileHandler(
        log_file,
        maxBytes=5 * 1024 * 1024,
        backupCount=3,
        encoding="utf-8",
    )
    handler.setFormatter(
        logging.Formatter(
            "%(asctime)s %(name)s %(levelname)s %(message)s",
            datefmt="%H:%M:%S",
        )
    )
    logging.root.addHandler(handler)
    logging.root.setLevel(logging.DEBUG)


def _configure_color_mode(color_mode: str) -> None:
    """Configure environment hints for terminal color behavior."""
    if color_mode == "never":
        os.environ["NO_COLOR"] = "1"
        os.environ.pop("FORCE_COLOR", None)
        return
    if color_mode == "always":
        os.environ["FORCE_COLOR"] = "1"
        os.environ.pop("NO_COLOR", None)
        return
    # auto
    os.environ.pop("FORCE_COLOR", None)


def _validate_interactive_tty() -> bool:
    """Return True when stdin/stdout are interactive terminals."""
    return bool(sys.stdin.isatty() and sys.stdout.isatty())


def _build_client(url: str, token: str) -> FeedClient | None:
    try:
        return connect_miniflux(url, token)
    except ValueError as e:
        print(
            build_actionable_error(
                "connect to Miniflux",
                why=str(e),
                next_step=f"fix {ENV_MINIFLUX_URL} or the saved URL, then run again",
            ),
            file=sys.stderr,
        )
        return None


def main(
    argv: list[str] | None = None,
    *,
    load_config_fn: Callable[[], UserConfig] = load_config,
    save_config_fn: Callable[[UserConfig], bool] = save_config,
    credential_store: CredentialStore | None = None,
    configure_logging_fn: Callable[[bool], None] = _configure_logging,
    configure_color_mode_fn: Callable[[str], None] = _configure_color_mode,
    validate_interactive_tty_fn: Callable[[], bool] = _validate_interactive_tty,
    client_factory: Callable[[str, str], FeedClient | None] = _build_client,
    app_factory: Callable[..., Any] | None = None,
    environ: Mapping[str, str] | None = None,
) -> int:
    """Main entry point. Returns exit code."""
    parser = argparse.ArgumentParser(
        description="Speed-read unread Miniflux entries (or a local text file) in the terminal"
    )
    parser.add_argument(
        "file",
        nargs="?",
        type=Path,
        default=None,
        help="Plain text file to read instead of browsing Miniflux",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug logging to file (~/.config/speedreader/debug.log)",
    )
    parser.add_argument(
        "--color",
        choices=["auto", "always", "never"],
        default="auto",
        help="Color output mode for terminal UI (default: auto)",
    )
    parser.add_argument(
        "--no-color",
        action="store_true",
        help="Disable terminal colors (equivalent to --color never)",
    )
    args = parser.parse_args(argv)

    color_mode = "never" if args.no_color else args.color
    configure_color_mode_fn(color_mode)
    configure_logging_fn(args.debug)
    logger.debug("speedreader starting, cwd=%s", Path.cwd())

    environ = os.environ if environ is None else environ
    credential_store = credential_store or KeyringCredentialStore()
    config = load_config_fn()

    words: list[str] | None = None
    client: FeedClient | None = None
    login_url = ""
    if args.file is not None:
        result = _read_words(args.file)
        if isinstance(result, int):
            return result
        words = result
    else:
        url, token = _resolve_credentials(config, credential_store, environ)
        login_url = url
        if url and token:
            client = client_factory(url, token)
            if client is None:
                return 1

    if not validate_interactive_tty_fn():
        print(
            "Error: speedreader requires an interactive TTY for the full UI.",
            file=sys.stderr,
        )
        print("Next steps:", file=sys.stderr)
        print("  - Run speedreader directly in a terminal session", file=sys.stderr)
        print("  - Use --help for command documentation", file=sys.stderr)
        return 2

    session = ReaderSession(
        config,
        words=words,
        remote=client is not None,
        login_url=login_url,
    )

    if app_factory is None:
        from speedreader.app import SpeedReaderApp as _SpeedReaderApp

        app_factory = _SpeedReaderApp

    app = app_factory(session, client=client, save_config_fn=save_config_fn)
    app.run()

    fold_session_totals(config, session)
    if not save_config_fn(config):
        logger.warning("Reading statistics could not be saved")
    print(
        build_session_summary(
            articles=session.session_articles,
            words=session.session_words,
            total_articles=config.total_articles,
            total_words=config.total_words,
        )
    )
    return 0


def run() -> None:
    """Console-script entry point."""
    sys.exit(main())


__all__ = [
    "ENV_MINIFLUX_TOKEN",
    "ENV_MINIFLUX_URL",
    "_build_client",
    "_configure_color_mode",
    "_configure_logging",
    "_read_words",
    "_resolve_credentials",
    "_validate_interactive_tty",
    "main",
    "run",
]
