"""Entry point for the scrubber application."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from scrubber.engine import BACKENDS


def build_parser() -> argparse.ArgumentParser:
    """Build the command line parser."""
    parser = argparse.ArgumentParser(
        prog="scrubber",
        description="A keyboard and mouse driven media playback controller for the terminal",
    )
    parser.add_argument("source", nargs="?", help="Media file path or URL to play")
    parser.add_argument(
        "--version", "-v", action="store_true", help="Show version and exit"
    )
    parser.add_argument(
        "--backend", "-b", choices=BACKENDS, help="Engine backend (overrides config)"
    )
    parser.add_argument(
        "--config", "-c", type=Path, help="Path to an alternative config file"
    )
    parser.add_argument(
        "--no-video", action="store_true", help="Play audio only, without a video window"
    )
    parser.add_argument(
        "--debug", action="store_true", help="Log debug output to the Textual devtools console"
    )
    parser.add_argument(
        "--log-file", type=Path, help="Write the log to this file instead of the data directory"
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    """Run the scrubber application."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.version:
        from scrubber import __version__

        print(f"scrubber {__version__}")
        return 0

    if not args.source:
        parser.error("a media source is required")

    return run_app(
        args.source,
        backend=args.backend,
        config_path=args.config,
        video=not args.no_video,
        debug=args.debug,
        log_file=args.log_file,
    )


def run_app(
    source: str,
    *,
    backend: str | None = None,
    config_path: Path | None = None,
    video: bool = True,
    debug: bool = False,
    log_file: Path | None = None,
) -> int:
    """Load a source and run the TUI application.

    Args:
        source: Media file path or URL.
        backend: Engine backend; the configured one if None.
        config_path: Config file; the default location if None.
        video: Whether to open a video output window.
        debug: Whether to log at DEBUG level to the devtools console.
        log_file: Log file overriding the configured location.

    Returns:
        Exit code (0 for success, 1 for a load failure).
    """
    from scrubber.app import ScrubberApp
    from scrubber.bindings import BindingResolver
    from scrubber.config import reload_config
    from scrubber.controller import PlaybackController
    from scrubber.errors import LoadFailure
    from scrubber.logging import configure_from, get_logger

    config = reload_config(config_path)
    log_path = configure_from(config.log, debug=debug, log_path=log_file)
    log = get_logger("main")
    log.debug("Logging to %s", log_path)
    backend = backend or config.player.backend
    video = video and config.player.video

    try:
        controller = PlaybackController.open(
            source,
            backend,
            resolver=BindingResolver.from_config(
                config.keys, reserved=ScrubberApp.reserved_chords()
            ),
            seek_step=config.player.seek_step,
            video=video,
            load_timeout=config.player.load_timeout,
        )
    except LoadFailure as e:
        log.error("%s", e)
        print(f"Error: {e}", file=sys.stderr)
        return 1

    app = ScrubberApp(controller, config, config_path=config_path)
    app.run()
    return 0


if __name__ == "__main__":
    sys.exit(main())
