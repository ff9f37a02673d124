import argparse
import logging
import sys

from .version import __version__


def log_uncaught_exceptions(exctype, value, tb):
    logging.critical("Uncaught exception", exc_info=(exctype, value, tb))


def parse_args(argv=None):
    parser = argparse.ArgumentParser(
        prog="clipmarker",
        description="Mark start/end points on a playing video and replay the clips."
    )
    parser.add_argument("source", nargs="?", default="",
                        help="media file or URL to play (defaults to the configured source)")
    parser.add_argument("--video-id", default="",
                        help="video identifier used when building shareable links")
    parser.add_argument("--debug", action="store_true", help="enable debug logging")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser.parse_args(argv)


def main(argv=None):
    args = parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.debug else logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )
    sys.excepthook = log_uncaught_exceptions

    from PyQt6.QtWidgets import QApplication
    from .ui import ClipMakerWindow

    app = QApplication(sys.argv[:1])

    # These must be set for QSettings to work correctly on all platforms
    app.setOrganizationName("ClipMarker")
    app.setApplicationName("ClipMarker")

    window = ClipMakerWindow(source=args.source, video_id=args.video_id)
    if args.debug and window.session.logging_manager is not None:
        window.session.logging_manager.set_debug_mode(True)
    window.show()
    return app.exec()
