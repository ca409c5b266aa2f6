import argparse
import logging
import os
import time
from castbridge.bridge import MediaStreamBridge
from castbridge.config import load_settings
from castbridge.logger import configure_logging

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="castbridge",
        description="Serve local audio files over HTTP for a remote player (Chromecast, DLNA).",
    )
    parser.add_argument("files", nargs="+", help="Audio files to expose.")
    parser.add_argument("--artwork", help="Image to expose as album art.")
    parser.add_argument("--host", help="Interface to bind (default 0.0.0.0).")
    parser.add_argument("--port", type=int, help="Port to bind (default: any free port).")
    parser.add_argument("--advertise-host", help="Address to put in URLs instead of auto-detecting.")
    parser.add_argument("--config", help="Optional JSON settings file.")
    parser.add_argument("--log-level", help="DEBUG, INFO, WARNING or ERROR.")
    return parser


def run_bridge(args_list=None):
    args = build_parser().parse_args(args_list)
    settings = load_settings(
        args.config,
        host=args.host,
        port=args.port,
        advertise_host=args.advertise_host,
        log_level=args.log_level,
    )
    configure_logging(settings.log_level)

    missing = [f for f in args.files if not os.path.isfile(f)]
    if missing:
        for f in missing:
            logger.error(f"❌ Error: File does not exist: {f}")
        return 1

    bridge = MediaStreamBridge(settings=settings)
    bridge.start()

    for f in args.files:
        print(f"{os.path.basename(f)}: {bridge.register_file(os.path.abspath(f))}")
    if args.artwork:
        print(f"artwork: {bridge.register_artwork(os.path.abspath(args.artwork))}")

    # Keep alive
    try:
        while True:
            time.sleep(1)
    except KeyboardInterrupt:
        print("\nStopping server...")
    finally:
        bridge.stop()
        bridge.clear_registered_files()
    return 0


if __name__ == "__main__":
    raise SystemExit(run_bridge())
