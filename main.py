from __future__ import annotations

import argparse
import logging
import sys
import threading

import uvicorn
from pydantic import ValidationError

from serfsd.api import create_app
from serfsd.config import SDConfig
from serfsd.db import EventJournal
from serfsd.logs import configure_logging
from serfsd.membership import connect_serf
from serfsd.reconciler import Discovery
from serfsd.runtime import TargetStore
from serfsd.settings import load_settings
from serfsd.sink import FileSDSink, pump

logger = logging.getLogger("serfsd")


def build_parser() -> argparse.ArgumentParser:
    s = load_settings()
    p = argparse.ArgumentParser(
        description="Generate file_sd target files from the members of a Serf cluster."
    )
    p.add_argument("--output.file", dest="output_file", default=s.output_file, help="Output file for file_sd compatible file.")
    p.add_argument(
        "--listen.address",
        dest="listen_address",
        default=s.listen_address,
        help="The address that Serf is listening on for requests.",
    )
    p.add_argument("--refresh-interval", type=int, default=s.refresh_interval, help="Seconds between polls")
    p.add_argument("--tag-separator", default=s.tag_separator)
    p.add_argument("--events-db", default=s.events_db, help="SQLite file for the discovery event journal")
    p.add_argument("--log-level", default=s.log_level)
    p.add_argument("--enable-web", action="store_true", default=s.enable_web, help="Serve /targets (http_sd) and status")
    p.add_argument("--web.host", dest="web_host", default=s.web_host)
    p.add_argument("--web.port", dest="web_port", type=int, default=s.web_port)
    return p


def build_config(args: argparse.Namespace) -> SDConfig:
    return SDConfig(
        address=args.listen_address,
        refresh_interval=args.refresh_interval,
        tag_separator=args.tag_separator,
    )


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging(args.log_level.upper())

    try:
        config = build_config(args)
    except ValidationError as e:
        print(f"invalid configuration: {e}", file=sys.stderr)
        return 2

    journal = EventJournal(args.events_db)
    journal.init()

    store = TargetStore()
    sink = FileSDSink(args.output_file, store=store)
    disc = Discovery(connect_serf, config, journal=journal)
    stop = threading.Event()

    disc.start()
    pumper = threading.Thread(target=pump, args=(disc.stream, [sink], stop), name="serfsd-sink", daemon=True)
    pumper.start()
    logger.info("Writing targets to %s", sink.path)

    try:
        if args.enable_web:
            uvicorn.run(create_app(store, journal, config), host=args.web_host, port=args.web_port)
        else:
            while pumper.is_alive():
                pumper.join(1.0)
    except KeyboardInterrupt:
        pass
    finally:
        disc.cancel()
        stop.set()
        disc.join(config.refresh_interval)
    return 0


if __name__ == "__main__":
    raise SystemExit(main(sys.argv[1:]))
