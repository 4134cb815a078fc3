from __future__ import annotations

import argparse
import json
import logging
import sys
from typing import Optional, Sequence

from bundle_reports.app_factory import create_app, create_report_service, load_settings
from bundle_reports.domain.errors import ReportsError
from bundle_reports.log_setup import setup_logging

logger = logging.getLogger("bundle_reports")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="bundle-reports",
        description="Generate and serve bundle analysis reports.",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="debug logging")

    sub = parser.add_subparsers(dest="command")
    sub.add_parser("serve", help="run the report catalog server (default)")
    sub.add_parser("generate", help="locate build stats and store a new report")
    sub.add_parser("thresholds", help="print audit score assertions as JSON")
    return parser


def cmd_serve() -> int:
    app = create_app()
    logger.info("Bundle report viewer running at http://%s:%s", app.config["HOST"], app.config["PORT"])
    app.run(host=app.config["HOST"], port=app.config["PORT"], debug=app.config["DEBUG"])
    return 0


def cmd_generate() -> int:
    try:
        result = create_report_service().generate()
    except (ReportsError, OSError, ValueError) as e:
        logger.error("Error generating report: %s", e)
        return 1
    logger.info("Report generation successful!")
    print(json.dumps(result.to_dict(), indent=2))
    return 0


def cmd_thresholds() -> int:
    settings = load_settings()
    print(json.dumps({"assertions": settings.thresholds.as_assertions()}, indent=2))
    return 0


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging(verbose=args.verbose)

    commands = {
        "serve": cmd_serve,
        "generate": cmd_generate,
        "thresholds": cmd_thresholds,
    }
    return commands[args.command or "serve"]()


if __name__ == "__main__":
    sys.exit(main())
