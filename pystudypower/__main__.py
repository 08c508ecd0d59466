"""Command-line entry point: ``python -m pystudypower``."""

from __future__ import annotations

import logging
import sys

from pystudypower._config import SessionConfig
from pystudypower._errors import PowerAnalysisError
from pystudypower.workflow import ConsoleInput, Session


def main() -> int:
    try:
        config = SessionConfig.from_env()
    except ValueError as exc:
        print(f"Invalid configuration: {exc}", file=sys.stderr)
        return 1
    logging.basicConfig(
        level=config.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    config.prepare_output_dir()

    session = Session(ConsoleInput(), config)
    try:
        session.run()
    except PowerAnalysisError as exc:
        print(f"Aborted: {exc}", file=sys.stderr)
        return 1
    except (EOFError, KeyboardInterrupt):
        print("\nAborted: no answer given", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
