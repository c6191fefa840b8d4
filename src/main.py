import logging
import os
import sys
from decimal import Decimal
from typing import Iterable, TextIO

from models import AccountSnapshot
from payments_engine import PaymentsEngine

logger = logging.getLogger(__name__)

LOG_LEVEL_ENV = "PAYMENTS_LOG_LEVEL"
DEFAULT_LOG_LEVEL = logging.WARNING
OUTPUT_HEADER = "client,available,held,total,locked"


def configure_logging() -> None:
    level_name = os.environ.get(LOG_LEVEL_ENV, "").strip().upper()
    level = logging.getLevelName(level_name) if level_name else DEFAULT_LOG_LEVEL
    if not isinstance(level, int):
        level = DEFAULT_LOG_LEVEL

    logging.basicConfig(
        level=level,
        format="%(levelname)s: %(message)s",
        stream=sys.stderr,
    )


def format_decimal(value: Decimal) -> str:
    """Format decimal with exactly 4 decimal places."""
    return f"{value:.4f}"


def write_accounts(snapshots: Iterable[AccountSnapshot], out: TextIO) -> None:
    print(OUTPUT_HEADER, file=out)
    for snapshot in snapshots:
        print(
            f"{snapshot.client_id},"
            f"{format_decimal(snapshot.available)},"
            f"{format_decimal(snapshot.held)},"
            f"{format_decimal(snapshot.total)},"
            f"{str(snapshot.locked).lower()}",
            file=out,
        )


def main():
    configure_logging()

    if len(sys.argv) != 2:
        print("Usage: python main.py <input.csv>", file=sys.stderr)
        sys.exit(1)

    filepath = sys.argv[1]
    if not os.path.isfile(filepath) or not os.access(filepath, os.R_OK):
        logger.error(f"Cannot read input file: {filepath}")
        sys.exit(1)

    engine = PaymentsEngine()
    try:
        engine.process_file(filepath)
    except OSError as e:
        logger.error(f"Failed to read {filepath}: {e}")
        sys.exit(1)

    write_accounts(engine.snapshot(), sys.stdout)


if __name__ == "__main__":
    main()
