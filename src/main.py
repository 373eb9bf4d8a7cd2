import os
import sys

from payments_engine import PaymentsEngine
from reporting import configure_logging
from statement import write_statement


def main():
    configure_logging(
        level=os.environ.get("PAYMENTS_LOG_LEVEL", "WARNING"),
        log_format=os.environ.get("PAYMENTS_LOG_FORMAT", "text"),
    )

    if len(sys.argv) != 2:
        print("Usage: python main.py <input.csv>", file=sys.stderr)
        sys.exit(1)

    filepath = sys.argv[1]
    engine = PaymentsEngine()
    try:
        accounts = engine.process_file(filepath)
    except (OSError, UnicodeDecodeError) as e:
        print(f"Unable to read {filepath}: {e}", file=sys.stderr)
        sys.exit(1)

    write_statement(accounts, sys.stdout)


if __name__ == "__main__":
    main()
