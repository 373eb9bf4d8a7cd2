import csv
from decimal import Decimal
from typing import Dict, TextIO

from models import ClientAccount

FOUR_PLACES = Decimal("0.0001")

HEADER = ("client", "available", "held", "total", "locked")


def format_decimal(value: Decimal) -> str:
    """Format decimal with exactly 4 decimal places."""
    return f"{value.quantize(FOUR_PLACES):f}"


def write_statement(accounts: Dict[int, ClientAccount], out: TextIO) -> None:
    """Write one CSV row per account, ordered by client id."""
    writer = csv.writer(out, lineterminator="\n")
    writer.writerow(HEADER)
    for client_id in sorted(accounts.keys()):
        account = accounts[client_id]
        writer.writerow((
            client_id,
            format_decimal(account.available),
            format_decimal(account.held),
            format_decimal(account.total),
            str(account.locked).lower(),
        ))
