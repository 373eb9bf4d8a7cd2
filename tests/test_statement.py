import sys
import os
import io
from decimal import Decimal

sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", "src"))

from models import ClientAccount
from statement import format_decimal, write_statement


class TestFormatDecimal:
    def test_pads_to_four_places(self):
        assert format_decimal(Decimal("1.5")) == "1.5000"
        assert format_decimal(Decimal("0")) == "0.0000"

    def test_rounds_extra_places(self):
        assert format_decimal(Decimal("2.123456")) == "2.1235"

    def test_negative_values(self):
        assert format_decimal(Decimal("-30")) == "-30.0000"

    def test_no_scientific_notation(self):
        assert format_decimal(Decimal("1E+3")) == "1000.0000"


class TestWriteStatement:
    def test_rows_sorted_by_client(self):
        accounts = {
            2: ClientAccount(client_id=2, available=Decimal("2")),
            1: ClientAccount(client_id=1, available=Decimal("1.5"), held=Decimal("0.25"), locked=True),
        }
        out = io.StringIO()
        write_statement(accounts, out)

        assert out.getvalue().splitlines() == [
            "client,available,held,total,locked",
            "1,1.5000,0.2500,1.7500,true",
            "2,2.0000,0.0000,2.0000,false",
        ]

    def test_empty_statement_has_header(self):
        out = io.StringIO()
        write_statement({}, out)
        assert out.getvalue() == "client,available,held,total,locked\n"
