"""Unit tests for SQL literals and row identities."""

from __future__ import annotations

from datetime import date, datetime

import pytest

from flybook_db.domain.value_objects import RowId, SqlLiteral, TemporaryRowId, quote_string


@pytest.mark.unit
class TestSqlLiteral:
    """Tests for SqlLiteral rendering."""

    def test_quote_string_doubles_quotes(self) -> None:
        assert quote_string("O'Hare") == "'O''Hare'"
        assert quote_string("") == "''"

    def test_string_escaped_at_staging(self) -> None:
        literal = SqlLiteral.from_value("it's; DROP TABLE Users; --")

        assert literal.sql == "'it''s; DROP TABLE Users; --'"
        assert literal.value == "it's; DROP TABLE Users; --"
        assert not literal.is_expression

    def test_numbers(self) -> None:
        assert SqlLiteral.from_value(42).sql == "42"
        assert SqlLiteral.from_value(2.5).sql == "2.5"
        assert SqlLiteral.from_value(True).sql == "1"

    @pytest.mark.parametrize("value", [float("inf"), float("-inf"), float("nan")])
    def test_non_finite_float_rejected(self, value: float) -> None:
        with pytest.raises(ValueError):
            SqlLiteral.of_float(value)
        with pytest.raises(ValueError):
            SqlLiteral.from_value(value)

    def test_null(self) -> None:
        literal = SqlLiteral.from_value(None)

        assert literal.is_null
        assert literal.sql == "NULL"
        assert literal.value is None

    def test_expression_is_not_quoted(self) -> None:
        literal = SqlLiteral.expression("strftime('%s','now')")

        assert literal.sql == "strftime('%s','now')"
        assert literal.is_expression
        assert literal.value is None
        assert not literal.is_null

    def test_expression_named_null_is_not_null(self) -> None:
        assert not SqlLiteral.expression("NULL").is_null

    def test_empty_expression_rejected(self) -> None:
        with pytest.raises(ValueError):
            SqlLiteral.expression("  ")

    def test_literal_passes_through(self) -> None:
        literal = SqlLiteral.of_int(3)

        assert SqlLiteral.from_value(literal) is literal

    def test_dates_render_as_iso_strings(self) -> None:
        assert SqlLiteral.from_value(date(2013, 5, 1)).sql == "'2013-05-01'"
        assert SqlLiteral.from_value(datetime(2013, 5, 1, 12, 30)).sql == "'2013-05-01T12:30:00'"

    def test_bytes_render_as_blob(self) -> None:
        assert SqlLiteral.from_value(b"\x01\xff").sql == "X'01ff'"

    def test_unsupported_type(self) -> None:
        with pytest.raises(TypeError):
            SqlLiteral.from_value(object())


@pytest.mark.unit
class TestRowIdentities:
    """Tests for RowId and TemporaryRowId."""

    def test_row_id_equality(self) -> None:
        assert RowId(1) == RowId(1)
        assert RowId("andkon") != RowId("konkon")
        assert hash(RowId(1)) == hash(RowId(1))

    def test_temporary_never_equals_row_id(self) -> None:
        assert TemporaryRowId(1) != RowId(1)

    def test_row_id_requires_key(self) -> None:
        with pytest.raises(ValueError):
            RowId(None)

    def test_temporary_serial_positive(self) -> None:
        with pytest.raises(ValueError):
            TemporaryRowId(0)
