"""Tests for resolving semantic fields from arbitrary spreadsheet headers."""

from jobtracker.engine.columns import JobField, aliases_for, resolve_column


def test_exact_alias_match() -> None:
    """A header equal to an alias is found regardless of case."""
    result = resolve_column({"Job Price": "£45.00"}, "price")
    if result != "£45.00":
        msg = f"Expected '£45.00', got {result!r}"
        raise AssertionError(msg)
    result = resolve_column({"CUSTOMER NAME": "Jane"}, JobField.NAME)
    if result != "Jane":
        msg = f"Expected case-insensitive match, got {result!r}"
        raise AssertionError(msg)


def test_substring_fallback() -> None:
    """Headers containing an alias match when not strict."""
    result = resolve_column({"Total Due": "45"}, "price", strict=False)
    if result != "45":
        msg = f"Expected substring match on 'Total Due', got {result!r}"
        raise AssertionError(msg)


def test_strict_skips_substring_fallback() -> None:
    """Strict resolution only accepts exact header matches."""
    row = {"Freq of Service": "4 Weeks"}
    if resolve_column(row, JobField.FREQUENCY, strict=True) != "":
        msg = "Strict resolution should not match 'Freq of Service'"
        raise AssertionError(msg)
    if resolve_column(row, JobField.FREQUENCY) != "4 Weeks":
        msg = "Non-strict resolution should match 'Freq of Service'"
        raise AssertionError(msg)


def test_missing_column_is_empty() -> None:
    """No matching column resolves to empty text."""
    if resolve_column({}, "price") != "":
        msg = "Empty row should resolve to ''"
        raise AssertionError(msg)
    if resolve_column({"Colour": "red"}, "price") != "":
        msg = "Unrelated column should not match"
        raise AssertionError(msg)


def test_alias_priority_order() -> None:
    """Earlier aliases win over later ones, whatever the column order."""
    row = {"Total": "99", "Cost": "20", "Price": "10"}
    result = resolve_column(row, "price")
    if result != "10":
        msg = f"'Price' should outrank 'Cost' and 'Total', got {result!r}"
        raise AssertionError(msg)


def test_empty_cell_falls_through_to_next_alias() -> None:
    """An alias whose column is empty does not stop the search."""
    row = {"Price": "", "Cost": "  ", "Fee": "12"}
    result = resolve_column(row, "price")
    if result != "12":
        msg = f"Expected fallthrough to 'Fee', got {result!r}"
        raise AssertionError(msg)


def test_exact_pass_runs_before_substring_pass() -> None:
    """An exact match on a low-priority alias beats a substring match on a higher one."""
    row = {"Price List Ref": "A7", "Rate": "30"}
    result = resolve_column(row, "price")
    if result != "30":
        msg = f"Exact 'Rate' should beat substring 'Price List Ref', got {result!r}"
        raise AssertionError(msg)


def test_blank_headers_are_ignored() -> None:
    """A blank header never matches by substring."""
    if resolve_column({"": "stray"}, "name") != "":
        msg = "Blank header should not match"
        raise AssertionError(msg)


def test_row_is_not_mutated() -> None:
    """Resolution is a pure lookup."""
    row = {"Name": "  Jane  ", "Address": "1 Rd"}
    snapshot = dict(row)
    resolve_column(row, "name")
    if row != snapshot:
        msg = "resolve_column modified its input"
        raise AssertionError(msg)


def test_aliases_for_price_in_priority_order() -> None:
    """The price alias list is tried in its declared order."""
    expected = ["Price", "Cost", "Amount", "Fee", "Charge", "Rate", "Job Price", "Total"]
    if aliases_for("price") != expected:
        msg = f"Unexpected price aliases: {aliases_for('price')}"
        raise AssertionError(msg)
