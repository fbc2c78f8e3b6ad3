"""Tests for turning import rows into canonical job records."""

from jobtracker.core.models import JobStatus, PaymentMethod
from jobtracker.engine.transform import extract_payment_method, transform_row


def test_transform_strips_labels_and_extracts_payment_method() -> None:
    """Labelled cells, mis-encoded currency and a payment token in the notes."""
    record = transform_row(
        {
            "Name": "Name: John Smith",
            "Address": "1 Rd",
            "Price": "Price: Â£45.00",
            "Notes": "Paid via Cash, gate code 123",
        }
    )
    if record is None:
        msg = "Row should have been accepted"
        raise AssertionError(msg)
    expected = {
        "name": "John Smith",
        "price": "45.00",
        "payment_method": PaymentMethod.CASH,
        "notes": "Paid via , gate code 123",
        "status": JobStatus.PENDING,
        "balance": "0.00",
        "services": "Window Cleaning",
    }
    for field, value in expected.items():
        if getattr(record, field) != value:
            msg = f"{field}: expected {value!r}, got {getattr(record, field)!r}"
            raise AssertionError(msg)


def test_positive_balance_marks_debtor() -> None:
    """A positive balance starts the job as a debtor and the name falls back to the address."""
    record = transform_row({"Address": "1 Rd", "Balance": "30"})
    if record is None:
        msg = "Row with an address should be accepted"
        raise AssertionError(msg)
    if record.status is not JobStatus.DEBTOR or record.balance != "30.00":
        msg = f"Expected debtor with balance 30.00, got {record.status} / {record.balance}"
        raise AssertionError(msg)
    if record.name != "1 Rd":
        msg = f"Name should fall back to the address, got {record.name!r}"
        raise AssertionError(msg)


def test_name_falls_back_to_first_address_segment() -> None:
    """Only the part of the address before the first comma is used."""
    record = transform_row({"Site Address": "12 High Street, Leeds, LS1"})
    if record is None or record.name != "12 High Street":
        msg = f"Unexpected fallback name: {record!r}"
        raise AssertionError(msg)


def test_rows_without_name_or_address_are_rejected() -> None:
    """Blank rows and placeholder names do not become jobs."""
    for row in ({"Name": "", "Address": ""}, {"Name": "Name:", "Price": "40"}, {"Name": "Unknown"}, {}):
        if transform_row(row) is not None:
            msg = f"Row should be rejected: {row}"
            raise AssertionError(msg)


def test_invalid_price_and_balance_become_zero() -> None:
    """Malformed amounts never raise."""
    record = transform_row({"Customer": "Jane", "Cost": "TBC", "Outstanding": "n/a"})
    if record is None:
        msg = "Row should be accepted"
        raise AssertionError(msg)
    if record.price != "0.00" or record.balance != "0.00" or record.status is not JobStatus.PENDING:
        msg = f"Unexpected amounts: price={record.price} balance={record.balance} status={record.status}"
        raise AssertionError(msg)


def test_frequency_is_resolved_strictly() -> None:
    """Frequency only comes from an exactly named column."""
    record = transform_row({"Name": "Jane", "Freq of Service": "4 Weeks"})
    if record is None or record.frequency != "":
        msg = f"Frequency should not be taken from 'Freq of Service': {record!r}"
        raise AssertionError(msg)
    record = transform_row({"Name": "Jane", "Job Frequency": "4 Weeks"})
    if record is None or record.frequency != "4 Weeks":
        msg = f"Frequency should come from 'Job Frequency': {record!r}"
        raise AssertionError(msg)


def test_due_date_kept_raw_for_display() -> None:
    """The raw due text is retained; an empty one means ad hoc."""
    record = transform_row({"Name": "Jane", "When work is due": "05/03/2024"})
    if record is None or record.next_due != "05/03/2024":
        msg = f"Raw due date not retained: {record!r}"
        raise AssertionError(msg)
    record = transform_row({"Name": "Jane"})
    if record is None or record.next_due is not None:
        msg = f"Missing due date should be None: {record!r}"
        raise AssertionError(msg)


def test_bank_transfer_takes_priority_over_card() -> None:
    """The longer token is checked first and removed everywhere, case-insensitively."""
    method, notes = extract_payment_method("bank transfer monthly; card declined once. BANK TRANSFER ref 9")
    if method is not PaymentMethod.BANK_TRANSFER:
        msg = f"Expected Bank Transfer, got {method}"
        raise AssertionError(msg)
    if notes != "monthly; card declined once.  ref 9":
        msg = f"Unexpected remaining notes: {notes!r}"
        raise AssertionError(msg)


def test_notes_without_token_pass_through() -> None:
    """Notes without a payment token are kept as-is (label stripped)."""
    record = transform_row({"Name": "Jane", "Comments": "Notes: side gate"})
    if record is None or record.notes != "side gate" or record.payment_method is not None:
        msg = f"Unexpected notes handling: {record!r}"
        raise AssertionError(msg)


def test_payment_method_and_debt_are_independent() -> None:
    """A payment token in the notes does not cancel a positive balance."""
    record = transform_row({"Name": "Jane", "Notes": "Card", "Debt": "15"})
    if record is None or record.payment_method is not PaymentMethod.CARD or record.status is not JobStatus.DEBTOR:
        msg = f"Both payment method and debtor status should be kept: {record!r}"
        raise AssertionError(msg)
    if record.notes != "":
        msg = f"Token should be removed from notes, got {record.notes!r}"
        raise AssertionError(msg)


def test_overlong_price_does_not_abort_row() -> None:
    """A runaway digit string in the price cell becomes a zero price."""
    job = transform_row({"Name": "Jane", "Price": "1" * 40})
    if job is None or job.price != "0.00":
        msg = f"Expected Jane with a zero price, got {job}"
        raise AssertionError(msg)
