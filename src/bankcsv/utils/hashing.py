"""Transaction fingerprinting for deduplication.

Generates stable SHA-256 hashes from the fields that identify a
transaction across repeated exports. Merchant and status are left out
because banks change them between exports (e.g. pending -> posted).
"""

import hashlib
import re
from decimal import Decimal, ROUND_HALF_UP

FIELD_SEPARATOR = "\x1f"
_CENTS = Decimal("0.01")


def normalize_description(description: str) -> str:
    """Trim, lowercase and collapse inner whitespace."""
    return re.sub(r"\s+", " ", (description or "").strip().lower())


def normalize_hash_amount(amount: Decimal | str | int) -> str:
    """Render an amount as an unsigned two-decimal string."""
    return str(abs(Decimal(str(amount))).quantize(_CENTS, rounding=ROUND_HALF_UP))


def compute_transaction_hash(
    date: str, amount: Decimal | str | int, description: str, occurrence: int = 1
) -> str:
    """Generate a stable transaction fingerprint.

    Identical transactions inside one file (two coffees on the same day)
    are told apart by their occurrence number. The first occurrence hashes
    without it, so its fingerprint does not depend on later rows.

    Args:
        date: Transaction date as ISO string (e.g., "2024-01-15")
        amount: Transaction amount
        description: Transaction description (will be normalized)
        occurrence: 1-based count of this transaction within its file

    Returns:
        SHA-256 hex digest string
    """
    fields = [date.strip(), normalize_hash_amount(amount), normalize_description(description)]
    if occurrence > 1:
        fields.append(f"#{occurrence}")
    parts = FIELD_SEPARATOR.join(fields)
    return hashlib.sha256(parts.encode("utf-8")).hexdigest()
