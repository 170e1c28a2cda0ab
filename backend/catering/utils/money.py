"""Money helpers. Amounts are stored as integer centavos."""

import random
import string
import time

TAX_RATE = 0.12  # 12% VAT
TAX_RATE_PERCENT = 12

CURRENCY_SYMBOL = "₱"


def to_cents(amount: float) -> int:
    """Convert a peso amount to centavos."""
    return int(round(float(amount) * 100))


def from_cents(cents) -> float:
    """Convert centavos back to a peso amount for responses."""
    return (cents or 0) / 100.0


def compute_tax(subtotal_cents: int) -> int:
    """Tax on a subtotal, rounded half-up to the centavo."""
    return (subtotal_cents * TAX_RATE_PERCENT + 50) // 100


def compute_totals(subtotal_cents: int) -> dict:
    """Return subtotal, tax and grand total (all centavos) for a receipt."""
    tax_cents = compute_tax(subtotal_cents)
    return {
        "subtotal": subtotal_cents,
        "tax_rate": TAX_RATE,
        "tax_amount": tax_cents,
        "total_amount": subtotal_cents + tax_cents,
    }


def format_receipt_number(number: int) -> str:
    """Printable receipt number, e.g. 7 -> R000007."""
    return f"R{number:06d}"


def generate_code(prefix: str) -> str:
    """
    Human-readable display identifier: PREFIX-<epoch ms>-<5 upper alnum>.

    Example: BK-1760781234567-X7K2Q
    """
    suffix = "".join(random.choices(string.ascii_uppercase + string.digits, k=5))
    return f"{prefix}-{int(time.time() * 1000)}-{suffix}"
