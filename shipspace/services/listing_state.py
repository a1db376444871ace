from __future__ import annotations

PENDING = "pending"
APPROVED = "approved"
REJECTED = "rejected"

LISTING_STATUSES = (PENDING, APPROVED, REJECTED)
TERMINAL_STATUSES = frozenset({APPROVED, REJECTED})

OFFER = "offer"
REQUEST = "request"
LISTING_KINDS = (OFFER, REQUEST)


def normalize_status(status: str) -> str:
    return str(status or "").lower().strip()


def is_terminal(status: str) -> bool:
    return status in TERMINAL_STATUSES


def is_publicly_visible(status: str) -> bool:
    # only moderated-in listings ever leave the admin/owner views
    return status == APPROVED


def can_transition(current: str, target: str) -> bool:
    return current == PENDING and target in TERMINAL_STATUSES
