"""Content fingerprint used to tell a real edit from a re-render."""

import hashlib


def _coordinate(value: float) -> str:
    # +0.0 folds -0.0 into 0.0 so both format identically
    return f"{round(value, 2) + 0.0:.2f}"


def fingerprint(content: str, style: str, x: float, y: float) -> str:
    """Digest of text, style label and position rounded to 2 decimals.

    Width, height and font size are left out: reflowed text changes its box
    without being edited.
    """
    payload = f"{content}|{style}|{_coordinate(x)}|{_coordinate(y)}"
    return hashlib.sha256(payload.encode("utf-8")).hexdigest()
