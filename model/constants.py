import os


def invariant_checks_enabled() -> bool:
    """``TABLE_CHECK_INVARIANTS`` turns on grid validation after every change block."""
    return os.getenv("TABLE_CHECK_INVARIANTS", "false").strip().lower() in ("1", "true", "yes")
