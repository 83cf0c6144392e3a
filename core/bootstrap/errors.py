"""
POS Bootstrap — Errors
========================
"""


class LedgerInvariantError(Exception):
    """
    Raised when a store snapshot breaks a ledger law (balance or
    receipt bounds). Carries every violation found, not just the first.
    """

    def __init__(self, violations):
        self.violations = tuple(violations)
        super().__init__(
            "POS LEDGER INVARIANT FAILURE — "
            + "; ".join(v.detail for v in self.violations)
        )
