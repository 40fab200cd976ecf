"""Asset ledger error classes."""


class LedgerError(Exception):
    """Base error for ledger operations. A failed batch moves nothing."""

    pass


class InsufficientBalance(LedgerError):
    """Source account holds less than the amount moved."""

    pass


class AccountExists(LedgerError):
    """Account or asset is already open."""

    pass


class UnknownAsset(LedgerError):
    """Instruction references an asset the ledger does not know."""

    pass


class MintAuthorityMismatch(LedgerError):
    """Signer of a mint or burn is not the asset's mint authority."""

    pass
