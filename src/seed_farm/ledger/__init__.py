"""Read and write access to the farm contracts."""

from .client import LedgerClient, make_web3
from .signer import LedgerSigner, SubmittedTransaction, TxStatus

__all__ = [
    "LedgerClient",
    "LedgerSigner",
    "SubmittedTransaction",
    "TxStatus",
    "make_web3",
]
