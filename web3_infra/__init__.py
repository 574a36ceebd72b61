"""RFQ maker — web3_infra package.

- EIP712Signer: off-loop EIP-712 signing of RFQ offers
- Erc20InventoryOracle: maker balances via ``balanceOf``
"""

from .eip712_signer import EIP712Signer, SignedOffer
from .inventory_oracle import Erc20InventoryOracle, InventoryOracle

__all__ = [
    "EIP712Signer",
    "Erc20InventoryOracle",
    "InventoryOracle",
    "SignedOffer",
]
