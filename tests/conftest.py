"""Shared fixtures for the quoting-core tests."""

from __future__ import annotations

import pytest

from config.chains import DEFAULT_CHAINS
from web3_infra.eip712_signer import EIP712Signer

from .helpers import MAKER_KEY


@pytest.fixture
def signer() -> EIP712Signer:
    s = EIP712Signer(private_key=MAKER_KEY, chains=DEFAULT_CHAINS, max_workers=1)
    s.start()
    yield s
    s.shutdown()
