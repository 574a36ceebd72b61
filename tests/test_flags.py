"""Tests for strategy/flags.py."""

from __future__ import annotations

import pytest

from strategy.flags import FLAG_BITS, OfferFlag, decode_flags, encode_flags, router_flags


class TestEncodeFlags:

    def test_empty_is_zero(self):
        assert encode_flags([]) == 0

    def test_contract_sender_is_bit_255(self):
        assert encode_flags([OfferFlag.ALLOW_CONTRACT_SENDER]) == 1 << 255

    def test_partial_fill_is_bit_254(self):
        assert encode_flags([OfferFlag.ALLOW_PARTIAL_FILL]) == 1 << 254

    def test_bits_are_additive(self):
        both = encode_flags([OfferFlag.ALLOW_CONTRACT_SENDER, OfferFlag.ALLOW_PARTIAL_FILL])
        assert both == (1 << 255) | (1 << 254)

    def test_duplicates_are_idempotent(self):
        flags = [OfferFlag.ALLOW_PARTIAL_FILL, OfferFlag.ALLOW_PARTIAL_FILL]
        assert encode_flags(flags) == 1 << 254

    def test_fits_uint256(self):
        assert encode_flags(FLAG_BITS) < 2**256


class TestDecodeFlags:

    @pytest.mark.parametrize("flags", [
        frozenset(),
        frozenset({OfferFlag.ALLOW_CONTRACT_SENDER}),
        frozenset({OfferFlag.ALLOW_PARTIAL_FILL}),
        frozenset({OfferFlag.ALLOW_CONTRACT_SENDER, OfferFlag.ALLOW_PARTIAL_FILL}),
    ])
    def test_inverse_of_encode(self, flags):
        assert decode_flags(encode_flags(flags)) == flags

    def test_unknown_bits_rejected(self):
        with pytest.raises(ValueError, match="unknown offer flag"):
            decode_flags(1)


class TestRouterFlags:

    def test_without_partial_fill(self):
        assert router_flags(False) == {OfferFlag.ALLOW_CONTRACT_SENDER}

    def test_with_partial_fill(self):
        assert router_flags(True) == {
            OfferFlag.ALLOW_CONTRACT_SENDER,
            OfferFlag.ALLOW_PARTIAL_FILL,
        }
