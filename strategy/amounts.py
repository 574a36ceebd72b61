"""AmountCalculator — taker/maker base-unit amounts bounded by inventory.

Human-unit arithmetic runs in an 80-digit ``decimal`` context and every
human → base-unit conversion truncates (``ROUND_DOWN``), so the maker never
offers a fraction of a base unit it has not priced.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import ROUND_DOWN, Context, Decimal, InvalidOperation

import structlog

from core.exceptions import AmountOutOfRangeError, UnquotablePairError
from models.offer import UINT256_MAX
from models.quote import QuoteRequest
from strategy.quoter_config import QuoterConfig
from web3_infra.inventory_oracle import InventoryOracle

logger = structlog.get_logger("strategy.amounts")

_ZERO = Decimal("0")
_ONE = Decimal("1")

# Wide enough for any uint256 amount at 18 decimals.
DECIMAL_CONTEXT = Context(prec=80, rounding=ROUND_DOWN)


# ── Unit conversion ──────────────────────────────────────────────────


def round_down(value: Decimal, decimals: int) -> Decimal:
    """Truncate ``value`` to ``decimals`` fractional digits (toward zero).

    Raises ``AmountOutOfRangeError`` when the result needs more digits than
    ``DECIMAL_CONTEXT`` carries.
    """
    quantum = _ONE.scaleb(-decimals)
    try:
        return value.quantize(quantum, rounding=ROUND_DOWN, context=DECIMAL_CONTEXT)
    except InvalidOperation as exc:
        raise AmountOutOfRangeError(
            f"{value} does not fit {DECIMAL_CONTEXT.prec} digits at {decimals} decimals",
            value=value,
        ) from exc


def to_base_units(value: Decimal, decimals: int) -> int:
    """Human amount → integer base units, truncating extra precision."""
    return int(round_down(value, decimals).scaleb(decimals, context=DECIMAL_CONTEXT))


def from_base_units(amount: int, decimals: int) -> Decimal:
    """Integer base units → exact human amount."""
    return Decimal(amount).scaleb(-decimals, context=DECIMAL_CONTEXT)


# ── Calculator ───────────────────────────────────────────────────────


@dataclass(frozen=True)
class AmountQuote:
    """Result of one amount computation, all in base units."""

    taker_amount: int
    maker_amount: int
    maker_balance: int
    clamped: bool


class AmountCalculator:
    """Derives offer amounts from a request, a fill percentage and the rate table.

    Each call performs exactly one inventory lookup for the maker-side
    token (wrapped if the request names the native coin).
    """

    def __init__(
        self,
        config: QuoterConfig,
        oracle: InventoryOracle,
        maker_address: str,
    ) -> None:
        self._config = config
        self._oracle = oracle
        self._maker = maker_address

    async def compute_amounts(
        self,
        request: QuoteRequest,
        fill_percentage: Decimal = _ONE,
    ) -> AmountQuote:
        """Compute (possibly clamped) amounts for ``request``.

        Raises
        ------
        UnquotablePairError
            If the rate table has no entry for the pair.  Raised before any
            inventory lookup.
        AmountOutOfRangeError
            If an amount overflows the decimal context or a uint256.
        OracleError
            If the balance lookup fails.
        """
        chain_id = request.chain_id
        from_token = request.from_token
        to_token = request.to_token

        rate = self._config.rates.rate(chain_id, from_token.address, to_token.address)
        if rate <= _ZERO:
            raise UnquotablePairError(chain_id, from_token.address, to_token.address)

        taker_human = round_down(
            DECIMAL_CONTEXT.multiply(request.sell_amount, fill_percentage),
            from_token.decimals,
        )
        taker_amount = to_base_units(taker_human, from_token.decimals)

        maker_human = round_down(
            DECIMAL_CONTEXT.multiply(taker_human, rate),
            to_token.decimals,
        )
        maker_amount = to_base_units(maker_human, to_token.decimals)
        if maker_amount > UINT256_MAX:
            raise AmountOutOfRangeError("maker amount exceeds uint256", value=maker_amount)

        maker_token = self._config.chains.wrap(chain_id, to_token.address)
        balance = await self._oracle.get_balance(chain_id, maker_token, self._maker)

        clamped = maker_amount > balance
        if clamped:
            inverse = DECIMAL_CONTEXT.divide(_ONE, rate)
            taker_human = round_down(
                DECIMAL_CONTEXT.multiply(from_base_units(balance, to_token.decimals), inverse),
                from_token.decimals,
            )
            taker_amount = to_base_units(taker_human, from_token.decimals)
            maker_amount = balance
            logger.info(
                "amounts.clamped_to_balance",
                chain_id=chain_id,
                maker_token=maker_token,
                balance=balance,
                taker_amount=taker_amount,
            )

        logger.debug(
            "amounts.computed",
            chain_id=chain_id,
            taker_amount=taker_amount,
            maker_amount=maker_amount,
            maker_balance=balance,
            clamped=clamped,
        )
        return AmountQuote(
            taker_amount=taker_amount,
            maker_amount=maker_amount,
            maker_balance=balance,
            clamped=clamped,
        )
