"""Entrypoint — wires the quoting core and serves it over HTTP until signalled."""

from __future__ import annotations

import asyncio
import signal
import sys
from typing import NoReturn

import uvloop

from api.server import QuoteServer
from config.settings import Settings, settings
from core.logger import get_logger, setup_logging
from strategy.amounts import AmountCalculator
from strategy.offer_builder import OfferBuilder
from strategy.quote_engine import QuoteEngine
from strategy.quoter_config import QuoterConfig
from web3_infra.eip712_signer import EIP712Signer
from web3_infra.inventory_oracle import Erc20InventoryOracle

log = get_logger(__name__)


class GracefulShutdown:
    """Tracks shutdown signal and provides a flag for the main loop."""

    def __init__(self) -> None:
        self._should_stop = asyncio.Event()

    @property
    def should_stop(self) -> bool:
        return self._should_stop.is_set()

    def trigger(self) -> None:
        self._should_stop.set()

    async def wait(self) -> None:
        await self._should_stop.wait()


def build_engine(
    cfg: Settings,
    config: QuoterConfig,
    signer: EIP712Signer,
) -> QuoteEngine:
    """Assemble QuoteEngine → OfferBuilder → AmountCalculator."""
    oracle = Erc20InventoryOracle(
        endpoints=cfg.rpc_endpoints(list(config.chains)),
        request_timeout_s=cfg.RPC_TIMEOUT_SECONDS,
        required_chains=config.chains,
    )
    calculator = AmountCalculator(config, oracle, signer.maker_address)
    builder = OfferBuilder(config, calculator, signer.maker_address)
    return QuoteEngine(config, builder, signer)


async def main() -> None:
    """Top-level orchestrator."""
    setup_logging()
    log.info(
        "starting",
        app=settings.APP_NAME,
        env=settings.APP_ENV,
        allow_contract_sender=settings.ALLOW_CONTRACT_SENDER,
        allow_partial_fill=settings.ALLOW_PARTIAL_FILL,
    )

    config = QuoterConfig.from_settings(settings)
    signer = EIP712Signer(
        private_key=settings.MAKER_PRIVATE_KEY,
        chains=config.chains,
        max_workers=settings.SIGNER_MAX_WORKERS,
    )
    engine = build_engine(settings, config, signer)
    log.info("maker_wallet", address=signer.maker_address)

    shutdown = GracefulShutdown()

    loop = asyncio.get_running_loop()
    for sig in (signal.SIGINT, signal.SIGTERM):
        loop.add_signal_handler(sig, lambda s=sig: _handle_signal(s, shutdown))

    try:
        async with signer, QuoteServer(engine, settings.HTTP_HOST, settings.HTTP_PORT):
            await shutdown.wait()
    except Exception:
        log.exception("fatal_error")
        sys.exit(1)

    log.info("shutdown_complete")


def _handle_signal(sig: signal.Signals, shutdown: GracefulShutdown) -> None:
    """Signal handler — sets the shutdown flag."""
    log.info("signal_received", signal=sig.name)
    shutdown.trigger()


def run() -> NoReturn:
    """CLI entry: install uvloop policy and run."""
    uvloop.install()
    asyncio.run(main())
    sys.exit(0)


if __name__ == "__main__":
    run()
