"""
Run one scripted payment end to end without a UI.

    python -m payment_demo --amount 9.99 --description Coffee --merchant "Roasters Inc"
"""

import argparse
import asyncio
import logging
import sys
from typing import List, Optional

from payment_demo.core.logging import setup_logging
from payment_demo.core.stage import Stage, StageSignal
from payment_demo.core.transaction import PaymentStatus, TransactionOutcome
from payment_demo.facade import PaymentFramework
from payment_demo.overlay.banner import BannerOverlayNotifier
from payment_demo.presentation.headless import HeadlessSurface
from payment_demo.settings import Settings

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Simulate an in-app payment confirmation flow.")
    parser.add_argument("--amount", default="9.99", help="Amount to charge (default: 9.99).")
    parser.add_argument("--description", default="Coffee", help="Item description.")
    parser.add_argument("--merchant", default="Roasters Inc", help="Merchant name.")
    parser.add_argument("--cancel", action="store_true", help="Cancel at the summary instead of confirming.")
    parser.add_argument(
        "--no-context",
        action="store_true",
        help="Pretend there is no window to present into.",
    )
    parser.add_argument(
        "--busy-attempts",
        type=int,
        default=0,
        help="Number of summary presentations the surface rejects as busy before accepting.",
    )
    parser.add_argument(
        "--reply-delay",
        type=float,
        default=0.5,
        help="Seconds the scripted user takes to answer each screen.",
    )
    return parser


async def run_demo(args: argparse.Namespace, settings: Settings) -> TransactionOutcome:
    surface = HeadlessSurface(
        autopilot={
            Stage.SUMMARY: StageSignal.CANCELLED if args.cancel else StageSignal.CONFIRMED,
            Stage.SUCCESS: StageSignal.ACKNOWLEDGED,
        },
        reply_delay=args.reply_delay,
    )
    surface.available = not args.no_context
    surface.busy_attempts = args.busy_attempts
    notifier = BannerOverlayNotifier(display_seconds=settings.get_banner_seconds())

    framework = PaymentFramework.create(surface, notifier, settings=settings)
    session = framework.start_payment(args.amount, args.description, args.merchant)
    outcome = await session.wait()

    if outcome.succeeded:
        # Let the banner come up before the loop closes.
        await asyncio.sleep(settings.get_announce_delay_seconds())
    return outcome


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging()
    settings = Settings()
    outcome = asyncio.run(run_demo(args, settings))
    print(outcome.model_dump_json(indent=2))
    return 0 if outcome.status is not PaymentStatus.FAILED else 1


if __name__ == "__main__":
    sys.exit(main())
