#!/usr/bin/env python3
"""
시세 확인 스크립트

settings.yaml을 로드하고 CoinGecko에서 자산별 USD 가격을 조회한 뒤,
입력한 보유량 기준 평가액과 교차 환율을 출력.

사용법:
    python scripts/check_prices.py
    python scripts/check_prices.py --holding BTC=0.5 --holding ETH=3
"""

import argparse
import asyncio
import logging
import sys
from decimal import Decimal
from pathlib import Path

# 프로젝트 루트를 Python 경로에 추가
PROJECT_ROOT = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from core.bootstrap import build_runtime
from core.config.loader import load_config
from core.constants import Defaults
from core.errors import LedgerError
from core.logging import setup_logging
from core.types import Asset

logger = logging.getLogger(__name__)


def parse_holding(text: str) -> tuple[Asset, Decimal]:
    """'BTC=0.5' 형식 파싱"""
    symbol, sep, amount = text.partition("=")
    if not sep:
        raise argparse.ArgumentTypeError(f"ASSET=AMOUNT 형식이어야 합니다: {text}")
    try:
        return Asset.parse(symbol), Decimal(amount)
    except (LedgerError, ArithmeticError) as e:
        raise argparse.ArgumentTypeError(str(e)) from e


async def main(settings_path: Path | None, holdings: list[tuple[Asset, Decimal]]) -> int:
    config = load_config(settings_path)
    runtime = build_runtime(config)

    ledger = runtime.open_account(Defaults.ACCOUNT_ID)

    try:
        for asset, amount in holdings:
            ledger.wallets[asset].deposit(amount)

        prices = await runtime.fetcher.fetch_many(list(Asset))

        print("=" * 50)
        print("자산별 USD 가격")
        print("=" * 50)
        for asset, price in prices.items():
            print(f"  {asset.value:<5} ${price:,.2f}")

        print("-" * 50)
        print(f"환전 적용 환율 ({config.pricing.mode.value})")
        for from_asset in Asset:
            for to_asset in Asset:
                if from_asset == to_asset:
                    continue
                rate = await runtime.rate_source.get_rate(from_asset, to_asset)
                print(f"  1 {from_asset.value} = {rate:.8f} {to_asset.value}")

        if holdings:
            total = await ledger.total_value_usd(runtime.fetcher)
            print("-" * 50)
            print(f"보유 자산 평가액: ${total:,.2f}")

        print("=" * 50)
        return 0

    except LedgerError as e:
        logger.error(f"시세 조회 실패: {e}")
        return 1

    finally:
        await runtime.close()


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="자산 시세 및 평가액 확인")
    parser.add_argument(
        "--settings",
        type=Path,
        default=None,
        help="settings.yaml 경로 (기본: config/settings.yaml)",
    )
    parser.add_argument(
        "--holding",
        type=parse_holding,
        action="append",
        default=[],
        help="보유량 (예: BTC=0.5, 여러 번 지정 가능)",
    )
    args = parser.parse_args()

    setup_logging("check_prices")
    sys.exit(asyncio.run(main(args.settings, args.holding)))
