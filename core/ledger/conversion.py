"""
ConversionEngine

자산 간 환전 처리:
1. 요청 검증 (ConversionRequest 생성 시)
2. 잔고 확인 (환율 조회 전, 불필요한 외부 호출 방지)
3. 환율 결정 (고정 환율표 또는 시세 기반 교차 환율)
4. 수수료 계산 (수령액 gross 기준)
5. 출금 → 입금을 하나의 트랜잭션으로 처리 (Asset 순서로 락 획득)
"""

import logging
from decimal import Decimal
from typing import Mapping

from core.errors import (
    FetchExhaustedError,
    InsufficientFundsError,
    InvalidRequestError,
    InvalidResponseError,
    RateUnavailableError,
)
from core.ledger.fees import FeeSchedule
from core.ledger.models import ConversionRequest, ConversionResult
from core.ledger.wallet import Wallet
from core.pricing.rates import IRateSource
from core.types import Asset

logger = logging.getLogger(__name__)


class ConversionEngine:
    """환전 엔진

    Args:
        wallets: 자산별 지갑 (한 계정 소유)
        fee_schedule: 수수료 스케줄 (참조만, 소유하지 않음)
        rate_source: 환율 소스

    사용 예시:
    ```python
    engine = ConversionEngine(wallets, FeeSchedule(), FixedRateTable())

    result = await engine.convert(
        ConversionRequest.create("BTC", "ETH", "0.5")
    )
    ```
    """

    def __init__(
        self,
        wallets: Mapping[Asset, Wallet],
        fee_schedule: FeeSchedule,
        rate_source: IRateSource,
    ):
        self.wallets = wallets
        self.fee_schedule = fee_schedule
        self.rate_source = rate_source

    async def convert(self, request: ConversionRequest) -> ConversionResult:
        """환전 실행

        Args:
            request: 환전 요청

        Returns:
            환전 결과

        Raises:
            InvalidRequestError: 지갑이 없는 자산
            InsufficientFundsError: 잔고 부족 (검증 시점 또는 커밋 시점)
            RateUnavailableError: 환율 결정 실패
            FetchCancelledError: 시세 조회 취소
        """
        from_wallet = self._wallet(request.from_asset)
        to_wallet = self._wallet(request.to_asset)

        if not from_wallet.can_cover(request.amount):
            raise InsufficientFundsError(
                request.from_asset, from_wallet.balance, request.amount
            )

        rate = await self._resolve_rate(request)

        gross_received = request.amount * rate
        fee = self.fee_schedule.exchange_fee(gross_received)
        net_received = gross_received - fee

        self._commit(from_wallet, to_wallet, request.amount, net_received)

        logger.info(
            f"환전 완료: {request.from_asset.value}→{request.to_asset.value}",
            extra={
                "debited": str(request.amount),
                "credited": str(net_received),
                "rate": str(rate),
                "fee": str(fee),
            },
        )

        return ConversionResult(
            from_asset=request.from_asset,
            to_asset=request.to_asset,
            debited=request.amount,
            credited=net_received,
            effective_rate=rate,
            fee_charged=fee,
            gross_received=gross_received,
        )

    def _wallet(self, asset: Asset) -> Wallet:
        wallet = self.wallets.get(asset)
        if wallet is None:
            raise InvalidRequestError(f"{asset.value} 지갑이 없습니다")
        return wallet

    async def _resolve_rate(self, request: ConversionRequest) -> Decimal:
        """환율 결정 (실패 시 RateUnavailableError로 통일)"""
        try:
            rate = await self.rate_source.get_rate(request.from_asset, request.to_asset)
        except (FetchExhaustedError, InvalidResponseError) as e:
            raise RateUnavailableError(request.from_asset, request.to_asset, str(e)) from e

        if rate <= 0:
            raise RateUnavailableError(
                request.from_asset, request.to_asset, f"0 이하 환율: {rate}"
            )
        return rate

    def _commit(
        self,
        from_wallet: Wallet,
        to_wallet: Wallet,
        debit: Decimal,
        credit: Decimal,
    ) -> None:
        """출금 + 입금 (단일 트랜잭션)

        교착 방지를 위해 Asset 정의 순서로 락 획득.
        출금 실패 시 입금 지갑은 변경되지 않음.
        """
        first, second = sorted((from_wallet, to_wallet), key=lambda w: w.asset.ordinal)

        with first.lock, second.lock:
            from_wallet.withdraw(debit)
            try:
                to_wallet.deposit(credit)
            except Exception:
                from_wallet.deposit(debit)
                raise
