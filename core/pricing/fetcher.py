"""
RateFetcher

외부 시세 제공자에서 자산 가격을 조회하고 RateCache에 저장.

- 캐시가 유효하면 제공자를 호출하지 않음
- 일시적 실패(전송 에러, 시도 타임아웃)는 지수 백오프로 재시도 (1s, 2s, ...)
- 잘못된 응답은 재시도하지 않고 즉시 InvalidResponseError
- 자산당 최대 하나의 조회만 진행 (동시 요청은 같은 조회 결과를 공유)
- cancel()로 시도 사이에서 취소 가능 (캐시는 변경되지 않음)
"""

import asyncio
import logging
from decimal import Decimal
from typing import Awaitable, Callable

from adapters.errors import ProviderResponseError, ProviderTransportError
from adapters.interfaces import IQuoteProvider
from core.constants import RetryDefaults
from core.domain.state_machines import FetchStateMachine
from core.errors import (
    FetchCancelledError,
    FetchExhaustedError,
    InvalidRequestError,
    InvalidResponseError,
    TransientFetchError,
)
from core.pricing.cache import RateCache
from core.types import Asset, FetchState
from core.utils.amounts import to_decimal

logger = logging.getLogger(__name__)


class RateFetcher:
    """시세 조회기

    Args:
        provider: 시세 제공자
        cache: 시세 캐시 (프로세스 내 공유)
        max_attempts: 최대 시도 횟수 (기본 3)
        initial_backoff: 첫 백오프 (초, 기본 1.0)
        backoff_multiplier: 백오프 배수 (기본 2)
        attempt_timeout: 시도당 타임아웃 (초, 기본 10.0)
        sleep: 백오프 대기 함수 (테스트에서 교체)

    사용 예시:
    ```python
    fetcher = RateFetcher(provider=CoinGeckoQuoteProvider(), cache=RateCache())

    price = await fetcher.fetch_with_retry(Asset.BTC)
    ```
    """

    def __init__(
        self,
        provider: IQuoteProvider,
        cache: RateCache,
        max_attempts: int = RetryDefaults.MAX_ATTEMPTS,
        initial_backoff: float = RetryDefaults.INITIAL_BACKOFF_SEC,
        backoff_multiplier: int = RetryDefaults.BACKOFF_MULTIPLIER,
        attempt_timeout: float = RetryDefaults.ATTEMPT_TIMEOUT_SEC,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        if max_attempts < 1:
            raise ValueError(f"max_attempts는 1 이상이어야 합니다: {max_attempts}")

        self.provider = provider
        self.cache = cache
        self.max_attempts = max_attempts
        self.initial_backoff = initial_backoff
        self.backoff_multiplier = backoff_multiplier
        self.attempt_timeout = attempt_timeout
        self._sleep = sleep

        # 자산별 진행 중 조회 (coalescing) 및 취소 토큰
        self._in_flight: dict[Asset, asyncio.Task[Decimal]] = {}
        self._cancel_tokens: dict[Asset, asyncio.Event] = {}
        # 자산별 마지막 조회의 상태 머신
        self._machines: dict[Asset, FetchStateMachine] = {}

    async def fetch_with_retry(self, asset: Asset) -> Decimal:
        """자산 가격 조회 (캐시 우선)

        Args:
            asset: 자산

        Returns:
            USD 가격

        Raises:
            FetchExhaustedError: 재시도 소진
            InvalidResponseError: 잘못된 응답
            FetchCancelledError: cancel()로 취소됨
        """
        entry = self.cache.get_fresh(asset)
        if entry is not None:
            logger.debug(f"시세 캐시 히트: {asset.value}")
            return entry.price

        task = self._in_flight.get(asset)
        if task is None:
            token = asyncio.Event()
            task = asyncio.get_running_loop().create_task(self._run(asset, token))
            self._in_flight[asset] = task
            self._cancel_tokens[asset] = token
            task.add_done_callback(lambda t: self._clear_in_flight(asset, t))
        else:
            logger.debug(f"진행 중인 시세 조회에 합류: {asset.value}")

        # 대기자 하나가 취소되어도 공유 조회는 계속 진행
        return await asyncio.shield(task)

    async def fetch_many(self, assets: list[Asset]) -> dict[Asset, Decimal]:
        """여러 자산 가격 동시 조회"""
        prices = await asyncio.gather(*(self.fetch_with_retry(a) for a in assets))
        return dict(zip(assets, prices))

    def cancel(self, asset: Asset) -> bool:
        """진행 중인 조회 취소 요청

        다음 시도 전에 반영됨 (진행 중인 호출은 중단하지 않음).

        Returns:
            취소 요청이 전달되었으면 True
        """
        task = self._in_flight.get(asset)
        if task is None or task.done():
            return False

        self._cancel_tokens[asset].set()
        logger.info(f"시세 조회 취소 요청: {asset.value}")
        return True

    def is_fetching(self, asset: Asset) -> bool:
        """조회 진행 중 여부"""
        task = self._in_flight.get(asset)
        return task is not None and not task.done()

    def last_known_price(self, asset: Asset) -> Decimal | None:
        """마지막으로 캐시된 가격 (만료 여부 무관)

        호출자가 명시적으로 만료 가격 사용을 선택할 때만 사용.
        """
        entry = self.cache.get(asset)
        return entry.price if entry is not None else None

    def fetch_state(self, asset: Asset) -> FetchStateMachine | None:
        """마지막 조회의 상태 머신"""
        return self._machines.get(asset)

    # -------------------------------------------------------------------------
    # 재시도 루프
    # -------------------------------------------------------------------------

    async def _run(self, asset: Asset, token: asyncio.Event) -> Decimal:
        machine = FetchStateMachine(name=f"Fetch[{asset.value}]")
        self._machines[asset] = machine
        delay = self.initial_backoff

        while True:
            if token.is_set():
                machine.transition(FetchState.CANCELLED)
                raise FetchCancelledError(asset, machine.attempt)

            attempt = machine.start_attempt()

            try:
                price = await self._attempt(asset)
            except TransientFetchError as e:
                logger.warning(
                    f"시세 조회 실패: {asset.value}",
                    extra={"attempt": attempt, "max_attempts": self.max_attempts, "error": e.message},
                )
                if attempt >= self.max_attempts:
                    machine.transition(FetchState.EXHAUSTED)
                    raise FetchExhaustedError(asset, attempt, e) from e

                machine.transition(FetchState.BACKOFF)
                if not token.is_set():
                    await self._sleep(delay)
                    delay *= self.backoff_multiplier
                continue
            except InvalidResponseError:
                machine.transition(FetchState.FAILED)
                raise

            self.cache.put(asset, price)
            machine.transition(FetchState.SUCCEEDED)

            logger.info(
                f"시세 조회 완료: {asset.value}",
                extra={"price": str(price), "attempt": attempt},
            )
            return price

    async def _attempt(self, asset: Asset) -> Decimal:
        """제공자 1회 호출 (에러를 재시도 분류로 변환)"""
        try:
            raw = await asyncio.wait_for(
                self.provider.get_price(asset.provider_id),
                timeout=self.attempt_timeout,
            )
        except asyncio.TimeoutError as e:
            raise TransientFetchError(asset, f"시도 타임아웃 ({self.attempt_timeout}s)") from e
        except ProviderTransportError as e:
            raise TransientFetchError(asset, str(e)) from e
        except ProviderResponseError as e:
            raise InvalidResponseError(asset, str(e)) from e
        except Exception as e:
            # 분류되지 않은 제공자 예외는 재시도하지 않음
            raise InvalidResponseError(asset, f"예상하지 못한 제공자 에러: {e!r}") from e

        try:
            price = to_decimal(raw)
        except InvalidRequestError as e:
            raise InvalidResponseError(asset, f"가격 형식 오류: {raw!r}") from e

        if price <= 0:
            raise InvalidResponseError(asset, f"가격은 0보다 커야 합니다: {price}")

        return price

    def _clear_in_flight(self, asset: Asset, task: asyncio.Task[Decimal]) -> None:
        if self._in_flight.get(asset) is task:
            del self._in_flight[asset]
            self._cancel_tokens.pop(asset, None)

        # 대기자가 모두 사라진 경우에도 예외를 회수해 경고 로그 방지
        if not task.cancelled():
            task.exception()
