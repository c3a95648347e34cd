"""
CoinGecko 시세 제공자

/simple/price 엔드포인트로 USD 가격 조회.
IQuoteProvider Protocol 준수.

에러 분류:
- httpx.RequestError(타임아웃 포함), 429, 5xx → ProviderTransportError (재시도 대상)
- 그 외 4xx, 잘못된 JSON, 누락된 필드, 0 이하 가격 → ProviderResponseError
"""

import logging
from decimal import Decimal, InvalidOperation
from typing import Any

import httpx

from adapters.errors import ProviderResponseError, ProviderTransportError
from core.constants import CoinGeckoEndpoints, RetryDefaults

logger = logging.getLogger(__name__)


class CoinGeckoQuoteProvider:
    """CoinGecko 시세 제공자

    재시도는 RateFetcher가 담당하므로 여기서는 한 번만 호출.

    Args:
        base_url: API 베이스 URL
        timeout: HTTP 요청 타임아웃 (초)
        vs_currency: 기준 통화 (기본 usd)

    사용 예시:
    ```python
    provider = CoinGeckoQuoteProvider()
    price = await provider.get_price("bitcoin")
    await provider.close()
    ```
    """

    def __init__(
        self,
        base_url: str = CoinGeckoEndpoints.BASE_URL,
        timeout: float = RetryDefaults.ATTEMPT_TIMEOUT_SEC,
        vs_currency: str = CoinGeckoEndpoints.VS_CURRENCY,
    ):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.vs_currency = vs_currency
        self._client: httpx.AsyncClient | None = None

    async def _get_client(self) -> httpx.AsyncClient:
        """HTTP 클라이언트 가져오기 (lazy initialization)"""
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(timeout=self.timeout)
        return self._client

    async def close(self) -> None:
        """HTTP 클라이언트 종료"""
        if self._client is not None and not self._client.is_closed:
            await self._client.aclose()
            self._client = None

    async def get_price(self, asset_id: str) -> Decimal:
        """자산의 USD 가격 조회

        Args:
            asset_id: CoinGecko coin id (예: bitcoin)

        Returns:
            USD 가격

        Raises:
            ProviderTransportError: 연결 실패, 타임아웃, 429, 5xx
            ProviderResponseError: 그 외 HTTP 에러, 응답 형식 오류
        """
        client = await self._get_client()
        url = f"{self.base_url}{CoinGeckoEndpoints.SIMPLE_PRICE_PATH}"
        params = {"ids": asset_id, "vs_currencies": self.vs_currency}

        try:
            response = await client.get(url, params=params)
        except httpx.RequestError as e:
            logger.warning(
                "CoinGecko 요청 실패",
                extra={"asset_id": asset_id, "error": str(e)},
            )
            raise ProviderTransportError(f"{asset_id}: {e}") from e

        if response.status_code == 429 or response.status_code >= 500:
            raise ProviderTransportError(
                f"{asset_id}: HTTP {response.status_code}",
                status_code=response.status_code,
            )

        if response.status_code >= 400:
            raise ProviderResponseError(
                f"{asset_id}: HTTP {response.status_code} {response.text}",
                status_code=response.status_code,
            )

        try:
            data = response.json()
        except ValueError as e:
            raise ProviderResponseError(f"{asset_id}: JSON 파싱 실패: {e}") from e

        return self._parse_price(asset_id, data)

    def _parse_price(self, asset_id: str, data: Any) -> Decimal:
        """응답에서 가격 추출

        응답 예: {"bitcoin": {"usd": 45000.12}}
        """
        try:
            raw = data[asset_id][self.vs_currency]
        except (KeyError, TypeError) as e:
            raise ProviderResponseError(
                f"{asset_id}: 응답에 '{self.vs_currency}' 가격이 없습니다: {data!r}"
            ) from e

        # JSON 숫자는 float로 파싱되므로 문자열 경유
        try:
            price = Decimal(str(raw))
        except InvalidOperation as e:
            raise ProviderResponseError(f"{asset_id}: 가격 형식 오류: {raw!r}") from e

        if not price.is_finite() or price <= 0:
            raise ProviderResponseError(f"{asset_id}: 가격은 0보다 커야 합니다: {price}")

        return price
