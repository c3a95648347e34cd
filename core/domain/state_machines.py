"""
State Machines

시세 조회 재시도 루프의 상태 전이 관리.
재시도 흐름을 예외 분기 대신 명시적 상태 전이로 표현해 테스트에서 검증 가능.

IDLE → ATTEMPTING → SUCCEEDED | BACKOFF | EXHAUSTED | FAILED
BACKOFF → ATTEMPTING | CANCELLED
"""

import logging
from enum import Enum
from typing import Generic, Mapping, TypeVar

from core.types import FetchState

logger = logging.getLogger(__name__)

S = TypeVar("S", bound=Enum)


class StateMachineError(Exception):
    """허용되지 않은 상태 전이"""
    pass


class StateMachine(Generic[S]):
    """Enum 상태 기반 상태 머신

    Args:
        initial_state: 초기 상태
        transitions: {from_state: (to_state, ...)}. 키가 없는 상태는 종료 상태
        name: 로그에 표시할 이름
    """

    def __init__(
        self,
        initial_state: S,
        transitions: Mapping[S, tuple[S, ...]],
        name: str = "StateMachine",
    ):
        self._current = initial_state
        self._allowed = transitions
        self.name = name
        self._trail: list[tuple[S, S]] = []

    @property
    def current(self) -> S:
        """현재 상태 (Enum)"""
        return self._current

    @property
    def state(self) -> str:
        """현재 상태 값 (문자열)"""
        return self._current.value

    @property
    def is_terminal(self) -> bool:
        """더 이상 전이할 수 없는 상태인지"""
        return not self._allowed.get(self._current)

    def can_transition(self, target: S) -> bool:
        return target in self._allowed.get(self._current, ())

    def transition(self, target: S) -> S:
        """target 상태로 전이

        Raises:
            StateMachineError: 허용되지 않은 전이 (상태 변경 없음)
        """
        if not self.can_transition(target):
            allowed = [s.value for s in self._allowed.get(self._current, ())]
            raise StateMachineError(
                f"{self.name}: Cannot transition from {self.state} to {target.value}. "
                f"Allowed: {allowed}"
            )

        self._trail.append((self._current, target))
        self._current = target
        logger.debug(f"{self.name}: {self._trail[-1][0].value} → {target.value}")
        return target

    @property
    def history(self) -> list[tuple[str, str]]:
        """전이 이력 [(from, to), ...]"""
        return [(src.value, dst.value) for src, dst in self._trail]


class FetchStateMachine(StateMachine[FetchState]):
    """시세 조회 재시도 상태 머신

    attempt는 ATTEMPTING 진입 횟수 (1부터).
    """

    TRANSITIONS: dict[FetchState, tuple[FetchState, ...]] = {
        FetchState.IDLE: (FetchState.ATTEMPTING, FetchState.CANCELLED),
        FetchState.ATTEMPTING: (
            FetchState.SUCCEEDED,
            FetchState.BACKOFF,
            FetchState.EXHAUSTED,
            FetchState.FAILED,
        ),
        FetchState.BACKOFF: (FetchState.ATTEMPTING, FetchState.CANCELLED),
    }

    def __init__(self, name: str = "FetchStateMachine"):
        super().__init__(FetchState.IDLE, self.TRANSITIONS, name=name)
        self.attempt = 0

    def start_attempt(self) -> int:
        """ATTEMPTING 진입 후 시도 번호 반환"""
        self.transition(FetchState.ATTEMPTING)
        self.attempt += 1
        return self.attempt

    @property
    def succeeded(self) -> bool:
        return self._current is FetchState.SUCCEEDED
