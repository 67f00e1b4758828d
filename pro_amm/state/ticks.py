"""
Tick Ledger - 틱별 유동성 / fee growth outside 관리

References:
- 백서 Section 6.3: Tick-Indexed State
- Tick.sol (update / cross / clear)
"""

from typing import Dict, Tuple

from .journal import UndoJournal
from .types import TickInfo
from ..errors import TickLiquidityCapError, LiquidityUnderflowError


class TickLedger:
    """틱 인덱스 → TickInfo 저장소

    liquidity_gross 가 0 인 틱은 저장하지 않습니다.
    """

    def __init__(self, max_liquidity_per_tick: int):
        self.max_liquidity_per_tick = max_liquidity_per_tick
        self.ticks: Dict[int, TickInfo] = {}
        self.journal = UndoJournal(self.ticks)

    def __contains__(self, tick: int) -> bool:
        return tick in self.ticks

    def __len__(self) -> int:
        return len(self.ticks)

    def get(self, tick: int) -> TickInfo:
        """틱 정보 조회 (없으면 빈 TickInfo)"""
        return self.ticks.get(tick, TickInfo())

    def update(
        self,
        tick: int,
        current_tick: int,
        liquidity_delta: int,
        fee_growth_global: int,
        is_upper: bool
    ) -> Tuple[int, bool]:
        """포지션 경계 틱의 유동성 갱신

        처음 참조되는 틱은 현재 틱 이하일 때 지금까지의 수수료가 모두 아래쪽에서
        발생했다고 가정하고 fee_growth_outside = f_g 로 초기화합니다.

        Args:
            tick: 갱신할 틱
            current_tick: 현재 틱 (i_c)
            liquidity_delta: 부호 있는 유동성 변화량
            fee_growth_global: 전역 fee growth (f_g)
            is_upper: 상한 틱이면 True (liquidity_net 에서 빼기)

        Returns:
            (갱신 후 liquidity_gross, 초기화 상태 변경 여부)

        Raises:
            TickLiquidityCapError: liquidity_gross 가 max_liquidity_per_tick 초과
            LiquidityUnderflowError: liquidity_gross 가 음수
        """
        info = self.ticks.get(tick)
        if info is None:
            info = TickInfo()

        gross_before = info.liquidity_gross
        gross_after = gross_before + liquidity_delta

        if gross_after < 0:
            raise LiquidityUnderflowError(
                f"틱 {tick} liquidity_gross 음수: {gross_before} + ({liquidity_delta})"
            )
        if gross_after > self.max_liquidity_per_tick:
            raise TickLiquidityCapError()

        flipped = (gross_after == 0) != (gross_before == 0)
        self.journal.record(tick)

        if gross_before == 0 and tick <= current_tick:
            info.fee_growth_outside = fee_growth_global

        info.liquidity_gross = gross_after
        if is_upper:
            info.liquidity_net -= liquidity_delta
        else:
            info.liquidity_net += liquidity_delta

        self.ticks[tick] = info
        return gross_after, flipped

    def cross(self, tick: int, fee_growth_global: int) -> int:
        """가격이 틱을 지날 때 fee_growth_outside 반전

        Returns:
            liquidity_net (위로 지날 때 활성 유동성에 더할 값)
        """
        info = self.ticks.get(tick)
        if info is None:
            return 0
        self.journal.record(tick)
        info.fee_growth_outside = fee_growth_global - info.fee_growth_outside
        return info.liquidity_net

    def clear(self, tick: int) -> None:
        self.journal.record(tick)
        self.ticks.pop(tick, None)
