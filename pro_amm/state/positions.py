"""
Position Ledger - (owner, tick_lower, tick_upper) 별 포지션 관리

References:
- 백서 Section 6.4.1: Position-Indexed State
"""

from typing import Dict

from .journal import UndoJournal
from .types import PositionInfo, PositionKey
from ..math.fee_math import calculate_fee_shares
from ..errors import InsufficientLiquidityError


class PositionLedger:
    """PositionKey → PositionInfo 저장소"""

    def __init__(self):
        self.positions: Dict[PositionKey, PositionInfo] = {}
        self.journal = UndoJournal(self.positions)

    def __contains__(self, key: PositionKey) -> bool:
        return key in self.positions

    def get(self, key: PositionKey) -> PositionInfo:
        """포지션 조회 (없으면 빈 PositionInfo)"""
        return self.positions.get(key, PositionInfo())

    def update(
        self,
        key: PositionKey,
        liquidity_delta: int,
        fee_growth_inside: int
    ) -> int:
        """포지션 유동성 갱신 및 누적 share 정산

        변경 전 유동성으로 마지막 스냅샷 이후의 share 를 계산하고,
        fee_growth_inside_last 는 항상 현재 값으로 갱신합니다.

        Args:
            key: 포지션 키
            liquidity_delta: 부호 있는 유동성 변화량
            fee_growth_inside: 현재 범위 내 fee growth (f_r(t_1))

        Returns:
            포지션 소유자에게 지급할 reinvestment share 수량

        Raises:
            InsufficientLiquidityError: 보유 유동성보다 많이 burn
        """
        info = self.positions.get(key)
        if info is None:
            info = PositionInfo()

        liquidity_after = info.liquidity + liquidity_delta
        if liquidity_after < 0:
            raise InsufficientLiquidityError()

        self.journal.record(key)
        fee_shares = calculate_fee_shares(
            info.liquidity, fee_growth_inside, info.fee_growth_inside_last
        )

        info.liquidity = liquidity_after
        info.fee_growth_inside_last = fee_growth_inside
        self.positions[key] = info
        return fee_shares
