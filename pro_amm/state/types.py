"""
ProAMM 상태 타입 정의

풀 엔진이 소유하는 틱/포지션/전역 상태와 이벤트 레코드를 dataclass로 정의.
모든 숫자 필드는 온체인 정밀도를 위해 int 타입 사용.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, NamedTuple


@dataclass
class TickInfo:
    """Tick-Indexed State

    - liquidity_gross: 해당 틱을 경계로 하는 총 유동성
    - liquidity_net: 가격이 위로 틱을 지날 때 활성 유동성에 더해지는 변화량 (ΔL)
    - fee_growth_outside: 현재 가격 반대편에서 누적된 fee growth (f_o, Q96)
    """
    liquidity_gross: int = 0
    liquidity_net: int = 0
    fee_growth_outside: int = 0

    @property
    def initialized(self) -> bool:
        return self.liquidity_gross != 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "liquidityGross": self.liquidity_gross,
            "liquidityNet": self.liquidity_net,
            "feeGrowthOutside": self.fee_growth_outside,
            "initialized": self.initialized,
        }


@dataclass(frozen=True)
class PositionKey:
    """포지션 식별자 (owner, tick_lower, tick_upper)

    frozen dataclass 이므로 필드 기반 __eq__ / __hash__ 가 생성됩니다.
    """
    owner: str
    tick_lower: int
    tick_upper: int


@dataclass
class PositionInfo:
    """Position-Indexed State

    - liquidity: 포지션의 유동성 (l)
    - fee_growth_inside_last: 마지막 업데이트 시점의 범위 내 fee growth (f_r(t_0), Q96)
    """
    liquidity: int = 0
    fee_growth_inside_last: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "liquidity": self.liquidity,
            "feeGrowthInsideLast": self.fee_growth_inside_last,
        }


class PoolStatus(Enum):
    """풀 생명주기"""
    UNINITIALIZED = "uninitialized"
    LOCKED_UNPRICED = "locked_unpriced"
    ACTIVE = "active"


@dataclass
class PoolData:
    """풀 전역 상태

    - sqrt_price: 현재 √가격 (Q96 인코딩)
    - current_tick: 현재 틱 인덱스 (i_c)
    - base_liquidity: 현재 가격에서 활성화된 포지션 유동성 (L)
    - reinvestment_liquidity: 수수료로 적립된 전 구간 재투자 유동성
    - reinvestment_liquidity_last: 마지막 share 발행 체크포인트의 재투자 유동성
    - fee_growth_global: 활성 유동성 단위당 누적 share (f_g, Q96)
    """
    sqrt_price: int = 0
    current_tick: int = 0
    base_liquidity: int = 0
    reinvestment_liquidity: int = 0
    reinvestment_liquidity_last: int = 0
    fee_growth_global: int = 0
    locked: bool = False


class PoolStateView(NamedTuple):
    """get_pool_state() 결과"""
    sqrt_price: int
    current_tick: int
    locked: bool
    base_liquidity: int


class ReinvestmentStateView(NamedTuple):
    """get_reinvestment_state() 결과"""
    fee_growth_global: int
    reinvestment_liquidity: int
    reinvestment_liquidity_last: int


class SwapQuote(NamedTuple):
    """quote_swap() 결과 (오프체인 견적용)"""
    delta_qty0: int
    delta_qty1: int
    sqrt_price_after: int
    tick_after: int
    initialized_ticks_crossed: int


# ---------------------------------------------------------------------------
# Events
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class InitializeEvent:
    sqrt_price: int
    tick: int


@dataclass(frozen=True)
class MintEvent:
    owner: str
    tick_lower: int
    tick_upper: int
    qty: int
    qty0: int
    qty1: int


@dataclass(frozen=True)
class BurnEvent:
    owner: str
    tick_lower: int
    tick_upper: int
    qty: int
    qty0: int
    qty1: int


@dataclass(frozen=True)
class BurnRTokensEvent:
    owner: str
    qty: int
    qty0: int
    qty1: int


@dataclass(frozen=True)
class SwapEvent:
    recipient: str
    delta_qty0: int
    delta_qty1: int
    sqrt_price: int
    liquidity: int
    current_tick: int
