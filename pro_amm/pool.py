"""
ProAMM Pool - 집중 유동성 + 수수료 자동 재투자 풀 엔진

틱 ledger, 포지션 ledger, 틱 bitmap 을 소유하고 math 레이어를 조합하여
initialize / unlock / mint / burn / reinvestment share burn / swap 을 처리합니다.

실행 모델:
- 풀 하나는 순차 상태 머신입니다. 작업 중에는 locked 플래그가 설정되고,
  콜백 안에서 다시 진입하면 PoolLockedError 로 즉시 실패합니다.
- 모든 작업은 원자적입니다. 예외가 발생하면 풀 상태, ledger, 토큰 잔고를
  작업 시작 시점으로 되돌린 뒤 (변경된 키만 되돌림) 예외를 그대로 전파합니다.
- mint / swap / unlock 은 콜백으로 토큰을 요청하고, 콜백의 반환값이 아니라
  풀 잔고의 증가분으로 지불을 검증합니다.

References:
- ProAMMPool.sol (unlockPool / mint / burn / burnRTokens / swap)
- 백서 Section 6.2.3: Swap 루프
"""

import copy
import itertools
import logging
from contextlib import contextmanager
from typing import Any, List, Optional, Tuple

from pydantic import ValidationError

from .callbacks import ProAMMCallback
from .config import PoolParams
from .constants import (
    Q96,
    MIN_TICK,
    MAX_TICK,
    MIN_SQRT_RATIO,
    MAX_SQRT_RATIO,
    MIN_LIQUIDITY,
    FEE_TIERS,
    UINT256_MAX,
)
from .errors import (
    AlreadyInitializedError,
    InsufficientLiquidityError,
    InvalidTickRangeError,
    PoolLockedError,
    PoolValidationError,
    PriceLimitError,
    SettlementError,
    TickOutOfRangeError,
    TickSpacingError,
    ZeroQuantityError,
)
from .math.fee_math import fee_growth_inside
from .math.full_math import to_int128
from .math.qty_delta_math import (
    apply_liquidity_delta,
    calc_required_qtys,
    calc_unlock_qtys,
    get_qty0_from_burn_r_tokens,
    get_qty1_from_burn_r_tokens,
)
from .math.reinvestment_math import (
    calc_burn_delta,
    calc_fee_growth_increment,
    calc_r_mint_qty,
)
from .math.sqrt_price_math import sqrt_price_x96_to_price
from .math.swap_math import compute_swap_step
from .math.tick_math import (
    get_max_liquidity_per_tick,
    get_sqrt_ratio_at_tick,
    get_tick_at_sqrt_ratio,
)
from .state import (
    BurnEvent,
    BurnRTokensEvent,
    InitializeEvent,
    MintEvent,
    PoolData,
    PoolStateView,
    PoolStatus,
    PositionInfo,
    PositionKey,
    PositionLedger,
    ReinvestmentStateView,
    SwapEvent,
    SwapQuote,
    TickBitmap,
    TickInfo,
    TickLedger,
)
from .token import ReinvestmentToken, Token

logger = logging.getLogger(__name__)

_POOL_IDS = itertools.count(1)


class ProAMMPool:
    """ProAMM 풀

    사용법:
        pool = ProAMMPool()
        pool.initialize("factory", token_a, token_b, swap_fee_bps=30, tick_spacing=60)
        pool.unlock_pool(callback, encode_price_sqrt(1, 1))
        pool.mint(callback, "alice", -600, 600, 10**18)
        pool.swap(callback, "bob", 10**15, True, MIN_SQRT_RATIO + 1)
    """

    def __init__(self, address: Optional[str] = None):
        # 기본 주소는 풀마다 고유 (토큰 잔고 키)
        self.address = address or f"pool-{next(_POOL_IDS)}"
        self.status = PoolStatus.UNINITIALIZED

        self.factory: Optional[str] = None
        self.token0: Optional[Token] = None
        self.token1: Optional[Token] = None
        self.swap_fee_bps: int = 0
        self.tick_spacing: int = 0
        self.max_liquidity_per_tick: int = 0
        self.reinvestment_token: Optional[ReinvestmentToken] = None

        self.state = PoolData()
        self.tick_ledger: Optional[TickLedger] = None
        self.tick_bitmap: Optional[TickBitmap] = None
        self.position_ledger = PositionLedger()
        self.events: List[Any] = []

    def __repr__(self) -> str:
        return (
            f"ProAMMPool(address={self.address!r}, fee={self.swap_fee_bps}bps, "
            f"tick_spacing={self.tick_spacing}, status={self.status.value})"
        )

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def initialize(
        self,
        factory: str,
        token0: Token,
        token1: Token,
        swap_fee_bps: Optional[int] = None,
        tick_spacing: Optional[int] = None
    ) -> None:
        """풀 파라미터 설정 (한 번만 가능)

        토큰 순서는 주소(소문자) 기준으로 정렬됩니다. swap_fee_bps 를 생략하면
        settings.DEFAULT_SWAP_FEE_BPS, tick_spacing 을 생략하면 수수료 티어의
        틱 간격을 사용하며, settings.ENABLED_FEE_TIERS 에 없는 수수료는 거부합니다.

        Raises:
            AlreadyInitializedError: 이미 초기화된 풀
            PoolValidationError: 잘못되었거나 활성화되지 않은 수수료, 잘못된 틱 간격, 동일 토큰
        """
        if self.status is not PoolStatus.UNINITIALIZED:
            raise AlreadyInitializedError()

        try:
            fields = {"swap_fee_bps": swap_fee_bps, "tick_spacing": tick_spacing}
            params = PoolParams(
                token0=token0.address,
                token1=token1.address,
                **{name: value for name, value in fields.items() if value is not None},
            )
        except ValidationError as e:
            raise PoolValidationError(f"잘못된 풀 파라미터: {e}") from e

        if token0.address.lower() > token1.address.lower():
            token0, token1 = token1, token0

        self.factory = factory
        self.token0 = token0
        self.token1 = token1
        self.swap_fee_bps = params.swap_fee_bps
        self.tick_spacing = params.tick_spacing
        self.max_liquidity_per_tick = get_max_liquidity_per_tick(params.tick_spacing)
        self.reinvestment_token = ReinvestmentToken(self.address)

        self.tick_ledger = TickLedger(self.max_liquidity_per_tick)
        self.tick_bitmap = TickBitmap(params.tick_spacing)
        self.status = PoolStatus.LOCKED_UNPRICED

        logger.info(
            f"Pool initialized: {token0.symbol}/{token1.symbol} "
            f"fee={FEE_TIERS.get(self.swap_fee_bps, f'{self.swap_fee_bps}bps')} "
            f"tick_spacing={self.tick_spacing}"
        )

    def unlock_pool(
        self,
        callback: ProAMMCallback,
        initial_sqrt_price: int,
        data: Any = None
    ) -> Tuple[int, int]:
        """초기 가격 설정 및 MIN_LIQUIDITY 재투자 유동성 예치

        Returns:
            (qty0, qty1) 콜백으로 요청한 수량

        Raises:
            AlreadyInitializedError: 이미 unlock 된 풀
            PriceOutOfRangeError: 초기 가격이 [MIN_SQRT_RATIO, MAX_SQRT_RATIO) 밖
            SettlementError: lacking qty0 / lacking qty1
        """
        if self.status is PoolStatus.ACTIVE:
            raise AlreadyInitializedError()
        if self.status is PoolStatus.UNINITIALIZED:
            raise PoolLockedError("pool not initialized")

        with self._operation():
            tick = get_tick_at_sqrt_ratio(initial_sqrt_price)
            qty0, qty1 = calc_unlock_qtys(initial_sqrt_price)

            s = self.state
            s.sqrt_price = initial_sqrt_price
            s.current_tick = tick
            s.reinvestment_liquidity = MIN_LIQUIDITY
            s.reinvestment_liquidity_last = MIN_LIQUIDITY
            s.fee_growth_global = Q96
            self.reinvestment_token.mint(self.address, MIN_LIQUIDITY)
            self.status = PoolStatus.ACTIVE

            balance0, balance1 = self._balances()
            callback.unlock_callback(qty0, qty1, data)
            self._verify_received(balance0, qty0, balance1, qty1, "qty0", "qty1")

            self.events.append(InitializeEvent(initial_sqrt_price, tick))

        logger.info(
            f"Pool unlocked: tick={tick} price={sqrt_price_x96_to_price(initial_sqrt_price):.6f} "
            f"qty0={qty0} qty1={qty1}"
        )
        return qty0, qty1

    # ------------------------------------------------------------------
    # Liquidity
    # ------------------------------------------------------------------

    def mint(
        self,
        callback: ProAMMCallback,
        owner: str,
        tick_lower: int,
        tick_upper: int,
        qty: int,
        data: Any = None
    ) -> Tuple[int, int]:
        """포지션 유동성 추가

        Args:
            callback: 지불 콜백 (mint_callback)
            owner: 포지션 소유자
            tick_lower: 하한 틱
            tick_upper: 상한 틱
            qty: 추가할 유동성
            data: 콜백에 그대로 전달되는 값

        Returns:
            (qty0, qty1) 풀이 받은 수량
        """
        self._require_active()
        with self._operation():
            self._check_ticks(tick_lower, tick_upper)
            self._check_qty(qty)

            qty0, qty1 = self._tweak_position(owner, tick_lower, tick_upper, to_int128(qty))

            balance0, balance1 = self._balances()
            callback.mint_callback(qty0, qty1, data)
            self._verify_received(balance0, qty0, balance1, qty1, "qty0", "qty1")

            self.events.append(
                MintEvent(owner, tick_lower, tick_upper, qty, qty0, qty1)
            )

        logger.info(f"Mint {owner} [{tick_lower}, {tick_upper}) L={qty}: qty0={qty0} qty1={qty1}")
        return qty0, qty1

    def burn(
        self,
        caller: str,
        tick_lower: int,
        tick_upper: int,
        qty: int
    ) -> Tuple[int, int]:
        """포지션 유동성 제거, 토큰은 caller 에게 직접 지급

        Returns:
            (qty0, qty1) caller 에게 지급한 수량 (양수)

        Raises:
            InsufficientLiquidityError: 포지션 유동성보다 많이 burn
        """
        self._require_active()
        with self._operation():
            self._check_ticks(tick_lower, tick_upper)
            self._check_qty(qty)

            key = PositionKey(caller, tick_lower, tick_upper)
            if self.position_ledger.get(key).liquidity < qty:
                raise InsufficientLiquidityError()

            qty0, qty1 = self._tweak_position(caller, tick_lower, tick_upper, -to_int128(qty))
            qty0, qty1 = -qty0, -qty1
            self._pay(caller, qty0, qty1)

            self.events.append(BurnEvent(caller, tick_lower, tick_upper, qty, qty0, qty1))

        logger.info(f"Burn {caller} [{tick_lower}, {tick_upper}) L={qty}: qty0={qty0} qty1={qty1}")
        return qty0, qty1

    def burn_reinvestment_shares(self, caller: str, qty: int) -> Tuple[int, int]:
        """reinvestment share 를 상환하고 재투자 유동성에 해당하는 토큰 지급

        Returns:
            (qty0, qty1) caller 에게 지급한 수량

        Raises:
            InsufficientLiquidityError: 보유 share 보다 많이 상환
        """
        self._require_active()
        with self._operation():
            self._check_qty(qty)
            if self.reinvestment_token.balance_of(caller) < qty:
                raise InsufficientLiquidityError("insufficient reinvestment shares")

            s = self.state
            self._sync_fee_growth(update_last=False)

            delta_l = calc_burn_delta(
                qty, s.reinvestment_liquidity, self.reinvestment_token.total_supply
            )
            s.reinvestment_liquidity -= delta_l
            s.reinvestment_liquidity_last = s.reinvestment_liquidity

            qty0 = get_qty0_from_burn_r_tokens(s.sqrt_price, delta_l)
            qty1 = get_qty1_from_burn_r_tokens(s.sqrt_price, delta_l)

            self.reinvestment_token.burn(caller, qty)
            self._pay(caller, qty0, qty1)

            self.events.append(BurnRTokensEvent(caller, qty, qty0, qty1))

        logger.info(f"BurnRTokens {caller} shares={qty} ΔL={delta_l}: qty0={qty0} qty1={qty1}")
        return qty0, qty1

    def collect_governance_fee(self) -> None:
        """프로토콜 수수료 인출 (지원하지 않음)"""
        raise NotImplementedError("governance fee collection is not supported")

    # ------------------------------------------------------------------
    # Swap
    # ------------------------------------------------------------------

    def swap(
        self,
        callback: ProAMMCallback,
        recipient: str,
        swap_qty: int,
        is_token0: bool,
        limit_sqrt_p: int,
        data: Any = None
    ) -> Tuple[int, int]:
        """스왑 실행

        Args:
            callback: 지불 콜백 (swap_callback)
            recipient: 출력 토큰 수령자
            swap_qty: 지정 수량 (양수 = exact input, 음수 = exact output)
            is_token0: swap_qty 가 token0 수량인지 여부
            limit_sqrt_p: 가격 제한 (sqrtPriceX96)
            data: 콜백에 그대로 전달되는 값

        Returns:
            (delta_qty0, delta_qty1) 풀 기준 부호 (양수 = 풀이 받음)

        Raises:
            ZeroQuantityError: swap_qty == 0
            PriceLimitError: 가격 제한이 이동 방향의 반대편이거나 범위 밖
            SettlementError: lacking deltaQty0 / lacking deltaQty1
        """
        self._require_active()
        with self._operation():
            delta_qty0, delta_qty1, _ = self._swap(swap_qty, is_token0, limit_sqrt_p)

            self._pay(recipient, max(-delta_qty0, 0), max(-delta_qty1, 0))

            balance0, balance1 = self._balances()
            callback.swap_callback(delta_qty0, delta_qty1, data)
            self._verify_received(
                balance0, delta_qty0, balance1, delta_qty1, "deltaQty0", "deltaQty1"
            )

            s = self.state
            self.events.append(
                SwapEvent(
                    recipient, delta_qty0, delta_qty1,
                    s.sqrt_price, s.base_liquidity, s.current_tick
                )
            )

        logger.info(
            f"Swap -> {recipient}: delta0={delta_qty0} delta1={delta_qty1} "
            f"tick={self.state.current_tick}"
        )
        return delta_qty0, delta_qty1

    def quote_swap(
        self,
        swap_qty: int,
        is_token0: bool,
        limit_sqrt_p: int
    ) -> SwapQuote:
        """스왑 결과 견적 (풀 상태는 변경되지 않음)

        스왑 루프만 실행한 뒤 체크포인트로 되돌리므로 토큰 이동과 콜백은 없습니다.
        """
        self._require_active()
        if self.state.locked:
            raise PoolLockedError()

        checkpoint = self._begin()
        try:
            delta_qty0, delta_qty1, crossed = self._swap(swap_qty, is_token0, limit_sqrt_p)
            return SwapQuote(
                delta_qty0,
                delta_qty1,
                self.state.sqrt_price,
                self.state.current_tick,
                crossed,
            )
        finally:
            self._rollback(checkpoint)

    def _swap(
        self,
        swap_qty: int,
        is_token0: bool,
        limit_sqrt_p: int
    ) -> Tuple[int, int, int]:
        """스왑 루프 (토큰 정산 제외)

        Returns:
            (delta_qty0, delta_qty1, 지나간 초기화 틱 수)
        """
        if swap_qty == 0:
            raise ZeroQuantityError()

        s = self.state
        is_exact_input = swap_qty > 0
        # exact input token1 또는 exact output token0 이면 가격 상승
        will_up_tick = is_exact_input != is_token0

        if will_up_tick:
            if not (s.sqrt_price < limit_sqrt_p < MAX_SQRT_RATIO):
                raise PriceLimitError()
        elif not (MIN_SQRT_RATIO < limit_sqrt_p < s.sqrt_price):
            raise PriceLimitError()

        remaining = swap_qty
        returned = 0
        crossed = 0

        while remaining != 0 and s.sqrt_price != limit_sqrt_p:
            next_tick, initialized = self.tick_bitmap.next_initialized_tick_within_one_word(
                s.current_tick, lte=not will_up_tick
            )
            next_tick = min(max(next_tick, MIN_TICK), MAX_TICK)
            next_sqrt_p = get_sqrt_ratio_at_tick(next_tick)

            if will_up_tick:
                target_sqrt_p = min(next_sqrt_p, limit_sqrt_p)
            else:
                target_sqrt_p = max(next_sqrt_p, limit_sqrt_p)

            start_sqrt_p = s.sqrt_price
            step = compute_swap_step(
                s.base_liquidity + s.reinvestment_liquidity,
                start_sqrt_p,
                target_sqrt_p,
                self.swap_fee_bps,
                remaining,
                is_exact_input,
                is_token0,
            )
            remaining -= step.delta
            returned += step.actual_delta
            s.reinvestment_liquidity += step.fee
            s.sqrt_price = step.next_sqrt_p

            logger.debug(
                f"swap step: tick={s.current_tick} next={next_tick} init={initialized} "
                f"delta={step.delta} actual={step.actual_delta} fee_ΔL={step.fee} "
                f"remaining={remaining}"
            )

            if s.sqrt_price == next_sqrt_p:
                if initialized:
                    self._sync_fee_growth(update_last=True)
                    liquidity_net = self.tick_ledger.cross(next_tick, s.fee_growth_global)
                    if not will_up_tick:
                        liquidity_net = -liquidity_net
                    s.base_liquidity = apply_liquidity_delta(s.base_liquidity, liquidity_net)
                    crossed += 1
                s.current_tick = next_tick if will_up_tick else next_tick - 1
            elif s.sqrt_price != start_sqrt_p:
                s.current_tick = get_tick_at_sqrt_ratio(s.sqrt_price)

        if is_token0:
            return swap_qty - remaining, returned, crossed
        return returned, swap_qty - remaining, crossed

    # ------------------------------------------------------------------
    # Read accessors
    # ------------------------------------------------------------------

    def get_pool_state(self) -> PoolStateView:
        s = self.state
        return PoolStateView(s.sqrt_price, s.current_tick, s.locked, s.base_liquidity)

    def get_reinvestment_state(self) -> ReinvestmentStateView:
        s = self.state
        return ReinvestmentStateView(
            s.fee_growth_global, s.reinvestment_liquidity, s.reinvestment_liquidity_last
        )

    def ticks(self, tick: int) -> TickInfo:
        """틱 정보 사본 (초기화되지 않은 틱은 모든 필드 0)"""
        if self.tick_ledger is None:
            return TickInfo()
        return copy.copy(self.tick_ledger.get(tick))

    def positions(self, key: PositionKey) -> PositionInfo:
        return copy.copy(self.position_ledger.get(key))

    def get_position(self, owner: str, tick_lower: int, tick_upper: int) -> PositionInfo:
        return self.positions(PositionKey(owner, tick_lower, tick_upper))

    def is_tick_initialized(self, tick: int) -> bool:
        return self.tick_bitmap is not None and self.tick_bitmap.is_initialized(tick)

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------

    def _tweak_position(
        self,
        owner: str,
        tick_lower: int,
        tick_upper: int,
        liquidity_delta: int
    ) -> Tuple[int, int]:
        """포지션 / 틱 / 활성 유동성 갱신 후 필요한 (qty0, qty1) 반환

        mint 는 양수, burn 은 음수 수량을 반환합니다.
        """
        s = self.state
        self._sync_fee_growth(update_last=True)

        _, flipped_lower = self.tick_ledger.update(
            tick_lower, s.current_tick, liquidity_delta, s.fee_growth_global, is_upper=False
        )
        _, flipped_upper = self.tick_ledger.update(
            tick_upper, s.current_tick, liquidity_delta, s.fee_growth_global, is_upper=True
        )
        if flipped_lower:
            self.tick_bitmap.flip_tick(tick_lower)
        if flipped_upper:
            self.tick_bitmap.flip_tick(tick_upper)

        inside = fee_growth_inside(
            tick_lower,
            tick_upper,
            s.current_tick,
            s.fee_growth_global,
            self.tick_ledger.get(tick_lower).fee_growth_outside,
            self.tick_ledger.get(tick_upper).fee_growth_outside,
        )
        fee_shares = self.position_ledger.update(
            PositionKey(owner, tick_lower, tick_upper), liquidity_delta, inside
        )
        if fee_shares > 0:
            self.reinvestment_token.transfer(self.address, owner, fee_shares)
            logger.debug(f"{owner} received {fee_shares} reinvestment shares")

        if tick_lower <= s.current_tick < tick_upper:
            s.base_liquidity = apply_liquidity_delta(s.base_liquidity, liquidity_delta)

        # liquidity_gross 가 0 이 된 틱 정리
        if liquidity_delta < 0:
            if flipped_lower:
                self.tick_ledger.clear(tick_lower)
            if flipped_upper:
                self.tick_ledger.clear(tick_upper)

        return calc_required_qtys(
            s.sqrt_price,
            get_sqrt_ratio_at_tick(tick_lower),
            get_sqrt_ratio_at_tick(tick_upper),
            abs(liquidity_delta),
            liquidity_delta > 0,
        )

    def _sync_fee_growth(self, update_last: bool) -> None:
        """마지막 체크포인트 이후 재투자 유동성 증가분에 대한 share 발행

        발행된 share 는 풀이 보유하고, 활성 유동성 단위당 fee growth 로 기록됩니다.
        """
        s = self.state
        r_mint_qty = calc_r_mint_qty(
            s.reinvestment_liquidity,
            s.reinvestment_liquidity_last,
            s.base_liquidity,
            self.reinvestment_token.total_supply,
        )
        if r_mint_qty != 0:
            self.reinvestment_token.mint(self.address, r_mint_qty)
            increment = calc_fee_growth_increment(r_mint_qty, s.base_liquidity)
            s.fee_growth_global = (s.fee_growth_global + increment) & UINT256_MAX
        if update_last:
            s.reinvestment_liquidity_last = s.reinvestment_liquidity

    def _check_ticks(self, tick_lower: int, tick_upper: int) -> None:
        if tick_lower >= tick_upper:
            raise InvalidTickRangeError("invalid ticks")
        if tick_lower < MIN_TICK:
            raise TickOutOfRangeError("invalid lower tick")
        if tick_upper > MAX_TICK:
            raise TickOutOfRangeError("invalid upper tick")
        if tick_lower % self.tick_spacing != 0 or tick_upper % self.tick_spacing != 0:
            raise TickSpacingError()

    def _check_qty(self, qty: int) -> None:
        if qty == 0:
            raise ZeroQuantityError()
        if qty < 0:
            raise PoolValidationError(f"음수 수량: {qty}")

    def _require_active(self) -> None:
        if self.status is not PoolStatus.ACTIVE:
            raise PoolLockedError()

    def _balances(self) -> Tuple[int, int]:
        return self.token0.balance_of(self.address), self.token1.balance_of(self.address)

    def _pay(self, recipient: str, qty0: int, qty1: int) -> None:
        if qty0 > 0:
            self.token0.transfer(self.address, recipient, qty0)
        if qty1 > 0:
            self.token1.transfer(self.address, recipient, qty1)

    def _verify_received(
        self,
        balance0_before: int,
        qty0: int,
        balance1_before: int,
        qty1: int,
        name0: str,
        name1: str
    ) -> None:
        """콜백 이후 풀 잔고가 요구 수량만큼 증가했는지 확인"""
        balance0, balance1 = self._balances()
        if qty0 > 0 and balance0 < balance0_before + qty0:
            raise SettlementError(f"lacking {name0}")
        if qty1 > 0 and balance1 < balance1_before + qty1:
            raise SettlementError(f"lacking {name1}")

    def _journaled(self) -> Tuple[Any, ...]:
        return (
            self.tick_ledger.journal,
            self.tick_bitmap.journal,
            self.position_ledger.journal,
            self.token0,
            self.token1,
            self.reinvestment_token,
        )

    def _begin(self) -> Tuple[PoolStatus, PoolData, int]:
        """되돌리기 체크포인트 시작 (ledger / 토큰은 변경된 키만 기록)"""
        for journal in self._journaled():
            journal.begin()
        return self.status, copy.copy(self.state), len(self.events)

    def _commit(self) -> None:
        for journal in self._journaled():
            journal.commit()

    def _rollback(self, checkpoint: Tuple[PoolStatus, PoolData, int]) -> None:
        for journal in self._journaled():
            journal.rollback()
        self.status, self.state, event_count = checkpoint
        del self.events[event_count:]

    @contextmanager
    def _operation(self):
        """locked 플래그 설정 + 실패 시 체크포인트로 되돌리기"""
        if self.state.locked:
            raise PoolLockedError()

        checkpoint = self._begin()
        self.state.locked = True
        try:
            yield
        except Exception as e:
            logger.warning(f"Pool operation reverted: {type(e).__name__}: {e}")
            self._rollback(checkpoint)
            raise
        else:
            self._commit()
        finally:
            self.state.locked = False
