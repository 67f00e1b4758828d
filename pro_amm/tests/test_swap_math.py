"""
Swap Math 테스트

compute_swap_step 의 네 가지 경우 (exact input/output × token0/token1) 에서
가격 이동 방향, 수량 부호, 목표 가격 도달 여부를 검증합니다.
"""

from ..math.swap_math import (
    compute_swap_step,
    calc_delta_next,
    calc_final_swap_fee_amount,
    calc_final_price,
)
from ..math.tick_math import get_sqrt_ratio_at_tick
from ..constants import Q96, MIN_TICK, MAX_TICK, MIN_SQRT_RATIO, MAX_SQRT_RATIO

LIQUIDITY = 10 ** 24
FEE_BPS = 30
PRICE_DOWN = get_sqrt_ratio_at_tick(-60)
PRICE_UP = get_sqrt_ratio_at_tick(60)


class TestComputeSwapStepExactInput:
    """exact input"""

    def test_current_equals_target(self):
        """이미 목표 가격이면 아무것도 하지 않음"""
        result = compute_swap_step(LIQUIDITY, Q96, Q96, FEE_BPS, 10 ** 18, True, True)
        assert result == (0, 0, 0, Q96)

    def test_token0_reaches_target(self):
        """token0 투입, 가격 하락, 목표 도달"""
        amount = 10 ** 23
        result = compute_swap_step(LIQUIDITY, Q96, PRICE_DOWN, FEE_BPS, amount, True, True)
        assert result.next_sqrt_p == PRICE_DOWN
        assert 0 < result.delta < amount
        assert result.actual_delta < 0
        assert result.fee > 0

    def test_token0_partial(self):
        """token0 투입, 남은 수량을 전부 소비"""
        amount = 10 ** 18
        result = compute_swap_step(LIQUIDITY, Q96, PRICE_DOWN, FEE_BPS, amount, True, True)
        assert result.delta == amount
        assert PRICE_DOWN < result.next_sqrt_p < Q96
        assert result.actual_delta < 0
        # 수수료 차감 후 출력은 투입보다 작음 (가격 ~1)
        assert -result.actual_delta < amount

    def test_token1_reaches_target(self):
        """token1 투입, 가격 상승, 목표 도달"""
        amount = 10 ** 23
        result = compute_swap_step(LIQUIDITY, Q96, PRICE_UP, FEE_BPS, amount, True, False)
        assert result.next_sqrt_p == PRICE_UP
        assert 0 < result.delta < amount
        assert result.actual_delta < 0
        assert result.fee > 0

    def test_token1_partial(self):
        """token1 투입, 가격 상승하지만 목표 미도달"""
        amount = 10 ** 18
        result = compute_swap_step(LIQUIDITY, Q96, PRICE_UP, FEE_BPS, amount, True, False)
        assert result.delta == amount
        assert Q96 < result.next_sqrt_p < PRICE_UP
        assert -result.actual_delta < amount

    def test_delta_next_matches_step(self):
        """목표 도달 단계의 delta 는 calc_delta_next 와 같음"""
        delta_next = calc_delta_next(LIQUIDITY, Q96, PRICE_DOWN, FEE_BPS, True, True)
        result = compute_swap_step(LIQUIDITY, Q96, PRICE_DOWN, FEE_BPS, 10 ** 23, True, True)
        assert result.delta == delta_next


class TestComputeSwapStepExactOutput:
    """exact output"""

    def test_token1_partial(self):
        """token1 인출, 가격 하락"""
        amount = -(10 ** 18)
        result = compute_swap_step(LIQUIDITY, Q96, PRICE_DOWN, FEE_BPS, amount, False, False)
        assert result.delta == amount
        assert PRICE_DOWN < result.next_sqrt_p < Q96
        assert result.actual_delta > 0
        # 풀이 받는 token0 이 내보내는 token1 보다 많음 (수수료)
        assert result.actual_delta > -amount
        assert result.fee > 0

    def test_token0_partial(self):
        """token0 인출, 가격 상승"""
        amount = -(10 ** 18)
        result = compute_swap_step(LIQUIDITY, Q96, PRICE_UP, FEE_BPS, amount, False, True)
        assert result.delta == amount
        assert Q96 < result.next_sqrt_p < PRICE_UP
        assert result.actual_delta > -amount
        assert result.fee > 0

    def test_token0_reaches_target(self):
        """요청량이 크면 목표 가격에서 멈추고 일부만 인출"""
        amount = -(10 ** 23)
        result = compute_swap_step(LIQUIDITY, Q96, PRICE_UP, FEE_BPS, amount, False, True)
        assert result.next_sqrt_p == PRICE_UP
        assert amount < result.delta < 0
        assert result.actual_delta > 0

    def test_final_fee_is_small_root(self):
        """exact output 마지막 단계 수수료는 인출량 대비 작은 값"""
        fee = calc_final_swap_fee_amount(10 ** 18, LIQUIDITY, Q96, FEE_BPS, False, False)
        assert 0 < fee < 10 ** 18


class TestExactOutputAtExtremePrices:
    """극단 가격에서의 exact output: 작은 인출도 가격을 움직여야 함"""

    SMALL_LIQUIDITY = 10 ** 5

    def test_final_price_token0_out_at_min_price(self):
        """token0 인출 환산이 0 으로 내림되지 않음 (가격 상승)"""
        result = calc_final_price(1000, self.SMALL_LIQUIDITY, 0, MIN_SQRT_RATIO, False, True)
        assert result > MIN_SQRT_RATIO

    def test_final_price_token1_out_at_max_price(self):
        """token1 인출 환산이 0 으로 내림되지 않음 (가격 하락)"""
        current = MAX_SQRT_RATIO - 1
        result = calc_final_price(1000, self.SMALL_LIQUIDITY, 0, current, False, False)
        assert result < current

    def test_step_token1_out_near_max_price(self):
        """인출 대가로 token0 을 반드시 받음"""
        current = get_sqrt_ratio_at_tick(MAX_TICK - 1)
        target = get_sqrt_ratio_at_tick(MAX_TICK - 120)
        result = compute_swap_step(
            self.SMALL_LIQUIDITY, current, target, FEE_BPS, -(10 ** 16), False, False
        )
        assert result.delta == -(10 ** 16)
        assert target < result.next_sqrt_p < current
        assert result.actual_delta > 0

    def test_step_token0_out_near_min_price(self):
        """인출 대가로 token1 을 반드시 받음"""
        target = get_sqrt_ratio_at_tick(MIN_TICK + 120)
        result = compute_swap_step(
            self.SMALL_LIQUIDITY, MIN_SQRT_RATIO, target, FEE_BPS, -(10 ** 16), False, True
        )
        assert result.delta == -(10 ** 16)
        assert MIN_SQRT_RATIO < result.next_sqrt_p < target
        assert result.actual_delta > 0
