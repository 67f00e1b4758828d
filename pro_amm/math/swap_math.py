"""
Swap Math - 단일 스왑 단계 계산

한 틱 구간 안에서 현재 가격 → 목표 가격까지의 스왑 한 단계를 계산합니다.
수수료는 토큰으로 지급되지 않고, 곡선의 유동성을 늘리는 재투자 유동성(ΔL)으로 적립됩니다.

References:
- SwapMath.sol (computeSwapStep, calcDeltaNext, calcFinalPrice, calcActualDelta)
- 수수료 단위: bps (BPS = 10000)

네 가지 경우 (기준 토큰 = specified amount 의 토큰):
    exact input  + token0: token0 투입, 가격 하락
    exact input  + token1: token1 투입, 가격 상승
    exact output + token0: token0 인출, 가격 상승
    exact output + token1: token1 인출, 가격 하락

반올림 정책 (항상 풀에 유리):
    exact input : 목표 도달에 필요한 투입량을 내림 → 더 적은 투입으로 틱 이동
    exact output: 목표 도달 시 인출량을 내림, 도달 가격 계산 시 인출량 환산은 올림
    actual delta: 풀이 지불하는 수량은 내림, 풀이 받는 수량은 올림
"""

from typing import NamedTuple

from .full_math import (
    mul_div_floor,
    mul_div_ceiling,
    to_int256,
    rev_to_int256,
    to_uint160,
)
from .quad_math import get_smaller_root_of_quad_eqn
from ..constants import Q96, RES_96, BPS, TWO_BPS


class SwapStepResult(NamedTuple):
    """스왑 단계 결과"""
    delta: int  # 소비된 기준 토큰 수량 (exact input: 양수, exact output: 음수)
    actual_delta: int  # 상대 토큰 수량 (풀 기준 부호)
    fee: int  # 수수료로 적립된 재투자 유동성 ΔL
    next_sqrt_p: int  # 단계 종료 시 sqrtPriceX96


def compute_swap_step(
    liquidity: int,
    current_sqrt_p: int,
    target_sqrt_p: int,
    fee_in_bps: int,
    specified_amount: int,
    is_exact_input: bool,
    is_token0: bool
) -> SwapStepResult:
    """스왑 한 단계 계산

    1. 목표 가격까지 필요한 기준 토큰 수량(delta_next) 계산
    2. 남은 수량으로 목표에 도달할 수 없으면 남은 수량을 전부 쓰고 도달 가격을 다시 계산
    3. 수수료(ΔL)와 상대 토큰 수량 계산

    Args:
        liquidity: 현재 스왑 유동성 (base + reinvestment)
        current_sqrt_p: 현재 sqrtPriceX96
        target_sqrt_p: 목표 sqrtPriceX96 (다음 초기화 틱 또는 가격 제한)
        fee_in_bps: 수수료율 (bps)
        specified_amount: 남은 지정 수량 (양수 = exact input, 음수 = exact output)
        is_exact_input: exact input 여부
        is_token0: 지정 수량이 token0 인지 여부

    Returns:
        SwapStepResult
    """
    # 틱 이동으로 현재 가격이 이미 목표 가격인 경우
    if current_sqrt_p == target_sqrt_p:
        return SwapStepResult(0, 0, 0, current_sqrt_p)

    delta = calc_delta_next(
        liquidity, current_sqrt_p, target_sqrt_p, fee_in_bps, is_exact_input, is_token0
    )

    next_sqrt_p = 0
    if is_exact_input:
        if delta >= specified_amount:
            delta = specified_amount
        else:
            next_sqrt_p = target_sqrt_p
    else:
        if delta <= specified_amount:
            delta = specified_amount
        else:
            next_sqrt_p = target_sqrt_p

    abs_delta = abs(delta)
    if next_sqrt_p == 0:
        # 목표 가격에 도달하지 못함: 남은 수량으로 도달 가격 계산
        fee = calc_final_swap_fee_amount(
            abs_delta, liquidity, current_sqrt_p, fee_in_bps, is_exact_input, is_token0
        )
        next_sqrt_p = calc_final_price(
            abs_delta, liquidity, fee, current_sqrt_p, is_exact_input, is_token0
        )
    else:
        fee = calc_step_swap_fee_amount(
            abs_delta, liquidity, current_sqrt_p, next_sqrt_p, is_exact_input, is_token0
        )

    actual_delta = calc_actual_delta(
        liquidity, current_sqrt_p, next_sqrt_p, fee, is_exact_input, is_token0
    )
    return SwapStepResult(delta, actual_delta, fee, next_sqrt_p)


def calc_delta_next(
    liquidity: int,
    current_sqrt_p: int,
    target_sqrt_p: int,
    fee_in_bps: int,
    is_exact_input: bool,
    is_token0: bool
) -> int:
    """목표 가격에 도달하기 위한 기준 토큰 수량

    exact input 은 양수, exact output 은 음수를 반환합니다. 모두 절대값을 내림합니다.

    공식 (f = fee / BPS):
        exact input  token0: 2L|Δ√P| / (√Pc (2√Pt - f√Pc))
        exact input  token1: 2L|Δ√P| √Pc / (2√Pc - f√Pt)
        exact output token0: L|Δ√P| (2√Pc - f(√Pt + √Pc)) / (√Pc √Pt (2√Pc - f√Pt))
        exact output token1: L|Δ√P| (2√Pt - f(√Pt + √Pc)) / (2√Pt - f√Pc)
    """
    abs_price_diff = abs(current_sqrt_p - target_sqrt_p)

    if is_exact_input:
        if is_token0:
            denominator = TWO_BPS * target_sqrt_p - fee_in_bps * current_sqrt_p
            numerator = mul_div_floor(liquidity, TWO_BPS * abs_price_diff, denominator)
            return to_int256(mul_div_floor(numerator, Q96, current_sqrt_p))
        else:
            denominator = TWO_BPS * current_sqrt_p - fee_in_bps * target_sqrt_p
            numerator = mul_div_floor(liquidity, TWO_BPS * abs_price_diff, denominator)
            return to_int256(mul_div_floor(numerator, current_sqrt_p, Q96))
    else:
        if is_token0:
            denominator = TWO_BPS * current_sqrt_p - fee_in_bps * target_sqrt_p
            numerator = denominator - fee_in_bps * current_sqrt_p
            numerator = mul_div_floor(liquidity << RES_96, numerator, denominator)
            return rev_to_int256(
                mul_div_floor(numerator, abs_price_diff, current_sqrt_p) // target_sqrt_p
            )
        else:
            denominator = TWO_BPS * target_sqrt_p - fee_in_bps * current_sqrt_p
            numerator = denominator - fee_in_bps * target_sqrt_p
            numerator = mul_div_floor(liquidity, numerator, denominator)
            return rev_to_int256(mul_div_floor(numerator, abs_price_diff, Q96))


def calc_final_swap_fee_amount(
    abs_delta: int,
    liquidity: int,
    current_sqrt_p: int,
    fee_in_bps: int,
    is_exact_input: bool,
    is_token0: bool
) -> int:
    """목표에 도달하지 못하는 마지막 단계의 수수료 ΔL 추정

    exact input:
        token0: ΔL = f * |Δx| * √Pc / 2
        token1: ΔL = f * |Δy| / (2√Pc)
    exact output: a·ΔL² - 2b·ΔL + c = 0 의 작은 근
        a = f
        b = (BPS - f) * L - BPS * |Δ| * (√Pc 또는 1/√Pc)
        c = f * L * |Δ| * (√Pc 또는 1/√Pc)
    """
    if is_exact_input:
        if is_token0:
            return mul_div_floor(current_sqrt_p, abs_delta * fee_in_bps, TWO_BPS << RES_96)
        return mul_div_floor(Q96, abs_delta * fee_in_bps, TWO_BPS * current_sqrt_p)

    a = fee_in_bps
    b = (BPS - fee_in_bps) * liquidity
    c = fee_in_bps * liquidity * abs_delta
    if is_token0:
        b -= mul_div_floor(BPS * abs_delta, current_sqrt_p, Q96)
        c = mul_div_floor(c, current_sqrt_p, Q96)
    else:
        b -= mul_div_floor(BPS * abs_delta, Q96, current_sqrt_p)
        c = mul_div_floor(c, Q96, current_sqrt_p)
    return get_smaller_root_of_quad_eqn(a, b, c)


def calc_step_swap_fee_amount(
    abs_delta: int,
    liquidity: int,
    current_sqrt_p: int,
    next_sqrt_p: int,
    is_exact_input: bool,
    is_token0: bool
) -> int:
    """목표 가격에 정확히 도달하는 중간 단계의 수수료 ΔL

    token0: ΔL = √Pn * (L / √Pc ± |Δx|) - L
    token1: ΔL = (L * √Pc ± |Δy|) / √Pn - L

    반올림 때문에 음수가 되는 경우 0 을 반환합니다.
    """
    if is_token0:
        tmp1 = mul_div_floor(liquidity, Q96, current_sqrt_p)
        tmp2 = tmp1 + abs_delta if is_exact_input else tmp1 - abs_delta
        tmp3 = mul_div_floor(next_sqrt_p, tmp2, Q96)
    else:
        tmp1 = mul_div_floor(liquidity, current_sqrt_p, Q96)
        tmp2 = tmp1 + abs_delta if is_exact_input else tmp1 - abs_delta
        tmp3 = mul_div_floor(tmp2, Q96, next_sqrt_p)
    return tmp3 - liquidity if tmp3 > liquidity else 0


def calc_final_price(
    abs_delta: int,
    liquidity: int,
    fee: int,
    current_sqrt_p: int,
    is_exact_input: bool,
    is_token0: bool
) -> int:
    """남은 수량을 전부 소비했을 때의 도달 가격

    token0: √Pn = (L + ΔL) * √Pc / (L ± |Δx| * √Pc)
    token1: √Pn = (L ± |Δy| / √Pc) * √Pc / (L + ΔL)

    가격이 내려가는 방향은 올림, 올라가는 방향은 내림합니다.
    exact output 의 인출량 환산(tmp)은 올림하여, 극단 가격에서도
    0 이 아닌 인출은 항상 가격을 움직입니다.
    """
    if is_token0:
        if is_exact_input:
            # token0 -> token1, 가격 하락: 올림
            tmp = mul_div_floor(abs_delta, current_sqrt_p, Q96)
            result = mul_div_ceiling(liquidity + fee, current_sqrt_p, liquidity + tmp)
        else:
            # token1 -> token0, 가격 상승: 내림
            tmp = mul_div_ceiling(abs_delta, current_sqrt_p, Q96)
            result = mul_div_floor(liquidity + fee, current_sqrt_p, liquidity - tmp)
    else:
        if is_exact_input:
            # token1 -> token0, 가격 상승: 내림
            tmp = mul_div_floor(abs_delta, Q96, current_sqrt_p)
            result = mul_div_floor(liquidity + tmp, current_sqrt_p, liquidity + fee)
        else:
            # token0 -> token1, 가격 하락: 올림
            tmp = mul_div_ceiling(abs_delta, Q96, current_sqrt_p)
            result = mul_div_ceiling(liquidity - tmp, current_sqrt_p, liquidity + fee)
    return to_uint160(result)


def calc_actual_delta(
    liquidity: int,
    current_sqrt_p: int,
    next_sqrt_p: int,
    fee: int,
    is_exact_input: bool,
    is_token0: bool
) -> int:
    """상대 토큰의 실제 이동 수량 (풀 기준 부호)

    token0 지정: Δy = ΔL * √Pn + L * (√Pn - √Pc)
    token1 지정: Δx = (L + ΔL) / √Pn - L / √Pc

    exact input 은 풀이 지불하는 출력(음수)을 작게, exact output 은 풀이 받는 입력(양수)을 크게.
    """
    if is_token0:
        if is_exact_input:
            actual_delta = (
                to_int256(mul_div_ceiling(fee, next_sqrt_p, Q96))
                + rev_to_int256(mul_div_floor(liquidity, current_sqrt_p - next_sqrt_p, Q96))
            )
        else:
            actual_delta = (
                to_int256(mul_div_ceiling(fee, next_sqrt_p, Q96))
                + to_int256(mul_div_ceiling(liquidity, next_sqrt_p - current_sqrt_p, Q96))
            )
    else:
        actual_delta = (
            to_int256(mul_div_ceiling(liquidity + fee, Q96, next_sqrt_p))
            + rev_to_int256(mul_div_floor(liquidity, Q96, current_sqrt_p))
        )

    # 반올림으로 exact input 에서 1 이 나오는 경우
    if is_exact_input and actual_delta == 1:
        actual_delta = 0
    return actual_delta
