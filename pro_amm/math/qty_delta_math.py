"""
Qty Delta Math - 유동성 ↔ 토큰 수량 계산

특정 가격 범위의 유동성 변화에 필요한(또는 반환되는) token0/token1 수량.
풀이 받는 수량은 올림, 풀이 지불하는 수량은 내림하여 항상 풀에 유리하게 반올림합니다.

References:
- QtyDeltaMath.sol
- LiqDeltaMath.sol

핵심 공식:
    Δx = L * (√P_b - √P_a) / (√P_a * √P_b)   # token0
    Δy = L * (√P_b - √P_a)                   # token1
"""

from typing import Tuple

from .full_math import (
    mul_div_floor,
    mul_div_ceiling,
    div_ceil,
    to_int256,
    rev_to_int256,
    to_uint128,
)
from ..constants import Q96, RES_96, MIN_LIQUIDITY
from ..errors import LiquidityUnderflowError


def calc_required_qty0(
    lower_sqrt_p: int,
    upper_sqrt_p: int,
    liquidity: int,
    is_add_liquidity: bool
) -> int:
    """두 가격 사이 유동성에 대응하는 token0 수량 (부호 있음)

    공식: Δx = L * (√P_upper - √P_lower) / (√P_upper * √P_lower)

    Args:
        lower_sqrt_p: 하한 sqrtPriceX96
        upper_sqrt_p: 상한 sqrtPriceX96
        liquidity: 유동성 (절대값)
        is_add_liquidity: True면 풀이 받는 수량(양수, 올림), False면 풀이 지불하는 수량(음수, 내림)

    Returns:
        token0 수량 (풀 기준 부호)
    """
    numerator1 = liquidity << RES_96
    numerator2 = upper_sqrt_p - lower_sqrt_p

    if is_add_liquidity:
        return to_int256(div_ceil(
            mul_div_ceiling(numerator1, numerator2, upper_sqrt_p),
            lower_sqrt_p
        ))
    return rev_to_int256(mul_div_floor(numerator1, numerator2, upper_sqrt_p) // lower_sqrt_p)


def calc_required_qty1(
    lower_sqrt_p: int,
    upper_sqrt_p: int,
    liquidity: int,
    is_add_liquidity: bool
) -> int:
    """두 가격 사이 유동성에 대응하는 token1 수량 (부호 있음)

    공식: Δy = L * (√P_upper - √P_lower)

    Args:
        lower_sqrt_p: 하한 sqrtPriceX96
        upper_sqrt_p: 상한 sqrtPriceX96
        liquidity: 유동성 (절대값)
        is_add_liquidity: True면 양수(올림), False면 음수(내림)

    Returns:
        token1 수량 (풀 기준 부호)
    """
    numerator = upper_sqrt_p - lower_sqrt_p

    if is_add_liquidity:
        return to_int256(mul_div_ceiling(liquidity, numerator, Q96))
    return rev_to_int256(mul_div_floor(liquidity, numerator, Q96))


def calc_required_qtys(
    current_sqrt_p: int,
    lower_sqrt_p: int,
    upper_sqrt_p: int,
    liquidity: int,
    is_add_liquidity: bool
) -> Tuple[int, int]:
    """포지션 유동성 변화에 필요한 (qty0, qty1)

    현재 가격 위치에 따라 세 가지 경우:
    - 가격이 범위 아래: token0만
    - 가격이 범위 내: 양쪽 토큰
    - 가격이 범위 위: token1만

    Args:
        current_sqrt_p: 현재 sqrtPriceX96
        lower_sqrt_p: 하한 sqrtPriceX96
        upper_sqrt_p: 상한 sqrtPriceX96
        liquidity: 유동성 변화량의 절대값
        is_add_liquidity: True면 mint, False면 burn

    Returns:
        (qty0, qty1) 튜플. mint 는 양수, burn 은 음수
    """
    qty0 = 0
    qty1 = 0

    if current_sqrt_p < lower_sqrt_p:
        # 가격이 범위 아래: token0만 사용
        qty0 = calc_required_qty0(lower_sqrt_p, upper_sqrt_p, liquidity, is_add_liquidity)

    elif current_sqrt_p >= upper_sqrt_p:
        # 가격이 범위 위: token1만 사용
        qty1 = calc_required_qty1(lower_sqrt_p, upper_sqrt_p, liquidity, is_add_liquidity)

    else:
        # 가격이 범위 내: 양쪽 토큰 사용
        qty0 = calc_required_qty0(current_sqrt_p, upper_sqrt_p, liquidity, is_add_liquidity)
        qty1 = calc_required_qty1(lower_sqrt_p, current_sqrt_p, liquidity, is_add_liquidity)

    return qty0, qty1


def calc_unlock_qtys(initial_sqrt_p: int) -> Tuple[int, int]:
    """unlock 시 MIN_LIQUIDITY 재투자 유동성에 필요한 (qty0, qty1)

    전 구간 유동성이므로:
        qty0 = L / √P   (올림)
        qty1 = L * √P   (올림)

    가격 범위 제약 때문에 두 값 모두 1 이상입니다.
    """
    qty0 = mul_div_ceiling(MIN_LIQUIDITY, Q96, initial_sqrt_p)
    qty1 = mul_div_ceiling(MIN_LIQUIDITY, initial_sqrt_p, Q96)
    return qty0, qty1


def get_qty0_from_burn_r_tokens(sqrt_p: int, liquidity: int) -> int:
    """share burn 으로 풀려난 재투자 유동성의 token0 수량 (내림)"""
    return mul_div_floor(liquidity, Q96, sqrt_p)


def get_qty1_from_burn_r_tokens(sqrt_p: int, liquidity: int) -> int:
    """share burn 으로 풀려난 재투자 유동성의 token1 수량 (내림)"""
    return mul_div_floor(liquidity, sqrt_p, Q96)


def apply_liquidity_delta(liquidity: int, liquidity_delta: int) -> int:
    """부호 있는 유동성 변화량을 uint128 유동성에 적용

    Args:
        liquidity: 현재 유동성 (uint128)
        liquidity_delta: 부호 있는 변화량

    Returns:
        새 유동성

    Raises:
        LiquidityUnderflowError: 결과가 음수인 경우
        CastOverflowError: 결과가 uint128 을 넘는 경우
    """
    result = liquidity + liquidity_delta
    if result < 0:
        raise LiquidityUnderflowError(
            f"유동성이 음수가 됩니다: {liquidity} + ({liquidity_delta})"
        )
    return to_uint128(result)
