"""
Reinvestment Math - 수수료 자동 복리 계산

풀은 수수료를 직접 지급하지 않습니다. 수수료는 전 구간 재투자 유동성(reinvestL)을 늘리고,
그에 대한 청구권은 reinvestment share(rToken) 로 표현됩니다.

핵심 공식:
    lp_contribution = baseL * (reinvestL - reinvestLLast) / (baseL + reinvestL)
    rMintQty        = rTotalSupply * lp_contribution / reinvestLLast
    Δf_g            = rMintQty * 2^96 / baseL
    burn ΔL         = rQty * reinvestL / rTotalSupply
"""

from .full_math import mul_div_floor
from ..constants import Q96


def calc_r_mint_qty(
    reinvest_l: int,
    reinvest_l_last: int,
    base_l: int,
    r_total_supply: int
) -> int:
    """마지막 체크포인트 이후 재투자 유동성 증가분에 대해 발행할 share 수량

    증가분 중 활성 유동성(baseL)의 기여 비율만큼만 share 를 발행하여
    share 가격(reinvestL / rTotalSupply)을 보존합니다.

    Args:
        reinvest_l: 현재 재투자 유동성
        reinvest_l_last: 마지막 체크포인트의 재투자 유동성
        base_l: 현재 활성 유동성
        r_total_supply: 현재 share 총 발행량

    Returns:
        발행할 share 수량 (증가분이 없으면 0)
    """
    if reinvest_l <= reinvest_l_last or base_l == 0:
        return 0
    lp_contribution = mul_div_floor(base_l, reinvest_l - reinvest_l_last, base_l + reinvest_l)
    return mul_div_floor(r_total_supply, lp_contribution, reinvest_l_last)


def calc_fee_growth_increment(r_mint_qty: int, base_l: int) -> int:
    """새로 발행된 share 를 활성 유동성 단위당 fee growth 증가분(Q96)으로 변환"""
    return mul_div_floor(r_mint_qty, Q96, base_l)


def calc_burn_delta(r_qty: int, reinvest_l: int, r_total_supply: int) -> int:
    """share 상환으로 풀려나는 재투자 유동성

    Args:
        r_qty: 상환할 share 수량
        reinvest_l: 현재 재투자 유동성
        r_total_supply: 체크포인트 발행 후, 상환 전 share 총 발행량

    Returns:
        풀려나는 재투자 유동성 (내림)
    """
    return mul_div_floor(r_qty, reinvest_l, r_total_supply)
