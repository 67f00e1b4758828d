"""
Sqrt Price Math - sqrtPriceX96 인코딩/디코딩

ProAMM의 가격은 sqrtPriceX96 형식으로 저장됩니다.
sqrtPriceX96 = sqrt(reserve1 / reserve0) * 2^96
"""

from .full_math import sqrt
from ..constants import Q96


def encode_price_sqrt(reserve1: int, reserve0: int) -> int:
    """token1/token0 비율을 sqrtPriceX96으로 인코딩 (정수 연산)

    sqrtPriceX96 = floor(sqrt(reserve1 * 2^192 / reserve0))

    Args:
        reserve1: token1 수량
        reserve0: token0 수량

    Returns:
        sqrtPriceX96 값

    Example:
        >>> encode_price_sqrt(1, 1) == 2 ** 96
        True
    """
    if reserve0 <= 0 or reserve1 <= 0:
        raise ValueError("가격은 양수여야 합니다")
    return sqrt((reserve1 << 192) // reserve0)


def sqrt_price_x96_to_price(
    sqrt_price_x96: int,
    decimal0: int = 18,
    decimal1: int = 18
) -> float:
    """sqrtPriceX96을 human-readable 가격으로 변환

    가격 = (sqrtPriceX96 / 2^96)^2 / 10^(decimal1 - decimal0)

    Args:
        sqrt_price_x96: sqrtPriceX96 값
        decimal0: token0 소수점 자릿수
        decimal1: token1 소수점 자릿수

    Returns:
        가격 (token1/token0 기준, human-readable)
    """
    sqrt_price = sqrt_price_x96 / Q96
    price_raw = sqrt_price ** 2

    decimal_adjustment = 10 ** (decimal1 - decimal0)
    return price_raw / decimal_adjustment
