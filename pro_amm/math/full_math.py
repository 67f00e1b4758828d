"""
Full Math - 고정소수점 곱셈/나눗셈 및 안전한 정수 변환

Python 정수는 임의 정밀도이므로 중간 곱(a * b)은 그대로 계산하고,
결과가 온체인 정수 폭(uint256 등)에 들어가는지만 검사합니다.

References:
- FullMath.sol (mulDivFloor / mulDivCeiling)
- SafeCast.sol

핵심 규칙:
    mul_div_floor(a, b, d)   = floor(a * b / d)
    mul_div_ceiling(a, b, d) = ceil(a * b / d)
    d == 0 이거나 결과 > UINT256_MAX 이면 MathOverflowError
"""

from ..constants import (
    UINT256_MAX,
    UINT160_MAX,
    UINT128_MAX,
    INT256_MAX,
    INT256_MIN,
    INT128_MAX,
    INT128_MIN,
)
from ..errors import MathOverflowError, CastOverflowError


def _check_operands(a: int, b: int, denominator: int) -> None:
    if denominator == 0:
        raise MathOverflowError("0 나누기: denominator == 0")
    if a < 0 or b < 0 or denominator < 0:
        raise MathOverflowError(f"음수 피연산자: a={a}, b={b}, denominator={denominator}")


def mul_div_floor(a: int, b: int, denominator: int) -> int:
    """floor(a * b / denominator)

    Args:
        a: 피승수 (uint256)
        b: 승수 (uint256)
        denominator: 제수 (uint256, 0 불가)

    Returns:
        내림한 몫

    Raises:
        MathOverflowError: 분모가 0 이거나 결과가 uint256 을 넘는 경우
    """
    _check_operands(a, b, denominator)
    result = (a * b) // denominator
    if result > UINT256_MAX:
        raise MathOverflowError(f"mul_div_floor 결과가 uint256 을 넘습니다: {result}")
    return result


def mul_div_ceiling(a: int, b: int, denominator: int) -> int:
    """ceil(a * b / denominator)

    Raises:
        MathOverflowError: 분모가 0 이거나 결과가 uint256 을 넘는 경우
    """
    _check_operands(a, b, denominator)
    product = a * b
    result = product // denominator
    if product % denominator > 0:
        result += 1
    if result > UINT256_MAX:
        raise MathOverflowError(f"mul_div_ceiling 결과가 uint256 을 넘습니다: {result}")
    return result


def div_ceil(numerator: int, denominator: int) -> int:
    """numerator / denominator 올림"""
    if denominator == 0:
        raise MathOverflowError("0 나누기: denominator == 0")
    result = numerator // denominator
    if numerator % denominator > 0:
        result += 1
    return result


def sqrt(y: int) -> int:
    """정수 제곱근 (내림), Babylonian 반복법

    Args:
        y: 음이 아닌 정수

    Returns:
        floor(sqrt(y))
    """
    if y < 0:
        raise MathOverflowError(f"음수의 제곱근: {y}")
    if y > 3:
        z = y
        x = y // 2 + 1
        while x < z:
            z = x
            x = (y // x + x) // 2
        return z
    if y != 0:
        return 1
    return 0


# ---------------------------------------------------------------------------
# Safe casts
# ---------------------------------------------------------------------------

def to_uint256(value: int) -> int:
    """int256 -> uint256 (음수 불가)"""
    if value < 0 or value > UINT256_MAX:
        raise CastOverflowError(f"uint256 범위 위반: {value}")
    return value


def to_uint160(value: int) -> int:
    """uint256 -> uint160"""
    if value < 0 or value > UINT160_MAX:
        raise CastOverflowError(f"uint160 범위 위반: {value}")
    return value


def to_uint128(value: int) -> int:
    """uint256 -> uint128"""
    if value < 0 or value > UINT128_MAX:
        raise CastOverflowError(f"uint128 범위 위반: {value}")
    return value


def to_int128(value: int) -> int:
    """int256 -> int128"""
    if value < INT128_MIN or value > INT128_MAX:
        raise CastOverflowError(f"int128 범위 위반: {value}")
    return value


def to_int256(value: int) -> int:
    """uint256 -> int256"""
    if value < INT256_MIN or value > INT256_MAX:
        raise CastOverflowError(f"int256 범위 위반: {value}")
    return value


def rev_to_int256(value: int) -> int:
    """uint256 값을 음수 int256 으로 (-value)"""
    if value < 0 or value > INT256_MAX:
        raise CastOverflowError(f"int256 음수 변환 범위 위반: {value}")
    return -value


def rev_to_uint256(value: int) -> int:
    """음수 int256 값의 절대값 (uint256)"""
    if value > 0 or value < INT256_MIN:
        raise CastOverflowError(f"uint256 절대값 변환 범위 위반: {value}")
    return -value
