"""
Full Math / Quad Math / Sqrt Price 테스트
"""

import pytest

from ..math.full_math import (
    mul_div_floor,
    mul_div_ceiling,
    div_ceil,
    sqrt,
    to_uint128,
    to_int128,
    to_int256,
    rev_to_int256,
    rev_to_uint256,
)
from ..math.quad_math import get_smaller_root_of_quad_eqn
from ..math.sqrt_price_math import encode_price_sqrt, sqrt_price_x96_to_price
from ..constants import Q96, UINT256_MAX, UINT128_MAX, INT128_MIN
from ..errors import MathOverflowError, CastOverflowError


class TestMulDiv:
    """mul_div_floor / mul_div_ceiling 테스트"""

    def test_exact_division(self):
        """나누어 떨어지면 내림 = 올림"""
        assert mul_div_floor(6, 4, 3) == 8
        assert mul_div_ceiling(6, 4, 3) == 8

    def test_rounding(self):
        """나머지가 있으면 올림은 1 큼"""
        assert mul_div_floor(7, 3, 2) == 10
        assert mul_div_ceiling(7, 3, 2) == 11

    def test_large_intermediate(self):
        """중간 곱이 uint256 을 넘어도 결과가 맞으면 성공"""
        assert mul_div_floor(UINT256_MAX, UINT256_MAX, UINT256_MAX) == UINT256_MAX
        assert mul_div_floor(Q96 * Q96, Q96 * Q96, Q96 * Q96) == Q96 * Q96

    def test_zero_denominator(self):
        """분모 0"""
        with pytest.raises(MathOverflowError):
            mul_div_floor(1, 1, 0)
        with pytest.raises(ArithmeticError):
            mul_div_ceiling(1, 1, 0)

    def test_result_overflow(self):
        """결과가 uint256 초과"""
        with pytest.raises(MathOverflowError):
            mul_div_floor(UINT256_MAX, 2, 1)
        with pytest.raises(MathOverflowError):
            mul_div_ceiling(UINT256_MAX, UINT256_MAX, UINT256_MAX - 1)

    def test_negative_operand(self):
        """음수 피연산자"""
        with pytest.raises(MathOverflowError):
            mul_div_floor(-1, 1, 1)

    def test_div_ceil(self):
        assert div_ceil(10, 5) == 2
        assert div_ceil(11, 5) == 3
        with pytest.raises(MathOverflowError):
            div_ceil(1, 0)


class TestSqrt:
    """정수 제곱근"""

    def test_small_values(self):
        assert [sqrt(i) for i in range(10)] == [0, 1, 1, 1, 2, 2, 2, 2, 2, 3]

    def test_large_value(self):
        assert sqrt(Q96 * Q96) == Q96
        assert sqrt(Q96 * Q96 - 1) == Q96 - 1


class TestSafeCast:
    """정수 폭 변환"""

    def test_uint128_bounds(self):
        assert to_uint128(UINT128_MAX) == UINT128_MAX
        with pytest.raises(CastOverflowError):
            to_uint128(UINT128_MAX + 1)
        with pytest.raises(CastOverflowError):
            to_uint128(-1)

    def test_int128_bounds(self):
        assert to_int128(INT128_MIN) == INT128_MIN
        with pytest.raises(CastOverflowError):
            to_int128(INT128_MIN - 1)

    def test_rev_casts(self):
        assert rev_to_int256(5) == -5
        assert rev_to_uint256(-5) == 5
        assert to_int256(-5) == -5
        with pytest.raises(CastOverflowError):
            rev_to_int256(-1)
        with pytest.raises(CastOverflowError):
            rev_to_uint256(1)


class TestQuadMath:
    """a·x² - 2b·x + c = 0 의 작은 근"""

    def test_integer_roots(self):
        """x² - 10x + 24 = 0 -> 4, 6"""
        assert get_smaller_root_of_quad_eqn(1, 5, 24) == 4

    def test_division_applied_last(self):
        """2x² - 6x + 4 = 0 -> 1, 2"""
        assert get_smaller_root_of_quad_eqn(2, 3, 4) == 1

    def test_zero_constant(self):
        """c = 0 이면 작은 근은 0"""
        assert get_smaller_root_of_quad_eqn(7, 100, 0) == 0

    def test_no_real_root(self):
        """판별식 음수"""
        with pytest.raises(MathOverflowError):
            get_smaller_root_of_quad_eqn(1, 1, 2)

    def test_invalid_leading_coefficient(self):
        with pytest.raises(MathOverflowError):
            get_smaller_root_of_quad_eqn(0, 1, 0)


class TestSqrtPriceEncoding:
    """encode_price_sqrt / sqrt_price_x96_to_price"""

    def test_encode(self):
        assert encode_price_sqrt(1, 1) == Q96
        assert encode_price_sqrt(4, 1) == 2 * Q96
        assert encode_price_sqrt(1, 4) == Q96 // 2

    def test_encode_invalid(self):
        with pytest.raises(ValueError):
            encode_price_sqrt(0, 1)

    def test_decode(self):
        assert abs(sqrt_price_x96_to_price(2 * Q96) - 4.0) < 1e-12
        assert abs(sqrt_price_x96_to_price(Q96, 6, 18) - 1e-12) < 1e-24
