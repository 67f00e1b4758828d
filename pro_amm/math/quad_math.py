"""
Quad Math - 이차방정식의 작은 근

exact output 스왑 단계의 수수료(유동성 증가분)는 아래 방정식의 작은 양의 근입니다.

    a·x² - 2b·x + c = 0   (a > 0, b > 0)

근의 공식에서 공통 인수 2 를 약분하면:

    x = (b - √(b² - a·c)) / a

나눗셈은 뺄셈이 끝난 뒤 마지막에 한 번만 수행합니다.
"""

from .full_math import sqrt
from ..errors import MathOverflowError


def get_smaller_root_of_quad_eqn(a: int, b: int, c: int) -> int:
    """a·x² - 2b·x + c = 0 의 작은 근 (내림)

    Args:
        a: 이차항 계수 (> 0)
        b: 일차항 계수의 절반 (> 0)
        c: 상수항 (>= 0)

    Returns:
        작은 근 floor((b - isqrt(b² - a·c)) / a)

    Raises:
        MathOverflowError: 계수가 유효하지 않거나 실근이 없는 경우
    """
    if a <= 0:
        raise MathOverflowError(f"이차항 계수는 양수여야 합니다: {a}")
    if b < 0:
        raise MathOverflowError(f"일차항 계수가 음수입니다: {b}")
    discriminant = b * b - a * c
    if discriminant < 0:
        raise MathOverflowError("실근이 없습니다 (b² < a·c)")
    return (b - sqrt(discriminant)) // a
