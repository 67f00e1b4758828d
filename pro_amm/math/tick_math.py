"""
Tick Math - Tick ↔ Sqrt Price 변환

ProAMM 풀의 틱 수학 함수들. 온체인 컨트랙트와 동일한 정밀도로 구현.

References:
- TickMath.sol (getSqrtRatioAtTick / getTickAtSqrtRatio)
- Tick.sol (tickSpacingToMaxLiquidityPerTick)

핵심 공식:
    price = 1.0001^tick
    sqrtPriceX96 = sqrt(1.0001^tick) * 2^96
    tick = floor(log_sqrt(1.0001)(sqrtPriceX96 / 2^96))
"""

from ..constants import (
    MIN_TICK,
    MAX_TICK,
    MIN_SQRT_RATIO,
    MAX_SQRT_RATIO,
    UINT128_MAX,
    TICK_SPACINGS,
)
from ..errors import TickOutOfRangeError, PriceOutOfRangeError


def get_sqrt_ratio_at_tick(tick: int) -> int:
    """틱에서 sqrtPriceX96 계산

    비트별 매직 상수의 곱으로 1.0001^(tick/2) 를 Q128.128 로 근사한 뒤
    Q64.96 으로 올림 변환합니다. 정수 연산만 사용.

    Args:
        tick: 틱 인덱스 (-887272 ~ 887272)

    Returns:
        sqrtPriceX96 (Q64.96 형식)

    Raises:
        TickOutOfRangeError: 틱이 유효 범위를 벗어난 경우
    """
    if tick < MIN_TICK or tick > MAX_TICK:
        raise TickOutOfRangeError(f"틱이 유효 범위를 벗어났습니다: {tick} (범위: {MIN_TICK} ~ {MAX_TICK})")

    abs_tick = abs(tick)

    # 매직 넘버를 사용한 비트 연산
    ratio = 0x100000000000000000000000000000000 if abs_tick & 0x1 == 0 \
        else 0xfffcb933bd6fad37aa2d162d1a594001

    if abs_tick & 0x2:
        ratio = (ratio * 0xfff97272373d413259a46990580e213a) >> 128
    if abs_tick & 0x4:
        ratio = (ratio * 0xfff2e50f5f656932ef12357cf3c7fdcc) >> 128
    if abs_tick & 0x8:
        ratio = (ratio * 0xffe5caca7e10e4e61c3624eaa0941cd0) >> 128
    if abs_tick & 0x10:
        ratio = (ratio * 0xffcb9843d60f6159c9db58835c926644) >> 128
    if abs_tick & 0x20:
        ratio = (ratio * 0xff973b41fa98c081472e6896dfb254c0) >> 128
    if abs_tick & 0x40:
        ratio = (ratio * 0xff2ea16466c96a3843ec78b326b52861) >> 128
    if abs_tick & 0x80:
        ratio = (ratio * 0xfe5dee046a99a2a811c461f1969c3053) >> 128
    if abs_tick & 0x100:
        ratio = (ratio * 0xfcbe86c7900a88aedcffc83b479aa3a4) >> 128
    if abs_tick & 0x200:
        ratio = (ratio * 0xf987a7253ac413176f2b074cf7815e54) >> 128
    if abs_tick & 0x400:
        ratio = (ratio * 0xf3392b0822b70005940c7a398e4b70f3) >> 128
    if abs_tick & 0x800:
        ratio = (ratio * 0xe7159475a2c29b7443b29c7fa6e889d9) >> 128
    if abs_tick & 0x1000:
        ratio = (ratio * 0xd097f3bdfd2022b8845ad8f792aa5825) >> 128
    if abs_tick & 0x2000:
        ratio = (ratio * 0xa9f746462d870fdf8a65dc1f90e061e5) >> 128
    if abs_tick & 0x4000:
        ratio = (ratio * 0x70d869a156d2a1b890bb3df62baf32f7) >> 128
    if abs_tick & 0x8000:
        ratio = (ratio * 0x31be135f97d08fd981231505542fcfa6) >> 128
    if abs_tick & 0x10000:
        ratio = (ratio * 0x9aa508b5b7a84e1c677de54f3e99bc9) >> 128
    if abs_tick & 0x20000:
        ratio = (ratio * 0x5d6af8dedb81196699c329225ee604) >> 128
    if abs_tick & 0x40000:
        ratio = (ratio * 0x2216e584f5fa1ea926041bedfe98) >> 128
    if abs_tick & 0x80000:
        ratio = (ratio * 0x48a170391f7dc42444e8fa2) >> 128

    if tick > 0:
        ratio = (2**256 - 1) // ratio

    # Q128.128 -> Q64.96 (올림)
    sqrt_price_x96 = (ratio >> 32) + (1 if ratio % (1 << 32) != 0 else 0)
    return sqrt_price_x96


def get_tick_at_sqrt_ratio(sqrt_price_x96: int) -> int:
    """sqrtPriceX96에서 틱 계산

    get_sqrt_ratio_at_tick(tick) <= sqrt_price_x96 를 만족하는 가장 큰 틱을 반환합니다.
    (틱 공간에서 음의 무한대 방향으로 내림)

    Args:
        sqrt_price_x96: sqrtPriceX96 (Q64.96 형식)

    Returns:
        틱 인덱스

    Raises:
        PriceOutOfRangeError: sqrtPriceX96이 [MIN_SQRT_RATIO, MAX_SQRT_RATIO) 를 벗어난 경우
    """
    if sqrt_price_x96 < MIN_SQRT_RATIO or sqrt_price_x96 >= MAX_SQRT_RATIO:
        raise PriceOutOfRangeError(
            f"sqrtPriceX96이 유효 범위를 벗어났습니다: {sqrt_price_x96}"
        )

    ratio = sqrt_price_x96 << 32

    r = ratio
    msb = 0

    # 최상위 비트 찾기
    f = (1 if r > 0xFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFF else 0) << 7
    msb |= f
    r >>= f

    f = (1 if r > 0xFFFFFFFFFFFFFFFF else 0) << 6
    msb |= f
    r >>= f

    f = (1 if r > 0xFFFFFFFF else 0) << 5
    msb |= f
    r >>= f

    f = (1 if r > 0xFFFF else 0) << 4
    msb |= f
    r >>= f

    f = (1 if r > 0xFF else 0) << 3
    msb |= f
    r >>= f

    f = (1 if r > 0xF else 0) << 2
    msb |= f
    r >>= f

    f = (1 if r > 0x3 else 0) << 1
    msb |= f
    r >>= f

    f = 1 if r > 0x1 else 0
    msb |= f

    if msb >= 128:
        r = ratio >> (msb - 127)
    else:
        r = ratio << (127 - msb)

    log_2 = (msb - 128) << 64

    # 로그 계산 (소수부 14비트)
    for i in range(14):
        r = (r * r) >> 127
        f = r >> 128
        log_2 |= f << (63 - i)
        r >>= f

    log_sqrt10001 = log_2 * 255738958999603826347141

    tick_low = (log_sqrt10001 - 3402992956809132418596140100660247210) >> 128
    tick_high = (log_sqrt10001 + 291339464771989622907027621153398088495) >> 128

    if tick_low == tick_high:
        return tick_low

    # 두 후보 틱의 정확한 가격과 비교
    if get_sqrt_ratio_at_tick(tick_high) <= sqrt_price_x96:
        return tick_high
    else:
        return tick_low


def get_min_tick(tick_spacing: int) -> int:
    """tick spacing 에 정렬된 최소 틱 (0 방향으로 절사)"""
    return -(-MIN_TICK // tick_spacing) * tick_spacing


def get_max_tick(tick_spacing: int) -> int:
    """tick spacing 에 정렬된 최대 틱 (0 방향으로 절사)"""
    return (MAX_TICK // tick_spacing) * tick_spacing


def get_max_liquidity_per_tick(tick_spacing: int) -> int:
    """틱당 최대 유동성

    모든 정렬된 틱이 최대 유동성을 가져도 uint128 활성 유동성이
    오버플로우하지 않도록 상한을 계산합니다.

        num_ticks = (max_tick - min_tick) / tick_spacing + 1
        max_liquidity_per_tick = UINT128_MAX // num_ticks

    Args:
        tick_spacing: 틱 간격

    Returns:
        틱당 최대 liquidity_gross
    """
    if tick_spacing <= 0:
        raise ValueError(f"틱 간격은 양수여야 합니다: {tick_spacing}")
    min_tick = get_min_tick(tick_spacing)
    max_tick = get_max_tick(tick_spacing)
    num_ticks = (max_tick - min_tick) // tick_spacing + 1
    return UINT128_MAX // num_ticks


def get_nearest_spaced_tick(tick: int, tick_spacing: int) -> int:
    """틱을 유효한 틱 간격으로 내림 정렬 (음의 무한대 방향)

    Args:
        tick: 정렬할 틱
        tick_spacing: 틱 간격 (예: 60 for 0.3% fee)

    Returns:
        tick 이하의 가장 가까운 정렬된 틱
    """
    return (tick // tick_spacing) * tick_spacing


def get_tick_spacing_for_fee(fee_bps: int) -> int:
    """수수료 티어에 해당하는 틱 간격 반환

    Args:
        fee_bps: 수수료 티어 (5, 30, 100)

    Returns:
        틱 간격
    """
    if fee_bps not in TICK_SPACINGS:
        raise ValueError(f"지원하지 않는 수수료 티어: {fee_bps}")
    return TICK_SPACINGS[fee_bps]
