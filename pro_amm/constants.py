"""
ProAMM 상수 정의

풀 엔진 전체에서 공유하는 고정소수점/범위 상수:
- Q96: sqrt price 및 fee growth 인코딩에 사용 (2^96)
- MIN_TICK / MAX_TICK: 틱 인덱스 범위
- MIN_LIQUIDITY: unlock 시 재투자 유동성의 최소 바닥값
- BPS: 수수료 단위 (1 = 0.01%)
- FEE_TIERS / TICK_SPACINGS: 기본 수수료 티어와 틱 간격
"""

from typing import Dict

# Fixed-point 인코딩 상수
RES_96: int = 96
Q96: int = 2 ** 96

# 수수료 단위 (basis points)
BPS: int = 10000
TWO_BPS: int = 2 * BPS

# unlock 시 재투자 유동성 바닥값 (share 가격 계산의 0 나누기 방지)
MIN_LIQUIDITY: int = 100000

# 수수료 티어 (bps)
# 5 = 0.05%, 30 = 0.30%, 100 = 1.00%
FEE_TIERS: Dict[int, str] = {
    5: "0.05%",
    30: "0.30%",
    100: "1.00%",
}

# 각 수수료 티어별 틱 간격
TICK_SPACINGS: Dict[int, int] = {
    5: 10,
    30: 60,
    100: 200,
}

# 틱 범위 상수
MIN_TICK: int = -887272
MAX_TICK: int = 887272

# sqrt price 범위 (get_sqrt_ratio_at_tick(MIN_TICK), get_sqrt_ratio_at_tick(MAX_TICK))
MIN_SQRT_RATIO: int = 4295128739
MAX_SQRT_RATIO: int = 1461446703485210103287273052203988822378723970342

# 정수 폭 최대/최소값
UINT256_MAX: int = 2 ** 256 - 1
UINT160_MAX: int = 2 ** 160 - 1
UINT128_MAX: int = 2 ** 128 - 1
INT256_MAX: int = 2 ** 255 - 1
INT256_MIN: int = -(2 ** 255)
INT128_MAX: int = 2 ** 127 - 1
INT128_MIN: int = -(2 ** 127)

