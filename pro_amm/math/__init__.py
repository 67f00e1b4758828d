"""
Math layer for ProAMM

온체인 수준 정밀도의 수학 함수들:
- full_math: mul-div (내림/올림), 안전한 정수 변환
- tick_math: Tick ↔ sqrtPrice 변환
- sqrt_price_math: sqrtPriceX96 인코딩
- qty_delta_math: 유동성 ↔ 토큰 수량
- swap_math: 스왑 단계 계산
- quad_math: exact output 수수료 이차방정식
- reinvestment_math: 재투자 share 발행/상환
- fee_math: 범위 내 fee growth
"""

from .full_math import (
    mul_div_floor,
    mul_div_ceiling,
    div_ceil,
)
from .tick_math import (
    get_tick_at_sqrt_ratio,
    get_sqrt_ratio_at_tick,
    get_max_liquidity_per_tick,
)
from .sqrt_price_math import (
    encode_price_sqrt,
    sqrt_price_x96_to_price,
)
from .qty_delta_math import (
    calc_required_qtys,
    calc_unlock_qtys,
)
from .swap_math import (
    SwapStepResult,
    compute_swap_step,
)
from .reinvestment_math import (
    calc_r_mint_qty,
    calc_fee_growth_increment,
    calc_burn_delta,
)
from .fee_math import (
    fee_growth_inside,
    calculate_fee_shares,
)
