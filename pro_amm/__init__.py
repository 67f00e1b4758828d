"""
ProAMM - 집중 유동성 + 수수료 자동 재투자 AMM 엔진

온체인 수준 정밀도로 ProAMM 풀의 틱/포지션/스왑 상태 전이를 재현하는 라이브러리.
수수료는 토큰으로 지급되지 않고 전 구간 재투자 유동성으로 복리 적립됩니다.
"""

__version__ = "0.1.0"

from .constants import Q96, BPS, MIN_LIQUIDITY, FEE_TIERS, TICK_SPACINGS
from .errors import ProAMMError
from .callbacks import ProAMMCallback
from .token import Token, ReinvestmentToken
from .pool import ProAMMPool
