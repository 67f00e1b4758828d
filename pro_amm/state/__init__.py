"""
State layer for ProAMM

- types: 틱/포지션/풀 상태와 이벤트 레코드
- tick_bitmap: 초기화된 틱 인덱스
- ticks: 틱 ledger
- positions: 포지션 ledger
- journal: 실패한 작업의 undo 기록
"""

from .types import (
    TickInfo,
    PositionKey,
    PositionInfo,
    PoolStatus,
    PoolData,
    PoolStateView,
    ReinvestmentStateView,
    SwapQuote,
    InitializeEvent,
    MintEvent,
    BurnEvent,
    BurnRTokensEvent,
    SwapEvent,
)
from .tick_bitmap import TickBitmap
from .ticks import TickLedger
from .positions import PositionLedger
from .journal import UndoJournal
