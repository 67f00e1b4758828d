"""
ProAMM 콜백 프로토콜

풀은 먼저 상태를 바꾸고 지불할 토큰을 보낸 뒤, 호출자의 콜백을 불러
받아야 할 토큰을 요청합니다. 콜백이 끝나면 풀 잔고의 증가분을 확인하고
부족하면 SettlementError 로 전체 작업을 되돌립니다.

수량 부호는 풀 기준입니다: 양수 = 풀이 받아야 하는 수량, 음수 = 풀이 지불한 수량.
"""

from abc import ABC, abstractmethod
from typing import Any


class ProAMMCallback(ABC):
    """unlock / mint / swap 지불 콜백"""

    @abstractmethod
    def unlock_callback(self, qty0: int, qty1: int, data: Any) -> None:
        """unlock 시 초기 재투자 유동성 (qty0, qty1) 지불"""

    @abstractmethod
    def mint_callback(self, qty0: int, qty1: int, data: Any) -> None:
        """mint 시 포지션 유동성 (qty0, qty1) 지불"""

    @abstractmethod
    def swap_callback(self, delta_qty0: int, delta_qty1: int, data: Any) -> None:
        """swap 시 양수 쪽 delta 지불"""
