"""
Token Ledger - 인메모리 토큰 잔고

풀은 콜백 이후 자신의 잔고 증가분으로 지불을 검증하므로,
토큰은 주소별 잔고와 transfer / mint / burn 만 제공합니다.
ReinvestmentToken 은 풀이 발행하는 reinvestment share (rToken) 입니다.
"""

import logging
from typing import Dict, List

from .errors import ProAMMError
from .state.journal import UndoJournal

logger = logging.getLogger(__name__)


class TokenError(ProAMMError):
    """잔고 부족 등 토큰 ledger 오류"""
    pass


class Token:
    """Fungible token ledger

    사용법:
        usdc = Token("0xa0b8...", symbol="USDC")
        usdc.mint("alice", 10**18)
        usdc.transfer("alice", "pool", 500)
    """

    def __init__(self, address: str, symbol: str = ""):
        self.address = address
        self.symbol = symbol or address
        self.balances: Dict[str, int] = {}
        self.total_supply: int = 0
        self.journal = UndoJournal(self.balances)
        self._supply_frames: List[int] = []

    def __repr__(self) -> str:
        return f"Token({self.symbol!r}, address={self.address!r})"

    def balance_of(self, account: str) -> int:
        return self.balances.get(account, 0)

    def transfer(self, sender: str, recipient: str, amount: int) -> None:
        """sender → recipient 이체

        Raises:
            TokenError: 음수 수량 또는 잔고 부족
        """
        if amount < 0:
            raise TokenError(f"음수 이체 수량: {amount}")
        balance = self.balance_of(sender)
        if balance < amount:
            raise TokenError(
                f"{self.symbol}: {sender} 잔고 부족 ({balance} < {amount})"
            )
        self.journal.record(sender)
        self.journal.record(recipient)
        self.balances[sender] = balance - amount
        self.balances[recipient] = self.balance_of(recipient) + amount
        logger.debug(f"{self.symbol} transfer {sender} -> {recipient}: {amount}")

    def mint(self, account: str, amount: int) -> None:
        if amount < 0:
            raise TokenError(f"음수 발행 수량: {amount}")
        self.journal.record(account)
        self.balances[account] = self.balance_of(account) + amount
        self.total_supply += amount

    def burn(self, account: str, amount: int) -> None:
        if amount < 0:
            raise TokenError(f"음수 소각 수량: {amount}")
        balance = self.balance_of(account)
        if balance < amount:
            raise TokenError(
                f"{self.symbol}: {account} 소각 잔고 부족 ({balance} < {amount})"
            )
        self.journal.record(account)
        self.balances[account] = balance - amount
        self.total_supply -= amount

    def begin(self) -> None:
        """변경 기록 시작 (중첩 가능)"""
        self.journal.begin()
        self._supply_frames.append(self.total_supply)

    def commit(self) -> None:
        self.journal.commit()
        self._supply_frames.pop()

    def rollback(self) -> None:
        """가장 최근 begin() 이후의 잔고 / 총 공급량 변경 취소"""
        self.journal.rollback()
        self.total_supply = self._supply_frames.pop()


class ReinvestmentToken(Token):
    """풀 전용 reinvestment share (rToken)

    total_supply 는 share 가격(reinvestment_liquidity / total_supply) 계산에 사용됩니다.
    """

    def __init__(self, pool_address: str):
        super().__init__(f"{pool_address}:rToken", symbol="PRO-R")
