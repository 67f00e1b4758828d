"""
ProAMM 테스트 공용 fixture / 헬퍼

- 토큰 두 개와 사용자 잔고
- 요청 수량을 그대로 지불하는 FundedCallback
- 적게 지불하는 / 재진입하는 잘못된 콜백
- unlock 된 풀
- 결정적 난수(random.Random(seed)) 기반 스왑 헬퍼
"""

import random

import pytest

from ..callbacks import ProAMMCallback
from ..constants import BPS, MIN_SQRT_RATIO, MAX_SQRT_RATIO
from ..math.sqrt_price_math import encode_price_sqrt
from ..math.tick_math import get_sqrt_ratio_at_tick
from ..pool import ProAMMPool
from ..token import Token

USER = "user"
PRECISION = 10 ** 18
USER_BALANCE = 10 ** 40

SWAP_FEE_BPS = 30
TICK_SPACING = 60


class FundedCallback(ProAMMCallback):
    """payer 잔고에서 요청 수량을 풀로 이체"""

    def __init__(self, pool: ProAMMPool, payer: str = USER):
        self.pool = pool
        self.payer = payer
        self.calls = []

    def _pay(self, qty0: int, qty1: int) -> None:
        if qty0 > 0:
            self.pool.token0.transfer(self.payer, self.pool.address, qty0)
        if qty1 > 0:
            self.pool.token1.transfer(self.payer, self.pool.address, qty1)

    def unlock_callback(self, qty0, qty1, data):
        self.calls.append(("unlock", qty0, qty1, data))
        self._pay(qty0, qty1)

    def mint_callback(self, qty0, qty1, data):
        self.calls.append(("mint", qty0, qty1, data))
        self._pay(qty0, qty1)

    def swap_callback(self, delta_qty0, delta_qty1, data):
        self.calls.append(("swap", delta_qty0, delta_qty1, data))
        self._pay(delta_qty0, delta_qty1)


class UnderpayingCallback(FundedCallback):
    """지정한 토큰을 요청보다 1 적게 지불"""

    def __init__(self, pool: ProAMMPool, short0: bool, short1: bool, payer: str = USER):
        super().__init__(pool, payer)
        self.short0 = short0
        self.short1 = short1

    def _pay(self, qty0: int, qty1: int) -> None:
        super()._pay(
            qty0 - 1 if self.short0 else qty0,
            qty1 - 1 if self.short1 else qty1,
        )


class ReentrantCallback(FundedCallback):
    """콜백 안에서 같은 풀에 다시 진입 시도"""

    def __init__(self, pool: ProAMMPool, payer: str = USER):
        super().__init__(pool, payer)
        self.observed_locked = None

    def mint_callback(self, qty0, qty1, data):
        self.observed_locked = self.pool.get_pool_state().locked
        self.pool.swap(self, self.payer, PRECISION, True, MIN_SQRT_RATIO + 1)


class LockObservingCallback(FundedCallback):
    """콜백 시점의 locked 플래그 기록"""

    def __init__(self, pool: ProAMMPool, payer: str = USER):
        super().__init__(pool, payer)
        self.observed_locked = []

    def swap_callback(self, delta_qty0, delta_qty1, data):
        self.observed_locked.append(self.pool.get_pool_state().locked)
        super().swap_callback(delta_qty0, delta_qty1, data)


@pytest.fixture
def tokens():
    """주소 순서와 생성 순서가 반대인 토큰 두 개"""
    usdc = Token("0xbbbb000000000000000000000000000000000002", symbol="USDC")
    dai = Token("0xaaaa000000000000000000000000000000000001", symbol="DAI")
    for token in (usdc, dai):
        token.mint(USER, USER_BALANCE)
    return usdc, dai


@pytest.fixture
def pool(tokens):
    """initialize 만 된 풀"""
    pool = ProAMMPool()
    pool.initialize("factory", tokens[0], tokens[1], SWAP_FEE_BPS, TICK_SPACING)
    return pool


@pytest.fixture
def callback(pool):
    return FundedCallback(pool)


@pytest.fixture
def unlocked_pool(pool, callback):
    """가격 1:1 (tick 0) 로 unlock 된 풀"""
    pool.unlock_pool(callback, encode_price_sqrt(1, 1))
    return pool


@pytest.fixture
def rng():
    return random.Random(20240611)


def balances(pool: ProAMMPool, account: str):
    return pool.token0.balance_of(account), pool.token1.balance_of(account)


def swap_to_up_tick(pool, callback, target_tick, rng, max_qty=PRECISION * BPS):
    """exact input token1 로 current_tick >= target_tick 이 될 때까지 가격 상승"""
    while pool.get_pool_state().current_tick < target_tick:
        limit = max(get_sqrt_ratio_at_tick(target_tick), pool.get_pool_state().sqrt_price + 1)
        qty = rng.randint(1, max_qty)
        pool.swap(callback, callback.payer, qty, False, limit)


def swap_to_down_tick(pool, callback, target_tick, rng, max_qty=PRECISION * BPS):
    """exact input token0 로 current_tick <= target_tick 이 될 때까지 가격 하락"""
    while pool.get_pool_state().current_tick > target_tick:
        limit = get_sqrt_ratio_at_tick(target_tick)
        qty = rng.randint(1, max_qty)
        pool.swap(callback, callback.payer, qty, True, limit)


def do_random_swaps(pool, callback, iterations, rng, max_qty=PRECISION):
    """방향이 무작위인 exact input 스왑"""
    for _ in range(iterations):
        is_token0 = rng.random() < 0.5
        qty = rng.randint(1, max_qty)
        limit = MIN_SQRT_RATIO + 1 if is_token0 else MAX_SQRT_RATIO - 1
        pool.swap(callback, callback.payer, qty, is_token0, limit)
