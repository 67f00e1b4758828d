"""
Tick Bitmap - 초기화된 틱의 희소 인덱스

압축 틱(tick // tick_spacing)을 256비트 워드 단위로 나누어 저장합니다.
비트가 1 이면 해당 틱이 초기화(liquidity_gross != 0)된 상태입니다.

References:
- TickBitmap.sol (flipTick / nextInitializedTickWithinOneWord)
"""

from typing import Dict, Tuple

from .journal import UndoJournal
from ..errors import TickSpacingError

WORD_BITS: int = 256
WORD_MASK: int = WORD_BITS - 1


def position(compressed: int) -> Tuple[int, int]:
    """압축 틱의 (워드 위치, 비트 위치)

    Python 의 >> 는 산술 시프트이므로 음수도 음의 무한대 방향으로 내림됩니다.
    """
    return compressed >> 8, compressed & WORD_MASK


def most_significant_bit(x: int) -> int:
    return x.bit_length() - 1


def least_significant_bit(x: int) -> int:
    return (x & -x).bit_length() - 1


class TickBitmap:
    """초기화된 틱 인덱스

    사용법:
        bitmap = TickBitmap(tick_spacing=10)
        bitmap.flip_tick(100)
        next_tick, initialized = bitmap.next_initialized_tick_within_one_word(95, lte=False)
    """

    def __init__(self, tick_spacing: int):
        self.tick_spacing = tick_spacing
        self.words: Dict[int, int] = {}
        self.journal = UndoJournal(self.words)

    def flip_tick(self, tick: int) -> None:
        """틱의 초기화 비트를 토글

        Raises:
            TickSpacingError: tick 이 tick_spacing 의 배수가 아닌 경우
        """
        if tick % self.tick_spacing != 0:
            raise TickSpacingError()
        word_pos, bit_pos = position(tick // self.tick_spacing)
        self.journal.record(word_pos)
        word = self.words.get(word_pos, 0) ^ (1 << bit_pos)
        if word:
            self.words[word_pos] = word
        else:
            self.words.pop(word_pos, None)

    def is_initialized(self, tick: int) -> bool:
        if tick % self.tick_spacing != 0:
            return False
        word_pos, bit_pos = position(tick // self.tick_spacing)
        return bool(self.words.get(word_pos, 0) >> bit_pos & 1)

    def next_initialized_tick_within_one_word(
        self,
        tick: int,
        lte: bool
    ) -> Tuple[int, bool]:
        """같은(또는 인접) 워드 안에서 가장 가까운 초기화 틱 찾기

        Args:
            tick: 시작 틱
            lte: True면 tick 이하에서 탐색 (가격 하락 방향),
                 False면 tick 초과에서 탐색 (가격 상승 방향)

        Returns:
            (다음 틱, 초기화 여부). 워드 안에 초기화 틱이 없으면 워드 경계 틱과 False
        """
        spacing = self.tick_spacing
        # 음의 무한대 방향 내림
        compressed = tick // spacing

        if lte:
            word_pos, bit_pos = position(compressed)
            # bit_pos 포함 아래 비트 전부
            mask = (1 << bit_pos) - 1 + (1 << bit_pos)
            masked = self.words.get(word_pos, 0) & mask

            initialized = masked != 0
            if initialized:
                next_tick = (compressed - (bit_pos - most_significant_bit(masked))) * spacing
            else:
                next_tick = (compressed - bit_pos) * spacing
        else:
            # 다음 워드에서 시작할 수 있도록 compressed + 1 부터 탐색
            word_pos, bit_pos = position(compressed + 1)
            # bit_pos 포함 위 비트 전부
            mask = ((1 << WORD_BITS) - 1) ^ ((1 << bit_pos) - 1)
            masked = self.words.get(word_pos, 0) & mask

            initialized = masked != 0
            if initialized:
                next_tick = (compressed + 1 + (least_significant_bit(masked) - bit_pos)) * spacing
            else:
                next_tick = (compressed + 1 + (WORD_MASK - bit_pos)) * spacing

        return next_tick, initialized
