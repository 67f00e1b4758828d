"""
Tick Bitmap 테스트

Uniswap V3 TickBitmap 테스트와 같은 초기화 틱 집합으로 다음 초기화 틱 탐색을 검증합니다.
"""

import pytest

from ..state.tick_bitmap import TickBitmap, position
from ..errors import TickSpacingError

INITIALIZED_TICKS = [-200, -55, -4, 70, 78, 84, 139, 240, 535]


@pytest.fixture
def bitmap():
    bitmap = TickBitmap(tick_spacing=1)
    for tick in INITIALIZED_TICKS:
        bitmap.flip_tick(tick)
    return bitmap


class TestFlipTick:
    """flip_tick / is_initialized"""

    def test_flip_sets_and_clears(self):
        bitmap = TickBitmap(tick_spacing=1)
        assert not bitmap.is_initialized(1)
        bitmap.flip_tick(1)
        assert bitmap.is_initialized(1)
        bitmap.flip_tick(1)
        assert not bitmap.is_initialized(1)
        assert bitmap.words == {}

    def test_flip_does_not_touch_neighbours(self):
        bitmap = TickBitmap(tick_spacing=1)
        bitmap.flip_tick(-230)
        assert bitmap.is_initialized(-230)
        assert not bitmap.is_initialized(-231)
        assert not bitmap.is_initialized(-229)
        assert not bitmap.is_initialized(-230 + 256)
        assert not bitmap.is_initialized(-230 - 256)

    def test_unaligned_tick(self):
        bitmap = TickBitmap(tick_spacing=60)
        with pytest.raises(TickSpacingError):
            bitmap.flip_tick(61)

    def test_position_negative(self):
        """음수 압축 틱은 음의 무한대 방향 워드"""
        assert position(-1) == (-1, 255)
        assert position(-256) == (-1, 0)
        assert position(-257) == (-2, 255)
        assert position(256) == (1, 0)


class TestNextInitializedTickGreaterThan:
    """lte=False: 가격 상승 방향"""

    def test_next_to_right_if_at_initialized(self, bitmap):
        assert bitmap.next_initialized_tick_within_one_word(78, lte=False) == (84, True)
        assert bitmap.next_initialized_tick_within_one_word(-55, lte=False) == (-4, True)

    def test_directly_to_right(self, bitmap):
        assert bitmap.next_initialized_tick_within_one_word(77, lte=False) == (78, True)
        assert bitmap.next_initialized_tick_within_one_word(-56, lte=False) == (-55, True)

    def test_next_word_boundary(self, bitmap):
        assert bitmap.next_initialized_tick_within_one_word(255, lte=False) == (511, False)

    def test_skips_half_word(self, bitmap):
        assert bitmap.next_initialized_tick_within_one_word(383, lte=False) == (511, False)

    def test_next_word_initialized(self, bitmap):
        assert bitmap.next_initialized_tick_within_one_word(-257, lte=False) == (-200, True)

    def test_does_not_exceed_boundary(self, bitmap):
        assert bitmap.next_initialized_tick_within_one_word(508, lte=False) == (511, False)


class TestNextInitializedTickLessThanOrEqual:
    """lte=True: 가격 하락 방향"""

    def test_same_tick_if_initialized(self, bitmap):
        assert bitmap.next_initialized_tick_within_one_word(78, lte=True) == (78, True)

    def test_directly_to_left(self, bitmap):
        assert bitmap.next_initialized_tick_within_one_word(79, lte=True) == (78, True)

    def test_word_boundary(self, bitmap):
        assert bitmap.next_initialized_tick_within_one_word(258, lte=True) == (256, False)
        assert bitmap.next_initialized_tick_within_one_word(256, lte=True) == (256, False)

    def test_entire_empty_word(self, bitmap):
        assert bitmap.next_initialized_tick_within_one_word(1023, lte=True) == (768, False)
        assert bitmap.next_initialized_tick_within_one_word(900, lte=True) == (768, False)

    def test_negative_word_boundary(self, bitmap):
        assert bitmap.next_initialized_tick_within_one_word(-257, lte=True) == (-512, False)

    def test_flipped_tick_found(self, bitmap):
        bitmap.flip_tick(329)
        assert bitmap.next_initialized_tick_within_one_word(456, lte=True) == (329, True)


class TestTickSpacing:
    """tick spacing > 1"""

    def test_spaced_up(self):
        bitmap = TickBitmap(tick_spacing=60)
        bitmap.flip_tick(120)
        assert bitmap.next_initialized_tick_within_one_word(0, lte=False) == (120, True)
        assert bitmap.next_initialized_tick_within_one_word(119, lte=False) == (120, True)

    def test_spaced_down_negative(self):
        bitmap = TickBitmap(tick_spacing=60)
        bitmap.flip_tick(-120)
        assert bitmap.next_initialized_tick_within_one_word(-1, lte=True) == (-120, True)
        assert bitmap.next_initialized_tick_within_one_word(-121, lte=True) == (-255 * 60 - 60, False)
