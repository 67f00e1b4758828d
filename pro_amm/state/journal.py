"""
Undo Journal - 작업 단위 되돌리기 기록

풀 작업이 실패하면 그 작업이 건드린 키만 이전 값으로 되돌립니다.
ledger 전체를 복사하지 않으므로 되돌리기 비용은 변경된 항목 수에 비례합니다.

프레임은 중첩될 수 있습니다 (콜백 안에서 같은 토큰을 쓰는 다른 풀의 작업):
- commit: 안쪽 프레임의 기록을 바깥 프레임에 합침 (바깥에 이미 있는 키는 유지)
- rollback: 안쪽 프레임의 기록으로 저장소를 복원
"""

import copy
from typing import Any, Dict, List

_MISSING = object()


class UndoJournal:
    """dict 저장소 하나에 대한 중첩 가능한 undo 기록

    사용법:
        journal = UndoJournal(ledger.ticks)
        journal.begin()
        journal.record(tick)      # 변경 직전에 호출
        ledger.ticks[tick] = ...
        journal.rollback()        # 또는 journal.commit()
    """

    def __init__(self, store: Dict[Any, Any]):
        self.store = store
        self._frames: List[Dict[Any, Any]] = []

    @property
    def depth(self) -> int:
        return len(self._frames)

    def begin(self) -> None:
        self._frames.append({})

    def record(self, key: Any) -> None:
        """key 의 현재 값을 프레임에 한 번만 기록 (열린 프레임이 없으면 무시)"""
        if not self._frames:
            return
        frame = self._frames[-1]
        if key not in frame:
            frame[key] = copy.copy(self.store[key]) if key in self.store else _MISSING

    def commit(self) -> None:
        frame = self._frames.pop()
        if self._frames:
            outer = self._frames[-1]
            for key, value in frame.items():
                outer.setdefault(key, value)

    def rollback(self) -> None:
        frame = self._frames.pop()
        for key, value in frame.items():
            if value is _MISSING:
                self.store.pop(key, None)
            else:
                self.store[key] = value
