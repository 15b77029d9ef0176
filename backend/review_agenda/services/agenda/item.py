"""아젠다 아이템 in-memory 프로젝션

order / start_time / end_time 변경 여부(dirty)를 추적하여
변경된 아이템만 저장할 수 있게 한다.
"""

from typing import Any


class AgendaItem:
    """아젠다 아이템 (한 번의 엔진 작업 동안만 유효)

    동일성은 id로만 판단한다. shift 알고리즘이 order를 제자리에서 바꾸는 중에도
    앵커 아이템을 식별해야 하기 때문이다.
    """

    def __init__(
        self,
        item_id: str,
        order: int | None = None,
        duration: int | None = None,
        start_time: str | None = None,
        end_time: str | None = None,
    ):
        self.id = item_id
        self.order = order
        self.duration = duration
        self.start_time = start_time
        self.end_time = end_time
        self._changed = False

    @property
    def dirty(self) -> bool:
        return self._changed

    def set_order(self, order: int) -> None:
        if self.order is None or int(order) != self.order:
            self.order = int(order)
            self._changed = True

    def set_start_time(self, start_time: str | None) -> None:
        if start_time != self.start_time:
            self.start_time = start_time
            self._changed = True

    def set_end_time(self, end_time: str | None) -> None:
        if end_time != self.end_time:
            self.end_time = end_time
            self._changed = True

    def clear_times(self) -> None:
        self.set_start_time(None)
        self.set_end_time(None)

    def to_values(self) -> dict[str, Any]:
        """저장 대상 필드"""
        return {
            "order": self.order,
            "start_time": self.start_time,
            "end_time": self.end_time,
        }

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, AgendaItem):
            return NotImplemented
        return self.id == other.id

    def __hash__(self) -> int:
        return hash(self.id)

    def __repr__(self) -> str:
        return f"<AgendaItem {self.id} order={self.order} duration={self.duration}>"
