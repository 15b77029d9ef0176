"""트랜잭션 범위 요청 컨텍스트

비즈니스 트랜잭션 하나(HTTP 요청 1건 또는 백그라운드 작업 1회)마다
새 인스턴스를 만들어 명시적으로 전달한다. 트랜잭션 내에서는 값을 지우지 않는다.
"""

from typing import Any

from review_agenda.core.constants import AGENDA_ITEM_SEMAPHORE


class RequestContext:
    """트랜잭션 범위 key-value 저장소"""

    def __init__(self) -> None:
        self._values: dict[str, Any] = {}

    def get(self, key: str) -> Any | None:
        return self._values.get(key)

    def set(self, key: str, value: Any) -> None:
        self._values[key] = value

    def acquire_semaphore(self, key: str = AGENDA_ITEM_SEMAPHORE) -> bool:
        """재진입 방지 플래그 획득

        Returns:
            True: 이 트랜잭션의 최초 호출 (플래그를 새로 설정함)
            False: 이미 설정됨 (중첩 호출)
        """
        if self.get(key) is not None:
            return False
        self.set(key, True)
        return True
