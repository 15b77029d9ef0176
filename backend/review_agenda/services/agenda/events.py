"""레코드 변경 이벤트 버스

저장소의 쓰기 메서드가 쓰기 1회마다 알림을 발행하고, 구독자(ChangeEventCoordinator)가
같은 트랜잭션 안에서 동기적으로 처리한다. 구독자의 쓰기가 다시 알림을 발행하므로
재진입 방지는 구독자 쪽 책임이다.
"""

import logging
from collections.abc import Awaitable, Callable

from review_agenda.schemas.agenda_events import (
    AgendaChangeNotification,
    ItemChangeNotification,
)

logger = logging.getLogger(__name__)

ItemChangeHandler = Callable[[ItemChangeNotification], Awaitable[None]]
AgendaChangeHandler = Callable[[AgendaChangeNotification], Awaitable[None]]


class RecordEventBus:
    """아젠다/아이템 변경 알림 발행자"""

    def __init__(self) -> None:
        self._item_handlers: list[ItemChangeHandler] = []
        self._agenda_handlers: list[AgendaChangeHandler] = []

    def subscribe_item_changes(self, handler: ItemChangeHandler) -> None:
        self._item_handlers.append(handler)

    def subscribe_agenda_changes(self, handler: AgendaChangeHandler) -> None:
        self._agenda_handlers.append(handler)

    async def publish_item_change(self, notification: ItemChangeNotification) -> None:
        """아이템 변경 알림 발행 (핸들러 예외는 그대로 전파)"""
        if not notification.changes:
            return
        logger.debug(
            "Item change: event=%s, records=%d",
            notification.event.value,
            len(notification.changes),
        )
        for handler in list(self._item_handlers):
            await handler(notification)

    async def publish_agenda_change(self, notification: AgendaChangeNotification) -> None:
        """아젠다 변경 알림 발행 (핸들러 예외는 그대로 전파)"""
        if not notification.changes:
            return
        for handler in list(self._agenda_handlers):
            await handler(notification)
