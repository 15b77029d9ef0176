"""RequestContext 단위 테스트"""

from review_agenda.core.constants import AGENDA_ITEM_SEMAPHORE
from review_agenda.core.request_context import RequestContext


def test_acquire_semaphore_once_per_context():
    """최초 1회만 획득, 이후 호출은 중첩으로 판단"""
    context = RequestContext()

    assert context.acquire_semaphore() is True
    assert context.acquire_semaphore() is False
    assert context.get(AGENDA_ITEM_SEMAPHORE) is True


def test_semaphore_set_directly_blocks_acquire():
    """이동 처리처럼 플래그를 직접 설정한 경우"""
    context = RequestContext()
    context.set(AGENDA_ITEM_SEMAPHORE, True)

    assert context.acquire_semaphore() is False


def test_contexts_are_independent():
    """트랜잭션마다 새 컨텍스트 (백그라운드 작업은 이전 플래그와 무관)"""
    first = RequestContext()
    first.acquire_semaphore()

    assert RequestContext().acquire_semaphore() is True


def test_get_missing_key():
    assert RequestContext().get("missing") is None
