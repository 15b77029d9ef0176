"""아젠다 엔진 예외

서비스/엔진에서 발생하는 예외는 모두 현재 트랜잭션에 치명적이다.
API 레이어에서 error_code로 HTTP 응답에 매핑한다.
"""


class AgendaError(Exception):
    """아젠다 엔진 기본 예외"""

    error_code = "AGENDA_ERROR"

    def __init__(self, message: str, error_code: str | None = None):
        super().__init__(message)
        self.message = message
        if error_code is not None:
            self.error_code = error_code


class FormatError(AgendaError, ValueError):
    """미팅 시간/아이템 시간 문자열 형식 오류"""

    error_code = "INVALID_TIME_FORMAT"


class PersistenceError(AgendaError):
    """배치 저장 실패 (부분 저장 없음)"""

    error_code = "PERSISTENCE_FAILED"


class InvalidOperation(AgendaError, ValueError):
    """허용되지 않는 작업 (변경 전 거부)"""

    error_code = "INVALID_OPERATION"
