"""
명명된 오류 조건
=================

코어의 모든 실패는 호출자가 유발한 결정론적 조건이며 재시도할 대상이 아니다.
각 조건은 고유한 예외 클래스로 즉시(fail-fast) 보고된다.

기존 코드와의 호환을 위해 각 예외는 대응하는 내장 예외
(ValueError, ArithmeticError, NotImplementedError)도 함께 상속한다.
"""


class PlonkError(Exception):
    """코어 예외의 최상위 클래스."""


class DegreeIsZero(PlonkError, ValueError):
    """SRS setup에 max_degree < 1이 요청됨 (상수에는 커밋할 수 없다)."""


class DegreeTooLarge(PlonkError, ValueError):
    """trim 차수가 SRS의 최대 차수를 초과함."""


class DuplicatePublicInput(PlonkError, ValueError):
    """같은 게이트 행에 공개 입력이 두 번 기록됨."""


class ZeroInverse(PlonkError, ArithmeticError):
    """0의 역원이 필요해짐 (도메인/코셋 구성 결함)."""


class DomainError(PlonkError, ValueError):
    """평가 도메인 크기가 2의 거듭제곱이 아니거나 지원 범위를 넘음."""


class UnsupportedWidget(PlonkError, NotImplementedError):
    """구현되지 않은 위젯(range, 곡선 덧셈)의 셀렉터가 켜진 회로."""
