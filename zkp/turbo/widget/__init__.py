"""
게이트 위젯 (Gate Widgets): 공통 계약
========================================

각 게이트 계열(산술, range, 로직, 곡선 덧셈)은 자신의 셀렉터 다항식을 소유하고
두 가지 연산을 제공한다:

  compute_quotient_i(index, separation_challenge, wires) -> FR
      확장 코셋 도메인의 index번째 점에서 몫 분자에 더할 값.
      자신의 셀렉터 평가값과 위젯별 분리 챌린지가 이미 곱해져 있다.

  compute_linearisation(separation_challenge, evals) -> Polynomial
      같은 식을 셀렉터 다항식에 대해 기호적으로 남겨 둔 선형화 다항식.
      배선 값은 검증자 챌린지 점(과 그 다음 점)에서의 평가값으로 대체된다.

위젯 집합은 고정되어 있으므로 가상 디스패치 대신 WidgetKind 목록으로 명시적으로
순회한다. range/곡선 덧셈 위젯의 내부는 구현 범위 밖이며 ENABLED_WIDGETS에 없다.
"""

from collections import namedtuple
from enum import Enum

from zkp.turbo.field import FR
from zkp.turbo.polynomial import Polynomial


class WidgetKind(Enum):
    ARITHMETIC = "arithmetic"
    RANGE = "range"
    LOGIC = "logic"
    FIXED_GROUP_ADD = "fixed_group_add"
    VARIABLE_GROUP_ADD = "variable_group_add"


# 위젯을 켜고 끄는 셀렉터 열
WIDGET_SELECTORS = {
    WidgetKind.ARITHMETIC: "q_arith",
    WidgetKind.RANGE: "q_range",
    WidgetKind.LOGIC: "q_logic",
    WidgetKind.FIXED_GROUP_ADD: "q_fixed_group_add",
    WidgetKind.VARIABLE_GROUP_ADD: "q_variable_group_add",
}

ENABLED_WIDGETS = (WidgetKind.ARITHMETIC, WidgetKind.LOGIC)

UNSUPPORTED_WIDGETS = tuple(kind for kind in WidgetKind if kind not in ENABLED_WIDGETS)


# 셀렉터 다항식의 두 표현: 계수 형태와 4n 코셋 평가값
Selector = namedtuple("Selector", ["polynomial", "evaluations"])

# 확장 도메인 한 점에서의 배선 평가값 (다음 행 = 인덱스 i+4)
WireValues = namedtuple(
    "WireValues",
    ["w_l", "w_r", "w_o", "w_4", "w_l_next", "w_r_next", "w_4_next"],
)

# 검증자 챌린지 점 ζ와 ζ·ω에서의 평가값
LinearisationEvaluations = namedtuple(
    "LinearisationEvaluations",
    [
        "a_eval", "b_eval", "c_eval", "d_eval",
        "a_next_eval", "b_next_eval", "d_next_eval",
        "q_arith_eval", "q_c_eval",
    ],
)


def compute_quotient_i(widgets, index, separation_challenges, wires):
    """활성화된 모든 위젯의 index번째 몫 기여를 더한다.

    Args:
        widgets: WidgetKind → 위젯 객체
        index: 확장 코셋 도메인 인덱스
        separation_challenges: WidgetKind → FR
        wires: WireValues
    """
    total = FR(0)
    for kind in ENABLED_WIDGETS:
        total = total + widgets[kind].compute_quotient_i(
            index, separation_challenges[kind], wires
        )
    return total


def compute_linearisation(widgets, separation_challenges, evals):
    """활성화된 모든 위젯의 선형화 다항식 합."""
    result = Polynomial.zero()
    for kind in ENABLED_WIDGETS:
        result = result + widgets[kind].compute_linearisation(
            separation_challenges[kind], evals
        )
    return result
