"""
로직 위젯 (Logic Widget): 비트 AND / XOR
==========================================

두 입력을 2비트씩(4진 자릿수, quad) 누적하는 게이트열을 검사한다.

  행 i의 배선:
    w_l, w_r, w_4 : 왼쪽/오른쪽/결과 누적값 (acc)
    w_o           : 이번 행 quad들의 곱 (보조값 w)
  다음 행과의 차이가 이번 행의 quad:
    a = w_l_next - 4·w_l,  b = w_r_next - 4·w_r,  d = w_4_next - 4·w_4

  κ = separation_challenge² 일 때
    c0 = δ(a)
    c1 = δ(b)·κ
    c2 = δ(d)·κ²
    c3 = (w_o - a·b)·κ³
    c4 = δ_xor_and(a, b, w_o, d, q_c)·κ⁴
    기여 = q_logic · (c0 + c1 + c2 + c3 + c4) · separation_challenge

  q_c는 연산 선택자: 1 → AND, -1 → XOR.
"""

from zkp.turbo.field import FR
from zkp.turbo.widget import WidgetKind


def delta(f):
    """f(f-1)(f-2)(f-3): f ∈ {0, 1, 2, 3}일 때만 0."""
    f_1 = f - FR(1)
    f_2 = f - FR(2)
    f_3 = f - FR(3)
    return f * f_1 * f_2 * f_3


def delta_xor_and(a, b, w, c, q_c):
    """quad a, b와 곱 w = a·b에 대해 c가 AND(q_c=1) 또는 XOR(q_c=-1) 결과인지 검사.

    A = B + E
    B = q_c·(9c - 3(a+b))
    E = 3(a+b+c) - 2F
    F = w·(w·(4w - 18(a+b) + 81) + 18(a² + b²) - 81(a+b) + 83)
    """
    a_plus_b = a + b
    f = w * (
        w * (FR(4) * w - FR(18) * a_plus_b + FR(81))
        + FR(18) * (a * a + b * b)
        - FR(81) * a_plus_b
        + FR(83)
    )
    e = FR(3) * (a_plus_b + c) - FR(2) * f
    selector_term = q_c * (FR(9) * c - FR(3) * a_plus_b)
    return selector_term + e


def logic_constraints(w_l, w_l_next, w_r, w_r_next, w_o, w_4, w_4_next, q_c):
    """스케일링 전 다섯 제약 (c0, ..., c4). 만족하는 행에서는 모두 0이다."""
    four = FR(4)
    a = w_l_next - four * w_l
    b = w_r_next - four * w_r
    d = w_4_next - four * w_4
    return (
        delta(a),
        delta(b),
        delta(d),
        w_o - a * b,
        delta_xor_and(a, b, w_o, d, q_c),
    )


def _combine(separation_challenge, constraints):
    kappa = separation_challenge * separation_challenge
    result = FR(0)
    kappa_power = FR(1)
    for constraint in constraints:
        result = result + constraint * kappa_power
        kappa_power = kappa_power * kappa
    return result * separation_challenge


class LogicWidget:
    """q_logic과 q_c 셀렉터를 소유하는 로직 위젯."""

    kind = WidgetKind.LOGIC

    def __init__(self, q_c, q_logic):
        self.q_c = q_c
        self.q_logic = q_logic

    def compute_quotient_i(self, index, separation_challenge, wires):
        q_logic_i = self.q_logic.evaluations[index]
        if q_logic_i == FR(0):
            return FR(0)

        constraints = logic_constraints(
            wires.w_l, wires.w_l_next,
            wires.w_r, wires.w_r_next,
            wires.w_o,
            wires.w_4, wires.w_4_next,
            self.q_c.evaluations[index],
        )
        return q_logic_i * _combine(separation_challenge, constraints)

    def compute_linearisation(self, separation_challenge, evals):
        constraints = logic_constraints(
            evals.a_eval, evals.a_next_eval,
            evals.b_eval, evals.b_next_eval,
            evals.c_eval,
            evals.d_eval, evals.d_next_eval,
            evals.q_c_eval,
        )
        return self.q_logic.polynomial * _combine(separation_challenge, constraints)
