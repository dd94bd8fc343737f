"""
산술 위젯 (Arithmetic Widget)
==============================

폭 4 산술 게이트:

    q_arith · (q_m·a·b + q_l·a + q_r·b + q_o·c + q_4·d + q_c) = 0

공개 입력 PI는 위젯 밖에서 몫 분자에 직접 더해진다.
"""

from zkp.turbo.field import FR
from zkp.turbo.widget import WidgetKind


def arithmetic_gate_value(q_m, q_l, q_r, q_o, q_4, q_c, a, b, c, d):
    """q_m·a·b + q_l·a + q_r·b + q_o·c + q_4·d + q_c."""
    return q_m * a * b + q_l * a + q_r * b + q_o * c + q_4 * d + q_c


class ArithmeticWidget:
    """산술 게이트의 셀렉터 7개를 소유하는 위젯.

    각 셀렉터는 Selector(polynomial, evaluations) 쌍이다.
    """

    kind = WidgetKind.ARITHMETIC

    def __init__(self, q_m, q_l, q_r, q_o, q_4, q_c, q_arith):
        self.q_m = q_m
        self.q_l = q_l
        self.q_r = q_r
        self.q_o = q_o
        self.q_4 = q_4
        self.q_c = q_c
        self.q_arith = q_arith

    def compute_quotient_i(self, index, separation_challenge, wires):
        q_arith_i = self.q_arith.evaluations[index]
        if q_arith_i == FR(0):
            return FR(0)

        value = arithmetic_gate_value(
            self.q_m.evaluations[index],
            self.q_l.evaluations[index],
            self.q_r.evaluations[index],
            self.q_o.evaluations[index],
            self.q_4.evaluations[index],
            self.q_c.evaluations[index],
            wires.w_l, wires.w_r, wires.w_o, wires.w_4,
        )
        return q_arith_i * value * separation_challenge

    def compute_linearisation(self, separation_challenge, evals):
        a = evals.a_eval
        b = evals.b_eval
        c = evals.c_eval
        d = evals.d_eval

        poly = (
            self.q_m.polynomial * (a * b)
            + self.q_l.polynomial * a
            + self.q_r.polynomial * b
            + self.q_o.polynomial * c
            + self.q_4.polynomial * d
            + self.q_c.polynomial
        )
        return poly * (evals.q_arith_eval * separation_challenge)
