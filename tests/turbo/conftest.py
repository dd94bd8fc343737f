import os
import sys

import pytest

# 프로젝트 루트를 sys.path에 추가
project_root = os.path.abspath(os.path.join(os.path.dirname(__file__), '..', '..'))
if project_root not in sys.path:
    sys.path.insert(0, project_root)

from zkp.turbo.composer import Composer
from zkp.turbo.config import K1, K2, K3
from zkp.turbo.field import FR
from zkp.turbo.preprocessor import (
    compute_permutation_polynomial,
    compute_public_input_polynomial,
    compute_witness_polynomials,
    preprocess,
)
from zkp.turbo.quotient import compute, default_separation_challenges
from zkp.turbo.widget import LinearisationEvaluations, compute_linearisation


# ── 고정 챌린지 ──
BETA = FR(12345)
GAMMA = FR(67890)
ALPHA = FR(31337)
CHALLENGES = (ALPHA, BETA, GAMMA)


def build_280(constant=280):
    """(4 + 5 + 5) × (6 + 7 + 7) = 280 회로."""
    composer = Composer()
    four = composer.add_input(4)
    five = composer.add_input(5)
    six = composer.add_input(6)
    seven = composer.add_input(7)

    fourteen = composer.big_add((1, four), (1, five), (1, five))
    twenty = composer.big_add((1, six), (1, seven), (1, seven))
    result = composer.mul(1, fourteen, twenty, 0)
    composer.constrain_to_constant(result, constant)
    return composer


def build_110(constant=117):
    """(5 + 6) × (4 + 6) = 110 을 다른 상수로 제약하는 회로."""
    composer = Composer()
    four = composer.add_input(4)
    five = composer.add_input(5)
    six = composer.add_input(6)

    eleven = composer.add((1, five), (1, six))
    ten = composer.add((1, four), (1, six))
    result = composer.mul(1, eleven, ten)
    composer.constrain_to_constant(result, constant)
    return composer


def build_big_arith(q_4=10, constant=289):
    """a=4, b=5, d=9: 6·a·b + 7·a + 8·b + q_4·d + 11."""
    composer = Composer()
    a = composer.add_input(4)
    b = composer.add_input(5)
    d = composer.add_input(9)
    result = composer.big_arith(6, a, b, 7, 8, (q_4, d), 11)
    composer.constrain_to_constant(result, constant)
    return composer


def build_logic(left, right, num_bits, is_xor_gate):
    composer = Composer()
    a = composer.add_input(left)
    b = composer.add_input(right)
    out = composer.logic_gate(a, b, num_bits, is_xor_gate)
    return composer, out


class QuotientRun:
    """회로 하나의 전처리 → z → t 계산 결과와 ζ에서의 분자 재계산."""

    def __init__(self, composer, separation_challenges=None):
        self.composer = composer
        self.circuit = preprocess(composer)
        self.domain = self.circuit.domain
        self.witness_polys = compute_witness_polynomials(composer, self.domain)
        self.pi_poly = compute_public_input_polynomial(composer, self.domain)
        self.z_poly = compute_permutation_polynomial(composer, self.circuit, BETA, GAMMA)
        if separation_challenges is None:
            separation_challenges = default_separation_challenges(ALPHA)
        self.separation_challenges = separation_challenges

    def quotient(self, config=None):
        return compute(
            self.domain, self.circuit, self.z_poly, self.witness_polys, self.pi_poly,
            CHALLENGES, self.separation_challenges, config,
        )

    def numerator_at(self, zeta):
        """다항식 평가로 직접 계산한 몫 분자 C(ζ)."""
        omega = self.domain.group_gen
        zeta_next = zeta * omega
        w_l, w_r, w_o, w_4 = self.witness_polys
        a, b, c, d = (p.evaluate(zeta) for p in self.witness_polys)

        evals = LinearisationEvaluations(
            a_eval=a, b_eval=b, c_eval=c, d_eval=d,
            a_next_eval=w_l.evaluate(zeta_next),
            b_next_eval=w_r.evaluate(zeta_next),
            d_next_eval=w_4.evaluate(zeta_next),
            q_arith_eval=self.circuit.selectors["q_arith"].polynomial.evaluate(zeta),
            q_c_eval=self.circuit.selectors["q_c"].polynomial.evaluate(zeta),
        )
        gate = compute_linearisation(
            self.circuit.widgets, self.separation_challenges, evals
        ).evaluate(zeta) + self.pi_poly.evaluate(zeta)

        z = self.z_poly.evaluate(zeta)
        z_next = self.z_poly.evaluate(zeta_next)
        sigma = [s.polynomial.evaluate(zeta) for s in self.circuit.sigmas]
        bz = BETA * zeta
        identity = ALPHA * z * (
            (a + bz + GAMMA) * (b + K1 * bz + GAMMA)
            * (c + K2 * bz + GAMMA) * (d + K3 * bz + GAMMA)
        )
        copy_term = ALPHA * z_next * (
            (a + BETA * sigma[0] + GAMMA) * (b + BETA * sigma[1] + GAMMA)
            * (c + BETA * sigma[2] + GAMMA) * (d + BETA * sigma[3] + GAMMA)
        )
        l1 = self.domain.first_lagrange_polynomial().evaluate(zeta)
        boundary = ALPHA * ALPHA * (z - FR(1)) * l1
        return gate + identity - copy_term + boundary


@pytest.fixture
def quotient_run():
    return QuotientRun


@pytest.fixture
def circuits():
    return {
        "280": build_280,
        "110": build_110,
        "big_arith": build_big_arith,
        "logic": build_logic,
    }


@pytest.fixture
def challenges():
    return {"alpha": ALPHA, "beta": BETA, "gamma": GAMMA}
