"""
몫 다항식 조립기 테스트
========================

만족하는 회로에서 t(X)·Z_H(X)는 제약 분자 C(X)와 같아야 하므로
임의의 점 ζ에서 t(ζ)·(ζⁿ - 1) == C(ζ)를 확인한다.
만족하지 않는 회로에서는 이 등식이 깨진다.
"""
import dataclasses

import pytest

from zkp.turbo.composer import Composer
from zkp.turbo.config import ENV_WORKERS, QuotientConfig
from zkp.turbo.errors import ZeroInverse
from zkp.turbo.field import FR
from zkp.turbo.polynomial import Polynomial
from zkp.turbo.preprocessor import compute_witness_columns
from zkp.turbo.quotient import compute, default_separation_challenges, split_quotient
from zkp.turbo.widget import WidgetKind


ZETA = FR(0xC0FFEE)


def _identity_holds(run, zeta=ZETA, config=None):
    t = run.quotient(config or QuotientConfig())
    lhs = t.evaluate(zeta) * run.domain.evaluate_vanishing_polynomial(zeta)
    return lhs == run.numerator_at(zeta)


def _mixed_circuit():
    """산술 게이트, 공개 입력, 로직 게이트가 섞인 회로."""
    composer = Composer()
    x = composer.add_input(3)
    y = composer.add_input(0b1101)
    x_sq = composer.mul(1, x, x)
    sum_ = composer.add((1, x_sq), (1, y), pi=4)
    composer.constrain_to_constant(sum_, 9 + 13 + 4)
    out = composer.and_gate(y, composer.add_input(0b0110), 4)
    composer.constrain_to_constant(out, 0b0100)
    return composer


# =====================================================================
# 만족하는 회로
# =====================================================================

class TestSatisfiedCircuits:
    def test_280(self, circuits, quotient_run):
        assert _identity_holds(quotient_run(circuits["280"]()))

    def test_big_arith_289(self, circuits, quotient_run):
        assert _identity_holds(quotient_run(circuits["big_arith"]()))

    def test_logic_and(self, circuits, quotient_run):
        composer, _ = circuits["logic"](0b10110110, 0b01101101, 8, False)
        assert _identity_holds(quotient_run(composer))

    def test_logic_xor(self, circuits, quotient_run):
        composer, _ = circuits["logic"](0b10110110, 0b01101101, 8, True)
        assert _identity_holds(quotient_run(composer))

    def test_mixed_with_public_inputs(self, quotient_run):
        composer = _mixed_circuit()
        assert composer.is_satisfied()
        run = quotient_run(composer)
        assert run.composer.public_inputs == {1: FR(4)}
        assert _identity_holds(run)

    def test_numerator_vanishes_on_base_domain(self, circuits, quotient_run):
        run = quotient_run(circuits["280"]())
        for root in run.domain.elements():
            assert run.numerator_at(root) == FR(0)

    def test_coset_round_trip(self, circuits, quotient_run):
        """4n 코셋의 모든 점에서 t·Z_H가 분자를 재현한다 (Z_H ≠ 0)."""
        run = quotient_run(circuits["280"]())
        t = run.quotient(QuotientConfig())
        for x in run.domain.extended().coset_elements():
            v_h = run.domain.evaluate_vanishing_polynomial(x)
            assert v_h != FR(0)
            assert t.evaluate(x) * v_h == run.numerator_at(x)

    def test_degree_below_4n(self, quotient_run):
        run = quotient_run(_mixed_circuit())
        t = run.quotient(QuotientConfig())
        assert t.degree < 4 * run.domain.size

    def test_custom_separation_challenges(self, circuits, quotient_run):
        composer, _ = circuits["logic"](0b1110, 0b0111, 4, True)
        seps = {WidgetKind.ARITHMETIC: FR(11), WidgetKind.LOGIC: FR(99)}
        assert _identity_holds(quotient_run(composer, seps))


# =====================================================================
# 만족하지 않는 회로
# =====================================================================

class TestUnsatisfiedCircuits:
    def test_117(self, circuits, quotient_run):
        assert not _identity_holds(quotient_run(circuits["110"](117)))

    def test_117_numerator_nonzero_on_constant_row(self, circuits, quotient_run):
        run = quotient_run(circuits["110"](117))
        nonzero = [
            i for i, root in enumerate(run.domain.elements())
            if run.numerator_at(root) != FR(0)
        ]
        assert nonzero == [3]

    def test_big_arith_changed_q_4(self, circuits, quotient_run):
        assert not _identity_holds(quotient_run(circuits["big_arith"](q_4=12)))

    def test_tampered_logic_output(self, circuits, quotient_run):
        composer, out = circuits["logic"](0b1011, 0b0110, 4, True)
        composer.variables[out.index] = composer.value_of(out) + FR(4)
        assert not _identity_holds(quotient_run(composer))

    def test_broken_copy_constraint(self, quotient_run, challenges):
        """게이트 제약은 모두 성립하지만 같은 변수의 두 배선 값이 다르다."""
        composer = Composer()
        x = composer.add_input(5)
        composer.poly_gate(x, x, x, 0, 0, 0, 0, 0)
        composer.constrain_to_constant(x, 5)
        run = quotient_run(composer)

        columns = [list(column) for column in compute_witness_columns(composer, run.domain.size)]
        columns[0][0] = FR(6)
        run.witness_polys = tuple(run.domain.interpolate(column) for column in columns)
        run.z_poly = composer.permutation.compute_permutation_poly(
            run.domain, columns, challenges["beta"], challenges["gamma"],
            run.circuit.sigma_evaluations,
        )
        assert not _identity_holds(run)

    def test_tampered_zero_var_in_assert_equal(self, quotient_run):
        """zero_var를 7로 바꾸면 assert_equal(x, zero)는 통과하지만 묶음 행이 깨진다."""
        composer = Composer()
        x = composer.add_input(7)
        composer.assert_equal(x, composer.zero_var())
        composer.variables[0] = FR(7)
        run = quotient_run(composer)
        assert run.composer.unsatisfied_rows() == [1]
        assert not run.composer.is_satisfied()
        assert not _identity_holds(run)

    def test_tampered_zero_var_in_logic_accumulators(self, circuits, quotient_run):
        """누적기 시작값(zero_var)을 1로 바꾸면 2비트 AND(7, 7) = 7이 로직 행을 통과한다."""
        composer, out = circuits["logic"](3, 3, 2, False)
        a, b = composer.wires["w_l"][1], composer.wires["w_r"][1]
        composer.variables[0] = FR(1)
        for var in (a, b, out):
            composer.variables[var.index] = FR(7)
        run = quotient_run(composer)
        assert run.composer.unsatisfied_rows() == [2]
        assert not _identity_holds(run)


# =====================================================================
# 실행 설정 / 오류
# =====================================================================

class TestExecution:
    def test_threaded_equals_serial(self, quotient_run):
        run = quotient_run(_mixed_circuit())
        serial = run.quotient(QuotientConfig(workers=1))
        threaded = run.quotient(QuotientConfig(workers=4, chunk_size=8))
        assert serial == threaded

    def test_config_from_env(self, quotient_run, monkeypatch):
        run = quotient_run(_mixed_circuit())
        expected = run.quotient(QuotientConfig())
        monkeypatch.setenv(ENV_WORKERS, "3")
        assert run.quotient(None) == expected

    def test_zero_vanishing_value(self, circuits, quotient_run):
        run = quotient_run(circuits["280"]())
        v_h = (FR(0),) + run.circuit.v_h_coset_4n[1:]
        run.circuit = dataclasses.replace(run.circuit, v_h_coset_4n=v_h)
        with pytest.raises(ZeroInverse):
            run.quotient(QuotientConfig())

    def test_domain_mismatch(self, circuits, quotient_run):
        run = quotient_run(circuits["280"]())
        with pytest.raises(ValueError):
            compute(
                run.domain.extended(2), run.circuit, run.z_poly, run.witness_polys,
                run.pi_poly, (FR(1), FR(2), FR(3)),
            )

    def test_default_separation_challenges(self):
        seps = default_separation_challenges(FR(5))
        assert seps[WidgetKind.ARITHMETIC] == FR(1)
        assert seps[WidgetKind.LOGIC] == FR(125)


# =====================================================================
# split_quotient
# =====================================================================

class TestSplitQuotient:
    def test_recombine(self, quotient_run):
        run = quotient_run(_mixed_circuit())
        n = run.domain.size
        t = run.quotient(QuotientConfig())
        parts = split_quotient(t, n)
        assert len(parts) == 4
        assert all(len(part) <= n for part in parts)

        shift = Polynomial([FR(0)] * n + [FR(1)])
        recombined = Polynomial.zero()
        power = Polynomial.one()
        for part in parts:
            recombined = recombined + part * power
            power = power * shift
        assert recombined == t

    def test_too_long(self):
        with pytest.raises(ValueError):
            split_quotient(Polynomial([FR(1)] * 17), 4)
