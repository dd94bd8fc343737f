"""
몫 다항식 조립기 (Quotient Polynomial Assembler)
=================================================

모든 게이트 위젯과 순열 인자의 제약을 하나의 몫 다항식 t(X)로 묶는다.

    t(X) = [ Σ 위젯 기여 + PI(X)
             + α·z(X)·∏(w + β·k·X + γ) - α·z(ωX)·∏(w + β·σ + γ)
             + α²·(z(X) - 1)·L₁(X) ] / Z_H(X)

**계산 절차** (크기 4n 코셋 k·H₄ₙ 위의 평가 표현):
  1. witness, PI, z를 코셋 FFT로 4n개 점에서 평가한다.
     확장 도메인에서 기저 도메인의 "다음 행"은 인덱스 i+4이므로
     w_l, w_r, w_4, z는 처음 4개 평가값을 끝에 덧붙여 둔다.
  2. 각 인덱스 i에서 게이트 분자(위젯 합 + PI)와 순열 분자를 계산한다.
  3. Z_H(k·ω₄ₙⁱ)의 역원을 곱한다 (Z_H 값은 4개뿐, 한 번에 역원 계산).
  4. 코셋 IFFT로 t(X)의 계수를 얻는다.

모든 제약이 기저 도메인에서 0이면 분자는 Z_H로 나누어떨어지고
t의 차수는 4n 미만이다. 그렇지 않으면 코셋 IFFT 결과는 분자/Z_H와
어떤 점에서도 일치하지 않는 다항식이 된다.

**위젯 분리 챌린지 기본값**:
  산술 = 1, 로직 = α³ (순열 항이 α, α²를 쓰므로 그 다음 거듭제곱).
"""

import logging

from zkp.turbo.config import EXTENSION_FACTOR, QuotientConfig
from zkp.turbo.field import FR, batch_inverse
from zkp.turbo.parallel import parallel_map
from zkp.turbo.permutation import boundary_term_i, copy_term_i, identity_term_i
from zkp.turbo.polynomial import Polynomial
from zkp.turbo.widget import WidgetKind, WireValues, compute_quotient_i


logger = logging.getLogger(__name__)


def default_separation_challenges(alpha):
    """WidgetKind → 분리 챌린지. 산술 1, 로직 α³."""
    return {
        WidgetKind.ARITHMETIC: FR(1),
        WidgetKind.LOGIC: alpha * alpha * alpha,
    }


def _with_next_rows(evals):
    return list(evals) + list(evals[:EXTENSION_FACTOR])


def compute(domain, preprocessed, z_poly, witness_polys, pi_poly, challenges,
            separation_challenges=None, config=None):
    """몫 다항식 t(X)를 계산한다.

    Args:
        domain: 기저 EvaluationDomain (크기 n)
        preprocessed: PreProcessedCircuit
        z_poly: grand product 다항식
        witness_polys: (w_l, w_r, w_o, w_4) 다항식
        pi_poly: 공개 입력 다항식
        challenges: (alpha, beta, gamma)
        separation_challenges: WidgetKind → FR (없으면 기본값)
        config: QuotientConfig (없으면 환경 변수에서 읽는다)

    Returns:
        Polynomial: t(X), 차수 < 4n (제약이 만족될 때)

    Raises:
        ZeroInverse: 코셋 위에서 Z_H 값이 0일 때
    """
    alpha, beta, gamma = challenges
    if separation_challenges is None:
        separation_challenges = default_separation_challenges(alpha)
    if config is None:
        config = QuotientConfig.from_env()

    n = domain.size
    if preprocessed.n != n:
        raise ValueError(f"전처리 도메인 크기 {preprocessed.n}와 도메인 크기 {n}가 다릅니다")

    extended = domain.extended()
    size = extended.size

    # ── 1단계: 코셋 평가 ──
    w_l_poly, w_r_poly, w_o_poly, w_4_poly = witness_polys
    w_l_ext = _with_next_rows(extended.coset_fft(w_l_poly.coeffs))
    w_r_ext = _with_next_rows(extended.coset_fft(w_r_poly.coeffs))
    w_o_ext = extended.coset_fft(w_o_poly.coeffs)
    w_4_ext = _with_next_rows(extended.coset_fft(w_4_poly.coeffs))
    z_ext = _with_next_rows(extended.coset_fft(z_poly.coeffs))
    pi_ext = extended.coset_fft(pi_poly.coeffs)
    l1_ext = extended.coset_fft(domain.first_lagrange_polynomial().coeffs)
    coset_points = extended.coset_elements()

    left_sigma, right_sigma, out_sigma, fourth_sigma = (
        sigma.evaluations for sigma in preprocessed.sigmas
    )

    alpha_sq = alpha * alpha
    widgets = preprocessed.widgets

    # ── 2단계: 행별 분자 ──
    def numerator_i(i):
        wires = WireValues(
            w_l=w_l_ext[i],
            w_r=w_r_ext[i],
            w_o=w_o_ext[i],
            w_4=w_4_ext[i],
            w_l_next=w_l_ext[i + EXTENSION_FACTOR],
            w_r_next=w_r_ext[i + EXTENSION_FACTOR],
            w_4_next=w_4_ext[i + EXTENSION_FACTOR],
        )
        gate = compute_quotient_i(widgets, i, separation_challenges, wires) + pi_ext[i]

        z_i = z_ext[i]
        sigmas = (left_sigma[i], right_sigma[i], out_sigma[i], fourth_sigma[i])
        permutation = (
            identity_term_i(alpha, beta, gamma, coset_points[i], wires, z_i)
            + copy_term_i(alpha, beta, gamma, wires, sigmas, z_ext[i + EXTENSION_FACTOR])
            + boundary_term_i(alpha_sq, z_i, l1_ext[i])
        )
        return gate + permutation

    numerators = parallel_map(numerator_i, range(size), config.workers, config.chunk_size)

    # ── 3단계: Z_H로 나누기 ──
    v_h_inv = batch_inverse(preprocessed.v_h_coset_4n)
    t_evals = [num * inv for num, inv in zip(numerators, v_h_inv)]

    # ── 4단계: 계수 복원 ──
    t_poly = Polynomial(extended.coset_ifft(t_evals))
    logger.info("quotient polynomial computed: n=%d, degree=%d", n, t_poly.degree)
    return t_poly


def split_quotient(t_poly, n):
    """t(X)를 차수 < n인 4조각으로 나눈다: t = t₀ + Xⁿ·t₁ + X²ⁿ·t₂ + X³ⁿ·t₃."""
    parts = EXTENSION_FACTOR
    if len(t_poly.coeffs) > parts * n:
        raise ValueError(f"몫 다항식 차수 {t_poly.degree}가 {parts * n} 이상입니다")
    coeffs = t_poly.coeffs + [FR(0)] * (parts * n - len(t_poly.coeffs))
    return [Polynomial(coeffs[i * n:(i + 1) * n]) for i in range(parts)]
