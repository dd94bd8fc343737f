"""
순열 인자 (Permutation / Copy-Constraint Argument)
===================================================

"서로 다른 배선 위치가 같은 값을 가진다"는 복사 제약을 순열로 인코딩하고
Grand Product로 증명한다.

**배선 위치 라벨링**:
  4n개의 배선 위치를 4개의 서로소 코셋으로 라벨링한다.
  - w_l: ωⁱ          - w_r: K1·ωⁱ
  - w_o: K2·ωⁱ       - w_4: K3·ωⁱ

**순환(cycle) 구성**:
  Composer가 게이트를 추가할 때마다 (변수 → 등장 위치 목록)을 기록한다.
  한 변수의 등장 위치 p₀, p₁, ..., p_{m-1}에 대해 σ(p_j) = p_{(j+1) mod m}.
  한 번만 등장하는 변수는 고정점이다. 가변 연결 리스트 없이
  위치 목록만으로 σ 라벨을 순수 함수로 계산한다.

**Grand Product z(x)**:
  z(ω⁰) = 1
  z(ω^{i+1}) = z(ωⁱ) · ∏ (wₖ(ωⁱ) + β·idₖ(ωⁱ) + γ) / ∏ (wₖ(ωⁱ) + β·σₖ(ωⁱ) + γ)
  복사 제약이 모두 성립하면 z(ωⁿ) = z(ω⁰) = 1로 돌아온다.

**몫 기여 (확장 코셋 도메인, 챌린지 α)**:
  identity: α · z(x) · ∏ (w(x) + β·kₖ·x + γ)
  copy:    -α · z(ω·x) · ∏ (w(x) + β·σₖ(x) + γ)
  boundary: α² · (z(x) - 1) · L₁(x)
"""

import logging
from collections import namedtuple
from enum import Enum

from zkp.turbo.config import K1, K2, K3
from zkp.turbo.field import FR, batch_inverse


logger = logging.getLogger(__name__)


class WireKind(Enum):
    LEFT = 0
    RIGHT = 1
    OUTPUT = 2
    FOURTH = 3


# 배선 위치 (열, 행)
WireData = namedtuple("WireData", ["kind", "row"])

# 열별 코셋 식별자
COSET_LABELS = {
    WireKind.LEFT: FR(1),
    WireKind.RIGHT: K1,
    WireKind.OUTPUT: K2,
    WireKind.FOURTH: K3,
}


class Permutation:
    """변수별 등장 위치를 추적하고 σ, z를 계산한다.

    속성:
        variable_map: Variable → [WireData, ...] (추가된 순서)
    """

    def __init__(self):
        self.variable_map = {}

    def add_variable(self, var):
        """새 변수를 등장 위치 없이 등록한다."""
        self.variable_map.setdefault(var, [])

    def add_variables_to_map(self, a, b, c, d, row):
        """한 게이트 행의 네 배선을 각 변수의 등장 위치로 기록한다.

        하나라도 등록되지 않은 변수면 아무것도 기록하지 않고 ValueError.
        """
        wires = (a, b, c, d)
        for var in wires:
            if var not in self.variable_map:
                raise ValueError(f"등록되지 않은 변수입니다: {var}")
        for kind, var in zip(WireKind, wires):
            self.variable_map[var].append(WireData(kind, row))

    def occurrences(self, var):
        return tuple(self.variable_map[var])

    # ─────────────────────────────────────────────────────────────
    # σ 계산
    # ─────────────────────────────────────────────────────────────

    def compute_sigma_permutations(self, n):
        """각 열의 위치가 순열에서 가리키는 다음 위치를 계산한다.

        Args:
            n: 행 수 (도메인 크기)

        Returns:
            list: 4개의 리스트 [left, right, out, fourth],
                  각 원소는 WireData (기록되지 않은 위치는 자기 자신)
        """
        sigmas = [[WireData(kind, row) for row in range(n)] for kind in WireKind]

        for wires in self.variable_map.values():
            m = len(wires)
            for j, current in enumerate(wires):
                if current.row >= n:
                    raise ValueError(f"행 {current.row}이 도메인 크기 {n}를 벗어납니다")
                sigmas[current.kind.value][current.row] = wires[(j + 1) % m]

        return sigmas

    def compute_sigma_evaluations(self, domain):
        """σ를 라벨(코셋 식별자 × 도메인 원소)로 바꾼 평가값 4열."""
        roots = domain.elements()
        sigmas = self.compute_sigma_permutations(domain.size)
        return [
            [COSET_LABELS[wire.kind] * roots[wire.row] for wire in sigma]
            for sigma in sigmas
        ]

    def compute_sigma_polynomials(self, domain):
        """(left_sigma, right_sigma, out_sigma, fourth_sigma) 다항식."""
        return tuple(
            domain.interpolate(evals) for evals in self.compute_sigma_evaluations(domain)
        )

    # ─────────────────────────────────────────────────────────────
    # Grand Product z
    # ─────────────────────────────────────────────────────────────

    def compute_permutation_evaluations(self, domain, wires, beta, gamma, sigma_evals):
        """z의 누적값 n+1개: [z(ω⁰)=1, z(ω¹), ..., z(ωⁿ)].

        마지막 값은 복사 제약이 성립할 때 1이 된다.

        Args:
            domain: 기저 EvaluationDomain (크기 n)
            wires: 배선 값 4열 (w_l, w_r, w_o, w_4), 각 길이 n
            beta, gamma: 챌린지
            sigma_evals: compute_sigma_evaluations() 결과
        """
        n = domain.size
        for column in wires:
            if len(column) != n:
                raise ValueError(f"배선 열 길이 {len(column)}가 도메인 크기 {n}와 다릅니다")

        roots = domain.elements()
        labels = [COSET_LABELS[kind] for kind in WireKind]

        numerators = []
        denominators = []
        for i in range(n):
            num = FR(1)
            den = FR(1)
            for k in range(4):
                w = wires[k][i]
                num = num * (w + beta * labels[k] * roots[i] + gamma)
                den = den * (w + beta * sigma_evals[k][i] + gamma)
            numerators.append(num)
            denominators.append(den)

        denominator_invs = batch_inverse(denominators)

        z_evals = [FR(1)]
        for num, den_inv in zip(numerators, denominator_invs):
            z_evals.append(z_evals[-1] * num * den_inv)
        return z_evals

    def compute_permutation_poly(self, domain, wires, beta, gamma, sigma_evals=None):
        """Grand Product 다항식 z(X)."""
        if sigma_evals is None:
            sigma_evals = self.compute_sigma_evaluations(domain)
        z_evals = self.compute_permutation_evaluations(domain, wires, beta, gamma, sigma_evals)
        if z_evals[-1] != FR(1):
            logger.debug("grand product does not wrap to one; copy constraints fail")
        return domain.interpolate(z_evals[:-1])


# ─────────────────────────────────────────────────────────────────────
# 몫 다항식 기여 (확장 코셋 도메인의 한 점)
# ─────────────────────────────────────────────────────────────────────

def identity_term_i(alpha, beta, gamma, x, wires, z_i):
    """α · z(x) · ∏ₖ (wₖ + β·kₖ·x + γ)."""
    beta_x = beta * x
    product = (
        (wires.w_l + beta_x + gamma)
        * (wires.w_r + K1 * beta_x + gamma)
        * (wires.w_o + K2 * beta_x + gamma)
        * (wires.w_4 + K3 * beta_x + gamma)
    )
    return alpha * z_i * product


def copy_term_i(alpha, beta, gamma, wires, sigmas, z_next):
    """-α · z(ω·x) · ∏ₖ (wₖ + β·σₖ(x) + γ)."""
    left_sigma, right_sigma, out_sigma, fourth_sigma = sigmas
    product = (
        (wires.w_l + beta * left_sigma + gamma)
        * (wires.w_r + beta * right_sigma + gamma)
        * (wires.w_o + beta * out_sigma + gamma)
        * (wires.w_4 + beta * fourth_sigma + gamma)
    )
    return -(alpha * z_next * product)


def boundary_term_i(alpha_sq, z_i, l1_i):
    """α² · (z(x) - 1) · L₁(x)."""
    return alpha_sq * (z_i - FR(1)) * l1_i
