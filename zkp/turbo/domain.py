"""
평가 도메인 (Evaluation Domain)
=================================

크기 N(2의 거듭제곱)의 단위근 집합 H = {1, ω, ..., ω^(N-1)}과
그 코셋 k·H에서의 FFT/IFFT를 제공한다.

**코셋 FFT가 필요한 이유**:
  몫 t(x) = C(x) / Z_H(x)를 평가 표현으로 계산하려면 Z_H가 0이 아닌 점이 필요하다.
  H 위에서는 Z_H(ωⁱ) = 0이므로, k ∉ H인 코셋 k·H에서 평가한다.

  p(x)를 k·H에서 평가 = 계수 [c₀, k·c₁, k²·c₂, ...]를 H에서 FFT.

**4배 확장 도메인**:
  제약 다항식의 차수가 최대 약 5n이므로 몫의 차수는 4n 미만이다.
  크기 4n 코셋에서 평가하면 몫을 정확히 복원할 수 있다.
  확장 도메인에서 "다음 행"(ω·x)은 인덱스 i+4에 해당한다.
"""

from zkp.turbo.config import COSET_GENERATOR, EXTENSION_FACTOR
from zkp.turbo.errors import DomainError
from zkp.turbo.field import FR, get_root_of_unity, get_roots_of_unity, to_fr
from zkp.turbo.polynomial import Polynomial, fft, ifft


class EvaluationDomain:
    """크기 size의 곱셈 부분군 H와 코셋 k·H.

    속성:
        size: 도메인 크기 N
        group_gen: N차 원시 단위근 ω
        coset_generator: 코셋 이동값 k
    """

    def __init__(self, size, coset_generator=None):
        if size < 1 or (size & (size - 1)) != 0:
            raise DomainError(f"도메인 크기는 2의 거듭제곱이어야 합니다: {size}")
        self.size = size
        self.group_gen = get_root_of_unity(size)
        self.coset_generator = COSET_GENERATOR if coset_generator is None else to_fr(coset_generator)
        self._elements = None

    def __repr__(self):
        return f"EvaluationDomain(size={self.size})"

    def elements(self):
        """[1, ω, ..., ω^(N-1)] (캐시됨)."""
        if self._elements is None:
            self._elements = get_roots_of_unity(self.size)
        return self._elements

    def coset_elements(self):
        """[k, k·ω, ..., k·ω^(N-1)]."""
        k = self.coset_generator
        return [k * x for x in self.elements()]

    def extended(self, factor=EXTENSION_FACTOR):
        """같은 코셋 이동값을 쓰는 factor배 크기 도메인."""
        return EvaluationDomain(self.size * factor, self.coset_generator)

    def _pad(self, coeffs):
        coeffs = [to_fr(c) for c in coeffs]
        if len(coeffs) > self.size:
            raise ValueError(
                f"계수 {len(coeffs)}개는 도메인 크기 {self.size}를 초과합니다"
            )
        return coeffs + [FR(0)] * (self.size - len(coeffs))

    def fft(self, coeffs):
        return fft(self._pad(coeffs), self.group_gen)

    def ifft(self, evals):
        if len(evals) != self.size:
            raise ValueError(
                f"평가값 {len(evals)}개가 도메인 크기 {self.size}와 다릅니다"
            )
        return ifft([to_fr(e) for e in evals], self.group_gen)

    def coset_fft(self, coeffs):
        """다항식을 코셋 k·H에서 평가한다: cᵢ → kⁱ·cᵢ 후 FFT."""
        shifted = []
        k_power = FR(1)
        for c in self._pad(coeffs):
            shifted.append(c * k_power)
            k_power = k_power * self.coset_generator
        return fft(shifted, self.group_gen)

    def coset_ifft(self, evals):
        """코셋 FFT의 역변환: IFFT 후 cᵢ / kⁱ."""
        coeffs = self.ifft(evals)
        k_inv = FR(1) / self.coset_generator
        k_inv_power = FR(1)
        result = []
        for c in coeffs:
            result.append(c * k_inv_power)
            k_inv_power = k_inv_power * k_inv
        return result

    def evaluate_vanishing_polynomial(self, point):
        """Z_H(point) = point^N - 1."""
        return to_fr(point) ** self.size - FR(1)

    def compute_vanishing_poly_over_coset(self, poly_degree):
        """X^poly_degree - 1을 이 도메인의 코셋 k·H에서 평가한다.

        확장 도메인(크기 4n)에서 poly_degree = n을 넘기면
        (k·ω₄ₙⁱ)ⁿ - 1 = kⁿ·(ω₄ₙⁿ)ⁱ - 1 이므로 서로 다른 값은 4개뿐이다.
        그 4개를 계산한 뒤 반복한다.

        Args:
            poly_degree: 기저 도메인 크기 n (size의 약수)

        Returns:
            list[FR]: 길이 size의 평가값
        """
        if poly_degree < 1 or self.size % poly_degree != 0:
            raise DomainError(
                f"소거 다항식 차수 {poly_degree}가 도메인 크기 {self.size}를 나누지 않습니다"
            )
        ratio = self.size // poly_degree
        coset_gen_pow = self.coset_generator ** poly_degree
        step = self.group_gen ** poly_degree
        distinct = []
        current = coset_gen_pow
        for _ in range(ratio):
            distinct.append(current - FR(1))
            current = current * step
        return [distinct[i % ratio] for i in range(self.size)]

    def first_lagrange_polynomial(self):
        """L₁(x): H의 첫 점(1)에서 1, 나머지 점에서 0인 기저 다항식."""
        evals = [FR(0)] * self.size
        evals[0] = FR(1)
        return Polynomial(self.ifft(evals))

    def interpolate(self, evals):
        """H 위의 평가값을 보간한 Polynomial."""
        return Polynomial(self.ifft(evals))
