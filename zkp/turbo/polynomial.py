"""
계수 표현 다항식과 NTT
========================

**Polynomial**:
  p(x) = c₀ + c₁·x + ... 를 FR 계수 리스트로 들고 있는 불변 값 객체.
  셀렉터, σ, witness, grand product, 몫 다항식이 모두 이 타입이다.
  최고차의 0 계수는 생성 시 잘라낸다.

**fft / ifft**:
  비트 역순 정렬 후 제자리(in-place) 버터플라이를 도는 반복형 radix-2 NTT.
  도메인/코셋 처리는 domain.EvaluationDomain이 맡는다.

사용 예시:
    >>> p = Polynomial([FR(1), FR(2), FR(3)])  # 1 + 2x + 3x²
    >>> p.evaluate(FR(2))  # FR(17)
"""

from itertools import zip_longest

from zkp.turbo.field import FR, inverse, to_fr


class Polynomial:
    """FR 위의 다항식. coeffs[i]는 xⁱ의 계수."""

    def __init__(self, coeffs=()):
        coeffs = [to_fr(c) for c in coeffs]
        while coeffs and coeffs[-1] == FR(0):
            coeffs.pop()
        self.coeffs = coeffs or [FR(0)]

    @classmethod
    def zero(cls):
        return cls()

    @classmethod
    def one(cls):
        return cls([FR(1)])

    @property
    def degree(self):
        """차수. 영 다항식은 0."""
        return len(self.coeffs) - 1

    def __len__(self):
        return len(self.coeffs)

    def evaluate(self, point):
        """Horner 방식으로 p(point)."""
        point = to_fr(point)
        acc = FR(0)
        for coeff in reversed(self.coeffs):
            acc = acc * point + coeff
        return acc

    def _coerce(self, other):
        if isinstance(other, Polynomial):
            return other
        return Polynomial([other])

    def __add__(self, other):
        other = self._coerce(other)
        return Polynomial(
            a + b for a, b in zip_longest(self.coeffs, other.coeffs, fillvalue=FR(0))
        )

    __radd__ = __add__

    def __neg__(self):
        return Polynomial(-c for c in self.coeffs)

    def __sub__(self, other):
        return self + (-self._coerce(other))

    def __mul__(self, other):
        if not isinstance(other, Polynomial):
            scalar = to_fr(other)
            return Polynomial(c * scalar for c in self.coeffs)

        product = [FR(0)] * (len(self.coeffs) + len(other.coeffs) - 1)
        for i, a in enumerate(self.coeffs):
            if a == FR(0):
                continue
            for j, b in enumerate(other.coeffs):
                product[i + j] = product[i + j] + a * b
        return Polynomial(product)

    __rmul__ = __mul__

    def __eq__(self, other):
        if not isinstance(other, Polynomial):
            if isinstance(other, (int, FR)):
                other = Polynomial([other])
            else:
                return NotImplemented
        return self.coeffs == other.coeffs

    def __repr__(self):
        return f"Polynomial(degree={self.degree})"


# ─────────────────────────────────────────────────────────────────────
# NTT
# ─────────────────────────────────────────────────────────────────────

def _bit_reverse(values):
    n = len(values)
    j = 0
    for i in range(1, n):
        bit = n >> 1
        while j & bit:
            j ^= bit
            bit >>= 1
        j |= bit
        if i < j:
            values[i], values[j] = values[j], values[i]


def fft(coeffs, omega):
    """계수 → [p(1), p(ω), ..., p(ω^{n-1})].

    Args:
        coeffs: 길이 n(2의 거듭제곱)의 계수 리스트
        omega: n차 원시 단위근

    Returns:
        list[FR]
    """
    n = len(coeffs)
    if n & (n - 1):
        raise ValueError(f"NTT 길이는 2의 거듭제곱이어야 합니다: {n}")

    values = [to_fr(c) for c in coeffs]
    _bit_reverse(values)

    size = 2
    while size <= n:
        half = size // 2
        step = omega ** (n // size)
        for start in range(0, n, size):
            w = FR(1)
            for k in range(start, start + half):
                t = values[k + half] * w
                values[k + half] = values[k] - t
                values[k] = values[k] + t
                w = w * step
        size *= 2
    return values


def ifft(evals, omega):
    """평가값 → 계수. ω⁻¹로 NTT한 뒤 1/n을 곱한다."""
    n = len(evals)
    n_inv = inverse(FR(n))
    return [c * n_inv for c in fft(evals, inverse(omega))]
