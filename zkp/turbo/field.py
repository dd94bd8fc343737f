"""
TurboPlonk 기반 모듈: 유한체(Finite Field) 및 타원곡선 연산
=============================================================

산술화(arithmetization) 코어 전체에서 사용되는 대수적 도구를 정의한다.

**유한체 FR**:
  bn128 타원곡선의 스칼라 필드. 셀렉터/배선/순열 다항식과
  몫 다항식의 모든 계수는 FR 원소이다.
  - 위수 p ≈ 2^254, p - 1 = 2^28 × m → 최대 2^28차 단위근 지원

**타원곡선 연산**:
  SRS(CommitKey, OpeningKey) 생성을 위한 G1, G2 그룹 연산.
  아핀(affine) 좌표는 py_ecc.bn128 표현을 따른다.
  대량 스칼라곱은 py_ecc.optimized_bn128의 사영(projective) 좌표에서 수행한 뒤
  batch_normalize()로 한 번에 아핀 좌표로 정규화한다.

**배치 역원 (Montgomery trick)**:
  N개의 역원을 1번의 역원 + 3(N-1)번의 곱셈으로 계산한다.
  0의 역원은 py_ecc에서 조용히 0을 반환하므로 반드시 ZeroInverse로 막는다.

사용 예시:
    >>> from zkp.turbo.field import FR, batch_inverse
    >>> batch_inverse([FR(2), FR(4)])  # [1/2, 1/4]
"""

from py_ecc import bn128
from py_ecc import optimized_bn128
from py_ecc.fields import bn128_FQ as FQ
from py_ecc.fields import bn128_FQ2 as FQ2

from zkp.turbo.errors import DomainError, ZeroInverse


# ─────────────────────────────────────────────────────────────────────
# 유한체(Finite Field) FR
# ─────────────────────────────────────────────────────────────────────

class FR(FQ):
    """bn128 스칼라 필드 위의 유한체 원소.

    py_ecc의 FQ를 상속하여 +, -, *, /, ** 연산을 제공한다.

    주의:
        FR(1) / FR(0)은 예외 없이 FR(0)을 반환한다 (py_ecc 동작).
        역원이 필요한 곳에서는 inverse() 또는 batch_inverse()를 사용한다.
    """
    field_modulus = bn128.curve_order


# 곡선 위수 (필드 크기)
CURVE_ORDER = bn128.curve_order

# 2-adicity: p - 1 = 2^28 × m
TWO_ADICITY = 28


def to_fr(value):
    """정수 또는 FR을 FR로 변환한다. 음수는 p를 법으로 환원된다."""
    if isinstance(value, FR):
        return value
    return FR(value)


def inverse(value):
    """value의 모듈러 역원. value == 0이면 ZeroInverse."""
    value = to_fr(value)
    if value == FR(0):
        raise ZeroInverse("0의 역원을 계산할 수 없습니다")
    return FR(1) / value


def batch_inverse(values):
    """Montgomery 배치 역원.

    result[i] = values[i]^(-1). FR뿐 아니라 py_ecc의 FQ, FQ2 원소에도
    동작한다 (곱셈/나눗셈/비교만 사용).

    Args:
        values: 0이 아닌 필드 원소 리스트

    Returns:
        list: 역원 리스트 (입력과 같은 순서)

    Raises:
        ZeroInverse: 0인 원소가 있을 때
    """
    values = list(values)
    if not values:
        return []

    field = type(values[0])
    zero = field.zero()

    # 누적곱 prefix[i] = v_0 · v_1 · ... · v_{i-1}
    prefix = []
    acc = field.one()
    for i, v in enumerate(values):
        if v == zero:
            raise ZeroInverse(f"배치 역원 입력 {i}번째 원소가 0입니다")
        prefix.append(acc)
        acc = acc * v

    acc_inv = field.one() / acc

    result = [None] * len(values)
    for i in range(len(values) - 1, -1, -1):
        result[i] = acc_inv * prefix[i]
        acc_inv = acc_inv * values[i]
    return result


def powers_of(scalar, max_power):
    """[1, s, s², ..., s^max_power] (길이 max_power + 1)."""
    scalar = to_fr(scalar)
    powers = []
    current = FR(1)
    for _ in range(max_power + 1):
        powers.append(current)
        current = current * scalar
    return powers


def random_scalar(rng):
    """rng에서 0이 아닌 FR 원소를 균일하게 뽑는다.

    rng는 randrange(start, stop)를 제공하는 객체
    (random.Random, secrets.SystemRandom 등).
    """
    return FR(rng.randrange(1, CURVE_ORDER))


# ─────────────────────────────────────────────────────────────────────
# 타원곡선 상수 및 연산
# ─────────────────────────────────────────────────────────────────────

# G1, G2 그룹 생성자 (아핀)
G1 = bn128.G1
G2 = bn128.G2

# 사영 좌표 생성자 (optimized_bn128)
G1_PROJECTIVE = optimized_bn128.G1
G2_PROJECTIVE = optimized_bn128.G2


def ec_mul(point, scalar):
    """타원곡선 스칼라 곱셈 (아핀): scalar · point."""
    if isinstance(scalar, FR):
        scalar = int(scalar)
    return bn128.multiply(point, scalar % CURVE_ORDER)


def ec_pairing(g2_point, g1_point):
    """쌍선형 페어링 e(G1, G2). py_ecc 인자 순서는 (G2, G1)이다."""
    return bn128.pairing(g2_point, g1_point)


def projective_mul(point, scalar):
    """사영 좌표 스칼라 곱셈. 결과도 사영 좌표 (x, y, z)."""
    if isinstance(scalar, FR):
        scalar = int(scalar)
    return optimized_bn128.multiply(point, scalar % CURVE_ORDER)


def _to_affine_coordinate(value):
    # optimized 필드 원소 → bn128 필드 원소
    if hasattr(value, "coeffs"):
        return FQ2([int(c) for c in value.coeffs])
    return FQ(int(value))


def batch_normalize(points):
    """사영 좌표 점들을 한 번의 배치 역원으로 아핀 좌표로 변환한다.

    (x, y, z) → (x/z, y/z). 무한원점(z = 0)은 None이 된다.
    같은 그룹(G1 또는 G2)의 점만 한 번에 넘겨야 한다.

    Args:
        points: optimized_bn128 사영 좌표 점 리스트

    Returns:
        list: py_ecc.bn128 아핀 점 리스트
    """
    points = list(points)
    if not points:
        return []

    zero = type(points[0][2]).zero()
    finite = [i for i, p in enumerate(points) if p[2] != zero]
    z_invs = batch_inverse([points[i][2] for i in finite])

    result = [None] * len(points)
    for i, z_inv in zip(finite, z_invs):
        x, y, _ = points[i]
        result[i] = (
            _to_affine_coordinate(x * z_inv),
            _to_affine_coordinate(y * z_inv),
        )
    return result


# ─────────────────────────────────────────────────────────────────────
# 단위근 (Roots of Unity)
# ─────────────────────────────────────────────────────────────────────

def get_root_of_unity(n):
    """n차 원시 단위근 ω를 반환한다.

    ω = g^((p-1)/n), g = FR(5)는 FR*의 생성자이다.

    Args:
        n: 2의 거듭제곱, ≤ 2^28

    Raises:
        DomainError: n이 2의 거듭제곱이 아니거나 2^28을 초과할 때
    """
    if n < 1 or (n & (n - 1)) != 0:
        raise DomainError(f"n은 2의 거듭제곱이어야 합니다: {n}")
    if n > (1 << TWO_ADICITY):
        raise DomainError(f"n은 2^{TWO_ADICITY} 이하여야 합니다: {n}")
    if n == 1:
        return FR(1)

    g = FR(5)
    return g ** ((CURVE_ORDER - 1) // n)


def get_roots_of_unity(n):
    """[1, ω, ω², ..., ω^(n-1)]."""
    omega = get_root_of_unity(n)
    roots = []
    current = FR(1)
    for _ in range(n):
        roots.append(current)
        current = current * omega
    return roots
