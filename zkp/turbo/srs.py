"""
KZG10 Structured Reference String (PublicParameters)
=====================================================

회로에 독립적인 공개 파라미터를 한 번 생성하고, 필요한 차수만큼 잘라(trim) 쓴다.

  SRS = {
      CommitKey:  [g, β·g, β²·g, ..., β^d·g]
      OpeningKey: (g, h, β·h)
  }

**보안**:
  β("toxic waste")를 아는 사람은 거짓 증명을 만들 수 있다.
  여기의 setup은 한 사람이 β를 뽑는 단일 참여자 절차로,
  테스트와 프로토타이핑 전용이다. 실제 배포에는 MPC 세리머니를 써야 한다.

사용 예시:
    >>> pp = PublicParameters.setup(max_degree=16, rng=random.Random(42))
    >>> ck, ok = pp.trim(8)
    >>> len(ck)  # 9
"""

import logging
import secrets

from zkp.turbo.errors import DegreeIsZero
from zkp.turbo.field import (
    G1_PROJECTIVE, G2_PROJECTIVE, batch_normalize, powers_of, projective_mul, random_scalar,
)
from zkp.turbo.keys import CommitKey, OpeningKey


logger = logging.getLogger(__name__)


class PublicParameters:
    """검증자와 증명자가 공유하는 KZG10 공개 파라미터.

    속성:
        commit_key: 잘리지 않은 CommitKey
        opening_key: OpeningKey
    """

    def __init__(self, commit_key, opening_key):
        self.commit_key = commit_key
        self.opening_key = opening_key

    @classmethod
    def setup(cls, max_degree, rng=None):
        """단일 참여자 신뢰 설정으로 공개 파라미터를 생성한다.

        절차:
        1. 비밀 스칼라 β를 균일하게 뽑는다.
        2. β⁰, β¹, ..., β^max_degree를 계산한다.
        3. 임의의 G1 생성자 g, G2 생성자 h를 뽑는다.
        4. powers_of_g[i] = βⁱ·g 를 사영 좌표로 계산하고 한 번에 아핀 정규화한다.
        5. β·h를 한 번 계산해 둔다.

        Args:
            max_degree: 커밋할 최대 다항식 차수 (≥ 1)
            rng: randrange를 제공하는 난수원. None이면 secrets.SystemRandom()

        Returns:
            PublicParameters

        Raises:
            DegreeIsZero: max_degree < 1 (난수를 소비하기 전에 거부)
        """
        # 상수에는 커밋할 수 없다
        if max_degree < 1:
            raise DegreeIsZero(f"max_degree는 1 이상이어야 합니다: {max_degree}")

        if rng is None:
            rng = secrets.SystemRandom()

        logger.warning(
            "single-party SRS setup (max_degree=%d) is for testing only; "
            "use a multi-party ceremony in production",
            max_degree,
        )

        beta = random_scalar(rng)
        powers_of_beta = powers_of(beta, max_degree)

        g = projective_mul(G1_PROJECTIVE, random_scalar(rng))
        powers_of_g = [projective_mul(g, power) for power in powers_of_beta]
        assert len(powers_of_g) == max_degree + 1

        normalised_g = batch_normalize(powers_of_g)

        h = projective_mul(G2_PROJECTIVE, random_scalar(rng))
        beta_h = projective_mul(h, beta)
        h_affine, beta_h_affine = batch_normalize([h, beta_h])

        logger.debug("SRS setup complete: %d G1 powers", len(normalised_g))

        return cls(
            CommitKey(normalised_g),
            OpeningKey(normalised_g[0], h_affine, beta_h_affine),
        )

    def trim(self, truncated_degree):
        """truncated_degree까지 커밋할 수 있도록 키를 자른다.

        Returns:
            tuple: (CommitKey 접두, 변경되지 않은 OpeningKey)

        Raises:
            DegreeTooLarge: truncated_degree > max_degree()
        """
        truncated_commit_key = self.commit_key.truncate(truncated_degree)
        return truncated_commit_key, self.opening_key

    def max_degree(self):
        return self.commit_key.max_degree()
