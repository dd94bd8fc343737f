"""
KZG10 커밋/열기 키
===================

SRS에서 파생된 두 키를 정의한다. 커밋, 열기 증명, 검증 루틴은 이 코어 밖에 있다.

  CommitKey  = [g, β·g, β²·g, ..., β^d·g]   (G1 아핀 점)
  OpeningKey = (g, h, β·h)                    (g ∈ G1, h, β·h ∈ G2)
"""

from zkp.turbo.errors import DegreeTooLarge


class CommitKey:
    """다항식 계수와의 다중 스칼라곱(commit)에 쓰이는 G1 점 수열.

    속성:
        powers_of_g: [β⁰·g, β¹·g, ..., β^d·g]
    """

    def __init__(self, powers_of_g):
        self.powers_of_g = tuple(powers_of_g)

    def max_degree(self):
        """커밋할 수 있는 최대 다항식 차수."""
        return len(self.powers_of_g) - 1

    def truncate(self, truncated_degree):
        """길이 truncated_degree + 1의 접두 CommitKey를 반환한다.

        Raises:
            DegreeTooLarge: truncated_degree > max_degree()
        """
        if truncated_degree < 0:
            raise ValueError(f"차수는 음수일 수 없습니다: {truncated_degree}")
        if truncated_degree > self.max_degree():
            raise DegreeTooLarge(
                f"trim 차수 {truncated_degree}가 최대 차수 {self.max_degree()}를 초과합니다"
            )
        return CommitKey(self.powers_of_g[:truncated_degree + 1])

    def __len__(self):
        return len(self.powers_of_g)

    def __eq__(self, other):
        if not isinstance(other, CommitKey):
            return NotImplemented
        return self.powers_of_g == other.powers_of_g

    def __repr__(self):
        return f"CommitKey(max_degree={self.max_degree()})"


class OpeningKey:
    """페어링 기반 열기 검증에 쓰이는 세 점.

    속성:
        g: G1 생성자
        h: G2 생성자
        beta_h: β·h (페어링 검사용 캐시 원소)
    """

    __slots__ = ("g", "h", "beta_h")

    def __init__(self, g, h, beta_h):
        object.__setattr__(self, "g", g)
        object.__setattr__(self, "h", h)
        object.__setattr__(self, "beta_h", beta_h)

    def __setattr__(self, name, value):
        raise AttributeError("OpeningKey는 변경할 수 없습니다")

    def __eq__(self, other):
        if not isinstance(other, OpeningKey):
            return NotImplemented
        return (self.g, self.h, self.beta_h) == (other.g, other.h, other.beta_h)

    def __repr__(self):
        return "OpeningKey(g, h, beta_h)"
