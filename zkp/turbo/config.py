"""
프로토콜 상수와 런타임 설정
============================

**프로토콜 상수** (회로/증명 호환성에 영향. 바꾸면 기존 전처리 결과와 맞지 않는다):

  - K1, K2, K3: 순열 라벨링용 코셋 식별자.
    배선 위치 라벨: 왼쪽 ωⁱ, 오른쪽 K1·ωⁱ, 출력 K2·ωⁱ, 네 번째 K3·ωⁱ.
    H, K1·H, K2·H, K3·H가 서로소인 코셋이어야 한다.
  - COSET_GENERATOR: 확장 도메인 코셋 FFT의 이동(shift) 값 k.
    k·H₄ₙ 위에서 Z_H(x) = xⁿ - 1이 0이 되지 않도록 FR*의 생성자 5를 쓴다.
  - EXTENSION_FACTOR: 확장 도메인 배수 (제약 차수 4 검사용).

**런타임 설정** (결과 값에는 영향 없음):

  QuotientConfig: 행 단위 병렬 계산의 워커 수와 청크 크기.
  환경 변수 TURBO_PLONK_WORKERS, TURBO_PLONK_CHUNK_SIZE로 덮어쓸 수 있다.
"""

import os
from dataclasses import dataclass

from zkp.turbo.field import FR


K1 = FR(7)
K2 = FR(13)
K3 = FR(17)

COSET_GENERATOR = FR(5)

EXTENSION_FACTOR = 4

# 로직 게이트가 다룰 수 있는 최대 비트 수 (FR 원소 안에서 넘치지 않는 범위)
MAX_LOGIC_BITS = 252

ENV_WORKERS = "TURBO_PLONK_WORKERS"
ENV_CHUNK_SIZE = "TURBO_PLONK_CHUNK_SIZE"


@dataclass(frozen=True)
class QuotientConfig:
    """몫 다항식 조립기의 병렬 실행 설정.

    속성:
        workers: 행 계산 스레드 수. 1이면 직렬 실행.
        chunk_size: 한 작업 단위가 처리하는 연속 행의 수.
    """

    workers: int = 1
    chunk_size: int = 64

    def __post_init__(self):
        if self.workers < 1:
            raise ValueError(f"workers는 1 이상이어야 합니다: {self.workers}")
        if self.chunk_size < 1:
            raise ValueError(f"chunk_size는 1 이상이어야 합니다: {self.chunk_size}")

    @classmethod
    def from_env(cls, environ=None):
        """환경 변수에서 설정을 읽는다. 없는 값은 기본값을 쓴다."""
        if environ is None:
            environ = os.environ
        kwargs = {}
        for key, field_name in ((ENV_WORKERS, "workers"), (ENV_CHUNK_SIZE, "chunk_size")):
            raw = environ.get(key)
            if raw is None or raw.strip() == "":
                continue
            try:
                kwargs[field_name] = int(raw)
            except ValueError:
                raise ValueError(f"{key} 값이 정수가 아닙니다: {raw!r}") from None
        return cls(**kwargs)
