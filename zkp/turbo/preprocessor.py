"""
TurboPlonk 전처리기 (Preprocessor)
====================================

회로 구조가 정해지면 witness와 무관한 다항식을 한 번만 계산해 둔다.

**전처리 출력물 (PreProcessedCircuit)**:
  - 도메인: n (2의 거듭제곱), EvaluationDomain
  - 셀렉터 11개: Selector(다항식, 4n 코셋 평가값)
  - 순열 σ 4개: Selector(다항식, 4n 코셋 평가값) + 기저 도메인 라벨
  - 4n 코셋 위의 소거 다항식 Z_H 평가값
  - 위젯: WidgetKind → 위젯 객체 (셀렉터를 소유)

**zero_var 묶음**:
  패딩 전에 composer.bind_zero_var()로 zero_var = 0 행을 한 번 추가한다.
  패딩 행과 로직 누적기 시작값이 zero_var를 배선으로 쓰므로 이 행이
  순열을 통해 그 값들을 모두 0으로 고정한다.

**패딩**:
  행 수를 다음 2의 거듭제곱으로 올린다. 추가 행은 모든 셀렉터가 0이고
  네 배선 모두 zero_var이므로 제약을 자동으로 만족한다.

사용 예시:
    >>> circuit = preprocess(composer)
    >>> circuit.n                     # 패딩된 행 수
    >>> circuit.widgets[WidgetKind.LOGIC]
"""

import logging
from dataclasses import dataclass

from zkp.turbo.composer import SELECTOR_NAMES, GateRow
from zkp.turbo.domain import EvaluationDomain
from zkp.turbo.errors import UnsupportedWidget
from zkp.turbo.field import FR
from zkp.turbo.widget import UNSUPPORTED_WIDGETS, WIDGET_SELECTORS, Selector, WidgetKind
from zkp.turbo.widget.arithmetic import ArithmeticWidget
from zkp.turbo.widget.logic import LogicWidget


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PreProcessedCircuit:
    """witness와 무관한 회로 데이터.

    속성:
        n: 도메인 크기
        domain: 기저 EvaluationDomain
        selectors: 열 이름 → Selector
        sigmas: (left, right, out, fourth) Selector
        sigma_evaluations: 기저 도메인 위의 σ 라벨 4열 (grand product 계산용)
        v_h_coset_4n: 4n 코셋 위의 Z_H 평가값
        widgets: WidgetKind → 위젯
    """

    n: int
    domain: EvaluationDomain
    selectors: dict
    sigmas: tuple
    sigma_evaluations: tuple
    v_h_coset_4n: tuple
    widgets: dict


def next_power_of_2(n):
    """n 이상인 가장 작은 2의 거듭제곱."""
    p = 1
    while p < n:
        p *= 2
    return p


def _pad_circuit(composer, size):
    zero = composer.zero_var()
    added = 0
    while composer.n < size:
        composer._append_row(GateRow(zero, zero, zero, zero))
        added += 1
    return added


def _check_widgets(composer):
    for kind in UNSUPPORTED_WIDGETS:
        column = composer.selectors[WIDGET_SELECTORS[kind]]
        rows = [i for i, value in enumerate(column) if value != FR(0)]
        if rows:
            raise UnsupportedWidget(
                f"{kind.value} 위젯은 지원하지 않습니다 (활성 행: {rows[:5]})"
            )


def _selector(domain, extended, evals):
    poly = domain.interpolate(evals)
    return Selector(poly, tuple(extended.coset_fft(poly.coeffs)))


def preprocess(composer):
    """Composer를 전처리한다. zero_var 묶음 행을 추가하고 2의 거듭제곱으로 패딩한다.

    Raises:
        ValueError: 게이트가 하나도 없을 때
        UnsupportedWidget: range/곡선 덧셈 셀렉터가 켜진 행이 있을 때
    """
    if composer.n == 0:
        raise ValueError("게이트가 없는 회로는 전처리할 수 없습니다")

    _check_widgets(composer)
    composer.bind_zero_var()

    n = next_power_of_2(composer.n)
    added = _pad_circuit(composer, n)
    if added:
        logger.debug("padded circuit with %d zero rows", added)

    domain = EvaluationDomain(n)
    extended = domain.extended()

    selectors = {
        name: _selector(domain, extended, composer.selectors[name])
        for name in SELECTOR_NAMES
    }

    sigma_evaluations = tuple(
        tuple(evals) for evals in composer.permutation.compute_sigma_evaluations(domain)
    )
    sigmas = tuple(_selector(domain, extended, evals) for evals in sigma_evaluations)

    v_h_coset_4n = tuple(extended.compute_vanishing_poly_over_coset(n))

    widgets = {
        WidgetKind.ARITHMETIC: ArithmeticWidget(
            q_m=selectors["q_m"],
            q_l=selectors["q_l"],
            q_r=selectors["q_r"],
            q_o=selectors["q_o"],
            q_4=selectors["q_4"],
            q_c=selectors["q_c"],
            q_arith=selectors["q_arith"],
        ),
        WidgetKind.LOGIC: LogicWidget(q_c=selectors["q_c"], q_logic=selectors["q_logic"]),
    }

    logger.info("preprocessed circuit: n=%d, variables=%d", n, len(composer.variables))

    return PreProcessedCircuit(
        n=n,
        domain=domain,
        selectors=selectors,
        sigmas=sigmas,
        sigma_evaluations=sigma_evaluations,
        v_h_coset_4n=v_h_coset_4n,
        widgets=widgets,
    )


# ─────────────────────────────────────────────────────────────────────
# witness / 공개 입력 다항식
# ─────────────────────────────────────────────────────────────────────

def compute_witness_columns(composer, size):
    """배선 열 4개의 FR 값. size까지 0으로 채운다."""
    if composer.n > size:
        raise ValueError(f"행 수 {composer.n}가 도메인 크기 {size}보다 큽니다")
    padding = [FR(0)] * (size - composer.n)
    return tuple(column + padding for column in composer.witness_values())


def compute_witness_polynomials(composer, domain):
    """배선 열 4개를 보간한 (w_l, w_r, w_o, w_4) 다항식."""
    return tuple(
        domain.interpolate(column)
        for column in compute_witness_columns(composer, domain.size)
    )


def compute_public_input_polynomial(composer, domain):
    """PI(X): 행 i에서 공개 입력 값, 나머지 행에서 0."""
    return domain.interpolate(composer.dense_public_inputs(domain.size))


def compute_permutation_polynomial(composer, circuit, beta, gamma):
    """전처리된 σ 라벨로 grand product z(X)를 계산한다."""
    wires = compute_witness_columns(composer, circuit.n)
    return composer.permutation.compute_permutation_poly(
        circuit.domain, wires, beta, gamma, circuit.sigma_evaluations
    )
