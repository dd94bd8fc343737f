"""
TurboPlonk 회로 구성기 (Composer)
===================================

게이트를 한 행씩 추가하며 배선 열 4개, 셀렉터 열 11개, 공개 입력 저장소,
순열 등장 위치 맵을 함께 쌓는다.

**폭 4 게이트 방정식** (q_arith = 1인 행):

    q_m·(a·b) + q_l·a + q_r·b + q_o·c + q_4·d + q_c + PI = 0

**셀렉터 열**:
  | 열                     | 역할                           |
  |------------------------|--------------------------------|
  | q_m, q_l, q_r, q_o, q_4, q_c | 산술 게이트 계수          |
  | q_arith                | 산술 위젯 on/off               |
  | q_range                | range 위젯 (미지원)            |
  | q_logic                | 로직 위젯 on/off               |
  | q_fixed_group_add      | 고정 기저 곡선 덧셈 (미지원)   |
  | q_variable_group_add   | 가변 기저 곡선 덧셈 (미지원)   |

모든 행은 GateRow 하나로 원자적으로 추가되므로 매 호출 뒤 모든 열의 길이는 n이다.

**변수**:
  Variable은 composer.variables(FR 리스트)의 인덱스다. 인덱스 0은 항상 0에
  묶인 예약 변수(zero_var)이며, 빠진 배선(d 등)을 채울 때 쓴다.
  이 묶음은 bind_zero_var()가 추가하는 q_l·w_l = 0 행이 강제한다.

사용 예시:
    >>> composer = Composer()
    >>> x = composer.add_input(3)
    >>> y = composer.mul(1, x, x, 0)      # 9
    >>> composer.constrain_to_constant(y, 9)
    >>> composer.is_satisfied()
    True
"""

import logging
from dataclasses import dataclass, field, fields

from zkp.turbo.config import MAX_LOGIC_BITS
from zkp.turbo.errors import DuplicatePublicInput
from zkp.turbo.field import FR, to_fr
from zkp.turbo.permutation import Permutation
from zkp.turbo.widget.arithmetic import arithmetic_gate_value
from zkp.turbo.widget.logic import logic_constraints


logger = logging.getLogger(__name__)


WIRE_NAMES = ("w_l", "w_r", "w_o", "w_4")

SELECTOR_NAMES = (
    "q_m", "q_l", "q_r", "q_o", "q_c", "q_4",
    "q_arith", "q_range", "q_logic",
    "q_fixed_group_add", "q_variable_group_add",
)


@dataclass(frozen=True)
class Variable:
    """composer.variables의 인덱스."""

    index: int


def _zero():
    return FR(0)


@dataclass
class GateRow:
    """한 행의 배선 4개와 셀렉터 11개. 지정하지 않은 셀렉터는 0."""

    w_l: Variable
    w_r: Variable
    w_o: Variable
    w_4: Variable
    q_m: FR = field(default_factory=_zero)
    q_l: FR = field(default_factory=_zero)
    q_r: FR = field(default_factory=_zero)
    q_o: FR = field(default_factory=_zero)
    q_c: FR = field(default_factory=_zero)
    q_4: FR = field(default_factory=_zero)
    q_arith: FR = field(default_factory=_zero)
    q_range: FR = field(default_factory=_zero)
    q_logic: FR = field(default_factory=_zero)
    q_fixed_group_add: FR = field(default_factory=_zero)
    q_variable_group_add: FR = field(default_factory=_zero)

    def __post_init__(self):
        for f in fields(self):
            if f.name in SELECTOR_NAMES:
                setattr(self, f.name, to_fr(getattr(self, f.name)))


class Composer:
    """TurboPlonk 제약 시스템 빌더.

    속성:
        n: 추가된 행 수
        variables: 변수 인덱스 → FR 값
        wires: 열 이름 → Variable 리스트
        selectors: 열 이름 → FR 리스트
        public_inputs: 행 인덱스 → FR (희소)
        permutation: Permutation (변수별 등장 위치)
    """

    def __init__(self):
        self.n = 0
        self.variables = []
        self.wires = {name: [] for name in WIRE_NAMES}
        self.selectors = {name: [] for name in SELECTOR_NAMES}
        self.public_inputs = {}
        self.permutation = Permutation()
        self._zero_var = self.add_input(FR(0))
        self._zero_bound = False

    def __repr__(self):
        return f"Composer(n={self.n}, variables={len(self.variables)})"

    # ─────────────────────────────────────────────────────────────
    # 변수
    # ─────────────────────────────────────────────────────────────

    def add_input(self, value):
        """값을 가진 새 변수를 할당한다."""
        var = Variable(len(self.variables))
        self.variables.append(to_fr(value))
        self.permutation.add_variable(var)
        return var

    def zero_var(self):
        """0에 묶인 예약 변수."""
        return self._zero_var

    def value_of(self, var):
        return self.variables[var.index]

    def bind_zero_var(self):
        """zero_var = 0 을 강제하는 행(q_l = q_arith = 1)을 한 번만 추가한다.

        preprocess()가 패딩 전에 호출한다. 이미 묶여 있으면 None.
        """
        if self._zero_bound:
            return None
        zero = self._zero_var
        index = self._append_row(GateRow(zero, zero, zero, zero, q_l=FR(1), q_arith=FR(1)))
        self._zero_bound = True
        return index

    # ─────────────────────────────────────────────────────────────
    # 행 추가
    # ─────────────────────────────────────────────────────────────

    def _append_row(self, row, pi=None):
        """GateRow 하나를 모든 열에 추가하고 등장 위치와 PI를 기록한다."""
        index = self.n
        if pi is not None:
            if index in self.public_inputs:
                raise DuplicatePublicInput(f"행 {index}에 이미 공개 입력이 있습니다")

        self.permutation.add_variables_to_map(row.w_l, row.w_r, row.w_o, row.w_4, index)

        for name in WIRE_NAMES:
            self.wires[name].append(getattr(row, name))
        for name in SELECTOR_NAMES:
            self.selectors[name].append(getattr(row, name))
        if pi is not None:
            self.public_inputs[index] = to_fr(pi)

        self.n += 1
        return index

    def big_arith_gate(self, a, b, c, d, q_m, q_l, q_r, q_o, q_c, q_4, pi=None):
        """q_m·a·b + q_l·a + q_r·b + q_o·c + q_4·d + q_c + PI = 0 행을 추가한다.

        d가 None이면 zero_var를 쓴다. 호출자가 준 c를 그대로 반환한다.
        """
        if d is None:
            d = self._zero_var
        row = GateRow(
            a, b, c, d,
            q_m=q_m, q_l=q_l, q_r=q_r, q_o=q_o, q_c=q_c, q_4=q_4,
            q_arith=FR(1),
        )
        self._append_row(row, pi)
        return c

    def big_add_gate(self, a, b, c, d, q_l, q_r, q_o, q_4, q_c, pi=None):
        """q_m = 0인 폭 4 덧셈 게이트."""
        return self.big_arith_gate(a, b, c, d, FR(0), q_l, q_r, q_o, q_c, q_4, pi)

    def big_mul_gate(self, a, b, c, d, q_m, q_o, q_c, q_4, pi=None):
        """q_l = q_r = 0인 폭 4 곱셈 게이트."""
        return self.big_arith_gate(a, b, c, d, q_m, FR(0), FR(0), q_o, q_c, q_4, pi)

    def add_gate(self, a, b, c, q_l, q_r, q_o, q_c, pi=None):
        return self.big_add_gate(a, b, c, None, q_l, q_r, q_o, FR(0), q_c, pi)

    def mul_gate(self, a, b, c, q_m, q_o, q_c, pi=None):
        return self.big_mul_gate(a, b, c, None, q_m, q_o, q_c, FR(0), pi)

    def poly_gate(self, a, b, c, q_m, q_l, q_r, q_o, q_c, pi=None):
        """q_o를 자유롭게 지정하는 폭 3 일반 게이트."""
        return self.big_arith_gate(a, b, c, None, q_m, q_l, q_r, q_o, q_c, FR(0), pi)

    # ─────────────────────────────────────────────────────────────
    # 출력값을 계산하는 래퍼 (q_o = -1)
    # ─────────────────────────────────────────────────────────────

    def big_arith(self, q_m, a, b, q_l, q_r, q_4_d=None, q_c=0, pi=None):
        """c = q_m·a·b + q_l·a + q_r·b + q_4·d + q_c + PI를 계산해 새 변수로 만든다.

        Args:
            q_4_d: (q_4, d) 쌍 또는 None

        Returns:
            Variable: 출력 변수 c
        """
        if q_4_d is None:
            q_4, d = FR(0), self._zero_var
        else:
            q_4, d = to_fr(q_4_d[0]), q_4_d[1]

        q_m, q_l, q_r, q_c = to_fr(q_m), to_fr(q_l), to_fr(q_r), to_fr(q_c)
        pi_value = FR(0) if pi is None else to_fr(pi)

        output = (
            q_m * self.value_of(a) * self.value_of(b)
            + q_l * self.value_of(a)
            + q_r * self.value_of(b)
            + q_4 * self.value_of(d)
            + q_c
            + pi_value
        )
        c = self.add_input(output)
        return self.big_arith_gate(a, b, c, d, q_m, q_l, q_r, FR(-1), q_c, q_4, pi)

    def big_add(self, q_l_a, q_r_b, q_4_d=None, q_c=0, pi=None):
        """(q_l, a), (q_r, b), (q_4, d) 선형 결합 + q_c + PI."""
        q_l, a = q_l_a
        q_r, b = q_r_b
        return self.big_arith(FR(0), a, b, q_l, q_r, q_4_d, q_c, pi)

    def add(self, q_l_a, q_r_b, q_c=0, pi=None):
        return self.big_add(q_l_a, q_r_b, None, q_c, pi)

    def big_mul(self, q_m, a, b, q_4_d=None, q_c=0, pi=None):
        """q_m·a·b + q_4·d + q_c + PI."""
        return self.big_arith(q_m, a, b, FR(0), FR(0), q_4_d, q_c, pi)

    def mul(self, q_m, a, b, q_c=0, pi=None):
        return self.big_mul(q_m, a, b, None, q_c, pi)

    # ─────────────────────────────────────────────────────────────
    # 제약 헬퍼
    # ─────────────────────────────────────────────────────────────

    def constrain_to_constant(self, a, constant, pi=None):
        """a + (-constant) + PI = 0."""
        self.poly_gate(a, a, a, FR(0), FR(1), FR(0), FR(0), -to_fr(constant), pi)

    def assert_equal(self, a, b):
        """a - b = 0."""
        self.poly_gate(a, b, self._zero_var, FR(0), FR(1), FR(-1), FR(0), FR(0))

    # ─────────────────────────────────────────────────────────────
    # 로직 게이트 (AND / XOR)
    # ─────────────────────────────────────────────────────────────

    def logic_gate(self, a, b, num_bits, is_xor_gate):
        """a, b의 하위 num_bits 비트에 대한 AND 또는 XOR 결과 변수를 만든다.

        입력을 상위 비트부터 2비트(quad)씩 읽으며 누적값을 한 행씩 쌓는다.

          행 i (i < num_quads):  w_l = 왼쪽 누적, w_r = 오른쪽 누적,
                                 w_o = 이번 quad들의 곱, w_4 = 결과 누적
                                 q_logic = q_c = -1 (XOR) / 1 (AND)
          마지막 행:             w_l = a, w_r = b, w_o = 0, w_4 = 결과
                                 셀렉터 모두 0

        다음 행의 누적값 = 4·현재 누적값 + quad 이므로 마지막 행의 누적값은
        a, b 자신이다. 마지막 행에 a, b 변수를 직접 놓아 복사 제약으로 묶는다.

        Args:
            a, b: 입력 변수 (값 < 2^num_bits)
            num_bits: 1 ~ 252. 홀수면 짝수로 올림.
            is_xor_gate: True면 XOR, False면 AND

        Returns:
            Variable: 결과 누적 변수
        """
        if not 1 <= num_bits <= MAX_LOGIC_BITS:
            raise ValueError(f"num_bits는 1 ~ {MAX_LOGIC_BITS} 범위여야 합니다: {num_bits}")

        left_value = int(self.value_of(a))
        right_value = int(self.value_of(b))
        if left_value >> num_bits or right_value >> num_bits:
            raise ValueError(f"입력 값이 {num_bits}비트를 넘습니다")

        num_quads = (num_bits + 1) // 2
        selector = FR(-1) if is_xor_gate else FR(1)

        left_acc_var = self._zero_var
        right_acc_var = self._zero_var
        out_acc_var = self._zero_var
        left_acc = 0
        right_acc = 0
        out_acc = 0

        for i in range(num_quads):
            shift = 2 * (num_quads - 1 - i)
            left_quad = (left_value >> shift) & 3
            right_quad = (right_value >> shift) & 3
            if is_xor_gate:
                out_quad = left_quad ^ right_quad
            else:
                out_quad = left_quad & right_quad

            product_var = self.add_input(left_quad * right_quad)
            self._append_row(GateRow(
                left_acc_var, right_acc_var, product_var, out_acc_var,
                q_c=selector, q_logic=selector,
            ))

            left_acc = 4 * left_acc + left_quad
            right_acc = 4 * right_acc + right_quad
            out_acc = 4 * out_acc + out_quad

            if i == num_quads - 1:
                left_acc_var, right_acc_var = a, b
            else:
                left_acc_var = self.add_input(left_acc)
                right_acc_var = self.add_input(right_acc)
            out_acc_var = self.add_input(out_acc)

        self._append_row(GateRow(left_acc_var, right_acc_var, self._zero_var, out_acc_var))

        logger.debug(
            "%s gate over %d bits: %d rows", "xor" if is_xor_gate else "and", num_bits, num_quads + 1
        )
        return out_acc_var

    def and_gate(self, a, b, num_bits):
        return self.logic_gate(a, b, num_bits, False)

    def xor_gate(self, a, b, num_bits):
        return self.logic_gate(a, b, num_bits, True)

    # ─────────────────────────────────────────────────────────────
    # 조회
    # ─────────────────────────────────────────────────────────────

    def witness_values(self):
        """배선 열 4개를 FR 값으로: (w_l, w_r, w_o, w_4)."""
        return tuple(
            [self.variables[var.index] for var in self.wires[name]]
            for name in WIRE_NAMES
        )

    def dense_public_inputs(self, size):
        """길이 size의 PI 벡터. 값이 없는 행은 0."""
        if size < self.n:
            raise ValueError(f"size {size}가 행 수 {self.n}보다 작습니다")
        dense = [FR(0)] * size
        for row, value in self.public_inputs.items():
            dense[row] = value
        return dense

    def unsatisfied_rows(self):
        """현재 witness에서 산술/로직 제약이 깨지는 행 인덱스 목록.

        로직 행의 다음 행이 없으면 (마지막 행) 누적값 0을 다음 값으로 본다.
        """
        w_l, w_r, w_o, w_4 = self.witness_values()
        s = self.selectors
        pi = self.dense_public_inputs(self.n)
        bad = []

        for i in range(self.n):
            if s["q_arith"][i] != FR(0):
                value = arithmetic_gate_value(
                    s["q_m"][i], s["q_l"][i], s["q_r"][i], s["q_o"][i], s["q_4"][i], s["q_c"][i],
                    w_l[i], w_r[i], w_o[i], w_4[i],
                )
                if s["q_arith"][i] * value + pi[i] != FR(0):
                    bad.append(i)
                    continue

            if s["q_logic"][i] != FR(0):
                nxt = i + 1
                if nxt < self.n:
                    l_next, r_next, d_next = w_l[nxt], w_r[nxt], w_4[nxt]
                else:
                    l_next = r_next = d_next = FR(0)
                constraints = logic_constraints(
                    w_l[i], l_next, w_r[i], r_next, w_o[i], w_4[i], d_next, s["q_c"][i]
                )
                if any(c != FR(0) for c in constraints):
                    bad.append(i)

        return bad

    def is_satisfied(self):
        return not self.unsatisfied_rows()
