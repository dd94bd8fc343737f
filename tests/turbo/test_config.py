"""
설정/전처리 테스트: QuotientConfig, 프로토콜 상수, preprocess
"""
import logging

import pytest

from zkp.turbo.composer import Composer, SELECTOR_NAMES
from zkp.turbo.config import (
    COSET_GENERATOR, ENV_CHUNK_SIZE, ENV_WORKERS, K1, K2, K3, QuotientConfig,
)
from zkp.turbo.errors import PlonkError, UnsupportedWidget
from zkp.turbo.field import FR
from zkp.turbo.preprocessor import next_power_of_2, preprocess
from zkp.turbo.widget import WidgetKind


class TestQuotientConfig:
    def test_defaults(self):
        config = QuotientConfig()
        assert config.workers == 1
        assert config.chunk_size == 64

    def test_frozen(self):
        config = QuotientConfig()
        with pytest.raises(AttributeError):
            config.workers = 2

    @pytest.mark.parametrize("kwargs", [{"workers": 0}, {"chunk_size": 0}])
    def test_invalid(self, kwargs):
        with pytest.raises(ValueError):
            QuotientConfig(**kwargs)

    def test_from_env(self):
        config = QuotientConfig.from_env({ENV_WORKERS: "4", ENV_CHUNK_SIZE: "16"})
        assert config == QuotientConfig(workers=4, chunk_size=16)

    def test_from_env_missing_and_blank(self):
        assert QuotientConfig.from_env({ENV_WORKERS: " "}) == QuotientConfig()

    def test_from_env_not_integer(self):
        with pytest.raises(ValueError):
            QuotientConfig.from_env({ENV_WORKERS: "many"})

    def test_from_os_environ(self, monkeypatch):
        monkeypatch.setenv(ENV_CHUNK_SIZE, "8")
        monkeypatch.delenv(ENV_WORKERS, raising=False)
        assert QuotientConfig.from_env() == QuotientConfig(chunk_size=8)


class TestConstants:
    def test_coset_identifiers(self):
        assert (K1, K2, K3) == (FR(7), FR(13), FR(17))
        assert COSET_GENERATOR == FR(5)


class TestPreprocess:
    def test_pads_to_power_of_two(self, circuits):
        composer = circuits["big_arith"]()
        assert composer.n == 2
        circuit = preprocess(composer)
        # 묶음 행 1개 + 패딩 행 1개
        assert circuit.n == 4
        assert composer.n == 4
        assert composer.is_satisfied()

    def test_binds_zero_var_once(self, circuits):
        composer = circuits["big_arith"]()
        zero = composer.zero_var()
        preprocess(composer)
        assert composer.selectors["q_l"][2] == FR(1)
        assert composer.selectors["q_arith"][2] == FR(1)
        assert all(composer.wires[name][2] == zero for name in ("w_l", "w_r", "w_o", "w_4"))

        preprocess(composer)
        assert composer.n == 4
        assert composer.selectors["q_arith"] == [FR(1), FR(1), FR(1), FR(0)]
        assert composer.bind_zero_var() is None

    def test_padding_rows_tied_to_bound_zero_var(self, circuits):
        composer = circuits["big_arith"]()
        preprocess(composer)
        composer.variables[composer.zero_var().index] = FR(3)
        assert composer.unsatisfied_rows() == [2]

    def test_shapes(self, circuits):
        circuit = preprocess(circuits["280"]())
        assert set(circuit.selectors) == set(SELECTOR_NAMES)
        for selector in circuit.selectors.values():
            assert len(selector.evaluations) == 4 * circuit.n
        assert len(circuit.sigmas) == 4
        assert len(circuit.v_h_coset_4n) == 4 * circuit.n
        assert set(circuit.widgets) == {WidgetKind.ARITHMETIC, WidgetKind.LOGIC}

    def test_selector_polynomials_interpolate_columns(self, circuits):
        composer = circuits["280"]()
        circuit = preprocess(composer)
        for name in ("q_m", "q_l", "q_o", "q_c", "q_arith"):
            poly = circuit.selectors[name].polynomial
            for root, value in zip(circuit.domain.elements(), composer.selectors[name]):
                assert poly.evaluate(root) == value

    def test_empty_circuit(self):
        with pytest.raises(ValueError):
            preprocess(Composer())

    def test_unsupported_widget_is_plonk_error(self):
        composer = Composer()
        zero = composer.zero_var()
        composer.big_arith_gate(zero, zero, zero, zero, 0, 0, 0, 0, 0, 0)
        composer.selectors["q_range"][0] = FR(1)
        with pytest.raises(PlonkError):
            preprocess(composer)
        with pytest.raises(NotImplementedError):
            preprocess(composer)

    def test_logs_summary(self, circuits, caplog):
        with caplog.at_level(logging.INFO, logger="zkp.turbo.preprocessor"):
            preprocess(circuits["280"]())
        assert "preprocessed circuit" in caplog.text

    @pytest.mark.parametrize("n, expected", [(1, 1), (2, 2), (3, 4), (5, 8), (8, 8)])
    def test_next_power_of_2(self, n, expected):
        assert next_power_of_2(n) == expected


def test_unsupported_widget_class():
    assert issubclass(UnsupportedWidget, NotImplementedError)
