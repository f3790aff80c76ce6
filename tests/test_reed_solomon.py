from __future__ import annotations

import pytest

from qr_svg.qrcodegen import GF_EXP, GF_LOG, ReedSolomonGenerator, gf_multiply


def _evaluate(codeword, point: int) -> int:
    acc = 0
    for coefficient in codeword:
        acc = gf_multiply(acc, point) ^ coefficient
    return acc


def test_generator_polynomial_degree_7() -> None:
    rs = ReedSolomonGenerator(7)
    assert [GF_LOG[c] for c in rs.coefficients] == [0, 87, 229, 146, 149, 238, 102, 21]


def test_generator_polynomial_degree_10() -> None:
    rs = ReedSolomonGenerator(10)
    assert [GF_LOG[c] for c in rs.coefficients] == [0, 251, 67, 46, 61, 118, 70, 64, 94, 32, 45]


def test_remainder_hello_world_1m() -> None:
    data = [32, 91, 11, 120, 209, 114, 220, 77, 67, 64, 236, 17, 236, 17, 236, 17]
    assert ReedSolomonGenerator(10).remainder(data) == [196, 35, 39, 119, 235, 215, 231, 226, 93, 23]


@pytest.mark.parametrize("degree", [7, 10, 15, 18, 20, 26])
def test_codeword_vanishes_at_generator_roots(degree: int) -> None:
    data = [(i * 37 + 11) % 256 for i in range(40)]
    ecc = ReedSolomonGenerator(degree).remainder(data)
    assert len(ecc) == degree
    codeword = data + ecc
    for i in range(degree):
        assert _evaluate(codeword, GF_EXP[i]) == 0


@pytest.mark.parametrize("degree", [0, -1, 256])
def test_degree_out_of_range(degree: int) -> None:
    with pytest.raises(ValueError):
        ReedSolomonGenerator(degree)
