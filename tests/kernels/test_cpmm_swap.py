# [TESTER] v1

from __future__ import annotations

import pytest

from bootswap.errors import CheckedArithmeticError
from bootswap.kernels.python.cpmm_swap import hop_exact_in, hop_exact_out, quote_in, quote_out


def test_quote_out_reference_value() -> None:
    # 100*997*1000 / (1000*1000 + 100*997) = 90.66...
    assert quote_out(100, 1000, 1000) == 90


def test_quote_in_rounds_up_by_one() -> None:
    # 1000*90*1000 / (910*997) = 99.19... -> 99 + 1
    assert quote_in(90, 1000, 1000) == 100
    # The rounded-up input buys at least the requested output.
    assert quote_out(quote_in(90, 1000, 1000), 1000, 1000) >= 90


@pytest.mark.parametrize(
    "amount,reserve_in,reserve_out",
    [(0, 1000, 1000), (100, 0, 1000), (100, 1000, 0)],
)
def test_quotes_reject_zero_inputs(amount: int, reserve_in: int, reserve_out: int) -> None:
    with pytest.raises(CheckedArithmeticError, match="Overflow"):
        quote_out(amount, reserve_in, reserve_out)
    with pytest.raises(CheckedArithmeticError, match="Overflow"):
        quote_in(amount, reserve_in, reserve_out)


def test_quote_in_fails_when_output_drains_the_reserve() -> None:
    with pytest.raises(CheckedArithmeticError):
        quote_in(1000, 1000, 1000)
    with pytest.raises(CheckedArithmeticError):
        quote_in(1001, 1000, 1000)


def test_quote_out_fails_instead_of_truncating_to_balance_width() -> None:
    # The result is ~2**139: the wide intermediate fits, the balance does not.
    with pytest.raises(CheckedArithmeticError, match="Narrowing"):
        quote_out(1, 1, 1 << 140)


def test_hop_exact_in_reports_post_hop_reserves_and_k() -> None:
    hop = hop_exact_in(100, 1000, 1000)
    assert hop.amount_out == 90
    assert (hop.new_reserve_in, hop.new_reserve_out) == (1100, 910)
    assert hop.k_before == 1_000_000
    assert hop.k_after == 1100 * 910
    assert hop.invariant_holds


def test_hop_exact_out_pays_the_quoted_input() -> None:
    hop = hop_exact_out(90, 1000, 1000)
    assert hop.amount_in == 100
    assert (hop.new_reserve_in, hop.new_reserve_out) == (1100, 910)
    assert hop.invariant_holds


def test_quote_rejects_bool_amounts() -> None:
    with pytest.raises(TypeError):
        quote_out(True, 1000, 1000)
