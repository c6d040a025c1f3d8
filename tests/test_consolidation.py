"""Debt consolidation comparison tests."""

from __future__ import annotations

from decimal import Decimal

import pytest

from debtsage import ConsolidationOffer, InvalidInput, Strategy, compare_consolidation
from debtsage.services.amortization import amortizing_payment


@pytest.fixture
def cards(debt_factory):
    return [
        debt_factory(id="A", balance="3000", apr="0.24", minimum_payment="150", name="Store card"),
        debt_factory(id="B", balance="2000", apr="0.21", minimum_payment="100", name="Visa"),
        debt_factory(id="C", balance="1000", apr="0.05", minimum_payment="50", name="Family loan"),
    ]


@pytest.fixture
def offer():
    return ConsolidationOffer(
        debt_ids=("A", "B"),
        apr=Decimal("0.10"),
        term_months=36,
        origination_fee=Decimal("150"),
    )


def test_fee_is_rolled_into_amortized_loan(cards, offer):
    result = compare_consolidation(cards, Strategy.AVALANCHE, Decimal("0"), offer)

    loan = result.loan
    assert loan.id == "consolidated"
    assert loan.principal_balance == Decimal("5150.00")
    assert loan.term_months == 36
    assert loan.minimum_cents == amortizing_payment(515_000, Decimal("0.10"), 36)
    assert result.origination_fee == 15_000


def test_consolidated_debts_are_replaced_others_kept(cards, offer):
    result = compare_consolidation(cards, Strategy.AVALANCHE, Decimal("0"), offer)

    assert [d.id for d in result.alternative.debts] == ["consolidated", "C"]
    assert [d.id for d in result.baseline.debts] == ["A", "B", "C"]
    assert {p.debt_id for p in result.alternative.periods} == {"consolidated", "C"}


def test_lower_rate_saves_interest_and_breaks_even(cards, offer):
    result = compare_consolidation(cards, Strategy.AVALANCHE, Decimal("0"), offer)

    assert result.interest_saved == (
        result.baseline_total_interest - result.alternative_total_interest
    )
    assert result.interest_saved > 0
    assert result.net_savings == result.interest_saved - 15_000
    assert result.monthly_payment_savings == 25_000 - result.loan.minimum_cents
    assert result.monthly_payment_savings > 0
    assert result.break_even_months == -(-15_000 // result.monthly_payment_savings)
    assert result.break_even_months == 2


def test_interest_free_consolidation(debt_factory):
    debts = [
        debt_factory(id="A", balance="600", apr="0", minimum_payment="100"),
        debt_factory(id="B", balance="400", apr="0", minimum_payment="100"),
    ]
    result = compare_consolidation(
        debts,
        Strategy.SNOWBALL,
        Decimal("0"),
        ConsolidationOffer(debt_ids=("A", "B"), apr=Decimal("0"), term_months=5),
    )

    assert result.loan.minimum_payment == Decimal("200.00")
    assert result.baseline_months == 5
    assert result.alternative_months == 5
    assert result.interest_saved == 0
    assert result.monthly_payment_savings == 0
    assert result.break_even_months is None


def test_higher_payment_has_no_break_even(debt_factory):
    debts = [
        debt_factory(id="A", balance="3000", apr="0.24", minimum_payment="90"),
        debt_factory(id="B", balance="2000", apr="0.21", minimum_payment="60"),
    ]
    result = compare_consolidation(
        debts,
        Strategy.AVALANCHE,
        Decimal("0"),
        ConsolidationOffer(
            debt_ids=("A", "B"), apr=Decimal("0.10"), term_months=36, origination_fee=Decimal("150")
        ),
    )

    assert result.monthly_payment_savings < 0
    assert result.break_even_months is None


def test_as_dict(cards, offer):
    data = compare_consolidation(cards, Strategy.HYBRID, Decimal("50"), offer).as_dict()

    assert data["debt_ids"] == ["A", "B"]
    assert data["loan_balance"] == "5150.00"
    assert data["origination_fee"] == "150.00"


class TestOfferValidation:
    @pytest.mark.parametrize(
        "overrides,message",
        [
            ({"debt_ids": ("A",)}, "at least two"),
            ({"debt_ids": ("A", "A")}, "more than once"),
            ({"debt_ids": ("A", "Z")}, "not among the debts"),
            ({"term_months": 0}, "term"),
            ({"term_months": None}, "term"),
            ({"apr": Decimal("-0.01")}, "APR"),
            ({"origination_fee": Decimal("-1")}, "fee"),
            ({"apr": "cheap"}, "numeric"),
        ],
    )
    def test_bad_offer(self, cards, overrides, message):
        fields = {"debt_ids": ("A", "B"), "apr": Decimal("0.1"), "term_months": 36}
        fields.update(overrides)
        with pytest.raises(InvalidInput, match=message):
            compare_consolidation(cards, Strategy.AVALANCHE, Decimal("0"), ConsolidationOffer(**fields))

    def test_loan_id_cannot_clash_with_kept_debt(self, cards):
        offer = ConsolidationOffer(
            debt_ids=("A", "B"), apr=Decimal("0.1"), term_months=36, loan_id="C"
        )
        with pytest.raises(InvalidInput, match="Duplicate"):
            compare_consolidation(cards, Strategy.AVALANCHE, Decimal("0"), offer)
