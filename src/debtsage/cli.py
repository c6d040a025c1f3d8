"""Command line front end for the repayment planner."""

from __future__ import annotations

from decimal import Decimal, InvalidOperation
from functools import wraps
from pathlib import Path

import click

from .config import BaseConfig
from .errors import PlanningError
from .logging_config import setup_logging
from .models.debt import Strategy
from .models.schedule import SimulationState
from .money import format_currency
from .services.consolidation import ConsolidationOffer, compare_consolidation
from .services.export_csv import export_schedule_csv
from .services.import_csv import load_debts_csv
from .services.income import TARGET_DTI, DtiBand, debt_to_income_ratio
from .services.refinancing import RefinanceOffer, compare_refinancing
from .services.simulation import simulate
from .services.summary import summarize

STRATEGY_CHOICE = click.Choice([s.value for s in Strategy], case_sensitive=False)


class PlanningFailed(click.ClickException):
    """Planner rejected the input; reported without a traceback."""

    exit_code = 2


class AmountType(click.ParamType):
    """Currency amount parsed straight to Decimal."""

    name = "amount"

    def convert(self, value, param, ctx):
        if isinstance(value, Decimal):
            return value
        try:
            return Decimal(str(value).replace(",", "").lstrip("$"))
        except InvalidOperation:
            self.fail(f"{value!r} is not a valid amount", param, ctx)


AMOUNT = AmountType()


def _reports_planning_errors(func):
    @wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except PlanningError as exc:
            raise PlanningFailed(str(exc)) from exc

    return wrapper


def _rate(value: Decimal) -> Decimal:
    """APR options accept 0.09 or 9 for nine percent."""

    return value / 100 if value > 1 else value


def _echo_summary(summary, *, header: str | None = None) -> None:
    if header:
        click.echo(header)
    click.echo(f"Strategy: {summary.strategy.value}")
    click.echo(f"Status: {summary.status.value}")
    if summary.months_to_debt_free is not None:
        click.echo(
            f"Debt-free in {summary.months_to_debt_free} months "
            f"({summary.debt_free_date:%B %Y})"
        )
    click.echo(f"Total interest: {format_currency(summary.total_interest_paid)}")
    click.echo(f"Total paid: {format_currency(summary.total_paid)}")
    for position, payoff in enumerate(summary.payoffs, start=1):
        click.echo(
            f"  {position}. {payoff.name} paid off {payoff.payoff_date:%b %Y} "
            f"(interest {format_currency(payoff.interest_paid)})"
        )
    if summary.unpaid_debt_ids:
        click.echo(f"Not paid off: {', '.join(summary.unpaid_debt_ids)}")


@click.group()
@click.pass_context
def cli(ctx: click.Context) -> None:
    """Plan debt payoff with avalanche, snowball or hybrid strategies."""

    config = BaseConfig()
    setup_logging(config)
    ctx.obj = config


@cli.command("plan")
@click.argument("debts_csv", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--strategy", type=STRATEGY_CHOICE, default="avalanche", show_default=True)
@click.option("--budget", type=AMOUNT, required=True, help="Monthly amount beyond minimums.")
@click.option("--start", type=click.DateTime(formats=["%Y-%m-%d"]), default=None)
@click.option("--export", "export_path", type=click.Path(dir_okay=False, path_type=Path))
@click.pass_obj
@_reports_planning_errors
def plan_command(config, debts_csv, strategy, budget, start, export_path) -> None:
    """Simulate a payoff plan for the debts in DEBTS_CSV."""

    debts = load_debts_csv(debts_csv)
    schedule = simulate(
        debts,
        Strategy.parse(strategy),
        budget,
        weights=config.hybrid_weights(),
        max_periods=config.SAFETY_HORIZON,
    )
    summary = summarize(schedule, start=start.date() if start else None)
    _echo_summary(summary)

    for blocked in schedule.insufficient_payments:
        click.echo(
            f"Debt {blocked.debt_id}: minimum {format_currency(blocked.minimum_payment)} "
            f"does not cover interest of {format_currency(blocked.interest_due)}"
        )
    if schedule.stalled is not None:
        click.echo(
            f"Budget does not clear the debt within {schedule.stalled.periods_simulated} months; "
            f"{format_currency(schedule.stalled.remaining_balance)} would remain."
        )
    if export_path is not None:
        written = export_schedule_csv(schedule=schedule, output_path=export_path)
        click.echo(f"Schedule written: {written}")


@cli.command("compare")
@click.argument("debts_csv", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--budget", type=AMOUNT, required=True, help="Monthly amount beyond minimums.")
@click.pass_obj
@_reports_planning_errors
def compare_command(config, debts_csv, budget) -> None:
    """Run every strategy on DEBTS_CSV and name the cheapest."""

    debts = load_debts_csv(debts_csv)
    results = []
    for strategy in Strategy:
        schedule = simulate(
            debts,
            strategy,
            budget,
            weights=config.hybrid_weights(),
            max_periods=config.SAFETY_HORIZON,
        )
        months = schedule.months_to_payoff if schedule.is_complete else None
        click.echo(
            f"{strategy.value:<10} interest {format_currency(schedule.total_interest_paid):>14}  "
            f"months {months if months is not None else '-':>4}  {schedule.status.value}"
        )
        results.append(schedule)

    complete = [s for s in results if s.status is SimulationState.COMPLETE]
    if not complete:
        click.echo("No strategy pays off every debt with this budget.")
        return
    best = min(complete, key=lambda s: (s.total_interest_paid, s.months_to_payoff))
    click.echo(f"Cheapest: {best.strategy.value}")


@cli.command("refinance")
@click.argument("debts_csv", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--debt", "debt_id", required=True, help="Id of the debt being refinanced.")
@click.option("--apr", type=AMOUNT, required=True, help="Offered APR as a fraction or percent.")
@click.option("--term", type=click.IntRange(min=1), default=None, help="Offered term in months.")
@click.option("--closing-costs", type=AMOUNT, default=Decimal("0"), show_default=True)
@click.option("--strategy", type=STRATEGY_CHOICE, default="avalanche", show_default=True)
@click.option("--budget", type=AMOUNT, default=Decimal("0"), show_default=True)
@click.pass_obj
@_reports_planning_errors
def refinance_command(config, debts_csv, debt_id, apr, term, closing_costs, strategy, budget) -> None:
    """Compare current terms of one debt against a refinancing offer."""

    debts = load_debts_csv(debts_csv)
    offer = RefinanceOffer(
        debt_id=debt_id,
        apr=_rate(apr),
        term_months=term,
        closing_costs=closing_costs,
    )
    result = compare_refinancing(
        debts,
        Strategy.parse(strategy),
        budget,
        offer,
        weights=config.hybrid_weights(),
        max_periods=config.SAFETY_HORIZON,
    )
    click.echo(f"Baseline interest: {format_currency(result.baseline_total_interest)}")
    click.echo(f"Refinanced interest: {format_currency(result.alternative_total_interest)}")
    click.echo(f"Interest savings: {format_currency(result.savings)}")
    click.echo(f"Months: {result.baseline_months} -> {result.alternative_months}")
    if result.closing_costs:
        click.echo(f"Net of closing costs: {format_currency(result.net_savings)}")
    if result.break_even_months is not None:
        click.echo(f"Break-even after {result.break_even_months} months")


@cli.command("consolidate")
@click.argument("debts_csv", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--debt", "debt_ids", multiple=True, required=True, help="Debt id to roll in; repeat.")
@click.option("--apr", type=AMOUNT, required=True, help="Loan APR as a fraction or percent.")
@click.option("--term", type=click.IntRange(min=1), required=True, help="Loan term in months.")
@click.option("--fee", type=AMOUNT, default=Decimal("0"), show_default=True, help="Origination fee.")
@click.option("--strategy", type=STRATEGY_CHOICE, default="avalanche", show_default=True)
@click.option("--budget", type=AMOUNT, default=Decimal("0"), show_default=True)
@click.pass_obj
@_reports_planning_errors
def consolidate_command(config, debts_csv, debt_ids, apr, term, fee, strategy, budget) -> None:
    """Compare several debts against one consolidation loan."""

    debts = load_debts_csv(debts_csv)
    offer = ConsolidationOffer(
        debt_ids=tuple(debt_ids),
        apr=_rate(apr),
        term_months=term,
        origination_fee=fee,
    )
    result = compare_consolidation(
        debts,
        Strategy.parse(strategy),
        budget,
        offer,
        weights=config.hybrid_weights(),
        max_periods=config.SAFETY_HORIZON,
    )
    click.echo(
        f"New loan: {format_currency(result.loan.balance_cents)} "
        f"at {format_currency(result.loan.minimum_cents)}/month for {term} months"
    )
    click.echo(f"Interest saved: {format_currency(result.interest_saved)}")
    click.echo(f"Monthly payment savings: {format_currency(result.monthly_payment_savings)}")
    click.echo(f"Months: {result.baseline_months} -> {result.alternative_months}")
    if result.origination_fee:
        click.echo(f"Net of fee: {format_currency(result.net_savings)}")
    if result.break_even_months is not None:
        click.echo(f"Break-even after {result.break_even_months} months")


@cli.command("dti")
@click.argument("debts_csv", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--income", type=AMOUNT, required=True, help="Gross monthly income.")
@_reports_planning_errors
def dti_command(debts_csv, income) -> None:
    """Report the debt-to-income ratio for DEBTS_CSV."""

    debts = load_debts_csv(debts_csv)
    ratio = debt_to_income_ratio(debts, income)
    band = DtiBand.for_ratio(ratio)
    click.echo(f"Debt-to-income: {ratio * 100:.1f}% ({band.value})")
    if ratio > TARGET_DTI:
        click.echo(f"Target: {TARGET_DTI * 100:.0f}% or lower")


def main() -> None:
    cli(prog_name="debtsage")


if __name__ == "__main__":
    main()
