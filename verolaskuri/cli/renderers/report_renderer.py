"""Rich renderers for tax and bookkeeping reports.

Transforms SDK result models into formatted Rich tables.
"""

import json
from decimal import Decimal
from typing import Optional

import click
from pydantic import BaseModel
from rich import box
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from verolaskuri.sdk import (
    AppliedMatches,
    ComplianceReport,
    EnnakkoveroComparison,
    Form5Report,
    PrepaymentPosition,
    ReconciliationReport,
    TaxCardComparison,
    TaxEstimate,
    TaxResult,
    YelResult,
)
from verolaskuri.sdk.money import to_euros, to_percent

STATUS_STYLES = {
    "on_track": "green",
    "underpaying": "yellow",
    "overpaying": "cyan",
    "critical": "bold red",
    "matches": "green",
    "higher": "cyan",
    "lower": "yellow",
}


def echo_json(model: BaseModel) -> None:
    """Print a result model as indented JSON."""
    click.echo(json.dumps(model.model_dump(mode="json"), indent=2))


def format_eur(cents: int) -> str:
    """Format cents Finnish style: 1 234,56 EUR."""
    text = f"{to_euros(cents):,.2f}".replace(",", " ").replace(".", ",")
    return f"{text} EUR"


def format_pct(rate: Decimal) -> str:
    return f"{to_percent(rate)}%"


def _amount_table(title: str) -> Table:
    table = Table(title=title, box=box.SIMPLE, show_header=False, title_justify="left")
    table.add_column("item", style="dim")
    table.add_column("amount", justify="right")
    return table


def render_tax_result(console: Console, result: TaxResult, title: str = "Tax Calculation") -> None:
    table = _amount_table(title)
    table.add_row("Gross earned income", format_eur(result.gross_income_cents))
    table.add_row("Yrittajavahennys (5%)", format_eur(result.entrepreneur_deduction_cents))
    table.add_row("Total deductions", format_eur(result.deductions_cents))
    table.add_row("Taxable income", format_eur(result.taxable_income_cents))
    table.add_row("State tax (progressive)", format_eur(result.state_tax_cents))
    table.add_row("Municipal tax", format_eur(result.municipal_tax_cents))
    table.add_row("Church tax", format_eur(result.church_tax_cents))
    table.add_row("[bold]Total tax[/bold]", f"[bold]{format_eur(result.total_tax_cents)}[/bold]")
    table.add_row("Effective rate", format_pct(result.effective_rate))
    table.add_row("Marginal rate", format_pct(result.marginal_rate))
    console.print(table)


def render_yel_result(console: Console, result: YelResult) -> None:
    table = _amount_table("YEL Contribution")
    table.add_row("YEL income used", format_eur(result.yel_income_cents))
    table.add_row("Base rate", format_pct(result.base_rate))
    table.add_row("Discount", format_pct(result.discount_rate))
    table.add_row("Effective rate", format_pct(result.effective_rate))
    table.add_row("[bold]Annual contribution[/bold]", f"[bold]{format_eur(result.annual_contribution_cents)}[/bold]")
    table.add_row("Monthly contribution", format_eur(result.monthly_contribution_cents))
    table.add_row("Pension accrual (estimate)", format_eur(result.annual_pension_accrual_cents))
    console.print(table)


def render_tax_estimate(console: Console, estimate: TaxEstimate) -> None:
    table = _amount_table(f"Income Summary {estimate.fiscal_year} YTD")
    table.add_row("Gross income", format_eur(estimate.total_income_cents))
    table.add_row("Business expenses", format_eur(estimate.total_expenses_cents))
    table.add_row("Net profit (business result)", format_eur(estimate.net_profit_cents))
    table.add_row("YEL paid", format_eur(estimate.yel_paid_cents))
    console.print(table)
    church = "church member" if estimate.church_member else "no church tax"
    render_tax_result(console, estimate.tax, title=f"Tax Calculation ({estimate.municipality}, {church})")
    render_yel_result(console, estimate.yel)


def render_ennakkovero(console: Console, comparison: EnnakkoveroComparison) -> None:
    table = _amount_table("Ennakkovero")
    table.add_row("Scheduled", format_eur(comparison.total_scheduled_cents))
    table.add_row("Paid", format_eur(comparison.total_paid_cents))
    table.add_row("Remaining", format_eur(comparison.remaining_cents))
    table.add_row("Projected annual tax", format_eur(comparison.projected_annual_tax_cents))
    table.add_row("Difference", format_eur(comparison.difference_cents))
    if comparison.next_installment:
        nxt = comparison.next_installment
        table.add_row("Next installment", f"{nxt.due_date.isoformat()}  {format_eur(nxt.amount_cents)}")
    console.print(table)

    style = STATUS_STYLES.get(comparison.status, "white")
    console.print(Panel(comparison.message, title=comparison.status, border_style=style))


def render_tax_card(console: Console, comparison: Optional[TaxCardComparison]) -> None:
    if comparison is None:
        return
    style = STATUS_STYLES.get(comparison.status, "white")
    sign = "+" if comparison.difference_pp > 0 else ""
    body = (
        f"{comparison.message}\n\n"
        f"Verokortti: {comparison.card_rate_pct}%   "
        f"Calculated: {comparison.calculated_effective_rate_pct}%   "
        f"Difference: {sign}{comparison.difference_pp}pp"
    )
    console.print(Panel(body, title="Verokortti vs. actual tax rate", border_style=style))


def render_prepayment_position(console: Console, position: PrepaymentPosition) -> None:
    table = Table(title=f"Installments {position.fiscal_year}", box=box.SIMPLE, title_justify="left")
    table.add_column("Due date")
    table.add_column("Amount", justify="right")
    table.add_column("Paid")
    for inst in position.installments:
        table.add_row(inst.due_date.isoformat(), format_eur(inst.amount_cents), "yes" if inst.paid else "")
    console.print(table)
    render_ennakkovero(console, position.comparison)
    render_tax_card(console, position.tax_card_comparison)


def render_form5(console: Console, report: Form5Report) -> None:
    table = _amount_table("Form 5 (Elinkeinotoiminnan veroilmoitus)")
    table.add_row("Liikevaihto (revenue)", format_eur(report.revenue_cents))
    table.add_row("Materiaalit ja palvelut", format_eur(report.materials_and_services_cents))
    table.add_row("Henkilostokulut", format_eur(report.personnel_costs_cents))
    table.add_row("Poistot (depreciation)", format_eur(report.depreciation_cents))
    table.add_row("Muut kulut (other expenses)", format_eur(report.other_expenses_cents))
    table.add_row("[bold]Liikevoitto (operating profit)[/bold]", f"[bold]{format_eur(report.operating_profit_cents)}[/bold]")
    table.add_row("YEL premiums (personal deduction)", format_eur(report.pension_premiums_cents))
    table.add_row("[bold]Business result[/bold]", f"[bold]{format_eur(report.business_result_cents)}[/bold]")
    console.print(table)

    if report.expense_breakdown:
        breakdown = Table(title="Expenses by category", box=box.SIMPLE, title_justify="left")
        breakdown.add_column("Category", style="cyan")
        breakdown.add_column("Amount", justify="right")
        for category, cents in sorted(report.expense_breakdown.items(), key=lambda kv: -kv[1]):
            breakdown.add_row(category, format_eur(cents))
        console.print(breakdown)

    if report.depreciation_details:
        details = Table(title="Depreciation (25% reducing balance)", box=box.SIMPLE, title_justify="left")
        details.add_column("Category", style="cyan")
        details.add_column("Original", justify="right")
        details.add_column("Years", justify="right")
        details.add_column("Remaining", justify="right")
        details.add_column("This year", justify="right")
        for d in report.depreciation_details:
            details.add_row(
                d.category,
                format_eur(d.original_amount_cents),
                str(d.depreciation_years),
                format_eur(d.remaining_cents),
                format_eur(d.annual_depreciation_cents),
            )
        console.print(details)


def render_compliance(console: Console, report: ComplianceReport) -> None:
    status = report.proof_status
    table = _amount_table(f"Tosite status {report.fiscal_year}")
    table.add_row("Entries", str(status.total_entries))
    table.add_row("With proof", str(status.with_proof))
    table.add_row("Proof not required", str(status.proof_not_required))
    table.add_row("Missing proof", str(status.missing_proof))
    table.add_row("Compliance rate", f"{status.compliance_rate}%")
    for kind, count in status.by_voucher_kind.items():
        table.add_row(f"  {kind}", str(count))
    console.print(table)

    if status.missing:
        missing = Table(title="Missing proof", box=box.SIMPLE, title_justify="left")
        missing.add_column("Id", justify="right")
        missing.add_column("Date")
        missing.add_column("Category", style="cyan")
        missing.add_column("Amount", justify="right")
        missing.add_column("Description")
        for e in status.missing:
            missing.add_row(str(e.id), e.date.isoformat(), e.category, format_eur(e.amount_cents), e.description or "")
        console.print(missing)

    for w in report.depreciation_warnings:
        console.print(
            f"[yellow]Depreciation required:[/yellow] entry {w.id} {w.category} "
            f"{format_eur(w.amount_cents)} {w.description or ''}"
        )

    if report.prepayment_register.warning:
        console.print(Panel(report.prepayment_register.warning, title="Ennakkoperintarekisteri", border_style="yellow"))


def render_reconciliation(console: Console, report: ReconciliationReport) -> None:
    table = Table(title="Suggested matches", box=box.SIMPLE, title_justify="left")
    table.add_column("Bank", justify="right")
    table.add_column("Entry", justify="right")
    table.add_column("Score", justify="right")
    table.add_column("Reasons")
    for m in report.suggested_matches:
        table.add_row(str(m.bank_record_id), str(m.ledger_entry_id), str(m.score), "; ".join(m.reasons))
    console.print(table)
    console.print(
        f"Unmatched bank records: {report.unmatched_bank_records}   "
        f"Unreconciled entries: {report.unreconciled_entries}"
    )


def render_applied(console: Console, applied: AppliedMatches, output_path: str) -> None:
    console.print(f"[green]Applied {len(applied.matches)} match(es)[/green] -> {output_path}")
