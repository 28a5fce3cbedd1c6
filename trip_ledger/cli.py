'''
To Run:
trip-ledger summary --group group.yaml --expenses expenses.csv
trip-ledger split 1200 --group group.yaml --manual alice=500
'''
import click
import json
import logging
import uuid
from datetime import date
from pathlib import Path
from typing import Dict, List
from trip_ledger import ledger_io
from trip_ledger.allocator import ShareAllocator, compose_expense
from trip_ledger.config import category_label, currency_symbol
from trip_ledger.datatypes import Member
from trip_ledger.errors import LedgerError
from trip_ledger.money import format_compact, within_tolerance, ZERO
from trip_ledger.settlement import apply_transfers
from trip_ledger.summary import GroupSummary, build_summary, shares_to_dict, summary_to_dict

DEFAULT_GROUP_LOCATION = Path('group.yaml')
DEFAULT_LEDGER_LOCATION = Path('expenses.csv')

# Set up logging
logging.basicConfig(level=logging.INFO, format='%(levelname)s: %(message)s')
logger = logging.getLogger(__name__)

def format_balance_report(summary: GroupSummary, members: List[Member], group_name: str = '') -> str:
    """
    Format balances, settlements and the category breakdown for the terminal.
    """
    names = {m.id: m.name for m in members}
    cur = currency_symbol()

    report_lines = []
    report_lines.append(f"=== {group_name.upper() or 'TRIP'} SUMMARY ===")
    report_lines.append("")
    report_lines.append(f"Total Expenses: {cur}{format_compact(summary.total_expenses)}")
    report_lines.append("")

    report_lines.append("Balances:")
    for member_id, balance in summary.balances.items():
        if balance.net > 0:
            status = f"is owed {cur}{balance.net:.2f}"
        elif balance.net < 0:
            status = f"owes {cur}{abs(balance.net):.2f}"
        else:
            status = "settled up"
        report_lines.append(f"  {names.get(member_id, member_id)}: {status}")
    report_lines.append("")

    report_lines.append("Settlements:")
    if not summary.settlements:
        report_lines.append("  Everyone is settled up")
    for t in summary.settlements:
        report_lines.append(
            f"  {names.get(t.from_member_id, t.from_member_id)} → "
            f"{names.get(t.to_member_id, t.to_member_id)}: {cur}{t.amount:.2f}"
        )
    report_lines.append("")

    report_lines.append("By Category:")
    for c in summary.category_breakdown:
        report_lines.append(f"  {category_label(c.category)}: {cur}{c.amount:.2f} ({c.percentage:.1f}%)")

    return "\n".join(report_lines)

def _parse_manual(values) -> Dict[str, str]:
    manual = {}
    for item in values:
        member_id, sep, amount = item.partition('=')
        if not sep or not member_id:
            raise click.BadParameter(f"expected MEMBER=AMOUNT, got {item!r}", param_hint='--manual')
        manual[member_id.strip()] = amount.strip()
    return manual

@click.group()
def main():
    """Split trip expenses and work out who pays whom."""

@main.command()
@click.option('--group', 'group_file', type=click.Path(exists=True, path_type=Path), default=DEFAULT_GROUP_LOCATION, help='Path to the group YAML file')
@click.option('--expenses', 'expenses_csv', type=click.Path(path_type=Path), default=DEFAULT_LEDGER_LOCATION, help='Path to the expense ledger CSV file')
@click.option('--user', 'current_user', default=None, help='Member id whose own spending is reported')
@click.option('--json', 'as_json', is_flag=True, help='Print the summary as JSON')
def summary(group_file, expenses_csv, current_user, as_json):
    """Show balances, settlements and spend by category."""
    try:
        group_name, members = ledger_io.read_group(group_file)
        expenses = ledger_io.read_expenses(expenses_csv)
        result = build_summary(members, expenses, current_user_id=current_user)
    except LedgerError as e:
        raise click.ClickException(str(e))

    leftover = apply_transfers(result.balances, result.settlements)
    unsettled = [m for m, net in leftover.items() if not within_tolerance(net, ZERO)]
    if unsettled:
        logger.warning(f"Balances left after settlement for: {', '.join(unsettled)}")

    if as_json:
        click.echo(json.dumps(summary_to_dict(result, members), indent=2, ensure_ascii=False))
        return

    click.echo(format_balance_report(result, members, group_name))
    if current_user:
        click.echo(f"\nYour share of expenses: {currency_symbol()}{result.current_user_expenses:.2f}")

@main.command()
@click.argument('total')
@click.option('--group', 'group_file', type=click.Path(exists=True, path_type=Path), default=DEFAULT_GROUP_LOCATION, help='Path to the group YAML file')
@click.option('--exclude', multiple=True, help='Member id to leave out of the split (repeatable)')
@click.option('--manual', multiple=True, help='MEMBER=AMOUNT share entered by hand (repeatable)')
@click.option('--no-auto-split', is_flag=True, help='Do not spread the total evenly')
@click.option('--ignore-mismatch', is_flag=True, help='Accept shares that do not add up to the total')
@click.option('--append', is_flag=True, help='Save the expense to the ledger')
@click.option('--expenses', 'expenses_csv', type=click.Path(path_type=Path), default=DEFAULT_LEDGER_LOCATION, help='Path to the expense ledger CSV file')
@click.option('--title', default='', help='Expense title')
@click.option('--category', default='', help='Expense category')
@click.option('--payer', default='', help='Member id of whoever paid')
@click.option('--self-paid', is_flag=True, help='Everyone paid their own share')
@click.option('--date', 'expense_date', type=click.DateTime(formats=['%Y-%m-%d']), default=None, help='Expense date (YYYY-MM-DD)')
def split(total, group_file, exclude, manual, no_auto_split, ignore_mismatch, append,
          expenses_csv, title, category, payer, self_paid, expense_date):
    """
    Split TOTAL across the group's members.

    Members are all included and the total is spread evenly unless
    --no-auto-split is given. Manual amounts are applied in the order given;
    the rest of the total is spread over everyone not entered by hand.
    """
    _, members = ledger_io.read_group(group_file)
    names = {m.id: m.name for m in members}
    manual_amounts = _parse_manual(manual)

    try:
        allocator = ShareAllocator([m.id for m in members], auto_split=not no_auto_split)
        allocator.set_total(total)
        for member_id in dict.fromkeys(exclude):
            allocator.toggle_inclusion(member_id)
        for member_id, amount in manual_amounts.items():
            allocator.set_manual_amount(member_id, amount)

        cur = currency_symbol()
        for share in allocator.shares:
            if not share.included:
                continue
            amount = f"{cur}{share.amount:.2f}" if share.amount is not None else "(not set)"
            marker = " (manual)" if share.manually_edited else ""
            click.echo(f"  {names.get(share.member_id, share.member_id)}: {amount}{marker}")

        records = allocator.validate(ignore_mismatch=ignore_mismatch)

        if append:
            if payer and payer not in names:
                raise click.ClickException(f"Payer {payer} is not a member of the group")
            expense = compose_expense(
                expense_id=uuid.uuid4().hex,
                title=title,
                total=total,
                category=category,
                payer_id=payer,
                shares=allocator.shares,
                expense_date=expense_date.date() if expense_date else date.today(),
                self_paid=self_paid,
                ignore_mismatch=ignore_mismatch,
            )
            ledger_io.append_expense(expenses_csv, expense)
            click.echo(f"✔ {expense.title} → {expenses_csv}")
        else:
            click.echo(json.dumps(shares_to_dict(records)))
    except LedgerError as e:
        raise click.ClickException(str(e))

if __name__ == '__main__':
    main()
