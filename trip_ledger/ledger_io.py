import pandas as pd
import yaml
from pathlib import Path
from datetime import datetime
from typing import List, Tuple
import logging

from .datatypes import ExpenseRecord, Member, ShareRecord
from .errors import LedgerError, ValidationError
from .money import format_money, to_money

logger = logging.getLogger(__name__)

# Fixed columns of the expense ledger; one 'Share (<member id>)' column per member follows
BASE_COLUMNS = [
    'ID',
    'Date',
    'Title',
    'Amount',
    'Category',
    'Paid By',
    'Self Paid',
]
SHARE_PREFIX = 'Share ('

def read_group(yaml_path: Path) -> Tuple[str, List[Member]]:
    """Read the group file and return its name and members"""
    body = yaml.safe_load(Path(yaml_path).read_text(encoding='utf-8')) or {}
    members = [Member(id=str(m['id']), name=str(m.get('name', m['id']))) for m in body.get('members', [])]
    logger.info(f"Loaded {len(members)} members from {yaml_path}")
    return str(body.get('name', Path(yaml_path).stem)), members

def read_expenses(csv_path: Path) -> List[ExpenseRecord]:
    """Read the expense ledger CSV and convert to ExpenseRecord objects"""
    csv_path = Path(csv_path)
    if not csv_path.exists():
        logger.info(f"Ledger file {csv_path} does not exist, returning empty ledger")
        return []

    # everything as text so amounts reach Decimal untouched
    df = pd.read_csv(csv_path, dtype=str, keep_default_na=False)
    logger.debug(f"Read {len(df)} rows from {csv_path}")

    share_columns = [c for c in df.columns if _share_member(c) is not None]

    expenses = []
    for index, row in df.iterrows():
        try:
            expenses.append(_row_to_expense(row, share_columns))
        except ValidationError as e:
            raise LedgerError(f"{csv_path} row {index + 2}: {e}") from e

    logger.info(f"Converted {len(expenses)} CSV rows to ExpenseRecord objects")
    return expenses

def write_expenses(csv_path: Path, expenses: List[ExpenseRecord]) -> None:
    """Write the complete ledger to CSV, replacing any existing file"""
    logger.info(f"Writing {len(expenses)} expenses to {csv_path}")

    member_ids = []
    for expense in expenses:
        for share in expense.shares:
            if share.member_id not in member_ids:
                member_ids.append(share.member_id)

    columns = BASE_COLUMNS + [f'{SHARE_PREFIX}{m})' for m in member_ids]
    rows = [_expense_to_dict(e) for e in expenses]
    df = pd.DataFrame(rows, columns=columns)
    df.to_csv(csv_path, index=False)

def append_expense(csv_path: Path, expense: ExpenseRecord) -> None:
    """Append one expense, keeping everything already in the ledger"""
    existing = read_expenses(csv_path)
    if any(e.id == expense.id for e in existing):
        raise LedgerError(f"Expense {expense.id} already in {csv_path}")
    write_expenses(csv_path, existing + [expense])

def _row_to_expense(row, share_columns) -> ExpenseRecord:
    shares = []
    for column in share_columns:
        amount = to_money(row.get(column))
        if amount is None:
            continue  # not part of this expense
        shares.append(ShareRecord(member_id=_share_member(column), amount=amount))

    amount = to_money(row.get('Amount'))
    if amount is None:
        raise ValidationError("missing amount")

    return ExpenseRecord(
        id=str(row.get('ID', '')),
        title=str(row.get('Title', '')),
        amount=amount,
        category=str(row.get('Category', '')),  # blank becomes DEFAULT_CATEGORY
        date=_parse_date(row.get('Date')),
        payer_id=str(row.get('Paid By', '')),
        self_paid=_parse_flag(row.get('Self Paid')),
        shares=tuple(shares),
    )

def _expense_to_dict(expense: ExpenseRecord) -> dict:
    row = {
        'ID': expense.id,
        'Date': expense.date.isoformat() if expense.date else None,
        'Title': expense.title,
        'Amount': format_money(expense.amount),
        'Category': expense.category,
        'Paid By': expense.payer_id,
        'Self Paid': 'yes' if expense.self_paid else 'no',
    }
    for share in expense.shares:
        row[f'{SHARE_PREFIX}{share.member_id})'] = format_money(share.amount)
    return row

def _share_member(column: str):
    if column.startswith(SHARE_PREFIX) and column.endswith(')'):
        return column[len(SHARE_PREFIX):-1]
    return None

def _parse_date(date_str):
    """Parse an ISO date, handle empty values"""
    if date_str is None or str(date_str).strip() == '':
        return None
    try:
        return datetime.strptime(str(date_str).strip(), '%Y-%m-%d').date()
    except ValueError:
        logger.warning(f"Could not parse date: {date_str}")
        return None

def _parse_flag(value) -> bool:
    return str(value).strip().lower() in ('yes', 'true', '1', 'y')
