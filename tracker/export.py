from typing import Iterable

from tracker.domain import Transaction

CSV_HEADER = ("Description", "Amount", "Type", "Category", "Date")


def _format_amount(amount: float) -> str:
    value = float(amount)
    return str(int(value)) if value.is_integer() else repr(value)


def _quote(text: str) -> str:
    return '"' + text.replace('"', '""') + '"'


def export_csv(trans: Iterable[Transaction]) -> str:
    """Header line plus one line per transaction, in collection order.

    Only the description is quoted; lines are joined with "\\n" and there is
    no trailing newline, so N transactions give N + 1 lines.
    """
    rows = [",".join(CSV_HEADER)]
    rows.extend(
        ",".join((_quote(t.description), _format_amount(t.amount), t.type, t.category, t.date))
        for t in trans
    )
    return "\n".join(rows)
