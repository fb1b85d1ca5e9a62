from itertools import chain
from typing import Iterable, List

from ledger.lines import KIND_ORDER, LedgerLine


def sort_key(line: LedgerLine):
    return (line.date, KIND_ORDER[line.kind], line.source_id)


def merge_lines(*batches: Iterable[LedgerLine]) -> List[LedgerLine]:
    """Concatenate adapter outputs into one chronological sequence.

    Same-day lines are ordered by kind (sale, purchase, expense, payment,
    return) and then by source id, so identical inputs always produce the
    same order.
    """
    return sorted(chain.from_iterable(batches), key=sort_key)
