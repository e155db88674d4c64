"""Step definitions, loaded into pytest as plugins.

``tests/conftest.py`` lists both modules in ``pytest_plugins``; each step
expects the ``todo_page`` / ``page_actions`` fixtures from the e2e conftest.
"""

from __future__ import annotations

from typing import List, Sequence


def table_column(datatable: Sequence[Sequence[str]], column: str) -> List[str]:
    """Values of one named column of a Gherkin data table (first row is the header)."""
    if not datatable:
        return []
    header = [cell.strip() for cell in datatable[0]]
    if column not in header:
        raise AssertionError(f'Data table has no "{column}" column (columns: {", ".join(header)})')
    index = header.index(column)
    return [row[index].strip() for row in datatable[1:]]
