"""Project association search contract.

Filtering and pagination semantics shared by every association provider:

* ``membership="selected"`` keeps members of the gate, ``"deselected"`` keeps
  non-members, anything else keeps both;
* ``project_search`` is a case-insensitive substring of the project name;
* pages are 1-based, and ``has_more_results`` is true iff the filtered total
  exceeds ``page_index * page_size``.
"""
from __future__ import annotations

from collections.abc import Iterable

from src.shared.constants import MEMBERSHIP_DESELECTED, MEMBERSHIP_SELECTED
from src.shared.models.qualitygates import (
    Association,
    ProjectQgateAssociation,
    ProjectQgateAssociationQuery,
)


def has_more_results(total: int, page_index: int, page_size: int) -> bool:
    """Return whether *total* filtered projects extend past the given page."""
    return total > page_index * page_size


def matches_query(
    query: ProjectQgateAssociationQuery,
    association: ProjectQgateAssociation,
) -> bool:
    """Return whether *association* passes the query's membership and name filters."""
    if query.membership == MEMBERSHIP_SELECTED and not association.is_member:
        return False
    if query.membership == MEMBERSHIP_DESELECTED and association.is_member:
        return False
    if query.project_search is not None:
        return query.project_search.lower() in association.name.lower()
    return True


def find_associations(
    query: ProjectQgateAssociationQuery,
    associations: Iterable[ProjectQgateAssociation],
) -> Association:
    """Apply *query* to an in-memory sequence of associations.

    The order of *associations* is kept; the provider decides it.
    """
    filtered = [a for a in associations if matches_query(query, a)]
    start = query.offset
    return Association(
        projects=filtered[start:start + query.page_size],
        has_more_results=has_more_results(
            len(filtered), query.page_index, query.page_size
        ),
    )
