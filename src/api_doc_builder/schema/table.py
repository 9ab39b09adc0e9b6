"""Column projection over parameter cells."""

from collections.abc import Sequence

from api_doc_builder.parser.base import ParameterCell

ALL_FIELDS = (0, 1, 2, 3, 4)
SUMMARY_FIELDS = (0, 1, 4)  # name, type, description

SUMMARY_HEADER = ["Name", "Type", "Description"]


def project(cells: Sequence[ParameterCell], positions: Sequence[int]) -> list[list[str]]:
    """Select the fields at ``positions`` from every cell.

    One row per cell, in input order. The canonical field order of a cell
    never changes; ``positions`` only decides which fields are emitted.
    """
    return [cell.select_by_index(*positions) for cell in cells]
