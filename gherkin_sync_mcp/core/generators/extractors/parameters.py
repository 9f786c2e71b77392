"""
Parameters - infer outline parameters from an example table.

A column becomes an ``int`` parameter when every row parses as an integer,
otherwise a ``str`` parameter.
"""

from __future__ import annotations

import json
import keyword
from dataclasses import dataclass

from ...model import ExampleTable
from ...resolver import IdentifierStyle, Resolver


@dataclass
class ParameterInfo:
    """An outline parameter derived from one example column."""
    column: str          # "divide by"
    identifier: str      # "divide_by"
    type_hint: str       # "int" | "str"

    @property
    def signature(self) -> str:
        return f"{self.identifier}: {self.type_hint}"


def infer_type(values: list[str]) -> str:
    """
    Return "int" when every value parses as an integer, else "str".

    Only canonical spellings count ("7", "-3"); "007" stays a string so
    the cell text survives a round trip.
    """
    if not values:
        return "str"

    for value in values:
        try:
            if str(int(value)) != value:
                return "str"
        except ValueError:
            return "str"

    return "int"


def infer_parameters(table: ExampleTable, resolver: Resolver, scope: str) -> list[ParameterInfo]:
    """
    One parameter per column, in column order.

    Identifiers are claimed in ``scope`` so two columns never share a
    parameter name; ``self`` is reserved.
    """
    resolver.reserve(scope, "self")
    parameters = []

    for column in table.columns:
        base = resolver.identifier(column, IdentifierStyle.SNAKE) or "value"
        parameters.append(ParameterInfo(
            column=column,
            identifier=resolver.claim(base, scope),
            type_hint=infer_type(table.column_values(column))
        ))

    return parameters


def format_value(value: str, type_hint: str) -> str:
    """Python literal for one example cell."""
    if type_hint == "int":
        return str(int(value))
    return py_string(value)


def py_string(text: str) -> str:
    """Double-quoted Python string literal."""
    return json.dumps(text, ensure_ascii=False)


def format_example(table: ExampleTable, row: tuple[str, ...], parameters: list[ParameterInfo]) -> str:
    """
    Render one row as an ``example(...)`` call.

    Keyword form when every column name is already its parameter name,
    mapping form otherwise so the original column names survive.
    """
    values = [
        format_value(cell, parameter.type_hint)
        for cell, parameter in zip(row, parameters)
    ]

    if all(
        column == parameter.identifier and not keyword.iskeyword(column)
        for column, parameter in zip(table.columns, parameters)
    ):
        pairs = ", ".join(f"{column}={value}" for column, value in zip(table.columns, values))
        return f"example({pairs})"

    pairs = ", ".join(f"{py_string(column)}: {value}" for column, value in zip(table.columns, values))
    return f"example({{{pairs}}})"
