"""
Gene categories and their flip rules.

Mutation operators that "flip" genes pick one rule per chromosome from the
category of its first gene. Mixed-category chromosomes are not supported.
"""

import numbers
from enum import Enum
from typing import Any, Callable

import numpy as np

FlipRule = Callable[[Any], Any]


class GeneKind(str, Enum):
    """Categories of gene values the engine knows how to flip."""

    BOOLEAN = "boolean"
    INTEGER = "integer"
    REAL = "real"
    SEQUENCE = "sequence"
    OPAQUE = "opaque"


def gene_kind(gene: Any) -> GeneKind:
    """
    Classify a gene value.

    bool is checked before the numeric tower since it subclasses int.
    """
    if isinstance(gene, (bool, np.bool_)):
        return GeneKind.BOOLEAN
    if isinstance(gene, numbers.Integral):
        return GeneKind.INTEGER
    if isinstance(gene, numbers.Real):
        return GeneKind.REAL
    if isinstance(gene, (list, tuple)):
        return GeneKind.SEQUENCE
    return GeneKind.OPAQUE


def is_numeric(gene: Any) -> bool:
    """True for real-valued genes (ints and floats, never booleans)."""
    return gene_kind(gene) in (GeneKind.INTEGER, GeneKind.REAL)


def _flip_boolean(gene):
    return not gene


def _flip_integer(gene):
    return gene ^ 1


def _flip_real(gene):
    # XOR on the integral part, as bitwise flips are only defined for integers
    return int(gene) ^ 1


def _keep(gene):
    return gene


def _flip_sequence(gene):
    if not gene:
        return gene
    rule = flip_rule_for(gene[0])
    return type(gene)(rule(item) for item in gene)


_FLIP_RULES = {
    GeneKind.BOOLEAN: _flip_boolean,
    GeneKind.INTEGER: _flip_integer,
    GeneKind.REAL: _flip_real,
    GeneKind.SEQUENCE: _flip_sequence,
    GeneKind.OPAQUE: _keep,
}


def flip_rule_for(gene: Any) -> FlipRule:
    """
    Flip rule for the category of the given gene.

    Args:
        gene: Representative gene, normally the first gene of a chromosome

    Returns:
        Callable mapping a gene to its flipped value. Opaque genes
        (strings and other types) map to themselves.
    """
    return _FLIP_RULES[gene_kind(gene)]
