"""
Crossover operators.

Each strategy combines two parents into two children. Children keep every
attribute of the parent in the same slot except their genes.
"""

import math
from typing import Callable, Dict, List, Optional, Sequence, Tuple

from .config import CrossoverType, EvolutionConfig
from .data_models import Chromosome, Parents, Population
from .genes import is_numeric
from .random_utils import RandomSource, ensure_random_source


def single_point(
    parent_a: Chromosome,
    parent_b: Chromosome,
    config: EvolutionConfig,
    rng: RandomSource
) -> Tuple[Chromosome, Chromosome]:
    """
    Swap gene tails after one random cut point.

    The cut k is drawn from [0, size - 1]; child_a = a[:k] + b[k:] and
    child_b = b[:k] + a[k:].
    """
    k = rng.bounded_int(parent_a.size - 1)
    return (
        parent_a.with_genes(parent_a.genes[:k] + parent_b.genes[k:]),
        parent_b.with_genes(parent_b.genes[:k] + parent_a.genes[k:]),
    )


def _dedupe(genes: Sequence) -> List:
    return list(dict.fromkeys(genes))


def order_one(
    parent_a: Chromosome,
    parent_b: Chromosome,
    config: EvolutionConfig,
    rng: RandomSource
) -> Tuple[Chromosome, Chromosome]:
    """
    Davis order crossover for permutations.

    The slice between two random cut points is copied verbatim from one
    parent; the other parent's remaining genes fill the rest in their
    original order. Duplicates are then removed, so children can differ in
    length from their parents: pair this strategy with a repair function
    when exact length matters. Genes must be hashable.
    """
    limit = len(parent_a.genes) - 1
    i1, i2 = sorted([rng.bounded_int(limit), rng.bounded_int(limit)])

    slice_a = parent_a.genes[i1:i2]
    in_slice_a = set(slice_a)
    contrib_b = [gene for gene in parent_b.genes if gene not in in_slice_a]
    child_a = contrib_b[:i1] + slice_a + contrib_b[i1:]

    slice_b = parent_b.genes[i1:i2]
    in_slice_b = set(slice_b)
    contrib_a = [gene for gene in parent_a.genes if gene not in in_slice_b]
    child_b = contrib_a[:i1] + slice_b + contrib_a[i1:]

    return parent_a.with_genes(_dedupe(child_a)), parent_b.with_genes(_dedupe(child_b))


def uniform(
    parent_a: Chromosome,
    parent_b: Chromosome,
    config: EvolutionConfig,
    rng: RandomSource
) -> Tuple[Chromosome, Chromosome]:
    """
    Per-position coin flip between the parents.

    With probability crossover_rate a position keeps its parent of origin,
    otherwise the two genes swap. Not permutation safe.
    """
    child_a, child_b = [], []
    for gene_a, gene_b in zip(parent_a.genes, parent_b.genes):
        if rng.uniform() < config.crossover_rate:
            child_a.append(gene_a)
            child_b.append(gene_b)
        else:
            child_a.append(gene_b)
            child_b.append(gene_a)
    return parent_a.with_genes(child_a), parent_b.with_genes(child_b)


def _blend(x, y, alpha: float) -> Tuple:
    if not (is_numeric(x) and is_numeric(y)):
        return x, y
    return x * alpha + y * (1 - alpha), x * (1 - alpha) + y * alpha


def whole_arithmetic(
    parent_a: Chromosome,
    parent_b: Chromosome,
    config: EvolutionConfig,
    rng: RandomSource
) -> Tuple[Chromosome, Chromosome]:
    """
    Linear blend of numeric genes with weight crossover_alpha.

    Array-valued genes are blended element-wise (one level deep). Any other
    gene or array element that is not numeric is passed through unchanged.
    Deterministic; populations converge unless something else keeps
    diversity up.
    """
    alpha = config.crossover_alpha
    child_a, child_b = [], []
    for x, y in zip(parent_a.genes, parent_b.genes):
        if isinstance(x, (list, tuple)) and isinstance(y, (list, tuple)):
            blended = [_blend(xx, yy, alpha) for xx, yy in zip(x, y)]
            child_a.append([a for a, _ in blended])
            child_b.append([b for _, b in blended])
        else:
            a, b = _blend(x, y, alpha)
            child_a.append(a)
            child_b.append(b)
    return parent_a.with_genes(child_a), parent_b.with_genes(child_b)


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def _pmx(genes_a: List, genes_b: List, point1: int, point2: int) -> List:
    child = genes_a[:point1] + genes_b[point1:point2] + genes_a[point2:]
    matching = set(genes_b[point1:point2])

    for i in range(point1, point2):
        displaced = genes_a[i]
        if displaced in matching:
            continue
        # follow the mapping chain until it leaves the copied segment
        position = genes_a.index(genes_b[i])
        while point1 <= position < point2:
            position = genes_a.index(genes_b[position])
        child[position] = displaced

    return child


def partially_matched(
    parent_a: Chromosome,
    parent_b: Chromosome,
    config: EvolutionConfig,
    rng: RandomSource
) -> Tuple[Chromosome, Chromosome]:
    """
    Partially matched crossover (PMX) for permutations.

    Two cut points are drawn from triangular distributions centred on the
    middle third of the chromosome. The segment between them is copied from
    the other parent and displaced genes are relocated through the
    segment's value mapping, so each child is a permutation of the parents'
    genes.
    """
    length = len(parent_a.genes)
    third = length // 3
    point1 = _round_half_up(rng.triangular(1, third, third * 2))
    point2 = _round_half_up(rng.triangular(max(third, 1), third * 2, length - 1))
    if point2 < point1:
        point1, point2 = point2, point1

    return (
        parent_a.with_genes(_pmx(parent_a.genes, parent_b.genes, point1, point2)),
        parent_b.with_genes(_pmx(parent_b.genes, parent_a.genes, point1, point2)),
    )


CROSSOVER_STRATEGIES: Dict[CrossoverType, Callable[..., Tuple[Chromosome, Chromosome]]] = {
    CrossoverType.SINGLE_POINT: single_point,
    CrossoverType.ORDER_ONE: order_one,
    CrossoverType.UNIFORM: uniform,
    CrossoverType.WHOLE_ARITHMETIC: whole_arithmetic,
    CrossoverType.PARTIALLY_MATCHED: partially_matched,
}


def crossover(
    parents: Parents,
    config: Optional[EvolutionConfig] = None,
    rng: Optional[RandomSource] = None
) -> Population:
    """
    Apply the configured crossover strategy to every parent pair.

    Args:
        parents: Parent pairs from selection
        config: Evolution configuration (crossover_type, crossover_rate,
            crossover_alpha, crossover_repair_fn)
        rng: Random source (a fresh unseeded one when omitted)

    Returns:
        Children in pair order, two per parent pair, each passed through
        crossover_repair_fn when one is configured
    """
    config = EvolutionConfig.coerce(config)
    rng = ensure_random_source(rng)
    crossover_fn = CROSSOVER_STRATEGIES[config.crossover_type]
    repair_fn = config.crossover_repair_fn

    children = []
    for parent_a, parent_b in parents:
        pair = crossover_fn(parent_a, parent_b, config, rng)
        if repair_fn is not None:
            pair = tuple(repair_fn(child) for child in pair)
        children.extend(pair)

    return children
