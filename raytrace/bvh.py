"""
Bounding volume hierarchy construction.

``divide`` rearranges an existing group tree in place so that groups
with many direct children are split into spatially coherent subgroups.
Only the tree shape changes: the set of leaves and every leaf's world
placement stay the same.
"""
from typing import List, Sequence, Tuple

from raytrace.bounds import BoundingBox
from raytrace.logging_config import get_logger
from raytrace.shapes import Shape, add_child, group, parent_space_bounds_of, remove_child

logger = get_logger(__name__)


def partition_children(g: Shape) -> Tuple[List[Shape], List[Shape]]:
    """Move children that fit entirely in one half of the group's box out of it.

    Children with infinite bounds (planes) and children straddling the
    split stay in ``g``. A half that would take every candidate child is
    left in place, so repeated division always makes progress.
    """
    candidates = []
    box = BoundingBox()
    for child in g.children:
        child_box = parent_space_bounds_of(child)
        if child_box.is_empty or not child_box.is_finite:
            continue
        candidates.append((child, child_box))
        box.merge(child_box)
    if not candidates:
        return [], []

    left_box, right_box = box.split()
    left, right = [], []
    for child, child_box in candidates:
        if left_box.contains_box(child_box):
            left.append(child)
        elif right_box.contains_box(child_box):
            right.append(child)

    if len(left) == len(candidates):
        left = []
    if len(right) == len(candidates):
        right = []
    for child in left + right:
        remove_child(g, child)
    return left, right

def make_subgroup(g: Shape, children: Sequence[Shape]) -> Shape:
    """Wrap ``children`` in a new group and add it to ``g``."""
    for child in children:
        if child.parent is g:
            remove_child(g, child)
    sub = group(children)
    add_child(g, sub)
    return sub

def divide(shape: Shape, threshold: int) -> None:
    """Recursively split groups whose direct non-group children exceed ``threshold``."""
    if not shape.is_group:
        return
    direct = sum(1 for c in shape.children if not c.is_group)
    if direct > threshold:
        left, right = partition_children(shape)
        if left:
            make_subgroup(shape, left)
        if right:
            make_subgroup(shape, right)
        logger.debug("divided %d children into %d/%d, %d kept",
                     direct, len(left), len(right), len(shape.children) - bool(left) - bool(right))
    for child in list(shape.children):
        divide(child, threshold)
