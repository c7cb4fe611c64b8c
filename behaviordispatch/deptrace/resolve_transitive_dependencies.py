"""
Transitive closure of the dependencies of a behavior.

A depends on B depends on C, means that A depends on both B and C.
A cycle is flagged, and the edge that closes it is not followed.
"""
from dataclasses import dataclass
import logging
from typing import Iterator, Optional
from behaviordispatch.deptrace.resolve_dependency_refs import resolve_direct
from behaviordispatch.domain.behavior import Behavior, BehaviorGathered, GatheredRef
from behaviordispatch.domain.dispatch_context import DispatchContext

logger = logging.getLogger(__name__)

# Direct dependencies already resolved during this run, by behavior identity.
DirectCache = dict[Behavior, tuple[GatheredRef, ...]]

@dataclass(frozen=True)
class TransitiveResolution:
    direct: tuple[GatheredRef, ...]
    transitive: tuple[GatheredRef, ...]
    circular: bool

def resolve_direct_cached(gathered: BehaviorGathered, pool: list[BehaviorGathered], context: DispatchContext, direct_cache: Optional[DirectCache]) -> tuple[GatheredRef, ...]:
    if direct_cache is not None and gathered.behavior in direct_cache:
        return direct_cache[gathered.behavior]
    direct = resolve_direct(gathered, pool, context)
    if direct_cache is not None:
        direct_cache[gathered.behavior] = direct
    return direct

def resolve_transitive(gathered: BehaviorGathered, pool: list[BehaviorGathered], context: DispatchContext, direct_cache: Optional[DirectCache] = None) -> TransitiveResolution:
    """
    Depth first traversal with an explicit stack, so deep chains don't hit the recursion limit.

    visited: behaviors already added to the transitive set.
    path: behaviors on the current traversal path, the root included.
    """
    pool_by_identity = {item.behavior: item for item in pool}
    direct = resolve_direct_cached(gathered, pool, context, direct_cache)

    transitive: list[GatheredRef] = []
    visited: set[Behavior] = set()
    path: set[Behavior] = {gathered.behavior}
    circular = False

    # Each frame is the behavior whose dependencies are being iterated, and the iterator.
    stack: list[tuple[Optional[Behavior], Iterator[GatheredRef]]] = [(None, iter(direct))]
    while stack:
        owner, refs = stack[-1]
        ref = next(refs, None)
        if ref is None:
            stack.pop()
            if owner is not None:
                path.discard(owner)
            continue

        key = ref.behavior
        if key in path:
            circular = True
            continue
        if key in visited:
            continue
        visited.add(key)
        transitive.append(ref)

        dep_gathered = pool_by_identity.get(key)
        if dep_gathered is None:
            continue
        context.raise_if_cancelled()
        dep_direct = resolve_direct_cached(dep_gathered, pool, context, direct_cache)
        path.add(key)
        stack.append((key, iter(dep_direct)))

    return TransitiveResolution(direct=direct, transitive=tuple(transitive), circular=circular)
