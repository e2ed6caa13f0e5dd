"""Import-cycle detection over the file dependency graph."""

from __future__ import annotations


def find_cycles(dependencies: dict[str, list[str]]) -> list[list[str]]:
    """Return the import cycles among files, using Tarjan's algorithm.

    A cycle is a strongly-connected component of two or more files, or a
    single file that imports itself.  Edges to files outside *dependencies*
    are ignored.  Each cycle is listed in sorted path order.
    """
    index: dict[str, int] = {}
    lowlink: dict[str, int] = {}
    on_stack: set[str] = set()
    stack: list[str] = []
    sccs: list[list[str]] = []
    counter = [0]

    def _visit(v: str) -> None:
        index[v] = lowlink[v] = counter[0]
        counter[0] += 1
        stack.append(v)
        on_stack.add(v)

        for w in dependencies[v]:
            if w not in dependencies:
                continue
            if w not in index:
                _visit(w)
                lowlink[v] = min(lowlink[v], lowlink[w])
            elif w in on_stack:
                lowlink[v] = min(lowlink[v], index[w])

        if lowlink[v] == index[v]:
            scc: list[str] = []
            while True:
                w = stack.pop()
                on_stack.discard(w)
                scc.append(w)
                if w == v:
                    break
            if len(scc) >= 2 or v in dependencies[v]:
                sccs.append(sorted(scc))

    for v in dependencies:
        if v not in index:
            _visit(v)

    return sccs
