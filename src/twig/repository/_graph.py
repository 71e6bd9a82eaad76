"""Commit graph traversal.

All traversals are iterative so that long histories never hit the
recursion limit.
"""

from collections import deque

from twig.repository._store import ObjectStore


def history(store: ObjectStore, commit_id: str) -> set[str]:
    """Return every commit reachable from a commit, including itself.

    Both first and second parents are followed.

    Args:
        store: The object store holding the graph.
        commit_id: The starting commit.

    Returns:
        The reflexive-transitive closure of the parent relation.
    """
    seen: set[str] = set()
    pending = [commit_id]
    while pending:
        current = pending.pop()
        if current in seen:
            continue
        seen.add(current)
        pending.extend(store.get_commit(current).parents)
    return seen


def first_parent_chain(store: ObjectStore, commit_id: str) -> list[str]:
    """Follow first parents from a commit back to the root.

    Returns:
        Commit ids, starting commit first and root last.
    """
    chain: list[str] = []
    current: str | None = commit_id
    while current is not None:
        chain.append(current)
        current = store.get_commit(current).parent
    return chain


def find_split_point(store: ObjectStore, head: str, other: str) -> str:
    """Find the split point (merge base) of two commits.

    Walks breadth-first from `head`, expanding the first parent before the
    second and visiting each commit once, and returns the first commit that
    is also an ancestor of `other`. The result is deterministic for a given
    graph.

    Args:
        store: The object store holding the graph.
        head: The current head commit.
        other: The commit being merged in.

    Returns:
        The id of the split point.
    """
    common = history(store, other)
    visited: set[str] = {head}
    queue: deque[str] = deque([head])
    while queue:
        current = queue.popleft()
        if current in common:
            return current
        for parent in store.get_commit(current).parents:
            if parent not in visited:
                visited.add(parent)
                queue.append(parent)

    # Every commit descends from the shared root, so this is unreachable
    # for commits of one repository.
    msg = f"Commits {head} and {other} share no ancestor"
    raise ValueError(msg)
