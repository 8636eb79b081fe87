"""
Small shape helpers for the pooled (multi-id) operations.
"""
from __future__ import annotations

from typing import Any, Iterable, Mapping, Sequence, Union

from .errors import NylasError


def foo_to_list(value: Any) -> list[Any]:
    """Wrap a scalar id in a list; lists and tuples pass through."""
    if value is None:
        return []
    if isinstance(value, (list, tuple)):
        return list(value)
    return [value]


def to_multi(
    params: Union[Mapping[str, Any], Sequence[Mapping[str, Any]], None],
) -> list[Mapping[str, Any]]:
    """
    Normalise "one parameter bag or many" into a list of bags.

        to_multi({"id": "a"})                  -> [{"id": "a"}]
        to_multi([{"id": "a"}, {"id": "b"}])   -> unchanged
    """
    if params is None:
        return []
    if isinstance(params, Mapping):
        return [params]
    return list(params)


def generate_list(items: Iterable[Mapping[str, Any]], key: str) -> list[Any]:
    """Pluck one key from every mapping (missing keys become None)."""
    return [item.get(key) for item in items]


def concat_pool_infos(ids: Sequence[Any], pools: Sequence[Any]) -> dict[Any, Any]:
    """
    Key pooled results by the identifier that produced them.

    `pools` must be in the same order as `ids`; a duplicated id keeps the
    result of its last occurrence.
    """
    if len(ids) != len(pools):
        raise NylasError(
            f"Pool returned {len(pools)} result(s) for {len(ids)} request(s)"
        )
    return dict(zip(ids, pools))
