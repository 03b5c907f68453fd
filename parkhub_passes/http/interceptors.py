"""Ordered, removable request/response interceptors."""

import inspect
import itertools
from typing import Any, Callable, Dict, List, Tuple

REQUEST = "request"
RESPONSE = "response"


class InterceptorRegistry:
    """
    Holds interceptors in registration order.

    Each interceptor receives an ``httpx.Request`` (or ``httpx.Response``)
    and returns the object to continue with; returning ``None`` keeps the
    input. Coroutine functions are awaited.
    """

    def __init__(self):
        self._ids = itertools.count(1)
        self._chains: Dict[str, List[Tuple[int, Callable[[Any], Any]]]] = {
            REQUEST: [],
            RESPONSE: [],
        }

    def add(self, kind: str, fn: Callable[[Any], Any]) -> int:
        chain = self._chain(kind)
        interceptor_id = next(self._ids)
        chain.append((interceptor_id, fn))
        return interceptor_id

    def remove(self, kind: str, interceptor_id: int) -> bool:
        chain = self._chain(kind)
        for index, (existing_id, _) in enumerate(chain):
            if existing_id == interceptor_id:
                del chain[index]
                return True
        return False

    def count(self, kind: str) -> int:
        return len(self._chain(kind))

    async def apply(self, kind: str, obj: Any) -> Any:
        # Snapshot so removal during iteration does not skip entries
        for _, fn in list(self._chain(kind)):
            result = fn(obj)
            if inspect.isawaitable(result):
                result = await result
            if result is not None:
                obj = result
        return obj

    def _chain(self, kind: str) -> List[Tuple[int, Callable[[Any], Any]]]:
        if kind not in self._chains:
            raise ValueError(f"Unknown interceptor kind '{kind}'; use 'request' or 'response'")
        return self._chains[kind]
