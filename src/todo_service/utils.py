from __future__ import annotations

from typing import Any, Dict, Iterable, List, Mapping, Optional, Union


# PUBLIC_INTERFACE
def data_envelope(data: Union[Mapping[str, Any], Iterable[Mapping[str, Any]]]) -> Dict[str, Any]:
    """
    Wrap a single item or a collection of items under a "data" key.

    Args:
        data: One item (a mapping) or an iterable of items.

    Returns:
        Dict with key: data.
    """
    if isinstance(data, Mapping):
        return {"data": dict(data)}
    # Materialize iterators so the envelope can be serialized more than once
    items: List[Dict[str, Any]] = [dict(item) for item in data]
    return {"data": items}


# PUBLIC_INTERFACE
def message_envelope(message: str, todo: Optional[Mapping[str, Any]] = None) -> Dict[str, Any]:
    """
    Build the response body used by mutation endpoints.

    Returns:
        Dict with key message, plus todo when an item is given.
    """
    body: Dict[str, Any] = {"message": message}
    if todo is not None:
        body["todo"] = dict(todo)
    return body
