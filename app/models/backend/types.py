from typing import Any, Dict, List, Union

JsonValue = Union[None, bool, int, float, str, List["JsonValue"], Dict[str, "JsonValue"]]

# A record as returned by the backend. Keys differ between endpoints and versions, so it stays
# untyped and is always read through the field extractor.
BackendRecord = Dict[str, Any]
