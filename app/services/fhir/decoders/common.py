from typing import Any, Dict, List

from fhir.resources.R4B.humanname import HumanName
from fhir.resources.R4B.identifier import Identifier


def identifier_value(identifiers: List[Identifier] | None, system: str) -> str | None:
    """
    Identifier systems are matched exactly, unlike extension urls.
    """
    for identifier in identifiers or []:
        if identifier.system == system and identifier.value:
            return identifier.value
    return None


def name_parts(names: List[HumanName] | None) -> tuple[str, str]:
    """
    Returns (given, family) of the first name. Given names are joined with a space, a missing
    family becomes an empty string.
    """
    if not names:
        return "", ""

    name = names[0]
    given = " ".join(g for g in (name.given or []) if g)
    return given, name.family or ""


def drop_none(data: Dict[str, Any]) -> Dict[str, Any]:
    return {k: v for k, v in data.items() if v is not None}
