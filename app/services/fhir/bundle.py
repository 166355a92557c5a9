import json
from typing import Sequence

from fhir.resources.R4B.bundle import Bundle
from fhir.resources.R4B.domainresource import DomainResource

from app.services.fhir.model_factory import create_model


def create_searchset(resources: Sequence[DomainResource]) -> Bundle:
    entries = [
        {
            "fullUrl": f"{resource.get_resource_type()}/{resource.id}",
            "resource": json.loads(resource.model_dump_json()),
            "search": {"mode": "match"},
        }
        for resource in resources
    ]

    data = {"resourceType": "Bundle", "type": "searchset", "total": len(entries)}
    if entries:
        data["entry"] = entries

    return create_model(Bundle, data)
