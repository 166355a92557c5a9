import logging
from typing import List

from fhir.resources.R4B.practitioner import Practitioner
from fhir.resources.R4B.valueset import ValueSet

from app.exceptions import InternalError, NotFoundError, ValidationError
from app.models.backend.types import BackendRecord
from app.models.fhir.types import OperationResult
from app.services.fhir.decoders.practitioner import decode_practitioner
from app.services.fhir.encoders.practitioner import encode_practitioner, encode_user_types
from app.services.mapping.field_extractor import get, get_str
from app.services.resources.base import ResourceService, as_records, first_record

logger = logging.getLogger(__name__)


class PractitionerService(ResourceService):
    def _users(self, token: str | None) -> List[BackendRecord]:
        return as_records(self.api.get("user/", token))

    def search(self, token: str | None) -> List[Practitioner]:
        return self.encode_all(
            self._users(token), lambda r: encode_practitioner(r, self.extension_base_url)
        )

    def read(self, practitioner_id: str, token: str | None) -> Practitioner:
        # the backend has no single user lookup
        for record in self._users(token):
            if get_str(record, "hash_id") == practitioner_id:
                return encode_practitioner(record, self.extension_base_url)

        raise NotFoundError(f"Practitioner {practitioner_id} not found")

    def create(self, practitioner: Practitioner, token: str | None) -> OperationResult:
        payload = decode_practitioner(practitioner)
        body = first_record(self.api.post("user/create", token, payload)) or {}

        user = get(body, "user")
        practitioner_id = get_str(user if isinstance(user, dict) else body, "hash_id")

        if practitioner_id is None and get(body, "message") is not None:
            # Only a confirmation message came back, look the new user up by DNI
            dni = payload["user"]["dni_usuario"]
            for record in self._users(token):
                if get_str(record, "dni_usuario", "dni") == dni:
                    practitioner_id = get_str(record, "hash_id")
                    break

        if practitioner_id is None:
            raise InternalError("The backend did not return the id of the new practitioner")

        logger.info("Created practitioner %s", practitioner_id)
        return OperationResult(resource_type="Practitioner", id=practitioner_id)

    def update(
        self, practitioner_id: str, practitioner: Practitioner, token: str | None
    ) -> OperationResult:
        """
        The only mutable state of a user is whether it is active: activating and blocking are
        separate backend calls.
        """
        if practitioner.active is None:
            raise ValidationError("Updating a practitioner requires the active flag")

        if practitioner.active:
            self.api.put(f"user/activate/{practitioner_id}", token)
        else:
            self.api.delete(f"user/{practitioner_id}", token)

        return OperationResult(resource_type="Practitioner", id=practitioner_id, created=False)

    def user_types(self, token: str | None) -> ValueSet:
        return encode_user_types(as_records(self.api.get("user/type", token)))
