"""Error taxonomy shared by every domain service.

Services raise these instead of ``HTTPException`` so they stay usable outside
a request; ``main.py`` maps them onto HTTP responses.
"""

from typing import Optional


class TalentNestError(Exception):
    """Base class for expected, typed failures"""

    status_code = 500
    kind = "error"

    def __init__(self, detail: str):
        super().__init__(detail)
        self.detail = detail


class ValidationError(TalentNestError):
    """Malformed or missing input"""

    status_code = 400
    kind = "validation_error"


class InvalidContactNumber(ValidationError):
    """Provider WhatsApp number does not normalize to E.164"""

    kind = "invalid_contact_number"


class AuthorizationError(TalentNestError):
    """Caller lacks the role or ownership the operation needs"""

    status_code = 403
    kind = "authorization_error"


class NotFoundError(TalentNestError):
    """Entity does not exist or is not visible to the caller"""

    status_code = 404
    kind = "not_found"


class ConflictError(TalentNestError):
    """Request duplicates something that already exists"""

    status_code = 409
    kind = "conflict"


class InvalidStateTransition(TalentNestError):
    """Requested status change is not allowed from the current state"""

    status_code = 409
    kind = "invalid_state_transition"

    def __init__(self, entity: str, current: str, requested: str, detail: Optional[str] = None):
        super().__init__(detail or f"Cannot move {entity} from '{current}' to '{requested}'")
        self.current = current
        self.requested = requested


class DependencyError(TalentNestError):
    """Database, storage or identity backend failed"""

    status_code = 503
    kind = "dependency_error"
