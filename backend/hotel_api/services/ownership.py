from hotel_api.core.errors import ForbiddenError


def assert_owner(resource_owner_id: str, caller_id: str, message: str = "Not authorized to modify this resource") -> None:
    """Single ownership policy: the stored owner id must equal the caller id exactly."""
    if not isinstance(resource_owner_id, str) or not isinstance(caller_id, str) or resource_owner_id != caller_id:
        raise ForbiddenError(message)
