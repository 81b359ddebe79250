from pydantic import BaseModel, ConfigDict, ValidationError
from typing import Any, Dict, Optional


class ClubRecord(BaseModel):
    """
    Base for records that admins and players correct after creation.

    Assignment is validated, so a correction that breaks a field
    constraint is rejected and the record keeps its previous value.
    """
    model_config = ConfigDict(validate_assignment=True)

    def update_field(self, field_name: str, value: Any) -> Optional[str]:
        """Apply one correction. Returns the validation message, or None on success."""
        try:
            setattr(self, field_name, value)
        except ValidationError as e:
            return e.errors()[0]['msg']
        return None

    def apply_updates(self, updates: Dict[str, Any]) -> Dict[str, str]:
        """Apply corrections in order; field -> message for every one rejected."""
        errors = {}
        for field_name, value in updates.items():
            error = self.update_field(field_name, value)
            if error:
                errors[field_name] = error
        return errors
