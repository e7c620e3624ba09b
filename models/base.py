from typing import Any, Dict

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class WireModel(BaseModel):
    """Base for models exchanged with the remote service.

    Fields are snake_case in Python and camelCase on the wire; unknown wire
    fields are ignored so newer service responses still parse.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")

    def to_wire(self) -> Dict[str, Any]:
        """Serialize to the camelCase dict the remote service expects."""
        return self.model_dump(by_alias=True, exclude_none=True, mode="json")
