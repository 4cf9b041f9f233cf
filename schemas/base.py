from pydantic import BaseModel
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Accepts and emits camelCase keys (frontend convention); snake_case also accepted on input."""

    model_config = {"populate_by_name": True, "alias_generator": to_camel}
