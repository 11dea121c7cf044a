"""
JSON encoding for the models of this package.
"""

from typing import Any, AnyStr, List

from .pydantic import SigningBaseModel


def to_json(input: SigningBaseModel | AnyStr | List[SigningBaseModel | AnyStr]) -> Any:
    """
    Convert a model to its json data representation.
    """
    if isinstance(input, list):
        return [to_json(item) for item in input]
    elif isinstance(input, SigningBaseModel):
        return input.serialize(mode="json", by_alias=True)
    else:
        return str(input)
