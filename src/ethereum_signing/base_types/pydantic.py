"""Base pydantic classes used to define the models of this package."""

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from .mixins import ModelCustomizationsMixin


class SigningBaseModel(BaseModel, ModelCustomizationsMixin):
    """Base model for all models of this package."""

    pass


class CamelModel(SigningBaseModel):
    """
    A base model that converts field names to camel case when serializing.

    For example, the field name `max_fee_per_gas` in a Python model will be represented
    as `maxFeePerGas` when it is serialized to json.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        validate_default=True,
    )
