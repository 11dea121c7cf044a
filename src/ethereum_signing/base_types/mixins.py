"""
Mixins shared by the pydantic models of this package.
"""

from typing import Any, Literal


class ModelCustomizationsMixin:
    """
    A mixin that customizes the behavior of pydantic models. Any pydantic
    configuration override that must apply to all models should be placed here.
    """

    def serialize(
        self,
        mode: Literal["json", "python"],
        by_alias: bool,
        exclude_none: bool = True,
    ) -> dict[str, Any]:
        """
        Serialize the model to the specified format with the given parameters.

        :param mode: If mode is 'json', the output only contains JSON serializable types.
        :param by_alias: Whether to use aliases for field names.
        :param exclude_none: Whether to exclude fields with None values, default is True.
        :return: The serialized representation of the model.
        """
        if not hasattr(self, "model_dump"):
            raise NotImplementedError(
                f"{self.__class__.__name__} does not have 'model_dump' method. "
                "Are you sure you are using a Pydantic model?"
            )
        return self.model_dump(mode=mode, by_alias=by_alias, exclude_none=exclude_none)

    def __repr_args__(self):
        """
        Generate the attribute-value pairs used by `__repr__`.

        Only attributes with non-None values are included, and scalar values are shown in
        their JSON string form so hex fields read the same in both representations.
        """
        attrs_names = self.serialize(mode="python", by_alias=False).keys()
        repr_attrs = []
        for name in attrs_names:
            value = getattr(self, name)
            match value:
                case list() | dict() | None:
                    repr_attrs.append((name, value))
                case _ if hasattr(value, "model_dump"):
                    repr_attrs.append((name, value))
                case _:
                    repr_attrs.append((name, str(value)))
        return repr_attrs
