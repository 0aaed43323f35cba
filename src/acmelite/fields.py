"""ACME JSON fields."""
from typing import Any

import josepy as jose


class Resource(jose.Field):
    """Resource MITM field.

    Every request body names the resource it targets, so that a body
    signed for one endpoint cannot be replayed against another.

    """

    def __init__(self, resource_type: str, *args: Any, **kwargs: Any) -> None:
        self.resource_type = resource_type
        kwargs['default'] = resource_type
        super().__init__('resource', *args, **kwargs)

    def decode(self, value: Any) -> Any:
        if value != self.resource_type:
            raise jose.DeserializationError(
                'Wrong resource type: {0} instead of {1}'.format(
                    value, self.resource_type))
        return value


def resource(resource_type: str) -> Any:
    """Generates a type-friendly Resource field."""
    return Resource(resource_type)
