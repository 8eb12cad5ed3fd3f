"""
Key parameter resolution.

Normalizes a key spec into the (key, type, value expression) triple that the
request templates substitute.
"""

from dataclasses import dataclass
from typing import Dict, Optional

from .events import KeySpec


@dataclass(frozen=True)
class KeyDefinition:
    """Source-agnostic key attribute ready for template substitution."""

    key: str
    attribute_type: str
    attribute_value: str

    def to_sub_values(self, prefix: str) -> Dict[str, str]:
        """Substitution values for a `Hash`/`Range` key clause."""
        return {
            f"{prefix}Key": self.key,
            f"{prefix}AttributeType": self.attribute_type,
            f"{prefix}AttributeValue": self.attribute_value,
        }


def make_key_definition(key_spec: Optional[KeySpec]) -> Optional[KeyDefinition]:
    """
    Resolve a key spec to its key definition.

    Sources are checked in a fixed order when more than one is set:
    path parameter, then query string parameter, then literal name/value.

    Args:
        key_spec: Key spec from the event, or None

    Returns:
        The key definition, or None when no source is populated
    """
    if key_spec is None:
        return None

    if key_spec.path_param:
        return KeyDefinition(
            key=key_spec.path_param,
            attribute_type=key_spec.attribute_type,
            attribute_value=f"$input.params().path.{key_spec.path_param}",
        )

    if key_spec.query_string_param:
        return KeyDefinition(
            key=key_spec.query_string_param,
            attribute_type=key_spec.attribute_type,
            attribute_value=f"$input.params().querystring.{key_spec.query_string_param}",
        )

    if key_spec.name and key_spec.value:
        return KeyDefinition(
            key=key_spec.name,
            attribute_type=key_spec.attribute_type,
            attribute_value=key_spec.value,
        )

    return None
