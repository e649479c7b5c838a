"""Shared model configuration.

Every domain record is immutable and serialises to camelCase JSON
(``model_dump(by_alias=True, mode="json")``) so HTTP handlers can return it
unchanged.  Python callers construct and read records by snake_case name.
"""

from pydantic import ConfigDict
from pydantic.alias_generators import to_camel

RECORD_CONFIG = ConfigDict(
    frozen=True,
    alias_generator=to_camel,
    populate_by_name=True,
)
