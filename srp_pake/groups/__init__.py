"""SRP group parameters.

Modules
-------
parameters
    GroupParameters dataclass and custom group construction.
validation
    Safe-prime and generator checks.
catalog
    RFC 5054 standard groups, built lazily and cached.

Functions
---------
lookup
    Fetch a standard group by name.
available_groups
    Names of the standard groups.
validate_group
    Raise InvalidGroup unless (N, g) is a valid SRP group.

References
----------
- RFC 5054 Appendix A
"""

from srp_pake.groups.catalog import available_groups, lookup, resolve_group
from srp_pake.groups.parameters import GroupParameters, custom_group
from srp_pake.groups.validation import is_valid_group, validate_group

__all__ = [
    "GroupParameters",
    "custom_group",
    "lookup",
    "resolve_group",
    "available_groups",
    "validate_group",
    "is_valid_group",
]
