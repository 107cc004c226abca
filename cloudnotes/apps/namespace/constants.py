"""Constants shared by the namespace app."""

import enum
from typing import Final, Literal

# Separator between the segments of a materialized path
PATH_SEPARATOR: Final = '/'

# Longest folder or file name
NAME_MAX_LENGTH: Final = 255


class _Unset(enum.Enum):
    token = 0


#: Marks an argument the caller did not pass, as opposed to ``None``.
#: ``move_folder(..., parent_id=None)`` moves to the root, while an
#: ``UNSET`` parent keeps the current one.
UNSET: Final = _Unset.token

Unset = Literal[_Unset.token]
