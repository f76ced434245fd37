# rating_gateway/enums.py

"""
Enums for the Rating Gateway.

- ConditionType: how a condition takes part in the evaluation of a rating action
"""

from enum import Enum


class ConditionType(str, Enum):
    """
    Role of a condition during evaluation.

    STANDARD - any one met standard condition is enough, unless stronger
        requirements or prioritized conditions are present
    PREREQUISITE - evaluated first; all of them must be met, but they are
        never enough to open the rating page on their own
    REQUIREMENT - evaluated after prerequisites; all of them must be met and,
        when nothing is prioritized, they are enough on their own

    A collection that only holds prerequisites can never open the rating page.
    """
    STANDARD = "standard"
    PREREQUISITE = "prerequisite"
    REQUIREMENT = "requirement"
