"""
Permission requirements
Checks a member's channel permissions against a required set
"""

from typing import Optional

import discord


class Requirements:
    """
    Capabilities a member must hold to run part of a command.

    ``all_of`` must be fully contained in the member's permissions; when
    ``any_of`` is non-empty at least one of its flags must be present too.
    """

    def __init__(
        self,
        all_of: Optional[discord.Permissions] = None,
        any_of: Optional[discord.Permissions] = None,
    ):
        self.all_of = all_of or discord.Permissions.none()
        self.any_of = any_of or discord.Permissions.none()

    def matches(self, permissions: discord.Permissions) -> bool:
        """Return True when ``permissions`` satisfies both requirement sets."""
        if permissions.administrator:
            return True

        if not self.all_of.is_subset(permissions):
            return False

        if self.any_of.value == 0:
            return True

        return (self.any_of.value & permissions.value) != 0


MANAGE_SERVER = Requirements(all_of=discord.Permissions(manage_guild=True))
