"""
Lookup Manager
Runs mapping lookups without stalling the command, telling the user when
a lookup has to wait for a database build
"""

import asyncio
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, List, Optional

from mappings_bot.mappings.downloader import MappingDownloader
from mappings_bot.mappings.types import LookupAnswer, Mapping, MappingType
from mappings_bot.utils.discord import DiscordUtils
from mappings_bot.utils.logger import LoggerMixin

if TYPE_CHECKING:
    from mappings_bot.commands.context import CommandContext

FAST_PATH_TIMEOUT = 0.5

BUILDING_NOTICE = "Building mappings database, this may take a moment."


@dataclass(frozen=True)
class LookupRequest:
    name: str
    version: str
    mapping_type: Optional[MappingType] = None


class LookupStatus(Enum):
    RESOLVED = "resolved"
    UNKNOWN_VERSION = "unknown_version"
    FAILED = "failed"


@dataclass(frozen=True)
class LookupResult:
    """
    Outcome of one lookup.

    ``mappings`` is set only when RESOLVED (and may be empty); ``error`` only
    when FAILED.
    """

    request: LookupRequest
    status: LookupStatus
    mappings: Optional[List[Mapping]] = None
    error: Optional[BaseException] = None
    slow: bool = False

    @classmethod
    def from_answer(cls, request: LookupRequest, answer: LookupAnswer, slow: bool) -> "LookupResult":
        if answer is None:
            return cls(request, LookupStatus.UNKNOWN_VERSION, slow=slow)
        return cls(request, LookupStatus.RESOLVED, mappings=list(answer), slow=slow)


class LookupManager(LoggerMixin):
    """
    Two-phase wait on a single lookup task.

    The task is awaited for at most ``fast_path_timeout`` seconds. If that
    budget runs out the task keeps running; the user sees a typing indicator
    and a notice while the same task is awaited without a limit. The notice
    is removed however that wait ends.
    """

    def __init__(self, downloader: MappingDownloader, fast_path_timeout: float = FAST_PATH_TIMEOUT):
        super().__init__("LookupManager")
        self.downloader = downloader
        self.fast_path_timeout = fast_path_timeout

    def dispatch(self, request: LookupRequest) -> "asyncio.Future[LookupAnswer]":
        """Schedule the lookup as its own task."""
        return asyncio.ensure_future(
            self.downloader.lookup(request.name, request.version, request.mapping_type)
        )

    async def lookup(self, ctx: "CommandContext", request: LookupRequest) -> LookupResult:
        """
        Run ``request`` to completion.

        Args:
            ctx: Invocation to show progress in
            request: What to look up

        Returns:
            RESOLVED, UNKNOWN_VERSION, or FAILED carrying the task's error
        """
        task = self.dispatch(request)

        try:
            answer = await asyncio.wait_for(asyncio.shield(task), self.fast_path_timeout)
        except asyncio.TimeoutError:
            return await self._slow_path(ctx, request, task)
        except asyncio.CancelledError:
            if not task.cancelled():
                raise
            return LookupResult(request, LookupStatus.FAILED, error=asyncio.CancelledError())
        except Exception as e:
            return LookupResult(request, LookupStatus.FAILED, error=e)

        return LookupResult.from_answer(request, answer, slow=False)

    async def _slow_path(
        self,
        ctx: "CommandContext",
        request: LookupRequest,
        task: "asyncio.Future[LookupAnswer]",
    ) -> LookupResult:
        self.info(f"Lookup of {request.name!r} for {request.version} is waiting on a database build")

        async with ctx.typing():
            notice = await DiscordUtils.safe_send(ctx.channel, BUILDING_NOTICE)
            try:
                answer = await asyncio.shield(task)
            except asyncio.CancelledError:
                if not task.cancelled():
                    raise
                return LookupResult(request, LookupStatus.FAILED, error=asyncio.CancelledError(), slow=True)
            except Exception as e:
                return LookupResult(request, LookupStatus.FAILED, error=e, slow=True)
            finally:
                await DiscordUtils.safe_delete(notice)

        return LookupResult.from_answer(request, answer, slow=True)
