"""
Data models for repeater lookups and command invocations
"""

from dataclasses import dataclass, field
from enum import IntEnum
from typing import List, Optional

RESPONSE_TYPE_EPHEMERAL = "ephemeral"
RESPONSE_TYPE_IN_CHANNEL = "in_channel"


class LookupKind(IntEnum):
    """What a query asks the repeater API for"""
    BY_NAME = 0
    BY_LOCATOR = 1
    REFRESH = 2


@dataclass
class RepeaterLocation:
    """Where a repeater is"""
    lat: float = 0.0
    lng: float = 0.0
    locator: str = ""
    placename: str = ""
    region: str = ""


@dataclass
class RepeaterUpdated:
    """When the directory entry was last updated"""
    human: str = ""
    machine: int = 0


@dataclass
class RepeaterRecord:
    """A single repeater as returned by /repeater/{name}

    An empty name means upstream did not find a match.
    """
    name: str = ""
    tx: str = ""
    rx: str = ""
    tone: str = ""
    channel: str = ""
    modes: List[str] = field(default_factory=list)
    location: RepeaterLocation = field(default_factory=RepeaterLocation)
    keeper: str = ""
    api_version: str = ""
    updated: RepeaterUpdated = field(default_factory=RepeaterUpdated)

    @property
    def found(self) -> bool:
        return bool(self.name)


@dataclass
class RepeaterListResult:
    """Repeaters near a locator as returned by /findbylocator/{locator}"""
    locator: str = ""
    range: int = 0
    repeaters: List[RepeaterRecord] = field(default_factory=list)
    message: str = ""
    status: str = ""
    repeater_list: List[str] = field(default_factory=list)

    @property
    def found(self) -> bool:
        return len(self.repeaters) > 0


@dataclass
class LookupRequest:
    """A normalized query plus the prefix that decided its kind"""
    query: str
    prefix: str
    kind: LookupKind


@dataclass
class CommandArgs:
    """A command invocation as delivered by the host"""
    command: str
    user_id: Optional[str] = None
    channel_id: Optional[str] = None

    @property
    def fields(self) -> List[str]:
        return self.command.split()

    @property
    def trigger(self) -> str:
        parts = self.fields
        return parts[0].lstrip('/').lower() if parts else ''


@dataclass
class CommandResponse:
    """The single reply returned to the host for an invocation"""
    text: str
    response_type: str = RESPONSE_TYPE_EPHEMERAL
