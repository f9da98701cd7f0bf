"""Value types shared by the classifier, comparator, generator and engine.

All records are frozen dataclasses: a ``ParsedUA`` cannot be mutated after
construction, so the engine can hand the same cached instance to every
caller. Numeric version fields use ``None`` for "absent".
"""

from dataclasses import dataclass, field, asdict
from enum import Enum, IntEnum
from typing import Any, Dict, List, Optional, TypedDict


class DeviceType(str, Enum):
    DESKTOP = 'desktop'
    MOBILE = 'mobile'
    TABLET = 'tablet'
    TV = 'tv'
    WEARABLE = 'wearable'


CHANNELS = ('stable', 'beta', 'dev', 'canary', 'nightly', 'esr')


class Ordering(IntEnum):
    """Result of a version comparison; compares like the classic -1/0/1."""

    LESS = -1
    EQUAL = 0
    GREATER = 1


class SecurityLevel(str, Enum):
    HIGH = 'high'
    MEDIUM = 'medium'
    LOW = 'low'
    CRITICAL = 'critical'


@dataclass(frozen=True)
class BrowserInfo:
    name: str = 'Unknown'
    version: str = ''
    major: Optional[int] = None
    minor: Optional[int] = None
    patch: Optional[int] = None
    channel: Optional[str] = None


@dataclass(frozen=True)
class EngineInfo:
    name: str = 'Unknown'
    version: str = ''


@dataclass(frozen=True)
class OSInfo:
    name: str = 'Unknown'
    version: str = ''


@dataclass(frozen=True)
class DeviceInfo:
    type: DeviceType = DeviceType.DESKTOP
    vendor: Optional[str] = None
    model: Optional[str] = None

    def __post_init__(self):
        # accept plain strings from plugins and builders
        if not isinstance(self.type, DeviceType):
            object.__setattr__(self, 'type', DeviceType(self.type))


@dataclass(frozen=True)
class CPUInfo:
    architecture: str = 'unknown'


@dataclass(frozen=True)
class ParsedUA:
    """Structured facts extracted from one raw User-Agent string."""

    browser: BrowserInfo = field(default_factory=BrowserInfo)
    engine: EngineInfo = field(default_factory=EngineInfo)
    os: OSInfo = field(default_factory=OSInfo)
    device: DeviceInfo = field(default_factory=DeviceInfo)
    cpu: CPUInfo = field(default_factory=CPUInfo)
    is_bot: bool = False
    is_webview: bool = False
    is_headless: bool = False
    source: str = ''

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data['device']['type'] = self.device.type.value
        return data


@dataclass(frozen=True)
class ParsedVersion:
    """Canonical dotted version. Missing components stay ``None``."""

    raw: str
    major: Optional[int] = None
    minor: Optional[int] = None
    patch: Optional[int] = None
    build: Optional[int] = None
    prerelease: Optional[str] = None


@dataclass(frozen=True)
class VersionRange:
    browser_name: str
    operator: str  # one of >=, >, <=, <, ===, !==
    target_version: str


@dataclass(frozen=True)
class ModernBrowserOptions:
    es2020: bool = True
    webgl2: bool = False
    webassembly: bool = False
    service_worker: bool = False


@dataclass(frozen=True)
class FakeUAReport:
    is_fake: bool
    confidence: int
    reasons: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {'is_fake': self.is_fake, 'confidence': self.confidence, 'reasons': list(self.reasons)}


class BrowserSpec(TypedDict, total=False):
    name: str
    version: str
    major: int
    channel: str


class EngineSpec(TypedDict, total=False):
    name: str
    version: str


class OSSpec(TypedDict, total=False):
    name: str
    version: str


class DeviceSpec(TypedDict, total=False):
    type: str
    vendor: str
    model: str


class CPUSpec(TypedDict, total=False):
    architecture: str


class UAGenerateSpec(TypedDict, total=False):
    """Partial description of the UA to synthesize."""

    browser: BrowserSpec
    engine: EngineSpec
    os: OSSpec
    device: DeviceSpec
    cpu: CPUSpec


class PartialParsedUA(TypedDict, total=False):
    """What a plugin's ``parse`` may return; sub-records may be dicts or records."""

    browser: Any
    engine: Any
    os: Any
    device: Any
    cpu: Any
    is_bot: bool
    is_webview: bool
    is_headless: bool
