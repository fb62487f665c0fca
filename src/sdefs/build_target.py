# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""Build targets and the define groups they belong to."""

from enum import Enum


class BuildTarget(str, Enum):
    """Concrete player build target."""

    STANDALONE_OSX_INTEL = "StandaloneOSXIntel"
    STANDALONE_OSX_INTEL64 = "StandaloneOSXIntel64"
    STANDALONE_OSX_UNIVERSAL = "StandaloneOSXUniversal"
    STANDALONE_LINUX = "StandaloneLinux"
    STANDALONE_LINUX64 = "StandaloneLinux64"
    STANDALONE_LINUX_UNIVERSAL = "StandaloneLinuxUniversal"
    STANDALONE_WINDOWS = "StandaloneWindows"
    STANDALONE_WINDOWS64 = "StandaloneWindows64"
    IOS = "iOS"
    ANDROID = "Android"
    WEBGL = "WebGL"
    WSA_PLAYER = "WSAPlayer"
    TIZEN = "Tizen"
    PSP2 = "PSP2"
    PS4 = "PS4"
    XBOX_ONE = "XboxOne"
    N3DS = "N3DS"
    WII_U = "WiiU"
    TVOS = "tvOS"
    SWITCH = "Switch"
    NO_TARGET = "NoTarget"


class BuildTargetGroup(str, Enum):
    """Platform family sharing one scripting define string."""

    UNKNOWN = "Unknown"
    STANDALONE = "Standalone"
    IOS = "iOS"
    ANDROID = "Android"
    WEBGL = "WebGL"
    WSA = "WSA"
    TIZEN = "Tizen"
    PSP2 = "PSP2"
    PS4 = "PS4"
    XBOX_ONE = "XboxOne"
    N3DS = "N3DS"
    WII_U = "WiiU"
    TVOS = "tvOS"
    SWITCH = "Switch"


DEFAULT_BUILD_TARGET = BuildTarget.STANDALONE_WINDOWS64

_TARGET_GROUPS: dict[BuildTarget, BuildTargetGroup] = {
    BuildTarget.STANDALONE_OSX_INTEL: BuildTargetGroup.STANDALONE,
    BuildTarget.STANDALONE_OSX_INTEL64: BuildTargetGroup.STANDALONE,
    BuildTarget.STANDALONE_OSX_UNIVERSAL: BuildTargetGroup.STANDALONE,
    BuildTarget.STANDALONE_LINUX: BuildTargetGroup.STANDALONE,
    BuildTarget.STANDALONE_LINUX64: BuildTargetGroup.STANDALONE,
    BuildTarget.STANDALONE_LINUX_UNIVERSAL: BuildTargetGroup.STANDALONE,
    BuildTarget.STANDALONE_WINDOWS: BuildTargetGroup.STANDALONE,
    BuildTarget.STANDALONE_WINDOWS64: BuildTargetGroup.STANDALONE,
    BuildTarget.IOS: BuildTargetGroup.IOS,
    BuildTarget.ANDROID: BuildTargetGroup.ANDROID,
    BuildTarget.WEBGL: BuildTargetGroup.WEBGL,
    BuildTarget.WSA_PLAYER: BuildTargetGroup.WSA,
    BuildTarget.TIZEN: BuildTargetGroup.TIZEN,
    BuildTarget.PSP2: BuildTargetGroup.PSP2,
    BuildTarget.PS4: BuildTargetGroup.PS4,
    BuildTarget.XBOX_ONE: BuildTargetGroup.XBOX_ONE,
    BuildTarget.N3DS: BuildTargetGroup.N3DS,
    BuildTarget.WII_U: BuildTargetGroup.WII_U,
    BuildTarget.TVOS: BuildTargetGroup.TVOS,
    BuildTarget.SWITCH: BuildTargetGroup.SWITCH,
}


def target_to_group(target: BuildTarget) -> BuildTargetGroup:
    """Return the define group used by a build target.

    Args:
        target: Concrete build target.

    Returns:
        Matching group, or ``BuildTargetGroup.UNKNOWN`` for unmapped targets.
    """
    return _TARGET_GROUPS.get(target, BuildTargetGroup.UNKNOWN)


def parse_build_target(text: str) -> BuildTarget:
    """Parse a build target name case-insensitively.

    Args:
        text: Target name such as ``StandaloneLinux64`` or ``android``.

    Returns:
        Matching build target.

    Raises:
        ValueError: If the name is not a known target.
    """
    wanted = text.strip().lower()
    for target in BuildTarget:
        if target.value.lower() == wanted:
            return target
    raise ValueError(f"Unsupported build target: {text}")
