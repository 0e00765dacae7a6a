"""Structural scanning, test merging and build verification for Java projects."""

from .models import (
    BuildInvocation,
    BuildResult,
    DirectiveSet,
    LocationInfo,
    MemberSignature,
    UnitInfo,
)
from .parsing import extract_members, extract_unit_info
from .paths import PathResolver

__all__ = [
    "BuildInvocation",
    "BuildResult",
    "DirectiveSet",
    "LocationInfo",
    "MemberSignature",
    "PathResolver",
    "UnitInfo",
    "extract_members",
    "extract_unit_info",
]
