"""Rubocheck project model: modules, SDKs and read access."""

from rubocheck.project.access import DirectReadAccess, LockedReadAccess, ReadAccess
from rubocheck.project.models import RUBY_SDK_KIND, ModuleContext, Project, SdkDescriptor

__all__ = [
    "RUBY_SDK_KIND",
    "DirectReadAccess",
    "LockedReadAccess",
    "ModuleContext",
    "Project",
    "ReadAccess",
    "SdkDescriptor",
]
