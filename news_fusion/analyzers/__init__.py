"""Generation-backed analysis stages."""

from .fusion import TAG_POLICIES, FusionRequester, apply_tag_policy, build_report

__all__ = ["FusionRequester", "build_report", "apply_tag_policy", "TAG_POLICIES"]
