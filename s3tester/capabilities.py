"""Capability warnings for the requested addressing style and features.

Warnings are advisory text only; they never block a run.
"""

from typing import Iterable

from s3tester.models import ACLSupport, AddressingStyle, PolicySupport, ProviderProfile
from s3tester.providers import CUSTOM_PROVIDER

FEATURE_POLICY = "policy"
FEATURE_ACL = "acl"

WARNING_SEPARATOR = "\n"


def _describe(level: str, notes: str) -> str:
    return f"{level} ({notes})" if notes else level


def capability_warnings(
    style: AddressingStyle,
    requested_features: Iterable[str],
    profile: ProviderProfile,
) -> list[str]:
    """Cross-reference the requested style and features with a provider profile.

    Rules are evaluated independently in a fixed order: unsupported
    path-style, deprecated path-style, bucket policy support, ACL support.

    Args:
        style: Requested addressing style.
        requested_features: Optional checks requested (``policy``, ``acl``).
        profile: Capability profile of the detected provider.

    Returns:
        Warning strings in evaluation order.
    """
    features = set(requested_features)
    is_custom = profile.key == CUSTOM_PROVIDER
    warnings: list[str] = []

    if style is AddressingStyle.PATH_STYLE:
        if not profile.path_style:
            if is_custom:
                warnings.append(
                    "Warning: --path-style addressing may not be supported by this "
                    "provider. Try removing --path-style flag."
                )
            else:
                warnings.append(
                    f"Warning: {profile.name} does not support path-style addressing. "
                    "Remove --path-style to use virtual-hosted addressing."
                )
        elif profile.path_style_deprecated:
            warnings.append(
                f"Note: path-style addressing is deprecated by {profile.name}. "
                f"{profile.notes}".rstrip()
            )

    if FEATURE_POLICY in features and profile.policy_support is not PolicySupport.FULL:
        if is_custom:
            warnings.append(
                "Warning: bucket policy support of this endpoint is unknown; "
                "policy results may be incomplete."
            )
        else:
            warnings.append(
                f"Warning: {profile.name} bucket policy support: "
                f"{_describe(profile.policy_support.value, profile.notes)}."
            )

    if FEATURE_ACL in features and profile.acl_support is not ACLSupport.FULL:
        if is_custom:
            warnings.append(
                "Warning: ACL support of this endpoint is unknown; "
                "ACL results may be incomplete."
            )
        else:
            warnings.append(
                f"Warning: {profile.name} ACL support: "
                f"{_describe(profile.acl_support.value, profile.notes)}."
            )

    return warnings


def join_warnings(warnings: Iterable[str]) -> str:
    return WARNING_SEPARATOR.join(warnings)
