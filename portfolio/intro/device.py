"""Classify the visitor's device from its declared platform string."""

import re

from portfolio.models import DeviceClass

_TOUCH_ONLY = re.compile(
    r"Android|webOS|iPhone|iPad|iPod|BlackBerry|IEMobile|Opera Mini",
    re.IGNORECASE,
)


def is_touch_only_device(platform: str | None) -> bool:
    """True for phones and tablets, which get a static background and no autoplay."""
    if not platform:
        return False
    return bool(_TOUCH_ONLY.search(platform))


def classify_device(platform: str | None) -> DeviceClass:
    return DeviceClass.MOBILE if is_touch_only_device(platform) else DeviceClass.DESKTOP
