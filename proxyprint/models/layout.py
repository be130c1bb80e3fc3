from enum import Enum


class Layout(str, Enum):
    """Physical sheet layouts a proxy PDF can be printed on."""

    # 3x3 grid on a portrait letter page, cut by hand
    SELF_CUT = "self-cut"

    # 3x2 grid on a landscape page matching perforated card stock
    AVERY = "avery"
