from enum import Enum


class OverflowMode(Enum):
    WRAP = "wrap"
    CHECKED = "checked"


class FormatStage(Enum):
    DIMENSIONS = "dimensions"
    VALUES = "values"
