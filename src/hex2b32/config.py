"""
Encoder configuration

Case and padding policy are chosen by the caller and fixed for the
lifetime of an encoder.
"""

from dataclasses import dataclass
from enum import Enum


class CaseMode(Enum):
    """Letter case of emitted symbols"""
    UPPER = "upper"
    LOWER = "lower"


@dataclass(frozen=True)
class EncoderConfig:
    """
    Output policy for a Base32Encoder

    Digits are never affected by the case mode, only the letters A-Z.
    """
    case: CaseMode = CaseMode.UPPER

    # Whether finalize() appends '=' characters to fill the last 8-symbol block
    padding: bool = True
