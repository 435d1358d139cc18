from dataclasses import dataclass


# fmt: off
@dataclass(frozen=True)
class ShortURLModel:
    target: str     # Original long URL
    shortcode: str  # Short identifier the long URL is stored under
# fmt: on
