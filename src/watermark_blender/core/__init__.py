# Blend weight is a percentage contribution of the watermark color
MIN_WEIGHT: int = 0
MAX_WEIGHT: int = 100

# 8-bit channels
CHANNEL_MIN: int = 0
CHANNEL_MAX: int = 255
OPAQUE_ALPHA: int = 255
TRANSPARENT_ALPHA: int = 0  # Alpha filter skips watermark pixels with exactly this alpha

# Accepted source formats
REQUIRED_COLOR_COMPONENTS: int = 3  # RGB, alpha not counted
SUPPORTED_BIT_DEPTHS: frozenset[int] = frozenset({24, 32})  # RGB / RGBA
