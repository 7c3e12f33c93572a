"""RGB colors attached to entities and log messages."""

Color = tuple[int, int, int]

WHITE: Color = (255, 255, 255)
RED: Color = (255, 0, 0)
DARK_RED: Color = (191, 0, 0)
ORANGE: Color = (255, 127, 0)
GREEN: Color = (0, 255, 0)
LIGHT_GREEN: Color = (63, 255, 63)
DESATURATED_GREEN: Color = (63, 127, 63)
DARKER_GREEN: Color = (0, 127, 0)
LIGHT_CYAN: Color = (115, 255, 255)
LIGHT_YELLOW: Color = (255, 255, 115)
LIGHT_VIOLET: Color = (184, 115, 255)
VIOLET: Color = (127, 0, 255)
SKY: Color = (0, 191, 255)
DARKER_ORANGE: Color = (127, 63, 0)
YELLOW: Color = (255, 255, 0)
