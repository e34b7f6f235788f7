"""Style label resolution for extracted text."""

DEFAULT_FONT_SIZE = 14.0

# (minimum font size, label), checked in order
FONT_SIZE_BUCKETS: list[tuple[float, str]] = [
    (32, "Heading L"),
    (24, "Heading M"),
    (18, "Heading S"),
    (14, "Body M"),
]
SMALLEST_LABEL = "Body S"


def map_font_size_to_style(font_size: float | None) -> str:
    """Bucket a font size into a coarse style label."""
    size = DEFAULT_FONT_SIZE if font_size is None else font_size
    for minimum, label in FONT_SIZE_BUCKETS:
        if size >= minimum:
            return label
    return SMALLEST_LABEL


def resolve_style_label(style_name: str | None, font_size: float | None) -> str:
    """Named text style when the file defines one, otherwise the font-size bucket."""
    if style_name:
        return style_name
    return map_font_size_to_style(font_size)
