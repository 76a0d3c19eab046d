"""
Render an ordered palette as a CSS linear-gradient value.
"""

from palette import Color


# Final stop that fades the gradient into the page background colour
PAGE_BACKGROUND_STOP = 'rgb(var(--page-background))'


def rgba_stop(color: Color, alpha: float = 1.0) -> str:
    return 'rgba(%d,%d,%d,%.1f)' % (color.red, color.green, color.blue, alpha)


def render_gradient(palette: list[Color], direction: str = 'left',
                    trailing_stop: str = '') -> str:
    """
    Serialize colours as `linear-gradient(to <direction>,rgba(...),...)`.

    Args:
        palette: Colours in stop order
        direction: Side keyword after "to" (left, right, top, bottom, ...)
        trailing_stop: Optional extra stop appended after the colours

    Returns:
        e.g. "linear-gradient(to right,rgba(0,0,0,1.0))"
    """
    if not direction:
        raise ValueError("Gradient direction must not be empty")

    terms = [f'to {direction}']
    terms.extend(rgba_stop(color) for color in palette)
    if trailing_stop:
        terms.append(trailing_stop)

    return f"linear-gradient({','.join(terms)})"
