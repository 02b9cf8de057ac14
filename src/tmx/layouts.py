"""Layout planning for tmx windows.

Everything here is pure: given config entities (and, for sizes, the live
window dimensions) it decides how panes are split, which tmux layout a window
gets and how many cells an explicit pane size amounts to.
"""

from tmx.config import LayoutName, Pane, SizeSpec, SplitDirection, Window, parse_size


def determine_split_direction(pane_index: int, pane: Pane) -> SplitDirection:
    """Pick the split that creates a pane.

    An explicit ``split`` always wins. Otherwise panes alternate: odd
    positions (1, 3, 5, ...) split side-by-side, even positions stack.

    Args:
        pane_index: 0-based position of the pane in its window.
        pane: The pane config.

    Returns:
        The split direction.
    """
    if pane.split is not None:
        return SplitDirection(pane.split)
    return SplitDirection.HORIZONTAL if pane_index % 2 == 1 else SplitDirection.VERTICAL


def determine_layout(window: Window, pane_count: int) -> str:
    """Pick the tmux layout for a window.

    An explicit ``layout`` wins; two panes get ``even-horizontal`` and three
    or more get ``tiled``. Single-pane windows never have a layout applied,
    so the value returned for them is not used.

    Args:
        window: The window config.
        pane_count: Number of panes the window is meant to have.

    Returns:
        The tmux layout name.
    """
    if window.layout is not None:
        return window.layout
    if pane_count == 2:
        return LayoutName.EVEN_HORIZONTAL.value
    return LayoutName.TILED.value


def governing_dimension(direction: SplitDirection, width: int, height: int) -> int:
    """Width for side-by-side panes, height for stacked ones."""
    return width if direction == SplitDirection.HORIZONTAL else height


def resolve_size(size: str | SizeSpec, dimension: int) -> int:
    """Turn a size value into an absolute cell/line count.

    Args:
        size: ``"N%"``, an absolute count, or an already parsed size.
        dimension: The window width or height the size applies to.

    Returns:
        ``floor(dimension * N / 100)`` for percentages, the count otherwise.

    Raises:
        InvalidShellArgError: If ``size`` is a string that does not parse.
    """
    spec = size if isinstance(size, SizeSpec) else parse_size(size)
    if spec.percent:
        return dimension * spec.value // 100
    return spec.value
