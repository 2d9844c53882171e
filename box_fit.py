"""
Sizes rendered text to its window and the window to its text.

grow_to_fill() raises the font size until the text covers a target fraction
of its axes. shrink_container_to_aspect() then cuts the window down along the
axis with leftover space, so the window has the same aspect as the text.
"""

from collections import namedtuple

import config
from errors import DegenerateRender, ScalingDidNotConverge

# Relative overshoot per growth step, so float rounding can't leave the
# extent a hair under the target.
OVERSHOOT = 1e-12


class Container(namedtuple("Container", ["x", "y", "width", "height"])):
    """
    A resizable rectangle. For figures, x and y are 0 and the size is in inches.
    """

    __slots__ = ()

    @classmethod
    def from_figure(cls, fig):
        width, height = fig.get_size_inches()
        return cls(0.0, 0.0, float(width), float(height))

    def apply_to(self, fig):
        fig.set_size_inches(self.width, self.height, forward=True)

    @property
    def aspect(self):
        return self.width / self.height


class TextBlock:
    """
    A matplotlib Text measured as a fraction of the axes holding it.
    """

    def __init__(self, text):
        self.text = text

    @property
    def fontsize(self):
        return self.text.get_fontsize()

    @fontsize.setter
    def fontsize(self, value):
        self.text.set_fontsize(value)

    def scale(self, factor):
        self.fontsize = self.fontsize * factor

    def extent(self):
        fig = self.text.figure
        renderer = fig.canvas.get_renderer()
        bbox = self.text.get_window_extent(renderer)
        axes_bbox = self.text.axes.get_window_extent(renderer)
        if axes_bbox.width <= 0 or axes_bbox.height <= 0:
            return 0.0, 0.0
        return bbox.width / axes_bbox.width, bbox.height / axes_bbox.height


def grow_to_fill(block, target_fraction=None, max_iterations=None):
    """
    Scales block until its larger extent reaches target_fraction of the
    container. Returns the block.

    block needs extent() -> (w, h) as container fractions and scale(factor).
    """
    if target_fraction is None:
        target_fraction = config.TARGET_FRACTION
    if max_iterations is None:
        max_iterations = config.MAX_FIT_ITERATIONS
    if not 0 < target_fraction <= 1:
        raise ValueError(f"target_fraction must be in (0, 1], got {target_fraction}")

    size = max(block.extent())
    if size <= 0:
        raise DegenerateRender("The rendered equation is empty and can't be scaled")

    iterations = 0
    while size < target_fraction:
        if iterations >= max_iterations:
            raise ScalingDidNotConverge(
                f"Equation size stuck at {size:.3f} after {iterations} steps"
            )
        # Use the ratio of current size to target to scale up quickly
        block.scale(target_fraction / size * (1 + OVERSHOOT))
        iterations += 1

        size = max(block.extent())
        if size <= 0:
            raise DegenerateRender("The rendered equation collapsed while scaling")

    return block


def shrink_container_to_aspect(container, block):
    """
    Shrinks the container along the axis the block doesn't fill.
    block.extent() gives (w, h) as fractions of the container.
    """
    w, h = block.extent()
    if w <= 0 or h <= 0:
        raise DegenerateRender("The rendered equation has no width or height")

    if w > h:
        # Equation is wide...
        return container._replace(height=container.height * h / w)
    # Equation is tall...
    return container._replace(width=container.width * w / h)
