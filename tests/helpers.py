from PIL import Image

from logo_cruncher.processors.color_analysis import DominantColor

RED = (255, 0, 0)
BLACK = (0, 0, 0)
WHITE = (255, 255, 255)


def solid(size, color, mode="RGB"):
    if mode == "RGBA" and len(color) == 3:
        color = (*color, 255)
    return Image.new(mode, size, color)


def square_on(background, foreground, size, box, mode="RGB"):
    """A background-colored canvas with one filled rectangle ``box``."""
    image = solid(size, background, mode)
    fill = (*foreground, 255) if mode == "RGBA" else foreground
    image.paste(fill, box)
    return image


def dominant(color=RED, score=0.9, cluster_count=3):
    return DominantColor(
        color=color,
        score=score,
        brightness=round(sum(color) / 3),
        cluster_count=cluster_count,
    )
