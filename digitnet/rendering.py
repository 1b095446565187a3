"""Terminal rendering of digit images and network predictions."""
from __future__ import annotations

import math

import numpy as np

RESET = "\x1b[0m"


def _cell(value: int) -> str:
    return f"\x1b[48;2;{value};{value};{value}m  {RESET}"


def render_image(pixels: np.ndarray) -> str:
    """Render a flattened square greyscale image with 24-bit background colours."""
    flat = np.asarray(pixels).reshape(-1)
    size = math.isqrt(flat.size)
    if size * size != flat.size:
        raise ValueError(f"expected a square image, got {flat.size} pixels")
    rows = flat.reshape(size, size)
    return "\n".join("".join(_cell(int(px)) for px in row) for row in rows)


def render_probabilities(output: np.ndarray) -> str:
    dots = "".join(
        f"\x1b[48;2;0;0;0m\x1b[38;2;{px};{px};{px}m ● {RESET}"
        for px in (int(np.clip(p, 0.0, 1.0) * 255) for p in output)
    )
    percentages = "".join(f"{int(round(p * 100)):<3}" for p in output)
    return f"{dots}\n{percentages}"


def render_prediction(label: int, pixels: np.ndarray, output: np.ndarray, cost: float) -> str:
    best = int(np.argmax(output))
    header = " " + "".join(f"{digit:<3}" for digit in range(len(output)))
    return "\n".join(
        [
            str(label),
            render_image(pixels),
            header,
            render_probabilities(output),
            f"({best}, {float(output[best])})",
            f"cost: {cost}",
        ]
    )
