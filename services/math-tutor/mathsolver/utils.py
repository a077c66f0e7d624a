from PIL import Image
import base64
import io
import numpy as np
from typing import Union

Frame = Union[Image.Image, np.ndarray]


def to_pil(frame: Frame) -> Image.Image:
    """Accept a Pillow image or an HxWx3 uint8 array (RGB) and return an RGB image."""
    if isinstance(frame, Image.Image):
        return frame if frame.mode == "RGB" else frame.convert("RGB")
    arr = np.asarray(frame)
    if arr.dtype != np.uint8:
        arr = np.clip(arr, 0, 255).astype(np.uint8)
    if arr.ndim == 2:
        return Image.fromarray(arr).convert("RGB")
    if arr.shape[2] == 4:
        return Image.fromarray(arr).convert("RGB")
    return Image.fromarray(np.ascontiguousarray(arr[:, :, :3]))


def image_to_data_url(image: Image.Image, fmt: str = "PNG") -> str:
    buffer = io.BytesIO()
    image.save(buffer, format=fmt)
    encoded = base64.b64encode(buffer.getvalue()).decode("utf-8")
    return f"data:image/{fmt.lower()};base64,{encoded}"


def bytes_to_data_url(contents: bytes, content_type: str) -> str:
    encoded = base64.b64encode(contents).decode("utf-8")
    return f"data:{content_type};base64,{encoded}"


def is_image_data_url(value: str) -> bool:
    return isinstance(value, str) and value.startswith("data:image/") and ";base64," in value
