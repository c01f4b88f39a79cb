"""Running the detector on an image and turning its output into detections."""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any, Protocol

import numpy as np

from .imaging import image_to_tensor, raw_to_rgb, resize_with_aspect_ratio
from .labels import active_label_ids
from .messages import AxisAlignedBox, Detection, Detections, RawImage

INPUT_SIZE = 640
OUTPUT_NAMES = ("boxes", "labels", "scores")


class InferenceSession(Protocol):
    """An inference session taking named inputs and returning requested outputs."""

    def run(self, output_names: list[str], input_feed: dict[str, Any]) -> list[Any]: ...


class Model:
    """Detector over an inference session, filtered by score and class."""

    def __init__(
        self,
        session: InferenceSession,
        confidence_threshold: float = 0.2,
        classes: Iterable[str] | None = None,
    ) -> None:
        self.session = session
        self.confidence_threshold = float(confidence_threshold)
        self.active_label_ids = active_label_ids(classes)

    def predict(self, image: RawImage) -> Detections:
        """Detect objects in a raw image, in original-image coordinates."""
        rgb = raw_to_rgb(image)
        resized, ratio, pad_w, pad_h = resize_with_aspect_ratio(rgb, INPUT_SIZE)
        width, height = rgb.size
        feed = {
            "images": image_to_tensor(resized),
            "orig_target_sizes": np.array([[height, width]], dtype=np.int64),
        }
        boxes, labels, scores = self.session.run(list(OUTPUT_NAMES), feed)
        return self.decode(boxes, labels, scores, ratio, pad_w, pad_h)

    def decode(
        self,
        boxes: Any,
        labels: Any,
        scores: Any,
        ratio: float,
        pad_w: int,
        pad_h: int,
    ) -> Detections:
        """Turn raw model outputs into detections, undoing resize and padding.

        The number of candidates is the first dimension of ``boxes``; each
        candidate's corners are read as four consecutive values.
        """
        box_array = np.asarray(boxes, dtype=np.float32)
        corners = box_array.reshape(-1)
        label_ids = np.asarray(labels).reshape(-1)
        score_values = np.asarray(scores, dtype=np.float32).reshape(-1)
        count = box_array.shape[0] if box_array.ndim else 0

        r = np.float32(ratio)
        pw = np.float32(pad_w)
        ph = np.float32(pad_h)
        threshold = np.float32(self.confidence_threshold)

        found = []
        for i, (score, label) in enumerate(zip(score_values[:count], label_ids[:count])):
            label_id = int(label)
            if score < threshold or label_id not in self.active_label_ids:
                continue
            x0, y0, x1, y1 = corners[i * 4 : i * 4 + 4]
            geometry = AxisAlignedBox.from_corners(
                float((x0 - pw) / r),
                float((y0 - ph) / r),
                float((x1 - pw) / r),
                float((y1 - ph) / r),
            )
            found.append(Detection(geometry, float(score), label_id))
        return Detections(found)