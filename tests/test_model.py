import numpy as np
import pytest

from dfine_detect.imaging import ImageConversionError
from dfine_detect.labels import coco91_labels
from dfine_detect.messages import PixelFormat, RawImage
from dfine_detect.model import Model


class FakeSession:
    def __init__(self, boxes, labels, scores):
        self.outputs = [boxes, labels, scores]
        self.calls = []

    def run(self, output_names, input_feed):
        self.calls.append((list(output_names), input_feed))
        return self.outputs


def _outputs():
    boxes = np.array(
        [[10.0, 20.0, 110.0, 220.0], [0.0, 0.0, 5.0, 5.0], [30.0, 40.0, 50.0, 60.0]],
        dtype=np.float32,
    )
    labels = np.array([0, 16, 2], dtype=np.int64)
    scores = np.array([0.9, 0.1, 0.6], dtype=np.float32)
    return boxes, labels, scores


def test_decode_filters_by_score():
    model = Model(FakeSession(*_outputs()), confidence_threshold=0.5)
    result = model.decode(*_outputs(), ratio=1.0, pad_w=0, pad_h=0)
    assert [d.class_id for d in result] == [0, 2]


def test_decode_filters_by_class():
    model = Model(FakeSession(*_outputs()), confidence_threshold=0.05, classes=["car"])
    result = model.decode(*_outputs(), ratio=1.0, pad_w=0, pad_h=0)
    assert [d.class_id for d in result] == [coco91_labels().index("car")]


def test_decode_identity_transform_keeps_corners():
    model = Model(FakeSession(*_outputs()), confidence_threshold=0.5)
    boxes, labels, scores = _outputs()
    result = model.decode(boxes, labels, scores, ratio=1.0, pad_w=0, pad_h=0)
    first = result.boxes[0]
    assert first.geometry.x == boxes[0, 0]
    assert first.geometry.y == boxes[0, 1]
    assert first.geometry.x + first.geometry.width == boxes[0, 2]
    assert first.geometry.y + first.geometry.height == boxes[0, 3]
    assert first.confidence == pytest.approx(float(scores[0]))


def test_decode_undoes_padding_and_scale():
    model = Model(FakeSession(*_outputs()), confidence_threshold=0.5)
    boxes, labels, scores = _outputs()
    plain = model.decode(boxes, labels, scores, ratio=1.0, pad_w=0, pad_h=0)
    shifted = model.decode(boxes * 2 + 7, labels, scores, ratio=2.0, pad_w=7, pad_h=7)
    for a, b in zip(plain, shifted):
        assert b.geometry.x == pytest.approx(a.geometry.x)
        assert b.geometry.y == pytest.approx(a.geometry.y)
        assert b.geometry.width == pytest.approx(a.geometry.width)
        assert b.geometry.height == pytest.approx(a.geometry.height)


def test_decode_unknown_negative_label_skipped():
    model = Model(FakeSession(*_outputs()), confidence_threshold=0.0)
    boxes = np.zeros((1, 4), dtype=np.float32)
    result = model.decode(boxes, np.array([-1]), np.array([0.99]), 1.0, 0, 0)
    assert len(result) == 0


def test_predict_feeds_session_and_decodes():
    session = FakeSession(*_outputs())
    model = Model(session, confidence_threshold=0.5)
    width, height = 8, 4
    image = RawImage(PixelFormat.RGB888, width, height, bytes(width * height * 3))
    result = model.predict(image)

    names, feed = session.calls[0]
    assert names == ["boxes", "labels", "scores"]
    assert feed["images"].shape == (1, 3, 640, 640)
    assert feed["orig_target_sizes"].tolist() == [[height, width]]
    assert feed["orig_target_sizes"].dtype == np.int64
    assert [d.class_id for d in result] == [0, 2]


def test_predict_rejects_bad_image():
    session = FakeSession(*_outputs())
    model = Model(session)
    with pytest.raises(ImageConversionError):
        model.predict(RawImage(PixelFormat.RGB888, 2, 2, b"\x00"))
    assert session.calls == []