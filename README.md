# dfine-detect

Image preparation and detection decoding for D-FINE style object detectors
that report classes from the COCO label set.

The package takes an uncompressed camera frame and turns it into an RGB
image. It letterboxes that image onto a black square and builds a normalised
`(1, 3, H, W)` float32 tensor from it. It then hands the tensor to an
inference session that you supply. The session's boxes, labels and scores
are mapped back to the original image's coordinates. Candidates scoring under
the confidence threshold, or whose class was not selected, are dropped.

## Installation

```
pip install .
```

To run the tests:

```
pip install ".[test]"
pytest
```

## Modules

### `dfine_detect.messages`

Plain data types:

- `PixelFormat`: the frame layouts `RGB888`, `RGBA8888`, `NV12`, `YUV420`,
  `YUV422` and `YUV444`.
- `RawImage(format, width, height, data=b"")`: a frame. A `format` of `None`
  stands for a message that carries no image.
- `AxisAlignedBox(x, y, width, height)`: a box given by its top-left corner
  and its size. `AxisAlignedBox.from_corners(x0, y0, x1, y1)` builds one from
  two corners.
- `Detection(geometry, confidence, class_id)`: one detected object.
- `Detections(boxes)`: the detections for one image. It can be iterated and
  supports `len()`.

### `dfine_detect.labels`

- `coco91_labels()` returns the 80 class names, in the order of the model's
  label ids.
- `active_label_ids(classes)` returns the set of label ids to keep.
  - With `None`, every id is kept.
  - Otherwise only the ids of the named classes are kept, and unknown names
    are ignored.

### `dfine_detect.imaging`

- `raw_to_rgb(image)` converts a `RawImage` to an RGB `PIL.Image.Image`.
  - RGB888 data must be exactly `width * height * 3` bytes.
  - RGBA8888 data must be exactly `width * height * 4` bytes. The alpha
    channel is dropped.
  - NV12 and the YUV formats need at least `width * height` bytes. Only
    their luma plane is used, shown as gray.
  - A frame that does not fit its format, or has no or an unsupported format,
    raises `ImageConversionError` (a subclass of `ValueError`).
- `resize_with_aspect_ratio(image, target_size=640)` scales the image
  bilinearly to fit a `target_size` square and centres it on black padding.
  It returns `(padded_image, scale, pad_w, pad_h)`.
- `image_to_tensor(image)` returns a float32 array of shape `(1, 3, H, W)`
  with values in `[0, 1]`.

### `dfine_detect.model`

`Model(session, confidence_threshold=0.2, classes=None)` wraps an inference
session. The session can be any object with a `run(output_names, input_feed)`
method, in the style of ONNX Runtime's `InferenceSession`.

`Model.predict(image)` does the following:

1. Converts and letterboxes the frame to 640×640.
2. Calls the session with the inputs `images` (the tensor) and
   `orig_target_sizes` (an int64 `[[height, width]]` of the original image).
3. Asks the session for the outputs `boxes`, `labels` and `scores`, in that
   order.
4. Returns a `Detections`.

`Model.decode(boxes, labels, scores, ratio, pad_w, pad_h)` applies the same
filtering and coordinate mapping to outputs computed elsewhere:

- The number of candidates is the first dimension of `boxes`.
- Each candidate's corners are four consecutive values.
- Scores equal to the threshold are kept.

## Usage

```python
from dfine_detect.messages import PixelFormat, RawImage
from dfine_detect.model import Model

model = Model(session, confidence_threshold=0.2, classes=["person", "car"])

frame_bytes = bytes(1280 * 720 * 3)  # an all-black RGB888 frame
frame = RawImage(PixelFormat.RGB888, width=1280, height=720, data=frame_bytes)
detections = model.predict(frame)

for detection in detections:
    box = detection.geometry
    print(detection.class_id, detection.confidence, box.x, box.y, box.width, box.height)
```

## What this package does not do

- It does not load model weights or run a neural network itself. You create
  the inference session and pass it to `Model`.
- It provides no command-line program.
- It provides no service that receives frames from, or publishes detections
  to, a message bus.
- It does not serialise messages to or from a wire format.