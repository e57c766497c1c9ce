from .crop_detections import crop_detections, pad_normalized
from .prepare_capture import prepare_capture, prepare_captures
