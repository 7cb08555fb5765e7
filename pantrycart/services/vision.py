import base64
import logging
import re
from typing import List, Sequence, Tuple

from pantrycart.prompts import INGREDIENTS_PROMPT
from pantrycart.schemas.dto import DetectedGroceryItem
from pantrycart.services.ai_client import AiClient
from pantrycart.services.ai_interpreter import AiResponseInterpreter, default_interpreter, merge_detections

logger = logging.getLogger(__name__)

DATA_URL_RE = re.compile(r"^data:([^;]+);base64,(.+)$", re.DOTALL)
DEFAULT_MIME = "image/jpeg"


def parse_image_input(value: str) -> Tuple[str, str]:
    """Split a data URL into (base64, mime type); plain base64 is assumed JPEG."""
    trimmed = (value or "").strip()
    m = DATA_URL_RE.match(trimmed)
    if m:
        return m.group(2), m.group(1) or DEFAULT_MIME
    return trimmed, DEFAULT_MIME


class IngredientDetector:
    """Ask the vision model which groceries are visible in a photo or video frame."""

    def __init__(self, ai_client: AiClient, interpreter: AiResponseInterpreter = default_interpreter):
        self.ai_client = ai_client
        self.interpreter = interpreter

    def detect(self, image: str) -> List[DetectedGroceryItem]:
        b64, mime = parse_image_input(image)
        if not b64:
            raise ValueError("image data is empty")
        raw = self.ai_client.generate_from_image(b64, mime, INGREDIENTS_PROMPT)
        return self.interpreter.interpret_vision_response(raw)

    def detect_frames(self, frames: Sequence[str]) -> List[DetectedGroceryItem]:
        # one call at a time keeps us under the provider's rate limit
        lists = []
        for i, frame in enumerate(frames):
            items = self.detect(frame)
            logger.info("frame %d: %d items detected", i, len(items))
            lists.append(items)
        return merge_detections(lists)


def recognize_from_file(file, detector: IngredientDetector) -> List[DetectedGroceryItem]:
    """Run detection on an uploaded werkzeug FileStorage."""
    data = file.read()
    if not data:
        raise ValueError("uploaded image is empty")
    mime = file.mimetype if (file.mimetype or "").startswith("image/") else DEFAULT_MIME
    b64 = base64.b64encode(data).decode("ascii")
    return detector.detect(f"data:{mime};base64,{b64}")


def recognize_from_files(files, detector: IngredientDetector) -> List[DetectedGroceryItem]:
    if len(files) == 1:
        return recognize_from_file(files[0], detector)
    return merge_detections([recognize_from_file(f, detector) for f in files])
