import logging

from signmirror.models import ReferenceDocument

logger = logging.getLogger(__name__)


def load_reference(path: str) -> ReferenceDocument:
    """Read a persisted reference recording (fps, duration, poseIndices, frames)."""
    with open(path, encoding="utf-8") as f:
        document = ReferenceDocument.model_validate_json(f.read())
    logger.info("Loaded reference %s: %d frames", path, len(document.frames))
    return document
