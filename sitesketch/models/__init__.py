"""Request and stream models."""
from sitesketch.models.request import GenerationRequest, ImagePayload, MODIFY_TEMPLATE
from sitesketch.models.events import ChunkEvent, CLOSE_EVENT, DATA_PREFIX

__all__ = ["GenerationRequest", "ImagePayload", "MODIFY_TEMPLATE", "ChunkEvent", "CLOSE_EVENT", "DATA_PREFIX"]
