import pytest

from sitesketch.exceptions import UploadRejectedError
from sitesketch.models.request import GenerationRequest
from sitesketch.utils.uploads import validate_images


def test_within_limits(make_image):
    validate_images([make_image(200) for _ in range(5)], max_images=5, max_total_bytes=1000)


def test_empty_is_fine():
    validate_images([], max_images=5, max_total_bytes=1000)


def test_too_many(make_image):
    with pytest.raises(UploadRejectedError) as exc:
        validate_images([make_image(1) for _ in range(6)], max_images=5, max_total_bytes=1000)
    assert exc.value.status_code == 400


def test_total_size_limit(make_image):
    with pytest.raises(UploadRejectedError) as exc:
        validate_images([make_image(600), make_image(600)], max_images=5, max_total_bytes=1000)
    assert exc.value.status_code == 413


def test_generation_request_is_frozen(make_image):
    request = GenerationRequest(prompt="p", provider="google", model="m", images=[make_image()])
    assert not request.is_modify
    assert request.provider_prompt == "p"
    with pytest.raises(Exception):
        request.prompt = "changed"
