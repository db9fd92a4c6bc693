from __future__ import annotations

import json

from catalog_favorites.utils.error_responses import build_error_response, error_json_response


def test_build_error_response_has_single_error_field() -> None:
    assert build_error_response("Product not found").model_dump() == {"error": "Product not found"}


def test_error_json_response_sets_status_and_headers() -> None:
    response = error_json_response(
        status_code=429,
        message="Too many requests",
        headers={"Retry-After": "42"},
    )

    assert response.status_code == 429
    assert response.headers["retry-after"] == "42"
    assert json.loads(response.body.decode()) == {"error": "Too many requests"}
