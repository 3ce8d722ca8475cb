import pytest

from autonavigation.handler import AutoNavigationHandler
from autonavigation.service import NavigationService


@pytest.fixture
def handler(scene, camera):
    return AutoNavigationHandler(scene, camera)


@pytest.fixture
def service(handler):
    return NavigationService(handler)


def test_go_to_starts_playback(service, handler):
    response = service.go_to({"target": "Earth", "duration": 2.0})

    assert response["success"] is True
    assert response["segment_count"] == 1
    assert response["total_duration"] == 2.0
    assert response["segments"][0]["target"] == "Earth"
    assert handler.is_playing()


def test_go_to_accepts_node_alias(service):
    assert service.go_to({"node": "Moon"})["success"] is True


def test_go_to_unknown_node_returns_structured_error(service):
    response = service.go_to({"target": "Pluto"})
    assert response == {
        "success": False,
        "error_code": "UNKNOWN_NODE",
        "error": "Failed creating path segment nr 1. Could not find node 'Pluto' to target",
        "details": {"identifier": "Pluto", "instruction_index": 0},
    }


def test_go_to_validation_error(service):
    response = service.go_to({"duration": -1})
    assert response["success"] is False
    assert response["error_code"] == "VALIDATION_ERROR"
    assert {error["field"] for error in response["details"]["errors"]} == {"node", "duration"}


def test_go_to_geo(service, handler):
    response = service.go_to_geo({"globe": "Earth", "latitude": 45.0, "longitude": 10.0, "height": 3.0})
    assert response["success"] is True
    assert handler.is_playing()


def test_go_to_geo_rejects_bad_latitude(service):
    response = service.go_to_geo({"globe": "Earth", "latitude": 120.0, "longitude": 0.0})
    assert response["error_code"] == "VALIDATION_ERROR"


def test_create_path_does_not_start(service, handler):
    response = service.create_path({"Instructions": [{"Target": "Earth"}, {"Target": "Moon", "Duration": 1.0}]})

    assert response["success"] is True
    assert response["segment_count"] == 2
    assert response["total_duration"] == pytest.approx(6.0)
    assert not handler.is_playing()


def test_create_path_invalid_record(service):
    response = service.create_path({"Instructions": [{"Target": "Earth", "Duration": 0}]})
    assert response["error_code"] == "INVALID_INSTRUCTION"
    assert response["details"]["instruction_index"] == 0


def test_add_to_path_and_start(service, handler):
    assert service.add_to_path({"target": "Earth", "duration": 1.0})["success"] is True
    response = service.add_to_path({"target": "Moon", "duration": 2.0, "position": [0.0, 0.0, 3.0]})
    assert response["segment_count"] == 2

    started = service.start_path()
    assert started == {"success": True, "message": "Path started", "total_duration": 3.0}
    assert handler.is_playing()


def test_start_empty_path(service):
    response = service.start_path()
    assert response == {"success": False, "error_code": "EMPTY_PATH", "error": "Cannot start an empty path"}


def test_stop_and_clear(service, handler):
    service.go_to({"target": "Earth", "duration": 2.0})
    handler.advance(0.5)

    stopped = service.stop_path()
    assert stopped["message"] == "Path stopped"
    assert stopped["elapsed_time"] == pytest.approx(0.5)
    assert service.stop_path()["message"] == "No path playing"

    assert service.clear_path() == {"success": True, "message": "Path cleared"}
    assert service.path_status()["segment_count"] == 0


def test_path_status(service):
    service.go_to({"target": "Moon", "duration": 4.0})
    status = service.path_status()
    assert status["success"] is True
    assert status["state"] == "playing"
    assert status["total_duration"] == 4.0
