"""Basic import tests to verify package structure."""


def test_import_city_model():
    """Verify the world model imports."""
    from CitySim.city_model import CityModel
    assert CityModel is not None


def test_import_server_package():
    """Verify transport modules import."""
    from CitySim.server import protocol, websocket_handler
    assert protocol.ACTION_PLACE_ZONE == "place_zone"
    assert websocket_handler.make_app is not None
