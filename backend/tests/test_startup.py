import pytest

import main
from studydeck.services import store


class TestStartup:
    def test_configured_port_is_used(self):
        assert main.resolve_port(8123) == 8123

    def test_zero_port_picks_a_free_one(self):
        assert 0 < main.resolve_port(0) < 65536

    def test_service_requires_initialised_store(self, monkeypatch):
        monkeypatch.setattr(store, "_service", None)
        with pytest.raises(RuntimeError, match="not initialized"):
            store.get_service()
