from creeper.commands import CommandDispatcher
from creeper.config import ConfigStore


def _dispatcher(**kwargs):
    return CommandDispatcher(ConfigStore(), **kwargs)


def test_get_config_default():
    with _dispatcher() as dispatcher:
        response = dispatcher.invoke("get_config")
    assert response.ok
    assert response.value == {"chunk_duration": 60}


def test_set_then_get_config():
    with _dispatcher() as dispatcher:
        response = dispatcher.invoke("set_config", {"key": "chunk_duration", "value": "45"})
        assert response.ok and response.value is None
        assert dispatcher.invoke("get_config").value == {"chunk_duration": 45}


def test_request_mic_permission_placeholder_and_seam():
    with _dispatcher() as dispatcher:
        assert dispatcher.invoke("request_mic_permission").value is True
    with _dispatcher(mic_permission=lambda: False) as dispatcher:
        assert dispatcher.invoke("request_mic_permission").value is False


def test_validate_audio_chunk_success_and_errors():
    cases = [
        ({"data": "abc", "timestamp": 0, "duration": 1, "format": "wav"}, None),
        ({"data": "", "duration": 1, "format": "wav"}, "Audio data is empty"),
        ({"data": "abc", "duration": 0, "format": "wav"}, "Duration must be greater than 0"),
        ({"data": "abc", "duration": 1, "format": ""}, "Format must be specified"),
    ]
    with _dispatcher() as dispatcher:
        for chunk, error in cases:
            response = dispatcher.invoke("validate_audio_chunk", {"chunk": chunk})
            if error is None:
                assert response.ok and response.value is True
            else:
                assert not response.ok
                assert response.error == error


def test_malformed_chunk_becomes_error_string():
    with _dispatcher() as dispatcher:
        response = dispatcher.invoke("validate_audio_chunk", {"chunk": {"data": "abc"}})
    assert not response.ok
    assert "duration" in response.error


def test_unknown_command_and_bad_arguments():
    with _dispatcher() as dispatcher:
        unknown = dispatcher.invoke("delete_everything")
        missing = dispatcher.invoke("set_config", {"key": "chunk_duration"})
        extra = dispatcher.invoke("get_config", {"verbose": True})
    assert unknown.to_dict() == {"ok": False, "error": "Unknown command: delete_everything"}
    assert not missing.ok and missing.error.startswith("Invalid arguments for set_config")
    assert not extra.ok


def test_submit_runs_on_pool_and_keeps_every_write():
    with _dispatcher(max_workers=4) as dispatcher:
        futures = [
            dispatcher.submit("set_config", {"key": f"k{i}", "value": str(i)})
            for i in range(100)
        ]
        assert all(f.result().ok for f in futures)
        assert len(dispatcher.store) == 100
        last = dispatcher.submit("set_config", {"key": "chunk_duration", "value": "20"})
        last.result()
        assert dispatcher.submit("get_config").result().value == {"chunk_duration": 20}


def test_set_config_rejects_non_string_arguments():
    with _dispatcher() as dispatcher:
        int_value = dispatcher.invoke("set_config", {"key": "chunk_duration", "value": 30})
        list_key = dispatcher.invoke("set_config", {"key": ["chunk_duration"], "value": "30"})
        assert dispatcher.store.snapshot() == {}
        assert dispatcher.invoke("get_config").value == {"chunk_duration": 60}

    assert not int_value.ok
    assert int_value.error == "Invalid arguments for set_config: 'value' must be a string"
    assert not list_key.ok
    assert list_key.error == "Invalid arguments for set_config: 'key' must be a string"
