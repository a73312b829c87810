import json
import pytest

from tweak_server import app as server_module
from tweak_server.app import app

CSS = ".box {\n  width: 10; height: 100;\n}\n"


@pytest.fixture
def css_file(temp_dir):
    path = temp_dir / "style.css"
    path.write_text(CSS)
    return path


@pytest.fixture
def client():
    app.config['TESTING'] = True
    with app.test_client() as client:
        yield client
    for session in list(server_module.sessions.values()):
        session.scheduler.stop()
    server_module.sessions.clear()


@pytest.fixture
def session_id(client, temp_dir, css_file):
    response = client.post('/api/sessions', json={
        "body": "Adjust the box",
        "projectPath": str(temp_dir),
        "parameters": [
            {"label": "Width", "file": "style.css", "line": 2, "column": 10,
             "expectedText": "10", "min": 0, "max": 100},
            {"label": "Height", "file": "style.css", "line": 2, "column": 22,
             "expectedText": "100", "min": 0, "max": 500},
        ],
    })
    assert response.status_code == 200
    return response.get_json()['id']


class TestCreateSession:
    def test_returns_id_and_values(self, client, session_id, temp_dir):
        data = client.get(f'/api/sessions/{session_id}').get_json()
        assert data['values'] == {"width": 10.0, "height": 100.0}

    def test_invalid_request_is_rejected(self, client):
        response = client.post('/api/sessions', json={"body": "x", "parameters": []})
        assert response.status_code == 400
        assert 'error' in response.get_json()

    def test_non_json_body_is_rejected(self, client):
        response = client.post('/api/sessions', data="not json")
        assert response.status_code == 400

    def test_infinite_bound_is_rejected(self, client, temp_dir, css_file):
        # The JSON parser accepts the non-standard Infinity literal
        body = (
            '{"body": "b", "projectPath": ' + json.dumps(str(temp_dir)) + ', "parameters": ['
            '{"id": "w", "file": "style.css", "line": 2, "column": 10, '
            '"expectedText": "10", "min": 0, "max": Infinity}]}'
        )
        response = client.post('/api/sessions', data=body, content_type='application/json')
        assert response.status_code == 400
        assert "finite" in response.get_json()['error']
        assert server_module.sessions == {}


class TestUpdateParam:
    def test_value_is_accepted(self, client, session_id):
        response = client.post(f'/api/sessions/{session_id}/params/width', json={"value": 42})
        data = response.get_json()
        assert data['accepted'] is True
        assert data['value'] == 42.0

    def test_direction_nudges(self, client, session_id):
        response = client.post(f'/api/sessions/{session_id}/params/width', json={"direction": 1})
        assert response.get_json()['value'] == 11.0

    def test_bad_direction_rejected(self, client, session_id):
        response = client.post(f'/api/sessions/{session_id}/params/width', json={"direction": 2})
        assert response.status_code == 400

    def test_non_numeric_value_rejected(self, client, session_id):
        response = client.post(f'/api/sessions/{session_id}/params/width', json={"value": "wide"})
        assert response.status_code == 400

    def test_boolean_value_rejected(self, client, session_id):
        response = client.post(f'/api/sessions/{session_id}/params/width', json={"value": True})
        assert response.status_code == 400

    def test_unknown_parameter_is_not_found(self, client, session_id):
        response = client.post(f'/api/sessions/{session_id}/params/depth', json={"value": 1})
        assert response.status_code == 404

    def test_unknown_session_is_not_found(self, client):
        response = client.post('/api/sessions/nope/params/width', json={"value": 1})
        assert response.status_code == 404
        assert response.get_json() == {'status': 'not_found'}


class TestResetRoutes:
    def test_reset_param_reports_original_value(self, client, session_id):
        client.post(f'/api/sessions/{session_id}/params/width', json={"value": 42})
        data = client.post(f'/api/sessions/{session_id}/params/width/reset').get_json()
        assert data['status'] == 'success'
        assert data['value'] == 10.0

    def test_reset_all_reports_each_parameter(self, client, session_id):
        data = client.post(f'/api/sessions/{session_id}/reset').get_json()
        assert set(data) == {"width", "height"}
        assert all(r['status'] == 'success' for r in data.values())


class TestFinishRoutes:
    def test_save_writes_file_and_ends_session(self, client, session_id, css_file):
        client.post(f'/api/sessions/{session_id}/params/width', json={"value": 42})
        data = client.post(f'/api/sessions/{session_id}/save').get_json()
        assert data['action'] == 'file'
        assert data['dialogType'] == 'tweak'
        assert css_file.read_text() == ".box {\n  width: 42; height: 100;\n}\n"
        assert client.get(f'/api/sessions/{session_id}').status_code == 404

    def test_agent_reverts_file_and_returns_values(self, client, session_id, css_file):
        client.post(f'/api/sessions/{session_id}/params/width', json={"value": 42})
        data = client.post(f'/api/sessions/{session_id}/agent').get_json()
        assert data['action'] == 'agent'
        assert data['answers']['width'] == 42.0
        assert css_file.read_text() == CSS

    def test_delete_cancels(self, client, session_id):
        data = client.delete(f'/api/sessions/{session_id}').get_json()
        assert data['cancelled'] is True
        assert data['answers'] == {}


class TestIdleExpiry:
    def _create(self, client, temp_dir):
        response = client.post('/api/sessions', json={
            "body": "Another pass",
            "projectPath": str(temp_dir),
            "parameters": [{"id": "w", "file": "style.css", "line": 2, "column": 10,
                            "expectedText": "10", "min": 0, "max": 100}],
        })
        return response.get_json()['id']

    def test_idle_session_is_cancelled_on_next_create(self, client, session_id, temp_dir):
        idle = server_module.sessions[session_id]
        idle.last_activity -= 7200

        self._create(client, temp_dir)

        assert client.get(f'/api/sessions/{session_id}').status_code == 404
        assert idle.finished
        assert idle.response.dismissed is True
        assert idle.response.answers == {}

    def test_recently_used_session_survives(self, client, session_id, temp_dir):
        server_module.sessions[session_id].last_activity -= 60
        self._create(client, temp_dir)
        assert client.get(f'/api/sessions/{session_id}').status_code == 200

    def test_requests_keep_session_alive(self, client, session_id):
        session = server_module.sessions[session_id]
        session.last_activity -= 7200
        client.get(f'/api/sessions/{session_id}')
        assert not session.is_idle(3600)
