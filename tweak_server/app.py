"""
Tweak Server - local JSON API for live numeric tweak sessions
"""

import math
import threading
from typing import Dict

from flask import Flask, request, jsonify

from tweak_core.tweak_request import TweakRequest
from tweak_core.tweak_session import TweakSession
from tweak_core.tool_config import ToolConfig
from tweak_core import logger

app = Flask(__name__)
app.config['MAX_CONTENT_LENGTH'] = 1 * 1024 * 1024  # 1MB max request size

# Live sessions by session id
sessions: Dict[str, TweakSession] = {}
sessions_lock = threading.Lock()


def _get_session(session_id: str):
    with sessions_lock:
        session = sessions.get(session_id)
    if session is not None:
        session.touch()
    return session


def _expire_idle_sessions(timeout: float):
    """Cancel sessions no client has used for timeout seconds; written values stay"""
    with sessions_lock:
        idle = [s for s in sessions.values() if s.is_idle(timeout)]
        for session in idle:
            sessions.pop(session.id, None)
    for session in idle:
        logger.info(f"Expiring idle tweak session {session.id}")
        try:
            session.cancel(dismissed=True)
        except RuntimeError as e:
            logger.debug(f"Idle session {session.id} already finished: {e}")


def _finish_session(session: TweakSession, finish):
    try:
        response = finish()
    except RuntimeError as e:
        return jsonify({'error': str(e)}), 409
    with sessions_lock:
        sessions.pop(session.id, None)
    return jsonify(response.to_dict())


@app.route('/api/sessions', methods=['POST'])
def create_session():
    """Start a tweak session from a discovery payload"""
    tool_config = ToolConfig()
    _expire_idle_sessions(tool_config.session_idle_seconds)

    data = request.get_json(silent=True)
    logger.debug(f"Received tweak request: {data}")
    try:
        tweak_request = TweakRequest.from_dict(data)
        session = TweakSession.from_request(tweak_request, tool_config)
    except ValueError as e:
        logger.warning(f"Rejected tweak request: {e}")
        return jsonify({'error': str(e)}), 400

    with sessions_lock:
        sessions[session.id] = session

    return jsonify({
        'id': session.id,
        'values': session.rewriter.current_values(),
        'project_root': str(session.rewriter.project_root) if session.rewriter.project_root else None
    })


@app.route('/api/sessions/<session_id>', methods=['GET'])
def get_session(session_id):
    """Current values, disabled parameters and tracked locations"""
    session = _get_session(session_id)
    if session is None:
        return jsonify({'status': 'not_found'}), 404
    return jsonify(session.snapshot())


@app.route('/api/sessions/<session_id>/params/<param_id>', methods=['POST'])
def update_param(session_id, param_id):
    """
    Move one slider.

    Body: {"value": number} schedules a write of that value,
          {"direction": 1 | -1} nudges by the parameter's step.
    """
    session = _get_session(session_id)
    if session is None:
        return jsonify({'status': 'not_found'}), 404

    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        data = {}
    try:
        if 'direction' in data:
            direction = data['direction']
            if direction not in (1, -1):
                return jsonify({'error': 'direction must be 1 or -1'}), 400
            value = session.nudge(param_id, direction)
            accepted = value is not None
        else:
            value = data.get('value')
            if isinstance(value, bool) or not isinstance(value, (int, float)) or not math.isfinite(value):
                return jsonify({'error': 'value must be a finite number'}), 400
            accepted = session.set_value(param_id, value)
    except KeyError as e:
        return jsonify({'error': str(e)}), 404
    except RuntimeError as e:
        return jsonify({'error': str(e)}), 409

    return jsonify({
        'accepted': accepted,
        'value': session.values.get(param_id),
        'disabled': param_id in session.disabled
    })


@app.route('/api/sessions/<session_id>/params/<param_id>/reset', methods=['POST'])
def reset_param(session_id, param_id):
    """Restore one parameter to its discovered value"""
    session = _get_session(session_id)
    if session is None:
        return jsonify({'status': 'not_found'}), 404
    try:
        result = session.reset_param(param_id)
    except KeyError as e:
        return jsonify({'error': str(e)}), 404
    except RuntimeError as e:
        return jsonify({'error': str(e)}), 409
    return jsonify(result.to_dict())


@app.route('/api/sessions/<session_id>/reset', methods=['POST'])
def reset_all(session_id):
    """Restore every parameter; outcomes are reported per parameter"""
    session = _get_session(session_id)
    if session is None:
        return jsonify({'status': 'not_found'}), 404
    try:
        results = session.revert_all()
    except RuntimeError as e:
        return jsonify({'error': str(e)}), 409
    return jsonify({pid: result.to_dict() for pid, result in results.items()})


@app.route('/api/sessions/<session_id>/save', methods=['POST'])
def save_to_file(session_id):
    """Keep the written values and end the session"""
    session = _get_session(session_id)
    if session is None:
        return jsonify({'status': 'not_found'}), 404
    return _finish_session(session, session.save_to_file)


@app.route('/api/sessions/<session_id>/agent', methods=['POST'])
def tell_agent(session_id):
    """Revert the files and hand the desired values back to the client"""
    session = _get_session(session_id)
    if session is None:
        return jsonify({'status': 'not_found'}), 404
    return _finish_session(session, session.tell_agent)


@app.route('/api/sessions/<session_id>', methods=['DELETE'])
def cancel_session(session_id):
    """Abandon the session without reverting written values"""
    session = _get_session(session_id)
    if session is None:
        return jsonify({'status': 'not_found'}), 404
    return _finish_session(session, session.cancel)
