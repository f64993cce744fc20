from flask import Blueprint, jsonify, request, current_app
from pydantic import ValidationError

from scoreboard.errors import ScoringError
from scoreboard.schemas import MatchCreate, MatchPatch, ScoreInput, PenaltyInput
from scoreboard.services.matches import state_machine


matches = Blueprint('matches', __name__)


@matches.errorhandler(ScoringError)
def handle_scoring_error(exc):
    return jsonify(exc.to_dict()), exc.status_code


@matches.errorhandler(ValidationError)
def handle_validation_error(exc):
    current_app.logger.warning(f"[invalid-request] path={request.path} errors={exc.error_count()}")
    details = [
        {'field': '.'.join(str(p) for p in err['loc']), 'message': err['msg']}
        for err in exc.errors()
    ]
    return jsonify({'error': 'invalid request', 'code': 'invalid_request', 'details': details}), 400


def _body():
    return request.get_json(silent=True) or {}


@matches.route('', methods=['POST'])
def create_match():
    payload = MatchCreate.model_validate(_body())
    match = state_machine.create_match(payload)
    return jsonify(match.to_dict()), 201


@matches.route('', methods=['GET'])
def list_matches():
    return jsonify([m.to_dict() for m in state_machine.list_matches()])


@matches.route('/<int:match_id>', methods=['GET'])
def get_match_detail(match_id):
    """Full read view; clients poll this to follow a live match."""
    return jsonify(state_machine.get_match_detail(match_id))


@matches.route('/<int:match_id>', methods=['PATCH'])
def update_match(match_id):
    patch = MatchPatch.model_validate(_body())
    match = state_machine.update_match(match_id, patch)
    return jsonify(match.to_dict())


@matches.route('/<int:match_id>/start', methods=['POST'])
def start_match(match_id):
    return jsonify(state_machine.start_match(match_id).to_dict())


@matches.route('/<int:match_id>/pause', methods=['POST'])
def pause_match(match_id):
    return jsonify(state_machine.pause_match(match_id).to_dict())


@matches.route('/<int:match_id>/resume', methods=['POST'])
def resume_match(match_id):
    return jsonify(state_machine.resume_match(match_id).to_dict())


@matches.route('/<int:match_id>/scores', methods=['POST'])
def record_score(match_id):
    data = ScoreInput.model_validate(_body())
    return jsonify(state_machine.record_score(match_id, data.competitor_color, data.score_type))


@matches.route('/<int:match_id>/penalties', methods=['POST'])
def record_penalty(match_id):
    data = PenaltyInput.model_validate(_body())
    return jsonify(state_machine.record_penalty(match_id, data.competitor_color, data.penalty_type))


@matches.route('/<int:match_id>/rounds/end', methods=['POST'])
def end_round(match_id):
    return jsonify(state_machine.end_round(match_id))


@matches.route('/<int:match_id>/rounds/start', methods=['POST'])
def start_round(match_id):
    """Starts the timer of a round created by end_round."""
    return jsonify(state_machine.start_round(match_id))
