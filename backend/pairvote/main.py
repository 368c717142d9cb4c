from flask import Blueprint, jsonify

main = Blueprint('main', __name__)

@main.route('/health', methods=['GET'])
def health():
    # Liveness only; does not look at pair state
    return jsonify({'ok': True})
