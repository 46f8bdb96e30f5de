# routes/auth.py
# Login by personal access code

from flask import Blueprint, request, session, jsonify
from extensions import db
from models.user import User

from errors import ValidationError, NotFound

auth_bp = Blueprint('auth', __name__)


def request_data():
    """JSON body or form fields, whichever the client sent."""
    return request.get_json(silent=True) or request.form.to_dict()


@auth_bp.route('/login', methods=['POST'])
def login():
    user_code = (request_data().get('code') or '').strip()
    if not user_code:
        raise ValidationError('Please enter your code.')

    user = User.query.filter_by(code=user_code).first()
    if not user:
        raise NotFound('Invalid access code. Please try again.')

    # Start a clean session for the new user
    session.clear()
    session['user_id'] = user.id
    session['user_role'] = user.role
    return jsonify({'message': 'Logged in.', 'user': user.to_dict()})


@auth_bp.route('/logout', methods=['POST'])
def logout():
    session.clear()
    return jsonify({'message': 'Logged out.'})


@auth_bp.route('/me')
def me():
    if 'user_id' not in session:
        return jsonify({'user': None})
    user = db.session.get(User, session['user_id'])
    if not user:
        session.clear()
        return jsonify({'user': None})
    return jsonify({'user': user.to_dict()})
