"""
Group chat routes.

Open to the admin (PIN) or any approved member (session token).
"""

from flask import Blueprint, jsonify, g, request

from snootclub.routes.auth import member_or_admin_required
from snootclub.schemas import ChatSendRequest, parse_body
from snootclub.services import chat_service

chat_bp = Blueprint('chat', __name__, url_prefix='/chat')


@chat_bp.route('/rooms')
@member_or_admin_required
def rooms():
    return jsonify(chat_service.rooms())


@chat_bp.route('/messages')
@member_or_admin_required
def messages():
    """
    Query params:
        roomId: Room to read (default 'all')
        cursor: ISO-8601 timestamp; only newer messages are returned
    """
    room_id = request.args.get('roomId', 'all')
    cursor = request.args.get('cursor') or None
    return jsonify(chat_service.list_messages(room_id=room_id, cursor=cursor))


@chat_bp.route('/send', methods=['POST'])
@member_or_admin_required
def send():
    body = parse_body(ChatSendRequest)
    message = chat_service.send(body.text, member=g.member, room_id=body.room_id)
    return jsonify({'ok': True, 'id': message.id})
