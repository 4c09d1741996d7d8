"""Admin moderation of members (PIN required on every route)."""

from flask import Blueprint, jsonify, request

from snootclub.errors import InvalidInput
from snootclub.models import MEMBER_STATUSES
from snootclub.routes.auth import admin_required
from snootclub.services import directory, store

members_bp = Blueprint('members', __name__)


@members_bp.route('/members')
@admin_required
def list_members():
    """List all members, or only those with ?status=pending|approved|rejected."""
    status = request.args.get('status', '').strip() or None
    if status and status not in MEMBER_STATUSES:
        raise InvalidInput(f"status must be one of {', '.join(MEMBER_STATUSES)}")
    return jsonify([m.to_dict() for m in directory.list_by_status(status)])


@members_bp.route('/members/<member_id>/approve', methods=['POST'])
@admin_required
def approve(member_id):
    directory.set_status(member_id, 'approved')
    return jsonify({'ok': True})


@members_bp.route('/members/<member_id>/reject', methods=['POST'])
@admin_required
def reject(member_id):
    directory.set_status(member_id, 'rejected')
    return jsonify({'ok': True})


@members_bp.route('/members/<member_id>/make-admin', methods=['POST'])
@admin_required
def make_admin(member_id):
    directory.set_admin_flag(member_id, True)
    return jsonify({'ok': True})


@members_bp.route('/members/<member_id>/remove-admin', methods=['POST'])
@admin_required
def remove_admin(member_id):
    directory.set_admin_flag(member_id, False)
    return jsonify({'ok': True})


@members_bp.route('/members/<member_id>', methods=['DELETE'])
@admin_required
def delete_member(member_id):
    directory.remove(member_id)
    return jsonify({'ok': True})


@members_bp.route('/deliveries')
@admin_required
def delivery_logs():
    """Recent SMS/push delivery outcomes, newest first."""
    limit = request.args.get('limit', 100, type=int)
    limit = max(1, min(limit, 500))
    return jsonify([log.to_dict() for log in store.delivery_logs(limit=limit)])
