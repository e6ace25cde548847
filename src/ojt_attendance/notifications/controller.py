from __future__ import annotations

from flask import Flask, request

from ..common.http import json_body, ok, query_int
from ..common.validators import optional_bool, require_positive_id
from ..container import Container

PREFIX = "/api/ojt_notifications"


def register(app: Flask, container: Container) -> None:
    notifications = container.notification_service

    @app.get(PREFIX, endpoint="ojt_notifications_list")
    def list_notifications():
        user_id = require_positive_id(query_int("user_id"), "User ID")
        items = notifications.list_for_user(
            user_id,
            unread_only=optional_bool(request.args.get("unread"), "unread"),
            limit=query_int("limit"),
        )
        return ok(list(items))

    @app.get(f"{PREFIX}/unread-count", endpoint="ojt_notifications_unread_count")
    def unread_count():
        user_id = require_positive_id(query_int("user_id"), "User ID")
        return ok({"total": notifications.unread_count(user_id)})

    @app.put(f"{PREFIX}/mark-read", endpoint="ojt_notifications_mark_read")
    def mark_read():
        notifications.mark_read(json_body().get("id"))
        return ok(message="Notification marked as read")

    @app.put(f"{PREFIX}/mark-all-read", endpoint="ojt_notifications_mark_all_read")
    def mark_all_read():
        updated = notifications.mark_all_read(json_body().get("user_id"))
        return ok({"updated": updated}, message="All notifications marked as read")
