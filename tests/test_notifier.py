"""Tests for the notification materializer."""

from unittest.mock import MagicMock, patch

from ntfy_relay.codec import decode
from ntfy_relay.notifier import NotificationCenter, NotificationMaterializer


class TestNotificationMaterializer:

    def test_payload_decodes_to_same_message(self, notification_center, make_subscription, full_message):
        materializer = NotificationMaterializer(notification_center, "https://ntfy.sh")
        materializer.materialize(make_subscription(), full_message)

        notice = notification_center.notices[0]
        assert notice.identifier == full_message.id
        assert notice.title == "Backup done"
        assert notice.body == full_message.message
        assert notice.base_url == "https://example.org"
        assert notice.payload["base_url"] == "https://example.org"
        assert decode(notice.payload) == full_message

    def test_empty_title_falls_back_to_topic(self, notification_center, make_subscription, make_message):
        materializer = NotificationMaterializer(notification_center, "https://ntfy.sh")
        notice = materializer.materialize(make_subscription(), make_message(title=""))
        assert notice.title == "example.org/alerts"

    def test_subscription_without_base_url_uses_default(self, notification_center, make_subscription, make_message):
        materializer = NotificationMaterializer(notification_center, "https://ntfy.sh")
        notice = materializer.materialize(make_subscription(base_url=None), make_message())
        assert notice.payload["base_url"] == "https://ntfy.sh"

    def test_scheduling_failure_is_absorbed(self, make_subscription, make_message, caplog):
        center = MagicMock(spec=NotificationCenter)
        center.add.side_effect = [RuntimeError("not authorized"), None]
        materializer = NotificationMaterializer(center, "https://ntfy.sh")

        assert materializer.materialize(make_subscription(), make_message("m1")) is None
        assert materializer.materialize(make_subscription(), make_message("m2")) is not None
        assert center.add.call_count == 2
        assert "Unable to create notification for message m1" in caplog.text

    def test_build_failure_is_absorbed(self, notification_center, make_subscription, make_message, caplog):
        materializer = NotificationMaterializer(notification_center, "https://ntfy.sh")
        real_build = materializer.build

        def _build(subscription, message):
            if message.id == "m1":
                raise ValueError("cannot encode")
            return real_build(subscription, message)

        with patch.object(materializer, "build", side_effect=_build):
            assert materializer.materialize(make_subscription(), make_message("m1")) is None
            assert materializer.materialize(make_subscription(), make_message("m2")) is not None
        assert [n.identifier for n in notification_center.notices] == ["m2"]
        assert "Unable to create notification for message m1" in caplog.text
