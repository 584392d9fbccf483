from src.dispatcher import build_message
from src.providers import FirebaseMessagingProvider
from src.schemas import NotificationRequest


def test_delivery_hints():
    message = build_message(NotificationRequest(title="Update", body="Now"))

    assert message.android.priority == "high"
    assert message.android.sound == "default"
    assert message.android.channel_id == "games_channel"
    assert message.apns.sound == "default"
    assert message.apns.badge == 1


def test_click_action_wins_over_caller_key():
    request = NotificationRequest(
        title="Update", body="Now", data={"click_action": "OPEN_URL", "id": "7"}
    )

    message = build_message(request)

    assert message.data == {"click_action": "FLUTTER_NOTIFICATION_CLICK", "id": "7"}


def test_empty_topic_falls_back_to_default():
    request = NotificationRequest(title="Update", body="Now", topic="")

    assert build_message(request).topic == "all"
    assert build_message(request, default_topic="news").topic == "news"


def test_channel_id_is_configurable():
    request = NotificationRequest(title="Update", body="Now")

    assert build_message(request, android_channel_id="alerts").android.channel_id == "alerts"


def test_firebase_conversion():
    request = NotificationRequest(title="Update", body="Now", topic="vip", data={"promo": "x"})

    fb = FirebaseMessagingProvider.to_firebase(build_message(request))

    assert fb.topic == "vip"
    assert fb.notification.title == "Update"
    assert fb.notification.body == "Now"
    assert fb.data == {"promo": "x", "click_action": "FLUTTER_NOTIFICATION_CLICK"}
    assert fb.android.priority == "high"
    assert fb.android.notification.channel_id == "games_channel"
    assert fb.android.notification.default_sound is True
    assert fb.android.notification.default_vibrate_timings is True
    assert fb.apns.payload.aps.sound == "default"
    assert fb.apns.payload.aps.badge == 1
