from django.apps import AppConfig


class MessagingConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "modules.messaging"
    label = "messaging"

    def ready(self) -> None:
        from modules.messaging.events import MessageSent
        from modules.messaging.handlers import message_sent_handler
        from shared.infrastructure.bus import event_bus

        event_bus.subscribe(MessageSent, message_sent_handler)
