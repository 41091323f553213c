"""Base notification transport interface for PriceWatch."""

from abc import ABC, abstractmethod

from pricewatch.models import DeliveryResult


class NotificationTransport(ABC):
    """Abstract base class for message delivery channels.

    Message text uses lightweight markup (``*bold*``, ``_italic_``,
    backtick code); rendering it is the transport's job.
    """

    @abstractmethod
    def send(self, user_id: int, text: str) -> DeliveryResult:
        """Deliver a message to a user.

        Args:
            user_id: Recipient.
            text: Message text.

        Returns:
            DeliveryResult describing success or the failure reason.
        """
        pass
