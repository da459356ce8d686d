from abc import ABC, abstractmethod
from typing import Any


class NotifierPort(ABC):
    @abstractmethod
    async def send(self, url: str, payload: dict[str, Any]) -> None:
        """Deliver payload to url. Raises NotificationFailure on any delivery error."""
        raise NotImplementedError
